"""Pydantic request/response schemas for the API."""

from civickey.schemas.admin import AdminCreateRequest, AdminUpdateRequest
from civickey.schemas.auth import SignInRequest, SignInResponse
from civickey.schemas.content import PageCreateRequest, ZoneCreateRequest
from civickey.schemas.domains import DomainRequest, DomainVerification
from civickey.schemas.health import HealthResponse
from civickey.schemas.municipality import MunicipalityCreateRequest
