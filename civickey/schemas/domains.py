"""Custom-domain registration API schemas."""

from typing import Literal

from pydantic import BaseModel, Field, field_validator


class DomainRequest(BaseModel):
    """Request body for POST /domains. Domain is trimmed and lower-cased."""

    domain: str = Field(..., min_length=1, max_length=253)
    action: Literal["add", "remove", "verify"]

    @field_validator("domain")
    @classmethod
    def normalize_domain(cls, v: str) -> str:
        v = v.strip().lower()
        if not v:
            raise ValueError("domain must not be empty")
        return v


class DnsRecord(BaseModel):
    type: str
    name: str
    value: str


class DomainVerification(BaseModel):
    """Result of the verify action."""

    domain: str
    verified: bool
    records: list[DnsRecord] = Field(default_factory=list)
