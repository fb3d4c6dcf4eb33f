"""Tests for domain exceptions (error_code, message, details)."""

from civickey.domain.exceptions import (
    AuthenticationException,
    AuthorizationException,
    CivicKeyException,
    DomainRegistrationException,
    IdentityException,
    ResourceAlreadyExistsException,
    ResourceNotFoundException,
    SessionExpiredException,
    StoreNotConfiguredException,
    TenantNotFoundException,
    ValidationException,
)


def test_civickey_exception_default_error_code() -> None:
    """Base CivicKeyException uses class name as error_code when not provided."""
    exc = CivicKeyException("Something failed")
    assert exc.message == "Something failed"
    assert exc.error_code == "CivicKeyException"
    assert exc.details == {}


def test_civickey_exception_to_dict() -> None:
    exc = CivicKeyException("Oops", error_code="CUSTOM", details={"key": "value"})
    assert exc.to_dict() == {"error": "CUSTOM", "message": "Oops", "details": {"key": "value"}}


def test_validation_exception() -> None:
    """ValidationException sets VALIDATION_ERROR and optional field in details."""
    exc = ValidationException("Invalid format", field="slug")
    assert exc.error_code == "VALIDATION_ERROR"
    assert exc.details == {"field": "slug"}
    assert ValidationException("Invalid").details == {}


def test_authentication_exception() -> None:
    exc = AuthenticationException()
    assert exc.message == "Authentication failed"
    assert exc.error_code == "AUTHENTICATION_ERROR"


def test_session_expired_exception() -> None:
    assert SessionExpiredException().error_code == "SESSION_EXPIRED"


def test_authorization_exception_names_feature_and_action() -> None:
    """With feature and action the message names both."""
    exc = AuthorizationException(feature="zones", action="delete")
    assert exc.message == "Permission denied: delete on zones"
    assert exc.error_code == "PERMISSION_DENIED"
    assert exc.details == {"feature": "zones", "action": "delete"}


def test_authorization_exception_default_message() -> None:
    exc = AuthorizationException()
    assert exc.message == "Permission denied"
    assert exc.details == {}


def test_identity_exception_carries_reason() -> None:
    exc = IdentityException("Invalid email or password.", "wrong-password")
    assert exc.error_code == "IDENTITY_ERROR"
    assert exc.details == {"reason": "wrong-password"}


def test_tenant_not_found() -> None:
    exc = TenantNotFoundException("saint-lazare")
    assert exc.error_code == "TENANT_NOT_FOUND"
    assert exc.details == {"municipality_id": "saint-lazare"}
    assert "saint-lazare" in exc.message


def test_resource_exceptions() -> None:
    missing = ResourceNotFoundException("Page", "about")
    assert missing.error_code == "RESOURCE_NOT_FOUND"
    assert missing.details == {"resource_type": "Page", "resource_id": "about"}
    taken = ResourceAlreadyExistsException("Municipality", "hudson")
    assert taken.error_code == "ALREADY_EXISTS"
    assert taken.message == "Municipality 'hudson' already exists"


def test_store_not_configured() -> None:
    assert StoreNotConfiguredException().error_code == "STORE_NOT_CONFIGURED"


def test_domain_registration_keeps_provider_status() -> None:
    exc = DomainRegistrationException("www.x.ca", "Domain taken", status_code=409)
    assert exc.error_code == "DOMAIN_REGISTRATION_ERROR"
    assert exc.details == {"domain": "www.x.ca", "status_code": 409}
