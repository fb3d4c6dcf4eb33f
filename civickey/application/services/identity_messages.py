"""User-facing identity error messages (closed set) and provider-code mapping."""

INVALID_EMAIL = "Invalid email address."
ACCOUNT_DISABLED = "This account has been disabled."
INVALID_CREDENTIALS = "Invalid email or password."
TOO_MANY_ATTEMPTS = "Too many failed attempts. Please try again later."
SIGN_IN_FAILED = "Failed to sign in. Please try again."

NO_ACCOUNT_FOR_EMAIL = "No account found with this email."
PASSWORD_RESET_FAILED = "Failed to send password reset email."

ACCOUNT_DEACTIVATED = "Your account has been deactivated."
NOT_AUTHORIZED = "You are not authorized to access the admin console."
ADMIN_DATA_LOAD_FAILED = "Error loading admin data. Please try again."

# Normalized reason codes (independent of the identity provider's wire codes).
REASON_INVALID_EMAIL = "invalid-email"
REASON_USER_DISABLED = "user-disabled"
REASON_USER_NOT_FOUND = "user-not-found"
REASON_WRONG_PASSWORD = "wrong-password"
REASON_INVALID_CREDENTIAL = "invalid-credential"
REASON_TOO_MANY_REQUESTS = "too-many-requests"
REASON_UNKNOWN = "unknown"
REASON_DEACTIVATED = "deactivated"
REASON_NOT_ADMIN = "not-admin"

_SIGN_IN_MESSAGES = {
    REASON_INVALID_EMAIL: INVALID_EMAIL,
    REASON_USER_DISABLED: ACCOUNT_DISABLED,
    REASON_USER_NOT_FOUND: INVALID_CREDENTIALS,
    REASON_WRONG_PASSWORD: INVALID_CREDENTIALS,
    REASON_INVALID_CREDENTIAL: INVALID_CREDENTIALS,
    REASON_TOO_MANY_REQUESTS: TOO_MANY_ATTEMPTS,
}

_RESET_MESSAGES = {
    REASON_INVALID_EMAIL: INVALID_EMAIL,
    REASON_USER_NOT_FOUND: NO_ACCOUNT_FOR_EMAIL,
}


def sign_in_message(reason: str) -> str:
    return _SIGN_IN_MESSAGES.get(reason, SIGN_IN_FAILED)


def password_reset_message(reason: str) -> str:
    return _RESET_MESSAGES.get(reason, PASSWORD_RESET_FAILED)
