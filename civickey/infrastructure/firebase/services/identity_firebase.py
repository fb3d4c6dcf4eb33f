"""Firebase Authentication over the Identity Toolkit REST API (implements IIdentityProvider).

Email/password sign-in and reset emails use the project's web API key.
Account creation and session revocation are admin calls authorized with
the service account. ID tokens are verified against Google's public
certificates with google-auth.
"""

from __future__ import annotations

import asyncio
import logging
import secrets
import time
from typing import Any

import httpx
from google.auth.transport import requests as google_requests
from google.oauth2 import id_token as google_id_token
from google.oauth2 import service_account

from civickey.application.dtos.identity import IdentityUser, TokenClaims
from civickey.application.services import identity_messages as msg
from civickey.domain.exceptions import AuthenticationException, IdentityException

logger = logging.getLogger(__name__)

_IDENTITY_SCOPE = "https://www.googleapis.com/auth/identitytoolkit"
_BASE = "https://identitytoolkit.googleapis.com/v1"

# Identity Toolkit error messages -> normalized reasons.
_ERROR_REASONS = {
    "INVALID_EMAIL": msg.REASON_INVALID_EMAIL,
    "MISSING_EMAIL": msg.REASON_INVALID_EMAIL,
    "USER_DISABLED": msg.REASON_USER_DISABLED,
    "EMAIL_NOT_FOUND": msg.REASON_USER_NOT_FOUND,
    "USER_NOT_FOUND": msg.REASON_USER_NOT_FOUND,
    "INVALID_PASSWORD": msg.REASON_WRONG_PASSWORD,
    "INVALID_LOGIN_CREDENTIALS": msg.REASON_INVALID_CREDENTIAL,
    "TOO_MANY_ATTEMPTS_TRY_LATER": msg.REASON_TOO_MANY_REQUESTS,
}


def error_reason(payload: Any) -> str:
    """Normalized reason from an Identity Toolkit error body.

    Messages look like 'TOO_MANY_ATTEMPTS_TRY_LATER : Access disabled...'.
    """
    try:
        message = payload["error"]["message"]
    except (KeyError, TypeError):
        return msg.REASON_UNKNOWN
    code = str(message).split(":", 1)[0].strip()
    return _ERROR_REASONS.get(code, msg.REASON_UNKNOWN)


def _refresh_token(credentials) -> str:
    if not credentials.valid:
        credentials.refresh(google_requests.Request())
    return credentials.token


class FirebaseIdentityProvider:
    def __init__(
        self,
        project_id: str,
        web_api_key: str | None,
        service_account_info: dict | None = None,
        *,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self.project_id = project_id
        self._api_key = web_api_key
        self._credentials = (
            service_account.Credentials.from_service_account_info(
                service_account_info, scopes=[_IDENTITY_SCOPE]
            )
            if service_account_info
            else None
        )
        self._http = http_client if http_client is not None else httpx.AsyncClient(timeout=30.0)
        self._owns_http = http_client is None
        self._request = google_requests.Request()

    async def aclose(self) -> None:
        if self._owns_http:
            await self._http.aclose()

    async def _public_call(self, endpoint: str, body: dict[str, Any]) -> httpx.Response:
        if not self._api_key:
            raise IdentityException(msg.SIGN_IN_FAILED, msg.REASON_UNKNOWN)
        return await self._http.post(
            f"{_BASE}/accounts:{endpoint}", params={"key": self._api_key}, json=body
        )

    async def _admin_call(self, endpoint: str, body: dict[str, Any]) -> dict[str, Any]:
        if self._credentials is None:
            raise RuntimeError("Service account credentials are required for admin calls")
        token = await asyncio.to_thread(_refresh_token, self._credentials)
        resp = await self._http.post(
            f"{_BASE}/projects/{self.project_id}/accounts{endpoint}",
            headers={"Authorization": f"Bearer {token}"},
            json=body,
        )
        if resp.status_code != 200:
            logger.error(
                "Identity admin call %s failed: status=%d reason=%s",
                endpoint or "create",
                resp.status_code,
                error_reason(resp.json() if resp.content else None),
            )
            resp.raise_for_status()
        return resp.json()

    async def sign_in(self, email: str, password: str) -> IdentityUser:
        try:
            resp = await self._public_call(
                "signInWithPassword",
                {"email": email, "password": password, "returnSecureToken": True},
            )
        except httpx.HTTPError as e:
            logger.error("Sign-in request failed: %s", e)
            raise IdentityException(msg.SIGN_IN_FAILED, msg.REASON_UNKNOWN) from e
        if resp.status_code != 200:
            reason = error_reason(resp.json() if resp.content else None)
            raise IdentityException(msg.sign_in_message(reason), reason)
        data = resp.json()
        return IdentityUser(
            uid=data["localId"],
            email=data.get("email") or email,
            id_token=data["idToken"],
            refresh_token=data.get("refreshToken"),
        )

    async def verify_token(self, id_token: str) -> TokenClaims:
        try:
            claims = await asyncio.to_thread(
                google_id_token.verify_firebase_token,
                id_token,
                self._request,
                audience=self.project_id,
            )
        except ValueError as e:
            raise AuthenticationException("Invalid or expired token") from e
        if not claims or not claims.get("sub"):
            raise AuthenticationException("Invalid or expired token")
        return TokenClaims(
            uid=claims["sub"],
            auth_time=int(claims.get("auth_time") or claims.get("iat") or 0),
            email=claims.get("email"),
        )

    async def sign_out(self, uid: str) -> None:
        """Revoke refresh tokens issued before now."""
        await self._admin_call(":update", {"localId": uid, "validSince": str(int(time.time()))})

    async def send_password_reset(self, email: str) -> None:
        try:
            resp = await self._public_call(
                "sendOobCode", {"requestType": "PASSWORD_RESET", "email": email}
            )
        except httpx.HTTPError as e:
            logger.error("Password reset request failed: %s", e)
            raise IdentityException(msg.PASSWORD_RESET_FAILED, msg.REASON_UNKNOWN) from e
        if resp.status_code != 200:
            reason = error_reason(resp.json() if resp.content else None)
            raise IdentityException(msg.password_reset_message(reason), reason)

    async def create_account(self, email: str, display_name: str = "") -> str:
        """Create an account with a random password; the user sets theirs via reset email."""
        body: dict[str, Any] = {"email": email, "password": secrets.token_urlsafe(24)}
        if display_name:
            body["displayName"] = display_name
        data = await self._admin_call("", body)
        return data["localId"]
