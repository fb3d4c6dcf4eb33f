"""Custom-domain registration API.

POST /domains {domain, action}: add or remove a domain on the hosting
project, or check its CNAME record over DNS-over-HTTPS. Authorized by a
shared secret (Authorization: Bearer <DOMAINS_API_SECRET>); without a
configured secret every request is rejected.
"""

import logging
import secrets
from typing import Any

from fastapi import APIRouter, HTTPException, Request

from civickey.api.v1.dependencies import ContextDep
from civickey.core.config import get_settings
from civickey.core.limiter import limit_domains
from civickey.domain.exceptions import DomainRegistrationException
from civickey.schemas.domains import DomainRequest, DomainVerification

logger = logging.getLogger(__name__)

router = APIRouter()


def _authorized(request: Request) -> bool:
    secret = get_settings().domains_api_secret
    if secret is None or not secret.get_secret_value():
        return False
    header = request.headers.get("Authorization") or ""
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token:
        return False
    return secrets.compare_digest(token.strip(), secret.get_secret_value())


@router.post("")
@limit_domains
async def manage_domain(request: Request, body: DomainRequest, ctx: ContextDep) -> dict[str, Any]:
    """Add, remove or verify a custom domain.

    Provider errors are returned with the provider's status code.
    """
    if not _authorized(request):
        raise HTTPException(status_code=401, detail="Unauthorized")
    registrar = ctx.registrar
    if registrar is None:
        raise DomainRegistrationException(
            body.domain, "Domain registration is not configured", status_code=503
        )
    if body.action == "add":
        result = await registrar.add_domain(body.domain)
        logger.info("Custom domain added: %s", body.domain)
        return {"success": True, "domain": body.domain, "result": result}
    if body.action == "remove":
        result = await registrar.remove_domain(body.domain)
        logger.info("Custom domain removed: %s", body.domain)
        return {"success": True, "domain": body.domain, "result": result}
    verification = DomainVerification.model_validate(await registrar.verify_domain(body.domain))
    return verification.model_dump()
