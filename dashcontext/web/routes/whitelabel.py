"""Whitelabel custom domain verification endpoint."""

from __future__ import annotations

import secrets

import structlog
from fastapi import APIRouter, Depends, Header
from fastapi.responses import JSONResponse

from dashcontext.config.settings import get_settings
from dashcontext.exceptions import VerificationError
from dashcontext.models.api import VerifyDomainBody, VerifyDomainResponse
from dashcontext.verification.dns import WhitelabelVerifier
from dashcontext.web.dependencies import get_verifier

logger = structlog.get_logger(__name__)

router = APIRouter(tags=["whitelabel"])

VERIFY_PATH = "/api/whitelabel/verify"


def _failure(status_code: int, error: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"verified": False, "error": error})


@router.post(VERIFY_PATH, response_model=VerifyDomainResponse)
async def verify_whitelabel_domain(
    body: VerifyDomainBody | None = None,
    x_service_token: str | None = Header(default=None),
    verifier: WhitelabelVerifier = Depends(get_verifier),
) -> VerifyDomainResponse | JSONResponse:
    expected = get_settings().service_token
    if expected and not secrets.compare_digest(x_service_token or "", expected):
        logger.warning("whitelabel_verify_unauthorized")
        return _failure(401, "Invalid service token")

    body = body or VerifyDomainBody()
    if not body.agency_id or not body.domain:
        return _failure(400, "Agency ID and domain are required")

    try:
        result = await verifier.verify(body.agency_id, body.domain, subdomain=body.subdomain)
    except VerificationError as e:
        return _failure(404, str(e))
    except Exception:
        logger.exception("whitelabel_verify_failed", agency_id=body.agency_id)
        return _failure(500, "Failed to verify domain")
    return VerifyDomainResponse(verified=result.verified, message=result.message)
