"""Domain context resolution endpoint."""

from __future__ import annotations

import structlog
from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from dashcontext.config.settings import get_settings
from dashcontext.exceptions import ContextInputError
from dashcontext.models.api import DomainContextBody, DomainContextResponse, ErrorResponse
from dashcontext.models.domain import DomainContextRequest
from dashcontext.resolver.headers import extract_forwarded_host
from dashcontext.resolver.resolver import DomainContextResolver
from dashcontext.web.dependencies import get_resolver

logger = structlog.get_logger(__name__)

router = APIRouter(tags=["domain-context"])


@router.post(
    "/api/domain-context",
    response_model=DomainContextResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def resolve_domain_context(
    request: Request,
    body: DomainContextBody | None = None,
    resolver: DomainContextResolver = Depends(get_resolver),
) -> DomainContextResponse | JSONResponse:
    settings = get_settings()
    body = body or DomainContextBody()
    forwarded_host = extract_forwarded_host(
        request.headers, (settings.original_host_header, settings.forwarded_host_header)
    )
    try:
        context = await resolver.resolve(
            DomainContextRequest(domain=body.domain, path=body.path, forwarded_host=forwarded_host)
        )
    except ContextInputError as e:
        logger.info("domain_context_rejected", error=str(e))
        return JSONResponse(status_code=400, content={"error": str(e)})
    except Exception:
        logger.exception("domain_context_failed", domain=body.domain, path=body.path)
        return JSONResponse(status_code=500, content={"error": "Failed to resolve domain context"})
    return DomainContextResponse.from_context(context)
