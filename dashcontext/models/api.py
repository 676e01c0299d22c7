"""API request/response schemas for FastAPI endpoints."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from dashcontext.models.domain import DomainContext, WhitelabelBranding
from dashcontext.types import ContextType


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class DomainContextBody(CamelModel):
    # Both optional so a missing field produces the {"error": ...} shape, not a 422
    domain: str | None = None
    path: str | None = None


class WhitelabelConfigResponse(CamelModel):
    agency_id: str
    agency_name: str
    logo_url: str | None
    primary_color: str | None
    secondary_color: str | None

    @classmethod
    def from_branding(cls, branding: WhitelabelBranding) -> WhitelabelConfigResponse:
        return cls(
            agency_id=branding.agency_id,
            agency_name=branding.agency_name,
            logo_url=branding.logo_url,
            primary_color=branding.primary_color,
            secondary_color=branding.secondary_color,
        )


class DomainContextResponse(CamelModel):
    context_type: ContextType
    agency_slug: str | None
    client_slug: str | None
    whitelabel_config: WhitelabelConfigResponse | None

    @classmethod
    def from_context(cls, context: DomainContext) -> DomainContextResponse:
        branding = context.whitelabel_config
        return cls(
            context_type=context.context_type,
            agency_slug=context.agency_slug,
            client_slug=context.client_slug,
            whitelabel_config=(
                WhitelabelConfigResponse.from_branding(branding) if branding else None
            ),
        )


class VerifyDomainBody(CamelModel):
    agency_id: str | None = None
    domain: str | None = None
    subdomain: str = "dashboard"


class VerifyDomainResponse(CamelModel):
    verified: bool
    message: str


class ErrorResponse(BaseModel):
    error: str
