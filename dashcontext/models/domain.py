"""Value objects exchanged between the resolver and its collaborators."""

from __future__ import annotations

from dataclasses import dataclass

from dashcontext.types import ContextType


@dataclass(frozen=True, slots=True)
class NotFound:
    """Directory lookup outcome when nothing usable matched.

    ``reason`` distinguishes a genuine miss from a backend fault that was
    downgraded to a miss.
    """

    reason: str = "not_found"


@dataclass(frozen=True, slots=True)
class WhitelabelAgency:
    """A verified agency-to-custom-domain mapping."""

    agency_id: str
    slug: str
    name: str
    logo_url: str | None = None
    primary_color: str | None = None
    secondary_color: str | None = None
    whitelabel_subdomain: str | None = None
    whitelabel_domain: str | None = None

    def branding(self) -> WhitelabelBranding:
        return WhitelabelBranding(
            agency_id=self.agency_id,
            agency_name=self.name,
            logo_url=self.logo_url,
            primary_color=self.primary_color,
            secondary_color=self.secondary_color,
        )


@dataclass(frozen=True, slots=True)
class AgencyRecord:
    """An agency as seen by slug confirmation on the platform domain."""

    agency_id: str
    slug: str
    name: str
    logo_url: str | None = None
    primary_color: str | None = None
    secondary_color: str | None = None


@dataclass(frozen=True, slots=True)
class WhitelabelBranding:
    agency_id: str
    agency_name: str
    logo_url: str | None = None
    primary_color: str | None = None
    secondary_color: str | None = None


@dataclass(frozen=True, slots=True)
class DomainContextRequest:
    domain: str | None
    path: str | None
    forwarded_host: str | None = None


@dataclass(frozen=True, slots=True)
class DomainContext:
    """Immutable tenant scope a request resolved to."""

    context_type: ContextType
    agency_slug: str | None = None
    client_slug: str | None = None
    whitelabel_config: WhitelabelBranding | None = None

    def __post_init__(self) -> None:
        if self.client_slug is not None and self.context_type != ContextType.CLIENT:
            msg = f"client_slug is only valid for client contexts, got {self.context_type}"
            raise ValueError(msg)
        if self.whitelabel_config is not None and self.context_type == ContextType.SUPER_ADMIN:
            msg = "whitelabel_config is not valid for super_admin contexts"
            raise ValueError(msg)


def default_agency_context() -> DomainContext:
    """Return the conservative fallback: agency scope with no slug."""
    return DomainContext(context_type=ContextType.AGENCY)
