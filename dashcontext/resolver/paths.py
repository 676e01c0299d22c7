"""Path segment parsing for the platform's own multi-tenant domain.

On the platform domain a request path reads as ``/<agency>/<client>``;
a handful of reserved markers short-circuit that reading. All markers and
recognized platform hosts live in :class:`ReservedMarkers`.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

import structlog

from dashcontext.models.domain import AgencyRecord, NotFound
from dashcontext.types import ContextType

logger = structlog.get_logger(__name__)

SlugLookup = Callable[[str], Awaitable[AgencyRecord | NotFound]]


@dataclass(frozen=True, slots=True)
class ReservedMarkers:
    platform_domains: tuple[str, ...] = ("total-dash.com", "localhost", "127.0.0.1")
    admin_subdomain: str = "admin"
    super_admin_prefix: str = "/super-admin"
    agency_login_prefix: str = "/agencylogin"
    agency_segment: str = "agency"
    login_segment: str = "login"
    client_segment: str = "client"

    def is_platform_domain(self, domain: str) -> bool:
        """True for a platform domain or any subdomain of one."""
        return any(domain == d or domain.endswith(f".{d}") for d in self.platform_domains)

    def is_admin_domain(self, domain: str) -> bool:
        return domain.startswith(f"{self.admin_subdomain}.")

    @property
    def whitelabel_reserved(self) -> frozenset[str]:
        return frozenset({self.login_segment, self.client_segment})


@dataclass(frozen=True, slots=True)
class PathContext:
    context_type: ContextType
    agency_slug: str | None = None
    client_slug: str | None = None


def split_path(path: str) -> list[str]:
    return [segment for segment in path.split("/") if segment]


def client_slug_from_path(path: str, markers: ReservedMarkers) -> str | None:
    """Client slug on a whitelabel domain: the first segment unless it is reserved."""
    segments = split_path(path)
    if segments and segments[0] not in markers.whitelabel_reserved:
        return segments[0]
    return None


async def parse_path_context(
    path: str,
    domain: str,
    confirm_agency: SlugLookup,
    markers: ReservedMarkers,
) -> PathContext:
    """Classify a platform-domain request from its path.

    ``domain`` must already be normalized. ``confirm_agency`` is only awaited
    when the first segment is a candidate agency slug; it must not raise.
    """
    if path.startswith(markers.super_admin_prefix) or markers.is_admin_domain(domain):
        return PathContext(ContextType.SUPER_ADMIN)

    segments = split_path(path)
    if path.startswith(markers.agency_login_prefix) or (
        segments and segments[0] == markers.agency_segment
    ):
        return PathContext(ContextType.AGENCY)

    if not segments:
        return PathContext(ContextType.AGENCY)

    agency = await confirm_agency(segments[0])
    if isinstance(agency, NotFound):
        logger.debug("agency_slug_unconfirmed", slug=segments[0], reason=agency.reason)
        return PathContext(ContextType.AGENCY)

    if len(segments) == 1 or segments[1] == markers.login_segment:
        return PathContext(ContextType.AGENCY, agency_slug=agency.slug)

    return PathContext(ContextType.CLIENT, agency_slug=agency.slug, client_slug=segments[1])
