"""Tenant context resolver: the priority chain behind every domain-context request.

Order of precedence:

1. cached result for the exact ``(domain, path)``
2. forwarded host of a proxied custom domain, looked up by base domain
3. the connection domain itself as a whitelabel domain
4. path parsing on the platform's own domains
5. agency context with no slug

Directory misses and faults both fall through to the next rule. The only
error a caller can see is :class:`ContextInputError`.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from dashcontext.exceptions import ContextInputError
from dashcontext.models.domain import (
    AgencyRecord,
    DomainContext,
    DomainContextRequest,
    NotFound,
    WhitelabelAgency,
    default_agency_context,
)
from dashcontext.resolver.cache import ContextCache
from dashcontext.resolver.normalizer import base_domain, normalize_domain
from dashcontext.resolver.paths import ReservedMarkers, client_slug_from_path, parse_path_context
from dashcontext.types import ContextType

if TYPE_CHECKING:
    from dashcontext.storage.repositories.agencies import AgencyDirectory

logger = structlog.get_logger(__name__)


class DomainContextResolver:
    def __init__(
        self,
        directory: AgencyDirectory,
        cache: ContextCache | None = None,
        markers: ReservedMarkers | None = None,
    ) -> None:
        self._directory = directory
        self.cache = cache if cache is not None else ContextCache()
        self._markers = markers or ReservedMarkers()

    async def resolve(self, request: DomainContextRequest) -> DomainContext:
        if not request.domain or not request.path:
            msg = "Domain and path are required"
            raise ContextInputError(msg)

        key = (request.domain, request.path)
        cached = self.cache.get(key)
        if cached is not None:
            logger.debug("domain_context_cache_hit", domain=request.domain, path=request.path)
            return cached

        context = await self._compute(
            normalize_domain(request.domain), request.path, request.forwarded_host
        )
        self.cache.put(key, context)
        logger.info(
            "domain_context_resolved",
            domain=request.domain,
            path=request.path,
            context_type=context.context_type.value,
            agency_slug=context.agency_slug,
            client_slug=context.client_slug,
        )
        return context

    async def _compute(self, domain: str, path: str, forwarded_host: str | None) -> DomainContext:
        if forwarded_host:
            lookup_domain = base_domain(normalize_domain(forwarded_host))
            agency = await self._find_whitelabel(lookup_domain)
            if isinstance(agency, WhitelabelAgency):
                return self._whitelabel_context(agency, path)
            logger.info(
                "custom_domain_unresolved",
                forwarded_host=forwarded_host,
                base_domain=lookup_domain,
            )

        agency = await self._find_whitelabel(domain)
        if isinstance(agency, WhitelabelAgency):
            return self._whitelabel_context(agency, path)

        if self._markers.is_platform_domain(domain):
            parsed = await parse_path_context(path, domain, self._find_agency, self._markers)
            return DomainContext(
                context_type=parsed.context_type,
                agency_slug=parsed.agency_slug,
                client_slug=parsed.client_slug,
            )

        return default_agency_context()

    def _whitelabel_context(self, agency: WhitelabelAgency, path: str) -> DomainContext:
        return DomainContext(
            context_type=ContextType.CLIENT,
            agency_slug=agency.slug,
            client_slug=client_slug_from_path(path, self._markers),
            whitelabel_config=agency.branding(),
        )

    async def _find_whitelabel(self, domain: str) -> WhitelabelAgency | NotFound:
        try:
            return await self._directory.find_verified_agency_by_domain(domain)
        except Exception as e:
            logger.warning(
                "directory_lookup_failed", lookup="whitelabel_domain", domain=domain, error=str(e)
            )
            return NotFound(reason="lookup_failed")

    async def _find_agency(self, slug: str) -> AgencyRecord | NotFound:
        try:
            return await self._directory.find_agency_by_slug(slug)
        except Exception as e:
            logger.warning("directory_lookup_failed", lookup="agency_slug", slug=slug, error=str(e))
            return NotFound(reason="lookup_failed")
