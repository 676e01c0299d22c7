"""FastAPI dependency injection and shared state.

The resolver, and with it the context cache, is created once per process.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from dashcontext.config.settings import Settings, get_settings
from dashcontext.resolver.cache import ContextCache
from dashcontext.resolver.paths import ReservedMarkers
from dashcontext.resolver.resolver import DomainContextResolver
from dashcontext.storage.repositories.agencies import InMemoryAgencyDirectory
from dashcontext.verification.dns import WhitelabelVerifier

if TYPE_CHECKING:
    from dashcontext.storage.repositories.agencies import AgencyDirectory

logger = structlog.get_logger(__name__)


def markers_from_settings(settings: Settings) -> ReservedMarkers:
    return ReservedMarkers(
        platform_domains=tuple(settings.platform_domains),
        admin_subdomain=settings.admin_subdomain,
        super_admin_prefix=settings.super_admin_prefix,
        agency_login_prefix=settings.agency_login_prefix,
    )


def _create_agency_directory() -> AgencyDirectory:
    """Create the appropriate agency directory based on settings."""
    settings = get_settings()
    if settings.use_database:
        from dashcontext.storage.database import get_engine
        from dashcontext.storage.repositories.agencies import DatabaseAgencyDirectory

        return DatabaseAgencyDirectory(get_engine())
    logger.info("agency_directory_in_memory")
    return InMemoryAgencyDirectory()


def _create_resolver(directory: AgencyDirectory) -> DomainContextResolver:
    settings = get_settings()
    cache = ContextCache(
        ttl_seconds=settings.context_cache_ttl_seconds,
        max_entries=settings.context_cache_max_entries,
    )
    return DomainContextResolver(directory, cache=cache, markers=markers_from_settings(settings))


# Shared state
agency_directory = _create_agency_directory()
resolver = _create_resolver(agency_directory)


def get_resolver() -> DomainContextResolver:
    return resolver


def get_verifier() -> WhitelabelVerifier:
    settings = get_settings()
    return WhitelabelVerifier(
        agency_directory,
        resolver.cache,
        resolver_url=settings.dns_resolver_url,
        timeout=settings.dns_timeout_seconds,
    )
