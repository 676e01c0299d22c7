"""Agency directory: DB-backed, with an in-memory twin for dev and tests.

Lookups return a :class:`NotFound` value for misses instead of raising.
Backend faults surface as DirectoryLookupError; the resolver downgrades them.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

import structlog
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import col, select
from sqlmodel.ext.asyncio.session import AsyncSession

from dashcontext.exceptions import DirectoryLookupError
from dashcontext.models.database import Agency, _utc_now
from dashcontext.models.domain import AgencyRecord, NotFound, WhitelabelAgency

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncEngine
    from sqlmodel.sql.expression import SelectOfScalar

logger = structlog.get_logger(__name__)


class AgencyDirectory(Protocol):
    async def find_verified_agency_by_domain(
        self, base_domain: str
    ) -> WhitelabelAgency | NotFound: ...

    async def find_agency_by_slug(self, slug: str) -> AgencyRecord | NotFound: ...

    async def set_whitelabel_verified(self, agency_id: str, verified: bool) -> bool: ...


def _to_whitelabel(agency: Agency) -> WhitelabelAgency:
    return WhitelabelAgency(
        agency_id=agency.id,
        slug=agency.slug,
        name=agency.name,
        logo_url=agency.logo_url,
        primary_color=agency.primary_color,
        secondary_color=agency.secondary_color,
        whitelabel_subdomain=agency.whitelabel_subdomain,
        whitelabel_domain=agency.whitelabel_domain,
    )


def _to_record(agency: Agency) -> AgencyRecord:
    return AgencyRecord(
        agency_id=agency.id,
        slug=agency.slug,
        name=agency.name,
        logo_url=agency.logo_url,
        primary_color=agency.primary_color,
        secondary_color=agency.secondary_color,
    )


class DatabaseAgencyDirectory:
    """Reads agencies from PostgreSQL via the Agency model."""

    def __init__(self, engine: AsyncEngine) -> None:
        self._engine = engine

    async def find_verified_agency_by_domain(
        self, base_domain: str
    ) -> WhitelabelAgency | NotFound:
        statement = select(Agency).where(
            col(Agency.whitelabel_verified).is_(True),
            col(Agency.whitelabel_domain) == base_domain,
        )
        agency = await self._first(statement)
        if agency is None:
            return NotFound()
        return _to_whitelabel(agency)

    async def find_agency_by_slug(self, slug: str) -> AgencyRecord | NotFound:
        agency = await self._first(select(Agency).where(col(Agency.slug) == slug))
        if agency is None:
            return NotFound()
        return _to_record(agency)

    async def _first(self, statement: SelectOfScalar[Agency]) -> Agency | None:
        try:
            async with AsyncSession(self._engine) as session:
                results = await session.execute(statement)
                return results.scalars().first()
        except SQLAlchemyError as e:
            msg = f"agency directory query failed: {e}"
            raise DirectoryLookupError(msg) from e

    async def set_whitelabel_verified(self, agency_id: str, verified: bool) -> bool:
        async with AsyncSession(self._engine) as session:
            agency = await session.get(Agency, agency_id)
            if agency is None:
                return False
            now = _utc_now()
            agency.whitelabel_verified = verified
            agency.whitelabel_verified_at = now if verified else None
            agency.updated_at = now
            session.add(agency)
            await session.commit()
        logger.info("agency_whitelabel_verified_set", agency_id=agency_id, verified=verified)
        return True


class InMemoryAgencyDirectory:
    """In-memory fallback for dev/testing without a database."""

    def __init__(self, agencies: list[Agency] | None = None) -> None:
        self._agencies: dict[str, Agency] = {a.id: a for a in agencies or []}

    def add(self, agency: Agency) -> Agency:
        self._agencies[agency.id] = agency
        return agency

    async def find_verified_agency_by_domain(
        self, base_domain: str
    ) -> WhitelabelAgency | NotFound:
        for agency in self._agencies.values():
            if agency.whitelabel_verified and agency.whitelabel_domain == base_domain:
                return _to_whitelabel(agency)
        return NotFound()

    async def find_agency_by_slug(self, slug: str) -> AgencyRecord | NotFound:
        for agency in self._agencies.values():
            if agency.slug == slug:
                return _to_record(agency)
        return NotFound()

    async def set_whitelabel_verified(self, agency_id: str, verified: bool) -> bool:
        agency = self._agencies.get(agency_id)
        if agency is None:
            return False
        agency.whitelabel_verified = verified
        agency.whitelabel_verified_at = _utc_now() if verified else None
        return True
