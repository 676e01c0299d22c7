"""Shared test fixtures."""

from __future__ import annotations

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from dashcontext.exceptions import DirectoryLookupError
from dashcontext.models.database import Agency
from dashcontext.models.domain import AgencyRecord, NotFound, WhitelabelAgency
from dashcontext.resolver.cache import ContextCache
from dashcontext.resolver.resolver import DomainContextResolver
from dashcontext.web.app import create_app
from dashcontext.web.dependencies import get_resolver


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, now: float = 1000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeAgencyDirectory:
    """Call-counting directory with canned answers; ``fail`` makes every lookup raise."""

    def __init__(
        self,
        whitelabel: dict[str, WhitelabelAgency] | None = None,
        agencies: dict[str, AgencyRecord] | None = None,
        fail: bool = False,
    ) -> None:
        self.whitelabel = whitelabel or {}
        self.agencies = agencies or {}
        self.fail = fail
        self.calls: list[tuple[str, str]] = []
        self.verified: dict[str, bool] = {}

    async def find_verified_agency_by_domain(
        self, base_domain: str
    ) -> WhitelabelAgency | NotFound:
        self.calls.append(("domain", base_domain))
        if self.fail:
            raise DirectoryLookupError("directory unavailable")
        return self.whitelabel.get(base_domain, NotFound())

    async def find_agency_by_slug(self, slug: str) -> AgencyRecord | NotFound:
        self.calls.append(("slug", slug))
        if self.fail:
            raise DirectoryLookupError("directory unavailable")
        return self.agencies.get(slug, NotFound())

    async def set_whitelabel_verified(self, agency_id: str, verified: bool) -> bool:
        known = {a.agency_id for a in self.agencies.values()}
        known |= {a.agency_id for a in self.whitelabel.values()}
        if agency_id not in known:
            return False
        self.verified[agency_id] = verified
        return True


FIVELEAF = WhitelabelAgency(
    agency_id="agency-fiveleaf",
    slug="fiveleaf",
    name="Fiveleaf",
    logo_url="https://cdn.example.com/fiveleaf.png",
    primary_color="#0f5132",
    secondary_color="#ffffff",
    whitelabel_subdomain="dashboard",
    whitelabel_domain="fiveleaf.co.uk",
)

ACME = AgencyRecord(agency_id="agency-acme", slug="acme", name="Acme Agency")


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def directory() -> FakeAgencyDirectory:
    return FakeAgencyDirectory(
        whitelabel={"fiveleaf.co.uk": FIVELEAF},
        agencies={"acme": ACME},
    )


@pytest.fixture()
def resolver(directory: FakeAgencyDirectory, clock: FakeClock) -> DomainContextResolver:
    return DomainContextResolver(directory, cache=ContextCache(ttl_seconds=300, clock=clock))


@pytest.fixture()
def app(resolver: DomainContextResolver):
    """Create a fresh app instance wired to the fake directory."""
    app = create_app()
    app.dependency_overrides[get_resolver] = lambda: resolver
    return app


@pytest.fixture()
async def client(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture()
async def async_engine():
    """In-memory SQLite engine with the agencies table and a few agencies."""
    engine = create_async_engine("sqlite+aiosqlite:///:memory:")
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    async with AsyncSession(engine) as session:
        session.add_all(
            [
                Agency(
                    id="agency-fiveleaf",
                    slug="fiveleaf",
                    name="Fiveleaf",
                    primary_color="#0f5132",
                    whitelabel_subdomain="dashboard",
                    whitelabel_domain="fiveleaf.co.uk",
                    whitelabel_verified=True,
                ),
                Agency(
                    id="agency-pending",
                    slug="pending",
                    name="Pending Agency",
                    whitelabel_domain="pending.io",
                    whitelabel_verified=False,
                ),
                Agency(id="agency-acme", slug="acme", name="Acme Agency"),
            ]
        )
        await session.commit()

    yield engine
    await engine.dispose()
