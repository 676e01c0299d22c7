"""Whitelabel domain verification via DNS-over-HTTPS CNAME lookup."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import httpx
import structlog

from dashcontext.exceptions import VerificationError
from dashcontext.resolver.normalizer import normalize_domain

if TYPE_CHECKING:
    from dashcontext.resolver.cache import ContextCache
    from dashcontext.storage.repositories.agencies import AgencyDirectory

logger = structlog.get_logger(__name__)

CNAME_RECORD_TYPE = 5
DEFAULT_RESOLVER_URL = "https://dns.google/resolve"


@dataclass(frozen=True, slots=True)
class DnsCheckResult:
    verified: bool
    message: str
    cname_target: str | None = None


async def check_cname(
    fqdn: str,
    resolver_url: str = DEFAULT_RESOLVER_URL,
    timeout: float = 5.0,
    transport: httpx.AsyncBaseTransport | None = None,
) -> DnsCheckResult:
    """Look up the CNAME for ``fqdn``. Never raises; failures come back unverified."""
    try:
        async with httpx.AsyncClient(timeout=timeout, transport=transport) as client:
            resp = await client.get(resolver_url, params={"name": fqdn, "type": "CNAME"})
            resp.raise_for_status()
            data: Any = resp.json()
    except (httpx.HTTPError, ValueError) as exc:
        logger.warning("dns_lookup_failed", fqdn=fqdn, error=str(exc))
        return DnsCheckResult(
            verified=False,
            message=(
                f"DNS verification failed: {exc}. "
                "Please ensure the CNAME record is properly configured."
            ),
        )

    answers = data.get("Answer") if isinstance(data, dict) else None
    records = [a for a in answers if isinstance(a, dict)] if isinstance(answers, list) else []
    if not records:
        return DnsCheckResult(
            verified=False, message="No DNS records found. Please add a CNAME record."
        )

    cname = next((a for a in records if a.get("type") == CNAME_RECORD_TYPE), None)
    if cname is None:
        return DnsCheckResult(
            verified=False,
            message="No CNAME record found. Please add a CNAME record pointing to the dashboard.",
        )

    target = str(cname.get("data", "")).rstrip(".")
    return DnsCheckResult(
        verified=True,
        message=f"DNS verified successfully. CNAME points to {target}",
        cname_target=target,
    )


class WhitelabelVerifier:
    """Checks an agency's custom domain and records the outcome in the directory.

    Any outcome changes which domains the resolver may trust, so the context
    cache is cleared after every recorded check.
    """

    def __init__(
        self,
        directory: AgencyDirectory,
        cache: ContextCache,
        resolver_url: str = DEFAULT_RESOLVER_URL,
        timeout: float = 5.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._directory = directory
        self._cache = cache
        self._resolver_url = resolver_url
        self._timeout = timeout
        self._transport = transport

    async def verify(
        self, agency_id: str, domain: str, subdomain: str = "dashboard"
    ) -> DnsCheckResult:
        fqdn = f"{subdomain}.{normalize_domain(domain)}"
        result = await check_cname(
            fqdn, self._resolver_url, timeout=self._timeout, transport=self._transport
        )

        if not await self._directory.set_whitelabel_verified(agency_id, result.verified):
            msg = f"Agency {agency_id} not found"
            raise VerificationError(msg)

        self._cache.clear()
        logger.info(
            "whitelabel_verification_checked",
            agency_id=agency_id,
            fqdn=fqdn,
            verified=result.verified,
            cname_target=result.cname_target,
        )
        return result
