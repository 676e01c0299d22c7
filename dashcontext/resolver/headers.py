"""Edge proxy header inspection."""

from __future__ import annotations

from typing import TYPE_CHECKING

from dashcontext.resolver.normalizer import normalize_domain

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

DEFAULT_HOST_HEADERS = ("x-original-host", "x-forwarded-host")


def extract_forwarded_host(
    headers: Mapping[str, str],
    header_names: Sequence[str] = DEFAULT_HOST_HEADERS,
) -> str | None:
    """Return the first present, non-empty original host header, normalized.

    ``headers`` should be case-insensitive (Starlette ``Headers``) or use
    lowercase keys.
    """
    for name in header_names:
        value = headers.get(name)
        if value and value.strip():
            return normalize_domain(value.strip())
    return None
