"""Host string normalization."""

from __future__ import annotations

import re

_SCHEME_RE = re.compile(r"^https?://")
_PORT_RE = re.compile(r":\d+$")


def normalize_domain(raw: str) -> str:
    """Strip a leading http(s) scheme and a trailing port; leave the rest untouched."""
    return _PORT_RE.sub("", _SCHEME_RE.sub("", raw))


def base_domain(host: str) -> str:
    """Drop the leftmost label of hosts with more than two labels.

    ``dashboard.fiveleaf.co.uk`` becomes ``fiveleaf.co.uk``. Assumes exactly
    one subdomain level, so ``fiveleaf.co.uk`` itself becomes ``co.uk``.
    """
    labels = host.split(".")
    if len(labels) > 2:
        return ".".join(labels[1:])
    return host
