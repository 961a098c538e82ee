"""
Carrier identification from portal login URLs.
"""

from __future__ import annotations

from collections.abc import Collection
from urllib.parse import urlsplit

UNKNOWN_CARRIER = "unknown"

KNOWN_CARRIERS: frozenset[str] = frozenset(
    {
        "com_acuity",
        "com_advantagepartners",
        "com_apagents",
        "com_bitco",
        "com_cmfgroup",
        "com_ufginsurance",
        "net_abacus",
    }
)


def reverse_domain_slug(hostname: str) -> str:
    """
    Build `{tld}_{domain}` from the last two hostname labels.

    `portal.abacus.net` -> `net_abacus`.
    """

    parts = hostname.split(".")
    if len(parts) < 2:
        return hostname.replace(".", "_")
    return f"{parts[-1]}_{parts[-2]}"


def identify_carrier(login_url: str, known_carriers: Collection[str] = KNOWN_CARRIERS) -> str:
    """
    Map a login URL to a registered carrier slug, or `unknown`.
    """

    try:
        hostname = urlsplit((login_url or "").strip()).hostname
    except ValueError:
        return UNKNOWN_CARRIER
    if not hostname:
        return UNKNOWN_CARRIER

    slug = reverse_domain_slug(hostname.lower())
    return slug if slug in known_carriers else UNKNOWN_CARRIER
