"""Network address range matching for IPv4 and IPv6."""

from __future__ import annotations

import ipaddress
import logging
from collections.abc import Iterable

logger = logging.getLogger("botguard.cidr")


def ip_in_cidr(ip: str, cidr: str) -> bool:
    """Check whether ``ip`` falls inside ``cidr`` (``base/prefixLength``).

    The first ``prefixLength`` bits of the address and the base are
    compared; host bits set in the base are ignored. Mixed address
    families, non-numeric or out-of-range prefixes, and unparseable
    addresses all yield False.

    >>> ip_in_cidr("192.168.1.5", "192.168.1.0/24")
    True
    >>> ip_in_cidr("::2", "::1/128")
    False
    """
    base, sep, prefix_str = cidr.strip().partition("/")
    if not sep or not (prefix_str.isascii() and prefix_str.isdigit()):
        return False

    try:
        address = ipaddress.ip_address(ip.strip())
        base_address = ipaddress.ip_address(base)
    except ValueError:
        logger.debug("Unparseable address: ip=%r cidr=%r", ip, cidr)
        return False

    if address.version != base_address.version:
        return False

    prefix = int(prefix_str)
    total_bits = base_address.max_prefixlen
    if prefix > total_bits:
        return False

    mask = ((1 << prefix) - 1) << (total_bits - prefix)
    return (int(address) & mask) == (int(base_address) & mask)


def ip_in_any(ip: str, cidrs: Iterable[str]) -> bool:
    """Check an address against a list of ranges (e.g., a crawler's published ranges)."""
    return any(ip_in_cidr(ip, cidr) for cidr in cidrs)
