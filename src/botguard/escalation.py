"""Block-status ladder for repeated explicit violations."""

from __future__ import annotations

from typing import Any, NamedTuple

DEFAULT_TTL_SECONDS = [600, 1800, 86400]

PERMANENT = "permanent-block"


class BlockStatus(NamedTuple):
    status: str
    ttl_seconds: int | None


def block_status(count: int, config: dict[str, Any] | None = None) -> BlockStatus:
    """Map a raw violation count to the block status an edge cache should hold.

    The first few violations earn temporary blocks of growing length
    (``temp-1``, ``temp-2``, ...); once the ladder is exhausted the block
    is permanent and carries no TTL.

    >>> block_status(1)
    BlockStatus(status='temp-1', ttl_seconds=600)
    >>> block_status(4)
    BlockStatus(status='permanent-block', ttl_seconds=None)
    """
    ttls = (config or {}).get("ttl_seconds", DEFAULT_TTL_SECONDS)
    if count < 1:
        return BlockStatus("none", None)
    if count <= len(ttls):
        return BlockStatus(f"temp-{count}", int(ttls[count - 1]))
    return BlockStatus(PERMANENT, None)
