"""Storefront locale resolution from request paths."""

from __future__ import annotations

import re
from typing import NamedTuple

_LOCALE_SEGMENT = re.compile(r"([a-z]{2})-([a-z]{2})")

UNKNOWN = "unknown"


class Locale(NamedTuple):
    lang: str
    country: str

    @property
    def key(self) -> str:
        return f"{self.lang}-{self.country}"

    @property
    def is_known(self) -> bool:
        return self.lang != UNKNOWN and self.country != UNKNOWN


def parse_locale(path: str) -> Locale:
    """Resolve the locale a storefront path belongs to.

    Only the first path segment matters. The storefront root and ``/ja``
    are the Japanese home site, ``/en`` is English on the Japanese site,
    and ``/xx-yy`` selects language ``xx`` in country ``yy``.

    >>> parse_locale("/fr-FR/products/tee")
    Locale(lang='fr', country='fr')
    >>> parse_locale("/collections/all")
    Locale(lang='unknown', country='unknown')
    """
    segment = path.lstrip("/").lower().split("/")[0]

    if segment in ("", "ja"):
        return Locale("ja", "jp")
    if segment == "en":
        return Locale("en", "jp")

    match = _LOCALE_SEGMENT.fullmatch(segment)
    if match:
        return Locale(match.group(1), match.group(2))

    return Locale(UNKNOWN, UNKNOWN)
