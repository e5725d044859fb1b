"""Classify free-form location text into a searchable geographic scope."""

from __future__ import annotations

import re
import unicodedata
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from typing import Dict, Optional, Tuple

from places_search.geo.regions import COUNTRIES, Country, Region

_WHITESPACE = re.compile(r"\s+")


class ScopeType(str, Enum):
    CITY = "city"
    STATE = "state"
    COUNTRY = "country"


@dataclass(frozen=True)
class GeoScope:
    type: ScopeType
    cities: Tuple[str, ...]
    region_code: Optional[str] = None
    country_code: Optional[str] = None


def normalize(text: str) -> str:
    """Lowercase, strip diacritics and collapse whitespace."""
    decomposed = unicodedata.normalize("NFKD", text)
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return _WHITESPACE.sub(" ", stripped).strip().lower()


@lru_cache(maxsize=None)
def _region_index(country_code: str) -> Dict[str, Region]:
    country = COUNTRIES[country_code]
    index: Dict[str, Region] = {}
    for region in country.regions:
        for alias in (region.code, region.name, *region.aliases):
            index.setdefault(normalize(alias), region)
    return index


@lru_cache(maxsize=1)
def _country_index() -> Dict[str, Country]:
    index: Dict[str, Country] = {}
    for country in COUNTRIES.values():
        for alias in (country.code, country.name, *country.aliases):
            index.setdefault(normalize(alias), country)
    return index


def _country_scope(country: Country) -> GeoScope:
    return GeoScope(type=ScopeType.COUNTRY, cities=country.all_cities(), country_code=country.code)


def classify(location: Optional[str], default_country: str = "BR") -> GeoScope:
    """Resolve ``location`` into a scope and the ordered list of cities to search.

    Blank input searches the whole default country. Region codes and names
    are looked up in the default country's table, country aliases in every
    known country. Anything else is treated as a single city and passed to
    the provider verbatim, so the result always has at least one city.
    """
    if default_country not in COUNTRIES:
        raise ValueError(f"Unknown default country: {default_country}")

    if location is None or not location.strip():
        return _country_scope(COUNTRIES[default_country])

    key = normalize(location)

    region = _region_index(default_country).get(key)
    if region is not None:
        return GeoScope(
            type=ScopeType.STATE,
            cities=region.qualified_cities(),
            region_code=region.code,
            country_code=default_country,
        )

    country = _country_index().get(key)
    if country is not None:
        return _country_scope(country)

    return GeoScope(type=ScopeType.CITY, cities=(location,))
