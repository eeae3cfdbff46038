"""Request values for the web-service endpoints.

Field metadata carries the query-string key, see ``encode.encode_query``.
Parameter semantics are documented at https://www.geonames.org/export/ws-overview.html.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import datetime as dt

from geonames.common.values import AdminCode, BoundingBox, Position


def q(key: str, default=None, **kwargs):
    if "default_factory" in kwargs:
        return field(metadata={"query": key}, **kwargs)
    return field(default=default, metadata={"query": key})


def dive(factory):
    return field(default_factory=factory, metadata={"query": ",dive"})


@dataclass(frozen=True)
class SearchRequest:
    query: str = q("q", "")
    name: str = q("name", "")
    name_equals: str = q("name_equals", "")
    name_starts_with: str = q("name_startsWith", "")
    max_rows: int = q("maxRows", 0)
    start_row: int = q("startRow", 0)
    country: list[str] = q("country", default_factory=list)
    country_bias: str = q("countryBias", "")
    continent_code: str = q("continentCode", "")
    admin_code: AdminCode = dive(AdminCode)
    feature_class: list[str] = q("featureClass", default_factory=list)
    feature_code: list[str] = q("featureCode", default_factory=list)
    cities: str = q("cities", "")
    language: str = q("lang", "")
    search_language: str = q("searchLanguage", "")
    name_required: bool = q("isNameRequired", False)
    tag: str = q("tag", "")
    operator: str = q("operator", "")
    fuzzy: float = q("fuzzy", 0.0)
    bounding_box: BoundingBox = dive(BoundingBox)
    order_by: str = q("orderby", "")


@dataclass(frozen=True)
class GetRequest:
    geoname_id: int = q("geonameId", 0)
    language: str = q("lang", "")


@dataclass(frozen=True)
class HierarchyRequest:
    geoname_id: int = q("geonameId", 0)


@dataclass(frozen=True)
class ChildrenRequest:
    geoname_id: int = q("geonameId", 0)
    max_rows: int = q("maxRows", 0)
    hierarchy: str = q("hierarchy", "")


@dataclass(frozen=True)
class SiblingsRequest:
    geoname_id: int = q("geonameId", 0)


@dataclass(frozen=True)
class NeighboursRequest:
    geoname_id: int = q("geonameId", 0)
    country: str = q("country", "")


@dataclass(frozen=True)
class ContainsRequest:
    geoname_id: int = q("geonameId", 0)
    feature_class: str = q("featureClass", "")
    feature_code: str = q("featureCode", "")


@dataclass(frozen=True)
class FindNearbyRequest:
    position: Position = dive(Position)
    feature_class: list[str] = q("featureClass", default_factory=list)
    feature_code: list[str] = q("featureCode", default_factory=list)
    radius: int = q("radius", 0)
    max_rows: int = q("maxRows", 0)
    local_country: bool = q("localCountry", False)


@dataclass(frozen=True)
class FindNearbyPlaceNameRequest:
    position: Position = dive(Position)
    language: str = q("lang", "")
    radius: int = q("radius", 0)
    max_rows: int = q("maxRows", 0)
    local_country: bool = q("localCountry", False)
    cities: str = q("cities", "")


@dataclass(frozen=True)
class FindNearbyPostalCodesRequest:
    position: Position = dive(Position)
    radius: int = q("radius", 0)
    max_rows: int = q("maxRows", 0)
    country: str = q("country", "")
    local_country: bool = q("localCountry", False)


@dataclass(frozen=True)
class PostalCodeLookupRequest:
    postal_code: str = q("postalcode", "")
    country: list[str] = q("country", default_factory=list)
    max_rows: int = q("maxRows", 0)


@dataclass(frozen=True)
class PostalCodeSearchRequest:
    postal_code: str = q("postalcode", "")
    postal_code_starts_with: str = q("postalcode_startsWith", "")
    place_name: str = q("placename", "")
    place_name_starts_with: str = q("placename_startsWith", "")
    country: list[str] = q("country", default_factory=list)
    country_bias: str = q("countryBias", "")
    max_rows: int = q("maxRows", 0)
    operator: str = q("operator", "")
    reduced: bool = q("isReduced", False)
    bounding_box: BoundingBox = dive(BoundingBox)


@dataclass(frozen=True)
class AddressRequest:
    position: Position = dive(Position)
    radius: int = q("radius", 0)
    max_rows: int = q("maxRows", 0)


@dataclass(frozen=True)
class GeoCodeAddressRequest:
    query: str = q("q", "")
    country: str = q("country", "")
    postal_code: str = q("postalcode", "")


@dataclass(frozen=True)
class StreetNameLookupRequest:
    query: str = q("q", "")
    country: str = q("country", "")
    postal_code: str = q("postalcode", "")
    admin_code: AdminCode = dive(AdminCode)
    unique_street_name: bool = q("isUniqueStreetName", False)


@dataclass(frozen=True)
class CountryCodeRequest:
    position: Position = dive(Position)
    radius: int = q("radius", 0)
    language: str = q("lang", "")


@dataclass(frozen=True)
class CountryInfoRequest:
    country: list[str] = q("country", default_factory=list)
    language: str = q("lang", "")


@dataclass(frozen=True)
class CountrySubdivisionRequest:
    position: Position = dive(Position)
    radius: int = q("radius", 0)
    language: str = q("lang", "")
    level: int = q("level", 0)


@dataclass(frozen=True)
class TimezoneRequest:
    position: Position = dive(Position)
    radius: int = q("radius", 0)
    language: str = q("lang", "")
    date: dt.date | None = q("date", None)


@dataclass(frozen=True)
class OceanRequest:
    position: Position = dive(Position)
    radius: int = q("radius", 0)


@dataclass(frozen=True)
class EarthquakesRequest:
    bounding_box: BoundingBox = dive(BoundingBox)
    date: dt.date | None = q("date", None)
    min_magnitude: float = q("minMagnitude", 0.0)
    max_rows: int = q("maxRows", 0)


@dataclass(frozen=True)
class WeatherRequest:
    bounding_box: BoundingBox = dive(BoundingBox)
    language: str = q("lang", "")
    max_rows: int = q("maxRows", 0)


@dataclass(frozen=True)
class WeatherICAORequest:
    icao: str = q("ICAO", "")
    language: str = q("lang", "")


@dataclass(frozen=True)
class FindNearbyWeatherRequest:
    position: Position = dive(Position)
    radius: int = q("radius", 0)


@dataclass(frozen=True)
class FindNearbyWikipediaRequest:
    position: Position = dive(Position)
    language: str = q("lang", "")
    radius: int = q("radius", 0)
    max_rows: int = q("maxRows", 0)
    country: list[str] = q("country", default_factory=list)


@dataclass(frozen=True)
class WikipediaSearchRequest:
    query: str = q("q", "")
    title: str = q("title", "")
    language: str = q("lang", "")
    max_rows: int = q("maxRows", 0)


@dataclass(frozen=True)
class WikipediaBoundingBoxRequest:
    bounding_box: BoundingBox = dive(BoundingBox)
    language: str = q("lang", "")
    max_rows: int = q("maxRows", 0)
