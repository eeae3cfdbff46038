"""Web-service result types and their JSON demarshallers.

The service is loose about its wire types: ``countryId``, ``distance`` and
``population`` arrive as strings on some endpoints, ``lat``/``lng`` switch
between strings and numbers, and admin codes are flattened into sibling
keys (``adminCode1``..``adminCode5``). Each type therefore reads the decoded
JSON object key by key and projects it onto a strict dataclass.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, TypeVar
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from geonames.common.errors import FieldParseError, ValueParseError
from geonames.common.parse import (
    parse_datetime,
    parse_float64,
    parse_int64,
    parse_multiple_values,
    parse_number,
    parse_position,
    parse_uint64,
)
from geonames.common.values import (
    AdminDivision,
    AdminDivisions,
    AdminLevelCode,
    AlternateNameValue,
    BoundingBox,
    Continent,
    Country,
    Position,
    Record,
    Timezone as TimezoneValue,
)

T = TypeVar("T")

_ADMIN_LEVELS = ("first", "second", "third", "fourth", "fifth")


def expect_object(data: Any) -> dict[str, Any]:
    if not isinstance(data, dict):
        raise ValueParseError(f"expected JSON object, got {type(data).__name__}")
    return data


def _array(data: dict[str, Any], key: str, name: str) -> list[Any]:
    value = data.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise FieldParseError(name, ValueParseError(f"expected JSON array, got {type(value).__name__}"))
    return value


def _text(data: dict[str, Any], key: str) -> str:
    value = data.get(key)
    return "" if value is None else str(value)


def _number(data: dict[str, Any], key: str, parser: Callable[[str], T], name: str) -> T:
    try:
        return parse_number(data.get(key), parser)
    except ValueParseError as exc:
        raise FieldParseError(name, exc) from exc


def _position(data: dict[str, Any]) -> Position:
    try:
        return parse_position(data.get("lat"), data.get("lng"))
    except ValueParseError as exc:
        raise FieldParseError("position", exc) from exc


def _timestamp(data: dict[str, Any], key: str, name: str, tz: Any = timezone.utc) -> datetime | None:
    try:
        return parse_datetime(_text(data, key), tz)
    except ValueParseError as exc:
        raise FieldParseError(name, exc) from exc


def _admin_divisions(data: dict[str, Any]) -> AdminDivisions:
    levels = {}
    for idx, level in enumerate(_ADMIN_LEVELS, start=1):
        levels[level] = AdminDivision(
            code=_text(data, f"adminCode{idx}"),
            name=_text(data, f"adminName{idx}"),
            id=_number(data, f"adminId{idx}", parse_uint64, f"admin_id{idx}"),
        )
    return AdminDivisions(**levels)


def _bounding_box(data: dict[str, Any]) -> BoundingBox:
    return BoundingBox(
        east=_number(data, "east", parse_float64, "east"),
        west=_number(data, "west", parse_float64, "west"),
        north=_number(data, "north", parse_float64, "north"),
        south=_number(data, "south", parse_float64, "south"),
    )


def _extend(cls: type[T], parent: Any, **extra: Any) -> T:
    values = {f.name: getattr(parent, f.name) for f in dataclasses.fields(parent)}
    values.update(extra)
    return cls(**values)


@dataclass(frozen=True)
class GeoName(Record):
    id: int = 0
    country: Country = field(default_factory=Country)
    admin_subdivision: AdminDivisions = field(default_factory=AdminDivisions)
    feature_class: str = ""
    feature_class_name: str = ""
    feature_code: str = ""
    feature_code_name: str = ""
    # Localized name (``lang`` parameter) versus the main toponym name.
    name: str = ""
    toponym_name: str = ""
    position: Position = field(default_factory=Position)
    population: int = 0

    @classmethod
    def from_json(cls, data: Any) -> "GeoName":
        data = expect_object(data)
        return cls(
            id=_number(data, "geonameId", parse_uint64, "id"),
            country=Country(
                code=_text(data, "countryCode"),
                name=_text(data, "countryName"),
                id=_number(data, "countryId", parse_uint64, "country_id"),
            ),
            admin_subdivision=_admin_divisions(data),
            feature_class=_text(data, "fcl"),
            feature_class_name=_text(data, "fclName"),
            feature_code=_text(data, "fcode"),
            feature_code_name=_text(data, "fcodeName"),
            name=_text(data, "name"),
            toponym_name=_text(data, "toponymName"),
            position=_position(data),
            population=_number(data, "population", parse_uint64, "population"),
        )


@dataclass(frozen=True)
class GeoNameNearby(GeoName):
    # km from the requested point
    distance: float = 0.0

    @classmethod
    def from_json(cls, data: Any) -> "GeoNameNearby":
        parent = GeoName.from_json(data)
        return _extend(cls, parent, distance=_number(data, "distance", parse_float64, "distance"))


@dataclass(frozen=True)
class GeoNameDetailed(GeoName):
    continent_code: str = ""
    ascii_name: str = ""
    alternate_names: list[AlternateNameValue] = field(default_factory=list)
    timezone: TimezoneValue = field(default_factory=TimezoneValue)
    elevation: int = 0
    srtm3: int = 0
    astergdem: int = 0
    bounding_box: BoundingBox = field(default_factory=BoundingBox)

    @classmethod
    def from_json(cls, data: Any) -> "GeoNameDetailed":
        parent = GeoName.from_json(data)
        raw_timezone = expect_object(data.get("timezone") or {})
        return _extend(
            cls,
            parent,
            continent_code=_text(data, "continentCode"),
            ascii_name=_text(data, "asciiName"),
            alternate_names=[
                AlternateNameValue(language=_text(item, "lang"), value=_text(item, "name"))
                for item in (expect_object(raw) for raw in _array(data, "alternateNames", "alternate_names"))
            ],
            timezone=TimezoneValue(
                name=_text(raw_timezone, "timeZoneId"),
                gmt_offset=_number(raw_timezone, "gmtOffset", parse_float64, "timezone.gmt_offset"),
                dst_offset=_number(raw_timezone, "dstOffset", parse_float64, "timezone.dst_offset"),
            ),
            elevation=_number(data, "elevation", parse_int64, "elevation"),
            srtm3=_number(data, "srtm3", parse_uint64, "srtm3"),
            astergdem=_number(data, "astergdem", parse_uint64, "astergdem"),
            bounding_box=_bounding_box(expect_object(data.get("bbox") or {})),
        )


@dataclass(frozen=True)
class CountryDetailed(Record):
    code: str = ""
    name: str = ""
    geoname_id: int = 0
    continent: Continent = field(default_factory=Continent)
    capital: str = ""
    languages: list[str] = field(default_factory=list)
    bounding_box: BoundingBox = field(default_factory=BoundingBox)
    iso_alpha3: str = ""
    iso_numeric: int = 0
    fips_code: str = ""
    population: int = 0
    area_in_sq_km: float = 0.0
    postal_code_format: str = ""
    currency_code: str = ""

    @classmethod
    def from_json(cls, data: Any) -> "CountryDetailed":
        data = expect_object(data)
        return cls(
            code=_text(data, "countryCode"),
            name=_text(data, "countryName"),
            geoname_id=_number(data, "geonameId", parse_uint64, "geoname_id"),
            continent=Continent(code=_text(data, "continent"), name=_text(data, "continentName")),
            capital=_text(data, "capital"),
            languages=parse_multiple_values(_text(data, "languages")),
            bounding_box=_bounding_box(data),
            iso_alpha3=_text(data, "isoAlpha3"),
            iso_numeric=_number(data, "isoNumeric", parse_uint64, "iso_numeric"),
            fips_code=_text(data, "fipsCode"),
            population=_number(data, "population", parse_int64, "population"),
            area_in_sq_km=_number(data, "areaInSqKm", parse_float64, "area_in_sq_km"),
            postal_code_format=_text(data, "postalCodeFormat"),
            currency_code=_text(data, "currencyCode"),
        )


@dataclass(frozen=True)
class CountryNearby(Record):
    code: str = ""
    name: str = ""
    languages: list[str] = field(default_factory=list)
    distance: float = 0.0

    @classmethod
    def from_json(cls, data: Any) -> "CountryNearby":
        data = expect_object(data)
        return cls(
            code=_text(data, "countryCode"),
            name=_text(data, "countryName"),
            languages=parse_multiple_values(_text(data, "languages")),
            distance=_number(data, "distance", parse_float64, "distance"),
        )


@dataclass(frozen=True)
class CountrySubdivision(Record):
    geoname_id: int = 0
    country: Country = field(default_factory=Country)
    codes: list[AdminLevelCode] = field(default_factory=list)
    admin_divisions: AdminDivisions = field(default_factory=AdminDivisions)
    distance: float = 0.0

    @classmethod
    def from_json(cls, data: Any) -> "CountrySubdivision":
        data = expect_object(data)
        codes = [
            AdminLevelCode(
                level=_number(item, "level", parse_uint64, "codes.level"),
                type=_text(item, "type"),
                code=_text(item, "code"),
            )
            for item in (expect_object(raw) for raw in _array(data, "codes", "codes"))
        ]
        return cls(
            geoname_id=_number(data, "geonameId", parse_uint64, "geoname_id"),
            country=Country(code=_text(data, "countryCode"), name=_text(data, "countryName")),
            codes=codes,
            admin_divisions=_admin_divisions(data),
            distance=_number(data, "distance", parse_float64, "distance"),
        )


@dataclass(frozen=True)
class PostalCode(Record):
    code: str = ""
    country_code: str = ""
    admin_divisions: AdminDivisions = field(default_factory=AdminDivisions)
    place_name: str = ""
    position: Position = field(default_factory=Position)

    @classmethod
    def from_json(cls, data: Any) -> "PostalCode":
        data = expect_object(data)
        return cls(
            code=_text(data, "postalCode"),
            country_code=_text(data, "countryCode"),
            admin_divisions=_admin_divisions(data),
            place_name=_text(data, "placeName"),
            position=_position(data),
        )


@dataclass(frozen=True)
class PostalCodeNearby(PostalCode):
    distance: float = 0.0

    @classmethod
    def from_json(cls, data: Any) -> "PostalCodeNearby":
        parent = PostalCode.from_json(data)
        return _extend(cls, parent, distance=_number(data, "distance", parse_float64, "distance"))


@dataclass(frozen=True)
class Address(Record):
    position: Position = field(default_factory=Position)
    country_code: str = ""
    admin_divisions: AdminDivisions = field(default_factory=AdminDivisions)
    source_id: str = ""
    postal_code: str = ""
    locality: str = ""
    street: str = ""
    house_number: str = ""

    @classmethod
    def from_json(cls, data: Any) -> "Address":
        data = expect_object(data)
        return cls(
            position=_position(data),
            country_code=_text(data, "countryCode"),
            admin_divisions=_admin_divisions(data),
            source_id=_text(data, "sourceId"),
            postal_code=_text(data, "postalcode"),
            locality=_text(data, "locality"),
            street=_text(data, "street"),
            house_number=_text(data, "houseNumber"),
        )


@dataclass(frozen=True)
class AddressNearby(Address):
    distance: float = 0.0

    @classmethod
    def from_json(cls, data: Any) -> "AddressNearby":
        parent = Address.from_json(data)
        return _extend(cls, parent, distance=_number(data, "distance", parse_float64, "distance"))


@dataclass(frozen=True)
class Wikipedia(Record):
    id: int = 0
    country_code: str = ""
    feature: str = ""
    title: str = ""
    summary: str = ""
    position: Position = field(default_factory=Position)
    language: str = ""
    thumbnail_url: str = ""
    wikipedia_url: str = ""
    rank: int = 0
    elevation: int = 0

    @classmethod
    def from_json(cls, data: Any) -> "Wikipedia":
        data = expect_object(data)
        return cls(
            id=_number(data, "geonameId", parse_uint64, "id"),
            country_code=_text(data, "countryCode"),
            feature=_text(data, "feature"),
            title=_text(data, "title"),
            summary=_text(data, "summary"),
            position=_position(data),
            language=_text(data, "lang"),
            thumbnail_url=_text(data, "thumbnailImg"),
            wikipedia_url=_text(data, "wikipediaUrl"),
            rank=_number(data, "rank", parse_uint64, "rank"),
            elevation=_number(data, "elevation", parse_int64, "elevation"),
        )


@dataclass(frozen=True)
class WikipediaNearby(Wikipedia):
    distance: float = 0.0

    @classmethod
    def from_json(cls, data: Any) -> "WikipediaNearby":
        parent = Wikipedia.from_json(data)
        return _extend(cls, parent, distance=_number(data, "distance", parse_float64, "distance"))


@dataclass(frozen=True)
class Timezone(Record):
    name: str = ""
    country: Country = field(default_factory=Country)
    position: Position = field(default_factory=Position)
    time: datetime | None = None
    sunrise: datetime | None = None
    sunset: datetime | None = None
    gmt_offset: float = 0.0
    dst_offset: float = 0.0
    raw_offset: float = 0.0

    @classmethod
    def from_json(cls, data: Any) -> "Timezone":
        data = expect_object(data)
        name = _text(data, "timezoneId")
        location = _zone(name)
        return cls(
            name=name,
            country=Country(code=_text(data, "countryCode"), name=_text(data, "countryName")),
            position=_position(data),
            time=_local_time(data, "time", location),
            sunrise=_local_time(data, "sunrise", location),
            sunset=_local_time(data, "sunset", location),
            gmt_offset=_number(data, "gmtOffset", parse_float64, "gmt_offset"),
            dst_offset=_number(data, "dstOffset", parse_float64, "dst_offset"),
            raw_offset=_number(data, "rawOffset", parse_float64, "raw_offset"),
        )


def _zone(name: str) -> Any:
    if not name:
        return timezone.utc
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise FieldParseError("timezone", ValueParseError(f'unknown timezone "{name}"')) from exc


def _local_time(data: dict[str, Any], key: str, location: Any) -> datetime | None:
    # The timezone endpoint renders local times without seconds.
    value = _text(data, key)
    if len(value) == len("YYYY-MM-DD HH:MM"):
        value = f"{value}:00"
    try:
        return parse_datetime(value, location)
    except ValueParseError as exc:
        raise FieldParseError(key, exc) from exc


@dataclass(frozen=True)
class WeatherObservation(Record):
    """METAR observation reported by a weather station."""

    position: Position = field(default_factory=Position)
    observation: str = ""
    icao: str = ""
    station_name: str = ""
    clouds_code: str = ""
    clouds_name: str = ""
    weather_condition: str = ""
    temperature: float = 0.0
    dew_point: float = 0.0
    humidity: int = 0
    wind_direction: int = 0
    wind_speed: int = 0
    updated_at: datetime | None = None

    @classmethod
    def from_json(cls, data: Any) -> "WeatherObservation":
        data = expect_object(data)
        return cls(
            position=_position(data),
            observation=_text(data, "observation"),
            icao=_text(data, "ICAO"),
            station_name=_text(data, "stationName"),
            clouds_code=_text(data, "cloudsCode"),
            clouds_name=_text(data, "clouds"),
            weather_condition=_text(data, "weatherCondition"),
            temperature=_number(data, "temperature", parse_float64, "temperature"),
            dew_point=_number(data, "dewPoint", parse_float64, "dew_point"),
            humidity=_number(data, "humidity", parse_int64, "humidity"),
            wind_direction=_number(data, "windDirection", parse_int64, "wind_direction"),
            wind_speed=_number(data, "windSpeed", parse_int64, "wind_speed"),
            updated_at=_timestamp(data, "datetime", "updated_at"),
        )


@dataclass(frozen=True)
class WeatherObservationNearby(WeatherObservation):
    country_code: str = ""
    elevation: int = 0
    distance: float = 0.0

    @classmethod
    def from_json(cls, data: Any) -> "WeatherObservationNearby":
        parent = WeatherObservation.from_json(data)
        return _extend(
            cls,
            parent,
            country_code=_text(data, "countryCode"),
            elevation=_number(data, "elevation", parse_int64, "elevation"),
            distance=_number(data, "distance", parse_float64, "distance"),
        )


@dataclass(frozen=True)
class Earthquake(Record):
    id: str = ""
    position: Position = field(default_factory=Position)
    depth: float = 0.0
    source: str = ""
    magnitude: float = 0.0
    time: datetime | None = None

    @classmethod
    def from_json(cls, data: Any) -> "Earthquake":
        data = expect_object(data)
        return cls(
            id=_text(data, "eqid"),
            position=_position(data),
            depth=_number(data, "depth", parse_float64, "depth"),
            source=_text(data, "src"),
            magnitude=_number(data, "magnitude", parse_float64, "magnitude"),
            time=_timestamp(data, "datetime", "time"),
        )


@dataclass(frozen=True)
class Ocean(Record):
    id: int = 0
    name: str = ""
    distance: float = 0.0

    @classmethod
    def from_json(cls, data: Any) -> "Ocean":
        data = expect_object(data)
        return cls(
            id=_number(data, "geonameId", parse_uint64, "id"),
            name=_text(data, "name"),
            distance=_number(data, "distance", parse_float64, "distance"),
        )
