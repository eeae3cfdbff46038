"""Dump record types and their row demarshallers.

Column positions follow the upstream dump layout documented at
https://download.geonames.org/export/dump/readme.txt and cannot be inferred
from the files themselves, which carry no header.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Callable, Sequence, TypeVar

from geonames.common.errors import FieldParseError, InvalidRowLengthError, ValueParseError
from geonames.common.parse import (
    parse_bool,
    parse_date,
    parse_float64,
    parse_int64,
    parse_multiple_values,
    parse_position,
    parse_uint64,
)
from geonames.common.values import AdminCode, Position, Record

T = TypeVar("T")


def check_columns(row: Sequence[str], expected: int) -> None:
    if len(row) != expected:
        raise InvalidRowLengthError(expected, len(row))


def parse_field(name: str, parser: Callable[..., T], *values: str) -> T:
    try:
        return parser(*values)
    except ValueParseError as exc:
        raise FieldParseError(name, exc) from exc


@dataclass(frozen=True)
class GeoName(Record):
    id: int
    name: str
    ascii_name: str
    alternate_names: list[str]
    position: Position
    feature_class: str
    feature_code: str
    country_code: str
    alternate_country_codes: list[str]
    admin_code: AdminCode
    population: int
    elevation: int
    digital_elevation_model: int
    timezone: str
    modification_date: date | None

    @classmethod
    def from_row(cls, row: Sequence[str]) -> "GeoName":
        check_columns(row, 19)
        return cls(
            id=parse_field("id", parse_uint64, row[0]),
            name=row[1],
            ascii_name=row[2],
            alternate_names=parse_multiple_values(row[3]),
            position=parse_field("position", parse_position, row[4], row[5]),
            feature_class=row[6],
            feature_code=row[7],
            country_code=row[8],
            alternate_country_codes=parse_multiple_values(row[9]),
            admin_code=AdminCode(first=row[10], second=row[11], third=row[12], fourth=row[13]),
            population=parse_field("population", parse_int64, row[14]),
            elevation=parse_field("elevation", parse_int64, row[15]),
            digital_elevation_model=parse_field("digital_elevation_model", parse_int64, row[16]),
            timezone=row[17],
            modification_date=parse_field("modification_date", parse_date, row[18]),
        )


@dataclass(frozen=True)
class AlternateName(Record):
    id: int
    geoname_id: int
    # iso 639 code, optionally with a country/variant suffix (zh-CN, zh-Hant),
    # or one of the pseudo codes: post, iata, icao, faac, wkdt, link, abbr.
    language: str
    value: str
    preferred: bool
    short: bool
    colloquial: bool
    historic: bool
    period_from: str
    period_to: str

    @classmethod
    def from_row(cls, row: Sequence[str]) -> "AlternateName":
        check_columns(row, 10)
        return cls(
            id=parse_field("id", parse_uint64, row[0]),
            geoname_id=parse_field("geoname_id", parse_uint64, row[1]),
            language=row[2],
            value=row[3],
            preferred=parse_bool(row[4]),
            short=parse_bool(row[5]),
            colloquial=parse_bool(row[6]),
            historic=parse_bool(row[7]),
            period_from=row[8],
            period_to=row[9],
        )


@dataclass(frozen=True)
class Country(Record):
    iso2: str
    iso3: str
    iso_numeric: int
    fips_code: str
    name: str
    capital: str
    area_in_sq_km: float
    population: int
    continent_code: str
    tld: str
    currency_code: str
    currency_name: str
    phone: str
    postal_code_format: str
    postal_code_regex: str
    languages: list[str]
    geoname_id: int
    neighbours: list[str]
    equivalent_fips_code: str

    @classmethod
    def from_row(cls, row: Sequence[str]) -> "Country":
        check_columns(row, 19)
        return cls(
            iso2=row[0],
            iso3=row[1],
            iso_numeric=parse_field("iso_numeric", parse_uint64, row[2]),
            fips_code=row[3],
            name=row[4],
            capital=row[5],
            area_in_sq_km=parse_field("area_in_sq_km", parse_float64, row[6]),
            population=parse_field("population", parse_int64, row[7]),
            continent_code=row[8],
            tld=row[9],
            currency_code=row[10],
            currency_name=row[11],
            phone=row[12],
            postal_code_format=row[13],
            postal_code_regex=row[14],
            languages=parse_multiple_values(row[15]),
            geoname_id=parse_field("geoname_id", parse_uint64, row[16]),
            neighbours=parse_multiple_values(row[17]),
            equivalent_fips_code=row[18],
        )


@dataclass(frozen=True)
class TimeZone(Record):
    country_code: str
    id: str
    # Offsets in hours: 1st of January, 1st of July, and without DST.
    gmt_offset: float
    dst_offset: float
    raw_offset: float

    @classmethod
    def from_row(cls, row: Sequence[str]) -> "TimeZone":
        check_columns(row, 5)
        return cls(
            country_code=row[0],
            id=row[1],
            gmt_offset=parse_field("gmt_offset", parse_float64, row[2]),
            dst_offset=parse_field("dst_offset", parse_float64, row[3]),
            raw_offset=parse_field("raw_offset", parse_float64, row[4]),
        )


@dataclass(frozen=True)
class Feature(Record):
    code: str  # "<class>.<code>", e.g. "P.PPLC"
    name: str
    description: str

    @classmethod
    def from_row(cls, row: Sequence[str]) -> "Feature":
        check_columns(row, 3)
        return cls(code=row[0], name=row[1], description=row[2])

    @property
    def feature_class(self) -> str:
        return self.code.partition(".")[0]

    @property
    def feature_code(self) -> str:
        return self.code.partition(".")[2]


@dataclass(frozen=True)
class Language(Record):
    iso639_1: str
    iso639_2: str
    iso639_3: str
    name: str

    @classmethod
    def from_row(cls, row: Sequence[str]) -> "Language":
        check_columns(row, 4)
        # iso-languagecodes.txt lists ISO 639-3 first.
        return cls(iso639_1=row[2], iso639_2=row[1], iso639_3=row[0], name=row[3])


@dataclass(frozen=True)
class AdminDivision(Record):
    code: str
    name: str
    ascii_name: str
    id: int

    @classmethod
    def from_row(cls, row: Sequence[str]) -> "AdminDivision":
        check_columns(row, 4)
        return cls(
            code=row[0],
            name=row[1],
            ascii_name=row[2],
            id=parse_field("id", parse_uint64, row[3]),
        )


@dataclass(frozen=True)
class AdminCode5(Record):
    id: int
    code: str

    @classmethod
    def from_row(cls, row: Sequence[str]) -> "AdminCode5":
        check_columns(row, 2)
        return cls(id=parse_field("id", parse_uint64, row[0]), code=row[1])


@dataclass(frozen=True)
class UserTag(Record):
    id: int
    value: str

    @classmethod
    def from_row(cls, row: Sequence[str]) -> "UserTag":
        check_columns(row, 2)
        return cls(id=parse_field("id", parse_uint64, row[0]), value=row[1])


@dataclass(frozen=True)
class HierarchyItem(Record):
    parent_id: int
    child_id: int
    type: str = field(default="")

    @classmethod
    def from_row(cls, row: Sequence[str]) -> "HierarchyItem":
        check_columns(row, 3)
        return cls(
            parent_id=parse_field("parent_id", parse_uint64, row[0]),
            child_id=parse_field("child_id", parse_uint64, row[1]),
            type=row[2],
        )


@dataclass(frozen=True)
class GeoNameDeleted(Record):
    id: int
    name: str
    comment: str

    @classmethod
    def from_row(cls, row: Sequence[str]) -> "GeoNameDeleted":
        check_columns(row, 3)
        return cls(id=parse_field("id", parse_uint64, row[0]), name=row[1], comment=row[2])


@dataclass(frozen=True)
class AlternateNameDeleted(Record):
    id: int
    geoname_id: int
    name: str
    comment: str

    @classmethod
    def from_row(cls, row: Sequence[str]) -> "AlternateNameDeleted":
        check_columns(row, 4)
        return cls(
            id=parse_field("id", parse_uint64, row[0]),
            geoname_id=parse_field("geoname_id", parse_uint64, row[1]),
            name=row[2],
            comment=row[3],
        )
