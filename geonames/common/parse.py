"""Primitive parsers shared by the dump rows and the web-service payloads.

An empty string always parses to the zero value of the target type. Any
other input must match the strict syntax or a ``ValueParseError`` is raised.
"""

from __future__ import annotations

import re
from datetime import date, datetime, timezone
from typing import Any

from geonames.common.errors import ValueParseError
from geonames.common.values import Position

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1
UINT64_MAX = 2**64 - 1

DATE_LAYOUT = "%Y-%m-%d"
DATETIME_LAYOUT = "%Y-%m-%d %H:%M:%S"

_INT_RE = re.compile(r"[+-]?[0-9]+")
_UINT_RE = re.compile(r"\+?[0-9]+")
_FLOAT_RE = re.compile(r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")
_DATE_RE = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")
_DATETIME_RE = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2} [0-9]{2}:[0-9]{2}:[0-9]{2}")


def parse_int64(given: str) -> int:
    if given == "":
        return 0
    if not _INT_RE.fullmatch(given):
        raise ValueParseError(f'invalid int64 syntax: "{given}"')
    parsed = int(given)
    if not INT64_MIN <= parsed <= INT64_MAX:
        raise ValueParseError(f'int64 value out of range: "{given}"')
    return parsed


def parse_uint64(given: str) -> int:
    if given == "":
        return 0
    if not _UINT_RE.fullmatch(given):
        raise ValueParseError(f'invalid uint64 syntax: "{given}"')
    parsed = int(given)
    if parsed > UINT64_MAX:
        raise ValueParseError(f'uint64 value out of range: "{given}"')
    return parsed


def parse_float64(given: str) -> float:
    if given == "":
        return 0.0
    if not _FLOAT_RE.fullmatch(given):
        raise ValueParseError(f'invalid float64 syntax: "{given}"')
    return float(given)


def parse_bool(given: str) -> bool:
    return given == "1"


def parse_date(given: str) -> date | None:
    if given == "":
        return None
    if not _DATE_RE.fullmatch(given):
        raise ValueParseError(f'invalid date "{given}", expected layout YYYY-MM-DD')
    try:
        return datetime.strptime(given, DATE_LAYOUT).date()
    except ValueError as exc:
        raise ValueParseError(f'invalid date "{given}", expected layout YYYY-MM-DD') from exc


def parse_datetime(given: str, tz: Any = timezone.utc) -> datetime | None:
    if given == "":
        return None
    if not _DATETIME_RE.fullmatch(given):
        raise ValueParseError(f'invalid datetime "{given}", expected layout YYYY-MM-DD HH:MM:SS')
    try:
        return datetime.strptime(given, DATETIME_LAYOUT).replace(tzinfo=tz)
    except ValueError as exc:
        raise ValueParseError(f'invalid datetime "{given}", expected layout YYYY-MM-DD HH:MM:SS') from exc


def parse_multiple_values(given: str) -> list[str]:
    return [item.strip() for item in given.split(",") if item.strip()]


def parse_number(given: Any, parser) -> Any:
    """Accepts a value the service sends either as a JSON number or as a string."""
    if given is None:
        return parser("")
    if isinstance(given, bool):
        raise ValueParseError(f"unexpected boolean value: {given}")
    if isinstance(given, (int, float)):
        return parser(_number_text(given))
    if isinstance(given, str):
        return parser(given)
    raise ValueParseError(f"unexpected value type {type(given).__name__}: {given!r}")


def _number_text(given: int | float) -> str:
    if isinstance(given, float):
        if given.is_integer() and abs(given) < 1e16:
            return str(int(given))
        return repr(given)
    return str(given)


def parse_position(latitude: Any, longitude: Any) -> Position:
    try:
        lat = parse_number(latitude, parse_float64)
    except ValueParseError as exc:
        exc.add_stage("latitude")
        raise
    try:
        lng = parse_number(longitude, parse_float64)
    except ValueParseError as exc:
        exc.add_stage("longitude")
        raise
    return Position(latitude=lat, longitude=lng)
