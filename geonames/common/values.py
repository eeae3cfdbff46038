"""Value objects shared by the dump records and the web-service results."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any


class Record:
    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class Position(Record):
    """Latitude and longitude in WGS84 decimal degrees."""

    latitude: float = field(default=0.0, metadata={"query": "lat"})
    longitude: float = field(default=0.0, metadata={"query": "lng"})


@dataclass(frozen=True)
class BoundingBox(Record):
    east: float = field(default=0.0, metadata={"query": "east"})
    west: float = field(default=0.0, metadata={"query": "west"})
    north: float = field(default=0.0, metadata={"query": "north"})
    south: float = field(default=0.0, metadata={"query": "south"})


@dataclass(frozen=True)
class AdminCode(Record):
    """Administrative subdivision codes, first (admin1) to fifth level."""

    first: str = field(default="", metadata={"query": "adminCode1"})
    second: str = field(default="", metadata={"query": "adminCode2"})
    third: str = field(default="", metadata={"query": "adminCode3"})
    fourth: str = field(default="", metadata={"query": "adminCode4"})
    fifth: str = field(default="", metadata={"query": "adminCode5"})


@dataclass(frozen=True)
class AdminDivision(Record):
    code: str = ""
    name: str = ""
    id: int = 0


@dataclass(frozen=True)
class AdminDivisions(Record):
    first: AdminDivision = field(default_factory=AdminDivision)
    second: AdminDivision = field(default_factory=AdminDivision)
    third: AdminDivision = field(default_factory=AdminDivision)
    fourth: AdminDivision = field(default_factory=AdminDivision)
    fifth: AdminDivision = field(default_factory=AdminDivision)


@dataclass(frozen=True)
class AdminLevelCode(Record):
    level: int = 0
    type: str = ""
    code: str = ""


@dataclass(frozen=True)
class Country(Record):
    code: str = ""
    name: str = ""
    id: int = 0


@dataclass(frozen=True)
class Continent(Record):
    code: str = ""
    name: str = ""


@dataclass(frozen=True)
class Timezone(Record):
    name: str = ""
    gmt_offset: float = 0.0
    dst_offset: float = 0.0


@dataclass(frozen=True)
class AlternateNameValue(Record):
    language: str = ""
    value: str = ""
