"""Query-string encoding of request dataclasses.

Each dataclass field names its query key in ``metadata["query"]``. Zero
values are left out so unused parameters never reach the service:

- ``str``: set when non-empty
- ``int``: set when non-zero, decimal form
- ``float``: set when non-zero, shortest round-trip decimal form
- ``bool``: ``true`` when set, omitted otherwise
- ``list`` / ``tuple``: one value per element, omitted when empty
- ``date`` / ``datetime``: ``YYYY-MM-DD``, omitted when ``None``
- ``",dive"``: a nested dataclass whose fields are merged into the same map

A key of ``"-"`` or no key at all skips the field, as does any other type.
"""

from __future__ import annotations

import dataclasses
from datetime import date, datetime
from decimal import Decimal
from typing import Any

DIVE = ",dive"
IGNORE = "-"

QueryValues = dict[str, list[str]]


def encode_query(request: Any, values: QueryValues | None = None) -> QueryValues:
    out: QueryValues = {} if values is None else values
    if request is None or not dataclasses.is_dataclass(request):
        return out

    for field in dataclasses.fields(request):
        key = field.metadata.get("query", "")
        if not key or key == IGNORE:
            continue
        value = getattr(request, field.name)
        if key == DIVE:
            if dataclasses.is_dataclass(value) and not isinstance(value, type):
                encode_query(value, out)
            continue
        _encode_value(out, key, value)
    return out


def _encode_value(out: QueryValues, key: str, value: Any) -> None:
    if isinstance(value, str):
        if value:
            out[key] = [value]
    elif isinstance(value, bool):
        if value:
            out[key] = ["true"]
    elif isinstance(value, int):
        if value != 0:
            out[key] = [str(value)]
    elif isinstance(value, float):
        if value != 0:
            out[key] = [format_float(value)]
    elif isinstance(value, (list, tuple)):
        for item in value:
            out.setdefault(key, []).append(str(item))
    elif isinstance(value, (date, datetime)):
        out[key] = [value.strftime("%Y-%m-%d")]


def format_float(value: float) -> str:
    text = format(Decimal(repr(value)), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text
