"""Line-oriented scanning of tab-separated dump files."""

from __future__ import annotations

import logging
import zipfile
import zlib
from dataclasses import dataclass
from typing import BinaryIO, Callable

from geonames.common.cancel import CancellationToken, raise_if_cancelled
from geonames.common.constants import COLUMN_SEPARATOR, COMMENT_PREFIX, MAX_LINE_BYTES
from geonames.common.errors import GeoNamesError, LineTooLongError, ScanError
from geonames.common.logging import log_warning

RowSink = Callable[[list[str]], None]


@dataclass
class ScanStats:
    lines: int = 0
    rows: int = 0
    rejected: int = 0


def parse_line(text: str, separator: str = COLUMN_SEPARATOR) -> list[str]:
    return text.split(separator)


def _read_line(stream: BinaryIO, line_number: int, max_line_bytes: int) -> bytes:
    try:
        raw = stream.readline(max_line_bytes + 1)
    except (OSError, EOFError, zipfile.BadZipFile, zlib.error) as exc:
        raise ScanError(f"read line {line_number} => {exc}") from exc
    if len(raw) > max_line_bytes and not raw.endswith(b"\n"):
        raise LineTooLongError(f"line {line_number} exceeds {max_line_bytes} bytes")
    return raw


def scan_rows(
    stream: BinaryIO,
    sink: RowSink,
    *,
    logger: logging.Logger,
    token: CancellationToken | None = None,
    max_line_bytes: int = MAX_LINE_BYTES,
    **log_fields: object,
) -> ScanStats:
    """Feeds every data line of ``stream`` to ``sink`` as a list of fields.

    Blank lines and ``#`` comments are skipped. Exceptions raised by the
    sink reject only the current line: they are logged and scanning goes
    on. Read failures, over-long lines and cancellation end the scan.
    """
    stats = ScanStats()
    while True:
        raise_if_cancelled(token)

        raw = _read_line(stream, stats.lines + 1, max_line_bytes)
        if not raw:
            return stats
        stats.lines += 1

        text = raw.decode("utf-8", errors="replace")
        if text.endswith("\n"):
            text = text[:-1]
        if text.endswith("\r"):
            text = text[:-1]

        if not text or text.startswith(COMMENT_PREFIX):
            continue

        try:
            sink(parse_line(text))
        except Exception as exc:
            stats.rejected += 1
            log_warning(
                logger,
                f"skip line {stats.lines}: {exc}",
                event="ROW_REJECTED",
                status="warning",
                line=stats.lines,
                text=text,
                error_code=exc.error_code if isinstance(exc, GeoNamesError) else "UNEXPECTED_ERROR",
                **log_fields,
            )
            continue
        stats.rows += 1
