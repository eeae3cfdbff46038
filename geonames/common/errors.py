"""Domain errors and failure typing."""

from __future__ import annotations

import json


class GeoNamesError(Exception):
    """Base class for client failures.

    Stages are prepended as the error travels up, so the rendered message
    names every step that was in progress (``download file => ...``) while
    the concrete class stays matchable with ``except``.
    """

    error_code = "GEONAMES_ERROR"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message
        self.stages: list[str] = []

    def add_stage(self, stage: str) -> "GeoNamesError":
        self.stages.insert(0, stage)
        return self

    def __str__(self) -> str:
        return " => ".join([*self.stages, self.message])


class ConfigError(GeoNamesError):
    """Raised for invalid or missing configuration."""

    error_code = "CONFIG_ERROR"


class TransportError(GeoNamesError):
    """Raised when the HTTP round trip itself fails."""

    error_code = "TRANSPORT_ERROR"


class UnexpectedStatusCodeError(GeoNamesError):
    error_code = "UNEXPECTED_STATUS_CODE"

    def __init__(self, status_code: int) -> None:
        super().__init__(f"unexpected status code: {status_code}")
        self.status_code = status_code


class FileNotFoundInArchiveError(GeoNamesError):
    error_code = "FILE_NOT_FOUND_IN_ARCHIVE"

    def __init__(self, name: str = "") -> None:
        super().__init__("file not found in archive")
        self.name = name


class ArchiveError(GeoNamesError):
    error_code = "ARCHIVE_ERROR"


class ScanError(GeoNamesError):
    """Raised when the line scanner cannot read the next line."""

    error_code = "SCAN_ERROR"


class LineTooLongError(ScanError):
    error_code = "LINE_TOO_LONG"


class InvalidRowLengthError(GeoNamesError):
    error_code = "INVALID_ROW_LENGTH"

    def __init__(self, expected: int, got: int) -> None:
        super().__init__(f"invalid row length, expected {expected}, got {got}")
        self.expected = expected
        self.got = got


class ValueParseError(GeoNamesError):
    """Raised by the primitive parsers for values that are present but malformed."""

    error_code = "VALUE_PARSE_ERROR"


class FieldParseError(GeoNamesError):
    """Names the record field whose value could not be parsed."""

    error_code = "FIELD_PARSE_ERROR"

    def __init__(self, field: str, cause: Exception) -> None:
        super().__init__(f"parse {field} => {cause}")
        self.field = field
        self.cause = cause


class DecodeResponseError(GeoNamesError):
    error_code = "DECODE_RESPONSE_ERROR"


class ResponseError(GeoNamesError):
    """Error payload returned by the web service.

    Codes follow the service documentation, see ``constants.ERR_CODE_*``.
    """

    error_code = "RESPONSE_ERROR"

    def __init__(self, code: int, message: str) -> None:
        super().__init__(message)
        self.code = code

    @property
    def description(self) -> str:
        quoted = json.dumps(self.message, ensure_ascii=False)
        return f"got error response => code: {self.code}, message: {quoted}"

    def match_code(self, code: int) -> bool:
        return self.code == code

    def __str__(self) -> str:
        return " => ".join([*self.stages, self.description])


class OperationCancelled(GeoNamesError):
    """Default cause reported by a tripped cancellation token."""

    error_code = "CANCELLED"
