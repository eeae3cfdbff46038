"""Client for the bulk dump files published at download.geonames.org."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Protocol, TypeVar

import requests

from geonames.common.cancel import CancellationToken, raise_if_cancelled
from geonames.common.config_loader import DownloadSettings
from geonames.common.constants import (
    CITIES_SIZES,
    DOWNLOAD_CHUNK_BYTES,
    DUMP_BASE_URL,
    DUMP_TIMEOUT_SECONDS,
    MAX_LINE_BYTES,
)
from geonames.common.errors import GeoNamesError, TransportError, UnexpectedStatusCodeError
from geonames.common.fs import staged_file
from geonames.common.http import HttpClient, RetryConfig, TimeoutConfig, normalize_base_url
from geonames.common.logging import log_event
from geonames.common.time_utils import yesterday_iso
from geonames.download.archive import entry_name_for, open_archive_entry
from geonames.download.lines import ScanStats, scan_rows
from geonames.download.records import (
    AdminCode5,
    AdminDivision,
    AlternateName,
    AlternateNameDeleted,
    Country,
    Feature,
    GeoName,
    GeoNameDeleted,
    HierarchyItem,
    Language,
    TimeZone,
    UserTag,
)

R = TypeVar("R")
Sink = Callable[[R], None]


class RowRecord(Protocol):
    @classmethod
    def from_row(cls, row: list[str]): ...


class DumpClient:
    """Streams the dump files record by record into a caller-supplied sink.

    Each call downloads the file to a temp file, opens the ``.txt`` entry
    when the file is a zip archive, and hands every parsed record to
    ``sink`` in file order. Malformed rows are logged and skipped.
    """

    def __init__(
        self,
        *,
        base_url: str = DUMP_BASE_URL,
        http_client: HttpClient | None = None,
        logger: logging.Logger | None = None,
        max_line_bytes: int = MAX_LINE_BYTES,
        temp_dir: str | None = None,
    ) -> None:
        self._base_url = normalize_base_url(base_url)
        self.http_client = http_client or HttpClient(timeout=TimeoutConfig.total(DUMP_TIMEOUT_SECONDS))
        self.logger = logger or logging.getLogger("geonames.download")
        self.max_line_bytes = max_line_bytes
        self.temp_dir = temp_dir

    @classmethod
    def from_settings(cls, settings: DownloadSettings, *, logger: logging.Logger | None = None) -> "DumpClient":
        http_client = HttpClient(
            timeout=TimeoutConfig.total(settings.timeout_seconds),
            retry=RetryConfig(max_attempts=settings.retry_attempts),
        )
        return cls(
            base_url=settings.base_url,
            http_client=http_client,
            logger=logger,
            max_line_bytes=settings.max_line_bytes,
        )

    @property
    def base_url(self) -> str:
        return self._base_url

    def url(self, file_name: str) -> str:
        return f"{self._base_url}/{file_name}"

    # Toponyms

    def all_countries(self, sink: Sink[GeoName], *, token: CancellationToken | None = None) -> None:
        self._stream("all_countries", "allCountries.zip", GeoName, sink, token)

    def by_country(self, code: str, sink: Sink[GeoName], *, token: CancellationToken | None = None) -> None:
        self._stream("by_country", f"{code.upper()}.zip", GeoName, sink, token)

    def no_country(self, sink: Sink[GeoName], *, token: CancellationToken | None = None) -> None:
        self._stream("no_country", "no-country.zip", GeoName, sink, token)

    def cities(self, size: int, sink: Sink[GeoName], *, token: CancellationToken | None = None) -> None:
        if size not in CITIES_SIZES:
            raise ValueError(f"Unsupported cities size {size}, expected one of {CITIES_SIZES}")
        self._stream("cities", f"cities{size}.zip", GeoName, sink, token)

    def cities500(self, sink: Sink[GeoName], *, token: CancellationToken | None = None) -> None:
        self.cities(500, sink, token=token)

    def cities1000(self, sink: Sink[GeoName], *, token: CancellationToken | None = None) -> None:
        self.cities(1000, sink, token=token)

    def cities5000(self, sink: Sink[GeoName], *, token: CancellationToken | None = None) -> None:
        self.cities(5000, sink, token=token)

    def cities15000(self, sink: Sink[GeoName], *, token: CancellationToken | None = None) -> None:
        self.cities(15000, sink, token=token)

    def modifications(self, sink: Sink[GeoName], *, token: CancellationToken | None = None) -> None:
        self._stream("modifications", f"modifications-{yesterday_iso()}.txt", GeoName, sink, token)

    def deletes(self, sink: Sink[GeoNameDeleted], *, token: CancellationToken | None = None) -> None:
        self._stream("deletes", f"deletes-{yesterday_iso()}.txt", GeoNameDeleted, sink, token)

    # Alternate names

    def alternate_names(self, sink: Sink[AlternateName], *, token: CancellationToken | None = None) -> None:
        self._stream("alternate_names", "alternateNamesV2.zip", AlternateName, sink, token)

    def alternate_names_modifications(
        self, sink: Sink[AlternateName], *, token: CancellationToken | None = None
    ) -> None:
        file_name = f"alternateNamesModifications-{yesterday_iso()}.txt"
        self._stream("alternate_names_modifications", file_name, AlternateName, sink, token)

    def alternate_names_deletes(
        self, sink: Sink[AlternateNameDeleted], *, token: CancellationToken | None = None
    ) -> None:
        file_name = f"alternateNamesDeletes-{yesterday_iso()}.txt"
        self._stream("alternate_names_deletes", file_name, AlternateNameDeleted, sink, token)

    # Reference data

    def hierarchy(self, sink: Sink[HierarchyItem], *, token: CancellationToken | None = None) -> None:
        self._stream("hierarchy", "hierarchy.zip", HierarchyItem, sink, token)

    def user_tags(self, sink: Sink[UserTag], *, token: CancellationToken | None = None) -> None:
        self._stream("user_tags", "userTags.zip", UserTag, sink, token)

    def admin_division_first(self, sink: Sink[AdminDivision], *, token: CancellationToken | None = None) -> None:
        self._stream("admin_division_first", "admin1CodesASCII.txt", AdminDivision, sink, token)

    def admin_division_second(self, sink: Sink[AdminDivision], *, token: CancellationToken | None = None) -> None:
        self._stream("admin_division_second", "admin2Codes.txt", AdminDivision, sink, token)

    def admin_division_fifth(self, sink: Sink[AdminCode5], *, token: CancellationToken | None = None) -> None:
        self._stream("admin_division_fifth", "adminCode5.zip", AdminCode5, sink, token)

    def country_info(self, sink: Sink[Country], *, token: CancellationToken | None = None) -> None:
        self._stream("country_info", "countryInfo.txt", Country, sink, token)

    def time_zones(self, sink: Sink[TimeZone], *, token: CancellationToken | None = None) -> None:
        self._stream("time_zones", "timeZones.txt", TimeZone, sink, token, skip_header=True)

    def feature_codes(self, language: str, sink: Sink[Feature], *, token: CancellationToken | None = None) -> None:
        self._stream("feature_codes", f"featureCodes_{language}.txt", Feature, sink, token)

    def languages(self, sink: Sink[Language], *, token: CancellationToken | None = None) -> None:
        self._stream("languages", "iso-languagecodes.txt", Language, sink, token, skip_header=True)

    # Pipeline

    def _stream(
        self,
        operation: str,
        file_name: str,
        record_type: type[RowRecord],
        sink: Sink,
        token: CancellationToken | None,
        *,
        skip_header: bool = False,
    ) -> None:
        fields = {"client": "download", "operation": operation, "file": file_name}
        raise_if_cancelled(token)

        with staged_file(file_name, self.temp_dir) as staged:
            try:
                self._download(file_name, staged, fields)
            except GeoNamesError as exc:
                exc.add_stage("download file")
                raise

            on_row = _record_sink(record_type, sink, skip_header=skip_header)
            if file_name.endswith(".zip"):
                entry_name = entry_name_for(file_name)
                try:
                    with open_archive_entry(staged, entry_name) as stream:
                        stats = self._parse(stream, on_row, token, fields)
                except GeoNamesError as exc:
                    if not _is_cause(exc, token):
                        exc.add_stage(f'parse file "{entry_name}" in archive')
                    raise
            else:
                with staged.open("rb") as stream:
                    stats = self._parse(stream, on_row, token, fields)

        log_event(
            self.logger,
            f"parsed {stats.rows} rows from {file_name}, rejected {stats.rejected}",
            event="PARSE_END",
            status="ok" if not stats.rejected else "partial",
            rows=stats.rows,
            **fields,
        )

    def _download(self, file_name: str, target: Path, fields: dict) -> None:
        url = self.url(file_name)
        log_event(self.logger, f"download {url}", event="DOWNLOAD_START", status="ok", **fields)
        try:
            response = self.http_client.get(url, stream=True)
        except requests.RequestException as exc:
            raise TransportError(str(exc)).add_stage("http client do") from exc

        written = 0
        try:
            if response.status_code != 200:
                raise UnexpectedStatusCodeError(response.status_code)
            with target.open("wb") as f:
                try:
                    for chunk in response.iter_content(chunk_size=DOWNLOAD_CHUNK_BYTES):
                        if chunk:
                            f.write(chunk)
                            written += len(chunk)
                except (requests.RequestException, OSError) as exc:
                    raise TransportError(str(exc)).add_stage("copy file content") from exc
        finally:
            response.close()

        log_event(
            self.logger,
            f"downloaded {written} bytes from {url}",
            event="DOWNLOAD_END",
            status="ok",
            **fields,
        )

    def _parse(self, stream, on_row, token: CancellationToken | None, fields: dict) -> ScanStats:
        try:
            return scan_rows(
                stream,
                on_row,
                logger=self.logger,
                token=token,
                max_line_bytes=self.max_line_bytes,
                **fields,
            )
        except GeoNamesError as exc:
            if not _is_cause(exc, token):
                exc.add_stage("parse file")
            raise


def _is_cause(exc: BaseException, token: CancellationToken | None) -> bool:
    return token is not None and exc is token.cause


def _record_sink(record_type: type[RowRecord], sink: Sink, *, skip_header: bool) -> Callable[[list[str]], None]:
    header_pending = skip_header

    def on_row(row: list[str]) -> None:
        nonlocal header_pending
        if header_pending:
            header_pending = False
            return
        sink(record_type.from_row(row))

    return on_row
