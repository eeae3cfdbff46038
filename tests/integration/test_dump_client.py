from __future__ import annotations

import io
import logging
import zipfile
from pathlib import Path

import pytest
import requests

from geonames.common.cancel import CancellationToken
from geonames.common.config_loader import DownloadSettings
from geonames.common.errors import (
    ArchiveError,
    FileNotFoundInArchiveError,
    LineTooLongError,
    ScanError,
    OperationCancelled,
    TransportError,
    UnexpectedStatusCodeError,
)
from geonames.download import client as client_module
from geonames.download.client import DumpClient

GEONAME_ROW = (
    "5128581\tNew York City\tNew York City\tNYC,New York\t40.71427\t-74.00597\tP\tPPL\tUS\t\tNY\t\t\t\t8804190"
    "\t10\t57\tAmerica/New_York\t2024-07-14"
)


def _zip_bytes(entries: dict[str, bytes]) -> bytes:
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as archive:
        for name, body in entries.items():
            archive.writestr(name, body)
    return buffer.getvalue()


class FakeDownloadResponse:
    def __init__(self, body: bytes, status_code: int = 200, fail_after: int | None = None):
        self.body = body
        self.status_code = status_code
        self.fail_after = fail_after
        self.closed = False

    def iter_content(self, chunk_size: int = 0):
        del chunk_size
        if self.fail_after is not None:
            yield self.body[: self.fail_after]
            raise requests.ConnectionError("connection reset by peer")
        yield self.body

    def close(self):
        self.closed = True


class FakeHttpClient:
    def __init__(self, response: FakeDownloadResponse | None = None, error: Exception | None = None):
        self.response = response
        self.error = error
        self.calls: list[dict] = []

    def get(self, url, **kwargs):
        self.calls.append({"url": url, **kwargs})
        if self.error is not None:
            raise self.error
        return self.response


def _client(http_client: FakeHttpClient, tmp_path: Path) -> DumpClient:
    return DumpClient(
        base_url="https://dump.test/export/dump/",
        http_client=http_client,
        logger=logging.getLogger("tests.dump"),
        temp_dir=str(tmp_path),
    )


@pytest.mark.integration
def test_admin_division_first_happy_path(tmp_path: Path):
    body = b"XX.XY\tFoo1\tFoo2\t1\nXY.YX\tBar1\tBar2\t2\n"
    http_client = FakeHttpClient(FakeDownloadResponse(body))
    records = []

    _client(http_client, tmp_path).admin_division_first(records.append)

    assert [(r.id, r.code, r.name, r.ascii_name) for r in records] == [
        (1, "XX.XY", "Foo1", "Foo2"),
        (2, "XY.YX", "Bar1", "Bar2"),
    ]
    assert http_client.calls[0]["url"] == "https://dump.test/export/dump/admin1CodesASCII.txt"
    assert http_client.calls[0]["stream"] is True
    assert http_client.response.closed
    assert list(tmp_path.iterdir()) == []


@pytest.mark.integration
def test_all_countries_skips_malformed_rows(tmp_path: Path, caplog):
    good = GEONAME_ROW.split("\t")

    def variant(index: int, value: str) -> str:
        row = list(good)
        row[index] = value
        return "\t".join(row)

    lines = [
        variant(0, "invalid"),
        GEONAME_ROW,
        variant(4, "invalid"),
        variant(5, "invalid"),
        variant(14, "invalid"),
        variant(15, "invalid"),
        variant(16, "invalid"),
        variant(18, "invalid"),
        "\t".join(good[:10]),
        GEONAME_ROW.replace("5128581", "5128582", 1),
    ]
    body = _zip_bytes({"allCountries.txt": ("\n".join(lines) + "\n").encode("utf-8")})
    records = []
    caplog.set_level(logging.WARNING, logger="tests.dump")

    _client(FakeHttpClient(FakeDownloadResponse(body)), tmp_path).all_countries(records.append)

    assert [record.id for record in records] == [5128581, 5128582]
    assert [record.getMessage() for record in caplog.records] == [
        'skip line 1: parse id => invalid uint64 syntax: "invalid"',
        'skip line 3: parse position => latitude => invalid float64 syntax: "invalid"',
        'skip line 4: parse position => longitude => invalid float64 syntax: "invalid"',
        'skip line 5: parse population => invalid int64 syntax: "invalid"',
        'skip line 6: parse elevation => invalid int64 syntax: "invalid"',
        'skip line 7: parse digital_elevation_model => invalid int64 syntax: "invalid"',
        'skip line 8: parse modification_date => invalid date "invalid", expected layout YYYY-MM-DD',
        "skip line 9: invalid row length, expected 19, got 10",
    ]
    assert {record.event for record in caplog.records} == {"ROW_REJECTED"}
    assert {record.operation for record in caplog.records} == {"all_countries"}


@pytest.mark.integration
def test_cancellation_after_download_removes_temp_file(tmp_path: Path):
    token = CancellationToken()
    response = FakeDownloadResponse(b"XX.XY\tFoo1\tFoo2\t1\n")

    class CancellingHttpClient(FakeHttpClient):
        def get(self, url, **kwargs):
            result = super().get(url, **kwargs)
            original_close = result.close

            def close():
                original_close()
                token.cancel()

            result.close = close
            return result

    records = []
    with pytest.raises(OperationCancelled) as exc_info:
        _client(CancellingHttpClient(response), tmp_path).admin_division_first(records.append, token=token)

    assert exc_info.value is token.cause
    assert str(exc_info.value) == "operation cancelled"
    assert records == []
    assert list(tmp_path.iterdir()) == []


@pytest.mark.integration
def test_cancelled_token_skips_http(tmp_path: Path):
    token = CancellationToken()
    cause = RuntimeError("shutdown")
    token.cancel(cause)
    http_client = FakeHttpClient(FakeDownloadResponse(b""))

    with pytest.raises(RuntimeError) as exc_info:
        _client(http_client, tmp_path).hierarchy(lambda _record: None, token=token)

    assert exc_info.value is cause
    assert http_client.calls == []


@pytest.mark.integration
def test_unexpected_status_code(tmp_path: Path):
    response = FakeDownloadResponse(b"not found", status_code=404)

    with pytest.raises(UnexpectedStatusCodeError) as exc_info:
        _client(FakeHttpClient(response), tmp_path).country_info(lambda _record: None)

    assert str(exc_info.value) == "download file => unexpected status code: 404"
    assert exc_info.value.status_code == 404
    assert response.closed
    assert list(tmp_path.iterdir()) == []


@pytest.mark.integration
def test_transport_error_is_wrapped(tmp_path: Path):
    http_client = FakeHttpClient(error=requests.ConnectionError("dns failure"))

    with pytest.raises(TransportError) as exc_info:
        _client(http_client, tmp_path).user_tags(lambda _record: None)

    assert str(exc_info.value) == "download file => http client do => dns failure"
    assert isinstance(exc_info.value.__cause__, requests.ConnectionError)


@pytest.mark.integration
def test_copy_error_is_wrapped(tmp_path: Path):
    response = FakeDownloadResponse(b"1\t2\tADM\n", fail_after=3)

    with pytest.raises(TransportError) as exc_info:
        _client(FakeHttpClient(response), tmp_path).hierarchy(lambda _record: None)

    assert str(exc_info.value).startswith("download file => copy file content => ")
    assert response.closed


@pytest.mark.integration
def test_missing_archive_entry(tmp_path: Path):
    body = _zip_bytes({"readme.txt": b"hello\n"})

    with pytest.raises(FileNotFoundInArchiveError) as exc_info:
        _client(FakeHttpClient(FakeDownloadResponse(body)), tmp_path).by_country("us", lambda _record: None)

    assert str(exc_info.value) == 'parse file "US.txt" in archive => file not found in archive'


@pytest.mark.integration
def test_corrupt_archive(tmp_path: Path):
    with pytest.raises(ArchiveError) as exc_info:
        _client(FakeHttpClient(FakeDownloadResponse(b"garbage")), tmp_path).no_country(lambda _record: None)

    assert str(exc_info.value).startswith('parse file "no-country.txt" in archive => open zip archive => ')


@pytest.mark.integration
def test_line_too_long_is_terminal(tmp_path: Path):
    body = _zip_bytes({"userTags.txt": b"1\tabc\n" + b"9" * 64 + b"\n"})
    client = _client(FakeHttpClient(FakeDownloadResponse(body)), tmp_path)
    client.max_line_bytes = 32
    records = []

    with pytest.raises(LineTooLongError) as exc_info:
        client.user_tags(records.append)

    assert str(exc_info.value) == 'parse file "userTags.txt" in archive => parse file => line 2 exceeds 32 bytes'
    assert [record.value for record in records] == ["abc"]


@pytest.mark.integration
def test_time_zones_and_languages_skip_header(tmp_path: Path):
    zones = b"CountryCode\tTimeZoneId\tGMT offset 1. Jan 2024\tDST offset 1. Jul 2024\trawOffset\nAD\tEurope/Andorra\t1.0\t2.0\t1.0\n"
    records = []
    _client(FakeHttpClient(FakeDownloadResponse(zones)), tmp_path).time_zones(records.append)
    assert [(r.country_code, r.id, r.dst_offset) for r in records] == [("AD", "Europe/Andorra", 2.0)]

    languages = b"ISO 639-3\tISO 639-2\tISO 639-1\tLanguage Name\nfra\tfre\tfr\tFrench\n"
    http_client = FakeHttpClient(FakeDownloadResponse(languages))
    parsed = []
    _client(http_client, tmp_path).languages(parsed.append)
    assert [(r.iso639_1, r.name) for r in parsed] == [("fr", "French")]
    assert http_client.calls[0]["url"].endswith("/iso-languagecodes.txt")


@pytest.mark.integration
def test_delta_files_use_yesterday(monkeypatch, tmp_path: Path):
    monkeypatch.setattr(client_module, "yesterday_iso", lambda: "2024-02-29")
    http_client = FakeHttpClient(FakeDownloadResponse(b"3\tOld\tduplicate\n"))
    records = []

    _client(http_client, tmp_path).deletes(records.append)

    assert http_client.calls[0]["url"].endswith("/deletes-2024-02-29.txt")
    assert records[0].comment == "duplicate"


@pytest.mark.integration
def test_file_names_per_operation(tmp_path: Path):
    cases = [
        (lambda c, s: c.cities500(s), "cities500.zip"),
        (lambda c, s: c.cities(15000, s), "cities15000.zip"),
        (lambda c, s: c.alternate_names(s), "alternateNamesV2.zip"),
        (lambda c, s: c.admin_division_second(s), "admin2Codes.txt"),
        (lambda c, s: c.admin_division_fifth(s), "adminCode5.zip"),
        (lambda c, s: c.feature_codes("en", s), "featureCodes_en.txt"),
    ]
    for call, file_name in cases:
        entry = file_name.replace(".zip", ".txt")
        body = _zip_bytes({entry: b""}) if file_name.endswith(".zip") else b""
        http_client = FakeHttpClient(FakeDownloadResponse(body))
        call(_client(http_client, tmp_path), lambda _record: None)
        assert http_client.calls[0]["url"] == f"https://dump.test/export/dump/{file_name}"


def test_cities_rejects_unknown_size(tmp_path: Path):
    with pytest.raises(ValueError):
        _client(FakeHttpClient(), tmp_path).cities(250, lambda _record: None)


def _corrupt_deflated_zip(entry_name: str, body: bytes) -> bytes:
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED) as archive:
        archive.writestr(entry_name, body)
    with zipfile.ZipFile(io.BytesIO(buffer.getvalue())) as archive:
        info = archive.getinfo(entry_name)
    data = bytearray(buffer.getvalue())
    start = info.header_offset + 30 + len(entry_name.encode("utf-8"))
    middle = start + info.compress_size // 2
    for offset in range(middle - 200, middle + 200):
        data[offset] ^= 0xFF
    return bytes(data)


@pytest.mark.integration
def test_corrupt_deflate_stream_is_scan_error(tmp_path: Path):
    body = "".join(f"{i}\ttag-{i % 97}-{i * 7919 % 10007}\n" for i in range(20000)).encode("utf-8")
    archive = _corrupt_deflated_zip("userTags.txt", body)

    with pytest.raises(ScanError) as exc_info:
        _client(FakeHttpClient(FakeDownloadResponse(archive)), tmp_path).user_tags(lambda _record: None)

    assert str(exc_info.value).startswith('parse file "userTags.txt" in archive => parse file => read line ')
    assert list(tmp_path.iterdir()) == []


def test_default_and_settings_timeouts_agree():
    default = DumpClient()
    configured = DumpClient.from_settings(DownloadSettings())
    assert default.http_client.timeout == configured.http_client.timeout
