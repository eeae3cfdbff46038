import io
import json
import logging
from datetime import datetime
from pathlib import Path

from geonames.common.fs import staged_file, write_json_line
from geonames.common.logging import JsonLineFormatter, build_logger, log_event
from geonames.common.time_utils import utc_timestamp_iso, yesterday_iso


def test_yesterday_iso_uses_previous_day():
    assert yesterday_iso(datetime(2024, 3, 1, 0, 30)) == "2024-02-29"
    assert len(yesterday_iso()) == len("2024-02-29")


def test_utc_timestamp_iso_is_aware():
    assert utc_timestamp_iso().endswith("+00:00")


def test_staged_file_is_removed_on_exit(tmp_path: Path):
    with staged_file("allCountries.zip", str(tmp_path)) as path:
        assert path.name.endswith("allCountries.zip")
        path.write_bytes(b"data")
    assert not path.exists()


def test_staged_file_is_removed_on_error(tmp_path: Path):
    try:
        with staged_file("US.zip", str(tmp_path)) as path:
            raise RuntimeError("boom")
    except RuntimeError:
        pass
    assert not path.exists()
    assert list(tmp_path.iterdir()) == []


def test_write_json_line_renders_dates():
    out = io.StringIO()
    write_json_line(out, {"b": 1, "a": datetime(2024, 3, 1).date()})
    assert out.getvalue() == '{"a": "2024-03-01", "b": 1}\n'


def test_json_line_formatter_schema():
    record = logging.LogRecord("geonames", logging.INFO, __file__, 1, "parsed 2 rows", None, None)
    record.event = "PARSE_END"
    record.rows = 2
    payload = json.loads(JsonLineFormatter().format(record))

    assert payload["message"] == "parsed 2 rows"
    assert payload["event"] == "PARSE_END"
    assert payload["rows"] == 2
    assert payload["error_code"] is None
    assert "text" not in payload


def test_build_logger_writes_file(tmp_path: Path):
    log_path = tmp_path / "logs" / "geonames.jsonl"
    logger = build_logger("geonames.test", level="info", log_path=log_path)
    log_event(logger, "hello", event="TEST", status="ok")
    for handler in logger.handlers:
        handler.flush()

    line = log_path.read_text(encoding="utf-8").strip()
    assert json.loads(line)["event"] == "TEST"
    logger.handlers.clear()
