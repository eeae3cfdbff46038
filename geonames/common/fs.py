"""Filesystem helpers."""

from __future__ import annotations

import json
import os
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import IO, Any, Iterator


def ensure_dir(path: Path) -> None:
    path.mkdir(parents=True, exist_ok=True)


def read_yaml(path: Path):
    import yaml

    with path.open("r", encoding="utf-8") as f:
        return yaml.safe_load(f)


@contextmanager
def staged_file(file_name: str, directory: str | None = None) -> Iterator[Path]:
    """Yields a fresh, uniquely named temp file that is removed on exit."""
    fd, name = tempfile.mkstemp(suffix=file_name, dir=directory)
    os.close(fd)
    path = Path(name)
    try:
        yield path
    finally:
        path.unlink(missing_ok=True)


def write_json_line(stream: IO[str], payload: Any) -> None:
    stream.write(json.dumps(payload, ensure_ascii=False, sort_keys=True, default=str))
    stream.write("\n")
