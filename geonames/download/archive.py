"""Access to the text entry inside a downloaded dump archive."""

from __future__ import annotations

import zipfile
from contextlib import contextmanager
from pathlib import Path
from typing import BinaryIO, Iterator

from geonames.common.errors import ArchiveError, FileNotFoundInArchiveError


def entry_name_for(file_name: str) -> str:
    """``allCountries.zip`` is distributed with a single ``allCountries.txt`` inside."""
    return file_name.replace(".zip", ".txt", 1)


@contextmanager
def open_archive_entry(archive_path: Path, entry_name: str) -> Iterator[BinaryIO]:
    try:
        archive = zipfile.ZipFile(archive_path)
    except (zipfile.BadZipFile, OSError) as exc:
        raise ArchiveError(str(exc)).add_stage("open zip archive") from exc

    with archive:
        # First match in central directory order, case-sensitive.
        target = next((info for info in archive.infolist() if info.filename == entry_name), None)
        if target is None:
            raise FileNotFoundInArchiveError(entry_name)
        try:
            entry = archive.open(target)
        except (zipfile.BadZipFile, NotImplementedError, RuntimeError) as exc:
            raise ArchiveError(str(exc)).add_stage("open file from archive") from exc
        with entry:
            yield entry
