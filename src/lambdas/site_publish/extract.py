# src/lambdas/site_publish/extract.py
"""
Zip extraction for the publish stage.

Entries are walked one at a time in archive order. Only entries under the
configured source directory are materialized; everything else is skipped
without touching the disk. Each file entry is streamed from the archive to
a mirrored path under the staging directory.
"""
import logging
import lzma
import posixpath
import shutil
import zipfile
import zlib
from pathlib import Path
from typing import Iterator, List

from .errors import ExtractionError
from .models import ExtractedFile

logger = logging.getLogger(__name__)

CHUNK_SIZE = 256 * 1024


def matches_prefix(name: str, prefix: str) -> bool:
    """An empty prefix matches everything; otherwise the name must live under `prefix/`."""
    if not prefix:
        return True
    return name.startswith(prefix + "/")


def iter_entries(archive: zipfile.ZipFile) -> Iterator[zipfile.ZipInfo]:
    """
    Yield entries in archive order. The zip central directory (names and
    sizes only) is read when the archive is opened; entry content is only
    decompressed when the caller opens that entry.
    """
    for info in archive.infolist():
        yield info


def _staging_target(staging_dir: Path, name: str) -> Path:
    normalized = posixpath.normpath(name)
    if name.startswith("/") or normalized == ".." or normalized.startswith("../"):
        raise ExtractionError(f"entry '{name}' escapes the staging directory")
    return staging_dir.joinpath(*normalized.split("/"))


def _write_entry(archive: zipfile.ZipFile, info: zipfile.ZipInfo, target: Path) -> None:
    target.parent.mkdir(parents=True, exist_ok=True)
    with archive.open(info) as src, open(target, "wb") as dst:
        shutil.copyfileobj(src, dst, CHUNK_SIZE)


def extract_subtree(archive_path: Path, prefix: str, staging_dir: Path) -> List[ExtractedFile]:
    """
    Extract every entry of the zip at archive_path that sits under `prefix`
    into staging_dir. Returns the staged files in archive order, keyed by
    their archive path (prefix included). Any failure aborts the extraction.
    """
    staging_dir = Path(staging_dir)
    logger.info("Unzipping %s (source directory: %r)", archive_path, prefix or "<all>")
    files: List[ExtractedFile] = []
    try:
        with zipfile.ZipFile(archive_path) as archive:
            for info in iter_entries(archive):
                name = info.filename
                if not matches_prefix(name, prefix):
                    logger.debug("  [X] Skipping: %s", name)
                    continue

                target = _staging_target(staging_dir, name)
                if info.is_dir():
                    target.mkdir(parents=True, exist_ok=True)
                    continue

                logger.info("  [+] Unzipping: %s", name)
                _write_entry(archive, info, target)
                files.append(ExtractedFile(key=name, path=target))
    except ExtractionError:
        raise
    except (zipfile.BadZipFile, zlib.error, lzma.LZMAError, EOFError, RuntimeError, OSError) as e:
        logger.error("Extraction of %s failed: %s", archive_path, e)
        raise ExtractionError(f"cannot extract {archive_path}", e) from e

    logger.info("Extracted %d file(s)", len(files))
    return files
