"""One-shot source unpacking.

Components fetched as a tarball (cmake, gmp, gdb) are unpacked next to the
other sources the first time a stage needs them. An existing source
directory is left alone.
"""

import logging
import tarfile
from pathlib import Path

from xtc.errors import XtcError

log = logging.getLogger(__name__)

# Compressions tarfile reads natively, in lookup order.
ARCHIVE_SUFFIXES = (".tar.gz", ".tgz", ".tar.xz", ".tar.bz2", ".tar")


class ArchiveError(XtcError):
    pass


def find_archive(archive: Path) -> Path | None:
    """archive if it exists, else a sibling with the same stem and another suffix.

    ``gmp-6.3.0.tar.gz`` also matches ``gmp-6.3.0.tar.xz``.
    """
    if archive.is_file():
        return archive
    stem = archive.name
    for suffix in ARCHIVE_SUFFIXES:
        if stem.endswith(suffix):
            stem = stem[:-len(suffix)]
            break
    for suffix in ARCHIVE_SUFFIXES:
        candidate = archive.with_name(stem + suffix)
        if candidate.is_file():
            return candidate
    return None


def ensure_unpacked(archive: Path, dest: Path) -> bool:
    """Unpack archive so that dest exists. Returns True if it unpacked.

    The archive is expected to contain a single top-level directory named
    like dest (``cmake-3.22.2.tar.gz`` -> ``cmake-3.22.2/``) and is
    extracted into dest's parent.
    """
    if dest.exists():
        return False
    found = find_archive(archive)
    if found is None:
        raise ArchiveError(f"{dest} is missing and no archive at {archive} "
                           f"(tried {', '.join(ARCHIVE_SUFFIXES)})")

    log.info("Extracting %s...", found.name)
    try:
        with tarfile.open(found) as tar:
            tar.extractall(dest.parent, filter="data")
    except (tarfile.TarError, OSError) as e:
        raise ArchiveError(f"cannot extract {found}: {e}") from e

    if not dest.is_dir():
        raise ArchiveError(f"{found.name} did not produce {dest.name}/")
    return True
