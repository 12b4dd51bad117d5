"""Infrastructure: unpack one archive into a throwaway staging directory.

Rules
-----
* Exactly one staging directory exists per archive being processed.
* The directory is removed on every exit path, including failures
  raised while unpacking or by the caller's ``with`` body.
* No ``print()`` — callers handle operator-facing output.
"""

from __future__ import annotations

import logging
import shutil
import tarfile
import tempfile
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from lcmap_data.exceptions import StagingError

logger = logging.getLogger(__name__)

STAGING_PREFIX = "lcmap-data-"


def _check_member(member: tarfile.TarInfo, root: Path) -> None:
    """Reject members (or link targets) that resolve outside *root*."""
    target = (root / member.name).resolve()
    if not target.is_relative_to(root):
        raise StagingError(f"Archive member escapes the staging directory: {member.name}")

    if member.issym():
        link_target = (target.parent / member.linkname).resolve()
    elif member.islnk():
        link_target = (root / member.linkname).resolve()
    else:
        return
    if not link_target.is_relative_to(root):
        raise StagingError(
            f"Archive link {member.name} points outside the staging directory: {member.linkname}"
        )


def _extract_tar(source: Path, staging_dir: Path) -> None:
    """Extract a tar archive after checking every member stays inside *staging_dir*."""
    root = staging_dir.resolve()
    try:
        with tarfile.open(source) as tar:
            members = tar.getmembers()
            for member in members:
                _check_member(member, root)
            if hasattr(tarfile, "data_filter"):
                tar.extractall(root, members=members, filter="data")
            else:
                tar.extractall(root, members=members)
    except tarfile.TarError as exc:
        raise StagingError(f"Cannot unpack {source}: {exc}") from exc


def _unpack(source: Path, staging_dir: Path) -> None:
    """Populate *staging_dir* from *source* (archive file or directory)."""
    if not source.exists():
        raise StagingError(f"Archive not found: {source}")

    if source.is_dir():
        shutil.copytree(source, staging_dir, dirs_exist_ok=True)
        return

    try:
        if tarfile.is_tarfile(source):
            _extract_tar(source, staging_dir)
        else:
            shutil.unpack_archive(str(source), str(staging_dir))
    except StagingError:
        raise
    except shutil.ReadError as exc:
        formats = ", ".join(fmt[0] for fmt in shutil.get_unpack_formats())
        raise StagingError(
            f"Cannot unpack {source}: {exc}",
            hint=f"Supported archive formats: {formats}.",
        ) from exc
    except (OSError, EOFError, ValueError) as exc:
        raise StagingError(f"Cannot unpack {source}: {exc}") from exc


@contextmanager
def staged_archive(archive_path: str | Path) -> Iterator[Path]:
    """Yield a temporary directory holding the unpacked *archive_path*.

    Usage::

        with staged_archive("LT050460272000.tar.gz") as staging_dir:
            ingestor.ingest(staging_dir, system)

    Raises
    ------
    StagingError
        When the archive is missing, corrupt, or in an unknown format.
    """
    source = Path(archive_path)
    staging_dir = Path(tempfile.mkdtemp(prefix=STAGING_PREFIX))
    logger.debug("Staging %s in %s", source, staging_dir)
    try:
        _unpack(source, staging_dir)
        yield staging_dir
    finally:
        shutil.rmtree(staging_dir, ignore_errors=True)
        logger.debug("Removed staging directory %s", staging_dir)
