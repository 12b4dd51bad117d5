"""Checksum helpers for ingested archives."""

from __future__ import annotations

import hashlib
from pathlib import Path


def sha256_path(path: str | Path, chunk_size: int = 1 << 20) -> str:
    """Return the SHA256 of the file at *path* as ``sha256:<digest>``."""
    digest = hashlib.sha256()
    with open(Path(path), "rb") as stream:
        for chunk in iter(lambda: stream.read(chunk_size), b""):
            digest.update(chunk)
    return f"sha256:{digest.hexdigest()}"


def record_checksum(archive_path: str | Path, outfile: str | Path) -> str:
    """Append ``<checksum>  <archive_path>`` to *outfile* and return the checksum.

    Directory operands have no single checksum and are recorded as
    ``sha256:-``.
    """
    source = Path(archive_path)
    checksum = sha256_path(source) if source.is_file() else "sha256:-"
    target = Path(outfile)
    target.parent.mkdir(parents=True, exist_ok=True)
    with open(target, "a", encoding="utf-8") as stream:
        stream.write(f"{checksum}  {source}\n")
    return checksum


__all__ = ["record_checksum", "sha256_path"]
