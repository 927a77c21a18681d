"""Shared helpers — hashing, timestamps, etc."""

from __future__ import annotations

import hashlib
from collections.abc import Iterable
from datetime import datetime, timezone
from pathlib import Path


def sha256_file(path: Path) -> str:
    """Return the hex SHA-256 digest of *path*."""
    h = hashlib.sha256()
    with open(path, "rb") as fh:
        for chunk in iter(lambda: fh.read(8192), b""):
            h.update(chunk)
    return h.hexdigest()


def digest_files(paths: Iterable[Path]) -> dict[str, str]:
    """Map each readable file name to its SHA-256 digest."""
    digests: dict[str, str] = {}
    for path in paths:
        try:
            digests[path.name] = sha256_file(path)
        except OSError:
            continue
    return digests


def utcnow_iso() -> str:
    """Return the current UTC time as an ISO-8601 string."""
    return datetime.now(timezone.utc).isoformat()
