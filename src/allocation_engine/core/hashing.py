"""Content digests for governed inputs such as allocation policies."""

from __future__ import annotations

import hashlib
from pathlib import Path

from allocation_engine.core.errors import HashingError

__all__ = ["sha256_hex"]

_CHUNK_BYTES = 64 * 1024


def sha256_hex(path: Path) -> str:
    """Hex sha256 of ``path``.

    Raises ``HashingError`` if the file is missing or its size or mtime changes
    while it is read.
    """

    try:
        before = path.stat()
    except FileNotFoundError as exc:
        raise HashingError(f"cannot digest missing file: {path}") from exc
    digest = hashlib.sha256()
    with path.open("rb") as handle:
        for chunk in iter(lambda: handle.read(_CHUNK_BYTES), b""):
            digest.update(chunk)
    after = path.stat()
    if (before.st_size, before.st_mtime_ns) != (after.st_size, after.st_mtime_ns):
        raise HashingError(f"file changed while computing its digest: {path}")
    return digest.hexdigest()
