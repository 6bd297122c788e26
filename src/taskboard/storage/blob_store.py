# src/taskboard/storage/blob_store.py

from __future__ import annotations

import contextlib
import logging
import os
import re
from pathlib import Path

logger = logging.getLogger(__name__)

_KEY_RE = re.compile(r"^[A-Za-z0-9_-]+$")


class JsonFileBlobStore:
    """
    File-backed key-value store: one UTF-8 file per key (<root>/<key>.json).

    Writes go to a temp file first and are swapped in with os.replace,
    so a crash mid-write never leaves a truncated document behind.
    """

    def __init__(self, root_dir: str | Path) -> None:
        self._root = Path(root_dir)
        self._root.mkdir(parents=True, exist_ok=True)
        logger.info("JsonFileBlobStore ready dir=%s", self._root)

    def _path(self, key: str) -> Path:
        if not _KEY_RE.match(key or ""):
            raise ValueError(f"invalid store key: {key!r}")
        return self._root / f"{key}.json"

    def get_item(self, key: str) -> str | None:
        path = self._path(key)
        if not path.exists():
            return None
        return path.read_text("utf-8")

    def set_item(self, key: str, value: str) -> None:
        path = self._path(key)
        tmp = path.with_suffix(".tmp")
        tmp.write_text(value, "utf-8")
        os.replace(tmp, path)
        with contextlib.suppress(OSError):
            # Best-effort: task notes can be personal, keep the file private on disk.
            os.chmod(path, 0o600)
        logger.debug("Blob written key=%s bytes=%d", key, len(value))

    def remove_item(self, key: str) -> None:
        path = self._path(key)
        with contextlib.suppress(FileNotFoundError):
            path.unlink()
            logger.debug("Blob removed key=%s", key)
