from __future__ import annotations

import time
from pathlib import Path

from core.exceptions import BlobNotFoundError, StorageError


class LocalStorage:
    """Bucket emulation on the local filesystem, one file per object name."""

    def __init__(self, root: Path) -> None:
        self.root = root
        self.root.mkdir(parents=True, exist_ok=True)

    def _path(self, key: str) -> Path:
        root = self.root.resolve()
        path = (root / key).resolve()
        if root not in path.parents:
            raise StorageError(f"Key escapes storage root: {key}", {"key": key})
        return path

    def list_names(self, prefix: str) -> list[str]:
        names = (
            path.relative_to(self.root).as_posix()
            for path in self.root.rglob("*")
            if path.is_file()
        )
        return sorted(name for name in names if name.startswith(prefix))

    def get_bytes(self, key: str) -> bytes:
        path = self._path(key)
        if not path.is_file():
            raise BlobNotFoundError(f"Object not found: {key}", {"key": key})
        return path.read_bytes()

    def put_bytes(self, key: str, data: bytes, content_type: str | None = None) -> str:
        path = self._path(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
        return str(path)

    def exists(self, key: str) -> bool:
        return self._path(key).is_file()

    def get_presigned_url(self, key: str, expires: int = 3600) -> str:
        path = self._path(key)
        if not path.is_file():
            raise BlobNotFoundError(f"Object not found: {key}", {"key": key})
        return f"{path.as_uri()}?expires={int(time.time()) + expires}"


__all__ = ["LocalStorage"]
