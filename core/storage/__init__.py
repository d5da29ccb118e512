"""Storage abstraction (S3/MinIO or local filesystem fallback)."""

from __future__ import annotations

from pathlib import Path
from typing import Protocol

from core.settings import StorageSettings


class ObjectStorage(Protocol):
    def list_names(self, prefix: str) -> list[str]:  # full object names, sorted
        ...

    def get_bytes(self, key: str) -> bytes:  # raises BlobNotFoundError
        ...

    def put_bytes(self, key: str, data: bytes, content_type: str | None = None) -> str:  # returns uri
        ...

    def exists(self, key: str) -> bool:
        ...

    def get_presigned_url(self, key: str, expires: int = 3600) -> str:
        ...


def build_storage(settings: StorageSettings) -> ObjectStorage:
    """Create the backend selected by ``settings.backend``."""
    if settings.backend == "local":
        from core.storage.local import LocalStorage

        return LocalStorage(Path(settings.local_root))

    from core.storage.s3 import S3Storage

    return S3Storage(
        bucket=settings.bucket,
        region=settings.region,
        endpoint_url=settings.endpoint_url,
    )


__all__ = ["ObjectStorage", "build_storage"]
