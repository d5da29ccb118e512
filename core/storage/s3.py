from __future__ import annotations

from typing import Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from core.exceptions import BlobNotFoundError, StorageError

_NOT_FOUND_CODES = {"404", "NoSuchKey", "NotFound"}


def _is_not_found(exc: ClientError) -> bool:
    return str(exc.response.get("Error", {}).get("Code", "")) in _NOT_FOUND_CODES


class S3Storage:
    def __init__(
        self,
        bucket: str,
        prefix: str = "",
        region: Optional[str] = None,
        endpoint_url: Optional[str] = None,
        client: object | None = None,
    ) -> None:
        self.bucket = bucket
        self.prefix = prefix.strip("/")
        if client is None:
            session = boto3.session.Session(region_name=region) if region else boto3.session.Session()
            client = session.client("s3", endpoint_url=endpoint_url)
        self.client = client

    def _key(self, key: str) -> str:
        return f"{self.prefix}/{key}" if self.prefix else key

    def _name(self, s3_key: str) -> str:
        if self.prefix and s3_key.startswith(f"{self.prefix}/"):
            return s3_key[len(self.prefix) + 1:]
        return s3_key

    def list_names(self, prefix: str) -> list[str]:
        names: list[str] = []
        try:
            paginator = self.client.get_paginator("list_objects_v2")
            for page in paginator.paginate(Bucket=self.bucket, Prefix=self._key(prefix)):
                names.extend(self._name(item["Key"]) for item in page.get("Contents", []))
        except (ClientError, BotoCoreError) as exc:
            raise StorageError(f"Listing failed: {exc}", {"prefix": prefix}) from exc
        return sorted(names)

    def get_bytes(self, key: str) -> bytes:
        s3_key = self._key(key)
        try:
            response = self.client.get_object(Bucket=self.bucket, Key=s3_key)
            return response["Body"].read()
        except ClientError as exc:
            if _is_not_found(exc):
                raise BlobNotFoundError(f"Object not found: {key}", {"key": key}) from exc
            raise StorageError(f"Download failed: {exc}", {"key": key}) from exc
        except BotoCoreError as exc:
            raise StorageError(f"Download failed: {exc}", {"key": key}) from exc

    def put_bytes(self, key: str, data: bytes, content_type: str | None = None) -> str:
        s3_key = self._key(key)
        params = {"Bucket": self.bucket, "Key": s3_key, "Body": data}
        if content_type:
            params["ContentType"] = content_type
        try:
            self.client.put_object(**params)
        except (ClientError, BotoCoreError) as exc:
            raise StorageError(f"Upload failed: {exc}", {"key": key}) from exc
        return f"s3://{self.bucket}/{s3_key}"

    def exists(self, key: str) -> bool:
        try:
            self.client.head_object(Bucket=self.bucket, Key=self._key(key))
        except ClientError as exc:
            if _is_not_found(exc):
                return False
            raise StorageError(f"Existence check failed: {exc}", {"key": key}) from exc
        except BotoCoreError as exc:
            raise StorageError(f"Existence check failed: {exc}", {"key": key}) from exc
        return True

    def get_presigned_url(self, key: str, expires: int = 3600) -> str:
        s3_key = self._key(key)
        try:
            return self.client.generate_presigned_url(
                ClientMethod="get_object",
                Params={"Bucket": self.bucket, "Key": s3_key},
                ExpiresIn=expires,
            )
        except (ClientError, BotoCoreError) as exc:
            raise StorageError(f"Signing failed: {exc}", {"key": key}) from exc


__all__ = ["S3Storage"]
