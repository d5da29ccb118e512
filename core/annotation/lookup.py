"""Listing and name-fragment lookups over the case namespaces."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Iterable

from core.annotation.naming import join_key
from core.exceptions import BlobNotFoundError, StorageError, ValidationError
from core.logging_config import get_logger
from core.settings import LayoutSettings
from core.storage import ObjectStorage

log = get_logger(__name__)


@dataclass
class CaseListing:
    json_files: list[str]
    image_files: list[str]


def list_cases(storage: ObjectStorage, layout: LayoutSettings) -> CaseListing:
    log.info("Looking for images with prefix: {prefix}", prefix=layout.image_prefix)
    image_files = storage.list_names(layout.image_prefix)
    log.info("Found {count} image files", count=len(image_files))

    log.info("Looking for JSON with prefix: {prefix}", prefix=layout.json_prefix)
    json_files = storage.list_names(layout.json_prefix)
    log.info("Found {count} JSON files", count=len(json_files))
    return CaseListing(json_files=json_files, image_files=image_files)


def find_by_fragment(names: Iterable[str], fragment: str) -> str | None:
    """First name containing ``fragment`` anywhere, in listing order."""
    for name in names:
        if fragment in name:
            return name
    return None


def fetch_json(storage: ObjectStorage, layout: LayoutSettings, fragment: str) -> Any:
    """Download and parse the first original or annotated case JSON matching ``fragment``."""
    log.info("Retrieving JSON file: {fragment}", fragment=fragment)
    names = storage.list_names(layout.json_prefix) + storage.list_names(layout.json_new_prefix)
    target = find_by_fragment(names, fragment)
    if target is None:
        log.info("JSON file not found: {fragment}", fragment=fragment)
        raise BlobNotFoundError("JSON file not found", {"filename": fragment})

    log.info("Found matching JSON: {name}", name=target)
    raw = storage.get_bytes(target)
    try:
        return json.loads(raw)
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise StorageError(f"Stored JSON is not parseable: {exc}", {"path": target}) from exc


def image_url(storage: ObjectStorage, layout: LayoutSettings, fragment: str, *, expires: int = 3600) -> str:
    """Signed read URL for the first image whose name contains ``fragment``."""
    log.info("Fetching image: {fragment}", fragment=fragment)
    target = find_by_fragment(storage.list_names(layout.image_prefix), fragment)
    if target is None:
        log.info("Image not found: {fragment}", fragment=fragment)
        raise BlobNotFoundError("Image file not found", {"filename": fragment})
    return storage.get_presigned_url(target, expires=expires)


def store_tracking(storage: ObjectStorage, layout: LayoutSettings, filename: str, csv: str) -> str:
    """Write a user-tracking CSV verbatim under the tracking prefix."""
    if not filename or "/" in filename:
        raise ValidationError("Invalid tracking filename", {"filename": filename})
    key = join_key(layout.tracking_prefix, filename)
    log.info("Uploading tracking data to {key} ({size} characters)", key=key, size=len(csv))
    storage.put_bytes(key, csv.encode("utf-8"), content_type="text/csv")
    return key


__all__ = [
    "CaseListing",
    "fetch_json",
    "find_by_fragment",
    "image_url",
    "list_cases",
    "store_tracking",
]
