"""Annotated-JSON submission: validate, write, verify, record in the ledger."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any

from loguru import logger

from core.annotation.ledger import HistoryLedger
from core.annotation.naming import annotated_filename, join_key
from core.exceptions import StorageError, UploadVerificationError, ValidationError
from core.settings import LayoutSettings
from core.storage import ObjectStorage


@dataclass
class UploadResult:
    path: str
    ledger_updated: bool


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not valid JSON")


def parse_submission(raw: bytes) -> Any:
    """Decode a request body into a non-empty JSON object or array."""
    if not raw or not raw.strip():
        raise ValidationError("Empty request body")
    try:
        payload = json.loads(raw, parse_constant=_reject_constant)
    except (UnicodeDecodeError, ValueError) as exc:
        raise ValidationError(f"Request body is not valid JSON: {exc}") from exc
    if not isinstance(payload, (dict, list)) or not payload:
        raise ValidationError("Empty request body")
    return payload


def destination_path(layout: LayoutSettings, filename: str) -> str:
    return join_key(layout.json_new_prefix, annotated_filename(filename))


def upload_annotation(
    storage: ObjectStorage,
    layout: LayoutSettings,
    filename: str,
    annotator_id: str | None,
    body: bytes,
) -> UploadResult:
    """Store the JSON document in ``body`` under the new-cases prefix and append it to the ledger.

    The write and the ledger update are independent. A ledger failure after a
    confirmed write is logged and reported through ``ledger_updated`` only.
    """
    if not filename.endswith(".json"):
        raise ValidationError("Invalid file type", {"filename": filename})
    if not annotator_id or not annotator_id.strip():
        raise ValidationError("Annotator ID is required")
    payload = parse_submission(body)

    logger.info("Uploading JSON file: {filename} by annotator: {annotator}", filename=filename, annotator=annotator_id)
    destination = destination_path(layout, filename)
    data = json.dumps(payload, indent=2, ensure_ascii=False, allow_nan=False)
    logger.info("Saving file to: {path} ({size} characters)", path=destination, size=len(data))

    storage.put_bytes(destination, data.encode("utf-8"), content_type="application/json")
    if not storage.exists(destination):
        logger.error("File was not found after upload: {path}", path=destination)
        raise UploadVerificationError(
            "File upload failed - file not found after upload",
            {"path": destination},
        )

    ledger = HistoryLedger(storage, layout.history_prefix)
    try:
        ledger.append(annotator_id, destination.rsplit("/", 1)[-1])
    except StorageError:
        logger.exception(
            "Ledger update failed after upload of {path}; annotator={annotator} history is now out of sync",
            path=destination,
            annotator=annotator_id,
        )
        return UploadResult(path=destination, ledger_updated=False)

    logger.info("JSON file uploaded successfully: {filename}", filename=filename)
    return UploadResult(path=destination, ledger_updated=True)


__all__ = ["UploadResult", "destination_path", "parse_submission", "upload_annotation"]
