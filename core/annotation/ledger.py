"""Per-annotator history ledger stored as one JSON document per annotator."""

from __future__ import annotations

import json
from typing import Any

from loguru import logger

from core.annotation.naming import join_key
from core.exceptions import BlobNotFoundError, LedgerError, ValidationError
from core.storage import ObjectStorage

LEDGER_FIELD = "annotatedFiles"


class HistoryLedger:
    """Read-modify-write access to ``<prefix>/<annotator_id>.json``.

    Updates are not guarded against concurrent writers: two appends for the
    same annotator racing each other can lose one entry (last writer wins).
    """

    def __init__(self, storage: ObjectStorage, prefix: str) -> None:
        self.storage = storage
        self.prefix = prefix

    def key_for(self, annotator_id: str) -> str:
        if not annotator_id or not annotator_id.strip():
            raise ValidationError("Annotator ID is required")
        return join_key(self.prefix, f"{annotator_id}.json")

    def _read_document(self, annotator_id: str) -> dict[str, Any]:
        key = self.key_for(annotator_id)
        try:
            raw = self.storage.get_bytes(key)
        except BlobNotFoundError:
            return {LEDGER_FIELD: []}
        try:
            document = json.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise LedgerError(f"Corrupt ledger for annotator {annotator_id}: {exc}", {"key": key}) from exc
        if not isinstance(document, dict):
            raise LedgerError(f"Ledger for annotator {annotator_id} is not a JSON object", {"key": key})
        entries = document.get(LEDGER_FIELD)
        if entries is None:
            document[LEDGER_FIELD] = []
        elif not isinstance(entries, list):
            raise LedgerError(f"Ledger field '{LEDGER_FIELD}' must be a list", {"key": key})
        return document

    def load(self, annotator_id: str) -> list[str]:
        """Return the annotator's submitted names, or an empty list if none exist."""
        return [str(entry) for entry in self._read_document(annotator_id)[LEDGER_FIELD]]

    def append(self, annotator_id: str, filename: str) -> list[str]:
        """Append ``filename`` (no duplicate check) and overwrite the ledger."""
        document = self._read_document(annotator_id)
        document[LEDGER_FIELD].append(filename)
        key = self.key_for(annotator_id)
        self.storage.put_bytes(key, json.dumps(document).encode("utf-8"), content_type="application/json")
        logger.info(
            "Ledger for annotator={annotator} now holds {count} entries",
            annotator=annotator_id,
            count=len(document[LEDGER_FIELD]),
        )
        return list(document[LEDGER_FIELD])


__all__ = ["HistoryLedger", "LEDGER_FIELD"]
