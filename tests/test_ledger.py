from __future__ import annotations

import json

import pytest

from core.annotation.ledger import HistoryLedger
from core.exceptions import LedgerError, StorageError, ValidationError
from core.storage.local import LocalStorage
from tests.utils_storage import LAYOUT, build_bucket, read_ledger


class _BrokenReads(LocalStorage):
    def get_bytes(self, key: str) -> bytes:
        raise StorageError("backend unavailable", {"key": key})


def test_missing_ledger_is_empty(tmp_path):
    ledger = HistoryLedger(build_bucket(tmp_path), LAYOUT.history_prefix)
    assert ledger.load("A") == []


def test_append_creates_ledger_lazily(tmp_path):
    storage = build_bucket(tmp_path)
    ledger = HistoryLedger(storage, LAYOUT.history_prefix)

    assert not storage.exists("history/A.json")
    ledger.append("A", "case1_annotated.json")

    assert read_ledger(storage, "A") == ["case1_annotated.json"]


def test_append_keeps_duplicates_and_order(tmp_path):
    storage = build_bucket(tmp_path, ledgers={"A": ["case2_annotated.json"]})
    ledger = HistoryLedger(storage, LAYOUT.history_prefix)

    ledger.append("A", "case1_annotated.json")
    entries = ledger.append("A", "case1_annotated.json")

    assert entries == ["case2_annotated.json", "case1_annotated.json", "case1_annotated.json"]
    assert ledger.load("A") == entries


def test_missing_field_defaults_to_empty(tmp_path):
    storage = build_bucket(tmp_path)
    storage.put_bytes("history/A.json", json.dumps({"owner": "A"}).encode("utf-8"))
    ledger = HistoryLedger(storage, LAYOUT.history_prefix)

    assert ledger.load("A") == []
    ledger.append("A", "case1_annotated.json")
    document = json.loads(storage.get_bytes("history/A.json"))
    assert document == {"owner": "A", "annotatedFiles": ["case1_annotated.json"]}


def test_corrupt_ledger_is_an_error(tmp_path):
    storage = build_bucket(tmp_path)
    storage.put_bytes("history/A.json", b"{not json")

    with pytest.raises(LedgerError):
        HistoryLedger(storage, LAYOUT.history_prefix).load("A")


def test_non_list_field_is_an_error(tmp_path):
    storage = build_bucket(tmp_path)
    storage.put_bytes("history/A.json", json.dumps({"annotatedFiles": "case1"}).encode("utf-8"))

    with pytest.raises(LedgerError):
        HistoryLedger(storage, LAYOUT.history_prefix).load("A")


def test_other_read_failures_propagate(tmp_path):
    ledger = HistoryLedger(_BrokenReads(tmp_path), LAYOUT.history_prefix)

    with pytest.raises(StorageError):
        ledger.load("A")


def test_annotator_id_required(tmp_path):
    ledger = HistoryLedger(build_bucket(tmp_path), LAYOUT.history_prefix)

    with pytest.raises(ValidationError):
        ledger.load("  ")
