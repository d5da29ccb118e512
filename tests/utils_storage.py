from __future__ import annotations

import json
from pathlib import Path
from typing import Iterable

from core.settings import LayoutSettings
from core.storage.local import LocalStorage

LAYOUT = LayoutSettings(
    image_prefix="images",
    json_prefix="cases",
    json_new_prefix="new_cases",
    history_prefix="history",
    tracking_prefix="tracking",
)


def build_bucket(
    root: Path,
    *,
    cases: Iterable[str] = (),
    images: Iterable[str] = (),
    ledgers: dict[str, list[str]] | None = None,
) -> LocalStorage:
    """Create a LocalStorage bucket holding the given case, image and ledger objects."""
    storage = LocalStorage(root)
    for name in cases:
        storage.put_bytes(f"{LAYOUT.json_prefix}/{name}", json.dumps({"case": name}).encode("utf-8"))
    for name in images:
        storage.put_bytes(f"{LAYOUT.image_prefix}/{name}", b"\x89PNG")
    for annotator, entries in (ledgers or {}).items():
        payload = json.dumps({"annotatedFiles": entries}).encode("utf-8")
        storage.put_bytes(f"{LAYOUT.history_prefix}/{annotator}.json", payload)
    return storage


def read_ledger(storage: LocalStorage, annotator: str) -> list[str]:
    raw = storage.get_bytes(f"{LAYOUT.history_prefix}/{annotator}.json")
    return json.loads(raw)["annotatedFiles"]
