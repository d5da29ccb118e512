from __future__ import annotations

import math
from dataclasses import dataclass

from core.annotation.ledger import HistoryLedger
from core.settings import LayoutSettings
from core.storage import ObjectStorage


@dataclass
class AnnotatorProgress:
    annotated: int
    total: int
    remaining: int
    completion_percentage: float


def completion_percentage(annotated: int, total: int) -> float:
    """``annotated / total * 100``; NaN for 0/0 and infinity for n/0."""
    if total == 0:
        return math.nan if annotated == 0 else math.inf
    return annotated / total * 100


def annotator_progress(storage: ObjectStorage, layout: LayoutSettings, annotator_id: str) -> AnnotatorProgress:
    annotated = len(HistoryLedger(storage, layout.history_prefix).load(annotator_id))
    total = len(storage.list_names(layout.json_prefix))
    return AnnotatorProgress(
        annotated=annotated,
        total=total,
        remaining=total - annotated,
        completion_percentage=completion_percentage(annotated, total),
    )


__all__ = ["AnnotatorProgress", "annotator_progress", "completion_percentage"]
