from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Sequence

from loguru import logger

from core.annotation.ledger import HistoryLedger
from core.annotation.naming import base_filename, case_stem
from core.exceptions import CasePairingError, CasesExhaustedError, ValidationError
from core.settings import LayoutSettings
from core.storage import ObjectStorage


@dataclass(frozen=True)
class CaseAssignment:
    json_path: str
    image_path: str


def available_cases(case_names: Sequence[str], annotated: Sequence[str]) -> list[str]:
    """Case JSON names whose case stem does not appear in ``annotated``.

    Ledger entries are stored as ``<stem>_annotated.json`` while cases are
    ``<stem>.json``, so both sides are compared by stem.
    """
    done = {case_stem(entry) for entry in annotated}
    return [name for name in case_names if case_stem(name) not in done]


def match_image(json_name: str, image_names: Sequence[str]) -> str | None:
    target = base_filename(json_name)
    for image_name in image_names:
        if base_filename(image_name) == target:
            return image_name
    return None


def select_random_case(
    storage: ObjectStorage,
    layout: LayoutSettings,
    annotator_id: str,
    *,
    rng: random.Random | None = None,
) -> CaseAssignment:
    """Pick an unannotated case for ``annotator_id`` uniformly at random."""
    if not annotator_id or not annotator_id.strip():
        raise ValidationError("Annotator ID is required")

    logger.info("Getting random file for annotator: {annotator}", annotator=annotator_id)
    json_names = storage.list_names(layout.json_prefix)
    image_names = storage.list_names(layout.image_prefix)
    annotated = HistoryLedger(storage, layout.history_prefix).load(annotator_id)

    candidates = available_cases(json_names, annotated)
    if not candidates:
        raise CasesExhaustedError(
            "All files have been annotated by this annotator",
            {"annotatorId": annotator_id, "total": str(len(json_names))},
        )

    chooser = rng or random
    selected = candidates[chooser.randrange(len(candidates))]
    image = match_image(selected, image_names)
    if image is None:
        raise CasePairingError("Matching image not found", {"jsonFile": selected})

    logger.debug(
        "Assigned {json} ({remaining} candidates) to annotator={annotator}",
        json=selected,
        remaining=len(candidates),
        annotator=annotator_id,
    )
    return CaseAssignment(json_path=selected, image_path=image)


__all__ = ["CaseAssignment", "available_cases", "match_image", "select_random_case"]
