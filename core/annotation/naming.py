"""Object-name helpers shared by the selector, the ledger and the upload path."""

from __future__ import annotations

from pathlib import PurePosixPath

from core.exceptions import ValidationError

JSON_SUFFIX = ".json"
ANNOTATED_MARKER = "_annotated"
ANNOTATED_SUFFIX = f"{ANNOTATED_MARKER}{JSON_SUFFIX}"


def base_filename(name: str) -> str:
    """Object name without its folder prefix and last extension."""
    return PurePosixPath(name).stem


def case_stem(name: str) -> str:
    """Base filename with a trailing ``_annotated`` marker removed.

    ``case1.json``, ``case1_annotated.json`` and the older
    ``case1.json_annotated.json`` all map to ``case1``.
    """
    stem = base_filename(name).removesuffix(ANNOTATED_MARKER)
    if stem.endswith(JSON_SUFFIX):
        stem = stem[: -len(JSON_SUFFIX)]
    return stem


def annotated_filename(filename: str) -> str:
    """Return ``<stem>_annotated.json`` for an uploaded ``.json`` filename.

    Applying it to its own output returns the same name.
    """
    name = PurePosixPath(filename).name
    if not name.endswith(JSON_SUFFIX):
        raise ValidationError("Invalid file type", {"filename": filename})
    if name.endswith(ANNOTATED_SUFFIX):
        stem = name[: -len(ANNOTATED_SUFFIX)]
    else:
        stem = name[: -len(JSON_SUFFIX)]
    if not stem:
        raise ValidationError("Invalid file name", {"filename": filename})
    return f"{stem}{ANNOTATED_SUFFIX}"


def join_key(prefix: str, name: str) -> str:
    return f"{prefix}/{name}" if prefix else name


__all__ = [
    "ANNOTATED_SUFFIX",
    "JSON_SUFFIX",
    "annotated_filename",
    "base_filename",
    "case_stem",
    "join_key",
]
