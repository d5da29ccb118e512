from __future__ import annotations

import math

from core.annotation.progress import annotator_progress, completion_percentage
from tests.utils_storage import LAYOUT, build_bucket


def test_progress_counts_ledger_against_cases(tmp_path):
    storage = build_bucket(
        tmp_path,
        cases=["case1.json", "case2.json", "case3.json", "case4.json"],
        ledgers={"A": ["case1_annotated.json"]},
    )

    report = annotator_progress(storage, LAYOUT, "A")

    assert report.annotated == 1
    assert report.total == 4
    assert report.remaining == 3
    assert report.completion_percentage == 25.0
    assert report.annotated + report.remaining == report.total


def test_progress_without_ledger(tmp_path):
    storage = build_bucket(tmp_path, cases=["case1.json"])

    report = annotator_progress(storage, LAYOUT, "nobody")

    assert (report.annotated, report.total, report.remaining) == (0, 1, 1)
    assert report.completion_percentage == 0.0


def test_duplicates_are_counted(tmp_path):
    storage = build_bucket(
        tmp_path,
        cases=["case1.json", "case2.json"],
        ledgers={"A": ["case1_annotated.json", "case1_annotated.json"]},
    )

    report = annotator_progress(storage, LAYOUT, "A")

    assert report.annotated == 2
    assert report.remaining == 0


def test_zero_total_is_not_a_number(tmp_path):
    report = annotator_progress(build_bucket(tmp_path), LAYOUT, "A")

    assert report.total == 0
    assert math.isnan(report.completion_percentage)


def test_percentage_with_annotations_but_no_cases():
    assert math.isinf(completion_percentage(2, 0))
    assert completion_percentage(1, 3) == 1 / 3 * 100
