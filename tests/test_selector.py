from __future__ import annotations

import random

import pytest

from core.annotation.naming import base_filename
from core.annotation.selector import available_cases, match_image, select_random_case
from core.exceptions import CasePairingError, CasesExhaustedError, ValidationError
from tests.utils_storage import LAYOUT, build_bucket


def test_selects_one_matching_pair(tmp_path):
    storage = build_bucket(
        tmp_path,
        cases=["case1.json", "case2.json"],
        images=["case1.jpg", "case2.jpg"],
        ledgers={"A": []},
    )

    assignment = select_random_case(storage, LAYOUT, "A")

    assert assignment.json_path in {"cases/case1.json", "cases/case2.json"}
    assert base_filename(assignment.image_path) == base_filename(assignment.json_path)
    assert assignment.image_path.startswith("images/")


def test_missing_ledger_behaves_like_empty(tmp_path):
    storage = build_bucket(tmp_path, cases=["case1.json"], images=["case1.png"])

    assignment = select_random_case(storage, LAYOUT, "new-annotator")

    assert assignment.json_path == "cases/case1.json"
    assert assignment.image_path == "images/case1.png"


def test_uses_uniform_index_from_rng(tmp_path):
    storage = build_bucket(
        tmp_path,
        cases=["case1.json", "case2.json", "case3.json"],
        images=["case1.jpg", "case2.jpg", "case3.jpg"],
    )
    seen = {select_random_case(storage, LAYOUT, "A", rng=random.Random(seed)).json_path for seed in range(40)}

    assert seen == {"cases/case1.json", "cases/case2.json", "cases/case3.json"}


def test_annotated_ledger_entries_are_not_reserved(tmp_path):
    storage = build_bucket(
        tmp_path,
        cases=["case1.json", "case2.json"],
        images=["case1.jpg", "case2.jpg"],
        ledgers={"A": ["case1_annotated.json"]},
    )

    for seed in range(20):
        assignment = select_random_case(storage, LAYOUT, "A", rng=random.Random(seed))
        assert assignment.json_path == "cases/case2.json"


def test_exhausted_only_when_every_case_is_in_ledger(tmp_path):
    storage = build_bucket(
        tmp_path,
        cases=["case1.json", "case2.json"],
        images=["case1.jpg", "case2.jpg"],
        ledgers={"A": ["case1_annotated.json"], "B": ["case1_annotated.json", "case2_annotated.json"]},
    )

    assert select_random_case(storage, LAYOUT, "A").json_path == "cases/case2.json"
    with pytest.raises(CasesExhaustedError):
        select_random_case(storage, LAYOUT, "B")


def test_no_cases_at_all_is_exhausted(tmp_path):
    storage = build_bucket(tmp_path)

    with pytest.raises(CasesExhaustedError):
        select_random_case(storage, LAYOUT, "A")


def test_orphaned_json_is_a_pairing_error(tmp_path):
    storage = build_bucket(tmp_path, cases=["case1.json"], images=["other.jpg"])

    with pytest.raises(CasePairingError) as excinfo:
        select_random_case(storage, LAYOUT, "A")

    assert excinfo.value.details == {"jsonFile": "cases/case1.json"}


def test_annotator_id_required(tmp_path):
    with pytest.raises(ValidationError):
        select_random_case(build_bucket(tmp_path), LAYOUT, "")


def test_available_cases_compares_case_stems():
    cases = ["cases/case1.json", "cases/case2.json", "cases/case3.json"]
    ledger = ["case1_annotated.json", "case3.json"]

    assert available_cases(cases, ledger) == ["cases/case2.json"]


def test_match_image_requires_exact_base_name():
    images = ["images/case10.jpg", "images/case1.jpg"]

    assert match_image("cases/case1.json", images) == "images/case1.jpg"
    assert match_image("cases/case2.json", images) is None
