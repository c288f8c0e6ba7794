"""
Unit tests for the pandas views: factor table, KKA summary, FUK
distribution, completion and AOI candidates.
"""

import datetime

import numpy as np
import pytest

from analysis import (
    FACTOR_COLUMNS,
    aoi_candidates,
    aoi_priority,
    completion_percentage,
    factor_frame,
    fuk_distribution,
    kka_labels,
    kka_summary,
    to_percent,
)
from config import FUK_LEVELS, GCG_DICTIONARY
from scoring import process_assessment_responses


@pytest.fixture
def scored_kkas(three_kkas):
    # K1 weak (0.3 -> FUK 0.25), K2 empty, K3 strong
    return process_assessment_responses({"f1": 0.3, "f3": 1.0}, three_kkas)


def test_to_percent_rounds_halves_up():
    assert to_percent(0.125) == 13
    assert to_percent(0.5) == 50
    assert to_percent(0) == 0


def test_factor_frame(single_chain):
    result = process_assessment_responses({"f1": 1.0, "f2": 0.5}, single_chain)
    df = factor_frame(result)
    assert list(df.columns) == FACTOR_COLUMNS
    assert df["factor_id"].tolist() == ["f1", "f2"]
    assert df["factor_fuk"].tolist() == [1.0, 0.25]
    assert df["kka_kode"].unique().tolist() == ["I"]
    assert df["completed"].all()


def test_factor_frame_empty():
    df = factor_frame(process_assessment_responses([], []))
    assert df.empty
    assert list(df.columns) == FACTOR_COLUMNS


def test_kka_summary(scored_kkas):
    df = kka_summary(scored_kkas)
    assert df["kka_kode"].tolist() == ["I", "II", "III"]
    assert df["factors"].tolist() == [1, 1, 1]
    assert df["completed"].tolist() == [1, 0, 1]
    assert df["percentage"].tolist() == [25, 0, 100]
    assert df["label"].tolist() == ["Kurang", "Tidak Ada", "Sangat Baik"]


def test_kka_summary_keeps_kkas_without_factors():
    result = process_assessment_responses([], [{"id": "K1", "kode": "I"}])
    df = kka_summary(result)
    assert df["factors"].tolist() == [0]
    assert df["score"].tolist() == [0]


def test_fuk_distribution(single_chain):
    result = process_assessment_responses({"f1": 1.0, "f2": 0.5}, single_chain)
    dist = fuk_distribution(result)
    assert list(dist.columns) == FUK_LEVELS
    row = dist.loc["K1"]
    assert row[0.25] == pytest.approx(50.0)
    assert row[1.0] == pytest.approx(50.0)
    assert row[0.0] == 0
    assert row.sum() == pytest.approx(100.0)


def test_fuk_distribution_kka_without_factors_is_nan():
    result = process_assessment_responses(
        {"f1": 0.9}, [{"id": "K1", "kode": "I", "aspects": [{"id": "A1", "parameters": [{"id": "P1", "factors": [{"id": "f1"}]}]}]}, {"id": "K2", "kode": "II"}]
    )
    dist = fuk_distribution(result)
    assert dist.loc["K1", 1.0] == pytest.approx(100.0)
    assert np.isnan(dist.loc["K2"]).all()


def _chain(kka_id, kode, fid):
    return {"id": kka_id, "kode": kode, "aspects": [{"id": f"A-{kka_id}", "parameters": [{"id": f"P-{kka_id}", "factors": [{"id": fid}]}]}]}


def test_fuk_distribution_keeps_kkas_sharing_a_code_apart():
    result = process_assessment_responses({"f1": 1.0, "f2": 0.3}, [_chain("K1", "I", "f1"), _chain("K2", "I", "f2")])
    dist = fuk_distribution(result)
    assert dist.index.tolist() == ["K1", "K2"]
    assert dist.loc["K1", 1.0] == pytest.approx(100.0)
    assert dist.loc["K2", 0.25] == pytest.approx(100.0)
    assert dist.loc["K2", 1.0] == 0


def test_fuk_distribution_id_matching_another_code():
    # K2 has no code and its id equals K1's code
    result = process_assessment_responses({"f1": 1.0, "f2": 0.3}, [_chain("K1", "K2", "f1"), _chain("K2", None, "f2")])
    dist = fuk_distribution(result)
    assert dist.loc["K1", 1.0] == pytest.approx(100.0)
    assert dist.loc["K2", 0.25] == pytest.approx(100.0)
    assert kka_labels(result.kkas) == ["K2 (K1)", "K2 (K2)"]


def test_kka_labels_only_disambiguate_collisions(three_kkas):
    result = process_assessment_responses([], three_kkas)
    assert kka_labels(result.kkas) == ["I", "II", "III"]


def test_completion_percentage(single_chain):
    assert completion_percentage(process_assessment_responses({"f1": 1}, single_chain)) == 50.0
    assert completion_percentage(process_assessment_responses([], [])) == 0.0


@pytest.mark.parametrize("pct, priority", [(0, "critical"), (24, "critical"), (25, "high"), (34, "high"), (35, "medium"), (49, "medium")])
def test_aoi_priority(pct, priority):
    assert aoi_priority(pct) == priority


def test_aoi_candidates(scored_kkas):
    items = aoi_candidates(scored_kkas, today=datetime.date(2026, 1, 1))
    assert [a["kka_kode"] for a in items] == ["II", "I"]
    empty, weak = items
    assert empty["priority"] == "critical"
    assert weak["percentage"] == 25
    assert weak["priority"] == "high"
    assert weak["nama"] == "Perbaikan Komitmen"
    assert "25%" in weak["recommendation"]
    assert "minimal 50%" in weak["recommendation"]
    assert weak["due_date"] == "2026-04-01"


def test_aoi_candidates_threshold_is_exclusive():
    # single factor at 0.6 -> FUK 0.5 -> KKA score exactly 0.5
    dictionary = [{"id": "K1", "aspects": [{"id": "A1", "parameters": [{"id": "P1", "factors": [{"id": "f1"}]}]}]}]
    result = process_assessment_responses({"f1": 0.6}, dictionary)
    assert result.kkas[0].score == pytest.approx(0.5)
    assert aoi_candidates(result) == []


def test_bundled_dictionary_full_marks():
    ids = [f["id"] for k in GCG_DICTIONARY for a in k["aspects"] for p in a["parameters"] for f in p["factors"]]
    result = process_assessment_responses({fid: 1.0 for fid in ids}, GCG_DICTIONARY)
    assert result.completed_factors == result.total_factors == len(ids)
    assert result.overall_fuk == pytest.approx(1.0)
    assert aoi_candidates(result) == []
    assert (kka_summary(result)["label"] == "Sangat Baik").all()
