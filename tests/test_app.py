"""
Tests for the dashboard helpers that sit between the form and the aggregator.
"""

import app


def test_factor_index_covers_bundled_dictionary():
    assert len(app.FACTORS) == 11
    assert app.FACTORS["F-1.1.1.1"]["max_score"] == 1


def test_layout_has_one_input_per_factor():
    cards = app.build_kka_cards()
    assert len(cards) == len(app.TREE)


def test_collect_responses_skips_blank_and_invalid():
    ids = [{"type": "f-input", "fid": fid} for fid in ["F-1.1.1.1", "F-1.1.1.2", "F-1.1.1.3"]]
    responses, errors = app.collect_responses(ids, [0.8, None, 1.5])
    assert responses == [{"factor_id": "F-1.1.1.1", "score": 0.8}]
    assert errors == ["F-1.1.1.3: Score must be between 0 and 1"]


def test_collect_responses_empty():
    assert app.collect_responses(None, None) == ([], [])
