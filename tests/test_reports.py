"""
Tests for report snapshots, figures and CSV / PPTX / PDF exports.
PDF tests skip chart images so kaleido is not needed.
"""

import io
import json

import pandas as pd
import plotly.graph_objects as go
import pytest
from pptx import Presentation

from reports import (
    CSV_COLUMNS,
    FUK_COLS,
    bar_figure,
    factor_export_frame,
    heatmap_figure,
    radar_figure,
    report_data,
    write_pdf_bytes,
    write_ppt_bytes,
)
from scoring import process_assessment_responses


@pytest.fixture
def data(three_kkas):
    result = process_assessment_responses({"f1": 0.3, "f3": 1.0}, three_kkas)
    return report_data(
        result,
        org="PT Contoh",
        assessor="Auditor",
        assessment_date="2026-10-01",
        status="in_progress",
    )


def test_report_data_snapshot(data):
    assert data["org"] == "PT Contoh"
    assert data["status"] == "in_progress"
    assert data["total_factors"] == 3
    assert data["completed_factors"] == 2
    assert data["completion"] == pytest.approx(66.67)
    assert [k["kka_kode"] for k in data["kkas"]] == ["I", "II", "III"]
    assert [a["kka_kode"] for a in data["aoi"]] == ["II", "I"]
    assert data["result"]["total_factors"] == 3
    assert len(data["distribution"]) == 3 * len(FUK_COLS)


def test_report_data_is_json_serializable(data):
    json.dumps(data)


def test_report_data_defaults():
    data = report_data(process_assessment_responses([], []))
    assert data["status"] == "draft"
    assert data["org"] == ""
    assert data["kkas"] == []
    assert data["distribution"] == []


def test_figures(data):
    assert isinstance(radar_figure(data["kkas"]), go.Figure)
    bar = bar_figure(data["kkas"], theme="dark")
    assert list(bar.data[0].y) == pytest.approx([25.0, 0.0, 100.0])
    heat = heatmap_figure(pd.DataFrame(data["distribution"]))
    assert list(heat.data[0].x) == FUK_COLS
    assert list(heat.data[0].y) == ["I", "II", "III"]


def test_heatmap_with_kkas_sharing_a_code():
    dictionary = [
        {"id": kid, "kode": "I", "aspects": [{"id": f"A{i}", "parameters": [{"id": f"P{i}", "factors": [{"id": f"f{i}"}]}]}]}
        for i, kid in enumerate(["K1", "K2"], start=1)
    ]
    data = report_data(process_assessment_responses({"f1": 1.0, "f2": 0.3}, dictionary))
    assert [k["kka_label"] for k in data["kkas"]] == ["I (K1)", "I (K2)"]
    heat = heatmap_figure(pd.DataFrame(data["distribution"]))
    assert list(heat.data[0].y) == ["I (K1)", "I (K2)"]
    z = heat.data[0].z
    assert z[0][FUK_COLS.index("1.00")] == pytest.approx(100.0)
    assert z[1][FUK_COLS.index("0.25")] == pytest.approx(100.0)
    assert list(bar_figure(data["kkas"]).data[0].x) == ["I (K1)", "I (K2)"]


def test_heatmap_without_data():
    fig = heatmap_figure(pd.DataFrame())
    assert fig.layout.annotations[0].text == "No scored factors yet"


def test_radar_without_kkas():
    fig = radar_figure([])
    assert len(fig.data) == 1


def test_factor_export_frame(data):
    df = factor_export_frame(data)
    assert list(df.columns) == CSV_COLUMNS
    assert len(df) == 3
    csv = df.to_csv(index=False)
    assert csv.splitlines()[0] == ",".join(CSV_COLUMNS)


def test_factor_export_frame_empty():
    df = factor_export_frame({})
    assert df.empty
    assert list(df.columns) == CSV_COLUMNS


def test_write_ppt_bytes(data):
    buf = io.BytesIO()
    write_ppt_bytes(buf, data)
    prs = Presentation(io.BytesIO(buf.getvalue()))
    assert len(prs.slides) == 4
    titles = [s.shapes.title.text for s in prs.slides]
    assert titles == ["GCG Maturity Assessment", "Summary", "KKA Scores", "Areas of Improvement"]


def test_write_pdf_bytes(data):
    buf = io.BytesIO()
    write_pdf_bytes(buf, data, include_charts=False)
    assert buf.getvalue().startswith(b"%PDF")
