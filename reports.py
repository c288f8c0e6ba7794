# reports.py

import io
import logging

import numpy as np
import pandas as pd
import plotly.graph_objects as go
import plotly.io as pio
from pptx import Presentation
from pptx.util import Inches
from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet
# PDF export (with embedded chart images)
from reportlab.platypus import Image as RLImage
from reportlab.platypus import (ListFlowable, ListItem, Paragraph,
                                SimpleDocTemplate, Spacer, Table, TableStyle)

from analysis import (aoi_candidates, completion_percentage, factor_frame,
                      fuk_distribution, kka_labels, kka_summary)
from config import FUK_LEVELS
from scoring import fuk_label

logger = logging.getLogger(__name__)

TITLE = "GCG Maturity Assessment"
FUK_COLS = [f"{lvl:.2f}" for lvl in FUK_LEVELS]
CSV_COLUMNS = [
    "kka_kode",
    "aspect_kode",
    "parameter_kode",
    "factor_kode",
    "factor_nama",
    "max_score",
    "factor_score",
    "factor_fuk",
]

# for chart sizes
RADAR_H = 360
BAR_H = 360
HEAT_H = 420


def report_data(result, org="", assessor="", assessment_date="", status="draft"):
    """
    JSON-friendly snapshot of an aggregation result for storing in the page
    and feeding the exports.

    :param result: scoring.AssessmentResult
    :return: dict
    """
    labels = kka_labels(result.kkas)
    dist = fuk_distribution(result)
    distribution = [
        {
            "kka_id": kka_id,
            "KKA": label,
            "FUK": f"{lvl:.2f}",
            "Share": None if pd.isna(v) else float(v),
        }
        for label, (kka_id, row) in zip(labels, dist.iterrows())
        for lvl, v in row.items()
    ]
    return {
        "org": org or "",
        "assessor": assessor or "",
        "assessment_date": assessment_date or "",
        "status": status or "draft",
        "overall_score": result.overall_score,
        "overall_fuk": result.overall_fuk,
        "overall_label": fuk_label(result.overall_fuk),
        "total_factors": result.total_factors,
        "completed_factors": result.completed_factors,
        "completion": completion_percentage(result),
        "kkas": kka_summary(result).assign(kka_label=labels).to_dict(orient="records"),
        "factors": factor_frame(result).to_dict(orient="records"),
        "distribution": distribution,
        "aoi": aoi_candidates(result),
        "result": result.to_dict(),
    }


def _kka_names(kkas):
    return [k.get("kka_label") or k.get("kka_kode") or str(k.get("kka_id")) for k in kkas]


def _base_fig_layout(fig, theme="light", height=360):
    """
    Apply a consistent layout to a figure.

    :param fig: a figure to update
    :param theme: a string, either "light" or "dark"
    :param height: the height of the figure in pixels
    :return: the updated figure
    """

    font_color = "#f6f7fb" if theme == "dark" else "#0b1020"
    grid_color = "#334155" if theme == "dark" else "#CBD5E1"
    axis_color = font_color
    fig.update_layout(
        autosize=False,
        height=height,
        margin=dict(l=30, r=30, t=30, b=30),
        paper_bgcolor="rgba(0,0,0,0)",
        plot_bgcolor="rgba(0,0,0,0)",
        font=dict(color=font_color),
        xaxis=dict(
            showgrid=True,
            gridcolor=grid_color,
            zeroline=False,
            linecolor=axis_color,
            ticks="outside",
            fixedrange=True,
        ),
        yaxis=dict(
            showgrid=True,
            gridcolor=grid_color,
            zeroline=False,
            linecolor=axis_color,
            ticks="outside",
            fixedrange=True,
        ),
        uirevision="keep",
    )
    return fig


# ---------- Figures ------------------
def radar_figure(kkas, theme="light"):
    """
    Radar of KKA FUK values (in %).

    Args:
        kkas (list): KKA summary records, as in report_data()["kkas"]
        theme (str, optional): light or dark. Defaults to "light".

    Returns:
        go.Figure: radar figure
    """
    cats = _kka_names(kkas)
    vals = [float(k.get("fuk", 0.0)) * 100 for k in kkas]
    if cats:
        cats, vals = cats + [cats[0]], vals + [vals[0]]

    grid_color = "#334155" if theme == "dark" else "#CBD5E1"
    fig = go.Figure()
    fig.add_trace(
        go.Scatterpolar(
            r=vals,
            theta=cats,
            fill="toself",
            name="FUK",
            line=dict(width=2),
            marker=dict(size=4),
        )
    )
    fig.update_layout(
        autosize=False,
        height=RADAR_H,
        polar=dict(
            radialaxis=dict(
                range=[0, 100],
                autorange=False,
                tick0=0,
                dtick=25,
                gridcolor=grid_color,
                showline=True,
                linewidth=1,
            ),
            angularaxis=dict(gridcolor=grid_color, showline=True, linewidth=1),
        ),
        uirevision="keep",
    )
    return _base_fig_layout(fig, theme, height=RADAR_H)


def bar_figure(kkas, theme="light"):
    """Bar of KKA scores (in %)."""
    cats = _kka_names(kkas)
    vals = [float(k.get("score", 0.0)) * 100 for k in kkas]
    fig = go.Figure(go.Bar(x=cats, y=vals))
    fig.update_layout(
        autosize=False,
        height=BAR_H,
        xaxis=dict(categoryorder="array", categoryarray=cats, fixedrange=True),
        yaxis=dict(range=[0, 100], fixedrange=True, tick0=0, dtick=20),
        uirevision="keep",
    )
    return _base_fig_layout(fig, theme, height=BAR_H)


def heatmap_figure(dist_df, theme="light"):
    """
    Heatmap of the share of factors at each FUK level, per KKA.

    Args:
        dist_df (pd.DataFrame): long-format distribution with columns kka_id,
            KKA (display label), FUK, Share. Rows are keyed by kka_id when present.
        theme (str, optional): light or dark. Defaults to "light".

    Returns:
        go.Figure: heatmap figure
    """
    if dist_df is None or dist_df.empty:
        pv = pd.DataFrame(columns=FUK_COLS, dtype=float)
    else:
        key = "kka_id" if "kka_id" in dist_df.columns else "KKA"
        labels = dict(zip(dist_df[key], dist_df["KKA"]))
        rows = list(labels)
        pv = (
            dist_df.assign(Share=pd.to_numeric(dist_df["Share"]))
            .pivot(index=key, columns="FUK", values="Share")
            .reindex(index=rows, columns=FUK_COLS)
        )
        pv.index = [labels[r] for r in rows]
    pv = pv.astype(float)
    z = pv.to_numpy()

    font_color = "#f6f7fb" if theme == "dark" else "#0b1020"
    muted = "#a9b0c4" if theme == "dark" else "#60646e"

    if z.size == 0 or np.all(np.isnan(z)):
        z_display = np.zeros_like(z, dtype=float)
        showscale = False
        annotations = [
            dict(
                text="No scored factors yet",
                xref="paper",
                yref="paper",
                x=0.5,
                y=0.5,
                showarrow=False,
                font=dict(size=14, color=muted),
            )
        ]
        colorscale = (
            [[0, "#d8dde9"], [1, "#d8dde9"]]
            if theme == "light"
            else [[0, "#2a334f"], [1, "#2a334f"]]
        )
    else:
        z_display = z
        showscale = True
        annotations = []
        for i, kka in enumerate(pv.index):
            for j, lvl in enumerate(pv.columns):
                val = pv.iloc[i, j]
                if pd.notna(val):
                    annotations.append(
                        dict(
                            x=lvl,
                            y=kka,
                            text=f"{val:.0f}%",
                            showarrow=False,
                            font=dict(size=11, color=font_color),
                        )
                    )
        colorscale = "Viridis"

    fig = go.Figure(
        data=go.Heatmap(
            z=z_display,
            x=list(pv.columns),
            y=list(pv.index),
            zmin=0,
            zmax=100,
            colorscale=colorscale,
            showscale=showscale,
            hovertemplate="KKA: %{y}<br>FUK: %{x}<br>Factors: %{z:.0f}%<extra></extra>",
            xgap=1,
            ygap=1,
        )
    )
    fig.update_layout(
        autosize=False,
        height=HEAT_H,
        xaxis=dict(title="FUK", type="category"),
        yaxis=dict(title="", type="category"),
        annotations=annotations,
    )
    return _base_fig_layout(fig, theme, height=HEAT_H)


def _aoi_line(a):
    return f"[{a['priority']}] {a['nama']}: {a['recommendation']} (due {a['due_date']})"


# ---------- Exports ------------------
def factor_export_frame(data):
    """Factor rows of a report snapshot, trimmed to CSV_COLUMNS."""
    df = pd.DataFrame(data.get("factors", []) or [], columns=CSV_COLUMNS)
    return df[CSV_COLUMNS]


def write_ppt_bytes(buf, data):
    """
    Write a PowerPoint presentation with the following slides to a bytes buffer.

    1. Title slide with organization, assessor, date and status.
    2. Summary slide with overall score, FUK and completion.
    3. KKA scores table.
    4. Areas of improvement.

    Args:
        buf (BytesIO): A BytesIO object to write the presentation to.
        data (dict): A report snapshot from report_data().
    """
    prs = Presentation()
    slide = prs.slides.add_slide(prs.slide_layouts[0])
    slide.shapes.title.text = TITLE
    slide.placeholders[1].text = (
        f"Organization: {data.get('org','')}\n"
        f"Assessor: {data.get('assessor','')}\n"
        f"Date: {data.get('assessment_date','')}\n"
        f"Status: {data.get('status','')}"
    )

    slide = prs.slides.add_slide(prs.slide_layouts[1])
    slide.shapes.title.text = "Summary"
    body = slide.shapes.placeholders[1].text_frame
    body.clear()
    body.paragraphs[0].text = f"Overall score: {data.get('overall_score', 0) * 100:.1f}%"
    body.add_paragraph().text = (
        f"Overall FUK: {data.get('overall_fuk', 0):.2f} ({data.get('overall_label', '')})"
    )
    body.add_paragraph().text = (
        f"Completion: {data.get('completed_factors', 0)}/{data.get('total_factors', 0)} "
        f"factors ({data.get('completion', 0):.1f}%)"
    )

    slide = prs.slides.add_slide(prs.slide_layouts[5])
    slide.shapes.title.text = "KKA Scores"
    kkas = data.get("kkas", [])
    rows, cols = len(kkas) + 1, 5
    table = slide.shapes.add_table(
        rows, cols, Inches(0.5), Inches(1.5), Inches(9.0), Inches(0.8 + 0.35 * rows)
    ).table
    for j, h in enumerate(["KKA", "Weight", "Score (%)", "FUK", "Label"]):
        table.cell(0, j).text = h
    for i, k in enumerate(kkas, start=1):
        table.cell(i, 0).text = f"{k.get('kka_kode') or ''} {k.get('kka_nama') or ''}".strip()
        table.cell(i, 1).text = f"{float(k.get('weight', 0)):.2f}"
        table.cell(i, 2).text = f"{float(k.get('score', 0)) * 100:.1f}"
        table.cell(i, 3).text = f"{float(k.get('fuk', 0)):.2f}"
        table.cell(i, 4).text = k.get("label", "")

    slide = prs.slides.add_slide(prs.slide_layouts[1])
    slide.shapes.title.text = "Areas of Improvement"
    tf = slide.placeholders[1].text_frame
    tf.clear()
    aoi = data.get("aoi", [])
    if not aoi:
        tf.paragraphs[0].text = "No KKA below the improvement threshold."
    for a in aoi:
        tf.add_paragraph().text = _aoi_line(a)
    prs.save(buf)


def _img_from_fig(fig, width=720, height=420, scale=2):
    # Requires kaleido installed
    png_bytes = pio.to_image(fig, format="png", width=width, height=height, scale=scale)
    return io.BytesIO(png_bytes)


def _table_style():
    return TableStyle(
        [
            ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor("#e9ebf3")),
            ("TEXTCOLOR", (0, 0), (-1, 0), colors.HexColor("#0b1020")),
            ("GRID", (0, 0), (-1, -1), 0.5, colors.grey),
            ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
            ("ALIGN", (1, 1), (-1, -1), "RIGHT"),
            ("BOTTOMPADDING", (0, 0), (-1, 0), 8),
            ("TOPPADDING", (0, 0), (-1, 0), 6),
        ]
    )


def write_pdf_bytes(buf, data, theme="light", include_charts=True):
    doc = SimpleDocTemplate(
        buf, pagesize=A4, leftMargin=16, rightMargin=16, topMargin=16, bottomMargin=16
    )
    styles = getSampleStyleSheet()
    story = [Paragraph(f"<b>{TITLE}</b>", styles["Title"]), Spacer(1, 8)]
    story += [
        Paragraph(
            f"Organization: {data.get('org','')}&nbsp;&nbsp;&nbsp; "
            f"Assessor: {data.get('assessor','')}&nbsp;&nbsp;&nbsp; "
            f"Date: {data.get('assessment_date','')}&nbsp;&nbsp;&nbsp; "
            f"Status: {data.get('status','')}",
            styles["Normal"],
        ),
        Spacer(1, 10),
        Paragraph(
            f"<b>Overall score:</b> {data.get('overall_score', 0) * 100:.1f}% "
            f"&nbsp;&nbsp; <b>FUK:</b> {data.get('overall_fuk', 0):.2f} "
            f"({data.get('overall_label', '')})",
            styles["Heading3"],
        ),
        Paragraph(
            f"Completion: {data.get('completed_factors', 0)}/{data.get('total_factors', 0)} "
            f"factors ({data.get('completion', 0):.1f}%)",
            styles["Normal"],
        ),
        Spacer(1, 8),
    ]

    kkas = data.get("kkas", [])
    tbl_data = [["KKA", "Weight", "Score (%)", "FUK", "Label"]] + [
        [
            Paragraph(f"{k.get('kka_kode') or ''} {k.get('kka_nama') or ''}", styles["Normal"]),
            f"{float(k.get('weight', 0)):.2f}",
            f"{float(k.get('score', 0)) * 100:.1f}",
            f"{float(k.get('fuk', 0)):.2f}",
            k.get("label", ""),
        ]
        for k in kkas
    ]
    avail = A4[0] - 72
    col0 = avail - 4 * 70
    tbl = Table(tbl_data, colWidths=[col0, 70, 70, 70, 70], hAlign="LEFT")
    tbl.setStyle(_table_style())
    story += [
        Paragraph("<b>KKA Scores</b>", styles["Heading3"]),
        Spacer(1, 6),
        tbl,
        Spacer(1, 12),
    ]

    if include_charts:
        figs = [
            ("FUK Radar", radar_figure(kkas, theme)),
            ("KKA Scores", bar_figure(kkas, theme)),
            (
                "FUK Distribution",
                heatmap_figure(pd.DataFrame(data.get("distribution", [])), theme),
            ),
        ]
        for title, fig in figs:
            story += [Paragraph(f"<b>{title}</b>", styles["Heading3"]), Spacer(1, 6)]
            img_buf = _img_from_fig(fig, width=520, height=320, scale=2)
            story += [RLImage(img_buf, width=520, height=320), Spacer(1, 12)]

    aoi = data.get("aoi", [])
    if aoi:
        bullets = ListFlowable(
            [ListItem(Paragraph(_aoi_line(a), styles["Normal"])) for a in aoi],
            bulletType="bullet",
        )
        story += [
            Paragraph("<b>Areas of Improvement</b>", styles["Heading3"]),
            Spacer(1, 6),
            bullets,
        ]

    doc.build(story)
    logger.info("Wrote PDF report for %r (%d KKAs)", data.get("org", ""), len(kkas))
