# app.py

import logging

import dash
import dash_daq as daq
import pandas as pd
from dash import ALL, Input, Output, State, dcc, html

from config import ASSESSMENT_STATUSES, GCG_DICTIONARY
from reports import (BAR_H, HEAT_H, RADAR_H, TITLE, bar_figure,
                     factor_export_frame, heatmap_figure, radar_figure,
                     report_data, write_pdf_bytes, write_ppt_bytes)
from scoring import (build_tree, fuk_label, process_assessment_responses,
                     validate_assessment, validate_dictionary,
                     validate_response)

logger = logging.getLogger(__name__)

app = dash.Dash(__name__, suppress_callback_exceptions=True)
app.title = TITLE
server = app.server

validate_dictionary(GCG_DICTIONARY)
TREE = build_tree(GCG_DICTIONARY)
FACTORS = {
    f.id: {"id": f.id, "max_score": f.max_score}
    for k in TREE
    for a in k.aspects
    for p in a.parameters
    for f in p.factors
}

GRAPH_CONFIG = {"responsive": False, "displaylogo": False, "scrollZoom": False}


def _slug(s: str):
    return "".join(ch.lower() if ch.isalnum() else "-" for ch in s).strip("-")


# -------------- Layout --------------------
def build_kka_cards():
    """
    Build one HTML card per KKA, listing its aspects and parameters with a
    numeric input per factor.

    :return: a list of HTML Div elements, each representing a KKA card
    """
    cards = []
    for kka in TREE:
        children = [html.H3(f"{kka.kode}. {kka.nama}", className="domain-title")]
        for aspect in kka.aspects:
            children.append(html.H4(f"{aspect.kode} {aspect.nama}", className="aspect-title"))
            for parameter in aspect.parameters:
                children.append(
                    html.Div(f"{parameter.kode} {parameter.nama}", className="param-title")
                )
                for factor in parameter.factors:
                    children.append(
                        html.Div(
                            [
                                html.Div(f"{factor.kode}. {factor.nama}", className="qtext"),
                                dcc.Input(
                                    id={"type": "f-input", "fid": factor.id},
                                    type="number",
                                    min=0,
                                    max=factor.max_score,
                                    step=0.05,
                                    placeholder=f"0 - {factor.max_score:g}",
                                    className="score-in",
                                ),
                            ],
                            className="qrow",
                        )
                    )
        cards.append(html.Div(children, className=f"domain-card d-{_slug(str(kka.kode))}"))
    return cards


def _field(label, control):
    return html.Div([html.Label(label), control], className="field")


app.layout = html.Div(
    id="page-root",
    className="page theme-light",
    children=[
        dcc.Store(id="results-store"),
        dcc.Store(id="theme-store", data="light"),
        # Header
        html.Div(
            [
                html.H1(TITLE),
                html.Div(
                    [
                        _field(
                            "Organization",
                            dcc.Input(id="org-name", placeholder="e.g., PT PLN (Persero)", className="textin"),
                        ),
                        _field(
                            "Assessor",
                            dcc.Input(id="assessor", placeholder="Your name", className="textin"),
                        ),
                        _field(
                            "Assessment date",
                            dcc.DatePickerSingle(id="assessment-date", display_format="YYYY-MM-DD"),
                        ),
                        _field(
                            "Status",
                            dcc.Dropdown(
                                id="status",
                                options=ASSESSMENT_STATUSES,
                                value="draft",
                                clearable=False,
                            ),
                        ),
                        _field(
                            "Dark mode",
                            daq.BooleanSwitch(
                                id="theme-switch",
                                on=False,
                                color="#4f46e5",
                                className="theme-switch",
                            ),
                        ),
                    ],
                    className="meta",
                ),
            ],
            className="header",
        ),
        dcc.Tabs(
            id="tabs",
            value="tab-assess",
            children=[
                dcc.Tab(
                    label="Assessment",
                    value="tab-assess",
                    children=[
                        html.Div(build_kka_cards(), className="grid"),
                        html.Ul(id="form-errors", className="errors"),
                        html.Button(
                            "Compute Scores",
                            id="submit-assessment",
                            n_clicks=0,
                            className="primary",
                        ),
                    ],
                ),
                dcc.Tab(
                    label="Results & Insights",
                    value="tab-results",
                    children=[
                        html.Div(id="kpis", className="kpis"),
                        # Export controls
                        html.Div(
                            [
                                html.Button("Download CSV", id="dl-csv", n_clicks=0, className="secondary"),
                                dcc.Download(id="dl-csv-out"),
                                html.Button("Download PPTX", id="dl-ppt", n_clicks=0, className="secondary"),
                                dcc.Download(id="dl-ppt-out"),
                                html.Button("Download PDF", id="dl-pdf", n_clicks=0, className="secondary"),
                                dcc.Download(id="dl-pdf-out"),
                            ],
                            className="export-row",
                        ),
                        html.Div(
                            [
                                dcc.Graph(id="radar", style={"height": f"{RADAR_H}px"}, config=GRAPH_CONFIG),
                                dcc.Graph(id="bar", style={"height": f"{BAR_H}px"}, config=GRAPH_CONFIG),
                            ],
                            className="charts",
                        ),
                        html.Div(
                            className="row-heat-actions",
                            children=[
                                html.Div(
                                    [
                                        html.H3("FUK Distribution"),
                                        dcc.Graph(id="heatmap", style={"height": f"{HEAT_H}px"}, config=GRAPH_CONFIG),
                                    ],
                                    className="col heatmap-col",
                                ),
                                html.Div(
                                    [
                                        html.H3("Areas of Improvement"),
                                        html.Ul(id="aoi-list", className="actions"),
                                    ],
                                    className="col recs-col",
                                ),
                            ],
                        ),
                    ],
                ),
            ],
        ),
    ],
)


# -------- Callbacks ------------------
def collect_responses(ids, values):
    """
    Pair factor inputs with their values, dropping empty and invalid ones.

    Returns:
        tuple: (responses, errors)
    """
    responses, errors = [], []
    for rid, value in zip(ids or [], values or []):
        if value is None or value == "":
            continue
        fid = rid["fid"]
        response = {"factor_id": fid, "score": value}
        problems = validate_response(response, FACTORS.get(fid))
        if problems:
            errors += [f"{fid}: {p}" for p in problems]
            continue
        responses.append(response)
    return responses, errors


@app.callback(
    Output("results-store", "data"),
    Output("form-errors", "children"),
    Input("submit-assessment", "n_clicks"),
    State("org-name", "value"),
    State("assessor", "value"),
    State("assessment-date", "date"),
    State("status", "value"),
    State({"type": "f-input", "fid": ALL}, "id"),
    State({"type": "f-input", "fid": ALL}, "value"),
    prevent_initial_call=True,
)
def on_submit(_, org, assessor, assessment_date, status, ids, values):
    """
    Score the entered responses and store a report snapshot.

    Header and response problems are listed under the form; invalid
    responses are left out of the computation.
    """
    responses, errors = collect_responses(ids, values)
    errors = validate_assessment(
        {"title": org, "assessment_date": assessment_date, "assessor_id": assessor}
    ) + errors

    result = process_assessment_responses(responses, GCG_DICTIONARY)
    logger.info(
        "Computed scores for %r: overall %.4f, %d/%d factors",
        org or "",
        result.overall_score,
        result.completed_factors,
        result.total_factors,
    )
    data = report_data(
        result,
        org=org,
        assessor=assessor,
        assessment_date=assessment_date,
        status=status,
    )
    return data, [html.Li(e) for e in errors]


def _kpi(title, value):
    return html.Div(
        [html.Div(title, className="kpi-title"), html.Div(value, className="kpi-value")],
        className="kpi",
    )


@app.callback(
    Output("kpis", "children"),
    Output("radar", "figure"),
    Output("bar", "figure"),
    Output("heatmap", "figure"),
    Output("aoi-list", "children"),
    Input("results-store", "data"),
    Input("theme-store", "data"),
    prevent_initial_call=True,
)
def update_results(data, theme):
    """
    Updates the KPIs, charts and areas of improvement from the stored snapshot.
    """
    if not data:
        raise dash.exceptions.PreventUpdate

    kkas = data.get("kkas", []) or []
    overall_fuk = float(data.get("overall_fuk", 0.0) or 0.0)
    kpi_children = [
        _kpi("Overall Score", f"{float(data.get('overall_score', 0.0) or 0.0) * 100:.1f}%"),
        _kpi("Overall FUK", f"{overall_fuk:.2f} · {fuk_label(overall_fuk)}"),
        _kpi(
            "Completion",
            f"{data.get('completed_factors', 0)}/{data.get('total_factors', 0)} "
            f"({float(data.get('completion', 0.0)):.0f}%)",
        ),
    ]
    for k in kkas:
        kpi_children.append(
            _kpi(f"KKA {k.get('kka_label') or k.get('kka_kode')}", f"{float(k.get('score', 0.0)) * 100:.1f}% · {k.get('label', '')}")
        )

    aoi = data.get("aoi", []) or []
    return (
        kpi_children,
        radar_figure(kkas, theme),
        bar_figure(kkas, theme),
        heatmap_figure(pd.DataFrame(data.get("distribution", []) or []), theme),
        [
            html.Li(f"[{a['priority']}] {a['nama']} (current: {a['percentage']}%, due {a['due_date']})")
            for a in aoi
        ]
        or [html.Li("No KKA below the improvement threshold.")],
    )


# Exports
@app.callback(
    Output("dl-csv-out", "data"),
    Input("dl-csv", "n_clicks"),
    State("results-store", "data"),
    prevent_initial_call=True,
)
def download_csv(_, data):
    if not data:
        raise dash.exceptions.PreventUpdate
    df = factor_export_frame(data)
    return dcc.send_data_frame(df.to_csv, "gcg_factor_scores.csv", index=False)


@app.callback(
    Output("dl-ppt-out", "data"),
    Input("dl-ppt", "n_clicks"),
    State("results-store", "data"),
    prevent_initial_call=True,
)
def download_ppt(_, data):
    if not data:
        raise dash.exceptions.PreventUpdate
    return dcc.send_bytes(lambda b: write_ppt_bytes(b, data), "GCG_Assessment.pptx")


@app.callback(
    Output("dl-pdf-out", "data"),
    Input("dl-pdf", "n_clicks"),
    State("results-store", "data"),
    State("theme-store", "data"),
    prevent_initial_call=True,
)
def download_pdf(_, data, theme):
    if not data:
        raise dash.exceptions.PreventUpdate
    return dcc.send_bytes(
        lambda b: write_pdf_bytes(b, data, theme or "light"),
        "GCG_Assessment.pdf",
    )


# UX: switch to results after computing
@app.callback(
    Output("tabs", "value"),
    Input("submit-assessment", "n_clicks"),
    prevent_initial_call=True,
)
def switch_to_results(n):
    if n:
        return "tab-results"
    raise dash.exceptions.PreventUpdate


# Theme toggle -> update page class and store
@app.callback(
    Output("page-root", "className"),
    Output("theme-store", "data"),
    Input("theme-switch", "on"),
)
def apply_theme(is_on):
    theme = "dark" if is_on else "light"
    return f"page theme-{theme}", theme


# ---------- Main -------------------
if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    app.run(debug=False)
