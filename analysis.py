# analysis.py

import datetime
from collections import Counter

import numpy as np
import pandas as pd

from config import (
    AOI_DEFAULT_PRIORITY,
    AOI_DUE_DAYS,
    AOI_NAME,
    AOI_PRIORITIES,
    AOI_RECOMMENDATION,
    AOI_THRESHOLD,
    FUK_LEVELS,
)
from scoring import fuk_label

FACTOR_COLUMNS = [
    "kka_id",
    "kka_kode",
    "kka_nama",
    "aspect_id",
    "aspect_kode",
    "aspect_nama",
    "parameter_id",
    "parameter_kode",
    "parameter_nama",
    "factor_id",
    "factor_kode",
    "factor_nama",
    "max_score",
    "factor_score",
    "factor_fuk",
    "completed",
]

KKA_COLUMNS = [
    "kka_id",
    "kka_kode",
    "kka_nama",
    "weight",
    "score",
    "fuk",
    "weightedScore",
    "percentage",
    "label",
    "factors",
    "completed",
]


def to_percent(x):
    """Score (0..1) to a whole percentage, halves rounded up."""
    return int(np.floor(float(x) * 100 + 0.5))


def factor_frame(result):
    """
    One row per factor of an aggregation result, with its KKA / aspect /
    parameter context.

    :param result: scoring.AssessmentResult
    :return: pd.DataFrame with FACTOR_COLUMNS
    """
    rows = []
    for kka, aspect, parameter, factor in result.iter_factors():
        rows.append(
            {
                "kka_id": kka.id,
                "kka_kode": kka.kode,
                "kka_nama": kka.nama,
                "aspect_id": aspect.id,
                "aspect_kode": aspect.kode,
                "aspect_nama": aspect.nama,
                "parameter_id": parameter.id,
                "parameter_kode": parameter.kode,
                "parameter_nama": parameter.nama,
                "factor_id": factor.id,
                "factor_kode": factor.kode,
                "factor_nama": factor.nama,
                "max_score": factor.max_score,
                "factor_score": factor.score,
                "factor_fuk": factor.fuk,
                "completed": factor.score > 0,
            }
        )
    return pd.DataFrame(rows, columns=FACTOR_COLUMNS)


def kka_summary(result):
    """
    Per-KKA scores plus factor counts.

    KKAs without any factor are kept, with zero counts.
    """
    ff = factor_frame(result)
    counts = ff.groupby("kka_id").agg(
        factors=("factor_id", "count"), completed=("completed", "sum")
    )
    rows = []
    for kka in result.kkas:
        n = int(counts.loc[kka.id, "factors"]) if kka.id in counts.index else 0
        done = int(counts.loc[kka.id, "completed"]) if kka.id in counts.index else 0
        rows.append(
            {
                "kka_id": kka.id,
                "kka_kode": kka.kode,
                "kka_nama": kka.nama,
                "weight": kka.weight,
                "score": kka.score,
                "fuk": kka.fuk,
                "weightedScore": kka.weighted_score,
                "percentage": to_percent(kka.score),
                "label": fuk_label(kka.fuk),
                "factors": n,
                "completed": done,
            }
        )
    return pd.DataFrame(rows, columns=KKA_COLUMNS)


def kka_labels(kkas):
    """
    Display label per KKA: its code (or id when it has none), with the id
    appended when several KKAs would otherwise share a label.
    """
    labels = [str(k.kode or k.id) for k in kkas]
    counts = Counter(labels)
    return [
        f"{label} ({k.id})" if counts[label] > 1 else label
        for label, k in zip(labels, kkas)
    ]


def fuk_distribution(result):
    """
    Share of factors (in %) sitting at each FUK level, per KKA.

    Index is the KKA id, columns are FUK_LEVELS. KKAs without factors get an
    all-NaN row.
    """
    ff = factor_frame(result)
    index = pd.Index([k.id for k in result.kkas], name="kka_id")
    if ff.empty:
        return pd.DataFrame(index=index, columns=FUK_LEVELS, dtype=float)
    pv = pd.crosstab(ff["kka_id"], ff["factor_fuk"], normalize="index") * 100
    pv = pv.reindex(columns=FUK_LEVELS, fill_value=0.0).reindex(index=index)
    return pv.astype(float).round(2)


def completion_percentage(result):
    """Completed factors as a percentage of all factors (0 when there are none)."""
    if not result.total_factors:
        return 0.0
    return round(result.completed_factors / result.total_factors * 100, 2)


def aoi_priority(pct):
    for upper, priority in AOI_PRIORITIES:
        if pct < upper:
            return priority
    return AOI_DEFAULT_PRIORITY


def aoi_candidates(result, today=None):
    """
    Return one Area of Improvement per KKA scoring below AOI_THRESHOLD,
    weakest first. Each item is a dict with keys "kka_id", "kka_kode",
    "kka_nama", "score", "percentage", "priority", "nama",
    "recommendation" and "due_date" (ISO date, AOI_DUE_DAYS from today).
    """
    today = today or datetime.date.today()
    due = (today + datetime.timedelta(days=AOI_DUE_DAYS)).isoformat()
    target = to_percent(AOI_THRESHOLD)
    items = []
    for kka in result.kkas:
        if kka.score >= AOI_THRESHOLD:
            continue
        pct = to_percent(kka.score)
        name = kka.nama or kka.kode or str(kka.id)
        items.append(
            {
                "kka_id": kka.id,
                "kka_kode": kka.kode,
                "kka_nama": kka.nama,
                "score": kka.score,
                "percentage": pct,
                "priority": aoi_priority(pct),
                "nama": AOI_NAME.format(kka=name),
                "recommendation": AOI_RECOMMENDATION.format(
                    kka=name, pct=pct, target=target
                ),
                "due_date": due,
            }
        )
    return sorted(items, key=lambda x: x["score"])
