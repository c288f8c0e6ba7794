# scoring.py

import logging
import math
from collections.abc import Mapping
from dataclasses import dataclass, field
from numbers import Real
from typing import Any, Iterator, List, Optional, Tuple

from config import (
    ACGS_CRITERIA,
    ACGS_NOT_APPLICABLE,
    ACGS_YES,
    DEFAULT_MAX_SCORE,
    DEFAULT_WEIGHT,
    FUK_COLOR_CLASS_NONE,
    FUK_COLOR_CLASSES,
    FUK_LABEL_NONE,
    FUK_LABELS,
    FUK_THRESHOLDS,
    PUGKI_AOI_TEXT,
    PUGKI_AOI_THRESHOLD,
    PUGKI_EXPLAIN,
)

logger = logging.getLogger(__name__)


class InvalidInput(ValueError):
    """Raised when the aggregator is handed something it cannot score."""


def _number(value, what: str) -> float:
    if isinstance(value, bool) or not isinstance(value, Real):
        raise InvalidInput(f"{what} must be numeric, got {value!r}")
    value = float(value)
    if not math.isfinite(value):
        raise InvalidInput(f"{what} must be finite, got {value!r}")
    return value


# ----------- FUK conversion & labels -------------
def score_to_fuk(score) -> float:
    """
    Convert an average score to a FUK (fulfillment level).

    >0.85 -> 1.00
    >0.75 -> 0.75
    >0.50 -> 0.50
    >0.00 -> 0.25
    else  -> 0.00

    The score is not clamped; anything above 1 lands in the top bucket.

    :param score: average score, normally 0..1
    :return: one of 0.00, 0.25, 0.50, 0.75, 1.00
    """
    s = _number(score, "score")
    for threshold, fuk in FUK_THRESHOLDS:
        if s > threshold:
            return fuk
    return 0.0


def _bucket(fuk, buckets, default):
    f = _number(fuk, "fuk")
    for lower, value in buckets:
        if f >= lower:
            return value
    return default


def fuk_label(fuk) -> str:
    """Text label for a FUK value (Sangat Baik, Baik, Cukup, Kurang, Tidak Ada)."""
    return _bucket(fuk, FUK_LABELS, FUK_LABEL_NONE)


def fuk_color_class(fuk) -> str:
    """CSS classes used to colour a FUK badge."""
    return _bucket(fuk, FUK_COLOR_CLASSES, FUK_COLOR_CLASS_NONE)


def weighted_average(pairs) -> float:
    """
    Weighted mean of (weight, value) pairs.

    Returns 0 for an empty list or when the weights sum to zero.
    """
    pairs = list(pairs or [])
    total = sum(w for w, _ in pairs)
    if not pairs or total == 0:
        return 0.0
    return sum(w * v for w, v in pairs) / total


# ----------- Tree nodes -------------
@dataclass
class Node:
    """
    One node of the assessment dictionary.

    `weight` is the relative importance of the node within its parent;
    `score`, `fuk` and `weighted_score` are filled in by the aggregator.
    """

    id: Any
    kode: Optional[str] = None
    nama: Optional[str] = None
    weight: float = DEFAULT_WEIGHT
    score: float = 0.0
    fuk: float = 0.0
    weighted_score: float = 0.0
    children: list = field(default_factory=list)

    level = "node"
    children_key = None
    weight_aliases = ()

    def to_dict(self) -> dict:
        p = self.level
        out = {
            f"{p}_id": self.id,
            f"{p}_kode": self.kode,
            f"{p}_nama": self.nama,
            f"{p}_weight": self.weight,
            f"{p}_score": self.score,
            f"{p}_fuk": self.fuk,
            "weightedScore": self.weighted_score,
        }
        if self.children_key:
            out[self.children_key] = [c.to_dict() for c in self.children]
        return out


@dataclass
class FactorNode(Node):
    max_score: float = DEFAULT_MAX_SCORE

    level = "factor"
    weight_aliases = ("score",)

    def to_dict(self) -> dict:
        return {
            "factor_id": self.id,
            "factor_kode": self.kode,
            "factor_nama": self.nama,
            "factor_weight": self.weight,
            "max_score": self.max_score,
            "factor_score": self.score,
            "factor_fuk": self.fuk,
        }


@dataclass
class ParameterNode(Node):
    level = "parameter"
    children_key = "factors"
    weight_aliases = ("parameter_score", "score", "bobot")

    @property
    def factors(self) -> List[FactorNode]:
        return self.children


@dataclass
class AspectNode(Node):
    level = "aspect"
    children_key = "parameters"
    weight_aliases = ("aspect_score", "score", "bobot")

    @property
    def parameters(self) -> List[ParameterNode]:
        return self.children


@dataclass
class KKANode(Node):
    level = "kka"
    children_key = "aspects"
    weight_aliases = ("kka_score", "score", "bobot")

    @property
    def aspects(self) -> List[AspectNode]:
        return self.children


CHILD_TYPES = {KKANode: AspectNode, AspectNode: ParameterNode, ParameterNode: FactorNode}


@dataclass
class AssessmentResult:
    kkas: List[KKANode] = field(default_factory=list)
    overall_score: float = 0.0
    overall_fuk: float = 0.0
    total_factors: int = 0
    completed_factors: int = 0

    def iter_factors(self) -> Iterator[Tuple[KKANode, AspectNode, ParameterNode, FactorNode]]:
        for kka in self.kkas:
            for aspect in kka.aspects:
                for parameter in aspect.parameters:
                    for factor in parameter.factors:
                        yield kka, aspect, parameter, factor

    def to_dict(self) -> dict:
        return {
            "kka_results": [k.to_dict() for k in self.kkas],
            "overall_score": self.overall_score,
            "overall_fuk": self.overall_fuk,
            "total_factors": self.total_factors,
            "completed_factors": self.completed_factors,
        }


# ----------- Building the tree -------------
def _weight(raw, keys, path) -> float:
    for key in keys:
        if raw.get(key) is not None:
            return _number(raw[key], f"{path}.{key}") or DEFAULT_WEIGHT
    return DEFAULT_WEIGHT


def _parse_node(cls, raw, path):
    if not isinstance(raw, Mapping):
        raise InvalidInput(f"{path}: expected a mapping, got {type(raw).__name__}")
    if raw.get("id") is None:
        raise InvalidInput(f"{path}: missing id")

    node = cls(
        id=raw["id"],
        kode=raw.get("kode"),
        nama=raw.get("nama"),
        weight=_weight(raw, ("weight",) + cls.weight_aliases, path),
    )

    if cls is FactorNode:
        max_score = raw.get("max_score")
        if max_score is not None:
            max_score = _number(max_score, f"{path}.max_score")
            if max_score <= 0:
                raise InvalidInput(f"{path}.max_score must be positive, got {max_score:g}")
            node.max_score = max_score
        return node

    items = raw.get(cls.children_key)
    if items is None:
        return node
    if not isinstance(items, (list, tuple)):
        raise InvalidInput(f"{path}.{cls.children_key} must be a list")
    child_cls = CHILD_TYPES[cls]
    node.children = [
        _parse_node(child_cls, item, f"{path}.{cls.children_key}[{i}]")
        for i, item in enumerate(items)
    ]
    return node


def build_tree(dictionary) -> List[KKANode]:
    """
    Build fresh KKA nodes from a KKA -> Aspect -> Parameter -> Factor dictionary.

    Legacy weight field names (`score`, `<level>_score`, `bobot`) are read when
    `weight` is absent. A missing child collection is an empty one, and a
    missing `max_score` is 1.

    Weights and max scores must already be numbers: strings such as "1.00"
    (as decimal columns come back from some database drivers) are rejected,
    not parsed. Convert them before calling.

    Raises:
        InvalidInput: a node is not a mapping, has no id, a child collection
            is not a list, a weight / max_score is not a finite number, or
            a max_score is zero or negative.
    """
    if dictionary is None:
        return []
    if not isinstance(dictionary, (list, tuple)):
        raise InvalidInput("dictionary must be a list of KKAs")
    return [_parse_node(KKANode, raw, f"kka[{i}]") for i, raw in enumerate(dictionary)]


def build_response_lookup(responses) -> dict:
    """
    Map factor id -> raw score.

    Accepts either a list of {"factor_id", "score"} records (later duplicates
    win) or a ready mapping. A `None` score counts as no response.
    """
    if responses is None:
        return {}
    items = responses.items() if isinstance(responses, Mapping) else None
    if items is None:
        if not isinstance(responses, (list, tuple)):
            raise InvalidInput("responses must be a list of records or a mapping")
        items = []
        for i, r in enumerate(responses):
            if not isinstance(r, Mapping):
                raise InvalidInput(f"response[{i}]: expected a mapping, got {type(r).__name__}")
            if r.get("factor_id") is None:
                raise InvalidInput(f"response[{i}]: missing factor_id")
            items.append((r["factor_id"], r.get("score")))

    lookup = {}
    for factor_id, score in items:
        if score is None:
            lookup.pop(factor_id, None)
            continue
        lookup[factor_id] = _number(score, f"score of factor {factor_id!r}")
    return lookup


# ----------- Rollups -------------
@dataclass(frozen=True)
class Rollup:
    score: float = 0.0
    fuk: float = 0.0
    weighted_score: float = 0.0


def rollup_parameter(factor_scores, weight=DEFAULT_WEIGHT) -> Rollup:
    """
    Parameter score is the plain mean of its factor scores (factor weights are
    not used) and its FUK is the FUK of that mean.
    """
    scores = list(factor_scores)
    if not scores:
        return Rollup()
    avg = sum(scores) / len(scores)
    fuk = score_to_fuk(avg)
    return Rollup(avg, fuk, (weight or DEFAULT_WEIGHT) * fuk)


def rollup_children(children, weight=DEFAULT_WEIGHT) -> Rollup:
    """
    Roll scored children (parameters, aspects or KKAs) up one level.

    score = weighted average of each child's weightedScore by the child's weight
    fuk   = unweighted mean of the children's FUK
    weightedScore = own weight * fuk
    """
    children = list(children)
    if not children:
        return Rollup()
    score = weighted_average(
        (
            c.weight,
            c.weighted_score if c.weighted_score is not None else c.score,
        )
        for c in children
    )
    fuk = sum(c.fuk for c in children) / len(children)
    return Rollup(score, fuk, (weight or DEFAULT_WEIGHT) * fuk)


def _apply(node, rollup):
    node.score = rollup.score
    node.fuk = rollup.fuk
    node.weighted_score = rollup.weighted_score


def aggregate(kkas, lookup) -> AssessmentResult:
    """Score already-built KKA nodes in place against a factor id -> score lookup."""
    result = AssessmentResult(kkas=list(kkas))
    for kka in result.kkas:
        for aspect in kka.aspects:
            for parameter in aspect.parameters:
                for factor in parameter.factors:
                    factor.score = lookup.get(factor.id, 0.0)
                    factor.fuk = score_to_fuk(factor.score)
                    result.total_factors += 1
                    if factor.score > 0:
                        result.completed_factors += 1
                _apply(
                    parameter,
                    rollup_parameter((f.score for f in parameter.factors), parameter.weight),
                )
            _apply(aspect, rollup_children(aspect.parameters, aspect.weight))
        _apply(kka, rollup_children(kka.aspects, kka.weight))

    overall = rollup_children(result.kkas)
    result.overall_score = overall.score
    result.overall_fuk = overall.fuk
    return result


def process_assessment_responses(responses, dictionary) -> AssessmentResult:
    """
    Score a whole assessment.

    Args:
        responses: list of {"factor_id", "score"} records, or a factor id -> score mapping.
            Factors without a response score 0.
        dictionary: list of KKAs, each with `aspects` -> `parameters` -> `factors`.

    Returns:
        AssessmentResult: a new annotated tree plus overall score / FUK and
            factor counters. The inputs are left untouched.
    """
    lookup = build_response_lookup(responses)
    result = aggregate(build_tree(dictionary), lookup)
    logger.debug(
        "Scored %d KKAs: %d/%d factors completed, overall %.4f (FUK %.4f)",
        len(result.kkas),
        result.completed_factors,
        result.total_factors,
        result.overall_score,
        result.overall_fuk,
    )
    return result


# ----------- ACGS / PUGKI variants -------------
def _records(items, what) -> list:
    if items is None:
        return []
    if not isinstance(items, (list, tuple)):
        raise InvalidInput(f"{what} must be a list of records")
    for i, r in enumerate(items):
        if not isinstance(r, Mapping):
            raise InvalidInput(f"{what}[{i}]: expected a mapping, got {type(r).__name__}")
    return list(items)


@dataclass(frozen=True)
class AcgsResult:
    overall_score: float = 0.0
    level_achieved: int = 0
    yes: int = 0
    applicable: int = 0


def acgs_answer_score(answer) -> int:
    return 1 if answer == ACGS_YES else 0


def acgs_level(score, criteria=None) -> int:
    """
    Level of the first criterion (ordered by level) with
    min_score <= score <= max_score; 0 when none matches.
    """
    s = _number(score, "score")
    rows = _records(ACGS_CRITERIA if criteria is None else criteria, "criteria")
    for c in sorted(rows, key=lambda c: _number(c.get("level"), "criteria level")):
        low = _number(c.get("min_score"), f"criteria level {c['level']} min_score")
        high = _number(c.get("max_score"), f"criteria level {c['level']} max_score")
        if low <= s <= high:
            return c["level"]
    return 0


def acgs_score(responses, criteria=None) -> AcgsResult:
    """
    Score an ACGS checklist.

    Every answer other than "N/A" is applicable; "Yes" answers score 1 and
    the rest 0. The overall score is Yes / applicable * 100 (0 when nothing
    is applicable), mapped to a level through `criteria` (ACGS_CRITERIA by
    default).

    Args:
        responses: list of {"answer": ...} records.
        criteria: list of {"level", "min_score", "max_score"} records.
    """
    yes = applicable = 0
    for r in _records(responses, "responses"):
        answer = r.get("answer")
        if answer == ACGS_NOT_APPLICABLE:
            continue
        applicable += 1
        yes += acgs_answer_score(answer)
    score = yes / applicable * 100 if applicable else 0.0
    result = AcgsResult(score, acgs_level(score, criteria), yes, applicable)
    logger.debug(
        "ACGS: %d/%d applicable answers Yes, score %.2f, level %s",
        yes,
        applicable,
        score,
        result.level_achieved,
    )
    return result


def pugki_score(responses) -> float:
    """Plain mean of the non-null response scores, 0 when there are none."""
    scores = [
        _number(r["score"], f"response[{i}].score")
        for i, r in enumerate(_records(responses, "responses"))
        if r.get("score") is not None
    ]
    if not scores:
        return 0.0
    return sum(scores) / len(scores)


def pugki_needs_improvement(item, threshold=PUGKI_AOI_THRESHOLD) -> bool:
    """A recommendation needs improvement when marked Explain or scored below threshold."""
    if item.get("comply_explain") == PUGKI_EXPLAIN:
        return True
    score = item.get("score")
    return score is not None and _number(score, "score") < threshold


def pugki_aoi_items(items, threshold=PUGKI_AOI_THRESHOLD) -> List[dict]:
    """
    AOI recommendation rows for the PUGKI recommendations that need improvement.

    Each input item may carry "kode", "nama", "prinsip_nama", "comply_explain"
    and "score"; the output keeps input order in "sort".
    """
    out = []
    for item in _records(items, "items"):
        if not pugki_needs_improvement(item, threshold):
            continue
        text = PUGKI_AOI_TEXT.format(nama=item.get("nama") or "")
        if item.get("comply_explain") == PUGKI_EXPLAIN:
            text += f" ({PUGKI_EXPLAIN})"
        out.append(
            {
                "section": item.get("prinsip_nama"),
                "nomor_indikator": item.get("kode"),
                "rekomendasi": text,
                "sort": len(out),
            }
        )
    return out


# ----------- Validation -------------
def validate_dictionary(dictionary) -> List[str]:
    """
    Check the sanity of an assessment dictionary.

    Structural problems raise InvalidInput; duplicate factor ids only produce
    warnings, which are logged and returned.
    """
    seen = set()
    warnings = []
    for kka in build_tree(dictionary):
        for aspect in kka.aspects:
            for parameter in aspect.parameters:
                for factor in parameter.factors:
                    if factor.id in seen:
                        warnings.append(f"Duplicate factor id {factor.id!r} in {parameter.id!r}")
                    seen.add(factor.id)
    for w in warnings:
        logger.warning("[dictionary] %s", w)
    return warnings


def validate_response(response, factor=None) -> List[str]:
    """Errors for a single {factor_id, score} response; empty when it is valid."""
    errors = []
    if not response.get("factor_id"):
        errors.append("Factor ID is required")

    score = response.get("score")
    if score is None:
        errors.append("Score is required")
        return errors
    if isinstance(score, bool) or not isinstance(score, Real):
        errors.append("Score must be a number")
        return errors

    max_score = (factor or {}).get("max_score")
    if max_score is None:
        max_score = DEFAULT_MAX_SCORE
    if score < 0 or score > max_score:
        errors.append(f"Score must be between 0 and {max_score:g}")
    return errors


def validate_assessment(assessment) -> List[str]:
    """Errors for the assessment header (title, date, assessor)."""
    errors = []
    if not assessment.get("title"):
        errors.append("Organization name is required")
    if not assessment.get("assessment_date"):
        errors.append("Assessment date is required")
    if not assessment.get("assessor_id"):
        errors.append("Assessor ID is required")
    return errors
