"""Per-instrument scoring entry points.

``compute_design_choice`` and ``compute_product_survey`` take raw counts
(any numeric-ish cell values), sanitise a private copy, run the scoring
components and compose the narrative.  Inputs are never mutated, and the
same inputs always produce equal results.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence

from surveyscore.analysis import categorical, likert, weighted
from surveyscore.analysis.metrics import coerce_weight, normalize_weights
from surveyscore.analysis.models import (
    CategoricalSummary,
    DesignChoiceResult,
    Narrative,
    ProductSurveyResult,
)
from surveyscore.analysis.narrative import (
    MIN_SAMPLE_SIZE,
    design_choice_conclusion,
    design_choice_interpretation,
    product_survey_conclusion,
    product_survey_interpretation,
)
from surveyscore.analysis.nps import nps_split
from surveyscore.analysis.shape import ShapeError, sanitized_matrix, sanitized_row
from surveyscore.questions import (
    COLOUR_QUESTION,
    KEYWORD_QUESTION,
    LIKERT_POINTS,
    NPS_BUCKETS,
    OBJET_CATEGORICAL_QUESTIONS,
    OBJET_LIKERT_QUESTIONS,
    PRICE_QUESTION,
    RING_QUESTION,
    SBLOT_CANDIDATES,
    SBLOT_DEFAULT_WEIGHTS,
    SBLOT_QUESTIONS,
    SLOT_QUESTION,
    Instrument,
)

logger = logging.getLogger(__name__)


def compute_design_choice(
    counts: Sequence[Sequence[object]],
    weights: Mapping[str, object],
    *,
    min_sample_size: int = MIN_SAMPLE_SIZE,
) -> DesignChoiceResult:
    """Score the S-Blot instrument: 10 questions × 4 candidate designs."""
    matrix = sanitized_matrix(counts, SBLOT_QUESTIONS, len(SBLOT_CANDIDATES), "S-Blot counts")
    totals = [sum(row) for row in matrix]
    shares = weighted.question_shares(matrix)
    raw_weights = {q: weights.get(q, 0.0) for q in SBLOT_QUESTIONS}
    norm = normalize_weights(raw_weights, SBLOT_QUESTIONS)
    weight_sum = sum(coerce_weight(w) for w in raw_weights.values())

    scores = weighted.composite_scores(shares, norm, SBLOT_QUESTIONS, SBLOT_CANDIDATES)
    ranking = weighted.rank_scores(scores)
    winner = ranking[0]
    runner_up = ranking[1]
    drivers = weighted.top_contributions(
        shares, norm, SBLOT_QUESTIONS, winner.index, runner_up.index
    )
    weakest = weighted.weakest_question(shares, SBLOT_QUESTIONS, winner.index)
    n = weighted.mean_respondents(totals)

    logger.debug(
        "S-Blot scored: winner=%s score=%.1f gap=%.1f n=%.1f",
        winner.label,
        winner.score,
        winner.score - runner_up.score,
        n,
    )

    narrative = Narrative(
        interpretation=design_choice_interpretation(ranking, drivers, weakest, n),
        conclusion=design_choice_conclusion(ranking, n, min_sample_size=min_sample_size),
    )
    return DesignChoiceResult(
        totals=totals,
        shares=shares,
        weight_sum=weight_sum,
        normalized_weights=norm,
        scores=scores,
        ranking=ranking,
        drivers=drivers,
        weakest_question=weakest,
        mean_respondents=n,
        narrative=narrative,
    )


def compute_product_survey(
    likert_counts: Mapping[str, Sequence[object]],
    nps_buckets: Sequence[object],
    categorical_counts: Mapping[str, Sequence[object]],
    *,
    min_sample_size: int = MIN_SAMPLE_SIZE,
    keyword_top_k: int = 3,
    colour_top_k: int = 2,
) -> ProductSurveyResult:
    """Score the Objet instrument: Likert questions, NPS and categorical tallies.

    Questions missing from *likert_counts* or *categorical_counts* count as
    unanswered.  Unknown question keys are rejected.
    """
    _check_keys(likert_counts, [q.key for q in OBJET_LIKERT_QUESTIONS], "Likert counts")
    _check_keys(
        categorical_counts, [q.key for q in OBJET_CATEGORICAL_QUESTIONS], "categorical counts"
    )

    stats = []
    for question in OBJET_LIKERT_QUESTIONS:
        raw = likert_counts.get(question.key, [0] * LIKERT_POINTS)
        buckets = sanitized_row(raw, LIKERT_POINTS, f"Likert {question.key}")
        stats.append(likert.likert_stat(question.key, buckets))

    split = nps_split(sanitized_row(nps_buckets, NPS_BUCKETS, "NPS buckets"))

    summaries: dict[str, CategoricalSummary] = {}
    for cq in OBJET_CATEGORICAL_QUESTIONS:
        raw = categorical_counts.get(cq.key, [0] * cq.option_count)
        counts = sanitized_row(raw, cq.option_count, f"Categorical {cq.key}")
        summaries[cq.key] = categorical.summarize(cq, counts)

    overall = likert.overall_score(stats)
    best = likert.strongest(stats)
    worst = likert.weakest(stats)
    total_n = sum(s.n for s in stats)
    n = weighted.mean_respondents([s.n for s in stats])

    logger.debug(
        "Objet scored: overall=%.1f nps=%.1f likert_n=%d nps_n=%d",
        overall,
        split.nps,
        total_n,
        split.total,
    )

    narrative = Narrative(
        interpretation=product_survey_interpretation(
            overall,
            best,
            worst,
            split,
            summaries[KEYWORD_QUESTION],
            summaries[COLOUR_QUESTION],
            summaries[RING_QUESTION],
            summaries[SLOT_QUESTION],
            keyword_top_k=keyword_top_k,
            colour_top_k=colour_top_k,
        ),
        conclusion=product_survey_conclusion(
            overall,
            split,
            worst,
            summaries[PRICE_QUESTION],
            n,
            min_sample_size=min_sample_size,
        ),
    )
    return ProductSurveyResult(
        likert_stats=stats,
        overall_score=overall,
        top2_mean=likert.top2_mean(stats),
        total_likert_responses=total_n,
        mean_respondents=n,
        strongest_question=best.key if best else "-",
        weakest_question=worst.key if worst else "-",
        nps=split,
        categorical=summaries,
        narrative=narrative,
    )


def compute(
    instrument: Instrument | str,
    counts: Sequence[Sequence[object]] | Mapping[str, Sequence[object]],
    weights: Mapping[str, object] | None = None,
    nps_buckets: Sequence[object] | None = None,
    categorical_counts: Mapping[str, Sequence[object]] | None = None,
    *,
    min_sample_size: int = MIN_SAMPLE_SIZE,
    keyword_top_k: int = 3,
    colour_top_k: int = 2,
) -> DesignChoiceResult | ProductSurveyResult:
    """Dispatch to the instrument's scoring function.

    For S-Blot, *counts* is the 10 × 4 matrix and *weights* defaults to the
    standard weight profile.  For Objet, *counts* maps Likert question keys
    to their five buckets; missing NPS buckets and categorical counts are
    treated as unanswered.  *keyword_top_k* and *colour_top_k* only affect
    the Objet narrative.
    """
    instrument = Instrument(instrument)
    if instrument is Instrument.SBLOT:
        if isinstance(counts, Mapping):
            msg = "S-Blot counts must be a list of rows, not a mapping"
            raise ShapeError(msg)
        return compute_design_choice(
            counts,
            SBLOT_DEFAULT_WEIGHTS if weights is None else weights,
            min_sample_size=min_sample_size,
        )
    if not isinstance(counts, Mapping):
        msg = "Objet Likert counts must be a mapping of question key to buckets"
        raise ShapeError(msg)
    return compute_product_survey(
        counts,
        [0] * NPS_BUCKETS if nps_buckets is None else nps_buckets,
        {} if categorical_counts is None else categorical_counts,
        min_sample_size=min_sample_size,
        keyword_top_k=keyword_top_k,
        colour_top_k=colour_top_k,
    )


def _check_keys(values: Mapping[str, object], allowed: Sequence[str], what: str) -> None:
    unknown = sorted(set(values) - set(allowed))
    if unknown:
        msg = f"{what}: unknown question keys {unknown} (expected a subset of {list(allowed)})"
        raise ShapeError(msg)
