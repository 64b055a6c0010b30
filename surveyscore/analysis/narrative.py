"""Templated interpretation and conclusion text.

Each function takes only derived structures (plus explicit thresholds) and
returns a newline-joined block.  Numbers are always formatted with one
decimal place, so identical inputs give byte-identical text.
"""

from __future__ import annotations

from collections.abc import Sequence

from surveyscore.analysis.categorical import mode_label
from surveyscore.analysis.models import (
    CategoricalSummary,
    CompositeScore,
    Contribution,
    LikertStat,
    NPSSplit,
)

MIN_SAMPLE_SIZE = 10

# (threshold, label), checked top-down; anything below the last is the fallback
DESIGN_CHOICE_BANDS: list[tuple[float, str]] = [
    (80, "very strong"),
    (70, "strong"),
    (60, "moderate"),
    (50, "contested"),
]
DESIGN_CHOICE_FALLBACK_BAND = "insufficient"

PRODUCT_SURVEY_BANDS: list[tuple[float, str]] = [
    (80, "excellent"),
    (70, "good"),
    (60, "fair"),
    (50, "average"),
]
PRODUCT_SURVEY_FALLBACK_BAND = "needs improvement"


def _f1(x: float) -> str:
    return f"{x:.1f}"


def _pct(share: float) -> str:
    return f"{share * 100:.1f}%"


def band(score: float, bands: Sequence[tuple[float, str]], fallback: str) -> str:
    for threshold, label in bands:
        if score >= threshold:
            return label
    return fallback


def _caution(mean_respondents: float, min_sample_size: int) -> str | None:
    if mean_respondents < min_sample_size:
        return (
            f"Caution: small sample ({_f1(mean_respondents)} per question,"
            f" minimum {min_sample_size}); results are uncertain"
        )
    return None


# ---------------------------------------------------------------------------
# Instrument A: design choice
# ---------------------------------------------------------------------------


def _winner_and_runner_up(ranking: Sequence[CompositeScore]) -> tuple[CompositeScore, CompositeScore]:
    winner = ranking[0]
    runner_up = ranking[1] if len(ranking) > 1 else CompositeScore(label="-", index=0, score=0.0)
    return winner, runner_up


def design_choice_interpretation(
    ranking: Sequence[CompositeScore],
    drivers: Sequence[Contribution],
    weakest_question: str,
    mean_respondents: float,
) -> str:
    """Winner, band, gap, sample size, top drivers and the weakest question."""
    if not ranking:
        return ""
    winner, runner_up = _winner_and_runner_up(ranking)
    label = band(winner.score, DESIGN_CHOICE_BANDS, DESIGN_CHOICE_FALLBACK_BAND)
    lead = drivers[0] if drivers else None
    lines = [
        f"Top composite score: {winner.label} ({_f1(winner.score)} points, {label})",
        f"Gap to runner-up: {_f1(winner.score - runner_up.score)} points",
        f"Sample (mean per question): {_f1(mean_respondents)} respondents",
        f"Leading questions: {', '.join(f'{d.question}↑' for d in drivers)}",
        (
            f"Reading: {winner.label} leads consistently on the key questions;"
            f" its share on {lead.question if lead else '-'}"
            f" ({_pct(lead.winner_share if lead else 0.0)})"
            " contributed most to the composite score."
        ),
        (
            f"Improvement point: {winner.label} is relatively weak on {weakest_question};"
            " improving that axis in the next round leaves room for a higher score."
        ),
    ]
    return "\n".join(lines)


def design_choice_verdict(winner: CompositeScore, gap: float) -> str:
    if winner.score >= 70 and gap >= 5:
        return f"Adopt: {winner.label}"
    if winner.score >= 60 and gap >= 3:
        return f"Conditional adoption (revise and re-test): {winner.label}"
    return "Further validation needed"


def design_choice_conclusion(
    ranking: Sequence[CompositeScore],
    mean_respondents: float,
    *,
    min_sample_size: int = MIN_SAMPLE_SIZE,
) -> str:
    """Verdict from the winner's score and its lead, plus a small-sample caution."""
    if not ranking:
        return ""
    winner, runner_up = _winner_and_runner_up(ranking)
    gap = winner.score - runner_up.score
    lines = [
        f"Conclusion: {design_choice_verdict(winner, gap)}",
        f"Basis: composite score {_f1(winner.score)} points, gap to runner-up {_f1(gap)} points",
    ]
    caution = _caution(mean_respondents, min_sample_size)
    if caution:
        lines.append(caution)
    return "\n".join(lines)


# ---------------------------------------------------------------------------
# Instrument B: product impression
# ---------------------------------------------------------------------------


def product_survey_interpretation(
    overall: float,
    strongest: LikertStat | None,
    weakest: LikertStat | None,
    nps: NPSSplit,
    keywords: CategoricalSummary,
    colours: CategoricalSummary,
    ring: CategoricalSummary,
    slot: CategoricalSummary,
    *,
    keyword_top_k: int = 3,
    colour_top_k: int = 2,
) -> str:
    """Overall band, best/worst question, NPS, top keywords and favorability lines."""
    label = band(overall, PRODUCT_SURVEY_BANDS, PRODUCT_SURVEY_FALLBACK_BAND)
    top_keywords = ", ".join(f"{o.label} ({o.count})" for o in keywords.top(keyword_top_k))
    top_colours = ", ".join(o.label for o in colours.top(colour_top_k))
    lines = [
        f"Overall score: {_f1(overall)} points ({label})",
        (
            f"Strongest question: {strongest.key if strongest else '-'}"
            f" ({_f1(strongest.score100 if strongest else 0.0)} points)"
        ),
        (
            f"Weakest question: {weakest.key if weakest else '-'}"
            f" ({_f1(weakest.score100 if weakest else 0.0)} points)"
        ),
        (
            f"NPS: {_f1(nps.nps)} (Promoters {_pct(nps.promoter_share)},"
            f" Passives {_pct(nps.passive_share)}, Detractors {_pct(nps.detractor_share)})"
        ),
        f"First-impression keywords top {keyword_top_k}: {top_keywords}",
        f"Alternative colour top {colour_top_k}: {top_colours}",
    ]
    ring_fav = ring.favorability
    if ring_fav and ring_fav.total:
        lines.append(
            f"Ring impression balance (+){ring_fav.positive} / (±){ring_fav.neutral}"
            f" / (-){ring_fav.negative} → net favorability {_f1(ring_fav.index)}pt"
        )
    slot_fav = slot.favorability
    if slot_fav and slot_fav.total:
        lines.append(
            f"SD slot impression net favorability {_f1(slot_fav.index)}pt"
            f" (positive {slot_fav.positive}, negative {slot_fav.negative})"
        )
    return "\n".join(lines)


def product_survey_verdict(overall: float, nps: float) -> str:
    if overall >= 75 and nps >= 30:
        return "Ready to launch"
    if overall >= 65 and nps >= 0:
        return "Revise before launch"
    return "Redesign recommended"


def product_survey_conclusion(
    overall: float,
    nps: NPSSplit,
    weakest: LikertStat | None,
    price: CategoricalSummary,
    mean_respondents: float,
    *,
    min_sample_size: int = MIN_SAMPLE_SIZE,
) -> str:
    """Launch verdict from the overall score and NPS, with price and sample notes."""
    lines = [
        f"Conclusion: {product_survey_verdict(overall, nps.nps)}",
        (
            f"Basis: overall {_f1(overall)} / NPS {_f1(nps.nps)}"
            f" / weakest {weakest.key if weakest else '-'}"
        ),
    ]
    preferred = mode_label(price)
    if preferred is not None:
        lines.append(f"Preferred price band: {preferred}")
    caution = _caution(mean_respondents, min_sample_size)
    if caution:
        lines.append(caution)
    return "\n".join(lines)
