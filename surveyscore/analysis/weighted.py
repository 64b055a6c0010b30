"""Weighted composite scores for the design-choice instrument.

Each question asks respondents to pick one of several candidate designs.
A candidate's composite score is the weight-averaged share of respondents
who picked it, scaled to 0–100:

    composite[c] = 100 × Σ_q  w_norm[q] × share[q][c]

Scores are independent aggregates, not a partition; they need not sum to
100.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence

from surveyscore.analysis.metrics import row_shares
from surveyscore.analysis.models import CompositeScore, Contribution

DEFAULT_TOP_DRIVERS = 3


def question_shares(counts: Sequence[Sequence[int]]) -> list[list[float]]:
    return [row_shares(row) for row in counts]


def composite_scores(
    shares: Sequence[Sequence[float]],
    normalized_weights: Mapping[str, float],
    question_keys: Sequence[str],
    candidate_labels: Sequence[str],
) -> list[CompositeScore]:
    """One composite score per candidate, in candidate (column) order."""
    scores: list[CompositeScore] = []
    for c_idx, label in enumerate(candidate_labels):
        acc = 0.0
        for q_idx, key in enumerate(question_keys):
            acc += normalized_weights.get(key, 0.0) * shares[q_idx][c_idx]
        scores.append(CompositeScore(label=label, index=c_idx, score=acc * 100))
    return scores


def rank_scores(scores: Sequence[CompositeScore]) -> list[CompositeScore]:
    """Sort by score descending and fill in ``rank``.

    ``sorted`` is stable, so tied candidates keep their input order; no
    secondary key is applied.
    """
    ranking = sorted(scores, key=lambda s: s.score, reverse=True)
    for position, score in enumerate(ranking, start=1):
        score.rank = position
    return ranking


def top_contributions(
    shares: Sequence[Sequence[float]],
    normalized_weights: Mapping[str, float],
    question_keys: Sequence[str],
    winner_index: int,
    runner_up_index: int,
    *,
    top_n: int = DEFAULT_TOP_DRIVERS,
) -> list[Contribution]:
    """Questions that most separate the winner from the runner-up.

    contribution = (winner share − runner-up share) × normalised weight,
    sorted descending (stable on ties, question order), first *top_n*.
    """
    contributions = [
        Contribution(
            question=key,
            contribution=(shares[q_idx][winner_index] - shares[q_idx][runner_up_index])
            * normalized_weights.get(key, 0.0),
            winner_share=shares[q_idx][winner_index],
        )
        for q_idx, key in enumerate(question_keys)
    ]
    contributions.sort(key=lambda c: c.contribution, reverse=True)
    return contributions[:top_n]


def weakest_question(
    shares: Sequence[Sequence[float]],
    question_keys: Sequence[str],
    candidate_index: int,
) -> str:
    """The question where *candidate_index* has its lowest share (first on ties)."""
    if not question_keys:
        return "-"
    ordered = sorted(
        range(len(question_keys)), key=lambda q_idx: shares[q_idx][candidate_index]
    )
    return question_keys[ordered[0]]


def mean_respondents(totals: Sequence[int]) -> float:
    """Average number of answers per question, the instrument's sample size."""
    if not totals:
        return 0.0
    return sum(totals) / len(totals)

