"""Five-point Likert statistics."""

from __future__ import annotations

from collections.abc import Sequence

from surveyscore.analysis.metrics import finite_mean, likert_mean, rescale_to_100, top_box_share
from surveyscore.analysis.models import LikertStat


def likert_stat(key: str, buckets: Sequence[int]) -> LikertStat:
    """N, mean, Top-2-Box share and 0–100 score for one question.

    ``buckets[i]`` is the number of respondents who answered ``i + 1``.
    """
    mean = likert_mean(buckets)
    return LikertStat(
        key=key,
        n=sum(buckets),
        mean=mean,
        top2_share=top_box_share(buckets, 2),
        score100=rescale_to_100(mean, len(buckets)),
    )


def overall_score(stats: Sequence[LikertStat]) -> float:
    """Unweighted mean of the per-question 0–100 scores.

    Non-finite scores are skipped; with the zero fallbacks above none occur,
    but a caller-built ``LikertStat`` could carry one.
    """
    return finite_mean(s.score100 for s in stats)


def top2_mean(stats: Sequence[LikertStat]) -> float:
    """Average Top-2-Box share across questions."""
    return finite_mean(s.top2_share for s in stats)


def strongest(stats: Sequence[LikertStat]) -> LikertStat | None:
    """Highest-scoring question (first in table order on ties)."""
    if not stats:
        return None
    return sorted(stats, key=lambda s: s.score100, reverse=True)[0]


def weakest(stats: Sequence[LikertStat]) -> LikertStat | None:
    """Lowest-scoring question (first in table order on ties)."""
    if not stats:
        return None
    return sorted(stats, key=lambda s: s.score100)[0]
