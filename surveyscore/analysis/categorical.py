"""Tallies for single- and multi-select questions.

For multi-select questions the counts are selections, not respondents, so
``total`` can exceed the number of people who answered.
"""

from __future__ import annotations

from collections.abc import Sequence

from surveyscore.analysis.metrics import net_index
from surveyscore.analysis.models import CategoricalSummary, Favorability, OptionCount
from surveyscore.questions import CategoricalQuestion, FavorabilityRule


def rank_options(labels: Sequence[str], counts: Sequence[int]) -> list[OptionCount]:
    """Options by count descending; ties keep option order."""
    options = [OptionCount(label=label, count=count) for label, count in zip(labels, counts)]
    return sorted(options, key=lambda o: o.count, reverse=True)


def favorability(counts: Sequence[int], rule: FavorabilityRule) -> Favorability:
    """Signed favorability index for an opinion question.

    Only options named in *rule* count towards the total; indices past the
    end of *counts* read as 0.
    """

    def _sum(indices: tuple[int, ...]) -> int:
        return sum(counts[i] for i in indices if i < len(counts))

    pos = _sum(rule.positive)
    neu = _sum(rule.neutral)
    neg = _sum(rule.negative)
    total = pos + neu + neg
    return Favorability(
        positive=pos,
        neutral=neu,
        negative=neg,
        total=total,
        index=net_index(pos, neg, total),
    )


def summarize(question: CategoricalQuestion, counts: Sequence[int]) -> CategoricalSummary:
    """Total, stable ranking and (where defined) favorability for *question*."""
    return CategoricalSummary(
        key=question.key,
        total=sum(counts),
        ranking=rank_options(question.options, counts),
        favorability=(
            favorability(counts, question.favorability) if question.favorability else None
        ),
    )


def mode_label(summary: CategoricalSummary) -> str | None:
    """Most-chosen option (first on ties), or None when nothing was chosen."""
    if summary.total == 0 or not summary.ranking:
        return None
    return summary.ranking[0].label
