"""Net Promoter Score from an 11-point (0–10) recommendation question.

The bucket partition is fixed: 0–6 detractors, 7–8 passives, 9–10 promoters.
"""

from __future__ import annotations

from collections.abc import Sequence

from surveyscore.analysis.metrics import safe_ratio
from surveyscore.analysis.models import NPSSplit

DETRACTORS = range(0, 7)
PASSIVES = range(7, 9)
PROMOTERS = range(9, 11)


def nps_split(buckets: Sequence[int]) -> NPSSplit:
    """Split ``buckets`` (index = answer value) into the three NPS bands.

    An empty question yields all-zero shares and an NPS of 0.
    """
    total = sum(buckets)
    if total == 0:
        return NPSSplit()
    detractor = safe_ratio(sum(buckets[i] for i in DETRACTORS), total)
    passive = safe_ratio(sum(buckets[i] for i in PASSIVES), total)
    promoter = safe_ratio(sum(buckets[i] for i in PROMOTERS), total)
    return NPSSplit(
        detractor_share=detractor,
        passive_share=passive,
        promoter_share=promoter,
        nps=(promoter - detractor) * 100,
        total=total,
    )
