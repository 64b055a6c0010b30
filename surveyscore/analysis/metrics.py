"""Low-level arithmetic for survey scoring.

These are pure functions: no I/O, no Pydantic models, no question tables.
Higher-level code (weighted scores, Likert stats, NPS, categorical tallies)
calls these.

Every ratio in the package goes through :func:`safe_ratio`, so a zero
denominator always yields 0 rather than NaN or infinity.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Mapping, Sequence


def coerce_count(value: object) -> int:
    """Coerce a raw cell value to a non-negative integer count.

    Non-numeric, non-finite and negative values become 0.  Fractional values
    are truncated (``"3.7"`` → 3).
    """
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value if value >= 0 else 0
    try:
        number = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return 0
    if not math.isfinite(number) or number < 0:
        return 0
    return int(number)


def coerce_weight(value: object) -> float:
    """Coerce a raw weight to a non-negative finite float (else 0.0)."""
    try:
        number = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(number) or number < 0:
        return 0.0
    return number


def coerce_row(values: Iterable[object]) -> list[int]:
    return [coerce_count(v) for v in values]


def clamp01(x: float) -> float:
    return max(0.0, min(1.0, x))


def safe_ratio(numerator: float, denominator: float) -> float:
    """numerator / denominator, or 0.0 when the denominator is 0."""
    if denominator == 0:
        return 0.0
    return numerator / denominator


def row_shares(row: Sequence[int]) -> list[float]:
    """Convert one count row to within-row proportions.

    Shares sum to 1 when the row has any responses.  A zero-total row means
    "no opinion recorded" and yields all-zero shares.
    """
    total = sum(row)
    return [safe_ratio(v, total) for v in row]


def normalize_weights(weights: Mapping[str, object], keys: Sequence[str]) -> dict[str, float]:
    """Normalise *weights* over *keys* so they sum to 1.

    Missing keys read as 0.  When every weight is 0 the result is all zeros,
    which in turn makes every composite score 0.
    """
    raw = {k: coerce_weight(weights.get(k, 0.0)) for k in keys}
    total = sum(raw.values())
    return {k: safe_ratio(w, total) for k, w in raw.items()}


def likert_mean(buckets: Sequence[int]) -> float:
    """Mean response on a 1-based scale (bucket 0 = answer 1), or 0 if empty."""
    n = sum(buckets)
    return safe_ratio(sum((i + 1) * c for i, c in enumerate(buckets)), n)


def top_box_share(buckets: Sequence[int], boxes: int = 2) -> float:
    """Share of responses in the top *boxes* buckets, or 0 if empty."""
    n = sum(buckets)
    return safe_ratio(sum(buckets[-boxes:]), n)


def rescale_to_100(mean: float, points: int = 5) -> float:
    """Linear map of a 1..points mean onto 0..100, clamped.

    An empty question (mean 0) clamps to 0.
    """
    return clamp01((mean - 1) / (points - 1)) * 100


def finite_mean(values: Iterable[float]) -> float:
    """Arithmetic mean of the finite values, or 0.0 when there are none."""
    valid = [v for v in values if math.isfinite(v)]
    return safe_ratio(sum(valid), len(valid))


def net_index(positive: int, negative: int, total: int) -> float:
    """Signed (positive − negative) / total × 100, in [-100, 100]."""
    return safe_ratio(positive - negative, total) * 100
