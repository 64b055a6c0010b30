"""Session state: the editable counts and weights behind each instrument.

The scoring engine is pure; this module is the thin mutable layer around
it.  State lives at ``<state_file>`` (default ``.surveyscore/state.json``)
as one JSON document keyed by instrument id::

    {"schema_version": 1, "updated_at": "...", "sblot": {...}, "objet": {...}}

Writes are atomic (write tmp then rename), but there are no durability
guarantees beyond that: an unreadable or invalid file is logged and replaced
by defaults on the next load.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError, field_validator

from surveyscore.analysis.engine import compute_design_choice, compute_product_survey
from surveyscore.analysis.metrics import coerce_count, coerce_row, coerce_weight
from surveyscore.analysis.models import DesignChoiceResult, ProductSurveyResult
from surveyscore.analysis.narrative import MIN_SAMPLE_SIZE
from surveyscore.questions import (
    LIKERT_KEYS,
    LIKERT_POINTS,
    NPS_BUCKETS,
    OBJET_CATEGORICAL_QUESTIONS,
    SBLOT_CANDIDATES,
    SBLOT_DEFAULT_WEIGHTS,
    SBLOT_QUESTIONS,
    Instrument,
    get_categorical_question,
)

logger = logging.getLogger(__name__)

SCHEMA_VERSION = 1


# ---------------------------------------------------------------------------
# Defaults
# ---------------------------------------------------------------------------


def _zero_sblot_counts() -> list[list[int]]:
    return [[0] * len(SBLOT_CANDIDATES) for _ in SBLOT_QUESTIONS]


def _zero_likert_counts() -> dict[str, list[int]]:
    return {key: [0] * LIKERT_POINTS for key in LIKERT_KEYS}


def _zero_categorical_counts() -> dict[str, list[int]]:
    return {q.key: [0] * q.option_count for q in OBJET_CATEGORICAL_QUESTIONS}


def _sanitize_rows(
    value: object,
    widths: dict[str, int],
    what: str,
) -> dict[str, list[int]]:
    """Coerce a ``{key: row}`` mapping, filling missing keys with zero rows."""
    if not isinstance(value, dict):
        msg = f"{what} must be an object keyed by question"
        raise ValueError(msg)
    unknown = sorted(set(value) - set(widths))
    if unknown:
        msg = f"{what}: unknown questions {unknown}"
        raise ValueError(msg)
    rows: dict[str, list[int]] = {}
    for key, width in widths.items():
        row = value.get(key, [0] * width)
        if not isinstance(row, list) or len(row) != width:
            msg = f"{what} {key}: expected a list of {width} counts"
            raise ValueError(msg)
        rows[key] = coerce_row(row)
    return rows


# ---------------------------------------------------------------------------
# Models
# ---------------------------------------------------------------------------


class DesignChoiceState(BaseModel):
    """S-Blot counts (10 × 4) and raw question weights."""

    counts: list[list[int]] = Field(default_factory=_zero_sblot_counts)
    weights: dict[str, float] = Field(default_factory=lambda: dict(SBLOT_DEFAULT_WEIGHTS))

    @field_validator("counts", mode="before")
    @classmethod
    def _sanitize_counts(cls, value: object) -> list[list[int]]:
        if not isinstance(value, list) or len(value) != len(SBLOT_QUESTIONS):
            msg = f"counts must be a list of {len(SBLOT_QUESTIONS)} rows"
            raise ValueError(msg)
        rows = []
        for key, row in zip(SBLOT_QUESTIONS, value):
            if not isinstance(row, list) or len(row) != len(SBLOT_CANDIDATES):
                msg = f"counts {key}: expected {len(SBLOT_CANDIDATES)} cells"
                raise ValueError(msg)
            rows.append(coerce_row(row))
        return rows

    @field_validator("weights", mode="before")
    @classmethod
    def _sanitize_weights(cls, value: object) -> dict[str, float]:
        if not isinstance(value, dict):
            msg = "weights must be an object keyed by question"
            raise ValueError(msg)
        return {q: coerce_weight(value.get(q, 0.0)) for q in SBLOT_QUESTIONS}


class ProductSurveyState(BaseModel):
    """Objet Likert buckets, NPS buckets and categorical option counts."""

    likert_counts: dict[str, list[int]] = Field(default_factory=_zero_likert_counts)
    nps_counts: list[int] = Field(default_factory=lambda: [0] * NPS_BUCKETS)
    categorical_counts: dict[str, list[int]] = Field(default_factory=_zero_categorical_counts)

    @field_validator("likert_counts", mode="before")
    @classmethod
    def _sanitize_likert(cls, value: object) -> dict[str, list[int]]:
        return _sanitize_rows(value, {k: LIKERT_POINTS for k in LIKERT_KEYS}, "likert_counts")

    @field_validator("nps_counts", mode="before")
    @classmethod
    def _sanitize_nps(cls, value: object) -> list[int]:
        if not isinstance(value, list) or len(value) != NPS_BUCKETS:
            msg = f"nps_counts must be a list of {NPS_BUCKETS} counts"
            raise ValueError(msg)
        return coerce_row(value)

    @field_validator("categorical_counts", mode="before")
    @classmethod
    def _sanitize_categorical(cls, value: object) -> dict[str, list[int]]:
        widths = {q.key: q.option_count for q in OBJET_CATEGORICAL_QUESTIONS}
        return _sanitize_rows(value, widths, "categorical_counts")


class SessionState(BaseModel):
    """Top-level persisted state, one section per instrument."""

    schema_version: int = SCHEMA_VERSION
    updated_at: str | None = None
    sblot: DesignChoiceState = Field(default_factory=DesignChoiceState)
    objet: ProductSurveyState = Field(default_factory=ProductSurveyState)


# ---------------------------------------------------------------------------
# Read / write helpers
# ---------------------------------------------------------------------------


def _now_iso() -> str:
    return datetime.now(tz=timezone.utc).isoformat()


def load_state(path: Path) -> SessionState:
    """Load state from *path*; a missing or invalid file yields defaults."""
    if not path.exists():
        return SessionState()
    try:
        return SessionState.model_validate_json(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, ValidationError) as exc:
        logger.warning("Ignoring unreadable state file %s: %s", path, exc)
        return SessionState()


def write_state(state: SessionState, path: Path) -> None:
    """Write the state to disk (atomic: write tmp then rename)."""
    state.updated_at = _now_iso()
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_suffix(".tmp")
    tmp.write_text(state.model_dump_json(indent=2), encoding="utf-8")
    tmp.replace(path)
    logger.debug("Wrote session state to %s", path)


# ---------------------------------------------------------------------------
# Edits
# ---------------------------------------------------------------------------


def _question_index(question: str) -> int:
    try:
        return SBLOT_QUESTIONS.index(question)
    except ValueError:
        msg = f"Unknown S-Blot question '{question}' (expected Q1..Q{len(SBLOT_QUESTIONS)})"
        raise ValueError(msg) from None


def _check_range(value: int, low: int, high: int, what: str) -> None:
    if not low <= value <= high:
        msg = f"{what} must be between {low} and {high}, got {value}"
        raise ValueError(msg)


def set_count(state: SessionState, question: str, candidate: int, value: object) -> int:
    """Set one S-Blot cell; *candidate* is 0-based.  Returns the stored count."""
    q_idx = _question_index(question)
    _check_range(candidate, 0, len(SBLOT_CANDIDATES) - 1, "Candidate index")
    count = coerce_count(value)
    state.sblot.counts[q_idx][candidate] = count
    return count


def set_weight(state: SessionState, question: str, value: object) -> float:
    """Set one S-Blot question weight.  Returns the stored weight."""
    _question_index(question)
    weight = coerce_weight(value)
    state.sblot.weights[question] = weight
    return weight


def set_likert(state: SessionState, question: str, answer: int, value: object) -> int:
    """Set the count for *answer* (1–5) on a Likert question."""
    if question not in LIKERT_KEYS:
        msg = f"Unknown Likert question '{question}' (expected one of {LIKERT_KEYS})"
        raise ValueError(msg)
    _check_range(answer, 1, LIKERT_POINTS, "Likert answer")
    count = coerce_count(value)
    state.objet.likert_counts[question][answer - 1] = count
    return count


def set_nps(state: SessionState, answer: int, value: object) -> int:
    """Set the count for *answer* (0–10) on the recommendation question."""
    _check_range(answer, 0, NPS_BUCKETS - 1, "NPS answer")
    count = coerce_count(value)
    state.objet.nps_counts[answer] = count
    return count


def set_category(state: SessionState, question: str, option: int, value: object) -> int:
    """Set the count for *option* (0-based) on a categorical question."""
    try:
        cq = get_categorical_question(question)
    except KeyError as exc:
        raise ValueError(exc.args[0]) from None
    _check_range(option, 0, cq.option_count - 1, f"{question} option index")
    count = coerce_count(value)
    state.objet.categorical_counts[question][option] = count
    return count


def reset(state: SessionState, instrument: Instrument | str) -> None:
    """Restore one instrument's counts (and weights) to defaults."""
    instrument = Instrument(instrument)
    if instrument is Instrument.SBLOT:
        state.sblot = DesignChoiceState()
    else:
        state.objet = ProductSurveyState()
    logger.info("Reset %s to defaults", instrument.value)


# ---------------------------------------------------------------------------
# Scoring
# ---------------------------------------------------------------------------


def score_design_choice(
    state: SessionState, *, min_sample_size: int = MIN_SAMPLE_SIZE
) -> DesignChoiceResult:
    return compute_design_choice(
        state.sblot.counts, state.sblot.weights, min_sample_size=min_sample_size
    )


def score_product_survey(
    state: SessionState,
    *,
    min_sample_size: int = MIN_SAMPLE_SIZE,
    keyword_top_k: int = 3,
    colour_top_k: int = 2,
) -> ProductSurveyResult:
    return compute_product_survey(
        state.objet.likert_counts,
        state.objet.nps_counts,
        state.objet.categorical_counts,
        min_sample_size=min_sample_size,
        keyword_top_k=keyword_top_k,
        colour_top_k=colour_top_k,
    )
