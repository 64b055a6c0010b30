"""Shared test fixtures for surveyscore tests."""

from __future__ import annotations

import pytest

from surveyscore.questions import (
    LIKERT_KEYS,
    NPS_BUCKETS,
    OBJET_CATEGORICAL_QUESTIONS,
    SBLOT_DEFAULT_WEIGHTS,
    SBLOT_QUESTIONS,
)


@pytest.fixture
def empty_counts() -> list[list[int]]:
    """All-zero S-Blot matrix (10 questions x 4 designs)."""
    return [[0, 0, 0, 0] for _ in SBLOT_QUESTIONS]


@pytest.fixture
def default_weights() -> dict[str, float]:
    return dict(SBLOT_DEFAULT_WEIGHTS)


@pytest.fixture
def landslide_counts() -> list[list[int]]:
    """Every question: 19 votes for #01, 1 for #02, a clear winner."""
    return [[19, 1, 0, 0] for _ in SBLOT_QUESTIONS]


@pytest.fixture
def empty_likert() -> dict[str, list[int]]:
    return {key: [0, 0, 0, 0, 0] for key in LIKERT_KEYS}


@pytest.fixture
def empty_nps() -> list[int]:
    return [0] * NPS_BUCKETS


@pytest.fixture
def empty_categorical() -> dict[str, list[int]]:
    return {q.key: [0] * q.option_count for q in OBJET_CATEGORICAL_QUESTIONS}


@pytest.fixture
def sample_likert() -> dict[str, list[int]]:
    """Five respondents per question, all answering 4 or 5."""
    return {key: [0, 0, 0, 2, 3] for key in LIKERT_KEYS}


@pytest.fixture
def sample_nps() -> list[int]:
    """10 responses: 3 detractors, 2 passives, 5 promoters → NPS 20."""
    return [1, 1, 1, 0, 0, 0, 0, 1, 1, 3, 2]


@pytest.fixture
def sample_categorical(empty_categorical: dict[str, list[int]]) -> dict[str, list[int]]:
    counts = {k: list(v) for k, v in empty_categorical.items()}
    counts["Q1"] = [5, 0, 1, 0, 2, 0, 0, 3, 0, 0]
    counts["Q6"] = [5, 3, 1, 1, 0, 0]
    counts["Q15"] = [1, 4, 0, 4, 0, 0]
    counts["Q16"] = [1, 4, 4, 0]
    return counts
