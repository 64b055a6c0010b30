"""Question tables for the two survey instruments.

Everything the engine needs to know about a questionnaire lives here:
question keys, option labels, default weights and the fixed positive /
negative subsets used by the favorability index.  The engine reads these
tables; it never hard-codes option indices.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Instrument(str, Enum):
    """The two independent questionnaires."""

    SBLOT = "sblot"  # design choice: 10 questions x 4 candidate designs
    OBJET = "objet"  # product impression: Likert + NPS + categorical


INSTRUMENT_TITLES: dict[Instrument, str] = {
    Instrument.SBLOT: "S-Blot design choice",
    Instrument.OBJET: "Objet product impression",
}


# ---------------------------------------------------------------------------
# Instrument A (S-Blot)
# ---------------------------------------------------------------------------

SBLOT_QUESTIONS: list[str] = [f"Q{i}" for i in range(1, 11)]
SBLOT_CANDIDATES: list[str] = ["#01", "#02", "#03", "#04"]

SBLOT_DEFAULT_WEIGHTS: dict[str, float] = {
    "Q1": 0.25,
    "Q2": 0.1,
    "Q3": 0.1,
    "Q4": 0.1,
    "Q5": 0.1,
    "Q6": 0.1,
    "Q7": 0.1,
    "Q8": 0.05,
    "Q9": 0.05,
    "Q10": 0.05,
}


# ---------------------------------------------------------------------------
# Instrument B (Objet)
# ---------------------------------------------------------------------------

LIKERT_POINTS = 5
NPS_BUCKETS = 11
NPS_QUESTION = "Q17"


@dataclass(frozen=True)
class LikertQuestion:
    key: str
    label: str


OBJET_LIKERT_QUESTIONS: list[LikertQuestion] = [
    LikertQuestion("Q2", "Appeal"),
    LikertQuestion("Q3", "Trust"),
    LikertQuestion("Q4", "Size fit"),
    LikertQuestion("Q5", "Grip"),
    LikertQuestion("Q7", "Display intuitiveness"),
    LikertQuestion("Q9", "Progress indicator helpfulness"),
    LikertQuestion("Q10", "Slot clarity"),
    LikertQuestion("Q12", "Hygiene / ease of cleaning"),
    LikertQuestion("Q14", "Colour combination preference"),
]


@dataclass(frozen=True)
class FavorabilityRule:
    """Fixed option-index subsets for a signed favorability index.

    Options outside all three subsets (e.g. "Other") are not counted.
    """

    positive: tuple[int, ...]
    neutral: tuple[int, ...]
    negative: tuple[int, ...]


@dataclass(frozen=True)
class CategoricalQuestion:
    key: str
    label: str
    options: tuple[str, ...]
    multi: bool = False
    favorability: FavorabilityRule | None = None

    @property
    def option_count(self) -> int:
        return len(self.options)


RING_FAVORABILITY = FavorabilityRule(positive=(0, 1), neutral=(4,), negative=(2, 3))
SLOT_FAVORABILITY = FavorabilityRule(positive=(0,), neutral=(2, 3), negative=(1,))

OBJET_CATEGORICAL_QUESTIONS: list[CategoricalQuestion] = [
    CategoricalQuestion(
        "Q1",
        "First-impression keywords",
        (
            "Clean",
            "Medical-device-like",
            "Like a home appliance",
            "Toy-like",
            "Premium",
            "Cold",
            "Warm",
            "Minimal",
            "Clunky",
            "Other",
        ),
        multi=True,
    ),
    CategoricalQuestion(
        "Q6",
        "Impression of the ring",
        (
            "Very good (premium accent)",
            "Stands out nicely",
            "Would be better without",
            "Looks messy",
            "Not sure",
            "Other",
        ),
        favorability=RING_FAVORABILITY,
    ),
    CategoricalQuestion(
        "Q8",
        "Readability environment",
        (
            "Bright bathroom light",
            "Dark bathroom",
            "Bedroom in the morning",
            "Window / daylight",
            "Not sure",
            "Other",
        ),
        multi=True,
    ),
    CategoricalQuestion(
        "Q11",
        "Impression of the SD slot",
        (
            "Looks professional",
            "Looks dated / inconvenient",
            "Irrelevant to the design",
            "Not sure",
        ),
        favorability=SLOT_FAVORABILITY,
    ),
    CategoricalQuestion(
        "Q13",
        "Best place for the device",
        (
            "Bathroom",
            "Bedroom",
            "Dressing table",
            "Living room",
            "Carry only (stored out of sight)",
            "Other",
        ),
    ),
    CategoricalQuestion(
        "Q15",
        "Alternative accent colour",
        ("Silver", "Champagne", "Mist blue", "Rose", "Black", "Other"),
        multi=True,
    ),
    CategoricalQuestion(
        "Q16",
        "Expected price band",
        (
            "KRW 50,000 or less",
            "KRW 50,000-99,000",
            "KRW 100,000-199,000",
            "KRW 200,000 or more",
        ),
    ),
]

KEYWORD_QUESTION = "Q1"
RING_QUESTION = "Q6"
SLOT_QUESTION = "Q11"
COLOUR_QUESTION = "Q15"
PRICE_QUESTION = "Q16"

_CATEGORICAL_BY_KEY: dict[str, CategoricalQuestion] = {
    q.key: q for q in OBJET_CATEGORICAL_QUESTIONS
}
LIKERT_KEYS: list[str] = [q.key for q in OBJET_LIKERT_QUESTIONS]


def get_categorical_question(key: str) -> CategoricalQuestion:
    """Return the categorical question with *key*, or raise KeyError."""
    try:
        return _CATEGORICAL_BY_KEY[key]
    except KeyError:
        msg = f"Unknown categorical question '{key}' (expected one of {sorted(_CATEGORICAL_BY_KEY)})"
        raise KeyError(msg) from None


def is_categorical(key: str) -> bool:
    return key in _CATEGORICAL_BY_KEY
