"""Data structures for survey scoring results.

These are plain dataclasses (not Pydantic) because they are derived, recomputed from
the raw counts on every call, and never persisted on their own.  Session
state that *is* persisted lives in ``surveyscore.session``.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class CompositeScore:
    """One candidate design's weighted composite score (0–100)."""

    label: str  # "#01".."#04"
    index: int  # position in the input columns
    score: float
    rank: int = 0  # 1-based; filled in by the ranking step


@dataclass
class Contribution:
    """How much one question separates the winner from the runner-up."""

    question: str
    contribution: float  # (winner share - runner-up share) * normalised weight
    winner_share: float


@dataclass
class LikertStat:
    """Summary of one five-point question."""

    key: str
    n: int
    mean: float  # 1–5 scale, or 0 when n == 0
    top2_share: float
    score100: float


@dataclass
class NPSSplit:
    """Detractor / passive / promoter split of an 11-point question."""

    detractor_share: float = 0.0
    passive_share: float = 0.0
    promoter_share: float = 0.0
    nps: float = 0.0
    total: int = 0


@dataclass
class Favorability:
    """Signed favorability index for a categorical opinion question."""

    positive: int = 0
    neutral: int = 0
    negative: int = 0
    total: int = 0
    index: float = 0.0  # -100..100


@dataclass
class OptionCount:
    label: str
    count: int


@dataclass
class CategoricalSummary:
    """Tally of one single- or multi-select question."""

    key: str
    total: int
    ranking: list[OptionCount] = field(default_factory=list)  # count desc, stable
    favorability: Favorability | None = None

    def top(self, k: int) -> list[OptionCount]:
        return self.ranking[:k]


@dataclass
class Narrative:
    interpretation: str
    conclusion: str


@dataclass
class DesignChoiceResult:
    """Complete Instrument A results, passed to the presentation layer."""

    totals: list[int]  # per question
    shares: list[list[float]]  # per question, per candidate
    weight_sum: float
    normalized_weights: dict[str, float]
    scores: list[CompositeScore]  # input (candidate) order
    ranking: list[CompositeScore]  # score desc, stable
    drivers: list[Contribution]  # top contributing questions, winner vs runner-up
    weakest_question: str
    mean_respondents: float
    narrative: Narrative

    @property
    def interpretation_text(self) -> str:
        return self.narrative.interpretation

    @property
    def conclusion_text(self) -> str:
        return self.narrative.conclusion


@dataclass
class ProductSurveyResult:
    """Complete Instrument B results, passed to the presentation layer."""

    likert_stats: list[LikertStat]  # question-table order
    overall_score: float
    top2_mean: float
    total_likert_responses: int
    mean_respondents: float
    strongest_question: str
    weakest_question: str
    nps: NPSSplit
    categorical: dict[str, CategoricalSummary]
    narrative: Narrative

    @property
    def interpretation_text(self) -> str:
        return self.narrative.interpretation

    @property
    def conclusion_text(self) -> str:
        return self.narrative.conclusion
