"""Integration tests for surveyscore.analysis.engine: full instrument scoring."""

from __future__ import annotations

import copy

import pytest

from surveyscore.analysis import (
    DesignChoiceResult,
    ProductSurveyResult,
    ShapeError,
    compute,
    compute_design_choice,
    compute_product_survey,
)
from surveyscore.questions import Instrument

# ---------------------------------------------------------------------------
# Instrument A: design choice
# ---------------------------------------------------------------------------


class TestComputeDesignChoice:
    def test_landslide(self, landslide_counts, default_weights) -> None:
        result = compute_design_choice(landslide_counts, default_weights)
        assert [s.score for s in result.scores] == pytest.approx([95.0, 5.0, 0.0, 0.0])
        assert [s.label for s in result.ranking] == ["#01", "#02", "#03", "#04"]
        assert result.mean_respondents == pytest.approx(20.0)
        assert result.interpretation_text.startswith(
            "Top composite score: #01 (95.0 points, very strong)"
        )
        assert result.conclusion_text.splitlines()[0] == "Conclusion: Adopt: #01"
        assert "Caution" not in result.conclusion_text

    def test_normalized_weights_sum_to_one(self, landslide_counts, default_weights) -> None:
        result = compute_design_choice(landslide_counts, default_weights)
        assert sum(result.normalized_weights.values()) == pytest.approx(1.0)
        assert result.weight_sum == pytest.approx(1.0)

    def test_unnormalized_weights_give_same_scores(self, landslide_counts, default_weights) -> None:
        doubled = {k: v * 2 for k, v in default_weights.items()}
        a = compute_design_choice(landslide_counts, default_weights)
        b = compute_design_choice(landslide_counts, doubled)
        assert [s.score for s in a.scores] == pytest.approx([s.score for s in b.scores])
        assert b.weight_sum == pytest.approx(2.0)

    def test_zero_weights_zero_scores(self, landslide_counts) -> None:
        result = compute_design_choice(landslide_counts, {f"Q{i}": 0 for i in range(1, 11)})
        assert all(w == 0.0 for w in result.normalized_weights.values())
        assert all(s.score == 0.0 for s in result.scores)

    def test_weight_shifts_winner(self, empty_counts) -> None:
        """Q1 favours #01, Q2 favours #02; the heavier question wins."""
        counts = copy.deepcopy(empty_counts)
        counts[0] = [10, 0, 0, 0]
        counts[1] = [0, 10, 0, 0]
        weights = {"Q1": 0.2, "Q2": 0.8}
        result = compute_design_choice(counts, weights)
        assert result.ranking[0].label == "#02"
        assert result.ranking[0].score == pytest.approx(80.0)
        assert result.drivers[0].question == "Q2"

    def test_tied_candidates_keep_order(self, empty_counts, default_weights) -> None:
        counts = [[3, 5, 5, 3] for _ in empty_counts]
        result = compute_design_choice(counts, default_weights)
        assert [s.label for s in result.ranking] == ["#02", "#03", "#01", "#04"]

    def test_empty_matrix(self, empty_counts, default_weights) -> None:
        result = compute_design_choice(empty_counts, default_weights)
        assert all(s.score == 0.0 for s in result.scores)
        assert result.totals == [0] * 10
        assert result.interpretation_text.splitlines()[:4] == [
            "Top composite score: #01 (0.0 points, insufficient)",
            "Gap to runner-up: 0.0 points",
            "Sample (mean per question): 0.0 respondents",
            "Leading questions: Q1↑, Q2↑, Q3↑",
        ]
        assert result.conclusion_text.splitlines() == [
            "Conclusion: Further validation needed",
            "Basis: composite score 0.0 points, gap to runner-up 0.0 points",
            "Caution: small sample (0.0 per question, minimum 10); results are uncertain",
        ]

    def test_sanitizes_cells(self, empty_counts, default_weights) -> None:
        counts = copy.deepcopy(empty_counts)
        counts[0] = ["4", -3, "abc", float("nan")]
        result = compute_design_choice(counts, default_weights)
        assert result.totals[0] == 4
        assert result.shares[0] == pytest.approx([1.0, 0.0, 0.0, 0.0])

    def test_sanitizes_weights(self, landslide_counts) -> None:
        weights = {"Q1": "1", "Q2": -5, "Q3": "bad"}
        result = compute_design_choice(landslide_counts, weights)
        assert result.normalized_weights["Q1"] == pytest.approx(1.0)
        assert result.normalized_weights["Q2"] == 0.0

    def test_inputs_not_mutated(self, default_weights) -> None:
        counts = [[i, 2, "3", 0] for i in range(10)]
        before_counts = copy.deepcopy(counts)
        before_weights = dict(default_weights)
        compute_design_choice(counts, default_weights)
        assert counts == before_counts
        assert default_weights == before_weights

    def test_idempotent(self, landslide_counts, default_weights) -> None:
        first = compute_design_choice(landslide_counts, default_weights)
        second = compute_design_choice(landslide_counts, default_weights)
        assert first == second

    def test_wrong_row_count(self, default_weights) -> None:
        with pytest.raises(ShapeError, match="expected 10 rows"):
            compute_design_choice([[0, 0, 0, 0]] * 9, default_weights)

    def test_wrong_row_width(self, empty_counts, default_weights) -> None:
        counts = copy.deepcopy(empty_counts)
        counts[3] = [1, 2, 3]
        with pytest.raises(ShapeError, match="Q4: expected 4 cells"):
            compute_design_choice(counts, default_weights)

    def test_row_without_length(self, empty_counts, default_weights) -> None:
        counts = copy.deepcopy(empty_counts)
        counts[0] = None
        with pytest.raises(ShapeError, match="Q1: expected a list of 4 cells"):
            compute_design_choice(counts, default_weights)

    def test_matrix_without_length(self, default_weights) -> None:
        rows = ([0, 0, 0, 0] for _ in range(10))
        with pytest.raises(ShapeError, match="expected a list of 10 rows"):
            compute_design_choice(rows, default_weights)


# ---------------------------------------------------------------------------
# Instrument B: product impression
# ---------------------------------------------------------------------------


class TestComputeProductSurvey:
    def test_sample_data(self, sample_likert, sample_nps, sample_categorical) -> None:
        result = compute_product_survey(sample_likert, sample_nps, sample_categorical)
        assert result.overall_score == pytest.approx(90.0)
        assert result.top2_mean == pytest.approx(1.0)
        assert result.total_likert_responses == 45
        assert result.mean_respondents == pytest.approx(5.0)
        assert result.nps.nps == pytest.approx(20.0)
        assert result.categorical["Q6"].favorability.index == pytest.approx(60.0)
        assert result.categorical["Q11"].favorability.total == 0

        lines = result.interpretation_text.splitlines()
        assert lines[0] == "Overall score: 90.0 points (excellent)"
        assert lines[3] == "NPS: 20.0 (Promoters 50.0%, Passives 20.0%, Detractors 30.0%)"
        assert lines[4] == "First-impression keywords top 3: Clean (5), Minimal (3), Premium (2)"
        assert lines[-1] == "Ring impression balance (+)8 / (±)0 / (-)2 → net favorability 60.0pt"

        conclusion = result.conclusion_text.splitlines()
        assert conclusion[0] == "Conclusion: Revise before launch"
        assert conclusion[2] == "Preferred price band: KRW 50,000-99,000"
        assert conclusion[3].startswith("Caution: small sample (5.0 per question")

    def test_missing_questions_are_unanswered(self, sample_nps) -> None:
        result = compute_product_survey({"Q2": [0, 0, 0, 0, 4]}, sample_nps, {})
        assert len(result.likert_stats) == 9
        assert result.likert_stats[0].score100 == pytest.approx(100.0)
        assert result.overall_score == pytest.approx(100.0 / 9)
        assert result.strongest_question == "Q2"
        assert result.weakest_question == "Q3"
        assert result.categorical["Q16"].total == 0

    def test_empty(self, empty_likert, empty_nps, empty_categorical) -> None:
        result = compute_product_survey(empty_likert, empty_nps, empty_categorical)
        assert result.overall_score == 0.0
        assert result.nps.nps == 0.0
        assert all(s.score100 == 0.0 for s in result.likert_stats)
        assert result.interpretation_text.splitlines() == [
            "Overall score: 0.0 points (needs improvement)",
            "Strongest question: Q2 (0.0 points)",
            "Weakest question: Q2 (0.0 points)",
            "NPS: 0.0 (Promoters 0.0%, Passives 0.0%, Detractors 0.0%)",
            "First-impression keywords top 3: Clean (0), Medical-device-like (0),"
            " Like a home appliance (0)",
            "Alternative colour top 2: Silver, Champagne",
        ]
        assert result.conclusion_text.splitlines() == [
            "Conclusion: Redesign recommended",
            "Basis: overall 0.0 / NPS 0.0 / weakest Q2",
            "Caution: small sample (0.0 per question, minimum 10); results are uncertain",
        ]

    def test_sanitizes(self, empty_categorical) -> None:
        likert = {"Q2": ["x", None, -1, "2", 3.0]}
        nps = ["1"] + [0] * 9 + ["nan"]
        result = compute_product_survey(likert, nps, empty_categorical)
        assert result.likert_stats[0].n == 5
        assert result.nps.total == 1
        assert result.nps.detractor_share == pytest.approx(1.0)

    def test_inputs_not_mutated(self, sample_likert, sample_nps, sample_categorical) -> None:
        snapshot = copy.deepcopy((sample_likert, sample_nps, sample_categorical))
        compute_product_survey(sample_likert, sample_nps, sample_categorical)
        assert (sample_likert, sample_nps, sample_categorical) == snapshot

    def test_idempotent(self, sample_likert, sample_nps, sample_categorical) -> None:
        first = compute_product_survey(sample_likert, sample_nps, sample_categorical)
        second = compute_product_survey(sample_likert, sample_nps, sample_categorical)
        assert first == second
        assert first.interpretation_text == second.interpretation_text

    def test_wrong_nps_length(self, empty_likert, empty_categorical) -> None:
        with pytest.raises(ShapeError, match="NPS buckets: expected 11 cells"):
            compute_product_survey(empty_likert, [0] * 10, empty_categorical)

    def test_unknown_likert_key(self, empty_nps) -> None:
        with pytest.raises(ShapeError, match="unknown question keys"):
            compute_product_survey({"Q99": [0, 0, 0, 0, 0]}, empty_nps, {})

    def test_wrong_categorical_width(self, empty_likert, empty_nps) -> None:
        with pytest.raises(ShapeError, match="Categorical Q11: expected 4 cells"):
            compute_product_survey(empty_likert, empty_nps, {"Q11": [1, 2]})

    def test_nps_without_length(self, empty_likert, empty_categorical) -> None:
        buckets = (0 for _ in range(11))
        with pytest.raises(ShapeError, match="NPS buckets: expected a list of 11 cells"):
            compute_product_survey(empty_likert, buckets, empty_categorical)

    def test_missing_likert_row(self, empty_nps, empty_categorical) -> None:
        with pytest.raises(ShapeError, match="Likert Q2: expected a list of 5 cells, got NoneType"):
            compute_product_survey({"Q2": None}, empty_nps, empty_categorical)


# ---------------------------------------------------------------------------
# compute() dispatch
# ---------------------------------------------------------------------------


class TestCompute:
    def test_sblot_default_weights(self, landslide_counts) -> None:
        result = compute(Instrument.SBLOT, landslide_counts)
        assert isinstance(result, DesignChoiceResult)
        assert result.ranking[0].score == pytest.approx(95.0)

    def test_objet_by_string(self, sample_likert) -> None:
        result = compute("objet", sample_likert)
        assert isinstance(result, ProductSurveyResult)
        assert result.nps.total == 0
        assert result.overall_score == pytest.approx(90.0)

    def test_objet_top_k_forwarded(self, sample_likert, sample_nps, sample_categorical) -> None:
        result = compute(
            "objet",
            sample_likert,
            nps_buckets=sample_nps,
            categorical_counts=sample_categorical,
            keyword_top_k=1,
            colour_top_k=3,
        )
        lines = result.interpretation_text.splitlines()
        assert "First-impression keywords top 1: Clean (5)" in lines
        assert "Alternative colour top 3: Champagne, Rose, Silver" in lines

    def test_both_instruments_empty(self, empty_counts, empty_likert) -> None:
        a = compute("sblot", empty_counts)
        b = compute("objet", empty_likert)
        assert all(s.score == 0.0 for s in a.scores)
        assert b.overall_score == 0.0
        assert b.nps.nps == 0.0
        assert "0.0" in a.interpretation_text
        assert "0.0" in b.conclusion_text

    def test_unknown_instrument(self, empty_counts) -> None:
        with pytest.raises(ValueError):
            compute("survey3", empty_counts)

    def test_shape_mismatch(self, empty_likert, empty_counts) -> None:
        with pytest.raises(ShapeError):
            compute("sblot", empty_likert)
        with pytest.raises(ShapeError):
            compute("objet", empty_counts)
