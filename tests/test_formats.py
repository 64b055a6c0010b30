"""Tests for surveyscore.formats: CSV counts and JSON results."""

from __future__ import annotations

import json
import logging

import pytest

from surveyscore.formats import export_counts_csv, export_results_json, import_counts_csv
from surveyscore.session import (
    SessionState,
    score_design_choice,
    score_product_survey,
    set_count,
    set_nps,
)

# ---------------------------------------------------------------------------
# CSV export
# ---------------------------------------------------------------------------


class TestExportCsv:
    def test_empty(self) -> None:
        lines = export_counts_csv(SessionState()).splitlines()
        assert lines[0] == "Question,#01,#02,#03,#04,N"
        assert lines[1] == "Q1,0,0,0,0,0"
        assert lines[10] == "Q10,0,0,0,0,0"
        assert len(lines) == 11

    def test_row_totals(self) -> None:
        state = SessionState()
        set_count(state, "Q2", 0, 3)
        set_count(state, "Q2", 3, 4)
        assert export_counts_csv(state).splitlines()[2] == "Q2,3,0,0,4,7"

    def test_unix_line_endings(self) -> None:
        assert "\r" not in export_counts_csv(SessionState())


# ---------------------------------------------------------------------------
# CSV import
# ---------------------------------------------------------------------------


class TestImportCsv:
    def test_round_trip_of_exported_text(self) -> None:
        state = SessionState()
        set_count(state, "Q5", 2, 9)
        matrix = import_counts_csv(export_counts_csv(state))
        assert matrix == state.sblot.counts

    def test_without_header(self) -> None:
        matrix = import_counts_csv("Q1,1,2,3,4\nQ2,5,6,7,8\n")
        assert matrix[0] == [1, 2, 3, 4]
        assert matrix[1] == [5, 6, 7, 8]
        assert matrix[2] == [0, 0, 0, 0]

    def test_header_detection_is_case_insensitive(self) -> None:
        matrix = import_counts_csv("QUESTION,a,b,c,d\nQ1,1,1,1,1\n")
        assert matrix[0] == [1, 1, 1, 1]

    def test_rows_taken_in_order(self) -> None:
        """The question column is a label only; row position decides."""
        matrix = import_counts_csv("Q9,2,0,0,0\n")
        assert matrix[0] == [2, 0, 0, 0]
        assert matrix[8] == [0, 0, 0, 0]

    def test_malformed_cells_become_zero(self) -> None:
        matrix = import_counts_csv("Q1,x,-4,2.7,\nQ2,3\n")
        assert matrix[0] == [0, 0, 2, 0]
        assert matrix[1] == [3, 0, 0, 0]

    def test_blank_lines_skipped(self) -> None:
        matrix = import_counts_csv("\n\nQuestion,#01,#02,#03,#04\n\nQ1,1,0,0,0\n\n")
        assert matrix[0] == [1, 0, 0, 0]

    def test_extra_rows_ignored_with_warning(self, caplog: pytest.LogCaptureFixture) -> None:
        text = "\n".join(f"Q{i},{i},0,0,0" for i in range(1, 13))
        with caplog.at_level(logging.WARNING, logger="surveyscore.formats"):
            matrix = import_counts_csv(text)
        assert len(matrix) == 10
        assert matrix[9] == [10, 0, 0, 0]
        assert "only the first 10" in caplog.text

    def test_empty_text(self) -> None:
        assert import_counts_csv("") == [[0, 0, 0, 0]] * 10


# ---------------------------------------------------------------------------
# JSON export
# ---------------------------------------------------------------------------


class TestExportJson:
    def test_design_choice(self) -> None:
        state = SessionState()
        set_count(state, "Q1", 1, 12)
        document = json.loads(
            export_results_json("sblot", state, score_design_choice(state))
        )
        assert document["instrument"] == "sblot"
        assert document["inputs"]["counts"][0] == [0, 12, 0, 0]
        assert document["result"]["ranking"][0]["label"] == "#02"
        assert "narrative" in document["result"]

    def test_product_survey(self) -> None:
        state = SessionState()
        set_nps(state, 0, 2)
        document = json.loads(
            export_results_json("objet", state, score_product_survey(state))
        )
        assert document["instrument"] == "objet"
        assert document["inputs"]["nps_counts"][0] == 2
        assert document["result"]["nps"]["nps"] == pytest.approx(-100.0)
        assert set(document["result"]["categorical"]) >= {"Q1", "Q6", "Q11", "Q16"}

    def test_non_ascii_kept(self) -> None:
        state = SessionState()
        text = export_results_json("sblot", state, score_design_choice(state))
        assert "Q1↑" in text
        assert "\\u2191" not in text
