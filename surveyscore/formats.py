"""Import/export adapters: CSV counts and JSON results.

These sit outside the engine: they turn text into count matrices and
computed results into text.  Malformed cells coerce to 0, the same rule the
engine applies.
"""

from __future__ import annotations

import csv
import io
import json
import logging
import re
from dataclasses import asdict

from surveyscore.analysis.metrics import coerce_count
from surveyscore.analysis.models import DesignChoiceResult, ProductSurveyResult
from surveyscore.questions import SBLOT_CANDIDATES, SBLOT_QUESTIONS, Instrument
from surveyscore.session import SessionState

logger = logging.getLogger(__name__)

CSV_HEADER = ["Question", *SBLOT_CANDIDATES, "N"]

_HEADER_RE = re.compile(r"question", re.IGNORECASE)


def export_counts_csv(state: SessionState) -> str:
    """S-Blot counts as CSV: one row per question plus its total."""
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    writer.writerow(CSV_HEADER)
    for key, row in zip(SBLOT_QUESTIONS, state.sblot.counts):
        writer.writerow([key, *row, sum(row)])
    return buf.getvalue()


def import_counts_csv(text: str) -> list[list[int]]:
    """Parse S-Blot counts from CSV text.

    The first non-blank line is skipped when it looks like a header (contains
    "question").  Rows are taken in order (the question column is not
    matched) and only the first ten are used.  Columns 1–4 hold the
    candidate counts; a trailing total column is ignored.  Missing rows stay
    zero.
    """
    lines = [line.strip() for line in text.splitlines()]
    lines = [line for line in lines if line]
    if lines and _HEADER_RE.search(lines[0]):
        lines = lines[1:]

    width = len(SBLOT_CANDIDATES)
    matrix = [[0] * width for _ in SBLOT_QUESTIONS]
    for idx, cells in enumerate(csv.reader(lines[: len(SBLOT_QUESTIONS)])):
        values = cells[1 : width + 1]
        values += [""] * (width - len(values))
        matrix[idx] = [coerce_count(v) for v in values]

    if len(lines) > len(SBLOT_QUESTIONS):
        logger.warning(
            "CSV has %d data rows; only the first %d were imported",
            len(lines),
            len(SBLOT_QUESTIONS),
        )
    return matrix


def export_results_json(
    instrument: Instrument | str,
    state: SessionState,
    result: DesignChoiceResult | ProductSurveyResult,
) -> str:
    """Inputs and computed results for one instrument as indented JSON."""
    instrument = Instrument(instrument)
    inputs = state.sblot if instrument is Instrument.SBLOT else state.objet
    document = {
        "instrument": instrument.value,
        "inputs": inputs.model_dump(),
        "result": asdict(result),
    }
    return json.dumps(document, indent=2, ensure_ascii=False)
