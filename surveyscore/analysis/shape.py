"""Structural checks at the engine boundary.

Cell *values* are always sanitised (see ``metrics.coerce_count``).  Cell
*layout* is the caller's responsibility: a matrix with the wrong number of
rows or a row with the wrong number of options is a programming error and
fails fast here.
"""

from __future__ import annotations

from collections.abc import Sequence

from surveyscore.analysis.metrics import coerce_row


class ShapeError(ValueError):
    """A count matrix or row does not match its question table."""


def sanitized_row(row: Sequence[object], expected: int, what: str) -> list[int]:
    """Return a sanitised copy of *row*, checking it has *expected* cells."""
    if isinstance(row, (str, bytes)) or not isinstance(row, Sequence):
        msg = f"{what}: expected a list of {expected} cells, got {type(row).__name__}"
        raise ShapeError(msg)
    if len(row) != expected:
        msg = f"{what}: expected {expected} cells, got {len(row)} cells"
        raise ShapeError(msg)
    return coerce_row(row)


def sanitized_matrix(
    matrix: Sequence[Sequence[object]],
    row_keys: Sequence[str],
    width: int,
    what: str,
) -> list[list[int]]:
    """Return a sanitised copy of a row-per-question matrix."""
    if isinstance(matrix, (str, bytes)) or not isinstance(matrix, Sequence):
        msg = f"{what}: expected a list of {len(row_keys)} rows, got {type(matrix).__name__}"
        raise ShapeError(msg)
    if len(matrix) != len(row_keys):
        msg = f"{what}: expected {len(row_keys)} rows, got {len(matrix)}"
        raise ShapeError(msg)
    return [
        sanitized_row(row, width, f"{what} {key}")
        for key, row in zip(row_keys, matrix)
    ]
