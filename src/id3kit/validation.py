"""Shape checks for header/row tables, shared by datasets and the induction engine."""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable, Sequence

from id3kit.exceptions import MalformedInputError

MIN_COLUMN_COUNT: int = 2  # At least one attribute plus the label column.


def validate_rows(rows: Iterable[Sequence[str]], headers: Sequence[str]) -> None:
    """Check that `rows` and `headers` form a trainable table.

    Args:
        rows (Iterable[Sequence[str]]): Data rows.
        headers (Sequence[str]): Column names; the last is the label column.

    Raises:
        MalformedInputError: If there are fewer than two headers, duplicate
            header names, no rows, or a row whose width differs from the
            header count.
    """
    if len(headers) < MIN_COLUMN_COUNT:
        raise MalformedInputError(
            f"Expected at least {MIN_COLUMN_COUNT} columns (attributes plus label), "
            f"got {len(headers)}: {list(headers)}"
        )
    duplicates = sorted(name for name, count in Counter(headers).items() if count > 1)
    if duplicates:
        raise MalformedInputError(f"Duplicate header names are not allowed: {duplicates}")

    row_count = 0
    for row_index, row in enumerate(rows):
        if len(row) != len(headers):
            raise MalformedInputError(
                f"Row {row_index} has {len(row)} fields, expected {len(headers)}",
                row_index=row_index,
            )
        row_count += 1
    if row_count == 0:
        raise MalformedInputError("Dataset has no data rows")
