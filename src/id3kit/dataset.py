"""Immutable tabular dataset: string rows, headers, and overall label entropy."""

from __future__ import annotations

from collections import Counter
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import NamedTuple

import polars as pl

from id3kit.exceptions import MalformedInputError
from id3kit.tree.entropy import Row, label_counts, rows_entropy
from id3kit.validation import validate_rows


class DatasetSummary(NamedTuple):
    """Shape and label statistics of a dataset.

    Attributes:
        attribute_count (int): Number of columns, including the label column.
        row_count (int): Number of data rows.
        overall_entropy (float): Label entropy across all rows, in bits.
        label_distribution (dict[str, int]): Label to row count, sorted by
            label.
    """

    attribute_count: int
    row_count: int
    overall_entropy: float
    label_distribution: dict[str, int]

    def __str__(self) -> str:
        """Return a one-line description of the dataset.

        Returns:
            str: e.g. `"There are 5 attributes and 14 data rows (entropy 0.9403)."`
        """
        return (
            f"There are {self.attribute_count} attributes and {self.row_count} data rows "
            f"(entropy {self.overall_entropy:.4f})."
        )


@dataclass(frozen=True)
class TabularDataset:
    """Parsed rows of string fields whose last column is the class label.

    The dataset is validated and its overall label entropy computed once at
    construction; it is never mutated afterwards.

    Attributes:
        headers (tuple[str, ...]): Column names; the last is the label column.
        rows (tuple[Row, ...]): Data rows, each as wide as `headers`.
        overall_entropy (float): Entropy of the label column across all rows.

    Examples:
        >>> dataset = TabularDataset.from_table([
        ...     ["Weather", "Play"],
        ...     ["Sunny", "Yes"],
        ...     ["Rainy", "No"],
        ... ])
        >>> dataset.label_column
        'Play'
        >>> dataset.overall_entropy
        1.0
    """

    headers: tuple[str, ...]
    rows: tuple[Row, ...]
    overall_entropy: float = field(init=False)

    def __post_init__(self) -> None:
        """Validate the table and compute its overall entropy.

        Raises:
            MalformedInputError: If there are no rows, fewer than two columns,
                duplicate header names, or a row whose width differs from the
                header count.
        """
        object.__setattr__(self, "headers", tuple(self.headers))
        object.__setattr__(self, "rows", tuple(tuple(row) for row in self.rows))
        validate_rows(self.rows, self.headers)
        object.__setattr__(self, "overall_entropy", rows_entropy(self.rows))

    @classmethod
    def from_table(cls, table: Sequence[Sequence[str]]) -> TabularDataset:
        """Build a dataset from loader output whose first row holds the headers.

        Args:
            table (Sequence[Sequence[str]]): Header row followed by data rows.

        Returns:
            TabularDataset: The validated dataset.

        Raises:
            MalformedInputError: If `table` is empty or has no data rows.
        """
        if not table:
            raise MalformedInputError("Table is empty; expected a header row followed by data rows")
        return cls(headers=tuple(table[0]), rows=tuple(tuple(row) for row in table[1:]))

    @classmethod
    def from_frame(cls, df: pl.DataFrame, *, target: str | None = None) -> TabularDataset:
        """Build a dataset from a Polars DataFrame.

        Every column is cast to `String`, so numeric columns are treated as
        categorical values exactly as they print.

        Args:
            df (pl.DataFrame): Source frame.
            target (str | None): Label column. When given it is moved to the
                last position; when `None` the frame's last column is the label.

        Returns:
            TabularDataset: The validated dataset.

        Raises:
            MalformedInputError: If `target` is not a column of `df`, or a
                column contains null values.
        """
        if target is not None:
            if target not in df.columns:
                raise MalformedInputError(f"Target column '{target}' not found in DataFrame")
            df = df.select([*(col for col in df.columns if col != target), target])

        null_columns = [col for col in df.columns if df[col].null_count() > 0]
        if null_columns:
            raise MalformedInputError(f"Columns contain null values: {null_columns}")

        string_df = df.select(pl.all().cast(pl.String))
        return cls(headers=tuple(string_df.columns), rows=tuple(string_df.iter_rows()))

    @property
    def label_column(self) -> str:
        """Name of the label column."""
        return self.headers[-1]

    @property
    def attributes(self) -> tuple[str, ...]:
        """Names of the non-label columns, in header order."""
        return self.headers[:-1]

    @property
    def labels(self) -> tuple[str, ...]:
        """Label of each row, in row order."""
        return tuple(row[-1] for row in self.rows)

    def label_counts(self) -> Counter[str]:
        """Return label to row count, in first-encounter order."""
        return label_counts(self.rows)

    def summary(self) -> DatasetSummary:
        """Summarize the dataset shape and label distribution.

        Returns:
            DatasetSummary: Column count, row count, entropy, and label counts.
        """
        return DatasetSummary(
            attribute_count=len(self.headers),
            row_count=len(self.rows),
            overall_entropy=self.overall_entropy,
            label_distribution=dict(sorted(self.label_counts().items())),
        )

    def to_frame(self) -> pl.DataFrame:
        """Return the dataset as a Polars DataFrame of string columns."""
        return pl.DataFrame(list(self.rows), schema=dict.fromkeys(self.headers, pl.String), orient="row")
