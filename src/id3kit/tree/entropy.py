"""Label impurity measures: label counts, entropy, information gain, majority label."""

from __future__ import annotations

from collections import Counter
from collections.abc import Mapping, Sequence

import numpy as np

from id3kit.exceptions import MalformedInputError, UnknownAttributeError

type Row = tuple[str, ...]

# ---------------------------------------------------------------------------
# Public interface -- Label statistics
# ---------------------------------------------------------------------------


def label_counts(rows: Sequence[Sequence[str]]) -> Counter[str]:
    """Count the class labels (last field) across `rows`.

    Args:
        rows (Sequence[Sequence[str]]): Data rows whose last field is the label.

    Returns:
        Counter[str]: Label to count, in first-encounter order.
    """
    return Counter(row[-1] for row in rows)


def majority_label(rows: Sequence[Sequence[str]]) -> str:
    """Return the most frequent label among `rows`.

    Ties are resolved by encounter order: the label seen first in `rows` wins.

    Args:
        rows (Sequence[Sequence[str]]): Non-empty data rows.

    Returns:
        str: The majority label.

    Raises:
        MalformedInputError: If `rows` is empty.
    """
    if not rows:
        raise MalformedInputError("Cannot take the majority label of zero rows")
    # most_common keeps insertion order among equal counts.
    return label_counts(rows).most_common(1)[0][0]


def entropy(counts: Mapping[str, int], total_count: int) -> float:
    """Compute the Shannon entropy, in bits, of a label distribution.

    Labels with a zero count contribute nothing and are skipped before taking
    logarithms.

    Args:
        counts (Mapping[str, int]): Label to number of rows carrying it.
        total_count (int): Number of rows the counts were taken over.

    Returns:
        float: `sum(-p * log2(p))` over labels with `p = count / total_count`.
            `0.0` when one label covers every row, `log2(k)` when `k` labels
            are uniformly distributed.

    Raises:
        MalformedInputError: If `total_count` is not positive.

    Examples:
        >>> entropy({"yes": 2, "no": 2}, 4)
        1.0
        >>> entropy({"yes": 3}, 3)
        0.0
    """
    if total_count <= 0:
        raise MalformedInputError(f"Entropy requires a positive row count, got {total_count}")
    nonzero = np.array([count for count in counts.values() if count > 0], dtype=np.float64)
    probabilities = nonzero / total_count
    return float((probabilities * np.log2(1.0 / probabilities)).sum())


def rows_entropy(rows: Sequence[Sequence[str]]) -> float:
    """Compute the label entropy of `rows`.

    Args:
        rows (Sequence[Sequence[str]]): Non-empty data rows.

    Returns:
        float: Entropy of the last-field distribution.
    """
    return entropy(label_counts(rows), len(rows))


# ---------------------------------------------------------------------------
# Public interface -- Information gain
# ---------------------------------------------------------------------------


def information_gain(
    rows: Sequence[Sequence[str]],
    headers: Sequence[str],
    attribute: int | str,
) -> float:
    """Compute the entropy reduction achieved by splitting `rows` on one attribute.

    The parent entropy is taken over `rows` themselves, so the result is
    correct for the shrinking subsets seen during recursive induction.

    Args:
        rows (Sequence[Sequence[str]]): Data rows, each as wide as `headers`.
        headers (Sequence[str]): Current column names; the last is the label.
        attribute (int | str): Column index or header name of the attribute.

    Returns:
        float: `entropy(rows) - sum(|P_v| / |rows| * entropy(P_v))` where
            `P_v` are the rows sharing attribute value `v`.

    Raises:
        MalformedInputError: If `rows` is empty.
        UnknownAttributeError: If `attribute` is not a non-label column of
            `headers`.
    """
    attribute_index = resolve_attribute_index(headers, attribute)
    if not rows:
        raise MalformedInputError("Information gain requires at least one row")

    partitions: dict[str, Counter[str]] = {}
    for row in rows:
        partitions.setdefault(row[attribute_index], Counter())[row[-1]] += 1

    row_count = len(rows)
    remainder = 0.0
    for partition_counts in partitions.values():
        partition_size = partition_counts.total()
        remainder += (partition_size / row_count) * entropy(partition_counts, partition_size)
    return rows_entropy(rows) - remainder


def resolve_attribute_index(headers: Sequence[str], attribute: int | str) -> int:
    """Map an attribute name or index to a validated non-label column index.

    Args:
        headers (Sequence[str]): Current column names; the last is the label.
        attribute (int | str): Column index or header name.

    Returns:
        int: Index of a non-label column.

    Raises:
        UnknownAttributeError: If the attribute is the label column, out of
            range, or not a header name.
    """
    attribute_names = list(headers[:-1])
    if isinstance(attribute, str):
        if attribute not in attribute_names:
            raise UnknownAttributeError(attribute, attribute_names)
        return attribute_names.index(attribute)
    if not 0 <= attribute < len(attribute_names):
        raise UnknownAttributeError(attribute, attribute_names)
    return attribute
