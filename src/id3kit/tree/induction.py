"""ID3 tree induction: recursive partitioning by greatest information gain."""

from __future__ import annotations

import math
from collections.abc import Iterable, Sequence
from typing import TYPE_CHECKING

from loguru import logger

from id3kit.exceptions import EmptyPartitionError, InductionDepthExceededError
from id3kit.logging import SPLIT_LEVEL
from id3kit.tree.entropy import Row, information_gain, majority_label
from id3kit.tree.models import DecisionTree, Leaf, Split, TreeNode
from id3kit.tree.traversal import depth, extract_rules, leaf_count
from id3kit.validation import validate_rows

if TYPE_CHECKING:
    from id3kit.dataset import TabularDataset
    from id3kit.settings import InductionSettings

# ---------------------------------------------------------------------------
# Module-level constants
# ---------------------------------------------------------------------------

_NO_GAIN: float = -math.inf  # Below any attainable gain, so the first scanned attribute always qualifies.

# ---------------------------------------------------------------------------
# Public interface -- Induction engine
# ---------------------------------------------------------------------------


class TreeInductionEngine:
    """Builds classification trees by recursive information-gain partitioning.

    The engine holds configuration only; every `build` call is a pure
    transformation of its `(rows, headers)` input into a tree.

    At each node the following checks run in order, first match wins:

    1. Every row carries the same label: return a leaf with that label.
    2. Only the label column remains: return a leaf with the majority label.
    3. Score every attribute and keep the strictly greatest gain, so ties go
       to the leftmost attribute. Zero or negative best gains still split.
    4. No attribute could be scored: return a majority-label leaf.
    5. Partition rows by the chosen attribute, drop its column, and recurse
       once per observed value.

    Every split removes one column, so the depth of the tree never exceeds the
    initial attribute count.

    Attributes:
        max_depth (int | None): Depth bound; `None` means unbounded.

    Examples:
        >>> engine = TreeInductionEngine()
        >>> root = engine.build([("Sunny", "Yes"), ("Sunny", "Yes"), ("Rainy", "No")], ("Weather", "Play"))
        >>> root.attribute, sorted(root.children)
        ('Weather', ['Rainy', 'Sunny'])
    """

    def __init__(self, *, max_depth: int | None = None) -> None:
        """Initialize the engine.

        Args:
            max_depth (int | None): When set, induction that would place a
                split below this depth raises `InductionDepthExceededError`
                instead of returning a partial tree.

        Raises:
            ValueError: If `max_depth` is less than 1.
        """
        if max_depth is not None and max_depth < 1:
            raise ValueError(f"max_depth must be at least 1, got {max_depth}")
        self.max_depth = max_depth

    @classmethod
    def from_settings(cls, settings: InductionSettings) -> TreeInductionEngine:
        """Create an engine configured from `InductionSettings`.

        Args:
            settings (InductionSettings): Loaded settings.

        Returns:
            TreeInductionEngine: Engine using `settings.max_depth`.
        """
        return cls(max_depth=settings.max_depth)

    def build(self, rows: Sequence[Sequence[str]], headers: Sequence[str]) -> TreeNode:
        """Induce a tree from data rows whose last field is the class label.

        Args:
            rows (Sequence[Sequence[str]]): Data rows, each as wide as `headers`.
            headers (Sequence[str]): Column names; the last is the label column.

        Returns:
            TreeNode: Root of the induced tree.

        Raises:
            MalformedInputError: If there are no rows, fewer than two headers,
                duplicate headers, or rows of inconsistent width.
            InductionDepthExceededError: If the tree would exceed `max_depth`.
        """
        validate_rows(rows, headers)
        frozen_rows = tuple(tuple(row) for row in rows)
        return self._induce(frozen_rows, tuple(headers), level=0)

    def fit(self, dataset: TabularDataset) -> DecisionTree:
        """Induce a tree from a dataset and assemble the full result.

        Args:
            dataset (TabularDataset): Validated training data.

        Returns:
            DecisionTree: The tree with its metadata and per-leaf rules.
        """
        logger.info(
            "Tree induction started",
            target=dataset.label_column,
            attribute_count=len(dataset.attributes),
            row_count=len(dataset.rows),
            overall_entropy=round(dataset.overall_entropy, 4),
        )
        root = self.build(dataset.rows, dataset.headers)
        result = DecisionTree(
            root=root,
            target=dataset.label_column,
            attributes=dataset.attributes,
            sample_count=len(dataset.rows),
            depth=depth(root),
            leaf_count=leaf_count(root),
            rules=extract_rules(root, dataset.rows, dataset.headers),
        )
        logger.info("Tree induction finished", depth=result.depth, leaf_count=result.leaf_count)
        return result

    def _induce(self, rows: tuple[Row, ...], headers: tuple[str, ...], *, level: int) -> TreeNode:
        """Recursive step of `build` on an already validated subset.

        Args:
            rows (tuple[Row, ...]): Rows reaching this node.
            headers (tuple[str, ...]): Remaining columns; the last is the label.
            level (int): Number of splits above this node.

        Returns:
            TreeNode: Subtree for `rows`.
        """
        first_label = rows[0][-1]
        if all(row[-1] == first_label for row in rows):
            logger.debug("Pure leaf", label=first_label, row_count=len(rows), depth=level)
            return Leaf(label=first_label)

        if len(headers) == 1:
            return self._majority_leaf(rows, level=level, reason="attributes exhausted")

        best_index, best_gain = select_attribute(rows, headers)
        if best_index is None:
            return self._majority_leaf(rows, level=level, reason="no attribute could be scored")

        if self.max_depth is not None and level >= self.max_depth:
            raise InductionDepthExceededError(self.max_depth)

        split_attribute = headers[best_index]
        logger.log(
            SPLIT_LEVEL,
            "Splitting on {attribute}",
            attribute=split_attribute,
            gain=round(best_gain, 6),
            row_count=len(rows),
            depth=level,
        )
        reduced_headers = _drop_column(headers, best_index)
        children: dict[str, TreeNode] = {}
        for value, partition in partition_rows(rows, best_index).items():
            if not partition:
                raise EmptyPartitionError(split_attribute, value)
            children[value] = self._induce(partition, reduced_headers, level=level + 1)
        return Split(attribute=split_attribute, children=children)

    @staticmethod
    def _majority_leaf(rows: tuple[Row, ...], *, level: int, reason: str) -> Leaf:
        """Return a leaf labelled with the most frequent label in `rows`."""
        majority = majority_label(rows)
        logger.debug("Majority leaf", label=majority, reason=reason, row_count=len(rows), depth=level)
        return Leaf(label=majority)


def build_tree(dataset: TabularDataset, *, max_depth: int | None = None) -> DecisionTree:
    """Induce a decision tree from a dataset in one call.

    Args:
        dataset (TabularDataset): Validated training data.
        max_depth (int | None): Optional depth bound.

    Returns:
        DecisionTree: The induced tree with metadata and rules.
    """
    return TreeInductionEngine(max_depth=max_depth).fit(dataset)


# ---------------------------------------------------------------------------
# Public interface -- Induction steps
# ---------------------------------------------------------------------------


def select_attribute(rows: Sequence[Sequence[str]], headers: Sequence[str]) -> tuple[int | None, float]:
    """Pick the attribute with the strictly greatest information gain.

    Attributes are scanned left to right and a later attribute replaces the
    current best only when its gain is strictly greater, so ties resolve to
    the first attribute in header order.

    Args:
        rows (Sequence[Sequence[str]]): Non-empty rows reaching the node.
        headers (Sequence[str]): Current columns; the last is the label.

    Returns:
        tuple[int | None, float]: `(index, gain)` of the chosen attribute, or
            `(None, -inf)` when there is no attribute to score.
    """
    best_index: int | None = None
    best_gain = _NO_GAIN
    for index in range(len(headers) - 1):
        gain = information_gain(rows, headers, index)
        if gain > best_gain:
            best_index, best_gain = index, gain
    return best_index, best_gain


def partition_rows(rows: Iterable[Sequence[str]], column_index: int) -> dict[str, tuple[Row, ...]]:
    """Group rows by one column's value, removing that column from every row.

    Each partition holds new row tuples, so no two partitions share state.

    Args:
        rows (Iterable[Sequence[str]]): Rows to partition.
        column_index (int): Column to group by and drop.

    Returns:
        dict[str, tuple[Row, ...]]: Observed value to the reduced rows
            carrying it, in first-encounter order of the values.

    Examples:
        >>> partition_rows([("Sunny", "Hot", "No"), ("Rainy", "Mild", "Yes")], 0)
        {'Sunny': (('Hot', 'No'),), 'Rainy': (('Mild', 'Yes'),)}
    """
    partitions: dict[str, list[Row]] = {}
    for row in rows:
        partitions.setdefault(row[column_index], []).append(_drop_column(row, column_index))
    return {value: tuple(partition) for value, partition in partitions.items()}


# ---------------------------------------------------------------------------
# Private helpers
# ---------------------------------------------------------------------------


def _drop_column[T](values: Sequence[T], index: int) -> tuple[T, ...]:
    """Return `values` as a new tuple without the element at `index`."""
    return (*values[:index], *values[index + 1 :])
