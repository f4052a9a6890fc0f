"""Read-only traversal over induced trees: node accessors, metrics, prediction, rules.

Children are always visited in lexicographic order of their edge value. A
split node's `children` mapping is never iterated directly for observable
output.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence

from id3kit.exceptions import MalformedInputError, UnknownAttributeError, UnseenValueError
from id3kit.tree.models import ClassificationRule, Leaf, Predicate, Split, TreeNode

# ---------------------------------------------------------------------------
# Public interface -- Node accessors
# ---------------------------------------------------------------------------


def is_leaf(node: TreeNode) -> bool:
    """Return `True` if `node` is a leaf."""
    return isinstance(node, Leaf)


def label(node: TreeNode) -> str:
    """Return the predicted label of a leaf node.

    Args:
        node (TreeNode): A leaf node.

    Returns:
        str: The leaf's label.

    Raises:
        TypeError: If `node` is a split node.
    """
    if not isinstance(node, Leaf):
        raise TypeError(f"Split node on '{node.attribute}' has no label")
    return node.label


def attribute(node: TreeNode) -> str:
    """Return the attribute tested by a split node.

    Args:
        node (TreeNode): A split node.

    Returns:
        str: The tested attribute name.

    Raises:
        TypeError: If `node` is a leaf node.
    """
    if not isinstance(node, Split):
        raise TypeError(f"Leaf node '{node.label}' has no attribute")
    return node.attribute


def children(node: TreeNode) -> list[tuple[str, TreeNode]]:
    """Return the `(edge_value, child)` pairs of a node, sorted by edge value.

    Args:
        node (TreeNode): Any tree node.

    Returns:
        list[tuple[str, TreeNode]]: Sorted pairs; empty for a leaf.
    """
    if isinstance(node, Leaf):
        return []
    return sorted(node.children.items(), key=lambda item: item[0])


# ---------------------------------------------------------------------------
# Public interface -- Structure metrics
# ---------------------------------------------------------------------------


def depth(node: TreeNode) -> int:
    """Return the number of split levels on the longest path below `node`."""
    if isinstance(node, Leaf):
        return 0
    return 1 + max(depth(child) for _, child in children(node))


def leaf_count(node: TreeNode) -> int:
    """Return the number of leaves in the subtree rooted at `node`."""
    if isinstance(node, Leaf):
        return 1
    return sum(leaf_count(child) for _, child in children(node))


# ---------------------------------------------------------------------------
# Public interface -- Prediction and rules
# ---------------------------------------------------------------------------


def predict(node: TreeNode, record: Mapping[str, str]) -> str:
    """Classify one record by following the matching edge at every split.

    Args:
        node (TreeNode): Root of the tree to walk.
        record (Mapping[str, str]): Attribute name to value. Extra keys are
            ignored.

    Returns:
        str: The label of the leaf reached.

    Raises:
        UnknownAttributeError: If `record` lacks an attribute tested on the path.
        UnseenValueError: If `record` carries a value with no matching edge.

    Examples:
        >>> tree = Split(attribute="Weather", children={"Sunny": Leaf(label="Yes"), "Rainy": Leaf(label="No")})
        >>> predict(tree, {"Weather": "Sunny"})
        'Yes'
    """
    current = node
    while isinstance(current, Split):
        if current.attribute not in record:
            raise UnknownAttributeError(current.attribute, sorted(record))
        value = record[current.attribute]
        child = current.children.get(value)
        if child is None:
            raise UnseenValueError(current.attribute, value, known_values=sorted(current.children))
        current = child
    return current.label


def predict_rows(node: TreeNode, rows: Sequence[Sequence[str]], headers: Sequence[str]) -> list[str]:
    """Classify every row of a table laid out like the training data.

    Args:
        node (TreeNode): Root of the tree to walk.
        rows (Sequence[Sequence[str]]): Data rows as wide as `headers`.
        headers (Sequence[str]): Column names for the fields of each row.

    Returns:
        list[str]: One predicted label per row, in row order.

    Raises:
        MalformedInputError: If a row is not as wide as `headers`.
    """
    predictions: list[str] = []
    for row_index, row in enumerate(rows):
        if len(row) != len(headers):
            raise MalformedInputError(
                f"Row {row_index} has {len(row)} fields, expected {len(headers)}",
                row_index=row_index,
            )
        predictions.append(predict(node, dict(zip(headers, row, strict=True))))
    return predictions


def extract_rules(
    node: TreeNode,
    rows: Sequence[Sequence[str]],
    headers: Sequence[str],
) -> list[ClassificationRule]:
    """Extract one rule per leaf, counting the training rows that reach it.

    Leaves are visited depth-first with children in lexicographic order.

    Args:
        node (TreeNode): Root of the tree.
        rows (Sequence[Sequence[str]]): Training rows the tree was built from.
        headers (Sequence[str]): Column names for `rows`.

    Returns:
        list[ClassificationRule]: Rules in traversal order.
    """
    column_index = {name: index for index, name in enumerate(headers)}
    rules: list[ClassificationRule] = []
    _walk_tree(
        node,
        rows=list(rows),
        column_index=column_index,
        path_predicates=[],
        rules=rules,
    )
    return rules


# ---------------------------------------------------------------------------
# Private helpers
# ---------------------------------------------------------------------------


def _walk_tree(
    node: TreeNode,
    *,
    rows: list[Sequence[str]],
    column_index: dict[str, int],
    path_predicates: list[Predicate],
    rules: list[ClassificationRule],
) -> None:
    """Recursively walk a tree node and accumulate leaf rules.

    Args:
        node (TreeNode): The current node.
        rows (list[Sequence[str]]): Training rows that reach `node`.
        column_index (dict[str, int]): Header name to column position.
        path_predicates (list[Predicate]): Accumulated predicates from the root
            to `node`.
        rules (list[ClassificationRule]): Accumulator list; leaf rules are
            appended in-place.
    """
    if isinstance(node, Leaf):
        rules.append(ClassificationRule(predicates=path_predicates, prediction=node.label, samples=len(rows)))
        return

    if node.attribute not in column_index:
        raise UnknownAttributeError(node.attribute, list(column_index))
    split_index = column_index[node.attribute]
    for value, child in children(node):
        _walk_tree(
            child,
            rows=[row for row in rows if row[split_index] == value],
            column_index=column_index,
            path_predicates=[*path_predicates, Predicate(variable=node.attribute, value=value)],
            rules=rules,
        )
