"""Decision tree sub-package: models, entropy, induction, traversal, and text rendering."""

from __future__ import annotations

from id3kit.tree.entropy import entropy, information_gain, label_counts, majority_label
from id3kit.tree.induction import TreeInductionEngine, build_tree
from id3kit.tree.models import (
    ClassificationRule,
    DecisionTree,
    Leaf,
    Predicate,
    Split,
    TreeNode,
)
from id3kit.tree.rendering import parse_text, render_text
from id3kit.tree.traversal import (
    attribute,
    children,
    depth,
    extract_rules,
    is_leaf,
    label,
    leaf_count,
    predict,
    predict_rows,
)

__all__ = [
    "ClassificationRule",
    "DecisionTree",
    "Leaf",
    "Predicate",
    "Split",
    "TreeInductionEngine",
    "TreeNode",
    "attribute",
    "build_tree",
    "children",
    "depth",
    "entropy",
    "extract_rules",
    "information_gain",
    "is_leaf",
    "label",
    "label_counts",
    "leaf_count",
    "majority_label",
    "parse_text",
    "predict",
    "predict_rows",
    "render_text",
]
