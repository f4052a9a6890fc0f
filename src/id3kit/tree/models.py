"""Pydantic models for induced trees: Leaf and Split nodes, DecisionTree, and rules."""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType
from typing import Any, Literal

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    SerializerFunctionWrapHandler,
    field_serializer,
    field_validator,
    model_validator,
)

# ---------------------------------------------------------------------------
# Public models -- Tree nodes
# ---------------------------------------------------------------------------


class Leaf(BaseModel):
    """A terminal node carrying a single predicted class label.

    Attributes:
        kind (Literal["leaf"]): Discriminator field; always `"leaf"`.
        label (str): Predicted class for rows reaching this node.

    Examples:
        >>> Leaf(label="Yes")
        Leaf(kind='leaf', label='Yes')
    """

    model_config = ConfigDict(frozen=True)

    kind: Literal["leaf"] = Field(default="leaf", description='Discriminator field. Always "leaf".')
    label: str = Field(description="Predicted class for rows reaching this node.")


class Split(BaseModel):
    """An internal node testing one attribute, with one child per observed value.

    The `children` mapping is keyed by attribute value and is read-only, like
    the rest of the node. Its iteration order carries no meaning; use
    `id3kit.tree.traversal.children` for a sorted view.

    Attributes:
        kind (Literal["split"]): Discriminator field; always `"split"`.
        attribute (str): Name of the attribute tested at this node.
        children (Mapping[str, Leaf | Split]): Read-only mapping of attribute
            value to child subtree.

    Examples:
        >>> node = Split(attribute="Weather", children={"Sunny": Leaf(label="Yes"), "Rainy": Leaf(label="No")})
        >>> sorted(node.children)
        ['Rainy', 'Sunny']
    """

    model_config = ConfigDict(frozen=True)

    kind: Literal["split"] = Field(default="split", description='Discriminator field. Always "split".')
    attribute: str = Field(description="Name of the attribute tested at this node.")
    children: Mapping[str, Leaf | Split] = Field(
        description="Attribute value to child subtree. Keys are the values observed during induction.",
    )

    @field_validator("children", mode="after")
    @classmethod
    def _validate_children_not_empty(cls, value: Mapping[str, Leaf | Split]) -> Mapping[str, Leaf | Split]:
        """Validate that a split node has at least one child and freeze the mapping.

        The mapping is copied, so later changes to the caller's dict do not
        reach the node.

        Args:
            value (Mapping[str, Leaf | Split]): The children mapping to validate.

        Returns:
            Mapping[str, Leaf | Split]: A read-only copy of the mapping.

        Raises:
            ValueError: If the mapping is empty.
        """
        if not value:
            raise ValueError("A split node must have at least one child")
        return MappingProxyType(dict(value))

    @field_serializer("children", mode="wrap")
    def _serialize_children(self, value: Mapping[str, Leaf | Split], handler: SerializerFunctionWrapHandler) -> Any:
        """Serialize the read-only children mapping as a plain dict."""
        return handler(dict(value))


type TreeNode = Leaf | Split


# ---------------------------------------------------------------------------
# Public models -- Rules
# ---------------------------------------------------------------------------


class Predicate(BaseModel):
    """A single equality test on one attribute along a root-to-leaf path.

    Attributes:
        variable (str): Attribute name the test applies to.
        operator (Literal["=="]): Comparison operator; categorical splits only
            produce equality tests.
        value (str): Attribute value on the branch taken.

    Examples:
        >>> p = Predicate(variable="Outlook", value="Sunny")
        >>> str(p)
        'Outlook == Sunny'
        >>> p.eval("Sunny")
        True
    """

    model_config = ConfigDict(frozen=True)

    variable: str = Field(description="Attribute name the test applies to, e.g. 'Outlook'.")
    operator: Literal["=="] = Field(default="==", description="Comparison operator.")
    value: str = Field(description="Attribute value on the branch taken.")

    def __str__(self) -> str:
        """Return a human-readable representation of this predicate.

        Returns:
            str: The predicate as `"<variable> == <value>"`.
        """
        return f"{self.variable} {self.operator} {self.value}"

    def eval(self, x: str) -> bool:
        """Evaluate this predicate against an attribute value.

        Args:
            x (str): The attribute value to test.

        Returns:
            bool: `True` if `x` equals the predicate value.
        """
        return x == self.value


class ClassificationRule(BaseModel):
    """A decision rule read off one leaf of an induced tree.

    Attributes:
        predicates (tuple[Predicate, ...]): Tests along the path from the root
            to the leaf. Empty when the whole tree is a single leaf.
        prediction (str): Leaf label.
        samples (int): Number of training rows that reach the leaf.
    """

    model_config = ConfigDict(frozen=True)

    predicates: tuple[Predicate, ...] = Field(
        description="Tests along the path from root to this leaf. Empty tuple indicates a single-leaf tree.",
    )
    prediction: str = Field(description="Predicted class label for rows reaching this leaf.")
    samples: int = Field(ge=0, description="Number of training rows that reached this leaf.")

    def __str__(self) -> str:
        """Return the rule as an `IF ... THEN ...` sentence.

        Returns:
            str: e.g. `"IF Outlook == Sunny AND Humidity == High THEN No"`.
        """
        if not self.predicates:
            return f"THEN {self.prediction}"
        conditions = " AND ".join(str(predicate) for predicate in self.predicates)
        return f"IF {conditions} THEN {self.prediction}"

    def matches(self, record: Mapping[str, str]) -> bool:
        """Return whether every predicate holds for `record`.

        Args:
            record (Mapping[str, str]): Attribute name to value.

        Returns:
            bool: `True` when the record follows this rule's path.
        """
        return all(
            predicate.variable in record and predicate.eval(record[predicate.variable])
            for predicate in self.predicates
        )


# ---------------------------------------------------------------------------
# Public models -- Induction result
# ---------------------------------------------------------------------------


class DecisionTree(BaseModel):
    """Structured output of tree induction.

    Captures the finished tree together with the dataset shape it was induced
    from, the tree's structure metadata, and one rule per leaf.

    Attributes:
        root (TreeNode): Root node of the tree.
        target (str): Name of the label column.
        attributes (tuple[str, ...]): Non-label attributes available to the engine,
            in header order.
        sample_count (int): Number of training rows.
        depth (int): Number of split levels on the longest root-to-leaf path;
            `0` for a single-leaf tree.
        leaf_count (int): Number of leaves in the tree.
        rules (tuple[ClassificationRule, ...]): One rule per leaf, in the
            lexicographic traversal order of the tree.

    Examples:
        >>> tree = DecisionTree(
        ...     root=Split(attribute="Weather", children={"Sunny": Leaf(label="Yes"), "Rainy": Leaf(label="No")}),
        ...     target="Play",
        ...     attributes=["Weather"],
        ...     sample_count=3,
        ...     depth=1,
        ...     leaf_count=2,
        ...     rules=[
        ...         ClassificationRule(
        ...             predicates=[Predicate(variable="Weather", value="Rainy")], prediction="No", samples=1
        ...         ),
        ...         ClassificationRule(
        ...             predicates=[Predicate(variable="Weather", value="Sunny")], prediction="Yes", samples=2
        ...         ),
        ...     ],
        ... )
    """

    model_config = ConfigDict(frozen=True)

    root: Leaf | Split = Field(description="Root node of the induced tree.")
    target: str = Field(description="Name of the label column.")
    attributes: tuple[str, ...] = Field(description="Non-label attributes available to the engine, in header order.")
    sample_count: int = Field(ge=1, description="Number of training rows the tree was induced from.")
    depth: int = Field(ge=0, description="Number of split levels on the longest root-to-leaf path.")
    leaf_count: int = Field(ge=1, description="Number of leaf nodes in the tree.")
    rules: tuple[ClassificationRule, ...] = Field(description="One rule per leaf node, in traversal order.")

    @model_validator(mode="after")
    def _validate_depth_within_attribute_count(self) -> DecisionTree:
        """Validate that the tree is no deeper than the number of attributes.

        Returns:
            DecisionTree: The validated model instance.

        Raises:
            ValueError: If `depth` exceeds `len(attributes)`.
        """
        if self.depth > len(self.attributes):
            raise ValueError(f"depth ({self.depth}) cannot exceed the attribute count ({len(self.attributes)})")
        return self

    @model_validator(mode="after")
    def _validate_rules_count_matches_leaf_count(self) -> DecisionTree:
        """Validate that the number of rules equals the number of leaf nodes.

        Returns:
            DecisionTree: The validated model instance.

        Raises:
            ValueError: If `len(rules)` does not equal `leaf_count`.
        """
        if len(self.rules) != self.leaf_count:
            raise ValueError(f"rules length ({len(self.rules)}) must equal leaf_count ({self.leaf_count})")
        return self

    @model_validator(mode="after")
    def _validate_rule_samples_sum_to_sample_count(self) -> DecisionTree:
        """Validate that every training row is accounted for by exactly one rule.

        Returns:
            DecisionTree: The validated model instance.

        Raises:
            ValueError: If the rule sample counts do not add up to `sample_count`.
        """
        total = sum(rule.samples for rule in self.rules)
        if total != self.sample_count:
            raise ValueError(f"rule samples sum to {total}, expected sample_count={self.sample_count}")
        return self
