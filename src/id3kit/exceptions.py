"""Custom exceptions for decision tree induction.

This module defines the errors raised while loading a dataset, scoring
attributes, building a tree, and walking a finished tree. All of them subclass
`ValueError` so callers can catch bad-input failures with a single clause:

- MalformedInputError: Raised when rows or headers violate the dataset contract
  (empty input, inconsistent row width, missing label column).
- UnknownAttributeError: Raised when an attribute name or index is absent from
  the current headers, or names the label column.
- EmptyPartitionError: Raised when a partition for an observed attribute value
  holds no rows.
- InductionDepthExceededError: Raised when induction would exceed a caller
  supplied depth bound.
- UnseenValueError: Raised when prediction meets an attribute value that no
  training row carried.
- TreeTextParseError: Raised when a text dump cannot be parsed back into a tree.
- TreeTextRenderError: Raised when a tree holds an edge value, label, or
  attribute name that a text dump could not represent unambiguously.
"""

from __future__ import annotations


class MalformedInputError(ValueError):
    """Raised when tabular input violates the dataset contract.

    Attributes:
        row_index (int | None): Zero-based index of the offending data row, or
            `None` when the problem is not tied to a single row.

    Examples:
        >>> err = MalformedInputError("Row 2 has 3 fields, expected 4", row_index=2)
        >>> err.row_index
        2
    """

    row_index: int | None

    def __init__(self, message: str, *, row_index: int | None = None) -> None:
        """Initialize MalformedInputError.

        Args:
            message (str): Description of the contract violation.
            row_index (int | None): Index of the offending data row, if any.
        """
        super().__init__(message)
        self.row_index = row_index

    def __repr__(self) -> str:
        """Return detailed representation for debugging.

        Returns:
            str: Detailed string representation including message and row index.
        """
        return f"{self.__class__.__name__}(message={str(self)!r}, row_index={self.row_index!r})"


class UnknownAttributeError(ValueError):
    """Raised when an attribute is not one of the current splitting attributes.

    Attributes:
        attribute (str | int): The attribute name or column index requested.
        available_attributes (list[str]): Non-label attribute names that were
            available at the time of the request.

    Examples:
        >>> err = UnknownAttributeError("Humidity", available_attributes=["Outlook", "Wind"])
        >>> str(err)
        "Unknown attribute 'Humidity'; available attributes: ['Outlook', 'Wind']"
    """

    attribute: str | int
    available_attributes: list[str]

    def __init__(self, attribute: str | int, available_attributes: list[str]) -> None:
        """Initialize UnknownAttributeError.

        Args:
            attribute (str | int): The attribute name or index that was requested.
            available_attributes (list[str]): Attribute names that are valid.
        """
        super().__init__(f"Unknown attribute {attribute!r}; available attributes: {available_attributes}")
        self.attribute = attribute
        self.available_attributes = available_attributes


class EmptyPartitionError(ValueError):
    """Raised when partitioning by an attribute value yields no rows.

    Attributes:
        attribute (str): The attribute being partitioned on.
        value (str): The attribute value whose partition was empty.
    """

    attribute: str
    value: str

    def __init__(self, attribute: str, value: str) -> None:
        """Initialize EmptyPartitionError.

        Args:
            attribute (str): The attribute being partitioned on.
            value (str): The attribute value whose partition was empty.
        """
        super().__init__(f"Partition for {attribute} = {value!r} contains no rows")
        self.attribute = attribute
        self.value = value


class InductionDepthExceededError(ValueError):
    """Raised when tree induction would grow deeper than the configured bound.

    Attributes:
        max_depth (int): The depth bound that was exceeded.
    """

    max_depth: int

    def __init__(self, max_depth: int) -> None:
        """Initialize InductionDepthExceededError.

        Args:
            max_depth (int): The depth bound that was exceeded.
        """
        super().__init__(f"Tree induction exceeded max_depth={max_depth}")
        self.max_depth = max_depth


class UnseenValueError(ValueError):
    """Raised when a record carries an attribute value absent from the tree.

    Attributes:
        attribute (str): The attribute tested at the split node.
        value (str): The record's value for that attribute.
        known_values (list[str]): Edge values present at the split node, sorted.

    Examples:
        >>> err = UnseenValueError("Outlook", "Foggy", known_values=["Rainy", "Sunny"])
        >>> err.known_values
        ['Rainy', 'Sunny']
    """

    attribute: str
    value: str
    known_values: list[str]

    def __init__(self, attribute: str, value: str, known_values: list[str]) -> None:
        """Initialize UnseenValueError.

        Args:
            attribute (str): The attribute tested at the split node.
            value (str): The record's value for that attribute.
            known_values (list[str]): Edge values present at the split node.
        """
        super().__init__(f"Value {value!r} for attribute '{attribute}' was not seen during training")
        self.attribute = attribute
        self.value = value
        self.known_values = known_values


class TreeTextParseError(ValueError):
    """Raised when a text dump cannot be parsed back into a tree.

    Attributes:
        line_number (int): One-based line number where parsing failed.
    """

    line_number: int

    def __init__(self, message: str, *, line_number: int) -> None:
        """Initialize TreeTextParseError.

        Args:
            message (str): Description of the parse failure.
            line_number (int): One-based line number where parsing failed.
        """
        super().__init__(f"Line {line_number}: {message}")
        self.line_number = line_number

    def __repr__(self) -> str:
        """Return detailed representation for debugging.

        Returns:
            str: Detailed string representation including message and line number.
        """
        return f"{self.__class__.__name__}(message={str(self)!r}, line_number={self.line_number!r})"


class TreeTextRenderError(ValueError):
    """Raised when a tree holds text that its dump could not represent unambiguously.

    A newline anywhere, or an edge value containing `": Attribute = "` or
    `": Leaf = "`, would be read back as a different tree.

    Attributes:
        value (str): The edge value, label, or attribute name that cannot be dumped.

    Examples:
        >>> err = TreeTextRenderError("a\\nb", reason="contains a newline")
        >>> err.value
        'a\\nb'
    """

    value: str

    def __init__(self, value: str, *, reason: str) -> None:
        """Initialize TreeTextRenderError.

        Args:
            value (str): The text that cannot be dumped.
            reason (str): Why the text is ambiguous in a dump.
        """
        super().__init__(f"Cannot dump {value!r}: {reason}")
        self.value = value
