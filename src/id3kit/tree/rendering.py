"""Text dump of induced trees and the parser that reads it back.

The dump is depth-first with children in lexicographic order of their edge
value. The root line is `Attribute = <name>` or `Leaf = <label>`; every other
line is indented one `"│   "` per level and reads `├── <edge>: Attribute = <name>`
or `├── <edge>: Leaf = <label>`:

    Attribute = Outlook
    │   ├── Overcast: Leaf = Yes
    │   ├── Rainy: Attribute = Wind
    │   │   ├── Strong: Leaf = No
    │   │   ├── Weak: Leaf = Yes
    │   ├── Sunny: Leaf = No
"""

from __future__ import annotations

from typing import NamedTuple

from id3kit.exceptions import TreeTextParseError, TreeTextRenderError
from id3kit.tree.models import DecisionTree, Leaf, Split, TreeNode
from id3kit.tree.traversal import children

_INDENT: str = "│   "
_BRANCH: str = "├── "
_ATTRIBUTE_MARKER: str = "Attribute = "
_LEAF_MARKER: str = "Leaf = "
_EDGE_SEPARATORS: tuple[str, ...] = (f": {_ATTRIBUTE_MARKER}", f": {_LEAF_MARKER}")

# ---------------------------------------------------------------------------
# Public interface
# ---------------------------------------------------------------------------


def render_text(tree: DecisionTree | TreeNode) -> str:
    """Dump a tree as indented text, one node per line.

    Args:
        tree (DecisionTree | TreeNode): A finished tree or any subtree root.

    Returns:
        str: The dump, newline-terminated.

    Raises:
        TreeTextRenderError: If a label, attribute name, or edge value contains
            a newline, or an edge value contains `": Attribute = "` or
            `": Leaf = "`. `parse_text` could not read such a dump back.

    Examples:
        >>> node = Split(attribute="Weather", children={"Sunny": Leaf(label="Yes"), "Rainy": Leaf(label="No")})
        >>> print(render_text(node), end="")
        Attribute = Weather
        │   ├── Rainy: Leaf = No
        │   ├── Sunny: Leaf = Yes
    """
    root = tree.root if isinstance(tree, DecisionTree) else tree
    lines: list[str] = []
    _render_node(root, level=0, edge_value=None, lines=lines)
    return "".join(f"{line}\n" for line in lines)


def parse_text(text: str) -> TreeNode:
    """Rebuild a tree from the output of `render_text`.

    Only line feeds separate lines; other line break characters such as
    vertical tab or U+2028 are ordinary text inside a label. Blank lines are
    ignored.

    Args:
        text (str): A text dump.

    Returns:
        TreeNode: A tree isomorphic to the one that was dumped.

    Raises:
        TreeTextParseError: If the text is empty, a line is malformed, the
            indentation skips a level, a split has no children or a repeated
            edge value, or there is more than one root.
    """
    entries = [
        _parse_line(line, line_number)
        for line_number, line in enumerate(text.split("\n"), start=1)
        if line.strip()
    ]
    if not entries:
        raise TreeTextParseError("No tree nodes found", line_number=1)

    root_entry = entries[0]
    if root_entry.level != 0:
        raise TreeTextParseError("The first node must be the unindented root", line_number=root_entry.line_number)

    root, next_position = _build_node(entries, 0)
    if next_position < len(entries):
        raise TreeTextParseError(
            "Unexpected node after the root subtree", line_number=entries[next_position].line_number
        )
    return root


# ---------------------------------------------------------------------------
# Private helpers
# ---------------------------------------------------------------------------


class _LineEntry(NamedTuple):
    """One parsed line of a text dump.

    Attributes:
        level (int): Nesting level; the root is at level 0.
        edge_value (str | None): Edge value leading to the node; `None` for the root.
        is_leaf (bool): Whether the line describes a leaf.
        text (str): Leaf label or split attribute.
        line_number (int): One-based line number in the dump.
    """

    level: int
    edge_value: str | None
    is_leaf: bool
    text: str
    line_number: int


def _render_node(node: TreeNode, *, level: int, edge_value: str | None, lines: list[str]) -> None:
    """Append the lines for `node` and its subtree to `lines`."""
    marker, name = (_LEAF_MARKER, node.label) if isinstance(node, Leaf) else (_ATTRIBUTE_MARKER, node.attribute)
    _check_renderable(name)
    body = f"{marker}{name}"
    if edge_value is None:
        lines.append(body)
    else:
        _check_renderable(edge_value)
        for separator in _EDGE_SEPARATORS:
            if separator in edge_value:
                raise TreeTextRenderError(edge_value, reason=f"edge value contains {separator!r}")
        lines.append(f"{_INDENT * level}{_BRANCH}{edge_value}: {body}")
    for value, child in children(node):
        _render_node(child, level=level + 1, edge_value=value, lines=lines)


def _check_renderable(text: str) -> None:
    """Raise if `text` would split its dump line in two."""
    if "\n" in text:
        raise TreeTextRenderError(text, reason="contains a newline")


def _parse_line(line: str, line_number: int) -> _LineEntry:
    """Split one dump line into its level, edge value, and node description."""
    level = 0
    rest = line
    while rest.startswith(_INDENT):
        level += 1
        rest = rest[len(_INDENT) :]

    if level == 0:
        is_leaf, text = _parse_body(rest, line_number)
        return _LineEntry(level=0, edge_value=None, is_leaf=is_leaf, text=text, line_number=line_number)

    if not rest.startswith(_BRANCH):
        raise TreeTextParseError(f"Expected {_BRANCH.strip()!r} after indentation", line_number=line_number)
    rest = rest[len(_BRANCH) :]

    # Whichever marker appears first ends the edge value.
    marker_positions = [
        (position, separator) for separator in _EDGE_SEPARATORS if (position := rest.find(separator)) >= 0
    ]
    if not marker_positions:
        raise TreeTextParseError(
            "Expected '<edge>: Attribute = <name>' or '<edge>: Leaf = <label>'", line_number=line_number
        )
    position, _ = min(marker_positions)
    is_leaf, text = _parse_body(rest[position + 2 :], line_number)
    return _LineEntry(level=level, edge_value=rest[:position], is_leaf=is_leaf, text=text, line_number=line_number)


def _parse_body(body: str, line_number: int) -> tuple[bool, str]:
    """Return `(is_leaf, text)` for an `Attribute = ...` or `Leaf = ...` body."""
    if body.startswith(_LEAF_MARKER):
        return True, body[len(_LEAF_MARKER) :]
    if body.startswith(_ATTRIBUTE_MARKER):
        return False, body[len(_ATTRIBUTE_MARKER) :]
    raise TreeTextParseError(f"Expected 'Attribute = ' or 'Leaf = ', got {body!r}", line_number=line_number)


def _build_node(entries: list[_LineEntry], position: int) -> tuple[TreeNode, int]:
    """Build the subtree whose root is `entries[position]`.

    Args:
        entries (list[_LineEntry]): All parsed lines.
        position (int): Index of the subtree root.

    Returns:
        tuple[TreeNode, int]: The subtree and the index just past it.
    """
    entry = entries[position]
    if entry.is_leaf:
        return Leaf(label=entry.text), position + 1

    child_nodes: dict[str, TreeNode] = {}
    position += 1
    while position < len(entries) and entries[position].level > entry.level:
        child_entry = entries[position]
        if child_entry.level != entry.level + 1:
            raise TreeTextParseError(
                f"Indentation jumps from level {entry.level} to {child_entry.level}",
                line_number=child_entry.line_number,
            )
        edge_value = child_entry.edge_value or ""
        if edge_value in child_nodes:
            raise TreeTextParseError(
                f"Edge value {edge_value!r} repeated under '{entry.text}'", line_number=child_entry.line_number
            )
        child_nodes[edge_value], position = _build_node(entries, position)

    if not child_nodes:
        raise TreeTextParseError(f"Split on '{entry.text}' has no children", line_number=entry.line_number)
    return Split(attribute=entry.text, children=child_nodes), position
