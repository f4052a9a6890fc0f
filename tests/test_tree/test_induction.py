"""Tests for ID3 induction: termination, selection, tie-breaks, and the full pipeline."""

from __future__ import annotations

import itertools

import pytest
from pytest_check import check

from id3kit.dataset import TabularDataset
from id3kit.exceptions import InductionDepthExceededError, MalformedInputError
from id3kit.settings import InductionSettings
from id3kit.tree.induction import (
    TreeInductionEngine,
    build_tree,
    partition_rows,
    select_attribute,
)
from id3kit.tree.models import Leaf, Split
from id3kit.tree.traversal import depth, predict_rows
from id3kit.validation import validate_rows


class TestBuildTermination:
    """Tests for the leaf-producing steps of `TreeInductionEngine.build`."""

    def test_pure_labels_return_leaf_without_scoring(self) -> None:
        """Rows sharing one label produce a single leaf with that label."""
        # Arrange
        rows = [("Sunny", "Hot", "Yes"), ("Rainy", "Cold", "Yes"), ("Cloudy", "Mild", "Yes")]

        # Act
        root = TreeInductionEngine().build(rows, ("Outlook", "Temperature", "Play"))

        # Assert
        assert root == Leaf(label="Yes")

    def test_single_attribute_with_one_value_falls_back_to_majority(self) -> None:
        """Labels `[A, A, B]` under an uninformative attribute end in a majority leaf `A`."""
        # Arrange
        rows = [("v", "A"), ("v", "A"), ("v", "B")]

        # Act
        root = TreeInductionEngine().build(rows, ("Constant", "Label"))

        # Assert - the zero-gain attribute is still split on, then attributes are exhausted
        assert root == Split(attribute="Constant", children={"v": Leaf(label="A")})

    def test_exhausted_attributes_with_tied_labels_pick_first_seen(self) -> None:
        """When attributes run out on a label tie, the label encountered first wins."""
        rows = [("v", "B"), ("v", "A"), ("v", "A"), ("v", "B")]

        root = TreeInductionEngine().build(rows, ("Constant", "Label"))

        assert root == Split(attribute="Constant", children={"v": Leaf(label="B")})


class TestBuildScenarios:
    """End-to-end induction scenarios."""

    def test_weather_play_splits_on_weather(self, weather_dataset: TabularDataset) -> None:
        """`[Sunny, Yes], [Sunny, Yes], [Rainy, No]` splits on Weather into two pure leaves."""
        # Act
        root = TreeInductionEngine().build(weather_dataset.rows, weather_dataset.headers)

        # Assert
        assert root == Split(
            attribute="Weather",
            children={"Sunny": Leaf(label="Yes"), "Rainy": Leaf(label="No")},
        )

    def test_play_tennis_produces_textbook_tree(self, play_tennis_dataset: TabularDataset) -> None:
        """The play-tennis data yields the classic Outlook / Humidity / Wind tree."""
        # Act
        root = TreeInductionEngine().build(play_tennis_dataset.rows, play_tennis_dataset.headers)

        # Assert
        expected = Split(
            attribute="Outlook",
            children={
                "Sunny": Split(
                    attribute="Humidity",
                    children={"High": Leaf(label="No"), "Normal": Leaf(label="Yes")},
                ),
                "Overcast": Leaf(label="Yes"),
                "Rain": Split(
                    attribute="Wind",
                    children={"Weak": Leaf(label="Yes"), "Strong": Leaf(label="No")},
                ),
            },
        )
        assert root == expected

    def test_equal_gain_picks_first_attribute_in_header_order(self) -> None:
        """Two attributes with identical gain resolve to the leftmost one."""
        # Arrange - columns A and B carry the same values, so their gains are equal
        rows = [("x", "x", "Yes"), ("y", "y", "No"), ("x", "x", "Yes"), ("y", "y", "No")]

        # Act
        root_ab = TreeInductionEngine().build(rows, ("A", "B", "Label"))
        root_ba = TreeInductionEngine().build(rows, ("B", "A", "Label"))

        # Assert
        with check:
            assert isinstance(root_ab, Split) and root_ab.attribute == "A"
        with check:
            assert isinstance(root_ba, Split) and root_ba.attribute == "B"

    def test_equal_gain_choice_is_reproducible(self) -> None:
        """Repeated builds over tied attributes produce identical trees."""
        rows = [("p", "q", "r", "L1"), ("s", "t", "u", "L2"), ("p", "q", "u", "L1"), ("s", "t", "r", "L2")]
        headers = ("First", "Second", "Third", "Label")

        trees = [TreeInductionEngine().build(rows, headers) for _ in range(5)]

        assert all(tree == trees[0] for tree in trees)

    def test_row_unique_identifier_is_split_on(self) -> None:
        """A row-unique identifier column maximizes gain and is chosen first."""
        rows = [("r1", "a", "Yes"), ("r2", "a", "No"), ("r3", "b", "Yes"), ("r4", "b", "No")]

        root = TreeInductionEngine().build(rows, ("Id", "Group", "Label"))

        with check:
            assert isinstance(root, Split) and root.attribute == "Id"
        with check:
            assert depth(root) == 1

    def test_pure_branch_stops_before_remaining_attributes(self) -> None:
        """A branch whose rows are already pure becomes a leaf even when attributes remain."""
        rows = [("Sunny", "Hot", "Yes"), ("Sunny", "Cold", "Yes"), ("Rainy", "Hot", "No"), ("Rainy", "Cold", "Yes")]

        root = TreeInductionEngine().build(rows, ("Outlook", "Temperature", "Play"))

        assert isinstance(root, Split)
        with check:
            assert root.children["Sunny"] == Leaf(label="Yes")
        with check:
            assert root.children["Rainy"] == Split(
                attribute="Temperature",
                children={"Hot": Leaf(label="No"), "Cold": Leaf(label="Yes")},
            )


class TestBuildProperties:
    """Structural guarantees of induction over arbitrary well-formed input."""

    @pytest.mark.parametrize("attribute_count", [1, 2, 3])
    def test_depth_never_exceeds_attribute_count(self, attribute_count: int) -> None:
        """Even with contradictory rows the tree depth is bounded by the attribute count."""
        # Arrange - every attribute combination appears twice with opposite labels
        value_combinations = list(itertools.product(["a", "b"], repeat=attribute_count))
        rows = [(*values, label) for values in value_combinations for label in ("Yes", "No")]
        headers = (*(f"attr_{index}" for index in range(attribute_count)), "Label")

        # Act
        root = TreeInductionEngine().build(rows, headers)

        # Assert
        assert depth(root) <= attribute_count

    def test_consistent_training_rows_are_reproduced(self, play_tennis_dataset: TabularDataset) -> None:
        """Every training row of a consistent dataset is classified with its own label."""
        # Arrange
        root = TreeInductionEngine().build(play_tennis_dataset.rows, play_tennis_dataset.headers)

        # Act
        predictions = predict_rows(root, play_tennis_dataset.rows, play_tennis_dataset.headers)

        # Assert
        assert predictions == list(play_tennis_dataset.labels)

    def test_input_rows_are_not_modified(self) -> None:
        """Building a tree leaves the caller's rows and headers untouched."""
        rows = [["Sunny", "Hot", "Yes"], ["Rainy", "Cold", "No"]]
        headers = ["Outlook", "Temperature", "Play"]
        rows_before = [list(row) for row in rows]

        TreeInductionEngine().build(rows, headers)

        with check:
            assert rows == rows_before
        with check:
            assert headers == ["Outlook", "Temperature", "Play"]


class TestBuildValidation:
    """Tests for fail-fast validation of the initial `build` call."""

    def test_zero_rows_raise(self) -> None:
        """Induction over no rows is a caller error."""
        with pytest.raises(MalformedInputError, match="no data rows"):
            TreeInductionEngine().build([], ("Weather", "Play"))

    @pytest.mark.parametrize("headers", [(), ("Play",)])
    def test_missing_attribute_columns_raise(self, headers: tuple[str, ...]) -> None:
        """At least one attribute column plus the label column is required."""
        with pytest.raises(MalformedInputError, match="at least 2 columns"):
            TreeInductionEngine().build([("Yes",)], headers)

    def test_inconsistent_row_width_raises(self) -> None:
        """A row narrower than the headers is rejected with its index."""
        rows = [("Sunny", "Yes"), ("Rainy",), ("Sunny", "No")]

        with pytest.raises(MalformedInputError) as exc_info:
            TreeInductionEngine().build(rows, ("Weather", "Play"))

        assert exc_info.value.row_index == 1

    def test_duplicate_headers_raise(self) -> None:
        """Duplicate header names would make attribute lookup ambiguous."""
        with pytest.raises(MalformedInputError, match="Duplicate header"):
            validate_rows([("a", "b", "Yes")], ("Weather", "Weather", "Play"))


class TestMaxDepth:
    """Tests for the optional depth bound on induction."""

    def test_exceeding_max_depth_raises(self, play_tennis_dataset: TabularDataset) -> None:
        """A tree that needs two split levels fails under `max_depth=1`."""
        engine = TreeInductionEngine(max_depth=1)

        with pytest.raises(InductionDepthExceededError) as exc_info:
            engine.build(play_tennis_dataset.rows, play_tennis_dataset.headers)

        assert exc_info.value.max_depth == 1

    def test_tree_within_max_depth_builds(self, play_tennis_dataset: TabularDataset) -> None:
        """A bound equal to the natural tree depth does not interfere."""
        root = TreeInductionEngine(max_depth=2).build(play_tennis_dataset.rows, play_tennis_dataset.headers)

        assert depth(root) == 2

    @pytest.mark.parametrize("max_depth", [0, -2])
    def test_non_positive_max_depth_is_rejected(self, max_depth: int) -> None:
        """A depth bound below 1 is a configuration error."""
        with pytest.raises(ValueError, match="max_depth must be at least 1"):
            TreeInductionEngine(max_depth=max_depth)

    def test_engine_from_settings_uses_max_depth(self) -> None:
        """`from_settings` carries the configured depth bound."""
        engine = TreeInductionEngine.from_settings(InductionSettings(max_depth=3))

        assert engine.max_depth == 3


class TestSelectAttribute:
    """Tests for `select_attribute`."""

    def test_returns_index_and_gain_of_best_attribute(self, play_tennis_dataset: TabularDataset) -> None:
        """The play-tennis root choice is Outlook at index 0."""
        index, gain = select_attribute(play_tennis_dataset.rows, play_tennis_dataset.headers)

        with check:
            assert index == 0
        with check:
            assert gain == pytest.approx(0.246750, abs=1e-5)

    def test_zero_gain_attribute_is_still_selected(self) -> None:
        """A best gain of zero is selected rather than treated as no candidate."""
        index, gain = select_attribute([("v", "A"), ("v", "B")], ("Constant", "Label"))

        with check:
            assert index == 0
        with check:
            assert gain == pytest.approx(0.0, abs=1e-12)

    def test_no_attributes_returns_none(self) -> None:
        """With only the label column left there is nothing to select."""
        index, _ = select_attribute([("A",), ("B",)], ("Label",))

        assert index is None


class TestPartitionRows:
    """Tests for `partition_rows`."""

    def test_groups_by_value_and_drops_column(self) -> None:
        """Rows are grouped by the column value, with that column removed."""
        rows = [("Sunny", "Hot", "No"), ("Rainy", "Mild", "Yes"), ("Sunny", "Cool", "Yes")]

        partitions = partition_rows(rows, 0)

        assert partitions == {
            "Sunny": (("Hot", "No"), ("Cool", "Yes")),
            "Rainy": (("Mild", "Yes"),),
        }

    def test_partitions_are_new_tuples(self) -> None:
        """Partitioned rows are fresh tuples, never views into the input rows."""
        rows = [["Sunny", "Hot", "No"]]

        partitions = partition_rows(rows, 1)
        rows[0][0] = "Changed"

        assert partitions == {"Hot": (("Sunny", "No"),)}


class TestFit:
    """Tests for `TreeInductionEngine.fit` and `build_tree`."""

    def test_fit_assembles_tree_metadata(self, play_tennis_dataset: TabularDataset) -> None:
        """The result carries target, attributes, sample count, depth, and leaf count."""
        # Act
        result = build_tree(play_tennis_dataset)

        # Assert
        with check:
            assert result.target == "PlayTennis"
        with check:
            assert result.attributes == ("Outlook", "Temperature", "Humidity", "Wind")
        with check:
            assert result.sample_count == 14
        with check:
            assert result.depth == 2
        with check:
            assert result.leaf_count == 5

    def test_fit_extracts_one_rule_per_leaf(self, play_tennis_dataset: TabularDataset) -> None:
        """Rules follow lexicographic traversal order and count the rows reaching each leaf."""
        result = TreeInductionEngine().fit(play_tennis_dataset)

        rule_summaries = [(str(rule), rule.samples) for rule in result.rules]

        assert rule_summaries == [
            ("IF Outlook == Overcast THEN Yes", 4),
            ("IF Outlook == Rain AND Wind == Strong THEN No", 2),
            ("IF Outlook == Rain AND Wind == Weak THEN Yes", 3),
            ("IF Outlook == Sunny AND Humidity == High THEN No", 3),
            ("IF Outlook == Sunny AND Humidity == Normal THEN Yes", 2),
        ]

    def test_fit_on_pure_dataset_gives_single_leaf(self) -> None:
        """A dataset with one label yields a depth-zero tree with one unconditional rule."""
        dataset = TabularDataset.from_table([["Weather", "Play"], ["Sunny", "Yes"], ["Rainy", "Yes"]])

        result = build_tree(dataset)

        with check:
            assert result.root == Leaf(label="Yes")
        with check:
            assert result.depth == 0
        with check:
            assert [str(rule) for rule in result.rules] == ["THEN Yes"]

    def test_build_tree_honours_max_depth(self, play_tennis_dataset: TabularDataset) -> None:
        """`build_tree` forwards its depth bound to the engine."""
        with pytest.raises(InductionDepthExceededError):
            build_tree(play_tennis_dataset, max_depth=1)
