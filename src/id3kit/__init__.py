"""id3kit: ID3 decision tree induction over categorical tables."""

from loguru import logger

from id3kit.dataset import TabularDataset
from id3kit.loader import load_dataset, load_table
from id3kit.logging import PACKAGE_NAME, enable_logging
from id3kit.settings import InductionSettings
from id3kit.tree import DecisionTree, TreeInductionEngine, build_tree, parse_text, predict, render_text

logger.disable(PACKAGE_NAME)  # noqa: RUF067 - Disable logging for the id3kit package by default

__all__ = [
    "DecisionTree",
    "InductionSettings",
    "TabularDataset",
    "TreeInductionEngine",
    "build_tree",
    "enable_logging",
    "load_dataset",
    "load_table",
    "parse_text",
    "predict",
    "render_text",
]
