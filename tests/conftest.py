"""Shared fixtures for id3kit tests."""

from __future__ import annotations

from collections.abc import Generator
from typing import NamedTuple

import loguru
import pytest
from loguru import logger

from id3kit.dataset import TabularDataset
from id3kit.logging import PACKAGE_NAME

PLAY_TENNIS_TABLE: list[list[str]] = [
    ["Outlook", "Temperature", "Humidity", "Wind", "PlayTennis"],
    ["Sunny", "Hot", "High", "Weak", "No"],
    ["Sunny", "Hot", "High", "Strong", "No"],
    ["Overcast", "Hot", "High", "Weak", "Yes"],
    ["Rain", "Mild", "High", "Weak", "Yes"],
    ["Rain", "Cool", "Normal", "Weak", "Yes"],
    ["Rain", "Cool", "Normal", "Strong", "No"],
    ["Overcast", "Cool", "Normal", "Strong", "Yes"],
    ["Sunny", "Mild", "High", "Weak", "No"],
    ["Sunny", "Cool", "Normal", "Weak", "Yes"],
    ["Rain", "Mild", "Normal", "Weak", "Yes"],
    ["Sunny", "Mild", "Normal", "Strong", "Yes"],
    ["Overcast", "Mild", "High", "Strong", "Yes"],
    ["Overcast", "Hot", "Normal", "Weak", "Yes"],
    ["Rain", "Mild", "High", "Strong", "No"],
]


class LogSink(NamedTuple):
    """Log sink with records list and handler ID for cleanup.

    Attributes:
        records (list[loguru.Record]): List that accumulates log record dictionaries.
        handler_id (int): Logger handler ID for cleanup.
    """

    records: list[loguru.Record]
    handler_id: int


@pytest.fixture
def play_tennis_dataset() -> TabularDataset:
    """Return the classic 14-row play-tennis dataset.

    Returns:
        TabularDataset: Four categorical attributes and a `PlayTennis` label.
    """
    return TabularDataset.from_table(PLAY_TENNIS_TABLE)


@pytest.fixture
def weather_dataset() -> TabularDataset:
    """Return a three-row dataset with a single `Weather` attribute.

    Returns:
        TabularDataset: Headers `[Weather, Play]`.
    """
    return TabularDataset.from_table([
        ["Weather", "Play"],
        ["Sunny", "Yes"],
        ["Sunny", "Yes"],
        ["Rainy", "No"],
    ])


@pytest.fixture
def log_sink() -> Generator[LogSink]:
    """Create a sink that captures id3kit log records for testing.

    Yields:
        Generator[LogSink]: Named tuple with records list and handler_id for cleanup.
    """
    # Arrange - create list to capture records
    captured_records: list[loguru.Record] = []

    def sink(message: loguru.Message) -> None:
        """Capture record dict from each log message.

        Args:
            message (loguru.Message): Log message with record attribute containing log details.
        """
        captured_records.append(message.record)

    handler_id = logger.add(sink, level="TRACE")
    logger.enable(PACKAGE_NAME)

    yield LogSink(records=captured_records, handler_id=handler_id)

    # Cleanup - disable and remove handler
    logger.disable(PACKAGE_NAME)
    logger.remove(handler_id)
