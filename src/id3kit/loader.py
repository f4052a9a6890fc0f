"""Delimited text loader: header row plus string data rows."""

from __future__ import annotations

from pathlib import Path

import polars as pl
from loguru import logger

from id3kit.dataset import TabularDataset
from id3kit.exceptions import MalformedInputError
from id3kit.settings import InductionSettings

_TXT_SUFFIX: str = ".txt"


def load_table(path: str | Path, *, delimiter: str = ",") -> list[list[str]]:
    """Read a delimited text file into rows of string fields.

    Every field is kept as the exact string in the file; nothing is parsed as
    a number, empty fields stay empty strings, and there is no quoting. Blank
    lines are skipped and a trailing carriage return is dropped from each line.

    Args:
        path (str | Path): File to read.
        delimiter (str): Single-character field separator.

    Returns:
        list[list[str]]: All rows, the first being the header row.

    Raises:
        FileNotFoundError: If `path` does not exist.
        MalformedInputError: If the file is empty, is not UTF-8, or has a data
            row whose field count differs from the header row's.
    """
    file_path = Path(path)
    if not file_path.is_file():
        logger.warning("Table file not found", path=str(file_path))
        raise FileNotFoundError(f"No such file: {file_path}")

    try:
        text = file_path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        logger.warning("Table file is not UTF-8", path=str(file_path))
        raise MalformedInputError(f"File {file_path} is not valid UTF-8: {e}") from e

    lines = (
        pl.Series("line", text.split("\n"), dtype=pl.String)
        .str.strip_suffix("\r")
        .to_frame()
        .filter(pl.col("line") != "")
    )
    if lines.is_empty():
        logger.warning("Table file is empty", path=str(file_path))
        raise MalformedInputError(f"File {file_path} contains no rows")

    df = lines.select(pl.col("line").str.split(delimiter).alias("fields")).with_columns(
        pl.col("fields").list.len().alias("width")
    )
    header_width = df.item(0, "width")
    ragged = df.with_row_index("line_index").filter(pl.col("width") != header_width)
    if not ragged.is_empty():
        row_index = int(ragged.item(0, "line_index")) - 1
        width = ragged.item(0, "width")
        logger.warning("Table row width mismatch", path=str(file_path), row_index=row_index, width=width)
        raise MalformedInputError(
            f"Row {row_index} of {file_path} has {width} fields, expected {header_width}",
            row_index=row_index,
        )

    table = df.get_column("fields").to_list()
    logger.debug("Table loaded", path=str(file_path), row_count=len(table), column_count=header_width)
    return table


def load_dataset(
    path: str | Path,
    *,
    delimiter: str | None = None,
    settings: InductionSettings | None = None,
) -> TabularDataset:
    """Read a delimited text file into a `TabularDataset`.

    When `delimiter` is not given it comes from `settings`: files ending in
    `.txt` use `settings.txt_delimiter`, all others `settings.delimiter`.

    Args:
        path (str | Path): File whose first row holds the headers and whose
            last column holds the class labels.
        delimiter (str | None): Explicit field separator.
        settings (InductionSettings | None): Settings to read defaults from;
            loaded from the environment when `None`.

    Returns:
        TabularDataset: The validated dataset.

    Raises:
        FileNotFoundError: If `path` does not exist.
        MalformedInputError: If the file violates the dataset contract.
    """
    file_path = Path(path)
    if delimiter is None:
        settings = settings or InductionSettings()
        delimiter = settings.txt_delimiter if file_path.suffix.lower() == _TXT_SUFFIX else settings.delimiter

    dataset = TabularDataset.from_table(load_table(file_path, delimiter=delimiter))
    logger.info(
        "Dataset loaded",
        path=str(file_path),
        attribute_count=len(dataset.attributes),
        row_count=len(dataset.rows),
        overall_entropy=round(dataset.overall_entropy, 4),
    )
    return dataset
