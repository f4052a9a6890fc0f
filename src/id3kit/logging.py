"""Loguru setup for id3kit: the SPLIT level and opt-in log handlers.

id3kit logs through loguru and is silent until a caller opts in, either with
`enable_logging()` or with `logger.enable("id3kit")` and their own handlers.

Log levels used by the package:

- DEBUG: leaf creation and table parsing.
- SPLIT (15): one record per split, with the chosen attribute, its
  information gain, the row count, and the split depth in `extra`.
- INFO: dataset loading and the start and end of `fit`.
- WARNING: loader failures, logged just before the exception is raised.

Note:
    Importing this module removes loguru's default stderr handler (ID 0) so
    that `enable_logging()` output is not printed twice. When handler 0 has
    already been removed the `ValueError` is suppressed.
"""

from __future__ import annotations

import contextlib
import sys
import threading
import warnings
from typing import TYPE_CHECKING, ClassVar, Final, Literal, TextIO

from loguru import logger

if TYPE_CHECKING:
    from collections.abc import Callable
    from types import TracebackType

    from loguru import Message, Record

    from id3kit.settings import InductionSettings

PACKAGE_NAME: Final[str] = __name__.split(".")[0]

with contextlib.suppress(ValueError):
    logger.remove(0)

SPLIT_LEVEL: Final[str] = "SPLIT"
SPLIT_LEVEL_NUMBER: Final[int] = 15  # DEBUG < SPLIT < INFO

type LogLevel = Literal["TRACE", "DEBUG", "SPLIT", "INFO", "WARNING", "ERROR", "CRITICAL"]
type LogFormat = Literal["short", "full"]

_TIME_AND_LEVEL: Final[str] = "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | <level>{level: <8}</level> | "
_FORMATS: Final[dict[str, str]] = {
    "short": _TIME_AND_LEVEL + "<cyan>{function}</cyan> - <level>{message}</level> {extra}",
    "full": _TIME_AND_LEVEL + "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level> {extra}",
}


def _register_split_level() -> None:
    """Register the SPLIT level with loguru, once per process.

    loguru cannot renumber an existing level, so a SPLIT level registered
    elsewhere with another number only triggers a `UserWarning`.
    """
    try:
        existing = logger.level(SPLIT_LEVEL)
    except ValueError:
        logger.level(SPLIT_LEVEL, no=SPLIT_LEVEL_NUMBER, color="<magenta>", icon="🌳")
        return
    if existing.no != SPLIT_LEVEL_NUMBER:
        warnings.warn(
            f"Log level {SPLIT_LEVEL} is already registered as {existing.no}, expected {SPLIT_LEVEL_NUMBER}",
            stacklevel=2,
        )


_register_split_level()


# ---------------------------------------------------------------------------
# Public interface
# ---------------------------------------------------------------------------


class LoggingHandle:
    """One handler added by `enable_logging`, removable exactly once.

    The package logger stays enabled while any handle is active; disabling
    the last one silences id3kit again.

    Attributes:
        handler_id (int | None): loguru handler ID, `None` once disabled.
        level (LogLevel): Minimum level the handler emits.

    Examples:
        >>> with enable_logging(level="DEBUG"):  # doctest: +SKIP
        ...     build_tree(dataset)
    """

    _active_ids: ClassVar[set[int]] = set()
    _lock: ClassVar[threading.Lock] = threading.Lock()

    def __init__(self, handler_id: int, *, level: LogLevel = SPLIT_LEVEL) -> None:
        """Track a freshly added handler.

        Args:
            handler_id (int): ID returned by `logger.add`.
            level (LogLevel): Minimum level the handler was added with.
        """
        self.handler_id: int | None = handler_id
        self.level = level
        with LoggingHandle._lock:
            LoggingHandle._active_ids.add(handler_id)

    @property
    def active(self) -> bool:
        """Whether the handler is still installed."""
        return self.handler_id is not None

    def disable(self) -> None:
        """Remove the handler; later calls do nothing."""
        with LoggingHandle._lock:
            if self.handler_id is None:
                return
            LoggingHandle._active_ids.discard(self.handler_id)
            with contextlib.suppress(ValueError):
                logger.remove(self.handler_id)
            self.handler_id = None
            if not LoggingHandle._active_ids:
                logger.disable(PACKAGE_NAME)

    def __enter__(self) -> LoggingHandle:
        """Return this handle."""
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Disable the handle, whether or not the block raised."""
        self.disable()

    @classmethod
    def get_active_handle_count(cls) -> int:
        """Return how many handles have not been disabled yet."""
        with cls._lock:
            return len(cls._active_ids)


def enable_logging(
    *,
    level: LogLevel | None = None,
    log_format: LogFormat = "short",
    sink: TextIO | Callable[[Message], None] | None = None,
    settings: InductionSettings | None = None,
) -> LoggingHandle:
    """Send id3kit log records to `sink` until the returned handle is disabled.

    When `level` is not given it comes from `settings.log_level`, which
    defaults to "SPLIT" and can be set with `ID3KIT_LOG_LEVEL`.

    Args:
        level (LogLevel | None): Minimum level to emit. "SPLIT" shows every
            split with its information gain; "DEBUG" adds leaves.
        log_format (LogFormat): "short" shows the function name, "full" shows
            module, function and line.
        sink (TextIO | Callable[[Message], None] | None): Stream or callable
            receiving the records. Defaults to `sys.stderr`.
        settings (InductionSettings | None): Settings to read the level from;
            loaded from the environment when `None`.

    Returns:
        LoggingHandle: Handle that removes the handler on `disable()` or when
            used as a context manager.
    """
    if level is None:
        if settings is None:
            # id3kit.settings imports this module.
            from id3kit.settings import InductionSettings  # noqa: PLC0415

            settings = InductionSettings()
        level = settings.log_level
    logger.enable(PACKAGE_NAME)
    handler_id = logger.add(
        sys.stderr if sink is None else sink,
        level=level,
        filter=_is_id3kit_record,
        format=_FORMATS[log_format],
    )
    return LoggingHandle(handler_id, level=level)


# ---------------------------------------------------------------------------
# Private helpers
# ---------------------------------------------------------------------------


def _is_id3kit_record(record: Record) -> bool:
    """Return whether `record` was emitted from inside the id3kit package."""
    name = record["name"]
    return name is not None and (name == PACKAGE_NAME or name.startswith(f"{PACKAGE_NAME}."))
