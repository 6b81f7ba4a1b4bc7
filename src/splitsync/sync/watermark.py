#!/usr/bin/env python3
"""
Watermark Store

Persists the date of the last successful sync. The file holds a single
YYYY-MM-DD line. A missing or unparseable file means "never synced" and is
not an error; failing to write the watermark is.
"""

import logging
from pathlib import Path
from typing import Protocol

from ..core.dates import FinancialDate
from ..core.json_utils import write_text_atomic

logger = logging.getLogger(__name__)


class WatermarkCommitError(Exception):
    """Raised when the new watermark cannot be persisted"""

    pass


class WatermarkStore(Protocol):
    def read(self) -> FinancialDate | None:
        """Last committed watermark, or None if there is none usable."""
        ...

    def commit(self, date: FinancialDate) -> None:
        """
        Replace the stored watermark.

        Raises:
            WatermarkCommitError: If the value could not be persisted
        """
        ...


class FileWatermarkStore:
    """Watermark kept in a plain-text file."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def read(self) -> FinancialDate | None:
        if not self.path.exists():
            logger.info(f"No watermark file at {self.path}, syncing from the beginning")
            return None

        try:
            text = self.path.read_text(encoding="utf-8")
        except (OSError, ValueError) as e:
            logger.warning(f"Could not read watermark file {self.path}: {e}")
            return None

        try:
            return FinancialDate.from_string(text)
        except ValueError:
            logger.warning(f"Ignoring unparseable watermark {text.strip()!r} in {self.path}")
            return None

    def commit(self, date: FinancialDate) -> None:
        try:
            write_text_atomic(self.path, date.to_iso_string())
        except OSError as e:
            raise WatermarkCommitError(f"Failed to write watermark {date} to {self.path}: {e}") from e
        logger.info(f"Committed watermark {date} to {self.path}")


class InMemoryWatermarkStore:
    """Watermark held in memory; records every commit."""

    def __init__(self, initial: FinancialDate | None = None):
        self.value = initial
        self.commits: list[FinancialDate] = []

    def read(self) -> FinancialDate | None:
        return self.value

    def commit(self, date: FinancialDate) -> None:
        self.value = date
        self.commits.append(date)
