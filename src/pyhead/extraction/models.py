"""Request and result structures shared by the extractor and the runner."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from pyhead.extraction.errors import HeadError


class ExtractionMode(str, Enum):
    """Unit in which an extraction limit is counted."""

    LINES = "lines"
    BYTES = "bytes"


@dataclass(frozen=True, slots=True)
class ExtractionRequest:
    """Fully resolved extraction bound: one active mode and its limit."""

    mode: ExtractionMode
    limit: int

    def __post_init__(self) -> None:
        if self.limit < 0:
            raise ValueError(f"limit must be >= 0, got {self.limit}")

    @classmethod
    def for_lines(cls, limit: int) -> "ExtractionRequest":
        return cls(mode=ExtractionMode.LINES, limit=limit)

    @classmethod
    def for_bytes(cls, limit: int) -> "ExtractionRequest":
        return cls(mode=ExtractionMode.BYTES, limit=limit)


@dataclass(frozen=True, slots=True)
class ExtractionResult:
    """Units written for one stream plus the error that stopped it, if any."""

    units_written: int
    error: HeadError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None
