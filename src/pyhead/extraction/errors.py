"""Error taxonomy for extraction and multi-source runs."""

from __future__ import annotations

from dataclasses import dataclass


class HeadError(Exception):
    """Base class for every failure reported by pyhead."""

    message: str


@dataclass(slots=True)
class IOFailure(HeadError):
    """Reading or opening a source failed for a reason other than end-of-stream."""

    source: str
    message: str

    def __str__(self) -> str:
        return f"{self.message} (source={self.source})"


@dataclass(slots=True)
class WriteFailure(HeadError):
    """The output sink rejected a write."""

    source: str
    message: str

    def __str__(self) -> str:
        return f"{self.message} (source={self.source})"


@dataclass(slots=True)
class CancellationError(HeadError):
    """Cooperative cancellation was observed while extracting a source."""

    source: str
    message: str = "extraction cancelled"

    def __str__(self) -> str:
        return f"{self.message} (source={self.source})"


@dataclass(slots=True)
class ConfigurationError(HeadError):
    """Invalid limits or settings, rejected before any source is read."""

    message: str

    def __str__(self) -> str:
        return self.message
