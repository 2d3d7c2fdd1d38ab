"""Configuration surface consumed by the extraction core."""

from __future__ import annotations

from dataclasses import dataclass
import logging
import os
from typing import Mapping

from pyhead.extraction.errors import ConfigurationError
from pyhead.extraction.models import ExtractionRequest


DEFAULT_LINE_COUNT = 10
DEFAULT_LOG_LEVEL = "ERROR"


def _parse_positive_int(*, name: str, raw_value: str, minimum: int = 1) -> int:
    try:
        value = int(raw_value)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {raw_value!r}") from exc
    if value < minimum:
        raise ValueError(f"{name} must be >= {minimum}")
    return value


@dataclass(frozen=True, slots=True)
class HeadOptions:
    """Flags as produced by the argument parser, before normalization."""

    lines: int = 0
    bytes: int = 0
    quiet: bool = False
    verbose: bool = False

    def resolve(self, default_lines: int = DEFAULT_LINE_COUNT) -> ExtractionRequest:
        """Normalize flags into a single-mode request.

        Byte mode wins when both counts are set; ten lines when neither is.
        """

        if self.lines < 0:
            raise ConfigurationError(f"invalid number of lines: {self.lines}")
        if self.bytes < 0:
            raise ConfigurationError(f"invalid number of bytes: {self.bytes}")

        if self.bytes > 0:
            return ExtractionRequest.for_bytes(self.bytes)
        if self.lines == 0:
            return ExtractionRequest.for_lines(default_lines)
        return ExtractionRequest.for_lines(self.lines)

    @property
    def show_headers(self) -> bool:
        return not self.quiet

    @property
    def force_headers(self) -> bool:
        return self.verbose and not self.quiet


@dataclass(frozen=True, slots=True)
class RuntimeSettings:
    """Environment-derived defaults for the CLI."""

    default_lines: int = DEFAULT_LINE_COUNT
    log_level: str = DEFAULT_LOG_LEVEL

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "RuntimeSettings":
        source: Mapping[str, str] = os.environ if environ is None else environ

        lines_raw = source.get("PYHEAD_DEFAULT_LINES", str(DEFAULT_LINE_COUNT)).strip()
        if not lines_raw:
            raise ValueError("PYHEAD_DEFAULT_LINES cannot be empty")
        default_lines = _parse_positive_int(name="PYHEAD_DEFAULT_LINES", raw_value=lines_raw)

        log_level = source.get("PYHEAD_LOG_LEVEL", DEFAULT_LOG_LEVEL).strip().upper()
        if not isinstance(logging.getLevelName(log_level), int):
            raise ValueError(f"PYHEAD_LOG_LEVEL must be a logging level name, got {log_level!r}")

        return cls(default_lines=default_lines, log_level=log_level)
