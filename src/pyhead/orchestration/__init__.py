"""Multi-source orchestration interfaces."""

from .runner import RunOptions, RunOutcome, SourceFailure, format_header, run_sources
from .sources import InputSource, resolve_sources

__all__ = [
    "InputSource",
    "RunOptions",
    "RunOutcome",
    "SourceFailure",
    "format_header",
    "resolve_sources",
    "run_sources",
]
