"""Bounded prefix extraction primitives."""

from .cancellation import CancellationToken
from .errors import CancellationError, ConfigurationError, HeadError, IOFailure, WriteFailure
from .extractor import PrefixExtractor, extract
from .models import ExtractionMode, ExtractionRequest, ExtractionResult

__all__ = [
    "CancellationError",
    "CancellationToken",
    "ConfigurationError",
    "ExtractionMode",
    "ExtractionRequest",
    "ExtractionResult",
    "HeadError",
    "IOFailure",
    "PrefixExtractor",
    "WriteFailure",
    "extract",
]
