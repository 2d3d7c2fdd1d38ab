"""Sequential multi-source runner with header and continuation policies."""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
from typing import BinaryIO, Sequence, TextIO

from pyhead.extraction.cancellation import CancellationToken
from pyhead.extraction.errors import CancellationError, HeadError, WriteFailure
from pyhead.extraction.extractor import PrefixExtractor, write_all
from pyhead.extraction.models import ExtractionRequest
from pyhead.orchestration.sources import InputSource


LOGGER = logging.getLogger(__name__)

HEADER_TEMPLATE = "==> {name} <==\n"
DEFAULT_COMMAND_NAME = "pyhead"


@dataclass(frozen=True, slots=True)
class RunOptions:
    """Header and continuation policy for one run."""

    show_headers: bool = True
    force_headers: bool = False
    blank_between: bool = True
    continue_on_error: bool = True
    command_name: str = DEFAULT_COMMAND_NAME

    def headers_active(self, source_count: int) -> bool:
        if not self.show_headers:
            return False
        return self.force_headers or source_count > 1


@dataclass(frozen=True, slots=True)
class SourceFailure:
    name: str
    error: HeadError


@dataclass(slots=True)
class RunOutcome:
    """Aggregate of a run; mutated only by `run_sources`."""

    processed: int = 0
    units_written: int = 0
    failures: list[SourceFailure] = field(default_factory=list)
    cancelled: bool = False
    halted: bool = False

    @property
    def success(self) -> bool:
        return not self.failures

    @property
    def exit_code(self) -> int:
        return 0 if self.success else 1

    @property
    def failed_names(self) -> list[str]:
        return [failure.name for failure in self.failures]


def format_header(name: str) -> bytes:
    return HEADER_TEMPLATE.format(name=name).encode("utf-8", errors="surrogateescape")


def run_sources(
    sources: Sequence[InputSource],
    request: ExtractionRequest,
    options: RunOptions | None = None,
    *,
    output: BinaryIO,
    diagnostics: TextIO,
    token: CancellationToken | None = None,
) -> RunOutcome:
    """Extract every source in order into one output sink.

    Sources are never read concurrently and never reordered. A failed source
    keeps whatever it already wrote. Cancellation and write failures end the
    run even when `continue_on_error` is set.
    """

    policy = options or RunOptions()
    extractor = PrefixExtractor(output)
    outcome = RunOutcome()
    show_headers = policy.headers_active(len(sources))
    headers_written = 0

    for source in sources:
        LOGGER.debug("Extracting %s (%s %d)", source.name, request.mode.value, request.limit)
        outcome.processed += 1
        try:
            with source.open() as stream:
                if show_headers:
                    separator = b"\n" if policy.blank_between and headers_written else b""
                    write_all(output, separator + format_header(source.name), source.name)
                    headers_written += 1
                result = extractor.extract(stream, request, token, source=source.name)
        except HeadError as error:
            result_error: HeadError | None = error
            units = 0
        else:
            result_error = result.error
            units = result.units_written

        outcome.units_written += units
        if result_error is None:
            continue

        outcome.failures.append(SourceFailure(name=source.name, error=result_error))
        if isinstance(result_error, CancellationError):
            outcome.cancelled = outcome.halted = True
            LOGGER.info("Run cancelled while reading %s", source.name)
            break

        LOGGER.warning("Source %s failed: %s", source.name, result_error)
        # The output sink is shared, so a rejected write ends the run.
        if isinstance(result_error, WriteFailure) or not policy.continue_on_error:
            outcome.halted = True
            break
        diagnostics.write(f"{policy.command_name}: {source.name}: {result_error.message}\n")

    LOGGER.info(
        "Processed %d of %d sources, %d failed",
        outcome.processed,
        len(sources),
        len(outcome.failures),
    )
    return outcome
