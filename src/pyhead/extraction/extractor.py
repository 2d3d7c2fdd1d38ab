"""Bounded prefix extraction over a single readable byte stream."""

from __future__ import annotations

import logging
from typing import BinaryIO, Iterator

from pyhead.extraction.cancellation import CancellationToken
from pyhead.extraction.errors import CancellationError, HeadError, IOFailure, WriteFailure
from pyhead.extraction.models import ExtractionMode, ExtractionRequest, ExtractionResult


LOGGER = logging.getLogger(__name__)

# Upper bound for a single read in byte mode; large limits are copied in chunks.
BYTE_CHUNK_SIZE = 64 * 1024


class PrefixExtractor:
    """Copy the leading lines or bytes of a stream to an output sink.

    The stream is borrowed for one call and never retained. Output already
    written stays written when a later read, write or cancellation check fails.
    """

    def __init__(self, output: BinaryIO, *, chunk_size: int = BYTE_CHUNK_SIZE) -> None:
        if chunk_size < 1:
            raise ValueError("chunk_size must be >= 1")
        self._output = output
        self._chunk_size = chunk_size

    def extract(
        self,
        stream: BinaryIO,
        request: ExtractionRequest,
        token: CancellationToken | None = None,
        *,
        source: str = "-",
    ) -> ExtractionResult:
        """Extract the bounded prefix of `stream` and report what was written."""

        written = 0
        try:
            copy = self._copy_bytes if request.mode is ExtractionMode.BYTES else self._copy_lines
            for count in copy(stream, request.limit, token, source):
                written += count
        except HeadError as error:
            return ExtractionResult(units_written=written, error=error)
        return ExtractionResult(units_written=written)

    def _copy_lines(
        self, stream: BinaryIO, limit: int, token: CancellationToken | None, source: str
    ) -> Iterator[int]:
        _check_cancelled(token, source)
        emitted = 0
        while emitted < limit:
            if emitted:
                _check_cancelled(token, source)
            try:
                raw = stream.readline()
            except OSError as exc:
                raise IOFailure(source, f"read failed: {exc}") from exc
            if not raw:
                return
            self._write(_strip_terminator(raw) + b"\n", source)
            emitted += 1
            yield 1

    def _copy_bytes(
        self, stream: BinaryIO, limit: int, token: CancellationToken | None, source: str
    ) -> Iterator[int]:
        _check_cancelled(token, source)
        remaining = limit
        while remaining > 0:
            try:
                chunk = stream.read(min(remaining, self._chunk_size))
            except OSError as exc:
                raise IOFailure(source, f"read failed: {exc}") from exc
            if not chunk:
                return
            self._write(chunk, source)
            remaining -= len(chunk)
            yield len(chunk)

    def _write(self, data: bytes, source: str) -> None:
        write_all(self._output, data, source)


def extract(
    stream: BinaryIO,
    request: ExtractionRequest,
    output: BinaryIO,
    token: CancellationToken | None = None,
    *,
    source: str = "-",
) -> ExtractionResult:
    """Functional shortcut for a one-off PrefixExtractor call."""

    return PrefixExtractor(output).extract(stream, request, token, source=source)


def write_all(output: BinaryIO, data: bytes, source: str) -> None:
    """Write every byte of `data`, retrying short writes from raw sinks."""

    view = memoryview(data)
    while view:
        try:
            written = output.write(view)
        except OSError as exc:
            raise WriteFailure(source, f"write failed: {exc}") from exc
        if not written:
            raise WriteFailure(source, "write failed: output accepted no bytes")
        view = view[written:]


def _check_cancelled(token: CancellationToken | None, source: str) -> None:
    if token is not None and token.cancelled:
        LOGGER.debug("Cancellation observed while reading %s", source)
        raise CancellationError(source)


def _strip_terminator(raw: bytes) -> bytes:
    if raw.endswith(b"\r\n"):
        return raw[:-2]
    if raw.endswith(b"\n"):
        return raw[:-1]
    return raw
