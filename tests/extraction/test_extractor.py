from __future__ import annotations

import io

from pyhead.extraction.cancellation import CancellationToken
from pyhead.extraction.errors import CancellationError, IOFailure, WriteFailure
from pyhead.extraction.extractor import PrefixExtractor, extract
from pyhead.extraction.models import ExtractionRequest


class _FailingReader(io.RawIOBase):
    """Serves the given lines, then raises OSError on the next read."""

    def __init__(self, lines: list[bytes]) -> None:
        self._lines = list(lines)

    def readable(self) -> bool:
        return True

    def readline(self, size: int = -1) -> bytes:
        if self._lines:
            return self._lines.pop(0)
        raise OSError("device unplugged")

    def read(self, size: int = -1) -> bytes:
        raise OSError("device unplugged")


class _RejectingWriter(io.RawIOBase):
    def writable(self) -> bool:
        return True

    def write(self, data: bytes) -> int:
        raise OSError("disk full")


class _ShortWriter(io.RawIOBase):
    """Accepts at most `step` bytes per write call."""

    def __init__(self, step: int = 4) -> None:
        self.data = bytearray()
        self._step = step

    def writable(self) -> bool:
        return True

    def write(self, data) -> int:
        accepted = bytes(data[: self._step])
        self.data.extend(accepted)
        return len(accepted)


class _StalledWriter(io.RawIOBase):
    def writable(self) -> bool:
        return True

    def write(self, data) -> int:
        return 0


class _CancelAfterLines(io.BytesIO):
    """Cancels the token once `after` lines have been handed out."""

    def __init__(self, data: bytes, token: CancellationToken, after: int) -> None:
        super().__init__(data)
        self._token = token
        self._after = after
        self._served = 0

    def readline(self, size: int | None = -1) -> bytes:
        line = super().readline(size)
        self._served += 1
        if self._served >= self._after:
            self._token.cancel()
        return line


def _numbered(count: int) -> bytes:
    return "".join(f"{index}\n" for index in range(1, count + 1)).encode()


def test_line_mode_emits_first_lines_only() -> None:
    output = io.BytesIO()

    result = extract(io.BytesIO(_numbered(12)), ExtractionRequest.for_lines(10), output)

    assert result.ok
    assert result.units_written == 10
    assert output.getvalue() == _numbered(10)


def test_line_mode_short_input_is_copied_whole() -> None:
    output = io.BytesIO()

    result = extract(io.BytesIO(b"alpha\nbeta\n"), ExtractionRequest.for_lines(5), output)

    assert result.ok
    assert result.units_written == 2
    assert output.getvalue() == b"alpha\nbeta\n"


def test_line_mode_preserves_non_ascii_and_inner_whitespace() -> None:
    data = "  Первая\tстрока  \nzweite Zeile ü\nthird\n".encode("utf-8")
    output = io.BytesIO()

    extract(io.BytesIO(data), ExtractionRequest.for_lines(2), output)

    assert output.getvalue() == "  Первая\tстрока  \nzweite Zeile ü\n".encode("utf-8")


def test_line_mode_terminates_last_line_and_drops_crlf() -> None:
    output = io.BytesIO()

    result = extract(io.BytesIO(b"one\r\ntwo"), ExtractionRequest.for_lines(10), output)

    assert result.units_written == 2
    assert output.getvalue() == b"one\ntwo\n"


def test_line_mode_does_not_read_past_limit() -> None:
    stream = io.BytesIO(b"a\nb\nc\nd\n")

    extract(stream, ExtractionRequest.for_lines(2), io.BytesIO())

    assert stream.read() == b"c\nd\n"


def test_zero_line_limit_writes_nothing() -> None:
    output = io.BytesIO()

    result = extract(io.BytesIO(b"a\n"), ExtractionRequest.for_lines(0), output)

    assert result.ok
    assert result.units_written == 0
    assert output.getvalue() == b""


def test_byte_mode_emits_exact_prefix() -> None:
    output = io.BytesIO()

    result = extract(io.BytesIO(b"Hello World! This is a test."), ExtractionRequest.for_bytes(12), output)

    assert result.ok
    assert result.units_written == 12
    assert output.getvalue() == b"Hello World!"


def test_byte_mode_limit_beyond_input_is_not_an_error() -> None:
    output = io.BytesIO()

    result = extract(io.BytesIO(b"short"), ExtractionRequest.for_bytes(1000), output)

    assert result.ok
    assert result.units_written == 5
    assert output.getvalue() == b"short"


def test_byte_mode_zero_limit_yields_empty_output() -> None:
    output = io.BytesIO()

    result = extract(io.BytesIO(b"data"), ExtractionRequest.for_bytes(0), output)

    assert result.ok
    assert output.getvalue() == b""


def test_byte_mode_copies_in_chunks_without_splitting_content() -> None:
    data = bytes(range(256)) * 8
    output = io.BytesIO()

    result = PrefixExtractor(output, chunk_size=100).extract(io.BytesIO(data), ExtractionRequest.for_bytes(1500))

    assert result.units_written == 1500
    assert output.getvalue() == data[:1500]


def test_repeated_extraction_is_byte_identical() -> None:
    data = "x\ny ÿ\n\nz\n".encode("utf-8") * 3
    first, second = io.BytesIO(), io.BytesIO()

    extract(io.BytesIO(data), ExtractionRequest.for_lines(7), first)
    extract(io.BytesIO(data), ExtractionRequest.for_lines(7), second)

    assert first.getvalue() == second.getvalue()


def test_read_failure_keeps_lines_already_written() -> None:
    output = io.BytesIO()
    stream = _FailingReader([b"kept 1\n", b"kept 2\n"])

    result = extract(stream, ExtractionRequest.for_lines(10), output, source="flaky.txt")

    assert isinstance(result.error, IOFailure)
    assert result.error.source == "flaky.txt"
    assert "device unplugged" in str(result.error)
    assert result.units_written == 2
    assert output.getvalue() == b"kept 1\nkept 2\n"


def test_read_failure_in_byte_mode_is_reported() -> None:
    result = extract(_FailingReader([]), ExtractionRequest.for_bytes(4), io.BytesIO())

    assert isinstance(result.error, IOFailure)
    assert result.units_written == 0


def test_write_failure_is_reported_unwrapped() -> None:
    result = extract(io.BytesIO(b"a\n"), ExtractionRequest.for_lines(1), _RejectingWriter(), source="in")

    assert isinstance(result.error, WriteFailure)
    assert isinstance(result.error.__cause__, OSError)
    assert result.units_written == 0


def test_cancel_before_first_read_yields_empty_output() -> None:
    token = CancellationToken()
    token.cancel()
    output = io.BytesIO()

    lines = extract(io.BytesIO(b"a\nb\n"), ExtractionRequest.for_lines(2), output, token)
    data = extract(io.BytesIO(b"abcdef"), ExtractionRequest.for_bytes(3), output, token)

    assert isinstance(lines.error, CancellationError)
    assert isinstance(data.error, CancellationError)
    assert output.getvalue() == b""


def test_cancel_mid_stream_keeps_emitted_lines() -> None:
    token = CancellationToken()
    stream = _CancelAfterLines(_numbered(20), token, after=3)
    output = io.BytesIO()

    result = extract(stream, ExtractionRequest.for_lines(10), output, token)

    assert isinstance(result.error, CancellationError)
    assert result.units_written == 3
    assert output.getvalue() == b"1\n2\n3\n"


def test_cancel_after_last_requested_line_is_not_observed() -> None:
    token = CancellationToken()
    stream = _CancelAfterLines(_numbered(5), token, after=2)

    result = extract(stream, ExtractionRequest.for_lines(2), io.BytesIO(), token)

    assert result.ok
    assert result.units_written == 2


def test_byte_mode_does_not_read_past_limit() -> None:
    data = b"Hello World! This is a test."
    stream = io.BytesIO(data)

    result = PrefixExtractor(io.BytesIO(), chunk_size=5).extract(stream, ExtractionRequest.for_bytes(12))

    assert result.units_written == 12
    assert stream.read() == data[12:]


def test_short_writes_are_retried_until_complete() -> None:
    sink = _ShortWriter(step=4)

    bytes_result = extract(io.BytesIO(b"Hello World! This is a test."), ExtractionRequest.for_bytes(12), sink)
    lines_result = extract(io.BytesIO(b"first line\nsecond\n"), ExtractionRequest.for_lines(1), sink)

    assert bytes_result.ok
    assert bytes_result.units_written == 12
    assert lines_result.units_written == 1
    assert bytes(sink.data) == b"Hello World!first line\n"


def test_sink_accepting_nothing_is_a_write_failure() -> None:
    result = extract(io.BytesIO(b"abc"), ExtractionRequest.for_bytes(3), _StalledWriter(), source="in")

    assert isinstance(result.error, WriteFailure)
    assert "accepted no bytes" in str(result.error)
    assert result.units_written == 0
