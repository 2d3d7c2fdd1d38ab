"""Named input sources: files opened on demand or borrowed streams."""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Iterator, Sequence

from pyhead.extraction.errors import IOFailure


STDIN_NAME = "standard input"
STDIN_ARGUMENT = "-"


@dataclass(frozen=True, slots=True)
class InputSource:
    """One readable source and the display name used in headers and errors.

    Exactly one of `path` and `stream` is set. Path sources are opened in
    binary mode for the duration of `open()` and closed afterwards; stream
    sources are borrowed and left open.
    """

    name: str
    path: Path | None = None
    stream: BinaryIO | None = None

    def __post_init__(self) -> None:
        if (self.path is None) == (self.stream is None):
            raise ValueError("InputSource needs exactly one of path or stream")

    @classmethod
    def from_path(cls, path: str | Path) -> "InputSource":
        return cls(name=str(path), path=Path(path))

    @classmethod
    def from_stream(cls, stream: BinaryIO, name: str = STDIN_NAME) -> "InputSource":
        return cls(name=name, stream=stream)

    @property
    def is_file(self) -> bool:
        return self.path is not None

    @contextmanager
    def open(self) -> Iterator[BinaryIO]:
        if self.stream is not None:
            yield self.stream
            return

        if self.path is None:
            raise ValueError(f"InputSource {self.name!r} has no path to open")
        try:
            handle = self.path.open("rb")
        except OSError as exc:
            reason = exc.strerror or str(exc)
            raise IOFailure(self.name, f"cannot open for reading: {reason}") from exc
        with handle:
            yield handle


def resolve_sources(arguments: Sequence[str], stdin: BinaryIO) -> list[InputSource]:
    """Map CLI arguments to sources; no arguments or `-` mean standard input."""

    if not arguments:
        return [InputSource.from_stream(stdin)]

    sources: list[InputSource] = []
    for argument in arguments:
        if argument == STDIN_ARGUMENT:
            sources.append(InputSource.from_stream(stdin))
        else:
            sources.append(InputSource.from_path(argument))
    return sources
