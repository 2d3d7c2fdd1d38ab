"""CLI entrypoint printing the first lines or bytes of each input."""

from __future__ import annotations

import argparse
import logging
import sys
from typing import BinaryIO, TextIO

from dotenv import load_dotenv

from pyhead.config import HeadOptions, RuntimeSettings
from pyhead.extraction.cancellation import CancellationToken
from pyhead.extraction.errors import ConfigurationError
from pyhead.orchestration.runner import DEFAULT_COMMAND_NAME, RunOptions, run_sources
from pyhead.orchestration.sources import resolve_sources


load_dotenv()

LOGGER = logging.getLogger(__name__)

EXIT_USAGE = 2


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=DEFAULT_COMMAND_NAME,
        description="Print the first 10 lines of each FILE; with no FILE, or when FILE is -, read standard input",
    )
    parser.add_argument("-n", "--lines", type=int, default=0, help="Print the first N lines")
    parser.add_argument("-c", "--bytes", type=int, default=0, help="Print the first N bytes; wins over --lines")
    parser.add_argument(
        "-q",
        "--quiet",
        "--silent",
        action="store_true",
        help="Never print headers giving file names",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Always print headers giving file names")
    parser.add_argument("--timeout", type=float, default=None, help="Cancel extraction after SECONDS")
    parser.add_argument(
        "--fail-fast",
        action="store_true",
        help="Stop at the first file that cannot be read instead of continuing",
    )
    parser.add_argument("files", nargs="*", metavar="FILE", help="Input files")
    return parser


def main(
    argv: list[str] | None = None,
    *,
    stdin: BinaryIO | None = None,
    stdout: BinaryIO | None = None,
    stderr: TextIO | None = None,
) -> int:
    diagnostics = stderr if stderr is not None else sys.stderr
    args = _build_parser().parse_args(argv)

    try:
        settings = RuntimeSettings.from_env()
    except ValueError as error:
        diagnostics.write(f"{DEFAULT_COMMAND_NAME}: {error}\n")
        return EXIT_USAGE

    logging.basicConfig(
        stream=diagnostics,
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )

    options = HeadOptions(lines=args.lines, bytes=args.bytes, quiet=args.quiet, verbose=args.verbose)
    try:
        request = options.resolve(default_lines=settings.default_lines)
    except ConfigurationError as error:
        diagnostics.write(f"{DEFAULT_COMMAND_NAME}: {error}\n")
        return EXIT_USAGE

    if args.timeout is not None and args.timeout <= 0:
        diagnostics.write(f"{DEFAULT_COMMAND_NAME}: invalid timeout: {args.timeout}\n")
        return EXIT_USAGE

    input_stream = stdin if stdin is not None else sys.stdin.buffer
    output = stdout if stdout is not None else sys.stdout.buffer
    sources = resolve_sources(args.files, input_stream)
    run_options = RunOptions(
        show_headers=options.show_headers,
        force_headers=options.force_headers,
        continue_on_error=not args.fail_fast,
    )

    with CancellationToken() as token:
        if args.timeout is not None:
            token.cancel_after(args.timeout)
        outcome = run_sources(
            sources,
            request,
            run_options,
            output=output,
            diagnostics=diagnostics,
            token=token,
        )

    try:
        output.flush()
    except OSError as error:
        diagnostics.write(f"{DEFAULT_COMMAND_NAME}: write failed: {error}\n")
        return 1

    if outcome.halted and outcome.failures:
        last = outcome.failures[-1]
        diagnostics.write(f"{DEFAULT_COMMAND_NAME}: {last.name}: {last.error.message}\n")

    LOGGER.debug("Exit status %d", outcome.exit_code)
    return outcome.exit_code


if __name__ == "__main__":
    raise SystemExit(main())
