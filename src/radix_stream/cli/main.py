"""Main CLI entry point for the radix-stream command-line tool.

Reads symbols from standard input (or a file), converts them chunk by chunk
between two radices and writes the result to standard output (or a file).

Exit codes: 0 on success, 1 when an invalid character stopped the stream or
an I/O error occurred, 2 for configuration errors, 130 when interrupted.
"""

import argparse
import json
import logging
import sys
from contextlib import ExitStack
from pathlib import Path
from typing import Any, BinaryIO, Dict, List, Optional

from radix_stream import __version__
from radix_stream.api import RadixConverter
from radix_stream.shared.config import (
    ALPHABETS,
    BYTE_ALPHABET,
    CaseMode,
    ConverterConfig,
    InvalidCharAction,
    alphabet_names,
)
from radix_stream.shared.errors import (
    ConfigError,
    ConfigValidationError,
    UnmappedCharacterError,
)
from radix_stream.shared.logging import configure_logging, get_logger
from radix_stream.shared.result import ConversionResult

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_CONFIG_ERROR = 2
EXIT_INTERRUPTED = 130  # Standard exit code for SIGINT

BYTE_RADIX = 256

# Radix shortcuts shared by the source (lowercase) and target (uppercase) flags
RADIX_SHORTCUTS = (
    ("b", 2, "binary"),
    ("o", 8, "octal"),
    ("d", 10, "decimal"),
    ("x", 16, "hexadecimal"),
    ("t", 36, "hexatrigesimal"),
)


def _add_side_arguments(parser: argparse.ArgumentParser, side: str) -> None:
    """Add radix, alphabet, numeric and case flags for ``side`` ('from' or 'to')."""
    upper = side == "to"
    label = "target" if upper else "source"
    group = parser.add_argument_group(f"{label} side")

    for letter, radix, name in RADIX_SHORTCUTS:
        flag = f"-{letter.upper() if upper else letter}"
        group.add_argument(
            flag,
            dest=f"{side}_radix",
            action="store_const",
            const=radix,
            help=f"{'To' if upper else 'From'} {name} (radix {radix})",
        )
    group.add_argument(
        "-F" if upper else "-f",
        f"--{side}-radix",
        dest=f"{side}_radix",
        type=int,
        metavar="N",
        help=f"{label.capitalize()} radix (defaults to the alphabet length "
             "when an alphabet is given)",
    )
    group.add_argument(
        "-A" if upper else "-a",
        f"--{side}-bytes",
        dest=f"{side}_bytes",
        action="store_true",
        help="Radix 256 over the byte alphabet (one character per byte)",
    )
    group.add_argument(
        "-S" if upper else "-s",
        f"--{side}-alphabet",
        dest=f"{side}_alphabet",
        metavar="ALPHABET",
        help=f"Literal alphabet or one of: {', '.join(alphabet_names())}",
    )
    group.add_argument(
        f"--{side}-numeric",
        dest=f"{side}_numeric",
        action="store_true",
        help="Carry digits as raw big-endian integers instead of characters",
    )

    case_group = group.add_mutually_exclusive_group()
    case_group.add_argument(
        "-L" if upper else "-l",
        f"--{side}-lower",
        dest=f"{side}_case",
        action="store_const",
        const=CaseMode.FORCE_LOWER,
        help="Fold to lowercase",
    )
    case_group.add_argument(
        "-U" if upper else "-u",
        f"--{side}-upper",
        dest=f"{side}_case",
        action="store_const",
        const=CaseMode.FORCE_UPPER,
        help="Fold to uppercase",
    )
    case_group.add_argument(
        f"--{side}-preserve",
        dest=f"{side}_case",
        action="store_const",
        const=CaseMode.PRESERVE,
        help="Never fold case",
    )


def create_argument_parser() -> argparse.ArgumentParser:
    """Create the main argument parser."""
    parser = argparse.ArgumentParser(
        prog="radix-stream",
        description="Convert a stream of digits from one radix to another, "
                    "chunk by chunk",
    )

    parser.add_argument("--version", action="version", version=__version__)

    _add_side_arguments(parser, "from")
    _add_side_arguments(parser, "to")

    policy = parser.add_argument_group(
        "action on invalid character (mutually exclusive)"
    ).add_mutually_exclusive_group()
    for flags, action, text in (
        (("-p", "--skip"), InvalidCharAction.SKIP, "Drop it (default)"),
        (("-z", "--zero"), InvalidCharAction.ZERO, "Substitute digit zero"),
        (("-k", "--stop"), InvalidCharAction.STOP, "End the current chunk there"),
        (("-r", "--report"), InvalidCharAction.REPORT, "Report to standard error and drop"),
        (("-e", "--fail"), InvalidCharAction.FAIL_FAST, "Stop the stream with exit status 1"),
        (("--propagate",), InvalidCharAction.PROPAGATE, "Raise an error with its position"),
    ):
        policy.add_argument(
            *flags,
            dest="invalid_action",
            action="store_const",
            const=action,
            help=text,
        )

    io_group = parser.add_argument_group("input/output")
    io_group.add_argument(
        "--input", "-i",
        type=Path,
        help="Input file (default: stdin)",
    )
    io_group.add_argument(
        "--output",
        type=Path,
        help="Output file (default: stdout)",
    )
    io_group.add_argument(
        "--encoding",
        help="Text encoding for alphabet-mapped sides (default: latin-1)",
    )
    io_group.add_argument(
        "--no-newline", "-n",
        action="store_true",
        help="Do not terminate text output with a newline",
    )
    io_group.add_argument(
        "--config", "-c",
        type=Path,
        help="JSON configuration file; flags override its values",
    )
    io_group.add_argument(
        "--profile",
        type=Path,
        metavar="REPORT",
        help="Write a JSON performance report to this path",
    )

    # Global options
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Verbose output"
    )
    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Quiet output"
    )

    return parser


def _side_overrides(args: argparse.Namespace, side: str) -> Dict[str, Any]:
    """Collect ``side__field`` overrides for one side from parsed flags."""
    radix = getattr(args, f"{side}_radix")
    alphabet = getattr(args, f"{side}_alphabet")
    case = getattr(args, f"{side}_case")
    overrides: Dict[str, Any] = {}

    if getattr(args, f"{side}_bytes"):
        radix = BYTE_RADIX
        alphabet = alphabet or BYTE_ALPHABET

    if alphabet is not None:
        alphabet = ALPHABETS.get(alphabet, alphabet)
        overrides["alphabet"] = alphabet
        if radix is None:
            radix = len(alphabet)
    if radix is not None:
        overrides["radix"] = radix
    if getattr(args, f"{side}_numeric"):
        overrides["numeric"] = True
        overrides["alphabet"] = None
    if case is not None:
        overrides["case"] = case

    prefix = "source" if side == "from" else "target"
    return {f"{prefix}__{key}": value for key, value in overrides.items()}


def build_config(args: argparse.Namespace) -> ConverterConfig:
    """Build the converter configuration from parsed arguments.

    Raises:
        ConfigError: If the configuration file or a flag value is invalid
    """
    config = ConverterConfig()
    if args.config:
        try:
            config = ConverterConfig.from_json(args.config.read_text())
        except (OSError, json.JSONDecodeError, TypeError) as e:
            raise ConfigValidationError(
                f"Could not load config file {args.config}: {e}",
                field_name="config",
            ) from e

    overrides = _side_overrides(args, "from")
    overrides.update(_side_overrides(args, "to"))
    if args.invalid_action is not None:
        overrides["invalid_action"] = args.invalid_action
    if args.encoding:
        overrides["encoding"] = args.encoding
    if args.no_newline or args.to_bytes or args.to_numeric:
        overrides["trailing_newline"] = False

    return config.override(**overrides) if overrides else config


def run_conversion(converter: RadixConverter, args: argparse.Namespace) -> ConversionResult:
    """Convert the selected input into the selected output."""
    with ExitStack() as stack:
        source: BinaryIO = (
            stack.enter_context(args.input.open("rb")) if args.input else sys.stdin.buffer
        )
        sink: BinaryIO = (
            stack.enter_context(args.output.open("wb")) if args.output else sys.stdout.buffer
        )

        if not args.profile:
            return converter.convert_stream(source, sink)

        from radix_stream.tools.profiling import PerformanceProfiler

        profiler = PerformanceProfiler()
        with profiler.profile_conversion("cli") as session:
            session.metadata = {
                "from_radix": converter.context.from_radix,
                "to_radix": converter.context.to_radix,
            }
            with profiler.profile_stage(session, "convert_stream") as stage:
                result = converter.convert_stream(source, sink)
                stage.operations_count = result.metrics.chunks_read
            session.input_size = result.metrics.symbols_read
            session.metadata.update(result.summary())
        profiler.save_report(profiler.generate_report(), args.profile)
        return result


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = create_argument_parser()
    if argv is None:
        argv = sys.argv[1:]
    if not argv:
        parser.print_help()
        return EXIT_FAILURE

    args = parser.parse_args(argv)

    # Set up logging verbosity
    if args.verbose:
        configure_logging(logging.DEBUG)
    elif args.quiet:
        configure_logging(logging.ERROR)
    else:
        configure_logging(logging.WARNING)
    logger = get_logger(__name__, None, "cli")

    try:
        converter = RadixConverter(build_config(args))
        result = run_conversion(converter, args)
    except ConfigError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        suggestions = getattr(e, "suggestions", [])
        if suggestions:
            print(f"Suggestions: {', '.join(suggestions)}", file=sys.stderr)
        return EXIT_CONFIG_ERROR
    except UnmappedCharacterError as e:
        print(f"Error: {e} at position {e.position}", file=sys.stderr)
        return EXIT_FAILURE
    except OSError as e:
        logger.debug("I/O error during conversion", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_FAILURE
    except KeyboardInterrupt:
        print("\nOperation interrupted by user", file=sys.stderr)
        return EXIT_INTERRUPTED

    if result.aborted:
        print(f"Error: {result.error}", file=sys.stderr)
        return EXIT_FAILURE
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
