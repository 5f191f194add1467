"""Command-line interface for dirflatten.

The entry point parses arguments, builds the SelectionConfig, checks the size of the
selection, streams the aggregated document to its destination and maps failures to exit
codes.

Interruptions:
    A closed output pipe (e.g. ``dirflatten -o - | head``) and Ctrl+C both stop output at
    a section boundary; the process then exits with the conventional status.

Exit Codes:
    0: Successful completion (including an empty selection, or a declined size prompt)
    1: Runtime error during execution
    2: Command-line syntax error or unusable directory
    126: Unreadable entry with -P fail
    130: Interrupted by SIGINT (Ctrl+C)
    141: Broken pipe (SIGPIPE)

Example:
    # Flatten the current directory
    $ dirflatten

    # Flatten a project to stdout, warning about unreadable entries
    $ dirflatten /path/to/project -o - -P warn
"""

import argparse
import sys
from collections.abc import Mapping
from pathlib import Path
from typing import Optional, Sequence

from dirflatten.aggregator import Aggregator, calculate_directory_size
from dirflatten.cli.argparser import STDOUT_TARGET, create_parser, default_output_path, validate_args
from dirflatten.cli.safe_writer import SafeWriter
from dirflatten.cli.signal_handler import setup_signal_handling, signal_handler
from dirflatten.exceptions import ConfigError, EntryAccessError, TokenizerNotAvailableError
from dirflatten.selection_config import SelectionConfig
from dirflatten.token_counter import TokenCounter, tiktoken_available
from dirflatten.tree_walker.permission_action import PermissionAction
from dirflatten.tree_walker.tree_walker import TreeWalker

# Selections larger than this require confirmation unless -y is given
SIZE_LIMIT = 10 * 1024 * 1024

# "warn" walks like "ignore"; the recorded errors are printed after the run
PERMISSION_ACTIONS = {
    "ignore": PermissionAction.IGNORE,
    "warn": PermissionAction.IGNORE,
    "fail": PermissionAction.RAISE,
}


def format_counts(counts: Mapping[str, Optional[int]]) -> str:
    """Format the summary counts, one ``Name: value`` line each.

    Example:
        >>> print(format_counts({"files": 2, "bytes": 30, "lines": 12, "characters": 80, "tokens": None}))
        Files: 2
        Bytes: 30
        Lines: 12
        Characters: 80
    """
    names = ["files", "bytes", "lines", "characters"]
    if counts["tokens"] is not None:
        names.append("tokens")
    return "\n".join(f"{name.capitalize()}: {counts[name]}" for name in names)


def confirm_large_directory(size: int) -> bool:
    """Ask on the terminal whether to continue with a large selection.

    The question goes to stderr so that it never ends up in a document written to stdout.

    Returns:
        True only if the user answers ``y``.
    """
    print(
        f"Warning: The directory size is {size} bytes. Do you want to continue? (y/n)",
        file=sys.stderr,
    )
    answer = sys.stdin.readline()
    return answer.strip().lower() == "y"


def write_summary(args: argparse.Namespace, aggregator: Aggregator, size: int, writer: SafeWriter) -> None:
    """Emit the summary report to the destination chosen with ``-s``.

    With ``-s stdout`` and the document itself on stdout, the report is appended through
    the same writer so the two never interleave.
    """
    summary = format_counts(
        {
            "files": aggregator.file_count,
            "bytes": size,
            "lines": aggregator.line_count,
            "characters": aggregator.character_count,
            "tokens": aggregator.token_count,
        }
    )
    if args.summary == "file" or (args.summary == "stdout" and args.output == STDOUT_TARGET):
        writer.write("\n" + summary + "\n")
    elif args.summary == "stdout":
        print(summary)
    else:
        print(summary, file=sys.stderr)


def flatten(args: argparse.Namespace) -> None:
    """Run one flattening job described by parsed arguments.

    Raises:
        ConfigError: If the directory is unusable.
        EntryAccessError: If an entry is unreadable and ``-P fail`` was given.
        TokenizerNotAvailableError: If ``-t`` was given without tiktoken installed.
    """
    if args.tokenizer and not tiktoken_available():
        raise TokenizerNotAvailableError(
            "Token counting was requested with -t/--tokenizer, but the required tiktoken library is not installed."
        )

    permission_action = PERMISSION_ACTIONS[args.permission_action]
    config = SelectionConfig.create(
        args.directory,
        includes=args.include,
        excludes=args.exclude,
        allow_hidden=args.allow_hidden,
    )

    size = calculate_directory_size(config, permission_action)
    if size > SIZE_LIMIT and not args.yes and not confirm_large_directory(size):
        return

    output_path = None
    if args.output != STDOUT_TARGET:
        output_path = Path(args.output) if args.output else default_output_path(args.directory)

    aggregator = Aggregator(
        TreeWalker(config, permission_action=permission_action),
        output_path=output_path,
        counter=TokenCounter(model=args.tokenizer),
    )

    with SafeWriter(sys.stdout.fileno() if output_path is None else output_path) as writer:
        try:
            for section in aggregator.stream_document():
                writer.write(section)
            if args.summary:
                write_summary(args, aggregator, size, writer)
        except BrokenPipeError:
            pass  # The reader is gone; the writer is closed on leaving the block

    if args.permission_action == "warn":
        for error in aggregator.errors:
            print(f"Warning: {error}", file=sys.stderr)


def main(argv: Optional[Sequence[str]] = None) -> None:
    """Main entry point for the dirflatten command-line interface.

    Args:
        argv: Arguments to parse instead of ``sys.argv[1:]``.
    """
    setup_signal_handling()

    try:
        # argparse exits with 2 on syntax errors and 0 for --version
        args = create_parser().parse_args(argv)
        validate_args(args)
        flatten(args)
    except EntryAccessError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(126)
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(2)
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    exit_code = signal_handler.exit_code()
    if exit_code is not None:
        sys.exit(exit_code)


if __name__ == "__main__":
    main()
