"""Command-line argument parsing for dirflatten.

This module defines the command-line interface for dirflatten,
handling argument parsing, validation and the default output file name.
"""

import argparse
from datetime import datetime
from pathlib import Path
from typing import Optional

from dirflatten import __version__

STDOUT_TARGET = "-"


def default_output_path(directory: Path, now: Optional[datetime] = None) -> Path:
    """Build the default output file name for ``directory``.

    The file is created in the current working directory and named after the flattened
    directory and the current local time. A directory given without a name of its own,
    such as the default ``./``, is called ``root``.

    Example:
        >>> default_output_path(Path("/work/project"), datetime(2024, 5, 1, 13, 7, 9))
        PosixPath('flatten-project-2024-05-01_13-07-09.txt')
        >>> default_output_path(Path("./"), datetime(2024, 5, 1, 13, 7, 9))
        PosixPath('flatten-root-2024-05-01_13-07-09.txt')
    """
    if now is None:
        now = datetime.now()
    stem = directory.stem if directory.name not in ("", "..") else "root"
    return Path(f"flatten-{stem}-{now.strftime('%Y-%m-%d_%H-%M-%S')}.txt")


def create_parser() -> argparse.ArgumentParser:
    """Create and configure the command-line argument parser.

    Returns:
        An ArgumentParser instance configured with dirflatten's options.
    """
    description = """
    dirflatten: concatenate the files of a directory tree into one document.

    Every selected file is written as a markdown section headed by its path relative to
    the directory, with its contents in a code fence labelled by language.

    Selection rules, highest precedence first:
    - --include paths (and everything beneath them) are always selected
    - --exclude paths (and everything beneath them) are dropped
    - hidden files and directories are dropped unless --allow-hidden is given
    - patterns from .gitignore and .ignore files are honoured, deeper files winning
    - everything else is selected
    """

    epilog = """
    Examples:
      # Flatten the current directory into flatten-root-<timestamp>.txt
      dirflatten

      # Flatten a project into a chosen file
      dirflatten /path/to/project -o project.md

      # Write to stdout
      dirflatten /path/to/project -o -

      # Drop a directory but keep one file inside it
      dirflatten -e tests --include tests/conftest.py /path/to/project

      # Include dot-files
      dirflatten --allow-hidden /path/to/project

      # Print a summary with token counts to stderr
      dirflatten -s stderr -t gpt-4 /path/to/project

      # Skip the confirmation prompt for large directories
      dirflatten -y /path/to/project
    """

    parser = argparse.ArgumentParser(
        prog="dirflatten",
        description=description,
        epilog=epilog,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "-V", "--version", action="version", version=f"dirflatten {__version__}", help="Show the version and exit"
    )
    parser.add_argument(
        "directory",
        type=Path,
        nargs="?",
        default=Path("./"),
        help="The directory to flatten (default: current directory).",
    )
    parser.add_argument(
        "-o",
        "--output",
        metavar="FILE",
        help=(
            "Output file path, or '-' for stdout. Defaults to flatten-<dir>-<timestamp>.txt "
            "in the current directory."
        ),
    )
    parser.add_argument(
        "-e",
        "--exclude",
        type=Path,
        metavar="PATH",
        action="append",
        default=[],
        help="File or directory to exclude, relative to DIRECTORY or absolute (can be specified multiple times).",
    )
    parser.add_argument(
        "--include",
        type=Path,
        metavar="PATH",
        action="append",
        default=[],
        help=(
            "File or directory to include, overriding exclusions, hidden-file policy and ignore files "
            "(can be specified multiple times)."
        ),
    )
    parser.add_argument(
        "-H",
        "--allow-hidden",
        action="store_true",
        help="Include hidden files and directories (names starting with '.').",
    )
    parser.add_argument(
        "-y",
        "--yes",
        action="store_true",
        help="Do not ask for confirmation when the selected files are larger than 10 MiB.",
    )
    parser.add_argument(
        "-s",
        "--summary",
        metavar="DEST",
        choices=["stderr", "stdout", "file"],
        help="Print summary report. Valid destinations: stderr, stdout, file",
    )
    parser.add_argument(
        "-t",
        "--tokenizer",
        metavar="MODEL",
        help="Tokenizer model to use for counting tokens in the summary (e.g., gpt-4).",
    )
    parser.add_argument(
        "-P",
        "--permission-action",
        choices=["ignore", "warn", "fail"],
        default="ignore",
        help="How to handle unreadable files and directories (default: ignore).",
    )

    return parser


def validate_args(args: argparse.Namespace) -> None:
    """Validate command-line arguments.

    Performs additional validation beyond what argparse can handle.

    Args:
        args: Parsed command-line arguments.

    Raises:
        ValueError: If any arguments fail validation.
    """
    if args.summary == "file" and args.output == STDOUT_TARGET:
        raise ValueError("--summary=file cannot be used when writing to stdout; use --summary=stdout")
    if args.tokenizer and not args.summary:
        raise ValueError("-t/--tokenizer requires -s/--summary")
