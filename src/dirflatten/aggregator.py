"""Concatenation of the selected files into one annotated document.

Each selected file becomes a markdown section: a ``## <relative path>`` header followed
by the file contents inside a code fence labelled with the file's language. Files are
read one at a time, with no handle held across files.
"""

import os
from pathlib import Path
from typing import Iterator, List, Optional

from dirflatten.exceptions import EntryAccessError, TokenizationError
from dirflatten.language_lookup import language_for
from dirflatten.selection_config import SelectionConfig
from dirflatten.token_counter import TokenCounter
from dirflatten.tree_walker.permission_action import PermissionAction
from dirflatten.tree_walker.tree_walker import TreeWalker
from dirflatten.types import PathType

NON_UTF8_PLACEHOLDER = "<non-UTF-8 data>"


def format_file_section(relative_path: str, content: str) -> str:
    """Format one file as a markdown section.

    Example:
        >>> print(format_file_section("src/lib.rs", "fn main() {}"), end="")
        ## src/lib.rs
        ```rust
        fn main() {}
        ```
        <BLANKLINE>
    """
    return f"## {relative_path}\n```{language_for(relative_path)}\n{content}\n```\n\n"


def decode_content(data: bytes) -> str:
    """Decode file bytes as UTF-8, substituting a placeholder for undecodable data.

    Example:
        >>> decode_content(b"hello")
        'hello'
        >>> decode_content(b"\\xff\\xfe\\xfd")
        '<non-UTF-8 data>'
    """
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError:
        return NON_UTF8_PLACEHOLDER


class Aggregator:
    """Streams the consolidated document for the files selected by a TreeWalker.

    The document is produced lazily, one file section at a time, and can only be streamed
    once because the underlying walk is a one-time snapshot of the filesystem.

    Attributes:
        walker (TreeWalker): Source of the selected files.
        output_path (Optional[Path]): Destination of the document; skipped if selected.
        counter (TokenCounter): Accumulates line, character and optional token counts.

    Example:
        >>> config = SelectionConfig.create("src")  # doctest: +SKIP
        >>> aggregator = Aggregator(TreeWalker(config))  # doctest: +SKIP
        >>> for chunk in aggregator.stream_document():  # doctest: +SKIP
        ...     print(chunk, end='')
        ## main.py
        ```python
        print("hello")
        ```
    """

    def __init__(
        self,
        walker: TreeWalker,
        output_path: Optional[PathType] = None,
        counter: Optional[TokenCounter] = None,
    ) -> None:
        """Initialize the aggregator.

        Args:
            walker: Walker providing the ordered selected files. Must not have been walked yet.
            output_path: Path the document is written to. When it lies inside the walked
                tree it is never aggregated into itself.
            counter: Counter for the summary report. Defaults to a line/character counter
                without token counting.
        """
        self.walker = walker
        self.output_path = Path(os.path.abspath(output_path)) if output_path is not None else None
        self.counter = counter if counter is not None else TokenCounter()
        self._errors: List[EntryAccessError] = []
        self._file_count = 0
        self._complete = False

    @property
    def file_count(self) -> int:
        """Number of files written so far."""
        return self._file_count

    @property
    def line_count(self) -> int:
        return self.counter.get_total_lines()

    @property
    def character_count(self) -> int:
        return self.counter.get_total_characters()

    @property
    def token_count(self) -> Optional[int]:
        """Tokens written so far, or None when token counting is disabled."""
        return self.counter.get_total_tokens()

    @property
    def errors(self) -> List[EntryAccessError]:
        """Access errors from the walk and from reading files, in the order they occurred."""
        return list(self.walker.errors) + self._errors

    @property
    def streaming_complete(self) -> bool:
        return self._complete

    def stream_document(self) -> Iterator[str]:
        """Stream the document section by section.

        Raises:
            RuntimeError: If the document has already been streamed.
            ConfigError: If the walker's root is not a readable directory.
            EntryAccessError: If a file cannot be read and the walker's permission
                action is RAISE.
        """
        if self._complete:
            raise RuntimeError("Document has already been streamed")

        for absolute_path, relative_path in self.walker.iterate_files():
            if self._is_output_file(absolute_path):
                continue

            data = self._read_file(absolute_path)
            if data is None:
                continue

            section = format_file_section(relative_path, decode_content(data))
            self._file_count += 1
            yield self._count_and_yield(section)

        self._complete = True

    def _is_output_file(self, path: str) -> bool:
        if self.output_path is None:
            return False
        return Path(path) == self.output_path or Path(path).resolve() == self.output_path.resolve()

    def _read_file(self, path: str) -> Optional[bytes]:
        try:
            with open(path, "rb") as f:
                return f.read()
        except OSError as e:
            error = EntryAccessError(path, e)
            if self.walker.permission_action == PermissionAction.RAISE:
                raise error from e
            self._errors.append(error)
            return None

    def _count_and_yield(self, text: str) -> str:
        try:
            self.counter.count(text)
        except TokenizationError:
            # Continue even if token counting fails
            pass
        return text


def calculate_directory_size(
    config: SelectionConfig, permission_action: PermissionAction = PermissionAction.IGNORE
) -> int:
    """Sum the sizes in bytes of the files the configuration selects.

    Files that vanish or cannot be stat'ed between selection and measurement are
    skipped, or raise EntryAccessError when ``permission_action`` is RAISE.

    Args:
        config: Configuration of the run.
        permission_action: How to handle unreadable entries.

    Returns:
        Total size of the selected files in bytes.

    Raises:
        ConfigError: If the root does not exist or is not a readable directory.
    """
    walker = TreeWalker(config, permission_action=permission_action)
    size = 0
    for candidate in walker.walk():
        try:
            size += os.stat(candidate.absolute_path).st_size
        except OSError as e:
            if permission_action == PermissionAction.RAISE:
                raise EntryAccessError(str(candidate.absolute_path), e) from e
    return size
