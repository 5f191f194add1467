"""Interrupt-aware output for the flattened document."""

import errno
import os
import types
from pathlib import Path
from typing import BinaryIO, Optional, Tuple, Type, Union

from dirflatten.cli.signal_handler import signal_handler

OutputTarget = Union[int, str, "os.PathLike[str]"]


class SafeWriter:
    """Writes document sections to a file or descriptor, refusing further output once
    SIGPIPE or SIGINT has been received.

    Text is encoded as UTF-8 and written with :func:`os.write` until every byte of a
    section is out, so a section is never left half-written by a short write.

    Attributes:
        file: The path or file descriptor given at construction.
        fd: The file descriptor actually written to.

    Example:
        >>> import tempfile
        >>> with tempfile.TemporaryDirectory() as tmp:
        ...     target = Path(tmp) / "out.txt"
        ...     with SafeWriter(target) as writer:
        ...         writer.write("## a.txt\\n")
        ...     target.read_text()
        '## a.txt\\n'
    """

    def __init__(self, file: OutputTarget):
        """Open the output target.

        Args:
            file: A file descriptor to write to (left open on close), or a path to
                create or truncate.

        Raises:
            TypeError: If ``file`` is neither an int nor a path.
            OSError: If the output file cannot be opened.
        """
        self.file = file
        self.fd, self._file_obj = self._open_target(file)
        self._closed = False

    @staticmethod
    def _open_target(file: OutputTarget) -> Tuple[int, Optional[BinaryIO]]:
        if isinstance(file, int):
            return file, None
        if isinstance(file, (str, os.PathLike)):
            file_obj = Path(file).open("wb")
            return file_obj.fileno(), file_obj
        raise TypeError(f"Expected int, str, or PathLike, got {type(file).__name__}")

    def write(self, data: str) -> None:
        """Write ``data`` in full.

        Raises:
            BrokenPipeError: After SIGPIPE or SIGINT, or when the reader has gone away.
            OSError: On any other write failure.
            ValueError: If the writer has been closed.
        """
        if self._closed:
            raise ValueError("Cannot write to closed SafeWriter")
        if signal_handler.interrupted:
            raise BrokenPipeError()

        remaining = memoryview(data.encode("utf-8"))
        while remaining:
            try:
                written = os.write(self.fd, remaining)
            except OSError as e:
                if e.errno == errno.EPIPE:
                    raise BrokenPipeError() from e
                raise
            remaining = remaining[written:]

    def close(self) -> None:
        """Close the output file if this writer opened it.

        A broken pipe while closing still marks the writer closed.
        """
        if self._closed:
            return
        file_obj, self._file_obj = self._file_obj, None
        if file_obj is not None:
            try:
                file_obj.close()
            except BrokenPipeError:
                pass
        self._closed = True

    def __enter__(self) -> "SafeWriter":
        return self

    def __exit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc_val: Optional[BaseException],
        exc_tb: Optional[types.TracebackType],
    ) -> None:
        try:
            self.close()
        except OSError:
            # The with-block's own exception takes priority over a failed close
            if exc_type is None:
                raise
