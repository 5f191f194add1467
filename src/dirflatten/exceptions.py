from typing import Optional


class ConfigError(ValueError):
    """
    Exception raised when the selection configuration cannot be used.

    This is the only fatal error of the selection engine. It is raised before any
    traversal begins, typically because the root directory does not exist or is not a
    directory. An empty traversal result is never reported with this exception.

    Example:
        >>> error = ConfigError("Root path does not exist: /nowhere")
        >>> str(error)
        'Root path does not exist: /nowhere'
    """

    pass


class IgnoreParseWarning(UserWarning):
    """
    Warning emitted when a line of an ignore file cannot be parsed.

    The offending line is skipped and the remaining rules of the file still apply.
    Emitted through :func:`warnings.warn`; never raised as a failure.

    Attributes:
        source (str): Path of the ignore file containing the line.
        line_number (int): 1-based line number, or 0 when the whole file was unreadable.
        line (str): The raw line that was rejected.

    Example:
        >>> warning = IgnoreParseWarning("/repo/.gitignore", 3, "!", "invalid pattern")
        >>> str(warning)
        "/repo/.gitignore:3: skipped ignore rule '!' (invalid pattern)"
    """

    def __init__(self, source: str, line_number: int, line: str, reason: str) -> None:
        """
        Initialize the warning with the location of the rejected line.

        Args:
            source (str): Path of the ignore file.
            line_number (int): 1-based line number of the rejected line.
            line (str): The raw line content.
            reason (str): Why the line was rejected.
        """
        self.source = source
        self.line_number = line_number
        self.line = line
        super().__init__(f"{source}:{line_number}: skipped ignore rule {line!r} ({reason})")


class EntryAccessError(OSError):
    """
    Exception describing a filesystem entry that could not be read during traversal.

    Under the default permission action the walker records these errors and treats the
    entry as excluded; under ``PermissionAction.RAISE`` the error propagates.

    Attributes:
        path (str): Path of the entry that could not be accessed.
        cause (Optional[OSError]): The underlying operating system error, if any.

    Example:
        >>> error = EntryAccessError("/repo/secret", PermissionError(13, "Permission denied"))
        >>> str(error)
        'Access denied to /repo/secret: [Errno 13] Permission denied'
    """

    def __init__(self, path: str, cause: Optional[OSError] = None) -> None:
        """
        Initialize the exception with the inaccessible path.

        Args:
            path (str): Path of the entry that could not be accessed.
            cause (Optional[OSError]): The underlying error. Defaults to None.
        """
        self.path = path
        self.cause = cause
        message = f"Access denied to {path}: {cause}" if cause is not None else f"Access denied to {path}"
        super().__init__(message)
        if cause is not None:
            self.errno = cause.errno


class TokenizerNotAvailableError(Exception):
    """
    Exception raised when attempting to use token counting functionality without the required tokenizer package.

    This exception is raised when the `tiktoken` package is not installed but token counting
    functionality is requested. The tiktoken package is an optional dependency that must be
    explicitly installed using the 'token_counting' extra.

    Attributes:
        message (str): Detailed error message including installation instructions.

    Example:
        >>> error = TokenizerNotAvailableError()
        >>> str(error).startswith('Tokenizer (tiktoken) is not installed')
        True
    """

    def __init__(self, message: str = "Tokenizer (tiktoken) is not installed.") -> None:
        """
        Initialize the exception with an informative error message.

        Args:
            message (str, optional): Base error message. Installation instructions will be appended.
        """
        self.message = (
            f"{message} To enable token counting, install dirflatten with the 'token_counting' "
            "extra: 'pip install dirflatten[token_counting]'."
        )
        super().__init__(self.message)


class TokenizationError(Exception):
    """
    Exception raised when token counting fails during execution.

    Example:
        >>> error = TokenizationError("Failed to tokenize: invalid input")
        >>> str(error)
        'Failed to tokenize: invalid input'
    """

    pass
