from enum import Enum
from os import PathLike
from typing import Union

# Complete path type including strings and any path-like object
PathType = Union[str, PathLike[str]]


class EntryType(Enum):
    """Enumeration of filesystem entry types encountered during traversal.

    Attributes:
        FILE: Regular file
        DIRECTORY: Directory
        SYMLINK: Symbolic link (never followed)
    """

    FILE = "file"
    DIRECTORY = "directory"
    SYMLINK = "symlink"


class Decision(Enum):
    """Outcome of evaluating a candidate path against the selection rules.

    Attributes:
        INCLUDE: The path is selected (files are emitted, directories are descended).
        EXCLUDE: The path is dropped (directories are pruned).
    """

    INCLUDE = "include"
    EXCLUDE = "exclude"
