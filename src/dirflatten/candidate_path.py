"""Candidate paths produced by the tree walker and evaluated by the path matcher."""

import posixpath
from dataclasses import dataclass
from pathlib import Path

from dirflatten.types import EntryType


@dataclass(frozen=True)
class CandidatePath:
    """A filesystem entry under the walk root awaiting a selection decision.

    Attributes:
        relative_path (str): POSIX path relative to the root, never empty.
        absolute_path (Path): Absolute path of the entry.
        entry_type (EntryType): Kind of entry, determined without following symlinks.

    Example:
        >>> candidate = CandidatePath("sub/.env", Path("/repo/sub/.env"), EntryType.FILE)
        >>> candidate.name, candidate.parts, candidate.is_dir
        ('.env', ('sub', '.env'), False)
    """

    relative_path: str
    absolute_path: Path
    entry_type: EntryType = EntryType.FILE

    @classmethod
    def for_path(cls, root: Path, relative_path: str, entry_type: EntryType = EntryType.FILE) -> "CandidatePath":
        """Build a candidate from the walk root and a root-relative path."""
        return cls(relative_path, root.joinpath(*relative_path.split("/")), entry_type)

    @property
    def name(self) -> str:
        return posixpath.basename(self.relative_path)

    @property
    def parts(self) -> tuple:
        return tuple(self.relative_path.split("/"))

    @property
    def is_dir(self) -> bool:
        return self.entry_type is EntryType.DIRECTORY

    @property
    def is_file(self) -> bool:
        return self.entry_type is EntryType.FILE
