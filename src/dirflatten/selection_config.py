"""Immutable configuration of a single selection run."""

import os
import posixpath
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional, Tuple

from dirflatten.exceptions import ConfigError
from dirflatten.types import PathType


def normalize_fragment(fragment: PathType, root: Path) -> Optional[str]:
    """Convert a user supplied path fragment to a root-relative POSIX path.

    Relative fragments are interpreted relative to ``root``; absolute fragments must lie
    beneath ``root``. The root itself normalizes to the empty string.

    Args:
        fragment: Relative or absolute path fragment.
        root: Absolute root directory of the run.

    Returns:
        The normalized fragment, or None if the fragment points outside ``root``.

    Example:
        >>> normalize_fragment("./src//main.py", Path("/repo"))
        'src/main.py'
        >>> normalize_fragment("/repo/docs/", Path("/repo"))
        'docs'
        >>> normalize_fragment(".", Path("/repo"))
        ''
        >>> print(normalize_fragment("../elsewhere", Path("/repo")))
        None
    """
    raw = os.fspath(fragment)
    if os.path.isabs(raw):
        candidate = Path(os.path.normpath(raw))
        relative = None
        for base in (root, root.resolve()):
            try:
                relative = candidate.relative_to(base)
                break
            except ValueError:
                continue
        if relative is None:
            try:
                relative = candidate.resolve().relative_to(root.resolve())
            except ValueError:
                return None
        raw = relative.as_posix()

    normalized = posixpath.normpath(raw.replace("\\", "/"))
    if normalized == ".":
        return ""
    if normalized == ".." or normalized.startswith("../"):
        return None
    return normalized


def fragment_covers(fragment: str, relative_path: str) -> bool:
    """Check whether ``relative_path`` is equal to, or a descendant of, ``fragment``.

    Example:
        >>> fragment_covers("sub", "sub/b.txt")
        True
        >>> fragment_covers("sub", "subway.txt")
        False
        >>> fragment_covers("", "anything")
        True
    """
    if not fragment:
        return True
    return relative_path == fragment or relative_path.startswith(fragment + "/")


@dataclass(frozen=True)
class SelectionConfig:
    """Read-only configuration for one invocation of the selection engine.

    Instances are normally built with :meth:`create`, which validates the root
    directory and normalizes the include and exclude fragments.

    Attributes:
        root (Path): Absolute path of the directory to walk.
        includes (Tuple[str, ...]): Root-relative fragments that are always selected.
        excludes (Tuple[str, ...]): Root-relative fragments that are dropped.
        allow_hidden (bool): Whether dot-files and dot-directories are eligible.

    Example:
        >>> import tempfile
        >>> with tempfile.TemporaryDirectory() as tmp:
        ...     config = SelectionConfig.create(tmp, includes=["./a.txt"], excludes=["build/"])
        ...     config.includes, config.excludes, config.allow_hidden
        (('a.txt',), ('build',), False)
    """

    root: Path
    includes: Tuple[str, ...] = ()
    excludes: Tuple[str, ...] = ()
    allow_hidden: bool = False

    @classmethod
    def create(
        cls,
        root: PathType = ".",
        *,
        includes: Iterable[PathType] = (),
        excludes: Iterable[PathType] = (),
        allow_hidden: bool = False,
    ) -> "SelectionConfig":
        """Build and validate a configuration.

        Args:
            root: Directory to walk. Relative paths are resolved against the working directory.
            includes: Path fragments that override every exclusion.
            excludes: Path fragments to drop.
            allow_hidden: Whether hidden entries are eligible for selection.

        Returns:
            A validated SelectionConfig.

        Raises:
            ConfigError: If ``root`` does not exist, is not a directory, or cannot be listed.
        """
        root_path = Path(os.path.abspath(os.fspath(root)))
        config = cls(
            root=root_path,
            includes=_normalize_all(includes, root_path),
            excludes=_normalize_all(excludes, root_path),
            allow_hidden=allow_hidden,
        )
        config.validate()
        return config

    def validate(self) -> None:
        """Check that the root directory is usable.

        Raises:
            ConfigError: If the root does not exist, is not a directory, or cannot be listed.
        """
        if not self.root.exists():
            raise ConfigError(f"Root path does not exist: {self.root}")
        if not self.root.is_dir():
            raise ConfigError(f"Root path is not a directory: {self.root}")
        if not os.access(self.root, os.R_OK | os.X_OK):
            raise ConfigError(f"Root path is not readable: {self.root}")

    def is_included(self, relative_path: str) -> bool:
        """Whether an explicit include covers ``relative_path``."""
        return any(fragment_covers(fragment, relative_path) for fragment in self.includes)

    def is_excluded(self, relative_path: str) -> bool:
        """Whether an explicit exclude covers ``relative_path``."""
        return any(fragment_covers(fragment, relative_path) for fragment in self.excludes)

    def has_include_below(self, relative_path: str) -> bool:
        """Whether some explicit include lies strictly beneath the directory ``relative_path``."""
        prefix = relative_path + "/" if relative_path else ""
        return any(fragment.startswith(prefix) and fragment != relative_path for fragment in self.includes)


def _normalize_all(fragments: Iterable[PathType], root: Path) -> Tuple[str, ...]:
    normalized = []
    for fragment in fragments:
        value = normalize_fragment(fragment, root)
        if value is not None and value not in normalized:
            normalized.append(value)
    return tuple(normalized)
