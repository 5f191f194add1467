"""Recursive directory traversal that yields the files selected for output.

This module provides the TreeWalker class, which enumerates a directory tree in a
deterministic order, accumulates ignore-file rules as it descends, and consults the
PathMatcher at every entry to decide what to emit and where to descend.
"""

import os
import stat
from pathlib import Path
from typing import Iterator, List, Optional, Tuple

from dirflatten.candidate_path import CandidatePath
from dirflatten.exceptions import EntryAccessError
from dirflatten.ignore_rules.loader import IgnoreRuleLoader
from dirflatten.ignore_rules.rule_set import IgnoreRuleSet
from dirflatten.path_matcher import PathMatcher
from dirflatten.selection_config import SelectionConfig
from dirflatten.tree_walker.permission_action import PermissionAction
from dirflatten.types import Decision, EntryType


class TreeWalker:
    """Depth-first walker producing the ordered sequence of selected files.

    Entries of every directory are visited in lexicographic order of their names, so two
    walks of an unchanged tree with the same configuration yield identical sequences.
    The ignore rules in effect are passed down the recursion as an immutable
    IgnoreRuleSet; each directory extends the set inherited from its parent without
    affecting its siblings.

    Excluded directories are pruned. The one exception is a directory with an explicit
    include somewhere beneath it: the walker still descends into it, but inside such a
    directory only explicitly included entries survive.

    Symbolic links are never followed and never emitted; only regular files are yielded.

    Permission Handling:
        Entries that cannot be read are handled according to ``permission_action``:
        - IGNORE (default): Record an EntryAccessError in ``errors`` and continue
        - RAISE: Raise the EntryAccessError immediately

    Attributes:
        config (SelectionConfig): Configuration of the run.
        permission_action (PermissionAction): How to handle unreadable entries.
        matcher (PathMatcher): Decides on each entry.
        errors (List[EntryAccessError]): Access errors recorded during the walk.

    Example:
        >>> walker = TreeWalker(SelectionConfig.create("src"))  # doctest: +SKIP
        >>> for candidate in walker.walk():  # doctest: +SKIP
        ...     print(candidate.relative_path)
        main.py
        utils/helpers.py
    """

    def __init__(
        self,
        config: SelectionConfig,
        permission_action: PermissionAction = PermissionAction.IGNORE,
        matcher: Optional[PathMatcher] = None,
        loader: Optional[IgnoreRuleLoader] = None,
    ) -> None:
        """Initialize a TreeWalker.

        Args:
            config: Validated configuration of the run.
            permission_action: How to handle unreadable entries. Defaults to IGNORE.
            matcher: Path matcher to consult. Defaults to one using the standard rule chain.
            loader: Ignore-file loader. Defaults to one reading ``.gitignore`` and ``.ignore``.
        """
        self.config = config
        self.permission_action = PermissionAction(permission_action)
        self.matcher = matcher if matcher is not None else PathMatcher()
        self.loader = loader if loader is not None else IgnoreRuleLoader(config.root)
        self.errors: List[EntryAccessError] = []
        self._walked = False

    def walk(self) -> Iterator[CandidatePath]:
        """Return a lazy iterator over the selected files.

        The root is validated before the iterator is returned, so configuration errors
        surface immediately rather than on the first ``next()``.

        Returns:
            Iterator of CandidatePath objects for regular files, in walk order.

        Raises:
            ConfigError: If the root does not exist or is not a readable directory.
            RuntimeError: If this walker has already been walked.
        """
        if self._walked:
            raise RuntimeError("Tree has already been walked")
        self.config.validate()
        self._walked = True
        return self._walk_directory(self.config.root, "", IgnoreRuleSet(), forced=False)

    def iterate_files(self) -> Iterator[Tuple[str, str]]:
        """Iterate over the selected files as ``(absolute_path, relative_path)`` pairs.

        Raises:
            ConfigError: If the root does not exist or is not a readable directory.
            RuntimeError: If this walker has already been walked.
        """
        candidates = self.walk()
        return ((str(candidate.absolute_path), candidate.relative_path) for candidate in candidates)

    def _walk_directory(
        self, directory: Path, relative_path: str, inherited_rules: IgnoreRuleSet, forced: bool
    ) -> Iterator[CandidatePath]:
        """Recursive helper for walk.

        Args:
            directory: Absolute path of the directory to list.
            relative_path: Root-relative path of the directory ("" for the root).
            inherited_rules: Ignore rules collected from the ancestors.
            forced: True when the directory itself was excluded and is only entered to
                reach explicit includes beneath it.
        """
        rules = self.loader.load_rules(directory, inherited_rules)

        try:
            names = sorted(os.listdir(directory))
        except OSError as e:
            self._handle_error(directory, e)
            return

        for name in names:
            child_path = directory / name
            child_relative_path = f"{relative_path}/{name}" if relative_path else name

            try:
                entry_type = self._entry_type(child_path)
            except OSError as e:
                self._handle_error(child_path, e)
                continue
            if entry_type is None:
                # Sockets, FIFOs and devices are never content
                continue

            candidate = CandidatePath(child_relative_path, child_path, entry_type)
            if forced and not self.config.is_included(child_relative_path):
                decision = Decision.EXCLUDE
            else:
                decision = self.matcher.evaluate(candidate, self.config, rules)

            if entry_type is EntryType.DIRECTORY:
                if decision is Decision.INCLUDE:
                    yield from self._walk_directory(child_path, child_relative_path, rules, forced=False)
                elif self.matcher.must_descend(candidate, self.config):
                    yield from self._walk_directory(child_path, child_relative_path, rules, forced=True)
            elif entry_type is EntryType.FILE and decision is Decision.INCLUDE:
                yield candidate

    def _entry_type(self, path: Path) -> Optional[EntryType]:
        """Classify an entry without following symlinks.

        Raises:
            OSError: If the entry cannot be stat'ed.
        """
        mode = os.lstat(path).st_mode
        if stat.S_ISLNK(mode):
            return EntryType.SYMLINK
        if stat.S_ISDIR(mode):
            return EntryType.DIRECTORY
        if stat.S_ISREG(mode):
            return EntryType.FILE
        return None

    def _handle_error(self, path: Path, error: OSError) -> None:
        access_error = EntryAccessError(str(path), error)
        if self.permission_action == PermissionAction.RAISE:
            raise access_error from error
        self.errors.append(access_error)
