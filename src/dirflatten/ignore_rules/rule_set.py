"""Parsed ignore rules and the persistent rule set inherited down a directory tree."""

import posixpath
from dataclasses import dataclass, field
from typing import Iterable, Iterator, Optional, Tuple

from pathspec.patterns import GitWildMatchPattern  # type: ignore
from pathspec.patterns.gitwildmatch import _DIR_MARK  # type: ignore


@dataclass(frozen=True)
class IgnoreRule:
    """A single pattern line from a ``.gitignore`` or ``.ignore`` file.

    Patterns are interpreted relative to the directory that declared them, using the same
    wildmatch semantics as Git (via the pathspec library).

    Attributes:
        text (str): The pattern as written in the ignore file.
        base (str): Root-relative POSIX path of the declaring directory ("" for the root).
        source (str): Path of the ignore file the rule came from.
        line_number (int): 1-based line number within ``source``.
        pattern (GitWildMatchPattern): Compiled pattern, built from ``text`` when omitted.

    Example:
        >>> rule = IgnoreRule.from_line("build/", base="pkg")
        >>> rule.directory_only, rule.negated
        (True, False)
        >>> rule.matches("pkg/build", is_dir=True)
        True
        >>> rule.matches("pkg/build/out.o")
        False
        >>> rule.matches("build", is_dir=True)
        False
    """

    text: str
    base: str = ""
    source: str = "<memory>"
    line_number: int = 0
    pattern: GitWildMatchPattern = field(default=None, compare=False, repr=False)

    def __post_init__(self) -> None:
        if self.pattern is None:
            object.__setattr__(self, "pattern", GitWildMatchPattern(self.text))

    @classmethod
    def from_line(cls, line: str, base: str = "", source: str = "<memory>", line_number: int = 0) -> "IgnoreRule":
        """Compile a single ignore-file line.

        Raises:
            ValueError: If pathspec rejects the pattern.
        """
        return cls(text=line, base=base, source=source, line_number=line_number, pattern=GitWildMatchPattern(line))

    @property
    def negated(self) -> bool:
        """True for ``!pattern`` rules, which re-include matching paths."""
        return self.pattern.include is False

    @property
    def directory_only(self) -> bool:
        """True for patterns with a trailing ``/``, which only match directories."""
        return self.text.rstrip().endswith("/")

    def matches(self, relative_path: str, is_dir: bool = False) -> bool:
        """Check whether the rule matches a root-relative path itself.

        Only the path is matched, never its descendants: ``!logs/`` re-includes the
        ``logs`` directory but says nothing about ``logs/debug.log``. Exclusion of a
        directory's contents is decided by :meth:`IgnoreRuleSet.excludes`.

        Args:
            relative_path: POSIX path relative to the walk root.
            is_dir: Whether the path names a directory. Directory-only patterns never
                match a file.

        Returns:
            bool: True if the pattern matches, whether or not the rule is negated.
        """
        if self.base:
            prefix = self.base + "/"
            if not relative_path.startswith(prefix):
                return False
            relative_path = relative_path[len(prefix) :]

        if not relative_path or self.pattern.regex is None:
            return False

        candidate = relative_path + "/" if is_dir else relative_path
        match = self.pattern.regex.match(candidate)
        if match is None:
            return False
        # pathspec marks the separator after a matched directory; anything past it is a descendant
        if match.groupdict().get(_DIR_MARK) is not None:
            return match.end(_DIR_MARK) == len(candidate)
        # Patterns such as "build/**" match beneath a directory but not the directory itself
        return not is_dir or self.pattern.regex.match(relative_path) is not None


class IgnoreRuleSet:
    """Ordered, immutable collection of ignore rules.

    Rules are stored in precedence order: rules from ancestor directories first, rules
    from deeper directories after them, and within one file in declaration order. The
    last rule that matches a path decides; a negated rule therefore re-includes a path
    excluded by any earlier rule.

    :meth:`extend` returns a new set and never modifies the receiver, so sibling
    directories can each extend the set inherited from their parent independently.

    Example:
        >>> root_rules = IgnoreRuleSet([IgnoreRule.from_line("*.log")])
        >>> sub_rules = root_rules.extend([IgnoreRule.from_line("!keep.log", base="sub")])
        >>> root_rules.excludes("sub/keep.log"), sub_rules.excludes("sub/keep.log")
        (True, False)
        >>> len(root_rules), len(sub_rules)
        (1, 2)
    """

    __slots__ = ("_rules",)

    def __init__(self, rules: Iterable[IgnoreRule] = ()) -> None:
        self._rules: Tuple[IgnoreRule, ...] = tuple(rules)

    @property
    def rules(self) -> Tuple[IgnoreRule, ...]:
        return self._rules

    def extend(self, rules: Iterable[IgnoreRule]) -> "IgnoreRuleSet":
        """Return a new set with ``rules`` appended at the highest precedence."""
        rules = tuple(rules)
        if not rules:
            return self
        return IgnoreRuleSet(self._rules + rules)

    def match(self, relative_path: str, is_dir: bool = False) -> Optional[IgnoreRule]:
        """Return the highest-precedence rule matching the path, if any."""
        for rule in reversed(self._rules):
            if rule.matches(relative_path, is_dir):
                return rule
        return None

    def excludes(self, relative_path: str, is_dir: bool = False) -> bool:
        """Whether the path is ignored.

        As in Git, a path inside an ignored directory is ignored, and no rule can
        re-include it. Otherwise the deciding rule for the path itself must be a
        non-negated one.

        Example:
            >>> rules = IgnoreRuleSet([IgnoreRule("*.log"), IgnoreRule("!logs/")])
            >>> rules.excludes("logs", is_dir=True), rules.excludes("logs/a.log")
            (False, True)
        """
        parent = posixpath.dirname(relative_path)
        if parent and self.excludes(parent, is_dir=True):
            return True
        rule = self.match(relative_path, is_dir)
        return rule is not None and not rule.negated

    def __len__(self) -> int:
        return len(self._rules)

    def __iter__(self) -> Iterator[IgnoreRule]:
        return iter(self._rules)

    def __repr__(self) -> str:
        return f"IgnoreRuleSet({len(self._rules)} rules)"
