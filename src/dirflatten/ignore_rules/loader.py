"""Discovery and parsing of ``.gitignore`` and ``.ignore`` files."""

import os
import warnings
from pathlib import Path
from typing import Iterable, List, Optional, Sequence

from dirflatten.exceptions import IgnoreParseWarning
from dirflatten.types import PathType

from .rule_set import IgnoreRule, IgnoreRuleSet

# Later names take precedence over earlier ones within the same directory
IGNORE_FILE_NAMES = (".gitignore", ".ignore")


def parse_ignore_lines(lines: Iterable[str], base: str = "", source: str = "<memory>") -> List[IgnoreRule]:
    """Parse ignore-file lines into rules.

    Blank lines and ``#`` comments produce no rules. Lines that pathspec rejects are
    skipped with an :class:`IgnoreParseWarning`; the remaining lines still apply.

    Args:
        lines: Raw lines of an ignore file.
        base: Root-relative POSIX path of the directory the file lives in.
        source: Name of the file, used in warnings and on the resulting rules.

    Returns:
        The parsed rules in declaration order.

    Example:
        >>> rules = parse_ignore_lines(["# build output", "", "dist/", "!dist/keep.txt"])
        >>> [(rule.text, rule.negated) for rule in rules]
        [('dist/', False), ('!dist/keep.txt', True)]
    """
    rules = []
    for line_number, raw_line in enumerate(lines, start=1):
        line = raw_line.rstrip("\r\n")
        if not line.strip() or line.startswith("#"):
            continue
        try:
            rule = IgnoreRule.from_line(line, base=base, source=source, line_number=line_number)
        except ValueError as e:
            warnings.warn(IgnoreParseWarning(source, line_number, line, str(e)), stacklevel=2)
            continue
        # pathspec compiles some lines (e.g. escaped whitespace only) to no-op patterns
        if rule.pattern.include is None:
            continue
        rules.append(rule)
    return rules


class IgnoreRuleLoader:
    """Loads the ignore files of one directory and appends them to an inherited rule set.

    Attributes:
        root (Path): Root of the walk; rule bases are expressed relative to it.
        file_names (Sequence[str]): Ignore file names, lowest precedence first.

    Example:
        >>> import tempfile
        >>> from pathlib import Path
        >>> with tempfile.TemporaryDirectory() as tmp:
        ...     root = Path(tmp)
        ...     (root / "sub").mkdir()
        ...     _ = (root / ".gitignore").write_text("*.log\\n")
        ...     _ = (root / "sub" / ".ignore").write_text("!debug.log\\n")
        ...     loader = IgnoreRuleLoader(root)
        ...     top = loader.load_rules(root)
        ...     sub = loader.load_rules(root / "sub", top)
        ...     top.excludes("sub/debug.log"), sub.excludes("sub/debug.log")
        (True, False)
    """

    def __init__(self, root: PathType, file_names: Sequence[str] = IGNORE_FILE_NAMES) -> None:
        self.root = Path(root)
        self.file_names = tuple(file_names)

    def load_rules(self, directory: PathType, inherited_rules: Optional[IgnoreRuleSet] = None) -> IgnoreRuleSet:
        """Extend ``inherited_rules`` with the rules declared in ``directory``.

        Missing ignore files contribute no rules. An ignore file that cannot be read is
        reported with an :class:`IgnoreParseWarning` and contributes no rules.

        Args:
            directory: Directory whose own ignore files should be read.
            inherited_rules: Rules collected from the ancestors of ``directory``.

        Returns:
            A new rule set; ``inherited_rules`` is left untouched.
        """
        if inherited_rules is None:
            inherited_rules = IgnoreRuleSet()

        directory = Path(directory)
        base = self._relative_base(directory)

        new_rules: List[IgnoreRule] = []
        for name in self.file_names:
            rules_file = directory / name
            if not os.path.isfile(rules_file):
                continue
            try:
                content = rules_file.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as e:
                warnings.warn(IgnoreParseWarning(str(rules_file), 0, "", f"unreadable file: {e}"), stacklevel=2)
                continue
            new_rules.extend(parse_ignore_lines(content.splitlines(), base=base, source=str(rules_file)))

        return inherited_rules.extend(new_rules)

    def _relative_base(self, directory: Path) -> str:
        try:
            relative = directory.relative_to(self.root).as_posix()
        except ValueError:
            return ""
        return "" if relative == "." else relative


def load_rules(
    directory: PathType, inherited_rules: Optional[IgnoreRuleSet] = None, root: Optional[PathType] = None
) -> IgnoreRuleSet:
    """Load the ignore files of ``directory`` on top of ``inherited_rules``.

    Convenience wrapper around :class:`IgnoreRuleLoader`. When ``root`` is omitted the
    directory itself is treated as the root.
    """
    return IgnoreRuleLoader(root if root is not None else directory).load_rules(directory, inherited_rules)
