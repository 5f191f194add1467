"""Rules for dot-files: the hidden-file policy and ignore control files."""

from typing import Optional

from dirflatten.candidate_path import CandidatePath
from dirflatten.ignore_rules.loader import IGNORE_FILE_NAMES
from dirflatten.ignore_rules.rule_set import IgnoreRuleSet
from dirflatten.selection_config import SelectionConfig
from dirflatten.types import Decision

from .base_rules import BaseSelectionRule


def is_hidden_name(name: str) -> bool:
    """Whether a single path segment names a hidden entry.

    Example:
        >>> is_hidden_name(".env"), is_hidden_name("env"), is_hidden_name(".."), is_hidden_name(".")
        (True, False, False, False)
    """
    return name.startswith(".") and name not in (".", "..")


class ControlFileRule(BaseSelectionRule):
    """Keeps ``.gitignore`` and ``.ignore`` files out of the output.

    Control files are excluded whatever the hidden-file policy says. Only an include
    entry naming the control file itself brings it back; including a directory does not
    include the control files inside it.
    """

    def evaluate(
        self, candidate: CandidatePath, config: SelectionConfig, ignore_rules: IgnoreRuleSet
    ) -> Optional[Decision]:
        if candidate.is_dir or candidate.name not in IGNORE_FILE_NAMES:
            return None
        if candidate.relative_path in config.includes:
            return Decision.INCLUDE
        return Decision.EXCLUDE


class HiddenFileRule(BaseSelectionRule):
    """Drops paths with a hidden segment unless ``config.allow_hidden`` is set."""

    def evaluate(
        self, candidate: CandidatePath, config: SelectionConfig, ignore_rules: IgnoreRuleSet
    ) -> Optional[Decision]:
        if config.allow_hidden:
            return None
        if any(is_hidden_name(part) for part in candidate.parts):
            return Decision.EXCLUDE
        return None
