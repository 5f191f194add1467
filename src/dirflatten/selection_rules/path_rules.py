"""Explicit include and exclude rules given on the command line."""

from typing import Optional

from dirflatten.candidate_path import CandidatePath
from dirflatten.ignore_rules.rule_set import IgnoreRuleSet
from dirflatten.selection_config import SelectionConfig
from dirflatten.types import Decision

from .base_rules import BaseSelectionRule


class ExplicitIncludeRule(BaseSelectionRule):
    """Selects any path equal to, or beneath, an entry of ``config.includes``.

    This is the highest-precedence content rule: it overrides explicit excludes, the
    hidden-file policy and ignore files.
    """

    def evaluate(
        self, candidate: CandidatePath, config: SelectionConfig, ignore_rules: IgnoreRuleSet
    ) -> Optional[Decision]:
        if config.is_included(candidate.relative_path):
            return Decision.INCLUDE
        return None


class ExplicitExcludeRule(BaseSelectionRule):
    """Drops any path equal to, or beneath, an entry of ``config.excludes``."""

    def evaluate(
        self, candidate: CandidatePath, config: SelectionConfig, ignore_rules: IgnoreRuleSet
    ) -> Optional[Decision]:
        if config.is_excluded(candidate.relative_path):
            return Decision.EXCLUDE
        return None
