from typing import Optional

from dirflatten.candidate_path import CandidatePath
from dirflatten.ignore_rules.rule_set import IgnoreRuleSet
from dirflatten.selection_config import SelectionConfig
from dirflatten.types import Decision

from .base_rules import BaseSelectionRule


class IgnoreFileRule(BaseSelectionRule):
    """Applies ``.gitignore``/``.ignore`` rules with last-match-wins precedence.

    A matching non-negated rule excludes the candidate. A matching negated rule only
    cancels earlier exclusions, so the candidate falls through to the next step.
    """

    def evaluate(
        self, candidate: CandidatePath, config: SelectionConfig, ignore_rules: IgnoreRuleSet
    ) -> Optional[Decision]:
        if ignore_rules.excludes(candidate.relative_path, is_dir=candidate.is_dir):
            return Decision.EXCLUDE
        return None
