from abc import ABC, abstractmethod
from typing import Optional

from dirflatten.candidate_path import CandidatePath
from dirflatten.ignore_rules.rule_set import IgnoreRuleSet
from dirflatten.selection_config import SelectionConfig
from dirflatten.types import Decision


class BaseSelectionRule(ABC):
    """
    Abstract base class for one step of the selection rule chain.

    Each step inspects a candidate path and either returns a Decision, which ends the
    evaluation, or returns None to let the next step decide. Steps must be pure: the
    result depends only on the candidate, the configuration and the ignore rules.

    Example:
        >>> from pathlib import Path
        >>> from dirflatten.types import EntryType
        >>> class TempFileRule(BaseSelectionRule):
        ...     def evaluate(self, candidate, config, ignore_rules):
        ...         return Decision.EXCLUDE if candidate.name.endswith(".tmp") else None
        >>> config = SelectionConfig(root=Path("/repo"))
        >>> rule = TempFileRule()
        >>> rule.evaluate(CandidatePath("a.tmp", Path("/repo/a.tmp")), config, IgnoreRuleSet())
        <Decision.EXCLUDE: 'exclude'>
        >>> print(rule.evaluate(CandidatePath("a.py", Path("/repo/a.py")), config, IgnoreRuleSet()))
        None
    """

    @abstractmethod
    def evaluate(
        self, candidate: CandidatePath, config: SelectionConfig, ignore_rules: IgnoreRuleSet
    ) -> Optional[Decision]:
        """
        Decide on a candidate path, or abstain.

        Args:
            candidate (CandidatePath): The entry being evaluated.
            config (SelectionConfig): The read-only configuration of the run.
            ignore_rules (IgnoreRuleSet): Ignore rules in effect for the candidate's directory.

        Returns:
            Optional[Decision]: The decision of this step, or None to defer to later steps.
        """
        pass

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"
