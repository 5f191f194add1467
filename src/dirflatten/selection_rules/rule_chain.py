"""Ordered chain of selection rules evaluated with short-circuit semantics."""

from typing import List, Optional, Sequence

from dirflatten.candidate_path import CandidatePath
from dirflatten.ignore_rules.rule_set import IgnoreRuleSet
from dirflatten.selection_config import SelectionConfig
from dirflatten.types import Decision

from .base_rules import BaseSelectionRule
from .hidden_rules import ControlFileRule, HiddenFileRule
from .ignore_file_rules import IgnoreFileRule
from .path_rules import ExplicitExcludeRule, ExplicitIncludeRule


class RuleChain:
    """Ordered list of selection rules; the first rule that decides wins.

    Unlike a flat OR of exclusion rules, precedence here is positional: an earlier rule
    that returns INCLUDE stops later rules from excluding the path. When every rule
    abstains, the chain returns its default decision.

    Attributes:
        rules (List[BaseSelectionRule]): Steps in evaluation order.
        default (Decision): Decision returned when no step decides.

    Example:
        >>> from pathlib import Path
        >>> config = SelectionConfig(root=Path("/repo"), includes=("sub/b.txt",), excludes=("sub",))
        >>> chain = RuleChain([ExplicitIncludeRule(), ExplicitExcludeRule()])
        >>> chain.evaluate(CandidatePath("sub/b.txt", Path("/repo/sub/b.txt")), config, IgnoreRuleSet())
        <Decision.INCLUDE: 'include'>
        >>> chain.evaluate(CandidatePath("sub/c.txt", Path("/repo/sub/c.txt")), config, IgnoreRuleSet())
        <Decision.EXCLUDE: 'exclude'>
        >>> chain.evaluate(CandidatePath("a.txt", Path("/repo/a.txt")), config, IgnoreRuleSet())
        <Decision.INCLUDE: 'include'>
    """

    def __init__(self, rules: Sequence[BaseSelectionRule], default: Decision = Decision.INCLUDE):
        """Initialize the chain.

        Args:
            rules: Steps to evaluate, highest precedence first.
            default: Decision when every step abstains. Defaults to INCLUDE.

        Raises:
            TypeError: If any rule doesn't implement BaseSelectionRule.
        """
        for i, rule in enumerate(rules):
            if not isinstance(rule, BaseSelectionRule):
                raise TypeError(f"Rule at index {i} must implement BaseSelectionRule, " f"got {type(rule)}")

        self.rules: List[BaseSelectionRule] = list(rules)
        self.default = default

    def decide(
        self, candidate: CandidatePath, config: SelectionConfig, ignore_rules: IgnoreRuleSet
    ) -> Optional[Decision]:
        """Return the first decision made by a step, or None if all steps abstain."""
        for rule in self.rules:
            decision = rule.evaluate(candidate, config, ignore_rules)
            if decision is not None:
                return decision
        return None

    def evaluate(self, candidate: CandidatePath, config: SelectionConfig, ignore_rules: IgnoreRuleSet) -> Decision:
        """Evaluate the chain, falling back to the default decision."""
        decision = self.decide(candidate, config, ignore_rules)
        return self.default if decision is None else decision

    def insert_rule(self, index: int, rule: BaseSelectionRule) -> "RuleChain":
        """Return a new chain with ``rule`` inserted at ``index``.

        Raises:
            TypeError: If rule doesn't implement BaseSelectionRule.
        """
        if not isinstance(rule, BaseSelectionRule):
            raise TypeError(f"Rule must implement BaseSelectionRule, got {type(rule)}")
        rules = list(self.rules)
        rules.insert(index, rule)
        return RuleChain(rules, self.default)

    def __len__(self) -> int:
        return len(self.rules)

    def __repr__(self) -> str:
        return f"RuleChain({self.rules!r}, default={self.default})"


def default_rule_chain() -> RuleChain:
    """Build the standard precedence chain.

    Order: control files, explicit includes, explicit excludes, hidden-file policy,
    ignore-file rules, then the default of INCLUDE.
    """
    return RuleChain(
        [
            ControlFileRule(),
            ExplicitIncludeRule(),
            ExplicitExcludeRule(),
            HiddenFileRule(),
            IgnoreFileRule(),
        ]
    )
