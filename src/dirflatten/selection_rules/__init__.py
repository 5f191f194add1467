"""Ordered selection rules that decide whether a path is included or excluded."""

from .base_rules import BaseSelectionRule
from .hidden_rules import ControlFileRule, HiddenFileRule
from .ignore_file_rules import IgnoreFileRule
from .path_rules import ExplicitExcludeRule, ExplicitIncludeRule
from .rule_chain import RuleChain, default_rule_chain

__all__ = [
    "BaseSelectionRule",
    "ControlFileRule",
    "ExplicitExcludeRule",
    "ExplicitIncludeRule",
    "HiddenFileRule",
    "IgnoreFileRule",
    "RuleChain",
    "default_rule_chain",
]
