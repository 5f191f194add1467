"""Ignore-file discovery and gitignore-style rule matching."""

from .loader import IGNORE_FILE_NAMES, IgnoreRuleLoader, load_rules, parse_ignore_lines
from .rule_set import IgnoreRule, IgnoreRuleSet

__all__ = [
    "IGNORE_FILE_NAMES",
    "IgnoreRule",
    "IgnoreRuleLoader",
    "IgnoreRuleSet",
    "load_rules",
    "parse_ignore_lines",
]
