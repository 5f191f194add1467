"""Unit tests for the PathMatcher."""

from pathlib import Path

import pytest

from dirflatten.candidate_path import CandidatePath
from dirflatten.ignore_rules.rule_set import IgnoreRule, IgnoreRuleSet
from dirflatten.path_matcher import PathMatcher, evaluate
from dirflatten.selection_config import SelectionConfig
from dirflatten.selection_rules import RuleChain
from dirflatten.types import Decision, EntryType

ROOT = Path("/repo")


@pytest.fixture
def matcher():
    return PathMatcher()


@pytest.fixture
def gitignore_rules():
    return IgnoreRuleSet([IgnoreRule.from_line("b.txt", base="sub")])


@pytest.mark.parametrize(
    "config_kwargs,path,expected",
    [
        ({}, "a.txt", Decision.INCLUDE),
        ({}, ".hidden.txt", Decision.EXCLUDE),
        ({}, "sub/b.txt", Decision.EXCLUDE),
        ({"allow_hidden": True}, ".hidden.txt", Decision.INCLUDE),
        ({"allow_hidden": True}, "sub/b.txt", Decision.EXCLUDE),
        ({"includes": ("sub/b.txt",)}, "sub/b.txt", Decision.INCLUDE),
        ({"excludes": ("a.txt",)}, "a.txt", Decision.EXCLUDE),
        ({"excludes": ("sub",), "includes": ("sub/b.txt",)}, "sub/b.txt", Decision.INCLUDE),
        ({}, "sub/.gitignore", Decision.EXCLUDE),
        ({"allow_hidden": True}, "sub/.gitignore", Decision.EXCLUDE),
        ({"includes": ("sub/.gitignore",)}, "sub/.gitignore", Decision.INCLUDE),
    ],
)
def test_precedence(matcher, gitignore_rules, config_kwargs, path, expected):
    config = SelectionConfig(root=ROOT, **config_kwargs)
    assert matcher.evaluate(path, config, gitignore_rules) is expected


def test_evaluate_is_deterministic(matcher, gitignore_rules):
    config = SelectionConfig(root=ROOT, includes=("sub/b.txt",))
    results = {matcher.evaluate("sub/b.txt", config, gitignore_rules) for _ in range(5)}
    assert results == {Decision.INCLUDE}


def test_evaluate_absolute_path(matcher):
    config = SelectionConfig(root=ROOT)
    assert matcher.evaluate("/repo/src/main.py", config) is Decision.INCLUDE
    assert matcher.evaluate("/repo/.env", config) is Decision.EXCLUDE


def test_paths_outside_root_are_excluded(matcher):
    config = SelectionConfig(root=ROOT, includes=("a.txt",))
    assert matcher.evaluate("../a.txt", config) is Decision.EXCLUDE
    assert matcher.evaluate("/other/a.txt", config) is Decision.EXCLUDE
    assert matcher.evaluate(".", config) is Decision.EXCLUDE


def test_evaluate_directory_flag(matcher):
    config = SelectionConfig(root=ROOT)
    rules = IgnoreRuleSet([IgnoreRule.from_line("build/")])
    assert matcher.evaluate("build", config, rules, is_dir=True) is Decision.EXCLUDE
    assert matcher.evaluate("build", config, rules) is Decision.INCLUDE


def test_evaluate_candidate_path_uses_its_entry_type(matcher):
    config = SelectionConfig(root=ROOT)
    rules = IgnoreRuleSet([IgnoreRule.from_line("build/")])
    directory = CandidatePath.for_path(ROOT, "build", EntryType.DIRECTORY)
    assert matcher.evaluate(directory, config, rules, is_dir=False) is Decision.EXCLUDE


def test_ignore_rules_default_to_empty(matcher):
    config = SelectionConfig(root=ROOT)
    assert matcher.evaluate("debug.log", config) is Decision.INCLUDE


def test_must_descend(matcher):
    config = SelectionConfig(root=ROOT, includes=("sub/deep/b.txt",), excludes=("sub",))
    assert matcher.must_descend("sub", config)
    assert matcher.must_descend(CandidatePath.for_path(ROOT, "sub/deep", EntryType.DIRECTORY), config)
    assert not matcher.must_descend("other", config)
    assert not matcher.must_descend("sub/deep/b.txt", config)
    assert not matcher.must_descend("../sub", config)


def test_custom_chain():
    matcher = PathMatcher(RuleChain([], default=Decision.EXCLUDE))
    assert matcher.evaluate("a.txt", SelectionConfig(root=ROOT)) is Decision.EXCLUDE


def test_module_level_evaluate(gitignore_rules):
    config = SelectionConfig(root=ROOT, excludes=("sub",), includes=("sub/b.txt",))
    assert evaluate("sub/b.txt", config, gitignore_rules) is Decision.INCLUDE
    assert evaluate("sub/c.txt", config, gitignore_rules) is Decision.EXCLUDE
    assert evaluate("a.txt", config, gitignore_rules) is Decision.INCLUDE
