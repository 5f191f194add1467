"""Unit tests for the TreeWalker class."""

import os
from pathlib import Path
from unittest.mock import patch

import pytest

from dirflatten.exceptions import ConfigError, EntryAccessError
from dirflatten.path_matcher import PathMatcher
from dirflatten.selection_config import SelectionConfig
from dirflatten.selection_rules import RuleChain
from dirflatten.tree_walker import PermissionAction, TreeWalker
from dirflatten.types import Decision, EntryType

needs_permissions = pytest.mark.skipif(
    os.name == "nt" or os.geteuid() == 0, reason="Permission bits are not enforced"
)


def walk_paths(root, **config_kwargs):
    walker = TreeWalker(SelectionConfig.create(root, **config_kwargs))
    return [candidate.relative_path for candidate in walker.walk()]


@pytest.fixture
def project(tmp_path):
    """Create a small project tree with nested ignore files.

    Layout:
        .gitignore          (*.log, build/)
        README.md
        app.log
        build/out.o
        src/.ignore         (!debug.log, generated/)
        src/main.py
        src/debug.log
        src/generated/code.py
        src/utils/helpers.py
        src/utils/trace.log
    """
    (tmp_path / ".gitignore").write_text("*.log\nbuild/\n")
    (tmp_path / "README.md").write_text("# Project\n")
    (tmp_path / "app.log").write_text("log\n")
    (tmp_path / "build").mkdir()
    (tmp_path / "build" / "out.o").write_bytes(b"\x00\x01")
    src = tmp_path / "src"
    src.mkdir()
    (src / ".ignore").write_text("!debug.log\ngenerated/\n")
    (src / "main.py").write_text("print('hello')\n")
    (src / "debug.log").write_text("debug\n")
    (src / "generated").mkdir()
    (src / "generated" / "code.py").write_text("x = 1\n")
    (src / "utils").mkdir()
    (src / "utils" / "helpers.py").write_text("def helper(): pass\n")
    (src / "utils" / "trace.log").write_text("trace\n")
    return tmp_path


class TestReferenceTree:
    """Selections over the a.txt / .hidden.txt / sub/b.txt tree."""

    def test_default_config(self, sample_tree):
        assert walk_paths(sample_tree) == ["a.txt"]

    def test_allow_hidden(self, sample_tree):
        assert walk_paths(sample_tree, allow_hidden=True) == [".hidden.txt", "a.txt"]

    def test_include_overrides_ignore_file(self, sample_tree):
        assert walk_paths(sample_tree, includes=["sub/b.txt"]) == ["a.txt", "sub/b.txt"]

    def test_include_inside_excluded_directory(self, sample_tree):
        assert walk_paths(sample_tree, excludes=["sub"], includes=["sub/b.txt"]) == ["a.txt", "sub/b.txt"]

    def test_exclude_file(self, sample_tree):
        assert walk_paths(sample_tree, excludes=["a.txt"]) == []

    def test_include_control_file_by_name(self, sample_tree):
        assert walk_paths(sample_tree, includes=["sub/.gitignore"]) == ["a.txt", "sub/.gitignore"]


class TestNestedIgnoreFiles:
    """Ignore files accumulate down the tree and deeper rules win."""

    def test_default_selection(self, project):
        assert walk_paths(project) == ["README.md", "src/debug.log", "src/main.py", "src/utils/helpers.py"]

    def test_deeper_negation_does_not_leak_to_siblings(self, project):
        (project / "other").mkdir()
        (project / "other" / "debug.log").write_text("debug\n")
        assert "other/debug.log" not in walk_paths(project)
        assert "src/debug.log" in walk_paths(project)

    def test_ignored_directory_is_pruned(self, project):
        config = SelectionConfig.create(project)
        walker = TreeWalker(config)
        with patch("dirflatten.tree_walker.tree_walker.os.listdir", wraps=os.listdir) as listdir:
            list(walker.walk())
        listed = {Path(call.args[0]).name for call in listdir.call_args_list}
        assert "build" not in listed
        assert "generated" not in listed
        assert "utils" in listed

    def test_forced_descent_only_yields_includes(self, project):
        paths = walk_paths(project, includes=["build/out.o", "src/generated/code.py"])
        assert "build/out.o" in paths
        assert "src/generated/code.py" in paths

    def test_forced_descent_skips_non_included_siblings(self, project):
        (project / "build" / "other.o").write_bytes(b"\x02")
        paths = walk_paths(project, excludes=["build"], includes=["build/out.o"])
        assert "build/out.o" in paths
        assert "build/other.o" not in paths

    def test_include_directory_selects_its_contents(self, project):
        paths = walk_paths(project, includes=["build"])
        assert "build/out.o" in paths

    def test_exclude_directory(self, project):
        assert walk_paths(project, excludes=["src"]) == ["README.md"]

    def test_hidden_directory_pruned(self, project):
        (project / ".cache").mkdir()
        (project / ".cache" / "data.txt").write_text("cached\n")
        assert ".cache/data.txt" not in walk_paths(project)
        assert ".cache/data.txt" in walk_paths(project, allow_hidden=True)

    def test_negated_directory_rule_keeps_file_exclusions(self, tmp_path):
        (tmp_path / ".gitignore").write_text("*.log\n!logs/\n")
        (tmp_path / "logs").mkdir()
        (tmp_path / "logs" / "a.log").write_text("log\n")
        (tmp_path / "logs" / "a.txt").write_text("text\n")
        assert walk_paths(tmp_path) == ["logs/a.txt"]

    def test_whitelist_idiom(self, tmp_path):
        (tmp_path / ".gitignore").write_text("*\n!*/\n!*.txt\n")
        (tmp_path / "top.py").write_text("x = 1\n")
        (tmp_path / "sub").mkdir()
        (tmp_path / "sub" / "a.py").write_text("y = 2\n")
        (tmp_path / "sub" / "a.txt").write_text("text\n")
        assert walk_paths(tmp_path) == ["sub/a.txt"]


class TestWalkBehaviour:
    """General properties of the walk."""

    def test_deterministic_order(self, project):
        assert walk_paths(project) == walk_paths(project)

    def test_yields_candidate_paths(self, project):
        walker = TreeWalker(SelectionConfig.create(project))
        candidates = list(walker.walk())
        assert all(candidate.entry_type is EntryType.FILE for candidate in candidates)
        assert all(candidate.absolute_path.is_file() for candidate in candidates)
        assert candidates[0].absolute_path == Path(os.path.abspath(project)) / "README.md"

    def test_iterate_files(self, sample_tree):
        walker = TreeWalker(SelectionConfig.create(sample_tree))
        assert list(walker.iterate_files()) == [(str(Path(os.path.abspath(sample_tree)) / "a.txt"), "a.txt")]

    def test_empty_selection_is_not_an_error(self, tmp_path):
        assert walk_paths(tmp_path) == []

    def test_walk_is_lazy(self, project):
        walker = TreeWalker(SelectionConfig.create(project))
        with patch("dirflatten.tree_walker.tree_walker.os.listdir", wraps=os.listdir) as listdir:
            iterator = walker.walk()
            assert listdir.call_count == 0
            next(iterator)
            assert listdir.call_count == 1

    def test_walk_cannot_be_restarted(self, sample_tree):
        walker = TreeWalker(SelectionConfig.create(sample_tree))
        list(walker.walk())
        with pytest.raises(RuntimeError, match="already been walked"):
            walker.walk()

    def test_missing_root_raises_config_error_eagerly(self, tmp_path):
        root = tmp_path / "vanishing"
        root.mkdir()
        walker = TreeWalker(SelectionConfig.create(root))
        root.rmdir()
        with pytest.raises(ConfigError):
            walker.walk()

    def test_symlinks_are_not_followed(self, tmp_path):
        (tmp_path / "real.txt").write_text("real\n")
        (tmp_path / "target").mkdir()
        (tmp_path / "target" / "inner.txt").write_text("inner\n")
        (tmp_path / "link.txt").symlink_to(tmp_path / "real.txt")
        (tmp_path / "linkdir").symlink_to(tmp_path / "target", target_is_directory=True)

        assert walk_paths(tmp_path) == ["real.txt", "target/inner.txt"]

    def test_symlink_loop_terminates(self, tmp_path):
        (tmp_path / "a").mkdir()
        (tmp_path / "a" / "loop").symlink_to(tmp_path, target_is_directory=True)
        (tmp_path / "a" / "file.txt").write_text("x\n")
        assert walk_paths(tmp_path) == ["a/file.txt"]

    def test_custom_matcher(self, sample_tree):
        walker = TreeWalker(
            SelectionConfig.create(sample_tree), matcher=PathMatcher(RuleChain([], default=Decision.INCLUDE))
        )
        paths = [candidate.relative_path for candidate in walker.walk()]
        assert paths == [".hidden.txt", "a.txt", "sub/.gitignore", "sub/b.txt"]

    def test_permission_action_accepts_string(self, sample_tree):
        walker = TreeWalker(SelectionConfig.create(sample_tree), permission_action="raise")
        assert walker.permission_action is PermissionAction.RAISE


@needs_permissions
class TestPermissionHandling:
    """Unreadable directories are recorded or raised according to the permission action."""

    @pytest.fixture
    def locked_tree(self, tmp_path):
        (tmp_path / "a.txt").write_text("alpha\n")
        locked = tmp_path / "locked"
        locked.mkdir()
        (locked / "secret.txt").write_text("secret\n")
        (tmp_path / "z.txt").write_text("zulu\n")
        locked.chmod(0o000)
        yield tmp_path
        locked.chmod(0o755)

    def test_ignore_records_error_and_continues(self, locked_tree):
        walker = TreeWalker(SelectionConfig.create(locked_tree))
        paths = [candidate.relative_path for candidate in walker.walk()]

        assert paths == ["a.txt", "z.txt"]
        assert len(walker.errors) == 1
        assert isinstance(walker.errors[0], EntryAccessError)
        assert walker.errors[0].path.endswith("locked")

    def test_raise_propagates(self, locked_tree):
        walker = TreeWalker(SelectionConfig.create(locked_tree), permission_action=PermissionAction.RAISE)
        iterator = walker.walk()
        assert next(iterator).relative_path == "a.txt"
        with pytest.raises(EntryAccessError) as exc_info:
            next(iterator)
        assert isinstance(exc_info.value.cause, PermissionError)

    def test_excluded_unreadable_directory_is_never_listed(self, locked_tree):
        walker = TreeWalker(SelectionConfig.create(locked_tree, excludes=["locked"]))
        assert [candidate.relative_path for candidate in walker.walk()] == ["a.txt", "z.txt"]
        assert walker.errors == []
