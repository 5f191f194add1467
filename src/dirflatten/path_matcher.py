"""Single-path selection decisions.

The PathMatcher evaluates one candidate path against the layered selection rules of a
run. Precedence, highest first: ignore control files, explicit includes, explicit
excludes, the hidden-file policy, ignore-file rules, and finally a default of include.
"""

from pathlib import Path
from typing import Optional, Union

from dirflatten.candidate_path import CandidatePath
from dirflatten.ignore_rules.rule_set import IgnoreRuleSet
from dirflatten.selection_config import SelectionConfig, normalize_fragment
from dirflatten.selection_rules.rule_chain import RuleChain, default_rule_chain
from dirflatten.types import Decision, EntryType, PathType


class PathMatcher:
    """Evaluates candidate paths against an ordered rule chain.

    The matcher holds no per-run state: the configuration and the ignore rules in effect
    are passed on every call, so the same matcher can serve any number of walks and the
    decision for a given (config, ignore rules, path) triple never changes.

    Attributes:
        chain (RuleChain): The ordered rules consulted for each decision.

    Example:
        >>> from pathlib import Path
        >>> from dirflatten.ignore_rules import IgnoreRule
        >>> config = SelectionConfig(root=Path("/repo"), includes=("build/keep.txt",))
        >>> rules = IgnoreRuleSet([IgnoreRule.from_line("build/")])
        >>> matcher = PathMatcher()
        >>> matcher.evaluate("build/out.o", config, rules)
        <Decision.EXCLUDE: 'exclude'>
        >>> matcher.evaluate("build/keep.txt", config, rules)
        <Decision.INCLUDE: 'include'>
        >>> matcher.evaluate(".env", config, rules)
        <Decision.EXCLUDE: 'exclude'>
    """

    def __init__(self, chain: Optional[RuleChain] = None) -> None:
        self.chain = chain if chain is not None else default_rule_chain()

    def evaluate(
        self,
        path: Union[CandidatePath, PathType],
        config: SelectionConfig,
        ignore_rules: Optional[IgnoreRuleSet] = None,
        *,
        is_dir: bool = False,
    ) -> Decision:
        """Decide whether a path is selected.

        Args:
            path: A CandidatePath, or a root-relative or absolute path beneath
                ``config.root``.
            config: Configuration of the run.
            ignore_rules: Ignore rules in effect for the path's directory. Defaults to none.
            is_dir: Whether a plain ``path`` names a directory. Ignored for CandidatePath
                inputs, which carry their own entry type.

        Returns:
            Decision: INCLUDE or EXCLUDE. Paths outside the root are always excluded.
        """
        candidate = self._as_candidate(path, config, is_dir)
        if candidate is None:
            return Decision.EXCLUDE
        if ignore_rules is None:
            ignore_rules = IgnoreRuleSet()
        return self.chain.evaluate(candidate, config, ignore_rules)

    def must_descend(self, path: Union[CandidatePath, PathType], config: SelectionConfig) -> bool:
        """Whether an explicit include lies strictly beneath the directory ``path``.

        The walker uses this to traverse into a directory it would otherwise prune so
        that an included descendant can still be reached.
        """
        candidate = self._as_candidate(path, config, True)
        if candidate is None:
            return False
        return config.has_include_below(candidate.relative_path)

    def _as_candidate(
        self, path: Union[CandidatePath, PathType], config: SelectionConfig, is_dir: bool
    ) -> Optional[CandidatePath]:
        if isinstance(path, CandidatePath):
            return path

        relative = normalize_fragment(path, config.root)
        if not relative:
            return None
        entry_type = EntryType.DIRECTORY if is_dir else EntryType.FILE
        return CandidatePath(relative, config.root.joinpath(*relative.split("/")), entry_type)


_default_matcher = PathMatcher()


def evaluate(
    path: Union[CandidatePath, PathType],
    config: SelectionConfig,
    ignore_rules: Optional[IgnoreRuleSet] = None,
    *,
    is_dir: bool = False,
) -> Decision:
    """Evaluate ``path`` with the default rule chain.

    Example:
        >>> config = SelectionConfig(root=Path("/repo"), excludes=("sub",), includes=("sub/b.txt",))
        >>> evaluate("sub/b.txt", config), evaluate("sub/c.txt", config)
        (<Decision.INCLUDE: 'include'>, <Decision.EXCLUDE: 'exclude'>)
    """
    return _default_matcher.evaluate(path, config, ignore_rules, is_dir=is_dir)
