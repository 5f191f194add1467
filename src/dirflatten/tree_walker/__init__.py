"""Deterministic directory traversal driven by the selection rules."""

from .permission_action import PermissionAction
from .tree_walker import TreeWalker

__all__ = ["PermissionAction", "TreeWalker"]
