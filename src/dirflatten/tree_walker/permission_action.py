"""Permission action enum for handling access errors during directory traversal."""

from enum import Enum


class PermissionAction(str, Enum):
    """Action to take when an entry cannot be read during traversal.

    Values:
        IGNORE: Record the error, treat the entry as excluded and continue (default behavior)
        RAISE: Raise an EntryAccessError immediately
    """

    IGNORE = "ignore"
    RAISE = "raise"
