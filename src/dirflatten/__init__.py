"""Directory flattening utilities.

This package walks a directory tree, selects files according to layered
include/exclude rules, hidden-file policy and ignore files, and concatenates
the selected files into a single annotated document.
"""

from importlib.metadata import PackageNotFoundError, version

# Expose the version for both programmatic use and CLI
try:
    __version__ = version("dirflatten")
except PackageNotFoundError:
    __version__ = "unknown"
