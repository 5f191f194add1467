"""Code fence language names by file extension."""

from pathlib import PurePath

from dirflatten.types import PathType

PLAIN_TEXT = "plain text"

LANGUAGES_BY_EXTENSION = {
    "bash": "bourne again shell (bash)",
    "c": "c",
    "cc": "c++",
    "clj": "clojure",
    "cpp": "c++",
    "cs": "c#",
    "css": "css",
    "cxx": "c++",
    "d": "d",
    "diff": "diff",
    "erl": "erlang",
    "go": "go",
    "h": "c",
    "hpp": "c++",
    "hs": "haskell",
    "htm": "html",
    "html": "html",
    "java": "java",
    "js": "javascript",
    "json": "json",
    "jsx": "javascript",
    "kt": "kotlin",
    "lisp": "lisp",
    "lua": "lua",
    "m": "objective-c",
    "make": "makefile",
    "md": "markdown",
    "ml": "ocaml",
    "php": "php",
    "pl": "perl",
    "py": "python",
    "r": "r",
    "rb": "ruby",
    "rs": "rust",
    "scala": "scala",
    "sh": "bourne again shell (bash)",
    "sql": "sql",
    "swift": "swift",
    "tex": "latex",
    "toml": "toml",
    "ts": "typescript",
    "tsx": "typescript",
    "xml": "xml",
    "yaml": "yaml",
    "yml": "yaml",
}

LANGUAGES_BY_FILENAME = {
    "Makefile": "makefile",
    "makefile": "makefile",
    "GNUmakefile": "makefile",
}


def language_for(path: PathType) -> str:
    """Return the lowercase fence language for a file, ``plain text`` when unknown.

    Example:
        >>> language_for("src/main.rs")
        'rust'
        >>> language_for("notes.TXT")
        'plain text'
        >>> language_for("Makefile")
        'makefile'
    """
    pure = PurePath(path)
    if pure.name in LANGUAGES_BY_FILENAME:
        return LANGUAGES_BY_FILENAME[pure.name]
    extension = pure.suffix[1:].lower()
    return LANGUAGES_BY_EXTENSION.get(extension, PLAIN_TEXT)
