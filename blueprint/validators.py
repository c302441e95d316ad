"""Input validation for names and paths.

Every check here runs before the scaffolder touches the file system, so a
rejected name or path never leaves partial output behind.
"""

from __future__ import annotations

import re
from pathlib import Path, PurePosixPath

from blueprint.errors import InvalidNameError

MAX_NAME_LENGTH = 64

DART_RESERVED_WORDS: frozenset[str] = frozenset({
    "abstract", "as", "assert", "async", "await", "break", "case", "catch",
    "class", "const", "continue", "covariant", "default", "deferred", "do",
    "dynamic", "else", "enum", "export", "extends", "extension", "external",
    "factory", "false", "final", "finally", "for", "function", "get", "hide",
    "if", "implements", "import", "in", "interface", "is", "late", "library",
    "mixin", "new", "null", "on", "operator", "part", "required", "rethrow",
    "return", "set", "show", "static", "super", "switch", "sync", "this",
    "throw", "true", "try", "typedef", "var", "void", "while", "with", "yield",
})

DART_BUILT_IN_TYPES: frozenset[str] = frozenset({
    "int", "double", "num", "bool", "string", "list", "map", "set", "object",
    "never", "future", "stream",
})

_IDENTIFIER_RE = re.compile(r"^[a-z][a-z0-9_]*$")


def validate_package_name(name: str, *, field_name: str = "name") -> str:
    """Validate a Dart package / feature identifier and return it unchanged.

    Rules:
        * 1-64 characters, starting with a lowercase letter.
        * Only lowercase letters, digits, and underscores.
        * No trailing underscore and no consecutive underscores.
        * Not a Dart reserved word or built-in type name.

    Raises:
        InvalidNameError: If any rule is violated.
    """
    if not name:
        raise InvalidNameError(f"{field_name} cannot be empty")
    if len(name) > MAX_NAME_LENGTH:
        raise InvalidNameError(
            f"{field_name} must be {MAX_NAME_LENGTH} characters or less (got {len(name)})"
        )
    lowered = name.lower()
    if lowered in DART_RESERVED_WORDS:
        raise InvalidNameError(f"{name!r} is a Dart reserved word and cannot be used as {field_name}")
    if lowered in DART_BUILT_IN_TYPES:
        raise InvalidNameError(f"{name!r} is a Dart built-in type and cannot be used as {field_name}")
    if not _IDENTIFIER_RE.match(name):
        raise InvalidNameError(
            f"{field_name} must start with a lowercase letter and contain only "
            "lowercase letters, digits, and underscores (e.g. user_profile)"
        )
    if name.endswith("_"):
        raise InvalidNameError(f"{field_name} cannot end with an underscore")
    if "__" in name:
        raise InvalidNameError(f"{field_name} cannot contain consecutive underscores")
    return name


def validate_feature_name(name: str) -> str:
    """Validate a feature name passed to ``add feature``."""
    return validate_package_name(name, field_name="feature name")


def validate_relative_path(path: str) -> str:
    """Validate a template output path.

    Output paths are posix-style, relative, and may not escape the project
    root.  Raises ``ValueError`` (a template authoring bug, not user input).
    """
    if not path:
        raise ValueError("output path cannot be empty")
    if "\\" in path or "\x00" in path:
        raise ValueError(f"output path {path!r} must be a posix path")
    if path.startswith("/"):
        raise ValueError(f"output path {path!r} must be relative")
    parts = PurePosixPath(path).parts
    if ".." in parts or "." in path.split("/"):
        raise ValueError(f"output path {path!r} may not contain '.' or '..' segments")
    if path.endswith("/"):
        raise ValueError(f"output path {path!r} must name a file")
    return path


def is_empty_or_missing(directory: Path) -> bool:
    """Return ``True`` if *directory* does not exist or has no entries."""
    if not directory.exists():
        return True
    if not directory.is_dir():
        return False
    return next(directory.iterdir(), None) is None
