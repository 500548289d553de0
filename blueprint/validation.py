"""Input validation for names and paths.

Every validator returns the (normalised) value on success and raises
:class:`~blueprint.core.errors.ValidationError` with a descriptive message
otherwise. Validation never touches the filesystem.
"""

from __future__ import annotations

import posixpath
import re
from pathlib import PurePath

from blueprint.core.errors import ValidationError

MAX_APP_NAME_LENGTH = 64
MAX_PATH_LENGTH = 4096

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
    "dynamic", "void", "null", "never", "future", "stream",
})

# Creating a project directly inside one of these is refused.
CRITICAL_SYSTEM_DIRS: frozenset[str] = frozenset({
    "windows", "system32", "program files", "program files (x86)",
    "etc", "bin", "sbin", "usr", "sys", "proc",
})

_PACKAGE_NAME_RE = re.compile(r"^[a-z][a-z0-9_]*$")
_CONTROL_CHARS_RE = re.compile(r"[\x00-\x1f\x7f]")


def validate_package_name(
    name: str, max_length: int = MAX_APP_NAME_LENGTH, field: str = "App name"
) -> str:
    """Validate a Dart package name.

    Rules:
    - 1 to *max_length* characters
    - starts with a lowercase letter; only lowercase letters, digits and ``_``
    - does not end with ``_`` and has no ``__``
    - is not a Dart reserved word or built-in type
    """
    if not name:
        raise ValidationError(f"{field} cannot be empty", field=field)

    if len(name) > max_length:
        raise ValidationError(
            f"{field} must be {max_length} characters or less (got {len(name)})",
            field=field,
        )

    lower = name.lower()
    if lower in DART_RESERVED_WORDS:
        raise ValidationError(
            f'"{name}" is a Dart reserved word and cannot be used as {field}',
            field=field,
        )
    if lower in DART_BUILT_IN_TYPES:
        raise ValidationError(
            f'"{name}" is a Dart built-in type and cannot be used as {field}',
            field=field,
        )

    if not name[0].islower() or not name[0].isascii():
        raise ValidationError(f"{field} must start with a lowercase letter (a-z)", field=field)

    if not _PACKAGE_NAME_RE.match(name):
        raise ValidationError(
            f"{field} can only contain lowercase letters, numbers, and underscores",
            field=field,
        )

    if name.endswith("_"):
        raise ValidationError(f"{field} cannot end with an underscore", field=field)

    if "__" in name:
        raise ValidationError(f"{field} cannot contain consecutive underscores", field=field)

    return name


def validate_relative_path(path: str, field: str = "relative path") -> str:
    """Validate a path that must stay relative and inside its root.

    Returns the normalised POSIX form of *path*.
    """
    _check_common(path, field)

    posix = path.replace("\\", "/")
    if posix.startswith("/") or PurePath(path).is_absolute():
        raise ValidationError(f"{field} must be a relative path", field=field)

    normalized = posixpath.normpath(posix)
    if normalized == ".." or normalized.startswith("../") or "/../" in f"/{normalized}/":
        raise ValidationError(f"{field} contains path traversal sequence (..)", field=field)
    return normalized


def validate_target_directory(path: str) -> str:
    """Validate the directory a project is generated into.

    The path may be absolute. It must not be the filesystem root, must not
    contain ``..`` and must not sit inside a critical system directory.
    Returns the normalised path.
    """
    field = "target directory"
    _check_common(path, field)

    parts = PurePath(path).parts
    if ".." in parts:
        raise ValidationError(f"{field} contains path traversal sequence (..)", field=field)

    normalized = str(PurePath(path))
    pure = PurePath(normalized)
    if pure.is_absolute() and len(pure.parts) == 1:
        raise ValidationError("Cannot create project in root directory", field=field)

    lowered = {part.lower().strip("/\\") for part in pure.parts}
    for critical in sorted(CRITICAL_SYSTEM_DIRS):
        if critical in lowered:
            raise ValidationError(
                f"Cannot create project in system directory: {critical}", field=field
            )
    return normalized


def _check_common(path: str, field: str) -> None:
    if not path or not path.strip():
        raise ValidationError(f"{field} cannot be empty", field=field)
    if len(path) > MAX_PATH_LENGTH:
        raise ValidationError(
            f"{field} exceeds maximum length of {MAX_PATH_LENGTH} characters", field=field
        )
    if "\x00" in path:
        raise ValidationError(f"{field} contains null byte", field=field)
    if _CONTROL_CHARS_RE.search(path):
        raise ValidationError(f"{field} contains control characters", field=field)
