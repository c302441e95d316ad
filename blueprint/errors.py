"""Exception hierarchy for the blueprint scaffolder.

Every error a command can surface to the user derives from
:class:`BlueprintError` so the CLI can catch them at a single boundary.
"""

from __future__ import annotations

from pathlib import Path


class BlueprintError(Exception):
    """Base class for user-facing scaffolder errors."""


class InvalidNameError(BlueprintError, ValueError):
    """Raised when an app or feature name is not a valid Dart identifier.

    Also a ``ValueError`` so Pydantic field validators report it as a regular
    validation failure.
    """


class ManifestError(BlueprintError):
    """Raised when ``blueprint.yaml`` is missing, unreadable, or malformed."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = Path(path)
        self.reason = reason
        super().__init__(
            f"{self.path}: {reason}. Run this command from the root of a generated project."
        )


class SharedConfigError(BlueprintError):
    """Raised when a shared configuration cannot be found, read, or parsed."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"{self.path}: {reason}")


class ResolutionError(BlueprintError):
    """Raised when merged template bundles declare the same output path.

    This is a bundle-authoring bug, never a user mistake.
    """

    def __init__(self, path: str, first_bundle: str, second_bundle: str) -> None:
        self.path = path
        self.first_bundle = first_bundle
        self.second_bundle = second_bundle
        super().__init__(
            f"Duplicate output path {path!r} declared by bundles "
            f"{first_bundle!r} and {second_bundle!r}"
        )


class TargetDirectoryError(BlueprintError):
    """Raised when the target directory exists and is not empty."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        super().__init__(
            f"Target directory {self.path} already exists and is not empty "
            "(pass --force to overwrite)"
        )


class GenerationError(BlueprintError):
    """Raised when writing a generated file fails.

    Files written before the failure are left on disk; ``written`` lists them.
    """

    def __init__(self, path: str, written: list[str], cause: OSError) -> None:
        self.path = path
        self.written = list(written)
        self.cause = cause
        super().__init__(
            f"Failed to write {path}: {cause.strerror or cause} "
            f"({len(self.written)} files written before the failure)"
        )
