"""File descriptors and template bundles.

A :class:`FileDescriptor` says *where* a file goes, *how* to build its content
and *whether* it applies to a given configuration.  A :class:`TemplateBundle`
is a named, immutable group of descriptors together with the pubspec
dependencies those files need.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field

from blueprint.config import BlueprintConfig, SecurityLevel
from blueprint.validators import validate_relative_path

ContentBuilder = Callable[[BlueprintConfig], str]
Predicate = Callable[[BlueprintConfig], bool]


@dataclass(frozen=True)
class FileDescriptor:
    """One generated file.

    Attributes:
        path: Posix path relative to the project root.
        build: Pure function of the configuration returning the file content.
        should_generate: Optional predicate; ``None`` means always generate.
        security_level: Minimum security level the file belongs to, if any.
    """

    path: str
    build: ContentBuilder
    should_generate: Predicate | None = None
    security_level: SecurityLevel | None = None

    def __post_init__(self) -> None:
        validate_relative_path(self.path)

    def should_include(self, config: BlueprintConfig) -> bool:
        if self.security_level is not None and config.security_level < self.security_level:
            return False
        if self.should_generate is None:
            return True
        return bool(self.should_generate(config))


@dataclass(frozen=True)
class TemplateBundle:
    """A named group of descriptors plus their package requirements."""

    name: str
    files: tuple[FileDescriptor, ...] = ()
    dependencies: Mapping[str, str] = field(default_factory=dict)
    dev_dependencies: Mapping[str, str] = field(default_factory=dict)
    required_features: frozenset[str] = frozenset()

    def paths(self) -> list[str]:
        return [descriptor.path for descriptor in self.files]
