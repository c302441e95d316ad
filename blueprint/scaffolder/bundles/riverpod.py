"""Riverpod base bundle."""

from __future__ import annotations

from blueprint.config import BlueprintConfig
from blueprint.scaffolder.bundle import FileDescriptor, TemplateBundle
from blueprint.scaffolder.bundles.base import build_variant_bundle
from blueprint.scaffolder.templates import template

DEPENDENCIES: dict[str, str] = {
    "flutter_riverpod": "^2.4.9",
}


def build_riverpod_bundle(config: BlueprintConfig | None = None) -> TemplateBundle:
    """Core files plus a ``ProviderScope`` shell and global providers."""
    files = [
        FileDescriptor("lib/main.dart", template("riverpod/main.dart.j2")),
        FileDescriptor("lib/app/app.dart", template("riverpod/app.dart.j2")),
        FileDescriptor("lib/core/providers/core_providers.dart", template("riverpod/core_providers.dart.j2")),
        FileDescriptor(
            "lib/features/home/presentation/providers/home_providers.dart",
            template("riverpod/home_providers.dart.j2"),
        ),
    ]
    return build_variant_bundle("riverpod", files, config, DEPENDENCIES)
