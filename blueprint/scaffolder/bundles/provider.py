"""Provider (ChangeNotifier) base bundle."""

from __future__ import annotations

from blueprint.config import BlueprintConfig
from blueprint.scaffolder.bundle import FileDescriptor, TemplateBundle
from blueprint.scaffolder.bundles.base import build_variant_bundle
from blueprint.scaffolder.templates import template

DEPENDENCIES: dict[str, str] = {
    "provider": "^6.1.1",
}


def build_provider_bundle(config: BlueprintConfig | None = None) -> TemplateBundle:
    """Core files plus the Provider app shell and home-feature notifier."""
    files = [
        FileDescriptor("lib/main.dart", template("provider/main.dart.j2")),
        FileDescriptor("lib/app/app.dart", template("provider/app.dart.j2")),
        FileDescriptor("lib/core/providers/app_providers.dart", template("provider/app_providers.dart.j2")),
        FileDescriptor(
            "lib/features/home/presentation/provider/home_provider.dart",
            template("provider/home_provider.dart.j2"),
        ),
    ]
    return build_variant_bundle("provider", files, config, DEPENDENCIES)
