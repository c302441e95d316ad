"""Built-in template bundles."""

from collections.abc import Callable

from blueprint.config import BlueprintConfig, StateManagement
from blueprint.scaffolder.bundle import TemplateBundle
from blueprint.scaffolder.bundles.addons import (
    build_analytics_bundle,
    build_hive_bundle,
    build_pagination_bundle,
    build_security_bundle,
)
from blueprint.scaffolder.bundles.bloc import build_bloc_bundle
from blueprint.scaffolder.bundles.presets import PRESETS, build_preset_bundle, preset_definition
from blueprint.scaffolder.bundles.provider import build_provider_bundle
from blueprint.scaffolder.bundles.riverpod import build_riverpod_bundle

BundleBuilder = Callable[[BlueprintConfig | None], TemplateBundle]

VARIANT_BUNDLES: dict[StateManagement, BundleBuilder] = {
    StateManagement.PROVIDER: build_provider_bundle,
    StateManagement.RIVERPOD: build_riverpod_bundle,
    StateManagement.BLOC: build_bloc_bundle,
}

__all__ = [
    "PRESETS",
    "VARIANT_BUNDLES",
    "build_analytics_bundle",
    "build_bloc_bundle",
    "build_hive_bundle",
    "build_pagination_bundle",
    "build_preset_bundle",
    "build_provider_bundle",
    "build_riverpod_bundle",
    "build_security_bundle",
    "preset_definition",
]
