"""Bundle resolution.

Turns a :class:`~blueprint.config.BlueprintConfig` into one ordered,
collision-free list of file descriptors plus the merged pubspec
dependencies:

1. the base bundle for the chosen state management,
2. the preset bundle (its required features expanded into feature files),
3. every add-on bundle whose flag is set,
4. ``pubspec.yaml``, synthesised last from the merged dependencies.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field

from blueprint.config import BlueprintConfig, ProjectPreset, SecurityLevel
from blueprint.errors import ResolutionError
from blueprint.scaffolder.bundle import FileDescriptor, TemplateBundle
from blueprint.scaffolder.bundles import (
    VARIANT_BUNDLES,
    build_analytics_bundle,
    build_hive_bundle,
    build_pagination_bundle,
    build_preset_bundle,
    build_security_bundle,
)
from blueprint.scaffolder.features import build_feature_descriptors
from blueprint.scaffolder.templates import build_context, default_renderer

logger = logging.getLogger(__name__)

PUBSPEC_PATH = "pubspec.yaml"


@dataclass(frozen=True)
class ResolvedBundle:
    """The merged result of every bundle that applies to a configuration."""

    files: tuple[FileDescriptor, ...]
    dependencies: dict[str, str] = field(default_factory=dict)
    dev_dependencies: dict[str, str] = field(default_factory=dict)
    required_features: frozenset[str] = frozenset()
    bundle_names: tuple[str, ...] = ()

    def paths(self) -> list[str]:
        return [descriptor.path for descriptor in self.files]


class BundleResolver:
    """Selects and merges the bundles for a configuration.

    The resolver is stateless; one instance can resolve any number of
    configurations.
    """

    def __init__(self, log: logging.Logger | None = None) -> None:
        self.log = log or logger

    # -- Public API --------------------------------------------------------

    def resolve(
        self,
        config: BlueprintConfig,
        dependency_overrides: Mapping[str, str] | None = None,
        required_packages: Iterable[str] = (),
    ) -> ResolvedBundle:
        """Resolve *config* into a :class:`ResolvedBundle`.

        Args:
            config: The project configuration.
            dependency_overrides: Constraints that replace bundled ones for
                packages already selected (e.g. fetched latest versions).
                Packages not selected by any bundle are ignored.
            required_packages: Extra dependencies (from a shared config).
                Those no bundle declares are added with the ``any``
                constraint before overrides apply.

        Raises:
            ResolutionError: If two bundles declare the same output path.
        """
        return self._merge(
            config,
            self.select_bundles(config),
            dependency_overrides,
            tuple(required_packages),
        )

    def select_bundles(self, config: BlueprintConfig) -> list[TemplateBundle]:
        """Return the bundles that apply to *config*, in merge order."""
        bundles = [VARIANT_BUNDLES[config.state_management](config)]
        if config.preset != ProjectPreset.BLANK:
            bundles.append(build_preset_bundle(config.preset))
        if config.include_hive:
            bundles.append(build_hive_bundle(config))
        if config.include_pagination:
            bundles.append(build_pagination_bundle(config))
        if config.include_analytics:
            bundles.append(build_analytics_bundle(config))
        if config.security_level != SecurityLevel.NONE:
            bundles.append(build_security_bundle(config))
        return bundles

    def catalog(self, config: BlueprintConfig) -> ResolvedBundle:
        """Merge the variant and preset of *config* with every add-on.

        Add-ons are merged whether or not their flag is set, so the result is
        the widest set of paths this variant and preset can ever produce.
        Useful for collision checks.
        """
        bundles = [
            VARIANT_BUNDLES[config.state_management](None),
            build_hive_bundle(),
            build_pagination_bundle(),
            build_analytics_bundle(),
            build_security_bundle(),
        ]
        if config.preset != ProjectPreset.BLANK:
            bundles.insert(1, build_preset_bundle(config.preset))
        return self._merge(config, bundles, None)

    # -- Internal ----------------------------------------------------------

    def _merge(
        self,
        config: BlueprintConfig,
        bundles: Iterable[TemplateBundle],
        dependency_overrides: Mapping[str, str] | None,
        required_packages: tuple[str, ...] = (),
    ) -> ResolvedBundle:
        files: list[FileDescriptor] = []
        owners: dict[str, str] = {}
        dependencies: dict[str, str] = {}
        dev_dependencies: dict[str, str] = {}
        required_features: set[str] = set()
        names: list[str] = []

        def add(descriptor: FileDescriptor, bundle_name: str) -> None:
            if descriptor.path in owners:
                raise ResolutionError(descriptor.path, owners[descriptor.path], bundle_name)
            owners[descriptor.path] = bundle_name
            files.append(descriptor)

        for bundle in bundles:
            names.append(bundle.name)
            for descriptor in bundle.files:
                add(descriptor, bundle.name)
            # Remote data sources are gated by predicate, not selected here.
            for feature in sorted(bundle.required_features):
                for descriptor in build_feature_descriptors(
                    feature,
                    config.state_management,
                    include_api=None,
                ):
                    add(descriptor, bundle.name)
            dependencies.update(bundle.dependencies)
            dev_dependencies.update(bundle.dev_dependencies)
            required_features.update(bundle.required_features)

        for package in required_packages:
            if package not in dependencies and package not in dev_dependencies:
                dependencies[package] = "any"

        if dependency_overrides:
            for name, constraint in dependency_overrides.items():
                if name in dependencies:
                    dependencies[name] = constraint
                elif name in dev_dependencies:
                    dev_dependencies[name] = constraint

        dependencies = dict(sorted(dependencies.items()))
        dev_dependencies = dict(sorted(dev_dependencies.items()))
        add(FileDescriptor(PUBSPEC_PATH, _pubspec_builder(dependencies, dev_dependencies)), "pubspec")

        self.log.debug(
            "Resolved %d descriptors from bundles %s",
            len(files),
            ", ".join(names),
        )
        return ResolvedBundle(
            files=tuple(files),
            dependencies=dependencies,
            dev_dependencies=dev_dependencies,
            required_features=frozenset(required_features),
            bundle_names=tuple(names),
        )


def _pubspec_builder(dependencies: dict[str, str], dev_dependencies: dict[str, str]):
    deps = list(dependencies.items())
    dev_deps = list(dev_dependencies.items())

    def build(config: BlueprintConfig) -> str:
        return default_renderer().render(
            "project/pubspec.yaml.j2",
            build_context(config, dependencies=deps, dev_dependencies=dev_deps),
        )

    return build
