"""Shared core descriptors used by every state-management bundle.

The core covers the networking layer, error types, logging, storage,
validators, reusable widgets, routing, theming, localization, environment
loading, tests, CI files, platform helpers and the project manifest.  The
variant bundles in :mod:`provider`, :mod:`riverpod` and :mod:`bloc` add their
own app shell and home-feature state on top.
"""

from __future__ import annotations

from blueprint.config import BlueprintConfig, CIProvider, TargetPlatform
from blueprint.manifest import dump_manifest
from blueprint.scaffolder.bundle import FileDescriptor, Predicate, TemplateBundle
from blueprint.scaffolder.bundles.presets import preset_definition
from blueprint.scaffolder.templates import build_context, default_renderer, template

CORE_DEPENDENCIES: dict[str, str] = {
    "flutter_secure_storage": "^9.0.0",
    "logger": "^2.0.2",
    "shared_preferences": "^2.2.2",
}

CORE_DEV_DEPENDENCIES: dict[str, str] = {
    "flutter_lints": "^3.0.1",
}

# (dependency, constraint, predicate); selected per configuration.
OPTIONAL_DEPENDENCIES: tuple[tuple[str, str, Predicate], ...] = (
    ("dio", "^5.4.0", lambda c: c.include_api),
    ("flutter_dotenv", "^5.1.0", lambda c: c.include_env),
    ("intl", "^0.19.0", lambda c: c.include_localization),
    ("window_manager", "^0.3.9", lambda c: c.has_platform(TargetPlatform.DESKTOP)),
)

OPTIONAL_DEV_DEPENDENCIES: tuple[tuple[str, str, Predicate], ...] = (
    ("mocktail", "^1.0.3", lambda c: c.include_tests),
)


# ---------------------------------------------------------------------------
# Predicates
# ---------------------------------------------------------------------------


def _env(config: BlueprintConfig) -> bool:
    return config.include_env


def _api(config: BlueprintConfig) -> bool:
    return config.include_api


def _theme(config: BlueprintConfig) -> bool:
    return config.include_theme


def _localization(config: BlueprintConfig) -> bool:
    return config.include_localization


def _tests(config: BlueprintConfig) -> bool:
    return config.include_tests


def _beyond_mobile(config: BlueprintConfig) -> bool:
    return config.platforms != (TargetPlatform.MOBILE,)


def _ci(provider: CIProvider) -> Predicate:
    return lambda config: config.ci_provider == provider


def _platform(platform: TargetPlatform) -> Predicate:
    return lambda config: config.has_platform(platform)


# ---------------------------------------------------------------------------
# Builders that need more than a static template context
# ---------------------------------------------------------------------------


def _build_router(config: BlueprintConfig) -> str:
    features = preset_definition(config.preset).features
    return default_renderer().render(
        "core/app_router.dart.j2",
        build_context(config, features=list(features)),
    )


def _build_manifest(config: BlueprintConfig) -> str:
    return dump_manifest(config)


# ---------------------------------------------------------------------------
# Core descriptors
# ---------------------------------------------------------------------------


def core_descriptors() -> list[FileDescriptor]:
    """Descriptors shared by every variant, in generation order."""

    def core(path: str, tpl: str, when: Predicate | None = None, **extra: object) -> FileDescriptor:
        return FileDescriptor(path, template(tpl, **extra), when)

    return [
        # Project root
        FileDescriptor("blueprint.yaml", _build_manifest),
        core("README.md", "project/README.md.j2"),
        core("analysis_options.yaml", "project/analysis_options.yaml.j2"),
        core(".gitignore", "project/gitignore.j2"),
        core(".env", "project/env.j2", _env, example=False),
        core(".env.example", "project/env.j2", _env, example=True),
        core("l10n.yaml", "project/l10n.yaml.j2", _localization),
        # Configuration
        core("lib/core/config/app_config.dart", "core/app_config.dart.j2"),
        core("lib/core/config/env_loader.dart", "core/env_loader.dart.j2", _env),
        core("lib/core/constants/app_constants.dart", "core/app_constants.dart.j2"),
        # Networking
        core("lib/core/api/api_client.dart", "core/api_client.dart.j2", _api),
        core("lib/core/api/api_response.dart", "core/api_response.dart.j2", _api),
        core("lib/core/api/interceptors/auth_interceptor.dart", "core/auth_interceptor.dart.j2", _api),
        core("lib/core/api/interceptors/retry_interceptor.dart", "core/retry_interceptor.dart.j2", _api),
        core("lib/core/api/interceptors/logger_interceptor.dart", "core/logger_interceptor.dart.j2", _api),
        # Errors, utils, storage
        core("lib/core/errors/exceptions.dart", "core/exceptions.dart.j2"),
        core("lib/core/errors/failures.dart", "core/failures.dart.j2"),
        core("lib/core/utils/logger.dart", "core/logger.dart.j2"),
        core("lib/core/utils/validators.dart", "core/validators.dart.j2"),
        core("lib/core/utils/extensions.dart", "core/extensions.dart.j2"),
        core("lib/core/storage/local_storage.dart", "core/local_storage.dart.j2"),
        core("lib/core/storage/secure_storage.dart", "core/secure_storage.dart.j2"),
        # Widgets
        core("lib/core/widgets/loading_indicator.dart", "core/loading_indicator.dart.j2"),
        core("lib/core/widgets/error_view.dart", "core/error_view.dart.j2"),
        core("lib/core/widgets/empty_state.dart", "core/empty_state.dart.j2"),
        # Routing
        FileDescriptor("lib/core/routing/app_router.dart", _build_router),
        # Theme
        core("lib/core/theme/app_theme.dart", "core/app_theme.dart.j2", _theme),
        core("lib/core/theme/app_colors.dart", "core/app_colors.dart.j2", _theme),
        core("lib/core/theme/typography.dart", "core/typography.dart.j2", _theme),
        # Localization
        core("lib/l10n/app_en.arb", "core/app_en.arb.j2", _localization),
        core("lib/l10n/app_es.arb", "core/app_es.arb.j2", _localization),
        # Platform helpers
        core("lib/core/responsive/breakpoints.dart", "platform/breakpoints.dart.j2", _beyond_mobile),
        core("lib/core/responsive/responsive_layout.dart", "platform/responsive_layout.dart.j2", _beyond_mobile),
        core("lib/core/platform/platform_info.dart", "platform/platform_info.dart.j2", _beyond_mobile),
        core("web/index.html", "platform/index.html.j2", _platform(TargetPlatform.WEB)),
        core("lib/core/desktop/window_config.dart", "platform/window_config.dart.j2", _platform(TargetPlatform.DESKTOP)),
        # Home feature
        core("lib/features/home/presentation/pages/home_page.dart", "home/home_page.dart.j2"),
        # Tests
        core("test/widget_test.dart", "tests/widget_test.dart.j2", _tests),
        core("test/core/utils/validators_test.dart", "tests/validators_test.dart.j2", _tests),
        core("test/helpers/test_helpers.dart", "tests/test_helpers.dart.j2", _tests),
        # CI
        core(".github/workflows/ci.yml", "ci/github_ci.yml.j2", _ci(CIProvider.GITHUB)),
        core(".gitlab-ci.yml", "ci/gitlab_ci.yml.j2", _ci(CIProvider.GITLAB)),
        core("azure-pipelines.yml", "ci/azure_pipelines.yml.j2", _ci(CIProvider.AZURE)),
    ]


def select_dependencies(
    config: BlueprintConfig | None,
    required: dict[str, str],
    optional: tuple[tuple[str, str, Predicate], ...],
) -> dict[str, str]:
    """Merge *required* with the *optional* entries that apply to *config*.

    ``config=None`` selects every optional entry.
    """
    selected = dict(required)
    for name, constraint, predicate in optional:
        if config is None or predicate(config):
            selected[name] = constraint
    return selected


def build_variant_bundle(
    name: str,
    variant_files: list[FileDescriptor],
    config: BlueprintConfig | None,
    dependencies: dict[str, str],
    dev_dependencies: tuple[tuple[str, str, Predicate], ...] = (),
) -> TemplateBundle:
    """Combine the core with one variant's presentation scaffolding."""
    return TemplateBundle(
        name=name,
        files=tuple(core_descriptors() + variant_files),
        dependencies={
            **select_dependencies(config, CORE_DEPENDENCIES, OPTIONAL_DEPENDENCIES),
            **dependencies,
        },
        dev_dependencies=select_dependencies(
            config,
            CORE_DEV_DEPENDENCIES,
            OPTIONAL_DEV_DEPENDENCIES + dev_dependencies,
        ),
    )
