"""Optional add-on bundles.

Each add-on is merged by the resolver only when its flag is set, but its
descriptors also carry their own predicates.  That keeps every add-on safe
to merge unconditionally, which is what :meth:`BundleResolver.catalog` does
when checking for path collisions.

Builders take an optional configuration: with ``None`` they declare every
dependency they could ever need.
"""

from __future__ import annotations

from blueprint.config import AnalyticsProvider, BlueprintConfig, SecurityLevel
from blueprint.scaffolder.bundle import FileDescriptor, Predicate, TemplateBundle
from blueprint.scaffolder.bundles.base import select_dependencies
from blueprint.scaffolder.templates import template

# ---------------------------------------------------------------------------
# Hive offline cache
# ---------------------------------------------------------------------------


def _hive(config: BlueprintConfig) -> bool:
    return config.include_hive


def build_hive_bundle(config: BlueprintConfig | None = None) -> TemplateBundle:
    base = "lib/core/storage"
    return TemplateBundle(
        name="hive",
        files=(
            FileDescriptor(f"{base}/hive_database.dart", template("hive/hive_database.dart.j2"), _hive),
            FileDescriptor(f"{base}/cache_manager.dart", template("hive/cache_manager.dart.j2"), _hive),
            FileDescriptor(f"{base}/sync_manager.dart", template("hive/sync_manager.dart.j2"), _hive),
        ),
        dependencies={
            "connectivity_plus": "^5.0.2",
            "hive": "^2.2.3",
            "hive_flutter": "^1.1.0",
            "path_provider": "^2.1.1",
        },
        dev_dependencies={
            "build_runner": "^2.4.7",
            "hive_generator": "^2.0.1",
        },
    )


# ---------------------------------------------------------------------------
# Pagination
# ---------------------------------------------------------------------------


def _pagination(config: BlueprintConfig) -> bool:
    return config.include_pagination


def build_pagination_bundle(config: BlueprintConfig | None = None) -> TemplateBundle:
    return TemplateBundle(
        name="pagination",
        files=(
            FileDescriptor(
                "lib/core/pagination/pagination_controller.dart",
                template("pagination/pagination_controller.dart.j2"),
                _pagination,
            ),
            FileDescriptor(
                "lib/core/widgets/paginated_list_view.dart",
                template("pagination/paginated_list_view.dart.j2"),
                _pagination,
            ),
            FileDescriptor(
                "lib/core/widgets/skeleton_loader.dart",
                template("pagination/skeleton_loader.dart.j2"),
                _pagination,
            ),
        ),
        dependencies={"shimmer": "^3.0.0"},
    )


# ---------------------------------------------------------------------------
# Analytics and crash reporting
# ---------------------------------------------------------------------------


def _analytics(config: BlueprintConfig) -> bool:
    return config.include_analytics


def _analytics_provider(provider: AnalyticsProvider) -> Predicate:
    return lambda config: config.include_analytics and config.analytics_provider == provider


ANALYTICS_DEPENDENCIES: tuple[tuple[str, str, Predicate], ...] = (
    ("firebase_analytics", "^10.7.4", _analytics_provider(AnalyticsProvider.FIREBASE)),
    ("firebase_core", "^2.24.2", _analytics_provider(AnalyticsProvider.FIREBASE)),
    ("firebase_crashlytics", "^3.4.8", _analytics_provider(AnalyticsProvider.FIREBASE)),
    ("sentry_flutter", "^7.14.0", _analytics_provider(AnalyticsProvider.SENTRY)),
)


def build_analytics_bundle(config: BlueprintConfig | None = None) -> TemplateBundle:
    """Analytics facade plus the back-end selected by ``analytics_provider``."""
    base = "lib/core/analytics"
    return TemplateBundle(
        name="analytics",
        files=(
            FileDescriptor(f"{base}/analytics_service.dart", template("analytics/analytics_service.dart.j2"), _analytics),
            FileDescriptor(f"{base}/analytics_events.dart", template("analytics/analytics_events.dart.j2"), _analytics),
            FileDescriptor(f"{base}/crash_reporter.dart", template("analytics/crash_reporter.dart.j2"), _analytics),
            FileDescriptor(
                f"{base}/firebase_analytics_service.dart",
                template("analytics/firebase_analytics_service.dart.j2"),
                _analytics_provider(AnalyticsProvider.FIREBASE),
            ),
            FileDescriptor(
                f"{base}/sentry_analytics_service.dart",
                template("analytics/sentry_analytics_service.dart.j2"),
                _analytics_provider(AnalyticsProvider.SENTRY),
            ),
        ),
        dependencies=select_dependencies(config, {}, ANALYTICS_DEPENDENCIES),
    )


# ---------------------------------------------------------------------------
# Security
# ---------------------------------------------------------------------------

# Output file -> minimum level.  Each level includes every file of the
# levels below it.
SECURITY_FILES: tuple[tuple[str, SecurityLevel], ...] = (
    ("encrypted_storage", SecurityLevel.BASIC),
    ("network_security_config", SecurityLevel.BASIC),
    ("security_interceptor", SecurityLevel.BASIC),
    ("device_security_checker", SecurityLevel.STANDARD),
    ("biometric_auth", SecurityLevel.STANDARD),
    ("certificate_pinner", SecurityLevel.ENTERPRISE),
    ("api_key_manager", SecurityLevel.ENTERPRISE),
    ("screenshot_protection", SecurityLevel.ENTERPRISE),
    ("secure_http_client", SecurityLevel.ENTERPRISE),
)

ANDROID_NETWORK_CONFIG = "android/app/src/main/res/xml/network_security_config.xml"


def _at_least(level: SecurityLevel) -> Predicate:
    return lambda config: config.security_level >= level


SECURITY_DEPENDENCIES: tuple[tuple[str, str, Predicate], ...] = (
    ("dio", "^5.4.0", _at_least(SecurityLevel.BASIC)),
    ("flutter_secure_storage", "^9.0.0", _at_least(SecurityLevel.BASIC)),
    ("flutter_jailbreak_detection", "^1.10.0", _at_least(SecurityLevel.STANDARD)),
    ("local_auth", "^2.1.8", _at_least(SecurityLevel.STANDARD)),
    ("crypto", "^3.0.3", _at_least(SecurityLevel.ENTERPRISE)),
    ("flutter_windowmanager", "^0.2.0", _at_least(SecurityLevel.ENTERPRISE)),
)


def build_security_bundle(config: BlueprintConfig | None = None) -> TemplateBundle:
    """Security files tagged by level (basic < standard < enterprise)."""
    files = [
        FileDescriptor(
            f"lib/core/security/{stem}.dart",
            template(f"security/{stem}.dart.j2"),
            security_level=level,
        )
        for stem, level in SECURITY_FILES
    ]
    files.append(
        FileDescriptor(
            ANDROID_NETWORK_CONFIG,
            template("security/network_security_config.xml.j2"),
            security_level=SecurityLevel.ENTERPRISE,
        )
    )
    return TemplateBundle(
        name="security",
        files=tuple(files),
        dependencies=select_dependencies(config, {}, SECURITY_DEPENDENCIES),
    )
