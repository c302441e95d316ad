"""Blueprint configuration.

Typed, immutable configuration for a generated Flutter project plus the small
set of tool settings read from the environment.  All models use Pydantic v2 so
they are validated at construction time and serialised to/from the
``blueprint.yaml`` manifest without boiler-plate.
"""

from __future__ import annotations

import os
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationInfo,
    field_validator,
    model_validator,
)

from blueprint.validators import validate_package_name


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------


class _ParsableEnum(str, Enum):
    """String enum with a forgiving, case-insensitive ``parse``."""

    @property
    def label(self) -> str:
        return self.value

    @classmethod
    def parse(cls, value: str) -> "_ParsableEnum":
        normalized = str(value).strip().lower().replace("-", "_")
        for candidate in cls:
            if candidate.value == normalized:
                return candidate
        allowed = ", ".join(c.value for c in cls)
        raise ValueError(f"Unsupported {cls.__name__} option: {value!r} (use: {allowed})")


class StateManagement(_ParsableEnum):
    """Supported state-management approaches."""

    PROVIDER = "provider"
    RIVERPOD = "riverpod"
    BLOC = "bloc"


class TargetPlatform(_ParsableEnum):
    """Supported platform targets."""

    MOBILE = "mobile"
    WEB = "web"
    DESKTOP = "desktop"

    @classmethod
    def parse(cls, value: str) -> "TargetPlatform":
        normalized = str(value).strip().lower()
        if normalized in ("android", "ios"):
            return cls.MOBILE
        if normalized in ("windows", "macos", "linux"):
            return cls.DESKTOP
        return super().parse(normalized)  # type: ignore[return-value]

    @classmethod
    def parse_many(cls, value: str) -> tuple["TargetPlatform", ...]:
        """Parse a comma-separated list such as ``"android,ios,web"`` or ``"all"``.

        Duplicates collapse (android + ios is a single ``mobile``) while the
        first-seen order is preserved.
        """
        normalized = value.strip().lower()
        if normalized == "all":
            return tuple(cls)
        parsed: list[TargetPlatform] = []
        for part in normalized.split(","):
            if not part.strip():
                continue
            platform = cls.parse(part)
            if platform not in parsed:
                parsed.append(platform)
        if not parsed:
            raise ValueError("At least one platform must be specified")
        return tuple(parsed)


class CIProvider(_ParsableEnum):
    """Supported CI/CD providers."""

    NONE = "none"
    GITHUB = "github"
    GITLAB = "gitlab"
    AZURE = "azure"


class AnalyticsProvider(_ParsableEnum):
    """Crash reporting / analytics back-ends."""

    NONE = "none"
    FIREBASE = "firebase"
    SENTRY = "sentry"


class SecurityLevel(_ParsableEnum):
    """Security feature lattice.

    Levels are totally ordered ``none < basic < standard < enterprise`` and
    every level includes all features of the levels below it.
    """

    NONE = "none"
    BASIC = "basic"
    STANDARD = "standard"
    ENTERPRISE = "enterprise"

    @property
    def rank(self) -> int:
        return _SECURITY_RANKS[self.value]

    # str would otherwise compare the values alphabetically.
    def __lt__(self, other: object) -> bool:
        if not isinstance(other, SecurityLevel):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other: object) -> bool:
        if not isinstance(other, SecurityLevel):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, SecurityLevel):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, SecurityLevel):
            return NotImplemented
        return self.rank >= other.rank


_SECURITY_RANKS: dict[str, int] = {
    "none": 0,
    "basic": 1,
    "standard": 2,
    "enterprise": 3,
}


class ProjectPreset(_ParsableEnum):
    """Pre-built project templates that add domain features on top of the base."""

    BLANK = "blank"
    ECOMMERCE = "ecommerce"
    SOCIAL_MEDIA = "social_media"
    FITNESS_TRACKER = "fitness_tracker"
    FINANCE_APP = "finance_app"
    FOOD_DELIVERY = "food_delivery"
    CHAT_APP = "chat_app"

    @classmethod
    def parse(cls, value: str) -> "ProjectPreset":
        compact = str(value).strip().lower().replace("-", "").replace("_", "").replace(" ", "")
        for candidate in cls:
            if candidate.value.replace("_", "") == compact:
                return candidate
        return super().parse(value)  # type: ignore[return-value]


_ENUM_FIELDS: dict[str, type[_ParsableEnum]] = {
    "state_management": StateManagement,
    "analytics_provider": AnalyticsProvider,
    "security_level": SecurityLevel,
    "ci_provider": CIProvider,
    "preset": ProjectPreset,
}


# ---------------------------------------------------------------------------
# Project configuration
# ---------------------------------------------------------------------------


class BlueprintConfig(BaseModel):
    """Every choice that shapes a generated project.

    Instances are built once (from CLI flags or a loaded manifest) and are
    immutable afterwards; use :meth:`copy_with` to derive a variant.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    app_name: str = Field(..., description="Dart package name of the app")
    state_management: StateManagement = Field(default=StateManagement.PROVIDER)
    platforms: tuple[TargetPlatform, ...] = Field(default=(TargetPlatform.MOBILE,))

    include_theme: bool = Field(default=True, description="Light/dark theme scaffolding")
    include_localization: bool = Field(default=False, description="ARB based i18n setup")
    include_env: bool = Field(default=True, description=".env loading support")
    include_api: bool = Field(default=True, description="Dio API client and interceptors")
    include_tests: bool = Field(default=True, description="Test scaffolding")
    include_hive: bool = Field(default=False, description="Hive offline cache")
    include_pagination: bool = Field(default=False, description="Paginated list helpers")
    include_analytics: bool = Field(default=False, description="Analytics and crash reporting")

    analytics_provider: AnalyticsProvider = Field(default=AnalyticsProvider.NONE)
    security_level: SecurityLevel = Field(default=SecurityLevel.NONE)
    ci_provider: CIProvider = Field(default=CIProvider.NONE)
    preset: ProjectPreset = Field(default=ProjectPreset.BLANK)

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    @field_validator("app_name")
    @classmethod
    def _check_app_name(cls, value: str) -> str:
        return validate_package_name(value, field_name="app name")

    @field_validator(
        "state_management",
        "analytics_provider",
        "security_level",
        "ci_provider",
        "preset",
        mode="before",
    )
    @classmethod
    def _parse_enum(cls, value: Any, info: ValidationInfo) -> Any:
        if isinstance(value, str) and not isinstance(value, Enum):
            return _ENUM_FIELDS[info.field_name].parse(value)
        return value

    @field_validator("platforms", mode="before")
    @classmethod
    def _dedupe_platforms(cls, value: Any) -> Any:
        if isinstance(value, str):
            return TargetPlatform.parse_many(value)
        if isinstance(value, (list, tuple)):
            seen: list[Any] = []
            for item in value:
                platform = item if isinstance(item, TargetPlatform) else TargetPlatform.parse(item)
                if platform not in seen:
                    seen.append(platform)
            return tuple(seen)
        return value

    @field_validator("platforms")
    @classmethod
    def _require_platform(cls, value: tuple[TargetPlatform, ...]) -> tuple[TargetPlatform, ...]:
        if not value:
            raise ValueError("At least one platform must be specified")
        return value

    @model_validator(mode="after")
    def _check_analytics(self) -> "BlueprintConfig":
        if self.analytics_provider != AnalyticsProvider.NONE and not self.include_analytics:
            raise ValueError(
                f"analytics_provider={self.analytics_provider.value!r} requires include_analytics"
            )
        return self

    # ------------------------------------------------------------------
    # Derived properties
    # ------------------------------------------------------------------

    @property
    def is_multi_platform(self) -> bool:
        return len(self.platforms) > 1

    @property
    def is_universal(self) -> bool:
        return len(self.platforms) == len(TargetPlatform)

    def has_platform(self, platform: TargetPlatform) -> bool:
        return platform in self.platforms

    @property
    def include_security(self) -> bool:
        return self.security_level >= SecurityLevel.BASIC

    @property
    def enable_encrypted_storage(self) -> bool:
        return self.security_level >= SecurityLevel.BASIC

    @property
    def enable_root_detection(self) -> bool:
        return self.security_level >= SecurityLevel.STANDARD

    @property
    def enable_biometric_auth(self) -> bool:
        return self.security_level >= SecurityLevel.STANDARD

    @property
    def enable_certificate_pinning(self) -> bool:
        return self.security_level >= SecurityLevel.ENTERPRISE

    @property
    def enable_api_key_obfuscation(self) -> bool:
        return self.security_level >= SecurityLevel.ENTERPRISE

    @property
    def enable_screenshot_protection(self) -> bool:
        return self.security_level >= SecurityLevel.ENTERPRISE

    # ------------------------------------------------------------------
    # Copy helpers
    # ------------------------------------------------------------------

    def copy_with(self, **changes: Any) -> "BlueprintConfig":
        """Return a new, fully validated configuration with *changes* applied.

        Disabling ``include_analytics`` without naming a provider also resets
        ``analytics_provider`` to ``none`` so the result stays consistent.
        """
        data = self.model_dump()
        data.update(changes)
        if changes.get("include_analytics") is False and "analytics_provider" not in changes:
            data["analytics_provider"] = AnalyticsProvider.NONE
        return type(self).model_validate(data)


# ---------------------------------------------------------------------------
# Tool settings
# ---------------------------------------------------------------------------


MANIFEST_FILENAME = "blueprint.yaml"
ROUTER_PATH = "lib/core/routing/app_router.dart"


class Settings(BaseModel):
    """Tool-level knobs that do not belong in a project manifest."""

    pub_api_url: str = Field(default="https://pub.dev/api/packages")
    http_timeout: float = Field(default=10.0, gt=0, description="pub.dev request timeout in seconds")
    log_level: str = Field(default="INFO")
    manifest_filename: str = Field(default=MANIFEST_FILENAME)
    router_path: str = Field(default=ROUTER_PATH)
    config_dir: Path = Field(
        default_factory=lambda: Path.home() / ".blueprint" / "configs",
        description="Directory holding named shared configurations",
    )

    @classmethod
    def from_env(cls) -> "Settings":
        """Build ``Settings`` from environment variables.

        Recognised variables (all optional):
            BLUEPRINT_PUB_API_URL, BLUEPRINT_HTTP_TIMEOUT, BLUEPRINT_LOG_LEVEL,
            BLUEPRINT_CONFIG_DIR.
        """
        kwargs: dict[str, Any] = {}
        if os.environ.get("BLUEPRINT_PUB_API_URL"):
            kwargs["pub_api_url"] = os.environ["BLUEPRINT_PUB_API_URL"]
        if os.environ.get("BLUEPRINT_HTTP_TIMEOUT"):
            kwargs["http_timeout"] = float(os.environ["BLUEPRINT_HTTP_TIMEOUT"])
        if os.environ.get("BLUEPRINT_LOG_LEVEL"):
            kwargs["log_level"] = os.environ["BLUEPRINT_LOG_LEVEL"].upper()
        if os.environ.get("BLUEPRINT_CONFIG_DIR"):
            kwargs["config_dir"] = Path(os.environ["BLUEPRINT_CONFIG_DIR"]).expanduser()
        return cls(**kwargs)
