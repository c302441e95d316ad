"""Jinja2 template rendering for project scaffolding.

Provides the TemplateRenderer class which loads Jinja2 templates from the
``blueprint/scaffolder/templates/`` directory and renders them with a context
derived from a :class:`~blueprint.config.BlueprintConfig`.  Bundles never call
the renderer directly; they use :func:`template` to obtain a content builder
(``config -> str``) bound to one template file.
"""

from __future__ import annotations

import re
from functools import lru_cache
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from blueprint import __version__
from blueprint.config import BlueprintConfig, TargetPlatform
from blueprint.scaffolder.bundle import ContentBuilder
from blueprint.utils import to_camel_case, to_pascal_case, to_title_case


# ---------------------------------------------------------------------------
# Template directory discovery
# ---------------------------------------------------------------------------

_DEFAULT_TEMPLATE_DIR = Path(__file__).parent / "templates"


# ---------------------------------------------------------------------------
# TemplateRenderer
# ---------------------------------------------------------------------------


class TemplateRenderer:
    """Renders Jinja2 templates for project scaffolding.

    The renderer discovers ``.j2`` template files under a configurable
    template directory.  Undefined variables are errors so a typo in a
    template fails loudly instead of producing an empty string.
    """

    def __init__(self, template_dir: str | Path | None = None) -> None:
        if template_dir is None:
            template_dir = _DEFAULT_TEMPLATE_DIR
        self.template_dir = Path(template_dir)
        self.env = Environment(
            loader=FileSystemLoader(str(self.template_dir)),
            autoescape=False,
            keep_trailing_newline=True,
            trim_blocks=True,
            lstrip_blocks=True,
            undefined=StrictUndefined,
        )
        # Register custom filters
        self.env.filters["pascal_case"] = to_pascal_case
        self.env.filters["camel_case"] = to_camel_case

    # -- Single template rendering -----------------------------------------

    def render(self, template_path: str, context: dict[str, Any]) -> str:
        """Render a single template with the provided context.

        Args:
            template_path: Path relative to the template directory (e.g.
                ``"core/app_router.dart.j2"``).
            context: Dictionary of variables available inside the template.

        Returns:
            The rendered template content as a string.
        """
        template = self.env.get_template(template_path)
        return template.render(**context)


@lru_cache(maxsize=1)
def default_renderer() -> TemplateRenderer:
    """Shared renderer over the packaged template directory."""
    return TemplateRenderer()


# ---------------------------------------------------------------------------
# Context
# ---------------------------------------------------------------------------


def build_context(config: BlueprintConfig, **extra: Any) -> dict[str, Any]:
    """Flatten *config* into template variables.

    The result is a pure function of its arguments, which keeps every
    rendered file deterministic.
    """
    context: dict[str, Any] = {
        "blueprint_version": __version__,
        "app_name": config.app_name,
        "app_title": to_title_case(config.app_name),
        "app_class": to_pascal_case(config.app_name),
        "state_management": config.state_management.value,
        "platforms": [p.value for p in config.platforms],
        "is_multi_platform": config.is_multi_platform,
        "is_universal": config.is_universal,
        "has_mobile": config.has_platform(TargetPlatform.MOBILE),
        "has_web": config.has_platform(TargetPlatform.WEB),
        "has_desktop": config.has_platform(TargetPlatform.DESKTOP),
        "include_theme": config.include_theme,
        "include_localization": config.include_localization,
        "include_env": config.include_env,
        "include_api": config.include_api,
        "include_tests": config.include_tests,
        "include_hive": config.include_hive,
        "include_pagination": config.include_pagination,
        "include_analytics": config.include_analytics,
        "analytics_provider": config.analytics_provider.value,
        "include_security": config.include_security,
        "security_level": config.security_level.value,
        "enable_encrypted_storage": config.enable_encrypted_storage,
        "enable_root_detection": config.enable_root_detection,
        "enable_biometric_auth": config.enable_biometric_auth,
        "enable_certificate_pinning": config.enable_certificate_pinning,
        "enable_api_key_obfuscation": config.enable_api_key_obfuscation,
        "enable_screenshot_protection": config.enable_screenshot_protection,
        "ci_provider": config.ci_provider.value,
        "preset": config.preset.value,
    }
    context.update(extra)
    return context


def feature_context(feature_name: str) -> dict[str, str]:
    """Naming variants of a feature used by the feature templates."""
    return {
        "feature": feature_name,
        "feature_class": to_pascal_case(feature_name),
        "feature_var": to_camel_case(feature_name),
        "feature_title": to_title_case(feature_name),
    }


def template(template_path: str, **extra: Any) -> ContentBuilder:
    """Return a content builder that renders *template_path* for a config.

    Keyword arguments are added to the template context on every render.
    """

    def build(config: BlueprintConfig) -> str:
        return default_renderer().render(template_path, build_context(config, **extra))

    build.__name__ = f"render_{_slugify(template_path).replace('-', '_')}"
    return build


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _slugify(value: str) -> str:
    """Convert a string to a URL/filename-safe slug."""
    slug = re.sub(r"[^a-z0-9]+", "-", value.lower().strip())
    return slug.strip("-")
