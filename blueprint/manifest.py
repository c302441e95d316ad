"""``blueprint.yaml`` manifest persistence.

The manifest is written at the root of every generated project and is the
only state the ``add feature`` command relies on.  It round-trips a
:class:`~blueprint.config.BlueprintConfig` losslessly.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from blueprint.config import MANIFEST_FILENAME, BlueprintConfig
from blueprint.errors import BlueprintError, ManifestError

logger = logging.getLogger(__name__)

SCHEMA_VERSION = 1

# Manifest key -> BlueprintConfig field, in the order they are written.
_FEATURE_KEYS: dict[str, str] = {
    "analytics": "include_analytics",
    "api": "include_api",
    "env": "include_env",
    "hive": "include_hive",
    "localization": "include_localization",
    "pagination": "include_pagination",
    "tests": "include_tests",
    "theme": "include_theme",
}


# ---------------------------------------------------------------------------
# Dict conversion
# ---------------------------------------------------------------------------


def to_manifest_dict(config: BlueprintConfig) -> dict[str, Any]:
    """Convert *config* to the plain mapping stored in ``blueprint.yaml``."""
    return {
        "version": SCHEMA_VERSION,
        "app_name": config.app_name,
        "platforms": [p.value for p in config.platforms],
        "state_management": config.state_management.value,
        "ci_provider": config.ci_provider.value,
        "security_level": config.security_level.value,
        "analytics_provider": config.analytics_provider.value,
        "preset": config.preset.value,
        "features": {key: getattr(config, field) for key, field in _FEATURE_KEYS.items()},
    }


def from_manifest_dict(data: Mapping[str, Any]) -> BlueprintConfig:
    """Build a validated config from a manifest mapping.

    Missing keys fall back to the model defaults.  Manifests written before
    multi-platform support used a single ``platform`` key; it is still read.

    Raises:
        pydantic.ValidationError: If any value is out of range, e.g. an
            unknown ``state_management`` string.
    """
    kwargs: dict[str, Any] = {"app_name": data.get("app_name", "")}

    if "platforms" in data:
        platforms = data["platforms"]
        kwargs["platforms"] = platforms if isinstance(platforms, list) else [str(platforms)]
    elif "platform" in data:
        kwargs["platforms"] = [str(data["platform"])]

    for key in ("state_management", "ci_provider", "security_level", "analytics_provider", "preset"):
        if data.get(key) is not None:
            kwargs[key] = str(data[key])

    features = data.get("features") or {}
    if not isinstance(features, Mapping):
        raise ValueError("'features' must be a mapping")
    for key, field in _FEATURE_KEYS.items():
        if key in features:
            kwargs[field] = _read_bool(features[key])

    return BlueprintConfig.model_validate(kwargs)


def _read_bool(value: Any) -> Any:
    if isinstance(value, str) and value.strip().lower() in ("true", "false"):
        return value.strip().lower() == "true"
    return value


# ---------------------------------------------------------------------------
# YAML text
# ---------------------------------------------------------------------------


def dump_manifest(config: BlueprintConfig) -> str:
    """Serialise *config* to manifest YAML text (deterministic key order)."""
    return yaml.safe_dump(
        to_manifest_dict(config),
        sort_keys=False,
        default_flow_style=False,
    )


def parse_manifest(text: str, source: Path | str = MANIFEST_FILENAME) -> BlueprintConfig:
    """Parse manifest YAML text.

    Raises:
        ManifestError: If the YAML is malformed, has the wrong shape, an
            unsupported schema version, or invalid values.
    """
    source = Path(source)
    try:
        node = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ManifestError(source, f"invalid YAML ({exc})") from exc

    if not isinstance(node, dict):
        raise ManifestError(source, "expected a mapping at the top level")

    version = node.get("version", SCHEMA_VERSION)
    if isinstance(version, bool) or not isinstance(version, int) or version < 1:
        raise ManifestError(source, f"invalid schema version {version!r}")
    if version > SCHEMA_VERSION:
        raise ManifestError(
            source,
            f"schema version {version} is newer than the supported version {SCHEMA_VERSION}",
        )

    try:
        return from_manifest_dict(node)
    except ValidationError as exc:
        details = "; ".join(
            f"{'.'.join(str(loc) for loc in err['loc']) or 'manifest'}: {err['msg']}"
            for err in exc.errors()
        )
        raise ManifestError(source, f"invalid configuration ({details})") from exc
    except ValueError as exc:
        raise ManifestError(source, str(exc)) from exc


# ---------------------------------------------------------------------------
# Disk I/O
# ---------------------------------------------------------------------------


def read_yaml_text(
    target: Path,
    error: Callable[[Path, str], BlueprintError] = ManifestError,
) -> str:
    """Read a UTF-8 YAML file.

    A missing file, an I/O failure or undecodable bytes are raised as
    ``error(target, reason)``.
    """
    if not target.is_file():
        raise error(target, f"{target.name} not found")
    try:
        return target.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise error(target, f"not valid UTF-8 (byte {exc.start})") from exc
    except OSError as exc:
        raise error(target, f"cannot read file ({exc.strerror or exc})") from exc


def load_manifest(path: Path | str) -> BlueprintConfig:
    """Read and parse a manifest file.

    Raises:
        ManifestError: If the file does not exist, cannot be read or decoded,
            or is invalid.
    """
    target = Path(path)
    config = parse_manifest(read_yaml_text(target), target)
    logger.debug("Loaded manifest %s for app %s", target, config.app_name)
    return config
