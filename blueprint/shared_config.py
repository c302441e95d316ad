"""Shared team configurations.

A shared configuration is a YAML file a team keeps in a config directory
(``~/.blueprint/configs`` by default) and starts new projects from with
``blueprint init <app> --from-config <name-or-file>``.  Unlike the project
manifest it carries no app name, only defaults plus the packages every
project must depend on::

    name: Acme mobile
    version: 1.2.0
    author: Platform team
    description: Riverpod, GitHub CI, standard security
    defaults:
      state_management: riverpod
      platforms: [mobile, web]
      ci_provider: github
      security_level: standard
      include_localization: true
    required_packages:
      - equatable
      - go_router
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from blueprint.config import BlueprintConfig
from blueprint.errors import SharedConfigError
from blueprint.manifest import parse_manifest, read_yaml_text
from blueprint.utils import describe_validation_error
from blueprint.validators import validate_package_name

logger = logging.getLogger(__name__)

CONFIG_SUFFIXES = (".yaml", ".yml")

# BlueprintConfig fields a shared config may preset.
DEFAULT_FIELDS: tuple[str, ...] = tuple(
    name for name in BlueprintConfig.model_fields if name != "app_name"
)

# Stand-in app name used only to validate defaults.
_PLACEHOLDER_APP = "shared_config"


# ---------------------------------------------------------------------------
# Model
# ---------------------------------------------------------------------------


class SharedBlueprintConfig(BaseModel):
    """A reusable set of project defaults."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(default="Unnamed Configuration")
    version: str = Field(default="1.0.0")
    author: str = Field(default="Unknown")
    description: str = Field(default="")
    defaults: dict[str, Any] = Field(default_factory=dict)
    required_packages: tuple[str, ...] = Field(default=())

    @field_validator("version", mode="before")
    @classmethod
    def _version_as_text(cls, value: Any) -> Any:
        # ``version: 1.0`` loads as a float.
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("defaults")
    @classmethod
    def _check_defaults(cls, value: dict[str, Any]) -> dict[str, Any]:
        unknown = sorted(set(value) - set(DEFAULT_FIELDS))
        if unknown:
            raise ValueError(f"unknown default(s): {', '.join(unknown)}")
        try:
            BlueprintConfig.model_validate({**value, "app_name": _PLACEHOLDER_APP})
        except ValidationError as exc:
            raise ValueError(describe_validation_error(exc)) from None
        return value

    @field_validator("required_packages")
    @classmethod
    def _check_packages(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        for package in value:
            validate_package_name(package, field_name="required package")
        return tuple(dict.fromkeys(value))

    def to_blueprint_config(self, app_name: str) -> BlueprintConfig:
        """Project configuration for *app_name* with these defaults applied."""
        return BlueprintConfig.model_validate({**self.defaults, "app_name": app_name})

    def to_yaml_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "version": self.version,
            "author": self.author,
            "description": self.description,
            "defaults": dict(self.defaults),
            "required_packages": list(self.required_packages),
        }

    @classmethod
    def from_config(
        cls,
        config: BlueprintConfig,
        *,
        name: str,
        author: str = "Unknown",
        description: str = "",
        required_packages: tuple[str, ...] = (),
    ) -> "SharedBlueprintConfig":
        """Capture every choice of *config* except its app name."""
        defaults = config.model_dump(mode="json", include=set(DEFAULT_FIELDS))
        return cls(
            name=name,
            author=author,
            description=description,
            defaults={field: defaults[field] for field in DEFAULT_FIELDS},
            required_packages=required_packages,
        )


def is_shared_config(node: Mapping[str, Any]) -> bool:
    """True for a shared-config document, False for a project manifest."""
    return "defaults" in node or "required_packages" in node


def parse_shared_config(text: str, source: Path | str) -> SharedBlueprintConfig:
    """Parse shared-config YAML text.

    Raises:
        SharedConfigError: If the YAML is malformed or a value is invalid.
    """
    source = Path(source)
    try:
        node = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise SharedConfigError(source, f"invalid YAML ({exc})") from exc
    if not isinstance(node, dict):
        raise SharedConfigError(source, "expected a mapping at the top level")
    return _validate(node, source)


def _validate(node: Mapping[str, Any], source: Path) -> SharedBlueprintConfig:
    try:
        return SharedBlueprintConfig.model_validate(node)
    except ValidationError as exc:
        raise SharedConfigError(source, f"invalid shared config ({describe_validation_error(exc)})") from exc


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class ConfigInfo(BaseModel):
    """One entry of :meth:`ConfigRepository.list_configs`."""

    name: str
    path: Path
    config: SharedBlueprintConfig


class ConfigRepository:
    """Loads, saves and lists shared configurations in *config_dir*.

    Args:
        config_dir: Directory of named configurations (``<name>.yaml``).
        log: Logger for progress and skipped files.
    """

    def __init__(self, config_dir: str | Path, log: logging.Logger | None = None) -> None:
        self.config_dir = Path(config_dir)
        self.log = log or logger

    def path_for(self, name: str) -> Path:
        """Location of the named configuration inside the config directory."""
        if name.endswith(CONFIG_SUFFIXES):
            return self.config_dir / name
        slug = re.sub(r"[^a-z0-9]+", "_", name.strip().lower()).strip("_")
        if not slug:
            raise SharedConfigError(self.config_dir, f"invalid configuration name {name!r}")
        return self.config_dir / f"{slug}.yaml"

    def resolve(self, reference: str | Path) -> Path:
        """Map a file path or a configuration name to a file.

        An existing file wins (tried as given, then with ``.yaml``); anything
        else is looked up by name in the config directory.
        """
        candidate = Path(reference)
        if candidate.is_file():
            return candidate
        if candidate.suffix not in CONFIG_SUFFIXES and candidate.with_name(candidate.name + ".yaml").is_file():
            return candidate.with_name(candidate.name + ".yaml")
        return self.path_for(str(reference))

    def load(self, reference: str | Path) -> SharedBlueprintConfig:
        """Load a shared configuration by name or path.

        Raises:
            SharedConfigError: If it cannot be found, read, or parsed.
        """
        path = self.resolve(reference)
        config = parse_shared_config(read_yaml_text(path, SharedConfigError), path)
        self.log.info("Loaded shared config %s (%s)", config.name, path)
        return config

    def load_source(self, reference: str | Path) -> BlueprintConfig | SharedBlueprintConfig:
        """Load ``--from-config``: a project manifest or a shared configuration."""
        path = self.resolve(reference)
        text = read_yaml_text(path, SharedConfigError)
        try:
            node = yaml.safe_load(text)
        except yaml.YAMLError as exc:
            raise SharedConfigError(path, f"invalid YAML ({exc})") from exc
        if isinstance(node, dict) and is_shared_config(node):
            config = _validate(node, path)
            self.log.info("Loaded shared config %s (%s)", config.name, path)
            return config
        return parse_manifest(text, path)

    def save(self, config: SharedBlueprintConfig, name: str | None = None) -> Path:
        """Write *config* as ``<name>.yaml`` (default: its own name)."""
        path = self.path_for(name or config.name)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(
            yaml.safe_dump(config.to_yaml_dict(), sort_keys=False, default_flow_style=False),
            encoding="utf-8",
        )
        self.log.info("Saved shared config %s to %s", config.name, path)
        return path

    def list_configs(self) -> list[ConfigInfo]:
        """Every readable configuration in the directory, sorted by name.

        Files that fail to load are skipped with a warning.
        """
        if not self.config_dir.is_dir():
            return []
        entries = []
        for path in sorted(self.config_dir.iterdir()):
            if not path.is_file() or path.suffix not in CONFIG_SUFFIXES:
                continue
            try:
                config = parse_shared_config(read_yaml_text(path, SharedConfigError), path)
            except SharedConfigError as exc:
                self.log.warning("Skipping %s", exc)
                continue
            entries.append(ConfigInfo(name=path.stem, path=path, config=config))
        return entries
