"""Command-line interface.

Commands::

    blueprint init <name> [options]          generate a new project
    blueprint add feature <name> [options]   add a feature to a generated project
    blueprint templates                      list the project presets
    blueprint config list                    list saved shared configurations
    blueprint config save <name> [options]   save a project's choices for reuse

Every user-facing error derives from :class:`~blueprint.errors.BlueprintError`
or is a pydantic ``ValidationError``; both are caught here, printed, and turned
into exit code 1.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Any

from pydantic import ValidationError
from rich.table import Table

from blueprint import __version__
from blueprint.config import (
    AnalyticsProvider,
    BlueprintConfig,
    CIProvider,
    ProjectPreset,
    SecurityLevel,
    Settings,
    StateManagement,
)
from blueprint.errors import BlueprintError
from blueprint.manifest import load_manifest
from blueprint.scaffolder import BundleResolver, FeatureInjector, ProjectGenerator, RouterUpdate
from blueprint.scaffolder.bundles import PRESETS
from blueprint.shared_config import ConfigRepository, SharedBlueprintConfig
from blueprint.utils import (
    configure_logging,
    console,
    describe_validation_error,
    print_error,
    print_file_list,
    print_info,
    print_success,
    print_summary_table,
    print_warning,
)
from blueprint.versions import PubVersionClient

logger = logging.getLogger(__name__)

# CLI flag dest -> BlueprintConfig field, for the on/off switches.
_TOGGLES: dict[str, str] = {
    "theme": "include_theme",
    "localization": "include_localization",
    "env": "include_env",
    "api": "include_api",
    "tests": "include_tests",
    "hive": "include_hive",
    "pagination": "include_pagination",
}


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="blueprint",
        description="blueprint -- scaffold Flutter applications",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  blueprint init shop --state-management riverpod --template ecommerce\n"
            "  blueprint init notes --platforms android,web --hive --security standard\n"
            "  blueprint add feature wishlist --api\n"
            "  blueprint config save acme --project-dir shop --require equatable\n"
            "  blueprint init notes --from-config acme\n"
        ),
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    commands = parser.add_subparsers(dest="command", required=True)

    # -- init --------------------------------------------------------------
    init = commands.add_parser("init", help="Generate a new project")
    init.add_argument("name", nargs="?", help="App name (a valid Dart package name)")
    init.add_argument(
        "--state-management", "-s",
        choices=[s.value for s in StateManagement],
        help="State management approach (default: provider)",
    )
    init.add_argument(
        "--platforms", "-p",
        help="Comma-separated targets: mobile,web,desktop (android/ios/windows/macos/linux "
        "are accepted) or 'all' (default: mobile)",
    )
    for flag, field in _TOGGLES.items():
        init.add_argument(
            f"--{flag}",
            action=argparse.BooleanOptionalAction,
            default=None,
            help=BlueprintConfig.model_fields[field].description,
        )
    init.add_argument(
        "--analytics",
        choices=[a.value for a in AnalyticsProvider],
        help="Analytics / crash reporting back-end (default: none)",
    )
    init.add_argument(
        "--security",
        choices=[s.value for s in SecurityLevel],
        help="Security level (default: none)",
    )
    init.add_argument("--ci", choices=[c.value for c in CIProvider], help="CI provider (default: none)")
    init.add_argument(
        "--template", "-t",
        help="Project preset, see 'blueprint templates' (default: blank)",
    )
    init.add_argument(
        "--from-config",
        metavar="NAME_OR_FILE",
        help="Start from a blueprint.yaml, a shared config file, or a saved config name; "
        "other flags override it",
    )
    init.add_argument(
        "--output", "-o",
        type=Path,
        default=Path("."),
        help="Parent directory of the new project (default: current directory)",
    )
    init.add_argument("--force", action="store_true", help="Write into an existing, non-empty directory")
    init.add_argument(
        "--latest-versions",
        action="store_true",
        help="Look up the latest package versions on pub.dev",
    )
    init.add_argument("--verbose", "-v", action="store_true", help="Debug logging")

    # -- add feature -------------------------------------------------------
    add = commands.add_parser("add", help="Add to an existing project")
    add_commands = add.add_subparsers(dest="add_command", required=True)
    feature = add_commands.add_parser("feature", help="Add a feature")
    feature.add_argument("name", help="Feature name (lowercase, underscores)")
    feature.add_argument("--data", action=argparse.BooleanOptionalAction, default=True, help="Data layer")
    feature.add_argument("--domain", action=argparse.BooleanOptionalAction, default=True, help="Domain layer")
    feature.add_argument(
        "--presentation",
        action=argparse.BooleanOptionalAction,
        default=True,
        help="Presentation layer",
    )
    feature.add_argument(
        "--api",
        action=argparse.BooleanOptionalAction,
        default=False,
        help="Remote data source (default: off)",
    )
    feature.add_argument(
        "--router",
        action=argparse.BooleanOptionalAction,
        default=True,
        help="Register the page in app_router.dart",
    )
    feature.add_argument(
        "--project-dir", "-d",
        type=Path,
        default=Path("."),
        help="Project root (default: current directory)",
    )
    feature.add_argument("--verbose", "-v", action="store_true", help="Debug logging")

    # -- templates ---------------------------------------------------------
    commands.add_parser("templates", help="List project presets")

    # -- config ------------------------------------------------------------
    config = commands.add_parser("config", help="Manage shared configurations")
    config_commands = config.add_subparsers(dest="config_command", required=True)
    config_commands.add_parser("list", help="List saved shared configurations")
    save = config_commands.add_parser("save", help="Save a project's choices as a shared configuration")
    save.add_argument("name", help="Configuration name")
    save.add_argument(
        "--project-dir", "-d",
        type=Path,
        default=Path("."),
        help="Project whose blueprint.yaml is captured (default: current directory)",
    )
    save.add_argument("--author", default="Unknown", help="Author recorded in the configuration")
    save.add_argument("--description", default="", help="One-line description")
    save.add_argument(
        "--require",
        action="append",
        default=[],
        metavar="PACKAGE",
        help="Package every project from this configuration depends on (repeatable)",
    )
    save.add_argument("--verbose", "-v", action="store_true", help="Debug logging")

    return parser


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


def config_from_args(
    args: argparse.Namespace,
    repository: ConfigRepository | None = None,
) -> tuple[BlueprintConfig, tuple[str, ...]]:
    """Build the project configuration from ``init`` arguments.

    ``--from-config`` names a manifest, a shared configuration file, or a
    configuration saved in *repository*.  Returns the configuration and the
    packages a shared configuration requires.

    Raises:
        ManifestError: If a manifest given to ``--from-config`` is invalid.
        SharedConfigError: If ``--from-config`` cannot be found or loaded.
        BlueprintError: If no app name is given.
        pydantic.ValidationError: If a value is invalid.
    """
    changes: dict[str, Any] = {}
    if args.name:
        changes["app_name"] = args.name
    if args.state_management:
        changes["state_management"] = args.state_management
    if args.platforms:
        changes["platforms"] = args.platforms
    for flag, field in _TOGGLES.items():
        value = getattr(args, flag)
        if value is not None:
            changes[field] = value
    if args.analytics:
        changes["analytics_provider"] = args.analytics
        changes["include_analytics"] = args.analytics != AnalyticsProvider.NONE.value
    if args.security:
        changes["security_level"] = args.security
    if args.ci:
        changes["ci_provider"] = args.ci
    if args.template:
        changes["preset"] = args.template

    if args.from_config:
        source = (repository or ConfigRepository(Settings().config_dir)).load_source(args.from_config)
        if isinstance(source, SharedBlueprintConfig):
            if "app_name" not in changes:
                raise BlueprintError(
                    f"An app name is required with shared config '{source.name}' "
                    "(blueprint init <name> --from-config ...)"
                )
            return source.to_blueprint_config(args.name).copy_with(**changes), source.required_packages
        return source.copy_with(**changes), ()
    if "app_name" not in changes:
        raise BlueprintError("An app name is required (blueprint init <name>)")
    return BlueprintConfig(**changes), ()


def cmd_init(args: argparse.Namespace, settings: Settings) -> int:
    config, required_packages = config_from_args(args, ConfigRepository(settings.config_dir))
    target = args.output / config.app_name

    resolver = BundleResolver()
    resolved = resolver.resolve(config, required_packages=required_packages)
    if args.latest_versions:
        client = PubVersionClient(settings.pub_api_url, settings.http_timeout)
        overrides = client.latest_constraints([*resolved.dependencies, *resolved.dev_dependencies])
        resolved = resolver.resolve(config, overrides, required_packages)

    result = ProjectGenerator(resolver=resolver).generate(
        config,
        target,
        overwrite=args.force,
        resolved=resolved,
    )

    print_summary_table(
        {
            "App": config.app_name,
            "State management": config.state_management.label,
            "Platforms": ", ".join(p.label for p in config.platforms),
            "Preset": config.preset.label,
            "Security": config.security_level.label,
            "Analytics": config.analytics_provider.label,
            "CI": config.ci_provider.label,
            "Bundles": ", ".join(resolved.bundle_names),
            "Files written": str(result.file_count),
            "Location": str(target),
        },
        title="Project generated",
    )
    print_success(f"Created {config.app_name} in {target}")
    print_info(f"Next: cd {target} && flutter pub get && flutter run")
    return 0


def cmd_add_feature(args: argparse.Namespace, settings: Settings) -> int:
    injector = FeatureInjector(
        manifest_filename=settings.manifest_filename,
        router_path=settings.router_path,
    )
    result = injector.inject(
        args.name,
        args.project_dir,
        include_data=args.data,
        include_domain=args.domain,
        include_presentation=args.presentation,
        include_api=args.api,
        update_router=args.router,
    )
    print_file_list(result.written, title=f"Feature '{args.name}' ({result.file_count} files)")

    router = result.router
    if router is not None:
        if router.outcome == RouterUpdate.PATCHED:
            print_success(f"Registered route /{args.name} in {settings.router_path}")
        elif router.outcome == RouterUpdate.ALREADY_PRESENT:
            print_info(f"Route for '{args.name}' already present in {settings.router_path}")
        elif router.outcome != RouterUpdate.SKIPPED:
            for warning in router.warnings:
                print_warning(warning)
    print_success(f"Feature '{args.name}' added")
    return 0


def cmd_templates(args: argparse.Namespace, settings: Settings) -> int:
    table = Table(title="Project presets", show_header=True, header_style="bold cyan")
    table.add_column("Preset", no_wrap=True)
    table.add_column("Title")
    table.add_column("Features")
    for preset in ProjectPreset:
        definition = PRESETS[preset]
        table.add_row(
            preset.value,
            definition.title,
            ", ".join(definition.features) or "home",
        )
    console.print(table)
    return 0


def cmd_config(args: argparse.Namespace, settings: Settings) -> int:
    repository = ConfigRepository(settings.config_dir)
    if args.config_command == "save":
        return _save_config(args, settings, repository)

    entries = repository.list_configs()
    if not entries:
        print_info(f"No shared configurations in {repository.config_dir}")
        return 0
    table = Table(title="Shared configurations", show_header=True, header_style="bold cyan")
    table.add_column("Name", no_wrap=True)
    table.add_column("Version")
    table.add_column("Author")
    table.add_column("Description")
    for entry in entries:
        table.add_row(entry.name, entry.config.version, entry.config.author, entry.config.description)
    console.print(table)
    return 0


def _save_config(args: argparse.Namespace, settings: Settings, repository: ConfigRepository) -> int:
    project = load_manifest(args.project_dir / settings.manifest_filename)
    shared = SharedBlueprintConfig.from_config(
        project,
        name=args.name,
        author=args.author,
        description=args.description,
        required_packages=tuple(args.require),
    )
    path = repository.save(shared, args.name)
    print_success(f"Saved shared configuration '{args.name}' to {path}")
    print_info(f"Use it with: blueprint init <name> --from-config {args.name}")
    return 0


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def main(argv: list[str] | None = None) -> int:
    """CLI entry point; returns the process exit code."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = Settings.from_env()
        configure_logging("DEBUG" if getattr(args, "verbose", False) else settings.log_level)
    except (ValidationError, ValueError) as exc:
        print_error(f"Invalid BLUEPRINT_* environment setting: {exc}")
        return 1

    handlers = {
        "init": cmd_init,
        "add": cmd_add_feature,
        "templates": cmd_templates,
        "config": cmd_config,
    }
    try:
        return handlers[args.command](args, settings)
    except BlueprintError as exc:
        print_error(str(exc))
    except ValidationError as exc:
        print_error(describe_validation_error(exc))
    return 1


if __name__ == "__main__":
    sys.exit(main())
