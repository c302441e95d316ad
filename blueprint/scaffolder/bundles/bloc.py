"""Bloc base bundle."""

from __future__ import annotations

from blueprint.config import BlueprintConfig
from blueprint.scaffolder.bundle import FileDescriptor, TemplateBundle
from blueprint.scaffolder.bundles.base import build_variant_bundle
from blueprint.scaffolder.templates import template

DEPENDENCIES: dict[str, str] = {
    "bloc": "^8.1.2",
    "equatable": "^2.0.5",
    "flutter_bloc": "^8.1.3",
}


def build_bloc_bundle(config: BlueprintConfig | None = None) -> TemplateBundle:
    """Core files plus a bloc observer and the home bloc/event/state trio."""
    home = "lib/features/home/presentation/bloc"
    files = [
        FileDescriptor("lib/main.dart", template("bloc/main.dart.j2")),
        FileDescriptor("lib/app/app.dart", template("bloc/app.dart.j2")),
        FileDescriptor("lib/core/bloc/app_bloc_observer.dart", template("bloc/app_bloc_observer.dart.j2")),
        FileDescriptor(f"{home}/home_event.dart", template("bloc/home_event.dart.j2")),
        FileDescriptor(f"{home}/home_state.dart", template("bloc/home_state.dart.j2")),
        FileDescriptor(f"{home}/home_bloc.dart", template("bloc/home_bloc.dart.j2")),
    ]
    return build_variant_bundle(
        "bloc",
        files,
        config,
        DEPENDENCIES,
        dev_dependencies=(("bloc_test", "^9.1.5", lambda c: c.include_tests),),
    )
