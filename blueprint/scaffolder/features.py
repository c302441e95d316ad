"""Feature-scoped file descriptors.

A feature lives under ``lib/features/<name>/`` and is split into three
clean-architecture layers.  The presentation layer has one file set per
state-management approach; :data:`_VARIANT_FILES` maps each
:class:`~blueprint.config.StateManagement` to its builder.

The same factory serves two callers: preset bundles (features generated at
``init`` time) and :class:`~blueprint.scaffolder.injector.FeatureInjector`
(``add feature`` on an existing project).
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from blueprint.config import BlueprintConfig, StateManagement
from blueprint.scaffolder.bundle import FileDescriptor
from blueprint.scaffolder.templates import feature_context, template
from blueprint.utils import to_pascal_case
from blueprint.validators import validate_feature_name

FEATURES_DIR = "lib/features"

# (file stem, action) pairs; the stem is formatted with the feature name.
USECASES: tuple[tuple[str, str], ...] = (
    ("get_{name}_list", "get_all"),
    ("get_{name}_by_id", "get_by_id"),
    ("create_{name}", "create"),
    ("update_{name}", "update"),
    ("delete_{name}", "delete"),
)


def feature_root(name: str) -> str:
    return f"{FEATURES_DIR}/{name}"


def page_path(name: str) -> str:
    return f"{feature_root(name)}/presentation/pages/{name}_page.dart"


def remote_data_source_path(name: str) -> str:
    return f"{feature_root(name)}/data/datasources/{name}_remote_data_source.dart"


def _project_has_api(config: BlueprintConfig) -> bool:
    return config.include_api


# ---------------------------------------------------------------------------
# Layers
# ---------------------------------------------------------------------------


def _data_layer(name: str, ctx: dict[str, Any], include_api: bool | None) -> list[FileDescriptor]:
    base = f"{feature_root(name)}/data"
    files = [
        FileDescriptor(f"{base}/models/{name}_model.dart", template("feature/model.dart.j2", **ctx)),
        FileDescriptor(
            f"{base}/datasources/{name}_local_data_source.dart",
            template("feature/local_data_source.dart.j2", **ctx),
        ),
    ]
    if include_api is not False:
        files.append(
            FileDescriptor(
                remote_data_source_path(name),
                template("feature/remote_data_source.dart.j2", **ctx),
                _project_has_api if include_api is None else None,
            )
        )
    files.append(
        FileDescriptor(
            f"{base}/repositories/{name}_repository_impl.dart",
            template("feature/repository_impl.dart.j2", **ctx),
        )
    )
    return files


def _domain_layer(name: str, ctx: dict[str, Any]) -> list[FileDescriptor]:
    base = f"{feature_root(name)}/domain"
    files = [
        FileDescriptor(f"{base}/entities/{name}_entity.dart", template("feature/entity.dart.j2", **ctx)),
        FileDescriptor(
            f"{base}/repositories/{name}_repository.dart",
            template("feature/repository.dart.j2", **ctx),
        ),
    ]
    for stem, action in USECASES:
        file_stem = stem.format(name=name)
        files.append(
            FileDescriptor(
                f"{base}/usecases/{file_stem}.dart",
                template(
                    "feature/usecase.dart.j2",
                    action=action,
                    usecase_class=to_pascal_case(file_stem),
                    **ctx,
                ),
            )
        )
    return files


def _provider_files(name: str, ctx: dict[str, Any]) -> list[FileDescriptor]:
    base = f"{feature_root(name)}/presentation/provider"
    return [FileDescriptor(f"{base}/{name}_provider.dart", template("feature/provider/provider.dart.j2", **ctx))]


def _riverpod_files(name: str, ctx: dict[str, Any]) -> list[FileDescriptor]:
    base = f"{feature_root(name)}/presentation/providers"
    return [
        FileDescriptor(f"{base}/{name}_{part}.dart", template(f"feature/riverpod/{part}.dart.j2", **ctx))
        for part in ("state", "notifier", "providers")
    ]


def _bloc_files(name: str, ctx: dict[str, Any]) -> list[FileDescriptor]:
    base = f"{feature_root(name)}/presentation/bloc"
    return [
        FileDescriptor(f"{base}/{name}_{part}.dart", template(f"feature/bloc/{part}.dart.j2", **ctx))
        for part in ("event", "state", "bloc")
    ]


_VARIANT_FILES: dict[StateManagement, Callable[[str, dict[str, Any]], list[FileDescriptor]]] = {
    StateManagement.PROVIDER: _provider_files,
    StateManagement.RIVERPOD: _riverpod_files,
    StateManagement.BLOC: _bloc_files,
}


def _presentation_layer(
    name: str,
    ctx: dict[str, Any],
    state_management: StateManagement,
) -> list[FileDescriptor]:
    base = f"{feature_root(name)}/presentation"
    files = [
        FileDescriptor(page_path(name), template("feature/page.dart.j2", **ctx)),
        FileDescriptor(
            f"{base}/widgets/{name}_list_item.dart",
            template("feature/list_item.dart.j2", **ctx),
        ),
    ]
    files.extend(_VARIANT_FILES[state_management](name, ctx))
    return files


# ---------------------------------------------------------------------------
# Public factory
# ---------------------------------------------------------------------------


def build_feature_descriptors(
    name: str,
    state_management: StateManagement,
    *,
    include_data: bool = True,
    include_domain: bool = True,
    include_presentation: bool = True,
    include_api: bool | None = True,
) -> tuple[FileDescriptor, ...]:
    """Return the descriptors for one feature.

    Args:
        name: Feature name; validated before anything else happens.
        state_management: Selects the presentation-layer file set.
        include_data: Model, data sources and repository implementation.
        include_domain: Entity, repository contract and five use cases.
        include_presentation: Page, list item widget and state files.
        include_api: Adds the remote data source (data layer only).
            ``None`` defers to the project's ``include_api`` flag at
            generation time: the remote data source is always declared,
            guarded by a predicate, and the repository follows the flag.

    Raises:
        InvalidNameError: If *name* is not a valid feature name.
    """
    validate_feature_name(name)

    if include_domain:
        item_type, item_import = f"{to_pascal_case(name)}Entity", f"../../domain/entities/{name}_entity.dart"
    elif include_data:
        item_type, item_import = f"{to_pascal_case(name)}Model", f"../../data/models/{name}_model.dart"
    else:
        item_type, item_import = "String", ""

    ctx: dict[str, Any] = {
        **feature_context(name),
        "has_domain": include_domain,
        "item_type": item_type,
        "item_import": item_import,
    }
    if include_api is not None:
        ctx["feature_api"] = include_api

    files: list[FileDescriptor] = []
    if include_data:
        files.extend(_data_layer(name, ctx, include_api))
    if include_domain:
        files.extend(_domain_layer(name, ctx))
    if include_presentation:
        files.extend(_presentation_layer(name, ctx, state_management))
    return tuple(files)
