"""Bundle resolution, project generation and feature injection.

Quick usage::

    from blueprint.config import BlueprintConfig
    from blueprint.scaffolder import FeatureInjector, ProjectGenerator

    config = BlueprintConfig(app_name="shop", preset="ecommerce")
    ProjectGenerator().generate(config, "/tmp/shop")
    FeatureInjector().inject("wishlist", "/tmp/shop")
"""

from blueprint.scaffolder.bundle import FileDescriptor, TemplateBundle
from blueprint.scaffolder.generator import GenerationResult, ProjectGenerator
from blueprint.scaffolder.injector import FeatureInjector
from blueprint.scaffolder.resolver import BundleResolver, ResolvedBundle
from blueprint.scaffolder.router import (
    AnchorState,
    RouterPatchResult,
    RouterUpdate,
    patch_router,
)
from blueprint.scaffolder.templates import TemplateRenderer

__all__ = [
    "AnchorState",
    "BundleResolver",
    "FeatureInjector",
    "FileDescriptor",
    "GenerationResult",
    "ProjectGenerator",
    "ResolvedBundle",
    "RouterPatchResult",
    "RouterUpdate",
    "TemplateBundle",
    "TemplateRenderer",
    "patch_router",
]
