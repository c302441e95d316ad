"""Incremental feature injection into an existing project.

``blueprint add feature <name>`` re-reads the project's manifest, writes the
feature's files through :meth:`ProjectGenerator.write_descriptors` and wires
the new page into the router.  The injector keeps no state between runs:
each invocation re-reads the router, re-checks its marker and re-writes it
only when something changed.
"""

from __future__ import annotations

import logging
from pathlib import Path

from blueprint.config import MANIFEST_FILENAME, ROUTER_PATH
from blueprint.manifest import load_manifest
from blueprint.scaffolder.features import build_feature_descriptors
from blueprint.scaffolder.generator import GenerationResult, ProjectGenerator
from blueprint.scaffolder.router import (
    AnchorState,
    RouterPatchResult,
    RouterUpdate,
    patch_router,
)
from blueprint.validators import validate_feature_name

__all__ = [
    "AnchorState",
    "FeatureInjector",
    "RouterPatchResult",
    "RouterUpdate",
    "patch_router",
]

logger = logging.getLogger(__name__)


class FeatureInjector:
    """Adds one feature to a generated project.

    Args:
        generator: Used for its ``write_descriptors``; a default is created.
        log: Logger for progress and router warnings.
        manifest_filename: Manifest location relative to the project root.
        router_path: Router location relative to the project root.
    """

    def __init__(
        self,
        generator: ProjectGenerator | None = None,
        log: logging.Logger | None = None,
        *,
        manifest_filename: str = MANIFEST_FILENAME,
        router_path: str = ROUTER_PATH,
    ) -> None:
        self.log = log or logger
        self.generator = generator or ProjectGenerator(log=self.log)
        self.manifest_filename = manifest_filename
        self.router_path = router_path

    def inject(
        self,
        feature_name: str,
        project_root: str | Path,
        *,
        include_data: bool = True,
        include_domain: bool = True,
        include_presentation: bool = True,
        include_api: bool = False,
        update_router: bool = True,
    ) -> GenerationResult:
        """Generate *feature_name* inside *project_root*.

        Raises:
            InvalidNameError: Before any file-system access, for a bad name.
            ManifestError: If *project_root* has no readable manifest.
            GenerationError: If a feature file cannot be written.
        """
        validate_feature_name(feature_name)
        root = Path(project_root)
        config = load_manifest(root / self.manifest_filename)

        descriptors = build_feature_descriptors(
            feature_name,
            config.state_management,
            include_data=include_data,
            include_domain=include_domain,
            include_presentation=include_presentation,
            include_api=include_api,
        )
        self.log.info(
            "Adding feature %s (%s) to %s",
            feature_name,
            config.state_management.value,
            root,
        )
        result = self.generator.write_descriptors(root, descriptors, config)

        if include_presentation and update_router:
            result.router = self.update_router(root, feature_name)
        else:
            result.router = RouterPatchResult(outcome=RouterUpdate.SKIPPED)
        return result

    def update_router(self, project_root: str | Path, feature_name: str) -> RouterPatchResult:
        """Patch the router file of *project_root* for *feature_name*.

        Anchor misses and an unreadable or unwritable router are logged as
        warnings and reported in the result; they never raise.
        """
        router_file = Path(project_root) / self.router_path
        if not router_file.is_file():
            message = f"{self.router_path} not found; add the route for '{feature_name}' manually"
            self.log.warning(message)
            return RouterPatchResult(outcome=RouterUpdate.ROUTER_MISSING, warnings=[message])

        try:
            original = router_file.read_text(encoding="utf-8")
        except UnicodeDecodeError as exc:
            return self._router_error(f"{self.router_path} is not valid UTF-8 (byte {exc.start})", feature_name)
        except OSError as exc:
            return self._router_error(f"cannot read {self.router_path} ({exc.strerror or exc})", feature_name)

        patched, result = patch_router(original, feature_name)

        for warning in result.warnings:
            self.log.warning("Router update: %s", warning)
        if patched != original:
            try:
                router_file.write_bytes(patched.encode("utf-8"))
            except OSError as exc:
                return self._router_error(f"cannot write {self.router_path} ({exc.strerror or exc})", feature_name)
            self.log.info("Updated %s with route for %s", self.router_path, feature_name)
        elif result.outcome == RouterUpdate.ALREADY_PRESENT:
            self.log.info("Route for %s already present in %s", feature_name, self.router_path)
        return result

    def _router_error(self, reason: str, feature_name: str) -> RouterPatchResult:
        message = f"{reason}; add the route for '{feature_name}' manually"
        self.log.warning(message)
        return RouterPatchResult(outcome=RouterUpdate.ROUTER_ERROR, warnings=[message])
