"""Project generation.

Takes a ``BlueprintConfig``, resolves its bundles and writes every applicable
file under a target directory.  Writes are sequential and each file is fully
overwritten.  A failure stops generation immediately; files written before it
stay on disk and re-running with ``overwrite=True`` is always safe.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path

from pydantic import BaseModel, Field, computed_field

from blueprint.config import BlueprintConfig
from blueprint.errors import GenerationError, TargetDirectoryError
from blueprint.scaffolder.bundle import FileDescriptor
from blueprint.scaffolder.resolver import BundleResolver, ResolvedBundle
from blueprint.scaffolder.router import RouterPatchResult
from blueprint.validators import is_empty_or_missing

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Result model
# ---------------------------------------------------------------------------


class GenerationResult(BaseModel):
    """What a generation (or feature injection) run did."""

    root: Path
    written: list[str] = Field(default_factory=list, description="Relative paths written, in order")
    skipped: list[str] = Field(default_factory=list, description="Descriptors whose predicate was false")
    router: RouterPatchResult | None = Field(default=None, description="Set by the feature injector")

    @computed_field  # type: ignore[prop-decorator]
    @property
    def file_count(self) -> int:
        return len(self.written)


# ---------------------------------------------------------------------------
# Generator
# ---------------------------------------------------------------------------


class ProjectGenerator:
    """Writes resolved descriptors to disk.

    Args:
        resolver: Bundle resolver; a default one is created if omitted.
        log: Logger used for progress messages.
    """

    def __init__(
        self,
        resolver: BundleResolver | None = None,
        log: logging.Logger | None = None,
    ) -> None:
        self.log = log or logger
        self.resolver = resolver or BundleResolver(log=self.log)

    # -- Public API --------------------------------------------------------

    def generate(
        self,
        config: BlueprintConfig,
        target: str | Path,
        *,
        overwrite: bool = False,
        resolved: ResolvedBundle | None = None,
    ) -> GenerationResult:
        """Generate the complete project for *config* at *target*.

        Args:
            config: Project configuration.
            target: Project root directory; created if missing.
            overwrite: Allow writing into an existing, non-empty directory.
            resolved: Pre-resolved bundle (e.g. with fetched versions);
                resolved from *config* when omitted.

        Raises:
            TargetDirectoryError: If *target* is non-empty and not *overwrite*.
            ResolutionError: If bundles collide.
            GenerationError: If a write fails.
        """
        root = Path(target)
        if not overwrite and not is_empty_or_missing(root):
            raise TargetDirectoryError(root)

        if resolved is None:
            resolved = self.resolver.resolve(config)

        self.log.info(
            "Generating %s (%s, %s)",
            config.app_name,
            config.state_management.value,
            ", ".join(p.value for p in config.platforms),
        )
        result = self.write_descriptors(root, resolved.files, config)
        self.log.info("Wrote %d files to %s", result.file_count, root)
        return result

    def write_descriptors(
        self,
        root: str | Path,
        descriptors: Iterable[FileDescriptor],
        config: BlueprintConfig,
    ) -> GenerationResult:
        """Evaluate and write *descriptors* under *root*, in order.

        Raises:
            GenerationError: On the first failed write.  ``written`` on the
                exception lists the files already on disk.
        """
        root = Path(root)
        result = GenerationResult(root=root)

        for descriptor in descriptors:
            if not descriptor.should_include(config):
                result.skipped.append(descriptor.path)
                continue
            content = descriptor.build(config)
            try:
                _write_file(root / descriptor.path, content)
            except OSError as exc:
                self.log.error("Failed to write %s: %s", descriptor.path, exc)
                raise GenerationError(descriptor.path, result.written, exc) from exc
            result.written.append(descriptor.path)
            self.log.debug("wrote %s", descriptor.path)

        return result


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _write_file(path: Path, content: str) -> None:
    """Create parent dirs and write *content* as UTF-8 with ``\\n`` newlines."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(content.encode("utf-8"))
