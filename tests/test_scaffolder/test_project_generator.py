"""Unit tests for ProjectGenerator (blueprint.scaffolder.generator).

Tests cover:
- Full generation per state-management variant
- Skipped descriptors and deterministic output
- Target directory checks and overwrite
- Failure mid-run (no rollback) and re-run
"""

from __future__ import annotations

import logging
from pathlib import Path
from unittest.mock import patch

import pytest
import yaml

from blueprint.config import BlueprintConfig
from blueprint.errors import GenerationError, TargetDirectoryError
from blueprint.manifest import load_manifest
from blueprint.scaffolder import BundleResolver, FileDescriptor, ProjectGenerator
from blueprint.scaffolder import generator as generator_module


def _tree(root: Path) -> dict[str, bytes]:
    return {
        p.relative_to(root).as_posix(): p.read_bytes()
        for p in sorted(root.rglob("*"))
        if p.is_file()
    }


# ---------------------------------------------------------------------------
# Generation
# ---------------------------------------------------------------------------


class TestGenerate:
    @pytest.mark.unit
    def test_default_project(self, tmp_path, base_config):
        root = tmp_path / "demo_app"
        result = ProjectGenerator().generate(base_config, root)

        assert result.root == root
        assert result.file_count == len(result.written) > 0
        assert result.router is None
        for relative in ("pubspec.yaml", "blueprint.yaml", "lib/main.dart", "lib/core/routing/app_router.dart"):
            assert (root / relative).is_file()
        assert sorted(result.written) == sorted(_tree(root))

    @pytest.mark.unit
    def test_each_variant_generates(self, tmp_path, state_management):
        config = BlueprintConfig(app_name="app", state_management=state_management)
        root = tmp_path / "app"
        ProjectGenerator().generate(config, root)
        main = (root / "lib/main.dart").read_text(encoding="utf-8")
        pubspec = yaml.safe_load((root / "pubspec.yaml").read_text(encoding="utf-8"))
        expected_package = {"provider": "provider", "riverpod": "flutter_riverpod", "bloc": "flutter_bloc"}
        assert expected_package[state_management.value] in pubspec["dependencies"]
        assert "Future<void> main() async {" in main
        assert "runApp(" in main

    @pytest.mark.unit
    def test_full_config(self, tmp_path, full_config):
        root = tmp_path / "full_app"
        result = ProjectGenerator().generate(full_config.copy_with(preset="chat_app"), root)
        assert (root / "lib/core/security/certificate_pinner.dart").is_file()
        assert (root / "lib/core/analytics/firebase_analytics_service.dart").is_file()
        assert (root / "lib/core/storage/hive_database.dart").is_file()
        assert (root / "web/index.html").is_file()
        assert (root / "lib/features/messages/presentation/pages/messages_page.dart").is_file()
        assert "lib/core/analytics/sentry_analytics_service.dart" in result.skipped

    @pytest.mark.unit
    def test_generated_yaml_files_parse(self, tmp_path, full_config):
        root = tmp_path / "full_app"
        ProjectGenerator().generate(full_config, root)
        for relative in ("pubspec.yaml", "blueprint.yaml", "analysis_options.yaml", ".github/workflows/ci.yml"):
            assert yaml.safe_load((root / relative).read_text(encoding="utf-8")) is not None

    @pytest.mark.unit
    def test_manifest_round_trips(self, tmp_path, full_config):
        root = tmp_path / "full_app"
        ProjectGenerator().generate(full_config, root)
        assert load_manifest(root / "blueprint.yaml") == full_config

    @pytest.mark.unit
    def test_skipped_lists_excluded_descriptors(self, tmp_path, base_config):
        result = ProjectGenerator().generate(base_config, tmp_path / "demo_app")
        assert "l10n.yaml" in result.skipped
        assert "web/index.html" in result.skipped
        assert not (tmp_path / "demo_app" / "l10n.yaml").exists()
        assert set(result.written).isdisjoint(result.skipped)

    @pytest.mark.unit
    def test_output_is_deterministic(self, tmp_path, full_config):
        ProjectGenerator().generate(full_config, tmp_path / "one")
        ProjectGenerator().generate(full_config, tmp_path / "two")
        assert _tree(tmp_path / "one") == _tree(tmp_path / "two")

    @pytest.mark.unit
    def test_files_use_unix_newlines(self, generated_project):
        for content in _tree(generated_project).values():
            assert b"\r\n" not in content

    @pytest.mark.unit
    def test_uses_pre_resolved_bundle(self, tmp_path, base_config):
        resolver = BundleResolver()
        resolved = resolver.resolve(base_config, {"dio": "^5.9.0"})
        ProjectGenerator(resolver=resolver).generate(base_config, tmp_path / "app", resolved=resolved)
        assert "dio: ^5.9.0" in (tmp_path / "app" / "pubspec.yaml").read_text(encoding="utf-8")

    @pytest.mark.unit
    def test_logs_progress(self, tmp_path, base_config, caplog):
        with caplog.at_level(logging.INFO, logger="blueprint.scaffolder.generator"):
            ProjectGenerator().generate(base_config, tmp_path / "demo_app")
        assert "Generating demo_app" in caplog.text
        assert "Wrote" in caplog.text


class TestFlagToggles:
    @pytest.fixture
    def minimal(self) -> BlueprintConfig:
        return BlueprintConfig(
            app_name="demo",
            include_theme=False,
            include_env=False,
            include_api=False,
            include_tests=False,
        )

    @pytest.mark.unit
    def test_minimal_project(self, tmp_path, minimal):
        root = tmp_path / "demo"
        ProjectGenerator().generate(minimal, root)
        for directory in ("lib/core/theme", "lib/l10n", "lib/core/security", "lib/core/analytics", "lib/core/api", "test"):
            assert not (root / directory).exists(), directory
        assert not (root / ".env").exists()

    @pytest.mark.unit
    def test_hive_adds_exactly_its_files(self, tmp_path, minimal):
        without = ProjectGenerator().generate(minimal, tmp_path / "without")
        with_hive = ProjectGenerator().generate(minimal.copy_with(include_hive=True), tmp_path / "with")

        assert set(with_hive.written) - set(without.written) == {
            "lib/core/storage/hive_database.dart",
            "lib/core/storage/cache_manager.dart",
            "lib/core/storage/sync_manager.dart",
        }
        assert set(without.written) <= set(with_hive.written)

        main_with = (tmp_path / "with/lib/main.dart").read_text(encoding="utf-8")
        main_without = (tmp_path / "without/lib/main.dart").read_text(encoding="utf-8")
        assert "HiveDatabase.init()" in main_with
        assert "HiveDatabase" not in main_without

        pubspec_with = yaml.safe_load((tmp_path / "with/pubspec.yaml").read_text(encoding="utf-8"))
        pubspec_without = yaml.safe_load((tmp_path / "without/pubspec.yaml").read_text(encoding="utf-8"))
        assert "hive" in pubspec_with["dependencies"]
        assert "hive" not in pubspec_without["dependencies"]
        assert "hive_generator" not in (pubspec_without["dev_dependencies"] or {})

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "field, removed",
        [
            (
                "include_theme",
                {"lib/core/theme/app_theme.dart", "lib/core/theme/app_colors.dart", "lib/core/theme/typography.dart"},
            ),
            ("include_localization", {"l10n.yaml", "lib/l10n/app_en.arb", "lib/l10n/app_es.arb"}),
            ("include_env", {".env", ".env.example", "lib/core/config/env_loader.dart"}),
            (
                "include_api",
                {
                    "lib/core/api/api_client.dart",
                    "lib/core/api/api_response.dart",
                    "lib/core/api/interceptors/auth_interceptor.dart",
                    "lib/core/api/interceptors/retry_interceptor.dart",
                    "lib/core/api/interceptors/logger_interceptor.dart",
                },
            ),
            (
                "include_tests",
                {"test/widget_test.dart", "test/core/utils/validators_test.dart", "test/helpers/test_helpers.dart"},
            ),
            (
                "include_pagination",
                {
                    "lib/core/pagination/pagination_controller.dart",
                    "lib/core/widgets/paginated_list_view.dart",
                    "lib/core/widgets/skeleton_loader.dart",
                },
            ),
            (
                "include_analytics",
                {
                    "lib/core/analytics/analytics_service.dart",
                    "lib/core/analytics/analytics_events.dart",
                    "lib/core/analytics/crash_reporter.dart",
                    "lib/core/analytics/firebase_analytics_service.dart",
                },
            ),
        ],
    )
    def test_single_flag_removes_exactly_its_files(self, tmp_path, field, removed):
        everything = BlueprintConfig(
            app_name="demo",
            include_localization=True,
            include_pagination=True,
            include_analytics=True,
            analytics_provider="firebase",
        )
        on = ProjectGenerator().generate(everything, tmp_path / "on")
        off = ProjectGenerator().generate(everything.copy_with(**{field: False}), tmp_path / "off")

        assert set(on.written) - set(off.written) == removed
        assert set(off.written) - set(on.written) == set()

    @pytest.mark.unit
    def test_enterprise_is_strict_superset_of_basic(self, tmp_path, base_config):
        basic = ProjectGenerator().generate(base_config.copy_with(security_level="basic"), tmp_path / "basic")
        enterprise = ProjectGenerator().generate(
            base_config.copy_with(security_level="enterprise"),
            tmp_path / "enterprise",
        )
        assert set(basic.written) < set(enterprise.written)


# ---------------------------------------------------------------------------
# Target directory
# ---------------------------------------------------------------------------


class TestTargetDirectory:
    @pytest.mark.unit
    def test_existing_empty_directory_is_fine(self, tmp_path, base_config):
        root = tmp_path / "demo_app"
        root.mkdir()
        assert ProjectGenerator().generate(base_config, root).file_count > 0

    @pytest.mark.unit
    def test_non_empty_directory_rejected(self, tmp_path, base_config):
        root = tmp_path / "demo_app"
        root.mkdir()
        (root / "keep.txt").write_text("mine")
        with pytest.raises(TargetDirectoryError):
            ProjectGenerator().generate(base_config, root)
        assert [p.name for p in root.iterdir()] == ["keep.txt"]

    @pytest.mark.unit
    def test_overwrite(self, generated_project, base_config):
        (generated_project / "lib/main.dart").write_text("// edited\n")
        (generated_project / "notes.txt").write_text("mine")
        ProjectGenerator().generate(base_config, generated_project, overwrite=True)
        assert "// edited" not in (generated_project / "lib/main.dart").read_text(encoding="utf-8")
        assert (generated_project / "notes.txt").read_text() == "mine"

    @pytest.mark.unit
    def test_target_is_a_file(self, tmp_path, base_config):
        target = tmp_path / "demo_app"
        target.write_text("")
        with pytest.raises(TargetDirectoryError):
            ProjectGenerator().generate(base_config, target)


# ---------------------------------------------------------------------------
# Failures
# ---------------------------------------------------------------------------


class TestFailures:
    @pytest.mark.unit
    def test_failure_keeps_earlier_files(self, tmp_path, base_config):
        root = tmp_path / "demo_app"
        real_write = generator_module._write_file
        failing = root / "lib/core/errors/exceptions.dart"

        def flaky_write(path: Path, content: str) -> None:
            if path == failing:
                raise PermissionError(13, "Permission denied")
            real_write(path, content)

        with patch.object(generator_module, "_write_file", side_effect=flaky_write):
            with pytest.raises(GenerationError) as exc_info:
                ProjectGenerator().generate(base_config, root)

        error = exc_info.value
        assert error.path == "lib/core/errors/exceptions.dart"
        assert isinstance(error.cause, PermissionError)
        assert "Permission denied" in str(error)
        assert error.written
        for relative in error.written:
            assert (root / relative).is_file()
        assert not failing.exists()
        assert not (root / "pubspec.yaml").exists()

    @pytest.mark.unit
    def test_rerun_after_failure(self, tmp_path, base_config):
        root = tmp_path / "demo_app"
        with patch.object(generator_module, "_write_file", side_effect=OSError(28, "No space left")):
            with pytest.raises(GenerationError) as exc_info:
                ProjectGenerator().generate(base_config, root)
        assert exc_info.value.written == []

        result = ProjectGenerator().generate(base_config, root, overwrite=True)
        assert (root / "pubspec.yaml").is_file()
        assert sorted(result.written) == sorted(_tree(root))

    @pytest.mark.unit
    def test_build_error_propagates(self, tmp_path, base_config):
        def broken(config):
            raise RuntimeError("template bug")

        descriptors = [
            FileDescriptor("ok.txt", lambda config: "ok\n"),
            FileDescriptor("broken.txt", broken),
        ]
        with pytest.raises(RuntimeError, match="template bug"):
            ProjectGenerator().write_descriptors(tmp_path, descriptors, base_config)
        assert (tmp_path / "ok.txt").read_text() == "ok\n"


class TestWriteDescriptors:
    @pytest.mark.unit
    def test_writes_in_order_and_creates_parents(self, tmp_path, base_config):
        descriptors = [
            FileDescriptor("b/deep/one.txt", lambda config: "1"),
            FileDescriptor("a.txt", lambda config: config.app_name),
            FileDescriptor("skip.txt", lambda config: "", lambda config: False),
        ]
        result = ProjectGenerator().write_descriptors(tmp_path, descriptors, base_config)
        assert result.written == ["b/deep/one.txt", "a.txt"]
        assert result.skipped == ["skip.txt"]
        assert (tmp_path / "a.txt").read_text() == "demo_app"

    @pytest.mark.unit
    def test_overwrites_existing_file(self, tmp_path, base_config):
        (tmp_path / "a.txt").write_text("old content that is longer")
        ProjectGenerator().write_descriptors(tmp_path, [FileDescriptor("a.txt", lambda config: "new")], base_config)
        assert (tmp_path / "a.txt").read_text() == "new"
