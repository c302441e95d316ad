"""Unit tests for FeatureInjector (blueprint.scaffolder.injector).

Tests cover:
- Feature files written into a generated project
- Router registration and idempotence on disk
- Missing manifest / router, invalid names
- Layer switches
"""

from __future__ import annotations

import logging
from pathlib import Path
from unittest.mock import patch

import pytest

from blueprint.config import BlueprintConfig, ROUTER_PATH
from blueprint.errors import InvalidNameError, ManifestError
from blueprint.scaffolder.injector import FeatureInjector, RouterUpdate
from blueprint.scaffolder.router import import_line


def _router(root: Path) -> str:
    return (root / ROUTER_PATH).read_text(encoding="utf-8")


# ---------------------------------------------------------------------------
# Happy path
# ---------------------------------------------------------------------------


class TestInject:
    @pytest.mark.unit
    def test_writes_feature_and_patches_router(self, generated_project):
        result = FeatureInjector().inject("wishlist", generated_project)

        assert result.file_count == 13
        for relative in result.written:
            assert relative.startswith("lib/features/wishlist/")
            assert (generated_project / relative).is_file()
        assert result.router.outcome == RouterUpdate.PATCHED

        router = _router(generated_project)
        assert import_line("wishlist") in router
        assert "static const String wishlist = '/wishlist';" in router
        assert "const WishlistPage()" in router

    @pytest.mark.unit
    def test_uses_manifest_state_management(self, make_project):
        root = make_project(BlueprintConfig(app_name="shop", state_management="bloc"))
        result = FeatureInjector().inject("cart", root)
        assert "lib/features/cart/presentation/bloc/cart_bloc.dart" in result.written
        page = (root / "lib/features/cart/presentation/pages/cart_page.dart").read_text(encoding="utf-8")
        assert "flutter_bloc" in page

    @pytest.mark.unit
    def test_api_flag(self, generated_project):
        result = FeatureInjector().inject("wishlist", generated_project, include_api=True)
        assert "lib/features/wishlist/data/datasources/wishlist_remote_data_source.dart" in result.written

    @pytest.mark.unit
    def test_api_is_off_by_default(self, generated_project):
        result = FeatureInjector().inject("wishlist", generated_project)
        assert not any("remote_data_source" in p for p in result.written)

    @pytest.mark.unit
    def test_router_still_compiles_shape(self, generated_project):
        FeatureInjector().inject("wishlist", generated_project)
        router = _router(generated_project)
        assert router.index("case RouteNames.wishlist:") < router.index("default:")
        assert router.count("{") == router.count("}")


# ---------------------------------------------------------------------------
# Idempotence
# ---------------------------------------------------------------------------


class TestIdempotence:
    @pytest.mark.unit
    def test_second_run_leaves_router_unchanged(self, generated_project):
        injector = FeatureInjector()
        injector.inject("wishlist", generated_project)
        after_first = _router(generated_project)

        result = injector.inject("wishlist", generated_project)

        assert _router(generated_project) == after_first
        assert result.router.outcome == RouterUpdate.ALREADY_PRESENT
        assert result.file_count == 13

    @pytest.mark.unit
    def test_router_untouched_when_already_present(self, generated_project):
        injector = FeatureInjector()
        injector.inject("wishlist", generated_project)
        router_file = generated_project / ROUTER_PATH
        mtime = router_file.stat().st_mtime_ns

        injector.update_router(generated_project, "wishlist")
        assert router_file.stat().st_mtime_ns == mtime

    @pytest.mark.unit
    def test_preset_feature_already_routed(self, make_project):
        root = make_project(BlueprintConfig(app_name="shop", preset="ecommerce"))
        before = _router(root)
        result = FeatureInjector().inject("cart", root)
        assert result.router.outcome == RouterUpdate.ALREADY_PRESENT
        assert _router(root) == before


# ---------------------------------------------------------------------------
# Skips and failures
# ---------------------------------------------------------------------------


class TestSkipsAndFailures:
    @pytest.mark.unit
    def test_no_presentation_skips_router(self, generated_project):
        before = _router(generated_project)
        result = FeatureInjector().inject("wishlist", generated_project, include_presentation=False)
        assert result.router.outcome == RouterUpdate.SKIPPED
        assert _router(generated_project) == before
        assert not any("/presentation/" in p for p in result.written)

    @pytest.mark.unit
    def test_router_flag_off(self, generated_project):
        before = _router(generated_project)
        result = FeatureInjector().inject("wishlist", generated_project, update_router=False)
        assert result.router.outcome == RouterUpdate.SKIPPED
        assert _router(generated_project) == before

    @pytest.mark.unit
    def test_missing_router(self, generated_project, caplog):
        (generated_project / ROUTER_PATH).unlink()
        with caplog.at_level(logging.WARNING):
            result = FeatureInjector().inject("wishlist", generated_project)
        assert result.router.outcome == RouterUpdate.ROUTER_MISSING
        assert result.router.warnings
        assert (generated_project / "lib/features/wishlist/presentation/pages/wishlist_page.dart").is_file()
        assert "not found" in caplog.text

    @pytest.mark.unit
    def test_router_without_anchors_warns(self, generated_project, caplog):
        (generated_project / ROUTER_PATH).write_text("// custom router\n", encoding="utf-8")
        with caplog.at_level(logging.WARNING):
            result = FeatureInjector().inject("wishlist", generated_project)
        assert result.router.outcome == RouterUpdate.ANCHOR_NOT_FOUND
        assert len(result.router.warnings) == 3
        assert _router(generated_project) == "// custom router\n"
        assert "Router update" in caplog.text

    @pytest.mark.unit
    def test_undecodable_router_warns(self, generated_project, caplog):
        (generated_project / ROUTER_PATH).write_bytes(b"import 'a.dart';\n\xff\n")
        with caplog.at_level(logging.WARNING):
            result = FeatureInjector().inject("wishlist", generated_project)
        assert result.router.outcome == RouterUpdate.ROUTER_ERROR
        assert "not valid UTF-8" in result.router.warnings[0]
        assert (generated_project / ROUTER_PATH).read_bytes() == b"import 'a.dart';\n\xff\n"
        assert (generated_project / "lib/features/wishlist/presentation/pages/wishlist_page.dart").is_file()
        assert "add the route for 'wishlist' manually" in caplog.text

    @pytest.mark.unit
    def test_unwritable_router_warns(self, generated_project):
        before = _router(generated_project)
        with patch.object(Path, "write_bytes", side_effect=PermissionError(13, "Permission denied")):
            result = FeatureInjector().update_router(generated_project, "wishlist")
        assert result.outcome == RouterUpdate.ROUTER_ERROR
        assert "Permission denied" in result.warnings[0]
        assert _router(generated_project) == before

    @pytest.mark.unit
    def test_missing_manifest(self, tmp_path):
        with pytest.raises(ManifestError, match="blueprint.yaml not found"):
            FeatureInjector().inject("wishlist", tmp_path)
        assert list(tmp_path.iterdir()) == []

    @pytest.mark.unit
    def test_invalid_name_checked_before_manifest(self, tmp_path):
        with pytest.raises(InvalidNameError):
            FeatureInjector().inject("Wish-List", tmp_path)
        assert list(tmp_path.iterdir()) == []

    @pytest.mark.unit
    def test_custom_locations(self, generated_project):
        (generated_project / "blueprint.yaml").rename(generated_project / "project.yaml")
        (generated_project / ROUTER_PATH).rename(generated_project / "lib/router.dart")
        injector = FeatureInjector(manifest_filename="project.yaml", router_path="lib/router.dart")

        result = injector.inject("wishlist", generated_project)

        assert result.router.outcome == RouterUpdate.PATCHED
        assert "WishlistPage" in (generated_project / "lib/router.dart").read_text(encoding="utf-8")
