"""Shared pytest fixtures for the blueprint test suite.

Provides reusable fixtures for:
- Configurations covering each state-management variant
- A generated project directory (for injector tests)
- Minimal router sources with and without the expected anchors
"""

from __future__ import annotations

import textwrap
from pathlib import Path

import pytest

from blueprint.config import BlueprintConfig, StateManagement
from blueprint.scaffolder import ProjectGenerator


# ---------------------------------------------------------------------------
# Configurations
# ---------------------------------------------------------------------------


@pytest.fixture
def base_config() -> BlueprintConfig:
    """Default configuration: provider, mobile only, no add-ons."""
    return BlueprintConfig(app_name="demo_app")


@pytest.fixture
def full_config() -> BlueprintConfig:
    """Every add-on switched on, enterprise security, all platforms."""
    return BlueprintConfig(
        app_name="full_app",
        state_management="riverpod",
        platforms="all",
        include_localization=True,
        include_hive=True,
        include_pagination=True,
        include_analytics=True,
        analytics_provider="firebase",
        security_level="enterprise",
        ci_provider="github",
    )


@pytest.fixture(params=list(StateManagement), ids=lambda s: s.value)
def state_management(request: pytest.FixtureRequest) -> StateManagement:
    """Parametrised over every state-management variant."""
    return request.param


# ---------------------------------------------------------------------------
# Generated projects
# ---------------------------------------------------------------------------


@pytest.fixture
def generated_project(tmp_path: Path, base_config: BlueprintConfig) -> Path:
    """A freshly generated default project; returns its root."""
    root = tmp_path / base_config.app_name
    ProjectGenerator().generate(base_config, root)
    return root


@pytest.fixture
def make_project(tmp_path: Path):
    """Factory: generate a project for a given configuration."""

    def _make(config: BlueprintConfig) -> Path:
        root = tmp_path / config.app_name
        ProjectGenerator().generate(config, root)
        return root

    return _make


# ---------------------------------------------------------------------------
# Router sources
# ---------------------------------------------------------------------------


@pytest.fixture
def router_source() -> str:
    """A router with all three anchors present."""
    return textwrap.dedent(
        """\
        import 'package:flutter/material.dart';

        import '../../features/home/presentation/pages/home_page.dart';

        class RouteNames {
          static const String home = '/';
        }

        class AppRouter {
          static Route<dynamic> onGenerateRoute(RouteSettings settings) {
            switch (settings.name) {
              case RouteNames.home:
                return MaterialPageRoute(
                  builder: (_) => const HomePage(),
                  settings: settings,
                );
              default:
                return MaterialPageRoute(
                  builder: (_) => const Scaffold(),
                  settings: settings,
                );
            }
          }
        }
        """
    )


@pytest.fixture
def router_without_default(router_source: str) -> str:
    """A router whose switch has no ``default:`` branch."""
    return router_source.replace("default:", "case null:")
