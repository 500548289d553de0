"""Shared pytest fixtures for the blueprint test suite.

Provides reusable fixtures for:
- Temporary target directories
- Sample configurations
- A quiet reporter backed by a recording Rich console
- Renderer doubles (static, failing, counting)
- A wired ProjectGenerator with an isolated render cache
"""

from __future__ import annotations

import io
from pathlib import Path

import pytest
from rich.console import Console

from blueprint.config import BlueprintConfig, GeneratorSettings
from blueprint.generator import ProjectGenerator
from blueprint.templates.base import (
    GeneratedFile,
    TemplateContext,
    TemplateRenderer,
)
from blueprint.templates.cache import RenderCache
from blueprint.templates.registry import TemplateRegistry, build_default_registry
from blueprint.utils import Reporter


# ---------------------------------------------------------------------------
# Paths & Directories
# ---------------------------------------------------------------------------


@pytest.fixture
def target_dir(tmp_path: Path) -> Path:
    """A not-yet-existing directory to generate a project into."""
    return tmp_path / "generated"


# ---------------------------------------------------------------------------
# Configurations
# ---------------------------------------------------------------------------


@pytest.fixture
def demo_config() -> BlueprintConfig:
    """Single-platform mobile/provider configuration named ``demo``."""
    return BlueprintConfig(app_name="demo", platforms=["mobile"], state_management="provider")


@pytest.fixture
def multi_platform_config() -> BlueprintConfig:
    return BlueprintConfig(
        app_name="demo", platforms=["mobile", "web"], state_management="bloc"
    )


# ---------------------------------------------------------------------------
# Reporter
# ---------------------------------------------------------------------------


@pytest.fixture
def console_buffer() -> io.StringIO:
    return io.StringIO()


@pytest.fixture
def reporter(console_buffer: io.StringIO) -> Reporter:
    """Verbose reporter that records into ``console_buffer``."""
    console = Console(file=console_buffer, force_terminal=False, width=200)
    return Reporter(target=console, verbose=True)


# ---------------------------------------------------------------------------
# Renderer doubles
# ---------------------------------------------------------------------------


class StaticRenderer(TemplateRenderer):
    """Renders a fixed file list that embeds the app name."""

    def __init__(
        self,
        name: str = "static",
        paths: tuple[str, ...] = ("a.txt", "dir/b.txt"),
        overwrite: bool = True,
    ):
        self._name = name
        self.paths = paths
        self.overwrite = overwrite
        self.calls = 0

    @property
    def name(self) -> str:
        return self._name

    @property
    def description(self) -> str:
        return "Static test renderer"

    def render(self, context: TemplateContext) -> list[GeneratedFile]:
        self.calls += 1
        return [
            GeneratedFile(path=p, content=f"{context.app_name}:{p}", overwrite=self.overwrite)
            for p in self.paths
        ]


class FailingRenderer(TemplateRenderer):
    """Raises on every render."""

    def __init__(self, name: str = "mobile_provider", exc: Exception | None = None):
        self._name = name
        self.exc = exc or RuntimeError("template exploded")

    @property
    def name(self) -> str:
        return self._name

    @property
    def description(self) -> str:
        return "Always fails"

    def render(self, context: TemplateContext) -> list[GeneratedFile]:
        raise self.exc


@pytest.fixture
def static_renderer() -> StaticRenderer:
    return StaticRenderer()


@pytest.fixture
def make_static_renderer():
    """Factory for :class:`StaticRenderer` instances."""
    return StaticRenderer


@pytest.fixture
def make_failing_renderer():
    """Factory for :class:`FailingRenderer` instances."""
    return FailingRenderer


# ---------------------------------------------------------------------------
# Generator wiring
# ---------------------------------------------------------------------------


@pytest.fixture
def render_cache() -> RenderCache:
    return RenderCache()


@pytest.fixture
def default_registry(render_cache: RenderCache) -> TemplateRegistry:
    return build_default_registry(render_cache)


@pytest.fixture
def generator(
    default_registry: TemplateRegistry, render_cache: RenderCache, reporter: Reporter
) -> ProjectGenerator:
    """Generator over the built-in catalog with an isolated cache."""
    return ProjectGenerator(
        registry=default_registry,
        cache=render_cache,
        reporter=reporter,
        settings=GeneratorSettings(),
    )
