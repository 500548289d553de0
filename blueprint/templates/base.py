"""Core template abstractions.

A renderer is a named, pure function from a :class:`TemplateContext` to a
list of :class:`GeneratedFile` values. Renderers must be stateless and
return identical output for identical input.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from blueprint.config import BlueprintConfig, StateManagement

if TYPE_CHECKING:
    from blueprint.templates.cache import RenderCache


@dataclass(frozen=True)
class GeneratedFile:
    """A generated file: relative POSIX path, content and overwrite policy."""

    path: str
    content: str
    overwrite: bool = True

    def __post_init__(self) -> None:
        if not self.path:
            raise ValueError("GeneratedFile path cannot be empty")
        if self.path.startswith("/"):
            raise ValueError(f"GeneratedFile path must be relative: {self.path!r}")
        if "\\" in self.path:
            raise ValueError(f"GeneratedFile path must use '/' separators: {self.path!r}")
        if "//" in self.path:
            raise ValueError(f"GeneratedFile path contains a doubled separator: {self.path!r}")

    def __str__(self) -> str:
        return f"GeneratedFile({self.path}, {len(self.content)} chars)"


@dataclass(frozen=True)
class TemplateContext:
    """Everything a renderer may read while producing files."""

    config: BlueprintConfig
    project_path: str

    @property
    def app_name(self) -> str:
        return self.config.app_name

    @property
    def state_management(self) -> StateManagement:
        return self.config.state_management


class RendererKind(str, Enum):
    """What backs a renderer, reported without inspecting its type."""

    BUNDLE = "bundle"
    CUSTOM = "custom"


class TemplateRenderer(ABC):
    """Base contract for template renderers."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Registry key, e.g. ``"mobile_provider"``."""

    @property
    @abstractmethod
    def description(self) -> str:
        """Short human-readable description."""

    def underlying_kind(self) -> RendererKind:
        return RendererKind.CUSTOM

    def is_cached_by(self, cache: RenderCache) -> bool:
        """True when this renderer already memoises its output in *cache*."""
        return False

    @abstractmethod
    def render(self, context: TemplateContext) -> list[GeneratedFile]:
        """Render every file for *context*."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"
