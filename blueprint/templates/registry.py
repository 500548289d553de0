"""Template registry: maps a configuration to the renderer that serves it."""

from __future__ import annotations

from typing import Iterable

from blueprint.config import BlueprintConfig
from blueprint.templates.base import TemplateRenderer
from blueprint.templates.bundles import UNIVERSAL, build_builtin_renderers, renderer_name
from blueprint.templates.cache import CachedTemplateRenderer, RenderCache
from blueprint.templates.engine import TemplateEngine


class TemplateRegistry:
    """Name-keyed collection of renderers.

    Selection is exact: a configuration targeting more than one platform maps
    to ``"universal"``, otherwise to ``"{platform}_{state}"``. There is no
    fallback when the key is not registered.

    *cache* is the :class:`RenderCache` backing the registered renderers, if
    any; the generator reports its statistics.
    """

    def __init__(self, cache: RenderCache | None = None) -> None:
        self._renderers: dict[str, TemplateRenderer] = {}
        self.cache = cache

    def register(self, renderer: TemplateRenderer) -> None:
        """Register *renderer* under its name, replacing any previous one."""
        self._renderers[renderer.name] = renderer

    def register_all(self, renderers: Iterable[TemplateRenderer]) -> None:
        for renderer in renderers:
            self.register(renderer)

    def get(self, name: str) -> TemplateRenderer | None:
        return self._renderers.get(name)

    def names(self) -> list[str]:
        return sorted(self._renderers)

    def all(self) -> list[TemplateRenderer]:
        return [self._renderers[name] for name in self.names()]

    def select_for(self, config: BlueprintConfig) -> TemplateRenderer | None:
        """Return the renderer for *config*, or ``None`` if none is registered."""
        if config.is_multi_platform:
            return self._renderers.get(UNIVERSAL)
        key = renderer_name(config.platforms[0], config.state_management)
        return self._renderers.get(key)

    def __len__(self) -> int:
        return len(self._renderers)

    def __contains__(self, name: object) -> bool:
        return name in self._renderers


def build_default_registry(
    cache: RenderCache | None = None, engine: TemplateEngine | None = None
) -> TemplateRegistry:
    """Registry holding every built-in renderer.

    When *cache* is given each renderer is wrapped in a
    :class:`CachedTemplateRenderer` over that shared cache.
    """
    registry = TemplateRegistry(cache)
    for renderer in build_builtin_renderers(engine):
        if cache is not None:
            registry.register(CachedTemplateRenderer(renderer, cache))
        else:
            registry.register(renderer)
    return registry
