"""Template renderers, the Jinja2 catalog, the render cache and the registry."""

from .base import GeneratedFile, RendererKind, TemplateContext, TemplateRenderer
from .bundles import (
    UNIVERSAL,
    BundleRenderer,
    TemplateBundle,
    TemplateFile,
    build_builtin_renderers,
    renderer_name,
)
from .cache import CachedTemplateRenderer, CacheStats, RenderCache, fingerprint
from .engine import TemplateEngine, build_context
from .registry import TemplateRegistry, build_default_registry

__all__ = [
    "GeneratedFile",
    "RendererKind",
    "TemplateContext",
    "TemplateRenderer",
    "UNIVERSAL",
    "BundleRenderer",
    "TemplateBundle",
    "TemplateFile",
    "build_builtin_renderers",
    "renderer_name",
    "CachedTemplateRenderer",
    "CacheStats",
    "RenderCache",
    "fingerprint",
    "TemplateEngine",
    "build_context",
    "TemplateRegistry",
    "build_default_registry",
]
