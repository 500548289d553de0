"""Memoising decorator over template renderers.

:class:`RenderCache` owns the cache entries and the hit/miss counters; it is
built once per process (or per test) and shared by every
:class:`CachedTemplateRenderer` that wraps a renderer. Entries are keyed by a
SHA-256 fingerprint over every input that can change rendered output, so two
renderers can safely share one cache.
"""

from __future__ import annotations

import hashlib
import json
import threading
from typing import Iterable

from pydantic import BaseModel, Field, computed_field

from blueprint.templates.base import (
    GeneratedFile,
    RendererKind,
    TemplateContext,
    TemplateRenderer,
)


class CacheStats(BaseModel):
    """Point-in-time snapshot of cache counters."""

    hits: int = Field(default=0, ge=0)
    misses: int = Field(default=0, ge=0)
    size: int = Field(default=0, ge=0)

    @computed_field  # type: ignore[misc]
    @property
    def hit_rate(self) -> float:
        total = self.hits + self.misses
        return self.hits / total if total else 0.0

    def __str__(self) -> str:
        return (
            f"CacheStats(hits: {self.hits}, misses: {self.misses}, "
            f"hit rate: {self.hit_rate * 100:.1f}%, size: {self.size})"
        )


def fingerprint(context: TemplateContext, renderer_name: str) -> str:
    """Deterministic key over every field that can influence rendered output.

    The output directory is not part of the key.
    """
    config = context.config
    payload = {
        "renderer": renderer_name,
        "app_name": config.app_name,
        "platforms": sorted(p.value for p in config.platforms),
        "state_management": config.state_management.value,
        "ci_provider": config.ci_provider.value,
        "features": config.features(),
    }
    encoded = json.dumps(payload, sort_keys=True, separators=(",", ":"))
    return hashlib.sha256(encoded.encode("utf-8")).hexdigest()


class RenderCache:
    """In-memory store of rendered file sets plus hit/miss counters."""

    def __init__(self) -> None:
        self._entries: dict[str, tuple[GeneratedFile, ...]] = {}
        self._hits = 0
        self._misses = 0
        self._lock = threading.Lock()

    def lookup(self, key: str) -> tuple[GeneratedFile, ...] | None:
        """Return the stored files for *key* and count the hit or miss."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                self._misses += 1
            else:
                self._hits += 1
            return entry

    def store(self, key: str, files: Iterable[GeneratedFile]) -> tuple[GeneratedFile, ...]:
        frozen = tuple(files)
        with self._lock:
            self._entries[key] = frozen
        return frozen

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._entries

    def stats(self) -> CacheStats:
        with self._lock:
            return CacheStats(hits=self._hits, misses=self._misses, size=len(self._entries))

    def prewarm(
        self, renderer: TemplateRenderer, contexts: Iterable[TemplateContext]
    ) -> int:
        """Render *contexts* ahead of time through *renderer*.

        A renderer that is not already cached by this cache is wrapped on the
        fly. Returns the number of contexts rendered.
        """
        if not renderer.is_cached_by(self):
            renderer = CachedTemplateRenderer(renderer, self)
        count = 0
        for context in contexts:
            renderer.render(context)
            count += 1
        return count


class CachedTemplateRenderer(TemplateRenderer):
    """Wraps a renderer and memoises its output in a :class:`RenderCache`."""

    def __init__(self, delegate: TemplateRenderer, cache: RenderCache) -> None:
        self.delegate = delegate
        self.cache = cache

    @property
    def name(self) -> str:
        return self.delegate.name

    @property
    def description(self) -> str:
        return self.delegate.description

    def underlying_kind(self) -> RendererKind:
        return self.delegate.underlying_kind()

    def is_cached_by(self, cache: RenderCache) -> bool:
        return cache is self.cache or self.delegate.is_cached_by(cache)

    def render(self, context: TemplateContext) -> list[GeneratedFile]:
        key = fingerprint(context, self.delegate.name)
        cached = self.cache.lookup(key)
        if cached is not None:
            return list(cached)
        return list(self.cache.store(key, self.delegate.render(context)))
