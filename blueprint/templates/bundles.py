"""Built-in template bundles.

A :class:`TemplateBundle` is a declarative list of :class:`TemplateFile`
entries plus the pubspec dependencies the bundle needs. A
:class:`BundleRenderer` turns a bundle into a :class:`TemplateRenderer`
by rendering each included file through the Jinja2 :class:`TemplateEngine`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable

from blueprint.config import BlueprintConfig, StateManagement, TargetPlatform
from blueprint.templates.base import (
    GeneratedFile,
    RendererKind,
    TemplateContext,
    TemplateRenderer,
)
from blueprint.templates.engine import TemplateEngine, build_context

Predicate = Callable[[BlueprintConfig], bool]


@dataclass(frozen=True)
class TemplateFile:
    """One output file: where it goes, which template renders it, and when."""

    path: str
    template: str
    predicate: Predicate | None = None

    def should_include(self, config: BlueprintConfig) -> bool:
        return self.predicate is None or self.predicate(config)


@dataclass(frozen=True)
class TemplateBundle:
    files: tuple[TemplateFile, ...]
    additional_dependencies: dict[str, str] = field(default_factory=dict)
    additional_dev_dependencies: dict[str, str] = field(default_factory=dict)


# ---------------------------------------------------------------------------
# Dependency tables
# ---------------------------------------------------------------------------

_STATE_DEPENDENCIES: dict[StateManagement, dict[str, str]] = {
    StateManagement.PROVIDER: {"provider": "^6.1.2"},
    StateManagement.RIVERPOD: {"flutter_riverpod": "^2.6.1"},
    StateManagement.BLOC: {"flutter_bloc": "^8.1.6", "equatable": "^2.0.5"},
}

_STATE_DEV_DEPENDENCIES: dict[StateManagement, dict[str, str]] = {
    StateManagement.PROVIDER: {},
    StateManagement.RIVERPOD: {},
    StateManagement.BLOC: {"bloc_test": "^9.1.7"},
}


def _feature_dependencies(config: BlueprintConfig) -> dict[str, str]:
    deps: dict[str, str] = {}
    if config.include_localization:
        deps["intl"] = "^0.20.2"
    if config.include_env:
        deps["flutter_dotenv"] = "^5.1.0"
    if config.include_api:
        deps["dio"] = "^5.5.0"
    if config.include_hive:
        deps["hive"] = "^2.2.3"
        deps["hive_flutter"] = "^1.1.0"
        deps["path_provider"] = "^2.1.5"
    return deps


def _feature_dev_dependencies(config: BlueprintConfig) -> dict[str, str]:
    deps: dict[str, str] = {"flutter_lints": "^5.0.0"}
    if config.include_tests:
        deps["mocktail"] = "^1.0.3"
    return deps


# ---------------------------------------------------------------------------
# BundleRenderer
# ---------------------------------------------------------------------------


class BundleRenderer(TemplateRenderer):
    """A renderer backed by a :class:`TemplateBundle`."""

    def __init__(
        self,
        name: str,
        description: str,
        bundle: TemplateBundle,
        engine: TemplateEngine | None = None,
    ) -> None:
        self._name = name
        self._description = description
        self.bundle = bundle
        self.engine = engine or TemplateEngine()

    @property
    def name(self) -> str:
        return self._name

    @property
    def description(self) -> str:
        return self._description

    def underlying_kind(self) -> RendererKind:
        return RendererKind.BUNDLE

    def render(self, context: TemplateContext) -> list[GeneratedFile]:
        config = context.config
        variables = build_context(config)
        variables["renderer_name"] = self.name
        variables["dependencies"] = {
            **self.bundle.additional_dependencies,
            **_feature_dependencies(config),
        }
        variables["dev_dependencies"] = {
            **_feature_dev_dependencies(config),
            **self.bundle.additional_dev_dependencies,
        }

        files: list[GeneratedFile] = []
        for entry in self.bundle.files:
            if not entry.should_include(config):
                continue
            content = self.engine.render(entry.template, variables)
            files.append(GeneratedFile(path=entry.path, content=content))
        return files


# ---------------------------------------------------------------------------
# Bundle builders
# ---------------------------------------------------------------------------


def _common_files() -> list[TemplateFile]:
    return [
        TemplateFile("pubspec.yaml", "common/pubspec.yaml.j2"),
        TemplateFile("analysis_options.yaml", "common/analysis_options.yaml.j2"),
        TemplateFile(".gitignore", "common/gitignore.j2"),
        TemplateFile("README.md", "common/README.md.j2"),
        TemplateFile("lib/main.dart", "lib/main.dart.j2"),
        TemplateFile("lib/app/app.dart", "lib/app.dart.j2"),
    ]


def _state_files(state: StateManagement) -> list[TemplateFile]:
    if state is StateManagement.BLOC:
        return [
            TemplateFile("lib/features/counter/counter_cubit.dart", "state/bloc/counter_cubit.dart.j2"),
            TemplateFile("lib/features/counter/counter_state.dart", "state/bloc/counter_state.dart.j2"),
        ]
    if state is StateManagement.RIVERPOD:
        return [
            TemplateFile("lib/features/counter/counter_provider.dart", "state/riverpod/counter_provider.dart.j2"),
        ]
    return [
        TemplateFile("lib/features/counter/counter_notifier.dart", "state/provider/counter_notifier.dart.j2"),
    ]


def _feature_files() -> list[TemplateFile]:
    return [
        TemplateFile("lib/core/theme/app_theme.dart", "features/app_theme.dart.j2", lambda c: c.include_theme),
        TemplateFile("lib/core/config/env_config.dart", "features/env_config.dart.j2", lambda c: c.include_env),
        TemplateFile(".env.example", "features/env.example.j2", lambda c: c.include_env),
        TemplateFile("lib/core/api/api_client.dart", "features/api_client.dart.j2", lambda c: c.include_api),
        TemplateFile("l10n.yaml", "features/l10n.yaml.j2", lambda c: c.include_localization),
        TemplateFile("lib/l10n/app_en.arb", "features/app_en.arb.j2", lambda c: c.include_localization),
        TemplateFile("lib/core/storage/cache_service.dart", "features/cache_service.dart.j2", lambda c: c.include_hive),
        TemplateFile("test/widget_test.dart", "features/widget_test.dart.j2", lambda c: c.include_tests),
    ]


def _platform_files(platform: TargetPlatform) -> list[TemplateFile]:
    if platform is TargetPlatform.WEB:
        return [
            TemplateFile("web/index.html", "web/index.html.j2"),
            TemplateFile("web/manifest.json", "web/manifest.json.j2"),
        ]
    if platform is TargetPlatform.DESKTOP:
        return [
            TemplateFile("lib/core/desktop/window_config.dart", "desktop/window_config.dart.j2"),
        ]
    return []


def build_platform_bundle(
    platform: TargetPlatform, state: StateManagement
) -> TemplateBundle:
    """Build the bundle for a single platform and state-management approach."""
    files = _common_files() + _state_files(state) + _feature_files() + _platform_files(platform)
    return TemplateBundle(
        files=tuple(files),
        additional_dependencies=dict(_STATE_DEPENDENCIES[state]),
        additional_dev_dependencies=dict(_STATE_DEV_DEPENDENCIES[state]),
    )


def build_universal_bundle() -> TemplateBundle:
    """Build the multi-platform bundle.

    The universal bundle carries the files of every state-management
    approach and every platform, each gated on the configuration, so it
    serves any combination of two or more platforms.
    """
    files = _common_files()
    for state in StateManagement:
        for entry in _state_files(state):
            files.append(
                TemplateFile(entry.path, entry.template, lambda c, s=state: c.state_management is s)
            )
    files += _feature_files()
    for platform in (TargetPlatform.WEB, TargetPlatform.DESKTOP):
        for entry in _platform_files(platform):
            files.append(
                TemplateFile(entry.path, entry.template, lambda c, p=platform: c.has_platform(p))
            )
    files.append(TemplateFile("lib/core/platform/platform_info.dart", "universal/platform_info.dart.j2"))
    return TemplateBundle(files=tuple(files))


class UniversalBundleRenderer(BundleRenderer):
    """Bundle renderer that picks state dependencies from the configuration."""

    def render(self, context: TemplateContext) -> list[GeneratedFile]:
        state = context.config.state_management
        scoped = BundleRenderer(
            self.name,
            self.description,
            TemplateBundle(
                files=self.bundle.files,
                additional_dependencies=dict(_STATE_DEPENDENCIES[state]),
                additional_dev_dependencies=dict(_STATE_DEV_DEPENDENCIES[state]),
            ),
            self.engine,
        )
        return scoped.render(context)


def renderer_name(platform: TargetPlatform, state: StateManagement) -> str:
    """Registry key for a single-platform renderer, e.g. ``"web_bloc"``."""
    return f"{platform.value}_{state.value}"


UNIVERSAL = "universal"


def build_builtin_renderers(engine: TemplateEngine | None = None) -> list[BundleRenderer]:
    """Every built-in renderer: nine platform/state combinations plus universal."""
    engine = engine or TemplateEngine()
    renderers: list[BundleRenderer] = []
    for platform in TargetPlatform:
        for state in StateManagement:
            renderers.append(
                BundleRenderer(
                    renderer_name(platform, state),
                    f"{platform.value.capitalize()} app using {state.value}",
                    build_platform_bundle(platform, state),
                    engine,
                )
            )
    renderers.append(
        UniversalBundleRenderer(
            UNIVERSAL,
            "Multi-platform app with adaptive layout",
            build_universal_bundle(),
            engine,
        )
    )
    return renderers
