"""Blueprint configuration.

Two typed models live here:

* :class:`BlueprintConfig` -- the immutable description of the application to
  generate (name, platforms, state management, CI provider, feature flags).
  It is what gets persisted to ``blueprint.yaml``.
* :class:`GeneratorSettings` -- tuning knobs for the generator itself
  (write concurrency, overwrite policy, follow-up steps).

Both use Pydantic v2 models so they are validated at construction time and
can be serialised without boiler-plate.
"""

from __future__ import annotations

import os
from enum import Enum
from pathlib import Path
from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict, Field, field_validator

from blueprint.core.errors import ConfigurationError

# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------


class StateManagement(str, Enum):
    """Supported state-management approaches."""

    PROVIDER = "provider"
    RIVERPOD = "riverpod"
    BLOC = "bloc"

    @classmethod
    def parse(cls, value: str | StateManagement) -> StateManagement:
        if isinstance(value, cls):
            return value
        normalized = str(value).strip().lower()
        for candidate in cls:
            if candidate.value == normalized:
                return candidate
        raise ConfigurationError(
            f"Unsupported state management option: {value}",
            field="state_management",
            value=value,
        )


class TargetPlatform(str, Enum):
    """Supported platform targets."""

    MOBILE = "mobile"
    WEB = "web"
    DESKTOP = "desktop"

    @classmethod
    def parse(cls, value: str | TargetPlatform) -> TargetPlatform:
        """Parse a platform name, accepting OS-level aliases.

        ``android``/``ios`` map to mobile, ``windows``/``macos``/``linux``
        map to desktop.
        """
        if isinstance(value, cls):
            return value
        normalized = str(value).strip().lower()
        for candidate in cls:
            if candidate.value == normalized:
                return candidate
        if normalized in _PLATFORM_ALIASES:
            return _PLATFORM_ALIASES[normalized]
        raise ConfigurationError(
            f"Unsupported platform: {value}. Use: mobile, web, desktop "
            "(or android, ios, windows, macos, linux)",
            field="platforms",
            value=value,
        )

    @classmethod
    def parse_multiple(cls, value: str) -> list[TargetPlatform]:
        """Parse a comma-separated platform list such as ``"mobile,web"``.

        ``"all"`` expands to every platform. Duplicates are dropped while the
        first-seen order is kept.
        """
        normalized = value.strip().lower()
        if normalized == "all":
            return list(cls)

        platforms: list[TargetPlatform] = []
        for part in normalized.split(","):
            part = part.strip()
            if not part:
                continue
            platform = cls.parse(part)
            if platform not in platforms:
                platforms.append(platform)

        if not platforms:
            raise ConfigurationError(
                "At least one platform must be specified", field="platforms", value=value
            )
        return platforms


_PLATFORM_ALIASES: dict[str, TargetPlatform] = {
    "android": TargetPlatform.MOBILE,
    "ios": TargetPlatform.MOBILE,
    "windows": TargetPlatform.DESKTOP,
    "macos": TargetPlatform.DESKTOP,
    "linux": TargetPlatform.DESKTOP,
}


class CIProvider(str, Enum):
    """Supported CI/CD providers."""

    NONE = "none"
    GITHUB = "github"
    GITLAB = "gitlab"
    AZURE = "azure"

    @classmethod
    def parse(cls, value: str | CIProvider) -> CIProvider:
        if isinstance(value, cls):
            return value
        normalized = str(value).strip().lower()
        for candidate in cls:
            if candidate.value == normalized:
                return candidate
        raise ConfigurationError(
            f"Unsupported CI provider: {value}", field="ci_provider", value=value
        )


# ---------------------------------------------------------------------------
# Application configuration
# ---------------------------------------------------------------------------


class BlueprintConfig(BaseModel):
    """Immutable description of the application to generate."""

    model_config = ConfigDict(frozen=True)

    app_name: str = Field(..., description="Application name (valid Dart package name)")
    platforms: tuple[TargetPlatform, ...] = Field(
        default=(TargetPlatform.MOBILE,),
        description="Non-empty, de-duplicated set of target platforms",
    )
    state_management: StateManagement = Field(default=StateManagement.PROVIDER)
    ci_provider: CIProvider = Field(default=CIProvider.NONE)
    include_theme: bool = Field(default=True, description="Light/dark theme scaffolding")
    include_localization: bool = Field(default=False, description="i18n setup")
    include_env: bool = Field(default=False, description="Environment configuration")
    include_api: bool = Field(default=False, description="HTTP API client")
    include_tests: bool = Field(default=True, description="Test scaffolding")
    include_hive: bool = Field(default=False, description="Hive offline caching")

    @field_validator("platforms", mode="before")
    @classmethod
    def _parse_platforms(cls, value: Any) -> tuple[TargetPlatform, ...]:
        try:
            if isinstance(value, str):
                return tuple(TargetPlatform.parse_multiple(value))
            if isinstance(value, TargetPlatform):
                return (value,)
            platforms: list[TargetPlatform] = []
            for item in value or ():
                platform = TargetPlatform.parse(item)
                if platform not in platforms:
                    platforms.append(platform)
        except ConfigurationError as exc:
            raise ValueError(exc.message) from exc
        if not platforms:
            raise ValueError("At least one platform must be specified")
        return tuple(platforms)

    @field_validator("state_management", mode="before")
    @classmethod
    def _parse_state(cls, value: Any) -> StateManagement:
        try:
            return StateManagement.parse(value)
        except ConfigurationError as exc:
            raise ValueError(exc.message) from exc

    @field_validator("ci_provider", mode="before")
    @classmethod
    def _parse_ci(cls, value: Any) -> CIProvider:
        try:
            return CIProvider.parse(value)
        except ConfigurationError as exc:
            raise ValueError(exc.message) from exc

    # ------------------------------------------------------------------
    # Derived properties
    # ------------------------------------------------------------------

    @property
    def is_multi_platform(self) -> bool:
        """True when more than one platform is targeted."""
        return len(self.platforms) > 1

    @property
    def is_universal(self) -> bool:
        """True when every supported platform is targeted."""
        return len(self.platforms) == len(TargetPlatform)

    def has_platform(self, platform: TargetPlatform) -> bool:
        return platform in self.platforms

    def features(self) -> dict[str, bool]:
        """Return the feature flags keyed by their manifest names."""
        return {
            "api": self.include_api,
            "env": self.include_env,
            "hive": self.include_hive,
            "localization": self.include_localization,
            "tests": self.include_tests,
            "theme": self.include_theme,
        }

    # ------------------------------------------------------------------
    # Manifest mapping
    # ------------------------------------------------------------------

    def to_map(self) -> dict[str, Any]:
        """Convert to the mapping layout used by ``blueprint.yaml``."""
        return {
            "app_name": self.app_name,
            "platforms": [p.value for p in self.platforms],
            "state_management": self.state_management.value,
            "ci_provider": self.ci_provider.value,
            "features": self.features(),
        }

    @classmethod
    def from_map(cls, data: dict[str, Any]) -> BlueprintConfig:
        """Build a configuration from a manifest mapping.

        Accepts both the ``platforms`` list and the legacy single
        ``platform`` key. Missing feature flags fall back to their defaults.
        """
        features = data.get("features") or {}
        if not isinstance(features, Mapping):
            raise ConfigurationError(
                f"Invalid blueprint configuration: 'features' must be a mapping, "
                f"got {type(features).__name__}"
            )

        if "platforms" in data:
            raw_platforms = data["platforms"]
            if not isinstance(raw_platforms, (list, tuple)):
                raw_platforms = [raw_platforms]
        elif "platform" in data:
            raw_platforms = [data.get("platform") or "mobile"]
        else:
            raw_platforms = ["mobile"]

        try:
            return cls(
                app_name=str(data.get("app_name", "")),
                platforms=[str(p) for p in raw_platforms],
                state_management=data.get("state_management", "provider"),
                ci_provider=data.get("ci_provider", "none"),
                include_theme=_read_bool(features.get("theme"), True),
                include_localization=_read_bool(features.get("localization"), False),
                include_env=_read_bool(features.get("env"), False),
                include_api=_read_bool(features.get("api"), False),
                include_tests=_read_bool(features.get("tests"), True),
                include_hive=_read_bool(features.get("hive"), False),
            )
        except ValueError as exc:
            raise ConfigurationError(f"Invalid blueprint configuration: {exc}", cause=exc) from exc


def _read_bool(value: Any, fallback: bool) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in ("true", "yes", "1", "on"):
            return True
        if lowered in ("false", "no", "0", "off"):
            return False
    return fallback


# ---------------------------------------------------------------------------
# Generator settings
# ---------------------------------------------------------------------------

DEFAULT_CONCURRENCY = 10
MAX_CONCURRENCY = 50


class GeneratorSettings(BaseModel):
    """Tuning knobs for a generation run."""

    concurrency: int = Field(
        default=DEFAULT_CONCURRENCY,
        ge=1,
        le=MAX_CONCURRENCY,
        description="Maximum simultaneously in-flight file writes",
    )
    overwrite_existing: bool = Field(
        default=False, description="Allow generating into a non-empty directory"
    )
    write_manifest: bool = Field(default=True, description="Persist blueprint.yaml")
    manifest_filename: str = Field(default="blueprint.yaml")
    run_flutter_tools: bool = Field(
        default=False, description="Run 'flutter create .' and 'flutter pub get' afterwards"
    )
    flutter_binary: str = Field(default="flutter")
    verbose: bool = Field(default=False)

    def save(self, path: Path) -> Path:
        """Persist the settings to a JSON file and return the path."""
        target = Path(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(self.model_dump_json(indent=2), encoding="utf-8")
        return target

    @classmethod
    def load(cls, path: Path) -> "GeneratorSettings":
        """Load previously-saved settings from JSON."""
        raw = Path(path).read_text(encoding="utf-8")
        return cls.model_validate_json(raw)

    @classmethod
    def from_env(cls) -> "GeneratorSettings":
        """Build settings from environment variables.

        Recognised variables (all optional):
            BLUEPRINT_CONCURRENCY, BLUEPRINT_FORCE, BLUEPRINT_WRITE_MANIFEST,
            BLUEPRINT_FLUTTER_SETUP, BLUEPRINT_FLUTTER_BINARY, BLUEPRINT_VERBOSE.
        """
        kwargs: dict[str, Any] = {}
        if os.environ.get("BLUEPRINT_CONCURRENCY"):
            kwargs["concurrency"] = int(os.environ["BLUEPRINT_CONCURRENCY"])
        if os.environ.get("BLUEPRINT_FORCE"):
            kwargs["overwrite_existing"] = _read_bool(os.environ["BLUEPRINT_FORCE"], False)
        if os.environ.get("BLUEPRINT_WRITE_MANIFEST"):
            kwargs["write_manifest"] = _read_bool(os.environ["BLUEPRINT_WRITE_MANIFEST"], True)
        if os.environ.get("BLUEPRINT_FLUTTER_SETUP"):
            kwargs["run_flutter_tools"] = _read_bool(os.environ["BLUEPRINT_FLUTTER_SETUP"], False)
        if os.environ.get("BLUEPRINT_FLUTTER_BINARY"):
            kwargs["flutter_binary"] = os.environ["BLUEPRINT_FLUTTER_BINARY"]
        if os.environ.get("BLUEPRINT_VERBOSE"):
            kwargs["verbose"] = _read_bool(os.environ["BLUEPRINT_VERBOSE"], False)
        return cls(**kwargs)
