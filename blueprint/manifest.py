"""Persisted blueprint metadata (``blueprint.yaml``).

The manifest records the configuration a project was generated from so it
can be regenerated later with ``blueprint generate --from-manifest``.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field

from blueprint.config import BlueprintConfig
from blueprint.core.errors import ConfigurationError, FileOperationError

MANIFEST_VERSION = 1
MANIFEST_FILENAME = "blueprint.yaml"


class BlueprintManifest(BaseModel):
    """Versioned wrapper around a :class:`BlueprintConfig`."""

    model_config = ConfigDict(frozen=True)

    config: BlueprintConfig
    version: int = Field(default=MANIFEST_VERSION, ge=1)

    def to_map(self) -> dict[str, Any]:
        return {"version": self.version, **self.config.to_map()}

    def to_yaml(self) -> str:
        return yaml.safe_dump(self.to_map(), default_flow_style=False, sort_keys=False)

    @classmethod
    def from_yaml(cls, content: str) -> BlueprintManifest:
        """Parse manifest YAML.

        Raises:
            ConfigurationError: If the YAML is malformed or is not a mapping.
        """
        try:
            node = yaml.safe_load(content)
        except yaml.YAMLError as exc:
            raise ConfigurationError(f"Malformed blueprint.yaml: {exc}", cause=exc) from exc
        if not isinstance(node, dict):
            raise ConfigurationError("Invalid blueprint.yaml structure")

        version = node.get("version", MANIFEST_VERSION)
        if not isinstance(version, int) or version < 1:
            raise ConfigurationError(
                f"Invalid manifest version: {version!r}", field="version", value=version
            )
        return cls(config=BlueprintConfig.from_map(node), version=version)


class ManifestStore:
    """Reads and writes manifests on disk."""

    def save(self, path: str | Path, manifest: BlueprintManifest) -> Path:
        """Write *manifest* to *path*, replacing any existing file."""
        target = Path(path)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(manifest.to_yaml(), encoding="utf-8")
        except OSError as exc:
            raise FileOperationError(
                f"Failed to write manifest: {exc.strerror or exc}",
                file_path=str(target),
                operation="write",
                cause=exc,
            ) from exc
        return target

    def load(self, path: str | Path) -> BlueprintManifest:
        """Read and parse the manifest at *path*.

        Raises:
            FileOperationError: If the file is missing or unreadable.
            ConfigurationError: If its content is invalid.
        """
        source = Path(path)
        if not source.is_file():
            raise FileOperationError(
                "blueprint.yaml not found", file_path=str(source), operation="read"
            )
        try:
            content = source.read_text(encoding="utf-8")
        except OSError as exc:
            raise FileOperationError(
                f"Failed to read manifest: {exc.strerror or exc}",
                file_path=str(source),
                operation="read",
                cause=exc,
            ) from exc
        return BlueprintManifest.from_yaml(content)


def load_config(path: str | Path) -> BlueprintConfig:
    """Load the :class:`BlueprintConfig` stored in a manifest file."""
    return ManifestStore().load(path).config
