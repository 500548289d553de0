"""Generation orchestrator.

:class:`ProjectGenerator` takes a :class:`~blueprint.config.BlueprintConfig`
and a target directory and runs the pipeline:

1. validate the app name and target path (no side effects on failure)
2. prepare the target directory
3. select a renderer from the :class:`TemplateRegistry`
4. render through the shared :class:`RenderCache`
5. write every generated file with the :class:`ParallelFileWriter`

followed by best-effort steps (CI file, ``blueprint.yaml``, Flutter
tooling). Every outcome is returned as a :class:`Result`; nothing raises
out of :meth:`ProjectGenerator.generate`.
"""

from __future__ import annotations

import asyncio
import time
from pathlib import Path

from pydantic import BaseModel, Field

from blueprint.ci import CIConfigGenerator
from blueprint.config import BlueprintConfig, GeneratorSettings
from blueprint.core.errors import (
    BlueprintError,
    ErrorKind,
    ProjectGenerationError,
    RenderError,
    SelectionError,
)
from blueprint.core.result import Failure, Result, Success
from blueprint.io.filesystem import FileSystem
from blueprint.io.writer import FileWriteOperation, ParallelFileWriter
from blueprint.manifest import BlueprintManifest, ManifestStore
from blueprint.templates.base import GeneratedFile, TemplateContext, TemplateRenderer
from blueprint.templates.cache import RenderCache
from blueprint.templates.registry import TemplateRegistry, build_default_registry
from blueprint.utils import Reporter, format_duration, run_command
from blueprint.validation import validate_package_name, validate_target_directory


class GenerationResult(BaseModel):
    """Summary of a completed generation run."""

    files_generated: int = Field(default=0, ge=0)
    files_failed: int = Field(default=0, ge=0)
    files_skipped: int = Field(default=0, ge=0)
    target_path: str
    renderer_name: str = ""
    ci_config_generated: bool = False
    manifest_written: bool = False
    failures: dict[str, str] = Field(
        default_factory=dict, description="Relative path -> captured error message"
    )
    duration_seconds: float = Field(default=0.0, ge=0.0)

    @property
    def has_failures(self) -> bool:
        return self.files_failed > 0

    def __str__(self) -> str:
        return f"GenerationResult({self.files_generated} files at {self.target_path})"


class ProjectGenerator:
    """Runs the generation pipeline for one configuration at a time.

    Every collaborator is injectable; defaults build the production wiring
    around a fresh :class:`RenderCache`. An injected registry without a
    *cache* reports the statistics of the cache it was built over, if any.
    """

    def __init__(
        self,
        registry: TemplateRegistry | None = None,
        cache: RenderCache | None = None,
        writer: ParallelFileWriter | None = None,
        filesystem: FileSystem | None = None,
        reporter: Reporter | None = None,
        settings: GeneratorSettings | None = None,
        ci_generator: CIConfigGenerator | None = None,
        manifest_store: ManifestStore | None = None,
    ) -> None:
        self.settings = settings or GeneratorSettings()
        self.reporter = reporter or Reporter(verbose=self.settings.verbose)
        if registry is None:
            self.cache: RenderCache | None = cache if cache is not None else RenderCache()
            self.registry = build_default_registry(self.cache)
        else:
            self.registry = registry
            self.cache = cache if cache is not None else registry.cache
        self.filesystem = filesystem or FileSystem()
        self.writer = writer or ParallelFileWriter(self.filesystem, self.reporter)
        self.ci_generator = ci_generator or CIConfigGenerator()
        self.manifest_store = manifest_store or ManifestStore()

    # -- Public API --------------------------------------------------------

    async def generate(
        self, config: BlueprintConfig, target_path: str | Path
    ) -> Result[GenerationResult, ProjectGenerationError]:
        """Generate the project described by *config* into *target_path*.

        Returns:
            ``Success(GenerationResult)`` once the write stage completed, even
            when individual files failed; ``Failure(ProjectGenerationError)``
            when a stage before the write could not proceed.
        """
        start = time.monotonic()
        try:
            # 1. Validate
            try:
                validate_package_name(config.app_name)
                validate_target_directory(str(target_path))
            except BlueprintError as exc:
                return self._fail(exc, ErrorKind.VALIDATION)

            # 2. Prepare
            self.reporter.info(f"Generating project structure for {config.app_name}...")
            try:
                root = await asyncio.to_thread(
                    self.filesystem.prepare_target_directory,
                    target_path,
                    self.settings.overwrite_existing,
                )
            except BlueprintError as exc:
                return self._fail(exc, ErrorKind.WRITE)

            # 3. Select
            renderer = self.registry.select_for(config)
            if renderer is None:
                platforms = [p.value for p in config.platforms]
                error = SelectionError(
                    f"No template registered for platform "
                    f"'{', '.join(platforms)}' with state management "
                    f"'{config.state_management.value}'",
                    platforms=platforms,
                    state_management=config.state_management.value,
                )
                return self._fail(error, ErrorKind.SELECTION)
            self.reporter.debug(
                f"Selected renderer: {renderer.name} ({renderer.underlying_kind().value})"
            )

            # 4. Render
            context = TemplateContext(config=config, project_path=str(root))
            rendered = self._render(renderer, context)
            if isinstance(rendered, Failure):
                return rendered
            files = rendered.value

            # 5. Write
            self.reporter.info("Writing files...")
            operations = [
                FileWriteOperation(f.path, f.content, overwrite=f.overwrite) for f in files
            ]
            write_result = await self.writer.write_all(
                root, operations, concurrency=self.settings.concurrency
            )
            if write_result.failed:
                self.reporter.warning(f"{write_result.failed} files failed to write")

            result = GenerationResult(
                files_generated=write_result.successful,
                files_failed=write_result.failed,
                files_skipped=write_result.skipped,
                target_path=str(root),
                renderer_name=renderer.name,
                failures={o.path: o.error or "" for o in write_result.failures},
            )

            # Best-effort follow-ups
            if await self._write_ci_config(config, root):
                result.files_generated += 1
                result.ci_config_generated = True
            if self.settings.write_manifest:
                result.manifest_written = await self._write_manifest(config, root)
            if self.settings.run_flutter_tools:
                await self._run_flutter_tools(root)

            result.duration_seconds = time.monotonic() - start
            self._report(result)
            return Success(result)
        except Exception as exc:  # noqa: BLE001
            self.reporter.error(f"Unexpected error during generation: {exc}")
            return Failure(
                ProjectGenerationError(
                    f"Unexpected error during generation: {exc}",
                    kind=ErrorKind.UNEXPECTED,
                    cause=exc,
                )
            )

    # -- Stages ------------------------------------------------------------

    def _render(
        self, renderer: TemplateRenderer, context: TemplateContext
    ) -> Result[list[GeneratedFile], ProjectGenerationError]:
        try:
            return Success(renderer.render(context))
        except Exception as exc:  # noqa: BLE001
            error = RenderError(
                f"Template '{renderer.name}' failed to render: {exc}",
                template_name=renderer.name,
                cause=exc,
            )
            return self._fail(error, ErrorKind.RENDER)

    def _fail(
        self, error: BlueprintError, kind: ErrorKind
    ) -> Failure[ProjectGenerationError]:
        self.reporter.error(error.message)
        return Failure(ProjectGenerationError.from_error(error, kind))

    async def _write_ci_config(self, config: BlueprintConfig, root: Path) -> bool:
        try:
            ci_file = self.ci_generator.generate(config)
            if ci_file is None:
                return False
            await asyncio.to_thread(
                self.filesystem.write_file, root / ci_file.path, ci_file.content
            )
        except Exception as exc:  # noqa: BLE001
            self.reporter.warning(f"Could not generate CI configuration: {exc}")
            return False
        self.reporter.info(f"CI/CD configured for {config.ci_provider.value}")
        return True

    async def _write_manifest(self, config: BlueprintConfig, root: Path) -> bool:
        path = root / self.settings.manifest_filename
        try:
            await asyncio.to_thread(
                self.manifest_store.save, path, BlueprintManifest(config=config)
            )
        except Exception as exc:  # noqa: BLE001
            self.reporter.warning(f"Could not write {self.settings.manifest_filename}: {exc}")
            return False
        self.reporter.debug(f"Manifest written: {path}")
        return True

    async def _run_flutter_tools(self, root: Path) -> None:
        """Run ``flutter create .`` then ``flutter pub get``; failures only warn."""
        flutter = self.settings.flutter_binary
        steps = [
            ("Initializing Flutter project", [flutter, "create", "."]),
            ("Installing dependencies", [flutter, "pub", "get"]),
        ]
        for label, cmd in steps:
            self.reporter.info(f"{label}...")
            try:
                rc, _, stderr = await run_command(cmd, cwd=root, timeout=300)
            except OSError as exc:
                self.reporter.warning(f"Could not run '{' '.join(cmd)}': {exc}")
                return
            if rc != 0:
                self.reporter.warning(
                    f"'{' '.join(cmd)}' failed (exit {rc}): {stderr[:200]}"
                )
                return

    def _report(self, result: GenerationResult) -> None:
        cache_line = "n/a"
        if self.cache is not None:
            stats = self.cache.stats()
            self.reporter.debug(str(stats))
            cache_line = f"{stats.hits}/{stats.misses}"
        self.reporter.summary(
            {
                "Target": result.target_path,
                "Template": result.renderer_name,
                "Files generated": str(result.files_generated),
                "Files failed": str(result.files_failed),
                "Files skipped": str(result.files_skipped),
                "CI config": "yes" if result.ci_config_generated else "no",
                "Manifest": "yes" if result.manifest_written else "no",
                "Cache hits/misses": cache_line,
                "Duration": format_duration(result.duration_seconds),
            },
            title="Generation Summary",
        )
        if result.files_failed:
            self.reporter.warning(
                f"Generated {result.files_generated} files with {result.files_failed} failures"
            )
        else:
            self.reporter.success(f"Generated {result.files_generated} files successfully!")
