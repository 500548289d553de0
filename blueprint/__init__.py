"""blueprint -- Flutter project scaffolding engine.

Selects a template for a declarative :class:`BlueprintConfig`, renders it
through a memoising cache and writes the files with bounded concurrency.
"""

__version__ = "0.1.0"

from blueprint.config import (
    BlueprintConfig,
    CIProvider,
    GeneratorSettings,
    StateManagement,
    TargetPlatform,
)
from blueprint.core import ErrorKind, Failure, ProjectGenerationError, Result, Success
from blueprint.generator import GenerationResult, ProjectGenerator
from blueprint.templates import RenderCache, TemplateRegistry, build_default_registry

__all__ = [
    "__version__",
    "BlueprintConfig",
    "CIProvider",
    "GeneratorSettings",
    "StateManagement",
    "TargetPlatform",
    "ErrorKind",
    "Failure",
    "ProjectGenerationError",
    "Result",
    "Success",
    "GenerationResult",
    "ProjectGenerator",
    "RenderCache",
    "TemplateRegistry",
    "build_default_registry",
]
