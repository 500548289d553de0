"""Core value types shared by every pipeline stage."""

from .errors import (
    BlueprintError,
    ConfigurationError,
    ErrorKind,
    FileOperationError,
    ProjectGenerationError,
    RenderError,
    SelectionError,
    ValidationError,
)
from .result import Failure, Result, Success

__all__ = [
    # Result type
    "Result",
    "Success",
    "Failure",
    # Errors
    "BlueprintError",
    "ConfigurationError",
    "ErrorKind",
    "FileOperationError",
    "ProjectGenerationError",
    "RenderError",
    "SelectionError",
    "ValidationError",
]
