"""Domain error types for the blueprint generator.

All errors derive from :class:`BlueprintError`, which carries a human-readable
message, an optional underlying cause and a machine-readable ``code``.
"""

from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    """Terminal error kind reported when generation cannot proceed."""

    VALIDATION = "validation"
    SELECTION = "selection"
    RENDER = "render"
    WRITE = "write"
    UNEXPECTED = "unexpected"


class BlueprintError(Exception):
    """Base class for every blueprint error."""

    code = "BLUEPRINT_ERROR"

    def __init__(self, message: str, cause: BaseException | None = None) -> None:
        self.message = message
        self.cause = cause
        super().__init__(message)

    def __str__(self) -> str:
        text = f"{self.code}: {self.message}"
        if self.cause is not None:
            text += f"\n  Caused by: {self.cause}"
        return text


class ValidationError(BlueprintError):
    """Raised when an input (app name, path, ...) fails validation."""

    code = "VALIDATION_ERROR"

    def __init__(
        self,
        message: str,
        field: str = "",
        errors: list[str] | None = None,
        cause: BaseException | None = None,
    ) -> None:
        self.field = field
        self.errors = errors or []
        super().__init__(message, cause=cause)

    def __str__(self) -> str:
        text = super().__str__()
        for error in self.errors:
            text += f"\n  - {error}"
        return text


class ConfigurationError(BlueprintError):
    """Raised when a configuration cannot be parsed or loaded."""

    code = "CONFIGURATION_ERROR"

    def __init__(
        self,
        message: str,
        field: str = "",
        value: object = None,
        cause: BaseException | None = None,
    ) -> None:
        self.field = field
        self.value = value
        super().__init__(message, cause=cause)


class SelectionError(BlueprintError):
    """Raised when no renderer is registered for a configuration shape."""

    code = "SELECTION_ERROR"

    def __init__(self, message: str, platforms: list[str], state_management: str) -> None:
        self.platforms = platforms
        self.state_management = state_management
        super().__init__(message)


class RenderError(BlueprintError):
    """Raised when a template renderer fails to produce its files."""

    code = "TEMPLATE_RENDER_ERROR"

    def __init__(
        self,
        message: str,
        template_name: str = "",
        file_path: str = "",
        cause: BaseException | None = None,
    ) -> None:
        self.template_name = template_name
        self.file_path = file_path
        super().__init__(message, cause=cause)

    def __str__(self) -> str:
        text = f"{self.code}: {self.message}"
        if self.template_name:
            text += f"\n  Template: {self.template_name}"
        if self.file_path:
            text += f"\n  File: {self.file_path}"
        if self.cause is not None:
            text += f"\n  Caused by: {self.cause}"
        return text


class FileOperationError(BlueprintError):
    """Raised when a filesystem operation fails."""

    code = "FILE_OPERATION_ERROR"

    def __init__(
        self,
        message: str,
        file_path: str = "",
        operation: str = "",
        cause: BaseException | None = None,
    ) -> None:
        self.file_path = file_path
        self.operation = operation
        super().__init__(message, cause=cause)


class ProjectGenerationError(BlueprintError):
    """Terminal error of a generation run, tagged with the failing stage."""

    code = "PROJECT_GENERATION_ERROR"

    def __init__(
        self,
        message: str,
        kind: ErrorKind = ErrorKind.UNEXPECTED,
        cause: BaseException | None = None,
    ) -> None:
        self.kind = kind
        super().__init__(message, cause=cause)

    @classmethod
    def from_error(cls, error: BlueprintError, kind: ErrorKind) -> "ProjectGenerationError":
        """Wrap a stage error, keeping its message and the original as cause."""
        return cls(error.message, kind=kind, cause=error)
