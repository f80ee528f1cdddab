"""Domain exceptions for docfill.

Defines domain-level exceptions that represent business rule violations.
These exceptions are independent of infrastructure concerns. Callers (CLI,
batch orchestrator) surface error_code and message verbatim.
"""

from typing import Any


class DocfillException(Exception):
    """Base exception for all docfill errors.

    All custom exceptions should inherit from this class to allow
    consistent error handling and logging.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error kind.
        details: Additional error context (e.g. field, resource_id).
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Optional machine-readable code; defaults to class name.
            details: Optional dict of extra context.
        """
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def __str__(self) -> str:
        return f"{self.error_code}: {self.message}"


class UnauthorizedException(DocfillException):
    """Raised when the actor lacks the elevated privilege for the operation."""

    def __init__(self, action: str | None = None, message: str | None = None) -> None:
        """Initialize with optional action and message.

        Args:
            action: Action that was attempted (e.g. 'create clients').
            message: Human-readable message; built from action when omitted.
        """
        if message is None:
            message = (
                f"Only administrators can {action}" if action else "Permission denied"
            )
        details = {"action": action} if action else {}
        super().__init__(message, "UNAUTHORIZED", details)


class ValidationException(DocfillException):
    """Raised when input validation fails (missing field, bad type, duplicate value)."""

    def __init__(self, message: str, field: str | None = None) -> None:
        """Initialize with message and optional field name.

        Args:
            message: Description of the validation failure.
            field: Optional field or attribute that failed validation.
        """
        details = {"field": field} if field else {}
        super().__init__(message, "VALIDATION", details)


class ResourceNotFoundException(DocfillException):
    """Raised when a requested resource is not found."""

    def __init__(self, resource_type: str, resource_id: str) -> None:
        """Initialize with resource type and id.

        Args:
            resource_type: Type of resource (e.g. 'document_type', 'entity').
            resource_id: The ID that was not found.
        """
        super().__init__(
            f"{resource_type} not found: {resource_id}",
            "NOT_FOUND",
            {"resource_type": resource_type, "resource_id": resource_id},
        )


class DuplicateException(DocfillException):
    """Raised when creating something whose unique name or key already exists."""

    def __init__(self, message: str, field: str | None = None) -> None:
        details = {"field": field} if field else {}
        super().__init__(message, "DUPLICATE", details)


class TemplateMissingException(DocfillException):
    """Raised when a document type's template record or file is missing."""

    def __init__(self, template_ref: str) -> None:
        """Initialize with the template id or file path that could not be found.

        Args:
            template_ref: Template id (no record) or file path (no file on disk).
        """
        super().__init__(
            f"Template file missing: {template_ref}",
            "TEMPLATE_MISSING",
            {"template": template_ref},
        )


class RenderFailureException(DocfillException):
    """Raised when the templating engine cannot render a template."""

    def __init__(self, reason: str) -> None:
        """Initialize with the engine's message.

        Args:
            reason: Human-readable message from the templating engine.
        """
        super().__init__(reason, "RENDER_FAILURE", {"reason": reason})


class IOFailureException(DocfillException):
    """Raised when writing a new output file fails.

    Best-effort cleanup failures (removing stale files) are logged, never raised.
    """

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(
            f"Failed to write output file: {path}",
            "IO_FAILURE",
            {"path": path, "reason": reason},
        )
