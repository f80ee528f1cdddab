"""Domain layer: value objects, enums, and exceptions.

No dependencies on infrastructure or presentation. Used by application
and infrastructure layers.
"""

from docfill.domain.enums import ActorRole, DataType
from docfill.domain.exceptions import (
    DocfillException,
    DuplicateException,
    IOFailureException,
    RenderFailureException,
    ResourceNotFoundException,
    TemplateMissingException,
    UnauthorizedException,
    ValidationException,
)
from docfill.domain.value_objects import Actor, FormatRule, is_valid_key

__all__ = [
    # Enums
    "ActorRole",
    "DataType",
    # Exceptions
    "DocfillException",
    "DuplicateException",
    "IOFailureException",
    "RenderFailureException",
    "ResourceNotFoundException",
    "TemplateMissingException",
    "UnauthorizedException",
    "ValidationException",
    # Value objects
    "Actor",
    "FormatRule",
    "is_valid_key",
]
