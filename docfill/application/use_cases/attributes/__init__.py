"""Attribute store use cases (entity type schemas and entities)."""

from docfill.application.use_cases.attributes.entity_operations import EntityService
from docfill.application.use_cases.attributes.schema_operations import (
    EntityTypeSchemaService,
)

__all__ = ["EntityService", "EntityTypeSchemaService"]
