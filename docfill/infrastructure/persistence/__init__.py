"""Persistence: database engine, ORM models, repositories and unit of work."""

from docfill.infrastructure.persistence.database import Base, Database

__all__ = ["Base", "Database"]
