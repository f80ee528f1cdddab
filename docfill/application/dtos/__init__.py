"""Application DTOs (frozen dataclasses, no dependency on ORM)."""
