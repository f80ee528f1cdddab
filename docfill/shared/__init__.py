"""Shared cross-cutting helpers: logging, enums, and utilities."""
