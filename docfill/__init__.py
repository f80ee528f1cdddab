"""docfill: template-driven document generation for clients and document types."""

__version__ = "1.0.0"
