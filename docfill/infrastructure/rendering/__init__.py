"""Document rendering (templating engine implementations)."""

from docfill.infrastructure.rendering.docx_engine import DocxTemplateEngine

__all__ = ["DocxTemplateEngine"]
