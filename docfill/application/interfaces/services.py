"""Service interfaces (ports) for the application layer.

Protocols define contracts for collaborators of the generation pipeline (DIP).
"""

from __future__ import annotations

from contextlib import AbstractAsyncContextManager
from pathlib import Path
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from docfill.application.dtos.activity import ActivityEvent
    from docfill.application.dtos.generation import DraftOutput, PublishedOutput
    from docfill.application.interfaces.repositories import IUnitOfWork


class UnitOfWorkFactory(Protocol):
    """Callable returning an async context manager that yields a unit of work."""

    def __call__(self) -> AbstractAsyncContextManager[IUnitOfWork]:
        ...


# Templating engine interface
class ITemplateEngine(Protocol):
    """Protocol for rendering template bytes with placeholder values."""

    def render(self, template_bytes: bytes, values: dict[str, str]) -> bytes:
        """Return rendered document bytes. Raise RenderFailureException on engine errors."""


# Activity notifier interface
class IActivityNotifier(Protocol):
    """Protocol for fire-and-forget activity recording."""

    def notify(self, event: ActivityEvent) -> None:
        """Schedule the event for recording. Must never raise."""

    async def drain(self) -> None:
        """Wait until every scheduled event has been recorded or dropped."""


# Output revealer interface
class IOutputRevealer(Protocol):
    """Protocol for showing a folder to the operator (e.g. file manager)."""

    async def reveal(self, path: Path) -> None:
        """Best-effort; must never raise."""


# Output store interface
class IOutputStore(Protocol):
    """Protocol for writing, publishing and deleting generated files."""

    @property
    def root(self) -> Path:
        """Root folder under which generated files are written."""

    async def write_draft(
        self, document_type_name: str, data: bytes, extension: str = ".docx"
    ) -> DraftOutput:
        """Write bytes to a new collision-free file. Raise IOFailureException on failure."""

    async def read_template(self, file_path: str) -> bytes:
        """Return template file bytes. Raise TemplateMissingException if absent."""

    async def publish(self, draft: DraftOutput, file_name: str) -> PublishedOutput:
        """Rename draft to a unique file_name in its folder; keep the draft path on failure."""

    async def delete(self, path: str | Path) -> bool:
        """Best-effort delete. Return True if a file was removed."""
