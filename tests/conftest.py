"""Pytest configuration and fixtures for docfill.

DB-dependent fixtures use an in-memory SQLite database created per test.
.docx templates are built with zipfile in tmp_path. All imports use docfill.*.
"""

import zipfile
from collections.abc import Callable
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any
from xml.sax.saxutils import escape

import pytest

from docfill.domain.enums import ActorRole
from docfill.domain.value_objects import Actor
from docfill.infrastructure.persistence.database import Database
from docfill.infrastructure.services.activity_notifier import ActivityLogNotifier
from docfill.infrastructure.storage.local_output_store import LocalOutputStore

_CONTENT_TYPES = (
    '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
    '<Types xmlns="http://schemas.openxmlformats.org/package/2006/content-types">'
    '<Default Extension="xml" ContentType="application/xml"/>'
    '<Override PartName="/word/document.xml" '
    'ContentType="application/vnd.openxmlformats-officedocument.wordprocessingml.document.main+xml"/>'
    "</Types>"
)


def document_xml(paragraph_xml: list[str]) -> str:
    """Wrap raw <w:p> markup in a minimal WordprocessingML document."""
    body = "".join(paragraph_xml)
    return (
        '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
        '<w:document xmlns:w="http://schemas.openxmlformats.org/wordprocessingml/2006/main">'
        f"<w:body>{body}</w:body></w:document>"
    )


def paragraph(*runs: str) -> str:
    """Return a <w:p> with one <w:r><w:t> per run text (text is XML-escaped)."""
    inner = "".join(
        f'<w:r><w:t xml:space="preserve">{escape(text)}</w:t></w:r>' for text in runs
    )
    return f"<w:p>{inner}</w:p>"


def build_docx(paragraphs: list[str], extra_parts: dict[str, str] | None = None) -> bytes:
    """Return .docx bytes whose document body holds the given <w:p> markup."""
    from io import BytesIO

    buffer = BytesIO()
    with zipfile.ZipFile(buffer, "w", zipfile.ZIP_DEFLATED) as zf:
        zf.writestr("[Content_Types].xml", _CONTENT_TYPES)
        zf.writestr("word/document.xml", document_xml(paragraphs))
        for name, content in (extra_parts or {}).items():
            zf.writestr(name, content)
    return buffer.getvalue()


def read_document_xml(path_or_bytes: Path | bytes) -> str:
    """Return word/document.xml of a .docx file or bytes."""
    from io import BytesIO

    source = BytesIO(path_or_bytes) if isinstance(path_or_bytes, bytes) else path_or_bytes
    with zipfile.ZipFile(source) as zf:
        return zf.read("word/document.xml").decode("utf-8")


def uow_factory(uow: Any) -> Callable[[], Any]:
    """Return a unit-of-work factory that always yields uow (for fakes)."""

    @asynccontextmanager
    async def factory():
        yield uow

    return factory


@pytest.fixture
def admin() -> Actor:
    return Actor(id="admin-1", role=ActorRole.ADMIN)


@pytest.fixture
def operator() -> Actor:
    return Actor(id="user-1", role=ActorRole.USER)


@pytest.fixture
async def database() -> Database:
    """In-memory SQLite database with all tables. Disposed after the test.

    Use @pytest.mark.requires_db on tests that need it.
    """
    db = Database("sqlite+aiosqlite:///:memory:")
    await db.create_tables()
    yield db
    await db.dispose()


@pytest.fixture
async def notifier(database: Database) -> ActivityLogNotifier:
    activity_notifier = ActivityLogNotifier(database.unit_of_work)
    yield activity_notifier
    await activity_notifier.drain()


@pytest.fixture
def output_store(tmp_path: Path) -> LocalOutputStore:
    return LocalOutputStore(tmp_path / "output")


@pytest.fixture
def write_template(tmp_path: Path) -> Callable[..., Path]:
    """Factory: write a .docx template with the given <w:p> markup; return its path."""

    def _write(paragraphs: list[str], name: str = "template.docx") -> Path:
        folder = tmp_path / "templates"
        folder.mkdir(parents=True, exist_ok=True)
        path = folder / name
        path.write_bytes(build_docx(paragraphs))
        return path

    return _write


@pytest.fixture
def docx_builder() -> Callable[..., bytes]:
    """build_docx(paragraphs, extra_parts=None) -> bytes."""
    return build_docx


@pytest.fixture
def docx_reader() -> Callable[[Path | bytes], str]:
    """read_document_xml(path_or_bytes) -> document.xml text."""
    return read_document_xml


@pytest.fixture
def para() -> Callable[..., str]:
    """paragraph(*run_texts) -> <w:p> markup."""
    return paragraph


@pytest.fixture
def fake_uow_factory() -> Callable[[Any], Callable[[], Any]]:
    """uow_factory(uow) -> factory yielding uow."""
    return uow_factory
