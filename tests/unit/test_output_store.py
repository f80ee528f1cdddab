"""LocalOutputStore and ensure_unique_path tests against tmp_path."""

import asyncio
from pathlib import Path

import pytest

from docfill.domain.exceptions import IOFailureException, TemplateMissingException
from docfill.infrastructure.storage import LocalOutputStore, ensure_unique_path


class TestEnsureUniquePath:
    def test_free_name_returned_as_is(self, tmp_path: Path) -> None:
        assert ensure_unique_path(tmp_path / "new", "a.docx") == tmp_path / "new" / "a.docx"
        assert (tmp_path / "new").is_dir()

    def test_counter_inserted_before_extension(self, tmp_path: Path) -> None:
        (tmp_path / "a.docx").touch()
        (tmp_path / "a(1).docx").touch()
        assert ensure_unique_path(tmp_path, "a.docx") == tmp_path / "a(2).docx"

    def test_name_without_extension(self, tmp_path: Path) -> None:
        (tmp_path / "report").touch()
        assert ensure_unique_path(tmp_path, "report") == tmp_path / "report(1)"


async def test_write_draft_under_document_type_folder(output_store: LocalOutputStore) -> None:
    draft = await output_store.write_draft("GST Return: Q1", b"data")
    assert draft.path.parent == output_store.root / "GST Return Q1"
    assert draft.path.suffix == ".docx"
    assert draft.path.read_bytes() == b"data"


async def test_concurrent_drafts_get_distinct_paths(output_store: LocalOutputStore) -> None:
    drafts = await asyncio.gather(
        *(output_store.write_draft("Invoice", str(i).encode()) for i in range(5))
    )
    paths = {d.path for d in drafts}
    assert len(paths) == 5
    assert sorted(p.read_bytes() for p in paths) == [b"0", b"1", b"2", b"3", b"4"]


async def test_write_draft_io_failure(tmp_path: Path) -> None:
    blocker = tmp_path / "blocked"
    blocker.write_text("not a folder")
    store = LocalOutputStore(blocker)
    with pytest.raises(IOFailureException) as exc_info:
        await store.write_draft("Invoice", b"x")
    assert exc_info.value.error_code == "IO_FAILURE"


async def test_publish_renames_and_dedupes(output_store: LocalOutputStore) -> None:
    first = await output_store.write_draft("Invoice", b"1")
    second = await output_store.write_draft("Invoice", b"2")

    published_first = await output_store.publish(first, "Acme_Invoice.docx")
    published_second = await output_store.publish(second, "Acme_Invoice.docx")

    assert published_first.renamed and published_second.renamed
    assert published_first.path.name == "Acme_Invoice.docx"
    assert published_second.path.name == "Acme_Invoice(1).docx"
    assert not first.path.exists()
    assert published_second.path.read_bytes() == b"2"


async def test_publish_missing_draft_keeps_path(output_store: LocalOutputStore) -> None:
    draft = await output_store.write_draft("Invoice", b"1")
    draft.path.unlink()
    published = await output_store.publish(draft, "final.docx")
    assert published.path == draft.path
    assert not published.renamed


async def test_read_template(output_store: LocalOutputStore, tmp_path: Path) -> None:
    template = tmp_path / "t.docx"
    template.write_bytes(b"zip")
    assert await output_store.read_template(str(template)) == b"zip"
    with pytest.raises(TemplateMissingException):
        await output_store.read_template(str(tmp_path / "absent.docx"))


async def test_delete_is_best_effort(output_store: LocalOutputStore) -> None:
    draft = await output_store.write_draft("Invoice", b"1")
    assert await output_store.delete(draft.path) is True
    assert await output_store.delete(draft.path) is False
