"""BulkGenerationService unit tests with a fake generator, store and repositories."""

import asyncio
from datetime import UTC, datetime
from pathlib import Path
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

from docfill.application.dtos.generation import (
    BatchRequest,
    DraftOutput,
    GeneratedOutput,
    PublishedOutput,
)
from docfill.application.use_cases.generation import BulkGenerationService
from docfill.domain.exceptions import (
    RenderFailureException,
    UnauthorizedException,
    ValidationException,
)
from docfill.shared.enums import ActivityAction

NOW = datetime(2024, 4, 1, tzinfo=UTC)


def _output(document_type_id: str, entity_id: str) -> GeneratedOutput:
    return GeneratedOutput(
        record_id=f"rec-{entity_id}-{document_type_id}",
        draft=DraftOutput(path=Path(f"/out/{document_type_id}/{entity_id}.docx")),
        generated_at=NOW,
        input_values={},
    )


class FakeGenerator:
    """Succeeds unless the (entity, document type) pair is listed in failures."""

    def __init__(self, failures=(), delay: float = 0.0) -> None:
        self.failures = set(failures)
        self.delay = delay
        self.in_flight = 0
        self.max_in_flight = 0
        self.calls: list[tuple[str, str | None]] = []

    async def generate(self, actor, request):
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.delay)
            self.calls.append((request.document_type_id, request.entity_id))
            if (request.entity_id, request.document_type_id) in self.failures:
                raise RenderFailureException("template exploded")
            return _output(request.document_type_id, request.entity_id)
        finally:
            self.in_flight -= 1


async def _publish(draft: DraftOutput, file_name: str) -> PublishedOutput:
    return PublishedOutput(path=draft.path.parent / file_name, draft_path=draft.path)


@pytest.fixture
def fake_uow():
    async def get_document_type(document_type_id, include_deleted=False):
        names = {"dt-a": "Invoice", "dt-b": "Form 16"}
        if document_type_id not in names:
            return None
        return SimpleNamespace(id=document_type_id, name=names[document_type_id])

    async def get_names(ids):
        names = {"e1": "Acme", "e2": "Beta", "e3": "Gamma"}
        return {i: names[i] for i in ids if i in names}

    return SimpleNamespace(
        entities=SimpleNamespace(get_names=AsyncMock(side_effect=get_names)),
        document_types=SimpleNamespace(get_by_id=AsyncMock(side_effect=get_document_type)),
        generated_documents=SimpleNamespace(update_file_path=AsyncMock()),
    )


@pytest.fixture
def store() -> MagicMock:
    output_store = MagicMock()
    output_store.root = Path("/out")
    output_store.publish = AsyncMock(side_effect=_publish)
    return output_store


@pytest.fixture
def revealer() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def make_service(fake_uow, fake_uow_factory, store, revealer):
    notifier = MagicMock()

    def _make(generator, concurrency: int = 5) -> BulkGenerationService:
        service = BulkGenerationService(
            fake_uow_factory(fake_uow),
            generator,
            store,
            notifier,
            revealer,
            concurrency=concurrency,
        )
        return service

    _make.notifier = notifier
    return _make


async def test_failures_are_isolated(make_service, admin) -> None:
    generator = FakeGenerator(failures={("e2", "dt-a")})
    service = make_service(generator)

    summary = await service.run_batch(
        admin, BatchRequest(entity_ids=["e1", "e2", "e3"], document_type_ids=["dt-a"])
    )

    assert (summary.total, summary.successful, summary.failed) == (3, 2, 1)
    assert summary.success is False
    failed = [r for r in summary.reports if not r.success]
    assert len(failed) == 1
    assert failed[0].entity_name == "Beta"
    assert failed[0].error == "template exploded"
    assert failed[0].error_code == "RENDER_FAILURE"
    assert len(generator.calls) == 3


async def test_every_pair_is_generated_with_bulk_file_names(
    make_service, admin, fake_uow, store
) -> None:
    service = make_service(FakeGenerator())

    summary = await service.run_batch(
        admin,
        BatchRequest(
            entity_ids=["e1", "e2"], document_type_ids=["dt-a", "dt-b"], financial_year="2023-24"
        ),
    )

    assert summary.success is True
    assert summary.total == 4
    pairs = {(r.entity_id, r.document_type_id) for r in summary.reports}
    assert pairs == {("e1", "dt-a"), ("e1", "dt-b"), ("e2", "dt-a"), ("e2", "dt-b")}
    names = {Path(r.file_path).name for r in summary.reports}
    assert any(name.startswith("Acme_Form_16_2023-24_") for name in names)
    assert fake_uow.generated_documents.update_file_path.await_count == 4


async def test_concurrency_is_bounded(make_service, admin) -> None:
    generator = FakeGenerator(delay=0.01)
    service = make_service(generator, concurrency=2)

    await service.run_batch(
        admin, BatchRequest(entity_ids=["e1", "e2", "e3"], document_type_ids=["dt-a", "dt-b"])
    )

    assert generator.max_in_flight == 2


async def test_progress_reported_before_each_job_and_at_end(make_service, admin) -> None:
    service = make_service(FakeGenerator(), concurrency=1)
    updates = []

    await service.run_batch(
        admin,
        BatchRequest(entity_ids=["e1", "e2"], document_type_ids=["dt-a"]),
        on_progress=updates.append,
    )

    assert len(updates) == 3
    assert [u.completed for u in updates] == [0, 1, 2]
    assert updates[0].current_entity_name == "Acme"
    assert updates[0].current_document_type_name == "Invoice"
    assert not any(u.is_complete for u in updates[:-1])
    final = updates[-1]
    assert final.is_complete and final.completed == final.total == 2
    assert final.successful == 2


async def test_failing_progress_callback_is_ignored(make_service, admin) -> None:
    service = make_service(FakeGenerator())

    def explode(progress) -> None:
        raise RuntimeError("ui gone")

    summary = await service.run_batch(
        admin, BatchRequest(entity_ids=["e1"], document_type_ids=["dt-a"]), on_progress=explode
    )
    assert summary.success is True


async def test_unknown_names_fall_back(make_service, admin) -> None:
    service = make_service(FakeGenerator(failures={("ghost", "dt-x")}))

    summary = await service.run_batch(
        admin, BatchRequest(entity_ids=["ghost"], document_type_ids=["dt-x"])
    )

    report = summary.reports[0]
    assert report.entity_name == "Unknown Client"
    assert report.document_type_name == "Unknown Form"


async def test_non_elevated_actor_rejected_before_any_job(make_service, operator) -> None:
    generator = FakeGenerator()
    service = make_service(generator)

    with pytest.raises(UnauthorizedException) as exc_info:
        await service.run_batch(
            operator, BatchRequest(entity_ids=["e1"], document_type_ids=["dt-a"])
        )

    assert exc_info.value.message == "Only administrators can generate bulk reports"
    assert generator.calls == []
    make_service.notifier.notify.assert_not_called()


@pytest.mark.parametrize(
    ("entity_ids", "document_type_ids", "message"),
    [
        ([], ["dt-a"], "No entities selected"),
        (["e1"], [], "No document types selected"),
    ],
)
async def test_empty_selection_rejected(
    make_service, admin, entity_ids, document_type_ids, message
) -> None:
    generator = FakeGenerator()
    service = make_service(generator)

    with pytest.raises(ValidationException, match=message):
        await service.run_batch(
            admin, BatchRequest(entity_ids=entity_ids, document_type_ids=document_type_ids)
        )
    assert generator.calls == []


async def test_reveal_and_bulk_activity_after_success(make_service, admin, revealer) -> None:
    service = make_service(FakeGenerator())

    await service.run_batch(
        admin,
        BatchRequest(entity_ids=["e1"], document_type_ids=["dt-a"], financial_year="2024-25"),
    )

    revealer.reveal.assert_awaited_once_with(Path("/out"))
    event = make_service.notifier.notify.call_args.args[0]
    assert event.action_type == ActivityAction.BULK_REPORT_GENERATE
    assert event.metadata == {
        "total": 1,
        "successful": 1,
        "failed": 0,
        "financial_year": "2024-25",
    }


async def test_no_reveal_when_every_job_fails(make_service, admin, revealer) -> None:
    service = make_service(FakeGenerator(failures={("e1", "dt-a")}))

    summary = await service.run_batch(
        admin, BatchRequest(entity_ids=["e1"], document_type_ids=["dt-a"])
    )

    assert summary.failed == 1
    revealer.reveal.assert_not_awaited()


async def test_reveal_failure_does_not_fail_batch(make_service, admin, revealer) -> None:
    revealer.reveal.side_effect = OSError("no display")
    service = make_service(FakeGenerator())

    summary = await service.run_batch(
        admin, BatchRequest(entity_ids=["e1"], document_type_ids=["dt-a"])
    )
    assert summary.success is True


async def test_unrenamed_draft_keeps_recorded_path(make_service, admin, fake_uow, store) -> None:
    async def keep_draft(draft, file_name):
        return PublishedOutput(path=draft.path, draft_path=draft.path)

    store.publish.side_effect = keep_draft
    service = make_service(FakeGenerator())

    summary = await service.run_batch(
        admin, BatchRequest(entity_ids=["e1"], document_type_ids=["dt-a"])
    )

    assert summary.reports[0].file_path == str(Path("/out/dt-a/e1.docx"))
    fake_uow.generated_documents.update_file_path.assert_not_awaited()


async def test_unexpected_exception_captured(make_service, admin, fake_uow) -> None:
    fake_uow.generated_documents.update_file_path.side_effect = RuntimeError("locked")
    service = make_service(FakeGenerator())

    summary = await service.run_batch(
        admin, BatchRequest(entity_ids=["e1"], document_type_ids=["dt-a"])
    )

    report = summary.reports[0]
    assert report.success is False
    assert report.error == "locked"
    assert report.error_code == "RuntimeError"


def test_concurrency_must_be_positive(fake_uow_factory) -> None:
    with pytest.raises(ValueError):
        BulkGenerationService(
            fake_uow_factory(None), FakeGenerator(), MagicMock(), MagicMock(), AsyncMock(),
            concurrency=0,
        )
