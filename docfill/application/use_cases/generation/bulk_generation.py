"""Bulk generation: every selected entity x every selected document type, five at a time."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from itertools import product

from docfill.application.dtos.activity import ActivityEvent
from docfill.application.dtos.generation import (
    BatchItemResult,
    BatchJob,
    BatchProgress,
    BatchRequest,
    BatchSummary,
    GenerateRequest,
)
from docfill.application.interfaces.services import (
    IActivityNotifier,
    IOutputRevealer,
    IOutputStore,
    UnitOfWorkFactory,
)
from docfill.application.services.authorization_service import require_elevated
from docfill.application.use_cases.generation.generate_document import DocumentGenerator
from docfill.core.constants import UNKNOWN_DOCUMENT_TYPE_NAME, UNKNOWN_ENTITY_NAME
from docfill.domain.exceptions import DocfillException, ValidationException
from docfill.domain.value_objects import Actor
from docfill.shared.enums import ActivityAction, ActivityEntityType
from docfill.shared.telemetry.logging import get_logger
from docfill.shared.utils.datetime import file_timestamp
from docfill.shared.utils.file_names import build_bulk_file_name

logger = get_logger(__name__)

ProgressCallback = Callable[[BatchProgress], None]


class _BatchState:
    """Running counters of one batch. Mutated only from the event loop thread."""

    def __init__(self, total: int) -> None:
        self.total = total
        self.completed = 0
        self.successful = 0
        self.failed = 0
        self.reports: list[BatchItemResult] = []

    def record(self, result: BatchItemResult) -> None:
        self.completed += 1
        if result.success:
            self.successful += 1
        else:
            self.failed += 1
        self.reports.append(result)

    def progress(
        self,
        entity_name: str | None = None,
        document_type_name: str | None = None,
        *,
        is_complete: bool = False,
    ) -> BatchProgress:
        return BatchProgress(
            total=self.total,
            completed=self.completed,
            successful=self.successful,
            failed=self.failed,
            current_entity_name=entity_name,
            current_document_type_name=document_type_name,
            is_complete=is_complete,
        )


class BulkGenerationService:
    """Runs a batch of generation jobs through a bounded pool.

    Each job's failure is captured in its own result; no job aborts another.
    """

    def __init__(
        self,
        unit_of_work: UnitOfWorkFactory,
        generator: DocumentGenerator,
        output_store: IOutputStore,
        notifier: IActivityNotifier,
        revealer: IOutputRevealer,
        *,
        concurrency: int = 5,
        dispatch_delay_seconds: float = 0.0,
    ) -> None:
        if concurrency < 1:
            raise ValueError(f"concurrency must be at least 1, got: {concurrency}")
        self.unit_of_work = unit_of_work
        self.generator = generator
        self.output_store = output_store
        self.notifier = notifier
        self.revealer = revealer
        self.concurrency = concurrency
        self.dispatch_delay_seconds = dispatch_delay_seconds

    async def _resolve_names(
        self, request: BatchRequest
    ) -> tuple[dict[str, str], dict[str, str]]:
        """Return display names for entities and document types (deleted rows included)."""
        async with self.unit_of_work() as uow:
            entity_names = await uow.entities.get_names(list(dict.fromkeys(request.entity_ids)))
            document_type_names: dict[str, str] = {}
            for document_type_id in dict.fromkeys(request.document_type_ids):
                document_type = await uow.document_types.get_by_id(
                    document_type_id, include_deleted=True
                )
                if document_type is not None:
                    document_type_names[document_type_id] = document_type.name
        return entity_names, document_type_names

    @staticmethod
    def _emit_progress(on_progress: ProgressCallback | None, progress: BatchProgress) -> None:
        if on_progress is None:
            return
        try:
            on_progress(progress)
        except Exception:
            logger.exception("Progress callback failed; continuing batch")

    async def _run_job(
        self,
        actor: Actor,
        job: BatchJob,
        entity_name: str,
        document_type_name: str,
        financial_year: str | None,
    ) -> BatchItemResult:
        try:
            output = await self.generator.generate(
                actor,
                GenerateRequest(
                    document_type_id=job.document_type_id,
                    entity_id=job.entity_id,
                    manual_values={},
                ),
            )
            file_name = build_bulk_file_name(
                entity_name, document_type_name, financial_year, file_timestamp()
            )
            published = await self.output_store.publish(output.draft, file_name)
            if published.renamed:
                async with self.unit_of_work() as uow:
                    await uow.generated_documents.update_file_path(
                        output.record_id, str(published.path)
                    )
        except DocfillException as e:
            logger.warning(
                "Bulk job %s x %s failed: %s", job.entity_id, job.document_type_id, e
            )
            return BatchItemResult(
                entity_id=job.entity_id,
                entity_name=entity_name,
                document_type_id=job.document_type_id,
                document_type_name=document_type_name,
                success=False,
                error=e.message,
                error_code=e.error_code,
            )
        except Exception as e:
            logger.exception(
                "Bulk job %s x %s failed unexpectedly", job.entity_id, job.document_type_id
            )
            return BatchItemResult(
                entity_id=job.entity_id,
                entity_name=entity_name,
                document_type_id=job.document_type_id,
                document_type_name=document_type_name,
                success=False,
                error=str(e) or "Exception during generation",
                error_code=type(e).__name__,
            )
        return BatchItemResult(
            entity_id=job.entity_id,
            entity_name=entity_name,
            document_type_id=job.document_type_id,
            document_type_name=document_type_name,
            success=True,
            file_path=str(published.path),
            record_id=output.record_id,
        )

    async def run_batch(
        self,
        actor: Actor,
        request: BatchRequest,
        on_progress: ProgressCallback | None = None,
    ) -> BatchSummary:
        """Generate one document per (entity, document type) pair.

        Raises UnauthorizedException or ValidationException before any job runs;
        afterwards every outcome is reported in the returned summary.
        """
        require_elevated(actor, "generate bulk reports")
        if not request.entity_ids:
            raise ValidationException("No entities selected", field="entity_ids")
        if not request.document_type_ids:
            raise ValidationException(
                "No document types selected", field="document_type_ids"
            )

        jobs = [
            BatchJob(entity_id=entity_id, document_type_id=document_type_id)
            for entity_id, document_type_id in product(
                request.entity_ids, request.document_type_ids
            )
        ]
        state = _BatchState(total=len(jobs))
        entity_names, document_type_names = await self._resolve_names(request)
        semaphore = asyncio.Semaphore(self.concurrency)
        logger.info(
            "Starting bulk generation: %d jobs, concurrency %d", state.total, self.concurrency
        )

        async def worker(job: BatchJob) -> None:
            entity_name = entity_names.get(job.entity_id, UNKNOWN_ENTITY_NAME)
            document_type_name = document_type_names.get(
                job.document_type_id, UNKNOWN_DOCUMENT_TYPE_NAME
            )
            async with semaphore:
                self._emit_progress(on_progress, state.progress(entity_name, document_type_name))
                if self.dispatch_delay_seconds:
                    await asyncio.sleep(self.dispatch_delay_seconds)
                result = await self._run_job(
                    actor, job, entity_name, document_type_name, request.financial_year
                )
                state.record(result)

        tasks = [asyncio.create_task(worker(job)) for job in jobs]
        await asyncio.gather(*tasks)

        logger.info(
            "Bulk generation finished: %d succeeded, %d failed of %d",
            state.successful,
            state.failed,
            state.total,
        )
        self.notifier.notify(
            ActivityEvent(
                actor_id=actor.id,
                action_type=ActivityAction.BULK_REPORT_GENERATE,
                entity_type=ActivityEntityType.REPORT,
                metadata={
                    "total": state.total,
                    "successful": state.successful,
                    "failed": state.failed,
                    "financial_year": request.financial_year,
                },
            )
        )
        self._emit_progress(on_progress, state.progress(is_complete=True))
        if state.successful > 0:
            try:
                await self.revealer.reveal(self.output_store.root)
            except Exception:
                logger.exception("Could not reveal output folder %s", self.output_store.root)

        return BatchSummary(
            success=state.failed == 0,
            total=state.total,
            successful=state.successful,
            failed=state.failed,
            reports=list(state.reports),
        )
