"""Runtime lifespan: startup and shutdown.

Single place for wiring infrastructure to use cases. No business logic here.
Startup: database (tables ensured), output store, activity notifier,
templating engine, generators. Shutdown: pending activity writes drained,
database engine disposed.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass

from docfill.application.interfaces.services import IOutputRevealer
from docfill.application.use_cases.generation import (
    BulkGenerationService,
    DocumentGenerator,
)
from docfill.core.config import Settings, get_settings
from docfill.infrastructure.persistence.database import Database
from docfill.infrastructure.rendering import DocxTemplateEngine
from docfill.infrastructure.services import (
    ActivityLogNotifier,
    FileManagerOutputRevealer,
    LoggingOutputRevealer,
)
from docfill.infrastructure.storage import LocalOutputStore
from docfill.shared.telemetry.logging import get_logger

logger = get_logger(__name__)


@dataclass
class Runtime:
    """Long-lived collaborators shared by every operation in one process."""

    settings: Settings
    database: Database
    output_store: LocalOutputStore
    notifier: ActivityLogNotifier
    generator: DocumentGenerator
    bulk_generation: BulkGenerationService


@asynccontextmanager
async def create_runtime(settings: Settings | None = None) -> AsyncIterator[Runtime]:
    """Build the runtime, yield it, then drain activity writes and dispose the engine."""
    settings = settings or get_settings()

    # ---- Startup ----
    database = Database.from_settings(settings)
    await database.create_tables()
    output_store = LocalOutputStore(settings.output_root)
    notifier = ActivityLogNotifier(database.unit_of_work)
    revealer: IOutputRevealer = (
        FileManagerOutputRevealer()
        if settings.open_output_folder
        else LoggingOutputRevealer()
    )
    generator = DocumentGenerator(
        unit_of_work=database.unit_of_work,
        template_engine=DocxTemplateEngine(),
        output_store=output_store,
        notifier=notifier,
    )
    bulk_generation = BulkGenerationService(
        unit_of_work=database.unit_of_work,
        generator=generator,
        output_store=output_store,
        notifier=notifier,
        revealer=revealer,
        concurrency=settings.batch_concurrency,
        dispatch_delay_seconds=settings.batch_dispatch_delay_seconds,
    )
    logger.info(
        "%s %s started (output: %s)",
        settings.app_name,
        settings.app_version,
        output_store.root,
    )

    try:
        yield Runtime(
            settings=settings,
            database=database,
            output_store=output_store,
            notifier=notifier,
            generator=generator,
            bulk_generation=bulk_generation,
        )
    finally:
        # ---- Shutdown ----
        await notifier.drain()
        await database.dispose()
        logger.info("Database engine disposed")
