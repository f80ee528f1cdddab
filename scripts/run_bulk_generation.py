"""Generate documents for every entity x document type pair.

Usage:
    python -m scripts.run_bulk_generation <actor_id> <entity_ids,...> <document_type_ids,...> [financial_year]
Runs as an ADMIN operator. Exits with status 1 when any job failed.
All imports use docfill.*.
"""

import asyncio
import sys

from docfill.application.dtos.generation import BatchProgress, BatchRequest
from docfill.core.lifespan import create_runtime
from docfill.domain.enums import ActorRole
from docfill.domain.exceptions import DocfillException
from docfill.domain.value_objects import Actor
from docfill.shared.telemetry.logging import setup_logging


def _split_ids(raw: str) -> list[str]:
    return [part.strip() for part in raw.split(",") if part.strip()]


def _print_progress(progress: BatchProgress) -> None:
    if progress.is_complete:
        print(f"[{progress.completed}/{progress.total}] done")
        return
    print(
        f"[{progress.completed}/{progress.total}] "
        f"{progress.current_entity_name} / {progress.current_document_type_name}"
    )


async def main() -> int:
    """Run one batch; return the process exit code."""
    if len(sys.argv) < 4:
        print(
            "Usage: python -m scripts.run_bulk_generation "
            "<actor_id> <entity_ids,...> <document_type_ids,...> [financial_year]",
            file=sys.stderr,
        )
        return 1
    actor = Actor(id=sys.argv[1], role=ActorRole.ADMIN)
    request = BatchRequest(
        entity_ids=_split_ids(sys.argv[2]),
        document_type_ids=_split_ids(sys.argv[3]),
        financial_year=sys.argv[4] if len(sys.argv) > 4 else None,
    )

    setup_logging()
    async with create_runtime() as runtime:
        try:
            summary = await runtime.bulk_generation.run_batch(
                actor, request, on_progress=_print_progress
            )
        except DocfillException as e:
            print(str(e), file=sys.stderr)
            return 1

    for report in summary.reports:
        label = f"{report.entity_name} / {report.document_type_name}"
        if report.success:
            print(f"OK   {label}: {report.file_path}")
        else:
            print(f"FAIL {label}: [{report.error_code}] {report.error}")
    print(
        f"Total {summary.total}, succeeded {summary.successful}, failed {summary.failed}"
    )
    return 0 if summary.success else 1


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
