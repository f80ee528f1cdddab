"""ActivityLog repository (append-only). Returns application DTOs."""

import json

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from docfill.application.dtos.activity import ActivityEvent, ActivityLogResult
from docfill.infrastructure.persistence.models.activity_log import ActivityLog
from docfill.infrastructure.persistence.repositories.base import BaseRepository
from docfill.shared.utils.datetime import ensure_utc


def _to_result(a: ActivityLog) -> ActivityLogResult:
    """Map ORM ActivityLog to ActivityLogResult."""
    return ActivityLogResult(
        id=a.id,
        actor_id=a.actor_id,
        action_type=a.action_type,
        entity_type=a.entity_type,
        entity_id=a.entity_id,
        metadata=json.loads(a.metadata_json) if a.metadata_json else None,
        created_at=ensure_utc(a.created_at),
    )


class ActivityLogRepository(BaseRepository[ActivityLog]):
    """Activity log entries. No update or delete methods."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, ActivityLog)

    async def create_entry(self, event: ActivityEvent) -> ActivityLogResult:
        row = await self.create(
            ActivityLog(
                actor_id=event.actor_id,
                action_type=event.action_type.value,
                entity_type=event.entity_type.value,
                entity_id=event.entity_id,
                metadata_json=(
                    json.dumps(event.metadata, ensure_ascii=False, default=str)
                    if event.metadata
                    else None
                ),
            )
        )
        return _to_result(row)

    async def list_recent(self, limit: int = 100) -> list[ActivityLogResult]:
        result = await self.db.execute(
            select(ActivityLog).order_by(ActivityLog.created_at.desc()).limit(limit)
        )
        return [_to_result(a) for a in result.scalars().all()]
