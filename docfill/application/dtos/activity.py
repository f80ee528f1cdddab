"""DTOs for the activity log (no dependency on ORM)."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from docfill.shared.enums import ActivityAction, ActivityEntityType


@dataclass(frozen=True)
class ActivityEvent:
    """One operator activity to record. Delivered fire-and-forget by the notifier."""

    actor_id: str
    action_type: ActivityAction
    entity_type: ActivityEntityType
    entity_id: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class ActivityLogResult:
    """Activity log read-model."""

    id: str
    actor_id: str
    action_type: str
    entity_type: str
    entity_id: str | None
    metadata: dict[str, Any] | None
    created_at: datetime
