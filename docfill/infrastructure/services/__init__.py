"""Side-effect services: activity notifier and output revealers."""

from docfill.infrastructure.services.activity_notifier import ActivityLogNotifier
from docfill.infrastructure.services.output_revealer import (
    FileManagerOutputRevealer,
    LoggingOutputRevealer,
)

__all__ = [
    "ActivityLogNotifier",
    "FileManagerOutputRevealer",
    "LoggingOutputRevealer",
]
