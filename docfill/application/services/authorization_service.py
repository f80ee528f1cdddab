"""Authorization: every mutation requires the elevated (ADMIN) role."""

from __future__ import annotations

from docfill.domain.exceptions import UnauthorizedException
from docfill.domain.value_objects import Actor


def require_elevated(actor: Actor, action: str) -> None:
    """Raise UnauthorizedException unless actor holds the elevated privilege.

    Args:
        actor: Operator performing the call.
        action: Human-readable action for the message (e.g. 'create clients').
    """
    if not actor.is_elevated:
        raise UnauthorizedException(action=action)


def can_manage_document(actor: Actor, generated_by: str) -> bool:
    """Return True if actor may delete a generated document (owner or elevated)."""
    return actor.is_elevated or actor.id == generated_by
