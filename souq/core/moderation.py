"""
Moderation workflow for user-facing catalogue content.

Products and projects start ``pending`` and are moved to ``approved`` or
``rejected`` by a moderator. Only ``approved`` records are public.
"""

from __future__ import annotations

import enum


class ModerationStatus(str, enum.Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class ArticleStatus(str, enum.Enum):
    DRAFT = "draft"
    PUBLISHED = "published"


_TRANSITIONS: dict[ModerationStatus, frozenset[ModerationStatus]] = {
    ModerationStatus.PENDING: frozenset({ModerationStatus.APPROVED, ModerationStatus.REJECTED}),
    ModerationStatus.APPROVED: frozenset({ModerationStatus.REJECTED}),
    ModerationStatus.REJECTED: frozenset({ModerationStatus.APPROVED}),
}


class InvalidStatusTransition(Exception):
    """Raised when a moderator asks for a transition the workflow forbids."""

    def __init__(self, current: str, target: str) -> None:
        self.current = current
        self.target = target
        super().__init__(f"Cannot change status from '{current}' to '{target}'")


def can_transition(current: str, target: str) -> bool:
    try:
        return ModerationStatus(target) in _TRANSITIONS[ModerationStatus(current)]
    except ValueError:
        return False


def transition(current: str, target: str) -> ModerationStatus:
    """Validate ``current -> target`` and return the new status."""
    if not can_transition(current, target):
        raise InvalidStatusTransition(current, target)
    return ModerationStatus(target)


def status_after_edit(current: str, *, edited_by_moderator: bool) -> ModerationStatus:
    """Status a record takes after its content is edited.

    Moderator edits keep the current status. Owner edits to reviewed
    content send it back to the review queue.
    """
    status = ModerationStatus(current)
    if edited_by_moderator:
        return status
    return ModerationStatus.PENDING


def is_public(status: str) -> bool:
    return status == ModerationStatus.APPROVED.value
