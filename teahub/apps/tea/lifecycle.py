"""
Collection lifecycle state machine.

A collection always carries exactly one ``TEALifecycle`` value. Phases move
only along ``ALLOWED_TRANSITIONS``; ``deprecated`` is terminal.
"""

from __future__ import annotations

from datetime import datetime

from django.utils import timezone

from teahub.apps.core.domain.exceptions import InvalidLifecycleTransitionError

from .schemas import LifecyclePhase, TEALifecycle

PHASE_DISPLAY_NAMES: dict[str, str] = {
    "created": "Collection Created",
    "in-progress": "In Progress",
    "updated": "Updated",
    "completed": "Completed",
    "archived": "Archived",
    "deprecated": "Deprecated",
}

ALLOWED_TRANSITIONS: dict[str, frozenset[str]] = {
    "created": frozenset({"in-progress", "completed", "archived"}),
    "in-progress": frozenset({"updated", "completed", "archived"}),
    "updated": frozenset({"in-progress", "completed", "archived"}),
    "completed": frozenset({"archived", "deprecated"}),
    "archived": frozenset({"deprecated"}),
    "deprecated": frozenset(),
}

# Entering one of these phases stamps completedOn
COMPLETING_PHASES = frozenset({"completed", "archived", "deprecated"})

ARTIFACTS_UPDATED_DESCRIPTION = "Collection artifacts have been updated"


def is_valid_transition(current: str, requested: str) -> bool:
    return requested in ALLOWED_TRANSITIONS.get(current, frozenset())


def transition(
    current: TEALifecycle,
    requested: LifecyclePhase,
    description: str | None = None,
    *,
    now: datetime | None = None,
) -> TEALifecycle:
    """
    Move a lifecycle to ``requested``.

    Args:
        current: The collection's current lifecycle
        requested: Target phase
        description: New description; the previous one is kept when empty
        now: Timestamp to record, defaults to the current time

    Returns:
        A new lifecycle value; ``current`` is left untouched

    Raises:
        InvalidLifecycleTransitionError: If the pair is not in the transition table
    """
    if not is_valid_transition(current.phase, requested):
        raise InvalidLifecycleTransitionError(current.phase, requested)

    now = now or timezone.now()
    return current.model_copy(
        update={
            "phase": requested,
            "name": PHASE_DISPLAY_NAMES[requested],
            "description": description or current.description,
            "lastUpdated": now,
            "completedOn": now if requested in COMPLETING_PHASES else current.completedOn,
        }
    )


def create_initial_lifecycle(source_release_id: str, *, now: datetime | None = None) -> TEALifecycle:
    now = now or timezone.now()
    return TEALifecycle(
        phase="created",
        name=PHASE_DISPLAY_NAMES["created"],
        description=f"Collection created for release {source_release_id}",
        startedOn=now,
        lastUpdated=now,
    )


def artifacts_updated(current: TEALifecycle, *, now: datetime | None = None) -> TEALifecycle:
    """
    Force a lifecycle into ``updated`` after an artifact-only edit.

    Artifact edits advance the lifecycle even though ``created``, ``completed``
    and ``archived`` have no table entry for ``updated``; only a terminal
    ``deprecated`` collection refuses them.
    """
    if not ALLOWED_TRANSITIONS[current.phase]:
        raise InvalidLifecycleTransitionError(current.phase, "updated")

    now = now or timezone.now()
    return current.model_copy(
        update={
            "phase": "updated",
            "name": PHASE_DISPLAY_NAMES["updated"],
            "description": ARTIFACTS_UPDATED_DESCRIPTION,
            "lastUpdated": now,
        }
    )
