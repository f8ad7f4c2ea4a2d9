"""Tests for the collection lifecycle state machine."""

from datetime import datetime, timedelta, timezone

import pytest

from teahub.apps.core.domain.exceptions import InvalidLifecycleTransitionError, ValidationError
from teahub.apps.tea import lifecycle
from teahub.apps.tea.schemas import TEALifecycle

PHASES = ["created", "in-progress", "updated", "completed", "archived", "deprecated"]

START = datetime(2024, 1, 1, tzinfo=timezone.utc)
LATER = START + timedelta(days=3)


def make_lifecycle(phase: str, description: str | None = "initial", completed_on=None) -> TEALifecycle:
    return TEALifecycle(
        phase=phase,
        name=lifecycle.PHASE_DISPLAY_NAMES[phase],
        description=description,
        startedOn=START,
        completedOn=completed_on,
        lastUpdated=START,
    )


class TestTransitionTable:
    @pytest.mark.parametrize("requested", PHASES)
    def test_deprecated_is_terminal(self, requested):
        with pytest.raises(InvalidLifecycleTransitionError):
            lifecycle.transition(make_lifecycle("deprecated"), requested)

    def test_created_to_in_progress(self):
        result = lifecycle.transition(make_lifecycle("created"), "in-progress", now=LATER)

        assert result.phase == "in-progress"
        assert result.name == "In Progress"
        assert result.lastUpdated == LATER
        assert result.completedOn is None

    def test_archived_to_created_fails(self):
        with pytest.raises(InvalidLifecycleTransitionError) as exc_info:
            lifecycle.transition(make_lifecycle("archived"), "created")

        assert exc_info.value.current == "archived"
        assert exc_info.value.requested == "created"

    def test_invalid_transition_is_a_client_error(self):
        with pytest.raises(ValidationError) as exc_info:
            lifecycle.transition(make_lifecycle("completed"), "in-progress")

        assert exc_info.value.status_code == 400

    @pytest.mark.parametrize("current", PHASES)
    @pytest.mark.parametrize("requested", PHASES)
    def test_matches_allowed_transitions(self, current, requested):
        allowed = requested in lifecycle.ALLOWED_TRANSITIONS[current]
        assert lifecycle.is_valid_transition(current, requested) is allowed

        if allowed:
            assert lifecycle.transition(make_lifecycle(current), requested).phase == requested
        else:
            with pytest.raises(InvalidLifecycleTransitionError):
                lifecycle.transition(make_lifecycle(current), requested)

    def test_self_transitions_are_rejected(self):
        for phase in PHASES:
            assert not lifecycle.is_valid_transition(phase, phase)


class TestTransitionEffects:
    @pytest.mark.parametrize(
        "current,requested",
        [("created", "completed"), ("in-progress", "archived"), ("completed", "deprecated")],
    )
    def test_completing_phases_stamp_completed_on(self, current, requested):
        result = lifecycle.transition(make_lifecycle(current), requested, now=LATER)

        assert result.completedOn == LATER

    def test_non_completing_phase_keeps_completed_on(self):
        result = lifecycle.transition(make_lifecycle("in-progress"), "updated", now=LATER)

        assert result.completedOn is None

    def test_description_is_replaced_when_given(self):
        result = lifecycle.transition(make_lifecycle("created"), "in-progress", "Work started")

        assert result.description == "Work started"

    def test_description_is_retained_when_omitted(self):
        result = lifecycle.transition(make_lifecycle("created", description="keep me"), "in-progress")

        assert result.description == "keep me"

    def test_started_on_is_never_changed(self):
        result = lifecycle.transition(make_lifecycle("created"), "archived", now=LATER)

        assert result.startedOn == START

    def test_original_value_is_not_mutated(self):
        current = make_lifecycle("created")
        lifecycle.transition(current, "in-progress", now=LATER)

        assert current.phase == "created"
        assert current.lastUpdated == START


class TestInitialLifecycle:
    def test_initial_lifecycle(self):
        result = lifecycle.create_initial_lifecycle("release-123", now=START)

        assert result.phase == "created"
        assert result.name == "Collection Created"
        assert result.startedOn == START
        assert result.lastUpdated == START
        assert result.completedOn is None
        assert "release-123" in result.description


class TestArtifactsUpdated:
    @pytest.mark.parametrize("current", ["created", "in-progress", "updated", "completed", "archived"])
    def test_forces_updated_phase(self, current):
        result = lifecycle.artifacts_updated(make_lifecycle(current), now=LATER)

        assert result.phase == "updated"
        assert result.name == "Updated"
        assert result.description == lifecycle.ARTIFACTS_UPDATED_DESCRIPTION
        assert result.lastUpdated == LATER

    def test_rejected_for_deprecated(self):
        with pytest.raises(InvalidLifecycleTransitionError):
            lifecycle.artifacts_updated(make_lifecycle("deprecated"))

    def test_serializes_timestamps_with_z_suffix(self):
        data = lifecycle.create_initial_lifecycle("r", now=START).model_dump(mode="json", exclude_none=True)

        assert data["startedOn"] == "2024-01-01T00:00:00Z"
        assert data["lastUpdated"] == "2024-01-01T00:00:00Z"
        assert "completedOn" not in data
