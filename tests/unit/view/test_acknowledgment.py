"""Unit tests for the error acknowledgment tracker."""

from __future__ import annotations

import pytest

from jobwatch.view.acknowledgment import ErrorAcknowledgmentTracker, ErrorState
from tests.unit.helpers import job


@pytest.mark.unit
def test_error_lifecycle_clean_errored_acknowledged_clean() -> None:
    """Tracker should walk clean -> errored -> acknowledged -> clean."""
    tracker = ErrorAcknowledgmentTracker()
    tracker.reconcile([job("g")])
    assert tracker.state_of("g") == ErrorState.CLEAN

    tracker.reconcile([job("g", err="disk full")])
    assert tracker.state_of("g") == ErrorState.ERRORED
    assert tracker.is_new_error("g") is True

    assert tracker.acknowledge("g") is True
    assert tracker.state_of("g") == ErrorState.ACKNOWLEDGED
    assert tracker.is_clickable("g") is True

    tracker.reconcile([job("g")])
    assert tracker.state_of("g") == ErrorState.CLEAN
    assert tracker.acknowledged == frozenset()


@pytest.mark.unit
def test_acknowledgment_survives_while_error_persists() -> None:
    """Acknowledged errors should stay acknowledged across polls."""
    tracker = ErrorAcknowledgmentTracker()
    tracker.reconcile([job("g", err="disk full")])
    tracker.acknowledge("g")

    tracker.reconcile([job("g", err="disk still full")])

    assert tracker.is_acknowledged("g") is True


@pytest.mark.unit
def test_recurring_error_after_clear_is_new_again() -> None:
    """An error that clears then returns should show as new."""
    tracker = ErrorAcknowledgmentTracker()
    tracker.reconcile([job("g", err="x")])
    tracker.acknowledge("g")
    tracker.reconcile([job("g")])

    tracker.reconcile([job("g", err="x")])

    assert tracker.is_new_error("g") is True


@pytest.mark.unit
def test_vanished_job_and_clean_job_are_never_acknowledged() -> None:
    """Acknowledged set should only hold jobs with a current error."""
    tracker = ErrorAcknowledgmentTracker()
    tracker.reconcile([job("g", err="x"), job("ok")])

    assert tracker.acknowledge("ok") is False
    tracker.acknowledge("g")
    tracker.reconcile([job("ok")])

    assert tracker.acknowledged == frozenset()
    assert tracker.is_clickable("g") is False
