"""Unit tests for ride entity state transitions (State Pattern)."""

from datetime import datetime, timezone

import pytest

from src.domain.entities import InvalidStateTransition, Ride, Wallet
from src.domain.enums import RIDE_STATUS_TIMESTAMPS, RideStatus


class TestRideStateMachine:
    def test_initial_status_is_requested(self):
        ride = Ride()
        assert ride.status == RideStatus.REQUESTED

    # ── Valid transitions ─────────────────────────────────────────

    def test_requested_to_accepted(self):
        ride = Ride(status=RideStatus.REQUESTED)
        ride.transition_to(RideStatus.ACCEPTED)
        assert ride.status == RideStatus.ACCEPTED

    def test_requested_to_cancelled(self):
        ride = Ride(status=RideStatus.REQUESTED)
        ride.transition_to(RideStatus.CANCELLED)
        assert ride.status == RideStatus.CANCELLED

    def test_accepted_to_in_progress(self):
        ride = Ride(status=RideStatus.ACCEPTED)
        ride.transition_to(RideStatus.IN_PROGRESS)
        assert ride.status == RideStatus.IN_PROGRESS

    def test_in_progress_to_completed(self):
        ride = Ride(status=RideStatus.IN_PROGRESS)
        ride.transition_to(RideStatus.COMPLETED)
        assert ride.status == RideStatus.COMPLETED

    def test_in_progress_can_still_be_cancelled(self):
        ride = Ride(status=RideStatus.IN_PROGRESS)
        ride.transition_to(RideStatus.CANCELLED)
        assert ride.status == RideStatus.CANCELLED

    # ── Invalid transitions ───────────────────────────────────────

    def test_requested_to_completed_fails(self):
        ride = Ride(status=RideStatus.REQUESTED)
        with pytest.raises(InvalidStateTransition):
            ride.transition_to(RideStatus.COMPLETED)

    def test_requested_to_in_progress_fails(self):
        ride = Ride(status=RideStatus.REQUESTED)
        with pytest.raises(InvalidStateTransition):
            ride.transition_to(RideStatus.IN_PROGRESS)

    def test_completed_to_anything_fails(self):
        ride = Ride(status=RideStatus.COMPLETED)
        with pytest.raises(InvalidStateTransition):
            ride.transition_to(RideStatus.CANCELLED)

    def test_cancelled_to_anything_fails(self):
        ride = Ride(status=RideStatus.CANCELLED)
        with pytest.raises(InvalidStateTransition):
            ride.transition_to(RideStatus.REQUESTED)

    def test_failed_transition_leaves_ride_untouched(self):
        ride = Ride(status=RideStatus.REQUESTED)
        with pytest.raises(InvalidStateTransition):
            ride.transition_to(RideStatus.COMPLETED)
        assert ride.status == RideStatus.REQUESTED
        assert ride.completed_at is None

    # ── Timestamps ────────────────────────────────────────────────

    def test_transition_stamps_its_own_column(self):
        at = datetime(2026, 10, 19, 8, 30, tzinfo=timezone.utc)
        ride = Ride(status=RideStatus.REQUESTED)
        column = ride.transition_to(RideStatus.ACCEPTED, at=at)
        assert column == "accepted_at"
        assert ride.accepted_at == at
        assert ride.started_at is None
        assert ride.cancelled_at is None

    def test_full_lifecycle_sets_one_timestamp_per_status(self):
        ride = Ride(status=RideStatus.REQUESTED)
        for status in (RideStatus.ACCEPTED, RideStatus.IN_PROGRESS, RideStatus.COMPLETED):
            ride.transition_to(status)
        for status in (RideStatus.ACCEPTED, RideStatus.IN_PROGRESS, RideStatus.COMPLETED):
            assert getattr(ride, RIDE_STATUS_TIMESTAMPS[status]) is not None
        assert ride.cancelled_at is None
        assert ride.is_terminal


class TestWalletIdentity:
    def test_consistent_wallet(self):
        assert Wallet(balance=400.0, total_earned=1000.0, total_withdrawn=600.0).is_consistent

    def test_drifted_wallet(self):
        # withdrawal approved without the balance being debited
        assert not Wallet(balance=1000.0, total_earned=1000.0, total_withdrawn=600.0).is_consistent

    def test_zero_balance_cannot_withdraw(self):
        assert not Wallet(balance=0.0).can_withdraw
