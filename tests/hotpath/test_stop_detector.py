"""Tests for the stop detector."""

from __future__ import annotations

import pytest

from ride_tracker.hotpath.stop_detector import StopDetector, StopState


@pytest.fixture
def detector(mono_clock) -> StopDetector:
    return StopDetector(threshold_kmh=1.0, window_s=15.0, clock=mono_clock)


def test_starts_moving(detector):
    assert detector.state is StopState.MOVING
    assert detector.poll() is False


def test_fires_once_after_sustained_low_speed(detector, mono_clock):
    detector.observe(0.0)
    mono_clock.advance(5)
    detector.observe(0.5)
    mono_clock.advance(5)
    detector.observe(0.0)
    mono_clock.advance(4.9)
    assert detector.poll() is False

    mono_clock.advance(0.1)
    assert detector.poll() is True
    mono_clock.advance(1)
    assert detector.poll() is False
    assert detector.state is StopState.MOVING


def test_low_samples_do_not_restart_window(detector, mono_clock):
    detector.observe(0.0)
    mono_clock.advance(10)
    detector.observe(0.0)
    mono_clock.advance(5)
    assert detector.poll() is True


def test_high_speed_cancels_pending_stop(detector, mono_clock):
    detector.observe(0.0)
    mono_clock.advance(10)
    detector.observe(5.0)
    assert detector.armed is False
    mono_clock.advance(20)
    assert detector.poll() is False


def test_threshold_speed_counts_as_moving(detector):
    detector.observe(1.0)
    assert detector.armed is False


def test_cancel_prevents_firing(detector, mono_clock):
    detector.observe(0.0)
    assert detector.state is StopState.PENDING_STOP
    detector.cancel()
    mono_clock.advance(60)
    assert detector.poll() is False


def test_rearms_after_firing(detector, mono_clock):
    detector.observe(0.0)
    mono_clock.advance(15)
    assert detector.poll() is True

    mono_clock.advance(1)
    detector.observe(0.0)
    mono_clock.advance(14)
    assert detector.poll() is False
    mono_clock.advance(1)
    assert detector.poll() is True
