"""Tests for UTC time helpers"""

from datetime import datetime, timedelta, timezone

from procureflow.utils.time import ensure_utc, not_before, format_iso, parse_iso, utc_now


def test_ensure_utc_marks_naive_datetimes():
    naive = datetime(2024, 3, 1, 12, 0)
    assert ensure_utc(naive).tzinfo == timezone.utc
    assert ensure_utc(naive).hour == 12


def test_ensure_utc_converts_offsets():
    ist = timezone(timedelta(hours=5, minutes=30))
    assert ensure_utc(datetime(2024, 3, 1, 17, 30, tzinfo=ist)) == datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)


def test_not_before_never_goes_backwards():
    later = utc_now() + timedelta(minutes=5)
    assert not_before(later) == later
    assert not_before(None) <= utc_now()


def test_not_before_keeps_later_candidate():
    earlier = datetime(2024, 1, 1, tzinfo=timezone.utc)
    candidate = datetime(2024, 1, 2, tzinfo=timezone.utc)
    assert not_before(earlier, candidate) == candidate


def test_iso_round_trip():
    moment = datetime(2024, 3, 1, 12, 0, 30, tzinfo=timezone.utc)
    assert format_iso(moment) == "2024-03-01T12:00:30Z"
    assert parse_iso("2024-03-01T12:00:30Z") == moment
    assert parse_iso("2024-03-01T17:30:30+05:30") == moment
