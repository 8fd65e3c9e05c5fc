"""Tests for the UTC date helpers."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from auditgate.engines.audit_filter.dates import (
    is_expired,
    parse_utc_date,
    to_utc,
    will_expire_soon,
)

NOW = datetime(2026, 1, 15, 12, 0, tzinfo=timezone.utc)


def _iso(moment: datetime) -> str:
    return moment.isoformat()


# ── parse_utc_date ───────────────────────────────────────────────────────


class TestParseUtcDate:
    def test_bare_date_is_midnight_utc(self):
        assert parse_utc_date("2026-03-01") == datetime(2026, 3, 1, tzinfo=timezone.utc)

    def test_z_suffix(self):
        parsed = parse_utc_date("2026-03-01T10:30:00Z")
        assert parsed == datetime(2026, 3, 1, 10, 30, tzinfo=timezone.utc)

    def test_fractional_seconds(self):
        parsed = parse_utc_date("2026-03-01T00:00:00.000Z")
        assert parsed == datetime(2026, 3, 1, tzinfo=timezone.utc)

    def test_positive_offset_converted_to_utc(self):
        parsed = parse_utc_date("2026-03-01T02:00:00+02:00")
        assert parsed == datetime(2026, 3, 1, 0, 0, tzinfo=timezone.utc)
        assert parsed.tzinfo == timezone.utc

    def test_negative_offset_crosses_midnight(self):
        parsed = parse_utc_date("2026-02-28T22:00:00-05:00")
        assert parsed == datetime(2026, 3, 1, 3, 0, tzinfo=timezone.utc)

    def test_naive_datetime_read_as_utc(self):
        parsed = parse_utc_date("2026-03-01T08:00:00")
        assert parsed == datetime(2026, 3, 1, 8, 0, tzinfo=timezone.utc)

    @pytest.mark.parametrize("value", [None, "", "not-a-date", "2026-13-01", "2026-02-30", "tomorrow"])
    def test_invalid_returns_none(self, value):
        assert parse_utc_date(value) is None

    @pytest.mark.parametrize(
        "value",
        ["9999-12-31T23:59:59-01:00", "0001-01-01T00:00:00+01:00"],
    )
    def test_out_of_range_after_utc_conversion_returns_none(self, value):
        assert parse_utc_date(value) is None

    def test_non_string_returns_none(self):
        assert parse_utc_date(20260301) is None  # type: ignore[arg-type]


class TestToUtc:
    def test_naive(self):
        assert to_utc(datetime(2026, 1, 1)).tzinfo == timezone.utc

    def test_aware_other_zone(self):
        tz = timezone(timedelta(hours=9))
        assert to_utc(datetime(2026, 1, 1, 9, tzinfo=tz)) == datetime(2026, 1, 1, tzinfo=timezone.utc)


# ── is_expired ───────────────────────────────────────────────────────────


class TestIsExpired:
    def test_future_not_expired(self):
        assert is_expired(_iso(NOW + timedelta(days=1)), NOW) is False

    def test_past_expired(self):
        assert is_expired(_iso(NOW - timedelta(days=1)), NOW) is True

    def test_boundary_instant_is_expired(self):
        assert is_expired(_iso(NOW), NOW) is True

    def test_one_second_before_boundary_not_expired(self):
        assert is_expired(_iso(NOW + timedelta(seconds=1)), NOW) is False

    def test_missing_is_expired(self):
        assert is_expired(None, NOW) is True
        assert is_expired("", NOW) is True

    def test_unparsable_is_expired(self):
        assert is_expired("someday", NOW) is True

    def test_out_of_range_is_expired(self):
        assert is_expired("0001-01-01T00:00:00+01:00", NOW) is True
        assert is_expired("9999-12-31T23:59:59-01:00", NOW) is True

    def test_bare_date_expires_at_midnight_utc(self):
        midnight = datetime(2026, 1, 16, tzinfo=timezone.utc)
        assert is_expired("2026-01-16", midnight - timedelta(microseconds=1)) is False
        assert is_expired("2026-01-16", midnight) is True

    def test_independent_of_now_timezone(self):
        tokyo = timezone(timedelta(hours=9))
        now_tokyo = NOW.astimezone(tokyo)
        expires = _iso(NOW + timedelta(hours=1))
        assert is_expired(expires, now_tokyo) is is_expired(expires, NOW)

    def test_naive_now_treated_as_utc(self):
        naive_now = NOW.replace(tzinfo=None)
        assert is_expired(_iso(NOW + timedelta(minutes=5)), naive_now) is False


# ── will_expire_soon ─────────────────────────────────────────────────────


class TestWillExpireSoon:
    def test_29_days_included(self):
        assert will_expire_soon(_iso(NOW + timedelta(days=29)), NOW, 30) is True

    def test_exactly_30_days_included(self):
        assert will_expire_soon(_iso(NOW + timedelta(days=30)), NOW, 30) is True

    def test_31_days_excluded(self):
        assert will_expire_soon(_iso(NOW + timedelta(days=31)), NOW, 30) is False

    def test_just_past_threshold_excluded(self):
        assert will_expire_soon(_iso(NOW + timedelta(days=30, seconds=1)), NOW, 30) is False

    def test_default_threshold_is_30_days(self):
        assert will_expire_soon(_iso(NOW + timedelta(days=30)), NOW) is True
        assert will_expire_soon(_iso(NOW + timedelta(days=31)), NOW) is False

    def test_already_expired_is_false(self):
        assert will_expire_soon(_iso(NOW - timedelta(days=1)), NOW, 30) is False

    def test_boundary_instant_is_false(self):
        assert will_expire_soon(_iso(NOW), NOW, 30) is False

    def test_missing_or_invalid_is_false(self):
        assert will_expire_soon(None, NOW, 30) is False
        assert will_expire_soon("garbage", NOW, 30) is False

    def test_zero_threshold(self):
        assert will_expire_soon(_iso(NOW + timedelta(hours=1)), NOW, 0) is False
