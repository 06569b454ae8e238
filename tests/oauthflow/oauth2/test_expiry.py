"""Tests for oauthflow.oauth2.expiry module."""

from datetime import UTC, datetime, timedelta

import pytest

from oauthflow.oauth2.expiry import (
    EXPIRY_MARGIN_SECONDS,
    compute_expires_at,
    is_fresh,
    parse_expires_in,
    remaining_lifetime,
    utc_now,
)

T = datetime(2026, 1, 5, 14, 30, tzinfo=UTC)


class TestParseExpiresIn:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("3600", 3600),
            (" 120 ", 120),
            ("+60", 60),
            ("-5", -5),
            ("0", 0),
            ("2147483647", 2147483647),
        ],
    )
    def test_valid_integers(self, value, expected):
        assert parse_expires_in(value) == expected

    @pytest.mark.parametrize(
        "value",
        [None, "", "   ", "3600.0", "1e3", "soon", "1_000", "2147483648", "12 34"],
    )
    def test_invalid_values(self, value):
        assert parse_expires_in(value) is None

    def test_non_ascii_digits_rejected(self):
        assert parse_expires_in("١٢") is None


class TestComputeExpiresAt:
    def test_subtracts_margin(self):
        """expires_in=100 at T expires at T+95s, never T+100s."""
        assert compute_expires_at(100, T) == T + timedelta(seconds=95)
        assert EXPIRY_MARGIN_SECONDS == 5

    def test_custom_margin(self):
        assert compute_expires_at(100, T, margin_seconds=0) == T + timedelta(seconds=100)

    def test_short_lifetime_already_expired(self):
        assert compute_expires_at(3, T) < T

    def test_defaults_to_current_time(self):
        before = utc_now()
        expires_at = compute_expires_at(100)
        after = utc_now()
        assert before + timedelta(seconds=95) <= expires_at <= after + timedelta(seconds=95)


class TestIsFresh:
    def test_future_expiry_is_fresh(self):
        assert is_fresh("tok", T + timedelta(seconds=1), T)

    def test_expiry_reached_is_stale(self):
        assert not is_fresh("tok", T, T)

    def test_unknown_expiry_is_stale(self):
        assert not is_fresh("tok", None, T)

    @pytest.mark.parametrize("token", [None, ""])
    def test_missing_token_is_stale(self, token):
        assert not is_fresh(token, T + timedelta(hours=1), T)


class TestRemainingLifetime:
    def test_positive_before_deadline(self):
        assert remaining_lifetime(T + timedelta(seconds=30), T) == timedelta(seconds=30)

    def test_negative_after_deadline(self):
        assert remaining_lifetime(T, T + timedelta(seconds=30)) == timedelta(seconds=-30)
