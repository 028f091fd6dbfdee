# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for datetime utilities."""

from datetime import datetime, timedelta, timezone

from src.utils.datetime import ensure_utc, epoch_millis, is_after


class TestEnsureUtc:
    def test_none(self) -> None:
        assert ensure_utc(None) is None

    def test_naive_is_assumed_utc(self) -> None:
        result = ensure_utc(datetime(2025, 1, 10, 9, 30))

        assert result == datetime(2025, 1, 10, 9, 30, tzinfo=timezone.utc)

    def test_aware_is_converted(self) -> None:
        plus_two = timezone(timedelta(hours=2))

        result = ensure_utc(datetime(2025, 1, 10, 11, 30, tzinfo=plus_two))

        assert result == datetime(2025, 1, 10, 9, 30, tzinfo=timezone.utc)
        assert result.tzinfo == timezone.utc


class TestIsAfter:
    def test_strictly_after(self) -> None:
        deadline = datetime(2025, 1, 10, tzinfo=timezone.utc)

        assert is_after(deadline + timedelta(seconds=1), deadline)
        assert not is_after(deadline, deadline)
        assert not is_after(deadline - timedelta(seconds=1), deadline)

    def test_mixed_naive_and_aware(self) -> None:
        deadline = datetime(2025, 1, 10)

        assert is_after(datetime(2025, 1, 10, 0, 1, tzinfo=timezone.utc), deadline)


class TestEpochMillis:
    def test_epoch_millis(self) -> None:
        assert epoch_millis(datetime(1970, 1, 1, 0, 0, 1, tzinfo=timezone.utc)) == 1000
