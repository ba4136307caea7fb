"""Tests for ex_common.id_generator and ex_common.datetime_utils."""

from datetime import UTC, datetime

import pytest

from src.ex_common.datetime_utils import to_iso8601, utc_now
from src.ex_common.id_generator import CODE_LENGTH, SnowflakeIdGenerator, generate_code


class TestSnowflakeIdGenerator:
    def test_unique_ids(self) -> None:
        gen = SnowflakeIdGenerator(machine_id=1)
        ids = {gen.next_id() for _ in range(1000)}
        assert len(ids) == 1000

    def test_monotonically_increasing(self) -> None:
        gen = SnowflakeIdGenerator(machine_id=1)
        prev = int(gen.next_id())
        for _ in range(100):
            current = int(gen.next_id())
            assert current > prev
            prev = current

    def test_machine_id_out_of_range(self) -> None:
        with pytest.raises(ValueError):
            SnowflakeIdGenerator(machine_id=1024)


class TestGenerateCode:
    def test_fixed_length_digits(self) -> None:
        for _ in range(100):
            code = generate_code()
            assert len(code) == CODE_LENGTH
            assert code.isdigit()


class TestDatetimeUtils:
    def test_utc_now_is_aware(self) -> None:
        now = utc_now()
        assert now.tzinfo == UTC
        assert now.microsecond == 0

    def test_iso8601_aware(self) -> None:
        value = datetime(2026, 10, 16, 9, 30, tzinfo=UTC)
        assert to_iso8601(value) == "2026-10-16T09:30:00+00:00"

    def test_iso8601_naive_assumed_utc(self) -> None:
        assert to_iso8601(datetime(2026, 10, 16, 9, 30)) == "2026-10-16T09:30:00+00:00"
