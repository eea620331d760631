from datetime import datetime

import pytest

from channelsnoop.formatting import (
    TIMESTAMP_FORMAT,
    format_duration,
    format_number,
    format_size,
    format_timestamp,
)


def test_duration_with_hours():
    assert format_duration(3_723_000) == "01:02:03"


def test_duration_without_hours_has_two_fields():
    result = format_duration(59 * 60 * 1000)
    assert result.count(":") == 1
    assert result.startswith("59:")


def test_duration_truncates_partial_seconds():
    assert format_duration(61_999) == format_duration(61_000)


def test_duration_one_hour_switches_format():
    assert format_duration(3_600_000).count(":") == 2
    assert format_duration(3_599_999).count(":") == 1


def test_number_wan():
    assert format_number(12345) == "1.2万"


def test_number_small_is_integer_text():
    assert format_number(9999) == "9999"


def test_number_yi_suffix():
    assert format_number(100_000_000).endswith("亿")
    assert format_number(99_999_999).endswith("万")


def test_size_one_mebibyte():
    assert format_size(1024 * 1024) == "1.00 MB"


def test_size_suffix():
    assert format_size(0).endswith(" MB")


@pytest.mark.parametrize("ts", [1_700_000_000, 1_600_000_123])
def test_timestamp_round_trip(ts):
    text = format_timestamp(ts)
    assert datetime.strptime(text, TIMESTAMP_FORMAT).timestamp() == ts


def test_timestamp_drops_fraction():
    assert format_timestamp(1_700_000_000.9) == format_timestamp(1_700_000_000)