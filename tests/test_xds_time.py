from datetime import date, datetime, timedelta, timezone

import pytest

from res_bridge.core.xds_time import format_xds_timestamp, parse_xds_timestamp


def test_round_trip_has_no_timezone_drift():
    original = datetime(2017, 3, 15, 14, 30, 5, tzinfo=timezone.utc)

    encoded = format_xds_timestamp(original)

    assert encoded == "20170315143005"
    assert parse_xds_timestamp(encoded) == original


def test_round_trip_from_offset_datetime_keeps_the_instant():
    original = datetime(2017, 3, 15, 23, 0, 0, tzinfo=timezone(timedelta(hours=-3)))

    assert parse_xds_timestamp(format_xds_timestamp(original)) == original


def test_naive_datetime_is_taken_as_utc():
    assert format_xds_timestamp(datetime(2020, 1, 2, 3, 4, 5)) == "20200102030405"


def test_date_renders_at_midnight():
    assert format_xds_timestamp(date(2020, 1, 2)) == "20200102000000"


def test_microseconds_are_dropped():
    assert format_xds_timestamp(datetime(2020, 1, 2, 3, 4, 5, 999999)) == "20200102030405"


@pytest.mark.parametrize(
    "text, expected",
    [
        ("2017", datetime(2017, 1, 1, tzinfo=timezone.utc)),
        ("201703", datetime(2017, 3, 1, tzinfo=timezone.utc)),
        ("20170315", datetime(2017, 3, 15, tzinfo=timezone.utc)),
        ("2017031514", datetime(2017, 3, 15, 14, tzinfo=timezone.utc)),
        ("201703151430", datetime(2017, 3, 15, 14, 30, tzinfo=timezone.utc)),
    ],
)
def test_parse_accepts_reduced_precision(text, expected):
    assert parse_xds_timestamp(text) == expected


@pytest.mark.parametrize("text", ["", "17", "2017-03-15", "20171", "201713", "abcdabcd"])
def test_parse_rejects_malformed_values(text):
    with pytest.raises(ValueError):
        parse_xds_timestamp(text)
