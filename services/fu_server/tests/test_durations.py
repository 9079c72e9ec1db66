import datetime as dt

import pytest

from fu_server.durations import format_duration, parse_duration


@pytest.mark.parametrize("raw, expected", [
    ("1h", dt.timedelta(hours=1)),
    ("90s", dt.timedelta(seconds=90)),
    ("1h30m", dt.timedelta(hours=1, minutes=30)),
    ("1.5h", dt.timedelta(minutes=90)),
    ("500ms", dt.timedelta(milliseconds=500)),
    ("-2m", dt.timedelta(minutes=-2)),
    ("0", dt.timedelta(0)),
    (" 10m ", dt.timedelta(minutes=10)),
])
def test_parse_duration(raw, expected):
    assert parse_duration(raw) == expected


@pytest.mark.parametrize("raw", ["", "abc", "10", "1x", "h", "1h 30m", "-"])
def test_parse_duration_rejects_garbage(raw):
    with pytest.raises(ValueError):
        parse_duration(raw)


def test_format_duration():
    assert format_duration(dt.timedelta(hours=1)) == "1h0m0s"
    assert format_duration(dt.timedelta(minutes=5, seconds=3)) == "5m3s"
    assert format_duration(dt.timedelta(seconds=42)) == "42s"
    assert format_duration(dt.timedelta(0)) == "0s"


@pytest.mark.parametrize("d", [
    dt.timedelta(hours=26, minutes=1, seconds=2),
    dt.timedelta(milliseconds=500),
    dt.timedelta(seconds=1, milliseconds=500),
    dt.timedelta(microseconds=1),
    dt.timedelta(microseconds=1234),
    dt.timedelta(minutes=3, microseconds=5),
    dt.timedelta(hours=-2, milliseconds=-250),
])
def test_format_is_parseable(d):
    assert parse_duration(format_duration(d)) == d


def test_format_sub_second():
    assert format_duration(dt.timedelta(milliseconds=500)) == "500ms"
    assert format_duration(dt.timedelta(milliseconds=1500)) == "1.5s"
    assert format_duration(dt.timedelta(microseconds=1234)) == "1.234ms"
    assert format_duration(dt.timedelta(microseconds=7)) == "7us"


@pytest.mark.parametrize("raw", ["100000000h", "9" * 400 + "s", "3000000h"])
def test_parse_duration_out_of_range(raw):
    with pytest.raises(ValueError):
        parse_duration(raw)
