from datetime import datetime

import pytest

from tvcatalog.exceptions import InvalidSegmentError
from tvcatalog.utils.catchup_template import is_append_template, render_catchup_url
from tvcatalog.utils.timezone import to_epoch_seconds


START = datetime(2024, 1, 1, 6, 5, 9)
END = datetime(2024, 1, 1, 7, 0, 0)
NOW = datetime(2024, 1, 1, 8, 0, 0)
STREAM = "http://host/live/1.ts"


def _render(template: str, mode: str | None = "default") -> str:
    return render_catchup_url(template, STREAM, START, END, NOW, mode=mode)


def test_epoch_placeholders():
    url = _render("http://host/{utc}/{utcend}/{lutc}/{duration}/{offset}")
    assert url == (
        f"http://host/{to_epoch_seconds(START)}/{to_epoch_seconds(END)}/"
        f"{to_epoch_seconds(NOW)}/3291/6891"
    )


def test_dollar_placeholders():
    url = _render("http://host/?s=${start}&e=${end}&t=${timestamp}")
    assert url == (
        f"http://host/?s={to_epoch_seconds(START)}&e={to_epoch_seconds(END)}"
        f"&t={to_epoch_seconds(NOW)}"
    )


def test_java_date_patterns():
    url = _render("http://host/playseek=${(b)yyyyMMddHHmmss}-${(e)yyyyMMddHHmmss}")
    assert url == "http://host/playseek=20240101060509-20240101070000"


def test_java_date_patterns_without_dollar():
    assert _render("{(b)yyyy-MM-dd HH:mm}") == "2024-01-01 06:05"


def test_utc_format_placeholders():
    assert _render("/{utc:YmdHMS}/{utcend:Y-m-d}") == "/20240101060509/2024-01-01"


def test_unknown_placeholders_kept():
    assert _render("http://host/{channel}/{utc}").startswith("http://host/{channel}/")


def test_append_mode_with_query():
    url = render_catchup_url("?utc={utc}", "http://host/live?x=1", START, END, NOW, mode="append")
    assert url == f"http://host/live?x=1&utc={to_epoch_seconds(START)}"


def test_append_mode_without_query():
    url = _render("&utc={utc}", mode=None)
    assert url == f"{STREAM}?utc={to_epoch_seconds(START)}"


def test_append_mode_path_suffix():
    url = _render("/timeshift/{utc}", mode="append")
    assert url == f"{STREAM}/timeshift/{to_epoch_seconds(START)}"


def test_is_append_template():
    assert is_append_template("?a=1", None)
    assert is_append_template("/x", "APPEND")
    assert not is_append_template("http://h/x", "default")


def test_start_not_before_end_rejected():
    with pytest.raises(InvalidSegmentError):
        render_catchup_url("{utc}", STREAM, END, END, NOW)
    with pytest.raises(InvalidSegmentError):
        render_catchup_url("{utc}", STREAM, END, START, NOW)
