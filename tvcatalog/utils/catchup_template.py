"""
Catchup template rendering

Catchup sources are deployment-supplied URL templates. The placeholder families
seen in M3U catchup-source attributes are substituted; everything else is kept
verbatim.
"""
from datetime import datetime
import re

from tvcatalog.exceptions import InvalidSegmentError
from tvcatalog.utils.timezone import to_epoch_seconds

APPEND_MODE = "append"

# Java-style date patterns used by ${(b)...} / ${(e)...}
_JAVA_PATTERN_TOKENS = [
    ("yyyy", "%Y"),
    ("MM", "%m"),
    ("dd", "%d"),
    ("HH", "%H"),
    ("mm", "%M"),
    ("ss", "%S"),
]

_BEGIN_END_RE = re.compile(r'\$?\{\((b|e)\)([^}]*)\}')
_UTC_FORMAT_RE = re.compile(r'\{(utc|utcend|start|end):([^}]*)\}')
_SIMPLE_RE = re.compile(r'\$?\{([a-z]+)\}')


def render_catchup_url(
    template: str,
    stream_url: str,
    start: datetime,
    end: datetime,
    now: datetime,
    mode: str | None = None
) -> str:
    """
    Render a catchup source template for one time window

    Args:
        template: catchup-source attribute value
        stream_url: Live stream URL of the channel
        start: Window start (local wall-clock)
        end: Window end (local wall-clock)
        now: Build time, for {lutc} style placeholders
        mode: catchup attribute value; 'append' appends to the stream URL

    Returns:
        Playable URL

    Raises:
        InvalidSegmentError: If start is not before end
    """
    if start >= end:
        raise InvalidSegmentError(f"Catchup window start {start} is not before end {end}")

    values = {
        "utc": to_epoch_seconds(start),
        "start": to_epoch_seconds(start),
        "utcend": to_epoch_seconds(end),
        "end": to_epoch_seconds(end),
        "lutc": to_epoch_seconds(now),
        "now": to_epoch_seconds(now),
        "timestamp": to_epoch_seconds(now),
        "duration": int((end - start).total_seconds()),
        "offset": int((now - start).total_seconds()),
    }

    def _begin_end(match: re.Match) -> str:
        moment = start if match.group(1) == "b" else end
        return moment.strftime(_java_to_strftime(match.group(2)))

    def _utc_format(match: re.Match) -> str:
        moment = start if match.group(1) in ("utc", "start") else end
        return moment.strftime(_letters_to_strftime(match.group(2)))

    def _simple(match: re.Match) -> str:
        name = match.group(1)
        if name not in values:
            return match.group(0)
        return str(values[name])

    rendered = _BEGIN_END_RE.sub(_begin_end, template)
    rendered = _UTC_FORMAT_RE.sub(_utc_format, rendered)
    rendered = _SIMPLE_RE.sub(_simple, rendered)

    if is_append_template(template, mode):
        return _append_to_stream(stream_url, rendered)
    return rendered


def is_append_template(template: str, mode: str | None) -> bool:
    return (mode or "").lower() == APPEND_MODE or template.startswith(("?", "&"))


def _append_to_stream(stream_url: str, suffix: str) -> str:
    if suffix.startswith(("?", "&")):
        separator = "&" if "?" in stream_url else "?"
        return f"{stream_url}{separator}{suffix[1:]}"
    return f"{stream_url}{suffix}"


def _java_to_strftime(pattern: str) -> str:
    for token, directive in _JAVA_PATTERN_TOKENS:
        pattern = pattern.replace(token, directive)
    return pattern


def _letters_to_strftime(pattern: str) -> str:
    """'YmdHMS' -> '%Y%m%d%H%M%S'; other characters are literal"""
    return "".join(f"%{ch}" if ch in "YmdHMS" else ch for ch in pattern)
