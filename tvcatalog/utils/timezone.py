"""
Date and Time utilities

This module handles XMLTV timestamp parsing, epoch conversions and block alignment.
All catalog timestamps are naive datetimes read as local wall-clock time.
"""
from datetime import datetime
import logging
import re

logger = logging.getLogger(__name__)

_XMLTV_TIME_RE = re.compile(r'^(\d{4})(\d{2})(\d{2})(\d{2})(\d{2})(\d{2})?')
_OFFSET_RE = re.compile(r'\s*[+-]\d{4}$')


class DateFormatError(ValueError):
    """Raised when date format is invalid"""
    pass


def parse_xmltv_time(time_str: str) -> datetime:
    """
    Parse XMLTV time as local wall-clock time

    The timezone offset is stripped, not applied.

    Args:
        time_str: XMLTV time like '20080715003000 -0600' or '200807150030'

    Returns:
        Naive datetime

    Raises:
        DateFormatError: If the string does not hold a valid timestamp
    """
    if not time_str:
        raise DateFormatError("Empty XMLTV time")

    clean = _OFFSET_RE.sub('', time_str.strip())
    match = _XMLTV_TIME_RE.match(clean)
    if not match:
        raise DateFormatError(f"Invalid XMLTV time format: '{time_str}'")

    year, month, day, hour, minute, second = match.groups()
    try:
        return datetime(
            int(year), int(month), int(day),
            int(hour), int(minute), int(second or 0)
        )
    except ValueError as e:
        raise DateFormatError(f"Invalid XMLTV time value: '{time_str}'") from e


def to_epoch_millis(dt: datetime) -> int:
    """Milliseconds since the epoch for a local wall-clock datetime"""
    return round(dt.timestamp() * 1000)


def to_epoch_seconds(dt: datetime) -> int:
    """Whole seconds since the epoch for a local wall-clock datetime"""
    return int(dt.timestamp())


def floor_to_block(dt: datetime, block_hours: int) -> datetime:
    """
    Round down to a block boundary counted in whole hours since the epoch

    Alignment is computed on the epoch, not the local day, so repeated calls
    produce the same block starts.

    Args:
        dt: Local wall-clock datetime
        block_hours: Block length in hours

    Returns:
        Local wall-clock datetime of the block start
    """
    hours_since_epoch = to_epoch_millis(dt) // (3600 * 1000)
    rounded_hours = (hours_since_epoch // block_hours) * block_hours
    return datetime.fromtimestamp(rounded_hours * 3600)
