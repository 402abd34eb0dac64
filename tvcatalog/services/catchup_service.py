"""
Catchup Service

Builds playable segment lists for time-shifted sessions and resolves what is
airing at a point of a session. A session's position is always
stream start + elapsed playback, never the wall clock, so shifted sessions
resolve against their own timeline.
"""
from bisect import bisect_right
from collections.abc import Mapping, Sequence
from datetime import datetime, timedelta
import logging
import math

from tvcatalog.config import settings
from tvcatalog.exceptions import CatchupNotSupportedError, InvalidSegmentError
from tvcatalog.schemas import CatchupSegment, Channel, ProgramEntry
from tvcatalog.services.epg_resolver_service import resolve_epg_key
from tvcatalog.utils.catchup_template import render_catchup_url

logger = logging.getLogger(__name__)


def build_catchup_segments(
    channel: Channel,
    requested_start: datetime,
    tail_offset_seconds: int | None = None,
    now: datetime | None = None
) -> list[CatchupSegment]:
    """
    Build ordered segments for watching a channel from requested_start

    Requests within the live threshold of now collapse to a single live segment.
    Otherwise the window from requested_start to now - tail offset is split into
    time-shifted segments, followed by an open-ended live tail.

    Args:
        channel: Catchup-capable channel
        requested_start: Local wall-clock start of the session
        tail_offset_seconds: Margin kept behind the live edge (default from settings)
        now: Local wall-clock reference time (default: current time)

    Returns:
        Segments in playback order

    Raises:
        CatchupNotSupportedError: If the channel has no catchup mode/template
        InvalidSegmentError: If requested_start is not before the end boundary
    """
    if not channel.supports_catchup:
        raise CatchupNotSupportedError(channel.id)
    if tail_offset_seconds is None:
        tail_offset_seconds = settings.catchup_tail_offset_seconds
    if tail_offset_seconds < 0:
        raise InvalidSegmentError(f"Tail offset must be >= 0, got {tail_offset_seconds}")
    if now is None:
        now = datetime.now()

    live_segment = CatchupSegment(url=channel.stream_url, duration_seconds=0)

    if requested_start > now - timedelta(seconds=settings.live_threshold_seconds):
        logger.debug(f"Request for {channel.id} at {requested_start} is live")
        return [live_segment]

    end_boundary = now - timedelta(seconds=tail_offset_seconds)
    if requested_start >= end_boundary:
        raise InvalidSegmentError(
            f"Catchup start {requested_start} is not before end boundary {end_boundary} "
            f"(tail offset {tail_offset_seconds}s)"
        )

    segments: list[CatchupSegment] = []
    chunk = timedelta(seconds=settings.catchup_segment_max_seconds)
    segment_start = requested_start

    while segment_start < end_boundary:
        segment_end = min(segment_start + chunk, end_boundary)
        url = render_catchup_url(
            channel.catchup_source,
            channel.stream_url,
            segment_start,
            segment_end,
            now,
            mode=channel.catchup_mode
        )
        # Only the last chunk can be fractional; it rounds up to a whole second
        duration = math.ceil((segment_end - segment_start).total_seconds())
        segments.append(CatchupSegment(url=url, duration_seconds=duration))
        segment_start = segment_end

    segments.append(live_segment)

    logger.info(
        f"Built {len(segments) - 1} catchup segments for {channel.id} "
        f"from {requested_start.isoformat()} to {end_boundary.isoformat()}"
    )
    return segments


def resolve_seek_target(
    current_stream_start: datetime,
    requested_time: datetime,
    now: datetime | None = None
) -> datetime:
    """
    Clamp a seek that lands near the live edge

    Args:
        current_stream_start: Start of the running session
        requested_time: Seek target
        now: Local wall-clock reference time (default: current time)

    Returns:
        Effective start for the new session
    """
    if now is None:
        now = datetime.now()

    live_edge = now - timedelta(seconds=settings.seek_live_edge_seconds)
    if requested_time > live_edge:
        if current_stream_start < requested_time:
            return now
        return live_edge
    return requested_time


def playback_instant(stream_start: datetime, elapsed_seconds: float) -> datetime:
    """Absolute position of a session"""
    return stream_start + timedelta(seconds=elapsed_seconds)


def current_program(
    epg_key: str | None,
    index: Mapping[str, Sequence[ProgramEntry]],
    instant: datetime
) -> ProgramEntry | None:
    """
    Find the program airing at an instant

    Args:
        epg_key: Resolved EPG key (None yields None)
        index: EPG index with programs sorted by start
        instant: Local wall-clock instant

    Returns:
        First program in start order with start <= instant < end, or None
    """
    if epg_key is None:
        return None

    programs = index.get(epg_key)
    if not programs:
        return None

    # Entries starting after the instant cannot cover it
    cutoff = bisect_right(programs, instant, key=lambda p: p.start)
    for program in programs[:cutoff]:
        if program.end > instant:
            return program
    return None


def current_program_for_channel(
    channel: Channel,
    index: Mapping[str, Sequence[ProgramEntry]],
    stream_start: datetime,
    elapsed_seconds: float = 0
) -> ProgramEntry | None:
    """Resolve the channel's EPG key and the program at its playback position"""
    epg_key = resolve_epg_key(channel, index)
    return current_program(epg_key, index, playback_instant(stream_start, elapsed_seconds))
