"""
Gap-Fill Service

Synthesizes placeholder programs for uncovered time on catchup-capable channels
so a catchup guide always has something to offer across the lookback window.
"""
from collections.abc import Iterable, Mapping, Sequence
from datetime import datetime, timedelta
import logging

from tvcatalog.config import settings
from tvcatalog.schemas import FALLBACK_ID_PREFIX, Channel, EPGIndex, ProgramEntry
from tvcatalog.services.epg_resolver_service import channel_identity_keys, resolve_epg_key
from tvcatalog.utils.logging_helpers import log_gap_fill_summary
from tvcatalog.utils.timezone import floor_to_block, to_epoch_millis

logger = logging.getLogger(__name__)


def fill_gaps(
    index: Mapping[str, Sequence[ProgramEntry]],
    channels: Iterable[Channel],
    lookback_hours: int | None = None,
    now: datetime | None = None
) -> EPGIndex:
    """
    Add fallback programs to uncovered blocks of catchup-capable channels

    The input index is not modified.

    Args:
        index: EPG index with programs sorted by start
        channels: Playlist channels; only catchup-capable ones are filled
        lookback_hours: Window length behind now (default from settings)
        now: Local wall-clock reference time (default: current time)

    Returns:
        New EPG index with fallback programs merged and lists re-sorted
    """
    if lookback_hours is None:
        lookback_hours = settings.fallback_lookback_hours
    if now is None:
        now = datetime.now()

    result: EPGIndex = {key: list(programs) for key, programs in index.items()}
    channels_filled = 0
    programs_added = 0

    for channel in channels:
        if not channel.supports_catchup:
            continue

        # Unmatched channels store under a key the resolver will find again
        key = resolve_epg_key(channel, result) or (channel_identity_keys(channel) or [channel.id])[0]
        existing = result.get(key, [])
        fallback = generate_fallback_programs(existing, channel.id, lookback_hours, now)
        if not fallback:
            continue

        result[key] = sorted(existing + fallback, key=lambda p: p.start)
        channels_filled += 1
        programs_added += len(fallback)
        logger.debug(f"Added {len(fallback)} fallback programs to {key}")

    log_gap_fill_summary(logger, channels_filled, programs_added)

    return result


def generate_fallback_programs(
    existing: Sequence[ProgramEntry],
    channel_id: str,
    lookback_hours: int,
    now: datetime
) -> list[ProgramEntry]:
    """
    Build fallback programs for blocks that no existing program overlaps

    Args:
        existing: Programs already known for the channel
        channel_id: Channel id used to namespace fallback ids
        lookback_hours: Window length behind now
        now: Local wall-clock reference time

    Returns:
        Fallback programs in ascending order
    """
    block = timedelta(hours=settings.fallback_block_hours)
    block_start = floor_to_block(now - timedelta(hours=lookback_hours), settings.fallback_block_hours)
    fallback: list[ProgramEntry] = []

    while block_start < now:
        block_end = block_start + block

        if not any(_overlaps(program, block_start, block_end) for program in existing):
            fallback.append(ProgramEntry(
                id=f"{FALLBACK_ID_PREFIX}{channel_id}-{to_epoch_millis(block_start)}",
                title=settings.fallback_title,
                start=block_start,
                end=block_end
            ))

        block_start = block_end

    return fallback


def _overlaps(program: ProgramEntry, block_start: datetime, block_end: datetime) -> bool:
    """Half-open overlap test between a program and a block"""
    return (
        (program.start <= block_start < program.end)
        or (program.start < block_end <= program.end)
        or (program.start >= block_start and program.end <= block_end)
    )
