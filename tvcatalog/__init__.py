"""
tvcatalog

Turns M3U playlists and XMLTV guides into a time-indexed live-TV catalog.
"""
from tvcatalog.exceptions import CatalogError, CatchupNotSupportedError, InvalidSegmentError
from tvcatalog.schemas import CatchupSegment, Channel, EPGIndex, PlaylistCatalog, ProgramEntry
from tvcatalog.services import (
    CatalogSnapshot,
    build_catchup_segments,
    build_snapshot,
    current_program,
    current_program_for_channel,
    fill_gaps,
    navigate,
    normalize_epg_url,
    parse_epg,
    parse_playlist,
    playback_instant,
    relevant_epg_keys,
    resolve_epg_key,
    resolve_seek_target,
    select_initial_channel,
)

__version__ = "0.1.0"

__all__ = [
    'CatalogError',
    'CatchupNotSupportedError',
    'InvalidSegmentError',
    'CatchupSegment',
    'Channel',
    'EPGIndex',
    'PlaylistCatalog',
    'ProgramEntry',
    'CatalogSnapshot',
    'build_catchup_segments',
    'build_snapshot',
    'current_program',
    'current_program_for_channel',
    'fill_gaps',
    'navigate',
    'normalize_epg_url',
    'parse_epg',
    'parse_playlist',
    'playback_instant',
    'relevant_epg_keys',
    'resolve_epg_key',
    'resolve_seek_target',
    'select_initial_channel',
]
