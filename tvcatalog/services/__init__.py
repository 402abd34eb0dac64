"""
Services package for tvcatalog

This package contains the parsing, matching and playback-planning components.
"""
from tvcatalog.services.playlist_parser_service import parse_playlist
from tvcatalog.services.xmltv_parser_service import parse_epg
from tvcatalog.services.epg_resolver_service import resolve_epg_key, relevant_epg_keys
from tvcatalog.services.gap_fill_service import fill_gaps
from tvcatalog.services.catchup_service import (
    build_catchup_segments,
    current_program,
    current_program_for_channel,
    playback_instant,
    resolve_seek_target,
)
from tvcatalog.services.navigation_service import navigate
from tvcatalog.services.catalog_service import (
    CatalogSnapshot,
    build_snapshot,
    normalize_epg_url,
    select_initial_channel,
)

__all__ = [
    'parse_playlist',
    'parse_epg',
    'resolve_epg_key',
    'relevant_epg_keys',
    'fill_gaps',
    'build_catchup_segments',
    'current_program',
    'current_program_for_channel',
    'playback_instant',
    'resolve_seek_target',
    'navigate',
    'CatalogSnapshot',
    'build_snapshot',
    'normalize_epg_url',
    'select_initial_channel',
]
