"""
Catalog Service

Assembles an immutable snapshot of playlist and guide for the calling
controller. Refreshing means building a new snapshot and swapping it in whole.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime

from tvcatalog.schemas import Channel, EPGIndex, PlaylistCatalog
from tvcatalog.services.epg_resolver_service import relevant_epg_keys
from tvcatalog.services.gap_fill_service import fill_gaps
from tvcatalog.services.playlist_parser_service import parse_playlist
from tvcatalog.services.xmltv_parser_service import parse_epg
from tvcatalog.utils.logging_helpers import log_section_end, log_section_start

logger = logging.getLogger(__name__)

GZIP_SUFFIX = ".gz"


@dataclass(frozen=True, slots=True)
class CatalogSnapshot:
    """Playlist catalog and gap-filled EPG built together."""
    catalog: PlaylistCatalog
    epg: EPGIndex = field(default_factory=dict)
    built_at: datetime | None = None


def normalize_epg_url(url: str | None) -> str | None:
    """Strip a trailing .gz so the plain guide document is fetched"""
    if not url:
        return None
    url = url.strip()
    if url.lower().endswith(GZIP_SUFFIX):
        return url[:-len(GZIP_SUFFIX)]
    return url


def select_initial_channel(
    catalog: PlaylistCatalog,
    last_channel_id: str | None = None
) -> Channel | None:
    """Remembered channel when it still exists, else the first channel"""
    if last_channel_id:
        channel = catalog.find_channel(last_channel_id)
        if channel is not None:
            return channel
        logger.debug(f"Last channel {last_channel_id} no longer in playlist")
    return catalog.channels[0] if catalog.channels else None


def build_snapshot(
    playlist_text: str,
    epg_text: str | bytes | None = None,
    now: datetime | None = None
) -> CatalogSnapshot:
    """
    Parse playlist and guide and fill guide gaps

    A missing or unparsable guide still yields fallback programs for
    catchup-capable channels.

    Args:
        playlist_text: M3U playlist content
        epg_text: XMLTV content, if the guide was fetched
        now: Local wall-clock reference time (default: current time)

    Returns:
        CatalogSnapshot
    """
    if now is None:
        now = datetime.now()

    log_section_start(logger, "Catalog snapshot")

    catalog = parse_playlist(playlist_text)

    if epg_text:
        epg = parse_epg(epg_text, relevant_keys=relevant_epg_keys(catalog.channels))
    else:
        logger.info("No EPG document, using fallback programs only")
        epg = {}

    epg = fill_gaps(epg, catalog.channels, now=now)

    log_section_end(logger, "Catalog snapshot")

    return CatalogSnapshot(catalog=catalog, epg=epg, built_at=now)
