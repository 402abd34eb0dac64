"""
Playlist Parser Service

Parses extended M3U playlists into an ordered channel catalog.
Playlists are untrusted third-party text: malformed lines are skipped, never fatal.
"""
import logging
import re
from typing import Optional

from tvcatalog.config import settings
from tvcatalog.schemas import Channel, PlaylistCatalog
from tvcatalog.utils.logging_helpers import log_parse_summary

logger = logging.getLogger(__name__)

HEADER_MARKER = "#EXTM3U"
METADATA_MARKER = "#EXTINF:"
COMMENT_MARKER = "#"

# Header attributes naming the EPG document, in lookup order
EPG_URL_ATTRIBUTES = ("url-tvg", "x-tvg-url", "tvg-url")

# Metadata attribute -> pending record field
CHANNEL_ATTRIBUTES = {
    "tvg-id": "tvg_id",
    "tvg-name": "tvg_name",
    "tvg-logo": "logo_url",
    "group-title": "group",
    "catchup": "catchup_mode",
    "catchup-source": "catchup_source",
}

_ATTRIBUTE_RE = re.compile(r'([A-Za-z0-9_-]+)\s*=\s*"([^"]*)"')
_LINE_BREAK_RE = re.compile(r'\r?\n')


def parse_playlist(text: str) -> PlaylistCatalog:
    """
    Parse M3U playlist text

    Args:
        text: Playlist content (\\n or \\r\\n line endings)

    Returns:
        PlaylistCatalog with channels in source order and sorted groups
    """
    if not text or not isinstance(text, str):
        logger.debug("Empty playlist text, returning empty catalog")
        return PlaylistCatalog()

    channels: list[Channel] = []
    groups: set[str] = set()
    epg_url: Optional[str] = None
    pending: Optional[dict[str, str]] = None
    skipped = 0

    for raw_line in _LINE_BREAK_RE.split(text):
        line = raw_line.strip()
        if not line:
            continue

        if line.startswith(HEADER_MARKER):
            if epg_url is None:
                epg_url = _parse_header(line)
            continue

        if line.startswith(METADATA_MARKER):
            if pending is not None:
                logger.debug(f"Discarding metadata without stream URL: {pending.get('title')}")
                skipped += 1
            pending = _parse_metadata(line[len(METADATA_MARKER):])
            if pending.get("group"):
                groups.add(pending["group"])
            continue

        if line.startswith(COMMENT_MARKER):
            continue

        if pending is None:
            logger.debug(f"Skipping stream URL without metadata: {line[:80]}")
            skipped += 1
            continue

        channels.append(_build_channel(pending, line, len(channels)))
        pending = None

    if pending is not None:
        logger.debug(f"Discarding trailing metadata without stream URL: {pending.get('title')}")
        skipped += 1

    log_parse_summary(logger, "playlist", len(channels), skipped, len(groups))

    return PlaylistCatalog(
        channels=tuple(channels),
        groups=tuple(sorted(groups)),
        epg_url=epg_url
    )


def parse_attributes(line: str) -> dict[str, str]:
    """
    Extract key="value" pairs anywhere in a line

    Keys are lowercased; the first occurrence of a key wins.
    """
    attributes: dict[str, str] = {}
    for key, value in _ATTRIBUTE_RE.findall(line):
        attributes.setdefault(key.lower(), value)
    return attributes


def _parse_header(line: str) -> Optional[str]:
    """Extract EPG URL from the #EXTM3U header"""
    attributes = parse_attributes(line)
    for key in EPG_URL_ATTRIBUTES:
        value = attributes.get(key, "").strip()
        if value:
            return value
    return None


def _parse_metadata(info: str) -> dict[str, str]:
    """Parse the part of an #EXTINF line after the marker"""
    pending: dict[str, str] = {}

    attributes = parse_attributes(info)
    for attribute, field in CHANNEL_ATTRIBUTES.items():
        value = attributes.get(attribute, "").strip()
        if value:
            pending[field] = value

    # Title follows the last comma; earlier commas may sit inside attributes
    if "," in info:
        title = info.rsplit(",", 1)[1].strip()
        if title:
            pending["title"] = title

    return pending


def _build_channel(pending: dict[str, str], url: str, index: int) -> Channel:
    """Complete a pending metadata record with its stream URL"""
    title = pending.get("title")
    tvg_id = pending.get("tvg_id")

    return Channel(
        id=tvg_id or title or f"channel-{index}",
        name=title or f"Channel {index + 1}",
        group=pending.get("group") or settings.default_group,
        stream_url=url,
        logo_url=pending.get("logo_url"),
        tvg_id=tvg_id,
        tvg_name=pending.get("tvg_name"),
        catchup_mode=pending.get("catchup_mode"),
        catchup_source=pending.get("catchup_source")
    )
