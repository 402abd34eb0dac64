"""
Channel-EPG Resolver

Playlist channels and EPG channels are named from different vocabularies.
Keys are matched most-specific first: tvg-id, then tvg-name, then the display title.
"""
from collections.abc import Iterable, Mapping
import logging

from tvcatalog.schemas import Channel

logger = logging.getLogger(__name__)


def channel_identity_keys(channel: Channel) -> list[str]:
    """Candidate EPG keys for a channel in priority order"""
    return [key for key in (channel.tvg_id, channel.tvg_name, channel.name) if key]


def resolve_epg_key(channel: Channel, index: Mapping[str, object]) -> str | None:
    """
    Find the EPG key for a channel

    Args:
        channel: Playlist channel
        index: EPG index (only its keys are consulted)

    Returns:
        First matching key, or None when the guide has no data for the channel
    """
    for key in channel_identity_keys(channel):
        if key in index:
            return key

    logger.debug(f"No EPG key for channel {channel.id}")
    return None


def relevant_epg_keys(channels: Iterable[Channel]) -> set[str]:
    """Every key the resolver could match, for eager EPG filtering"""
    keys: set[str] = set()
    for channel in channels:
        keys.update(channel_identity_keys(channel))
    return keys
