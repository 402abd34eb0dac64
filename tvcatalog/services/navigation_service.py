"""
Channel navigation over catalog order, wrapping around at both ends.
"""
from typing import Literal, Union
import logging

from tvcatalog.schemas import Channel, PlaylistCatalog

logger = logging.getLogger(__name__)

NavigationTarget = Union[Literal["prev", "next"], int]


def navigate(
    catalog: PlaylistCatalog,
    current: Channel | None,
    target: NavigationTarget
) -> Channel | None:
    """
    Move from the current channel

    Args:
        catalog: Playlist catalog
        current: Channel being watched
        target: 'prev', 'next' or a 1-based position

    Returns:
        Selected channel; current when the move is a no-op
    """
    channels = catalog.channels
    if not channels:
        return current

    if isinstance(target, bool):
        raise ValueError(f"Invalid navigation target: {target!r}")

    if isinstance(target, int):
        if 1 <= target <= len(channels):
            return channels[target - 1]
        logger.debug(f"Channel position {target} out of range 1..{len(channels)}")
        return current

    if target not in ("prev", "next"):
        raise ValueError(f"Invalid navigation target: {target!r}")

    if current is None:
        return current

    position = _position_of(channels, current)
    if target == "prev":
        return channels[position - 1] if position > 0 else channels[-1]
    return channels[position + 1] if position < len(channels) - 1 else channels[0]


def _position_of(channels: tuple[Channel, ...], current: Channel) -> int:
    """Index by identity, then equality; -1 when absent"""
    for position, channel in enumerate(channels):
        if channel is current:
            return position
    for position, channel in enumerate(channels):
        if channel == current:
            return position
    return -1
