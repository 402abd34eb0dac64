from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, model_validator


FALLBACK_ID_PREFIX = "fallback-"


class Channel(BaseModel):
    """Playlist channel"""
    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1, description="Stable channel identity (tvg-id, title or positional)")
    name: str = Field(..., description="Display title")
    group: str = Field("Default", description="Display group")
    stream_url: str = Field(..., description="Live stream URL")
    logo_url: str | None = Field(None, description="URL to channel logo")
    tvg_id: str | None = Field(None, description="Source channel identifier used for EPG matching")
    tvg_name: str | None = Field(None, description="Source channel display name used for EPG matching")
    catchup_mode: str | None = Field(None, description="Catchup mode declared by the playlist")
    catchup_source: str | None = Field(None, description="URL template for time-shifted playback")

    @property
    def supports_catchup(self) -> bool:
        return bool(self.catchup_mode and self.catchup_source)


class PlaylistCatalog(BaseModel):
    """Parsed playlist: channels in source order plus sorted groups"""
    model_config = ConfigDict(frozen=True)

    channels: tuple[Channel, ...] = ()
    groups: tuple[str, ...] = ()
    epg_url: str | None = Field(None, description="EPG source URL declared by the playlist header")

    def find_channel(self, channel_id: str) -> Channel | None:
        """Return the first channel with this id; earlier channels are canonical."""
        for channel in self.channels:
            if channel.id == channel_id:
                return channel
        return None

    def channels_in_group(self, group: str) -> list[Channel]:
        return [channel for channel in self.channels if channel.group == group]


class ProgramEntry(BaseModel):
    """Single guide entry on one channel"""
    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Unique per channel and start time")
    title: str = Field("", description="Program title")
    start: datetime = Field(..., description="Local wall-clock start")
    end: datetime = Field(..., description="Local wall-clock end (exclusive)")

    @model_validator(mode='after')
    def validate_time_range(self):
        """Validate that start is before end"""
        if self.end <= self.start:
            raise ValueError(f"end ({self.end}) must be after start ({self.start})")
        return self

    @property
    def is_fallback(self) -> bool:
        return self.id.startswith(FALLBACK_ID_PREFIX)

    def covers(self, instant: datetime) -> bool:
        return self.start <= instant < self.end


class CatchupSegment(BaseModel):
    """Playable segment of a catchup or live session"""
    model_config = ConfigDict(frozen=True)

    url: str
    duration_seconds: int = Field(0, ge=0, description="0 means open-ended live tail")

    @property
    def is_live(self) -> bool:
        return self.duration_seconds == 0


# EPG-native channel key -> programs sorted ascending by start
EPGIndex = dict[str, list[ProgramEntry]]
