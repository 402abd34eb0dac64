from datetime import datetime

import pytest

from tvcatalog.schemas import Channel, PlaylistCatalog, ProgramEntry


NOW = datetime(2024, 1, 3, 12, 0, 0)


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def catchup_channel() -> Channel:
    return Channel(
        id="news1",
        name="News HD",
        group="Info",
        stream_url="http://x/1",
        tvg_id="news1",
        catchup_mode="default",
        catchup_source="http://x/1/catchup?start={utc}&end={utcend}",
    )


@pytest.fixture
def live_channel() -> Channel:
    return Channel(id="music", name="Music", stream_url="http://x/2")


@pytest.fixture
def catalog() -> PlaylistCatalog:
    channels = tuple(
        Channel(id=f"ch{n}", name=f"Channel {n}", stream_url=f"http://x/{n}")
        for n in range(1, 4)
    )
    return PlaylistCatalog(channels=channels, groups=("Default",))


def make_program(key: str, start: datetime, end: datetime, title: str = "Show") -> ProgramEntry:
    return ProgramEntry(id=f"{key}-{start.isoformat()}", title=title, start=start, end=end)
