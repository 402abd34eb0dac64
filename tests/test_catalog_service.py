from datetime import timedelta

import pytest

from tvcatalog.services.catalog_service import (
    CatalogSnapshot,
    build_snapshot,
    normalize_epg_url,
    select_initial_channel,
)
from tvcatalog.services.catchup_service import current_program_for_channel
from tvcatalog.services.epg_resolver_service import resolve_epg_key


PLAYLIST = '''#EXTM3U url-tvg="http://epg.example.com/e.xml.gz"
#EXTINF:-1 tvg-id="news1" group-title="Info" catchup="default" catchup-source="http://x/1?s={utc}&e={utcend}",News HD
http://x/1
#EXTINF:-1 tvg-name="Music TV" group-title="Fun",Music
http://x/2
'''

EPG = '''<?xml version="1.0" encoding="UTF-8"?>
<tv>
  <programme channel="news1" start="20240103110000 +0000" stop="20240103113000 +0000"><title>Headlines</title></programme>
  <programme channel="Music TV" start="20240103100000" stop="20240103130000"><title>Hits</title></programme>
  <programme channel="other" start="20240103100000" stop="20240103130000"><title>Ignored</title></programme>
</tv>
'''


def test_snapshot_with_epg(now):
    snapshot = build_snapshot(PLAYLIST, EPG, now=now)

    assert isinstance(snapshot, CatalogSnapshot)
    assert snapshot.built_at == now
    assert [c.id for c in snapshot.catalog.channels] == ["news1", "Music"]
    assert snapshot.catalog.epg_url == "http://epg.example.com/e.xml.gz"

    # Irrelevant channels are filtered out of the guide
    assert "other" not in snapshot.epg

    news = snapshot.catalog.channels[0]
    titles = {p.title for p in snapshot.epg["news1"]}
    assert "Headlines" in titles
    assert any(p.is_fallback for p in snapshot.epg["news1"])

    # Non-catchup channel keeps only real data
    music = snapshot.catalog.channels[1]
    assert resolve_epg_key(music, snapshot.epg) == "Music TV"
    assert all(not p.is_fallback for p in snapshot.epg["Music TV"])

    program = current_program_for_channel(news, snapshot.epg, now - timedelta(minutes=50), 5 * 60)
    assert program.title == "Headlines"


def test_snapshot_without_epg_has_fallback_programs(now):
    snapshot = build_snapshot(PLAYLIST, None, now=now)

    assert list(snapshot.epg) == ["news1"]
    program = current_program_for_channel(snapshot.catalog.channels[0], snapshot.epg, now - timedelta(hours=3))
    assert program is not None
    assert program.is_fallback


def test_snapshot_with_broken_epg_has_fallback_programs(now):
    snapshot = build_snapshot(PLAYLIST, "<tv><programme", now=now)
    assert all(p.is_fallback for p in snapshot.epg["news1"])


def test_snapshot_is_frozen(now):
    snapshot = build_snapshot(PLAYLIST, None, now=now)
    with pytest.raises(AttributeError):
        snapshot.epg = {}


@pytest.mark.parametrize(
    ("url", "expected"),
    [
        ("http://e/guide.xml.gz", "http://e/guide.xml"),
        ("http://e/guide.XML.GZ", "http://e/guide.XML"),
        ("http://e/guide.xml", "http://e/guide.xml"),
        ("  http://e/g.xml  ", "http://e/g.xml"),
        ("", None),
        (None, None),
    ],
)
def test_normalize_epg_url(url, expected):
    assert normalize_epg_url(url) == expected


def test_select_initial_channel(now):
    catalog = build_snapshot(PLAYLIST, None, now=now).catalog

    assert select_initial_channel(catalog).id == "news1"
    assert select_initial_channel(catalog, "Music").id == "Music"
    assert select_initial_channel(catalog, "gone").id == "news1"


def test_select_initial_channel_empty_catalog():
    catalog = build_snapshot("", None).catalog
    assert select_initial_channel(catalog, "anything") is None
