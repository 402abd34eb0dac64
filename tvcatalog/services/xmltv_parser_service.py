from collections.abc import Collection
from typing import Optional
import logging
import re

from lxml import etree # type: ignore

from tvcatalog.schemas import EPGIndex, ProgramEntry
from tvcatalog.utils.logging_helpers import log_parse_summary, log_section_end, log_section_start
from tvcatalog.utils.timezone import DateFormatError, parse_xmltv_time, to_epoch_millis

logger = logging.getLogger(__name__)

_XML_DECLARATION_RE = re.compile(r'^\s*<\?xml[^>]*\?>')


def parse_epg(xml: str | bytes, relevant_keys: Optional[Collection[str]] = None) -> EPGIndex:
    """
    Parse XMLTV document into a per-channel program index

    Args:
        xml: XMLTV document text
        relevant_keys: Optional channel keys to keep; other channels are dropped eagerly

    Returns:
        Mapping of channel key to programs sorted ascending by start.
        Empty when the document cannot be parsed.
    """
    log_section_start(logger, "EPG parsing")

    root = _load_root(xml)
    if root is None:
        return {}

    index: EPGIndex = {}
    parsed = 0
    skipped = 0

    for programme in root.iter('programme'):
        channel_key = programme.get('channel')
        if relevant_keys is not None and channel_key not in relevant_keys:
            skipped += 1
            continue

        entry = _parse_single_program(programme)
        if entry is None:
            skipped += 1
            continue

        index.setdefault(channel_key, []).append(entry)
        parsed += 1

    # Source documents are not guaranteed to be ordered
    for programs in index.values():
        programs.sort(key=lambda p: p.start)

    log_parse_summary(logger, "epg", parsed, skipped, len(index))
    log_section_end(logger, "EPG parsing")

    return index


def _load_root(xml: str | bytes) -> Optional[etree._Element]:
    """Parse the document, recovering from malformed markup where lxml can"""
    if not xml:
        logger.warning("Empty EPG document")
        return None

    # Decoded text is already unicode; a declared encoding no longer applies
    # and lxml refuses str input carrying one
    data = _XML_DECLARATION_RE.sub('', xml, count=1) if isinstance(xml, str) else xml
    parser = etree.XMLParser(recover=True, huge_tree=True, resolve_entities=False)

    try:
        root = etree.fromstring(data, parser)
    except etree.XMLSyntaxError as e:
        logger.warning(f"EPG parsing error: {e}")
        return None

    if root is None:
        logger.warning("EPG document has no root element")
        return None

    logger.debug(f"  XML document loaded (root tag: {root.tag})")
    return root


def _parse_single_program(programme: etree._Element) -> Optional[ProgramEntry]:
    """Parse single programme element"""
    channel_key = programme.get('channel')
    start_str = programme.get('start')
    stop_str = programme.get('stop')

    if not channel_key or not start_str or not stop_str:
        logger.debug("Skipping programme with missing channel/start/stop attribute")
        return None

    try:
        start = parse_xmltv_time(start_str)
        end = parse_xmltv_time(stop_str)
    except DateFormatError as e:
        logger.debug(f"Skipping programme on {channel_key}: {e}")
        return None

    if end <= start:
        logger.debug(f"Skipping programme on {channel_key} with stop {stop_str} not after start {start_str}")
        return None

    return ProgramEntry(
        id=f"{channel_key}-{to_epoch_millis(start)}",
        title=_get_text(programme, 'title', default=""),
        start=start,
        end=end
    )


def _get_text(element: etree._Element, tag: str, default: Optional[str] = None) -> Optional[str]:
    """Safely extract text from XML element"""
    child = element.find(tag)
    if child is None or not child.text:
        return default
    return child.text.strip()
