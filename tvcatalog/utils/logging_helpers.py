"""
Structured logging helpers for consistent log formatting.

Provides utilities for structured, clean logging without excessive decorative separators.
"""
import logging


def log_section_start(logger: logging.Logger, section_name: str) -> None:
    """
    Log the start of a processing section.

    Args:
        logger: Logger instance
        section_name: Name of the section being started
    """
    logger.debug(f"Starting: {section_name}")


def log_section_end(logger: logging.Logger, section_name: str) -> None:
    """
    Log the end of a processing section.

    Args:
        logger: Logger instance
        section_name: Name of the section being ended
    """
    logger.debug(f"Completed: {section_name}")


def log_parse_summary(
    logger: logging.Logger,
    source: str,
    parsed: int,
    skipped: int,
    keys: int
) -> None:
    """
    Log parser summary.

    Args:
        logger: Logger instance
        source: Kind of document parsed ('playlist', 'epg')
        parsed: Number of records kept
        skipped: Number of malformed or filtered records
        keys: Number of distinct groups or channel keys
    """
    logger.info(
        f"Parsed {source}: {parsed} records, {skipped} skipped, {keys} keys"
    )


def log_gap_fill_summary(
    logger: logging.Logger,
    channels_filled: int,
    programs_added: int
) -> None:
    """
    Log gap-fill summary.

    Args:
        logger: Logger instance
        channels_filled: Number of catchup channels that received fallback programs
        programs_added: Total fallback programs added
    """
    logger.info(
        f"Gap fill summary - Channels: {channels_filled}, Fallback programs: {programs_added}"
    )
