"""
Catalog exceptions

Only caller-contract violations are raised. Malformed playlist and EPG input
is absorbed by the parsers and never surfaces here.
"""


class CatalogError(Exception):
    """Base class for catalog errors"""
    pass


class CatchupNotSupportedError(CatalogError, ValueError):
    """Raised when a time-shift operation targets a channel without catchup"""

    def __init__(self, channel_id: str):
        self.channel_id = channel_id
        super().__init__(f"Channel '{channel_id}' does not support catchup")


class InvalidSegmentError(CatalogError, ValueError):
    """Raised when a segment would start at or after its end"""
    pass
