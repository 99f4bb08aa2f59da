"""
Error types shared by the panel store, playback and gateway
"""
from typing import Optional


class MangaPanelError(Exception):
    """Base class for all Manga Panel Studio errors."""


class ValidationError(MangaPanelError):
    """Bad input shape, e.g. a reorder that is not a permutation."""


class EmptyCollectionError(MangaPanelError):
    """Operation needs at least one panel."""

    def __init__(self, message: str = "Please upload some panels first"):
        super().__init__(message)


class GatewayError(MangaPanelError):
    """Upstream provider failure during panel generation."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
