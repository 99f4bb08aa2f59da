"""
Displayable handles for uploaded images.

A handle is a short ``blob:`` string that stands in for the image bytes while
a panel is alive, so previews can refer to the image without copying it.
"""
import logging
import uuid

logger = logging.getLogger(__name__)


class HandleRegistry:
    """Issues and revokes displayable handles."""

    def __init__(self, scheme: str = "blob:manga-panel"):
        self.scheme = scheme
        self._handles: dict[str, memoryview] = {}

    def acquire(self, data: bytes) -> str:
        """Create a new handle referencing ``data``."""
        handle = f"{self.scheme}/{uuid.uuid4()}"
        self._handles[handle] = memoryview(data)
        logger.debug(f"Acquired handle {handle} ({len(data)} bytes)")
        return handle

    def resolve(self, handle: str) -> bytes:
        """Get the bytes behind a live handle."""
        try:
            return self._handles[handle].tobytes()
        except KeyError:
            raise KeyError(f"Handle not live: {handle}") from None

    def release(self, handle: str) -> bool:
        """Revoke a handle. Unknown handles are ignored.

        Returns:
            True if a live handle was revoked
        """
        view = self._handles.pop(handle, None)
        if view is None:
            return False
        view.release()
        logger.debug(f"Released handle {handle}")
        return True

    def is_live(self, handle: str) -> bool:
        return handle in self._handles

    def __len__(self) -> int:
        return len(self._handles)
