"""
Manga Session
Ties the panel store, the playback preview and the generation gateway together
"""
import logging
from typing import Iterable, Optional

from core.errors import EmptyCollectionError, ValidationError
from core.gateway import MangaPanelGateway
from core.panels import GenerationResult, ImageResource, Panel, PanelStore
from core.playback import PlaybackController

logger = logging.getLogger(__name__)


class MangaSession:
    """
    One editing session:
    1. Upload panels
    2. Reorder / remove them in the editor
    3. Preview them in order
    4. Generate a manga page for any panel
    """

    def __init__(
        self,
        gateway=None,
        store: Optional[PanelStore] = None,
        playback: Optional[PlaybackController] = None
    ):
        self.gateway = gateway or MangaPanelGateway()
        self.store = store or PanelStore()
        self.playback = playback or PlaybackController(self.store)
        self._in_flight: set[str] = set()

    @property
    def panels(self) -> tuple[Panel, ...]:
        return self.store.panels

    def is_generating(self, panel_id: str) -> bool:
        return panel_id in self._in_flight

    # ==================== Editor ====================

    def upload(self, resources: Iterable[ImageResource]) -> list[Panel]:
        return self.store.append(resources)

    def reorder(self, panel_ids: Iterable[str]) -> None:
        self.store.reorder(panel_ids)

    def remove(self, panel_id: str) -> bool:
        return self.store.remove(panel_id)

    # ==================== Preview ====================

    def play(self) -> None:
        self.playback.play()

    def reset(self) -> None:
        self.playback.reset()

    def select_panel(self, index: int) -> bool:
        return self.playback.select_panel(index)

    # ==================== Generation ====================

    async def generate(self, panel_id: str, scene: str) -> Optional[GenerationResult]:
        """Generate a manga page for one panel and attach it.

        Returns:
            The result, or None if the panel was removed while generating

        Raises:
            ValidationError: unknown panel, blank scene, or a request for this
                panel is already running
            GatewayError: the gateway failed (nothing is changed)
        """
        scene = (scene or "").strip()
        if not scene:
            raise ValidationError("Describe the scene before generating")

        panel = self.store.get(panel_id)
        if panel is None:
            raise ValidationError(f"No panel with id {panel_id}")
        if panel_id in self._in_flight:
            raise ValidationError("A manga panel is already being generated for this image")

        self._in_flight.add(panel_id)
        try:
            result = await self.gateway.generate(
                panel.resource.data, scene, mime_type=panel.resource.mime_type or None
            )
        finally:
            self._in_flight.discard(panel_id)

        if not self.store.set_generated_reference(panel_id, result):
            logger.info(f"Panel {panel_id} was removed during generation, dropping result")
            return None
        return result

    async def generate_selected(self, scene: str) -> Optional[GenerationResult]:
        """Generate for the panel under the preview cursor."""
        panel = self.playback.current_panel
        if panel is None:
            raise EmptyCollectionError("Upload an image first to generate manga panels")
        return await self.generate(panel.id, scene)

    def close(self) -> None:
        """Stop playback and release every panel."""
        self.playback.close()
        self.store.clear()
