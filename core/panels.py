"""
Panel store - the ordered collection of uploaded manga panels.

The collection order is the page order and the preview order. Panels are
keyed by id only; positions are never used to reorder or remove.
"""
import logging
import uuid
from dataclasses import dataclass, replace
from typing import Callable, Iterable, Iterator, Optional

from .errors import ValidationError
from .handles import HandleRegistry

logger = logging.getLogger(__name__)

Listener = Callable[[tuple], None]


@dataclass(frozen=True)
class ImageResource:
    """Raw bytes of one uploaded image"""
    data: bytes
    mime_type: str = ""
    name: str = ""


@dataclass(frozen=True)
class GenerationResult:
    """What the gateway returns for a panel"""
    manga_panel_url: str
    description: str = ""


@dataclass(frozen=True)
class Panel:
    id: str
    resource: ImageResource
    handle: str
    generated_reference: Optional[GenerationResult] = None

    @property
    def url(self) -> str:
        """Displayable handle used to render the panel"""
        return self.handle


class PanelStore:
    """Owns the panel collection and each panel's displayable handle."""

    def __init__(self, handles: Optional[HandleRegistry] = None):
        self.handles = handles or HandleRegistry()
        self._panels: tuple[Panel, ...] = ()
        self._listeners: list[Listener] = []

    # ==================== Reads ====================

    @property
    def panels(self) -> tuple[Panel, ...]:
        return self._panels

    @property
    def ids(self) -> list[str]:
        return [p.id for p in self._panels]

    def __len__(self) -> int:
        return len(self._panels)

    def __iter__(self) -> Iterator[Panel]:
        return iter(self._panels)

    def get(self, panel_id: str) -> Optional[Panel]:
        for panel in self._panels:
            if panel.id == panel_id:
                return panel
        return None

    def index_of(self, panel_id: str) -> int:
        """Position of a panel, or -1 if absent"""
        for i, panel in enumerate(self._panels):
            if panel.id == panel_id:
                return i
        return -1

    def panel_at(self, index: int) -> Optional[Panel]:
        if 0 <= index < len(self._panels):
            return self._panels[index]
        return None

    # ==================== Change notification ====================

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call ``listener(panels)`` after every committed change.

        Returns:
            A callable that removes the listener
        """
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _commit(self, panels: tuple[Panel, ...]) -> None:
        self._panels = panels
        for listener in list(self._listeners):
            listener(panels)

    # ==================== Mutations ====================

    def append(self, resources: Iterable[ImageResource]) -> list[Panel]:
        """Create one panel per resource and add them to the end, in order.

        Raises:
            ValidationError: if any resource has no data (nothing is added)
        """
        resources = list(resources)
        for i, resource in enumerate(resources):
            if not resource.data:
                raise ValidationError(f"Upload {i + 1} ({resource.name or 'unnamed'}) has no image data")

        new_panels = [
            Panel(
                id=str(uuid.uuid4()),
                resource=resource,
                handle=self.handles.acquire(resource.data),
            )
            for resource in resources
        ]
        if not new_panels:
            return []

        self._commit(self._panels + tuple(new_panels))
        logger.info(f"Added {len(new_panels)} panel(s), collection now {len(self._panels)}")
        return new_panels

    def reorder(self, new_order: Iterable[str]) -> None:
        """Replace the collection order with ``new_order`` (a list of all ids).

        Raises:
            ValidationError: if ``new_order`` is not a permutation of the current ids
        """
        new_order = list(new_order)
        current = {p.id: p for p in self._panels}

        if len(new_order) != len(current):
            raise ValidationError(
                f"Reorder expects {len(current)} ids, got {len(new_order)}"
            )
        if len(set(new_order)) != len(new_order):
            raise ValidationError("Reorder contains duplicate ids")
        unknown = [pid for pid in new_order if pid not in current]
        if unknown:
            raise ValidationError(f"Reorder contains unknown ids: {', '.join(unknown)}")

        self._commit(tuple(current[pid] for pid in new_order))
        logger.debug(f"Reordered {len(new_order)} panels")

    def remove(self, panel_id: str) -> bool:
        """Release a panel's handle and drop it. Absent ids are ignored.

        Returns:
            True if a panel was removed
        """
        panel = self.get(panel_id)
        if panel is None:
            return False

        self.handles.release(panel.handle)
        self._commit(tuple(p for p in self._panels if p.id != panel_id))
        logger.info(f"Removed panel {panel_id}, collection now {len(self._panels)}")
        return True

    def set_generated_reference(self, panel_id: str, reference: GenerationResult) -> bool:
        """Attach a generation result to a panel. Absent ids are ignored."""
        if self.get(panel_id) is None:
            return False

        self._commit(tuple(
            replace(p, generated_reference=reference) if p.id == panel_id else p
            for p in self._panels
        ))
        return True

    def clear(self) -> None:
        """Remove every panel, releasing each handle."""
        for panel_id in self.ids:
            self.remove(panel_id)
