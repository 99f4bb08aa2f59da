"""
Playback preview - steps a cursor over the panel collection on a timer.

The state transitions are plain functions over ``PlaybackState`` so they can
be reasoned about without a clock. ``PlaybackController`` binds them to a
``PanelStore`` and owns the single interval timer that drives ticks.
"""
import logging
from dataclasses import dataclass, replace
from typing import Callable, Optional

from config.settings import PLAYBACK_INTERVAL
from scheduler import IntervalTimer
from .errors import EmptyCollectionError
from .panels import Panel, PanelStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlaybackState:
    current_index: int = 0
    is_playing: bool = False
    has_started: bool = False


# ==================== State transitions ====================

def toggle_play(state: PlaybackState, length: int) -> PlaybackState:
    """Play/pause toggle. Raises EmptyCollectionError if there is nothing to play."""
    if length == 0:
        raise EmptyCollectionError()
    if state.is_playing:
        return replace(state, is_playing=False)
    return replace(state, is_playing=True, has_started=True)


def advance(state: PlaybackState, length: int) -> PlaybackState:
    """One playback tick. Stops and rewinds after the last panel."""
    if not state.is_playing or length == 0:
        return state
    next_index = state.current_index + 1
    if next_index >= length:
        return replace(state, current_index=0, is_playing=False)
    return replace(state, current_index=next_index)


def reset_state() -> PlaybackState:
    return PlaybackState()


def select(state: PlaybackState, index: int, length: int) -> PlaybackState:
    """Jump to ``index``; out-of-range requests leave the state as is."""
    if not 0 <= index < length:
        return state
    return replace(state, current_index=index)


def clamp(state: PlaybackState, length: int) -> PlaybackState:
    """Keep the cursor valid after the collection changed size."""
    if length == 0:
        return replace(state, current_index=0, is_playing=False)
    if state.current_index >= length:
        return replace(state, current_index=length - 1)
    return state


def progress_fraction(state: PlaybackState, length: int) -> float:
    if length == 0:
        return 0.0
    value = (state.current_index + (1 if state.is_playing else 0)) / length
    return min(max(value, 0.0), 1.0)


# ==================== Controller ====================

class PlaybackController:
    """
    Drives the preview cursor over a PanelStore.

    At most one timer is live per controller. It exists only while playing
    with a non-empty collection and is cancelled on pause, at the end of a
    pass, on reset, when the collection empties and on close().
    """

    def __init__(
        self,
        store: PanelStore,
        interval: float = PLAYBACK_INTERVAL,
        timer_factory: Callable[[float, Callable[[], None]], IntervalTimer] = IntervalTimer
    ):
        self.store = store
        self.interval = interval
        self.state = PlaybackState()
        self._timer_factory = timer_factory
        self._timer: Optional[IntervalTimer] = None
        self._length = len(store)
        self._closed = False
        self._unsubscribe = store.subscribe(self._on_panels_changed)

    # ==================== Reads ====================

    @property
    def timer_active(self) -> bool:
        return self._timer is not None and self._timer.running

    @property
    def progress_fraction(self) -> float:
        return progress_fraction(self.state, len(self.store))

    @property
    def position_label(self) -> str:
        """Counter shown on the preview, e.g. '2 / 5'"""
        if len(self.store) == 0:
            return "0 / 0"
        return f"{self.state.current_index + 1} / {len(self.store)}"

    @property
    def current_panel(self) -> Optional[Panel]:
        return self.store.panel_at(self.state.current_index)

    # ==================== Commands ====================

    def play(self) -> None:
        """Toggle between playing and paused.

        Raises:
            EmptyCollectionError: if there are no panels (state unchanged)
        """
        previous = self.state
        self.state = toggle_play(self.state, len(self.store))
        try:
            self._sync_timer()
        except RuntimeError:
            self.state = previous
            raise
        logger.debug(f"Playback {'started' if self.state.is_playing else 'paused'} at panel {self.state.current_index}")

    def pause(self) -> None:
        if self.state.is_playing:
            self.state = replace(self.state, is_playing=False)
            self._sync_timer()

    def tick(self) -> None:
        """Advance one panel; called by the timer."""
        self.state = advance(self.state, len(self.store))
        self._sync_timer()
        if not self.state.is_playing:
            logger.debug("Playback finished")

    def reset(self) -> None:
        self.state = reset_state()
        self._sync_timer()

    def select_panel(self, index: int) -> bool:
        """Jump straight to a panel. Invalid indexes are ignored.

        Returns:
            True if the cursor moved to ``index``
        """
        if not 0 <= index < len(self.store):
            logger.debug(f"Ignoring selection of panel {index} (have {len(self.store)})")
            return False
        self.state = select(self.state, index, len(self.store))
        return True

    def close(self) -> None:
        """Cancel the timer and stop following the store."""
        if self._closed:
            return
        self._closed = True
        self._cancel_timer()
        self._unsubscribe()

    # ==================== Internals ====================

    def _on_panels_changed(self, panels: tuple) -> None:
        length = len(panels)
        self.state = clamp(self.state, length)
        if length != self._length:
            self._length = length
            # Restart the countdown for the new collection
            self._cancel_timer()
        self._sync_timer()

    def _sync_timer(self) -> None:
        should_run = self.state.is_playing and len(self.store) > 0 and not self._closed
        if self._timer is not None and not self._timer.running:
            logger.warning("Playback timer stopped unexpectedly")
            self._timer = None
        if should_run and self._timer is None:
            timer = self._timer_factory(self.interval, self.tick)
            timer.start()
            self._timer = timer
        elif not should_run:
            self._cancel_timer()

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
