"""Pointer event bus and drag gestures for the floor plan editor."""
from collections import defaultdict
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional
import logging

logger = logging.getLogger(__name__)

POINTER_MOVE = "pointermove"
POINTER_UP = "pointerup"


@dataclass
class PointerEvent:
    client_x: float
    client_y: float


Listener = Callable[[PointerEvent], None]


class PointerEvents:
    """Document-level listener registry.

    Drag gestures attach global move/up listeners here for the duration of a
    single gesture and must detach them on release.
    """

    def __init__(self):
        self._listeners: Dict[str, List[Listener]] = defaultdict(list)

    def add_listener(self, event_type: str, listener: Listener) -> None:
        self._listeners[event_type].append(listener)

    def remove_listener(self, event_type: str, listener: Listener) -> None:
        try:
            self._listeners[event_type].remove(listener)
        except ValueError:
            pass

    def listener_count(self, event_type: Optional[str] = None) -> int:
        if event_type is not None:
            return len(self._listeners.get(event_type, []))
        return sum(len(listeners) for listeners in self._listeners.values())

    def dispatch(self, event_type: str, client_x: float, client_y: float) -> None:
        event = PointerEvent(client_x, client_y)
        # Copy: an up handler removes itself while we iterate
        for listener in list(self._listeners.get(event_type, [])):
            listener(event)


class DragGesture:
    """One press-drag-release on a floor item.

    Positions are applied as ``initial item position + pointer delta``. The
    gesture owns its two listeners; ``release`` is idempotent and always
    detaches both.
    """

    def __init__(
        self,
        events: PointerEvents,
        item_id: str,
        start_x: float,
        start_y: float,
        initial_x: float,
        initial_y: float,
        on_move: Callable[[str, float, float], None],
        on_end: Callable[["DragGesture"], None],
    ):
        self.events = events
        self.item_id = item_id
        self.start_x = start_x
        self.start_y = start_y
        self.initial_x = initial_x
        self.initial_y = initial_y
        self._on_move = on_move
        self._on_end = on_end
        self.active = False

    def attach(self) -> "DragGesture":
        self.events.add_listener(POINTER_MOVE, self._handle_move)
        self.events.add_listener(POINTER_UP, self._handle_up)
        self.active = True
        return self

    def _handle_move(self, event: PointerEvent) -> None:
        if not self.active:
            return
        dx = event.client_x - self.start_x
        dy = event.client_y - self.start_y
        self._on_move(self.item_id, self.initial_x + dx, self.initial_y + dy)

    def _handle_up(self, event: PointerEvent) -> None:
        self.release()

    def move(self, client_x: float, client_y: float) -> None:
        self.events.dispatch(POINTER_MOVE, client_x, client_y)

    def release(self) -> None:
        if not self.active:
            return
        self.active = False
        self.events.remove_listener(POINTER_MOVE, self._handle_move)
        self.events.remove_listener(POINTER_UP, self._handle_up)
        self._on_end(self)

    def __enter__(self) -> "DragGesture":
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        if exc_type is not None:
            logger.warning("Drag of %s aborted: %s", self.item_id, exc)
        self.release()
        return False
