"""Fan-out of controller events to subscribed observers."""

import logging
from typing import Protocol

from aicc.domain.events.event import ControllerEvent

logger = logging.getLogger(__name__)


class ControllerObserver(Protocol):
    def on_event(self, event: ControllerEvent) -> None: ...


class ControllerEventEmitter:
    """Delivers every event to each observer in subscription order.

    A failing observer is logged and skipped; it never interrupts the
    pipeline step that emitted the event.
    """

    def __init__(self) -> None:
        self._observers: list[ControllerObserver] = []

    def subscribe(self, observer: ControllerObserver) -> None:
        self._observers.append(observer)

    def emit(self, event: ControllerEvent) -> None:
        for observer in self._observers:
            try:
                observer.on_event(event)
            except Exception as e:
                logger.warning(f"Observer {observer!r} failed on {event.event_type.value}: {e}")
