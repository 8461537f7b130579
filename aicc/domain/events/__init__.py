"""Controller event system for observer pattern notifications."""

from aicc.domain.events.event_types import ControllerEventType
from aicc.domain.events.event import ControllerEvent
from aicc.domain.events.emitter import ControllerEventEmitter, ControllerObserver
from aicc.domain.events.stderr_observer import StderrEventObserver

__all__ = [
    "ControllerEventType",
    "ControllerEvent",
    "ControllerObserver",
    "ControllerEventEmitter",
    "StderrEventObserver",
]
