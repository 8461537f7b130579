"""Stderr event observer for CLI integration."""

import click

from aicc.domain.events.event import ControllerEvent


class StderrEventObserver:
    """Emits events as structured lines to stderr."""

    def on_event(self, event: ControllerEvent) -> None:
        parts = [f"[EVENT] {event.event_type.value}"]
        if event.provider_id:
            parts.append(f"provider={event.provider_id}")
        if event.model:
            parts.append(f"model={event.model}")
        if event.exit_status is not None:
            parts.append(f"exit={event.exit_status}")
        if event.reason:
            parts.append(f"reason={event.reason!r}")
        click.echo(" ".join(parts), err=True)
