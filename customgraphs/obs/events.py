"""Audit events for custom graph actions.

Every event is kept in memory for inspection and mirrored to the module
logger at the matching level.
"""
from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field
from typing import Iterable, List

from customgraphs.clock import utc_now

logger = logging.getLogger(__name__)

_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


@dataclass
class Event:
    """One audited action: who ran it and which graphs it touched."""

    ts: str
    level: str
    msg: str
    action: str | None = None
    actor: str | None = None
    target_ids: List[int] = field(default_factory=list)
    extras: dict | None = None

    def to_payload(self) -> dict:
        return asdict(self)


@dataclass
class EventBus:
    """Append-only in-memory audit log."""

    events: List[Event] = field(default_factory=list)

    def emit(
        self,
        *,
        level: str,
        msg: str,
        action: str | None = None,
        actor: str | None = None,
        target_ids: Iterable[int] | None = None,
        extras: dict | None = None,
    ) -> Event:
        """Record an event and log it; unknown levels raise ``ValueError``."""

        if level not in _LEVELS:
            raise ValueError(f"Unknown event level: {level}")
        event = Event(
            ts=utc_now(),
            level=level,
            msg=msg,
            action=action,
            actor=actor,
            target_ids=list(target_ids or []),
            extras=extras,
        )
        self.events.append(event)
        logger.log(_LEVELS[level], "%s (actor=%s, graphs=%s)", msg, actor, event.target_ids)
        return event

    def history(self) -> Iterable[Event]:
        return tuple(self.events)

    def for_actor(self, actor: str) -> Iterable[Event]:
        """Return the events recorded on behalf of ``actor``."""

        return tuple(event for event in self.events if event.actor == actor)

    def touching(self, graph_id: int) -> Iterable[Event]:
        """Return the events whose targets include ``graph_id``."""

        return tuple(event for event in self.events if graph_id in event.target_ids)
