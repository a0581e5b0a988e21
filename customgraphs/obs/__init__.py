"""Observability helpers for customgraphs."""

from .events import Event, EventBus

__all__ = ["Event", "EventBus"]
