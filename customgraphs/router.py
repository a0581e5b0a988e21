"""Named actions exposed by the customgraphs presentation adapter."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, Protocol

logger = logging.getLogger(__name__)


class ActionHandler(Protocol):
    """Handle one action on behalf of the (optional) session user."""

    def __call__(self, params: dict, *, session_user: str | None) -> dict:  # pragma: no cover - interface
        ...


@dataclass
class ActionRouter:
    """Map action names to handlers; each name may be registered once."""

    registry: Dict[str, ActionHandler] = field(default_factory=dict)

    def register(self, action: str, handler: ActionHandler) -> None:
        if action in self.registry:
            raise ValueError(f"Action already registered: {action}")
        self.registry[action] = handler

    def actions(self) -> Iterable[str]:
        return tuple(self.registry)

    def dispatch(self, action: str, params: dict, *, session_user: str | None = None) -> dict:
        """Run the handler for ``action``; unknown actions raise ``KeyError``."""

        handler = self.registry.get(action)
        if handler is None:
            known = ", ".join(sorted(self.registry)) or "none"
            raise KeyError(f"Unknown action: {action} (known: {known})")
        logger.debug("Dispatching %s for session user %s", action, session_user)
        return handler(params, session_user=session_user)
