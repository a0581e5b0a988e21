"""Public API surface for customgraphs.

:class:`CustomGraphsApp` is the adapter a presentation layer talks to.  It
wires the catalog, permission resolver and rendering backend together,
resolves the session's default user before calling the core services and
records every dispatched action on an :class:`EventBus`.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Optional

from customgraphs.access import GroupResolver, StaticGroupResolver
from customgraphs.catalog.filter import GraphCatalogFilter, VisibleGraphs
from customgraphs.catalog.model import VisibleGraphEntry, as_flag
from customgraphs.catalog.store import GraphCatalogStore
from customgraphs.config import GraphContext, Settings
from customgraphs.obs.events import EventBus
from customgraphs.periods import list_standard_periods
from customgraphs.render.backend import CombinedSeriesBackend, InMemorySeriesSource, SvgCombinedBackend
from customgraphs.render.renderer import GraphRenderer
from customgraphs.router import ActionRouter

logger = logging.getLogger(__name__)


@dataclass
class CustomGraphsApp:
    """Container wiring together the custom graph services."""

    store: GraphCatalogStore = field(default_factory=GraphCatalogStore)
    resolver: GroupResolver = field(default_factory=StaticGroupResolver)
    series_source: InMemorySeriesSource = field(default_factory=InMemorySeriesSource)
    backend: CombinedSeriesBackend | None = None
    settings: Settings = field(default_factory=Settings.from_env)
    context: GraphContext | None = None
    event_bus: EventBus = field(default_factory=EventBus)
    router: ActionRouter = field(default_factory=ActionRouter)
    batch_counts: bool = False

    def __post_init__(self) -> None:
        if self.backend is None:
            self.backend = SvgCombinedBackend(
                series_source=self.series_source, resolution=self.settings.resolution
            )
        if self.context is None:
            self.context = GraphContext(settings=self.settings)
        self.catalog_filter = GraphCatalogFilter(
            store=self.store, resolver=self.resolver, batch_counts=self.batch_counts
        )
        self.renderer = GraphRenderer(store=self.store, backend=self.backend)
        self._register_default_actions()

    def handle(self, payload: dict) -> dict:
        """Dispatch an API payload and return a canonical response."""

        action = payload.get("action")
        if not action:
            raise KeyError("payload must include 'action'")
        params = payload.get("params", {})
        session_user = payload.get("session_user")
        result = self.router.dispatch(action, params, session_user=session_user)
        event = self.event_bus.emit(
            level="info",
            msg=f"Executed action '{action}'",
            action=action,
            actor=result.get("actor"),
            target_ids=result.get("target_ids"),
        )
        return {
            "ok": True,
            "result": result.get("result", {}),
            "events": [event.to_payload()],
        }

    def _register_default_actions(self) -> None:
        self.router.register("list_graphs", self._handle_list_graphs)
        self.router.register("render_graph", self._handle_render_graph)
        self.router.register("list_periods", self._handle_list_periods)

    def _handle_list_graphs(self, params: dict, *, session_user: str | None) -> dict:
        user_id = self.resolve_user(params.get("user_id"), session_user)
        include_all_group = params.get("include_all_group")
        graphs = self.list_graphs(
            user_id,
            names_only=as_flag(params.get("names_only", False)),
            include_all_group=None if include_all_group is None else as_flag(include_all_group),
            privileges=params.get("privileges"),
        )
        return {
            "result": {"graphs": _serialize_graphs(graphs)},
            "actor": user_id,
            "target_ids": list(graphs),
        }

    def _handle_render_graph(self, params: dict, *, session_user: str | None) -> dict:
        graph_id = params.get("graph_id")
        if graph_id is None:
            raise KeyError("'graph_id' is required")
        output = self.render(
            int(graph_id),
            height=int(params.get("height", 200)),
            width=int(params.get("width", 400)),
            period=int(params.get("period", 3600)),
            stacked=as_flag(params.get("stacked", False)),
            start_date=float(params.get("start_date") or 0),
        )
        return {
            "result": {"graph_id": int(graph_id), "output": output},
            "actor": params.get("user_id") or session_user or self.settings.default_user,
            "target_ids": [int(graph_id)],
        }

    def _handle_list_periods(self, params: dict, *, session_user: str | None) -> dict:
        periods = list_standard_periods(self.context.translate)
        return {"result": {"periods": periods}, "actor": session_user}

    # ------------------------------------------------------------------
    # Programmatic helpers
    # ------------------------------------------------------------------

    def resolve_user(self, user_id: Optional[str], session_user: Optional[str] = None) -> str:
        """Apply the default-user fallback used by the presentation layer."""

        resolved = user_id or session_user or self.settings.default_user
        if not resolved:
            raise KeyError("No user supplied and no session user available")
        return resolved

    def list_graphs(
        self,
        user_id: str,
        *,
        names_only: bool = False,
        include_all_group: Optional[bool] = None,
        privileges: Optional[str] = None,
    ) -> VisibleGraphs:
        return self.catalog_filter.list_visible_graphs(
            user_id,
            names_only=names_only,
            include_all_group=include_all_group,
            privileges=privileges,
            context=self.context,
        )

    def render(
        self,
        graph_id: int,
        *,
        height: int,
        width: int,
        period: int,
        stacked: bool = False,
        start_date: float = 0,
    ) -> str:
        output = self.renderer.render_graph(
            graph_id,
            height,
            width,
            period,
            stacked,
            return_output=True,
            start_date=start_date,
            context=self.context,
        )
        logger.debug("Rendered graph %s (%d chars)", graph_id, len(output or ""))
        return output or ""


def _serialize_graphs(graphs: VisibleGraphs) -> dict[int, Any]:
    return {
        graph_id: value.to_payload() if isinstance(value, VisibleGraphEntry) else value
        for graph_id, value in graphs.items()
    }
