"""Record types describing custom graphs and their weighted sources."""
from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Mapping

ALL_GROUP = 0
"""Group id of the "All" pseudo-group."""

_TRUE_STRINGS = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class GraphDefinition:
    """A saved, named combination of weighted series owned by a user.

    ``description``, ``period``, ``stacked``, ``width`` and ``height`` are the
    default display settings stored alongside the graph; the filtering and
    rendering logic never reads them.
    """

    id: int
    name: str
    owner_user_id: str
    group_id: int = ALL_GROUP
    private: bool = False
    description: str = ""
    period: int = 0
    stacked: bool = False
    width: int = 0
    height: int = 0

    def is_owned_by(self, user_id: str) -> bool:
        return self.owner_user_id == user_id

    def to_payload(self) -> dict[str, Any]:
        """Return a plain dictionary representation."""

        return asdict(self)


@dataclass(frozen=True)
class GraphSource:
    """One ``(module, weight)`` pair belonging to a graph definition."""

    id: int
    graph_id: int
    module_id: int
    weight: float = 1.0

    def to_payload(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class VisibleGraphEntry:
    """A visible graph annotated with the number of sources it combines."""

    graph: GraphDefinition
    source_count: int

    @property
    def id(self) -> int:
        return self.graph.id

    @property
    def name(self) -> str:
        return self.graph.name

    def to_payload(self) -> dict[str, Any]:
        payload = self.graph.to_payload()
        payload["source_count"] = self.source_count
        return payload


def _require(payload: Mapping[str, Any], key: str, kind: str) -> Any:
    if payload.get(key) is None:
        raise ValueError(f"{kind} payload requires '{key}'")
    return payload[key]


def as_flag(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in _TRUE_STRINGS
    return bool(value)


def coerce_graph_payload(payload: Mapping[str, Any]) -> GraphDefinition:
    """Build a :class:`GraphDefinition` from a loosely typed row mapping."""

    return GraphDefinition(
        id=int(_require(payload, "id", "graph")),
        name=str(_require(payload, "name", "graph")),
        owner_user_id=str(_require(payload, "owner_user_id", "graph")),
        group_id=int(payload.get("group_id") or ALL_GROUP),
        private=as_flag(payload.get("private", False)),
        description=str(payload.get("description") or ""),
        period=int(payload.get("period") or 0),
        stacked=as_flag(payload.get("stacked", False)),
        width=int(payload.get("width") or 0),
        height=int(payload.get("height") or 0),
    )


def coerce_source_payload(payload: Mapping[str, Any]) -> GraphSource:
    """Build a :class:`GraphSource` from a loosely typed row mapping."""

    weight = payload.get("weight")
    return GraphSource(
        id=int(_require(payload, "id", "source")),
        graph_id=int(_require(payload, "graph_id", "source")),
        module_id=int(_require(payload, "module_id", "source")),
        weight=1.0 if weight is None else float(weight),
    )
