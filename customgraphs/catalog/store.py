"""Catalog storage for custom graphs and their sources.

:class:`CatalogStore` is the protocol the filtering and rendering services
consume.  :class:`GraphCatalogStore` is an in-memory implementation backed by
NetworkX where every graph and source is a node and each source hangs off its
graph through a ``HAS_SOURCE`` edge.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Protocol

import networkx as nx

from .model import GraphDefinition, GraphSource

GRAPH_NODE = "Graph"
SOURCE_NODE = "Source"
HAS_SOURCE = "HAS_SOURCE"

_ORDER_KEYS = {
    "name": lambda graph: graph.name,
    "id": lambda graph: graph.id,
}


class CatalogStore(Protocol):
    """Read interface over the persistent graph catalog.

    ``None`` from :meth:`list_all_graphs` or :meth:`list_sources` signals that
    the store is unavailable, which is distinct from an empty result.
    """

    def list_all_graphs(self, order_by: str = "name") -> Optional[List[GraphDefinition]]:
        ...

    def list_sources(self, graph_id: int) -> Optional[List[GraphSource]]:
        ...

    def count_sources(self, graph_id: int) -> int:
        ...


def _graph_key(graph_id: int) -> str:
    return f"graph:{graph_id}"


def _source_key(source_id: int) -> str:
    return f"source:{source_id}"


@dataclass
class GraphCatalogStore:
    """In-memory catalog built on :class:`networkx.MultiDiGraph`.

    Setting ``available`` to ``False`` simulates an outage: listing calls then
    return ``None`` instead of rows.
    """

    graph: nx.MultiDiGraph = field(default_factory=nx.MultiDiGraph)
    available: bool = True

    def add_graph(self, definition: GraphDefinition) -> None:
        """Insert or replace ``definition``."""

        self.graph.add_node(_graph_key(definition.id), type=GRAPH_NODE, record=definition)

    def add_source(self, source: GraphSource) -> None:
        """Attach ``source`` to its graph, after any existing sources."""

        owner = _graph_key(source.graph_id)
        if owner not in self.graph:
            raise KeyError(f"Graph '{source.graph_id}' does not exist")
        key = _source_key(source.id)
        if key in self.graph:
            raise ValueError(f"Source '{source.id}' already exists")
        self.graph.add_node(key, type=SOURCE_NODE, record=source)
        self.graph.add_edge(owner, key, key=HAS_SOURCE, type=HAS_SOURCE)

    def extend(self, definitions: Iterable[GraphDefinition], sources: Iterable[GraphSource] = ()) -> None:
        for definition in definitions:
            self.add_graph(definition)
        for source in sources:
            self.add_source(source)

    def remove_graph(self, graph_id: int) -> None:
        """Delete a graph together with all of its sources."""

        key = _graph_key(graph_id)
        if key not in self.graph:
            raise KeyError(f"Graph '{graph_id}' does not exist")
        source_keys = [target for _, target in self.graph.out_edges(key)]
        self.graph.remove_nodes_from([key, *source_keys])

    def get_graph(self, graph_id: int) -> Optional[GraphDefinition]:
        key = _graph_key(graph_id)
        if key not in self.graph:
            return None
        return self.graph.nodes[key]["record"]

    def list_all_graphs(self, order_by: str = "name") -> Optional[List[GraphDefinition]]:
        """Return every graph definition sorted by ``order_by``."""

        if not self.available:
            return None
        if order_by not in _ORDER_KEYS:
            raise ValueError(f"Unsupported order_by column: {order_by}")
        definitions = [
            data["record"]
            for _, data in self.graph.nodes(data=True)
            if data.get("type") == GRAPH_NODE
        ]
        return sorted(definitions, key=_ORDER_KEYS[order_by])

    def list_sources(self, graph_id: int) -> Optional[List[GraphSource]]:
        """Return the sources of ``graph_id`` in insertion order."""

        if not self.available:
            return None
        key = _graph_key(graph_id)
        if key not in self.graph:
            return []
        return [
            self.graph.nodes[target]["record"]
            for _, target, data in self.graph.out_edges(key, data=True)
            if data.get("type") == HAS_SOURCE
        ]

    def count_sources(self, graph_id: int) -> int:
        key = _graph_key(graph_id)
        if key not in self.graph:
            return 0
        return sum(
            1 for _, _, data in self.graph.out_edges(key, data=True) if data.get("type") == HAS_SOURCE
        )

    def count_sources_many(self, graph_ids: Iterable[int]) -> Dict[int, int]:
        """Return source counts for several graphs in one call."""

        return {graph_id: self.count_sources(graph_id) for graph_id in graph_ids}
