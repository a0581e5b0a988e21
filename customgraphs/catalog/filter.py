"""Visibility filtering over the custom graph catalog."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Dict, List, Mapping, Optional, Union

from customgraphs.config import GraphContext

from .model import ALL_GROUP, GraphDefinition, VisibleGraphEntry
from .store import CatalogStore

if TYPE_CHECKING:  # pragma: no cover - import for type checking only
    from customgraphs.access import GroupMembership, GroupResolver

logger = logging.getLogger(__name__)

VisibleGraphs = Dict[int, Union[str, VisibleGraphEntry]]


def is_visible(graph: GraphDefinition, user_id: str, groups: Mapping[int, GroupMembership]) -> bool:
    """Return whether ``user_id`` may see ``graph`` given its accessible ``groups``.

    Group membership is checked first and ownership does not bypass it: the
    owner of a private graph in a group they cannot access does not see it.
    """

    if graph.group_id not in groups.keys():
        return False
    if graph.private and not graph.is_owned_by(user_id):
        return False
    if graph.group_id > ALL_GROUP and groups.get(graph.group_id) is None:
        return False
    return True


@dataclass
class GraphCatalogFilter:
    """Compute the custom graphs a user is authorized to see.

    With ``batch_counts`` enabled and a store exposing ``count_sources_many``,
    source counts are fetched in a single call instead of once per graph.
    """

    store: CatalogStore
    resolver: GroupResolver
    batch_counts: bool = False

    def list_visible_graphs(
        self,
        user_id: str,
        *,
        names_only: bool = False,
        include_all_group: Optional[bool] = None,
        privileges: Optional[str] = None,
        context: Optional[GraphContext] = None,
    ) -> VisibleGraphs:
        """Return ``{graph_id: name}`` or ``{graph_id: VisibleGraphEntry}``.

        The result follows the catalog's name ordering.  An unavailable
        catalog yields an empty mapping; resolver errors propagate.
        """

        if not user_id:
            raise ValueError("'user_id' is required")
        settings = (context or GraphContext()).settings
        if include_all_group is None:
            include_all_group = settings.include_all_group
        if privileges is None:
            privileges = settings.default_privileges

        groups = self.resolver.resolve_accessible_groups(user_id, privileges, include_all_group)

        catalog = self.store.list_all_graphs(order_by="name")
        if catalog is None:
            logger.warning("Graph catalog unavailable; returning no graphs for %s", user_id)
            return {}

        visible: List[GraphDefinition] = [graph for graph in catalog if is_visible(graph, user_id, groups)]
        logger.debug("User %s can see %d of %d graphs", user_id, len(visible), len(catalog))

        if names_only:
            return {graph.id: graph.name for graph in visible}

        counts = self._count_sources([graph.id for graph in visible])
        return {
            graph.id: VisibleGraphEntry(graph=graph, source_count=counts[graph.id])
            for graph in visible
        }

    def _count_sources(self, graph_ids: List[int]) -> Dict[int, int]:
        bulk = getattr(self.store, "count_sources_many", None)
        if self.batch_counts and callable(bulk):
            counts = dict(bulk(graph_ids))
            return {graph_id: int(counts.get(graph_id, 0)) for graph_id in graph_ids}
        return {graph_id: int(self.store.count_sources(graph_id)) for graph_id in graph_ids}
