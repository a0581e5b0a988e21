"""Render a custom graph by combining its weighted sources."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from customgraphs.catalog.store import CatalogStore
from customgraphs.config import GraphContext

from .backend import CombinedSeriesBackend

logger = logging.getLogger(__name__)

EMPTY_GRAPH_TEXT = "Empty graph"


def empty_graph_placeholder(context: Optional[GraphContext] = None) -> str:
    """Return the notice shown for a graph without sources."""

    translate = (context or GraphContext()).translate
    return f"<div class='nf'>{translate(EMPTY_GRAPH_TEXT)}</div>"


@dataclass
class GraphRenderer:
    """Load a graph's sources and hand them to a combined-series backend."""

    store: CatalogStore
    backend: CombinedSeriesBackend

    def render_graph(
        self,
        graph_id: int,
        height: int,
        width: int,
        period: int,
        stacked: bool,
        *,
        return_output: bool = False,
        start_date: float = 0,
        context: Optional[GraphContext] = None,
    ) -> Optional[str]:
        """Render ``graph_id`` over the last ``period`` seconds.

        When ``return_output`` is false the artifact is written to
        ``context.output`` and ``None`` is returned.  A graph without sources
        renders the empty-graph placeholder and never reaches the backend.
        Backend failures propagate.
        """

        if height <= 0 or width <= 0:
            raise ValueError("height and width must be positive")
        if period <= 0:
            raise ValueError("period must be positive")
        context = context or GraphContext()

        sources = self.store.list_sources(graph_id) or []
        if not sources:
            logger.debug("Graph %s has no sources", graph_id)
            output = empty_graph_placeholder(context)
        else:
            module_ids = [source.module_id for source in sources]
            weights = [source.weight for source in sources]
            output = self.backend.render_combined(
                module_ids,
                weights,
                period,
                width,
                height,
                title="",
                y_label="",
                baseline=0,
                show_labels=0,
                only_avg=0,
                stacked=stacked,
                start_date=start_date,
            )

        if return_output:
            return output
        context.output(output)
        return None
