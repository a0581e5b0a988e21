"""Rendering of custom graphs."""

from .backend import CombinedSeriesBackend, InMemorySeriesSource, SeriesSource, SvgCombinedBackend
from .renderer import GraphRenderer, empty_graph_placeholder

__all__ = [
    "CombinedSeriesBackend",
    "GraphRenderer",
    "InMemorySeriesSource",
    "SeriesSource",
    "SvgCombinedBackend",
    "empty_graph_placeholder",
]
