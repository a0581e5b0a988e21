"""Catalog subpackage containing graph records, storage and filtering."""

from .filter import GraphCatalogFilter, is_visible
from .model import (
    ALL_GROUP,
    GraphDefinition,
    GraphSource,
    VisibleGraphEntry,
    coerce_graph_payload,
    coerce_source_payload,
)
from .store import CatalogStore, GraphCatalogStore

__all__ = [
    "ALL_GROUP",
    "CatalogStore",
    "GraphCatalogFilter",
    "GraphCatalogStore",
    "GraphDefinition",
    "GraphSource",
    "VisibleGraphEntry",
    "coerce_graph_payload",
    "coerce_source_payload",
    "is_visible",
]
