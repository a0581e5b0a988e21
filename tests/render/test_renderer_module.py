"""Tests for :mod:`customgraphs.render.renderer`."""

from __future__ import annotations

from unittest import mock

import pytest

from customgraphs.catalog.model import GraphDefinition, GraphSource
from customgraphs.catalog.store import GraphCatalogStore
from customgraphs.config import GraphContext
from customgraphs.render.renderer import GraphRenderer, empty_graph_placeholder


def build_store() -> GraphCatalogStore:
    store = GraphCatalogStore()
    store.extend(
        [
            GraphDefinition(id=1, name="combined", owner_user_id="admin"),
            GraphDefinition(id=2, name="empty", owner_user_id="admin"),
        ],
        [
            GraphSource(id=1, graph_id=1, module_id=30, weight=2.0),
            GraphSource(id=2, graph_id=1, module_id=10, weight=0.5),
            GraphSource(id=3, graph_id=1, module_id=30, weight=1.0),
        ],
    )
    return store


@pytest.fixture()
def backend():
    backend = mock.Mock()
    backend.render_combined.return_value = "<svg />"
    return backend


def test_sources_are_passed_in_stored_order(backend):
    renderer = GraphRenderer(store=build_store(), backend=backend)

    output = renderer.render_graph(1, 200, 400, 3600, True, return_output=True, start_date=1700000000)

    assert output == "<svg />"
    backend.render_combined.assert_called_once_with(
        [30, 10, 30],
        [2.0, 0.5, 1.0],
        3600,
        400,
        200,
        title="",
        y_label="",
        baseline=0,
        show_labels=0,
        only_avg=0,
        stacked=True,
        start_date=1700000000,
    )


def test_graph_without_sources_renders_placeholder(backend):
    renderer = GraphRenderer(store=build_store(), backend=backend)

    assert renderer.render_graph(2, 200, 400, 3600, False, return_output=True) == empty_graph_placeholder()
    assert renderer.render_graph(99, 200, 400, 3600, False, return_output=True) == empty_graph_placeholder()
    backend.render_combined.assert_not_called()


def test_unavailable_sources_render_placeholder(backend):
    store = build_store()
    store.available = False
    renderer = GraphRenderer(store=store, backend=backend)

    assert renderer.render_graph(1, 200, 400, 3600, False, return_output=True) == empty_graph_placeholder()
    backend.render_combined.assert_not_called()


def test_output_is_emitted_when_not_returned(backend):
    written = []
    context = GraphContext(output=written.append)
    renderer = GraphRenderer(store=build_store(), backend=backend)

    assert renderer.render_graph(1, 200, 400, 3600, False, context=context) is None
    assert renderer.render_graph(2, 200, 400, 3600, False, context=context) is None
    assert written == ["<svg />", "<div class='nf'>Empty graph</div>"]


def test_placeholder_is_translated(backend):
    context = GraphContext(translate=lambda text: text.upper())
    renderer = GraphRenderer(store=build_store(), backend=backend)

    output = renderer.render_graph(2, 200, 400, 3600, False, return_output=True, context=context)
    assert output == "<div class='nf'>EMPTY GRAPH</div>"


def test_backend_failures_propagate(backend):
    backend.render_combined.side_effect = RuntimeError("rendering engine down")
    renderer = GraphRenderer(store=build_store(), backend=backend)

    with pytest.raises(RuntimeError, match="rendering engine down"):
        renderer.render_graph(1, 200, 400, 3600, False, return_output=True)


@pytest.mark.parametrize("height, width, period", [(0, 400, 3600), (200, -1, 3600), (200, 400, 0)])
def test_invalid_dimensions_are_rejected(backend, height, width, period):
    renderer = GraphRenderer(store=build_store(), backend=backend)
    with pytest.raises(ValueError):
        renderer.render_graph(1, height, width, period, False, return_output=True)
