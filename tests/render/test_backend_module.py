"""Tests for :mod:`customgraphs.render.backend`."""

from __future__ import annotations

import numpy as np
import pytest

from customgraphs.render.backend import (
    NO_DATA_NOTICE,
    InMemorySeriesSource,
    SvgCombinedBackend,
    bucket_series,
    combine_series,
)

END = 10_000.0


def test_bucket_series_averages_and_marks_gaps():
    samples = [(0.0, 1.0), (1.0, 3.0), (7.0, 10.0)]
    buckets = bucket_series(samples, 0.0, 8.0, 4)
    assert buckets[0] == pytest.approx(2.0)
    assert np.isnan(buckets[1]) and np.isnan(buckets[2])
    assert buckets[3] == pytest.approx(10.0)


def test_bucket_series_without_samples_is_all_gaps():
    assert np.isnan(bucket_series([], 0.0, 10.0, 3)).all()


def test_combine_series_applies_weights_and_stacks():
    matrix = np.array([[1.0, np.nan], [2.0, 4.0]])
    weighted = combine_series(matrix, [2.0, 0.5], stacked=False)
    assert weighted[0, 0] == 2.0 and np.isnan(weighted[0, 1])
    stacked = combine_series(matrix, [2.0, 0.5], stacked=True)
    assert stacked.tolist() == [[2.0, 0.0], [3.0, 2.0]]


def build_source() -> InMemorySeriesSource:
    source = InMemorySeriesSource()
    source.extend(1, [(END - 3000, 5.0), (END - 1000, 7.0)])
    source.extend(2, [(END - 2000, 1.0)])
    source.add(3, END - 50_000, 9.0)
    return source


def test_backend_renders_one_polyline_run_per_series():
    backend = SvgCombinedBackend(series_source=build_source(), resolution=4)

    svg = backend.render_combined([1, 2], [1.0, 2.0], 3600, 300, 120, start_date=END)

    assert svg.startswith("<svg")
    assert 'width="300"' in svg and 'height="120"' in svg
    assert svg.count('data-module="1"') == 2
    assert svg.count('data-module="2"') == 1


def test_backend_uses_clock_when_start_date_is_zero():
    backend = SvgCombinedBackend(series_source=build_source(), resolution=4, clock=lambda: END)
    assert backend.render_combined([2], [1.0], 3600, 300, 120) != NO_DATA_NOTICE


def test_backend_without_samples_in_window_returns_notice():
    backend = SvgCombinedBackend(series_source=build_source(), resolution=4)
    assert backend.render_combined([3], [1.0], 3600, 300, 120, start_date=END) == NO_DATA_NOTICE


def test_backend_renders_escaped_labels_when_given():
    backend = SvgCombinedBackend(series_source=build_source(), resolution=4)
    svg = backend.render_combined(
        [1], [1.0], 3600, 300, 120, title="CPU <load>", y_label="%", start_date=END
    )
    assert "CPU &lt;load&gt;" in svg


def test_backend_rejects_mismatched_weights():
    backend = SvgCombinedBackend(series_source=build_source())
    with pytest.raises(ValueError):
        backend.render_combined([1, 2], [1.0], 3600, 300, 120, start_date=END)
