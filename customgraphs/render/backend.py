"""Combined-series rendering backends.

The :class:`SvgCombinedBackend` buckets each module's samples over the
requested window with NumPy, scales them by their weights, optionally stacks
them and draws the result as an SVG line chart.
"""
from __future__ import annotations

import html
import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Protocol, Sequence, Tuple

import numpy as np

from customgraphs.clock import epoch_now

logger = logging.getLogger(__name__)

Sample = Tuple[float, float]

NO_DATA_NOTICE = "<div class='nf'>No data to show</div>"

PALETTE = ("#0f6f68", "#d17b0f", "#3a6ea5", "#8b4a2a", "#5c8f3a", "#7a3b8f")

MARGIN_LEFT = 40
MARGIN_RIGHT = 10
MARGIN_TOP = 16
MARGIN_BOTTOM = 20


class SeriesSource(Protocol):
    """Time-series retrieval for monitored modules."""

    def fetch(self, module_id: int, start: float, end: float) -> Sequence[Sample]:
        """Return ``(timestamp, value)`` samples of ``module_id`` within ``[start, end]``."""


class CombinedSeriesBackend(Protocol):
    """Turn a weighted list of series and a window into a renderable artifact."""

    def render_combined(
        self,
        module_ids: Sequence[int],
        weights: Sequence[float],
        period: int,
        width: int,
        height: int,
        *,
        title: str,
        y_label: str,
        baseline: int,
        show_labels: int,
        only_avg: int,
        stacked: bool,
        start_date: float,
    ) -> str:
        ...


@dataclass
class InMemorySeriesSource:
    """Keep module samples in memory, keyed by module id."""

    samples: Dict[int, List[Sample]] = field(default_factory=dict)

    def add(self, module_id: int, timestamp: float, value: float) -> None:
        self.samples.setdefault(module_id, []).append((float(timestamp), float(value)))

    def extend(self, module_id: int, samples: Sequence[Sample]) -> None:
        for timestamp, value in samples:
            self.add(module_id, timestamp, value)

    def fetch(self, module_id: int, start: float, end: float) -> List[Sample]:
        return [
            (timestamp, value)
            for timestamp, value in self.samples.get(module_id, [])
            if start <= timestamp <= end
        ]


def bucket_series(samples: Sequence[Sample], start: float, end: float, resolution: int) -> np.ndarray:
    """Average ``samples`` into ``resolution`` equal buckets; empty buckets are ``nan``."""

    if not samples:
        return np.full(resolution, np.nan)
    data = np.asarray(samples, dtype=float).reshape(-1, 2)
    edges = np.linspace(start, end, resolution + 1)
    sums, _ = np.histogram(data[:, 0], bins=edges, weights=data[:, 1])
    counts, _ = np.histogram(data[:, 0], bins=edges)
    with np.errstate(invalid="ignore", divide="ignore"):
        means = sums / counts
    means[counts == 0] = np.nan
    return means


def combine_series(matrix: np.ndarray, weights: Sequence[float], *, stacked: bool) -> np.ndarray:
    """Scale each row of ``matrix`` by its weight and optionally stack the rows."""

    weighted = matrix * np.asarray(weights, dtype=float)[:, np.newaxis]
    if stacked:
        return np.cumsum(np.nan_to_num(weighted, nan=0.0), axis=0)
    return weighted


def _finite_runs(row: np.ndarray) -> List[Tuple[int, int]]:
    runs: List[Tuple[int, int]] = []
    start = None
    for index, value in enumerate(row):
        if np.isfinite(value):
            if start is None:
                start = index
        elif start is not None:
            runs.append((start, index))
            start = None
    if start is not None:
        runs.append((start, len(row)))
    return runs


def _svg_chart(
    values: np.ndarray,
    module_ids: Sequence[int],
    width: int,
    height: int,
    *,
    title: str,
    y_label: str,
) -> str:
    finite = values[np.isfinite(values)]
    min_y = min(float(finite.min()), 0.0)
    max_y = float(finite.max())
    if min_y == max_y:
        max_y = min_y + 1.0

    plot_width = max(width - MARGIN_LEFT - MARGIN_RIGHT, 1)
    plot_height = max(height - MARGIN_TOP - MARGIN_BOTTOM, 1)
    columns = values.shape[1]
    step = plot_width / columns
    xs = MARGIN_LEFT + step * (np.arange(columns) + 0.5)
    ys = height - MARGIN_BOTTOM - (values - min_y) * (plot_height / (max_y - min_y))

    lines: List[str] = []
    for row_index, module_id in enumerate(module_ids):
        color = PALETTE[row_index % len(PALETTE)]
        for start, stop in _finite_runs(values[row_index]):
            points = " ".join(
                f"{xs[column]:.1f},{ys[row_index, column]:.1f}" for column in range(start, stop)
            )
            lines.append(
                f'<polyline data-module="{module_id}" fill="none" stroke="{color}" '
                f'stroke-width="2" points="{points}" />'
            )

    labels: List[str] = []
    if title:
        labels.append(
            f'<text x="{width / 2:.1f}" y="12" text-anchor="middle">{html.escape(title)}</text>'
        )
    if y_label:
        labels.append(
            f'<text x="10" y="{height / 2:.1f}" transform="rotate(-90 10 {height / 2:.1f})" '
            f'text-anchor="middle">{html.escape(y_label)}</text>'
        )

    return (
        f'<svg xmlns="http://www.w3.org/2000/svg" width="{width}" height="{height}" '
        f'viewBox="0 0 {width} {height}">'
        f'<line x1="{MARGIN_LEFT}" y1="{height - MARGIN_BOTTOM}" '
        f'x2="{width - MARGIN_RIGHT}" y2="{height - MARGIN_BOTTOM}" stroke="#c8d0d4" stroke-width="1" />'
        f'<line x1="{MARGIN_LEFT}" y1="{MARGIN_TOP}" '
        f'x2="{MARGIN_LEFT}" y2="{height - MARGIN_BOTTOM}" stroke="#c8d0d4" stroke-width="1" />'
        + "".join(labels)
        + "".join(lines)
        + "</svg>"
    )


@dataclass
class SvgCombinedBackend:
    """Render weighted module series as a single SVG line chart.

    ``baseline``, ``show_labels`` and ``only_avg`` are accepted for interface
    compatibility and have no effect on the output.
    """

    series_source: SeriesSource
    resolution: int = 60
    clock: Callable[[], float] = epoch_now

    def render_combined(
        self,
        module_ids: Sequence[int],
        weights: Sequence[float],
        period: int,
        width: int,
        height: int,
        *,
        title: str = "",
        y_label: str = "",
        baseline: int = 0,
        show_labels: int = 0,
        only_avg: int = 0,
        stacked: bool = False,
        start_date: float = 0,
    ) -> str:
        if len(module_ids) != len(weights):
            raise ValueError("module_ids and weights must have the same length")
        if period <= 0:
            raise ValueError("period must be positive")
        if self.resolution <= 0:
            raise ValueError("resolution must be positive")

        end = float(start_date) if start_date else self.clock()
        start = end - period

        rows = [
            bucket_series(self.series_source.fetch(module_id, start, end), start, end, self.resolution)
            for module_id in module_ids
        ]
        if not rows or not np.isfinite(np.vstack(rows)).any():
            logger.debug("No samples for modules %s between %s and %s", list(module_ids), start, end)
            return NO_DATA_NOTICE

        combined = combine_series(np.vstack(rows), weights, stacked=stacked)
        return _svg_chart(combined, module_ids, width, height, title=title, y_label=y_label)
