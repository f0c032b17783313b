"""Plotly rendering of a :class:`CumulativeDensityFilter`.

The figure has two traces and one shape:

- trace 0 (``"passing"``): filled cumulative area restricted to the passing
  side of the threshold,
- trace 1 (``"cumulative"``): the full cumulative outline,
- shape 0: vertical threshold line.

An optional annotation shows ``count / total`` above the threshold line.
``update_filter_figure`` rewrites these in place, so a ``FigureWidget``
created once can follow every drag update.
"""

from __future__ import annotations

import math
from contextlib import nullcontext
from dataclasses import dataclass
from typing import Any, Dict, List, Tuple, Union

import numpy as np
import plotly.graph_objects as go

from .filter_model import CumulativeDensityFilter

__all__ = ["FilterStyle", "clip_series", "build_filter_figure", "update_filter_figure"]

FigureLike = Union[go.Figure, go.FigureWidget]


@dataclass(frozen=True)
class FilterStyle:
    """
    Visual options for the filter chart.

    Parameters
    ----------
    threshold_color:
        Color of the threshold line, handle and count label.
    area_color:
        Outline color; the passing area uses it with ``area_opacity``.
    area_opacity:
        Fill opacity of the passing area.
    height_px:
        Total chart height in pixels.
    show_threshold_label:
        Draw the ``count / total`` label above the threshold line.
    border:
        CSS border of the widget wrapper.
    """

    threshold_color: str = "#ef4444"
    area_color: str = "#3b82f6"
    area_opacity: float = 0.3
    height_px: int = 200
    show_threshold_label: bool = True
    border: str = "1px solid #e5e7eb"


def _rgba(hex_color: str, alpha: float) -> str:
    h = hex_color.lstrip("#")
    if len(h) == 3:
        h = "".join(c * 2 for c in h)
    try:
        r, g, b = (int(h[i : i + 2], 16) for i in (0, 2, 4))
    except ValueError:
        return hex_color
    return f"rgba({r}, {g}, {b}, {alpha})"


def clip_series(
    x: np.ndarray, y: np.ndarray, threshold: float, side: str
) -> Tuple[np.ndarray, np.ndarray]:
    """Part of the series ``(x, y)`` on ``side`` (``"below"``/``"above"``) of ``threshold``.

    The threshold itself is inserted as an interpolated vertex so the filled
    area ends exactly at the threshold line.
    """
    x = np.asarray(x, dtype=float)
    y = np.asarray(y, dtype=float)
    if x.size == 0:
        return x, y

    t = min(float(x[-1]), max(float(x[0]), float(threshold)))
    y_t = float(np.interp(t, x, y))
    if side == "below":
        keep = x <= t
        return np.append(x[keep], t), np.append(y[keep], y_t)
    keep = x >= t
    return np.insert(x[keep], 0, t), np.insert(y[keep], 0, y_t)


def _xaxis_layout(model: CumulativeDensityFilter) -> Dict[str, Any]:
    scale = model.scale
    log_active = scale.log_active
    axis: Dict[str, Any] = {
        "type": "log" if log_active else "linear",
        "showgrid": True,
        "gridcolor": "#e5e7eb",
        "griddash": "dash",
        "tickfont": {"color": "#6b7280", "size": 12},
        "fixedrange": True,
    }
    if scale.is_degenerate:
        axis["autorange"] = True
        axis["range"] = None
    else:
        axis["autorange"] = False
        if log_active:
            axis["range"] = [math.log10(scale.min), math.log10(scale.max)]
        else:
            axis["range"] = [scale.min, scale.max]
    ticks = model.ticks
    if ticks is not None:
        axis["tickmode"] = "array"
        axis["tickvals"] = ticks
        axis["ticktext"] = model.tick_labels
    else:
        axis["tickmode"] = "auto"
        axis["tickvals"] = None
        axis["ticktext"] = None
    return axis


def _threshold_shape(model: CumulativeDensityFilter, style: FilterStyle) -> Dict[str, Any]:
    return {
        "type": "line",
        "xref": "x",
        "yref": "paper",
        "x0": model.threshold,
        "x1": model.threshold,
        "y0": 0,
        "y1": 1,
        "line": {"color": style.threshold_color, "width": 2},
        "opacity": 0.8,
    }


def _threshold_annotations(model: CumulativeDensityFilter, style: FilterStyle) -> List[Dict[str, Any]]:
    if not style.show_threshold_label or model.is_empty:
        return []
    x = model.threshold
    if model.scale.log_active:
        # annotations on log axes are positioned in log10 units
        x = math.log10(x) if x > 0 else math.log10(model.scale.min)
    return [
        {
            "x": x,
            "xref": "x",
            "y": 1,
            "yref": "paper",
            "yanchor": "bottom",
            "text": model.count_label,
            "showarrow": False,
            "bgcolor": style.threshold_color,
            "borderpad": 3,
            "font": {"color": "white", "size": 12},
        }
    ]


def _trace_data(model: CumulativeDensityFilter) -> Tuple[Tuple[np.ndarray, np.ndarray], Tuple[np.ndarray, np.ndarray]]:
    dist = model.distribution
    x, y = dist.x, dist.y
    return clip_series(x, y, model.threshold, model.passing_side), (x, y)


def build_filter_figure(
    model: CumulativeDensityFilter,
    style: FilterStyle = FilterStyle(),
    *,
    widget: bool = False,
) -> FigureLike:
    """Create the chart for ``model``.

    Parameters
    ----------
    model : CumulativeDensityFilter
        Source of the series, ticks and threshold.
    style : FilterStyle, optional
        Colors and sizing.
    widget : bool, optional
        Return a ``go.FigureWidget`` (for notebooks) instead of a ``go.Figure``.
    """
    (px, py), (x, y) = _trace_data(model)
    fig_cls = go.FigureWidget if widget else go.Figure
    fig = fig_cls(
        data=[
            go.Scatter(
                name="passing",
                x=px,
                y=py,
                mode="lines",
                line={"width": 0, "color": style.area_color},
                fill="tozeroy",
                fillcolor=_rgba(style.area_color, style.area_opacity),
                hoverinfo="skip",
            ),
            go.Scatter(
                name="cumulative",
                x=x,
                y=y,
                mode="lines",
                line={"width": 2, "color": style.area_color},
                hovertemplate="Value: %{x}<br>Count: %{y}<extra></extra>",
            ),
        ]
    )
    fig.update_layout(
        height=style.height_px,
        margin={"t": 30, "r": 10, "l": 30, "b": 30},
        showlegend=False,
        dragmode=False,
        plot_bgcolor="white",
        xaxis=_xaxis_layout(model),
        yaxis={"rangemode": "tozero", "fixedrange": True, "tickfont": {"color": "#6b7280", "size": 12}},
        shapes=[_threshold_shape(model, style)] if not model.is_empty else [],
        annotations=_threshold_annotations(model, style),
    )
    return fig


def update_filter_figure(
    fig: FigureLike, model: CumulativeDensityFilter, style: FilterStyle = FilterStyle()
) -> None:
    """Refresh a figure made by :func:`build_filter_figure` in one batch."""
    (px, py), (x, y) = _trace_data(model)
    batch = fig.batch_update() if isinstance(fig, go.FigureWidget) else nullcontext()
    with batch:
        fig.data[0].x = px
        fig.data[0].y = py
        fig.data[1].x = x
        fig.data[1].y = y
        fig.layout.xaxis.update(_xaxis_layout(model))
        fig.layout.shapes = [_threshold_shape(model, style)] if not model.is_empty else []
        fig.layout.annotations = _threshold_annotations(model, style)
