"""Plotly figure builders for projection outputs.

Each function accepts an object returned by :mod:`projection` and
returns a ``plotly.graph_objects.Figure``.  Page layout and rendering are
left to the caller (e.g. ``st.plotly_chart``).
"""

from __future__ import annotations

from typing import Sequence

import plotly.express as px
import plotly.graph_objects as go

from .models import ProjectionPoint, ProjectSchedule
from .projection import projection_dataframe
from .settings import get_labels_config


def _empty_figure(message: str) -> go.Figure:
    fig = go.Figure()
    fig.update_layout(title=message)
    return fig


def create_projection_chart(points: Sequence[ProjectionPoint], title: str | None = None) -> go.Figure:
    """Planned vs actual cumulative line chart (the S-curve).

    Parameters
    ----------
    points : sequence of ProjectionPoint
        Output of :func:`projection.project`.
    title : str, optional
        Chart title.  Defaults to the configured chart title.

    Returns
    -------
    plotly.graph_objects.Figure
        Planned line dashed, actual line with markers.  Censored months
        are gaps in the actual line.  An empty projection yields an empty
        figure titled with the "not enough data" message.
    """
    chart = get_labels_config()['chart']
    if not points:
        return _empty_figure(chart['no_data'])

    df = projection_dataframe(points)
    fig = go.Figure()
    fig.add_trace(go.Scatter(
        x=df['Label'],
        y=df['Planned'],
        name=chart['planned'],
        mode='lines',
        line=dict(dash='dash', width=2),
    ))
    fig.add_trace(go.Scatter(
        x=df['Label'],
        y=df['Actual'],
        name=chart['actual'],
        mode='lines+markers',
        line=dict(width=3),
        connectgaps=False,
    ))
    fig.update_layout(
        title=title or chart['title'],
        xaxis_title="Month",
        yaxis_title="Cumulative",
        hovermode='x unified',
    )
    return fig


def create_monthly_investment_chart(schedule: ProjectSchedule, title: str | None = None) -> go.Figure:
    """Bar chart of the planned investment per month of one project."""
    chart = get_labels_config()['chart']
    if schedule.is_empty:
        return _empty_figure(chart['no_data'])

    labels = [month.label for month in schedule.months]
    fig = px.bar(x=labels, y=list(schedule.total_per_month))
    fig.update_layout(
        title=title or chart['monthly_title'],
        xaxis_title="Month",
        yaxis_title=chart['planned'],
    )
    return fig
