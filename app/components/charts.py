"""Plotly chart helpers for Streamlit UI."""

from __future__ import annotations

from typing import Sequence

import plotly.graph_objects as go

from backend.models.listing import HistogramBucket


def render_price_per_m2_histogram(buckets: Sequence[HistogramBucket]) -> go.Figure:
    fig = go.Figure(
        go.Bar(
            x=[bucket.label for bucket in buckets],
            y=[bucket.count for bucket in buckets],
            name="Inmuebles",
            marker=dict(color="#22c55e", line=dict(color="#aaffaa", width=1)),
            hovertemplate="%{x} US$/m²<br><b>%{y}</b> inmuebles<extra></extra>",
        )
    )
    fig.update_layout(
        margin=dict(l=10, r=10, t=20, b=30),
        height=260,
        xaxis_title="Precio por m² (USD)",
        yaxis_title="Cantidad de inmuebles",
        showlegend=False,
        template="plotly_white",
    )
    return fig
