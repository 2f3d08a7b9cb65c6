"""Map of listings colored by price per m²."""

from __future__ import annotations

import math
from typing import Optional, Sequence, Tuple

import plotly.graph_objects as go

from backend.models.listing import Listing
from backend.services.aggregator import neighborhood_key

MAR_DEL_PLATA_CENTER = (-38.005, -57.55)
NO_DATA_COLOR = "#9ca3af"

_GREEN = (34, 197, 94)
_YELLOW = (234, 179, 8)
_RED = (239, 68, 68)

# (upper bound, color) used when there is no usable min/max range
FIXED_THRESHOLDS: Tuple[Tuple[float, str], ...] = (
    (600, "#22c55e"),
    (900, "#eab308"),
    (1200, "#f97316"),
)
ABOVE_THRESHOLDS_COLOR = "#ef4444"


def _is_finite(value: Optional[float]) -> bool:
    return value is not None and math.isfinite(value)


def _blend(start: Tuple[int, int, int], end: Tuple[int, int, int], t: float) -> str:
    r, g, b = (round(a + (z - a) * t) for a, z in zip(start, end))
    return f"rgb({r}, {g}, {b})"


def color_for_price_per_m2(value: Optional[float], lo: Optional[float] = None, hi: Optional[float] = None) -> str:
    if not _is_finite(value):
        return NO_DATA_COLOR

    if not (_is_finite(lo) and _is_finite(hi) and hi > lo):
        for bound, color in FIXED_THRESHOLDS:
            if value < bound:
                return color
        return ABOVE_THRESHOLDS_COLOR

    t = (min(max(value, lo), hi) - lo) / (hi - lo)
    if t <= 0.5:
        return _blend(_GREEN, _YELLOW, t / 0.5)
    return _blend(_YELLOW, _RED, (t - 0.5) / 0.5)


def _hover_text(listing: Listing) -> str:
    ratio = f"US$ {listing.price_per_m2:,.0f} / m²" if listing.price_per_m2 is not None else "Sin datos m²"
    street = " ".join(part for part in (listing.street_name, listing.street_number) if part)
    return "<br>".join(
        part
        for part in (
            f"<b>{listing.title}</b>",
            f"{neighborhood_key(listing)}{' · ' + street if street else ''}",
            f"US$ {listing.price_usd:,.0f}",
            ratio,
        )
        if part
    )


def render_listings_map(listings: Sequence[Listing], lo: Optional[float] = None, hi: Optional[float] = None) -> go.Figure:
    fig = go.Figure(
        go.Scattermap(
            lat=[listing.lat for listing in listings],
            lon=[listing.lng for listing in listings],
            mode="markers",
            marker=dict(size=11, color=[color_for_price_per_m2(listing.price_per_m2, lo, hi) for listing in listings]),
            text=[_hover_text(listing) for listing in listings],
            customdata=[listing.id for listing in listings],
            hoverinfo="text",
        )
    )
    fig.update_layout(
        map=dict(style="open-street-map", center=dict(lat=MAR_DEL_PLATA_CENTER[0], lon=MAR_DEL_PLATA_CENTER[1]), zoom=12),
        margin=dict(l=0, r=0, t=0, b=0),
        height=520,
    )
    return fig
