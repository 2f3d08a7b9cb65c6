"""Sidebar controls that turn user choices into ``ListingFilters``."""

from __future__ import annotations

import math
from typing import Iterable, Optional, Sequence, Tuple

import streamlit as st

from backend.models.listing import Listing, ListingFilters, NeighborhoodStats

TOP_NEIGHBORHOODS = 25


def _bounds(values: Iterable[Optional[float]]) -> Optional[Tuple[float, float]]:
    present = [v for v in values if v is not None]
    if not present:
        return None
    lo, hi = math.floor(min(present)), math.ceil(max(present))
    return (float(lo), float(hi)) if hi > lo else None


def _range_slider(label: str, values: Iterable[Optional[float]], key: str) -> Tuple[Optional[float], Optional[float]]:
    bounds = _bounds(values)
    if bounds is None:
        return None, None
    chosen = st.slider(label, min_value=bounds[0], max_value=bounds[1], value=bounds, key=key)
    # Untouched sliders leave listings without that value visible.
    if tuple(chosen) == bounds:
        return None, None
    return chosen[0], chosen[1]


def render_sidebar_filters(listings: Sequence[Listing], neighborhoods: Sequence[NeighborhoodStats]) -> ListingFilters:
    with st.sidebar:
        st.header("Mapa de valor m²")
        st.caption("Filtrá por barrio para ver el precio promedio por metro cuadrado.")
        st.caption(f"{len(neighborhoods)} barrios")
        options = [stats.name for stats in neighborhoods[:TOP_NEIGHBORHOODS]]
        selected = st.multiselect("Barrios por precio promedio m²", options, key="neighborhoods")
        ppm_min, ppm_max = _range_slider("Precio por m² (USD)", (listing.price_per_m2 for listing in listings), "ppm")
        price_min, price_max = _range_slider("Precio total (USD)", (listing.price_usd for listing in listings), "price")
        lot_min, lot_max = _range_slider("Superficie de terreno (m²)", (listing.lot_area_m2 for listing in listings), "lot")
        st.divider()
        st.caption("Leyenda m² (color): < 600 verde · 600-900 amarillo · 900-1200 naranja · > 1200 rojo")
    return ListingFilters(
        neighborhoods=set(selected),
        price_per_m2_min=ppm_min,
        price_per_m2_max=ppm_max,
        price_usd_min=price_min,
        price_usd_max=price_max,
        lot_area_min=lot_min,
        lot_area_max=lot_max,
    )
