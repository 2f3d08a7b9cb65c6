"""Streamlit dashboard: price per m² by neighborhood in Mar del Plata."""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional

import sys

import streamlit as st

try:
    from dotenv import load_dotenv
except ImportError:  # pragma: no cover - optional dependency
    load_dotenv = None

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

if load_dotenv is not None:
    load_dotenv(dotenv_path=ROOT_DIR / ".env", override=False)

from app.backend_client import BackendClient
from app.components.cards import render_listing_card, render_stats_panel
from app.components.charts import render_price_per_m2_histogram
from app.components.filters import render_sidebar_filters
from app.components.map import render_listings_map
from app.components.tables import render_listings_table, render_neighborhood_table
from backend.models.listing import Listing, ListingsResponse
from backend.services.filters import apply_filters
from backend.services.listing_stats import price_per_m2_histogram, summarize

st.set_page_config(page_title="Valor m² · Mar del Plata", layout="wide", page_icon="🏠")

FOOTNOTE = "Basado en el valor ponderado del m² (área cubierta + 30% del terreno descubierto)."


@st.cache_resource(show_spinner=False)
def get_backend_client() -> BackendClient:
    return BackendClient()


@st.cache_data(ttl=60, show_spinner=False)
def load_payload() -> dict:
    return get_backend_client().load_listings().model_dump(mode="json")


@st.cache_data(ttl=300, show_spinner=False)
def load_images(listing_id: int) -> List[str]:
    return get_backend_client().gallery_images(listing_id)


def selected_listing(listings: List[Listing]) -> Optional[Listing]:
    if not listings:
        return None
    by_label = {f"{listing.title} · #{listing.id}": listing for listing in listings}
    label = st.selectbox("Ver inmueble", list(by_label), index=None, placeholder="Elegí un inmueble")
    return by_label.get(label) if label else None


def render_dashboard() -> None:
    header_col, status_col = st.columns([3, 1])
    with header_col:
        st.title("Análisis de valor m² · Mar del Plata")
        st.caption(
            "Datos en tiempo real desde la API de Mar del Inmueble. "
            "Explorá cómo varía el precio por metro cuadrado según el barrio."
        )

    try:
        with st.spinner("Cargando inmuebles…"):
            payload = ListingsResponse.model_validate(load_payload())
    except Exception as exc:
        status_col.warning("No se pudieron cargar los inmuebles.")
        st.caption(str(exc))
        return
    status_col.caption(f"{len(payload.listings):,} inmuebles cargados")

    filters = render_sidebar_filters(payload.listings, payload.neighborhoods)
    visible = apply_filters(payload.listings, filters)

    render_stats_panel(summarize(visible, payload.neighborhoods))

    map_col, side_col = st.columns([2, 1])
    with map_col:
        relative = st.toggle("Escala de color relativa", value=False)
        ratios = [listing.price_per_m2 for listing in visible if listing.price_per_m2 is not None]
        lo, hi = (min(ratios), max(ratios)) if relative and ratios else (None, None)
        st.plotly_chart(render_listings_map(visible, lo, hi), width="stretch")
    with side_col:
        st.subheader("Barrios por precio promedio m²")
        render_neighborhood_table(payload.neighborhoods)

    st.subheader("Histograma precio / m²")
    buckets = price_per_m2_histogram(visible)
    if buckets:
        st.caption(f"{sum(bucket.count for bucket in buckets):,} con datos m²")
        st.plotly_chart(render_price_per_m2_histogram(buckets), width="stretch")
        st.caption(FOOTNOTE)
    else:
        st.info("Aún no hay suficientes datos de precio por metro cuadrado.")

    st.subheader("Inmuebles")
    listing = selected_listing(visible)
    if listing is not None:
        render_listing_card(listing, load_images(listing.id))
    render_listings_table(visible)


render_dashboard()
