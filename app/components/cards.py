"""Streamlit components for the stats panel and the listing detail card."""

from __future__ import annotations

from typing import Sequence

import streamlit as st

from backend.models.listing import Listing, SummaryStats
from backend.services.aggregator import neighborhood_key
from app.components.tables import fmt_area, fmt_usd, fmt_usd_m2


def render_stats_panel(summary: SummaryStats) -> None:
    total_col, ratio_col, price_col, range_col = st.columns(4)
    total_col.metric("Total inmuebles", f"{summary.total_listings:,}")
    ratio_col.metric("Promedio m² (global)", fmt_usd_m2(summary.avg_price_per_m2))
    price_col.metric("Precio promedio", fmt_usd(summary.avg_price_usd))
    with range_col:
        st.caption("Rangos por barrio")
        if summary.most_expensive is not None:
            st.markdown(
                f"**Más caro:** {summary.most_expensive.name} · {fmt_usd_m2(summary.most_expensive.avg_price_per_m2)}"
            )
        if summary.most_affordable is not None:
            st.markdown(
                f"**Más accesible:** {summary.most_affordable.name} · {fmt_usd_m2(summary.most_affordable.avg_price_per_m2)}"
            )


def render_listing_card(listing: Listing, images: Sequence[str]) -> None:
    gallery = list(images) or ([listing.cover_image_url] if listing.cover_image_url else [])
    with st.container(border=True):
        st.markdown(f"### {listing.title or 'Inmueble'}")
        address = " ".join(part for part in (listing.street_name, listing.street_number) if part)
        st.caption(f"{neighborhood_key(listing)}{' · ' + address if address else ''} · ID {listing.id}")
        if gallery:
            index = st.slider("Foto", 1, len(gallery), 1, key=f"photo-{listing.id}") if len(gallery) > 1 else 1
            st.image(gallery[index - 1], width="stretch")
        price_col, ratio_col = st.columns(2)
        price_col.metric("Precio", fmt_usd(listing.price_usd))
        ratio_col.metric("Valor m²", fmt_usd_m2(listing.price_per_m2))
        covered_col, lot_col, weighted_col, rooms_col = st.columns(4)
        covered_col.metric("Sup. cubierta", fmt_area(listing.covered_area_m2))
        lot_col.metric("Sup. terreno", fmt_area(listing.lot_area_m2))
        weighted_col.metric("Sup. ponderada", fmt_area(listing.weighted_area_m2))
        rooms_col.metric("Ambientes", "—" if listing.room_count is None else str(listing.room_count))
