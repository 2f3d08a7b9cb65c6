"""Tabular components for the neighborhood ranking and listing list."""

from __future__ import annotations

from typing import Optional, Sequence

import pandas as pd
import streamlit as st

from backend.models.listing import Listing, NeighborhoodStats
from backend.services.aggregator import neighborhood_key

NO_DATA = "Sin datos"


def fmt_usd(value: Optional[float]) -> str:
    if value is None:
        return NO_DATA
    return f"US$ {value:,.0f}"


def fmt_usd_m2(value: Optional[float]) -> str:
    if value is None:
        return "Sin datos m²"
    return f"US$ {value:,.0f} / m²"


def fmt_area(value: Optional[float]) -> str:
    if value is None:
        return "—"
    return f"{value:,.0f} m²"


def render_neighborhood_table(neighborhoods: Sequence[NeighborhoodStats]) -> None:
    if not neighborhoods:
        st.info("No hay barrios para mostrar.")
        return
    df = pd.DataFrame(
        [
            {
                "Barrio": stats.name,
                "Promedio m²": fmt_usd_m2(stats.avg_price_per_m2),
                "Inmuebles": stats.listing_count,
            }
            for stats in neighborhoods
        ]
    )
    st.dataframe(df, hide_index=True, width="stretch")


def render_listings_table(listings: Sequence[Listing]) -> None:
    if not listings:
        st.info("Ningún inmueble coincide con los filtros.")
        return
    df = pd.DataFrame(
        [
            {
                "ID": listing.id,
                "Título": listing.title,
                "Barrio": neighborhood_key(listing),
                "Precio": listing.price_usd,
                "US$/m²": listing.price_per_m2,
                "Cubierta": listing.covered_area_m2,
                "Terreno": listing.lot_area_m2,
                "Ambientes": listing.room_count,
            }
            for listing in listings
        ]
    )
    df = df.sort_values("US$/m²", ascending=False, na_position="last")
    df["Precio"] = df["Precio"].apply(fmt_usd)
    df["US$/m²"] = df["US$/m²"].apply(lambda x: NO_DATA if pd.isna(x) else f"{x:,.0f}")
    for column in ("Cubierta", "Terreno"):
        df[column] = df[column].apply(lambda x: fmt_area(None if pd.isna(x) else x))
    df["Ambientes"] = df["Ambientes"].apply(lambda x: "—" if pd.isna(x) else str(int(x)))
    st.dataframe(df, hide_index=True, width="stretch")
