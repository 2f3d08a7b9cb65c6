"""Client-side filtering of normalized listings."""

from __future__ import annotations

from typing import Iterable, List, Optional

from ..models.listing import Listing, ListingFilters
from .aggregator import neighborhood_key


def in_range(value: Optional[float], lower: Optional[float], upper: Optional[float]) -> bool:
    if lower is None and upper is None:
        return True
    if value is None:
        return False
    if lower is not None and value < lower:
        return False
    if upper is not None and value > upper:
        return False
    return True


def matches(listing: Listing, filters: ListingFilters) -> bool:
    if filters.neighborhoods and neighborhood_key(listing) not in filters.neighborhoods:
        return False
    return (
        in_range(listing.price_per_m2, filters.price_per_m2_min, filters.price_per_m2_max)
        and in_range(listing.price_usd, filters.price_usd_min, filters.price_usd_max)
        and in_range(listing.lot_area_m2, filters.lot_area_min, filters.lot_area_max)
    )


def apply_filters(listings: Iterable[Listing], filters: ListingFilters) -> List[Listing]:
    return [listing for listing in listings if matches(listing, filters)]


__all__ = ["in_range", "matches", "apply_filters"]
