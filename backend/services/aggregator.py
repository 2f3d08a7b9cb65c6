"""Neighborhood-level aggregation of normalized listings."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List

from ..models.listing import Listing, NeighborhoodStats

NO_NEIGHBORHOOD = "Sin barrio"


@dataclass
class _Accumulator:
    total: int = 0
    priced: int = 0
    price_per_m2_sum: float = 0.0


def neighborhood_key(listing: Listing) -> str:
    name = (listing.neighborhood or "").strip()
    return name or NO_NEIGHBORHOOD


def aggregate_by_neighborhood(listings: Iterable[Listing]) -> List[NeighborhoodStats]:
    """Count listings per neighborhood and average their price per m².

    The average only covers listings that have a price per m²; neighborhoods
    where none do get ``None`` and are ranked after every neighborhood with an
    average. Ties keep first-seen order.
    """

    groups: Dict[str, _Accumulator] = {}
    for listing in listings:
        acc = groups.setdefault(neighborhood_key(listing), _Accumulator())
        acc.total += 1
        if listing.price_per_m2 is not None:
            acc.price_per_m2_sum += listing.price_per_m2
            acc.priced += 1

    stats = [
        NeighborhoodStats(
            name=name,
            listing_count=acc.total,
            avg_price_per_m2=acc.price_per_m2_sum / acc.priced if acc.priced else None,
        )
        for name, acc in groups.items()
    ]
    stats.sort(key=lambda s: (s.avg_price_per_m2 is None, -(s.avg_price_per_m2 or 0.0)))
    return stats


__all__ = ["NO_NEIGHBORHOOD", "neighborhood_key", "aggregate_by_neighborhood"]
