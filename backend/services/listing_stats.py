"""Summary figures and histogram buckets for the stats panel."""

from __future__ import annotations

import math
from typing import List, Sequence

import numpy as np

from ..models.listing import HistogramBucket, Listing, NeighborhoodStats, SummaryStats

DEFAULT_BUCKET_SIZE = 100.0  # USD/m²
DEFAULT_MAX_BUCKETS = 50


def summarize(listings: Sequence[Listing], neighborhoods: Sequence[NeighborhoodStats]) -> SummaryStats:
    ratios = [listing.price_per_m2 for listing in listings if listing.price_per_m2 is not None]
    ranked = [stats for stats in neighborhoods if stats.avg_price_per_m2 is not None]
    return SummaryStats(
        total_listings=len(listings),
        avg_price_per_m2=float(np.mean(ratios)) if ratios else None,
        avg_price_usd=float(np.mean([listing.price_usd for listing in listings])) if listings else None,
        most_expensive=ranked[0] if ranked else None,
        most_affordable=min(ranked, key=lambda s: s.avg_price_per_m2) if ranked else None,
    )


def price_per_m2_histogram(
    listings: Sequence[Listing],
    bucket_size: float = DEFAULT_BUCKET_SIZE,
    max_buckets: int = DEFAULT_MAX_BUCKETS,
) -> List[HistogramBucket]:
    """Bucket price per m² into half-open ``[lower, upper)`` ranges of ``bucket_size``.

    The first bucket starts at the largest multiple of ``bucket_size`` not above
    the minimum (never below zero); buckets continue until the maximum value is
    covered, so a maximum sitting on a boundary opens a bucket of its own.
    At most ``max_buckets`` are returned: past that, the last bucket stretches
    up to the maximum and collects the whole tail.
    """

    if bucket_size <= 0:
        raise ValueError(f"bucket_size must be positive, got {bucket_size}")
    if max_buckets < 1:
        raise ValueError(f"max_buckets must be at least 1, got {max_buckets}")
    values = np.array([listing.price_per_m2 for listing in listings if listing.price_per_m2 is not None], dtype=float)
    if values.size == 0:
        return []

    start = max(0.0, math.floor(values.min() / bucket_size) * bucket_size)
    end = math.floor(values.max() / bucket_size) * bucket_size + bucket_size
    n_buckets = int(round((end - start) / bucket_size))
    if n_buckets > max_buckets:
        n_buckets = max_buckets
        edges = np.append(start + bucket_size * np.arange(n_buckets), end)
    else:
        edges = start + bucket_size * np.arange(n_buckets + 1)
    counts, _ = np.histogram(values, bins=edges)
    return [
        HistogramBucket(lower=float(edges[i]), upper=float(edges[i + 1]), count=int(counts[i]))
        for i in range(n_buckets)
    ]


__all__ = ["DEFAULT_BUCKET_SIZE", "DEFAULT_MAX_BUCKETS", "summarize", "price_per_m2_histogram"]
