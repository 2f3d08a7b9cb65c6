"""Pydantic models for normalized listings and neighborhood aggregates."""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional, Set, Tuple

from pydantic import BaseModel, ConfigDict, Field


class Listing(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    title: str
    lat: float
    lng: float
    price_usd: float = Field(..., gt=0)
    currency_id: Optional[int] = None
    cover_image_url: Optional[str] = None
    covered_area_m2: Optional[float] = None
    lot_area_m2: Optional[float] = None
    weighted_area_m2: Optional[float] = None
    price_per_m2: Optional[float] = None
    neighborhood: Optional[str] = None
    street_name: Optional[str] = None
    street_number: Optional[str] = None
    room_count: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def location(self) -> Tuple[float, float]:
        return self.lat, self.lng


class NeighborhoodStats(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    listing_count: int
    avg_price_per_m2: Optional[float] = None


class ListingsResponse(BaseModel):
    listings: List[Listing]
    neighborhoods: List[NeighborhoodStats]


class ListingImages(BaseModel):
    id: int
    images: List[str] = Field(default_factory=list)


class HistogramBucket(BaseModel):
    lower: float
    upper: float
    count: int

    @property
    def label(self) -> str:
        return f"{self.lower:.0f}–{self.upper:.0f}"


class SummaryStats(BaseModel):
    total_listings: int
    avg_price_per_m2: Optional[float] = None
    avg_price_usd: Optional[float] = None
    most_expensive: Optional[NeighborhoodStats] = None
    most_affordable: Optional[NeighborhoodStats] = None


class ListingFilters(BaseModel):
    """Inclusive bounds chosen in the UI; unset bounds do not filter."""

    neighborhoods: Set[str] = Field(default_factory=set)
    price_per_m2_min: Optional[float] = None
    price_per_m2_max: Optional[float] = None
    price_usd_min: Optional[float] = None
    price_usd_max: Optional[float] = None
    lot_area_min: Optional[float] = None
    lot_area_max: Optional[float] = None
