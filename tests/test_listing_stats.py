import pytest

from backend.models.listing import Listing, ListingFilters
from backend.services.aggregator import NO_NEIGHBORHOOD, aggregate_by_neighborhood
from backend.services.filters import apply_filters, in_range
from backend.services.listing_stats import price_per_m2_histogram, summarize


def _listing(listing_id, price_per_m2=None, price_usd=100000, lot=None, neighborhood="Centro"):
    return Listing(
        id=listing_id,
        title=f"Inmueble {listing_id}",
        lat=-38.0,
        lng=-57.5,
        price_usd=price_usd,
        lot_area_m2=lot,
        price_per_m2=price_per_m2,
        neighborhood=neighborhood,
    )


def test_summary_figures():
    listings = [
        _listing(1, 1000, price_usd=100000, neighborhood="Centro"),
        _listing(2, 2000, price_usd=300000, neighborhood="Playa Grande"),
        _listing(3, None, price_usd=200000, neighborhood="Puerto"),
    ]
    summary = summarize(listings, aggregate_by_neighborhood(listings))
    assert summary.total_listings == 3
    assert summary.avg_price_per_m2 == pytest.approx(1500)
    assert summary.avg_price_usd == pytest.approx(200000)
    assert summary.most_expensive.name == "Playa Grande"
    assert summary.most_affordable.name == "Centro"


def test_summary_without_data():
    summary = summarize([], [])
    assert summary.total_listings == 0
    assert summary.avg_price_per_m2 is None
    assert summary.avg_price_usd is None
    assert summary.most_expensive is None
    assert summary.most_affordable is None


def test_histogram_buckets():
    listings = [_listing(i, value) for i, value in enumerate([550, 640, 699.99, 1200])] + [_listing(9)]
    buckets = price_per_m2_histogram(listings)
    assert [bucket.lower for bucket in buckets] == [500 + 100 * i for i in range(8)]
    assert buckets[0].label == "500–600"
    assert [bucket.count for bucket in buckets] == [1, 2, 0, 0, 0, 0, 0, 1]
    assert sum(bucket.count for bucket in buckets) == 4


def test_histogram_single_value_on_boundary():
    buckets = price_per_m2_histogram([_listing(1, 600)])
    assert len(buckets) == 1
    assert (buckets[0].lower, buckets[0].upper, buckets[0].count) == (600, 700, 1)


def test_histogram_empty_and_invalid_size():
    assert price_per_m2_histogram([_listing(1)]) == []
    with pytest.raises(ValueError):
        price_per_m2_histogram([_listing(1, 500)], bucket_size=0)
    with pytest.raises(ValueError):
        price_per_m2_histogram([_listing(1, 500)], max_buckets=0)


def test_histogram_folds_extreme_outlier_into_last_bucket():
    listings = [_listing(1, 1e12 / 31), _listing(2, 1000.0), _listing(3, 1050.0)]
    buckets = price_per_m2_histogram(listings)
    assert len(buckets) == 50
    assert (buckets[0].lower, buckets[0].upper, buckets[0].count) == (1000, 1100, 2)
    assert buckets[-1].lower == 1000 + 49 * 100
    assert buckets[-1].upper > 1e12 / 31
    assert buckets[-1].count == 1
    assert sum(bucket.count for bucket in buckets) == 3


def test_histogram_bucket_cap_is_configurable():
    buckets = price_per_m2_histogram([_listing(i, value) for i, value in enumerate([100, 250, 990])], max_buckets=3)
    assert [(bucket.lower, bucket.upper) for bucket in buckets] == [(100, 200), (200, 300), (300, 1000)]
    assert [bucket.count for bucket in buckets] == [1, 1, 1]


def test_in_range_is_inclusive():
    assert in_range(5, 5, 5)
    assert in_range(None, None, None)
    assert not in_range(None, 1, None)
    assert not in_range(4.99, 5, None)
    assert not in_range(10.01, None, 10)


def test_apply_filters():
    listings = [
        _listing(1, 1000, price_usd=90000, lot=200),
        _listing(2, 1500, price_usd=150000, lot=None, neighborhood="Playa Grande"),
        _listing(3, None, price_usd=120000, lot=300, neighborhood=None),
    ]
    assert apply_filters(listings, ListingFilters()) == listings

    by_neighborhood = apply_filters(listings, ListingFilters(neighborhoods={"Centro", NO_NEIGHBORHOOD}))
    assert [listing.id for listing in by_neighborhood] == [1, 3]

    by_ratio = apply_filters(listings, ListingFilters(price_per_m2_min=1000, price_per_m2_max=1400))
    assert [listing.id for listing in by_ratio] == [1]

    by_price = apply_filters(listings, ListingFilters(price_usd_max=120000))
    assert [listing.id for listing in by_price] == [1, 3]

    by_lot = apply_filters(listings, ListingFilters(lot_area_min=250))
    assert [listing.id for listing in by_lot] == [3]
