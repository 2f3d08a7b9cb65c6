"""Turn raw upstream listing records into validated ``Listing`` models.

Every field is parsed on its own with the helpers in ``utils.coerce``; a record
is dropped only when its coordinates or its price are unusable. Area figures
follow a weighted model where uncovered lot space counts for 30% of covered
floor space.
"""

from __future__ import annotations

from typing import Any, Iterable, List, Mapping, Optional

from ..models.listing import Listing
from ..utils.coerce import finite_number, positive_float, title_case, to_datetime, to_float, to_int, to_str

USD_CURRENCY_ID = 2
THUMBNAIL_URL_TEMPLATE = "https://api.mardelinmueble.com/uploads/inmuebles/thumbnails/{name}"

COVERED_WEIGHT = 1.0
UNCOVERED_WEIGHT = 0.3
MIN_WEIGHTED_AREA_FOR_RATIO = 30.0


def thumbnail_url(name: Any) -> Optional[str]:
    if not isinstance(name, str) or not name:
        return None
    return THUMBNAIL_URL_TEMPLATE.format(name=name)


def price_in_usd(price: float, currency_id: Optional[int]) -> float:
    # Only USD listings are known; other codes pass through unconverted.
    if currency_id == USD_CURRENCY_ID:
        return price
    return price


def weighted_area(covered: Optional[float], lot: Optional[float]) -> Optional[float]:
    if covered is None and lot is None:
        return None
    covered_m2 = covered or 0.0
    uncovered_m2 = max(lot - covered_m2, 0.0) if lot is not None else 0.0
    value = COVERED_WEIGHT * covered_m2 + UNCOVERED_WEIGHT * uncovered_m2
    return value if value > 0 else None


def price_per_m2(price_usd: float, covered: Optional[float], weighted: Optional[float]) -> Optional[float]:
    if covered is None or weighted is None or weighted <= MIN_WEIGHTED_AREA_FOR_RATIO:
        return None
    return price_usd / weighted


def normalize(raw: Mapping[str, Any]) -> Optional[Listing]:
    """Return a ``Listing`` for ``raw`` or ``None`` when the record must be dropped."""

    if not isinstance(raw, Mapping):
        return None

    lat = finite_number(raw.get("latitud"))
    lng = finite_number(raw.get("longitud"))
    if lat is None or lng is None:
        return None

    price = to_float(raw.get("precio"))
    if price is None or price <= 0:
        return None

    listing_id = to_int(raw.get("id"))
    if listing_id is None:
        return None

    currency_id = to_int(raw.get("moneda"))
    price_usd = price_in_usd(price, currency_id)

    covered = positive_float(raw.get("casa_sup_cubierta"))
    lot = positive_float(raw.get("casa_sup_terreno"))
    weighted = weighted_area(covered, lot)

    rooms = to_int(raw.get("ambientes"))
    title = raw.get("titulo")

    return Listing(
        id=listing_id,
        title=title if isinstance(title, str) else "",
        lat=lat,
        lng=lng,
        price_usd=price_usd,
        currency_id=currency_id,
        cover_image_url=thumbnail_url(raw.get("imagen_principal")),
        covered_area_m2=covered,
        lot_area_m2=lot,
        weighted_area_m2=weighted,
        price_per_m2=price_per_m2(price_usd, covered, weighted),
        neighborhood=raw.get("barrio_nombre") if isinstance(raw.get("barrio_nombre"), str) else None,
        street_name=title_case(to_str(raw.get("calle"))),
        street_number=to_str(raw.get("numero")),
        room_count=rooms if rooms is not None and rooms >= 0 else None,
        created_at=to_datetime(raw.get("fecha_alta")),
        updated_at=to_datetime(raw.get("fecha_modificacion")),
    )


def normalize_many(raws: Iterable[Any]) -> List[Listing]:
    return [listing for listing in (normalize(raw) for raw in raws) if listing is not None]


__all__ = [
    "USD_CURRENCY_ID",
    "THUMBNAIL_URL_TEMPLATE",
    "thumbnail_url",
    "price_in_usd",
    "weighted_area",
    "price_per_m2",
    "normalize",
    "normalize_many",
]
