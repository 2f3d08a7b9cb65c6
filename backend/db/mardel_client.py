"""HTTP client for the Mar del Inmueble listings API."""

from __future__ import annotations

import os
from typing import Any, Dict, Iterator, List, Optional

import requests

from ..utils.logging import get_logger, kv

LOGGER = get_logger("db.mardel")

BASE_URL = os.getenv("MARDEL_API_BASE_URL", "https://api.mardelinmueble.com/v3/mardelinmueble").rstrip("/")
ITEMS_PER_PAGE = int(os.getenv("MARDEL_ITEMS_PER_PAGE", "600"))
MAX_PAGES = int(os.getenv("MARDEL_MAX_PAGES", "5"))
OPERATION_TYPE = os.getenv("MARDEL_OPERATION_TYPE", "1")  # 1 = sale
PROPERTY_TYPE = os.getenv("MARDEL_PROPERTY_TYPE", "1")  # 1 = house
CITY_ID = os.getenv("MARDEL_CITY_ID", "1")  # 1 = Mar del Plata
TIMEOUT = float(os.getenv("MARDEL_TIMEOUT", "30"))

USER_AGENT = "valor-m2-dashboard/1.0"
MAX_ERROR_BODY = 500


class UpstreamError(RuntimeError):
    """The listings API failed or answered with a payload we refuse to process."""

    def __init__(self, message: str, status_code: Optional[int] = None, body: str = "") -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body[:MAX_ERROR_BODY]


class MardelClient:
    def __init__(self, base_url: Optional[str] = None, session: Optional[requests.Session] = None, timeout: float = TIMEOUT):
        self.base = (base_url or BASE_URL).rstrip("/")
        self.session = session or requests.Session()
        self.session.headers.update({"Accept": "application/json", "User-Agent": USER_AGENT})
        self.timeout = timeout

    def _get(self, path: str, params: Dict[str, str] | None = None) -> Dict[str, Any]:
        url = f"{self.base}{path}"
        try:
            r = self.session.get(url, params=params, timeout=self.timeout)
        except requests.RequestException as exc:
            LOGGER.error("upstream_request_failed %s", kv(url=url, error=exc))
            raise UpstreamError(f"Request to {url} failed: {exc}") from exc
        if not r.ok:
            LOGGER.warning("upstream_bad_status url=%s status=%s", url, r.status_code)
            raise UpstreamError(f"Upstream answered {r.status_code}", status_code=r.status_code, body=r.text or "")
        try:
            data = r.json()
        except ValueError as exc:
            raise UpstreamError("Upstream answered with invalid JSON", status_code=r.status_code, body=r.text or "") from exc
        if not isinstance(data, dict) or not data.get("success"):
            raise UpstreamError("Unexpected upstream response", status_code=r.status_code)
        return data

    def iter_listing_pages(
        self,
        items_per_page: int = ITEMS_PER_PAGE,
        max_pages: int = MAX_PAGES,
    ) -> Iterator[List[Dict[str, Any]]]:
        """
        Yield raw listing batches page by page. A malformed page aborts the whole
        iteration with ``UpstreamError``.
        """
        params = {
            "page": "1",
            "items_x_page": str(items_per_page),
            "id_tipo_operacion": OPERATION_TYPE,
            "id_tipo_inmueble": PROPERTY_TYPE,
            "id_ciudad": CITY_ID,
        }
        fetched = 0
        for page in range(1, max_pages + 1):
            params["page"] = str(page)
            data = self._get("/inmuebles/", params=params)
            batch = data.get("inmuebles")
            if not isinstance(batch, list):
                raise UpstreamError("Upstream 'inmuebles' is not a list")
            if not batch:
                break
            yield batch
            fetched += len(batch)
            total = data.get("total")
            if len(batch) < items_per_page:
                break
            if isinstance(total, int) and fetched >= total:
                break

    def list_raw_listings(self, items_per_page: int = ITEMS_PER_PAGE, max_pages: int = MAX_PAGES) -> List[Dict[str, Any]]:
        rows: List[Dict[str, Any]] = []
        for batch in self.iter_listing_pages(items_per_page=items_per_page, max_pages=max_pages):
            rows.extend(batch)
        LOGGER.info("upstream_listings_fetched count=%s", len(rows))
        return rows

    def get_listing_detail(self, listing_id: int) -> Dict[str, Any]:
        return self._get(f"/inmuebles/{listing_id}")


__all__ = ["MardelClient", "UpstreamError", "BASE_URL"]
