from pathlib import Path

from fastapi import APIRouter, Depends, FastAPI, HTTPException
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

try:
    from dotenv import load_dotenv
except ImportError:  # pragma: no cover - optional dependency
    load_dotenv = None

if load_dotenv is not None:
    load_dotenv(dotenv_path=Path(__file__).resolve().parents[1] / ".env", override=False)

from .db.mardel_client import UpstreamError
from .models.listing import ListingImages, ListingsResponse
from .services.listings_service import ListingsService, get_listings_service
from .utils.logging import get_logger, kv

LOGGER = get_logger("api")

app = FastAPI(title="Valor m² · Mar del Plata")
router = APIRouter(prefix="/api")


def _upstream_failure(exc: UpstreamError) -> HTTPException:
    return HTTPException(
        502,
        detail={
            "error": "Error al consultar la API externa",
            "upstream_status": exc.status_code,
            "upstream_body": exc.body,
        },
    )


@router.get("/listings", response_model=ListingsResponse)
def list_listings(service: ListingsService = Depends(get_listings_service)):
    try:
        return service.build_payload()
    except UpstreamError as exc:
        LOGGER.warning("listings_upstream_error %s", kv(status=exc.status_code, error=exc))
        raise _upstream_failure(exc) from exc


@router.get("/listings/{listing_id}/images", response_model=ListingImages)
def listing_images(listing_id: int, service: ListingsService = Depends(get_listings_service)):
    try:
        return service.listing_images(listing_id)
    except UpstreamError as exc:
        LOGGER.warning("images_upstream_error %s", kv(id=listing_id, status=exc.status_code, error=exc))
        raise _upstream_failure(exc) from exc


@router.get("/health")
def health(): return {"status": "ok"}


@app.exception_handler(Exception)
def unexpected_error(request, exc: Exception):
    LOGGER.exception("unhandled_error path=%s", request.url.path)
    return JSONResponse(status_code=500, content=jsonable_encoder({"detail": {"error": "Error inesperado consultando la API"}}))


app.include_router(router)
