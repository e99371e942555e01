# WORKFLOW: Bulk price import/export endpoint.
# Used by: Clients uploading or downloading price archives
# Endpoints:
# 1. POST /prices - Upload a ZIP holding data.csv, import it atomically, return totals
# 2. GET /prices - Download every stored price as a ZIP holding data.csv
# 3. Any other method - 405 without touching the store
#
# Request flow: HTTP request -> method dispatch -> PriceTransferService -> JSON summary or ZIP body
# Pipeline errors carry their own status codes; anything unexpected becomes a 500.

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, HTTPException, Request, Response, UploadFile, status

from api.schemas.response import ErrorResponse, ImportSummary
from core.config import settings
from core.errors import MethodNotAllowed, MissingUpload, PriceTransferError, UploadTooLarge
from db.gateway import PriceStore
from db.session import get_price_store
from services.price_transfer import PriceTransferService, create_price_transfer_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["prices"])

ALLOWED_METHODS = "GET, POST"

_ERROR_RESPONSES = {
    status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse},
    status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorResponse},
}


def get_price_transfer_service(store: PriceStore = Depends(get_price_store)) -> PriceTransferService:
    return create_price_transfer_service(store)


def _read_upload(file: Optional[UploadFile]) -> bytes:
    if file is None:
        raise MissingUpload("Failed to read file: multipart field 'file' is required")

    limit = settings.max_upload_bytes
    payload = file.file.read() if limit is None else file.file.read(limit + 1)
    if limit is not None and len(payload) > limit:
        raise UploadTooLarge(f"Upload exceeds {limit} bytes")
    logger.info(f"File size: {len(payload)} bytes")
    return payload


def _http_error(error: Exception) -> HTTPException:
    if isinstance(error, PriceTransferError):
        return HTTPException(status_code=error.status_code, detail=str(error))
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=f"Internal error: {error}",
    )


@router.post("/prices", response_model=ImportSummary, responses=_ERROR_RESPONSES)
def upload_prices(
    file: Optional[UploadFile] = File(None),
    service: PriceTransferService = Depends(get_price_transfer_service),
):
    """
    Import a ZIP archive whose data.csv rows are id, name, category, price, created_date.

    All rows are inserted in one transaction; a single bad row rolls back the batch.
    """
    logger.info("Received POST request on /prices")
    try:
        payload = _read_upload(file)
        return service.import_archive(payload)
    except PriceTransferError as e:
        logger.error(f"Upload failed with {e.status_code}: {e}")
        raise _http_error(e)
    except Exception as e:
        logger.exception(f"Upload failed unexpectedly: {e}")
        raise _http_error(e)


@router.get(
    "/prices",
    response_class=Response,
    responses={200: {"content": {"application/zip": {}}}, 500: {"model": ErrorResponse}},
)
def download_prices(service: PriceTransferService = Depends(get_price_transfer_service)):
    """
    Export all stored prices as a ZIP whose data.csv rows are id, created_date, name, category, price.
    """
    logger.info("Received GET request on /prices")
    try:
        archive = service.export_archive()
    except Exception as e:
        logger.error(f"Download failed: {e}")
        raise _http_error(e)

    return Response(
        content=archive,
        media_type="application/zip",
        headers={"Content-Disposition": f"attachment; filename={settings.download_filename}"},
    )


@router.api_route(
    "/prices",
    methods=["PUT", "PATCH", "DELETE", "HEAD", "OPTIONS"],
    include_in_schema=False,
)
def prices_method_not_allowed(request: Request):
    logger.info(f"Rejected {request.method} request on /prices")
    error = MethodNotAllowed("Method not allowed")
    raise HTTPException(
        status_code=error.status_code,
        detail=str(error),
        headers={"Allow": ALLOWED_METHODS},
    )
