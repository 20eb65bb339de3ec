# backend/stocktrail/api/routes.py

import io
import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, UploadFile, status
from fastapi.responses import StreamingResponse

from stocktrail.api.deps import (
    CurrentUser,
    get_current_user,
    get_product_service,
    require_manager,
)
from stocktrail.api.schemas import (
    Deleted,
    ErrorOut,
    HistoryEnvelope,
    ImportResult,
    ProductEnvelope,
    ProductIn,
    ProductPage,
)
from stocktrail.core.config import settings
from stocktrail.core.errors import ValidationError
from stocktrail.services.csv_io import generate_csv, parse_csv
from stocktrail.services.products import ProductService

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/products",
    tags=["products"],
    responses={
        400: {"model": ErrorOut},
        401: {"model": ErrorOut},
        404: {"model": ErrorOut},
    },
)


def _read_csv_upload(file: Optional[UploadFile]) -> bytes:
    if file is None or not file.filename:
        raise ValidationError("No CSV file uploaded.")

    content_type = file.content_type or ""
    if "csv" not in content_type and not file.filename.lower().endswith(".csv"):
        raise ValidationError("Please upload only CSV file.")

    # read one byte past the limit to detect oversize files
    content = file.file.read(settings.max_upload_bytes + 1)
    if len(content) > settings.max_upload_bytes:
        raise ValidationError("CSV file is too large.")
    return content

# ---------- PRODUCTS (viewer+manager can read) ----------

@router.get("", response_model=ProductPage)
def list_products(
    page: int = 1,
    limit: int = settings.default_page_size,
    search: Optional[str] = None,
    sort: Optional[str] = None,
    order: Optional[str] = None,
    service: ProductService = Depends(get_product_service),
    _user: CurrentUser = Depends(get_current_user),
):
    result = service.get_products(page=page, limit=limit, name=search, sort=sort, order=order)
    return {"status": "success", **result}


@router.get("/export")
def export_products(service: ProductService = Depends(get_product_service)):
    csv_text = generate_csv(service.get_all_products())

    return StreamingResponse(
        io.BytesIO(csv_text.encode("utf-8")),
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="products_export.csv"'},
    )


@router.get("/{product_id}/history", response_model=HistoryEnvelope)
def product_history(
    product_id: int,
    service: ProductService = Depends(get_product_service),
    _user: CurrentUser = Depends(get_current_user),
):
    return {"status": "success", "data": service.get_product_history(product_id)}

# ---------- PRODUCTS (manager only can write) ----------

@router.post("", response_model=ProductEnvelope, status_code=status.HTTP_201_CREATED)
def create_product(
    payload: ProductIn,
    service: ProductService = Depends(get_product_service),
    _user: CurrentUser = Depends(require_manager),
):
    return {"status": "success", "data": service.create_product(payload.model_dump())}


@router.post("/import", response_model=ImportResult)
def import_products(
    file: Optional[UploadFile] = File(None),
    service: ProductService = Depends(get_product_service),
    user: CurrentUser = Depends(require_manager),
):
    rows = parse_csv(_read_csv_upload(file))
    logger.info("CSV import of %d row(s) started by %s", len(rows), user.username)

    stats = service.import_products(rows)
    return {
        "status": "success",
        "message": f"{stats['added']} products added, {stats['skipped']} skipped.",
        **stats,
    }


@router.put("/{product_id}", response_model=ProductEnvelope)
def update_product(
    product_id: int,
    payload: ProductIn,
    service: ProductService = Depends(get_product_service),
    user: CurrentUser = Depends(require_manager),
):
    updated = service.update_product(product_id, payload.model_dump(), changed_by=user.username)
    return {"status": "success", "data": updated}


@router.delete("/{product_id}", response_model=Deleted)
def delete_product(
    product_id: int,
    service: ProductService = Depends(get_product_service),
    _user: CurrentUser = Depends(require_manager),
):
    service.delete_product(product_id)
    return {"status": "success", "message": "Product deleted."}
