from typing import Optional

from fastapi import APIRouter, Depends, Query, Response, status
from fastapi.responses import StreamingResponse
from sqlalchemy.orm import Session

from core.database import get_db
from modules.products import schemas, service
from modules.products.types import ProductStatus
from modules.reports.excel import build_product_cost_excel
from modules.user_settings import service as settings_service

router = APIRouter(prefix="/products", tags=["products"])


@router.post("", response_model=schemas.ProductRead, status_code=status.HTTP_201_CREATED)
def create_product_endpoint(product_in: schemas.ProductCreate, db: Session = Depends(get_db)):
    return service.create_product(db, product_in)


@router.get("", response_model=list[schemas.ProductSummaryRead])
def list_products_endpoint(
    product_status: Optional[ProductStatus] = Query(None, alias="status"),
    search: Optional[str] = None,
    db: Session = Depends(get_db),
):
    return service.list_products(db, status=product_status, search=search)


@router.get("/{product_id}", response_model=schemas.ProductRead)
def get_product_endpoint(product_id: int, db: Session = Depends(get_db)):
    return service.get_product(db, product_id)


@router.put("/{product_id}", response_model=schemas.ProductRead)
def update_product_endpoint(product_id: int, product_in: schemas.ProductUpdate, db: Session = Depends(get_db)):
    return service.update_product(db, product_id, product_in)


@router.delete("/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_product_endpoint(product_id: int, db: Session = Depends(get_db)):
    service.delete_product(db, product_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.patch("/{product_id}/pricing", response_model=schemas.ProductRead)
def update_pricing_endpoint(product_id: int, pricing_in: schemas.PricingUpdate, db: Session = Depends(get_db)):
    return service.update_pricing(db, product_id, pricing_in)


@router.patch("/{product_id}/status", response_model=schemas.ProductRead)
def update_status_endpoint(product_id: int, status_in: schemas.StatusUpdate, db: Session = Depends(get_db)):
    return service.update_status(db, product_id, status_in)


@router.get("/{product_id}/stock-check", response_model=schemas.StockCheckRead)
def stock_check_endpoint(
    product_id: int,
    batch_size: Optional[int] = Query(None, ge=1),
    db: Session = Depends(get_db),
):
    return service.check_product_stock(db, product_id, batch_size)


@router.get("/{product_id}/variants", response_model=list[schemas.VariantRead])
def list_variants_endpoint(product_id: int, db: Session = Depends(get_db)):
    return service.list_variants(db, product_id)


@router.get("/{product_id}/excel")
def download_product_excel(product_id: int, db: Session = Depends(get_db)):
    product_data = service.get_product(db, product_id)
    currency = settings_service.get_settings(db)["currency"]
    stream = build_product_cost_excel(product_data, currency=currency)
    filename = f"product_{product_id}_costing.xlsx"
    return StreamingResponse(
        stream,
        media_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )
