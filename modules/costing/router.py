from dataclasses import asdict

from fastapi import APIRouter

from modules.costing import schemas
from modules.costing.pricing import break_even_price, resolve_pricing, value_from_method
from modules.costing.types import PricingMethod

router = APIRouter(prefix="/pricing", tags=["pricing"])


@router.get("/methods", response_model=list[schemas.PricingMethodRead])
def list_pricing_methods_endpoint():
    return [{"method": m, "description": m.description} for m in PricingMethod]


@router.post("/preview", response_model=schemas.PricingPreviewRead)
def preview_pricing_endpoint(request: schemas.PricingPreviewRequest):
    spec, metrics = resolve_pricing(request.method, request.value, request.cost)
    return {
        "method": spec.method,
        "value": spec.value,
        "break_even_price": break_even_price(request.cost),
        **asdict(metrics),
    }


@router.post("/convert", response_model=schemas.PricingConvertRead)
def convert_pricing_endpoint(request: schemas.PricingConvertRequest):
    return {"method": request.method, "value": value_from_method(request.method, request.price, request.cost)}
