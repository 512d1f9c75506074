import logging
from dataclasses import asdict
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import or_
from sqlalchemy.orm import Session

from core.errors import NotFoundException, ValidationAppException
from modules.costing.cost import (
    compute_product_cost,
    labor_line_cost,
    material_line_cost,
    other_cost_line_cost,
)
from modules.costing.pricing import break_even_price, price_from_method, resolve_pricing, value_from_method
from modules.costing.stock import check_stock, stock_decrements
from modules.costing.types import (
    LaborLine,
    MaterialLine,
    OtherCostLine,
    PerUnitCost,
    PricingMethod,
    ProductCostProfile,
    VariantAttribute,
    VariantOverride,
)
from modules.costing.variants import effective_cost_and_price, summarize_variants, variant_display_name
from modules.materials import service as material_service
from modules.products import models, schemas
from modules.products.types import ProductStatus

logger = logging.getLogger(__name__)

# Half a cent: a derived price within this of the target rounds to it.
PRICE_TOLERANCE = 0.005


def _money(value: Optional[float]) -> Optional[float]:
    return round(value, 2) if value is not None else None


# --- model -> engine types ---------------------------------------------------


def to_material_line(line: models.ProductMaterial) -> MaterialLine:
    return MaterialLine(
        name=line.name,
        quantity=line.quantity,
        unit=line.unit,
        price_per_unit=line.price_per_unit,
        units_made=line.units_made or 1,
        library_material_id=line.library_material_id,
    )


def to_labor_line(line: models.LaborCost) -> LaborLine:
    return LaborLine(
        activity=line.activity,
        time_spent_minutes=line.time_spent_minutes,
        hourly_rate=line.hourly_rate,
        per_unit=True if line.per_unit is None else line.per_unit,
    )


def to_other_cost_line(line: models.OtherCost) -> OtherCostLine:
    return OtherCostLine(
        item=line.item,
        quantity=line.quantity,
        cost=line.cost,
        per_unit=True if line.per_unit is None else line.per_unit,
    )


def to_variant_override(variant: models.ProductVariant) -> VariantOverride:
    return VariantOverride(
        name=variant.name,
        sku=variant.sku,
        price_override=variant.price_override,
        cost_override=variant.cost_override,
        stock_level=variant.stock_level or 0,
        is_active=True if variant.is_active is None else variant.is_active,
        attributes=tuple(
            VariantAttribute(a.attribute_name, a.attribute_value, a.display_order or 0) for a in variant.attributes
        ),
    )


def build_cost_profile(product: models.Product) -> ProductCostProfile:
    return ProductCostProfile(
        batch_size=product.batch_size or 1,
        materials=tuple(to_material_line(m) for m in product.materials),
        labor_lines=tuple(to_labor_line(l) for l in product.labor_costs),
        other_cost_lines=tuple(to_other_cost_line(o) for o in product.other_costs),
    )


# --- pricing -------------------------------------------------------------------


def _resolve_pricing_input(
    method: Optional[PricingMethod],
    value: Optional[float],
    target_price: Optional[float],
    cost: float,
) -> Tuple[Optional[PricingMethod], Optional[float]]:
    """Settle on the (method, value) pair a product is priced by.

    A bare target price means the fixed ``price`` method. A method without a
    value takes its exact value from the target price so the price is kept;
    a target the method cannot reach at this cost is rejected.
    """
    if method is None:
        if value is not None:
            raise ValidationAppException("pricing_method is required when pricing_value is given")
        if target_price is None:
            return None, None
        return PricingMethod.PRICE, target_price
    if value is None:
        if target_price is None:
            raise ValidationAppException("pricing_value or target_price is required when pricing_method is set")
        value = value_from_method(method, target_price, cost, rounded=False)
        reached = price_from_method(method, value, cost)
        if abs(reached - _money(target_price)) > PRICE_TOLERANCE:
            raise ValidationAppException(
                f"target_price {target_price:.2f} cannot be reached with the {method.value} method "
                f"at a cost of {cost:.2f}; set pricing_value or use the price method"
            )
    return method, value


def _pricing_payload(product: models.Product, cost: float) -> Dict[str, Any]:
    payload: Dict[str, Any] = {
        "method": None,
        "value": None,
        "price": None,
        "profit": None,
        "margin": None,
        "markup": None,
        "costs_percentage": None,
        "break_even_price": break_even_price(cost),
    }
    if not product.pricing_method or product.pricing_value is None:
        return payload
    spec, metrics = resolve_pricing(product.pricing_method, product.pricing_value, cost)
    payload.update(asdict(metrics))
    payload["method"] = spec.method
    payload["value"] = spec.value
    return payload


def _apply_pricing(product: models.Product, method, value, target_price) -> None:
    cost = compute_product_cost(build_cost_profile(product)).total
    method, value = _resolve_pricing_input(method, value, target_price, cost)
    if method is None:
        product.pricing_method = None
        product.pricing_value = None
        product.target_price = None
        return
    spec, _ = resolve_pricing(method, value, cost)
    product.pricing_method = spec.method.value
    product.pricing_value = spec.value
    product.target_price = spec.resulting_price


# --- serialization -------------------------------------------------------------


def _costing_payload(cost: PerUnitCost) -> Dict[str, float]:
    return {
        "materials_cost": _money(cost.materials),
        "labor_cost": _money(cost.labor),
        "other_cost": _money(cost.other),
        "product_cost": _money(cost.total),
    }


def _variant_payload(variant: models.ProductVariant, base_cost: float, base_price: Optional[float]) -> Dict[str, Any]:
    override = to_variant_override(variant)
    effective = effective_cost_and_price(base_cost, base_price, override)
    return {
        "id": variant.id,
        "name": variant.name,
        "sku": variant.sku,
        "price_override": variant.price_override,
        "cost_override": variant.cost_override,
        "stock_level": override.stock_level,
        "is_active": override.is_active,
        "attributes": [
            {
                "attribute_name": a.attribute_name,
                "attribute_value": a.attribute_value,
                "display_order": a.display_order,
            }
            for a in override.attributes
        ],
        "display_name": variant_display_name(override),
        "effective_cost": _money(effective.cost),
        "effective_price": _money(effective.price),
    }


def _serialize_product(product: models.Product, detail: bool = True) -> Dict[str, Any]:
    cost = compute_product_cost(build_cost_profile(product))
    pricing = _pricing_payload(product, cost.total)
    data: Dict[str, Any] = {
        "id": product.id,
        "name": product.name,
        "sku": product.sku,
        "description": product.description,
        "category": product.category,
        "status": product.status,
        "batch_size": product.batch_size,
        "pricing_method": product.pricing_method,
        "pricing_value": product.pricing_value,
        "target_price": pricing["price"] if pricing["price"] is not None else product.target_price,
        "costing": _costing_payload(cost),
        "pricing": pricing,
        "variant_summary": asdict(summarize_variants(to_variant_override(v) for v in product.variants)),
        "created_at": product.created_at,
        "updated_at": product.updated_at,
    }
    if not detail:
        return data

    data["materials"] = [
        {
            "id": m.id,
            "name": m.name,
            "quantity": m.quantity,
            "unit": m.unit,
            "price_per_unit": m.price_per_unit,
            "units_made": m.units_made,
            "library_material_id": m.library_material_id,
            "line_cost": _money(material_line_cost(to_material_line(m))),
        }
        for m in product.materials
    ]
    data["labor_costs"] = [
        {
            "id": l.id,
            "activity": l.activity,
            "time_spent_minutes": l.time_spent_minutes,
            "hourly_rate": l.hourly_rate,
            "per_unit": l.per_unit,
            "line_cost": _money(labor_line_cost(to_labor_line(l))),
        }
        for l in product.labor_costs
    ]
    data["other_costs"] = [
        {
            "id": o.id,
            "item": o.item,
            "quantity": o.quantity,
            "cost": o.cost,
            "per_unit": o.per_unit,
            "line_cost": _money(other_cost_line_cost(to_other_cost_line(o))),
        }
        for o in product.other_costs
    ]
    data["variants"] = [_variant_payload(v, cost.total, pricing["price"]) for v in product.variants]
    return data


# --- writes --------------------------------------------------------------------


def _check_library_links(db: Session, product_in: schemas.ProductCreate) -> None:
    linked = {m.library_material_id for m in product_in.materials if m.library_material_id is not None}
    if not linked:
        return
    found = set(material_service.stock_levels(db, linked))
    missing = linked - found
    if missing:
        raise NotFoundException(f"Library material(s) not found: {', '.join(str(i) for i in sorted(missing))}")


def _replace_lines(product: models.Product, product_in: schemas.ProductCreate) -> None:
    product.materials = [models.ProductMaterial(**m.model_dump()) for m in product_in.materials]
    product.labor_costs = [models.LaborCost(**l.model_dump()) for l in product_in.labor_costs]
    product.other_costs = [models.OtherCost(**o.model_dump()) for o in product_in.other_costs]
    variants = []
    for v in product_in.variants:
        variant = models.ProductVariant(**v.model_dump(exclude={"attributes"}))
        variant.attributes = [models.VariantAttribute(**a.model_dump()) for a in v.attributes]
        variants.append(variant)
    product.variants = variants


def _apply_status_transition(
    db: Session,
    product: models.Product,
    previous_status: Optional[str],
    stock_batch_size: Optional[int],
) -> None:
    """Take one batch of materials out of stock when a product goes on sale.

    Happens once per transition into ``on_sale``; saving a product that is
    already on sale leaves stock alone. The batch size is the explicit
    ``stock_batch_size`` or, when omitted, the product's own batch size.
    """
    if product.status != ProductStatus.ON_SALE.value or previous_status == ProductStatus.ON_SALE.value:
        return
    batch_size = stock_batch_size or product.batch_size or 1
    decrements = stock_decrements((to_material_line(m) for m in product.materials), batch_size)
    new_levels = material_service.decrement_stock(db, decrements)
    logger.info(
        "Product %s went on sale; decremented %s material(s) for a batch of %s",
        product.id,
        len(new_levels),
        batch_size,
        extra={"product_id": product.id},
    )


def create_product(db: Session, product_in: schemas.ProductCreate) -> Dict[str, Any]:
    _check_library_links(db, product_in)
    product = models.Product(
        name=product_in.name,
        sku=product_in.sku,
        description=product_in.description,
        category=product_in.category,
        status=product_in.status.value,
        batch_size=product_in.batch_size,
    )
    _replace_lines(product, product_in)
    _apply_pricing(product, product_in.pricing_method, product_in.pricing_value, product_in.target_price)

    db.add(product)
    db.flush()
    _apply_status_transition(db, product, None, product_in.stock_batch_size)
    db.commit()
    db.refresh(product)
    logger.info("Created product %s (%s)", product.id, product.name, extra={"product_id": product.id})
    return _serialize_product(product)


def update_product(db: Session, product_id: int, product_in: schemas.ProductUpdate) -> Dict[str, Any]:
    product = get_product_model(db, product_id)
    _check_library_links(db, product_in)
    previous_status = product.status

    product.name = product_in.name
    product.sku = product_in.sku
    product.description = product_in.description
    product.category = product_in.category
    product.status = product_in.status.value
    product.batch_size = product_in.batch_size
    _replace_lines(product, product_in)
    _apply_pricing(product, product_in.pricing_method, product_in.pricing_value, product_in.target_price)
    _apply_status_transition(db, product, previous_status, product_in.stock_batch_size)

    db.commit()
    db.refresh(product)
    return _serialize_product(product)


def update_pricing(db: Session, product_id: int, pricing_in: schemas.PricingUpdate) -> Dict[str, Any]:
    product = get_product_model(db, product_id)
    _apply_pricing(product, pricing_in.method, pricing_in.value, None)
    db.commit()
    db.refresh(product)
    return _serialize_product(product)


def update_status(db: Session, product_id: int, status_in: schemas.StatusUpdate) -> Dict[str, Any]:
    product = get_product_model(db, product_id)
    previous_status = product.status
    product.status = status_in.status.value
    _apply_status_transition(db, product, previous_status, status_in.stock_batch_size)
    db.commit()
    db.refresh(product)
    return _serialize_product(product)


def delete_product(db: Session, product_id: int) -> None:
    product = get_product_model(db, product_id)
    db.delete(product)
    db.commit()
    logger.info("Deleted product %s", product_id, extra={"product_id": product_id})


# --- reads ---------------------------------------------------------------------


def get_product_model(db: Session, product_id: int) -> models.Product:
    product = db.query(models.Product).filter(models.Product.id == product_id).first()
    if not product:
        raise NotFoundException("Product not found")
    return product


def get_product(db: Session, product_id: int) -> Dict[str, Any]:
    return _serialize_product(get_product_model(db, product_id))


def list_products(
    db: Session, status: Optional[ProductStatus] = None, search: Optional[str] = None
) -> List[Dict[str, Any]]:
    query = db.query(models.Product)
    if status is not None:
        query = query.filter(models.Product.status == status.value)
    if search:
        pattern = f"%{search}%"
        query = query.filter(
            or_(
                models.Product.name.ilike(pattern),
                models.Product.sku.ilike(pattern),
                models.Product.category.ilike(pattern),
            )
        )
    products = query.order_by(models.Product.created_at.desc(), models.Product.id.desc()).all()
    return [_serialize_product(p, detail=False) for p in products]


def list_variants(db: Session, product_id: int) -> List[Dict[str, Any]]:
    return get_product(db, product_id)["variants"]


def check_product_stock(db: Session, product_id: int, batch_size: Optional[int] = None) -> Dict[str, Any]:
    product = get_product_model(db, product_id)
    batch_size = batch_size or product.batch_size or 1
    lines = [to_material_line(m) for m in product.materials]
    levels = material_service.stock_levels(db, (l.library_material_id for l in lines))
    results = check_stock(lines, batch_size, levels.get)
    return {
        "product_id": product.id,
        "batch_size": batch_size,
        "sufficient": all(r.sufficient for r in results),
        "lines": [
            {
                "material_name": r.material_name,
                "library_material_id": r.library_material_id,
                "unit": r.unit,
                "current_stock": r.current_stock,
                "required_quantity": r.required_quantity,
                "shortfall": r.shortfall,
            }
            for r in results
        ],
    }
