import logging
from typing import Dict, Iterable, List, Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session

from core.errors import NotFoundException
from modules.materials import models, schemas
from modules.products.models import ProductMaterial

logger = logging.getLogger(__name__)

_NULLABLE_FIELDS = {"details", "supplier", "supplier_link", "last_purchased_date", "last_purchased_price", "category"}


def create_material(db: Session, material_in: schemas.MaterialCreate) -> models.Material:
    material = models.Material(**material_in.model_dump())
    db.add(material)
    db.commit()
    db.refresh(material)
    logger.info("Created material %s (%s)", material.id, material.name)
    return material


def list_materials(
    db: Session,
    search: Optional[str] = None,
    category: Optional[str] = None,
    low_stock: bool = False,
    sort_by: schemas.MaterialSortField = schemas.MaterialSortField.CREATED_AT,
    sort_order: schemas.SortOrder = schemas.SortOrder.DESC,
) -> List[models.Material]:
    query = db.query(models.Material)
    if search:
        pattern = f"%{search}%"
        query = query.filter(
            or_(
                models.Material.name.ilike(pattern),
                models.Material.supplier.ilike(pattern),
                models.Material.category.ilike(pattern),
                models.Material.details.ilike(pattern),
            )
        )
    if category and category != "all":
        query = query.filter(models.Material.category == category)
    if low_stock:
        query = query.filter(models.Material.stock_level <= models.Material.reorder_point)

    column = getattr(models.Material, sort_by.value)
    ordering = column.asc() if sort_order == schemas.SortOrder.ASC else column.desc()
    return query.order_by(ordering, models.Material.id.asc()).all()


def list_categories(db: Session) -> List[str]:
    rows = (
        db.query(models.Material.category)
        .filter(models.Material.category.isnot(None))
        .distinct()
        .order_by(models.Material.category)
        .all()
    )
    return [row[0] for row in rows if row[0]]


def get_material(db: Session, material_id: int) -> models.Material:
    material = db.query(models.Material).filter(models.Material.id == material_id).first()
    if not material:
        raise NotFoundException("Material not found")
    return material


def update_material(db: Session, material_id: int, material_in: schemas.MaterialUpdate) -> models.Material:
    material = get_material(db, material_id)
    changes = {
        field: value
        for field, value in material_in.model_dump(exclude_unset=True).items()
        if value is not None or field in _NULLABLE_FIELDS
    }
    for field, value in changes.items():
        setattr(material, field, value)
    if ("price" in changes or "quantity" in changes) and "price_per_unit" not in changes:
        material.price_per_unit = material.price / material.quantity if material.quantity else material.price
    db.commit()
    db.refresh(material)
    return material


def delete_material(db: Session, material_id: int) -> None:
    material = get_material(db, material_id)
    unlinked = (
        db.query(ProductMaterial)
        .filter(ProductMaterial.library_material_id == material_id)
        .update({ProductMaterial.library_material_id: None}, synchronize_session=False)
    )
    db.delete(material)
    db.commit()
    logger.info("Deleted material %s, unlinked %s product line(s)", material_id, unlinked)


def stock_levels(db: Session, material_ids: Iterable[int]) -> Dict[int, float]:
    ids = {mid for mid in material_ids if mid is not None}
    if not ids:
        return {}
    rows = db.query(models.Material.id, models.Material.stock_level).filter(models.Material.id.in_(ids)).all()
    return {row[0]: row[1] for row in rows}


def decrement_stock(db: Session, decrements: Dict[int, float]) -> Dict[int, float]:
    """Take stock out of library materials without committing.

    Stock never goes below zero; a decrement larger than the stock on hand is
    clamped and logged. Returns the new stock level per material.
    """
    if not decrements:
        return {}
    materials = db.query(models.Material).filter(models.Material.id.in_(decrements.keys())).all()
    new_levels: Dict[int, float] = {}
    for material in materials:
        amount = decrements[material.id]
        current = material.stock_level or 0.0
        if amount > current:
            logger.warning(
                "Stock for material %s short by %.3f %s; clamping to 0",
                material.id,
                amount - current,
                material.unit,
                extra={"material_id": material.id},
            )
        material.stock_level = max(0.0, current - amount)
        new_levels[material.id] = material.stock_level
    missing = set(decrements) - set(new_levels)
    if missing:
        logger.warning("Stock decrement skipped for unknown material(s): %s", sorted(missing))
    return new_levels
