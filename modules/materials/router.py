from typing import Optional

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from core.database import get_db
from modules.materials import schemas, service

router = APIRouter(prefix="/materials", tags=["materials"])


@router.post("", response_model=schemas.MaterialRead, status_code=status.HTTP_201_CREATED)
def create_material_endpoint(material_in: schemas.MaterialCreate, db: Session = Depends(get_db)):
    return service.create_material(db, material_in)


@router.get("", response_model=list[schemas.MaterialRead])
def list_materials_endpoint(
    search: Optional[str] = None,
    category: Optional[str] = None,
    low_stock: bool = False,
    sort_by: schemas.MaterialSortField = schemas.MaterialSortField.CREATED_AT,
    sort_order: schemas.SortOrder = schemas.SortOrder.DESC,
    db: Session = Depends(get_db),
):
    return service.list_materials(db, search, category, low_stock, sort_by, sort_order)


@router.get("/categories", response_model=list[str])
def list_categories_endpoint(db: Session = Depends(get_db)):
    return service.list_categories(db)


@router.get("/{material_id}", response_model=schemas.MaterialRead)
def get_material_endpoint(material_id: int, db: Session = Depends(get_db)):
    return service.get_material(db, material_id)


@router.patch("/{material_id}", response_model=schemas.MaterialRead)
def update_material_endpoint(material_id: int, material_in: schemas.MaterialUpdate, db: Session = Depends(get_db)):
    return service.update_material(db, material_id, material_in)


@router.delete("/{material_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_material_endpoint(material_id: int, db: Session = Depends(get_db)):
    service.delete_material(db, material_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
