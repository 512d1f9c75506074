from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from core.database import get_db
from modules.user_settings import schemas, service

router = APIRouter(prefix="/settings", tags=["settings"])


@router.get("", response_model=schemas.SettingsRead)
def get_settings_endpoint(db: Session = Depends(get_db)):
    return service.get_settings(db)


@router.put("", response_model=schemas.SettingsRead)
def update_settings_endpoint(settings_in: schemas.SettingsUpdate, db: Session = Depends(get_db)):
    return service.update_settings(db, settings_in)
