from typing import Any, Dict

from sqlalchemy.orm import Session

from core.settings import default_units, get_settings as get_app_settings
from modules.user_settings import models, schemas


def _serialize(row: models.UserSettings) -> Dict[str, Any]:
    return {
        "currency": row.currency,
        "tax_percentage": row.tax_percentage or 0.0,
        "revenue_goal": row.revenue_goal,
        "labor_hourly_cost": row.labor_hourly_cost,
        "unit_system": row.unit_system,
        "units": row.units or default_units(row.unit_system),
    }


def _defaults() -> Dict[str, Any]:
    return {
        "currency": get_app_settings().default_currency,
        "tax_percentage": 0.0,
        "revenue_goal": None,
        "labor_hourly_cost": None,
        "unit_system": schemas.UnitSystem.METRIC.value,
        "units": default_units(schemas.UnitSystem.METRIC.value),
    }


def get_settings(db: Session) -> Dict[str, Any]:
    row = db.query(models.UserSettings).first()
    if not row:
        return _defaults()
    return _serialize(row)


def update_settings(db: Session, settings_in: schemas.SettingsUpdate) -> Dict[str, Any]:
    row = db.query(models.UserSettings).first()
    if not row:
        row = models.UserSettings(**_defaults())
        db.add(row)

    changes = settings_in.model_dump(exclude_unset=True)
    if "unit_system" in changes and changes["unit_system"] is not None:
        changes["unit_system"] = changes["unit_system"].value
        if "units" not in changes:
            changes["units"] = default_units(changes["unit_system"])
    for field, value in changes.items():
        if value is None and field in ("currency", "tax_percentage", "unit_system", "units"):
            continue
        setattr(row, field, value)

    db.commit()
    db.refresh(row)
    return _serialize(row)
