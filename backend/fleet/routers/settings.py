from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from fleet.database import get_db
from fleet.dependencies import require_tenant
from fleet.models.settings import TenantFuelPrice, TenantSettings
from fleet.schemas.settings import FuelSettings, FuelSettingsUpdate
from fleet.services.auth_service import TenantContext
from fleet.utils.dates import utc_now

router = APIRouter(prefix="/settings", tags=["settings"])


def _fuel_settings(db: Session, ctx: TenantContext) -> FuelSettings:
    row = db.query(TenantSettings).filter(TenantSettings.tenant_id == ctx.tenant_id).first()
    prices = db.query(TenantFuelPrice).filter(TenantFuelPrice.tenant_id == ctx.tenant_id).all()
    return FuelSettings(
        default_station_name=row.default_station_name if row else None,
        prices={p.fuel_type: p.price_per_liter for p in prices},
    )


@router.get("/fuel", response_model=FuelSettings)
async def get_fuel_settings(ctx: TenantContext = Depends(require_tenant), db: Session = Depends(get_db)):
    return _fuel_settings(db, ctx)


@router.put("/fuel", response_model=FuelSettings)
async def update_fuel_settings(req: FuelSettingsUpdate, ctx: TenantContext = Depends(require_tenant),
                               db: Session = Depends(get_db)):
    """Update the default station and prices; a ``null`` price removes it."""
    for fuel_type, price in req.prices.items():
        if price is not None and price <= 0:
            raise HTTPException(status_code=400, detail=f"Price for {fuel_type} must be positive")

    if "default_station_name" in req.model_fields_set:
        row = db.query(TenantSettings).filter(TenantSettings.tenant_id == ctx.tenant_id).first()
        if not row:
            row = TenantSettings(tenant_id=ctx.tenant_id)
            db.add(row)
        row.default_station_name = (req.default_station_name or "").strip() or None
        row.updated_at = utc_now()

    for fuel_type, price in req.prices.items():
        existing = db.query(TenantFuelPrice).filter(
            TenantFuelPrice.tenant_id == ctx.tenant_id,
            TenantFuelPrice.fuel_type == fuel_type,
        ).first()
        if price is None:
            if existing:
                db.delete(existing)
        elif existing:
            existing.price_per_liter = price
        else:
            db.add(TenantFuelPrice(tenant_id=ctx.tenant_id, fuel_type=fuel_type, price_per_liter=price))

    db.commit()
    return _fuel_settings(db, ctx)
