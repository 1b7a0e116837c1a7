import uuid
from datetime import date

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from fleet.config import settings
from fleet.database import get_db
from fleet.dependencies import require_tenant
from fleet.models.settings import TenantFuelPrice, TenantSettings
from fleet.models.supply import Supply
from fleet.routers.drivers import get_driver_or_404
from fleet.routers.vehicles import get_vehicle_or_404
from fleet.schemas.supply import SupplyCreate, SupplyListResponse, SupplyResponse, SupplyUpdate
from fleet.schemas.vehicle import VehicleSummary
from fleet.services.auth_service import TenantContext
from fleet.services.list_specs import SUPPLY_LIST
from fleet.services.query import DateRange, run_list
from fleet.utils.dates import db_values, utc_now

router = APIRouter(prefix="/supplies", tags=["supplies"])


def supply_total(quantity_liters: float, price_per_unit: float) -> float:
    return round(quantity_liters * price_per_unit, 2)


def _supply_to_response(s: Supply) -> SupplyResponse:
    vehicle = None
    if s.vehicle is not None:
        vehicle = VehicleSummary(id=s.vehicle.id, plate=s.vehicle.plate, brand=s.vehicle.brand, model=s.vehicle.model)
    return SupplyResponse(
        id=s.id,
        vehicle_id=s.vehicle_id,
        vehicle=vehicle,
        driver_id=s.driver_id,
        supply_date=s.supply_date,
        odometer_reading=s.odometer_reading,
        fuel_type=s.fuel_type,
        quantity_liters=s.quantity_liters,
        price_per_unit=s.price_per_unit,
        total_cost=s.total_cost,
        gas_station_name=s.gas_station_name,
        invoice_number=s.invoice_number,
        notes=s.notes,
        created_at=s.created_at,
        updated_at=s.updated_at,
    )


def _get_or_404(db: Session, ctx: TenantContext, supply_id: str) -> Supply:
    s = db.query(Supply).filter(Supply.id == supply_id, Supply.tenant_id == ctx.tenant_id).first()
    if not s:
        raise HTTPException(status_code=404, detail="Supply not found")
    return s


def _configured_price(db: Session, ctx: TenantContext, fuel_type: str) -> float:
    row = db.query(TenantFuelPrice).filter(
        TenantFuelPrice.tenant_id == ctx.tenant_id,
        TenantFuelPrice.fuel_type == fuel_type,
    ).first()
    if not row:
        raise HTTPException(status_code=400, detail=f"price_per_unit is required: no price configured for {fuel_type}")
    return row.price_per_liter


def _default_station(db: Session, ctx: TenantContext) -> str | None:
    row = db.query(TenantSettings).filter(TenantSettings.tenant_id == ctx.tenant_id).first()
    return row.default_station_name if row else None


@router.post("", response_model=SupplyResponse, status_code=201)
async def create_supply(req: SupplyCreate, ctx: TenantContext = Depends(require_tenant),
                        db: Session = Depends(get_db)):
    get_vehicle_or_404(db, ctx, req.vehicle_id)
    if req.driver_id:
        get_driver_or_404(db, ctx, req.driver_id)

    data = db_values(req.model_dump())
    data["driver_id"] = data["driver_id"] or None
    if data["price_per_unit"] is None:
        data["price_per_unit"] = _configured_price(db, ctx, req.fuel_type)
    if not data["gas_station_name"]:
        data["gas_station_name"] = _default_station(db, ctx)

    now = utc_now()
    s = Supply(
        id=str(uuid.uuid4()),
        tenant_id=ctx.tenant_id,
        total_cost=supply_total(data["quantity_liters"], data["price_per_unit"]),
        created_at=now,
        updated_at=now,
        **data,
    )
    db.add(s)
    db.commit()
    db.refresh(s)
    return _supply_to_response(s)


@router.get("", response_model=SupplyListResponse)
async def list_supplies(
    vehicle_id: str | None = None,
    driver_id: str | None = None,
    fuel_type: str | None = None,
    supply_from: date | None = None,
    supply_to: date | None = None,
    page: int = 0,
    per_page: int = settings.default_page_size,
    ctx: TenantContext = Depends(require_tenant),
    db: Session = Depends(get_db),
):
    criteria = {
        "vehicle_id": vehicle_id,
        "driver_id": driver_id,
        "fuel_type": fuel_type,
        "supply_date": DateRange(supply_from, supply_to),
    }
    result = run_list(db, ctx, SUPPLY_LIST, criteria, page, per_page)
    return SupplyListResponse(
        supplies=[_supply_to_response(s) for s in result.items],
        total=result.total,
        page=result.page,
        per_page=result.per_page,
        has_more=result.has_more,
        message=result.message,
    )


@router.get("/{supply_id}", response_model=SupplyResponse)
async def get_supply(supply_id: str, ctx: TenantContext = Depends(require_tenant),
                     db: Session = Depends(get_db)):
    return _supply_to_response(_get_or_404(db, ctx, supply_id))


@router.put("/{supply_id}", response_model=SupplyResponse)
async def update_supply(supply_id: str, req: SupplyUpdate, ctx: TenantContext = Depends(require_tenant),
                        db: Session = Depends(get_db)):
    s = _get_or_404(db, ctx, supply_id)
    update_data = db_values(req.model_dump(exclude_unset=True))
    for required in ("vehicle_id", "supply_date", "odometer_reading", "fuel_type",
                     "quantity_liters", "price_per_unit"):
        if required in update_data and update_data[required] is None:
            raise HTTPException(status_code=400, detail=f"{required} cannot be empty")
    if "vehicle_id" in update_data:
        get_vehicle_or_404(db, ctx, update_data["vehicle_id"])
    if update_data.get("driver_id"):
        get_driver_or_404(db, ctx, update_data["driver_id"])
    elif "driver_id" in update_data:
        update_data["driver_id"] = None

    for key, value in update_data.items():
        setattr(s, key, value)
    s.total_cost = supply_total(s.quantity_liters, s.price_per_unit)
    s.updated_at = utc_now()

    db.commit()
    db.refresh(s)
    return _supply_to_response(s)


@router.delete("/{supply_id}")
async def delete_supply(supply_id: str, ctx: TenantContext = Depends(require_tenant),
                        db: Session = Depends(get_db)):
    s = _get_or_404(db, ctx, supply_id)
    db.delete(s)
    db.commit()
    return {"message": "Supply deleted"}
