import uuid
from datetime import date

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from fleet.config import settings
from fleet.database import get_db
from fleet.dependencies import require_tenant
from fleet.models.maintenance import Maintenance
from fleet.routers.vehicles import get_vehicle_or_404
from fleet.schemas.maintenance import (
    MaintenanceCreate,
    MaintenanceListResponse,
    MaintenanceResponse,
    MaintenanceUpdate,
)
from fleet.schemas.vehicle import VehicleSummary
from fleet.services.auth_service import TenantContext
from fleet.services.list_specs import MAINTENANCE_LIST
from fleet.services.query import DateRange, run_list
from fleet.utils.dates import db_values, utc_now

router = APIRouter(prefix="/maintenances", tags=["maintenances"])


def total_cost(cost_parts: float | None, cost_services: float | None) -> float | None:
    if cost_parts is None and cost_services is None:
        return None
    return round((cost_parts or 0) + (cost_services or 0), 2)


def _maintenance_to_response(m: Maintenance) -> MaintenanceResponse:
    vehicle = None
    if m.vehicle is not None:
        vehicle = VehicleSummary(id=m.vehicle.id, plate=m.vehicle.plate, brand=m.vehicle.brand, model=m.vehicle.model)
    return MaintenanceResponse(
        id=m.id,
        vehicle_id=m.vehicle_id,
        vehicle=vehicle,
        maintenance_type=m.maintenance_type,
        description=m.description,
        scheduled_date=m.scheduled_date,
        completion_date=m.completion_date,
        cost_parts=m.cost_parts,
        cost_services=m.cost_services,
        total_cost=m.total_cost,
        supplier_name=m.supplier_name,
        status=m.status,
        notes=m.notes,
        created_at=m.created_at,
        updated_at=m.updated_at,
    )


def _get_or_404(db: Session, ctx: TenantContext, maintenance_id: str) -> Maintenance:
    m = db.query(Maintenance).filter(
        Maintenance.id == maintenance_id,
        Maintenance.tenant_id == ctx.tenant_id,
    ).first()
    if not m:
        raise HTTPException(status_code=404, detail="Maintenance not found")
    return m


@router.post("", response_model=MaintenanceResponse, status_code=201)
async def create_maintenance(req: MaintenanceCreate, ctx: TenantContext = Depends(require_tenant),
                             db: Session = Depends(get_db)):
    get_vehicle_or_404(db, ctx, req.vehicle_id)

    now = utc_now()
    m = Maintenance(
        id=str(uuid.uuid4()),
        tenant_id=ctx.tenant_id,
        total_cost=total_cost(req.cost_parts, req.cost_services),
        created_at=now,
        updated_at=now,
        **db_values(req.model_dump()),
    )
    db.add(m)
    db.commit()
    db.refresh(m)
    return _maintenance_to_response(m)


@router.get("", response_model=MaintenanceListResponse)
async def list_maintenances(
    vehicle_id: str | None = None,
    status: str | None = None,
    maintenance_type: str | None = None,
    scheduled_from: date | None = None,
    scheduled_to: date | None = None,
    page: int = 0,
    per_page: int = settings.default_page_size,
    ctx: TenantContext = Depends(require_tenant),
    db: Session = Depends(get_db),
):
    criteria = {
        "vehicle_id": vehicle_id,
        "status": status,
        "maintenance_type": maintenance_type,
        "scheduled": DateRange(scheduled_from, scheduled_to),
    }
    result = run_list(db, ctx, MAINTENANCE_LIST, criteria, page, per_page)
    return MaintenanceListResponse(
        maintenances=[_maintenance_to_response(m) for m in result.items],
        total=result.total,
        page=result.page,
        per_page=result.per_page,
        has_more=result.has_more,
        message=result.message,
    )


@router.get("/{maintenance_id}", response_model=MaintenanceResponse)
async def get_maintenance(maintenance_id: str, ctx: TenantContext = Depends(require_tenant),
                          db: Session = Depends(get_db)):
    return _maintenance_to_response(_get_or_404(db, ctx, maintenance_id))


@router.put("/{maintenance_id}", response_model=MaintenanceResponse)
async def update_maintenance(maintenance_id: str, req: MaintenanceUpdate,
                             ctx: TenantContext = Depends(require_tenant), db: Session = Depends(get_db)):
    m = _get_or_404(db, ctx, maintenance_id)
    update_data = db_values(req.model_dump(exclude_unset=True))
    for required in ("vehicle_id", "maintenance_type", "description", "status"):
        if required in update_data and update_data[required] is None:
            raise HTTPException(status_code=400, detail=f"{required} cannot be empty")
    if "vehicle_id" in update_data:
        get_vehicle_or_404(db, ctx, update_data["vehicle_id"])

    for key, value in update_data.items():
        setattr(m, key, value)
    m.total_cost = total_cost(m.cost_parts, m.cost_services)
    m.updated_at = utc_now()

    db.commit()
    db.refresh(m)
    return _maintenance_to_response(m)


@router.delete("/{maintenance_id}")
async def delete_maintenance(maintenance_id: str, ctx: TenantContext = Depends(require_tenant),
                             db: Session = Depends(get_db)):
    m = _get_or_404(db, ctx, maintenance_id)
    db.delete(m)
    db.commit()
    return {"message": "Maintenance deleted"}
