import uuid

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import func
from sqlalchemy.orm import Session

from fleet.config import settings
from fleet.database import get_db
from fleet.dependencies import require_tenant
from fleet.models.document import Document
from fleet.models.vehicle import Vehicle
from fleet.schemas.vehicle import VehicleCreate, VehicleListResponse, VehicleResponse, VehicleUpdate
from fleet.services.auth_service import TenantContext
from fleet.services.list_specs import VEHICLE_LIST
from fleet.services.query import run_list
from fleet.utils.dates import db_values, utc_now

router = APIRouter(prefix="/vehicles", tags=["vehicles"])


def _vehicle_to_response(vehicle: Vehicle) -> VehicleResponse:
    return VehicleResponse(
        id=vehicle.id,
        plate=vehicle.plate,
        brand=vehicle.brand,
        model=vehicle.model,
        year_manufacture=vehicle.year_manufacture,
        year_model=vehicle.year_model,
        color=vehicle.color,
        status=vehicle.status,
        vehicle_type=vehicle.vehicle_type,
        fuel_type=vehicle.fuel_type,
        current_km=vehicle.current_km,
        chassis=vehicle.chassis,
        renavam=vehicle.renavam,
        purchase_date=vehicle.purchase_date,
        purchase_price=vehicle.purchase_price,
        average_consumption=vehicle.average_consumption,
        notes=vehicle.notes,
        created_at=vehicle.created_at,
        updated_at=vehicle.updated_at,
    )


def get_vehicle_or_404(db: Session, ctx: TenantContext, vehicle_id: str) -> Vehicle:
    vehicle = db.query(Vehicle).filter(Vehicle.id == vehicle_id, Vehicle.tenant_id == ctx.tenant_id).first()
    if not vehicle:
        raise HTTPException(status_code=404, detail="Vehicle not found")
    return vehicle


def _check_plate_free(db: Session, ctx: TenantContext, plate: str, exclude_id: str | None = None):
    query = db.query(Vehicle).filter(Vehicle.tenant_id == ctx.tenant_id, Vehicle.plate == plate)
    if exclude_id:
        query = query.filter(Vehicle.id != exclude_id)
    if query.first():
        raise HTTPException(status_code=409, detail="A vehicle with this plate already exists")


@router.post("", response_model=VehicleResponse, status_code=201)
async def create_vehicle(req: VehicleCreate, ctx: TenantContext = Depends(require_tenant),
                         db: Session = Depends(get_db)):
    _check_plate_free(db, ctx, req.plate)

    now = utc_now()
    vehicle = Vehicle(
        id=str(uuid.uuid4()),
        tenant_id=ctx.tenant_id,
        created_at=now,
        updated_at=now,
        **db_values(req.model_dump()),
    )
    db.add(vehicle)
    db.commit()
    db.refresh(vehicle)
    return _vehicle_to_response(vehicle)


@router.get("", response_model=VehicleListResponse)
async def list_vehicles(
    plate: str | None = None,
    model: str | None = None,
    status: str | None = None,
    vehicle_type: str | None = None,
    page: int = 0,
    per_page: int = settings.default_page_size,
    ctx: TenantContext = Depends(require_tenant),
    db: Session = Depends(get_db),
):
    criteria = {"plate": plate, "model": model, "status": status, "vehicle_type": vehicle_type}
    result = run_list(db, ctx, VEHICLE_LIST, criteria, page, per_page)
    return VehicleListResponse(
        vehicles=[_vehicle_to_response(v) for v in result.items],
        total=result.total,
        page=result.page,
        per_page=result.per_page,
        has_more=result.has_more,
        message=result.message,
    )


@router.get("/{vehicle_id}", response_model=VehicleResponse)
async def get_vehicle(vehicle_id: str, ctx: TenantContext = Depends(require_tenant),
                      db: Session = Depends(get_db)):
    return _vehicle_to_response(get_vehicle_or_404(db, ctx, vehicle_id))


@router.put("/{vehicle_id}", response_model=VehicleResponse)
async def update_vehicle(vehicle_id: str, req: VehicleUpdate, ctx: TenantContext = Depends(require_tenant),
                         db: Session = Depends(get_db)):
    vehicle = get_vehicle_or_404(db, ctx, vehicle_id)
    update_data = db_values(req.model_dump(exclude_unset=True))
    for required in ("plate", "brand", "model", "status", "vehicle_type", "current_km"):
        if required in update_data and update_data[required] is None:
            raise HTTPException(status_code=400, detail=f"{required} cannot be empty")
    if "plate" in update_data:
        _check_plate_free(db, ctx, update_data["plate"], exclude_id=vehicle.id)

    for key, value in update_data.items():
        setattr(vehicle, key, value)
    vehicle.updated_at = utc_now()

    db.commit()
    db.refresh(vehicle)
    return _vehicle_to_response(vehicle)


@router.delete("/{vehicle_id}")
async def delete_vehicle(vehicle_id: str, ctx: TenantContext = Depends(require_tenant),
                         db: Session = Depends(get_db)):
    vehicle = get_vehicle_or_404(db, ctx, vehicle_id)
    doc_count = db.query(func.count(Document.id)).filter(Document.vehicle_id == vehicle.id).scalar()
    if doc_count:
        raise HTTPException(status_code=409, detail="Vehicle has documents attached; delete them first")
    db.delete(vehicle)
    db.commit()
    return {"message": "Vehicle deleted"}
