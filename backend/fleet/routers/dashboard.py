from datetime import date, timedelta

from fastapi import APIRouter, Depends
from sqlalchemy import func
from sqlalchemy.orm import Session

from fleet.config import settings
from fleet.database import get_db
from fleet.dependencies import require_tenant
from fleet.domain.choices import OPEN_MAINTENANCE_STATUSES, VEHICLE_STATUSES
from fleet.domain.validity import DocumentStatus
from fleet.models.driver import Driver
from fleet.models.maintenance import Maintenance
from fleet.models.supply import Supply
from fleet.models.vehicle import Vehicle
from fleet.services.auth_service import TenantContext
from fleet.services.list_specs import DOCUMENT_LIST
from fleet.services.query import build_query, day_of

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


def _document_count(db: Session, ctx: TenantContext, status: DocumentStatus) -> int:
    return build_query(db, ctx, DOCUMENT_LIST, {"status": status.value}).count()


@router.get("")
async def get_dashboard(ctx: TenantContext = Depends(require_tenant), db: Session = Depends(get_db)):
    today = date.today()
    horizon = today + timedelta(days=settings.expiry_warning_days)
    month_start = today.replace(day=1).isoformat()
    today_s = today.isoformat()

    # --- Fleet ---
    status_rows = (
        db.query(Vehicle.status, func.count(Vehicle.id).label("n"))
        .filter(Vehicle.tenant_id == ctx.tenant_id)
        .group_by(Vehicle.status)
        .all()
    )
    by_status = {s: 0 for s in VEHICLE_STATUSES}
    by_status.update({row.status: row.n for row in status_rows})

    # --- Expirations ---
    expired_cnh = (
        db.query(func.count(Driver.id))
        .filter(Driver.tenant_id == ctx.tenant_id, day_of(Driver.cnh_expiration_date) < today_s)
        .scalar()
    )

    # --- Maintenance ---
    open_maintenance = db.query(func.count(Maintenance.id)).filter(
        Maintenance.tenant_id == ctx.tenant_id,
        Maintenance.status.in_(OPEN_MAINTENANCE_STATUSES),
        Maintenance.scheduled_date.isnot(None),
    )
    overdue = open_maintenance.filter(day_of(Maintenance.scheduled_date) < today_s).scalar()
    upcoming = open_maintenance.filter(
        day_of(Maintenance.scheduled_date) >= today_s,
        day_of(Maintenance.scheduled_date) <= horizon.isoformat(),
    ).scalar()

    # --- Costs this month ---
    fuel_cost = (
        db.query(func.coalesce(func.sum(Supply.total_cost), 0.0))
        .filter(Supply.tenant_id == ctx.tenant_id, day_of(Supply.supply_date) >= month_start,
                day_of(Supply.supply_date) <= today_s)
        .scalar()
    )
    maintenance_cost = (
        db.query(func.coalesce(func.sum(Maintenance.total_cost), 0.0))
        .filter(Maintenance.tenant_id == ctx.tenant_id, Maintenance.status == "completed",
                day_of(Maintenance.completion_date) >= month_start,
                day_of(Maintenance.completion_date) <= today_s)
        .scalar()
    )

    return {
        "vehicles": {"total": sum(by_status.values()), "by_status": by_status},
        "documents": {
            "approaching": _document_count(db, ctx, DocumentStatus.APPROACHING),
            "expired": _document_count(db, ctx, DocumentStatus.EXPIRED),
        },
        "drivers": {"expired_cnh": expired_cnh},
        "maintenances": {"overdue": overdue, "upcoming": upcoming},
        "costs_current_month": {
            "fuel": round(fuel_cost, 2),
            "maintenance": round(maintenance_cost, 2),
            "total": round(fuel_cost + maintenance_cost, 2),
        },
        "window_days": settings.expiry_warning_days,
    }
