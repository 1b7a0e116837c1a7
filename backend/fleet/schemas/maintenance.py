from datetime import date

from pydantic import BaseModel, Field

from fleet.domain.choices import MaintenanceStatus, MaintenanceType
from fleet.schemas.common import NonBlank, PageMeta
from fleet.schemas.vehicle import VehicleSummary


class MaintenanceCreate(BaseModel):
    vehicle_id: NonBlank
    maintenance_type: MaintenanceType
    description: NonBlank
    scheduled_date: date | None = None
    completion_date: date | None = None
    cost_parts: float | None = Field(None, ge=0)
    cost_services: float | None = Field(None, ge=0)
    supplier_name: str | None = None
    status: MaintenanceStatus = "scheduled"
    notes: str | None = None


class MaintenanceUpdate(BaseModel):
    vehicle_id: NonBlank | None = None
    maintenance_type: MaintenanceType | None = None
    description: NonBlank | None = None
    scheduled_date: date | None = None
    completion_date: date | None = None
    cost_parts: float | None = Field(None, ge=0)
    cost_services: float | None = Field(None, ge=0)
    supplier_name: str | None = None
    status: MaintenanceStatus | None = None
    notes: str | None = None


class MaintenanceResponse(BaseModel):
    id: str
    vehicle_id: str
    vehicle: VehicleSummary | None
    maintenance_type: str
    description: str
    scheduled_date: str | None
    completion_date: str | None
    cost_parts: float | None
    cost_services: float | None
    total_cost: float | None
    supplier_name: str | None
    status: str
    notes: str | None
    created_at: str
    updated_at: str


class MaintenanceListResponse(PageMeta):
    maintenances: list[MaintenanceResponse]
