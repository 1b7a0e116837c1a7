from datetime import datetime

from pydantic import BaseModel, Field

from fleet.domain.choices import FuelType
from fleet.schemas.common import NonBlank, PageMeta
from fleet.schemas.vehicle import VehicleSummary


class SupplyCreate(BaseModel):
    vehicle_id: NonBlank
    driver_id: str | None = None
    supply_date: datetime
    odometer_reading: int = Field(gt=0)
    fuel_type: FuelType
    quantity_liters: float = Field(gt=0)
    # Omitted price falls back to the tenant's configured price for the fuel type.
    price_per_unit: float | None = Field(None, gt=0)
    gas_station_name: str | None = None
    invoice_number: str | None = None
    notes: str | None = None


class SupplyUpdate(BaseModel):
    vehicle_id: NonBlank | None = None
    driver_id: str | None = None
    supply_date: datetime | None = None
    odometer_reading: int | None = Field(None, gt=0)
    fuel_type: FuelType | None = None
    quantity_liters: float | None = Field(None, gt=0)
    price_per_unit: float | None = Field(None, gt=0)
    gas_station_name: str | None = None
    invoice_number: str | None = None
    notes: str | None = None


class SupplyResponse(BaseModel):
    id: str
    vehicle_id: str
    vehicle: VehicleSummary | None
    driver_id: str | None
    supply_date: str
    odometer_reading: int
    fuel_type: str
    quantity_liters: float
    price_per_unit: float
    total_cost: float
    gas_station_name: str | None
    invoice_number: str | None
    notes: str | None
    created_at: str
    updated_at: str


class SupplyListResponse(PageMeta):
    supplies: list[SupplyResponse]
