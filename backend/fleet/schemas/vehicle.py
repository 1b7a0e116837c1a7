from datetime import date

from pydantic import BaseModel, Field, field_validator

from fleet.domain.choices import VehicleStatus, VehicleType
from fleet.schemas.common import NonBlank, PageMeta


class VehicleCreate(BaseModel):
    plate: NonBlank
    brand: NonBlank
    model: NonBlank
    year_manufacture: int | None = Field(None, ge=1900, le=2100)
    year_model: int | None = Field(None, ge=1900, le=2100)
    color: str | None = None
    status: VehicleStatus = "active"
    vehicle_type: VehicleType = "car"
    fuel_type: str | None = None
    current_km: int = Field(0, ge=0)
    chassis: str | None = None
    renavam: str | None = None
    purchase_date: date | None = None
    purchase_price: float | None = Field(None, ge=0)
    average_consumption: float | None = Field(None, gt=0)
    notes: str | None = None

    @field_validator("plate")
    @classmethod
    def upper_plate(cls, value: str) -> str:
        return value.upper()


class VehicleUpdate(BaseModel):
    plate: NonBlank | None = None
    brand: NonBlank | None = None
    model: NonBlank | None = None
    year_manufacture: int | None = Field(None, ge=1900, le=2100)
    year_model: int | None = Field(None, ge=1900, le=2100)
    color: str | None = None
    status: VehicleStatus | None = None
    vehicle_type: VehicleType | None = None
    fuel_type: str | None = None
    current_km: int | None = Field(None, ge=0)
    chassis: str | None = None
    renavam: str | None = None
    purchase_date: date | None = None
    purchase_price: float | None = Field(None, ge=0)
    average_consumption: float | None = Field(None, gt=0)
    notes: str | None = None

    @field_validator("plate")
    @classmethod
    def upper_plate(cls, value: str | None) -> str | None:
        return value.upper() if value else value


class VehicleSummary(BaseModel):
    id: str
    plate: str
    brand: str
    model: str


class VehicleResponse(BaseModel):
    id: str
    plate: str
    brand: str
    model: str
    year_manufacture: int | None
    year_model: int | None
    color: str | None
    status: str
    vehicle_type: str
    fuel_type: str | None
    current_km: int
    chassis: str | None
    renavam: str | None
    purchase_date: str | None
    purchase_price: float | None
    average_consumption: float | None
    notes: str | None
    created_at: str
    updated_at: str


class VehicleListResponse(PageMeta):
    vehicles: list[VehicleResponse]
