from pydantic import BaseModel, Field

from fleet.domain.choices import FuelType


class FuelSettings(BaseModel):
    default_station_name: str | None = None
    prices: dict[FuelType, float] = Field(default_factory=dict)


class FuelSettingsUpdate(BaseModel):
    default_station_name: str | None = None
    prices: dict[FuelType, float | None] = Field(default_factory=dict)
