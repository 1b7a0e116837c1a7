from sqlalchemy import Column, Float, ForeignKey, Text
from fleet.database import Base


class TenantSettings(Base):
    __tablename__ = "tenant_settings"

    tenant_id = Column(Text, ForeignKey("tenants.id", ondelete="CASCADE"), primary_key=True)
    default_station_name = Column(Text)
    updated_at = Column(Text, nullable=False)


class TenantFuelPrice(Base):
    __tablename__ = "tenant_fuel_prices"

    tenant_id = Column(Text, ForeignKey("tenants.id", ondelete="CASCADE"), primary_key=True)
    fuel_type = Column(Text, primary_key=True)
    price_per_liter = Column(Float, nullable=False)
