from sqlalchemy import Column, Float, ForeignKey, Integer, Text
from sqlalchemy.orm import relationship
from fleet.database import Base


class Supply(Base):
    __tablename__ = "supplies"

    id = Column(Text, primary_key=True)
    tenant_id = Column(Text, ForeignKey("tenants.id", ondelete="CASCADE"), nullable=False)
    vehicle_id = Column(Text, ForeignKey("vehicles.id", ondelete="CASCADE"), nullable=False)
    driver_id = Column(Text, ForeignKey("drivers.id", ondelete="SET NULL"))
    supply_date = Column(Text, nullable=False)
    odometer_reading = Column(Integer, nullable=False)
    fuel_type = Column(Text, nullable=False)
    quantity_liters = Column(Float, nullable=False)
    price_per_unit = Column(Float, nullable=False)
    total_cost = Column(Float, nullable=False)
    gas_station_name = Column(Text)
    invoice_number = Column(Text)
    notes = Column(Text)
    created_at = Column(Text, nullable=False)
    updated_at = Column(Text, nullable=False)

    vehicle = relationship("Vehicle", back_populates="supplies")
