from sqlalchemy import Column, Float, ForeignKey, Integer, Text
from sqlalchemy.orm import relationship
from fleet.database import Base


class Vehicle(Base):
    __tablename__ = "vehicles"

    id = Column(Text, primary_key=True)
    tenant_id = Column(Text, ForeignKey("tenants.id", ondelete="CASCADE"), nullable=False)
    plate = Column(Text, nullable=False)
    brand = Column(Text, nullable=False)
    model = Column(Text, nullable=False)
    year_manufacture = Column(Integer)
    year_model = Column(Integer)
    color = Column(Text)
    status = Column(Text, nullable=False, default="active")
    vehicle_type = Column(Text, nullable=False, default="car")
    fuel_type = Column(Text)
    current_km = Column(Integer, nullable=False, default=0)
    chassis = Column(Text)
    renavam = Column(Text)
    purchase_date = Column(Text)
    purchase_price = Column(Float)
    average_consumption = Column(Float)
    notes = Column(Text)
    created_at = Column(Text, nullable=False)
    updated_at = Column(Text, nullable=False)

    maintenances = relationship("Maintenance", back_populates="vehicle", cascade="all, delete-orphan")
    supplies = relationship("Supply", back_populates="vehicle", cascade="all, delete-orphan")
