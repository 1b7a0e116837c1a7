from sqlalchemy import Column, Float, ForeignKey, Text
from sqlalchemy.orm import relationship
from fleet.database import Base


class Maintenance(Base):
    __tablename__ = "maintenances"

    id = Column(Text, primary_key=True)
    tenant_id = Column(Text, ForeignKey("tenants.id", ondelete="CASCADE"), nullable=False)
    vehicle_id = Column(Text, ForeignKey("vehicles.id", ondelete="CASCADE"), nullable=False)
    maintenance_type = Column(Text, nullable=False)
    description = Column(Text, nullable=False)
    scheduled_date = Column(Text)
    completion_date = Column(Text)
    cost_parts = Column(Float)
    cost_services = Column(Float)
    total_cost = Column(Float)
    supplier_name = Column(Text)
    status = Column(Text, nullable=False, default="scheduled")
    notes = Column(Text)
    created_at = Column(Text, nullable=False)
    updated_at = Column(Text, nullable=False)

    vehicle = relationship("Vehicle", back_populates="maintenances")
