from sqlalchemy import Column, ForeignKey, Text
from fleet.database import Base


class Driver(Base):
    __tablename__ = "drivers"

    id = Column(Text, primary_key=True)
    tenant_id = Column(Text, ForeignKey("tenants.id", ondelete="CASCADE"), nullable=False)
    name = Column(Text, nullable=False)
    cpf = Column(Text, nullable=False)
    birth_date = Column(Text, nullable=False)
    phone = Column(Text, nullable=False)
    email = Column(Text)
    photo_path = Column(Text)
    cnh_number = Column(Text, nullable=False)
    cnh_category = Column(Text, nullable=False)
    cnh_expiration_date = Column(Text, nullable=False)
    admission_date = Column(Text, nullable=False)
    status = Column(Text, nullable=False, default="active")
    address_cep = Column(Text)
    address_street = Column(Text)
    address_number = Column(Text)
    address_complement = Column(Text)
    address_neighborhood = Column(Text)
    address_city = Column(Text)
    address_state = Column(Text)
    emergency_contact_name = Column(Text)
    emergency_contact_phone = Column(Text)
    notes = Column(Text)
    created_at = Column(Text, nullable=False)
    updated_at = Column(Text, nullable=False)
