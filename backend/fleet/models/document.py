from sqlalchemy import Column, ForeignKey, Integer, Text
from fleet.database import Base


class Document(Base):
    __tablename__ = "documents"

    id = Column(Text, primary_key=True)
    tenant_id = Column(Text, ForeignKey("tenants.id", ondelete="CASCADE"), nullable=False)
    document_name = Column(Text, nullable=False)
    document_type = Column(Text, nullable=False)
    custom_document_type_description = Column(Text)
    description = Column(Text)
    entity_type = Column(Text, nullable=False)
    vehicle_id = Column(Text, ForeignKey("vehicles.id"))
    driver_id = Column(Text, ForeignKey("drivers.id"))
    issue_date = Column(Text)
    expiration_date = Column(Text)
    issuing_authority = Column(Text)
    document_number = Column(Text)
    file_path = Column(Text)
    file_name = Column(Text)
    file_size = Column(Integer)
    file_type = Column(Text)
    notes = Column(Text)
    created_at = Column(Text, nullable=False)
    updated_at = Column(Text, nullable=False)

    @property
    def entity_id(self) -> str | None:
        return self.vehicle_id if self.entity_type == "vehicle" else self.driver_id
