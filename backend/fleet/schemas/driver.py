from datetime import date

from pydantic import BaseModel, field_validator

from fleet.domain.choices import CnhCategory, DriverStatus
from fleet.schemas.common import NonBlank, PageMeta, check_email


class DriverCreate(BaseModel):
    name: NonBlank
    cpf: NonBlank
    birth_date: date
    phone: NonBlank
    email: str | None = None
    cnh_number: NonBlank
    cnh_category: CnhCategory
    cnh_expiration_date: date
    admission_date: date
    status: DriverStatus = "active"
    address_cep: str | None = None
    address_street: str | None = None
    address_number: str | None = None
    address_complement: str | None = None
    address_neighborhood: str | None = None
    address_city: str | None = None
    address_state: str | None = None
    emergency_contact_name: str | None = None
    emergency_contact_phone: str | None = None
    notes: str | None = None

    @field_validator("email")
    @classmethod
    def valid_email(cls, value: str | None) -> str | None:
        return check_email(value)


class DriverUpdate(BaseModel):
    name: NonBlank | None = None
    cpf: NonBlank | None = None
    birth_date: date | None = None
    phone: NonBlank | None = None
    email: str | None = None
    cnh_number: NonBlank | None = None
    cnh_category: CnhCategory | None = None
    cnh_expiration_date: date | None = None
    admission_date: date | None = None
    status: DriverStatus | None = None
    address_cep: str | None = None
    address_street: str | None = None
    address_number: str | None = None
    address_complement: str | None = None
    address_neighborhood: str | None = None
    address_city: str | None = None
    address_state: str | None = None
    emergency_contact_name: str | None = None
    emergency_contact_phone: str | None = None
    notes: str | None = None

    @field_validator("email")
    @classmethod
    def valid_email(cls, value: str | None) -> str | None:
        return check_email(value)


class DriverResponse(BaseModel):
    id: str
    name: str
    cpf: str
    birth_date: str
    phone: str
    email: str | None
    photo_url: str | None
    cnh_number: str
    cnh_category: str
    cnh_expiration_date: str
    cnh_status: str
    admission_date: str
    status: str
    address_cep: str | None
    address_street: str | None
    address_number: str | None
    address_complement: str | None
    address_neighborhood: str | None
    address_city: str | None
    address_state: str | None
    emergency_contact_name: str | None
    emergency_contact_phone: str | None
    notes: str | None
    created_at: str
    updated_at: str


class DriverListResponse(PageMeta):
    drivers: list[DriverResponse]
