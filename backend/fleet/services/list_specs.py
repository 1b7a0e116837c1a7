from fleet.domain import choices
from fleet.models.document import Document
from fleet.models.driver import Driver
from fleet.models.maintenance import Maintenance
from fleet.models.supply import Supply
from fleet.models.vehicle import Vehicle
from fleet.services.query import (
    CountMode,
    DateRangeFilter,
    EnumFilter,
    EqualsFilter,
    ExpiryStatusFilter,
    ListSpec,
    TextFilter,
)

VEHICLE_LIST = ListSpec(
    model=Vehicle,
    filters={
        "plate": TextFilter(Vehicle.plate),
        "model": TextFilter(Vehicle.model),
        "status": EnumFilter(Vehicle.status, choices.VEHICLE_STATUSES),
        "vehicle_type": EnumFilter(Vehicle.vehicle_type, choices.VEHICLE_TYPES),
    },
    sort=[(Vehicle.plate, False)],
)

DRIVER_LIST = ListSpec(
    model=Driver,
    filters={
        "name": TextFilter(Driver.name),
        "cpf": TextFilter(Driver.cpf),
        "status": EnumFilter(Driver.status, choices.DRIVER_STATUSES),
        "cnh_category": EnumFilter(Driver.cnh_category, choices.CNH_CATEGORIES),
    },
    sort=[(Driver.name, False)],
)

# Maintenance and supply screens page without a total ("more than N").
MAINTENANCE_LIST = ListSpec(
    model=Maintenance,
    filters={
        "vehicle_id": EqualsFilter(Maintenance.vehicle_id),
        "status": EnumFilter(Maintenance.status, choices.MAINTENANCE_STATUSES),
        "maintenance_type": EnumFilter(Maintenance.maintenance_type, choices.MAINTENANCE_TYPES),
        "scheduled": DateRangeFilter(Maintenance.scheduled_date),
    },
    sort=[(Maintenance.scheduled_date, True)],
    count_mode=CountMode.NONE,
)

SUPPLY_LIST = ListSpec(
    model=Supply,
    filters={
        "vehicle_id": EqualsFilter(Supply.vehicle_id),
        "driver_id": EqualsFilter(Supply.driver_id),
        "fuel_type": EnumFilter(Supply.fuel_type, choices.FUEL_TYPES),
        "supply_date": DateRangeFilter(Supply.supply_date),
    },
    sort=[(Supply.supply_date, True)],
    count_mode=CountMode.NONE,
)

DOCUMENT_LIST = ListSpec(
    model=Document,
    filters={
        "document_name": TextFilter(Document.document_name),
        "document_type": EnumFilter(Document.document_type, choices.DOCUMENT_TYPES),
        "entity_type": EnumFilter(Document.entity_type, choices.ENTITY_KINDS),
        "vehicle_id": EqualsFilter(Document.vehicle_id),
        "driver_id": EqualsFilter(Document.driver_id),
        "status": ExpiryStatusFilter(Document.expiration_date),
    },
    sort=[(Document.created_at, True)],
)
