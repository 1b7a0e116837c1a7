from fleet.models.tenant import Tenant, User
from fleet.models.vehicle import Vehicle
from fleet.models.driver import Driver
from fleet.models.maintenance import Maintenance
from fleet.models.supply import Supply
from fleet.models.document import Document
from fleet.models.settings import TenantSettings, TenantFuelPrice

__all__ = [
    "Tenant", "User", "Vehicle", "Driver", "Maintenance", "Supply", "Document",
    "TenantSettings", "TenantFuelPrice",
]
