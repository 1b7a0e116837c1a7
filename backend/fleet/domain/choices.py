from typing import Literal, get_args

VehicleStatus = Literal["active", "maintenance", "inactive"]
VehicleType = Literal["car", "truck", "motorcycle"]

DriverStatus = Literal["active", "inactive", "vacation", "leave", "terminated"]
CnhCategory = Literal["A", "B", "AB", "C", "D", "E", "ACC"]

MaintenanceStatus = Literal["scheduled", "in_progress", "completed", "cancelled", "pending"]
MaintenanceType = Literal["preventive", "corrective", "predictive", "improvement", "other"]

FuelType = Literal[
    "gasoline_regular", "gasoline_additive", "gasoline_premium",
    "ethanol", "ethanol_additive",
    "diesel", "diesel_s10", "diesel_additive",
    "cng", "electric", "other",
]

DocumentType = Literal[
    "cnh", "crlv", "insurance_policy", "inspection_certificate",
    "course_certificate", "proof_of_address", "rg", "cpf", "other",
]
EntityKind = Literal["vehicle", "driver"]

VEHICLE_STATUSES = get_args(VehicleStatus)
VEHICLE_TYPES = get_args(VehicleType)
DRIVER_STATUSES = get_args(DriverStatus)
CNH_CATEGORIES = get_args(CnhCategory)
MAINTENANCE_STATUSES = get_args(MaintenanceStatus)
MAINTENANCE_TYPES = get_args(MaintenanceType)
FUEL_TYPES = get_args(FuelType)
DOCUMENT_TYPES = get_args(DocumentType)
ENTITY_KINDS = get_args(EntityKind)

OPEN_MAINTENANCE_STATUSES = ("scheduled", "pending")
OTHER_DOCUMENT_TYPE = "other"
