from dataclasses import dataclass
from typing import Any, ClassVar, Mapping

MISSING_LABEL = "N/A"


@dataclass(frozen=True)
class VehicleRef:
    id: str
    kind: ClassVar[str] = "vehicle"


@dataclass(frozen=True)
class DriverRef:
    id: str
    kind: ClassVar[str] = "driver"


EntityRef = VehicleRef | DriverRef


def entity_ref(kind: str, entity_id: str) -> EntityRef:
    if kind == "vehicle":
        return VehicleRef(entity_id)
    if kind == "driver":
        return DriverRef(entity_id)
    raise ValueError(f"Unknown entity kind: {kind!r}")


def document_ref(doc: Any) -> EntityRef:
    """Build the association of a stored document row."""
    return entity_ref(doc.entity_type, doc.vehicle_id if doc.entity_type == "vehicle" else doc.driver_id)


def resolve_label(
    ref: EntityRef,
    vehicles: Mapping[str, Any],
    drivers: Mapping[str, Any],
) -> str:
    """Display label for the entity a document is attached to.

    ``vehicles`` and ``drivers`` are id -> row mappings loaded by the caller;
    nothing is fetched here. Unknown ids render as ``N/A``.
    """
    if isinstance(ref, VehicleRef):
        vehicle = vehicles.get(ref.id)
        if vehicle is None:
            return MISSING_LABEL
        return f"{vehicle.plate} ({vehicle.model or MISSING_LABEL})"
    if isinstance(ref, DriverRef):
        driver = drivers.get(ref.id)
        if driver is None:
            return MISSING_LABEL
        return f"{driver.name} ({driver.cpf or MISSING_LABEL})"
    raise TypeError(f"Unsupported entity reference: {ref!r}")
