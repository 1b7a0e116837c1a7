from fastapi import APIRouter, Depends
from fastapi.responses import Response
from sqlalchemy.orm import Session

from fleet.database import get_db
from fleet.dependencies import require_tenant
from fleet.domain.association import document_ref, resolve_label
from fleet.models.document import Document
from fleet.models.driver import Driver
from fleet.models.vehicle import Vehicle
from fleet.services.auth_service import TenantContext
from fleet.services.calendar_service import expiration, generate_expirations_ics

router = APIRouter(prefix="/calendar", tags=["calendar"])


@router.get("/expirations")
async def expirations_calendar(ctx: TenantContext = Depends(require_tenant), db: Session = Depends(get_db)):
    vehicles = {v.id: v for v in db.query(Vehicle).filter(Vehicle.tenant_id == ctx.tenant_id).all()}
    drivers = {d.id: d for d in db.query(Driver).filter(Driver.tenant_id == ctx.tenant_id).all()}
    documents = (
        db.query(Document)
        .filter(Document.tenant_id == ctx.tenant_id)
        .filter(Document.expiration_date.isnot(None), Document.expiration_date != "")
        .all()
    )

    items = []
    for doc in documents:
        label = resolve_label(document_ref(doc), vehicles, drivers)
        items.append(expiration(
            uid=f"document-{doc.id}@fleet",
            summary=f"Document expires: {doc.document_name} - {label}",
            value=doc.expiration_date,
            description=doc.notes,
        ))
    for driver in drivers.values():
        items.append(expiration(
            uid=f"cnh-{driver.id}@fleet",
            summary=f"CNH expires: {driver.name}",
            value=driver.cnh_expiration_date,
            description=f"CNH {driver.cnh_number} category {driver.cnh_category}",
        ))

    ics_data = generate_expirations_ics([i for i in items if i is not None])
    return Response(
        content=ics_data,
        media_type="text/calendar",
        headers={"Content-Disposition": 'attachment; filename="expirations.ics"'},
    )
