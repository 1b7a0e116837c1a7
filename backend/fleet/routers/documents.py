import uuid

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from fastapi.responses import FileResponse
from sqlalchemy.orm import Session

from fleet.config import settings
from fleet.database import get_db
from fleet.dependencies import require_tenant
from fleet.domain.association import DriverRef, VehicleRef, document_ref, resolve_label
from fleet.domain.validity import classify
from fleet.models.document import Document
from fleet.models.driver import Driver
from fleet.models.vehicle import Vehicle
from fleet.schemas.document import (
    DocumentCreate,
    DocumentListResponse,
    DocumentResponse,
    DocumentUpdate,
    FileUrlResponse,
    check_custom_type,
)
from fleet.services import document_service
from fleet.services.auth_service import TenantContext
from fleet.services.list_specs import DOCUMENT_LIST
from fleet.services.query import QueryError, run_list
from fleet.services.storage_service import DOCUMENT_BUCKET, storage
from fleet.utils.dates import db_values, utc_now
from fleet.utils.uploads import read_upload

router = APIRouter(prefix="/documents", tags=["documents"])


def _load_entities(db: Session, ctx: TenantContext, docs: list[Document]) -> tuple[dict, dict]:
    """Fetch only the vehicles and drivers the given documents point at."""
    vehicle_ids = {d.vehicle_id for d in docs if d.vehicle_id}
    driver_ids = {d.driver_id for d in docs if d.driver_id}
    vehicles, drivers = {}, {}
    if vehicle_ids:
        rows = db.query(Vehicle).filter(Vehicle.tenant_id == ctx.tenant_id, Vehicle.id.in_(vehicle_ids)).all()
        vehicles = {v.id: v for v in rows}
    if driver_ids:
        rows = db.query(Driver).filter(Driver.tenant_id == ctx.tenant_id, Driver.id.in_(driver_ids)).all()
        drivers = {d.id: d for d in rows}
    return vehicles, drivers


def _doc_to_response(doc: Document, vehicles: dict, drivers: dict) -> DocumentResponse:
    return DocumentResponse(
        id=doc.id,
        document_name=doc.document_name,
        document_type=doc.document_type,
        custom_document_type_description=doc.custom_document_type_description,
        description=doc.description,
        entity_type=doc.entity_type,
        entity_id=doc.entity_id,
        entity_label=resolve_label(document_ref(doc), vehicles, drivers),
        issue_date=doc.issue_date,
        expiration_date=doc.expiration_date,
        status_validity=classify(doc.expiration_date, window_days=settings.expiry_warning_days).value,
        issuing_authority=doc.issuing_authority,
        document_number=doc.document_number,
        file_name=doc.file_name,
        file_size=doc.file_size,
        file_type=doc.file_type,
        has_file=bool(doc.file_path),
        notes=doc.notes,
        created_at=doc.created_at,
        updated_at=doc.updated_at,
    )


def _single_response(db: Session, ctx: TenantContext, doc: Document) -> DocumentResponse:
    vehicles, drivers = _load_entities(db, ctx, [doc])
    return _doc_to_response(doc, vehicles, drivers)


def _get_or_404(db: Session, ctx: TenantContext, document_id: str) -> Document:
    doc = db.query(Document).filter(Document.id == document_id, Document.tenant_id == ctx.tenant_id).first()
    if not doc:
        raise HTTPException(status_code=404, detail="Document not found")
    return doc


def _associate(db: Session, ctx: TenantContext, doc: Document, entity_type: str, entity_id: str):
    """Point ``doc`` at an existing vehicle or driver of the tenant."""
    if entity_type == VehicleRef.kind:
        found = db.query(Vehicle.id).filter(Vehicle.id == entity_id, Vehicle.tenant_id == ctx.tenant_id).first()
    elif entity_type == DriverRef.kind:
        found = db.query(Driver.id).filter(Driver.id == entity_id, Driver.tenant_id == ctx.tenant_id).first()
    else:
        raise HTTPException(status_code=400, detail=f"Invalid entity_type: {entity_type}")
    if not found:
        raise HTTPException(status_code=400, detail=f"Associated {entity_type} not found")

    doc.entity_type = entity_type
    doc.vehicle_id = entity_id if entity_type == VehicleRef.kind else None
    doc.driver_id = entity_id if entity_type == DriverRef.kind else None


@router.post("", response_model=DocumentResponse, status_code=201)
async def create_document(req: DocumentCreate, ctx: TenantContext = Depends(require_tenant),
                          db: Session = Depends(get_db)):
    data = db_values(req.model_dump(exclude={"entity_type", "entity_id"}))
    now = utc_now()
    doc = Document(
        id=str(uuid.uuid4()),
        tenant_id=ctx.tenant_id,
        created_at=now,
        updated_at=now,
        **data,
    )
    _associate(db, ctx, doc, req.entity_type, req.entity_id)
    db.add(doc)
    db.commit()
    db.refresh(doc)
    return _single_response(db, ctx, doc)


@router.get("", response_model=DocumentListResponse)
async def list_documents(
    document_name: str | None = None,
    document_type: str | None = None,
    entity_type: str | None = None,
    entity_id: str | None = None,
    status: str | None = None,
    page: int = 0,
    per_page: int = settings.default_page_size,
    ctx: TenantContext = Depends(require_tenant),
    db: Session = Depends(get_db),
):
    criteria = {
        "document_name": document_name,
        "document_type": document_type,
        "entity_type": entity_type,
        "status": status,
    }
    if entity_id:
        if not entity_type:
            raise QueryError("entity_id requires entity_type")
        criteria["vehicle_id" if entity_type == VehicleRef.kind else "driver_id"] = entity_id

    result = run_list(db, ctx, DOCUMENT_LIST, criteria, page, per_page)
    vehicles, drivers = _load_entities(db, ctx, result.items)
    return DocumentListResponse(
        documents=[_doc_to_response(d, vehicles, drivers) for d in result.items],
        total=result.total,
        page=result.page,
        per_page=result.per_page,
        has_more=result.has_more,
        message=result.message,
    )


@router.get("/{document_id}", response_model=DocumentResponse)
async def get_document(document_id: str, ctx: TenantContext = Depends(require_tenant),
                       db: Session = Depends(get_db)):
    return _single_response(db, ctx, _get_or_404(db, ctx, document_id))


@router.put("/{document_id}", response_model=DocumentResponse)
async def update_document(document_id: str, req: DocumentUpdate, ctx: TenantContext = Depends(require_tenant),
                          db: Session = Depends(get_db)):
    doc = _get_or_404(db, ctx, document_id)
    update_data = db_values(req.model_dump(exclude_unset=True))
    for required in ("document_name", "document_type", "entity_type", "entity_id"):
        if required in update_data and update_data[required] is None:
            raise HTTPException(status_code=400, detail=f"{required} cannot be empty")

    document_type = update_data.get("document_type", doc.document_type)
    custom = update_data.get("custom_document_type_description", doc.custom_document_type_description)
    try:
        update_data["custom_document_type_description"] = check_custom_type(document_type, custom)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))

    entity_type = update_data.pop("entity_type", None)
    entity_id = update_data.pop("entity_id", None)
    if entity_type or entity_id:
        _associate(db, ctx, doc, entity_type or doc.entity_type, entity_id or doc.entity_id)

    for key, value in update_data.items():
        setattr(doc, key, value)
    doc.updated_at = utc_now()

    db.commit()
    db.refresh(doc)
    return _single_response(db, ctx, doc)


@router.delete("/{document_id}")
async def delete_document(document_id: str, ctx: TenantContext = Depends(require_tenant),
                          db: Session = Depends(get_db)):
    doc = _get_or_404(db, ctx, document_id)
    document_service.delete_document(db, doc)
    return {"message": "Document deleted"}


@router.put("/{document_id}/file", response_model=DocumentResponse)
async def upload_file(document_id: str, file: UploadFile = File(...),
                      ctx: TenantContext = Depends(require_tenant), db: Session = Depends(get_db)):
    doc = _get_or_404(db, ctx, document_id)
    content = await read_upload(file, settings.max_upload_bytes)
    doc = document_service.attach_file(
        db, ctx, doc, file.filename or "file", content, file.content_type, utc_now()
    )
    return _single_response(db, ctx, doc)


@router.delete("/{document_id}/file", response_model=DocumentResponse)
async def remove_file(document_id: str, ctx: TenantContext = Depends(require_tenant),
                      db: Session = Depends(get_db)):
    doc = _get_or_404(db, ctx, document_id)
    if not doc.file_path:
        raise HTTPException(status_code=404, detail="Document has no file")
    doc = document_service.remove_file(db, doc, utc_now())
    return _single_response(db, ctx, doc)


@router.get("/{document_id}/file-url", response_model=FileUrlResponse)
async def file_url(document_id: str, ctx: TenantContext = Depends(require_tenant),
                   db: Session = Depends(get_db)):
    doc = _get_or_404(db, ctx, document_id)
    if not doc.file_path:
        raise HTTPException(status_code=404, detail="Document has no file")
    ttl = settings.signed_url_ttl_seconds
    return FileUrlResponse(url=storage.signed_url(DOCUMENT_BUCKET, doc.file_path, ttl), expires_in_seconds=ttl)


@router.get("/{document_id}/download")
async def download_file(document_id: str, ctx: TenantContext = Depends(require_tenant),
                        db: Session = Depends(get_db)):
    doc = _get_or_404(db, ctx, document_id)
    if not doc.file_path:
        raise HTTPException(status_code=404, detail="Document has no file")
    try:
        full_path = storage.full_path(DOCUMENT_BUCKET, doc.file_path)
    except FileNotFoundError:
        raise HTTPException(status_code=404, detail="Document file missing from storage")

    return FileResponse(
        path=str(full_path),
        filename=doc.file_name,
        media_type=doc.file_type or "application/octet-stream",
    )
