import logging
import uuid

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from sqlalchemy import func
from sqlalchemy.orm import Session

from fleet.config import settings
from fleet.database import get_db
from fleet.dependencies import require_tenant
from fleet.domain.validity import classify
from fleet.models.document import Document
from fleet.models.driver import Driver
from fleet.schemas.driver import DriverCreate, DriverListResponse, DriverResponse, DriverUpdate
from fleet.services.auth_service import TenantContext
from fleet.services.list_specs import DRIVER_LIST
from fleet.services.query import run_list
from fleet.services.storage_service import PHOTO_BUCKET, StorageError, storage
from fleet.utils.dates import db_values, utc_now
from fleet.utils.filesystem import sanitize_filename
from fleet.utils.uploads import read_upload

logger = logging.getLogger("fleet.drivers")

router = APIRouter(prefix="/drivers", tags=["drivers"])

_REQUIRED = ("name", "cpf", "birth_date", "phone", "cnh_number", "cnh_category",
             "cnh_expiration_date", "admission_date", "status")


def _driver_to_response(driver: Driver) -> DriverResponse:
    photo_url = storage.signed_url(PHOTO_BUCKET, driver.photo_path) if driver.photo_path else None
    return DriverResponse(
        id=driver.id,
        name=driver.name,
        cpf=driver.cpf,
        birth_date=driver.birth_date,
        phone=driver.phone,
        email=driver.email,
        photo_url=photo_url,
        cnh_number=driver.cnh_number,
        cnh_category=driver.cnh_category,
        cnh_expiration_date=driver.cnh_expiration_date,
        cnh_status=classify(driver.cnh_expiration_date, window_days=settings.expiry_warning_days).value,
        admission_date=driver.admission_date,
        status=driver.status,
        address_cep=driver.address_cep,
        address_street=driver.address_street,
        address_number=driver.address_number,
        address_complement=driver.address_complement,
        address_neighborhood=driver.address_neighborhood,
        address_city=driver.address_city,
        address_state=driver.address_state,
        emergency_contact_name=driver.emergency_contact_name,
        emergency_contact_phone=driver.emergency_contact_phone,
        notes=driver.notes,
        created_at=driver.created_at,
        updated_at=driver.updated_at,
    )


def get_driver_or_404(db: Session, ctx: TenantContext, driver_id: str) -> Driver:
    driver = db.query(Driver).filter(Driver.id == driver_id, Driver.tenant_id == ctx.tenant_id).first()
    if not driver:
        raise HTTPException(status_code=404, detail="Driver not found")
    return driver


@router.post("", response_model=DriverResponse, status_code=201)
async def create_driver(req: DriverCreate, ctx: TenantContext = Depends(require_tenant),
                        db: Session = Depends(get_db)):
    now = utc_now()
    driver = Driver(
        id=str(uuid.uuid4()),
        tenant_id=ctx.tenant_id,
        created_at=now,
        updated_at=now,
        **db_values(req.model_dump()),
    )
    db.add(driver)
    db.commit()
    db.refresh(driver)
    return _driver_to_response(driver)


@router.get("", response_model=DriverListResponse)
async def list_drivers(
    name: str | None = None,
    cpf: str | None = None,
    status: str | None = None,
    cnh_category: str | None = None,
    page: int = 0,
    per_page: int = settings.default_page_size,
    ctx: TenantContext = Depends(require_tenant),
    db: Session = Depends(get_db),
):
    criteria = {"name": name, "cpf": cpf, "status": status, "cnh_category": cnh_category}
    result = run_list(db, ctx, DRIVER_LIST, criteria, page, per_page)
    return DriverListResponse(
        drivers=[_driver_to_response(d) for d in result.items],
        total=result.total,
        page=result.page,
        per_page=result.per_page,
        has_more=result.has_more,
        message=result.message,
    )


@router.get("/{driver_id}", response_model=DriverResponse)
async def get_driver(driver_id: str, ctx: TenantContext = Depends(require_tenant),
                     db: Session = Depends(get_db)):
    return _driver_to_response(get_driver_or_404(db, ctx, driver_id))


@router.put("/{driver_id}", response_model=DriverResponse)
async def update_driver(driver_id: str, req: DriverUpdate, ctx: TenantContext = Depends(require_tenant),
                        db: Session = Depends(get_db)):
    driver = get_driver_or_404(db, ctx, driver_id)
    update_data = db_values(req.model_dump(exclude_unset=True))
    for required in _REQUIRED:
        if required in update_data and update_data[required] is None:
            raise HTTPException(status_code=400, detail=f"{required} cannot be empty")

    for key, value in update_data.items():
        setattr(driver, key, value)
    driver.updated_at = utc_now()

    db.commit()
    db.refresh(driver)
    return _driver_to_response(driver)


@router.delete("/{driver_id}")
async def delete_driver(driver_id: str, ctx: TenantContext = Depends(require_tenant),
                        db: Session = Depends(get_db)):
    driver = get_driver_or_404(db, ctx, driver_id)
    doc_count = db.query(func.count(Document.id)).filter(Document.driver_id == driver.id).scalar()
    if doc_count:
        raise HTTPException(status_code=409, detail="Driver has documents attached; delete them first")

    photo_path = driver.photo_path
    db.delete(driver)
    db.flush()
    if photo_path:
        try:
            storage.delete(PHOTO_BUCKET, photo_path)
        except StorageError:
            db.rollback()
            logger.error("Kept driver %s: photo %s could not be removed", driver_id, photo_path)
            raise
    db.commit()
    return {"message": "Driver deleted"}


@router.post("/{driver_id}/photo", response_model=DriverResponse)
async def upload_photo(driver_id: str, file: UploadFile = File(...),
                       ctx: TenantContext = Depends(require_tenant), db: Session = Depends(get_db)):
    driver = get_driver_or_404(db, ctx, driver_id)
    if not (file.content_type or "").startswith("image/"):
        raise HTTPException(status_code=400, detail="Only image files are accepted")
    content = await read_upload(file, settings.max_photo_bytes)

    filename = file.filename or ""
    ext = sanitize_filename(filename.rsplit(".", 1)[-1]) if "." in filename else "img"
    new_path = storage.upload(PHOTO_BUCKET, f"{ctx.tenant_id}/{uuid.uuid4().hex}.{ext}", content)

    old_path = driver.photo_path
    driver.photo_path = new_path
    driver.updated_at = utc_now()
    db.commit()
    db.refresh(driver)

    if old_path:
        try:
            storage.delete(PHOTO_BUCKET, old_path)
        except StorageError:
            logger.error("Orphaned photo %s replaced on driver %s", old_path, driver.id)
    return _driver_to_response(driver)


@router.delete("/{driver_id}/photo", response_model=DriverResponse)
async def remove_photo(driver_id: str, ctx: TenantContext = Depends(require_tenant),
                       db: Session = Depends(get_db)):
    driver = get_driver_or_404(db, ctx, driver_id)
    if not driver.photo_path:
        raise HTTPException(status_code=404, detail="Driver has no photo")

    old_path = driver.photo_path
    driver.photo_path = None
    driver.updated_at = utc_now()
    db.flush()
    try:
        storage.delete(PHOTO_BUCKET, old_path)
    except StorageError:
        db.rollback()
        raise
    db.commit()
    db.refresh(driver)
    return _driver_to_response(driver)
