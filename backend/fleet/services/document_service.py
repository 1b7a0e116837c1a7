"""
Document metadata and attached files kept consistent across the database
and object storage.

The row and the file live in different stores with no shared transaction.
Deletions stage the row change, remove the file, and only then commit: when
the file cannot be removed the row change is rolled back and ``StorageError``
propagates, so a caller never sees a success that left an orphan behind.
"""
import logging
import time
import uuid

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from fleet.models.document import Document
from fleet.services.auth_service import TenantContext
from fleet.services.storage_service import DOCUMENT_BUCKET, StorageError, storage
from fleet.utils.filesystem import sanitize_filename

logger = logging.getLogger("fleet.documents")


def document_file_path(ctx: TenantContext, doc: Document, filename: str) -> str:
    safe_name = sanitize_filename(filename or "file")
    stamp = f"{int(time.time() * 1000)}_{uuid.uuid4().hex[:8]}"
    return f"{ctx.tenant_id}/{doc.entity_type}/{doc.entity_id}/{stamp}_{safe_name}"


def attach_file(db: Session, ctx: TenantContext, doc: Document, filename: str,
                content: bytes, content_type: str | None, now: str) -> Document:
    """Upload a file for ``doc``, replacing any previous one."""
    old_path = doc.file_path
    new_path = storage.upload(DOCUMENT_BUCKET, document_file_path(ctx, doc, filename), content)

    doc.file_path = new_path
    doc.file_name = filename
    doc.file_size = len(content)
    doc.file_type = content_type
    doc.updated_at = now
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        storage.delete(DOCUMENT_BUCKET, new_path)
        raise
    db.refresh(doc)

    if old_path:
        try:
            storage.delete(DOCUMENT_BUCKET, old_path)
        except StorageError:
            # The new file is already referenced; the old object is left behind.
            logger.error("Orphaned document file %s after replacement on %s", old_path, doc.id)
    return doc


def remove_file(db: Session, doc: Document, now: str) -> Document:
    old_path = doc.file_path
    if not old_path:
        return doc

    doc.file_path = None
    doc.file_name = None
    doc.file_size = None
    doc.file_type = None
    doc.updated_at = now
    db.flush()
    try:
        storage.delete(DOCUMENT_BUCKET, old_path)
    except StorageError:
        db.rollback()
        raise
    db.commit()
    db.refresh(doc)
    return doc


def delete_document(db: Session, doc: Document):
    file_path = doc.file_path
    doc_id = doc.id
    db.delete(doc)
    db.flush()

    if file_path:
        try:
            storage.delete(DOCUMENT_BUCKET, file_path)
        except StorageError:
            db.rollback()
            logger.error("Document %s kept: its file %s could not be deleted", doc_id, file_path)
            raise

    try:
        db.commit()
    except SQLAlchemyError:
        if file_path:
            logger.error("Document %s lost its file %s but the row delete failed", doc_id, file_path)
        raise
    logger.info("Deleted document %s", doc_id)
