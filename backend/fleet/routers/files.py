from fastapi import APIRouter, HTTPException
from fastapi.responses import FileResponse

from fleet.services.storage_service import StorageError, storage

router = APIRouter(prefix="/files", tags=["files"])


@router.get("/{bucket}/{path:path}")
async def get_file(bucket: str, path: str, token: str):
    """Serve a stored object to holders of a valid, unexpired signed URL."""
    if not storage.check_signature(bucket, path, token):
        raise HTTPException(status_code=403, detail="Invalid or expired signature")

    try:
        full_path = storage.full_path(bucket, path)
    except (FileNotFoundError, StorageError):
        raise HTTPException(status_code=404, detail="File not found")
    return FileResponse(path=str(full_path))
