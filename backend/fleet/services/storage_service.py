"""
Object storage for driver photos and document files.

Objects live under ``<storage_path>/<bucket>/<path>``. Access from outside
the API goes through signed URLs: ``/files/<bucket>/<path>?token=...`` where the
token is an HS256 JWT naming the bucket and path, with an ``exp`` claim.
"""
import logging
import time
from pathlib import Path
from urllib.parse import quote, urlencode

from jose import JWTError, jwt

from fleet.config import settings
from fleet.utils.filesystem import ensure_storage_dirs

logger = logging.getLogger("fleet.storage")

DOCUMENT_BUCKET = "document-files"
PHOTO_BUCKET = "driver-photos"
BUCKETS = (DOCUMENT_BUCKET, PHOTO_BUCKET)
SIGNING_ALGORITHM = "HS256"


class StorageError(Exception):
    pass


class ObjectStorage:
    def __init__(self, root: Path | None = None):
        self._root = root

    @property
    def root(self) -> Path:
        return self._root or settings.storage_path

    def _resolve(self, bucket: str, path: str) -> Path:
        if bucket not in BUCKETS:
            raise StorageError(f"Unknown bucket: {bucket}")
        base = (self.root / bucket).resolve()
        full = (base / path).resolve()
        if base not in full.parents:
            raise StorageError("Path escapes bucket")
        return full

    def upload(self, bucket: str, path: str, content: bytes) -> str:
        full = self._resolve(bucket, path)
        if full.exists():
            raise StorageError(f"Object already exists: {bucket}/{path}")
        try:
            ensure_storage_dirs(self.root)
            full.parent.mkdir(parents=True, exist_ok=True)
            full.write_bytes(content)
        except OSError as exc:
            logger.error("Upload of %s/%s failed: %s", bucket, path, exc)
            raise StorageError(f"Could not store {bucket}/{path}") from exc
        return path

    def delete(self, bucket: str, path: str):
        full = self._resolve(bucket, path)
        try:
            full.unlink()
        except FileNotFoundError:
            logger.warning("Object %s/%s already gone", bucket, path)
        except OSError as exc:
            logger.error("Delete of %s/%s failed: %s", bucket, path, exc)
            raise StorageError(f"Could not delete {bucket}/{path}") from exc

    def full_path(self, bucket: str, path: str) -> Path:
        full = self._resolve(bucket, path)
        if not full.is_file():
            raise FileNotFoundError(f"{bucket}/{path}")
        return full

    def signed_url(self, bucket: str, path: str, expires_in: int | None = None) -> str:
        self._resolve(bucket, path)
        expires = int(time.time()) + (expires_in or settings.signed_url_ttl_seconds)
        token = jwt.encode({"bucket": bucket, "path": path, "exp": expires},
                           settings.signing_secret, algorithm=SIGNING_ALGORITHM)
        return f"{settings.api_prefix}/files/{bucket}/{quote(path)}?{urlencode({'token': token})}"

    def check_signature(self, bucket: str, path: str, token: str) -> bool:
        try:
            claims = jwt.decode(token, settings.signing_secret, algorithms=[SIGNING_ALGORITHM])
        except JWTError as exc:
            logger.warning("Rejected file token for %s/%s: %s", bucket, path, exc)
            return False
        return claims.get("bucket") == bucket and claims.get("path") == path


storage = ObjectStorage()
