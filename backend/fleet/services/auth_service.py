import logging
import time
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone

from sqlalchemy.orm import Session
from sqlalchemy import text

from fleet.config import settings
from fleet.models.tenant import Tenant, User
from fleet.utils.security import generate_token, hash_password, verify_password

logger = logging.getLogger("fleet.auth")


@dataclass(frozen=True)
class TenantContext:
    """Who is calling and which tenant every read and write is scoped to."""
    user_id: str
    tenant_id: str
    email: str


class AuthError(Exception):
    pass


class AuthService:
    def __init__(self):
        self._sessions: dict[str, tuple[float, TenantContext]] = {}  # token -> (expires_at, ctx)

    def _cleanup_expired(self):
        now = time.time()
        self._sessions = {
            t: entry for t, entry in self._sessions.items() if entry[0] > now
        }

    def register(self, db: Session, email: str, password: str, tenant_name: str,
                 full_name: str | None = None) -> TenantContext:
        email = email.strip().lower()
        if db.query(User).filter(User.email == email).first():
            raise AuthError("Email already registered")

        now = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")
        tenant = Tenant(id=str(uuid.uuid4()), name=tenant_name, created_at=now)
        user = User(
            id=str(uuid.uuid4()),
            tenant_id=tenant.id,
            email=email,
            full_name=full_name,
            password_hash=hash_password(password),
            created_at=now,
        )
        db.add(tenant)
        db.add(user)
        db.commit()
        logger.info("Registered tenant %s", tenant.id)
        return TenantContext(user_id=user.id, tenant_id=tenant.id, email=user.email)

    def login(self, db: Session, email: str, password: str, throttle_key: str = "login") -> dict | None:
        delay = self._get_throttle_delay(db, throttle_key)
        if delay > 0:
            return {"error": "too_many_attempts", "retry_after_seconds": delay}

        user = db.query(User).filter(User.email == email.strip().lower()).first()
        if not user or not verify_password(user.password_hash, password):
            self._record_failed_attempt(db, throttle_key)
            return None

        self._reset_failed_attempts(db, throttle_key)
        ctx = TenantContext(user_id=user.id, tenant_id=user.tenant_id, email=user.email)
        token = generate_token()
        self._sessions[token] = (time.time() + settings.session_ttl_seconds, ctx)
        return {"token": token, "expires_in_seconds": settings.session_ttl_seconds}

    def logout(self, token: str):
        self._sessions.pop(token, None)

    def context_for(self, token: str) -> TenantContext | None:
        self._cleanup_expired()
        entry = self._sessions.get(token)
        return entry[1] if entry else None

    def _get_throttle_delay(self, db: Session, key: str) -> float:
        row = db.execute(
            text("SELECT failed_attempts, last_failed_at FROM auth_throttle WHERE key = :key"),
            {"key": key},
        ).fetchone()
        if not row:
            return 0
        failed_attempts = int(row[0])
        last_failed_at = float(row[1])

        if failed_attempts < 3:
            return 0
        if failed_attempts < 5:
            delay = 5.0
        elif failed_attempts < 10:
            delay = 30.0
        else:
            delay = 300.0
        elapsed = time.time() - last_failed_at
        remaining = delay - elapsed
        return max(0, remaining)

    def _record_failed_attempt(self, db: Session, key: str):
        now = time.time()
        db.execute(
            text(
                """
                INSERT INTO auth_throttle (key, failed_attempts, last_failed_at)
                VALUES (:key, 1, :now)
                ON CONFLICT(key) DO UPDATE SET
                    failed_attempts = failed_attempts + 1,
                    last_failed_at = :now
                """
            ),
            {"key": key, "now": now},
        )
        db.commit()
        logger.warning("Failed login attempt for %s", key)

    def _reset_failed_attempts(self, db: Session, key: str):
        db.execute(
            text(
                """
                INSERT INTO auth_throttle (key, failed_attempts, last_failed_at)
                VALUES (:key, 0, :now)
                ON CONFLICT(key) DO UPDATE SET
                    failed_attempts = 0,
                    last_failed_at = :now
                """
            ),
            {"key": key, "now": time.time()},
        )
        db.commit()


auth_service = AuthService()
