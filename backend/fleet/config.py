import secrets
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    data_path: Path = Path.home() / "FleetBackOffice"
    session_ttl_seconds: int = 8 * 60 * 60
    # Signed file URLs are the only credential for /files, keep them short-lived.
    signed_url_ttl_seconds: int = 3600
    signing_secret: str = Field(default_factory=lambda: secrets.token_hex(32))
    max_upload_bytes: int = 10 * 1024 * 1024  # 10 MiB
    max_photo_bytes: int = 5 * 1024 * 1024  # 5 MiB
    expiry_warning_days: int = 30
    page_size_options: tuple[int, ...] = (5, 10, 25)
    default_page_size: int = 10
    api_prefix: str = "/api/v1"
    log_level: str = "INFO"
    host: str = "127.0.0.1"
    port: int = 8000

    @property
    def db_path(self) -> Path:
        return self.data_path / "fleet.sqlite"

    @property
    def storage_path(self) -> Path:
        return self.data_path / "storage"

    model_config = {"env_prefix": "FLEET_"}


settings = Settings()
