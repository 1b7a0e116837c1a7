from pydantic import BaseModel, Field, field_validator

from fleet.schemas.common import NonBlank, check_email


class RegisterRequest(BaseModel):
    email: NonBlank
    password: str = Field(min_length=8)
    tenant_name: NonBlank
    full_name: str | None = None

    @field_validator("email")
    @classmethod
    def valid_email(cls, value: str) -> str:
        return check_email(value)


class RegisterResponse(BaseModel):
    user_id: str
    tenant_id: str
    email: str


class LoginRequest(BaseModel):
    email: NonBlank
    password: str


class LoginResponse(BaseModel):
    token: str
    expires_in_seconds: int


class ThrottleResponse(BaseModel):
    error: str
    retry_after_seconds: float


class MeResponse(BaseModel):
    user_id: str
    tenant_id: str
    email: str
