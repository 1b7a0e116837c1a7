from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from fleet.database import get_db
from fleet.dependencies import require_tenant, require_token
from fleet.schemas.auth import (
    LoginRequest,
    LoginResponse,
    MeResponse,
    RegisterRequest,
    RegisterResponse,
    ThrottleResponse,
)
from fleet.services.auth_service import AuthError, TenantContext, auth_service

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=RegisterResponse, status_code=201)
async def register(req: RegisterRequest, db: Session = Depends(get_db)):
    try:
        ctx = auth_service.register(db, req.email, req.password, req.tenant_name, req.full_name)
    except AuthError as exc:
        raise HTTPException(status_code=409, detail=str(exc))
    return RegisterResponse(user_id=ctx.user_id, tenant_id=ctx.tenant_id, email=ctx.email)


@router.post("/login", response_model=LoginResponse | ThrottleResponse)
async def login(req: LoginRequest, request: Request, db: Session = Depends(get_db)):
    client_host = request.client.host if request.client else "unknown"
    result = auth_service.login(db, req.email, req.password, throttle_key=f"login:{client_host}")
    if result is None:
        raise HTTPException(status_code=401, detail="Invalid email or password")
    if "error" in result:
        raise HTTPException(status_code=429, detail=result)
    return LoginResponse(**result)


@router.post("/logout")
async def logout(token: str = Depends(require_token)):
    auth_service.logout(token)
    return {"message": "Logged out"}


@router.get("/me", response_model=MeResponse)
async def me(ctx: TenantContext = Depends(require_tenant)):
    return MeResponse(user_id=ctx.user_id, tenant_id=ctx.tenant_id, email=ctx.email)
