from fastapi import Depends, Header, HTTPException

from fleet.services.auth_service import TenantContext, auth_service


async def require_token(authorization: str = Header(...)) -> str:
    if not authorization.startswith("Bearer "):
        raise HTTPException(status_code=401, detail="Missing bearer token")
    return authorization[7:]


async def require_tenant(token: str = Depends(require_token)) -> TenantContext:
    ctx = auth_service.context_for(token)
    if ctx is None:
        raise HTTPException(status_code=401, detail="Session expired or invalid token")
    return ctx
