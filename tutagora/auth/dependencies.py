from typing import AsyncIterator

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from tutagora.core.errors import GatewayError
from tutagora.database import SessionLocal
from tutagora.gateway.client import GatewayClient
from tutagora.services.session import SessionContext

security = HTTPBearer(auto_error=False)


def get_gateway(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
) -> GatewayClient:
    token = credentials.credentials if credentials else None
    return GatewayClient(SessionLocal, access_token=token)


async def get_session_context(
    gateway: GatewayClient = Depends(get_gateway),
) -> AsyncIterator[SessionContext]:
    context = SessionContext(gateway)
    try:
        await context.initialize()
    except GatewayError as exc:
        context.close()
        raise exc.to_http_exception() from exc

    try:
        yield context
    finally:
        context.close()


def get_current_context(
    context: SessionContext = Depends(get_session_context),
) -> SessionContext:
    if context.session is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")
    if context.profile is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Profile not found")
    return context
