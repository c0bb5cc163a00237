from fastapi import APIRouter, Depends, Response, status

from tutagora.auth.dependencies import get_current_context, get_session_context
from tutagora.core.errors import GatewayError
from tutagora.schemas import AccountResponse, LoginRequest, ProfileResponse, SignUpRequest, TokenResponse
from tutagora.services.session import SessionContext

router = APIRouter(tags=['auth'])


@router.post('/signup', response_model=AccountResponse, status_code=status.HTTP_201_CREATED)
async def sign_up(data: SignUpRequest, context: SessionContext = Depends(get_session_context)):
    try:
        return await context.sign_up(data.email, data.password, data.full_name, data.role)
    except GatewayError as exc:
        raise exc.to_http_exception() from exc


@router.post('/login', response_model=TokenResponse)
async def login(data: LoginRequest, context: SessionContext = Depends(get_session_context)):
    try:
        profile = await context.sign_in(data.email, data.password)
    except GatewayError as exc:
        raise exc.to_http_exception() from exc

    return TokenResponse(access_token=context.gateway.access_token, profile=profile)


@router.post('/logout', status_code=status.HTTP_204_NO_CONTENT)
async def logout(context: SessionContext = Depends(get_current_context)):
    try:
        await context.sign_out()
    except GatewayError as exc:
        raise exc.to_http_exception() from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get('/me', response_model=ProfileResponse)
def me(context: SessionContext = Depends(get_current_context)):
    return context.profile
