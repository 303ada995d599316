from fastapi import APIRouter, Depends

from vfsapi.dependencies import get_connection_manager, get_session_service
from vfsapi.schemas.commands import ErrorResponse
from vfsapi.schemas.sessions import (
    AuthorizeRequest, AuthorizeResponse, DeauthorizeRequest, DeauthorizeResponse,
    UserConnected, UserDisconnected
)
from vfsapi.services.sessions import SessionService
from vfsapi.websocket import ConnectionManager

router = APIRouter(prefix="/api/sessions", tags=["sessions"])

AUTHORIZE_ERRORS = {400: {"model": ErrorResponse}, 409: {"model": ErrorResponse}}
DEAUTHORIZE_ERRORS = {401: {"model": ErrorResponse}}


@router.post("", response_model=AuthorizeResponse, responses=AUTHORIZE_ERRORS)
async def authorize(
    request: AuthorizeRequest,
    sessions: SessionService = Depends(get_session_service),
    manager: ConnectionManager = Depends(get_connection_manager),
):
    """
    Open a session and return its token
    """
    session = sessions.authorize(request.user_name)

    await manager.broadcast(
        "user_connected",
        UserConnected(user_name=session.user_name, total_users=sessions.total_users).model_dump()
    )

    return AuthorizeResponse(
        user_name=session.user_name,
        token=session.token,
        total_users=sessions.total_users
    )


@router.post("/deauthorize", response_model=DeauthorizeResponse, responses=DEAUTHORIZE_ERRORS)
async def deauthorize(
    request: DeauthorizeRequest,
    sessions: SessionService = Depends(get_session_service),
    manager: ConnectionManager = Depends(get_connection_manager),
):
    """
    Close a session
    """
    session = sessions.deauthorize(request.user_name, request.token)

    await manager.broadcast(
        "user_disconnected",
        UserDisconnected(user_name=session.user_name, total_users=sessions.total_users).model_dump()
    )

    return DeauthorizeResponse(user_name=session.user_name)
