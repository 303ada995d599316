from fastapi import APIRouter, Depends
from fastapi.concurrency import run_in_threadpool

from vfsapi.dependencies import get_command_service, get_connection_manager, get_session_service
from vfsapi.schemas.commands import CommandRequest, CommandResponse, ErrorResponse
from vfsapi.services.commands import CommandService
from vfsapi.services.sessions import SessionService
from vfsapi.websocket import ConnectionManager

router = APIRouter(prefix="/api/commands", tags=["commands"])

ERROR_RESPONSES = {status: {"model": ErrorResponse} for status in (400, 401, 404, 409, 423)}


@router.post("", response_model=CommandResponse, responses=ERROR_RESPONSES)
async def perform_command(
    request: CommandRequest,
    sessions: SessionService = Depends(get_session_service),
    commands: CommandService = Depends(get_command_service),
    manager: ConnectionManager = Depends(get_connection_manager),
):
    """
    Run a command line for an authorized user and broadcast tree changes
    """
    session = sessions.get_session(request.user_name, request.token)

    # Commands may wait on the tree lock, keep them off the event loop
    result = await run_in_threadpool(commands.perform, session, request.command_line)

    if result.notification is not None:
        await manager.broadcast("command_performed", result.notification.model_dump())

    return CommandResponse(
        user_name=session.user_name,
        command_line=request.command_line,
        current_directory=result.current_directory,
        response_message=result.response_message
    )
