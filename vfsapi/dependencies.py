from fastapi import Request

from vfsapi.services.commands import CommandService
from vfsapi.services.context import FileSystemContext
from vfsapi.services.sessions import SessionService
from vfsapi.websocket import ConnectionManager


def get_context(request: Request) -> FileSystemContext:
    return request.app.state.context


def get_session_service(request: Request) -> SessionService:
    return request.app.state.session_service


def get_command_service(request: Request) -> CommandService:
    return request.app.state.command_service


def get_connection_manager(request: Request) -> ConnectionManager:
    return request.app.state.manager
