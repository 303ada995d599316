"""
Application entry point for the virtual file system service.

The application factory provisions the shared file system tree once and
wires the services, routers, error handlers and the broadcast WebSocket.
"""

import logging
from typing import Optional
from fastapi import FastAPI, Request, WebSocket, WebSocketDisconnect
from fastapi.responses import JSONResponse

from vfsapi.config import Settings, load_settings
from vfsapi.filesystem.errors import FileSystemError
from vfsapi.routers import commands, sessions, tree
from vfsapi.services.commands import CommandService
from vfsapi.services.context import FileSystemContext
from vfsapi.services.sessions import SessionError, SessionService
from vfsapi.websocket import ConnectionManager

logger = logging.getLogger(__name__)


def configure_logging(level: str):
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )
    logging.getLogger("vfsapi").setLevel(level)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        settings: Service settings (read from the environment if omitted)

    Returns:
        Configured FastAPI app with its own file system tree
    """
    if settings is None:
        settings = load_settings()

    configure_logging(settings.log_level)

    app = FastAPI(title="Virtual File System", version="1.0.0")

    context = FileSystemContext.create(settings.volumes)
    app.state.settings = settings
    app.state.context = context
    app.state.session_service = SessionService(default_directory=context.console.default_directory)
    app.state.command_service = CommandService(context, print_root=settings.print_root)
    app.state.manager = ConnectionManager()

    app.include_router(sessions.router)
    app.include_router(commands.router)
    app.include_router(tree.router)

    @app.exception_handler(FileSystemError)
    async def file_system_error_handler(request: Request, exc: FileSystemError):
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": exc.message, "error": exc.kind}
        )

    @app.exception_handler(SessionError)
    async def session_error_handler(request: Request, exc: SessionError):
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": exc.message, "error": exc.kind}
        )

    @app.websocket("/ws")
    async def websocket_endpoint(websocket: WebSocket):
        """Clients listen here for command notifications"""
        manager: ConnectionManager = websocket.app.state.manager
        await manager.connect(websocket)
        try:
            while True:
                # Incoming messages are ignored; the socket is broadcast-only
                await websocket.receive_text()
        except WebSocketDisconnect:
            logger.debug("WebSocket client disconnected")
        finally:
            manager.disconnect(websocket)

    logger.info(f"Virtual file system service ready with volumes: {', '.join(settings.volumes)}")
    return app


app = create_app()
