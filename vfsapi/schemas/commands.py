from pydantic import BaseModel


class CommandRequest(BaseModel):
    """Command line issued by an authorized user"""
    user_name: str
    token: str
    command_line: str


class CommandResponse(BaseModel):
    """Outcome of a successful command"""
    user_name: str
    command_line: str
    current_directory: str
    response_message: str


class CommandPerformed(BaseModel):
    """Notification broadcast to all clients after a tree mutation"""
    user_name: str
    command_line: str


class ErrorResponse(BaseModel):
    """Body of every error response"""
    detail: str
    error: str


class TreeResponse(BaseModel):
    """Printed file system tree"""
    tree: str
