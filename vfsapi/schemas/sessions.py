from pydantic import BaseModel


class AuthorizeRequest(BaseModel):
    """Request to open a session"""
    user_name: str


class AuthorizeResponse(BaseModel):
    """Session opened for a user"""
    user_name: str
    token: str
    total_users: int


class DeauthorizeRequest(BaseModel):
    """Request to close a session"""
    user_name: str
    token: str


class DeauthorizeResponse(BaseModel):
    """Session closed"""
    user_name: str


class UserConnected(BaseModel):
    """User connected event for WebSocket broadcast"""
    user_name: str
    total_users: int


class UserDisconnected(BaseModel):
    """User disconnected event for WebSocket broadcast"""
    user_name: str
    total_users: int
