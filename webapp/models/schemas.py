from __future__ import annotations

from typing import Any

from pydantic import BaseModel


# Field values are stored as sent; only presence of name and email is checked.
class User(BaseModel):
    id: int
    name: Any
    email: Any
    role: Any = "user"


class CreateUserRequest(BaseModel):
    # Missing fields map to a 400 in the handler, not a 422 here.
    name: Any = None
    email: Any = None
    role: Any = "user"


class HealthResponse(BaseModel):
    status: str
    timestamp: str
    uptime: float
    version: str


class UsersResponse(BaseModel):
    users: list[User]
    total: int
    timestamp: str


class UserResponse(BaseModel):
    user: User
    timestamp: str


class SlowResponse(BaseModel):
    message: str
    delay: int
    timestamp: str
