from __future__ import annotations

from typing import Any

import structlog
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from opentelemetry.trace import Span

from webapp.api.deps import get_user_store, iso_now, request_span
from webapp.models.schemas import CreateUserRequest, UserResponse, UsersResponse
from webapp.observability.tracing import add_event, set_attributes, set_error
from webapp.services.user_store import UserStore

router = APIRouter(prefix="/api", tags=["users"])


def _is_blank(value: Any) -> bool:
    """None, false, zero and the empty string count as missing; empty lists or objects do not."""

    return value is None or value is False or value == "" or value == 0


def _parse_user_id(raw: str) -> int | None:
    try:
        return int(raw.strip())
    except ValueError:
        return None


@router.get("/users", response_model=UsersResponse)
async def list_users(
    store: UserStore = Depends(get_user_store),
    span: Span | None = Depends(request_span),
) -> UsersResponse:
    users = store.list_users()

    add_event(span, "Fetching all users")
    set_attributes(span, {"custom.route": "users_list", "custom.users_count": len(users)})

    structlog.get_logger(__name__).info("Users list requested", count=len(users))

    return UsersResponse(users=users, total=len(users), timestamp=iso_now())


@router.get("/users/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: str,
    store: UserStore = Depends(get_user_store),
    span: Span | None = Depends(request_span),
):
    logger = structlog.get_logger(__name__)
    parsed_id = _parse_user_id(user_id)

    add_event(span, "Fetching user by ID")
    set_attributes(span, {"custom.route": "user_by_id"})
    if parsed_id is not None:
        set_attributes(span, {"custom.user_id": parsed_id})

    user = store.get(parsed_id) if parsed_id is not None else None
    if user is None:
        set_error(span, "User not found")
        logger.warning("User not found", userId=parsed_id if parsed_id is not None else user_id)
        return JSONResponse(status_code=404, content={"error": "User not found"})

    set_attributes(span, {"custom.user_name": user.name, "custom.user_role": user.role})
    logger.info("User found", userId=user.id, userName=user.name)

    return UserResponse(user=user, timestamp=iso_now())


@router.post("/users", response_model=UserResponse, status_code=201)
async def create_user(
    payload: CreateUserRequest | None = None,
    store: UserStore = Depends(get_user_store),
    span: Span | None = Depends(request_span),
):
    logger = structlog.get_logger(__name__)
    payload = payload or CreateUserRequest()

    add_event(span, "Creating new user")
    set_attributes(span, {"custom.route": "create_user", "custom.user_role": payload.role})

    if _is_blank(payload.name) or _is_blank(payload.email):
        set_error(span, "Missing required fields")
        logger.error("User creation failed - missing fields", name=payload.name, email=payload.email)
        return JSONResponse(status_code=400, content={"error": "Name and email are required"})

    user = store.create(name=payload.name, email=payload.email, role=payload.role)

    set_attributes(span, {"custom.user_id": user.id, "custom.user_name": user.name})
    logger.info("User created", userId=user.id, userName=user.name, userEmail=user.email)

    return UserResponse(user=user, timestamp=iso_now())
