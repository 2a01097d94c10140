"""User administration and profile endpoints."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Path

from ...core.authorization import PROFILE_READ, USERS_MANAGE, Identity
from ...deps import DatabaseSessionDependency, require_identity
from ...errors import NotFoundError
from ...schemas import RoleUpdate, UserPublic
from ...services import UserService
from ...services.users import USER_NOT_FOUND_MESSAGE

router = APIRouter(prefix="/users", tags=["users"])

AdminDependency = Annotated[Identity, Depends(require_identity(USERS_MANAGE))]
UserIdPath = Annotated[int, Path(ge=1, description="User identifier.")]


@router.get("", response_model=list[UserPublic], summary="List all users")
async def list_users(session: DatabaseSessionDependency, _: AdminDependency) -> list[UserPublic]:
    users = await UserService(session).list_users()
    return [UserPublic.model_validate(user) for user in users]


@router.get("/me", response_model=UserPublic, summary="Return the authenticated user")
async def read_current_user(
    session: DatabaseSessionDependency,
    identity: Annotated[Identity, Depends(require_identity(PROFILE_READ))],
) -> UserPublic:
    user = await UserService(session).get_profile(identity)
    return UserPublic.model_validate(user)


@router.get("/{user_id}", response_model=UserPublic, summary="Fetch a user")
async def read_user(
    user_id: UserIdPath,
    session: DatabaseSessionDependency,
    _: AdminDependency,
) -> UserPublic:
    user = await UserService(session).get_user(user_id)
    if user is None:
        raise NotFoundError(USER_NOT_FOUND_MESSAGE)
    return UserPublic.model_validate(user)


@router.patch("/{user_id}", response_model=UserPublic, summary="Change a user's role")
async def update_user_role(
    user_id: UserIdPath,
    payload: RoleUpdate,
    session: DatabaseSessionDependency,
    _: AdminDependency,
) -> UserPublic:
    user = await UserService(session).update_role(user_id, payload)
    if user is None:
        raise NotFoundError(USER_NOT_FOUND_MESSAGE)
    return UserPublic.model_validate(user)
