"""Routes handling registration and login."""

from __future__ import annotations

from fastapi import APIRouter, status

from ...deps import DatabaseSessionDependency, SettingsDependency
from ...schemas import LoginRequest, LoginResponse, RegisterRequest, UserPublic
from ...services import AuthService

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post(
    "/register",
    response_model=UserPublic,
    status_code=status.HTTP_201_CREATED,
    summary="Register a new user account",
)
async def register(
    payload: RegisterRequest,
    session: DatabaseSessionDependency,
    settings: SettingsDependency,
) -> UserPublic:
    user = await AuthService(session, settings).register(payload)
    return UserPublic.model_validate(user)


@router.post(
    "/login",
    response_model=LoginResponse,
    status_code=status.HTTP_200_OK,
    summary="Exchange email and password for an access token",
)
async def login(
    payload: LoginRequest,
    session: DatabaseSessionDependency,
    settings: SettingsDependency,
) -> LoginResponse:
    result = await AuthService(session, settings).login(payload)
    return LoginResponse(
        access_token=result.token.token,
        expires_in=result.token.expires_in,
        user=UserPublic.model_validate(result.user),
    )
