from __future__ import annotations

from types import SimpleNamespace

import pytest
from fastapi.security import HTTPAuthorizationCredentials

from mini_crm.core.authorization import (
    CUSTOMERS_READ,
    CUSTOMERS_WRITE,
    PROFILE_READ,
    TASKS_CREATE,
    TASKS_READ,
    TASKS_UPDATE_STATUS,
    USERS_MANAGE,
    Identity,
    authenticate,
)
from mini_crm.core.config import Settings
from mini_crm.core.context import get_user_id
from mini_crm.core.security import create_access_token
from mini_crm.deps import require_identity
from mini_crm.errors import ForbiddenError, UnauthenticatedError
from mini_crm.models import UserRole

ADMIN = Identity(user_id=1, role=UserRole.ADMIN)
EMPLOYEE = Identity(user_id=2, role=UserRole.EMPLOYEE)


def test_authenticate_requires_a_token(settings: Settings) -> None:
    with pytest.raises(UnauthenticatedError) as exc_info:
        authenticate(None, settings)

    assert exc_info.value.message == "Authorization token missing."
    assert exc_info.value.headers == {"WWW-Authenticate": "Bearer"}


def test_authenticate_rejects_invalid_token(settings: Settings) -> None:
    with pytest.raises(UnauthenticatedError) as exc_info:
        authenticate("garbage", settings)

    assert exc_info.value.message == "Invalid or expired token."


def test_authenticate_builds_identity_from_claims(settings: Settings) -> None:
    token = create_access_token(user_id=42, role=UserRole.EMPLOYEE, settings=settings).token

    assert authenticate(token, settings) == Identity(user_id=42, role=UserRole.EMPLOYEE)


@pytest.mark.asyncio
async def test_require_identity_attaches_identity_then_applies_role_set(settings: Settings) -> None:
    token = create_access_token(user_id=2, role=UserRole.EMPLOYEE, settings=settings).token
    credentials = HTTPAuthorizationCredentials(scheme="Bearer", credentials=token)
    allowed = SimpleNamespace(state=SimpleNamespace())
    denied = SimpleNamespace(state=SimpleNamespace())

    identity = await require_identity(CUSTOMERS_READ)(allowed, settings, credentials)
    with pytest.raises(ForbiddenError) as exc_info:
        await require_identity(CUSTOMERS_WRITE)(denied, settings, credentials)

    assert identity == Identity(user_id=2, role=UserRole.EMPLOYEE)
    assert allowed.state.identity == identity
    assert denied.state.identity == identity
    assert exc_info.value.message == "Forbidden: insufficient permissions."
    assert get_user_id() == "2"


@pytest.mark.asyncio
async def test_require_identity_without_credentials(settings: Settings) -> None:
    request = SimpleNamespace(state=SimpleNamespace())

    with pytest.raises(UnauthenticatedError) as exc_info:
        await require_identity(CUSTOMERS_READ)(request, settings, None)

    assert exc_info.value.message == "Authorization token missing."
    assert not hasattr(request.state, "identity")


@pytest.mark.parametrize(
    ("policy", "employee_allowed"),
    [
        (CUSTOMERS_READ, True),
        (CUSTOMERS_WRITE, False),
        (TASKS_CREATE, False),
        (TASKS_READ, True),
        (TASKS_UPDATE_STATUS, True),
        (USERS_MANAGE, False),
        (PROFILE_READ, True),
    ],
)
def test_policy_table(policy, employee_allowed: bool) -> None:
    assert policy.authorize(ADMIN) is ADMIN
    if employee_allowed:
        assert policy.authorize(EMPLOYEE) is EMPLOYEE
    else:
        with pytest.raises(ForbiddenError):
            policy.authorize(EMPLOYEE)


def test_ownership_check_restricts_employees_to_their_own_tasks() -> None:
    own_task = SimpleNamespace(assigned_to=EMPLOYEE.user_id)
    other_task = SimpleNamespace(assigned_to=99)

    TASKS_UPDATE_STATUS.authorize_resource(EMPLOYEE, own_task)
    TASKS_UPDATE_STATUS.authorize_resource(ADMIN, other_task)
    with pytest.raises(ForbiddenError) as exc_info:
        TASKS_UPDATE_STATUS.authorize_resource(EMPLOYEE, other_task)

    assert exc_info.value.message == "Forbidden: cannot update task of another user."
    assert exc_info.value.details == {"policy": "tasks.update_status"}
