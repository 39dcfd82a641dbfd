"""Module: auth."""

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from hospital_rx.api.v1.routes.deps import (
    get_current_identity,
    get_db,
    get_token_registry,
    get_token_value,
)
from hospital_rx.core.errors import AuthenticationError
from hospital_rx.core.security import VALID_ROLES, Identity, TokenRegistry, verify_password
from hospital_rx.db.models.user import User

router = APIRouter()


class LoginRequest(BaseModel):
    email: str
    password: str


class UserPayload(BaseModel):
    user_id: int
    email: str
    first_name: str | None = None
    last_name: str | None = None
    phone: str | None = None
    role: str


class LoginResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserPayload


def _normalize_email(value: str) -> str:
    return value.strip().lower()


def _as_user_payload(user: User) -> UserPayload:
    return UserPayload(
        user_id=user.id,
        email=user.email,
        first_name=user.first_name,
        last_name=user.last_name,
        phone=user.phone,
        role=(user.role or "patient").lower(),
    )


@router.post("/login", response_model=LoginResponse)
def login(
    payload: LoginRequest,
    db: Session = Depends(get_db),
    tokens: TokenRegistry = Depends(get_token_registry),
):
    normalized_email = _normalize_email(payload.email)
    user = db.execute(
        select(User).where(func.lower(User.email) == normalized_email)
    ).scalar_one_or_none()

    if not user or not verify_password(payload.password, user.password):
        raise AuthenticationError("Invalid email or password")

    role = (user.role or "").lower()
    if role not in VALID_ROLES:
        raise AuthenticationError("Account role is not recognized")

    token = tokens.issue(Identity(user_id=user.id, role=role))

    return LoginResponse(
        access_token=token,
        user=_as_user_payload(user),
    )


@router.get("/me", response_model=UserPayload)
def me(
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
):
    user = db.get(User, identity.user_id)
    if not user:
        raise AuthenticationError("User not found")

    return _as_user_payload(user)


@router.post("/logout")
def logout(
    token: str = Depends(get_token_value),
    tokens: TokenRegistry = Depends(get_token_registry),
):
    if not tokens.revoke(token):
        raise AuthenticationError("Invalid or expired token")
    return {"msg": "Logged out"}
