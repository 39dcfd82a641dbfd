"""Module: deps."""

from typing import Generator

from fastapi import Depends, Header, Request
from sqlalchemy.orm import Session

from hospital_rx.core.errors import AuthenticationError
from hospital_rx.core.security import Identity, TokenRegistry
from hospital_rx.services.prescription_service import PrescriptionService


# Dependency provider: one DB session per request lifecycle.
def get_db(request: Request) -> Generator[Session, None, None]:
    db = request.app.state.database.session()
    try:
        yield db
    finally:
        db.close()


def get_service(request: Request) -> PrescriptionService:
    return request.app.state.prescription_service


def get_token_registry(request: Request) -> TokenRegistry:
    return request.app.state.tokens


def get_token_value(authorization: str | None = Header(default=None)) -> str:
    if not authorization:
        raise AuthenticationError("Missing Authorization header")

    parts = authorization.split(" ", 1)
    if len(parts) != 2 or parts[0].lower() != "bearer":
        raise AuthenticationError("Invalid Authorization header")

    return parts[1].strip()


# Resolve the bearer token into the caller identity handed to the service.
def get_current_identity(
    token: str = Depends(get_token_value),
    tokens: TokenRegistry = Depends(get_token_registry),
) -> Identity:
    identity = tokens.resolve(token)
    if identity is None:
        raise AuthenticationError("Invalid or expired token")
    return identity
