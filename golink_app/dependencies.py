"""
FastAPI dependencies for dependency injection.

The storage backend is built once at startup (see main.py lifespan) and
kept on app.state. Routes reach it only through these dependencies, so
tests can swap it with app.dependency_overrides.
"""

import hmac
from typing import Optional

from fastapi import Depends, Header, HTTPException, Request, status

from golink_app.services.golink_service import GolinkService
from golink_app.storage.strategies import GolinkStorage


def get_storage(request: Request) -> GolinkStorage:
    """Return the storage instance built at startup"""
    return request.app.state.storage


def get_golink_service(
    request: Request,
    storage: GolinkStorage = Depends(get_storage)
) -> GolinkService:
    """
    Get GolinkService with its storage injected.

    The service is cheap to build; the storage behind it is shared.
    """
    return GolinkService(
        storage=storage,
        default_page_size=request.app.state.settings.default_page_size,
    )


def verify_api_token(
    request: Request,
    authorization: Optional[str] = Header(None)
) -> None:
    """
    Enforce bearer-token auth when a token is configured.

    With no api_token in settings the API is open.
    """
    expected = request.app.state.settings.api_token
    if not expected:
        return

    scheme, _, token = (authorization or "").partition(" ")
    if scheme.lower() != "bearer" or not hmac.compare_digest(token.encode(), expected.encode()):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or missing bearer token",
            headers={"WWW-Authenticate": "Bearer"},
        )
