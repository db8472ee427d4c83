"""
Notes Backend: Route Dependencies
====================================

What:  FastAPI dependencies shared by the routers.
How:   - get_store:         the JsonStore attached to app.state by create_app()
       - json_body:         raw JSON body; empty → {}, unparsable → 400
       - get_current_user:  Bearer token → CurrentUser, or 401
"""

import json
from typing import Any, Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from notes_backend.exceptions import ValidationError
from notes_backend.schemas.auth import CurrentUser
from notes_backend.services.identity_service import identity_service
from notes_backend.store import JsonStore

# auto_error=False: a missing header is reported with our own 401 envelope
bearer_scheme = HTTPBearer(auto_error=False)


def get_store(request: Request) -> JsonStore:
    return request.app.state.store


async def json_body(request: Request) -> Any:
    """
    Request body decoded as JSON.

    Bodies are read by hand instead of declared as pydantic parameters so
    that every field-level problem is reported with the API's own messages.
    """
    raw = await request.body()
    if not raw.strip():
        return {}
    try:
        return json.loads(raw)
    except ValueError as e:
        raise ValidationError(
            message="Request body must be valid JSON",
            context={"error": str(e)},
        ) from e


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    store: JsonStore = Depends(get_store),
) -> CurrentUser:
    token = credentials.credentials if credentials else None
    return identity_service.verify(store, token)
