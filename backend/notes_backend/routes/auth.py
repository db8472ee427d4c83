"""
Notes Backend: Auth Routes
=============================

What:  Account registration and password login.
How:   Both return `{token, user}`; the token is a bearer JWT for the
       Authorization header of every other authenticated route.
"""

from typing import Any

from fastapi import APIRouter, Depends, status

from notes_backend.dependencies import get_store, json_body
from notes_backend.schemas.auth import AuthPayload, LoginRequest, RegisterRequest
from notes_backend.schemas.common import ErrorResponse, SuccessResponse, parse_payload
from notes_backend.services.identity_service import identity_service
from notes_backend.store import JsonStore

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post(
    "/register",
    response_model=SuccessResponse[AuthPayload],
    status_code=status.HTTP_201_CREATED,
    summary="Create an account",
    responses={400: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def register(
    payload: Any = Depends(json_body),
    store: JsonStore = Depends(get_store),
) -> SuccessResponse[AuthPayload]:
    data = parse_payload(RegisterRequest, payload)
    result = await identity_service.register(store, data)
    return SuccessResponse[AuthPayload](data=result)


@router.post(
    "/login",
    response_model=SuccessResponse[AuthPayload],
    summary="Exchange email and password for a session token",
    responses={400: {"model": ErrorResponse}, 401: {"model": ErrorResponse}},
)
async def login(
    payload: Any = Depends(json_body),
    store: JsonStore = Depends(get_store),
) -> SuccessResponse[AuthPayload]:
    data = parse_payload(LoginRequest, payload)
    result = await identity_service.login(store, data)
    return SuccessResponse[AuthPayload](data=result)
