"""
Notes Backend: Identity Service
==================================

What:  Registration, login, bearer-token verification and profile lookup.
How:   Passwords are hashed/verified with bcrypt in the threadpool so the
       event loop keeps serving other requests; tokens come from
       `notes_backend.security`.
Who:   Called by the /auth and /users routes, and by the `get_current_user`
       dependency that guards every /notes route.

Error contract:
    register  → ValidationError (400), ConflictError (409)
    login     → ValidationError (400), AuthError (401)
    verify    → AuthError (401)
    profile   → NotFoundError (404)

Login uses one message for an unknown email and for a wrong password.
"""

import logging
from typing import Optional

from starlette.concurrency import run_in_threadpool

from notes_backend import utils
from notes_backend.exceptions import AuthError, ConflictError, NotFoundError
from notes_backend.models import User
from notes_backend.schemas.auth import (
    AuthPayload,
    CurrentUser,
    LoginRequest,
    RegisterRequest,
    UserPublic,
)
from notes_backend.security import (
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)
from notes_backend.store import JsonStore

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid email or password"


class IdentityService:
    """Account and session operations. Stateless; the store is passed in."""

    async def register(self, store: JsonStore, data: RegisterRequest) -> AuthPayload:
        # Early check; the store repeats it under its write lock
        if store.find_user_by_email(data.email) is not None:
            raise ConflictError("Email already registered", context={"email": data.email})

        password_hash = await run_in_threadpool(hash_password, data.password)
        user = User(
            id=utils.generate_id(),
            email=data.email,
            password_hash=password_hash,
            name=data.display_name,
            created_at=utils.utcnow(),
        )
        await store.add_user(user)
        return self._issue(user)

    async def login(self, store: JsonStore, data: LoginRequest) -> AuthPayload:
        user = store.find_user_by_email(data.email)
        if user is None:
            logger.info("Login failed: unknown email")
            raise AuthError(INVALID_CREDENTIALS)

        valid = await run_in_threadpool(verify_password, data.password, user.password_hash)
        if not valid:
            logger.info("Login failed: wrong password for user %s", user.id)
            raise AuthError(INVALID_CREDENTIALS, context={"user_id": user.id})

        logger.info("User %s logged in", user.id)
        return self._issue(user)

    def verify(self, store: JsonStore, token: Optional[str]) -> CurrentUser:
        """Resolve a bearer token to the identity it was issued for."""
        if not token:
            raise AuthError("Missing Authorization token")

        payload = decode_access_token(token)
        user_id = payload.get("sub") if payload else None
        if not isinstance(user_id, str) or not user_id:
            raise AuthError("Invalid or expired token")

        user = store.find_user_by_id(user_id)
        if user is None:
            raise AuthError("Invalid token user", context={"user_id": user_id})

        return CurrentUser.model_validate(user)

    def get_profile(self, store: JsonStore, user_id: str) -> UserPublic:
        user = store.find_user_by_id(user_id)
        if user is None:
            raise NotFoundError(resource="user", resource_id=user_id)
        return UserPublic.model_validate(user)

    @staticmethod
    def _issue(user: User) -> AuthPayload:
        token = create_access_token(user.id, user.email)
        return AuthPayload(token=token, user=UserPublic.model_validate(user))


# ── Singleton Instance ────────────────────────────────────────────────────
identity_service = IdentityService()
