"""
Client-side auth state: the bearer token, a plain copy of the signed-in
user, and the login/logout flow.

The token is decoded for display only. Its signature is never verified
here; the backend does that on every request.
"""

from __future__ import annotations

import json
import logging
import time
from typing import Any, MutableMapping, Optional

import jwt
from pydantic import ValidationError as PydanticValidationError

from pos_admin.api_client import ApiClient
from pos_admin.config import get_settings
from pos_admin.exceptions import AuthenticationError, InvalidTokenError, PermissionDeniedError
from pos_admin.logging_config import log_event
from pos_admin.models import LoginResult, User

logger = logging.getLogger(__name__)

TOKEN_KEY = "token"
USER_KEY = "user"
EXPIRES_KEY = "token_expires_at"


def decode_token(token: str) -> dict[str, Any]:
    """Decode a JWT payload without verifying its signature or expiry."""
    try:
        return jwt.decode(
            token,
            options={"verify_signature": False, "verify_exp": False},
            algorithms=["HS256", "HS384", "HS512", "RS256"],
        )
    except jwt.PyJWTError as exc:
        raise InvalidTokenError(str(exc)) from exc


class TokenStore:
    """
    Holds the token and user copy in a mutable mapping.

    The UI passes ``st.session_state``; tests pass a plain dict. Entries
    expire after ``settings.session_max_age_seconds``.
    """

    def __init__(self, storage: MutableMapping[str, Any], *, max_age: int | None = None) -> None:
        self._storage = storage
        self._max_age = max_age if max_age is not None else get_settings().session_max_age_seconds

    def _expired(self) -> bool:
        expires_at = self._storage.get(EXPIRES_KEY)
        return expires_at is not None and time.time() >= float(expires_at)

    @property
    def token(self) -> Optional[str]:
        if self._expired():
            self.clear()
            return None
        return self._storage.get(TOKEN_KEY)

    @property
    def user_json(self) -> Optional[str]:
        if self._expired():
            self.clear()
            return None
        return self._storage.get(USER_KEY)

    def save(self, token: str, user: User) -> None:
        self._storage[TOKEN_KEY] = token
        self._storage[USER_KEY] = user.model_dump_json(by_alias=True)
        self._storage[EXPIRES_KEY] = time.time() + self._max_age

    def clear(self) -> None:
        for key in (TOKEN_KEY, USER_KEY, EXPIRES_KEY):
            self._storage.pop(key, None)


def restore_user(store: TokenStore) -> Optional[User]:
    """
    Rebuild the signed-in user from the stored token.

    The stored user copy wins; without it, the token claims are used when
    ``sub``, ``email`` and ``role`` are all present. An undecodable token
    clears the store.
    """
    token = store.token
    if not token:
        return None

    try:
        claims = decode_token(token)
    except InvalidTokenError as exc:
        logger.warning("Discarding invalid stored token: %s", exc.detail)
        store.clear()
        return None

    user_json = store.user_json
    if user_json:
        try:
            return User.model_validate(json.loads(user_json))
        except (ValueError, PydanticValidationError) as exc:
            logger.warning("Stored user copy is unreadable: %s", exc)

    if claims.get("sub") and claims.get("email") and claims.get("role"):
        try:
            return User(id=claims["sub"], email=claims["email"], role=claims["role"], name=claims.get("name"))
        except PydanticValidationError as exc:
            logger.warning("Token claims do not describe a user: %s", exc)
    return None


def login(client: ApiClient, email: str, password: str) -> LoginResult:
    """
    Sign in against ``POST /auth/login``.

    Raises:
        AuthenticationError: missing token/user in the response, or the
            backend rejected the credentials.
        PermissionDeniedError: the account's role may not use the portal.
    """
    data = client.post("/auth/login", {"email": email, "password": password}) or {}
    if not isinstance(data, dict):
        raise AuthenticationError("Unexpected login response from server", status_code=None)

    if not data.get("accessToken"):
        raise AuthenticationError("No access token received from server", status_code=None)
    if not data.get("user"):
        raise AuthenticationError("No user data received from server", status_code=None)

    try:
        result = LoginResult.model_validate(data)
    except PydanticValidationError as exc:
        raise AuthenticationError("Unexpected login response from server", status_code=None) from exc

    if not is_allowed(result.user):
        log_event("login_denied", level="WARNING", user_email=email, role=result.user.role.value)
        raise PermissionDeniedError("Access denied. Only Admins can access this portal.", status_code=None)

    log_event("login_succeeded", user_email=email)
    return result


def sign_in(store: TokenStore, result: LoginResult) -> User:
    store.save(result.access_token, result.user)
    return result.user


def logout(store: TokenStore) -> None:
    store.clear()
    log_event("logout")


def is_allowed(user: Optional[User]) -> bool:
    """True when ``user``'s role may use the portal (``settings.allowed_roles``)."""
    return user is not None and user.role.value in get_settings().allowed_roles
