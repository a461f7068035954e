"""Tracks the signed-in user and verifies the users behind API requests."""
from __future__ import annotations

import asyncio
from logging import getLogger
from typing import Callable

import firebase_admin
from firebase_admin import auth as firebase_auth
from firebase_admin import exceptions as firebase_exceptions
from sanic import Request

from marketplace.clients.identity_toolkit import IdentityToolkitClient
from marketplace.config import FirebaseAuthConfig
from marketplace.errors import AuthError
from marketplace.models.user import User

logger = getLogger(__name__)

AuthStateListener = Callable[["User | None"], None]


class AuthSession:
    """
    Holds the currently signed-in user of a client and notifies listeners when it changes.

    Listeners registered with :meth:`on_auth_state_changed` are called with the current user right away and then
    after every sign-in, sign-up and sign-out.
    """

    def __init__(self, identity_client: IdentityToolkitClient):
        self.identity_client = identity_client
        self._current_user: User | None = None
        self._id_token: str | None = None
        self._listeners: list[AuthStateListener] = []

    @property
    def current_user(self) -> User | None:
        return self._current_user

    @property
    def id_token(self) -> str | None:
        """The Firebase ID token of the signed-in user, sent as a Bearer token to the API."""
        return self._id_token

    async def sign_in(self, email: str, password: str) -> User:
        """
        Sign in with email and password.

        :raises AuthError: If the credentials are rejected or the provider cannot be reached.
        """
        payload = await self.identity_client.sign_in_with_password(email, password)
        return self._set_user(User.from_identity_toolkit(payload), payload.get("idToken"))

    async def sign_up(self, email: str, password: str) -> User:
        """
        Create an account and sign in with it.

        :raises AuthError: If the account cannot be created.
        """
        payload = await self.identity_client.sign_up(email, password)
        return self._set_user(User.from_identity_toolkit(payload), payload.get("idToken"))

    async def sign_out(self) -> None:
        self._set_user(None, None)

    def on_auth_state_changed(self, listener: AuthStateListener) -> Callable[[], None]:
        """
        Register a listener for login state changes.

        :param listener: Called with the signed-in user, or None once signed out.
        :return: A callable that unregisters the listener.
        """
        self._listeners.append(listener)
        listener(self._current_user)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _set_user(self, user: User | None, id_token: str | None) -> User | None:
        self._current_user = user
        self._id_token = id_token
        logger.info("Auth state changed: %s", user.uid if user else "signed out")
        for listener in list(self._listeners):
            listener(user)
        return user


def init_firebase_app() -> firebase_admin.App:
    """Initialize the default firebase-admin app once, using the environment's credentials."""
    try:
        return firebase_admin.get_app()
    except ValueError:
        options = {"projectId": FirebaseAuthConfig.project_id} if FirebaseAuthConfig.project_id else None
        return firebase_admin.initialize_app(options=options)


async def verify_id_token(token: str) -> User:
    """
    Verify a Firebase ID token.

    :param token: The encoded ID token.
    :raises AuthError: If the token is invalid, expired or revoked.
    """
    try:
        claims = await asyncio.to_thread(firebase_auth.verify_id_token, token)
    except (ValueError, firebase_exceptions.FirebaseError) as e:
        raise AuthError("INVALID_ID_TOKEN", str(e)) from e
    return User.from_decoded_token(claims)


async def authenticate_request(request: Request) -> User | None:
    """
    Return the user behind a request's ``Authorization: Bearer <token>`` header.

    :param request: The Sanic request object.
    :return: The verified user, or None when the header is missing or the token is invalid.
    """
    auth_header = request.headers.get("Authorization", "")
    scheme, _, token = auth_header.partition(" ")
    if scheme.lower() != "bearer" or not token:
        return None

    try:
        return await verify_id_token(token.strip())
    except AuthError as e:
        logger.warning("Rejected ID token for %s %s: %s", request.method, request.path, e)
        return None
