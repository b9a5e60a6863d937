"""
Auth Session

Customer login state: token and user persisted in durable storage.
Only the CUSTOMER role may sign in to the storefront. Missing or corrupt
stored credentials leave the session unauthenticated.
"""

import logging
from typing import Dict, Optional

from ..catalog.api_client import StorefrontAPIClient
from ..common.constants import (
    CUSTOMER_ROLE,
    REFRESH_TOKEN_STORAGE_KEY,
    TOKEN_STORAGE_KEY,
    USER_STORAGE_KEY,
)
from ..models import Customer
from ..storage import KeyValueStore

logger = logging.getLogger(__name__)


class AuthError(Exception):
    """Login was refused (bad credentials, wrong role, bad response)."""


class AuthSession:
    """
    Authenticated customer session.

    Usage:
        session = AuthSession(client, storage)
        session.restore()                       # on startup
        session.login({"email": ..., "password": ...})
        session.customer.customer_type
    """

    def __init__(self, client: StorefrontAPIClient, storage: KeyValueStore):
        self.client = client
        self.storage = storage
        self.customer: Optional[Customer] = None
        self.token: Optional[str] = None

    @property
    def is_authenticated(self) -> bool:
        return self.customer is not None and bool(self.token)

    def _set(self, customer: Customer, token: str, refresh_token: Optional[str] = None) -> None:
        self.customer = customer
        self.token = token
        self.client.set_token(token)
        self.storage.set(TOKEN_STORAGE_KEY, token)
        self.storage.set(USER_STORAGE_KEY, customer.to_api())
        if refresh_token:
            self.storage.set(REFRESH_TOKEN_STORAGE_KEY, refresh_token)

    def _clear(self) -> None:
        self.customer = None
        self.token = None
        self.client.set_token(None)
        for key in (TOKEN_STORAGE_KEY, USER_STORAGE_KEY, REFRESH_TOKEN_STORAGE_KEY):
            self.storage.delete(key)

    def restore(self) -> bool:
        """
        Rehydrate the session from storage and verify the token.

        Returns:
            True if a valid session was restored
        """
        token = self.storage.get(TOKEN_STORAGE_KEY)
        user = self.storage.get(USER_STORAGE_KEY)
        if not token or not user:
            return False

        try:
            customer = Customer.from_api(user)
        except ValueError as e:
            logger.warning("Discarding stored session: %s", e)
            self._clear()
            return False

        self.customer = customer
        self.token = str(token)
        self.client.set_token(self.token)
        return self.refresh()

    def refresh(self) -> bool:
        """Reload the customer from /auth/me; a failure signs the session out."""
        if not self.token:
            return False

        payload = self.client.get_me()
        if payload is None:
            logger.warning("Session refresh failed: %s", self.client.last_error)
            self._clear()
            return False

        try:
            self.customer = Customer.from_api(payload)
        except ValueError as e:
            logger.warning("Invalid /auth/me payload: %s", e)
            self._clear()
            return False

        self.storage.set(USER_STORAGE_KEY, self.customer.to_api())
        return True

    def login(self, credentials: Dict[str, str]) -> Customer:
        """
        Sign in with {"email" or "username", "password"}.

        Raises:
            AuthError: If the server refuses the login or the user is not a customer
        """
        payload = self.client.login(credentials)
        if payload is None:
            raise AuthError(self.client.last_error or "Login failed")

        if not isinstance(payload, dict) or not payload.get("token") or not payload.get("user"):
            raise AuthError("Invalid response from server")

        try:
            customer = Customer.from_api(payload["user"])
        except ValueError as e:
            raise AuthError("Invalid response from server") from e

        if customer.role != CUSTOMER_ROLE:
            raise AuthError("Access denied. Please use the admin dashboard.")

        self._set(customer, payload["token"], payload.get("refreshToken"))
        logger.info("Signed in as %s (%s)", customer.email, customer.customer_type)
        return customer

    def logout(self) -> None:
        """Revoke the refresh token server-side (best effort) and clear local state."""
        refresh_token = self.storage.get(REFRESH_TOKEN_STORAGE_KEY)
        if self.token and refresh_token:
            if self.client.logout(refresh_token) is None:
                logger.warning("Logout request failed: %s", self.client.last_error)
        self._clear()
