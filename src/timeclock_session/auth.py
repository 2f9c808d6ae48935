"""Authentication endpoints and client-side session state.

`AuthApi` wraps the `/auth/*` endpoints and keeps the credential store in step
with them. `AuthSession` tracks the signed-in user on top of it.
"""

from __future__ import annotations

from dataclasses import dataclass

from . import endpoints
from .anti_forgery import AntiForgeryReader
from .client import ApiClient
from .credentials import CredentialStore
from .exceptions import ApiError
from .io_validation import (
    AcceptInviteResponse,
    ActiveSessionsResponse,
    MessageResponse,
    TokenResponse,
    User,
    VerifyInviteResponse,
    validate_as,
)
from .observability import get_logger
from .types import ApiRequest

logger = get_logger("timeclock_session.auth")


class AuthApi:
    """Typed access to the authentication endpoints.

    Payloads that do not match the expected shape raise `IncomingDataError`.
    """

    def __init__(self, client: ApiClient) -> None:
        self.client = client

    @property
    def store(self) -> CredentialStore:
        return self.client.store

    def login(self, email: str, password: str) -> TokenResponse:
        """Exchange credentials for an access token.

        The refresh and anti-forgery cookies are set by the server response.
        """
        payload = self.client.request(
            ApiRequest.post(endpoints.LOGIN, json={"email": email, "password": password})
        )
        tokens = validate_as(TokenResponse, payload)
        self.store.set(tokens.access_token)
        return tokens

    def refresh(self, *, end_session_on_failure: bool = True) -> TokenResponse:
        """Renew the access credential through the shared single-flight exchange.

        Joins a refresh already in flight rather than starting a second one.

        Raises:
            SessionExpiredError: If the exchange failed; the store is cleared.
        """
        value = self.client.pipeline.refresher.refresh(
            end_session_on_failure=end_session_on_failure
        )
        return TokenResponse(access_token=value)

    def logout(self) -> MessageResponse:
        payload = self.client.request(ApiRequest.post(endpoints.LOGOUT))
        self.store.clear()
        return validate_as(MessageResponse, payload or {})

    def logout_all(self) -> MessageResponse:
        payload = self.client.request(ApiRequest.post(endpoints.LOGOUT_ALL))
        self.store.clear()
        return validate_as(MessageResponse, payload or {})

    def me(self) -> User:
        return validate_as(User, self.client.request(ApiRequest.get(endpoints.ME)))

    def request_password_reset(self, email: str) -> MessageResponse:
        payload = self.client.request(ApiRequest.post(endpoints.REQUEST_RESET, json={"email": email}))
        return validate_as(MessageResponse, payload or {})

    def reset_password(self, reset_token: str, new_password: str) -> MessageResponse:
        payload = self.client.request(
            ApiRequest.post(
                endpoints.RESET_PASSWORD,
                json={"reset_token": reset_token, "new_password": new_password},
            )
        )
        return validate_as(MessageResponse, payload or {})

    def active_sessions(self) -> ActiveSessionsResponse:
        payload = self.client.request(ApiRequest.get(endpoints.SESSIONS))
        return validate_as(ActiveSessionsResponse, payload)

    def revoke_session(self, session_id: str) -> MessageResponse:
        payload = self.client.request(ApiRequest.delete(endpoints.session(session_id)))
        return validate_as(MessageResponse, payload or {})

    def change_password(self, current_password: str, new_password: str) -> MessageResponse:
        payload = self.client.request(
            ApiRequest.put(
                endpoints.CHANGE_PASSWORD,
                json={"current_password": current_password, "new_password": new_password},
            )
        )
        return validate_as(MessageResponse, payload or {})

    def accept_invite(self, token: str, password: str) -> AcceptInviteResponse:
        payload = self.client.request(
            ApiRequest.post(endpoints.ACCEPT_INVITE, json={"token": token, "password": password})
        )
        accepted = validate_as(AcceptInviteResponse, payload)
        if accepted.access_token:
            self.store.set(accepted.access_token)
        return accepted

    def verify_invite(self, token: str) -> VerifyInviteResponse:
        payload = self.client.request(ApiRequest.post(endpoints.VERIFY_INVITE, json={"token": token}))
        return validate_as(VerifyInviteResponse, payload)


@dataclass
class AuthSession:
    """Signed-in user state for one client process."""

    api: AuthApi
    anti_forgery: AntiForgeryReader
    user: User | None = None

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    def login(self, email: str, password: str) -> User:
        self.api.login(email, password)
        self.user = self.api.me()
        logger.info("Signed in as user %s", self.user.id)
        return self.user

    def accept_invite(self, token: str, password: str) -> User:
        self.api.accept_invite(token, password)
        self.user = self.api.me()
        return self.user

    def logout(self) -> None:
        """Log out on the server, always clearing local state."""
        try:
            self.api.logout()
        except ApiError as exc:
            logger.warning("Logout request failed, clearing local session anyway: %s", exc.message)
        finally:
            self.clear()

    def logout_all(self) -> None:
        """Revoke every session on the server, always clearing local state."""
        try:
            self.api.logout_all()
        except ApiError as exc:
            logger.warning("Logout-all request failed, clearing local session anyway: %s", exc.message)
        finally:
            self.clear()

    def refresh_user(self) -> User:
        try:
            self.user = self.api.me()
        except ApiError:
            self.clear()
            raise
        return self.user

    def refresh_if_due(self) -> bool:
        """Renew the access credential ahead of expiry. Returns True if renewed."""
        if not self.api.store.should_refresh():
            return False
        self.api.refresh()
        return True

    def initialize(self) -> bool:
        """Restore a session on startup.

        The access credential lives only in memory, so a new process has none.
        The anti-forgery cookie hints that a refresh cookie exists; without it
        there is nothing to restore and no request is made.
        """
        if self.anti_forgery.read() is None:
            return False
        try:
            self.api.refresh(end_session_on_failure=False)
            self.user = self.api.me()
        except ApiError as exc:
            logger.info("Session restore failed: %s", exc.message)
            self.clear()
            return False
        return True

    def clear(self) -> None:
        self.api.store.clear()
        self.user = None
