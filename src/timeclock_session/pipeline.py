"""Request pipeline that attaches credentials and recovers from expired sessions.

Outbound, every request gets:
- `Authorization: Bearer <value>` when the credential store holds a value
- the anti-forgery header on POST/PUT/DELETE/PATCH when the cookie is readable

Inbound, responses are handled in order:
1. 2xx passes through; any other non-401 status is translated and raised.
2. A 401 from login or refresh is a credentials error and is raised as-is.
3. A 401 on a request that is already a replay is raised as-is.
4. Otherwise the credential is refreshed and the original request is replayed
   once. With no anti-forgery cookie there is no session to refresh, so the
   session ends without contacting the server.

The refresh exchange itself carries only the anti-forgery header; the server
reads the refresh cookie. Ending a session clears the store and navigates to the login route.
"""

from __future__ import annotations

import requests

from . import endpoints
from .anti_forgery import AntiForgeryReader
from .credentials import CredentialStore
from .errors import translate_response, translate_transport_error
from .exceptions import ApiError, SessionExpiredError
from .io_validation import IncomingDataError, TokenResponse, validate_as
from .observability import get_logger
from .protocols import HttpTransport, Navigator
from .refresh import RefreshCoordinator
from .types import ApiRequest, HttpResponse

logger = get_logger("timeclock_session.pipeline")

AUTHORIZATION_HEADER = "Authorization"


def bearer(value: str) -> str:
    return f"Bearer {value}"


class RequestPipeline:
    """Outbound and inbound stages around a single HTTP transport."""

    def __init__(
        self,
        *,
        transport: HttpTransport,
        store: CredentialStore,
        anti_forgery: AntiForgeryReader,
        navigator: Navigator,
        api_url: str,
        timeout_seconds: float = 30.0,
        csrf_header_name: str = "X-CSRF-Token",
        login_route: str = "/login",
    ) -> None:
        self.transport = transport
        self.store = store
        self.anti_forgery = anti_forgery
        self.navigator = navigator
        self.api_url = api_url.rstrip("/")
        self.timeout_seconds = timeout_seconds
        self.csrf_header_name = csrf_header_name
        self.login_route = login_route
        self.refresher = RefreshCoordinator(
            exchange=self._exchange_refresh,
            store=store,
            on_failure=self._end_session,
        )

    def execute(self, request: ApiRequest) -> HttpResponse:
        """Send `request` and return its 2xx response.

        Raises:
            ApiError: For any failure not recovered by a refresh-and-replay.
        """
        return self._send(request, self.outbound(request))

    def outbound(self, request: ApiRequest) -> dict[str, str]:
        """Return the headers to send for `request`."""
        headers = dict(request.headers)
        has_authorization = any(name.lower() == "authorization" for name in headers)
        if not has_authorization:
            value = self.store.get()
            if value:
                headers[AUTHORIZATION_HEADER] = bearer(value)
        return self._with_anti_forgery(request, headers)

    def inbound(self, request: ApiRequest, response: HttpResponse) -> HttpResponse:
        if response.ok:
            return response

        credential_endpoint = endpoints.is_credential_issuing(request.path)
        if response.status_code != 401 or credential_endpoint or request.is_retry:
            raise translate_response(response, credential_endpoint=credential_endpoint)

        return self._refresh_and_replay(request)

    def url_for(self, path: str) -> str:
        if path.startswith(("http://", "https://")):
            return path
        return f"{self.api_url}/{path.lstrip('/')}"

    def _with_anti_forgery(self, request: ApiRequest, headers: dict[str, str]) -> dict[str, str]:
        if request.is_mutating:
            token = self.anti_forgery.read()
            if token:
                headers[self.csrf_header_name] = token
        return headers

    def _send(self, request: ApiRequest, headers: dict[str, str]) -> HttpResponse:
        try:
            response = self.transport.send(
                request.method,
                self.url_for(request.path),
                headers=headers,
                params=request.params,
                json=request.json,
                timeout_seconds=self.timeout_seconds,
            )
        except requests.RequestException as exc:
            raise translate_transport_error(exc) from exc
        return self.inbound(request, response)

    def _refresh_and_replay(self, request: ApiRequest) -> HttpResponse:
        replay = request.as_retry()
        if self.anti_forgery.read() is None:
            logger.info("401 from %s with no anti-forgery cookie; ending session", request.path)
            failure = SessionExpiredError.no_session()
            self.store.clear()
            self._end_session(failure)
            raise failure

        logger.info("401 from %s; refreshing access credential", request.path)
        value = self.refresher.refresh()
        return self.execute(replay.with_header(AUTHORIZATION_HEADER, bearer(value)))

    def _exchange_refresh(self) -> str:
        # The refresh cookie is the credential here; a stale bearer is not sent.
        request = ApiRequest.post(endpoints.REFRESH)
        response = self._send(request, self._with_anti_forgery(request, {}))
        try:
            payload = response.json()
        except ValueError as exc:
            raise ApiError("Malformed refresh response", status=response.status_code) from exc
        try:
            return validate_as(TokenResponse, payload).access_token
        except IncomingDataError as exc:
            raise ApiError("Malformed refresh response", status=response.status_code) from exc

    def _end_session(self, failure: SessionExpiredError) -> None:
        logger.warning("Session ended (%s); redirecting to %s", failure.message, self.login_route)
        self.navigator.redirect_to_login(self.login_route)
