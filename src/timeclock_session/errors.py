"""Translation of transport and HTTP failures into `ApiError`.

Message selection, first match wins:
1. `details`: a non-empty string, or the first string of a list
2. `message`
3. `error` (type name)
4. the transport-level message
5. `FALLBACK_MESSAGE`

Translation is pure: it never touches the credential store.
"""

from __future__ import annotations

from collections.abc import Mapping

import requests

from .exceptions import (
    ApiError,
    CredentialRejectedError,
    RequestRejectedError,
    ServerError,
    TransientNetworkError,
)
from .io_validation import as_json_object
from .types import HttpResponse

FALLBACK_MESSAGE = "An error occurred"


def _non_empty(value: object) -> str | None:
    if isinstance(value, str) and value.strip():
        return value
    return None


def _detail_from(body: Mapping[str, object]) -> str | None:
    details = body.get("details")
    if isinstance(details, str):
        return _non_empty(details)
    if isinstance(details, list | tuple) and details:
        first = details[0]
        if isinstance(first, str) and all(isinstance(item, str) for item in details):
            return _non_empty(first)
    return None


def _error_class(status: int | None, *, credential_endpoint: bool) -> type[ApiError]:
    if status is None:
        return TransientNetworkError
    if status == 401 and credential_endpoint:
        return CredentialRejectedError
    if status >= 500:
        return ServerError
    if status >= 400:
        return RequestRejectedError
    return ApiError


def translate_failure(
    *,
    status: int | None = None,
    body: object | None = None,
    transport_message: str | None = None,
    credential_endpoint: bool = False,
) -> ApiError:
    """Build an `ApiError` from whatever is known about a failed request."""
    fields = as_json_object(body) or {}
    detail = _detail_from(fields)
    message = (
        detail
        or _non_empty(fields.get("message"))
        or _non_empty(fields.get("error"))
        or _non_empty(transport_message)
        or FALLBACK_MESSAGE
    )
    error_class = _error_class(status, credential_endpoint=credential_endpoint)
    return error_class(message, status=status, details=(detail,) if detail else None)


def translate_response(response: HttpResponse, *, credential_endpoint: bool = False) -> ApiError:
    """Translate a non-2xx response. Non-JSON bodies are treated as empty."""
    try:
        body = response.json()
    except ValueError:
        body = None
    return translate_failure(
        status=response.status_code,
        body=body,
        transport_message=f"Request failed with status code {response.status_code}",
        credential_endpoint=credential_endpoint,
    )


def translate_transport_error(error: requests.RequestException) -> ApiError:
    """Translate a failure where no response was received."""
    if error.response is not None:
        return translate_response(
            HttpResponse(status_code=error.response.status_code, text=error.response.text)
        )
    if isinstance(error, requests.Timeout):
        message = "Request timed out"
    elif isinstance(error, requests.ConnectionError):
        message = "Network Error"
    else:
        message = str(error)
    return translate_failure(transport_message=message)
