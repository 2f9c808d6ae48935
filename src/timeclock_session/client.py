"""Authorized request entry point for resource clients.

Usage example:
    from timeclock_session.composition import build_api_client
    from timeclock_session.config import ClientConfig
    from timeclock_session.types import ApiRequest

    client = build_api_client(ClientConfig.from_env())
    status = client.request(ApiRequest.get("/clocks/status"))
    client.request(ApiRequest.post("/clocks/in", json={"notes": "on site"}))

Resource clients only ever call `request`; credentials, anti-forgery headers
and session renewal are handled by the pipeline behind it.
"""

from __future__ import annotations

from collections.abc import Mapping

from .credentials import CredentialStore
from .pipeline import RequestPipeline
from .types import ApiRequest, HttpResponse


class ApiClient:
    """Thin facade over `RequestPipeline` returning decoded JSON bodies."""

    def __init__(self, pipeline: RequestPipeline) -> None:
        self.pipeline = pipeline

    @property
    def store(self) -> CredentialStore:
        return self.pipeline.store

    def send(self, request: ApiRequest) -> HttpResponse:
        """Execute `request` and return the raw 2xx response.

        Raises:
            ApiError: On any unrecovered failure.
        """
        return self.pipeline.execute(request)

    def request(self, request: ApiRequest) -> object:
        """Execute `request` and return its decoded body.

        Empty bodies decode to None; non-JSON bodies are returned as text.
        """
        response = self.send(request)
        try:
            return response.json()
        except ValueError:
            return response.text

    def get(self, path: str, *, params: Mapping[str, str] | None = None) -> object:
        return self.request(ApiRequest.get(path, params=params))

    def post(self, path: str, *, json: object | None = None) -> object:
        return self.request(ApiRequest.post(path, json=json))

    def put(self, path: str, *, json: object | None = None) -> object:
        return self.request(ApiRequest.put(path, json=json))

    def patch(self, path: str, *, json: object | None = None) -> object:
        return self.request(ApiRequest.patch(path, json=json))

    def delete(self, path: str) -> object:
        return self.request(ApiRequest.delete(path))
