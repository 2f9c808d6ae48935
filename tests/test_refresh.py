"""Tests for single-flight refresh coordination."""

import threading
from concurrent.futures import ThreadPoolExecutor

import pytest

from tests.fakes import FakeNavigator, FakeTransport, SentRequest, json_response
from tests.support.waiting import WAIT_SECONDS, wait_for
from timeclock_session.credentials import CredentialStore
from timeclock_session.exceptions import ApiError, SessionExpiredError
from timeclock_session.pipeline import RequestPipeline
from timeclock_session.refresh import RefreshCoordinator
from timeclock_session.types import ApiRequest, HttpResponse


class TestRefreshCoordinator:
    """Tests for RefreshCoordinator outcomes."""

    def test_success_sets_store(self, store: CredentialStore) -> None:
        failures: list[SessionExpiredError] = []
        coordinator = RefreshCoordinator(
            exchange=lambda: "fresh", store=store, on_failure=failures.append
        )

        assert coordinator.refresh() == "fresh"
        assert store.get() == "fresh"
        assert coordinator.exchanges == 1
        assert failures == []

    def test_failure_clears_store_and_reports_once(self, store: CredentialStore) -> None:
        store.set("stale")
        failures: list[SessionExpiredError] = []

        def exchange() -> str:
            raise ApiError("Refresh token revoked", status=401)

        coordinator = RefreshCoordinator(exchange=exchange, store=store, on_failure=failures.append)

        with pytest.raises(SessionExpiredError) as exc_info:
            coordinator.refresh()

        assert exc_info.value.message == "Refresh token revoked"
        assert store.get() is None
        assert failures == [exc_info.value]

    def test_failure_without_session_end_skips_callback(self, store: CredentialStore) -> None:
        store.set("stale")
        failures: list[SessionExpiredError] = []

        def exchange() -> str:
            raise ApiError("Refresh token revoked", status=401)

        coordinator = RefreshCoordinator(exchange=exchange, store=store, on_failure=failures.append)

        with pytest.raises(SessionExpiredError):
            coordinator.refresh(end_session_on_failure=False)

        assert store.get() is None
        assert failures == []

    def test_follower_asking_for_session_end_gets_it(self, store: CredentialStore) -> None:
        failures: list[SessionExpiredError] = []
        coordinator: RefreshCoordinator

        def exchange() -> str:
            wait_for(lambda: coordinator.followers == 1)
            raise ApiError("Network Error")

        coordinator = RefreshCoordinator(exchange=exchange, store=store, on_failure=failures.append)

        def attempt(end_session: bool) -> None:
            with pytest.raises(SessionExpiredError):
                coordinator.refresh(end_session_on_failure=end_session)

        with ThreadPoolExecutor(max_workers=2) as pool:
            leader = pool.submit(attempt, False)
            wait_for(lambda: coordinator.exchanges == 1)
            follower = pool.submit(attempt, True)
            leader.result()
            follower.result()

        assert coordinator.exchanges == 1
        assert len(failures) == 1

    def test_sequential_refreshes_each_exchange(self, store: CredentialStore) -> None:
        values = iter(["first", "second"])
        coordinator = RefreshCoordinator(
            exchange=lambda: next(values), store=store, on_failure=lambda _: None
        )

        assert coordinator.refresh() == "first"
        assert coordinator.refresh() == "second"
        assert coordinator.exchanges == 2

    def test_concurrent_callers_share_one_exchange(self, store: CredentialStore) -> None:
        callers = 4
        coordinator: RefreshCoordinator

        def exchange() -> str:
            wait_for(lambda: coordinator.followers == callers - 1)
            return "shared"

        coordinator = RefreshCoordinator(exchange=exchange, store=store, on_failure=lambda _: None)

        with ThreadPoolExecutor(max_workers=callers) as pool:
            results = list(pool.map(lambda _: coordinator.refresh(), range(callers)))

        assert results == ["shared"] * callers
        assert coordinator.exchanges == 1

    def test_concurrent_failure_reported_once(self, store: CredentialStore) -> None:
        callers = 3
        failures: list[SessionExpiredError] = []
        coordinator: RefreshCoordinator

        def exchange() -> str:
            wait_for(lambda: coordinator.followers == callers - 1)
            raise ApiError("Network Error")

        coordinator = RefreshCoordinator(exchange=exchange, store=store, on_failure=failures.append)

        def attempt(_: int) -> str:
            try:
                coordinator.refresh()
            except SessionExpiredError as exc:
                return exc.message
            return "unexpected success"

        with ThreadPoolExecutor(max_workers=callers) as pool:
            outcomes = list(pool.map(attempt, range(callers)))

        assert outcomes == ["Network Error"] * callers
        assert len(failures) == 1


def test_concurrent_401s_trigger_single_refresh(
    pipeline: RequestPipeline,
    transport: FakeTransport,
    store: CredentialStore,
    navigator: FakeNavigator,
) -> None:
    callers = 3
    store.set("stale")
    transport.cookies["csrf_token"] = "csrf-1"
    all_rejected = threading.Barrier(callers)

    def resource(sent: SentRequest) -> HttpResponse:
        if sent.headers.get("Authorization") == "Bearer fresh":
            return json_response(200, {"ok": True})
        all_rejected.wait(timeout=WAIT_SECONDS)
        return json_response(401)

    def refresh(_: SentRequest) -> HttpResponse:
        wait_for(lambda: pipeline.refresher.followers == callers - 1)
        return json_response(200, {"access_token": "fresh"})

    transport.queue("GET", "/teams/my", resource)
    transport.queue("POST", "/auth/refresh", refresh)

    with ThreadPoolExecutor(max_workers=callers) as pool:
        responses = list(pool.map(lambda _: pipeline.execute(ApiRequest.get("/teams/my")), range(callers)))

    assert [response.json() for response in responses] == [{"ok": True}] * callers
    assert len(transport.calls_to("POST", "/auth/refresh")) == 1
    assert len(transport.calls_to("GET", "/teams/my")) == callers * 2
    assert store.get() == "fresh"
    assert navigator.redirects == []
