"""Tests for the response waiter poll loop."""

import json
import time

import pytest

from pagebridge.bridge.codec import encode_payload
from pagebridge.errors import (
    AbortedTarget,
    HttpErrorTarget,
    PayloadDecodeError,
    RefererMismatch,
    ResponseTimeout,
)
from pagebridge.waiting.response_waiter import ResponseWaiter


def ok(value, encoded=False):
    return [200, encode_payload(value, encoded=encoded)]


@pytest.fixture
def waiter(driver, bridge):
    return ResponseWaiter(driver, bridge, poll_interval_ms=5)


class TestSingleTarget:
    @pytest.mark.asyncio
    async def test_resolves_with_payload(self, driver, waiter) -> None:
        driver.captures["/api/a"] = [None, None, ok({"id": 1})]

        assert await waiter.wait("/api/a") == {"id": 1}
        assert driver.reads == ["/api/a"] * 3

    @pytest.mark.asyncio
    async def test_encoded_payload(self, driver, waiter) -> None:
        driver.captures["/api/a"] = [ok([{"kode": "1.01"}], encoded=True)]

        assert await waiter.wait("/api/a", encoded=True) == [{"kode": "1.01"}]

    @pytest.mark.asyncio
    async def test_list_of_one_returns_list(self, driver, waiter) -> None:
        driver.captures["/api/a"] = [ok(5)]

        assert await waiter.wait(["/api/a"]) == [5]

    @pytest.mark.asyncio
    async def test_redirect_status_is_success(self, driver, waiter) -> None:
        driver.captures["/api/a"] = [[304, json.dumps({"data": "cached"})]]

        assert await waiter.wait("/api/a") == "cached"

    @pytest.mark.asyncio
    async def test_envelope_without_data_stays_pending(self, driver, waiter) -> None:
        driver.captures["/api/a"] = [[200, json.dumps({"message": "busy"})]]

        with pytest.raises(ResponseTimeout) as exc_info:
            await waiter.wait("/api/a", timeout_ms=30)
        assert exc_info.value.pending == ["/api/a"]


class TestOrdering:
    @pytest.mark.asyncio
    async def test_results_follow_request_order(self, driver, waiter) -> None:
        driver.captures["/api/a"] = [None, None, ok("A")]
        driver.captures["/api/b"] = [ok("B")]
        driver.captures["/api/c"] = [None, ok("C")]

        result = await waiter.wait(["/api/a", "/api/b", "/api/c"])

        assert result == ["A", "B", "C"]

    @pytest.mark.asyncio
    async def test_checks_targets_in_request_order_each_cycle(self, driver, waiter) -> None:
        driver.captures["/api/a"] = [None, None, ok("A")]
        driver.captures["/api/b"] = [ok("B")]
        driver.captures["/api/c"] = [None, ok("C")]

        await waiter.wait(["/api/a", "/api/b", "/api/c"])

        assert driver.reads == [
            "/api/a", "/api/b", "/api/c",
            "/api/a", "/api/c",
            "/api/a",
        ]


class TestFailFast:
    @pytest.mark.asyncio
    async def test_http_error_rejects_whole_wait(self, driver, waiter) -> None:
        driver.captures["/api/b"] = [[404, "Not Found"]]

        with pytest.raises(HttpErrorTarget) as exc_info:
            await waiter.wait(["/api/a", "/api/b", "/api/c"])

        assert exc_info.value.target == "/api/b"
        assert exc_info.value.status_code == 404
        assert "/api/c" not in driver.reads

    @pytest.mark.asyncio
    async def test_error_after_other_targets_resolved(self, driver, waiter) -> None:
        driver.captures["/api/a"] = [ok("A")]
        driver.captures["/api/b"] = [None, [500, ""]]

        with pytest.raises(HttpErrorTarget, match="/api/b is 500"):
            await waiter.wait(["/api/a", "/api/b"])

    @pytest.mark.asyncio
    async def test_aborted_target(self, driver, waiter) -> None:
        driver.captures["/api/a"] = [[0, ""]]

        with pytest.raises(AbortedTarget) as exc_info:
            await waiter.wait("/api/a")
        assert exc_info.value.target == "/api/a"

    @pytest.mark.asyncio
    async def test_undecodable_body(self, driver, waiter) -> None:
        driver.captures["/api/a"] = [[200, "<html></html>"]]

        with pytest.raises(PayloadDecodeError):
            await waiter.wait("/api/a")


class TestReferer:
    @pytest.mark.asyncio
    async def test_mismatch_rejects_before_reading(self, driver, waiter) -> None:
        driver.url = "https://app.example.com/login"

        with pytest.raises(RefererMismatch) as exc_info:
            await waiter.wait("/api/a", referer="https://app.example.com/home")

        assert exc_info.value.actual == "https://app.example.com/login"
        assert exc_info.value.expected == "https://app.example.com/home"
        assert driver.reads == []

    @pytest.mark.asyncio
    async def test_matching_referer(self, driver, waiter) -> None:
        driver.captures["/api/a"] = [ok(1)]

        assert await waiter.wait("/api/a", referer=driver.url) == 1

    @pytest.mark.asyncio
    async def test_navigation_during_wait(self, driver, waiter) -> None:
        original = driver.evaluate

        async def evaluate(script, arg=None):
            result = await original(script, arg)
            driver.url = "https://app.example.com/elsewhere"
            return result

        driver.evaluate = evaluate
        referer = driver.url

        with pytest.raises(RefererMismatch):
            await waiter.wait("/api/a", referer=referer)
        assert driver.reads == ["/api/a"]


class TestTimeout:
    @pytest.mark.asyncio
    async def test_rejects_within_one_cycle_after_deadline(self, driver, bridge) -> None:
        waiter = ResponseWaiter(driver, bridge, poll_interval_ms=100)
        start = time.monotonic()

        with pytest.raises(ResponseTimeout) as exc_info:
            await waiter.wait(["/api/a", "/api/b"], timeout_ms=300)

        elapsed = time.monotonic() - start
        assert 0.3 <= elapsed < 0.55
        assert exc_info.value.pending == ["/api/a", "/api/b"]
        assert exc_info.value.timeout_ms == 300

    @pytest.mark.asyncio
    async def test_pending_lists_only_unresolved(self, driver, waiter) -> None:
        driver.captures["/api/a"] = [ok("A")]

        with pytest.raises(ResponseTimeout) as exc_info:
            await waiter.wait(["/api/a", "/api/b"], timeout_ms=20)
        assert exc_info.value.pending == ["/api/b"]
