"""Unit tests for ss_tools.api.base (RetryBudget, BaseAPIClient)."""
import asyncio
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from ss_tools.api.base import BaseAPIClient, RetryBudget
from ss_tools.utils.errors import (
    APIError,
    EmptyResultError,
    ParseError,
    RateLimitError,
    RetryExhaustedError,
)


def _run(coro):
    """Run async test without requiring pytest-asyncio."""
    return asyncio.run(coro)


# Concrete client for testing BaseAPIClient
class ConcreteAPIClient(BaseAPIClient):
    def _get_headers(self):
        return {"User-Agent": "test-agent"}


class TestRetryBudget:
    def test_coerce_int(self):
        budget = RetryBudget.coerce(3)
        assert budget.remaining == 3
        assert not budget.exhausted

    def test_coerce_keeps_instance(self):
        budget = RetryBudget(2)
        assert RetryBudget.coerce(budget) is budget

    def test_consume_never_goes_negative(self):
        budget = RetryBudget(1)
        budget.consume()
        budget.consume()
        assert budget.remaining == 0
        assert budget.exhausted


class TestMakeRequest:
    @pytest.fixture
    def client(self):
        return ConcreteAPIClient(base_url="https://api.example.com/v1", timeout=10)

    def test_make_request_success(self, client):
        async def _():
            client.client = AsyncMock()
            response = MagicMock()
            response.status_code = 200
            response.json.return_value = {"paperId": "abc", "title": "Test"}
            response.raise_for_status = MagicMock()
            client.client.request = AsyncMock(return_value=response)
            result = await client._make_request("GET", "https://api.example.com/v1/paper/abc")
            assert result == {"paperId": "abc", "title": "Test"}
            client.client.request.assert_called_once()
            call_kw = client.client.request.call_args[1]
            assert call_kw["method"] == "GET"
            assert call_kw["url"].endswith("/paper/abc")
            assert call_kw["headers"]["User-Agent"] == "test-agent"

        _run(_())

    def test_make_request_merges_extra_headers(self, client):
        async def _():
            client.client = AsyncMock()
            response = MagicMock()
            response.status_code = 200
            response.json.return_value = []
            client.client.request = AsyncMock(return_value=response)
            await client._make_request(
                "POST", "https://x/paper/batch", json={"ids": ["a"]},
                headers={"Content-Type": "application/json"},
            )
            call_kw = client.client.request.call_args[1]
            assert call_kw["json"] == {"ids": ["a"]}
            assert call_kw["headers"] == {
                "User-Agent": "test-agent",
                "Content-Type": "application/json",
            }

        _run(_())

    def test_make_request_429_raises_rate_limit_error(self, client):
        async def _():
            client.client = AsyncMock()
            response = MagicMock()
            response.status_code = 429
            client.client.request = AsyncMock(return_value=response)
            with pytest.raises(RateLimitError, match="Rate limit exceeded"):
                await client._make_request("GET", "https://x/paper/abc")

        _run(_())

    def test_make_request_http_error_raises_api_error(self, client):
        async def _():
            client.client = AsyncMock()
            response = MagicMock()
            response.status_code = 404
            response.raise_for_status.side_effect = httpx.HTTPStatusError(
                "Not Found", request=MagicMock(), response=response
            )
            client.client.request = AsyncMock(return_value=response)
            with pytest.raises(APIError, match="HTTP 404"):
                await client._make_request("GET", "https://x/paper/xyz")

        _run(_())

    def test_make_request_transport_error_raises_api_error(self, client):
        async def _():
            client.client = AsyncMock()
            client.client.request = AsyncMock(side_effect=httpx.ConnectError("refused"))
            with pytest.raises(APIError, match="Request failed"):
                await client._make_request("GET", "https://x/paper/xyz")

        _run(_())

    def test_make_request_invalid_json_raises_parse_error(self, client):
        def _handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, text="<html>busy</html>")

        client.client = httpx.AsyncClient(transport=httpx.MockTransport(_handler))
        with pytest.raises(ParseError, match="Invalid JSON"):
            _run(client._make_request("GET", "https://x/paper/abc"))

    def test_close(self, client):
        async def _():
            client.client = AsyncMock()
            await client.close()
            client.client.aclose.assert_called_once()

        _run(_())

    def test_async_context_manager_closes(self, client):
        async def _():
            client.client = AsyncMock()
            async with client as entered:
                assert entered is client
            client.client.aclose.assert_called_once()

        _run(_())


class TestRetryWithDelay:
    @pytest.fixture
    def client(self):
        return ConcreteAPIClient(base_url="https://api.example.com/v1")

    def test_succeeds_first_try(self, client):
        async def _():
            func = AsyncMock(return_value="ok")
            result = await client._retry_with_delay(func, "get paper", "abc", max_retries=5)
            assert result == "ok"
            func.assert_called_once()

        _run(_())

    def test_two_failures_then_success_leaves_three(self, client):
        async def _():
            budget = RetryBudget(5)
            func = AsyncMock(side_effect=[ParseError("bad"), ParseError("bad"), "ok"])
            with patch("asyncio.sleep", new_callable=AsyncMock) as sleep:
                result = await client._retry_with_delay(
                    func, "get paper", "abc", max_retries=budget, delay=10
                )
            assert result == "ok"
            assert func.call_count == 3
            assert budget.remaining == 3
            assert sleep.await_count == 2
            sleep.assert_awaited_with(10)

        _run(_())

    def test_budget_of_one_makes_exactly_one_attempt(self, client):
        async def _():
            func = AsyncMock(side_effect=APIError("always fail"))
            with patch("asyncio.sleep", new_callable=AsyncMock) as sleep:
                with pytest.raises(RetryExhaustedError) as exc_info:
                    await client._retry_with_delay(
                        func, "get paper details", "abc123", max_retries=1, delay=10
                    )
            func.assert_called_once()
            sleep.assert_not_awaited()
            assert exc_info.value.target == "abc123"
            assert "abc123" in str(exc_info.value)
            assert isinstance(exc_info.value.last_error, APIError)

        _run(_())

    def test_budget_of_zero_makes_no_attempt(self, client):
        async def _():
            func = AsyncMock(return_value="ok")
            with pytest.raises(RetryExhaustedError):
                await client._retry_with_delay(func, "get paper", "abc", max_retries=0)
            func.assert_not_called()

        _run(_())

    def test_rate_limit_is_retried_with_fixed_delay(self, client):
        async def _():
            func = AsyncMock(side_effect=[RateLimitError("429"), RateLimitError("429"), "ok"])
            with patch("asyncio.sleep", new_callable=AsyncMock) as sleep:
                result = await client._retry_with_delay(
                    func, "get paper", "abc", max_retries=3, delay=2.5
                )
            assert result == "ok"
            assert [c.args[0] for c in sleep.await_args_list] == [2.5, 2.5]

        _run(_())

    def test_non_retryable_error_propagates(self, client):
        async def _():
            func = AsyncMock(side_effect=EmptyResultError("nothing"))
            with pytest.raises(EmptyResultError):
                await client._retry_with_delay(func, "get paper", "abc", max_retries=3)
            func.assert_called_once()

        _run(_())

    def test_custom_retry_on(self, client):
        async def _():
            budget = RetryBudget(2)
            func = AsyncMock(side_effect=EmptyResultError("nothing"))
            with patch("asyncio.sleep", new_callable=AsyncMock):
                with pytest.raises(RetryExhaustedError, match="get paper id: query"):
                    await client._retry_with_delay(
                        func, "get paper id", "query", max_retries=budget,
                        retry_on=(EmptyResultError,),
                    )
            assert func.call_count == 2
            assert budget.remaining == 0

        _run(_())
