"""Base API client with fixed-delay retry logic."""
import asyncio
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Optional, Tuple, Type, TypeVar, Union

import httpx

from ss_tools.utils.errors import (
    APIError,
    ParseError,
    RateLimitError,
    RetryExhaustedError,
)
from ss_tools.utils.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

# Transport failures, HTTP errors, and schema mismatches are all retried
RETRYABLE_ERRORS: Tuple[Type[Exception], ...] = (APIError, ParseError)


@dataclass
class RetryBudget:
    """Remaining attempts for one logical call.

    Pass an instance instead of an int to observe how many attempts a call
    left unconsumed.
    """

    remaining: int

    @classmethod
    def coerce(cls, value: Union[int, "RetryBudget"]) -> "RetryBudget":
        if isinstance(value, RetryBudget):
            return value
        return cls(remaining=int(value))

    @property
    def exhausted(self) -> bool:
        return self.remaining <= 0

    def consume(self) -> None:
        self.remaining = max(self.remaining - 1, 0)


class BaseAPIClient(ABC):
    """Abstract base API client with retry logic."""

    def __init__(
        self,
        base_url: str,
        timeout: int = 30,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize API client.

        Args:
            base_url: Base URL for API
            timeout: Request timeout in seconds
            transport: Optional httpx transport (tests pass httpx.MockTransport)
        """
        self.base_url = base_url
        self.timeout = timeout
        self.client = httpx.AsyncClient(timeout=timeout, transport=transport)

    @abstractmethod
    def _get_headers(self) -> Dict[str, str]:
        """Headers sent with every request. Must be implemented by subclass."""

    async def _make_request(
        self,
        method: str,
        url: str,
        json: Optional[Any] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> Any:
        """
        Make one HTTP request and decode the JSON body.

        Args:
            method: HTTP method (GET, POST)
            url: Fully resolved request URL, query string included
            json: JSON body for POST requests
            headers: Extra headers merged over _get_headers()

        Returns:
            Decoded JSON body

        Raises:
            RateLimitError: If rate limit exceeded
            APIError: If the request fails or returns a non-2xx status
            ParseError: If the body is not valid JSON
        """
        request_headers = self._get_headers()
        if headers:
            request_headers.update(headers)

        try:
            response = await self.client.request(
                method=method, url=url, json=json, headers=request_headers
            )

            if response.status_code == 429:
                raise RateLimitError("Rate limit exceeded")

            response.raise_for_status()

        except httpx.HTTPStatusError as e:
            logger.error(f"HTTP error {e.response.status_code}: {e}")
            raise APIError(f"HTTP {e.response.status_code}: {str(e)}")
        except httpx.RequestError as e:
            logger.error(f"Request error: {e}")
            raise APIError(f"Request failed: {str(e)}")

        try:
            return response.json()
        except ValueError as e:
            raise ParseError(f"Invalid JSON body: {e}")

    async def _retry_with_delay(
        self,
        func: Callable[[], Awaitable[T]],
        operation: str,
        target: str,
        max_retries: Union[int, RetryBudget] = 5,
        delay: float = 10.0,
        retry_on: Tuple[Type[Exception], ...] = RETRYABLE_ERRORS,
    ) -> T:
        """
        Retry function with fixed delay until it succeeds or the budget runs out.

        Each failed attempt consumes one unit of the budget. No wait follows
        the attempt that exhausts it. A budget of zero makes no attempt.

        Args:
            func: Async function to retry
            operation: Human-readable operation name for the terminal error
            target: Query text or identifier being resolved
            max_retries: Attempt budget, an int or a shared RetryBudget
            delay: Fixed delay between attempts in seconds
            retry_on: Exception types that count as retryable

        Returns:
            Result of the first successful call

        Raises:
            RetryExhaustedError: If the budget runs out first
        """
        budget = RetryBudget.coerce(max_retries)
        last_exception: Optional[Exception] = None
        attempt = 0

        while not budget.exhausted:
            attempt += 1
            try:
                return await func()
            except retry_on as e:
                last_exception = e
                budget.consume()
                if budget.exhausted:
                    break
                logger.warning(
                    f"Attempt {attempt} to {operation} failed: {e}. "
                    f"Retrying in {delay}s ({budget.remaining} attempts left)"
                )
                await asyncio.sleep(delay)

        logger.error(f"Giving up on {operation} for {target!r} after {attempt} attempts")
        raise RetryExhaustedError(operation, target, last_exception)

    async def close(self):
        """Close HTTP client."""
        await self.client.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.close()

