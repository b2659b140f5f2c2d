"""httpx wrapper and the single-request executor.

Why a wrapper:
- Standardises headers (bearer auth, JSON), timeouts and logging for every
  call to the Coolify API.
- Eases testing: the transport can be swapped for `httpx.MockTransport`.

`RequestExecutor.execute` performs exactly one request and returns either a
validated value or raises `ApiError`. There are no retries.
"""

from __future__ import annotations

import logging
import time
from typing import Any

import httpx

from core.config import DEFAULT_USER_AGENT
from core.domain.models import ApiErrorBody
from core.errors import ApiError, SchemaValidationError
from core.validation import validate

logger = logging.getLogger(__name__)

API_PREFIX = "/api/v1"


def build_async_client(
    *,
    token: str,
    user_agent: str | None = None,
    timeout_seconds: float | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
    extra_headers: dict[str, str] | None = None,
) -> httpx.AsyncClient:
    """Create an `httpx.AsyncClient` preconfigured for the Coolify API.

    `timeout_seconds=None` disables the transport timeout; callers that want
    one set `COOLIFY_HTTP_TIMEOUT_SECONDS`.
    """

    headers: dict[str, str] = {
        "Authorization": f"Bearer {token}",
        "Content-Type": "application/json",
        "Accept": "application/json",
        "User-Agent": user_agent or DEFAULT_USER_AGENT,
    }
    if extra_headers:
        headers.update(extra_headers)
    return httpx.AsyncClient(
        timeout=httpx.Timeout(timeout_seconds),
        follow_redirects=False,
        headers=headers,
        transport=transport,
    )


def _error_from_response(response: httpx.Response) -> ApiError:
    fallback = f"HTTP {response.status_code}"
    try:
        body = validate(ApiErrorBody, response.json())
    except (ValueError, SchemaValidationError):
        return ApiError(fallback, status_code=response.status_code)
    return ApiError(
        body.message or fallback,
        status_code=response.status_code,
        code=body.code,
    )


class RequestExecutor:
    """Performs one authenticated request against `<base_url>/api/v1`."""

    def __init__(
        self,
        base_url: str,
        token: str,
        *,
        user_agent: str | None = None,
        timeout_seconds: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._api_root = f"{base_url}{API_PREFIX}"
        self._token = token
        self._user_agent = user_agent
        self._timeout_seconds = timeout_seconds
        self._transport = transport

    @property
    def api_root(self) -> str:
        return self._api_root

    async def execute(
        self,
        method: str,
        path: str,
        body: Any = None,
        response_schema: Any = None,
    ) -> Any:
        """Send `method path` and return the decoded (and validated) body.

        - 204 or an empty 2xx body returns `{}` without parsing.
        - Non-2xx raises `ApiError` with the server message and status code.
        - A 2xx body that fails `response_schema` raises `ApiError` carrying
          the violations and no status code.
        - Network errors and malformed JSON raise `ApiError` with no status.
        """

        url = f"{self._api_root}{path}"
        started = time.perf_counter()
        try:
            async with build_async_client(
                token=self._token,
                user_agent=self._user_agent,
                timeout_seconds=self._timeout_seconds,
                transport=self._transport,
            ) as client:
                response = await client.request(method, url, json=body)
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            logger.debug("%s %s failed: %r", method, path, exc)
            raise ApiError(f"Request failed: {str(exc) or type(exc).__name__}") from exc

        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.debug("%s %s -> %s (%.0f ms)", method, path, response.status_code, elapsed_ms)

        if not response.is_success:
            error = _error_from_response(response)
            logger.debug("%s %s error: %s (code=%s)", method, path, error.message, error.code)
            raise error

        if response.status_code == 204 or not response.content:
            return {}

        try:
            data = response.json()
        except ValueError as exc:
            raise ApiError(f"Malformed JSON response: {exc}") from exc

        if response_schema is None:
            return data

        try:
            return validate(response_schema, data)
        except SchemaValidationError as exc:
            logger.debug("%s %s response failed validation: %s", method, path, exc)
            raise ApiError(
                f"Response validation error: {exc}",
                violations=exc.violations,
            ) from exc
