"""HTTP probing of the service's aggregate endpoints.

Each endpoint is queried on its own: a connection failure, an error status
or a body that is not JSON is recorded for that endpoint and the remaining
requests still run.
"""

from collections.abc import Sequence
from dataclasses import dataclass

import httpx
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from demorun.config import DEFAULT_ENDPOINT_PATHS

DEFAULT_TIMEOUT = 10.0


@dataclass(frozen=True, slots=True)
class EndpointResult:
    """Outcome of a single endpoint query.

    Attributes:
        path: Requested path.
        url: Absolute URL that was requested.
        ok: Whether a JSON payload was received with a success status.
        status_code: HTTP status, if a response arrived.
        data: Decoded JSON payload on success.
        error: Error description on failure.
    """

    path: str
    url: str
    ok: bool
    status_code: int | None = None
    data: object = None
    error: str | None = None


@retry(
    retry=retry_if_exception_type((httpx.ConnectError, httpx.TimeoutException)),
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=0.5, min=0.5, max=2),
    reraise=True,
)
async def _get(client: httpx.AsyncClient, path: str) -> httpx.Response:
    """Issue a GET with retry logic.

    Raises:
        httpx.ConnectError: If connection fails after retries.
        httpx.TimeoutException: If request times out after retries.
    """
    return await client.get(path, headers={"Accept": "application/json"})


async def query_endpoint(client: httpx.AsyncClient, path: str) -> EndpointResult:
    """Query one endpoint and capture the outcome.

    Args:
        client: Client bound to the service base URL.
        path: Path to request.

    Returns:
        The EndpointResult. This function does not raise for HTTP or
        transport failures.
    """
    url = str(client.base_url.join(path))

    try:
        response = await _get(client, path)
    except httpx.HTTPError as e:
        return EndpointResult(
            path=path,
            url=url,
            ok=False,
            error=f"{type(e).__name__}: {e}",
        )

    if response.is_error:
        return EndpointResult(
            path=path,
            url=url,
            ok=False,
            status_code=response.status_code,
            error=f"HTTP {response.status_code} {response.reason_phrase}",
        )

    try:
        data: object = response.json()
    except ValueError as e:
        return EndpointResult(
            path=path,
            url=url,
            ok=False,
            status_code=response.status_code,
            error=f"Invalid JSON response: {e}",
        )

    return EndpointResult(
        path=path,
        url=url,
        ok=True,
        status_code=response.status_code,
        data=data,
    )


async def query_endpoints(
    base_url: str,
    paths: Sequence[str] = DEFAULT_ENDPOINT_PATHS,
    *,
    timeout: float = DEFAULT_TIMEOUT,
    transport: httpx.AsyncBaseTransport | None = None,
) -> list[EndpointResult]:
    """Query each endpoint in order.

    Args:
        base_url: Service base URL, for example `http://127.0.0.1:8080`.
        paths: Paths to request.
        timeout: Per-request timeout in seconds.
        transport: Optional transport override.

    Returns:
        One EndpointResult per path, in input order.
    """
    async with httpx.AsyncClient(
        base_url=base_url,
        timeout=timeout,
        transport=transport,
    ) as client:
        return [await query_endpoint(client, path) for path in paths]
