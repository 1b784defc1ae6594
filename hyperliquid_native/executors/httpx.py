"""HTTP executor implementation using httpx.

This module provides HTTP request handling using the httpx library.
"""

from typing_extensions import override

import httpx

from hyperliquid_native.errors import (
    BaseError,
    HttpConnectionError,
    TransportError,
    TransportTimeoutError,
)
from hyperliquid_native.executors.interface import HttpExecutor, HttpResponse
from hyperliquid_native.helpers import (
    MAINNET_API_URL,
    get_client_name,
    serialize_request,
)
from hyperliquid_native.types import JsonValue


class HttpxHttpExecutor(HttpExecutor):
    """HTTP executor implementation using httpx.

    Provides synchronous HTTP request execution using a single reusable
    httpx client.
    """

    @override
    def __init__(self, api_url: str = MAINNET_API_URL, timeout: float | None = 10.0):
        """Initialize the HTTPX HTTP executor.

        Args:
            api_url: The base URL for the API. Defaults to MAINNET_API_URL.
            timeout: Timeout in seconds for each request, None to wait forever.

        """
        self.api_url = api_url
        self.timeout = timeout
        self.client = httpx.Client(timeout=timeout)

    @override
    def post_json(self, path: str, json: JsonValue) -> HttpResponse:
        """POST a JSON document to the API.

        Args:
            path: The API endpoint path (appended to api_url).
            json: JSON payload to send.

        Returns:
            HttpResponse containing the status code and raw response body.

        Raises:
            SerializationError: If the payload cannot be serialized.
            TransportTimeoutError: If the request times out.
            HttpConnectionError: If there is a connection or network error.
            TransportError: If any other transport-level error occurs.

        """
        url = f"{self.api_url}{path}"
        request_body = serialize_request(json)
        try:
            response = self.client.post(
                url,
                headers={
                    "Content-Type": "application/json",
                    "Accept": "application/json",
                    "User-Agent": get_client_name(),
                },
                content=request_body,
            )
        except BaseError:
            raise
        except httpx.TimeoutException as e:
            raise TransportTimeoutError(
                f"POST request to {url} timed out", timeout_seconds=self.timeout
            ) from e
        except (httpx.ConnectError, httpx.ConnectTimeout) as e:
            raise HttpConnectionError(f"Failed to connect to {url}", url=url) from e
        except httpx.NetworkError as e:
            raise HttpConnectionError(
                f"Network error during POST request to {url}", url=url
            ) from e
        except Exception as e:
            raise TransportError(f"POST request to {url} failed: {e}") from e
        return HttpResponse(
            status=response.status_code,
            body=response.content,
            headers=dict(response.headers),
        )

    def close(self) -> None:
        self.client.close()

    def __del__(self) -> None:
        """Cleanup the httpx client when the executor is destroyed."""
        client = getattr(self, "client", None)
        if client is not None:
            client.close()
