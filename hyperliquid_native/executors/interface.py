"""Abstract interface for HTTP executors.

This module defines the abstract base class that all HTTP executor
implementations must follow, enabling pluggable transport layers. Executors
only move bytes: they never retry, pool across clients or interpret bodies.
"""

from abc import ABC, abstractmethod

from hyperliquid_native.types import JsonValue


class HttpResponse:
    """Container for HTTP response data.

    Encapsulates the status code, raw body and headers from an HTTP response.
    The body is left undecoded so non-2XX responses can be surfaced verbatim.
    """

    status: int
    body: bytes
    headers: dict[str, str] | None

    __slots__ = ("status", "body", "headers")

    def __init__(
        self,
        *,
        status: int,
        body: bytes = b"",
        headers: dict[str, str] | None = None,
    ) -> None:
        """Initialize an HTTP response object.

        Args:
            status: The HTTP status code of the response.
            body: The raw response body.
            headers: Optional HTTP response headers as key-value pairs.

        """
        self.status = status
        self.body = body
        self.headers = headers

    @property
    def text(self) -> str:
        return self.body.decode("utf-8", errors="replace")


class HttpExecutor(ABC):
    """Abstract base class for HTTP request executors."""

    api_url: str

    @abstractmethod
    def __init__(self, api_url: str, timeout: float | None = None):
        """Initialize the HTTP executor.

        Args:
            api_url: The base API URL for making requests.
            timeout: Optional timeout in seconds for each request.

        """
        ...

    @abstractmethod
    def post_json(self, path: str, json: JsonValue) -> HttpResponse:
        """POST a JSON document and return the raw response.

        Args:
            path: The URL path, appended to ``api_url``.
            json: The JSON payload to send.

        Returns:
            An HttpResponse object containing the status, body, and headers.

        Raises:
            TransportError: For network-level failures.

        """
        ...
