from typing_extensions import override

import requests

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


class RequestsHttpExecutor(HttpExecutor):
    @override
    def __init__(self, api_url: str = MAINNET_API_URL, timeout: float | None = 10.0):
        self.api_url = api_url
        self.timeout = timeout

    @override
    def post_json(self, path: str, json: JsonValue) -> HttpResponse:
        url = f"{self.api_url}{path}"
        request_body = serialize_request(json)
        try:
            headers = {
                "Content-Type": "application/json",
                "Accept": "application/json",
                "User-Agent": get_client_name(),
            }

            response = requests.post(
                url, headers=headers, data=request_body, timeout=self.timeout
            )
        except BaseError:
            raise
        except requests.Timeout as e:
            raise TransportTimeoutError(
                f"POST request to {url} timed out", timeout_seconds=self.timeout
            ) from e
        except requests.ConnectionError as e:
            raise HttpConnectionError(f"Failed to connect to {url}", url=url) from e
        except Exception as e:
            raise TransportError(f"POST request to {url} failed: {e}") from e
        return HttpResponse(
            status=response.status_code,
            body=response.content,
            headers=dict(response.headers),
        )
