from hyperliquid_native.executors.defaults import DEFAULT_HTTP_EXECUTOR
from hyperliquid_native.executors.httpx import HttpxHttpExecutor
from hyperliquid_native.executors.interface import HttpExecutor, HttpResponse
from hyperliquid_native.executors.requests import RequestsHttpExecutor

__all__ = [
    "HttpExecutor",
    "HttpResponse",
    "HttpxHttpExecutor",
    "RequestsHttpExecutor",
    "DEFAULT_HTTP_EXECUTOR",
]
