"""Default executor configuration.

This module defines the default HTTP executor implementation used when no
custom executor is provided.
"""

from typing import Type

from hyperliquid_native.executors.httpx import HttpxHttpExecutor
from hyperliquid_native.executors.interface import HttpExecutor

DEFAULT_HTTP_EXECUTOR: Type[HttpExecutor] = HttpxHttpExecutor
