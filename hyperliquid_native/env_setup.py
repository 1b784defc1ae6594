"""Environment configuration setup utilities.

This module provides functions for loading environment variables from .env files
and turning them into client configuration.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from hyperliquid_native.errors import ValidationError
from hyperliquid_native.helpers import default_api_url
from hyperliquid_native.signing import address_to_bytes, is_valid_private_key

log = logging.getLogger(__name__)

ENVIRONMENTS = ("mainnet", "testnet")


@dataclass(frozen=True)
class EnvironmentConfig:
    """Client configuration read from the environment."""

    environment: str
    is_testnet: bool
    api_url: str
    private_key: str | None
    vault_address: str | None


def setup_environment(env_file: str | Path = ".env") -> EnvironmentConfig:
    """Load and return environment variables for the exchange client.

    Loads environment variables from a .env file if present, otherwise falls
    back to system environment variables. Reads environment-specific variables
    based on the ENVIRONMENT variable (defaults to 'mainnet'):

        - HYPERLIQUID_API_ENDPOINT_<ENV>: API base URL (defaults to the public host)
        - HYPERLIQUID_PRIVATE_KEY_<ENV>: hex private key used for signing
        - HYPERLIQUID_VAULT_ADDRESS_<ENV>: optional vault/sub-account address

    Raises:
        ValidationError: If ENVIRONMENT is unknown, or the key/address is malformed.

    """
    env_file_path = Path(env_file)
    if env_file_path.exists():
        log.info("Loading environment variables from %s", env_file_path)
        load_dotenv(env_file_path)
    else:
        log.info("%s not found. Falling back to process environment variables.", env_file_path)

    environment = os.getenv("ENVIRONMENT", "mainnet").lower()
    if environment not in ENVIRONMENTS:
        raise ValidationError(
            f"Invalid ENVIRONMENT={environment!r}, expected one of {ENVIRONMENTS}"
        )
    log.info("Using %s environment", environment)

    suffix = environment.upper()
    is_testnet = environment == "testnet"
    api_url = os.environ.get(
        f"HYPERLIQUID_API_ENDPOINT_{suffix}", default_api_url(is_testnet)
    )

    private_key = os.environ.get(f"HYPERLIQUID_PRIVATE_KEY_{suffix}") or None
    if private_key is not None and not is_valid_private_key(private_key):
        raise ValidationError(f"Invalid HYPERLIQUID_PRIVATE_KEY_{suffix}")

    vault_address = os.environ.get(f"HYPERLIQUID_VAULT_ADDRESS_{suffix}") or None
    if vault_address is not None:
        try:
            address_to_bytes(vault_address)
        except ValidationError as e:
            raise ValidationError(
                f"Invalid HYPERLIQUID_VAULT_ADDRESS_{suffix}: {e}"
            ) from e

    return EnvironmentConfig(
        environment=environment,
        is_testnet=is_testnet,
        api_url=api_url,
        private_key=private_key,
        vault_address=vault_address,
    )
