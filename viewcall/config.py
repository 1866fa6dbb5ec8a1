"""
Configuration
Settings read from the environment (and a .env file when present)
"""

import os
from dataclasses import dataclass
from typing import Optional

from web3 import Web3
from dotenv import load_dotenv

from .exceptions import ConfigurationError
from .multicall import MULTICALL3_ADDRESS


@dataclass
class Settings:
    rpc_url: Optional[str] = None
    multicall_address: str = MULTICALL3_ADDRESS
    chunk_size: int = 50
    request_timeout: int = 30
    log_level: str = "INFO"

    def web3(self) -> Web3:
        """
        Create a Web3 client for the configured RPC endpoint

        Raises:
            ConfigurationError: VIEWCALL_RPC_URL not set
        """
        if not self.rpc_url:
            raise ConfigurationError("VIEWCALL_RPC_URL is not set")

        return Web3(Web3.HTTPProvider(
            self.rpc_url,
            request_kwargs={'timeout': self.request_timeout}
        ))


def _get_int_env(key: str, default: int) -> int:
    raw_value = os.getenv(key)
    if raw_value is None or raw_value.strip() == "":
        return default
    try:
        value = int(raw_value)
    except ValueError:
        raise ConfigurationError(f"{key} must be an integer, got {raw_value!r}") from None
    if value < 1:
        raise ConfigurationError(f"{key} must be positive, got {value}")
    return value


def load_settings(dotenv_path: Optional[str] = None) -> Settings:
    """
    Load settings from environment variables

    Variables already present in the environment win over the .env file.

    Args:
        dotenv_path: Explicit .env file (None = search from the working directory)
    """
    load_dotenv(dotenv_path)

    return Settings(
        rpc_url=os.getenv('VIEWCALL_RPC_URL'),
        multicall_address=os.getenv('VIEWCALL_MULTICALL_ADDRESS', MULTICALL3_ADDRESS),
        chunk_size=_get_int_env('VIEWCALL_CHUNK_SIZE', 50),
        request_timeout=_get_int_env('VIEWCALL_REQUEST_TIMEOUT', 30),
        log_level=os.getenv('VIEWCALL_LOG_LEVEL', 'INFO').upper(),
    )
