from __future__ import annotations

import os
from dataclasses import dataclass
from typing import TYPE_CHECKING

from dotenv import load_dotenv

if TYPE_CHECKING:
    from .client import HalClient

DEFAULT_TIMEOUT_SECONDS = 10.0


@dataclass(frozen=True)
class ClientConfig:
    base_url: str = ""
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    accept: str = "application/hal+json"
    follow_redirects: bool = True


def load_env_config(*, use_dotenv: bool = True) -> ClientConfig:
    """Load client settings from HALNAV_* environment variables (optional .env)."""
    if use_dotenv:
        load_dotenv()
    base_url = os.getenv("HALNAV_BASE_URL", "").strip()
    raw_timeout = os.getenv("HALNAV_TIMEOUT_SECONDS", "").strip()
    try:
        timeout_seconds = float(raw_timeout) if raw_timeout else DEFAULT_TIMEOUT_SECONDS
    except ValueError as exc:
        raise ValueError(
            f"HALNAV_TIMEOUT_SECONDS must be a number, got {raw_timeout!r}"
        ) from exc
    return ClientConfig(base_url=base_url, timeout_seconds=timeout_seconds)


def create_client_from_env(**kwargs) -> "HalClient":
    """Create a HalClient from environment variables."""
    from .client import HalClient

    return HalClient.from_config(load_env_config(), **kwargs)


__all__ = ["ClientConfig", "load_env_config", "create_client_from_env"]
