"""
Public, high-level helpers for talking to the Up Bank API.
"""

from __future__ import annotations

from typing import Mapping, Optional

import requests

from .core.client import Client
from .core.config import ClientConfig, ConfigError, load_client_config

__all__ = [
    "ConfigError",
    "create_client",
    "ping",
]


def create_client(
    *,
    config: Optional[ClientConfig] = None,
    session: Optional[requests.Session] = None,
    env_file: Optional[str] = ".env",
    overrides: Optional[Mapping[str, str]] = None,
    base: Optional[Mapping[str, str]] = None,
    token: Optional[str] = None,
    base_url: Optional[str] = None,
    verbose: Optional[bool] = None,
    timeout: Optional[float] = None,
) -> Client:
    """
    Construct a :class:`Client`.

    Callers can either supply a ready-made :class:`ClientConfig` or let the
    helper assemble one from the environment, a ``.env`` file and the keyring.
    """
    if config is not None:
        extras = (overrides, base, token, base_url, verbose, timeout)
        if any(item is not None and item != {} for item in extras):
            raise ValueError(
                "Provide either a pre-built ClientConfig or individual parameters, not both."
            )
        cfg = config
    else:
        cfg = load_client_config(
            env_file=env_file,
            overrides=overrides,
            base=base,
            token=token,
            base_url=base_url,
            verbose=verbose,
            timeout=timeout,
        )
    return Client(
        cfg.token,
        base_url=cfg.base_url,
        verbose=cfg.verbose,
        timeout=cfg.timeout,
        session=session,
    )


def ping(
    *,
    config: Optional[ClientConfig] = None,
    session: Optional[requests.Session] = None,
    env_file: Optional[str] = ".env",
) -> str:
    """
    Ping the API with the configured token and return the status emoji.
    """
    client = create_client(config=config, session=session, env_file=env_file)
    return client.ping().meta.status_emoji
