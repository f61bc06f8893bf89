"""
Where the API token comes from: the environment first, then the OS keyring.
"""

from __future__ import annotations

import logging
from typing import Mapping, Optional

import keyring
from keyring.errors import KeyringError

from .errors import ConfigError

__all__ = [
    "KEYRING_SERVICE",
    "KEYRING_TOKEN_KEY",
    "TOKEN_ENV_VAR",
    "get_token",
    "read_keyring_token",
    "store_token",
]

TOKEN_ENV_VAR = "UPBANK_TOKEN"
KEYRING_SERVICE = "upbank"
KEYRING_TOKEN_KEY = "upbank-token"


def read_keyring_token() -> Optional[str]:
    try:
        return keyring.get_password(KEYRING_SERVICE, KEYRING_TOKEN_KEY)
    except KeyringError as exc:
        raise ConfigError(f"Failed to read the Up Bank token from the keyring: {exc}") from exc


def store_token(token: str) -> None:
    token = token.strip()
    if not token:
        raise ConfigError("Refusing to store an empty Up Bank token")
    try:
        keyring.set_password(KEYRING_SERVICE, KEYRING_TOKEN_KEY, token)
    except KeyringError as exc:
        raise ConfigError(
            f"Failed to store the Up Bank token in the keyring under '{KEYRING_TOKEN_KEY}': {exc}"
        ) from exc


def get_token(variables: Mapping[str, str]) -> str:
    """
    Return the token from ``UPBANK_TOKEN`` in ``variables``, falling back to
    the keyring when the variable is not set at all.

    An explicitly set variable wins over the keyring, even when empty, so an
    empty ``UPBANK_TOKEN`` is an error rather than a silent fallback.
    """
    if TOKEN_ENV_VAR in variables:
        token = variables[TOKEN_ENV_VAR]
    else:
        logging.debug("%s is not set, looking in the keyring", TOKEN_ENV_VAR)
        token = read_keyring_token() or ""

    token = token.strip()
    if not token:
        raise ConfigError(
            f"No Up Bank token found in the {TOKEN_ENV_VAR} environment variable or the keyring"
        )
    return token
