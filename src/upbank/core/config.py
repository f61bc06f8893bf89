"""
Configuration objects and helpers for the Up Bank client.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional
from urllib.parse import urlparse

from .client import DEFAULT_BASE_URL
from .credentials import TOKEN_ENV_VAR, get_token
from .environment import ClientEnvironment, build_environment
from .errors import ConfigError

__all__ = [
    "ClientConfig",
    "ConfigError",
    "load_client_config",
]

_PARAMETER_TO_ENV_KEY = {
    "token": TOKEN_ENV_VAR,
    "base_url": "UPBANK_BASE_URL",
    "verbose": "UPBANK_VERBOSE",
    "timeout": "UPBANK_TIMEOUT_SECONDS",
}


def _stringify(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _collect_parameter_overrides(explicit: Mapping[str, Any]) -> Dict[str, str]:
    overrides: Dict[str, str] = {}
    for key, value in explicit.items():
        if value is None:
            continue
        overrides[_PARAMETER_TO_ENV_KEY[key]] = _stringify(value)
    return overrides


def _normalize_base_url(raw_url: str) -> str:
    value = raw_url.strip().rstrip("/")
    parsed = urlparse(value)
    if parsed.scheme not in {"http", "https"} or not parsed.netloc:
        raise ConfigError(f"UPBANK_BASE_URL must be an http(s) URL, got '{raw_url}'")
    return value


def _parse_timeout(raw_timeout: Optional[str]) -> Optional[float]:
    if raw_timeout is None or not raw_timeout.strip():
        return None
    try:
        timeout = float(raw_timeout)
    except ValueError as exc:
        raise ConfigError(
            f"UPBANK_TIMEOUT_SECONDS must be a number of seconds, got '{raw_timeout}'"
        ) from exc
    if timeout <= 0:
        raise ConfigError("UPBANK_TIMEOUT_SECONDS must be greater than zero")
    return timeout


@dataclass(frozen=True)
class ClientConfig:
    token: str
    base_url: str = DEFAULT_BASE_URL
    verbose: bool = False
    timeout: Optional[float] = None

    def __repr__(self) -> str:
        return (
            f"ClientConfig(token='***', base_url={self.base_url!r}, "
            f"verbose={self.verbose!r}, timeout={self.timeout!r})"
        )

    @classmethod
    def from_mapping(cls, values: Mapping[str, str]) -> "ClientConfig":
        environment = ClientEnvironment(variables=values)

        token = get_token(values)
        base_url = _normalize_base_url(environment.get("UPBANK_BASE_URL") or DEFAULT_BASE_URL)
        try:
            verbose = environment.get_bool("UPBANK_VERBOSE")
        except ValueError as exc:
            raise ConfigError(str(exc)) from exc
        timeout = _parse_timeout(environment.get("UPBANK_TIMEOUT_SECONDS"))

        return cls(token=token, base_url=base_url, verbose=verbose, timeout=timeout)

    @classmethod
    def from_env(
        cls,
        *,
        env_file: Optional[str] = ".env",
        overrides: Optional[Mapping[str, str]] = None,
        base: Optional[Mapping[str, str]] = None,
        token: Optional[str] = None,
        base_url: Optional[str] = None,
        verbose: Optional[bool] = None,
        timeout: Optional[float] = None,
    ) -> "ClientConfig":
        parameter_overrides = _collect_parameter_overrides(
            {
                "token": token,
                "base_url": base_url,
                "verbose": verbose,
                "timeout": timeout,
            }
        )
        merged_overrides = dict(overrides or {})
        merged_overrides.update(parameter_overrides)

        environment = build_environment(
            env_file=env_file,
            base=base,
            overrides=merged_overrides,
        )
        return cls.from_mapping(environment.variables)


def load_client_config(
    *,
    env_file: Optional[str] = ".env",
    overrides: Optional[Mapping[str, str]] = None,
    base: Optional[Mapping[str, str]] = None,
    token: Optional[str] = None,
    base_url: Optional[str] = None,
    verbose: Optional[bool] = None,
    timeout: Optional[float] = None,
) -> ClientConfig:
    """
    Convenience wrapper that mirrors :meth:`ClientConfig.from_env`.

    Settings can come from environment variables, a ``.env`` file, keyword
    arguments, or any combination; the token falls back to the OS keyring.
    """
    return ClientConfig.from_env(
        env_file=env_file,
        overrides=overrides,
        base=base,
        token=token,
        base_url=base_url,
        verbose=verbose,
        timeout=timeout,
    )
