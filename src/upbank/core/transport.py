"""
Composable transports that sit between the client and ``requests``.

A transport takes a prepared request and returns a response. Wrappers hold
an inner transport and add behaviour on the way through; the client only
ever talks to the outermost one.
"""

from __future__ import annotations

import logging
from typing import Optional, Protocol, Union

import requests

__all__ = [
    "AuthTransport",
    "LogTransport",
    "SessionTransport",
    "Transport",
    "build_transport",
]

Timeout = Union[None, float, tuple]


class Transport(Protocol):
    def send(
        self,
        request: requests.PreparedRequest,
        *,
        timeout: Timeout = None,
    ) -> requests.Response:
        ...


class SessionTransport:
    """
    Base transport backed by a :class:`requests.Session`.
    """

    def __init__(self, session: Optional[requests.Session] = None) -> None:
        self.session = session or requests.Session()

    def send(
        self,
        request: requests.PreparedRequest,
        *,
        timeout: Timeout = None,
    ) -> requests.Response:
        return self.session.send(request, timeout=timeout)


class AuthTransport:
    """
    Adds ``Authorization: Bearer <token>`` to every outgoing request.
    """

    def __init__(self, inner: Transport, token: str) -> None:
        self._inner = inner
        self._token = token

    @property
    def token(self) -> str:
        return self._token

    def send(
        self,
        request: requests.PreparedRequest,
        *,
        timeout: Timeout = None,
    ) -> requests.Response:
        authorized = request.copy()
        authorized.headers["Authorization"] = f"Bearer {self._token}"
        return self._inner.send(authorized, timeout=timeout)


class LogTransport:
    """
    Logs each request line and the response status without touching either.
    """

    def __init__(self, inner: Transport) -> None:
        self._inner = inner

    def send(
        self,
        request: requests.PreparedRequest,
        *,
        timeout: Timeout = None,
    ) -> requests.Response:
        logging.info("--> %s %s", request.method, request.url)
        response = self._inner.send(request, timeout=timeout)
        logging.info("<-- %s %s %s", response.status_code, response.reason, response.url)
        return response


def build_transport(
    token: str,
    *,
    verbose: bool = False,
    session: Optional[requests.Session] = None,
    base: Optional[Transport] = None,
) -> Transport:
    """
    Assemble the standard chain: ``Log(Auth(base))``, logging only when
    ``verbose`` is set. Auth always sits inside Log.

    ``base`` replaces the session-backed transport at the bottom of the chain.
    """
    if base is None:
        base = SessionTransport(session)
    transport: Transport = AuthTransport(base, token)
    if verbose:
        transport = LogTransport(transport)
    return transport
