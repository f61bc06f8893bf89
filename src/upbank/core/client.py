"""
HTTP client for the Up Bank API.
"""

from __future__ import annotations

import logging
from http import HTTPStatus
from typing import Any, Collection, Dict, List, Optional, Sequence, Tuple, Type, TypeVar
from urllib.parse import quote

import requests

from .decoder import decode
from .errors import APIError, ConfigError, NetworkError, PingError, aggregate
from .models import (
    AccountResponse,
    AccountsResponse,
    ErrorEnvelope,
    ListResponse,
    PingResponse,
    RegisterWebhookRequest,
    TransactionResponse,
    TransactionsResponse,
    WebhookInputAttributes,
    WebhookInputResource,
    WebhookPingResponse,
    WebhookResponse,
    WebhooksResponse,
)
from .options import (
    DESCRIPTION,
    AccountsOption,
    RegisterWebhookOption,
    TransactionsOption,
    apply_options,
)
from .transport import Transport, build_transport

__all__ = ["Client", "DEFAULT_BASE_URL"]

DEFAULT_BASE_URL = "https://api.up.com.au"
API_PREFIX = "api/v1"

_OK = (HTTPStatus.OK,)
_CREATED = (HTTPStatus.OK, HTTPStatus.CREATED)

ModelT = TypeVar("ModelT")
PageT = TypeVar("PageT", bound=ListResponse)


class Client:
    """
    Typed wrapper around the Up Bank endpoints.

    The client keeps no per-call state, so one instance can be shared
    between threads. ``timeout`` is the per-call default in seconds; ``None``
    waits indefinitely. An injected ``transport`` replaces the HTTP layer at
    the bottom of the chain; the bearer token and request logging are still
    applied around it.
    """

    def __init__(
        self,
        token: str,
        *,
        base_url: str = DEFAULT_BASE_URL,
        verbose: bool = False,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
        transport: Optional[Transport] = None,
    ) -> None:
        if not token or not token.strip():
            raise ConfigError("An Up Bank API token is required")
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.transport = build_transport(
            token, verbose=verbose, session=session, base=transport
        )

    def _url(self, *segments: str) -> str:
        parts = [self.base_url, API_PREFIX]
        parts.extend(quote(segment, safe="") for segment in segments)
        return "/".join(parts)

    def _call(
        self,
        method: str,
        url: str,
        shape: Type[ModelT],
        *,
        success: Collection[int] = _OK,
        params: Optional[Sequence[Tuple[str, str]]] = None,
        body: Optional[bytes] = None,
        timeout: Optional[float] = None,
        error_cls: Type[APIError] = APIError,
    ) -> ModelT:
        headers = {"Accept": "application/json"}
        if body is not None:
            headers["Content-Type"] = "application/json"
        request = requests.Request(
            method, url, params=list(params or ()), headers=headers, data=body
        ).prepare()

        logging.debug("Calling %s %s", method, request.url)
        try:
            response = self.transport.send(
                request, timeout=timeout if timeout is not None else self.timeout
            )
            try:
                content = response.content
            finally:
                response.close()
        except requests.RequestException as exc:
            raise NetworkError(f"Request to {url} failed: {exc}") from exc

        if response.status_code not in success:
            envelope = decode(content, ErrorEnvelope)
            raise aggregate(envelope, response.status_code, error_cls=error_cls)
        return decode(content, shape)

    def ping(self, *, timeout: Optional[float] = None) -> PingResponse:
        """
        Check the token against ``util/ping``.

        A failure is raised as :class:`PingError`, rendered from the first
        error entry only.
        """
        return self._call(
            "GET",
            self._url("util", "ping"),
            PingResponse,
            timeout=timeout,
            error_cls=PingError,
        )

    def list_accounts(
        self,
        *options: AccountsOption,
        timeout: Optional[float] = None,
    ) -> AccountsResponse:
        params = apply_options(options, AccountsOption, "list_accounts")
        return self._call(
            "GET", self._url("accounts"), AccountsResponse, params=params, timeout=timeout
        )

    def get_account(self, account_id: str, *, timeout: Optional[float] = None) -> AccountResponse:
        return self._call(
            "GET", self._url("accounts", account_id), AccountResponse, timeout=timeout
        )

    def list_transactions(
        self,
        *options: TransactionsOption,
        timeout: Optional[float] = None,
    ) -> TransactionsResponse:
        """
        List transactions, newest first as ordered by the service.
        """
        params = apply_options(options, TransactionsOption, "list_transactions")
        return self._call(
            "GET",
            self._url("transactions"),
            TransactionsResponse,
            params=params,
            timeout=timeout,
        )

    def get_transaction(
        self, transaction_id: str, *, timeout: Optional[float] = None
    ) -> TransactionResponse:
        return self._call(
            "GET",
            self._url("transactions", transaction_id),
            TransactionResponse,
            timeout=timeout,
        )

    def list_webhooks(self, *, timeout: Optional[float] = None) -> WebhooksResponse:
        return self._call("GET", self._url("webhooks"), WebhooksResponse, timeout=timeout)

    def register_webhook(
        self,
        url: str,
        *options: RegisterWebhookOption,
        timeout: Optional[float] = None,
    ) -> WebhookResponse:
        """
        Register ``url`` to receive webhook events.

        The returned resource carries the webhook's secret key. It is only
        ever sent back this once.
        """
        attributes: Dict[str, Any] = {"url": url}
        for name, value in apply_options(options, RegisterWebhookOption, "register_webhook"):
            if name == DESCRIPTION:
                attributes["description"] = value
        payload = RegisterWebhookRequest(
            data=WebhookInputResource(attributes=WebhookInputAttributes(**attributes))
        )
        body = payload.model_dump_json(by_alias=True, exclude_none=True).encode("utf-8")
        return self._call(
            "POST",
            self._url("webhooks"),
            WebhookResponse,
            success=_CREATED,
            body=body,
            timeout=timeout,
        )

    def ping_webhook(self, webhook_id: str, *, timeout: Optional[float] = None) -> WebhookPingResponse:
        return self._call(
            "POST",
            self._url("webhooks", webhook_id, "ping"),
            WebhookPingResponse,
            success=_CREATED,
            timeout=timeout,
        )

    def next_page(self, page: PageT, *, timeout: Optional[float] = None) -> Optional[PageT]:
        """
        Fetch the page after ``page``, or ``None`` when it was the last one.
        """
        if not page.links.next:
            return None
        return self._call("GET", page.links.next, type(page), timeout=timeout)

    def all_pages(self, first: PageT, *, timeout: Optional[float] = None) -> List[PageT]:
        """Follow ``next`` links from ``first`` and return every page in order."""
        pages = [first]
        current: Optional[PageT] = first
        while current is not None:
            current = self.next_page(current, timeout=timeout)
            if current is not None:
                pages.append(current)
        return pages
