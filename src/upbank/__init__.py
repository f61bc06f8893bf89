"""
Public facade for the Up Bank client package.

The most useful pieces are re-exported here so integrators can
``from upbank import ...`` without navigating the package.
"""

from .api import create_client, ping
from .core import (
    APIError,
    AccountsOption,
    Client,
    ClientConfig,
    ConfigError,
    DecodeError,
    MoneyObject,
    NetworkError,
    PingError,
    RegisterWebhookOption,
    TransactionsOption,
    UpBankError,
    WebhookEventType,
    aggregate,
    build_transport,
    decode,
    load_client_config,
    with_description,
    with_filter_since,
    with_filter_until,
    with_page_size,
    with_transaction_page_size,
)
from .webhook import handle_webhook_request, verify_signature

__version__ = "0.1.0"

__all__ = (
    "APIError",
    "AccountsOption",
    "Client",
    "ClientConfig",
    "ConfigError",
    "DecodeError",
    "MoneyObject",
    "NetworkError",
    "PingError",
    "RegisterWebhookOption",
    "TransactionsOption",
    "UpBankError",
    "WebhookEventType",
    "aggregate",
    "build_transport",
    "create_client",
    "decode",
    "handle_webhook_request",
    "load_client_config",
    "ping",
    "verify_signature",
    "with_description",
    "with_filter_since",
    "with_filter_until",
    "with_page_size",
    "with_transaction_page_size",
)
