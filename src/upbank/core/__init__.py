"""
Core primitives: models, strict decoding, transports, options and the client.
"""

from .client import DEFAULT_BASE_URL, Client
from .config import ClientConfig, load_client_config
from .credentials import get_token, store_token
from .decoder import decode, encode
from .environment import ClientEnvironment, build_environment, load_env_file
from .errors import (
    APIError,
    ConfigError,
    DecodeError,
    NetworkError,
    PingError,
    UpBankError,
    aggregate,
)
from .models import (
    AccountResource,
    AccountResponse,
    AccountsResponse,
    AccountType,
    ErrorEnvelope,
    ErrorObject,
    ListResponse,
    MoneyObject,
    PingResponse,
    TransactionResource,
    TransactionResponse,
    TransactionsResponse,
    TransactionStatus,
    WebhookEventType,
    WebhookPingResponse,
    WebhookResource,
    WebhookResponse,
    WebhooksResponse,
)
from .money import format_amount
from .options import (
    AccountsOption,
    Option,
    RegisterWebhookOption,
    TransactionsOption,
    with_description,
    with_filter_since,
    with_filter_until,
    with_page_size,
    with_transaction_page_size,
)
from .transport import (
    AuthTransport,
    LogTransport,
    SessionTransport,
    Transport,
    build_transport,
)

__all__ = [
    "APIError",
    "AccountResource",
    "AccountResponse",
    "AccountType",
    "AccountsOption",
    "AccountsResponse",
    "AuthTransport",
    "Client",
    "ClientConfig",
    "ClientEnvironment",
    "ConfigError",
    "DEFAULT_BASE_URL",
    "DecodeError",
    "ErrorEnvelope",
    "ErrorObject",
    "ListResponse",
    "LogTransport",
    "MoneyObject",
    "NetworkError",
    "Option",
    "PingError",
    "PingResponse",
    "RegisterWebhookOption",
    "SessionTransport",
    "TransactionResource",
    "TransactionResponse",
    "TransactionStatus",
    "TransactionsOption",
    "TransactionsResponse",
    "Transport",
    "UpBankError",
    "WebhookEventType",
    "WebhookPingResponse",
    "WebhookResource",
    "WebhookResponse",
    "WebhooksResponse",
    "aggregate",
    "build_environment",
    "build_transport",
    "decode",
    "encode",
    "format_amount",
    "get_token",
    "load_client_config",
    "load_env_file",
    "store_token",
    "with_description",
    "with_filter_since",
    "with_filter_until",
    "with_page_size",
    "with_transaction_page_size",
]
