"""
Typed JSON:API resources exchanged with the Up Bank API.

Every model forbids undeclared fields, so a payload that grew a field we do
not know about fails to decode instead of silently losing data.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from .money import DEFAULT_LOCALE, format_amount

__all__ = [
    "AccountAttributes",
    "AccountRelationships",
    "AccountResource",
    "AccountResponse",
    "AccountType",
    "AccountsResponse",
    "CashbackObject",
    "ErrorEnvelope",
    "ErrorObject",
    "ErrorSource",
    "HoldInfoObject",
    "JsonApiModel",
    "ListResponse",
    "MoneyObject",
    "PaginationLinks",
    "PingMeta",
    "PingResponse",
    "RegisterWebhookRequest",
    "RelatedLink",
    "RelationshipLinks",
    "ResourceIdentifier",
    "ResourceRelationship",
    "RoundUpObject",
    "SelfLink",
    "TagsRelationship",
    "TransactionAttributes",
    "TransactionRelationships",
    "TransactionResource",
    "TransactionResponse",
    "TransactionStatus",
    "TransactionsResponse",
    "WebhookAttributes",
    "WebhookEventAttributes",
    "WebhookEventRelationships",
    "WebhookEventResource",
    "WebhookEventType",
    "WebhookInputAttributes",
    "WebhookInputResource",
    "WebhookPingResponse",
    "WebhookRelationships",
    "WebhookResource",
    "WebhookResponse",
    "WebhooksResponse",
]


class JsonApiModel(BaseModel):
    model_config = ConfigDict(
        extra="forbid",
        strict=True,
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class AccountType(str, Enum):
    SAVER = "SAVER"
    TRANSACTIONAL = "TRANSACTIONAL"


class TransactionStatus(str, Enum):
    HELD = "HELD"
    SETTLED = "SETTLED"


class WebhookEventType(str, Enum):
    TRANSACTION_CREATED = "TRANSACTION_CREATED"
    TRANSACTION_SETTLED = "TRANSACTION_SETTLED"
    TRANSACTION_DELETED = "TRANSACTION_DELETED"
    PING = "PING"


class MoneyObject(JsonApiModel):
    """
    An amount of money as reported by the API.

    ``value_in_base_units`` is carried as-is; it is not checked against
    ``value``.
    """

    currency_code: str = Field(min_length=3, max_length=3)
    value: str
    value_in_base_units: int

    def format(self, locale: str = DEFAULT_LOCALE) -> str:
        return format_amount(self.currency_code, self.value, locale=locale)


class SelfLink(JsonApiModel):
    self_link: str = Field(alias="self")


class RelatedLink(JsonApiModel):
    related: str


class RelationshipLinks(JsonApiModel):
    links: RelatedLink


class ResourceIdentifier(JsonApiModel):
    type: str
    id: str


class ResourceRelationship(JsonApiModel):
    data: ResourceIdentifier
    links: Optional[RelatedLink] = None


class PaginationLinks(JsonApiModel):
    """``prev``/``next`` page URLs; an absent link is the empty string."""

    prev: str = ""
    next: str = ""

    @field_validator("prev", "next", mode="before")
    @classmethod
    def null_as_empty(cls, value: Optional[str]) -> str:
        return "" if value is None else value


ResourceT = TypeVar("ResourceT", bound=JsonApiModel)


class ListResponse(JsonApiModel, Generic[ResourceT]):
    data: List[ResourceT]
    links: PaginationLinks = PaginationLinks()


# Accounts


class AccountAttributes(JsonApiModel):
    display_name: str
    account_type: AccountType
    balance: MoneyObject
    created_at: datetime


class AccountRelationships(JsonApiModel):
    transactions: RelationshipLinks


class AccountResource(JsonApiModel):
    id: str
    type: str
    attributes: AccountAttributes
    relationships: AccountRelationships
    links: SelfLink


AccountsResponse = ListResponse[AccountResource]


class AccountResponse(JsonApiModel):
    data: AccountResource


# Transactions


class HoldInfoObject(JsonApiModel):
    amount: MoneyObject
    foreign_amount: Optional[MoneyObject] = None


class RoundUpObject(JsonApiModel):
    amount: MoneyObject
    boost_portion: Optional[MoneyObject] = None


class CashbackObject(JsonApiModel):
    description: str
    amount: MoneyObject


class TransactionAttributes(JsonApiModel):
    description: str
    status: TransactionStatus
    raw_text: Optional[str] = None
    message: Optional[str] = None
    hold_info: Optional[HoldInfoObject] = None
    round_up: Optional[RoundUpObject] = None
    cashback: Optional[CashbackObject] = None
    amount: MoneyObject
    foreign_amount: Optional[MoneyObject] = None
    settled_at: Optional[datetime] = None
    created_at: datetime


class TagsRelationship(JsonApiModel):
    links: SelfLink


class TransactionRelationships(JsonApiModel):
    account: ResourceRelationship
    tags: Optional[TagsRelationship] = None


class TransactionResource(JsonApiModel):
    id: str
    type: str
    attributes: TransactionAttributes
    relationships: TransactionRelationships
    links: SelfLink


TransactionsResponse = ListResponse[TransactionResource]


class TransactionResponse(JsonApiModel):
    data: TransactionResource


# Webhooks


class WebhookAttributes(JsonApiModel):
    url: str
    description: Optional[str] = None
    # Only returned by the API when the webhook is created.
    secret_key: Optional[str] = None
    created_at: datetime


class WebhookRelationships(JsonApiModel):
    logs: RelationshipLinks


class WebhookResource(JsonApiModel):
    id: str
    type: str
    attributes: WebhookAttributes
    relationships: WebhookRelationships
    links: SelfLink


WebhooksResponse = ListResponse[WebhookResource]


class WebhookResponse(JsonApiModel):
    data: WebhookResource
    links: Optional[PaginationLinks] = None


class WebhookInputAttributes(JsonApiModel):
    url: str = Field(max_length=300)
    description: Optional[str] = Field(default=None, max_length=64)


class WebhookInputResource(JsonApiModel):
    attributes: WebhookInputAttributes


class RegisterWebhookRequest(JsonApiModel):
    data: WebhookInputResource


class WebhookEventAttributes(JsonApiModel):
    event_type: WebhookEventType
    created_at: datetime


class WebhookEventRelationships(JsonApiModel):
    webhook: ResourceRelationship
    transaction: Optional[ResourceRelationship] = None


class WebhookEventResource(JsonApiModel):
    id: str
    type: str
    attributes: WebhookEventAttributes
    relationships: WebhookEventRelationships


class WebhookPingResponse(JsonApiModel):
    data: WebhookEventResource


# Utility


class PingMeta(JsonApiModel):
    id: str
    status_emoji: str


class PingResponse(JsonApiModel):
    meta: PingMeta


# Errors


class ErrorSource(JsonApiModel):
    parameter: Optional[str] = None
    pointer: Optional[str] = None


class ErrorObject(JsonApiModel):
    status: str
    title: str
    detail: str
    source: Optional[ErrorSource] = None


class ErrorEnvelope(JsonApiModel):
    errors: List[ErrorObject] = Field(min_length=1)
    source: Optional[ErrorSource] = None
