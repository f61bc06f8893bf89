"""Test fixtures and utilities."""

import copy

import pytest

from upbank.core.client import Client

BASE_URL = "https://api.up.test"
TOKEN = "up:yeah:test-token"

MONEY_AUD = {"currencyCode": "AUD", "value": "1.00", "valueInBaseUnits": 100}
MONEY_CAD = {"currencyCode": "CAD", "value": "1.00", "valueInBaseUnits": 100}

ACCOUNT = {
    "id": "acc-1",
    "type": "accounts",
    "attributes": {
        "displayName": "Spending",
        "accountType": "TRANSACTIONAL",
        "balance": {"currencyCode": "AUD", "value": "1234.50", "valueInBaseUnits": 123450},
        "createdAt": "2020-08-02T15:20:22+10:00",
    },
    "relationships": {
        "transactions": {"links": {"related": f"{BASE_URL}/api/v1/accounts/acc-1/transactions"}}
    },
    "links": {"self": f"{BASE_URL}/api/v1/accounts/acc-1"},
}

TRANSACTION = {
    "id": "txn-1",
    "type": "transactions",
    "attributes": {
        "description": "Coffee",
        "status": "HELD",
        "rawText": "COFFEE SHOP SYDNEY",
        "message": None,
        "holdInfo": {"amount": MONEY_AUD, "foreignAmount": MONEY_CAD},
        "roundUp": {"amount": MONEY_AUD, "boostPortion": None},
        "cashback": None,
        "amount": {"currencyCode": "AUD", "value": "-4.50", "valueInBaseUnits": -450},
        "foreignAmount": None,
        "settledAt": None,
        "createdAt": "2020-08-02T15:20:22+10:00",
    },
    "relationships": {
        "account": {
            "data": {"type": "accounts", "id": "acc-1"},
            "links": {"related": f"{BASE_URL}/api/v1/accounts/acc-1"},
        },
        "tags": {"links": {"self": f"{BASE_URL}/api/v1/transactions/txn-1/relationships/tags"}},
    },
    "links": {"self": f"{BASE_URL}/api/v1/transactions/txn-1"},
}

WEBHOOK = {
    "id": "wh-1",
    "type": "webhooks",
    "attributes": {
        "url": "https://example.com/hook",
        "description": "Test hook",
        "secretKey": None,
        "createdAt": "2021-01-01T09:00:00+11:00",
    },
    "relationships": {
        "logs": {"links": {"related": f"{BASE_URL}/api/v1/webhooks/wh-1/logs"}}
    },
    "links": {"self": f"{BASE_URL}/api/v1/webhooks/wh-1"},
}

WEBHOOK_EVENT = {
    "id": "evt-1",
    "type": "webhook-events",
    "attributes": {"eventType": "PING", "createdAt": "2021-01-01T09:05:00+11:00"},
    "relationships": {
        "webhook": {
            "data": {"type": "webhooks", "id": "wh-1"},
            "links": {"related": f"{BASE_URL}/api/v1/webhooks/wh-1"},
        }
    },
}


def error_envelope(*details, status="500", title="Internal Server Error"):
    return {"errors": [{"status": status, "title": title, "detail": detail} for detail in details]}


@pytest.fixture
def client():
    return Client(TOKEN, base_url=BASE_URL)


@pytest.fixture
def account_payload():
    return copy.deepcopy(ACCOUNT)


@pytest.fixture
def transaction_payload():
    return copy.deepcopy(TRANSACTION)


@pytest.fixture
def webhook_payload():
    return copy.deepcopy(WEBHOOK)


@pytest.fixture
def webhook_event_payload():
    return copy.deepcopy(WEBHOOK_EVENT)
