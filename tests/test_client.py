"""
Tests for the Up Bank API client.

These tests use the responses library to mock HTTP requests,
validating client behavior without making real API calls.
"""

import json
from datetime import datetime, timedelta, timezone
from urllib.parse import parse_qsl, urlsplit

import pytest
import requests
import responses

from conftest import BASE_URL, TOKEN, error_envelope
from upbank.core.client import DEFAULT_BASE_URL, Client
from upbank.core.errors import APIError, ConfigError, DecodeError, NetworkError, PingError
from upbank.core.models import (
    AccountType,
    ErrorObject,
    TransactionStatus,
    WebhookEventType,
)
from upbank.core.options import (
    with_description,
    with_filter_since,
    with_filter_until,
    with_page_size,
    with_transaction_page_size,
)


def _query(call):
    return parse_qsl(urlsplit(call.request.url).query)


def _details_error(*details):
    return APIError([ErrorObject(status="500", title="title", detail=d) for d in details])


class TestClientConstruction:
    def test_default_base_url(self):
        assert Client(TOKEN).base_url == DEFAULT_BASE_URL == "https://api.up.com.au"

    def test_trailing_slash_is_dropped(self):
        assert Client(TOKEN, base_url=f"{BASE_URL}/").base_url == BASE_URL

    @pytest.mark.parametrize("token", ["", "   "])
    def test_empty_token_is_rejected(self, token):
        with pytest.raises(ConfigError):
            Client(token)


class TestPing:
    @responses.activate
    def test_ping_ok(self, client):
        responses.add(
            responses.GET,
            f"{BASE_URL}/api/v1/util/ping",
            json={"meta": {"id": "x", "statusEmoji": "⚡"}},
            status=200,
        )

        result = client.ping()

        assert result.meta.id == "x"
        assert result.meta.status_emoji == "⚡"
        assert responses.calls[0].request.headers["Authorization"] == f"Bearer {TOKEN}"

    @responses.activate
    def test_ping_unauthorized(self, client):
        responses.add(
            responses.GET,
            f"{BASE_URL}/api/v1/util/ping",
            json=error_envelope("not authorized", status="401", title="Not Authorized"),
            status=401,
        )

        with pytest.raises(PingError) as excinfo:
            client.ping()

        assert str(excinfo.value) == "ping failed: not authorized"
        assert excinfo.value.status_code == 401

    @responses.activate
    def test_ping_keeps_every_entry_but_renders_the_first(self, client):
        responses.add(
            responses.GET,
            f"{BASE_URL}/api/v1/util/ping",
            json=error_envelope("first", "second", status="401"),
            status=401,
        )

        with pytest.raises(PingError) as excinfo:
            client.ping()

        assert str(excinfo.value) == "ping failed: first"
        assert excinfo.value.details == ("first", "second")


class TestAccounts:
    @responses.activate
    def test_list_accounts_without_page_size(self, client, account_payload):
        responses.add(
            responses.GET,
            f"{BASE_URL}/api/v1/accounts",
            json={"data": [account_payload], "links": {"prev": None, "next": None}},
            status=200,
        )

        accounts = client.list_accounts()

        assert "page[size]" not in dict(_query(responses.calls[0]))
        assert len(accounts.data) == 1
        account = accounts.data[0]
        assert account.id == "acc-1"
        assert account.attributes.account_type is AccountType.TRANSACTIONAL
        assert account.attributes.balance.value_in_base_units == 123450
        assert accounts.links.prev == ""
        assert accounts.links.next == ""

    @responses.activate
    def test_list_accounts_with_page_size(self, client, account_payload):
        responses.add(
            responses.GET,
            f"{BASE_URL}/api/v1/accounts",
            json={"data": [account_payload], "links": {"prev": None, "next": None}},
            status=200,
        )

        client.list_accounts(with_page_size(10))

        assert _query(responses.calls[0]) == [("page[size]", "10")]

    @responses.activate
    def test_page_size_is_additive(self, client):
        responses.add(
            responses.GET,
            f"{BASE_URL}/api/v1/accounts",
            json={"data": []},
            status=200,
        )

        client.list_accounts(with_page_size(10), with_page_size(10))

        assert _query(responses.calls[0]) == [("page[size]", "10"), ("page[size]", "10")]

    def test_transaction_option_is_rejected(self, client):
        with pytest.raises(TypeError):
            client.list_accounts(with_transaction_page_size(10))

    @responses.activate
    def test_list_accounts_single_error(self, client):
        responses.add(
            responses.GET,
            f"{BASE_URL}/api/v1/accounts",
            json=error_envelope("spilling the tea"),
            status=500,
        )

        with pytest.raises(APIError) as excinfo:
            client.list_accounts()

        assert excinfo.value == _details_error("spilling the tea")
        assert str(excinfo.value) == "spilling the tea"

    @responses.activate
    def test_list_accounts_multiple_errors(self, client):
        responses.add(
            responses.GET,
            f"{BASE_URL}/api/v1/accounts",
            json=error_envelope("spilling the tea", "stirring the pot"),
            status=500,
        )

        with pytest.raises(APIError) as excinfo:
            client.list_accounts()

        assert excinfo.value == _details_error("spilling the tea", "stirring the pot")
        assert excinfo.value.status_code == 500

    @responses.activate
    def test_get_account(self, client, account_payload):
        responses.add(
            responses.GET,
            f"{BASE_URL}/api/v1/accounts/acc-1",
            json={"data": account_payload},
            status=200,
        )

        account = client.get_account("acc-1")

        assert account.data.attributes.display_name == "Spending"
        assert account.data.links.self_link == f"{BASE_URL}/api/v1/accounts/acc-1"

    @responses.activate
    def test_get_account_quotes_the_id_segment(self, client, account_payload):
        responses.add(
            responses.GET,
            f"{BASE_URL}/api/v1/accounts/a%2Fb",
            json={"data": account_payload},
            status=200,
        )

        client.get_account("a/b")

        assert urlsplit(responses.calls[0].request.url).path == "/api/v1/accounts/a%2Fb"

    @responses.activate
    def test_get_account_not_found(self, client):
        responses.add(
            responses.GET,
            f"{BASE_URL}/api/v1/accounts/missing",
            json=error_envelope("no such account", status="404", title="Not Found"),
            status=404,
        )

        with pytest.raises(APIError, match="no such account"):
            client.get_account("missing")


class TestTransactions:
    @responses.activate
    def test_list_transactions_without_options(self, client, transaction_payload):
        responses.add(
            responses.GET,
            f"{BASE_URL}/api/v1/transactions",
            json={"data": [transaction_payload], "links": {"prev": None, "next": None}},
            status=200,
        )

        transactions = client.list_transactions()

        assert _query(responses.calls[0]) == []
        transaction = transactions.data[0]
        assert transaction.attributes.status is TransactionStatus.HELD
        assert transaction.attributes.hold_info.foreign_amount.currency_code == "CAD"
        assert transaction.attributes.message is None
        assert transaction.relationships.account.data.id == "acc-1"

    @responses.activate
    def test_list_transactions_preserves_order(self, client, transaction_payload):
        second = json.loads(json.dumps(transaction_payload))
        second["id"] = "txn-2"
        responses.add(
            responses.GET,
            f"{BASE_URL}/api/v1/transactions",
            json={"data": [transaction_payload, second]},
            status=200,
        )

        transactions = client.list_transactions()

        assert [t.id for t in transactions.data] == ["txn-1", "txn-2"]

    @responses.activate
    def test_options_follow_caller_order(self, client):
        responses.add(
            responses.GET,
            f"{BASE_URL}/api/v1/transactions",
            json={"data": []},
            status=200,
        )
        aest = timezone(timedelta(hours=10))

        client.list_transactions(
            with_filter_until(datetime(2021, 2, 1, tzinfo=aest)),
            with_transaction_page_size(20),
            with_filter_since(datetime(2021, 1, 1, 8, 30, tzinfo=aest)),
        )

        assert _query(responses.calls[0]) == [
            ("filter[until]", "2021-02-01T00:00:00+10:00"),
            ("page[size]", "20"),
            ("filter[since]", "2021-01-01T08:30:00+10:00"),
        ]

    @responses.activate
    def test_list_transactions_two_errors(self, client):
        responses.add(
            responses.GET,
            f"{BASE_URL}/api/v1/transactions",
            json=error_envelope("a", "b"),
            status=500,
        )

        with pytest.raises(APIError) as excinfo:
            client.list_transactions()

        message = str(excinfo.value)
        assert "a" in message and "b" in message
        assert message.index("a") < message.index("b")
        assert excinfo.value.details == ("a", "b")

    @responses.activate
    def test_get_transaction(self, client, transaction_payload):
        responses.add(
            responses.GET,
            f"{BASE_URL}/api/v1/transactions/txn-1",
            json={"data": transaction_payload},
            status=200,
        )

        transaction = client.get_transaction("txn-1")

        assert transaction.data.attributes.amount.value == "-4.50"
        assert transaction.data.attributes.created_at == datetime(
            2020, 8, 2, 5, 20, 22, tzinfo=timezone.utc
        )


class TestWebhooks:
    @responses.activate
    def test_list_webhooks(self, client, webhook_payload):
        responses.add(
            responses.GET,
            f"{BASE_URL}/api/v1/webhooks",
            json={"data": [webhook_payload], "links": {"prev": None, "next": None}},
            status=200,
        )

        webhooks = client.list_webhooks()

        assert webhooks.data[0].attributes.url == "https://example.com/hook"
        assert webhooks.data[0].attributes.secret_key is None

    @responses.activate
    def test_register_webhook(self, client, webhook_payload):
        webhook_payload["attributes"]["secretKey"] = "s3cret"
        responses.add(
            responses.POST,
            f"{BASE_URL}/api/v1/webhooks",
            json={"data": webhook_payload},
            status=201,
        )

        webhook = client.register_webhook(
            "https://example.com/hook", with_description("Test hook")
        )

        assert webhook.data.attributes.secret_key == "s3cret"
        request = responses.calls[0].request
        assert request.headers["Content-Type"] == "application/json"
        assert request.headers["Authorization"] == f"Bearer {TOKEN}"
        assert json.loads(request.body) == {
            "data": {
                "attributes": {"url": "https://example.com/hook", "description": "Test hook"}
            }
        }

    @responses.activate
    def test_register_webhook_without_description(self, client, webhook_payload):
        responses.add(
            responses.POST,
            f"{BASE_URL}/api/v1/webhooks",
            json={"data": webhook_payload},
            status=201,
        )

        client.register_webhook("https://example.com/hook")

        body = json.loads(responses.calls[0].request.body)
        assert body == {"data": {"attributes": {"url": "https://example.com/hook"}}}

    def test_register_webhook_rejects_long_description(self, client):
        with pytest.raises(ValueError):
            client.register_webhook("https://example.com/hook", with_description("x" * 65))

    @responses.activate
    def test_register_webhook_error(self, client):
        responses.add(
            responses.POST,
            f"{BASE_URL}/api/v1/webhooks",
            json=error_envelope("url is invalid", status="422"),
            status=422,
        )

        with pytest.raises(APIError, match="url is invalid"):
            client.register_webhook("not a url")

    @responses.activate
    def test_ping_webhook(self, client, webhook_event_payload):
        responses.add(
            responses.POST,
            f"{BASE_URL}/api/v1/webhooks/wh-1/ping",
            json={"data": webhook_event_payload},
            status=201,
        )

        event = client.ping_webhook("wh-1")

        assert event.data.attributes.event_type is WebhookEventType.PING
        assert event.data.relationships.webhook.data.id == "wh-1"
        assert event.data.relationships.transaction is None


class TestDecodingAndTransportFailures:
    @responses.activate
    def test_unknown_field_in_success_body(self, client, account_payload):
        account_payload["attributes"]["ownershipType"] = "INDIVIDUAL"
        responses.add(
            responses.GET,
            f"{BASE_URL}/api/v1/accounts/acc-1",
            json={"data": account_payload},
            status=200,
        )

        with pytest.raises(DecodeError) as excinfo:
            client.get_account("acc-1")

        assert excinfo.value.unknown_fields == ("data.attributes.ownershipType",)

    @responses.activate
    def test_unknown_field_in_error_envelope(self, client):
        body = error_envelope("boom")
        body["meta"] = {}
        responses.add(responses.GET, f"{BASE_URL}/api/v1/webhooks", json=body, status=500)

        with pytest.raises(DecodeError):
            client.list_webhooks()

    @responses.activate
    def test_non_json_error_body(self, client):
        responses.add(
            responses.GET,
            f"{BASE_URL}/api/v1/webhooks",
            body="<html>Bad gateway</html>",
            status=502,
        )

        with pytest.raises(DecodeError):
            client.list_webhooks()

    @responses.activate
    def test_connection_error_is_network_error(self, client):
        responses.add(
            responses.GET,
            f"{BASE_URL}/api/v1/util/ping",
            body=requests.exceptions.ConnectionError("connection refused"),
        )

        with pytest.raises(NetworkError) as excinfo:
            client.ping()

        assert isinstance(excinfo.value.__cause__, requests.exceptions.ConnectionError)

    @responses.activate
    def test_no_retry_on_server_error(self, client):
        responses.add(
            responses.GET,
            f"{BASE_URL}/api/v1/accounts",
            json=error_envelope("down"),
            status=503,
        )

        with pytest.raises(APIError):
            client.list_accounts()

        assert len(responses.calls) == 1


class ClosingResponse(requests.Response):
    """Response that records whether the client closed it."""

    def __init__(self, status, content):
        super().__init__()
        self.status_code = status
        self._content = content
        self.was_closed = False

    def close(self):
        self.was_closed = True


class StubTransport:
    """Base transport that answers every request with one canned response."""

    def __init__(self, status=200, content=b""):
        self.status = status
        self.content = content
        self.requests = []
        self.timeouts = []
        self.responses = []

    def send(self, request, *, timeout=None):
        self.requests.append(request)
        self.timeouts.append(timeout)
        response = ClosingResponse(self.status, self.content)
        response.url = request.url
        self.responses.append(response)
        return response


PING_BODY = b'{"meta": {"id": "x", "statusEmoji": "\\u26a1"}}'


class TestResponseLifecycle:
    def test_success_closes_response(self):
        stub = StubTransport(200, PING_BODY)

        Client(TOKEN, base_url=BASE_URL, transport=stub).ping()

        assert stub.responses[0].was_closed

    def test_bad_success_body_closes_response(self):
        stub = StubTransport(200, b"{not json")

        with pytest.raises(DecodeError):
            Client(TOKEN, base_url=BASE_URL, transport=stub).ping()

        assert stub.responses[0].was_closed

    def test_bad_error_body_closes_response(self):
        stub = StubTransport(401, b"<html>Unauthorized</html>")

        with pytest.raises(DecodeError):
            Client(TOKEN, base_url=BASE_URL, transport=stub).ping()

        assert stub.responses[0].was_closed

    def test_error_envelope_closes_response(self):
        stub = StubTransport(401, json.dumps(error_envelope("not authorized")).encode())

        with pytest.raises(PingError):
            Client(TOKEN, base_url=BASE_URL, transport=stub).ping()

        assert stub.responses[0].was_closed

    def test_default_timeout_is_none(self):
        stub = StubTransport(200, PING_BODY)

        Client(TOKEN, base_url=BASE_URL, transport=stub).ping()

        assert stub.timeouts == [None]

    def test_client_timeout_is_the_default(self):
        stub = StubTransport(200, PING_BODY)
        client = Client(TOKEN, base_url=BASE_URL, transport=stub, timeout=5.0)

        client.ping()
        client.ping(timeout=1.5)

        assert stub.timeouts == [5.0, 1.5]

    def test_injected_transport_receives_bearer_token(self):
        stub = StubTransport(200, PING_BODY)

        Client(TOKEN, base_url=BASE_URL, transport=stub).ping()

        assert stub.requests[0].headers["Authorization"] == f"Bearer {TOKEN}"


class TestErrorSource:
    @responses.activate
    def test_top_level_source_is_still_an_api_error(self, client):
        body = error_envelope("bad filter", status="400")
        body["source"] = {"parameter": "filter[since]"}
        responses.add(responses.GET, f"{BASE_URL}/api/v1/transactions", json=body, status=400)

        with pytest.raises(APIError) as excinfo:
            client.list_transactions()

        assert str(excinfo.value) == "bad filter"
        assert excinfo.value.status_code == 400


class TestPagination:
    @responses.activate
    def test_next_page_follows_link(self, client, transaction_payload):
        next_url = f"{BASE_URL}/api/v1/transactions?page%5Bafter%5D=abc"
        second = json.loads(json.dumps(transaction_payload))
        second["id"] = "txn-2"
        responses.add(
            responses.GET,
            f"{BASE_URL}/api/v1/transactions",
            json={"data": [transaction_payload], "links": {"prev": None, "next": next_url}},
            status=200,
        )

        first = client.list_transactions()
        responses.replace(
            responses.GET,
            f"{BASE_URL}/api/v1/transactions",
            json={"data": [second], "links": {"prev": f"{BASE_URL}/prev", "next": None}},
            status=200,
        )
        page = client.next_page(first)

        assert type(page) is type(first)
        assert page.data[0].id == "txn-2"
        assert page.links.prev == f"{BASE_URL}/prev"
        assert responses.calls[1].request.url == next_url
        assert client.next_page(page) is None

    @responses.activate
    def test_all_pages(self, client, account_payload):
        responses.add(
            responses.GET,
            f"{BASE_URL}/api/v1/accounts",
            json={"data": [account_payload], "links": {"next": f"{BASE_URL}/api/v1/accounts?page=2"}},
            status=200,
        )

        first = client.list_accounts()
        responses.replace(
            responses.GET,
            f"{BASE_URL}/api/v1/accounts",
            json={"data": [account_payload]},
            status=200,
        )
        pages = client.all_pages(first)

        assert len(pages) == 2
        assert pages[0] is first
