from __future__ import annotations

import httpx
import pytest

from api.client import ApiClient, parse_body, parse_list
from api.resources import LedgerApi
from api.session import Session
from core.errors import AuthorizationError, LedgerError, NetworkError, RequestRejected, ResponseInvalid
from models.schema import Account
from tests.conftest import BASE_URL, TOKEN, FakeBackend


def test_token_is_sent_as_query_parameter(client: ApiClient, backend: FakeBackend, logged_in: Session) -> None:
    backend.route("GET", "/accounts", body=[])
    client.get("/accounts")

    request = backend.requests[-1]
    assert request.url.params["token"] == TOKEN
    assert "authorization" not in request.headers


def test_no_token_parameter_when_logged_out(client: ApiClient, backend: FakeBackend) -> None:
    backend.route("GET", "/auth/check", body={"setup_required": False})
    client.get("/auth/check")
    assert "token" not in backend.requests[-1].url.params


def test_unset_filters_are_dropped_and_bools_serialized(client: ApiClient, backend: FakeBackend, logged_in: Session) -> None:
    backend.route("GET", "/transactions", body=[])
    client.get("/transactions", params={"account_id": None, "untagged": True, "limit": 100})

    params = backend.requests[-1].url.params
    assert "account_id" not in params
    assert params["untagged"] == "true"
    assert params["limit"] == "100"


def test_401_expires_session_once(client: ApiClient, backend: FakeBackend, logged_in: Session) -> None:
    expired = []
    logged_in.on_expired(lambda: expired.append(True))
    backend.route("GET", "/accounts", status=401, body={"detail": "Invalid or expired token"})
    backend.route("GET", "/categories", status=401, body={"detail": "Invalid or expired token"})

    with pytest.raises(AuthorizationError):
        client.get("/accounts")
    with pytest.raises(AuthorizationError):
        client.get("/categories")

    assert expired == [True]
    assert logged_in.token is None
    assert logged_in.login_required is True


def test_validation_errors_are_joined(client: ApiClient, backend: FakeBackend, logged_in: Session) -> None:
    backend.route(
        "POST",
        "/accounts",
        status=422,
        body={"detail": [{"msg": "field required"}, {"msg": "value is not a valid float"}]},
    )
    with pytest.raises(RequestRejected) as info:
        client.post("/accounts", json={})

    assert info.value.status_code == 422
    assert info.value.detail == "field required; value is not a valid float"
    assert logged_in.is_authenticated


def test_server_error_keeps_detail(client: ApiClient, backend: FakeBackend, logged_in: Session) -> None:
    backend.route("DELETE", "/accounts/7", status=400, body={"detail": "Account has transactions"})
    with pytest.raises(RequestRejected) as info:
        client.delete("/accounts/7")
    assert info.value.detail == "Account has transactions"


def test_transport_failure_becomes_network_error(session: Session) -> None:
    def refuse(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with ApiClient(session, base_url=BASE_URL, transport=httpx.MockTransport(refuse)) as offline:
        with pytest.raises(NetworkError):
            offline.get("/auth/check")


def test_upload_sends_multipart_file_field(client: ApiClient, backend: FakeBackend, logged_in: Session) -> None:
    backend.route("POST", "/upload/bank-statement", body={"transactions": []})
    client.upload("/upload/bank-statement", "june.csv", b"date,amount\n", params={"account_id": "1"})

    request = backend.requests[-1]
    assert request.headers["content-type"].startswith("multipart/form-data")
    assert b'name="file"' in request.content
    assert b'filename="june.csv"' in request.content
    assert request.url.params["account_id"] == "1"


def test_download_returns_raw_bytes(client: ApiClient, backend: FakeBackend, logged_in: Session) -> None:
    backend.route("GET", "/export/balance-sheet", content=b"PK\x03\x04xlsx")
    assert client.download("/export/balance-sheet") == b"PK\x03\x04xlsx"


def test_empty_body_is_none(client: ApiClient, backend: FakeBackend, logged_in: Session) -> None:
    backend.route("DELETE", "/profiles/3", content=b"")
    assert client.delete("/profiles/3") is None



def test_malformed_body_becomes_response_invalid() -> None:
    with pytest.raises(ResponseInvalid) as info:
        parse_body(Account, {"id": "a1", "account_type": "bank"}, "/accounts")
    assert isinstance(info.value, LedgerError)
    assert info.value.path == "/accounts"
    assert "name" in info.value.problem


def test_list_endpoint_answering_an_object_is_rejected(ledger: LedgerApi, backend: FakeBackend) -> None:
    backend.route("GET", "/profiles", body={"detail": "not a list"})
    with pytest.raises(ResponseInvalid):
        ledger.profiles.list()
    assert parse_list(Account, None, "/accounts") == []


def test_malformed_loan_interest_is_response_invalid(ledger: LedgerApi, backend: FakeBackend) -> None:
    backend.route("GET", "/loans/9/interest", body=["unexpected"])
    with pytest.raises(ResponseInvalid):
        ledger.loans.interest("9")


def test_flat_categories_come_from_their_own_endpoint(ledger: LedgerApi, backend: FakeBackend) -> None:
    backend.route(
        "GET",
        "/categories/flat",
        body=[
            {"id": "food", "name": "Food", "type": "expense"},
            {"id": "groceries", "name": "Groceries", "type": "expense", "parent_id": "food"},
        ],
    )
    flat = ledger.categories.flat()
    assert [c.id for c in flat] == ["food", "groceries"]
    assert flat[1].parent_id == "food"
    assert backend.requests[-1].url.params["token"] == TOKEN
