"""
Tests for transaction records and transaction sources.
"""
import asyncio
import math

import httpx
import pytest

from app.analytics.records import TransactionRecord, parse_records
from app.core.exceptions import TransactionSourceError
from app.services.transactions import LedgerClient, get_transactions, load_transactions_from_csv

CSV_HEADER = "timestamp,type,amount,currency,counterparty,description,category,balance_after\n"


def test_record_defaults_for_missing_and_wrong_types():
    record = TransactionRecord.from_raw({
        "type": 5,
        "amount": "10",
        "category": None,
        "balance_after": math.inf,
    })
    assert record.type == ""
    assert record.amount == 0.0
    assert record.category == ""
    assert record.balance_after == 0.0
    assert record.timestamp == ""


def test_record_is_immutable():
    record = TransactionRecord.from_raw({"type": "send", "amount": 3})
    with pytest.raises(Exception):
        record.amount = 4


def test_parse_records_skips_non_mappings():
    records = parse_records([{"type": "send", "amount": 1}, None, ["send", 2], "x"])
    assert len(records) == 1
    assert records[0].is_send


def test_load_csv_parses_numeric_columns(tmp_path):
    path = tmp_path / "transactions.csv"
    path.write_text(
        CSV_HEADER
        + "2024-01-02T10:00:00Z,send,12.50,USD,@alice,Lunch,food,987.50\n"
        + "2024-01-03T10:00:00Z,receive,n/a,USD,@bob,Refund,,\n"
    )
    transactions = load_transactions_from_csv(str(path))

    assert transactions[0]["amount"] == 12.5
    assert transactions[0]["balance_after"] == 987.5
    assert transactions[0]["timestamp"] == "2024-01-02T10:00:00Z"
    assert transactions[0]["counterparty"] == "@alice"
    assert transactions[1]["amount"] == "n/a"
    assert transactions[1]["category"] == ""

    records = parse_records(transactions)
    assert records[1].amount == 0.0


def test_load_csv_missing_file(tmp_path):
    with pytest.raises(TransactionSourceError):
        load_transactions_from_csv(str(tmp_path / "nope.csv"))


def test_load_csv_empty_file(tmp_path):
    path = tmp_path / "empty.csv"
    path.write_text("")
    with pytest.raises(TransactionSourceError):
        load_transactions_from_csv(str(path))


def _ledger(handler):
    return LedgerClient(
        base_url="https://ledger.test",
        transactions_path="/v1/transactions",
        transport=httpx.MockTransport(handler),
    )


def test_ledger_forwards_token_and_drops_non_mappings():
    seen = {}

    def handler(request):
        seen["auth"] = request.headers["Authorization"]
        seen["limit"] = request.url.params["limit"]
        return httpx.Response(200, json={"transactions": [{"type": "send", "amount": 5}, "junk"]})

    transactions = asyncio.run(_ledger(handler).fetch_transactions("tok123", limit=100))

    assert transactions == [{"type": "send", "amount": 5}]
    assert seen == {"auth": "Bearer tok123", "limit": "100"}


def test_ledger_error_status_raises():
    ledger = _ledger(lambda request: httpx.Response(503, json={}))
    with pytest.raises(TransactionSourceError, match="HTTP 503"):
        asyncio.run(ledger.fetch_transactions("tok"))


def test_ledger_unsuccessful_body_raises():
    ledger = _ledger(lambda request: httpx.Response(200, json={"success": False, "error": "expired"}))
    with pytest.raises(TransactionSourceError, match="expired"):
        asyncio.run(ledger.fetch_transactions("tok"))


def test_ledger_requires_token():
    ledger = _ledger(lambda request: httpx.Response(200, json={"transactions": []}))
    with pytest.raises(TransactionSourceError, match="missing authentication token"):
        asyncio.run(ledger.fetch_transactions(None))


def test_get_transactions_prefers_csv(tmp_path, monkeypatch):
    from app.core.config import settings

    path = tmp_path / "transactions.csv"
    path.write_text(CSV_HEADER + "t,send,1,USD,,,food,10\n")
    monkeypatch.setattr(settings, "TRANSACTIONS_CSV_PATH", str(path))

    transactions = asyncio.run(get_transactions(use_csv=True))
    assert len(transactions) == 1


def test_load_csv_pads_short_rows(tmp_path):
    path = tmp_path / "transactions.csv"
    path.write_text(CSV_HEADER + "2024-01-02T10:00:00Z,send,8.25\n")
    transactions = load_transactions_from_csv(str(path))

    assert transactions[0]["amount"] == 8.25
    assert transactions[0]["category"] == ""
    assert transactions[0]["balance_after"] == ""
    record = parse_records(transactions)[0]
    assert record.balance_after == 0.0
    assert record.category == ""
