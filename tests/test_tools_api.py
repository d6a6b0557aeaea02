"""
Tests for the analytics tool endpoints.
"""
import pytest
from fastapi.testclient import TestClient
from jose import jwt

from main import app
from app.core.config import settings
from app.services.transactions import LedgerClient

client = TestClient(app)

CSV_HEADER = "timestamp,type,amount,currency,counterparty,description,category,balance_after\n"


@pytest.fixture
def demo_csv(tmp_path, monkeypatch):
    def _write(rows):
        path = tmp_path / "transactions.csv"
        path.write_text(CSV_HEADER + "".join(rows))
        monkeypatch.setattr(settings, "TRANSACTIONS_CSV_PATH", str(path))
        return path
    return _write


def _rows(count):
    rows = []
    for i in range(count):
        if i % 4 == 0:
            rows.append(f"2024-01-{i + 1:02d}T09:00:00Z,receive,1000,USD,@payroll,Salary,,{2000 + i}\n")
        elif i % 4 == 1:
            rows.append(f"2024-01-{i + 1:02d}T09:00:00Z,send,200,USD,@vault,Save,savings,{1800 + i}\n")
        else:
            rows.append(f"2024-01-{i + 1:02d}T09:00:00Z,send,{15 + i},USD,@cafe,Coffee,food,{1500 + i}\n")
    return rows


def test_list_tools():
    response = client.get("/api/v1/tools")
    assert response.status_code == 200
    data = response.json()
    assert [t["name"] for t in data["tools"]] == [
        "analyze_spending", "analyze_money_personality", "get_csv_transactions",
    ]
    assert "send_money" in data["banking_tools"]


def test_agent_config_exposes_prompt_and_tools():
    response = client.get("/api/v1/agent/config")
    assert response.status_code == 200
    data = response.json()
    assert data["system_prompt"].startswith("You are NeuraPay")
    assert "analyze_money_personality" in data["tools"]
    assert data["max_tokens"] == settings.ANTHROPIC_MAX_TOKENS


def test_analyze_spending_from_csv(demo_csv):
    demo_csv([
        "2024-01-01T09:00:00Z,send,50,USD,@deli,Lunch,food,950\n",
        "2024-01-02T09:00:00Z,receive,1000,USD,@payroll,Salary,,1950\n",
    ])
    response = client.post("/api/v1/tools/analyze_spending", json={"days": 0, "use_csv": True})
    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True

    data = body["data"]
    assert data["period_days"] == 30
    assert data["total_transactions"] == 2
    assert data["data_source"] == {"csv": True, "api": False}
    assert data["analysis"]["total_spent"] == 50
    assert data["analysis"]["net_cashflow"] == 950
    assert data["analysis"]["velocity"] == "low"
    assert data["analysis"]["top_categories"] == [{"category": "food", "amount": 50.0}]


def test_analyze_spending_empty_csv_returns_summary(demo_csv):
    demo_csv([])
    response = client.post("/api/v1/tools/analyze_spending", json={"use_csv": True})
    data = response.json()["data"]
    assert data["analysis"] == {"summary": "No transactions found in the specified period"}


def test_analyze_spending_missing_csv_is_a_failed_result(tmp_path, monkeypatch):
    monkeypatch.setattr(settings, "TRANSACTIONS_CSV_PATH", str(tmp_path / "missing.csv"))
    response = client.post("/api/v1/tools/analyze_spending", json={"use_csv": True})
    assert response.status_code == 200
    body = response.json()
    assert body["success"] is False
    assert "failed to open CSV file" in body["error"]


def test_analyze_spending_without_token_fails_gracefully():
    response = client.post("/api/v1/tools/analyze_spending", json={"days": 7})
    body = response.json()
    assert body["success"] is False
    assert "missing authentication token" in body["error"]


def test_analyze_spending_forwards_token_to_ledger(monkeypatch):
    captured = {}

    async def fake_fetch(self, access_token, limit=None):
        captured["token"] = access_token
        return [{"type": "send", "amount": 10, "category": "food"}] * 7

    monkeypatch.setattr(LedgerClient, "fetch_transactions", fake_fetch)
    token = jwt.encode({"sub": "user-123"}, "secret", algorithm="HS256")

    response = client.post(
        "/api/v1/tools/analyze_spending",
        json={"days": 7},
        headers={"Authorization": f"Bearer {token}"},
    )
    body = response.json()
    assert body["success"] is True
    assert body["data"]["analysis"]["velocity"] == "high"
    assert body["data"]["data_source"] == {"csv": False, "api": True}
    assert captured["token"] == token


def test_malformed_token_is_rejected():
    response = client.post(
        "/api/v1/tools/analyze_spending",
        json={"days": 7},
        headers={"Authorization": "Bearer not-a-jwt"},
    )
    assert response.status_code == 401
    assert response.json()["error"]["message"] == "Invalid authentication token"


def test_negative_days_is_a_failed_result():
    response = client.post("/api/v1/tools/analyze_spending", json={"days": -3})
    assert response.status_code == 200
    body = response.json()
    assert body["success"] is False
    assert body["data"] is None
    assert body["error"].startswith("invalid input: days:")


def test_unparseable_days_is_a_failed_result():
    response = client.post("/api/v1/tools/analyze_spending", json={"days": "abc", "use_csv": True})
    assert response.status_code == 200
    body = response.json()
    assert body["success"] is False
    assert body["error"].startswith("invalid input: days:")


def test_malformed_body_is_a_failed_result():
    response = client.post(
        "/api/v1/tools/get_csv_transactions",
        content="{not json",
        headers={"Content-Type": "application/json"},
    )
    assert response.status_code == 200
    body = response.json()
    assert body["success"] is False
    assert body["error"].startswith("invalid input:")


def test_long_window_is_analyzed(demo_csv):
    demo_csv(["2024-01-01T09:00:00Z,send,400,USD,@deli,Lunch,food,950\n"])
    response = client.post("/api/v1/tools/analyze_spending", json={"days": 400, "use_csv": True})
    body = response.json()
    assert body["success"] is True
    assert body["data"]["period_days"] == 400
    assert body["data"]["analysis"]["avg_daily_spend"] == 1.0


def test_spending_amounts_are_rounded_for_display(demo_csv):
    demo_csv([
        "2024-01-01T09:00:00Z,send,0.1,USD,@deli,Snack,a,950\n",
        "2024-01-02T09:00:00Z,send,0.2,USD,@deli,Snack,a,949\n",
    ])
    response = client.post("/api/v1/tools/analyze_spending", json={"days": 30, "use_csv": True})
    analysis = response.json()["data"]["analysis"]
    assert analysis["total_spent"] == 0.3
    assert analysis["net_cashflow"] == -0.3
    assert analysis["avg_daily_spend"] == 0.01
    assert analysis["top_categories"] == [{"category": "a", "amount": 0.3}]


def test_money_personality_needs_ten_transactions(demo_csv):
    demo_csv(_rows(9))
    response = client.post("/api/v1/tools/analyze_money_personality", json={"use_csv": True})
    body = response.json()
    assert body["success"] is False
    assert body["data"] is None
    assert body["error"] == "Need at least 10 transactions for accurate personality analysis"


def test_money_personality_from_csv(demo_csv):
    demo_csv(_rows(20))
    response = client.post("/api/v1/tools/analyze_money_personality", json={"use_csv": True})
    body = response.json()
    assert body["success"] is True

    data = body["data"]
    assert data["personality_type"].startswith("The ")
    assert data["confidence"].endswith("%")
    assert set(data["raw_scores"]) == {
        "transaction_velocity", "amount_distribution", "balance_comfort",
        "savings_affinity", "income_response",
    }
    assert data["data_source"] == {"csv": True, "api": False}
    for key in ("traits", "behavioral_triggers", "personalized_strategies", "fun_fact"):
        assert data[key]


def test_get_csv_transactions_applies_limit(demo_csv):
    demo_csv(_rows(60))

    response = client.post("/api/v1/tools/get_csv_transactions", json={})
    data = response.json()["data"]
    assert data["count"] == 50
    assert data["source"] == "csv"

    response = client.post("/api/v1/tools/get_csv_transactions", json={"limit": 3})
    data = response.json()["data"]
    assert data["count"] == 3
    assert data["transactions"][0]["amount"] == 1000.0


def test_status_reports_metrics(demo_csv):
    demo_csv(_rows(3))
    client.post("/api/v1/tools/get_csv_transactions", json={"limit": 1})

    response = client.get("/api/v1/tools/status")
    assert response.status_code == 200
    stats = response.json()["metrics"]
    assert stats["total_requests"] >= 1
    assert stats["invocations_by_tool"]["get_csv_transactions"] >= 1
