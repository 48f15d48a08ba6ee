"""
Tests del asistente financiero: bucle de herramientas, historial,
consultas sobre datos y el asesor de impuestos.
"""

import json

import pytest

from app.modules.assistant.client import AIResponse, ToolCall
from app.modules.assistant.prompts import FALLBACK_ANSWER, NO_FINANCIAL_DATA
from app.modules.assistant.tax import get_kenyan_tax_info, UNKNOWN_TAX_TOPIC
from app.modules.assistant.tools import FinancialTools
from app.core.config import settings


@pytest.fixture
def ledger(client, auth_headers):
    for description, amount, tx_type, account in [
        ("Counter sales", "1500.00", "Income", "Sales Revenue"),
        ("March rent", "300.00", "Expense", "Rent"),
        ("Office snacks", "45.00", "Expense", "Meals"),
    ]:
        client.post("/transactions/", json={
            "description": description, "amount": amount, "type": tx_type, "account": account
        }, headers=auth_headers)


def _tool_call(name, arguments=None, call_id="call_1"):
    return AIResponse(content="", tool_calls=[ToolCall(id=call_id, name=name, arguments=arguments or {})],
                      finish_reason="tool_calls")


class TestFinancialTools:

    def test_definitions_use_camel_case_arguments(self, db_session, sample_user):
        tools = FinancialTools(db_session, sample_user.id)
        definitions = {d["function"]["name"]: d["function"] for d in tools.definitions()}
        assert set(definitions) == {
            "getTransactions", "getAccounts", "getCustomers", "getFinancialSummary", "getKenyanTaxInfo"
        }
        params = definitions["getTransactions"]["parameters"]
        assert "startDate" in params["properties"]
        assert definitions["getKenyanTaxInfo"]["parameters"]["required"] == ["topic"]

    def test_unknown_tool(self, db_session, sample_user):
        result = FinancialTools(db_session, sample_user.id).execute("deleteEverything", {})
        assert result == {"error": "Unknown tool: deleteEverything"}

    def test_invalid_arguments_are_reported(self, db_session, sample_user):
        result = FinancialTools(db_session, sample_user.id).execute("getTransactions", {"limit": 0})
        assert result["error"] == "Invalid arguments for getTransactions"

    def test_get_transactions_by_category(self, db_session, sample_user, ledger):
        tools = FinancialTools(db_session, sample_user.id)
        result = tools.execute("getTransactions", {"category": "rent", "limit": 5})
        assert [t["description"] for t in result] == ["March rent"]
        assert result[0]["amount"] == -300.0

    def test_get_financial_summary(self, db_session, sample_user, ledger):
        result = FinancialTools(db_session, sample_user.id).execute("getFinancialSummary", {})
        assert result["totalRevenue"] == 1500.0
        assert result["totalExpenses"] == 345.0
        assert result["expensesByAccount"] == {"Rent": 300.0, "Meals": 45.0}

    def test_tools_are_tenant_scoped(self, db_session, other_user, ledger):
        assert FinancialTools(db_session, other_user.id).execute("getTransactions", {}) == []


class TestKenyanTaxInfo:

    def test_exact_topic(self):
        matched, info = get_kenyan_tax_info("VAT")
        assert matched == "vat"
        assert "16%" in info

    def test_topic_inside_question(self):
        matched, _ = get_kenyan_tax_info("How does withholding tax work for consultants?")
        assert matched == "withholding tax"

    def test_unknown_topic(self):
        assert get_kenyan_tax_info("capital gains") == (None, UNKNOWN_TAX_TOPIC)

    def test_tax_advice_endpoint(self, client, auth_headers):
        response = client.post("/assistant/tax-advice", json={"topic": "income tax"}, headers=auth_headers)
        assert response.status_code == 200
        assert response.json()["matched_topic"] == "income tax"
        assert "30%" in response.json()["information"]


class TestAsk:

    def test_ai_not_configured(self, client, auth_headers):
        response = client.post("/assistant/ask", json={"query": "How am I doing?"}, headers=auth_headers)
        assert response.status_code == 503

    def test_tool_loop(self, client, auth_headers, fake_ai, ledger):
        fake_ai.responses = [
            _tool_call("getFinancialSummary"),
            AIResponse(content="Your net income is 1155.00."),
        ]

        response = client.post("/assistant/ask", json={"query": "What is my net income?"}, headers=auth_headers)
        assert response.status_code == 200
        data = response.json()
        assert data["answer"] == "Your net income is 1155.00."
        assert data["user_message"]["role"] == "user"
        assert data["assistant_message"]["content"] == data["answer"]

        assert len(fake_ai.calls) == 2
        first, second = fake_ai.calls
        assert first["messages"][0]["role"] == "system"
        assert first["messages"][-1] == {"role": "user", "content": "What is my net income?"}
        assert first["tools"] is not None

        tool_message = second["messages"][-1]
        assert tool_message["role"] == "tool"
        assert tool_message["tool_call_id"] == "call_1"
        assert json.loads(tool_message["content"])["netIncome"] == 1155.0
        assert second["messages"][-2]["tool_calls"][0]["function"]["name"] == "getFinancialSummary"

    def test_round_limit_forces_final_answer(self, client, auth_headers, fake_ai):
        fake_ai.responses = [_tool_call("getAccounts", call_id=f"call_{i}") for i in range(settings.AI_MAX_TOOL_ROUNDS)]
        fake_ai.responses.append(AIResponse(content="Here is what I found."))

        data = client.post("/assistant/ask", json={"query": "List my accounts"}, headers=auth_headers).json()
        assert data["answer"] == "Here is what I found."
        assert len(fake_ai.calls) == settings.AI_MAX_TOOL_ROUNDS + 1
        assert fake_ai.calls[-1]["tools"] is None

    def test_failure_returns_fallback_and_is_stored(self, client, auth_headers, fake_ai):
        fake_ai.responses = [RuntimeError("provider down")]

        response = client.post("/assistant/ask", json={"query": "Hello"}, headers=auth_headers)
        assert response.status_code == 200
        assert response.json()["answer"] == FALLBACK_ANSWER

        history = client.get("/assistant/history", headers=auth_headers).json()
        assert [m["content"] for m in history["messages"]] == ["Hello", FALLBACK_ANSWER]

    def test_empty_answer_uses_fallback(self, client, auth_headers, fake_ai):
        data = client.post("/assistant/ask", json={"query": "Hello"}, headers=auth_headers).json()
        assert data["answer"] == FALLBACK_ANSWER

    def test_previous_messages_are_sent_as_context(self, client, auth_headers, fake_ai):
        fake_ai.responses = [AIResponse(content="Hi there."), AIResponse(content="Still here.")]
        client.post("/assistant/ask", json={"query": "Hi"}, headers=auth_headers)
        client.post("/assistant/ask", json={"query": "Are you there?"}, headers=auth_headers)

        messages = fake_ai.calls[-1]["messages"]
        assert messages[1:] == [
            {"role": "user", "content": "Hi"},
            {"role": "assistant", "content": "Hi there."},
            {"role": "user", "content": "Are you there?"},
        ]

    def test_blank_query_rejected(self, client, auth_headers, fake_ai):
        assert client.post("/assistant/ask", json={"query": "   "}, headers=auth_headers).status_code == 422


class TestHistory:

    def test_grouped_and_clear(self, client, auth_headers, other_auth_headers, fake_ai):
        fake_ai.responses = [AIResponse(content="Answer.")]
        client.post("/assistant/ask", json={"query": "Question"}, headers=auth_headers)

        grouped = client.get("/assistant/history/grouped", headers=auth_headers).json()
        assert len(grouped["groups"]) == 1
        assert [m["role"] for m in grouped["groups"][0]["messages"]] == ["user", "assistant"]

        assert client.get("/assistant/history", headers=other_auth_headers).json()["total"] == 0

        assert client.delete("/assistant/history", headers=auth_headers).status_code == 204
        assert client.get("/assistant/history", headers=auth_headers).json()["total"] == 0

    def test_suggestions(self, client, auth_headers):
        data = client.get("/assistant/suggestions", headers=auth_headers).json()
        assert "Show me my recent transactions." in data["suggestions"]


class TestQuery:

    def test_query_with_provided_data(self, client, auth_headers, fake_ai):
        fake_ai.responses = [AIResponse(content="Revenue grew 10%.")]
        response = client.post("/assistant/query", json={
            "query": "How did revenue change?",
            "financial_data": "Jan revenue 1000, Feb revenue 1100",
        }, headers=auth_headers)
        assert response.status_code == 200
        assert response.json()["answer"] == "Revenue grew 10%."
        assert "Feb revenue 1100" in fake_ai.calls[0]["messages"][1]["content"]

    def test_query_builds_summary(self, client, auth_headers, fake_ai, ledger):
        fake_ai.responses = [AIResponse(content="You spent 345.00.")]
        client.post("/assistant/query", json={"query": "How much did I spend?"}, headers=auth_headers)
        content = fake_ai.calls[0]["messages"][1]["content"]
        assert "Expense - Rent: 300.00" in content

    def test_query_without_any_data(self, client, auth_headers, fake_ai):
        fake_ai.responses = [AIResponse(content="I have no data yet.")]
        client.post("/assistant/query", json={"query": "How am I doing?"}, headers=auth_headers)
        assert NO_FINANCIAL_DATA in fake_ai.calls[0]["messages"][1]["content"]

    def test_empty_answer_is_bad_gateway(self, client, auth_headers, fake_ai):
        response = client.post("/assistant/query", json={"query": "Anything?", "financial_data": "x"},
                               headers=auth_headers)
        assert response.status_code == 502
