"""Tests for the API endpoints."""

from unittest.mock import patch

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from sa_tax.api.app import create_app
from sa_tax.calculators.errors import InvalidBracketTableError


@pytest.fixture
def app() -> FastAPI:
    return create_app()


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    return TestClient(app)


def test_health(client: TestClient) -> None:
    """GET /health returns ok status and the loaded years."""
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert "2024-2025" in data["tax_years"]


def test_tax_years(client: TestClient) -> None:
    response = client.get("/tax-years")
    assert response.status_code == 200
    data = response.json()
    assert data["tax_years"][0] == "2024-2025"
    assert data["default_tax_year"] == "2024-2025"
    assert len(data["current_tax_year"]) == 9


class TestTaxBrackets:
    def test_default_year(self, client: TestClient) -> None:
        response = client.get("/tax-brackets")
        assert response.status_code == 200
        brackets = response.json()
        assert len(brackets) == 7
        assert brackets[0]["lower_limit"] == 1
        assert brackets[0]["rate"] == 0.18
        assert brackets[-1]["upper_limit"] is None
        assert brackets[-1]["base_amount"] == 644489.0
        assert brackets[1]["description"] == "R42,678 + 26% of taxable income above R237,100"

    def test_specific_year(self, client: TestClient) -> None:
        response = client.get("/tax-brackets", params={"tax_year": "2022-2023"})
        assert response.status_code == 200
        assert response.json()[0]["upper_limit"] == 226000

    def test_unknown_year(self, client: TestClient) -> None:
        response = client.get("/tax-brackets", params={"tax_year": "1999-2000"})
        assert response.status_code == 400
        data = response.json()
        assert data["field"] == "tax_year"
        assert "Unknown tax year" in data["error"]


def test_deductible_expenses(client: TestClient) -> None:
    response = client.get("/deductible-expenses")
    assert response.status_code == 200
    types = {t["key"]: t for t in response.json()}
    assert set(types) == {"retirement", "medical", "home_office", "donations", "travel"}
    assert types["retirement"]["max_percentage"] == 0.275
    assert types["donations"]["max_percentage"] == 0.1
    assert types["medical"]["max_percentage"] is None


class TestTaxCalculation:
    def test_scenario_750k(self, client: TestClient) -> None:
        response = client.post(
            "/tax-calculation",
            json={"gross_income": 750000, "age": 35, "tax_year": "2024-2025"},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["taxable_income"] == 750000.0
        assert data["tax_before_rebates"] == pytest.approx(209176.61)
        assert data["rebates"] == 17235.0
        assert data["medical_credits"] == 4164.0
        assert data["final_tax"] == pytest.approx(187777.61)
        assert data["effective_tax_rate"] == pytest.approx(0.2504)
        assert data["monthly_tax"] == pytest.approx(15648.13)
        assert data["marginal_rate"] == 0.39
        assert data["tax_saving"] == 0.0

    def test_defaults_to_configured_year(self, client: TestClient) -> None:
        response = client.post("/tax-calculation", json={"gross_income": 750000, "age": 35})
        assert response.status_code == 200
        assert response.json()["tax_year"] == "2024-2025"

    def test_capped_expenses(self, client: TestClient) -> None:
        response = client.post(
            "/tax-calculation",
            json={"gross_income": 100000, "age": 35, "expenses": {"donations": 50000, "travel": 5000}},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["deductions"] == {"donations": 10000.0, "travel": 5000.0}
        assert data["taxable_income"] == 85000.0

    def test_deductions_exceed_income(self, client: TestClient) -> None:
        response = client.post(
            "/tax-calculation",
            json={"gross_income": 50000, "age": 35, "expenses": {"travel": 80000}},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["taxable_income"] == 0.0
        assert data["final_tax"] == 0.0

    def test_negative_income(self, client: TestClient) -> None:
        response = client.post("/tax-calculation", json={"gross_income": -1, "age": 35})
        assert response.status_code == 400
        assert response.json()["field"] == "gross_income"

    def test_negative_age(self, client: TestClient) -> None:
        response = client.post("/tax-calculation", json={"gross_income": 1000, "age": -3})
        assert response.status_code == 400
        assert response.json()["field"] == "age"

    def test_unknown_year(self, client: TestClient) -> None:
        response = client.post(
            "/tax-calculation",
            json={"gross_income": 1000, "age": 35, "tax_year": "2099-2100"},
        )
        assert response.status_code == 400
        assert response.json()["field"] == "tax_year"

    def test_tax_saving(self, client: TestClient) -> None:
        response = client.post(
            "/tax-calculation",
            json={"gross_income": 750000, "age": 35, "expenses": {"retirement": 50000}},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["final_tax"] == pytest.approx(168277.61)
        assert data["tax_saving"] == pytest.approx(19500.0)

    def test_unknown_expense_category(self, client: TestClient) -> None:
        response = client.post(
            "/tax-calculation",
            json={"gross_income": 750000, "age": 35, "expenses": {"holiday": 750000}},
        )
        assert response.status_code == 400
        data = response.json()
        assert data["field"] == "expenses"
        assert "holiday" in data["error"]

    def test_table_fault_is_server_error(self, client: TestClient) -> None:
        fault = InvalidBracketTableError("Gap between brackets ending at 1000 and starting at 2000")
        with patch("sa_tax.api.routes.calculate_tax_for_year", side_effect=fault):
            response = client.post("/tax-calculation", json={"gross_income": 1000, "age": 35})
        assert response.status_code == 500
        data = response.json()
        assert data["field"] is None
        assert "Gap" in data["error"]

    def test_missing_age(self, client: TestClient) -> None:
        """POST /tax-calculation without age returns 422."""
        response = client.post("/tax-calculation", json={"gross_income": 1000})
        assert response.status_code == 422


class TestProvisionalTax:
    def test_split(self, client: TestClient) -> None:
        response = client.get(
            "/provisional-tax",
            params={"final_tax": "189265", "tax_year": "2024-2025", "as_of": "2024-09-15"},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["total_tax"] == 189265.0
        first, second = data["first_payment"], data["second_payment"]
        assert first["amount"] == 94632.5
        assert second["amount"] == 94632.5
        assert first["due_date"] == "2024-08-31"
        assert second["due_date"] == "2025-02-28"
        assert first["is_overdue"] is True
        assert second["is_overdue"] is False

    def test_missing_final_tax(self, client: TestClient) -> None:
        response = client.get("/provisional-tax")
        assert response.status_code == 422

    def test_negative_final_tax(self, client: TestClient) -> None:
        response = client.get("/provisional-tax", params={"final_tax": "-5"})
        assert response.status_code == 400
        assert response.json()["field"] == "final_tax"

    def test_malformed_year(self, client: TestClient) -> None:
        response = client.get("/provisional-tax", params={"final_tax": "100", "tax_year": "2024"})
        assert response.status_code == 400
        assert response.json()["field"] == "tax_year"

    def test_final_tax_too_large(self, client: TestClient) -> None:
        response = client.get("/provisional-tax", params={"final_tax": "1e27"})
        assert response.status_code == 400
        assert response.json()["field"] == "final_tax"
