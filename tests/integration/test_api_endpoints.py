"""Integration tests for API endpoints."""

from decimal import Decimal
from uuid import uuid4

from httpx import AsyncClient

from tests.integration.conftest import payroll_payload


class TestHealthEndpoints:
    """Tests for health check endpoints."""

    async def test_health_check(self, client: AsyncClient, seeded_rules):
        response = await client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["database"] == "healthy"
        assert data["active_tax_rules"] == 3
        assert data["tax_rule_issues"] == 0
        assert "timestamp" in data

    async def test_health_degraded_by_gapped_rules(self, client: AsyncClient):
        await client.post(
            "/api/v1/tax-rules",
            json={"name": "High", "rate": "0.20", "threshold_min": "2000"},
        )

        data = (await client.get("/health")).json()

        assert data["status"] == "degraded"
        assert data["tax_rule_issues"] == 1

    async def test_readiness_check(self, client: AsyncClient, seeded_rules):
        response = await client.get("/ready")
        assert response.status_code == 200
        assert response.json()["status"] == "ready"

    async def test_not_ready_without_rules(self, client: AsyncClient):
        response = await client.get("/ready")
        assert response.status_code == 503

    async def test_liveness_check(self, client: AsyncClient):
        response = await client.get("/live")
        assert response.status_code == 200
        assert response.json()["status"] == "alive"


class TestPreviewEndpoint:
    async def test_preview_hourly(self, client: AsyncClient, seeded_rules, hourly_row):
        response = await client.post(
            "/api/v1/payroll/preview",
            json=payroll_payload(
                hourly_row.id,
                hours_worked="176",
                overtime_hours="5",
                allowances="500",
                deductions="200",
            ),
        )

        assert response.status_code == 200
        data = response.json()
        assert data["compensation_basis"] == "hourly"
        assert Decimal(data["gross_salary"]) == Decimal("9675")
        assert Decimal(data["tax_deductions"]) == Decimal("1741.50")
        assert Decimal(data["net_salary"]) == Decimal("7733.50")
        assert len(data["tax_breakdown"]) == 1

    async def test_preview_is_deterministic(self, client: AsyncClient, seeded_rules, salaried_row):
        body = payroll_payload(salaried_row.id)

        first = await client.post("/api/v1/payroll/preview", json=body)
        second = await client.post("/api/v1/payroll/preview", json=body)

        assert first.json()["calculation_id"] == second.json()["calculation_id"]

    async def test_unknown_employee(self, client: AsyncClient, seeded_rules):
        response = await client.post("/api/v1/payroll/preview", json=payroll_payload(uuid4()))

        assert response.status_code == 404
        assert response.json()["code"] == "EMPLOYEE_NOT_FOUND"

    async def test_inactive_employee(self, client: AsyncClient, seeded_rules, inactive_row):
        response = await client.post(
            "/api/v1/payroll/preview", json=payroll_payload(inactive_row.id)
        )

        assert response.status_code == 422
        data = response.json()
        assert data["code"] == "INVALID_EMPLOYEE_STATE"
        assert data["context"]["employee_id"] == str(inactive_row.id)

    async def test_negative_hours(self, client: AsyncClient, seeded_rules, hourly_row):
        response = await client.post(
            "/api/v1/payroll/preview",
            json=payroll_payload(hourly_row.id, hours_worked="-1"),
        )

        assert response.status_code == 422
        data = response.json()
        assert data["code"] == "INVALID_PERIOD_INPUT"
        assert data["context"]["field"] == "hours_worked"

    async def test_period_end_before_start(self, client: AsyncClient, seeded_rules, salaried_row):
        response = await client.post(
            "/api/v1/payroll/preview",
            json=payroll_payload(
                salaried_row.id, period_start="2025-10-31", period_end="2025-10-01"
            ),
        )

        assert response.status_code == 422
        assert response.json()["context"]["field"] == "period_end"


class TestRecordEndpoints:
    async def test_generate_then_duplicate(self, client: AsyncClient, seeded_rules, salaried_row):
        body = payroll_payload(salaried_row.id)

        created = await client.post("/api/v1/payroll/records", json=body)
        assert created.status_code == 201
        data = created.json()
        assert Decimal(data["net_salary"]) == Decimal("25280")
        assert data["pay_period_start"] == "2025-10-01"

        duplicate = await client.post("/api/v1/payroll/records", json=body)
        assert duplicate.status_code == 409
        assert duplicate.json()["code"] == "PAYROLL_RECORD_EXISTS"

    async def test_get_and_list(self, client: AsyncClient, seeded_rules, salaried_row, hourly_row):
        created = await client.post(
            "/api/v1/payroll/records", json=payroll_payload(salaried_row.id)
        )
        await client.post(
            "/api/v1/payroll/records",
            json=payroll_payload(hourly_row.id, hours_worked="160"),
        )
        record_id = created.json()["id"]

        fetched = await client.get(f"/api/v1/payroll/records/{record_id}")
        assert fetched.status_code == 200
        assert fetched.json()["calculation_id"] == created.json()["calculation_id"]

        listed = await client.get(
            "/api/v1/payroll/records", params={"employee_id": str(hourly_row.id)}
        )
        assert listed.status_code == 200
        data = listed.json()
        assert data["total"] == 1
        assert data["items"][0]["compensation_basis"] == "hourly"

    async def test_record_not_found(self, client: AsyncClient):
        response = await client.get(f"/api/v1/payroll/records/{uuid4()}")

        assert response.status_code == 404
        assert response.json()["detail"] == "Payroll record not found"

    async def test_summary(self, client: AsyncClient, seeded_rules, salaried_row):
        await client.post("/api/v1/payroll/records", json=payroll_payload(salaried_row.id))

        response = await client.get(
            "/api/v1/payroll/summary",
            params={"date_from": "2025-10-01", "date_to": "2025-10-31"},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["record_count"] == 1
        assert Decimal(data["total_gross"]) == Decimal("32000")
        assert Decimal(data["total_tax"]) == Decimal("6720")
        assert Decimal(data["average_tax_rate"]) == Decimal("0.21")


class TestTaxRuleEndpoints:
    async def test_list_active(self, client: AsyncClient, seeded_rules):
        response = await client.get("/api/v1/tax-rules")

        assert response.status_code == 200
        assert [Decimal(r["rate"]) for r in response.json()] == [
            Decimal("0.18"),
            Decimal("0.26"),
            Decimal("0.31"),
        ]

    async def test_list_include_inactive(self, client: AsyncClient, seeded_rules):
        response = await client.get("/api/v1/tax-rules", params={"include_inactive": "true"})
        assert len(response.json()) == 4

    async def test_create_rule(self, client: AsyncClient):
        response = await client.post(
            "/api/v1/tax-rules",
            json={"name": "Flat", "rate": "0.15", "threshold_min": "0"},
        )

        assert response.status_code == 201
        data = response.json()
        assert data["name"] == "Flat"
        assert data["threshold_max"] is None
        assert data["is_active"] is True

    async def test_create_rule_rejects_inverted_bounds(self, client: AsyncClient):
        response = await client.post(
            "/api/v1/tax-rules",
            json={"name": "Bad", "rate": "0.15", "threshold_min": "1000", "threshold_max": "500"},
        )

        assert response.status_code == 422

    async def test_create_rule_rejects_excess_rate_precision(self, client: AsyncClient):
        response = await client.post(
            "/api/v1/tax-rules",
            json={"name": "Fine", "rate": "0.12345", "threshold_min": "0"},
        )

        assert response.status_code == 422

        listed = await client.get("/api/v1/tax-rules")
        assert listed.json() == []

    async def test_validation_clean(self, client: AsyncClient, seeded_rules):
        response = await client.get("/api/v1/tax-rules/validation")

        assert response.status_code == 200
        assert response.json() == {"valid": True, "issues": []}

    async def test_validation_reports_gap(self, client: AsyncClient):
        await client.post(
            "/api/v1/tax-rules",
            json={"name": "Low", "rate": "0.10", "threshold_min": "0", "threshold_max": "1000"},
        )
        await client.post(
            "/api/v1/tax-rules",
            json={"name": "High", "rate": "0.20", "threshold_min": "2000"},
        )

        response = await client.get("/api/v1/tax-rules/validation")

        data = response.json()
        assert data["valid"] is False
        assert len(data["issues"]) == 1
        assert data["issues"][0].startswith("Gap between")
