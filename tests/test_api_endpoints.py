"""API endpoint tests through the ASGI app."""

from __future__ import annotations

from decimal import Decimal
from uuid import uuid4

import pytest
from httpx import AsyncClient

from worksync.api.app import error_status
from worksync.errors import (
    ConflictError,
    InvalidTransitionError,
    NotFoundError,
    StorageError,
    ValidationError,
    WorkSyncError,
)
from tests.conftest import APPROVER, EMPLOYEE

HEADERS = {"X-User-Id": APPROVER}


async def log_hours(client: AsyncClient, hours: str, day: int) -> dict:
    response = await client.post(
        "/api/v1/worksheets",
        json={
            "employee_email": EMPLOYEE,
            "work_date": f"2026-10-{day:02d}",
            "hours_worked": hours,
            "task": "Picking",
        },
    )
    assert response.status_code == 201, response.text
    return response.json()


class TestHealth:
    async def test_health(self, client: AsyncClient):
        response = await client.get("/health")

        assert response.status_code == 200
        assert response.json()["database"] == "healthy"

    async def test_live_and_ready(self, client: AsyncClient):
        assert (await client.get("/live")).json() == {"status": "alive"}
        assert (await client.get("/ready")).json() == {"status": "ready"}


class TestWorksheetEndpoints:
    async def test_create_and_update(self, client: AsyncClient):
        entry = await log_hours(client, "5", 1)

        response = await client.patch(
            f"/api/v1/worksheets/{entry['worksheet_entry_id']}",
            json={"hours_worked": "6"},
        )

        assert response.status_code == 200
        assert Decimal(response.json()["hours_worked"]) == Decimal("6")
        assert response.json()["task"] == "Picking"

    async def test_negative_hours_rejected(self, client: AsyncClient):
        response = await client.post(
            "/api/v1/worksheets",
            json={"employee_email": EMPLOYEE, "work_date": "2026-10-01", "hours_worked": -1},
        )

        assert response.status_code == 422

    async def test_extra_precision_hours_rejected(self, client: AsyncClient):
        response = await client.post(
            "/api/v1/worksheets",
            json={"employee_email": EMPLOYEE, "work_date": "2026-10-01", "hours_worked": "1.234"},
        )

        assert response.status_code == 422
        assert response.json()["code"] == "VALIDATION_ERROR"

    async def test_bad_email_rejected(self, client: AsyncClient):
        response = await client.post(
            "/api/v1/worksheets",
            json={"employee_email": "nobody", "work_date": "2026-10-01", "hours_worked": 1},
        )

        assert response.status_code == 422
        assert response.json()["code"] == "VALIDATION_ERROR"

    async def test_update_missing_entry(self, client: AsyncClient):
        response = await client.patch(f"/api/v1/worksheets/{uuid4()}", json={"notes": "x"})

        assert response.status_code == 404
        assert response.json()["code"] == "NOT_FOUND"


class TestSettlementFlow:
    async def test_full_flow(self, client: AsyncClient):
        first = await log_hours(client, "5", 1)
        second = await log_hours(client, "3", 2)

        owed = (await client.get(f"/api/v1/employees/{EMPLOYEE}/owed")).json()
        assert Decimal(owed["total_owed"]) == Decimal("160")
        assert Decimal(owed["total_hours"]) == Decimal("8")
        assert len(owed["unpaid_entries"]) == 2

        body = {
            "employee_email": EMPLOYEE,
            "amount": "160",
            "entries": [first["worksheet_entry_id"], second["worksheet_entry_id"]],
        }
        created = await client.post("/api/v1/payments", json=body, headers=HEADERS)
        assert created.status_code == 201, created.text
        payment = created.json()
        assert payment["status"] == "pending"
        assert payment["approver_id"] == APPROVER
        assert len(payment["entries"]) == 2

        again = await client.post("/api/v1/payments", json=body, headers=HEADERS)
        assert again.status_code == 409
        assert again.json()["code"] == "CONFLICT"

        unpaid = (await client.get(f"/api/v1/employees/{EMPLOYEE}/worksheets")).json()
        assert unpaid == {"items": [], "total": 0}

        pending = (await client.get(f"/api/v1/employees/{EMPLOYEE}/pending")).json()
        assert pending == {"employee_email": EMPLOYEE, "has_pending_payment": True}

        queue = (await client.get("/api/v1/payments", params={"status": "pending"})).json()
        assert [p["payment_id"] for p in queue["items"]] == [payment["payment_id"]]

        approved = await client.patch(
            f"/api/v1/payments/{payment['payment_id']}/status",
            json={"status": "paid"},
            headers=HEADERS,
        )
        assert approved.status_code == 200
        assert approved.json()["status"] == "paid"
        assert approved.json()["paid_at"] is not None

        owed = (await client.get(f"/api/v1/employees/{EMPLOYEE}/owed")).json()
        assert Decimal(owed["total_owed"]) == Decimal("0")
        assert Decimal(owed["salary"]) == Decimal("160")
        assert owed["has_pending_payment"] is False

        history = (await client.get(f"/api/v1/employees/{EMPLOYEE}/salary-history")).json()
        assert len(history) == 1
        assert Decimal(history[0]["amount"]) == Decimal("160")

        payments = (await client.get(f"/api/v1/employees/{EMPLOYEE}/payments")).json()
        assert payments["total"] == 1

        reverted = await client.patch(
            f"/api/v1/payments/{payment['payment_id']}/status",
            json={"status": "pending"},
            headers=HEADERS,
        )
        assert reverted.status_code == 409
        assert reverted.json()["code"] == "INVALID_TRANSITION"

    async def test_payment_requires_caller_identity(self, client: AsyncClient):
        entry = await log_hours(client, "1", 3)

        response = await client.post(
            "/api/v1/payments",
            json={"employee_email": EMPLOYEE, "amount": "20", "entries": [entry["worksheet_entry_id"]]},
        )

        assert response.status_code == 400

    async def test_empty_entries_rejected(self, client: AsyncClient):
        response = await client.post(
            "/api/v1/payments",
            json={"employee_email": EMPLOYEE, "amount": "20", "entries": []},
            headers=HEADERS,
        )

        assert response.status_code == 422

    async def test_status_of_nonexistent_payment(self, client: AsyncClient):
        response = await client.patch(
            "/api/v1/payments/nonexistent-id/status",
            json={"status": "paid"},
            headers=HEADERS,
        )

        assert response.status_code == 404

    async def test_invalid_status_literal(self, client: AsyncClient):
        entry = await log_hours(client, "1", 4)
        created = await client.post(
            "/api/v1/payments",
            json={"employee_email": EMPLOYEE, "amount": "20", "entries": [entry["worksheet_entry_id"]]},
            headers=HEADERS,
        )

        response = await client.patch(
            f"/api/v1/payments/{created.json()['payment_id']}/status",
            json={"status": "cancelled"},
            headers=HEADERS,
        )

        assert response.status_code == 422
        assert response.json()["code"] == "VALIDATION_ERROR"

    async def test_owed_for_malformed_employee(self, client: AsyncClient):
        response = await client.get("/api/v1/employees/not-an-email/owed")

        assert response.status_code == 404

    async def test_owed_for_unknown_employee_is_zero(self, client: AsyncClient):
        response = await client.get("/api/v1/employees/new@x.com/owed")

        assert response.status_code == 200
        assert Decimal(response.json()["total_owed"]) == Decimal("0")


class TestErrorStatus:
    """Test the domain error to HTTP status mapping."""

    @pytest.mark.parametrize(
        ("exc", "expected"),
        [
            (ValidationError("bad"), 422),
            (NotFoundError("gone"), 404),
            (ConflictError("taken"), 409),
            (InvalidTransitionError("paid", "pending"), 409),
            (StorageError("down"), 503),
            (WorkSyncError("other"), 500),
        ],
    )
    def test_error_status(self, exc, expected):
        assert error_status(exc) == expected
