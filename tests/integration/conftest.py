"""Integration test fixtures: API client over the in-memory database."""

from collections.abc import AsyncGenerator

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from payroll_core.api.app import create_app
from payroll_core.api.dependencies import get_db_session


@pytest.fixture
async def client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client whose requests use the test database."""
    app = create_app()

    async def override_session() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db_session] = override_session

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


def payroll_payload(employee_id, **overrides) -> dict:
    """JSON body for one October pay period."""
    payload = {
        "employee_id": str(employee_id),
        "period_start": "2025-10-01",
        "period_end": "2025-10-31",
        "hours_worked": "0",
        "overtime_hours": "0",
        "allowances": "0",
        "deductions": "0",
    }
    payload.update(overrides)
    return payload
