"""FastAPI dependencies for dependency injection."""

from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from payroll_core.database import init_db
from payroll_core.services import PayrollService


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """Get database session dependency."""
    _, session_factory = init_db()
    async with session_factory() as session:
        try:
            yield session
        finally:
            await session.close()


async def get_payroll_service(
    session: Annotated[AsyncSession, Depends(get_db_session)],
) -> PayrollService:
    """Payroll service bound to the request's session."""
    return PayrollService(session)


# Type aliases for cleaner dependency injection
DbSession = Annotated[AsyncSession, Depends(get_db_session)]
Payroll = Annotated[PayrollService, Depends(get_payroll_service)]
