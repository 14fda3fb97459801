"""FastAPI dependency injection — wires infrastructure to application layer."""

from collections.abc import AsyncGenerator

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from inventory.config import get_settings
from inventory.application.services import ReconciliationService, TombstonePolicy
from inventory.infrastructure.database.session import get_db_session
from inventory.infrastructure.database.repositories import SQLAlchemyServerAssetRepository


async def get_reconciliation_service(
    session: AsyncSession = Depends(get_db_session),
) -> AsyncGenerator[ReconciliationService, None]:
    """Provides a ReconciliationService bound to the request's session."""
    settings = get_settings()
    repository = SQLAlchemyServerAssetRepository(session)
    yield ReconciliationService(
        repository,
        tombstone_policy=TombstonePolicy(settings.tombstone_policy),
    )
