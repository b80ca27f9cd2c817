"""Per-user scenario persistence.

A scenario owned by another user is reported as NotFound, the same as a
missing one.
"""

import logging
import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from homecalc.errors import NotFound
from homecalc.models.db import ScenarioRecord

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = ("name", "notes", "inputs", "compensating_factors", "results")


class ScenarioStore:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, user_id: str, **fields) -> ScenarioRecord:
        record = ScenarioRecord(user_id=user_id, **fields)
        self.session.add(record)
        await self.session.commit()
        await self.session.refresh(record)
        logger.info("Created scenario %s for user %s", record.id, user_id)
        return record

    async def list(self, user_id: str) -> list[ScenarioRecord]:
        """Newest first."""
        result = await self.session.execute(
            select(ScenarioRecord)
            .where(ScenarioRecord.user_id == user_id)
            .order_by(ScenarioRecord.created_at.desc())
        )
        return list(result.scalars().all())

    async def get(self, user_id: str, scenario_id: uuid.UUID) -> ScenarioRecord:
        record = await self.session.get(ScenarioRecord, scenario_id)
        if record is None or record.user_id != user_id:
            raise NotFound("Scenario not found or access denied")
        return record

    async def update(self, user_id: str, scenario_id: uuid.UUID, **changes) -> ScenarioRecord:
        """Patch the given fields; omitted fields keep their values."""
        record = await self.get(user_id, scenario_id)
        for name, value in changes.items():
            if name in UPDATABLE_FIELDS:
                setattr(record, name, value)
        await self.session.commit()
        await self.session.refresh(record)
        return record

    async def delete(self, user_id: str, scenario_id: uuid.UUID) -> None:
        record = await self.get(user_id, scenario_id)
        await self.session.delete(record)
        await self.session.commit()
        logger.info("Deleted scenario %s for user %s", scenario_id, user_id)
