from sqlalchemy import delete, select, update

from core.mapper import mapper
from core.store_guard import store_call
from models.enums import UnitStatus
from models.models import Asset, Unit
from schemas.schema import UnitRecord

from .base_repo import BaseRepo


class UnitRepo(BaseRepo):
    @store_call(idempotent=False)
    async def create(self, **values) -> UnitRecord:
        unit = await self.db_add_commit_and_refresh(Unit(**values))
        return mapper.one(unit, UnitRecord)

    @store_call(idempotent=False)
    async def create_with_assets(self, unit_values: dict, assets: list[dict]) -> UnitRecord:
        """Insert a unit and its assets in one transaction."""
        unit = Unit(**unit_values)
        unit.assets = [Asset(**values) for values in assets]
        unit = await self.db_add_commit_and_refresh(unit)
        return mapper.one(unit, UnitRecord)

    @store_call(idempotent=True)
    async def get(self, unit_id: str) -> UnitRecord | None:
        result = await self.db.execute(select(Unit).where(Unit.id == unit_id))
        return mapper.optional(result.scalar_one_or_none(), UnitRecord)

    @store_call(idempotent=True)
    async def list_by_owner(self, owner_id: str) -> list[UnitRecord]:
        result = await self.db.execute(
            select(Unit)
            .where(Unit.owner_id == owner_id)
            .order_by(Unit.created_at.desc())
        )
        return mapper.many(result.scalars().all(), UnitRecord)

    @store_call(idempotent=False)
    async def update(self, unit_id: str, values: dict) -> int:
        if not values:
            return 1
        return await self._execute_and_commit(
            update(Unit).where(Unit.id == unit_id).values(**values)
        )

    async def set_status(self, unit_id: str, status: UnitStatus) -> int:
        return await self.update(unit_id, {"status": status})

    @store_call(idempotent=False)
    async def delete(self, unit_id: str) -> int:
        return await self._execute_and_commit(delete(Unit).where(Unit.id == unit_id))
