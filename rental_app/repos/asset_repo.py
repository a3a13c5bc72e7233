from sqlalchemy import select, update

from core.mapper import mapper
from core.store_guard import store_call
from models.models import Asset
from schemas.schema import AssetRecord

from .base_repo import BaseRepo


class AssetRepo(BaseRepo):
    @store_call(idempotent=False)
    async def create(self, **values) -> AssetRecord:
        asset = await self.db_add_commit_and_refresh(Asset(**values))
        return mapper.one(asset, AssetRecord)

    @store_call(idempotent=True)
    async def get(self, asset_id: str) -> AssetRecord | None:
        result = await self.db.execute(select(Asset).where(Asset.id == asset_id))
        return mapper.optional(result.scalar_one_or_none(), AssetRecord)

    @store_call(idempotent=True)
    async def list_by_unit(self, unit_id: str) -> list[AssetRecord]:
        result = await self.db.execute(
            select(Asset)
            .where(Asset.unit_id == unit_id)
            .order_by(
                Asset.next_certification_date.is_(None),
                Asset.next_certification_date.asc(),
            )
        )
        return mapper.many(result.scalars().all(), AssetRecord)

    @store_call(idempotent=False)
    async def update(self, asset_id: str, values: dict) -> int:
        if not values:
            return 1
        return await self._execute_and_commit(
            update(Asset).where(Asset.id == asset_id).values(**values)
        )
