import logging

from core.exceptions import NotFound
from repos.asset_repo import AssetRepo
from repos.owner_repo import OwnerRepo
from repos.unit_repo import UnitRepo
from schemas.schema import (
    AssetInput,
    AssetRecord,
    AssetUpdate,
    UnitCreate,
    UnitRecord,
    UnitUpdate,
    UnitWithAssetsCreate,
)

logger = logging.getLogger(__name__)


class UnitService:
    def __init__(self, db):
        self.unit_repo: UnitRepo = UnitRepo(db)
        self.owner_repo: OwnerRepo = OwnerRepo(db)
        self.asset_repo: AssetRepo = AssetRepo(db)

    async def _require_owner(self, owner_id: str):
        if not await self.owner_repo.get(owner_id):
            raise NotFound("Owner not found")

    async def get_unit(self, unit_id: str) -> UnitRecord:
        unit = await self.unit_repo.get(unit_id)
        if not unit:
            raise NotFound("Unit not found")
        return unit

    async def create_unit(self, payload: UnitCreate) -> UnitRecord:
        await self._require_owner(payload.owner_id)
        unit = await self.unit_repo.create(**payload.model_dump())
        logger.info(f"Created unit {unit.id} for owner {unit.owner_id}")
        return unit

    async def create_unit_with_assets(self, payload: UnitWithAssetsCreate) -> UnitRecord:
        await self._require_owner(payload.unit.owner_id)
        unit = await self.unit_repo.create_with_assets(
            payload.unit.model_dump(),
            [asset.model_dump() for asset in payload.assets],
        )
        logger.info(f"Created unit {unit.id} with {len(payload.assets)} asset(s)")
        return unit

    async def update_unit(self, unit_id: str, payload: UnitUpdate) -> UnitRecord:
        await self.get_unit(unit_id)
        await self.unit_repo.update(unit_id, payload.model_dump(exclude_unset=True))
        return await self.get_unit(unit_id)

    async def delete_unit(self, unit_id: str) -> dict:
        await self.get_unit(unit_id)
        await self.unit_repo.delete(unit_id)
        logger.info(f"Deleted unit {unit_id}")
        return {"id": unit_id, "deleted": True}

    async def add_asset(self, unit_id: str, payload: AssetInput) -> AssetRecord:
        await self.get_unit(unit_id)
        return await self.asset_repo.create(unit_id=unit_id, **payload.model_dump())

    async def list_assets(self, unit_id: str) -> list[AssetRecord]:
        await self.get_unit(unit_id)
        return await self.asset_repo.list_by_unit(unit_id)

    async def update_asset(self, asset_id: str, payload: AssetUpdate) -> AssetRecord:
        if not await self.asset_repo.get(asset_id):
            raise NotFound("Asset not found")
        await self.asset_repo.update(asset_id, payload.model_dump(exclude_unset=True))
        return await self.asset_repo.get(asset_id)
