from typing import List

from fastapi import APIRouter, Depends, status
from fastapi_utils.cbv import cbv
from sqlalchemy.ext.asyncio import AsyncSession

from core.get_db import get_db_async
from core.safe_handler import safe_handler
from schemas.schema import (
    AssetInput,
    AssetRecord,
    AssetUpdate,
    UnitCreate,
    UnitRecord,
    UnitUpdate,
    UnitWithAssetsCreate,
)
from services.unit_service import UnitService

router = APIRouter(tags=["Units"])


@cbv(router)
class UnitRoutes:
    @router.post("/units", response_model=UnitRecord, status_code=status.HTTP_201_CREATED)
    @safe_handler
    async def create(self, payload: UnitCreate, db: AsyncSession = Depends(get_db_async)):
        return await UnitService(db).create_unit(payload)

    @router.post(
        "/units/with-assets",
        response_model=UnitRecord,
        status_code=status.HTTP_201_CREATED,
    )
    @safe_handler
    async def create_with_assets(
        self,
        payload: UnitWithAssetsCreate,
        db: AsyncSession = Depends(get_db_async),
    ):
        return await UnitService(db).create_unit_with_assets(payload)

    @router.get("/units/{unit_id}", response_model=UnitRecord)
    @safe_handler
    async def get_unit(self, unit_id: str, db: AsyncSession = Depends(get_db_async)):
        return await UnitService(db).get_unit(unit_id)

    @router.patch("/units/{unit_id}", response_model=UnitRecord)
    @safe_handler
    async def update(
        self,
        unit_id: str,
        payload: UnitUpdate,
        db: AsyncSession = Depends(get_db_async),
    ):
        return await UnitService(db).update_unit(unit_id, payload)

    @router.delete("/units/{unit_id}")
    @safe_handler
    async def delete(self, unit_id: str, db: AsyncSession = Depends(get_db_async)):
        return await UnitService(db).delete_unit(unit_id)

    @router.post(
        "/units/{unit_id}/assets",
        response_model=AssetRecord,
        status_code=status.HTTP_201_CREATED,
    )
    @safe_handler
    async def add_asset(
        self,
        unit_id: str,
        payload: AssetInput,
        db: AsyncSession = Depends(get_db_async),
    ):
        return await UnitService(db).add_asset(unit_id, payload)

    @router.get("/units/{unit_id}/assets", response_model=List[AssetRecord])
    @safe_handler
    async def list_assets(self, unit_id: str, db: AsyncSession = Depends(get_db_async)):
        return await UnitService(db).list_assets(unit_id)

    @router.patch("/assets/{asset_id}", response_model=AssetRecord)
    @safe_handler
    async def update_asset(
        self,
        asset_id: str,
        payload: AssetUpdate,
        db: AsyncSession = Depends(get_db_async),
    ):
        return await UnitService(db).update_asset(asset_id, payload)
