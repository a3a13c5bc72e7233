from typing import List

from fastapi import APIRouter, Depends
from fastapi_utils.cbv import cbv
from sqlalchemy.ext.asyncio import AsyncSession

from core.get_db import get_db_async
from core.safe_handler import safe_handler
from schemas.schema import OwnerRecord, OwnerUpsert, TenantRecord, UnitRecord
from services.owner_service import OwnerService

router = APIRouter(tags=["Owners"])


@cbv(router)
class OwnerRoutes:
    @router.put("/owners/{owner_id}", response_model=OwnerRecord)
    @safe_handler
    async def upsert(
        self,
        owner_id: str,
        payload: OwnerUpsert,
        db: AsyncSession = Depends(get_db_async),
    ):
        return await OwnerService(db).upsert_owner(owner_id, payload)

    @router.get("/owners/{owner_id}", response_model=OwnerRecord)
    @safe_handler
    async def get_owner(self, owner_id: str, db: AsyncSession = Depends(get_db_async)):
        return await OwnerService(db).get_owner(owner_id)

    @router.get("/owners/{owner_id}/units", response_model=List[UnitRecord])
    @safe_handler
    async def list_units(self, owner_id: str, db: AsyncSession = Depends(get_db_async)):
        return await OwnerService(db).list_units(owner_id)

    @router.get("/owners/{owner_id}/tenants", response_model=List[TenantRecord])
    @safe_handler
    async def list_tenants(
        self, owner_id: str, db: AsyncSession = Depends(get_db_async)
    ):
        return await OwnerService(db).list_tenants(owner_id)
