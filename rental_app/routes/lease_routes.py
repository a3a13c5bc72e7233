from datetime import date
from typing import List

from fastapi import APIRouter, Depends, status
from fastapi_utils.cbv import cbv
from sqlalchemy.ext.asyncio import AsyncSession

from core.date_helper import get_today
from core.get_db import get_db_async
from core.safe_handler import safe_handler
from schemas.schema import LeaseCreate, LeaseRecord, LeaseTerminate, LeaseUpdate
from services.lease_service import LeaseService

router = APIRouter(tags=["Leases"])


@cbv(router)
class LeaseRoutes:
    db: AsyncSession = Depends(get_db_async)
    today: date = Depends(get_today)

    @router.post("/leases", response_model=LeaseRecord, status_code=status.HTTP_201_CREATED)
    @safe_handler
    async def create(self, payload: LeaseCreate):
        return await LeaseService(self.db, self.today).create_lease(payload)

    @router.get("/leases/{lease_id}", response_model=LeaseRecord)
    @safe_handler
    async def get_lease(self, lease_id: str):
        return await LeaseService(self.db, self.today).get_lease(lease_id)

    @router.patch("/leases/{lease_id}", response_model=LeaseRecord)
    @safe_handler
    async def update(self, lease_id: str, payload: LeaseUpdate):
        return await LeaseService(self.db, self.today).update_lease(lease_id, payload)

    @router.post("/leases/{lease_id}/terminate", response_model=LeaseRecord)
    @safe_handler
    async def terminate(self, lease_id: str, payload: LeaseTerminate):
        return await LeaseService(self.db, self.today).terminate_lease(lease_id, payload)

    @router.get("/units/{unit_id}/leases", response_model=List[LeaseRecord])
    @safe_handler
    async def list_for_unit(self, unit_id: str):
        return await LeaseService(self.db, self.today).list_by_unit(unit_id)

    @router.get("/units/{unit_id}/active-lease", response_model=LeaseRecord)
    @safe_handler
    async def active_lease(self, unit_id: str):
        return await LeaseService(self.db, self.today).get_active_lease(unit_id)
