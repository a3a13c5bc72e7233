from fastapi import APIRouter, Depends, status
from fastapi_utils.cbv import cbv
from sqlalchemy.ext.asyncio import AsyncSession

from core.get_db import get_db_async
from core.safe_handler import safe_handler
from schemas.schema import TenantCreate, TenantRecord, TenantUpdate
from services.tenant_service import TenantService

router = APIRouter(tags=["Tenants Management"])


@cbv(router=router)
class TenantsRoutes:
    @router.post("/tenants", response_model=TenantRecord, status_code=status.HTTP_201_CREATED)
    @safe_handler
    async def create(
        self,
        payload: TenantCreate,
        db: AsyncSession = Depends(get_db_async),
    ):
        return await TenantService(db).create_tenant(payload)

    @router.get("/tenants/{tenant_id}", response_model=TenantRecord)
    @safe_handler
    async def get_tenant(self, tenant_id: str, db: AsyncSession = Depends(get_db_async)):
        return await TenantService(db).get_tenant(tenant_id)

    @router.patch("/tenants/{tenant_id}", response_model=TenantRecord)
    @safe_handler
    async def update(
        self,
        tenant_id: str,
        payload: TenantUpdate,
        db: AsyncSession = Depends(get_db_async),
    ):
        return await TenantService(db).update_tenant(tenant_id, payload)

    @router.delete("/tenants/{tenant_id}")
    @safe_handler
    async def delete(self, tenant_id: str, db: AsyncSession = Depends(get_db_async)):
        return await TenantService(db).delete_tenant(tenant_id)
