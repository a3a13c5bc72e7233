from sqlalchemy import delete, select, update

from core.mapper import mapper
from core.store_guard import store_call
from models.models import Tenant
from schemas.schema import TenantRecord

from .base_repo import BaseRepo


class TenantRepo(BaseRepo):
    @store_call(idempotent=False)
    async def create(self, **values) -> TenantRecord:
        tenant = await self.db_add_commit_and_refresh(Tenant(**values))
        return mapper.one(tenant, TenantRecord)

    @store_call(idempotent=True)
    async def get(self, tenant_id: str) -> TenantRecord | None:
        result = await self.db.execute(select(Tenant).where(Tenant.id == tenant_id))
        return mapper.optional(result.scalar_one_or_none(), TenantRecord)

    @store_call(idempotent=True)
    async def list_by_owner(self, owner_id: str) -> list[TenantRecord]:
        result = await self.db.execute(
            select(Tenant)
            .where(Tenant.owner_id == owner_id)
            .order_by(Tenant.created_at.desc())
        )
        return mapper.many(result.scalars().all(), TenantRecord)

    @store_call(idempotent=False)
    async def update(self, tenant_id: str, values: dict) -> int:
        if not values:
            return 1
        return await self._execute_and_commit(
            update(Tenant).where(Tenant.id == tenant_id).values(**values)
        )

    @store_call(idempotent=False)
    async def delete(self, tenant_id: str) -> int:
        return await self._execute_and_commit(
            delete(Tenant).where(Tenant.id == tenant_id)
        )
