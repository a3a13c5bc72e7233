from core.exceptions import NotFound
from repos.owner_repo import OwnerRepo
from repos.tenant_repo import TenantRepo
from schemas.schema import TenantCreate, TenantRecord, TenantUpdate


class TenantService:
    def __init__(self, db):
        self.tenant_repo: TenantRepo = TenantRepo(db)
        self.owner_repo: OwnerRepo = OwnerRepo(db)

    async def create_tenant(self, payload: TenantCreate) -> TenantRecord:
        if not await self.owner_repo.get(payload.owner_id):
            raise NotFound("Owner not found")
        return await self.tenant_repo.create(**payload.model_dump())

    async def get_tenant(self, tenant_id: str) -> TenantRecord:
        tenant = await self.tenant_repo.get(tenant_id)
        if not tenant:
            raise NotFound("Tenant not found")
        return tenant

    async def update_tenant(self, tenant_id: str, payload: TenantUpdate) -> TenantRecord:
        await self.get_tenant(tenant_id)
        await self.tenant_repo.update(tenant_id, payload.model_dump(exclude_unset=True))
        return await self.get_tenant(tenant_id)

    async def delete_tenant(self, tenant_id: str) -> dict:
        await self.get_tenant(tenant_id)
        await self.tenant_repo.delete(tenant_id)
        return {"id": tenant_id, "deleted": True}
