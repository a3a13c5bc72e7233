from core.exceptions import NotFound
from repos.owner_repo import OwnerRepo
from repos.tenant_repo import TenantRepo
from repos.unit_repo import UnitRepo
from schemas.schema import OwnerRecord, OwnerUpsert, TenantRecord, UnitRecord


class OwnerService:
    def __init__(self, db):
        self.owner_repo: OwnerRepo = OwnerRepo(db)
        self.unit_repo: UnitRepo = UnitRepo(db)
        self.tenant_repo: TenantRepo = TenantRepo(db)

    async def upsert_owner(self, owner_id: str, payload: OwnerUpsert) -> OwnerRecord:
        return await self.owner_repo.upsert(
            owner_id=owner_id, email=payload.email, name=payload.name
        )

    async def get_owner(self, owner_id: str) -> OwnerRecord:
        owner = await self.owner_repo.get(owner_id)
        if not owner:
            raise NotFound("Owner not found")
        return owner

    async def list_units(self, owner_id: str) -> list[UnitRecord]:
        await self.get_owner(owner_id)
        return await self.unit_repo.list_by_owner(owner_id)

    async def list_tenants(self, owner_id: str) -> list[TenantRecord]:
        await self.get_owner(owner_id)
        return await self.tenant_repo.list_by_owner(owner_id)
