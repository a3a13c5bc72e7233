from sqlalchemy import select

from core.mapper import mapper
from core.store_guard import store_call
from models.models import Owner
from schemas.schema import OwnerRecord

from .base_repo import BaseRepo


class OwnerRepo(BaseRepo):
    @store_call(idempotent=True)
    async def get(self, owner_id: str) -> OwnerRecord | None:
        owner = await self.db.get(Owner, owner_id)
        return mapper.optional(owner, OwnerRecord)

    @store_call(idempotent=True)
    async def upsert(self, owner_id: str, email: str, name: str | None) -> OwnerRecord:
        result = await self.db.execute(select(Owner).where(Owner.id == owner_id))
        owner = result.scalar_one_or_none()

        if owner is None:
            owner = Owner(id=owner_id, email=email, name=name)
        else:
            owner.email = email
            if name is not None:
                owner.name = name

        owner = await self.db_add_commit_and_refresh(owner)
        return mapper.one(owner, OwnerRecord)
