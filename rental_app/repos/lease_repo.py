from datetime import date

from sqlalchemy import or_, select, update

from core.mapper import mapper
from core.store_guard import store_call
from models.models import Lease
from schemas.schema import LeaseRecord

from .base_repo import BaseRepo


class LeaseRepo(BaseRepo):
    @store_call(idempotent=False)
    async def create(self, **values) -> LeaseRecord:
        lease = await self.db_add_commit_and_refresh(Lease(**values))
        return mapper.one(lease, LeaseRecord)

    @store_call(idempotent=True)
    async def get(self, lease_id: str) -> LeaseRecord | None:
        result = await self.db.execute(select(Lease).where(Lease.id == lease_id))
        return mapper.optional(result.scalar_one_or_none(), LeaseRecord)

    @store_call(idempotent=True)
    async def list_by_unit(self, unit_id: str) -> list[LeaseRecord]:
        result = await self.db.execute(
            select(Lease)
            .where(Lease.unit_id == unit_id)
            .order_by(Lease.start_date.desc())
        )
        return mapper.many(result.scalars().all(), LeaseRecord)

    @store_call(idempotent=True)
    async def get_open_for_unit(self, unit_id: str, today: date) -> LeaseRecord | None:
        """The lease on this unit that has not ended yet, if any."""
        result = await self.db.execute(
            select(Lease)
            .where(
                Lease.unit_id == unit_id,
                or_(Lease.end_date.is_(None), Lease.end_date >= today),
            )
            .order_by(Lease.start_date.desc())
            .limit(1)
        )
        return mapper.optional(result.scalar_one_or_none(), LeaseRecord)

    @store_call(idempotent=True)
    async def list_due_on(self, due_day: int) -> list[LeaseRecord]:
        result = await self.db.execute(
            select(Lease).where(Lease.due_day == due_day).order_by(Lease.created_at)
        )
        return mapper.many(result.scalars().all(), LeaseRecord)

    @store_call(idempotent=False)
    async def update(self, lease_id: str, values: dict) -> int:
        if not values:
            return 1
        return await self._execute_and_commit(
            update(Lease).where(Lease.id == lease_id).values(**values)
        )
