from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import select, update

from core.mapper import mapper
from core.store_guard import store_call
from models.enums import PaymentProvider, PaymentStatus
from models.models import Lease, Payment, Unit
from schemas.schema import PaymentRecord

from .base_repo import BaseRepo


class PaymentRepo(BaseRepo):
    @store_call(idempotent=True)
    async def get(self, payment_id: str) -> PaymentRecord | None:
        result = await self.db.execute(select(Payment).where(Payment.id == payment_id))
        return mapper.optional(result.scalar_one_or_none(), PaymentRecord)

    @store_call(idempotent=True)
    async def exists_for(self, lease_id: str, due_date: date) -> bool:
        result = await self.db.execute(
            select(Payment.id).where(
                Payment.lease_id == lease_id, Payment.due_date == due_date
            )
        )
        return result.first() is not None

    @store_call(idempotent=False)
    async def add_pending(
        self,
        lease_id: str,
        amount: Decimal,
        due_date: date,
        provider: PaymentProvider,
    ) -> Payment:
        """Stage a pending payment in the current transaction.

        The (lease_id, due_date) unique constraint raises IntegrityError on
        flush when another writer got there first.
        """
        payment = Payment(
            lease_id=lease_id,
            amount=amount,
            due_date=due_date,
            status=PaymentStatus.PENDING,
            provider=provider,
        )
        self.db.add(payment)
        await self.db.flush()
        return payment

    @store_call(idempotent=False)
    async def mark_paid(
        self,
        payment_id: str,
        tx_ref: str,
        paid_at: datetime,
        provider: PaymentProvider | None = None,
    ) -> int:
        """Set paid fields unless the payment is already paid.

        Returns the number of rows changed; 0 means it was already paid or
        does not exist.
        """
        values = {"status": PaymentStatus.PAID, "paid_at": paid_at, "tx_ref": tx_ref}
        if provider is not None:
            values["provider"] = provider
        return await self._execute_and_commit(
            update(Payment)
            .where(Payment.id == payment_id, Payment.status != PaymentStatus.PAID)
            .values(**values)
        )

    @store_call(idempotent=False)
    async def transition(
        self,
        payment_id: str,
        from_status: PaymentStatus,
        to_status: PaymentStatus,
        failure_reason: str | None = None,
    ) -> int:
        return await self._execute_and_commit(
            update(Payment)
            .where(Payment.id == payment_id, Payment.status == from_status)
            .values(status=to_status, failure_reason=failure_reason)
        )

    @store_call(idempotent=True)
    async def list_by_lease(self, lease_id: str) -> list[PaymentRecord]:
        result = await self.db.execute(
            select(Payment)
            .where(Payment.lease_id == lease_id)
            .order_by(Payment.due_date.desc())
        )
        return mapper.many(result.scalars().all(), PaymentRecord)

    @store_call(idempotent=True)
    async def list_open_for_owner(self, owner_id: str) -> list[PaymentRecord]:
        result = await self.db.execute(
            select(Payment)
            .join(Lease, Lease.id == Payment.lease_id)
            .join(Unit, Unit.id == Lease.unit_id)
            .where(
                Unit.owner_id == owner_id,
                Payment.status.in_([PaymentStatus.PENDING, PaymentStatus.LATE]),
            )
            .order_by(Payment.due_date.asc())
        )
        return mapper.many(result.scalars().all(), PaymentRecord)

    @store_call(idempotent=True)
    async def list_recent(self, limit: int = 20) -> list[PaymentRecord]:
        result = await self.db.execute(
            select(Payment).order_by(Payment.created_at.desc()).limit(limit)
        )
        return mapper.many(result.scalars().all(), PaymentRecord)
