from datetime import date

from core.exceptions import NotFound
from core.settings import Settings
from models.utils import effective_status
from repos.payment_repo import PaymentRepo
from schemas.schema import PaymentOut, PaymentRecord


class PaymentQueryService:
    def __init__(self, db, settings: Settings, today: date):
        self.payment_repo: PaymentRepo = PaymentRepo(db)
        self.grace_days = settings.LATE_GRACE_DAYS
        self.today = today

    def _present(self, payment: PaymentRecord) -> PaymentOut:
        return PaymentOut(
            **payment.model_dump(),
            effective_status=effective_status(
                payment.status, payment.due_date, self.today, self.grace_days
            ),
        )

    async def get_payment(self, payment_id: str) -> PaymentOut:
        payment = await self.payment_repo.get(payment_id)
        if not payment:
            raise NotFound("Payment not found")
        return self._present(payment)

    async def list_by_lease(self, lease_id: str) -> list[PaymentOut]:
        return [self._present(p) for p in await self.payment_repo.list_by_lease(lease_id)]

    async def list_open_for_owner(self, owner_id: str) -> list[PaymentOut]:
        return [
            self._present(p)
            for p in await self.payment_repo.list_open_for_owner(owner_id)
        ]

    async def list_recent(self, limit: int = 20) -> list[PaymentOut]:
        return [self._present(p) for p in await self.payment_repo.list_recent(limit)]
