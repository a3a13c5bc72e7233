import logging
from datetime import date

from sqlalchemy.exc import IntegrityError

from models.utils import is_active_on, provider_for_method
from repos.lease_repo import LeaseRepo
from repos.notification_repo import NotificationRepo
from repos.payment_repo import PaymentRepo
from schemas.schema import DueRunResult, LeaseRecord

logger = logging.getLogger("payments.generator")

MAX_DUE_DAY = 28


class PaymentGeneratorService:
    REMINDER_MESSAGE = "Friendly reminder: rent due on {due_date}"

    def __init__(self, db):
        self.db = db
        self.lease_repo: LeaseRepo = LeaseRepo(db)
        self.payment_repo: PaymentRepo = PaymentRepo(db)
        self.notification_repo: NotificationRepo = NotificationRepo(db)

    async def generate_due_payments(self, today: date) -> DueRunResult:
        if today.day > MAX_DUE_DAY:
            logger.info(f"Skipping due payment run on {today}: unsupported day")
            return DueRunResult(skipped=True, reason="unsupported day")

        leases = await self.lease_repo.list_due_on(today.day)
        # The payment is due on the day it is generated.
        due_date = today
        result = DueRunResult()

        for lease in leases:
            if not is_active_on(lease.start_date, lease.end_date, today):
                continue

            try:
                created = await self._bill_lease(lease, due_date)
            except Exception:
                await self.payment_repo.db_rollback()
                result.failed += 1
                logger.exception(f"Failed to generate payment for lease {lease.id}")
                continue

            if created:
                result.created += 1
            else:
                result.existing += 1

        logger.info(
            f"Due payment run for {today}: created={result.created} "
            f"existing={result.existing} failed={result.failed}"
        )
        return result

    async def _bill_lease(self, lease: LeaseRecord, due_date: date) -> bool:
        if await self.payment_repo.exists_for(lease.id, due_date):
            return False

        try:
            payment = await self.payment_repo.add_pending(
                lease_id=lease.id,
                amount=lease.rent,
                due_date=due_date,
                provider=provider_for_method(lease.payment_method),
            )
            await self.notification_repo.add_payment_reminder(
                lease_id=lease.id,
                payment_id=payment.id,
                to=lease.tenant_email,
                message=self.REMINDER_MESSAGE.format(due_date=due_date.isoformat()),
            )
            await self.payment_repo.db_commit()
        except IntegrityError:
            # Another run inserted the same (lease, due date) first.
            await self.payment_repo.db_rollback()
            logger.info(f"Payment for lease {lease.id} on {due_date} already exists")
            return False

        logger.info(f"Created pending payment {payment.id} for lease {lease.id}")
        return True
