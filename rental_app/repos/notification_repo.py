from sqlalchemy import select

from core.mapper import mapper
from core.store_guard import store_call
from models.enums import NotificationType
from models.models import Notification
from schemas.schema import NotificationRecord

from .base_repo import BaseRepo


class NotificationRepo(BaseRepo):
    @store_call(idempotent=False)
    async def add_payment_reminder(
        self, lease_id: str, payment_id: str, to: str | None, message: str
    ) -> Notification:
        notification = Notification(
            type=NotificationType.PAYMENT_REMINDER,
            lease_id=lease_id,
            payment_id=payment_id,
            to=to,
            message=message,
        )
        self.db.add(notification)
        await self.db.flush()
        return notification

    @store_call(idempotent=True)
    async def list_by_payment(self, payment_id: str) -> list[NotificationRecord]:
        result = await self.db.execute(
            select(Notification)
            .where(Notification.payment_id == payment_id)
            .order_by(Notification.created_at)
        )
        return mapper.many(result.scalars().all(), NotificationRecord)
