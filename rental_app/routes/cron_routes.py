from datetime import date

from fastapi import APIRouter, Depends
from fastapi_utils.cbv import cbv
from sqlalchemy.ext.asyncio import AsyncSession

from core.date_helper import get_today
from core.get_db import get_db_async
from core.safe_handler import safe_handler
from services.payment_generator_service import PaymentGeneratorService

router = APIRouter(tags=["Cron"])


@cbv(router)
class CronRoutes:
    @router.post("/cron/payments/due")
    @safe_handler
    async def generate_due_payments(
        self,
        today: date = Depends(get_today),
        db: AsyncSession = Depends(get_db_async),
    ):
        result = await PaymentGeneratorService(db).generate_due_payments(today)
        if result.skipped:
            return {"skipped": True, "reason": result.reason}
        return {
            "ok": True,
            "created": result.created,
            "existing": result.existing,
            "failed": result.failed,
        }
