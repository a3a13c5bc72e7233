import logging
from datetime import date

import dramatiq
from sqlalchemy.ext.asyncio import async_sessionmaker

from core.date_helper import today_in
from core.settings import Settings
from services.payment_generator_service import PaymentGeneratorService

logger = logging.getLogger(__name__)


async def run_due_payments(sessionmaker: async_sessionmaker, today: date) -> dict:
    async with sessionmaker() as db:
        result = await PaymentGeneratorService(db).generate_due_payments(today)
    return result.model_dump()


def create_due_payments_task(sessionmaker: async_sessionmaker, settings: Settings):
    @dramatiq.actor(
        actor_name="generate_due_payments",
        queue_name="due_payments",
        max_retries=3,
        time_limit=600_000,
    )
    async def generate_due_payments():
        result = await run_due_payments(sessionmaker, today_in(settings.TIMEZONE))
        logger.info(f"Scheduled due payment run finished: {result}")
        return result

    return generate_due_payments
