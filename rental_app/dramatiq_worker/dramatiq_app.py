import logging

import dramatiq
from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.cron import CronTrigger
from dramatiq.brokers.redis import RedisBroker
from dramatiq.middleware import (
    AgeLimit,
    AsyncIO,
    Callbacks,
    Pipelines,
    Retries,
    TimeLimit,
)

import models.models  # noqa: F401
from core.get_db import build_engine, build_sessionmaker
from core.settings import Settings, settings as default_settings
from tasks.due_payments_tasks import create_due_payments_task

logger = logging.getLogger(__name__)


class DramatiqManager:
    def __init__(
        self,
        settings: Settings = default_settings,
        broker: dramatiq.Broker | None = None,
        start_scheduler: bool = True,
    ):
        self.settings = settings

        # Daily job: messages older than six hours are dropped.
        self.broker = broker or RedisBroker(
            url=settings.REDIS_URL,
            middleware=[
                AgeLimit(max_age=6 * 3600 * 1000),
                TimeLimit(time_limit=10 * 60 * 1000),
                Retries(max_retries=3, min_backoff=30_000),
                Pipelines(),
                Callbacks(),
                AsyncIO(),
            ],
        )

        dramatiq.set_broker(self.broker)

        self.engine = build_engine(settings.DATABASE_URL)
        self.sessionmaker = build_sessionmaker(self.engine, settings)
        self._register_tasks()

        self.scheduler = BackgroundScheduler(timezone=settings.TIMEZONE)
        self._register_cron_jobs()
        if start_scheduler:
            self.scheduler.start()

    def _register_tasks(self):
        create_due_payments_task(self.sessionmaker, self.settings)

    def _register_cron_jobs(self):
        # Runs on every calendar day; the generator itself skips days 29-31.
        self.scheduler.add_job(
            func=lambda: self.broker.get_actor("generate_due_payments").send(),
            trigger=CronTrigger(
                hour=self.settings.DUE_PAYMENTS_CRON_HOUR,
                minute=0,
                timezone=self.settings.TIMEZONE,
            ),
            id="generate-due-payments-daily",
            replace_existing=True,
        )
        logger.info(
            f"Scheduled generate_due_payments daily at "
            f"{self.settings.DUE_PAYMENTS_CRON_HOUR:02d}:00 {self.settings.TIMEZONE}"
        )


dramatiq_app = DramatiqManager()
