import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

import models.models  # noqa: F401  registers tables on Base.metadata
from fintech_verify_signature.verify_signature import StripeSignatureVerifier
from fintechs.stripe_client import StripeClient

from .get_db import build_engine, build_sessionmaker, create_tables

logger = logging.getLogger("startup")


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Waiting for application startup...")
    settings = app.state.settings

    engine = build_engine(settings.DATABASE_URL)
    app.state.engine = engine
    app.state.sessionmaker = build_sessionmaker(engine, settings)

    if settings.CREATE_TABLES:
        try:
            await create_tables(engine)
            logger.info("Database tables ensured.")
        except Exception:
            logger.exception("Failed to create database tables")
            await engine.dispose()
            raise

    if getattr(app.state, "stripe", None) is None:
        app.state.stripe = StripeClient(settings)
    if not app.state.stripe.configured:
        logger.warning("STRIPE_SECRET_KEY not set; checkout sessions are disabled.")

    app.state.signature_verifier = StripeSignatureVerifier(settings)
    if not settings.STRIPE_WEBHOOK_SECRET:
        if settings.WEBHOOK_STRICT_MODE:
            logger.warning("STRIPE_WEBHOOK_SECRET not set; Stripe webhooks will be rejected.")
        else:
            logger.warning("STRIPE_WEBHOOK_SECRET not set; accepting UNVERIFIED Stripe webhooks.")

    logger.info("Application startup complete.")

    yield

    try:
        await engine.dispose()
    except Exception:
        logger.exception("Failed to dispose database engine")
