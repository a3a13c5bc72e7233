import logging

import uvicorn
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from core.catch_error_middleware import ErrorHandlerMiddleware
from core.exception_handler import HTTPErrorHandler, ValidationErrorHandler
from core.lifespan import lifespan
from core.settings import Settings, settings as default_settings
from fintechs.stripe_client import StripeClient
from routes.cron_routes import router as cron_router
from routes.lease_routes import router as lease_router
from routes.owner_routes import router as owner_router
from routes.payment_routes import router as payment_router
from routes.system_routes import router as system_router
from routes.tenant_routes import router as tenant_router
from routes.unit_routes import router as unit_router
from routes.webhooks_routes import router as webhooks_router

logging.basicConfig(level=logging.INFO)


def create_app(
    settings: Settings | None = None, stripe_client: StripeClient | None = None
) -> FastAPI:
    settings = settings or default_settings

    app = FastAPI(
        lifespan=lifespan,
        title=settings.PROJECT_NAME,
        version="1.0.0",
    )
    app.state.settings = settings
    app.state.stripe = stripe_client

    app.include_router(system_router)
    app.include_router(cron_router)
    app.include_router(webhooks_router)
    app.include_router(payment_router)
    app.include_router(owner_router)
    app.include_router(unit_router)
    app.include_router(tenant_router)
    app.include_router(lease_router)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_HOSTS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(RequestValidationError, ValidationErrorHandler())
    app.add_exception_handler(StarletteHTTPException, HTTPErrorHandler())

    app.add_middleware(ErrorHandlerMiddleware)

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=default_settings.PORT)
