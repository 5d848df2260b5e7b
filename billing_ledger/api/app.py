"""FastAPI application factory"""

import logging
import time
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from sqlmodel import SQLModel
from billing_ledger.api.error import register_error_handlers
from billing_ledger.api.routes import catalog, claims, invoices, payments
from billing_ledger.depends import engine
import billing_ledger.domain  # noqa: F401  registers all tables

logger = logging.getLogger(__name__)


def create_app(config) -> FastAPI:
    logging.basicConfig(
        level=getattr(logging, str(config.LOG_LEVEL).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if config.AUTO_CREATE_TABLES:
            async with engine.begin() as conn:
                await conn.run_sync(SQLModel.metadata.create_all)
            logger.info("Database tables verified")
        yield

    app = FastAPI(
        title="Billing Ledger",
        description="Invoices, payments and insurance claims for a practice",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ORIGINS,
        allow_credentials=config.CORS_ALLOW_CREDENTIALS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    if config.ENABLE_LOGGING_MIDDLEWARE:
        @app.middleware("http")
        async def log_requests(request: Request, call_next):
            started = time.perf_counter()
            response = await call_next(request)
            elapsed_ms = (time.perf_counter() - started) * 1000
            logger.info(
                f"{request.method} {request.url.path} -> {response.status_code} ({elapsed_ms:.1f} ms)"
            )
            return response

    register_error_handlers(app)

    for router in (invoices.router, payments.router, claims.router, catalog.router):
        app.include_router(router, prefix=config.API_PREFIX)

    return app
