"""Module: main."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from hospital_rx.api.v1.api import api_router
from hospital_rx.core.config import Settings
from hospital_rx.core.errors import DomainError
from hospital_rx.core.log_config import configure_logging
from hospital_rx.core.security import TokenRegistry
from hospital_rx.db.init_db import init_db
from hospital_rx.db.session import Database
from hospital_rx.services.dispatch_ledger import DispatchLedger
from hospital_rx.services.pharmacy_directory import PharmacyDirectory
from hospital_rx.services.prescription_service import PrescriptionService
from hospital_rx.services.prescription_store import PrescriptionStore

logger = logging.getLogger(__name__)


def build_service(database: Database) -> PrescriptionService:
    return PrescriptionService(
        store=PrescriptionStore(database),
        directory=PharmacyDirectory(database),
        ledger=DispatchLedger(database),
    )


def _error_body(code: str, message) -> dict:
    return {"error": {"code": code, "message": message}}


async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=_error_body(exc.code, exc.message))


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=400,
        content=_error_body("validation_error", jsonable_encoder(exc.errors())),
    )


def create_app(settings: Settings | None = None, database: Database | None = None) -> FastAPI:
    settings = settings or Settings()
    configure_logging(settings.log_level)

    database = database or Database(settings.database_url, echo=settings.database_echo)
    if settings.auto_create_schema:
        init_db(database)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Starting Hospital Rx API on %s", database.engine.url.render_as_string(hide_password=True))
        yield
        logger.info("Shutting down")
        database.dispose()

    app = FastAPI(title="Hospital Rx API", version="0.1.0", lifespan=lifespan)

    # One store handle per process, shared by every request.
    app.state.settings = settings
    app.state.database = database
    app.state.tokens = TokenRegistry()
    app.state.prescription_service = build_service(database)

    app.include_router(api_router, prefix="/api/v1")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(DomainError, domain_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)

    return app
