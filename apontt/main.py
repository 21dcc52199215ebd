import time
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from apontt.api.routes import (
    auth,
    authorization_terms,
    contracts,
    crm,
    customers,
    dashboard,
    health,
    partners,
    payments,
    public,
    whatsapp,
)
from apontt.core.config import settings
from apontt.core.exceptions import AppError
from apontt.core.logging_setup import logger
from apontt.db.session import init_db


@asynccontextmanager
async def lifespan(_: FastAPI) -> AsyncGenerator[None, None]:
    init_db()
    if settings.asaas_api_key:
        logger.info("Integração Asaas configurada")
    else:
        logger.warning("ASAAS_API_KEY ausente: cobranças serão geradas em modo simulação")
    yield


def _normalize_origin(value: str | None) -> str | None:
    if not value:
        return None
    cleaned = value.strip().rstrip("/")
    return cleaned or None


def _field_name(location: tuple) -> str:
    parts = [str(part) for part in location if part not in ("body", "query", "path")]
    return ".".join(parts) or "body"


def register_exception_handlers(application: FastAPI) -> None:
    @application.exception_handler(AppError)
    async def handle_app_error(request: Request, exc: AppError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.warning("%s %s -> %s: %s", request.method, request.url.path, exc.kind, exc.message)
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @application.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
        fields = [
            {"field": _field_name(tuple(error.get("loc", ()))), "message": error.get("msg", "")}
            for error in exc.errors()
        ]
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={"error": "validation_error", "detail": "Dados inválidos", "fields": fields},
        )


def create_app() -> FastAPI:
    application = FastAPI(
        title=settings.project_name,
        debug=settings.debug,
        lifespan=lifespan,
    )

    # ===============================================================
    # CORS
    # ===============================================================
    origins: list[str] = []
    for item in settings.allowed_origins + [settings.resolved_public_app_url()]:
        normalized = _normalize_origin(item)
        if normalized and normalized not in origins:
            origins.append(normalized)

    application.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ===============================================================
    # Log das requisições da API
    # ===============================================================
    @application.middleware("http")
    async def log_requests(request: Request, call_next):
        started = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            logger.exception("Erro não tratado em %s %s", request.method, request.url.path)
            response = JSONResponse(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                content={"error": "internal_error", "detail": "Erro interno do servidor"},
            )
        if request.url.path.startswith(settings.api_prefix):
            elapsed_ms = (time.perf_counter() - started) * 1000
            logger.info("%s %s %s in %.0fms", request.method, request.url.path, response.status_code, elapsed_ms)
        return response

    register_exception_handlers(application)

    # ===============================================================
    # ROTAS
    # ===============================================================
    application.include_router(health.router, prefix="/health")
    application.include_router(auth.router, prefix=settings.api_prefix)
    application.include_router(partners.router, prefix=settings.api_prefix)
    application.include_router(customers.router, prefix=settings.api_prefix)
    application.include_router(contracts.router, prefix=settings.api_prefix)
    application.include_router(authorization_terms.router, prefix=settings.api_prefix)
    application.include_router(payments.router, prefix=settings.api_prefix)
    application.include_router(crm.router, prefix=settings.api_prefix)
    application.include_router(dashboard.router, prefix=settings.api_prefix)
    application.include_router(whatsapp.router, prefix=settings.api_prefix)
    application.include_router(public.router, prefix=settings.api_prefix)

    @application.get("/")
    def root():
        return {"service": settings.project_name, "environment": settings.environment}

    logger.info("Apontt CRM API inicializada")
    return application


app = create_app()
