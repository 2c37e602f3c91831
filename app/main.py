import logging

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.engine import Engine
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.api.route import router
from app.config import Settings, load_settings
from app.db.session import build_engine, create_tables
from app.errors import AppError
from app.middleware.logging import request_logging_middleware
from app.middleware.tenant import tenant_context_middleware
from app.services.email_service import EmailSender, build_email_sender
from app.storage.client import ObjectStorage, S3Client

logger = logging.getLogger(__name__)

_STATUS_CATEGORY = {
    400: "Bad Request",
    401: "Unauthorized",
    403: "Forbidden",
    404: "Not Found",
    405: "Method Not Allowed",
    409: "Conflict",
    413: "Payload Too Large",
    500: "Internal Server Error",
}


def _error_payload(*, category: str, message: str) -> dict:
    return {"error": category, "message": message}


def _format_validation_errors(exc: RequestValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()) if p not in ("body", "query", "path"))
        parts.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
    return "; ".join(parts) or "invalid request"


def create_app(
    settings: Settings,
    *,
    engine: Engine | None = None,
    storage: ObjectStorage | None = None,
    email_sender: EmailSender | None = None,
) -> FastAPI:
    """
    Monta a aplicação com os colaboradores recebidos explicitamente.

    Testes injetam engine SQLite, storage em memória e sender de email falso.
    """
    app = FastAPI(
        title="Habitta API",
        description="API multi-tenant para gestão de condomínios",
        version="1.0.0",
    )
    app.state.settings = settings
    app.state.engine = engine if engine is not None else build_engine(settings.database_url)
    app.state.storage = storage if storage is not None else S3Client(settings.storage)
    app.state.email_sender = email_sender if email_sender is not None else build_email_sender(settings)

    # Configuração CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.allowed_origins),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def _tenant_context(request: Request, call_next):
        return await tenant_context_middleware(request, call_next)

    # Registrado por último = mais externo: mede a request inteira
    @app.middleware("http")
    async def _request_logging(request: Request, call_next):
        return await request_logging_middleware(request, call_next)

    app.include_router(router)

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        if exc.status_code >= 500:
            logger.error(f"Erro interno: {exc.message}", exc_info=exc.__cause__ or exc)
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_payload(category=exc.category, message=exc.message),
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        # Normaliza erros HTTP do FastAPI/Starlette (404 de rota, 405, ...) para o envelope.
        category = _STATUS_CATEGORY.get(exc.status_code, "Error")
        message = exc.detail if isinstance(exc.detail, str) else "request failed"
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_payload(category=category, message=message),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        # Erros de validação de entrada são 400 (não 422).
        return JSONResponse(
            status_code=400,
            content=_error_payload(category="Bad Request", message=_format_validation_errors(exc)),
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        # Loga o erro completo; o cliente recebe mensagem genérica.
        logger.error(f"Erro não tratado: {exc}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content=_error_payload(category="Internal Server Error", message="internal server error"),
        )

    return app


def main() -> None:
    """Entry point `habitta-api`."""
    settings = load_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    app = create_app(settings)
    if settings.is_development:
        create_tables(app.state.engine)

    logger.info(f"Iniciando servidor na porta {settings.port} (env={settings.env})")
    logger.info(f"CORS allowed origins: {', '.join(settings.allowed_origins)}")
    uvicorn.run(app, host="0.0.0.0", port=settings.port, timeout_graceful_shutdown=5)


if __name__ == "__main__":
    main()
