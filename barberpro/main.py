import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exception_handlers import request_validation_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from barberpro.config import Settings, get_settings
from barberpro.core.exceptions import MarketplaceError, MissingField, UnexpectedFailure
from barberpro.database import create_db_and_tables, make_engine
from barberpro.routers import auth, clients, professionals
from barberpro.services.uploads import UploadBinder


logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings

    create_db_and_tables(app.state.engine)
    if settings.uses_default_secret:
        logger.warning("JWT_SECRET não definido: usando o segredo padrão")

    yield

    app.state.engine.dispose()


def _register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(MarketplaceError)
    async def marketplace_error_handler(request: Request, exc: MarketplaceError):
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict(), headers=exc.headers)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        # corpo JSON incompleto -> 400 "campos obrigatórios"
        if any(error.get("loc", ("",))[0] == "body" for error in exc.errors()):
            error = MissingField()
            return JSONResponse(status_code=error.status_code, content=error.to_dict())
        return await request_validation_exception_handler(request, exc)

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception):
        logger.exception("Erro inesperado em %s %s", request.method, request.url.path)
        error = UnexpectedFailure()
        return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=error.to_dict())


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()
    logging.basicConfig(level=settings.log_level.upper(), format=settings.log_format)

    app = FastAPI(title="BarberPro API", lifespan=lifespan)
    app.state.settings = settings
    app.state.engine = make_engine(settings)
    app.state.upload_binder = UploadBinder.from_settings(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )

    _register_exception_handlers(app)

    app.include_router(auth.router)
    app.include_router(professionals.router)
    app.include_router(clients.router)

    Path(settings.upload_dir).mkdir(parents=True, exist_ok=True)
    app.mount("/uploads", StaticFiles(directory=settings.upload_dir), name="uploads")

    @app.get("/")
    def root():
        return {"message": "API BarberPro funcionando 🚀"}

    return app


def main() -> None:
    import uvicorn

    settings = get_settings()
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
