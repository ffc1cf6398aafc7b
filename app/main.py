# app/main.py
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from .catalog import catalog_router
from .catalog.store import CatalogStore
from .config import Settings, settings
from .models import ErrorResponse, HealthStatus
from .storage import MOUNT_PATH, AssetManager
from .uploads import router as upload_router


logger = logging.getLogger(__name__)


def create_app(app_settings: Optional[Settings] = None) -> FastAPI:
    cfg = app_settings or settings
    logging.basicConfig(
        level=cfg.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    assets = AssetManager(
        cfg.uploads_dir,
        mount_path=MOUNT_PATH,
        max_bytes=cfg.max_upload_bytes,
        public_hosts=cfg.public_hosts,
    )
    catalog = CatalogStore(cfg.snapshot_path, assets=assets)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        assets.ensure_directory()
        catalog.load()
        logger.info("Environment: %s, %d menu items", cfg.environment, catalog.count())
        yield

    app = FastAPI(
        title="Menu Catalog API",
        description=(
            "Backend du catalogue de produits : listes par catégorie, "
            "persistées sur disque, et gestion des images associées."
        ),
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.settings = cfg
    app.state.catalog = catalog
    app.state.assets = assets

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[cfg.frontend_url],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/api/health", response_model=HealthStatus)
    async def health_check():
        return HealthStatus()

    app.include_router(catalog_router)
    app.include_router(upload_router)
    app.mount(
        MOUNT_PATH,
        StaticFiles(directory=str(cfg.uploads_dir), check_dir=False),
        name="uploads",
    )

    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException):
        detail = exc.detail
        if exc.status_code == 404 and detail == "Not Found":
            detail = "Endpoint not found"
        return JSONResponse(
            status_code=exc.status_code,
            content=ErrorResponse(error=str(detail)).model_dump(),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error(request: Request, exc: RequestValidationError):
        logger.info("Rejected request to %s: %s", request.url.path, exc.errors())
        return JSONResponse(status_code=400, content=ErrorResponse(error="Invalid request").model_dump())

    @app.exception_handler(Exception)
    async def server_error(request: Request, exc: Exception):
        logger.exception("Server error on %s %s", request.method, request.url.path)
        return JSONResponse(status_code=500, content=ErrorResponse(error="Internal server error").model_dump())

    return app


app = create_app()
