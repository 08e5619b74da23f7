"""
charmemo - FastAPI application
"""

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
from typing import Optional
import logging

from charmemo import __version__
from charmemo.core.config import Settings, get_settings
from charmemo.core.data_service import SqlDataClient
from charmemo.core.database import create_engine_from_settings, create_session_factory, create_tables
from charmemo.core.errors import ErrorKind, MemoError, TransportError
from charmemo.core.port import DataClient

from charmemo.api.characters import router as characters_router
from charmemo.api.memo_items import router as memo_items_router
from charmemo.api.memo_contents import router as memo_contents_router
from charmemo.api.categories import router as categories_router

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

ERROR_STATUS = {
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.VERSION_CONFLICT: status.HTTP_409_CONFLICT,
    ErrorKind.VALIDATION: status.HTTP_422_UNPROCESSABLE_ENTITY,
    ErrorKind.TRANSPORT: status.HTTP_503_SERVICE_UNAVAILABLE,
}


async def memo_error_handler(request: Request, exc: MemoError):
    """Typed service errors -> HTTP status"""
    status_code = ERROR_STATUS[exc.kind]
    if isinstance(exc, TransportError) and exc.unauthorized:
        status_code = status.HTTP_401_UNAUTHORIZED
    if status_code >= 500:
        logger.error(f"[api] {request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(status_code=status_code, content={"detail": exc.message, "kind": exc.kind.value})


def create_app(settings: Optional[Settings] = None, data_client: Optional[DataClient] = None) -> FastAPI:
    """Build the app; data_client replaces the SQL data service (tests)"""
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(f"charmemo {__version__} starting ({settings.ENVIRONMENT})")
        engine = None
        if data_client is None:
            engine = create_engine_from_settings(settings)
            if settings.ENVIRONMENT == "development":
                await create_tables(engine)
                logger.info("database tables ensured")
            app.state.data_client = SqlDataClient(create_session_factory(engine))
        yield
        if engine is not None:
            await engine.dispose()
        logger.info("charmemo stopped")

    app = FastAPI(
        title="charmemo API",
        description="Per-user notes about game characters",
        version=__version__,
        docs_url="/docs" if settings.ENVIRONMENT == "development" else None,
        redoc_url="/redoc" if settings.ENVIRONMENT == "development" else None,
        lifespan=lifespan,
    )
    app.state.settings = settings
    if data_client is not None:
        app.state.data_client = data_client

    if settings.ENVIRONMENT == "development":
        app.add_middleware(
            CORSMiddleware,
            allow_origins=["http://localhost:3000", "http://127.0.0.1:3000"],
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    app.add_exception_handler(MemoError, memo_error_handler)

    app.include_router(characters_router, prefix="/characters", tags=["characters"])
    app.include_router(memo_items_router, prefix="/memo-items", tags=["memo items"])
    app.include_router(memo_contents_router, prefix="/memo-contents", tags=["memo contents"])
    app.include_router(categories_router, prefix="/categories", tags=["categories"])

    @app.get("/health")
    async def health_check():
        """Health check"""
        return {"status": "healthy", "environment": settings.ENVIRONMENT, "version": __version__}

    return app
