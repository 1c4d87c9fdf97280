# tcommerce/main.py
from contextlib import asynccontextmanager
from datetime import datetime, timezone
import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

from tcommerce.core.config import Settings, get_settings
from tcommerce.core.error_handlers import register_exception_handlers
from tcommerce.core.rate_limit import build_limiter, rate_limit_exceeded_handler
from tcommerce.database import create_db_and_tables, engine

# Import models so SQLModel metadata is populated before create_all()
from tcommerce.models import user as _user_models  # noqa: F401
from tcommerce.models import category as _category_models  # noqa: F401
from tcommerce.models import product as _product_models  # noqa: F401
from tcommerce.models import cart as _cart_models  # noqa: F401

# Routers
from tcommerce.routers.auth import router as auth_router
from tcommerce.routers.categories import router as categories_router
from tcommerce.routers.products import router as products_router
from tcommerce.routers.cart import router as cart_router

logger = logging.getLogger("tcommerce")


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    # Keep SQL echo out of INFO logs unless DEBUG is on
    if not settings.DEBUG:
        logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Startup:
      - Verify DB connectivity and create tables.

    Shutdown:
      - Dispose the connection pool.
    """
    logger.info("Startup: connecting to database...")
    try:
        create_db_and_tables()
        logger.info("Startup: DB connection OK, tables verified.")
    except Exception:
        logger.exception("Startup: DB connection FAILED")
        raise
    yield
    engine.dispose()
    logger.info("Shutdown: connection pool disposed.")


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings)

    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.VERSION,
        lifespan=lifespan,
    )

    # --- Rate limiting (per client identity, storage from settings) ---
    app.state.limiter = build_limiter(settings)
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
    app.add_middleware(SlowAPIMiddleware)

    # --- CORS configuration ---
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "PATCH", "OPTIONS"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        client = request.client.host if request.client else "-"
        logger.info("%s %s - %s", request.method, request.url.path, client)
        response = await call_next(request)
        response.headers["X-API-Version"] = settings.VERSION
        return response

    register_exception_handlers(app)

    # Versioned API prefix, e.g. /api/v1
    app.include_router(auth_router, prefix=settings.API_V1_STR)
    app.include_router(categories_router, prefix=settings.API_V1_STR)
    app.include_router(products_router, prefix=settings.API_V1_STR)
    app.include_router(cart_router, prefix=settings.API_V1_STR)

    @app.get(f"{settings.API_V1_STR}/health")
    def health():
        """Health check endpoint."""
        return {
            "success": True,
            "message": f"{settings.PROJECT_NAME} is running",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "version": settings.VERSION,
            "environment": settings.ENVIRONMENT,
        }

    @app.get("/")
    def root():
        return {
            "success": True,
            "message": f"Welcome to {settings.PROJECT_NAME}",
            "version": settings.VERSION,
            "documentation": "/docs",
            "health": f"{settings.API_V1_STR}/health",
        }

    return app


app = create_app()
