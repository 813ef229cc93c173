from contextlib import asynccontextmanager
from typing import Callable, Optional
import time

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from catalog_service.api.error_handlers import register_exception_handlers
from catalog_service.api.routes import health, orders, products
from catalog_service.core.config import get_settings, load_env_file
from catalog_service.core.exceptions import StoreUnavailableError
from catalog_service.core.logging import configure_logging, get_logger, log_data, set_correlation_id
from catalog_service.infrastructure.database.mongodb.client import MongoDBClient
from catalog_service.infrastructure.repositories import ProductRepository


# Load environment variables and configure logging early
load_env_file()
configure_logging()
logger = get_logger(__name__)


def build_db_client() -> MongoDBClient:
    settings = get_settings()
    return MongoDBClient(
        connection_uri=settings.MONGODB_URI,
        database_name=settings.MONGODB_DATABASE,
        pool_size=settings.DATABASE_POOL_SIZE,
        timeout_ms=settings.DATABASE_TIMEOUT_MS
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler for startup and shutdown events.

    The database client is created once and shared through ``app.state``.
    An unreachable database does not prevent startup; requests fail with
    503 until it comes back.
    """
    settings = get_settings()
    logger.info(f"Starting {settings.SERVICE_NAME} service")

    db_client = getattr(app.state, "db_client", None) or build_db_client()
    app.state.db_client = db_client
    try:
        db_client.connect()
        ProductRepository.ensure_indexes(db_client, settings.PRODUCTS_COLLECTION)
    except StoreUnavailableError as e:
        logger.error(f"Database unavailable at startup: {e.detail}")

    yield

    logger.info(f"Shutting down {settings.SERVICE_NAME} service")
    db_client.close()


def create_application(db_client: Optional[MongoDBClient] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        db_client: Client to use instead of one built from settings

    Returns:
        FastAPI: Configured FastAPI application instance
    """
    settings = get_settings()

    app = FastAPI(
        title=f"{settings.SERVICE_NAME} API",
        description="Product catalog and order fulfillment service",
        version=settings.VERSION,
        openapi_url=f"{settings.API_PREFIX}/openapi.json",
        docs_url=f"{settings.API_PREFIX}/docs",
        lifespan=lifespan,
        debug=settings.DEBUG
    )
    if db_client is not None:
        app.state.db_client = db_client

    configure_middleware(app)
    register_exception_handlers(app)
    register_routers(app)

    return app


def configure_middleware(app: FastAPI) -> None:
    """
    Configure middleware components for the FastAPI application.

    Args:
        app: FastAPI application instance
    """
    settings = get_settings()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.BACKEND_CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def add_correlation_id(request: Request, call_next: Callable):
        correlation_id = set_correlation_id(request.headers.get("X-Correlation-ID"))
        start_time = time.time()

        response = await call_next(request)

        process_time = time.time() - start_time
        response.headers["X-Correlation-ID"] = correlation_id
        response.headers["X-Process-Time"] = str(process_time)
        logger.info(
            "Request completed",
            extra=log_data(
                request_path=request.url.path,
                method=request.method,
                status_code=response.status_code,
                process_time_ms=round(process_time * 1000, 2)
            )
        )
        return response


def register_routers(app: FastAPI) -> None:
    """
    Register API routers with the FastAPI application.

    Args:
        app: FastAPI application instance
    """
    settings = get_settings()

    app.include_router(health.router)
    app.include_router(products.router, prefix=settings.API_PREFIX)
    app.include_router(orders.router, prefix=settings.API_PREFIX)


app = create_application()


def run() -> None:
    """Serve the application with uvicorn."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "catalog_service.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG
    )


if __name__ == "__main__":
    run()
