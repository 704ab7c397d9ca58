"""
FastAPI application factory.
Creates the app with CORS and router registration.
Swagger UI available at /docs, ReDoc at /redoc.
"""
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from supply_orders import __version__, config
from supply_orders.utils.logger import get_logger


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown logic for the FastAPI app."""
    logger = get_logger()
    logger.info(f"Starting Supply Order API on port {config.API_PORT}", component="API")
    if not config.GOOGLE_SHEET_ID:
        logger.warning("GOOGLE_SHEET_ID is not set; workbook calls will fail", component="API")
    logger.info(f"Swagger UI: http://localhost:{config.API_PORT}/docs", component="API")

    yield

    logger.info("Shutting down API server", component="API")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="Supply Order API",
        description=(
            "REST API for the Supply Order System - catalog, carts, "
            "per-supplier order submission, order history and receiving."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.API_CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["Content-Disposition"],
    )

    from supply_orders.api.routes.cart_routes import router as cart_router
    from supply_orders.api.routes.catalog_routes import router as catalog_router
    from supply_orders.api.routes.health_routes import router as health_router
    from supply_orders.api.routes.order_routes import router as order_router
    from supply_orders.api.routes.receiving_routes import router as receiving_router

    app.include_router(health_router, prefix="/health", tags=["Health"])
    app.include_router(catalog_router, prefix="/catalog", tags=["Catalog"])
    app.include_router(cart_router, prefix="/carts", tags=["Carts"])
    app.include_router(order_router, prefix="/orders", tags=["Orders"])
    app.include_router(receiving_router, prefix="/receiving", tags=["Receiving"])

    @app.get("/", tags=["Root"])
    async def root():
        """API root - points at the docs."""
        return {
            "service": "Supply Order API",
            "version": __version__,
            "docs": "/docs",
            "redoc": "/redoc",
            "health": "/health",
        }

    return app
