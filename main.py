"""
FastAPI Application - Catalog Service
Products and categories kept in sync through an in-process event bus
"""

# Load environment variables from .env file FIRST before any other imports
from dotenv import load_dotenv
load_dotenv()

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.config import config
from app.core.errors import (
    ErrorResponse,
    error_response_handler,
    http_exception_handler,
    validation_exception_handler,
)
from app.core.logger import logger
from app.core.telemetry import instrument_app
from app.db.mongodb import connect_to_mongo, close_mongo_connection, create_indexes, get_database
from app.api import categories, health, home, products, search
from app.middleware import CorrelationIdMiddleware
from app.services.container import build_container


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    # Startup
    logger.info("Starting Catalog Service...")
    await connect_to_mongo()
    database = await get_database()
    await create_indexes(database)
    app.state.container = build_container(database)

    logger.info(
        "Catalog Service started successfully",
        metadata={
            "service_name": config.service_name,
            "version": config.service_version,
            "environment": config.environment,
            "port": config.port
        }
    )

    yield

    # Shutdown
    logger.info("Shutting down Catalog Service...")
    await app.state.container.event_bus.drain()
    await close_mongo_connection()


def create_app(lifespan_handler=lifespan) -> FastAPI:
    """Build the FastAPI application with routers, middleware and error handlers"""
    application = FastAPI(
        title="Catalog Service",
        description="Product and category catalog with cross-collection search",
        version=config.service_version,
        lifespan=lifespan_handler
    )

    instrument_app(application)

    application.add_exception_handler(ErrorResponse, error_response_handler)
    application.add_exception_handler(StarletteHTTPException, http_exception_handler)
    application.add_exception_handler(RequestValidationError, validation_exception_handler)

    application.add_middleware(CorrelationIdMiddleware)

    application.include_router(home.router, tags=["home"])
    application.include_router(health.router, tags=["health"])
    application.include_router(categories.router, prefix="/categories", tags=["categories"])
    application.include_router(products.router, prefix="/product", tags=["products"])
    application.include_router(search.router, prefix="/search", tags=["search"])

    return application


app = create_app()


if __name__ == "__main__":
    import uvicorn

    logger.info(
        f"Starting {config.service_name} on port {config.port}",
        metadata={
            "service_name": config.service_name,
            "version": config.service_version,
            "environment": config.environment,
            "port": config.port
        }
    )

    uvicorn.run(
        "main:app",
        host=config.host,
        port=config.port,
        reload=config.environment == "development"
    )
