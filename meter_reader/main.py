"""FastAPI application entry point."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from meter_reader.api.routes import health, readings
from meter_reader.core.config import settings
from meter_reader.core.database import init_db
from meter_reader.core.errors import register_exception_handlers
from meter_reader.core.logging import configure_logging


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan manager."""
    configure_logging()
    init_db()
    yield


app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.VERSION,
    description="Meter reading ingestion with image-based value extraction",
    lifespan=lifespan,
)

register_exception_handlers(app)

app.include_router(health.router)
app.include_router(readings.router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "meter_reader.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
    )
