import logging
from datetime import datetime, timezone

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.conf.config import settings
from src.conf.logging import configure_logging
from src.database.db import Database
from src.middleware.errors import register_exception_handlers
from src.routes import contacts

configure_logging(settings.log_level)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Contact Book API",
    description="API for managing a contact list.",
    version="0.1.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.cors_origin],
    allow_methods=["GET", "POST", "PUT", "DELETE"],
    allow_headers=["Content-Type", "Authorization"],
)

app.include_router(contacts.router)
register_exception_handlers(app)


@app.on_event("startup")
async def startup_event():
    """
        Startup event handler:
        - Builds the storage handle from settings
        - Verifies the database is reachable
        - Creates the tables via SQLAlchemy

        Raises:
            RuntimeError: If the database cannot be reached.
        """
    logger.info("Initializing database connection...")
    database = Database(
        settings.database_url,
        pool_size=settings.db_pool_size,
        pool_timeout=settings.db_pool_timeout,
        pool_recycle=settings.db_pool_recycle,
        ssl=settings.is_production,
    )
    await database.initialize()
    await database.create_schema()
    app.state.database = database
    logger.info(f"Environment: {settings.app_env}")
    logger.info(f"CORS origin: {settings.cors_origin}")
    logger.info("Application startup complete.")


@app.on_event("shutdown")
async def shutdown_event():
    """
        Shutdown event handler: closes the database pool if one was opened.
        """
    database = getattr(app.state, "database", None)
    if database is not None:
        await database.dispose()
        del app.state.database
    logger.info("Graceful shutdown completed")


@app.get("/health")
async def health_check():
    """
        Liveness endpoint.

        Returns:
            dict: Status and the current UTC time.
        """
    return {"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()}


if __name__ == "__main__":
    uvicorn.run(app, host=settings.host, port=settings.port)
