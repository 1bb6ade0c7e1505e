"""FastAPI application and process entry point."""
import logging
import sys
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import PlainTextResponse
from sqlalchemy.exc import SQLAlchemyError

from app.api.products import create_router
from app.config import ConfigurationError, Settings, get_settings
from app.database import (
    bootstrap_schema,
    create_db_engine,
    create_session_factory,
    verify_connection,
)
from app.services.product_store import ProductStore, SQLProductStore

logger = logging.getLogger(__name__)


def configure_logging(level: str = "INFO", log_file: Optional[str] = None) -> None:
    """Configure root logging for the process."""
    handlers = [logging.StreamHandler()]  # Console output
    if log_file:
        handlers.append(logging.FileHandler(log_file))  # File output

    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=handlers,
        force=True,
    )

    # Set specific log levels for noisy libraries
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


async def bad_request_handler(request: Request, exc: RequestValidationError):
    """Body decoding failures are reported as a plain 400."""
    logger.warning(f"Rejected body for {request.method} {request.url.path}: {exc.errors()}")
    return PlainTextResponse("bad request", status_code=400)


def create_app(store: ProductStore) -> FastAPI:
    """Build the application around an already initialized store."""
    app = FastAPI(
        title="Product Service",
        description="Create and list products stored in PostgreSQL",
        version="0.1.0",
    )
    app.state.store = store
    app.add_exception_handler(RequestValidationError, bad_request_handler)
    app.include_router(create_router())
    return app


def init_store(settings: Settings) -> ProductStore:
    """
    Open the pool, check the database answers and create the table.

    Raises:
        SQLAlchemyError: If the database is unreachable or the bootstrap fails
    """
    engine = create_db_engine(settings)
    try:
        verify_connection(engine)
        bootstrap_schema(engine, timeout=settings.db_bootstrap_timeout)
    except SQLAlchemyError:
        engine.dispose()
        raise
    return SQLProductStore(create_session_factory(engine))


def main() -> None:
    """Initialize then serve. Any failure before serving exits the process."""
    configure_logging()

    try:
        settings = get_settings()
    except ConfigurationError as e:
        logger.critical(str(e))
        sys.exit(1)

    configure_logging(settings.log_level, settings.log_file)

    try:
        store = init_store(settings)
    except SQLAlchemyError as e:
        logger.critical(f"💥 error initializing database: {e}")
        sys.exit(1)

    app = create_app(store)

    logger.info(f"server listening on port {settings.server_port}")
    # uvicorn exits the process itself when the port cannot be bound
    uvicorn.run(app, host="0.0.0.0", port=settings.server_port, log_config=None)
    logger.info("server stopped")


if __name__ == "__main__":
    main()
