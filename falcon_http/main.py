"""
Falcon HTTP - FastAPI Application Entry Point

A local service backing a desktop HTTP request tool: projects of saved
requests, environments of substitutable variables, and a send pipeline.
"""

from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import SQLAlchemyError

from .config import AppConfig
from .database import create_db_engine, create_session_factory, init_db
from .exceptions import PersistenceError, register_exception_handlers
from .logger import LOGGER, configure_logging
from .routers import environments, execute, projects, requests
from .services.dispatch import SendController
from .services.persistence import DebouncedWriter, StoreRepository, UnavailableRepository
from .services.store import Store


def load_store(repository: StoreRepository) -> Store:
    """Persisted store, or a store with one default project."""
    try:
        store = repository.load()
    except PersistenceError as e:
        LOGGER.error("DB: %s", e)
        store = None
    return store if store is not None else Store.with_defaults()


def create_app(
    config: AppConfig | None = None,
    transport: httpx.AsyncBaseTransport | None = None
) -> FastAPI:
    """
    Build the application for a configuration.

    Args:
        config: Settings, read from the environment when omitted
        transport: Optional httpx transport for outgoing requests
    """
    config = config or AppConfig.from_env()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan handler for startup and shutdown events."""
        configure_logging(config.log_level)
        # Startup: open the database and load the store. An unusable data
        # directory leaves the service running on an unsaved store.
        engine = None
        try:
            engine = create_db_engine(config)
            init_db(engine)
        except (OSError, SQLAlchemyError) as e:
            LOGGER.error("DB: unable to open %s: %s", config.database_path, e)
            repository = UnavailableRepository(str(e))
        else:
            repository = StoreRepository(create_session_factory(engine))
        store = load_store(repository)

        app.state.config = config
        app.state.store = store
        app.state.writer = DebouncedWriter(store, repository, delay=config.persist_delay)
        app.state.sender = SendController(timeout=config.request_timeout, transport=transport)
        yield
        # Shutdown: write pending edits
        await app.state.writer.flush()
        if engine is not None:
            engine.dispose()

    app = FastAPI(
        title="Falcon HTTP",
        description="Projects, environments and request dispatch for the Falcon HTTP client",
        version="1.0.0",
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan
    )

    # The desktop shell talks to the service from a local origin
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    @app.get("/")
    async def root():
        """Root endpoint returning API information."""
        return {
            "name": "Falcon HTTP",
            "version": "1.0.0",
            "docs": "/docs"
        }

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {"status": "healthy"}

    # Register routers
    app.include_router(projects.router)
    app.include_router(environments.router)
    app.include_router(requests.router)
    app.include_router(execute.router)

    return app
