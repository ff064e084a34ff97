"""Application factory: wires settings, logging, Mongo, the list cache and the routers."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI

from pinstore.api.errors import register_error_handlers
from pinstore.api.health import router as health_router
from pinstore.api.middleware import CatchAllExceptionMiddleware, HandlerTimeoutMiddleware
from pinstore.app.logging import setup_logging
from pinstore.app.settings import Settings, get_settings
from pinstore.cache import ListCache
from pinstore.db.mongo import ClientFactory, MongoConnectionManager
from pinstore.files import FileMetadataService
from pinstore.files import router as files_router
from pinstore.proxy import UploadProxy
from pinstore.proxy import router as proxy_router

logger = logging.getLogger(__name__)


def create_app(
    settings: Settings | None = None,
    *,
    mongo_client_factory: ClientFactory | None = None,
    upstream_transport: httpx.AsyncBaseTransport | None = None,
    list_cache: ListCache | None = None,
    configure_logging: bool = True,
) -> FastAPI:
    settings = settings or get_settings()
    if configure_logging:
        setup_logging(settings.log_level, settings.log_format)

    mongo_kwargs = {"server_selection_timeout_ms": settings.mongodb_server_selection_timeout_ms}
    if mongo_client_factory is not None:
        mongo_kwargs["client_factory"] = mongo_client_factory
    mongo = MongoConnectionManager(settings.mongodb_uri, settings.mongodb_db, **mongo_kwargs)

    @asynccontextmanager
    async def lifespan(_app: FastAPI):
        try:
            yield
        finally:
            await mongo.close()

    app = FastAPI(title=settings.app_name, lifespan=lifespan)

    app.state.settings = settings
    app.state.mongo = mongo
    app.state.file_service = FileMetadataService(
        mongo, list_cache or ListCache(ttl_seconds=settings.list_cache_ttl_seconds)
    )
    app.state.upload_proxy = UploadProxy(
        settings.webhash_api_url,
        settings.webhash_api_key,
        timeout_seconds=settings.webhash_timeout_seconds,
        transport=upstream_transport,
    )

    app.add_middleware(CatchAllExceptionMiddleware)
    app.add_middleware(
        HandlerTimeoutMiddleware,
        timeout_seconds=settings.metadata_route_timeout_seconds,
        path_timeouts={"/api/proxy-upload": settings.proxy_route_timeout_seconds},
    )
    register_error_handlers(app)

    app.include_router(health_router)
    app.include_router(proxy_router)
    app.include_router(files_router)

    logger.debug("Application %s created", settings.app_name)
    return app
