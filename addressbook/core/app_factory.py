from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .config import Settings
from .container import ApplicationContainer
from .logging import configure_logging
from ..application.services.address_book_service import AddressBookService
from ..application.services.auth_service import AuthService
from ..domain.exceptions import StoreError
from ..domain.ports.cache import CacheBackend
from ..infrastructure.cache.memory_cache import InMemoryCache
from ..infrastructure.cache.redis_cache import RedisCache
from ..infrastructure.messaging.redis_queue import NotificationConsumer, NotificationPublisher
from ..infrastructure.persistence.sqlite import SQLitePersistence
from ..infrastructure.repositories.contact_repository import ContactRepository
from ..infrastructure.repositories.user_repository import UserRepository
from ..presentation.api.routers import address_book as address_book_router
from ..presentation.api.routers import user as user_router
from ..services.email_service import EmailService
from ..services.token_service import TokenService

logger = logging.getLogger(__name__)


def create_application(
    settings: Optional[Settings] = None,
    container: Optional[ApplicationContainer] = None,
) -> FastAPI:
    settings = settings or (container.settings if container else Settings())

    app = FastAPI(title="Address Book API", lifespan=_create_lifespan(settings, container))

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(address_book_router.router)
    app.include_router(user_router.router)
    _register_exception_handlers(app)

    @app.get("/health")
    async def health() -> Dict[str, Any]:
        current: ApplicationContainer = app.state.container  # type: ignore[attr-defined]
        return {"ok": True, "cache": current.cache.ping()}

    return app


def build_container(settings: Settings) -> ApplicationContainer:
    persistence = SQLitePersistence(settings.database_path)
    cache = _build_cache(settings)
    notifier = NotificationPublisher.from_url(settings.redis_url, settings.notification_queue)
    consumer = None
    if settings.notification_consumer_enabled:
        consumer = NotificationConsumer.from_url(settings.redis_url, settings.notification_queue)

    contact_repository = ContactRepository(persistence, cache, cache_ttl=settings.cache_ttl)
    user_repository = UserRepository(persistence, reset_token_ttl=settings.reset_token_ttl)
    email_service = EmailService(
        smtp_host=settings.smtp_host,
        smtp_port=settings.smtp_port,
        smtp_username=settings.smtp_username,
        smtp_password=settings.smtp_password,
        from_email=settings.smtp_from_email,
    )
    if settings.jwt_secret == "change-me":
        logger.warning("JWT_SECRET is using the default value. Configure a secure secret in production.")
    token_service = TokenService(
        jwt_secret=settings.jwt_secret,
        issuer=settings.jwt_issuer,
        audience=settings.jwt_audience,
        jwt_expiration_minutes=settings.jwt_expiration_minutes,
    )

    return ApplicationContainer(
        settings=settings,
        persistence=persistence,
        cache=cache,
        contact_repository=contact_repository,
        user_repository=user_repository,
        address_book_service=AddressBookService(contact_repository, notifier),
        auth_service=AuthService(
            user_repository,
            email_service,
            frontend_base_url=settings.frontend_base_url,
            notifier=notifier,
        ),
        token_service=token_service,
        email_service=email_service,
        notifier=notifier,
        notification_consumer=consumer,
    )


def _build_cache(settings: Settings) -> CacheBackend:
    if settings.cache_backend == "memory":
        logger.info("Using in-memory contact cache.")
        return InMemoryCache()
    return RedisCache(settings.redis_url)


def _register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        errors = []
        for error in exc.errors():
            field = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
            message = str(error.get("msg", "")).removeprefix("Value error, ")
            errors.append(f"{field}: {message}" if field else message)
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"detail": "Validation failed", "errors": errors},
        )

    @app.exception_handler(StoreError)
    async def store_exception_handler(request: Request, exc: StoreError) -> JSONResponse:
        logger.error("Store failure on %s %s: %s", request.method, request.url.path, exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": "An internal error occurred"},
        )


def _create_lifespan(settings: Settings, prebuilt: Optional[ApplicationContainer]):
    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        configure_logging()
        container = prebuilt or build_container(settings)
        app.state.container = container  # type: ignore[attr-defined]

        consumer = container.notification_consumer
        if consumer:
            await consumer.start()

        try:
            yield
        finally:
            if consumer:
                await consumer.stop()
            if prebuilt is None:
                container.persistence.close()
                if isinstance(container.notifier, NotificationPublisher):
                    container.notifier.close()
                if isinstance(container.cache, RedisCache):
                    container.cache.close()

    return lifespan
