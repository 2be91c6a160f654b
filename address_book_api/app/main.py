"""
Main entrypoint for the Address Book API.

This module assembles the FastAPI application: it validates settings,
sets up logging, builds the stores and services, registers the error
handlers and includes the API router.  ``create_app`` does the work.
The module also exposes ``app``, built from the process settings on
first access, so uvicorn can serve it directly::

    uvicorn address_book_api.app.main:app

or use the factory::

    uvicorn address_book_api.app.main:create_app --factory --reload

Collaborators that talk to external systems (Redis and the email
backend) can be passed to ``create_app`` explicitly, which is how the
test suite runs the whole application without network access.
"""

import logging
from datetime import timedelta
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from .api.router import router as api_router
from .core.config import Settings, settings as default_settings
from .core.db import init_db
from .core.errors import AddressBookError
from .core.logging_config import setup_logging
from .core.security import TokenService
from .repositories.contact_repository import build_contact_repository
from .repositories.credential_repository import CredentialRepository
from .services.auth_service import AuthService
from .services.cache_service import RedisCacheService, build_redis_client
from .services.contact_service import ContactService
from .services.email_service import EmailService, build_email_service
from .services.notification_service import NotificationListener, NotificationPublisher


def create_app(
    config: Optional[Settings] = None,
    redis_client=None,
    email_service: Optional[EmailService] = None,
) -> FastAPI:
    """Create and configure a FastAPI application.

    Parameters
    ----------
    config : Optional[Settings]
        Settings to use.  Defaults to the process-wide ``settings``.
        They are validated here, so a missing secret or SMTP setting
        stops the process before it serves a request.
    redis_client : optional
        Client used for both the cache and the notification queues.
        Defaults to a client built from ``redis_url``.
    email_service : Optional[EmailService]
        Sender for password reset emails.  Defaults to the backend
        named by ``email_backend``.

    Returns
    -------
    FastAPI
        A configured FastAPI application instance.
    """
    config = (config or default_settings).validate()
    # Initialise logging before anything else so that the setup below
    # can log.
    setup_logging(config.log_level, config.log_file or None)
    logger = logging.getLogger(__name__)

    app = FastAPI(title=config.project_name, version=config.api_version, debug=config.debug)

    if redis_client is not None:
        listener_client = redis_client
    else:
        redis_client = build_redis_client(config)
        listener_client = build_redis_client(config, blocking=True)
    # Events are only published while listeners drain the queues.
    publisher = NotificationPublisher(redis_client) if config.notifications_enabled else None
    token_service = TokenService(config)

    app.state.settings = config
    app.state.token_service = token_service
    app.state.cache = RedisCacheService(redis_client, timedelta(seconds=config.cache_ttl_seconds))
    app.state.auth_service = AuthService(
        users=CredentialRepository(config.database_url),
        tokens=token_service,
        email_service=email_service or build_email_service(config),
        publisher=publisher,
        reset_token_ttl=timedelta(minutes=config.reset_token_expire_minutes),
    )
    app.state.contact_service = ContactService(build_contact_repository(config), publisher)
    app.state.listeners = []

    @app.exception_handler(AddressBookError)
    async def address_book_error_handler(request: Request, exc: AddressBookError) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={"success": False, "message": exc.message},
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={
                "success": False,
                "message": "Invalid request payload",
                "errors": jsonable_encoder(exc.errors()),
            },
        )

    app.include_router(api_router, prefix="/api")

    @app.on_event("startup")
    async def startup_event() -> None:
        # Apply migrations at startup.  This creates the database file
        # if it does not exist and brings the schema up to date.
        init_db(config.database_url)
        logger.info("Contact store: %s", config.contact_store)
        if config.notifications_enabled:
            for queue_name in config.queue_names:
                listener = NotificationListener(listener_client, queue_name)
                listener.start()
                app.state.listeners.append(listener)

    @app.on_event("shutdown")
    async def shutdown_event() -> None:
        for listener in app.state.listeners:
            listener.stop()
        app.state.listeners.clear()

    return app


def __getattr__(name: str):
    # Built on first access; importing the module needs no SECRET_KEY.
    if name == "app":
        application = create_app()
        globals()["app"] = application
        return application
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
