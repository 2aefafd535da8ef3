from contextlib import asynccontextmanager

import sentry_sdk
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from loguru import logger
from sentry_sdk.integrations.fastapi import FastApiIntegration
from sentry_sdk.integrations.starlette import StarletteIntegration
from starlette.middleware.cors import CORSMiddleware
from starlette.middleware.errors import ServerErrorMiddleware

from storefront import settings
from storefront.common.exceptions import (
    APIException,
    InternalException,
    api_exception_handler,
    inbound_validation_exception_handler,
    internal_exception_handler,
)
from storefront.common.middleware import HTTPAppContextMiddleware
from storefront.common.request import RequestResponseMiddleware
from storefront.network.database.middleware import HTTPSessionManagerMiddleware
from storefront.network.http.router import api_router

# Polled by the load balancer every few seconds, never worth a trace
UNTRACED_PATHS = frozenset({'/healthcheck/api', '/healthcheck/database'})


def sample_storefront_traces(sampling_context: dict) -> float:
    asgi_scope = sampling_context.get('asgi_scope') or {}
    if asgi_scope.get('path') in UNTRACED_PATHS:
        return 0
    return settings.SENTRY_DEFAULT_SAMPLE_RATE


def configure_sentry() -> None:
    if settings.USE_MOCK_SENTRY_CLIENT:
        return

    sentry_sdk.init(
        dsn=settings.SENTRY_DSN,
        # Access denials and validation failures are expected traffic
        ignore_errors=[APIException],
        environment=settings.ENVIRONMENT,
        integrations=[
            # Both integrations must be instantiated
            StarletteIntegration(),
            FastApiIntegration(),
        ],
        traces_sampler=sample_storefront_traces,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f'{app.title} is open for business')
    if settings.IS_LOCAL:
        logger.info(f'API docs: {settings.HOST}:{settings.BIND_PORT}/docs')
    yield
    logger.info(f'{app.title} closing up')


def add_middleware(app: FastAPI) -> None:
    # Middlewares are inserted(0) so the last one added runs first
    app.add_middleware(HTTPSessionManagerMiddleware, commit_on_success=settings.ATOMIC_REQUESTS)
    app.add_middleware(RequestResponseMiddleware)
    app.add_middleware(HTTPAppContextMiddleware)

    if settings.DEBUG:
        app.add_middleware(ServerErrorMiddleware, debug=True)

    if settings.BACKEND_CORS_ORIGINS:
        # Wallet headers must be allowed through for the storefront checkout
        app.add_middleware(
            CORSMiddleware,
            allow_origins=[str(origin) for origin in settings.BACKEND_CORS_ORIGINS],
            allow_credentials=True,
            allow_methods=settings.CORS_ALLOWED_METHODS,
            allow_headers=settings.CORS_ALLOWED_HEADERS,
        )


def add_exception_handlers(app: FastAPI) -> None:
    app.exception_handler(RequestValidationError)(inbound_validation_exception_handler)
    app.exception_handler(InternalException)(internal_exception_handler)
    app.exception_handler(APIException)(api_exception_handler)


configure_sentry()

server = FastAPI(
    title=settings.API_TITLE,
    description=settings.API_DESCRIPTION,
    version='0.1.0',
    lifespan=lifespan,
    openapi_url=f'{settings.API_PREFIX}/openapi.json' if settings.IS_LOCAL else None,
    docs_url='/docs' if settings.IS_LOCAL else None,
    redoc_url=None,
    generate_unique_id_function=lambda route: route.name,
    redirect_slashes=False,
    separate_input_output_schemas=False,
)
add_middleware(server)
add_exception_handlers(server)
server.include_router(api_router, prefix=settings.API_PREFIX)
