from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request

from storefront.common import context


class HTTPAppContextMiddleware(BaseHTTPMiddleware):
    """
    Every request starts with a fresh application context. Guards fill in
    the user or wallet once the caller is resolved.
    """

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint):
        token = context.initialize(
            user_type=context.AppContextUserType.PUBLIC,
            breadcrumb=f'{request.method} {request.url.path}',
        )
        try:
            return await call_next(request)
        finally:
            context.reset(token)
