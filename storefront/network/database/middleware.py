from loguru import logger
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.types import ASGIApp

from storefront.network.database.session import db


class HTTPSessionManagerMiddleware(BaseHTTPMiddleware):
    """
    One transaction per request. Anything that fails (an exception or a
    4xx/5xx response) rolls back every write made during the request, so a
    denied grant or a rejected order never leaves partial rows behind.
    """

    def __init__(self, app: ASGIApp, commit_on_success: bool = True):
        super().__init__(app)
        self.commit_on_success = commit_on_success

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint):
        with db(commit_on_success=self.commit_on_success):
            response = await call_next(request)
            if response.status_code >= 400:
                logger.debug(f'rolling back {request.method} {request.url.path} ({response.status_code})')
                db.session.rollback()

        return response
