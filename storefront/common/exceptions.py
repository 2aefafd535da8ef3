import re
from typing import Any

import sentry_sdk
from fastapi import Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from loguru import logger


class InternalException(Exception):
    """
    All internal exceptions should inherit from this. We are handled
    vaguely publicly
    """

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = 'Internal failure.'
    default_code = 'internal_failure'

    def __init__(self, message: str | None = None, context: dict[Any, Any] | Any = None):
        self.message = message or self.default_detail
        self.context = context or dict()
        super().__init__(self.message)

    def __str__(self) -> str:
        return f'{self.__class__.__name__}({self.message})'

    @property
    def public_detail(self) -> str:
        """
        What callers are allowed to see, server errors never leak their message
        """
        if self.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
            return self.default_detail
        return self.message


class APIException(Exception):
    """
    API view layer exceptions
    """

    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Invalid Request.'
    default_code = 'invalid_request'

    # Match the internal interface message
    def __init__(self, message: str | None = None, code: int | None = None, error_type: str | None = None):
        self.message = message or self.default_detail
        self.code = code or self.status_code
        self.error_type = error_type
        super().__init__(self.message)


async def internal_exception_handler(request: Request, exc: InternalException) -> JSONResponse:
    """
    Service layer exceptions that made it to the view layer
    """
    if exc.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        logger.exception(exc)
        sentry_sdk.capture_exception(exc)
    else:
        logger.info(f'{exc} context={exc.context}')

    return JSONResponse(
        status_code=exc.status_code,
        content=jsonable_encoder({'detail': exc.public_detail, 'error_type': exc.default_code}),
    )


async def api_exception_handler(request: Request, exc: APIException) -> JSONResponse:
    content = {'detail': exc.message}
    if exc.error_type:
        content['error_type'] = exc.error_type
    return JSONResponse(
        status_code=exc.code,
        content=jsonable_encoder(content),
    )


async def inbound_validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """
    This catches pydantic validation errors and is registered at the app level
    """
    details = exc.errors()

    # Group similar failures in sentry, "extra_forbidden:body.0.my_field" -> "extra_forbidden:body.my_field"
    generalized_errors = set()
    for error in details:
        if 'loc' in error:
            loc_path = '.'.join(str(part) for part in error['loc'])
            clean_path = re.sub(r'\.[0-9]+(?=\.|$)', '', loc_path)
            generalized_errors.add(f"{error['type']}:{clean_path}")

    with sentry_sdk.new_scope() as scope:
        if generalized_errors:
            scope.fingerprint = [request.url.path] + sorted(generalized_errors)
        sentry_sdk.capture_exception(exc)

    modified_details = [
        {
            'loc': error['loc'],
            'message': error['msg'],
            'input': error.get('input'),
            'type': error['type'],
        }
        for error in details
    ]
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=jsonable_encoder({'detail': modified_details}),
    )
