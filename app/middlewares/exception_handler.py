from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pymongo.errors import DuplicateKeyError, PyMongoError


from app.utils.exception_utils import DetailedHTTPException, fields_from_pydantic
from app.utils.logger_utils import get_logger


logger = get_logger(__name__)


async def custom_http_exception_handler(request: Request, exc: DetailedHTTPException):
    """
    Handles custom HTTP exceptions with structured response and logging.

    Args:
        request: Incoming HTTP request
        exc: Detailed HTTP exception instance
    """
    logger.warning(
        f"HTTPException: {exc.status_code} {exc.kind} {exc.detail} for {request.method} {request.url}"
    )
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail, "kind": exc.kind, "fields": exc.fields},
        headers=getattr(exc, "headers", None),
    )


async def request_validation_exception_handler(
    request: Request, exc: RequestValidationError
):
    """
    Renders FastAPI request validation failures as 400 ValidationError responses.

    Args:
        request: Incoming HTTP request
        exc: RequestValidationError instance
    """
    fields = fields_from_pydantic(exc.errors())
    logger.warning(
        f"RequestValidationError: {[f['field'] for f in fields]} for {request.method} {request.url}"
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": "Validation failed", "kind": "ValidationError", "fields": fields},
    )


async def duplicate_key_exception_handler(request: Request, exc: DuplicateKeyError):
    """
    Handles unique index violations that escaped service-level translation.

    Args:
        request: Incoming HTTP request
        exc: DuplicateKeyError instance
    """
    logger.warning(f"DuplicateKeyError: {exc} for {request.method} {request.url}")
    return JSONResponse(
        status_code=status.HTTP_409_CONFLICT,
        content={
            "detail": "This entry already exists or violates a constraint.",
            "kind": "DuplicateError",
            "fields": [],
        },
    )


async def pymongo_exception_handler(request: Request, exc: PyMongoError):
    """
    Handles database failures that escaped service-level translation.

    Args:
        request: Incoming HTTP request
        exc: PyMongoError instance
    """
    logger.error(f"PyMongoError: {exc} for {request.method} {request.url}")
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={
            "detail": "Database is unavailable",
            "kind": "RepositoryError",
            "fields": [],
        },
    )


async def unhandled_exception_handler(request: Request, exc: Exception):
    """
    Handles unexpected server exceptions with generic error response and logging.

    Args:
        request: Incoming HTTP request
        exc: Exception instance
    """
    logger.error(
        f"UnhandledException: {exc} for {request.method} {request.url}", exc_info=True
    )
    return JSONResponse(
        status_code=500,
        content={
            "detail": "An internal server error occurred.",
            "kind": "InternalError",
            "fields": [],
        },
    )
