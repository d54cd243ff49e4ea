import time
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from pymongo.errors import DuplicateKeyError, PyMongoError


from app.core.config import settings
from app.router import router
from app.database.session_mongo import (
    connect_to_mongo,
    close_mongo_connection,
    ensure_indexes,
    mongo_manager,
)
from app.database.blob_storage import (
    connect_blob_storage,
    verify_containers,
    close_blob_service_client,
)
from app.utils.exception_utils import DetailedHTTPException
from app.utils.seed import seed_super_admin
from app.utils.logger_utils import get_logger
from app.middlewares.exception_handler import (
    custom_http_exception_handler,
    request_validation_exception_handler,
    duplicate_key_exception_handler,
    pymongo_exception_handler,
    unhandled_exception_handler,
)


logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage FastAPI application lifecycle events.

    Args:
        app (FastAPI): The FastAPI application instance.
    """
    logger.info("Starting up...")

    # Establish storage connections
    await connect_to_mongo()
    connect_blob_storage()
    await verify_containers()
    await ensure_indexes(mongo_manager.db)

    logger.info("MongoDB connected, indexes ensured and blob containers verified.")

    await seed_super_admin(mongo_manager.db)
    logger.info("Startup complete.")

    yield

    logger.info("Shutting down...")
    await close_blob_service_client()
    await close_mongo_connection()
    logger.info("Shutdown complete.")


app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.PROJECT_VERSION,
    description=settings.PROJECT_DESCRIPTION,
    lifespan=lifespan,
)


# Custom exception handlers
app.add_exception_handler(DetailedHTTPException, custom_http_exception_handler)
app.add_exception_handler(RequestValidationError, request_validation_exception_handler)
app.add_exception_handler(DuplicateKeyError, duplicate_key_exception_handler)
app.add_exception_handler(PyMongoError, pymongo_exception_handler)
app.add_exception_handler(Exception, unhandled_exception_handler)


# CORS setup
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """
    Middleware to log incoming request details and processing time.

    Args:
        request (Request): Incoming HTTP request
        call_next (callable): Next handler in the chain

    Returns:
        Response: HTTP response from next handler
    """
    start_time = time.time()

    response = await call_next(request)

    process_time = time.time() - start_time

    logger.info(
        f"Method: {request.method} | "
        f"URL: {request.url} | "
        f"Status: {response.status_code} | "
        f"Process Time: {process_time:.4f}s"
    )
    return response


# Register main router
app.include_router(router, prefix=settings.API_STR)


@app.get("/")
def read_root():
    """
    Root endpoint returning a welcome message.

    Returns:
        dict: Welcome message with project name.
    """
    return {"message": f"Welcome to {settings.PROJECT_NAME}"}
