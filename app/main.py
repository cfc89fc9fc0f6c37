from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse
from contextlib import asynccontextmanager
from app.routers import score

# Import logging and middleware
from app.utils.logging_config import configure_for_environment, get_logger
from app.middleware.error_handlers import (
    ExceptionHandlerMiddleware,
    RequestLoggingMiddleware,
    PerformanceMiddleware,
    validation_exception_handler,
    http_exception_handler,
)
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from app.models.response import HealthStatus
from app.models.settings import load_settings

# Configure logging first
configure_for_environment()
logger = get_logger(__name__)

VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan context manager"""
    logger.info("Resume Screener API starting up...")

    # Invalid settings should stop the service here rather than fail every request
    app.state.settings = load_settings()
    logger.info(f"Screening settings: {app.state.settings.model_dump()}")

    logger.info("Resume Screener API startup completed")

    yield

    logger.info("Resume Screener API shutting down...")


app = FastAPI(title="Resume Screener API", version=VERSION, lifespan=lifespan)

# Same error envelope for errors FastAPI answers itself
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(StarletteHTTPException, http_exception_handler)

# Add middleware in order (LIFO - Last In, First Out)
# Exception handler should be the outermost middleware
app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(PerformanceMiddleware, slow_request_threshold=5.0)
app.add_middleware(ExceptionHandlerMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/", response_model=HealthStatus)
@app.head("/")
async def root():
    """Service banner"""
    logger.debug("Root endpoint accessed")
    return HealthStatus(message="Welcome to the Resume Screener API", version=VERSION, status="ok")


@app.get("/health", response_class=PlainTextResponse)
@app.head("/health", response_class=PlainTextResponse)
async def health_check():
    """Health probe - handles both GET and HEAD requests"""
    return "OK"


app.include_router(score.router, prefix="/api", tags=["score"])

logger.info("Resume Screener API initialized successfully")
