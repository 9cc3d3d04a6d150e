import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.gzip import GZipMiddleware

from app.api.v1.routes import api_router
from app.core.config import settings
from app.db.session import create_db_and_tables
from app.middleware import ErrorHandlingMiddleware, LoggingMiddleware
from app.utils.error_handling import APIError
from app.utils.response_formatter import response_formatter

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    create_db_and_tables()
    logger.info(f"{settings.PROJECT_NAME} started ({settings.ENV})")
    yield


# Create FastAPI app
app = FastAPI(
    title=settings.PROJECT_NAME,
    description="""
    API for drilling survey ingestion and directional analytics

    ## Import

    `POST /surveys/import` accepts CSV, TXT, LAS, XLSX and XLS survey exports.
    Delimiter, header row and layout are detected automatically; every
    accepted station comes back with a quality check (pass, warning or fail).

    ## Analytics

    Dogleg severity, survey quality score, magnetic and gravity consistency
    and recommendations for a survey sequence, plus slide planning
    calculators under `/directional`.
    """,
    version="1.0.0",
    root_path=settings.API_V1_STR,
    docs_url="/docs" if settings.DEBUG else None,  # Disable docs in production
    redoc_url="/redoc" if settings.DEBUG else None,  # Disable redoc in production
    lifespan=lifespan,
)

# Add CORS middleware with settings from config
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.BACKEND_CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Accept"],
    expose_headers=["X-Process-Time"],
)

# Add GZip compression middleware
app.add_middleware(GZipMiddleware, minimum_size=1000)

app.add_middleware(ErrorHandlingMiddleware)
app.add_middleware(LoggingMiddleware)


@app.exception_handler(APIError)
async def api_error_handler(request: Request, exc: APIError):
    logger.warning(f"{request.method} {request.url.path} - {exc.error_code}: {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content=response_formatter.error(
            message=exc.message,
            error_code=exc.error_code,
            details=exc.details,
        ),
    )


app.include_router(api_router)


@app.get("/")
def read_root():
    return {"message": f"Welcome to the {settings.PROJECT_NAME}"}


@app.get("/health")
def health_check():
    """Health check endpoint for monitoring"""
    return {"status": "healthy"}
