"""
Main FastAPI application entry point.
Sets up the API, middleware, error handlers and routes.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from bank_management.api import accounts, clients, reports, transactions
from bank_management.core.config import settings
from bank_management.core.exceptions import (
    BankingError,
    DniAlreadyExistsError,
    EmailDuplicateError,
    InactiveAccountError,
    InsufficientFundsError,
    InvalidRequestError,
    InvalidStatusError,
    InvalidTransactionError,
    ResourceNotFoundError,
)
from bank_management.core.logging import setup_logging
from bank_management.database import Base, engine
import bank_management.models  # noqa: F401  registers tables on Base.metadata

setup_logging(settings.LOG_LEVEL, settings.LOG_FORMAT, echo_sql=settings.DATABASE_ECHO)

# HTTP status for each domain error
ERROR_STATUS_CODES = {
    ResourceNotFoundError: status.HTTP_404_NOT_FOUND,
    InactiveAccountError: status.HTTP_409_CONFLICT,
    InvalidTransactionError: status.HTTP_409_CONFLICT,
    InsufficientFundsError: status.HTTP_409_CONFLICT,
    DniAlreadyExistsError: status.HTTP_409_CONFLICT,
    EmailDuplicateError: status.HTTP_409_CONFLICT,
    InvalidStatusError: status.HTTP_400_BAD_REQUEST,
    InvalidRequestError: status.HTTP_400_BAD_REQUEST,
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Create database tables
    Base.metadata.create_all(bind=engine)
    yield


# Initialize FastAPI app
app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.VERSION,
    description=settings.DESCRIPTION,
    docs_url="/docs",  # Swagger UI
    redoc_url="/redoc",  # ReDoc UI
    lifespan=lifespan
)

# CORS middleware (allows frontend to call API)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # In production, specify exact origins
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(BankingError)
async def banking_error_handler(request: Request, exc: BankingError):
    """
    Translate domain errors into JSON responses.
    """
    status_code = ERROR_STATUS_CODES.get(type(exc), status.HTTP_400_BAD_REQUEST)
    return JSONResponse(status_code=status_code, content={"detail": str(exc)})


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    """
    Malformed numbers, dates and enum tokens are bad requests.
    """
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": jsonable_encoder(exc.errors())},
    )


@app.get("/")
def root():
    """
    Root endpoint - health check.
    """
    return {
        "message": "Bank Account Management API",
        "version": settings.VERSION,
        "status": "running",
        "docs": "/docs",
        "endpoints": {
            "accounts": f"{settings.API_V1_PREFIX}/accounts",
            "clients": f"{settings.API_V1_PREFIX}/clients",
            "reports": f"{settings.API_V1_PREFIX}/reports"
        }
    }


@app.get("/health")
def health_check():
    """
    Health check endpoint for monitoring.
    """
    return {
        "status": "healthy"
    }


# Include API routers
app.include_router(accounts.router, prefix=settings.API_V1_PREFIX)
app.include_router(transactions.router, prefix=settings.API_V1_PREFIX)
app.include_router(clients.router, prefix=settings.API_V1_PREFIX)
app.include_router(reports.router, prefix=settings.API_V1_PREFIX)
