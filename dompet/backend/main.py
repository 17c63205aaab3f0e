"""
FastAPI Backend for Dompet
Main application file
"""
import logging
from datetime import datetime

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from dompet import __version__
from dompet.config import settings
from dompet.database import BalanceConflictError, DatabaseError, NotFoundError
from dompet.backend.api import (
    auth, accounts, account_transfers, transactions, categories, budgets, debts,
    investments, reminders, savings_goals, recurring, split_bills, tags, reports
)

logging.basicConfig(
    level=getattr(logging, settings.log_level, logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

SERVER_ERROR_MESSAGE = "Terjadi kesalahan server"

# Initialize FastAPI app
app = FastAPI(
    title="Dompet API",
    description="Personal finance tracking API: accounts, transactions, budgets and reports",
    version=__version__
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(auth.router, prefix="/api/auth", tags=["Authentication"])
app.include_router(accounts.router, prefix="/api/accounts", tags=["Accounts"])
app.include_router(account_transfers.router, prefix="/api/account-transfers", tags=["Account Transfers"])
app.include_router(transactions.router, prefix="/api/transactions", tags=["Transactions"])
app.include_router(categories.router, prefix="/api/categories", tags=["Categories"])
app.include_router(budgets.router, prefix="/api/budgets", tags=["Budgets"])
app.include_router(debts.router, prefix="/api/debts", tags=["Debts"])
app.include_router(investments.router, prefix="/api/investments", tags=["Investments"])
app.include_router(reminders.router, prefix="/api/reminders", tags=["Reminders"])
app.include_router(savings_goals.router, prefix="/api/savings-goals", tags=["Savings Goals"])
app.include_router(recurring.router, prefix="/api/recurring-transactions", tags=["Recurring Transactions"])
app.include_router(split_bills.router, prefix="/api/split-bills", tags=["Split Bills"])
app.include_router(tags.router, prefix="/api/tags", tags=["Tags"])
app.include_router(reports.router, prefix="/api/reports", tags=["Reports"])


# ==================== ERROR HANDLERS ====================

@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(status_code=exc.status_code, content={"error": exc.detail}, headers=exc.headers)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Report the first invalid field as a 400"""
    errors = exc.errors()
    message = "Invalid request"
    if errors:
        first = errors[0]
        location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"{location}: {first.get('msg')}" if location else str(first.get("msg"))
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": message})


@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError):
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"error": str(exc)})


@app.exception_handler(BalanceConflictError)
async def balance_conflict_handler(request: Request, exc: BalanceConflictError):
    logger.warning(f"{request.method} {request.url.path}: {exc}")
    return JSONResponse(status_code=status.HTTP_409_CONFLICT, content={"error": str(exc)})


@app.exception_handler(DatabaseError)
async def database_error_handler(request: Request, exc: DatabaseError):
    logger.error(f"{request.method} {request.url.path} failed: {exc}", exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": SERVER_ERROR_MESSAGE}
    )


@app.get("/")
def read_root():
    """Root endpoint"""
    return {
        "message": "Dompet API",
        "version": __version__,
        "docs": "/docs",
        "status": "running"
    }


@app.get("/health")
def health_check():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "timestamp": datetime.now().isoformat(),
    }
