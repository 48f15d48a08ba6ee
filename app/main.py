from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
import logging

# Import database components
from app.database.database import engine, Base

# Import middleware
from app.common.middleware import TenantMiddleware, SecurityHeadersMiddleware

# Import routers
from app.modules.auth.router import auth_router, team_router
from app.modules.accounts.router import accounts_router
from app.modules.bank_accounts.router import bank_accounts_router
from app.modules.transactions.router import transactions_router
from app.modules.contacts.router import customers_router, vendors_router
from app.modules.invoices.router import router as invoices_router
from app.modules.inventory.router import products_router
from app.modules.pos.routers import pos_router
from app.modules.payroll.router import payroll_router
from app.modules.projects.router import projects_router
from app.modules.reports.routers import (
    financial_router as financial_reports_router,
    pos_reports_router,
    history_router as reports_history_router
)
from app.modules.assistant.router import assistant_router

# Import models for table creation
import app.modules.auth.models
import app.modules.accounts.models
import app.modules.bank_accounts.models
import app.modules.projects.models
import app.modules.transactions.models
import app.modules.contacts.models
import app.modules.invoices.models
import app.modules.inventory.models
import app.modules.pos.models
import app.modules.payroll.models
import app.modules.reports.models
import app.modules.assistant.models

from app.core.config import settings

# Configure logging
logging.basicConfig(
    level=logging.INFO if settings.ENVIRONMENT == "production" else logging.DEBUG,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

# FastAPI app
app = FastAPI(
    title="FinTrack API",
    description="Contabilidad, punto de venta y asistente financiero con IA para pequeños negocios",
    version="1.0.0",
    docs_url="/docs" if settings.ENVIRONMENT != "production" else None,
    redoc_url="/redoc" if settings.ENVIRONMENT != "production" else None
)

# Add middleware (order matters!)
app.add_middleware(GZipMiddleware, minimum_size=1000)
app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(TenantMiddleware)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Add your frontend URLs
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(auth_router, prefix="/auth", tags=["Auth"])
app.include_router(team_router)
app.include_router(accounts_router)
app.include_router(bank_accounts_router)
app.include_router(transactions_router)
app.include_router(customers_router)
app.include_router(vendors_router)
app.include_router(invoices_router)
app.include_router(products_router)
app.include_router(pos_router)
app.include_router(payroll_router)
app.include_router(projects_router)
app.include_router(financial_reports_router)
app.include_router(pos_reports_router)
app.include_router(reports_history_router)
app.include_router(assistant_router)

# Create database tables (only for development - use migrations in production)
if settings.ENVIRONMENT == "development":
    Base.metadata.create_all(bind=engine)


@app.get("/")
async def read_root():
    return {
        "message": "FinTrack API is running",
        "version": "1.0.0",
        "environment": settings.ENVIRONMENT
    }


@app.get("/health")
async def health_check():
    return {"status": "healthy", "environment": settings.ENVIRONMENT}


@app.on_event("startup")
async def startup_event():
    logger.info("FinTrack API starting up...")
    logger.info(f"Environment: {settings.ENVIRONMENT}")
    logger.info(f"Debug mode: {settings.DEBUG}")
    logger.info(f"AI assistant enabled: {settings.ai_enabled}")


@app.on_event("shutdown")
async def shutdown_event():
    logger.info("FinTrack API shutting down...")
