"""
General Ledger Engine, FastAPI application.

This is the entry point for the application.
All routers are registered here.
"""

from fastapi import FastAPI

from general_ledger.config import get_settings
from general_ledger.logging_config import configure_logging
from general_ledger.api.health import router as health_router
from general_ledger.api.coa import router as coa_router
from general_ledger.api.vouchers import router as vouchers_router
from general_ledger.api.parties import router as parties_router
from general_ledger.api.reports import router as reports_router

settings = get_settings()
configure_logging()

app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Double-entry general ledger with derived balances and reports",
)

# Register routers
app.include_router(health_router)
app.include_router(coa_router)
app.include_router(vouchers_router)
app.include_router(parties_router)
app.include_router(reports_router)
