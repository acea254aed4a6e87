"""
FastAPI application assembly.

Loads `.env`, configures logging from LOG_LEVEL, installs CORS, and mounts
every domain router. The database schema is managed by Alembic migrations.
"""
import logging
import os

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

load_dotenv()

# Configure logging
LOG_LEVEL_NAME = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_LEVEL = getattr(logging, LOG_LEVEL_NAME, logging.INFO)
logging.basicConfig(level=LOG_LEVEL)
logger = logging.getLogger(__name__)
logger.setLevel(LOG_LEVEL)
logger.info("app_startup: log_level=%s", LOG_LEVEL_NAME)

from cashnib.api.users import router as users_router
from cashnib.api.transactions import router as transactions_router
from cashnib.api.budgets import router as budgets_router
from cashnib.api.goals import router as goals_router
from cashnib.api.investments import router as investments_router
from cashnib.api.notifications import router as notifications_router
from cashnib.api.settings import router as settings_router
from cashnib.api.reports import router as reports_router
from cashnib.api.audits import router as audits_router
from cashnib.api.support import router as support_router
from cashnib.utils.runtime import cors_origins, dev_mode_active
from cashnib.utils.feature_flags import disabled_features, get_feature_flags

# Fail fast on a misconfigured DEV_MODE rather than on the first request
if dev_mode_active():
    logger.warning("DEV_MODE active: unauthenticated requests act as the development user")

app = FastAPI(
    title="CashNib Personal Finance Service",
    description="API for transactions, budgets, goals, investments and notifications.",
    version="1.0.0",
)

# Avoid implicit trailing-slash redirects for predictable URLs
app.router.redirect_slashes = False

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(support_router)
app.include_router(users_router)
app.include_router(transactions_router)
app.include_router(budgets_router)
app.include_router(goals_router)
app.include_router(investments_router)
app.include_router(notifications_router)
app.include_router(settings_router)
app.include_router(reports_router)
app.include_router(audits_router)

logger.info("feature_flags: %s", dict(get_feature_flags()))
if disabled_features():
    logger.warning("Disabled features: %s", ", ".join(disabled_features()))
