# nilhub/main.py
from contextlib import asynccontextmanager
import logging

from fastapi.middleware.cors import CORSMiddleware
from fastapi import FastAPI

from nilhub.core.config import get_settings
from nilhub.core.error_handler import install_error_handlers
from nilhub.database import create_db_and_tables

# Import models so SQLModel metadata is populated before create_all()
from nilhub.models import account as _account_models  # noqa: F401
from nilhub.models import store as _store_models  # noqa: F401
from nilhub.models import product as _product_models  # noqa: F401
from nilhub.models import password_reset as _password_reset_models  # noqa: F401

# Routers
from nilhub.routers.auth import router as auth_router
from nilhub.routers.password_reset import router as password_reset_router
from nilhub.routers.products import router as products_router
from nilhub.routers.stores import router as stores_router
from nilhub.routers.upload import router as upload_router
from nilhub.routers.stats import router as stats_router
from nilhub.routers.admin import router as admin_router

settings = get_settings()

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("uvicorn")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Startup:
      - Verify DB connectivity and create tables.

    Shutdown:
      - No special cleanup needed for sync engine.
    """
    logger.info("Startup: connecting to the database (%s)...", settings.ENVIRONMENT)
    try:
        create_db_and_tables()
        logger.info("Startup: DB connection OK, tables verified.")
    except Exception as e:
        logger.error("Startup: DB connection FAILED: %s", e)
        raise
    yield


app = FastAPI(
    title=settings.PROJECT_NAME or "NilHub API",
    version="1.0.0",
    lifespan=lifespan,
)


# --- CORS configuration ---
origins = [
    settings.FRONTEND_URL,
    "http://localhost:3000",
    "http://127.0.0.1:3000",
    "http://localhost:5173",
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=list(dict.fromkeys(origins)),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Uniform {"success": false, "error": ...} envelope for every failure
install_error_handlers(app, detailed_errors=settings.detailed_errors)

app.include_router(auth_router, prefix=settings.API_PREFIX)
app.include_router(password_reset_router, prefix=settings.API_PREFIX)
app.include_router(products_router, prefix=settings.API_PREFIX)
app.include_router(stores_router, prefix=settings.API_PREFIX)
app.include_router(upload_router, prefix=settings.API_PREFIX)
app.include_router(stats_router, prefix=settings.API_PREFIX)
app.include_router(admin_router, prefix=settings.API_PREFIX)


@app.get("/")
def root():
    """Health check endpoint."""
    return {"success": True, "message": "NilHub API", "version": app.version}


@app.get(f"{settings.API_PREFIX}/health")
def health():
    return {"success": True, "status": "ok", "environment": settings.ENVIRONMENT}
