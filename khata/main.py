from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from khata.api.api_v1.api import api_router as api_v1_router
from khata.core.config import settings
from khata.core.logging_config import setup_logging, get_logger
from khata.db.init_db import ensure_tables_exist
from khata.services.scheduler import init_scheduler, shutdown_scheduler

setup_logging(settings.LOG_LEVEL, settings.LOG_DIR)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup / shutdown"""
    logger.info("🚀 Starting up...")

    await ensure_tables_exist()
    logger.info("📊 Database tables ready")

    init_scheduler()
    yield
    logger.info("🛑 Shutting down...")
    shutdown_scheduler()

app = FastAPI(
    title=settings.PROJECT_NAME,
    openapi_url=f"{settings.API_V1_STR}/openapi.json",
    description="Khata ledger - cylinders, daily sales, salaries, suppliers, vegetables and chicken",
    lifespan=lifespan
)

if settings.BACKEND_CORS_ORIGINS:
    logger.info(f"CORS origins: {settings.BACKEND_CORS_ORIGINS}")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[str(origin) for origin in settings.BACKEND_CORS_ORIGINS],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

logger.info(f"Registering API routes under {settings.API_V1_STR}")
app.include_router(api_v1_router, prefix=settings.API_V1_STR)


@app.get("/")
async def root():
    return {"message": settings.PROJECT_NAME}


@app.get("/health")
async def health():
    return {"status": "ok"}
