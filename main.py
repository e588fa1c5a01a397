import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Response
from fastapi.middleware.cors import CORSMiddleware
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST, REGISTRY

from visitor_training.core.db.mongodb import connect_to_mongo, close_mongo_connection
from visitor_training.api.v1.api import api_router
from visitor_training.api.errors import register_exception_handlers
from visitor_training.core.setting import config

from visitor_training.core.monitoring.prometheus_middleware import PrometheusMiddleware

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    await connect_to_mongo()
    yield
    # Shutdown
    await close_mongo_connection()

app = FastAPI(
    title=config.PROJECT_NAME,
    version="0.1.0",
    openapi_url=f"{config.API_V1_STR}/openapi.json",
    lifespan=lifespan
)

# ============================================================================
# CORS Middleware
# ============================================================================
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ============================================================================
# Prometheus Middleware (Add BEFORE routes)
# ============================================================================
app.middleware("http")(PrometheusMiddleware())

# ============================================================================
# Error Handlers
# ============================================================================
register_exception_handlers(app)

# ============================================================================
# Metrics Endpoint (Add BEFORE api_router to avoid conflicts)
# ============================================================================
@app.get("/metrics")
async def metrics():
    """
    Prometheus metrics endpoint
    """
    return Response(
        content=generate_latest(REGISTRY),
        media_type=CONTENT_TYPE_LATEST
    )

# ============================================================================
# Health Check Endpoint
# ============================================================================
@app.get("/health")
async def health_check():
    missing = config.missing_store_credentials()
    return {
        "status": "healthy" if not missing else "degraded",
        "service": config.PROJECT_NAME,
        "store_configured": not missing,
    }

# ============================================================================
# API Router
# ============================================================================
app.include_router(api_router, prefix=config.API_V1_STR)

# ============================================================================
# Root Endpoint
# ============================================================================
@app.get("/")
async def root():
    return {
        "message": "Visitor Safety Training API",
        "docs": "/redoc",
        "metrics": "/metrics",
        "health": "/health"
    }
