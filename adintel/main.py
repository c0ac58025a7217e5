"""Main FastAPI application."""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from adintel.database import Base, engine
from adintel.api.routes import router
from adintel.config import settings
from adintel.scheduler import DailyImportScheduler
import logging

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title="Ad Intelligence",
    description="Creative import, analysis and diversity insights for ad accounts",
    version="1.0.0"
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routes
app.include_router(router)

# Initialize scheduler
scheduler = DailyImportScheduler(hour=settings.import_hour)


@app.on_event("startup")
async def startup_event():
    """Initialize database and start scheduler on startup."""
    Base.metadata.create_all(bind=engine)
    if settings.enable_scheduler:
        scheduler.start()
    logger.info("Application started")


@app.on_event("shutdown")
async def shutdown_event():
    """Cleanup on shutdown."""
    if scheduler.running:
        scheduler.shutdown()
    logger.info("Application stopped")


@app.get("/")
async def root():
    """API info."""
    return {
        "message": "Ad Intelligence API",
        "version": "1.0.0",
        "docs": "/docs",
        "endpoints": {
            "creatives": "GET/POST /creatives - List or add creatives",
            "analyze": "POST /creatives/{id}/analyze - Analyze a creative",
            "meta_import": "POST /meta/import-ads - Import ads from Meta",
            "metrics": "GET /dashboard/metrics - Diversity score, top insight, performance",
            "breakdown": "GET /dashboard/diversity-breakdown - Diversity score detail",
            "health": "GET /health - Health check"
        }
    }
