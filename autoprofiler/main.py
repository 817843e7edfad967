import logging
from fastapi import FastAPI

from autoprofiler.core.config import settings
from autoprofiler.controllers import profile_controller

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)

# Create FastAPI app
app = FastAPI(title=settings.APP_TITLE)

# Include routers
app.include_router(profile_controller.router)


@app.get("/")
def root():
    """Root endpoint"""
    return {
        "message": "SQL AutoProfiler API",
        "docs": "/docs",
        "provider": settings.LLM_PROVIDER,
        "dialect": settings.SQL_DIALECT
    }
