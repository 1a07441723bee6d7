import logging
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.responses import Err
from api.routers import appointments, support, system
from core import config
from core.database import StorageError, database

# Configure logging
logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%H:%M:%S",
)
logging.getLogger("pymongo").setLevel(logging.WARNING)
logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title="CareConnect API",
    description="Support requests and appointment booking for the CareConnect site",
    version="1.0.0"
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials="*" not in config.CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include Routers
app.include_router(system.router)
app.include_router(support.router)
app.include_router(appointments.router)

# Startup event
@app.on_event("startup")
async def startup_event():
    """Connect to MongoDB; keep serving in degraded mode if it is down"""
    try:
        await database.connect()
    except StorageError as e:
        logger.error(f"Starting without database: {e}")
    logger.info("API server started successfully")

# Shutdown event
@app.on_event("shutdown")
async def shutdown_event():
    """Close database connection on shutdown"""
    await database.close()
    logger.info("API server shutdown")

# Error handlers
@app.exception_handler(RequestValidationError)
async def request_validation_handler(request, exc):
    errors = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        errors.append(f"{location}: {error['msg']}" if location else error["msg"])
    return Err(status=400, message="Invalid request body", errors=errors).render()

@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request, exc):
    message = "Resource not found" if exc.status_code == 404 else str(exc.detail)
    return Err(status=exc.status_code, message=message).render()

@app.exception_handler(500)
async def internal_error_handler(request, exc):
    logger.error(f"Internal server error: {exc}")
    return Err(status=500, message="Internal server error", error=str(exc)).render()

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "api.main:app",
        host=config.API_HOST,
        port=config.API_PORT,
        reload=True,
        log_level=config.LOG_LEVEL.lower()
    )
