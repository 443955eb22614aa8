"""
Main FastAPI application entry point.
Configures and initializes the HOT22 Dashboard API.
"""
from fastapi import FastAPI, Request
from mangum import Mangum
from hot22_dashboard.core.config import settings
from hot22_dashboard.core.exception_handler import register_exception_handlers
from hot22_dashboard.core.logging_setup import configure_logging, get_logger
from hot22_dashboard.api.routes import health_routes, records_routes, upload_routes

configure_logging()
logger = get_logger(__name__)

# Create FastAPI application
app = FastAPI(
    title=settings.api_title,
    version=settings.api_version,
    description="Record browsing and HOT22 file uploads for the airline transactions dashboard",
    root_path=f"/{settings.environment}"
)

# Register exception handlers
register_exception_handlers(app)

# Register routes
app.include_router(health_routes.router)
app.include_router(records_routes.router)
app.include_router(upload_routes.router)

# Middleware to log request paths
@app.middleware("http")
async def log_request(request: Request, call_next):
    logger.info("request", method=request.method, path=request.url.path)
    response = await call_next(request)
    return response

# Lambda handler for AWS
handler = Mangum(app, lifespan="off")


# For local development
if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
