from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from shortlink_app.config import settings
from shortlink_app.api.v1 import urls, logs, redirect
from shortlink_app.dependencies import get_log_handler
from shortlink_app.exceptions import (
    BatchCreateError,
    InvalidShortCodeError,
    InvalidUrlError,
    ShortCodeTakenError,
    ShortenerError,
)
from shortlink_app.schemas.url import URLResponse

# Configure logging (and load the persisted application log) at start
get_log_handler()

# Create FastAPI app
app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="A short link registry built with FastAPI",
    debug=settings.debug,
    # Every single-segment path belongs to short codes
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json"
)


ERROR_STATUS = {
    InvalidUrlError: status.HTTP_400_BAD_REQUEST,
    InvalidShortCodeError: status.HTTP_400_BAD_REQUEST,
    ShortCodeTakenError: status.HTTP_409_CONFLICT,
}


@app.exception_handler(BatchCreateError)
async def batch_create_error_handler(request: Request, exc: BatchCreateError):
    """Report every failed item, plus what was created anyway"""
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "detail": exc.detail,
            "failures": [
                {"position": position, "reason": reason}
                for position, reason in exc.failures
            ],
            "created": [
                URLResponse.from_record(url).model_dump(mode="json", by_alias=True)
                for url in exc.created
            ],
        },
    )


@app.exception_handler(ShortenerError)
async def shortener_error_handler(request: Request, exc: ShortenerError):
    """Domain errors carry user-facing messages; pass them through verbatim"""
    status_code = ERROR_STATUS.get(type(exc), status.HTTP_500_INTERNAL_SERVER_ERROR)
    return JSONResponse(status_code=status_code, content={"detail": exc.detail})


@app.get("/")
def read_root():
    """Root endpoint with API information"""
    return {
        "message": f"Welcome to {settings.app_name}",
        "version": settings.app_version,
        "docs": "/api/docs",
        "redoc": "/api/redoc"
    }


@app.get("/api/health")
def health_check():
    """Health check endpoint"""
    return {"status": "healthy", "environment": settings.environment}




######## Include routers
app.include_router(urls.router, prefix="/api/v1")
app.include_router(urls.summary_router, prefix="/api/v1")
app.include_router(logs.router, prefix="/api/v1")
app.include_router(redirect.router)
