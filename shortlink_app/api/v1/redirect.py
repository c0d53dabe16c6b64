import logging

from fastapi import APIRouter, Depends, HTTPException, status, Request
from fastapi.responses import RedirectResponse
from shortlink_app.services.url_service import URLService
from shortlink_app.dependencies import get_url_service

router = APIRouter(tags=["redirect"])
logger = logging.getLogger(__name__)


@router.get("/{short_code}")
def redirect_to_original_url(
    short_code: str,
    request: Request,
    url_service: URLService = Depends(get_url_service)
):
    """
    Redirect to the original URL.
    
    Flow (order matters):
    1. Look up the short code
    2. Refuse expired links
    3. Record the click
    4. Redirect
    """
    logger.info("Attempting to redirect", extra={"short_code": short_code})

    url = url_service.get_url_by_short_code(short_code)
    if not url:
        logger.warning("Short URL not found", extra={"short_code": short_code})
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Short URL not found"
        )

    if url.is_expired:
        logger.warning("Attempted to access expired URL", extra={"short_code": short_code})
        raise HTTPException(
            status_code=status.HTTP_410_GONE,
            detail="This short URL has expired"
        )

    url_service.track_click(
        short_code,
        source=request.headers.get("referer") or "direct",
        user_agent=request.headers.get("user-agent", "unknown"),
    )

    return RedirectResponse(url=url.original_url, status_code=status.HTTP_302_FOUND)
