from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from shortlink_app.schemas.url import (
    BatchCreateRequest,
    CreateUrlRequest,
    RegistrySummary,
    URLResponse,
    UrlStats,
)
from shortlink_app.services.url_service import URLService
from shortlink_app.dependencies import get_url_service

router = APIRouter(prefix="/urls", tags=["urls"])
# Kept outside /urls so it cannot shadow a short code
summary_router = APIRouter(tags=["urls"])


@router.post("/", response_model=URLResponse, status_code=status.HTTP_201_CREATED)
def create_short_url(
    url_data: CreateUrlRequest,
    url_service: URLService = Depends(get_url_service)
):
    """Create a new short URL"""
    return URLResponse.from_record(url_service.create_short_url(url_data))


@router.post("/batch", response_model=List[URLResponse], status_code=status.HTTP_201_CREATED)
def create_multiple_urls(
    batch: BatchCreateRequest,
    url_service: URLService = Depends(get_url_service)
):
    """Create several short URLs; items that succeed stay created even if others fail"""
    urls = url_service.create_multiple_urls(batch.urls)
    return [URLResponse.from_record(url) for url in urls]


@router.get("/", response_model=List[URLResponse])
def list_urls(url_service: URLService = Depends(get_url_service)):
    """All URLs with expiry evaluated now"""
    return [URLResponse.from_record(url) for url in url_service.get_all_urls()]


@router.delete("/expired")
def clear_expired_urls(url_service: URLService = Depends(get_url_service)):
    """Purge every expired URL"""
    return {"removed": url_service.clear_expired_urls()}


@router.get("/{short_code}", response_model=URLResponse)
def get_url_info(
    short_code: str,
    url_service: URLService = Depends(get_url_service)
):
    """Get information about a short URL"""
    url = url_service.get_url_by_short_code(short_code)
    if not url:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Short URL not found"
        )
    return URLResponse.from_record(url)


@router.get("/{short_code}/stats", response_model=UrlStats)
def get_url_stats(
    short_code: str,
    url_service: URLService = Depends(get_url_service)
):
    """Get click statistics for a short URL"""
    stats = url_service.get_url_stats(short_code)
    if not stats:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Short URL not found"
        )
    return stats


@router.delete("/{url_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_url(
    url_id: str,
    url_service: URLService = Depends(get_url_service)
):
    """Delete a URL by id (deleting an unknown id is not an error)"""
    url_service.delete_url(url_id)


@summary_router.get("/summary", response_model=RegistrySummary)
def get_summary(url_service: URLService = Depends(get_url_service)):
    """Totals across all URLs"""
    return url_service.get_summary()
