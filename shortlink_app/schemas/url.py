from pydantic import BaseModel, Field, ConfigDict
from pydantic.alias_generators import to_camel
from typing import Dict, List, Optional
from datetime import datetime


class CamelModel(BaseModel):
    """Serializes with camelCase keys, accepts either spelling on input"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ClickRecord(CamelModel):
    """One recorded visit to a short link"""

    id: str
    timestamp: datetime
    source: str = Field("direct", description="Referrer, or 'direct'")
    user_agent: str = ""
    # Sampled from a fixed list, not a real geolocation
    location: str
    # Placeholder only, no real address is captured
    ip_address: str = "xxx.xxx.xxx.xxx"


class UrlRecord(CamelModel):
    """
    A shortened URL as it lives in the record store.

    `is_expired` is derived from the clock every time records are read and
    is excluded from serialization, so it is never written to storage.
    """

    id: str
    original_url: str
    short_code: str
    short_url: str
    created_at: datetime
    expires_at: datetime
    validity_minutes: int
    clicks: List[ClickRecord] = Field(default_factory=list)
    is_expired: bool = Field(False, exclude=True)


class CreateUrlRequest(CamelModel):
    original_url: str = Field(..., description="The original URL to be shortened")
    validity_minutes: Optional[int] = Field(
        None, gt=0, description="Minutes until the link expires (default 30)"
    )
    custom_short_code: Optional[str] = Field(
        None, description="Preferred short code, 3-20 alphanumeric characters"
    )


class URLResponse(UrlRecord):
    """API view of a record, including the read-time expiry flag"""

    is_expired: bool = False

    @classmethod
    def from_record(cls, record: UrlRecord) -> "URLResponse":
        return cls(**record.model_dump(), is_expired=record.is_expired)


class BatchCreateRequest(BaseModel):
    urls: List[CreateUrlRequest] = Field(..., min_length=1)


class UrlStats(CamelModel):
    short_code: str
    original_url: str
    total_clicks: int
    is_expired: bool
    created_at: datetime
    expires_at: datetime
    last_clicked_at: Optional[datetime] = None
    clicks_by_source: Dict[str, int] = Field(default_factory=dict)
    clicks_by_location: Dict[str, int] = Field(default_factory=dict)


class RegistrySummary(CamelModel):
    total_urls: int
    active_urls: int
    expired_urls: int
    total_clicks: int
