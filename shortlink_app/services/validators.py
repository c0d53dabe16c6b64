"""
Pure validation predicates.

Exposed on their own so callers can check input before submitting it.
"""

import re

from pydantic import AnyUrl, TypeAdapter, ValidationError


SHORT_CODE_PATTERN = re.compile(r"[A-Za-z0-9]{3,20}")

_url_adapter = TypeAdapter(AnyUrl)


def validate_url(value: str) -> bool:
    """True if value parses as an absolute URL (scheme required)"""
    if not isinstance(value, str) or not value.strip():
        return False
    try:
        _url_adapter.validate_python(value)
    except ValidationError:
        return False
    return True


def validate_short_code(value: str) -> bool:
    """True for 3-20 ASCII letters and digits, nothing else"""
    if not isinstance(value, str):
        return False
    return SHORT_CODE_PATTERN.fullmatch(value) is not None
