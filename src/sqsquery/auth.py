import base64
import hashlib
import hmac
import urllib.parse as urllib
from datetime import datetime, timezone
from typing import Dict

from .exceptions import SigningError

SIGNATURE_VERSION = "2"
SIGNATURE_METHOD = "HmacSHA256"


def quote(value: str) -> str:
    return urllib.quote(value, safe="-_.~")


def get_canonical_querystring(params: Dict[str, str]) -> str:
    """
    Sorted `key=value&...` with RFC 3986 escaping. The same string is the
    request body, so the service sees exactly what was signed.
    """
    querystring_parts = []
    for k in sorted(params):
        querystring_parts.append(f"{quote(k)}={quote(params[k])}")

    return "&".join(querystring_parts)


def get_string_to_sign(
    *, endpoint_url: str, method: str, params: Dict[str, str]
) -> str:
    try:
        url = urllib.urlsplit(endpoint_url)
    except ValueError as e:
        raise SigningError(endpoint_url, str(e)) from e
    if not url.scheme or not url.hostname:
        raise SigningError(endpoint_url, "endpoint has no scheme or host")

    string_to_sign_parts = [
        method.upper(),
        url.netloc.lower(),
        url.path or "/",
        get_canonical_querystring(params),
    ]

    return "\n".join(string_to_sign_parts)


def get_signature(
    *, endpoint_url: str, method: str, secret_key: str, params: Dict[str, str]
) -> str:
    string_to_sign = get_string_to_sign(
        endpoint_url=endpoint_url, method=method, params=params
    )
    digest = hmac.new(
        secret_key.encode("utf-8"), string_to_sign.encode("utf-8"), hashlib.sha256
    ).digest()

    return base64.b64encode(digest).decode("ascii")


def get_timestamp(now: datetime | None = None) -> str:
    now = now or datetime.now(timezone.utc)
    return now.strftime("%Y-%m-%dT%H:%M:%SZ")
