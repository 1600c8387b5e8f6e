"""Request context - client IP, visitor location and device fingerprint.

The gateway sits behind Cloudflare: the client address and the visitor
location arrive as CF-* headers.
"""

import hashlib
import logging
from typing import Mapping, Optional

from fastapi import Request

from riskgate.data.schemas.location import Location

logger = logging.getLogger(__name__)


def client_ip(request: Request) -> str:
    """CF-Connecting-IP, then the first X-Forwarded-For hop, then the peer."""
    cf_ip = request.headers.get("cf-connecting-ip")
    if cf_ip:
        return cf_ip.strip()
    xff = request.headers.get("x-forwarded-for")
    if xff:
        return xff.split(",")[0].strip()
    if request.client:
        return request.client.host
    return "unknown"


def _parse_coordinate(raw: Optional[str]) -> Optional[float]:
    if raw is None:
        return None
    try:
        return float(raw)
    except ValueError:
        return None


def location_from_headers(headers: Mapping[str, str]) -> Optional[Location]:
    """Visitor location, or None when coordinates are absent or invalid."""
    latitude = _parse_coordinate(headers.get("cf-iplatitude"))
    longitude = _parse_coordinate(headers.get("cf-iplongitude"))
    if latitude is None or longitude is None:
        return None

    try:
        return Location(
            country=headers.get("cf-ipcountry") or "Unknown",
            city=headers.get("cf-ipcity") or "Unknown",
            latitude=latitude,
            longitude=longitude,
            timezone=headers.get("cf-timezone") or "UTC",
        )
    except ValueError:
        logger.warning(
            "Ignoring out-of-range visitor coordinates",
            extra={"latitude": latitude, "longitude": longitude},
        )
        return None


def device_fingerprint(user_agent: str, ip_address: str) -> str:
    """SHA-256 hex digest of "<user-agent>:<ip>"."""
    return hashlib.sha256(f"{user_agent}:{ip_address}".encode("utf-8")).hexdigest()
