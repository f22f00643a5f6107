"""
ICS Proxy API Routes

Provides endpoints for:
- Proxying external calendar files (bypasses CORS)

The browser-side calendar renderer cannot fetch most public .ics feeds
directly, so it asks this endpoint to fetch them and relays the text.
"""

import os
import logging
from typing import Optional
from urllib.parse import urlparse

import httpx
from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response, PlainTextResponse

logger = logging.getLogger(__name__)

# ============================================
# Configuration
# ============================================

# Comma separated host names. Empty means any host may be proxied.
ALLOWED_HOSTS = {
    host.strip().lower()
    for host in os.getenv("ICS_PROXY_ALLOWED_HOSTS", "").split(",")
    if host.strip()
}

# When disabled, transport error details are only written to the log
EXPOSE_ERRORS = os.getenv("ICS_PROXY_EXPOSE_ERRORS", "true").lower() in ("true", "1", "yes")

CALENDAR_CONTENT_TYPE = "text/calendar; charset=utf-8"

# HTTP client for fetching calendars, created on first use
_http_client: Optional[httpx.AsyncClient] = None


def get_http_client() -> httpx.AsyncClient:
    """Return the shared upstream client (FastAPI dependency)."""
    global _http_client
    if _http_client is None:
        _http_client = httpx.AsyncClient(
            follow_redirects=True,
            headers={"Accept": "text/calendar, text/plain;q=0.9, */*;q=0.8"},
        )
    return _http_client


async def close_http_client() -> None:
    """Close the shared upstream client, if one was created."""
    global _http_client
    if _http_client is not None:
        await _http_client.aclose()
        _http_client = None


def _is_host_allowed(url: str) -> bool:
    if not ALLOWED_HOSTS:
        return True
    host = (urlparse(url).hostname or "").lower()
    return host in ALLOWED_HOSTS


# ============================================
# Router
# ============================================

router = APIRouter(prefix="/api/fetch-ics", tags=["ICS Proxy"])


# ============================================
# Endpoints
# ============================================

@router.get("")
@router.get("/")
async def fetch_ics(
    url: Optional[str] = Query(None, description="URL of the calendar to proxy"),
    http_client: httpx.AsyncClient = Depends(get_http_client),
):
    """
    Proxy an external ICS calendar.

    This endpoint:
    1. Rejects the request if no target URL is given
    2. Fetches the calendar from the target URL
    3. Mirrors the upstream status if the upstream request failed
    4. Returns the calendar text with a text/calendar content type

    Example:
        GET /api/fetch-ics?url=https://example.com/cal.ics
    """
    if not url:
        return PlainTextResponse("Missing URL parameter", status_code=400)

    if not _is_host_allowed(url):
        logger.warning(f"[IcsProxy] Host not allowed: {url[:80]}")
        return PlainTextResponse("URL host not allowed", status_code=403)

    try:
        logger.info(f"[IcsProxy] Fetching: {url[:80]}...")
        response = await http_client.get(url)

        if not response.is_success:
            logger.warning(
                f"[IcsProxy] Upstream error {response.status_code} {response.reason_phrase}: {url[:60]}..."
            )
            return PlainTextResponse(
                f"Failed to fetch ICS: {response.reason_phrase}",
                status_code=response.status_code,
            )

        # Decoded as UTF-8 regardless of the upstream charset, leading BOM dropped
        text = response.content.decode("utf-8-sig", errors="replace")
    except Exception as e:
        logger.error(f"[IcsProxy] Fetch error for {url[:60]}...: {type(e).__name__}: {e}")
        detail = str(e) if EXPOSE_ERRORS else "upstream request failed"
        return PlainTextResponse(f"Error fetching ICS: {detail}", status_code=500)

    logger.info(f"[IcsProxy] Proxied: {url[:60]}... ({len(text)} chars)")

    return Response(
        content=text,
        headers={"Content-Type": CALENDAR_CONTENT_TYPE},
    )
