"""
ICS Proxy Module
日历代理模块

Provides a proxy endpoint for loading external calendar (.ics) files.
Bypasses CORS restrictions by fetching calendars through the backend server.

Features:
- Upstream status passthrough on HTTP errors
- Transport errors converted to 500 responses
- Optional host allow-list
"""

from .routes_fastapi import router, get_http_client, close_http_client

__all__ = ["router", "get_http_client", "close_http_client"]
