# client.py
"""HTTP side of the menu-bar widget, kept free of Cocoa imports."""

import logging

import httpx

from home_indicator.config import API_URL
from home_indicator.indicator import ERROR_PREFIX, NO_DATA_LABEL

logger = logging.getLogger("home_indicator.client")

ROUTES = f"{API_URL}/api/routes"
REFRESH = f"{API_URL}/api/refresh"


def fetch(url, method="GET"):
    try:
        r = httpx.request(method, url, timeout=5)
        r.raise_for_status()
        return {"ok": True, "json": r.json()}
    except (httpx.HTTPError, ValueError) as e:
        # ValueError: the body was not JSON
        logger.warning("fetch error: %s %s", url, e)
        return {"ok": False, "error": str(e)}


def menu_state(result):
    """Title and menu entries for a fetch result."""
    if not result.get("ok"):
        return f"{ERROR_PREFIX}{result.get('error', '')}", []
    j = result.get("json") or {}
    title = j.get("label") or NO_DATA_LABEL
    routes = j.get("routes") or []
    return title, [str(r) for r in routes]
