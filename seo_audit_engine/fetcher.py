"""
Default network collaborators: page fetch and Google PageSpeed scorecards.

Both are thin httpx wrappers. Page fetch failures abort the audit with a
FetchFailed carrying the failure kind; PageSpeed failures are logged and
degrade to missing scorecards.
"""

import asyncio
import logging
from typing import Any, Dict, List, Optional

import httpx

from .config import AuditSettings
from .errors import FetchFailed, FetchFailureKind, MetricsUnavailable
from .models import ExternalMetrics

logger = logging.getLogger(__name__)

PAGESPEED_ENDPOINT = "https://www.googleapis.com/pagespeedonline/v5/runPagespeed"
PAGESPEED_CATEGORIES = ("performance", "accessibility", "best-practices", "seo")
STRATEGIES = ("desktop", "mobile")


def make_client(settings: AuditSettings) -> httpx.AsyncClient:
    return httpx.AsyncClient(
        follow_redirects=True,
        timeout=settings.request_timeout,
        headers={
            "User-Agent": settings.user_agent,
            "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
            "Accept-Language": "pt-BR,pt;q=0.9,en;q=0.8",
        },
    )


def _scheme_candidates(url: str) -> List[str]:
    rest = url.split("://", 1)[1] if "://" in url else url
    return [f"https://{rest}", f"http://{rest}"]


def _status_failure(status_code: int) -> FetchFailureKind:
    if status_code in (401, 403):
        return FetchFailureKind.FORBIDDEN
    if status_code in (404, 410):
        return FetchFailureKind.NOT_FOUND
    return FetchFailureKind.SERVER_ERROR


# ─── Page Fetch ───────────────────────────────────────────────────────


async def fetch_page(url: str, client: httpx.AsyncClient) -> str:
    """
    Fetch the page markup, trying https first and then plain http.

    An HTTP error status stops the attempts immediately since the server
    did answer; transport errors move on to the next scheme. The last
    failure is raised as FetchFailed.
    """
    failure = FetchFailed(FetchFailureKind.UNREACHABLE, url)
    for candidate in _scheme_candidates(url):
        try:
            response = await client.get(candidate)
        except httpx.TimeoutException as e:
            failure = FetchFailed(FetchFailureKind.TIMEOUT, f"{candidate}: {e!r}")
            logger.debug("Timeout fetching %s", candidate)
            continue
        except httpx.HTTPError as e:
            failure = FetchFailed(FetchFailureKind.UNREACHABLE, f"{candidate}: {e!r}")
            logger.debug("Could not reach %s: %s", candidate, e)
            continue

        if response.is_success:
            return response.text
        raise FetchFailed(
            _status_failure(response.status_code),
            f"HTTP {response.status_code} for {candidate}",
        )

    raise failure


# ─── PageSpeed ────────────────────────────────────────────────────────


async def _request_pagespeed(
    url: str, strategy: str, api_key: str, client: httpx.AsyncClient, timeout: float
) -> Dict[str, Any]:
    params = [("url", url), ("strategy", strategy), ("key", api_key)]
    params.extend(("category", category) for category in PAGESPEED_CATEGORIES)
    try:
        response = await client.get(PAGESPEED_ENDPOINT, params=params, timeout=timeout)
    except httpx.HTTPError as e:
        raise MetricsUnavailable(f"PageSpeed {strategy} request failed: {e!r}") from e
    if response.status_code != 200:
        raise MetricsUnavailable(f"PageSpeed {strategy} returned HTTP {response.status_code}")
    try:
        data = response.json()
    except ValueError as e:
        raise MetricsUnavailable(f"PageSpeed {strategy} returned invalid JSON") from e
    if not isinstance(data, dict) or "lighthouseResult" not in data:
        raise MetricsUnavailable(f"PageSpeed {strategy} response has no lighthouseResult")
    return data


async def fetch_pagespeed(
    url: str,
    strategy: str,
    api_key: str,
    client: httpx.AsyncClient,
    timeout: float = 60.0,
) -> Optional[Dict[str, Any]]:
    """One PageSpeed scorecard, or None when it cannot be obtained."""
    try:
        return await _request_pagespeed(url, strategy, api_key, client, timeout)
    except MetricsUnavailable as e:
        logger.warning("%s; continuing without %s metrics", e, strategy)
        return None


async def fetch_external_metrics(
    url: str,
    api_key: str,
    client: httpx.AsyncClient,
    timeout: float = 60.0,
) -> ExternalMetrics:
    """Desktop and mobile scorecards, requested concurrently."""
    desktop, mobile = await asyncio.gather(
        *(fetch_pagespeed(url, strategy, api_key, client, timeout) for strategy in STRATEGIES)
    )
    return ExternalMetrics(desktop=desktop, mobile=mobile)
