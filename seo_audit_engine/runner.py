"""
Audit entry points.

run_audit / arun_audit take an address, fetch the page (and PageSpeed
scorecards when an API key is configured), analyze it and return an
AuditReport. Upstream failures never raise: they come back as a report
with status "failed", a user-facing message and the raw error text.
"""

import asyncio
import functools
import logging
from typing import Awaitable, Callable, Optional

from .analyzer import SEOAnalyzer
from .config import AuditSettings
from .errors import EmptyContent, InvalidUrl
from .extractor import extract_text
from .fetcher import fetch_external_metrics, make_client
from .fetcher import fetch_page as default_fetch_page
from .models import AuditReport, ExternalMetrics, ReportStatus
from .url import normalize_url

logger = logging.getLogger(__name__)

FetchPage = Callable[[str], Awaitable[str]]
StatusCallback = Callable[[ReportStatus], None]


async def arun_audit(
    url: str,
    focus_keyword: Optional[str] = None,
    external_metrics: Optional[ExternalMetrics] = None,
    fetch_page: Optional[FetchPage] = None,
    settings: Optional[AuditSettings] = None,
    on_status: Optional[StatusCallback] = None,
    analyzer: Optional[SEOAnalyzer] = None,
) -> AuditReport:
    """
    Run one audit end to end.

    Args:
        url: Address as typed by the user; normalized before fetching.
        focus_keyword: Optional phrase enabling the keyword_optimization category.
        external_metrics: PageSpeed scorecards. When None and an API key is
            configured, they are fetched with the default collaborator.
        fetch_page: Async callable returning the markup for a URL.
        settings: Defaults to AuditSettings.from_env().
        on_status: Called with each status transition (analyzing, then
            completed or failed).

    Returns:
        AuditReport, completed or failed.
    """
    settings = settings or AuditSettings.from_env()
    analyzer = analyzer or SEOAnalyzer()
    notify = on_status or (lambda status: None)
    target = url

    logger.info("Starting audit for %s", url)
    notify(ReportStatus.ANALYZING)

    try:
        validation = normalize_url(url)
        if not validation.valid:
            raise InvalidUrl(f"Invalid URL {url!r}: {validation.error}")
        target = validation.normalized

        async with make_client(settings) as client:
            fetch = fetch_page or functools.partial(default_fetch_page, client=client)
            html = await fetch(target) or ""

            visible = len(" ".join(extract_text(html)))
            if visible < settings.min_content_length:
                raise EmptyContent(
                    f"Page body too short ({visible} visible characters, "
                    f"minimum {settings.min_content_length})"
                )

            if external_metrics is None and settings.pagespeed_api_key:
                external_metrics = await fetch_external_metrics(
                    target, settings.pagespeed_api_key, client, settings.pagespeed_timeout
                )
    except Exception as e:
        logger.error("Audit failed for %s: %s", url, e, exc_info=True)
        report = analyzer.failed_report(target, e, focus_keyword)
        notify(report.status)
        return report

    report = analyzer.analyze_html(target, html, focus_keyword, external_metrics)
    logger.info(
        "Audit complete for %s. Score: %d/100 (%d errors, %d warnings)",
        target, report.overall_score, len(report.errors), len(report.warnings),
    )
    notify(report.status)
    return report


def run_audit(
    url: str,
    focus_keyword: Optional[str] = None,
    external_metrics: Optional[ExternalMetrics] = None,
    fetch_page: Optional[FetchPage] = None,
    settings: Optional[AuditSettings] = None,
    on_status: Optional[StatusCallback] = None,
) -> AuditReport:
    """Synchronous wrapper around arun_audit."""
    return asyncio.run(arun_audit(
        url,
        focus_keyword=focus_keyword,
        external_metrics=external_metrics,
        fetch_page=fetch_page,
        settings=settings,
        on_status=on_status,
    ))
