"""
SEOAnalyzer: report aggregator for single-page audits.

Runs the category checks over one extracted page, attaches the external
metrics categories and averages everything into the overall score.
Works on raw HTML so it can be used without any network access.
"""

import logging
from typing import List, Optional

from .checks import (
    check_ai_search_optimization,
    check_content_structure,
    check_document_structure,
    check_images,
    check_keyword_optimization,
    check_links,
    check_meta_tags,
    check_readability,
    check_technical_signals,
    detect_structural_cues,
)
from .errors import translate_error
from .extractor import extract_page
from .keywords import classify_business_context, extract_keywords
from .metrics import build_metrics_categories
from .models import (
    AuditReport,
    CategoryResult,
    ExtractedPage,
    ExternalMetrics,
    ReportStatus,
    clamp_score,
)
from .prompts import generate_prompts

logger = logging.getLogger(__name__)


def overall_score(categories: List[CategoryResult]) -> int:
    """Round-half-up mean of the category scores; 0 when there are none."""
    if not categories:
        return 0
    return clamp_score(sum(c.score for c in categories) / len(categories))


class SEOAnalyzer:
    """
    Aggregates every category check into an AuditReport.

    Usage:
        analyzer = SEOAnalyzer()
        report = analyzer.analyze_html(url, html, focus_keyword="bombas hidráulicas")
    """

    def __init__(self, year: Optional[int] = None):
        self.year = year

    def analyze_page(
        self,
        page: ExtractedPage,
        focus_keyword: Optional[str] = None,
        metrics: Optional[ExternalMetrics] = None,
    ) -> AuditReport:
        focus = (focus_keyword or "").strip() or None

        categories: List[CategoryResult] = [
            check_meta_tags(page, focus),
            check_document_structure(page),
            check_images(page),
        ]
        if focus:
            categories.append(check_keyword_optimization(page, focus))
        categories.extend([
            check_content_structure(page),
            check_links(page),
            check_technical_signals(page),
            check_readability(page),
            self.ai_search_category(page),
        ])
        categories.extend(build_metrics_categories(metrics))

        report = AuditReport(
            url=page.url,
            focus_keyword=focus,
            overall_score=overall_score(categories),
            categories=categories,
            status=ReportStatus.COMPLETED,
        )
        logger.debug(
            "Analyzed %s: %d categories, overall %d",
            page.url, len(categories), report.overall_score,
        )
        return report

    def analyze_html(
        self,
        url: str,
        html: str,
        focus_keyword: Optional[str] = None,
        metrics: Optional[ExternalMetrics] = None,
    ) -> AuditReport:
        """Extract the page from raw HTML and analyze it."""
        return self.analyze_page(extract_page(url, html), focus_keyword, metrics)

    def ai_search_category(self, page: ExtractedPage) -> CategoryResult:
        phrases = extract_keywords(page.text, page.title, page.meta_description)
        context = classify_business_context(
            " ".join([page.title, page.meta_description, page.text])
        )
        prompts = generate_prompts(
            phrases,
            context,
            detect_structural_cues(page),
            text=page.text,
            hostname=page.hostname,
            year=self.year,
        )
        return check_ai_search_optimization(page, phrases, prompts, context)

    @staticmethod
    def failed_report(
        url: str, error: object, focus_keyword: Optional[str] = None
    ) -> AuditReport:
        """A failed report with the translated message and no categories."""
        return AuditReport(
            url=url,
            focus_keyword=focus_keyword,
            status=ReportStatus.FAILED,
            error=translate_error(error),
            technical_error=str(error),
        )
