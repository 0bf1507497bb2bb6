"""
seo_audit_engine: single-page SEO audit with AI-search prompt suggestions.

Usage:
    from seo_audit_engine import run_audit, SEOAnalyzer

    # Fetch and audit a live page (PageSpeed data when GOOGLE_PAGESPEED_API_KEY is set)
    report = run_audit("example.com.br", focus_keyword="bombas hidráulicas")

    # Audit markup you already have (no network access)
    report = SEOAnalyzer().analyze_html(url, html)

    # Rows for storage
    payload = build_payload(report)
"""

from .analyzer import SEOAnalyzer, overall_score
from .config import AuditSettings
from .errors import (
    AuditError,
    EmptyContent,
    FetchFailed,
    FetchFailureKind,
    InvalidUrl,
    MetricsUnavailable,
    translate_error,
)
from .extractor import extract_page
from .keywords import classify_business_context, extract_keywords
from .metrics import build_metrics_categories
from .models import (
    AuditReport,
    CategoryName,
    CategoryResult,
    CategoryStatus,
    ExternalMetrics,
    ExtractedPage,
    ExtractedPhrase,
    Issue,
    IssuePriority,
    IssueType,
    ReportStatus,
    UrlValidation,
)
from .payload import build_payload
from .prompts import StructuralCues, generate_prompts
from .runner import arun_audit, run_audit
from .url import normalize_url

__all__ = [
    # Main entry points
    "run_audit",
    "arun_audit",
    "SEOAnalyzer",
    "build_payload",
    # Components
    "normalize_url",
    "extract_page",
    "extract_keywords",
    "classify_business_context",
    "generate_prompts",
    "build_metrics_categories",
    "overall_score",
    "translate_error",
    "AuditSettings",
    # Enums
    "IssueType",
    "IssuePriority",
    "CategoryName",
    "CategoryStatus",
    "ReportStatus",
    # Models
    "Issue",
    "CategoryResult",
    "AuditReport",
    "ExtractedPage",
    "ExtractedPhrase",
    "ExternalMetrics",
    "UrlValidation",
    "StructuralCues",
    # Errors
    "AuditError",
    "InvalidUrl",
    "FetchFailed",
    "FetchFailureKind",
    "EmptyContent",
    "MetricsUnavailable",
]
