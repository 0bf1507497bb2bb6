"""
Tests for the persistence payload.
"""

import json

from seo_audit_engine.analyzer import SEOAnalyzer
from seo_audit_engine.errors import EmptyContent
from seo_audit_engine.models import (
    AuditReport,
    CategoryName,
    CategoryResult,
    Issue,
    IssuePriority,
    IssueType,
    ReportStatus,
)
from seo_audit_engine.payload import build_payload


def _report():
    images = CategoryResult.build(CategoryName.IMAGES, 80, [
        Issue(type=IssueType.WARNING, message="2 of 4 images missing alt attributes",
              priority=IssuePriority.MEDIUM, recommendation="Add alt text"),
        Issue(type=IssueType.SUCCESS, message="2 images have descriptive alt text"),
    ])
    ai = CategoryResult.build(CategoryName.AI_SEARCH_OPTIMIZATION, 50, [
        Issue(type=IssueType.SUCCESS, message="Suggested prompts",
              metadata={"prompts": ["Onde comprar bombas?"], "business_context": "ecommerce"}),
    ])
    return AuditReport(
        url="https://acme.com.br",
        focus_keyword="bombas",
        overall_score=65,
        categories=[images, ai],
        status=ReportStatus.COMPLETED,
    )


class TestBuildPayload:
    """Report, category and issue rows."""

    def test_report_row(self):
        payload = build_payload(_report())
        assert payload["status"] == "completed"
        assert payload["report"] == {
            "url": "https://acme.com.br",
            "focus_keyword": "bombas",
            "overall_score": 65,
            "status": "completed",
            "error_message": None,
            "technical_error": None,
            "issues_error": 0,
            "issues_warning": 1,
        }

    def test_category_rows(self):
        categories = build_payload(_report())["categories"]
        assert categories == [
            {"category": "images", "score": 80, "status": "good", "issues_count": 1},
            {"category": "ai_search_optimization", "score": 50, "status": "needs_improvement",
             "issues_count": 0},
        ]

    def test_issue_rows(self):
        issues = build_payload(_report())["issues"]
        assert len(issues) == 3
        first = issues[0]
        assert first == {
            "category": "images",
            "position": 0,
            "type": "warning",
            "message": "2 of 4 images missing alt attributes",
            "priority": "medium",
            "recommendation": "Add alt text",
            "metadata": None,
        }
        summary = issues[2]
        assert summary["category"] == "ai_search_optimization"
        assert summary["priority"] == "low"
        assert json.loads(summary["metadata"]) == {
            "prompts": ["Onde comprar bombas?"], "business_context": "ecommerce",
        }

    def test_metadata_keeps_accents(self):
        issues = build_payload(_report())["issues"]
        assert "Onde comprar bombas?" in issues[2]["metadata"]

    def test_failed_report(self):
        report = SEOAnalyzer.failed_report(
            "https://acme.com.br", EmptyContent("Page body too short (12 characters)")
        )
        payload = build_payload(report)
        assert payload["status"] == "failed"
        assert payload["report"]["error_message"] == "The page has too little content to analyze."
        assert payload["report"]["technical_error"] == "Page body too short (12 characters)"
        assert payload["categories"] == []
        assert payload["issues"] == []

    def test_payload_is_json_serializable(self):
        report = SEOAnalyzer(year=2025).analyze_html(
            "https://acme.com.br", "<html><title>Orçamento rápido</title><p>Serviço de manutenção</p></html>"
        )
        json.dumps(build_payload(report))
