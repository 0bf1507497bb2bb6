"""
Flatten an AuditReport into rows for the persistence layer.

The row shapes are the storage contract: one report row, one row per
category and one row per issue, keyed by category name.
"""

import json
from typing import Any, Dict, List

from .models import AuditReport, IssueType


def report_row(report: AuditReport) -> Dict[str, Any]:
    return {
        "url": report.url,
        "focus_keyword": report.focus_keyword,
        "overall_score": report.overall_score,
        "status": report.status.value,
        "error_message": report.error,
        "technical_error": report.technical_error,
        "issues_error": len(report.errors),
        "issues_warning": len(report.warnings),
    }


def build_payload(report: AuditReport) -> Dict[str, Any]:
    """
    Build the persistence payload for one audit.

    Returns:
        {"status", "report", "categories", "issues"}. Issue metadata is
        serialized to JSON text; an issue without metadata gets None.
    """
    categories: List[Dict[str, Any]] = []
    issues: List[Dict[str, Any]] = []

    for result in report.categories:
        categories.append({
            "category": result.category.value,
            "score": result.score,
            "status": result.status.value,
            "issues_count": sum(1 for i in result.issues if i.type != IssueType.SUCCESS),
        })
        for position, issue in enumerate(result.issues):
            issues.append({
                "category": result.category.value,
                "position": position,
                "type": issue.type.value,
                "message": issue.message,
                "priority": issue.priority.value,
                "recommendation": issue.recommendation,
                "metadata": json.dumps(issue.metadata, ensure_ascii=False)
                if issue.metadata is not None else None,
            })

    return {
        "status": report.status.value,
        "report": report_row(report),
        "categories": categories,
        "issues": issues,
    }
