"""
Performance and Mobile-Friendliness categories from PageSpeed scorecards.

Both scorecards are optional. This is the only place that branches on
their absence; every other check works from the page markup alone.
"""

from typing import Any, Dict, List, Optional

from .models import (
    METRICS_THRESHOLDS,
    CategoryName,
    CategoryResult,
    ExternalMetrics,
    Issue,
    IssuePriority,
    IssueType,
)

CORE_WEB_VITALS = {
    "first-contentful-paint": "FCP",
    "largest-contentful-paint": "LCP",
    "cumulative-layout-shift": "CLS",
    "total-blocking-time": "TBT",
    "speed-index": "Speed Index",
}
MOBILE_SUBSCORES = ("performance", "accessibility", "best-practices")
VIEWPORT_PENALTY = 20
TAP_TARGET_PENALTY = 10

RETRY_RECOMMENDATION = "Check if the URL is accessible and try again"


def _lighthouse(scorecard: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    if not isinstance(scorecard, dict):
        return {}
    result = scorecard.get("lighthouseResult", scorecard)
    return result if isinstance(result, dict) else {}


def category_score(scorecard: Optional[Dict[str, Any]], name: str) -> Optional[int]:
    """A lighthouse category score scaled to 0-100, or None when absent."""
    category = (_lighthouse(scorecard).get("categories") or {}).get(name) or {}
    score = category.get("score")
    if isinstance(score, (int, float)) and not isinstance(score, bool):
        return int(score * 100 + 0.5)
    return None


def _audit(scorecard: Optional[Dict[str, Any]], audit_id: str) -> Dict[str, Any]:
    return (_lighthouse(scorecard).get("audits") or {}).get(audit_id) or {}


def _audit_failed(scorecard: Optional[Dict[str, Any]], audit_id: str) -> bool:
    return _audit(scorecard, audit_id).get("score") == 0


def _placeholder(category: CategoryName, subject: str) -> CategoryResult:
    return CategoryResult.build(
        category,
        0,
        [Issue(
            type=IssueType.ERROR,
            message=f"Unable to analyze {subject}",
            priority=IssuePriority.HIGH,
            recommendation=RETRY_RECOMMENDATION,
        )],
        METRICS_THRESHOLDS,
    )


def _rating_issue(label: str, score: int, recommendation: str) -> Issue:
    if score >= METRICS_THRESHOLDS[0]:
        return Issue(type=IssueType.SUCCESS, message=f"{label}: {score}/100", priority=IssuePriority.LOW)
    if score >= METRICS_THRESHOLDS[2]:
        return Issue(
            type=IssueType.WARNING, message=f"{label}: {score}/100",
            priority=IssuePriority.MEDIUM, recommendation=recommendation,
        )
    return Issue(
        type=IssueType.ERROR, message=f"{label}: {score}/100",
        priority=IssuePriority.HIGH, recommendation=recommendation,
    )


def core_web_vitals(scorecard: Optional[Dict[str, Any]]) -> Dict[str, str]:
    vitals = {}
    for audit_id, label in CORE_WEB_VITALS.items():
        display = _audit(scorecard, audit_id).get("displayValue")
        if display:
            vitals[label] = str(display)
    return vitals


def build_performance(metrics: ExternalMetrics) -> CategoryResult:
    for strategy, scorecard in (("desktop", metrics.desktop), ("mobile", metrics.mobile)):
        score = category_score(scorecard, "performance")
        if score is None:
            continue
        issues: List[Issue] = [_rating_issue(
            f"Performance score ({strategy})", score,
            "Optimize images, reduce JavaScript and improve server response times",
        )]
        vitals = core_web_vitals(scorecard)
        if vitals:
            issues.append(Issue(
                type=IssueType.SUCCESS,
                message="Core Web Vitals: " + ", ".join(f"{k} {v}" for k, v in vitals.items()),
                priority=IssuePriority.LOW,
                metadata={"strategy": strategy, "core_web_vitals": vitals},
            ))
        return CategoryResult.build(CategoryName.PERFORMANCE, score, issues, METRICS_THRESHOLDS)
    return _placeholder(CategoryName.PERFORMANCE, "performance")


def build_mobile_friendly(metrics: ExternalMetrics) -> CategoryResult:
    scorecard = metrics.mobile
    subscores: Dict[str, int] = {}
    for name in MOBILE_SUBSCORES:
        value = category_score(scorecard, name)
        if value is not None:
            subscores[name] = value
    if not subscores:
        return _placeholder(CategoryName.MOBILE_FRIENDLY, "mobile-friendliness")

    score = sum(subscores.values()) / len(subscores)
    issues: List[Issue] = [Issue(
        type=IssueType.SUCCESS,
        message="Mobile scores: " + ", ".join(f"{k} {v}" for k, v in subscores.items()),
        priority=IssuePriority.LOW,
        metadata={"subscores": subscores},
    )]

    if _audit_failed(scorecard, "viewport"):
        score -= VIEWPORT_PENALTY
        issues.append(Issue(
            type=IssueType.ERROR, message="Viewport meta tag is missing or misconfigured",
            priority=IssuePriority.HIGH,
            recommendation='Add <meta name="viewport" content="width=device-width, initial-scale=1">',
        ))
    if _audit_failed(scorecard, "tap-targets"):
        score -= TAP_TARGET_PENALTY
        issues.append(Issue(
            type=IssueType.WARNING, message="Touch targets are too small or too close together",
            priority=IssuePriority.MEDIUM,
            recommendation="Make buttons and links at least 48x48 pixels with enough spacing",
        ))

    result = CategoryResult.build(CategoryName.MOBILE_FRIENDLY, score, issues, METRICS_THRESHOLDS)
    result.issues.insert(0, _rating_issue(
        "Mobile-friendliness score", result.score,
        "Improve mobile performance, accessibility and best practices",
    ))
    return result


def build_metrics_categories(metrics: Optional[ExternalMetrics]) -> List[CategoryResult]:
    """Always returns [performance, mobile_friendly]."""
    metrics = metrics or ExternalMetrics()
    if not metrics.available:
        return [
            _placeholder(CategoryName.PERFORMANCE, "performance"),
            _placeholder(CategoryName.MOBILE_FRIENDLY, "mobile-friendliness"),
        ]
    return [build_performance(metrics), build_mobile_friendly(metrics)]
