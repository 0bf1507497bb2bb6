"""
Tests for the performance / mobile-friendliness categories built from
PageSpeed scorecards.
"""

from seo_audit_engine.metrics import build_metrics_categories, category_score
from seo_audit_engine.models import (
    CategoryName,
    CategoryStatus,
    ExternalMetrics,
    IssuePriority,
    IssueType,
)


def _scorecard(performance=None, accessibility=None, best_practices=None, audits=None):
    categories = {}
    if performance is not None:
        categories["performance"] = {"score": performance}
    if accessibility is not None:
        categories["accessibility"] = {"score": accessibility}
    if best_practices is not None:
        categories["best-practices"] = {"score": best_practices}
    return {"lighthouseResult": {"categories": categories, "audits": audits or {}}}


class TestMissingMetrics:
    """Absent scorecards produce labeled placeholders, never an exception."""

    def test_none(self):
        performance, mobile = build_metrics_categories(None)
        assert performance.category == CategoryName.PERFORMANCE
        assert mobile.category == CategoryName.MOBILE_FRIENDLY
        for result in (performance, mobile):
            assert result.score == 0
            assert result.status == CategoryStatus.CRITICAL
            assert result.issues[0].type == IssueType.ERROR
            assert result.issues[0].message.startswith("Unable to analyze")
            assert "try again" in result.issues[0].recommendation

    def test_empty_metrics_object(self):
        assert [r.score for r in build_metrics_categories(ExternalMetrics())] == [0, 0]

    def test_desktop_only_gives_mobile_placeholder(self):
        performance, mobile = build_metrics_categories(
            ExternalMetrics(desktop=_scorecard(performance=0.92))
        )
        assert performance.score == 92
        assert performance.status == CategoryStatus.EXCELLENT
        assert mobile.score == 0
        assert mobile.issues[0].message == "Unable to analyze mobile-friendliness"


class TestPerformance:
    """Desktop preferred, mobile fallback, Core Web Vitals annotation."""

    def test_desktop_preferred(self):
        performance, _ = build_metrics_categories(ExternalMetrics(
            desktop=_scorecard(performance=0.5), mobile=_scorecard(performance=0.9),
        ))
        assert performance.score == 50
        assert performance.status == CategoryStatus.NEEDS_IMPROVEMENT
        assert performance.issues[0].type == IssueType.WARNING
        assert "(desktop)" in performance.issues[0].message

    def test_mobile_fallback(self):
        performance, _ = build_metrics_categories(ExternalMetrics(
            desktop={"error": "quota"}, mobile=_scorecard(performance=0.3),
        ))
        assert performance.score == 30
        assert performance.status == CategoryStatus.CRITICAL
        assert performance.issues[0].priority == IssuePriority.HIGH
        assert "(mobile)" in performance.issues[0].message

    def test_core_web_vitals(self):
        audits = {
            "first-contentful-paint": {"displayValue": "1.2 s"},
            "largest-contentful-paint": {"displayValue": "2.5 s"},
            "cumulative-layout-shift": {"displayValue": "0.01"},
            "interactive": {"displayValue": "3.0 s"},
        }
        performance, _ = build_metrics_categories(
            ExternalMetrics(desktop=_scorecard(performance=0.85, audits=audits))
        )
        vitals = performance.issues[1]
        assert vitals.metadata == {
            "strategy": "desktop",
            "core_web_vitals": {"FCP": "1.2 s", "LCP": "2.5 s", "CLS": "0.01"},
        }
        assert vitals.message == "Core Web Vitals: FCP 1.2 s, LCP 2.5 s, CLS 0.01"

    def test_looser_thresholds(self):
        good, _ = build_metrics_categories(ExternalMetrics(desktop=_scorecard(performance=0.79)))
        excellent, _ = build_metrics_categories(ExternalMetrics(desktop=_scorecard(performance=0.8)))
        assert good.status == CategoryStatus.GOOD
        assert excellent.status == CategoryStatus.EXCELLENT


class TestMobileFriendly:
    """Mean of mobile subscores minus viewport and tap-target penalties."""

    def test_mean_of_available_subscores(self):
        _, mobile = build_metrics_categories(ExternalMetrics(
            mobile=_scorecard(performance=0.6, accessibility=0.9, best_practices=0.75),
        ))
        assert mobile.score == 75
        assert mobile.status == CategoryStatus.GOOD
        assert mobile.issues[1].metadata == {
            "subscores": {"performance": 60, "accessibility": 90, "best-practices": 75}
        }

    def test_partial_subscores(self):
        _, mobile = build_metrics_categories(ExternalMetrics(
            mobile=_scorecard(accessibility=0.9, best_practices=0.7),
        ))
        assert mobile.score == 80

    def test_failed_viewport_and_tap_targets(self):
        audits = {"viewport": {"score": 0}, "tap-targets": {"score": 0}}
        _, mobile = build_metrics_categories(ExternalMetrics(
            mobile=_scorecard(performance=0.6, accessibility=0.9, best_practices=0.75, audits=audits),
        ))
        assert mobile.score == 45
        assert mobile.status == CategoryStatus.NEEDS_IMPROVEMENT
        viewport = [i for i in mobile.issues if "Viewport" in i.message][0]
        tap = [i for i in mobile.issues if "Touch targets" in i.message][0]
        assert (viewport.type, viewport.priority) == (IssueType.ERROR, IssuePriority.HIGH)
        assert (tap.type, tap.priority) == (IssueType.WARNING, IssuePriority.MEDIUM)

    def test_passing_audits_cost_nothing(self):
        audits = {"viewport": {"score": 1}, "tap-targets": {"score": None}}
        _, mobile = build_metrics_categories(ExternalMetrics(
            mobile=_scorecard(performance=0.9, audits=audits),
        ))
        assert mobile.score == 90

    def test_clamped_at_zero(self):
        audits = {"viewport": {"score": 0}, "tap-targets": {"score": 0}}
        _, mobile = build_metrics_categories(ExternalMetrics(
            mobile=_scorecard(performance=0.1, accessibility=0.1, best_practices=0.1, audits=audits),
        ))
        assert mobile.score == 0
        assert mobile.issues[0].message == "Mobile-friendliness score: 0/100"


class TestCategoryScore:

    def test_unwrapped_lighthouse_result(self):
        assert category_score({"categories": {"seo": {"score": 0.97}}}, "seo") == 97

    def test_null_score(self):
        assert category_score(_scorecard(performance=None), "performance") is None
        assert category_score({"lighthouseResult": {"categories": {"performance": {"score": None}}}},
                              "performance") is None

    def test_not_a_dict(self):
        assert category_score(None, "performance") is None
