"""
Tests for SEOAnalyzer, the report aggregator.

Covers:
- Category order with and without a focus keyword
- Overall score as the round-half-up mean
- Score/status invariants over a set of pages
- End-to-end scenarios on raw markup
"""

import pytest

from seo_audit_engine.analyzer import SEOAnalyzer, overall_score
from seo_audit_engine.errors import FetchFailed, FetchFailureKind, USER_MESSAGES
from seo_audit_engine.models import (
    DEFAULT_THRESHOLDS,
    METRICS_THRESHOLDS,
    CategoryName,
    CategoryResult,
    ExternalMetrics,
    IssuePriority,
    IssueType,
    ReportStatus,
    status_for_score,
)


RICH_PAGE = """<!DOCTYPE html>
<html lang="pt-BR">
<head>
  <title>Bombas Hidráulicas Industriais | Acme Brasil.</title>
  <meta name="description" content="Venda, instalação e manutenção de bombas hidráulicas industriais com entrega para todo o Brasil.">
  <link rel="canonical" href="https://acme.com.br/bombas">
  <meta property="og:title" content="Acme">
  <script type="application/ld+json">{"@type": "Organization"}</script>
</head>
<body>
  <header><nav><a href="/">Página inicial</a> <a href="/servicos">Serviços de manutenção</a></nav></header>
  <main>
    <h1>Bombas hidráulicas em São Paulo</h1>
    <p>A Acme oferece serviços de manutenção de bombas hidráulicas. Além disso, fazemos instalação.</p>
    <h2>Perguntas frequentes</h2>
    <ul><li>Como escolher a bomba certa?</li><li>Qual a pressão ideal?</li></ul>
    <img src="/bomba.jpg" alt="Bomba hidráulica de engrenagem">
    <p>Solicite um orçamento ou veja o <a href="/catalogo">catálogo de produtos</a>.</p>
    <p>Referência: <a href="https://abnt.org.br" target="_blank">normas técnicas ABNT</a></p>
  </main>
  <footer>Acme Bombas</footer>
</body>
</html>"""

THIN_PAGE = "<html><body><p>Olá</p></body></html>"
BROKEN_PAGE = "<div><p>sem fechamento <img src=x.png><a href='//cdn.com'>x"


def _scorecard(performance):
    return {"lighthouseResult": {"categories": {"performance": {"score": performance}}}}


@pytest.fixture
def analyzer():
    return SEOAnalyzer(year=2025)


# ---------------------------------------------------------------------------
# Aggregation
# ---------------------------------------------------------------------------


class TestAggregation:
    """Order, conditional keyword category and overall score."""

    def test_order_without_focus(self, analyzer):
        report = analyzer.analyze_html("https://acme.com.br", RICH_PAGE)
        assert [c.category for c in report.categories] == [
            CategoryName.META_TAGS,
            CategoryName.HTML_STRUCTURE,
            CategoryName.IMAGES,
            CategoryName.CONTENT_STRUCTURE,
            CategoryName.LINKS,
            CategoryName.TECHNICAL_SEO,
            CategoryName.READABILITY,
            CategoryName.AI_SEARCH_OPTIMIZATION,
            CategoryName.PERFORMANCE,
            CategoryName.MOBILE_FRIENDLY,
        ]
        assert report.status == ReportStatus.COMPLETED
        assert report.focus_keyword is None

    def test_focus_adds_keyword_category_after_images(self, analyzer):
        report = analyzer.analyze_html("https://acme.com.br", RICH_PAGE, focus_keyword="bombas")
        names = [c.category for c in report.categories]
        assert len(names) == 11
        assert names[3] == CategoryName.KEYWORD_OPTIMIZATION
        assert report.focus_keyword == "bombas"

    def test_blank_focus_is_ignored(self, analyzer):
        report = analyzer.analyze_html("https://acme.com.br", RICH_PAGE, focus_keyword="   ")
        assert report.category(CategoryName.KEYWORD_OPTIMIZATION) is None
        assert report.focus_keyword is None

    def test_overall_is_round_half_up_mean(self, analyzer):
        report = analyzer.analyze_html("https://acme.com.br", RICH_PAGE)
        scores = [c.score for c in report.categories]
        assert report.overall_score == int(sum(scores) / len(scores) + 0.5)

    def test_overall_score_helper(self):
        def cats(*scores):
            return [CategoryResult.build(CategoryName.LINKS, s, []) for s in scores]

        assert overall_score([]) == 0
        assert overall_score(cats(50, 51)) == 51
        assert overall_score(cats(50, 50, 51)) == 50

    def test_overall_moves_with_a_single_category(self):
        base = [CategoryResult.build(CategoryName.LINKS, s, []) for s in (40, 60, 80, 55)]
        before = overall_score(base)
        for delta in (-30, -5, 5, 20):
            changed = list(base)
            changed[1] = CategoryResult.build(CategoryName.LINKS, 60 + delta, [])
            after = overall_score(changed)
            assert (after - before) * delta >= 0

    def test_metrics_categories_use_external_scorecards(self, analyzer):
        metrics = ExternalMetrics(desktop=_scorecard(0.95), mobile=_scorecard(0.7))
        report = analyzer.analyze_html("https://acme.com.br", RICH_PAGE, metrics=metrics)
        assert report.category(CategoryName.PERFORMANCE).score == 95
        assert report.category(CategoryName.MOBILE_FRIENDLY).score == 70

    def test_ai_search_summary_carries_keywords_and_prompts(self, analyzer):
        report = analyzer.analyze_html("https://www.acme.com.br", RICH_PAGE)
        summary = report.category(CategoryName.AI_SEARCH_OPTIMIZATION).issues[-1]
        assert summary.metadata["business_context"] == "services"
        assert summary.metadata["keywords"]
        prompts = summary.metadata["prompts"]
        assert 0 < len(prompts) <= 25
        assert "acme é confiável?" in prompts
        assert any("São Paulo" in p for p in prompts)


# ---------------------------------------------------------------------------
# Invariants
# ---------------------------------------------------------------------------


class TestScoreInvariants:
    """Scores are integers in [0, 100] and status follows the threshold table."""

    @pytest.mark.parametrize("html", [RICH_PAGE, THIN_PAGE, BROKEN_PAGE, ""])
    @pytest.mark.parametrize("focus", [None, "bombas hidráulicas"])
    def test_every_category(self, analyzer, html, focus):
        report = analyzer.analyze_html("https://acme.com.br/x", html, focus_keyword=focus)
        assert isinstance(report.overall_score, int)
        assert 0 <= report.overall_score <= 100
        for result in report.categories:
            assert isinstance(result.score, int)
            assert 0 <= result.score <= 100
            thresholds = (
                METRICS_THRESHOLDS
                if result.category in (CategoryName.PERFORMANCE, CategoryName.MOBILE_FRIENDLY)
                else DEFAULT_THRESHOLDS
            )
            assert result.status == status_for_score(result.score, thresholds)


# ---------------------------------------------------------------------------
# End-to-end scenarios
# ---------------------------------------------------------------------------


class TestScenarios:
    """Whole-page audits on small documents."""

    def test_empty_title_and_two_h1(self, analyzer):
        report = analyzer.analyze_html(
            "https://acme.com.br", "<html><title></title><h1>X</h1><h1>Y</h1></html>"
        )
        meta = report.category(CategoryName.META_TAGS)
        title_error = [i for i in meta.issues if i.message == "Missing page title"]
        assert len(title_error) == 1
        assert title_error[0].type == IssueType.ERROR
        assert title_error[0].priority == IssuePriority.HIGH

        structure = report.category(CategoryName.HTML_STRUCTURE)
        multiple = [i for i in structure.issues if i.message.startswith("Multiple H1")]
        assert len(multiple) == 1
        assert multiple[0].type == IssueType.WARNING

        baseline = analyzer.analyze_html(
            "https://acme.com.br",
            "<html><title>Bombas hidráulicas para indústria | Acme</title><h1>X</h1></html>",
        )
        assert report.overall_score < baseline.overall_score

    def test_keyword_optimization_full_marks(self, analyzer):
        title = "Bombas Hidráulicas Industriais | Acme Brasil."
        description = (
            "Venda e manutenção de bombas hidráulicas industriais com entrega "
            "para todo o Brasil e assistência técnica especializada"
        ).ljust(150, ".")
        html = (
            f"<html><head><title>{title}</title>"
            f'<meta name="description" content="{description}"></head>'
            f"<body><h1>Bombas hidráulicas</h1><p>{'conteúdo ' * 98}</p></body></html>"
        )
        report = analyzer.analyze_html(
            "https://acme.com.br/produtos/bombas-hidráulicas", html,
            focus_keyword="bombas hidráulicas",
        )
        assert len(title) == 45
        assert len(description) == 150
        keyword = report.category(CategoryName.KEYWORD_OPTIMIZATION)
        assert keyword.score == 100
        assert all(i.type == IssueType.SUCCESS for i in keyword.issues)


class TestFailedReport:

    def test_failed_report_has_no_categories(self):
        error = FetchFailed(FetchFailureKind.NOT_FOUND, "HTTP 404 for https://acme.com.br")
        report = SEOAnalyzer.failed_report("https://acme.com.br", error, "bombas")
        assert report.status == ReportStatus.FAILED
        assert report.categories == []
        assert report.overall_score == 0
        assert report.error == USER_MESSAGES[FetchFailureKind.NOT_FOUND]
        assert "HTTP 404" in report.technical_error
        assert report.focus_keyword == "bombas"
