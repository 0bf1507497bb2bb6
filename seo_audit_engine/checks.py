"""
Per-category SEO checks.

Each check is a pure function of an ExtractedPage (plus optional context)
that returns a CategoryResult. Missing signals are reported as issues;
no check raises on empty or malformed input.
"""

import re
from typing import List, Optional, Sequence
from urllib.parse import unquote

from .models import (
    CategoryName,
    CategoryResult,
    ExtractedPage,
    ExtractedPhrase,
    Issue,
    IssuePriority,
    IssueType,
)
from .prompts import StructuralCues

TITLE_MIN, TITLE_MAX = 30, 60
DESCRIPTION_MIN, DESCRIPTION_MAX = 120, 160
ALT_MIN, ALT_MAX = 10, 125
DENSITY_MIN, DENSITY_MAX = 0.5, 2.5
LONG_CONTENT_WORDS = 300
LONG_PARAGRAPH_WORDS = 100
MAX_SENTENCE_WORDS = 20
MIN_KEYWORDS_FOR_AI = 10

CTA_PHRASES = [
    "entre em contato", "fale conosco", "solicite", "orçamento", "compre", "comprar",
    "agende", "saiba mais", "cadastre-se", "inscreva-se", "ligue", "whatsapp",
    "contrate", "peça", "baixe", "experimente", "assine",
]

GENERIC_ANCHORS = {
    "clique aqui", "leia mais", "saiba mais", "veja mais", "aqui", "mais", "clique",
    "acesse", "link", "click here", "read more", "here",
}

TRANSITION_WORDS = [
    "além disso", "portanto", "no entanto", "contudo", "por exemplo", "dessa forma",
    "desta forma", "ou seja", "em seguida", "por fim", "primeiramente", "finalmente",
    "porém", "entretanto", "consequentemente", "em resumo", "em primeiro lugar",
    "por outro lado", "logo", "assim",
]

FAQ_TERMS = ["pergunta", "faq", "dúvida", "perguntas frequentes"]

ACTION_WORDS = [
    "como", "faça", "siga", "implemente", "aplique", "execute", "realize", "configure",
    "instale", "baixe", "acesse", "clique", "selecione", "escolha", "defina", "ajuste",
    "passo", "etapa", "guia", "tutorial", "instruções", "procedimento",
]

LIST_PATTERNS = [
    re.compile(r"\d+\.\s"),
    re.compile(r"•\s"),
    re.compile(r"\n\s*-\s"),
]

STRUCTURE_PATTERNS = LIST_PATTERNS + [
    re.compile(r":\s*\n"),
    re.compile(r"(como|passo|etapa|fase)", re.IGNORECASE),
]

_SENTENCE_SPLIT_RE = re.compile(r"[.!?]+")


def _issue(
    issue_type: IssueType,
    message: str,
    priority: IssuePriority = IssuePriority.LOW,
    recommendation: Optional[str] = None,
    metadata: Optional[dict] = None,
) -> Issue:
    return Issue(
        type=issue_type,
        message=message,
        priority=priority,
        recommendation=recommendation,
        metadata=metadata,
    )


def _success(message: str, metadata: Optional[dict] = None) -> Issue:
    return _issue(IssueType.SUCCESS, message, metadata=metadata)


def _contains_any(text: str, vocabulary: Sequence[str]) -> bool:
    lowered = text.lower()
    return any(re.search(rf"(?<!\w){re.escape(term)}(?!\w)", lowered) for term in vocabulary)


def detect_structural_cues(page: ExtractedPage) -> StructuralCues:
    return StructuralCues(
        has_cta=_contains_any(page.text, CTA_PHRASES),
        has_lists=page.list_count > 0 or any(p.search(page.text) for p in LIST_PATTERNS),
        has_faq=_contains_any(page.text, FAQ_TERMS),
    )


# ─── Meta Tags ────────────────────────────────────────────────────────


def check_meta_tags(page: ExtractedPage, focus_keyword: Optional[str] = None) -> CategoryResult:
    """Title 30-60 chars and description 120-160 chars, plus focus phrase presence."""
    issues: List[Issue] = []
    score = 100
    title = page.title.strip()
    description = page.meta_description.strip()

    if not title:
        score -= 30
        issues.append(_issue(
            IssueType.ERROR, "Missing page title", IssuePriority.HIGH,
            "Add a descriptive title tag between 30 and 60 characters",
        ))
    elif len(title) > TITLE_MAX:
        score -= 15
        issues.append(_issue(
            IssueType.WARNING, f"Title too long ({len(title)} characters)", IssuePriority.MEDIUM,
            "Keep the title under 60 characters so it is not truncated in search results",
        ))
    elif len(title) < TITLE_MIN:
        score -= 10
        issues.append(_issue(
            IssueType.WARNING, f"Title too short ({len(title)} characters)", IssuePriority.MEDIUM,
            "Use at least 30 characters to describe the page",
        ))
    else:
        issues.append(_success(f"Title has an adequate length ({len(title)} characters)"))

    if not description:
        score -= 30
        issues.append(_issue(
            IssueType.ERROR, "Missing meta description", IssuePriority.HIGH,
            "Add a meta description between 120 and 160 characters",
        ))
    elif len(description) > DESCRIPTION_MAX:
        score -= 15
        issues.append(_issue(
            IssueType.WARNING, f"Meta description too long ({len(description)} characters)",
            IssuePriority.MEDIUM, "Keep the meta description under 160 characters",
        ))
    elif len(description) < DESCRIPTION_MIN:
        score -= 10
        issues.append(_issue(
            IssueType.WARNING, f"Meta description too short ({len(description)} characters)",
            IssuePriority.MEDIUM, "Use at least 120 characters to summarize the page",
        ))
    else:
        issues.append(_success(f"Meta description has an adequate length ({len(description)} characters)"))

    if focus_keyword:
        phrase = focus_keyword.lower()
        if phrase in title.lower():
            issues.append(_success("Focus keyword present in the title"))
        else:
            score -= 10
            issues.append(_issue(
                IssueType.WARNING, "Focus keyword missing from the title", IssuePriority.HIGH,
                f'Include "{focus_keyword}" near the start of the title',
            ))
        if phrase in description.lower():
            issues.append(_success("Focus keyword present in the meta description"))
        else:
            score -= 10
            issues.append(_issue(
                IssueType.WARNING, "Focus keyword missing from the meta description",
                IssuePriority.MEDIUM, f'Mention "{focus_keyword}" in the meta description',
            ))

    return CategoryResult.build(CategoryName.META_TAGS, score, issues)


# ─── Document Structure ───────────────────────────────────────────────


def check_document_structure(page: ExtractedPage) -> CategoryResult:
    issues: List[Issue] = []
    score = 100

    if not page.has_doctype:
        score -= 10
        issues.append(_issue(
            IssueType.WARNING, "Missing DOCTYPE declaration", IssuePriority.MEDIUM,
            "Start the document with <!DOCTYPE html>",
        ))
    if not page.lang:
        score -= 10
        issues.append(_issue(
            IssueType.WARNING, "Missing language attribute on <html>", IssuePriority.MEDIUM,
            'Declare the page language, e.g. <html lang="pt-BR">',
        ))

    h1_count = len(page.headings.get(1, []))
    if h1_count == 0:
        score -= 25
        issues.append(_issue(
            IssueType.ERROR, "No H1 tag found", IssuePriority.HIGH,
            "Add exactly one H1 tag describing the page topic",
        ))
    elif h1_count > 1:
        score -= 15
        issues.append(_issue(
            IssueType.WARNING, f"Multiple H1 tags found ({h1_count})", IssuePriority.MEDIUM,
            "Use only one H1 tag per page",
        ))
    else:
        issues.append(_success("Single H1 tag found"))

    subheadings = len(page.headings.get(2, [])) + len(page.headings.get(3, []))
    if subheadings:
        issues.append(_success(f"{subheadings} H2/H3 subheadings organize the content"))
    elif page.word_count > LONG_CONTENT_WORDS:
        score -= 10
        issues.append(_issue(
            IssueType.WARNING, "Long content without H2/H3 subheadings", IssuePriority.MEDIUM,
            "Break the content into sections with H2 and H3 headings",
        ))

    if len(page.semantic_tags) >= 3:
        issues.append(_success(f"Semantic HTML5 tags in use: {', '.join(page.semantic_tags)}"))
    else:
        score -= 5
        issues.append(_issue(
            IssueType.WARNING, "Few semantic HTML5 tags", IssuePriority.LOW,
            "Use tags such as <header>, <nav>, <main>, <article> and <footer>",
        ))

    return CategoryResult.build(CategoryName.HTML_STRUCTURE, score, issues)


# ─── Images ───────────────────────────────────────────────────────────


def check_images(page: ExtractedPage) -> CategoryResult:
    total = len(page.images)
    if total == 0:
        return CategoryResult.build(CategoryName.IMAGES, 100, [_issue(
            IssueType.WARNING, "No images found on the page", IssuePriority.LOW,
            "Relevant images with descriptive alt text are an opportunity to rank in image search",
        )])

    issues: List[Issue] = []
    score = 100
    missing = sum(1 for image in page.images if not image.has_alt)
    with_alt = [image.alt.strip() for image in page.images if image.has_alt and image.alt is not None]
    descriptive = sum(1 for alt in with_alt if ALT_MIN <= len(alt) <= ALT_MAX)

    if missing:
        score -= min(missing * 10, 50)
        issues.append(_issue(
            IssueType.WARNING, f"{missing} of {total} images missing alt attributes",
            IssuePriority.HIGH if missing * 2 > total else IssuePriority.MEDIUM,
            "Add descriptive alt attributes to all images",
        ))
    else:
        issues.append(_success(f"All {total} images have alt attributes"))

    if descriptive:
        issues.append(_success(f"{descriptive} images have descriptive alt text"))
    if len(with_alt) > descriptive:
        score -= 5
        issues.append(_issue(
            IssueType.WARNING, f"{len(with_alt) - descriptive} alt texts are empty, too short or too long",
            IssuePriority.LOW, "Describe each image in 10 to 125 characters",
        ))

    return CategoryResult.build(CategoryName.IMAGES, score, issues)


# ─── Keyword Optimization ─────────────────────────────────────────────


def keyword_density(page: ExtractedPage, focus_keyword: str) -> float:
    """Percentage of body words containing the focus phrase's first token."""
    tokens = focus_keyword.lower().split()
    words = page.words
    if not tokens or not words:
        return 0.0
    first = tokens[0]
    hits = sum(1 for word in words if first in word.lower())
    return hits / len(words) * 100


def check_keyword_optimization(page: ExtractedPage, focus_keyword: str) -> CategoryResult:
    issues: List[Issue] = []
    score = 0
    phrase = focus_keyword.strip().lower()

    if phrase in page.title.lower():
        score += 25
        issues.append(_success("Focus keyword found in the title"))
    else:
        issues.append(_issue(
            IssueType.WARNING, "Focus keyword not found in the title", IssuePriority.HIGH,
            f'Add "{focus_keyword}" to the title tag',
        ))

    if phrase in page.meta_description.lower():
        score += 20
        issues.append(_success("Focus keyword found in the meta description"))
    else:
        issues.append(_issue(
            IssueType.WARNING, "Focus keyword not found in the meta description",
            IssuePriority.MEDIUM, f'Add "{focus_keyword}" to the meta description',
        ))

    slug = "-".join(phrase.split())
    if slug and slug in unquote(page.url).lower():
        score += 15
        issues.append(_success("Focus keyword found in the URL"))
    else:
        issues.append(_issue(
            IssueType.WARNING, "Focus keyword not found in the URL", IssuePriority.LOW,
            f'Use a URL slug such as "/{slug}"',
        ))

    density = keyword_density(page, phrase)
    meta = {"density": round(density, 2)}
    if DENSITY_MIN <= density <= DENSITY_MAX:
        score += 40
        issues.append(_success(f"Keyword density is {density:.1f}%", metadata=meta))
    elif density < DENSITY_MIN:
        issues.append(_issue(
            IssueType.WARNING, f"Keyword density too low ({density:.1f}%)", IssuePriority.MEDIUM,
            "Mention the focus keyword naturally a few more times (0.5% to 2.5%)", meta,
        ))
    else:
        issues.append(_issue(
            IssueType.WARNING, f"Keyword density too high ({density:.1f}%)", IssuePriority.HIGH,
            "Reduce repetitions of the focus keyword to avoid keyword stuffing", meta,
        ))

    return CategoryResult.build(CategoryName.KEYWORD_OPTIMIZATION, score, issues)


# ─── Content Structure ────────────────────────────────────────────────


def check_content_structure(page: ExtractedPage) -> CategoryResult:
    issues: List[Issue] = []
    score = 100
    words = page.word_count

    if words >= 600:
        issues.append(_success(f"Comprehensive content ({words} words)"))
    elif words >= 300:
        score -= 10
        issues.append(_success(f"Good amount of content ({words} words)"))
    elif words >= 150:
        score -= 25
        issues.append(_issue(
            IssueType.WARNING, f"Thin content ({words} words)", IssuePriority.MEDIUM,
            "Expand the content to at least 300 words",
        ))
    else:
        score -= 40
        issues.append(_issue(
            IssueType.ERROR, f"Very little content ({words} words)", IssuePriority.HIGH,
            "Pages with fewer than 150 words rarely rank; add substantial content",
        ))

    if page.list_count or any(p.search(page.text) for p in LIST_PATTERNS):
        issues.append(_success("Lists help scanning the content"))
    else:
        score -= 10
        issues.append(_issue(
            IssueType.WARNING, "No lists found", IssuePriority.LOW,
            "Use bulleted or numbered lists to organize key points",
        ))

    long_paragraphs = sum(1 for p in page.paragraphs if len(p.split()) > LONG_PARAGRAPH_WORDS)
    if long_paragraphs:
        score -= min(long_paragraphs * 5, 20)
        issues.append(_issue(
            IssueType.WARNING, f"{long_paragraphs} paragraphs longer than {LONG_PARAGRAPH_WORDS} words",
            IssuePriority.MEDIUM, "Split long paragraphs into shorter blocks",
        ))

    if _contains_any(page.text, CTA_PHRASES):
        issues.append(_success("Call-to-action found"))
    else:
        score -= 10
        issues.append(_issue(
            IssueType.WARNING, "No call-to-action found", IssuePriority.MEDIUM,
            'Add a clear call-to-action such as "Solicite um orçamento"',
        ))

    return CategoryResult.build(CategoryName.CONTENT_STRUCTURE, score, issues)


# ─── Links ────────────────────────────────────────────────────────────


def check_links(page: ExtractedPage) -> CategoryResult:
    issues: List[Issue] = []
    score = 100
    internal = page.internal_link_count
    external = page.external_link_count

    if internal >= 3:
        issues.append(_success(f"{internal} internal links"))
    elif internal >= 1:
        score -= 10
        issues.append(_issue(
            IssueType.WARNING, f"Only {internal} internal links", IssuePriority.LOW,
            "Link to at least 3 related pages of your site",
        ))
    else:
        score -= 25
        issues.append(_issue(
            IssueType.ERROR, "No internal links found", IssuePriority.HIGH,
            "Add internal links to help users and crawlers discover other pages",
        ))

    if 1 <= external <= 5:
        issues.append(_success(f"{external} external links to reference sources"))
    elif external > 5:
        score -= 10
        issues.append(_issue(
            IssueType.WARNING, f"Excessive external links ({external})", IssuePriority.LOW,
            "Keep external links to a few authoritative sources",
        ))
    else:
        score -= 10
        issues.append(_issue(
            IssueType.WARNING, "No external links found", IssuePriority.LOW,
            "Cite authoritative external sources to build trust",
        ))

    generic = [
        link for link in page.links
        if len(link.text) <= 5 or link.text.lower() in GENERIC_ANCHORS
    ]
    if generic:
        score -= min(len(generic) * 3, 15)
        issues.append(_issue(
            IssueType.WARNING, f"{len(generic)} links with generic or very short anchor text",
            IssuePriority.MEDIUM, 'Replace anchors like "clique aqui" with descriptive text',
            {"anchors": [link.text for link in generic[:10]]},
        ))
    elif page.links:
        issues.append(_success("Links use descriptive anchor text"))

    blank = [link for link in page.links if link.is_external and (link.target or "").lower() == "_blank"]
    unsafe = [link for link in blank if "noopener" not in link.rel and "noreferrer" not in link.rel]
    if unsafe:
        score -= min(len(unsafe) * 5, 15)
        issues.append(_issue(
            IssueType.WARNING, f'{len(unsafe)} external links open in a new tab without rel="noopener"',
            IssuePriority.MEDIUM, 'Add rel="noopener noreferrer" to links with target="_blank"',
            {"hrefs": [link.href for link in unsafe[:10]]},
        ))
    elif blank:
        issues.append(_success('External links opening new tabs use rel="noopener"'))

    return CategoryResult.build(CategoryName.LINKS, score, issues)


# ─── Technical Signals ────────────────────────────────────────────────


def check_technical_signals(page: ExtractedPage) -> CategoryResult:
    issues: List[Issue] = []
    score = 0

    if page.has_structured_data:
        score += 25
        issues.append(_success("Structured data found"))
    else:
        issues.append(_issue(
            IssueType.WARNING, "No structured data found", IssuePriority.MEDIUM,
            "Add Schema.org markup (JSON-LD) describing your organization or content",
        ))

    if page.canonical:
        score += 20
        issues.append(_success("Canonical URL defined"))
    else:
        issues.append(_issue(
            IssueType.WARNING, "Missing canonical tag", IssuePriority.MEDIUM,
            'Add <link rel="canonical"> to avoid duplicate content',
        ))

    if page.open_graph:
        score += 20
        issues.append(_success("Open Graph tags found"))
    else:
        issues.append(_issue(
            IssueType.WARNING, "Missing Open Graph tags", IssuePriority.LOW,
            "Add og:title, og:description and og:image for social sharing",
        ))

    if page.twitter_card:
        score += 10
        issues.append(_success("Twitter Card tags found"))
    else:
        issues.append(_issue(
            IssueType.WARNING, "Missing Twitter Card tags", IssuePriority.LOW,
            "Add twitter:card and related tags",
        ))

    robots = (page.robots or "").lower()
    if not robots:
        issues.append(_issue(
            IssueType.WARNING, "No robots meta directive", IssuePriority.LOW,
            'Declare indexing intent with <meta name="robots" content="index, follow">',
        ))
    elif "noindex" in robots:
        issues.append(_issue(
            IssueType.ERROR, "Page is set to noindex", IssuePriority.HIGH,
            "Remove noindex if this page should appear in search results",
        ))
    else:
        score += 10
        issues.append(_success(f"Robots directive: {robots}"))

    if page.url.lower().startswith("https://"):
        score += 15
        issues.append(_success("Page served over HTTPS"))
    else:
        issues.append(_issue(
            IssueType.ERROR, "Page not served over HTTPS", IssuePriority.HIGH,
            "Install an SSL certificate and redirect HTTP to HTTPS",
        ))

    return CategoryResult.build(CategoryName.TECHNICAL_SEO, score, issues)


# ─── Readability ──────────────────────────────────────────────────────


def check_readability(page: ExtractedPage) -> CategoryResult:
    if not page.word_count:
        return CategoryResult.build(CategoryName.READABILITY, 0, [_issue(
            IssueType.WARNING, "Unable to analyze readability: no text content", IssuePriority.MEDIUM,
            "Add text content to the page",
        )])

    issues: List[Issue] = []
    score = 0

    sentences = [s for s in _SENTENCE_SPLIT_RE.split(page.text) if s.strip()]
    avg_sentence = page.word_count / max(len(sentences), 1)
    if avg_sentence <= MAX_SENTENCE_WORDS:
        score += 35
        issues.append(_success(f"Sentences average {avg_sentence:.1f} words"))
    else:
        issues.append(_issue(
            IssueType.WARNING, f"Long sentences ({avg_sentence:.1f} words on average)",
            IssuePriority.MEDIUM, "Keep sentences under 20 words",
        ))

    if _contains_any(page.text, TRANSITION_WORDS):
        score += 30
        issues.append(_success("Transition words connect the ideas"))
    else:
        issues.append(_issue(
            IssueType.WARNING, "No transition words found", IssuePriority.LOW,
            'Use connectors such as "além disso", "portanto" and "por exemplo"',
        ))

    avg_paragraph = page.word_count / max(len(page.paragraphs), 1)
    if avg_paragraph <= LONG_PARAGRAPH_WORDS:
        score += 35
        issues.append(_success(f"Paragraphs average {avg_paragraph:.0f} words"))
    else:
        issues.append(_issue(
            IssueType.WARNING, f"Long paragraphs ({avg_paragraph:.0f} words on average)",
            IssuePriority.MEDIUM, "Keep paragraphs under 100 words",
        ))

    return CategoryResult.build(CategoryName.READABILITY, score, issues)


# ─── AI-Search Optimization ───────────────────────────────────────────


def has_structured_content(page: ExtractedPage) -> bool:
    return page.list_count > 0 or any(p.search(page.text) for p in STRUCTURE_PATTERNS)


def check_ai_search_optimization(
    page: ExtractedPage,
    phrases: Sequence[ExtractedPhrase],
    prompts: Sequence[str],
    business_context: str,
) -> CategoryResult:
    issues: List[Issue] = []
    score = 0

    if len(phrases) >= MIN_KEYWORDS_FOR_AI:
        score += 25
        issues.append(_success(f"{len(phrases)} key terms identified"))
    else:
        issues.append(_issue(
            IssueType.WARNING, f"Only {len(phrases)} key terms identified", IssuePriority.MEDIUM,
            "Add more relevant content with specific terms",
        ))

    if has_structured_content(page):
        score += 25
        issues.append(_success("Content is well structured for AI assistants"))
    else:
        issues.append(_issue(
            IssueType.WARNING, "Poorly structured content", IssuePriority.MEDIUM,
            "Use lists, subheadings and well-organized paragraphs",
        ))

    if _contains_any(page.text, FAQ_TERMS):
        score += 25
        issues.append(_success("FAQ section identified"))
    else:
        issues.append(_issue(
            IssueType.WARNING, "No FAQ section identified", IssuePriority.MEDIUM,
            "Add a FAQ section to improve discovery by AI assistants",
        ))

    if _contains_any(page.text, ACTION_WORDS):
        score += 25
        issues.append(_success("Actionable content identified"))
    else:
        issues.append(_issue(
            IssueType.WARNING, "Little actionable content", IssuePriority.MEDIUM,
            "Add instructions, guides and practical solutions",
        ))

    top_terms = ", ".join(phrase.text for phrase in phrases[:10])
    issues.append(_issue(
        IssueType.SUCCESS,
        f"Suggested prompts: {'; '.join(prompts[:3])}" if prompts else "No prompts could be generated",
        IssuePriority.LOW,
        f"Identified terms: {top_terms}" if top_terms else None,
        {
            "keywords": [phrase.model_dump() for phrase in phrases],
            "prompts": list(prompts),
            "business_context": business_context,
        },
    ))

    return CategoryResult.build(CategoryName.AI_SEARCH_OPTIMIZATION, score, issues)
