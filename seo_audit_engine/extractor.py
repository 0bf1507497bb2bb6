"""
Markup extraction.

Parses raw HTML once per audit into an ExtractedPage. Element data
(title, meta tags, headings, images, anchors) comes from an lxml tree;
the plain-text rendition used for word, sentence and paragraph statistics
comes from a regex pipeline that keeps block boundaries as paragraph breaks.
"""

import re
from typing import Dict, List, Optional
from urllib.parse import urlparse

from lxml import etree
from lxml import html as lxml_html
from lxml.html import HtmlElement

from .models import ExtractedPage, ImageInfo, LinkInfo

SEMANTIC_TAGS = ("header", "nav", "main", "article", "section", "aside", "footer")

_XML_DECLARATION_RE = re.compile(r"^\s*<\?xml[^>]*\?>", re.IGNORECASE)
_DOCTYPE_RE = re.compile(r"<!doctype\s+html", re.IGNORECASE)
_DROP_BLOCKS_RE = re.compile(
    r"<(script|style|noscript|head|title)\b[^>]*>.*?</\1\s*>", re.IGNORECASE | re.DOTALL
)
_COMMENT_RE = re.compile(r"<!--.*?-->", re.DOTALL)
_BLOCK_END_RE = re.compile(
    r"</(p|div|li|h[1-6]|section|article|header|footer|tr|ul|ol|table|blockquote)\s*>|<br\s*/?>",
    re.IGNORECASE,
)
_TAG_RE = re.compile(r"<[^>]+>")
_ENTITY_RE = re.compile(r"&(#\d+|#[xX][0-9a-fA-F]+|[a-zA-Z]+);")
_PARAGRAPH_SPLIT_RE = re.compile(r"\n\s*\n")
_WHITESPACE_RE = re.compile(r"\s+")

ENTITIES: Dict[str, str] = {
    "nbsp": " ",
    "amp": "&",
    "lt": "<",
    "gt": ">",
    "quot": '"',
    "apos": "'",
    "ndash": "-",
    "mdash": "-",
    "hellip": "...",
    "laquo": "«",
    "raquo": "»",
    "ldquo": '"',
    "rdquo": '"',
    "lsquo": "'",
    "rsquo": "'",
    "copy": "©",
    "reg": "®",
    "trade": "™",
    "deg": "°",
    "ordm": "º",
    "ordf": "ª",
    "aacute": "á", "Aacute": "Á",
    "agrave": "à", "Agrave": "À",
    "acirc": "â", "Acirc": "Â",
    "atilde": "ã", "Atilde": "Ã",
    "eacute": "é", "Eacute": "É",
    "ecirc": "ê", "Ecirc": "Ê",
    "iacute": "í", "Iacute": "Í",
    "oacute": "ó", "Oacute": "Ó",
    "ocirc": "ô", "Ocirc": "Ô",
    "otilde": "õ", "Otilde": "Õ",
    "uacute": "ú", "Uacute": "Ú",
    "uuml": "ü", "Uuml": "Ü",
    "ccedil": "ç", "Ccedil": "Ç",
}


def decode_entities(text: str) -> str:
    """Decode the fixed named-entity table and numeric references in one pass."""

    def _replace(match: "re.Match[str]") -> str:
        ref = match.group(1)
        if ref.startswith("#"):
            try:
                codepoint = int(ref[2:], 16) if ref[1] in "xX" else int(ref[1:])
                return chr(codepoint)
            except (ValueError, OverflowError):
                return match.group(0)
        return ENTITIES.get(ref, match.group(0))

    return _ENTITY_RE.sub(_replace, text)


def extract_text(raw_html: str) -> List[str]:
    """
    Return the visible text of a document as a list of paragraphs.

    Scripts, styles and the head are removed first so they never count as
    content. Closing block tags and <br> become paragraph breaks before the
    remaining tags are stripped.
    """
    cleaned = _COMMENT_RE.sub(" ", raw_html or "")
    cleaned = _DROP_BLOCKS_RE.sub(" ", cleaned)
    cleaned = _BLOCK_END_RE.sub("\n\n", cleaned)
    cleaned = _TAG_RE.sub(" ", cleaned)
    cleaned = decode_entities(cleaned)

    paragraphs = []
    for chunk in _PARAGRAPH_SPLIT_RE.split(cleaned):
        paragraph = _WHITESPACE_RE.sub(" ", chunk).strip()
        if paragraph:
            paragraphs.append(paragraph)
    return paragraphs


def _parse_html(raw_html: str) -> Optional[HtmlElement]:
    """Parse HTML string into an lxml tree, returning None on failure."""
    source = _XML_DECLARATION_RE.sub("", raw_html or "")
    if not source.strip():
        return None
    try:
        return lxml_html.fromstring(source)
    except (etree.ParserError, ValueError):
        return None


def _bare_host(hostname: str) -> str:
    hostname = (hostname or "").lower()
    return hostname[4:] if hostname.startswith("www.") else hostname


def classify_href(href: str, page_host: str) -> Dict[str, bool]:
    """An href is internal when it is same-host, root-relative or a fragment."""
    href = href.strip()
    if href.startswith("//"):
        href = "https:" + href
    elif href.startswith("/") or href.startswith("#"):
        return {"internal": True, "external": False}

    if not href.lower().startswith(("http://", "https://")):
        return {"internal": False, "external": False}

    link_host = _bare_host(urlparse(href).hostname or "")
    if link_host and link_host == _bare_host(page_host):
        return {"internal": True, "external": False}
    return {"internal": False, "external": True}


def _meta_content(tree: HtmlElement, attr: str, key: str) -> Optional[str]:
    for meta in tree.xpath(f"//meta[@{attr}]"):
        if (meta.get(attr) or "").strip().lower() == key:
            content = meta.get("content")
            if content is not None:
                return content.strip()
    return None


def _meta_family(tree: HtmlElement, attr: str, prefix: str) -> Dict[str, str]:
    tags: Dict[str, str] = {}
    for meta in tree.xpath(f"//meta[@{attr}]"):
        key = (meta.get(attr) or "").strip().lower()
        if key.startswith(prefix) and key not in tags:
            tags[key] = (meta.get("content") or "").strip()
    return tags


def _text(el: HtmlElement) -> str:
    return _WHITESPACE_RE.sub(" ", el.text_content() or "").strip()


def extract_page(url: str, raw_html: str) -> ExtractedPage:
    """
    Extract every signal the category checks need from one document.

    Malformed or empty markup yields an empty but valid ExtractedPage.
    """
    hostname = (urlparse(url).hostname or "").lower()
    paragraphs = extract_text(raw_html)
    text = "\n\n".join(paragraphs)

    page = ExtractedPage(
        url=url,
        hostname=hostname,
        has_doctype=bool(_DOCTYPE_RE.search(raw_html or "")),
        text=text,
        paragraphs=paragraphs,
        word_count=len(text.split()),
    )

    tree = _parse_html(raw_html)
    if tree is None:
        return page

    titles = tree.xpath("//title")
    page.title = _text(titles[0]) if titles else ""
    page.meta_description = _meta_content(tree, "name", "description") or ""

    headings: Dict[int, List[str]] = {level: [] for level in range(1, 7)}
    for el in tree.xpath("//*[self::h1 or self::h2 or self::h3 or self::h4 or self::h5 or self::h6]"):
        headings[int(el.tag[1])].append(_text(el))
    page.headings = headings

    images: List[ImageInfo] = []
    for img in tree.xpath("//img"):
        alt = img.get("alt")
        images.append(
            ImageInfo(
                src=img.get("src", "") or img.get("data-src", ""),
                alt=alt,
                has_alt=alt is not None,
            )
        )
    page.images = images

    links: List[LinkInfo] = []
    for a in tree.xpath("//a[@href]"):
        href = (a.get("href") or "").strip()
        if not href:
            continue
        kind = classify_href(href, hostname)
        links.append(
            LinkInfo(
                href=href,
                text=_text(a),
                target=a.get("target"),
                rel=(a.get("rel") or "").lower(),
                is_internal=kind["internal"],
                is_external=kind["external"],
            )
        )
    page.links = links
    page.internal_link_count = sum(1 for link in links if link.is_internal)
    page.external_link_count = sum(1 for link in links if link.is_external)

    langs = tree.xpath("//html/@lang")
    page.lang = (langs[0].strip() or None) if langs else None
    page.semantic_tags = [tag for tag in SEMANTIC_TAGS if tree.xpath(f"//{tag}")]
    page.list_count = len(tree.xpath("//ul | //ol"))

    canonicals = [
        link.get("href", "").strip()
        for link in tree.xpath("//link[@rel]")
        if (link.get("rel") or "").strip().lower() == "canonical"
    ]
    page.canonical = canonicals[0] if canonicals and canonicals[0] else None
    page.robots = _meta_content(tree, "name", "robots")
    page.viewport = _meta_content(tree, "name", "viewport")
    page.open_graph = _meta_family(tree, "property", "og:")
    page.twitter_card = _meta_family(tree, "name", "twitter:")
    page.has_structured_data = bool(
        tree.xpath('//script[@type="application/ld+json"]') or tree.xpath("//*[@itemscope]")
    )
    return page
