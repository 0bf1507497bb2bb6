"""
AI-search prompt synthesis.

Builds natural-language questions a user might type into an AI assistant
to find a page like the audited one. Each generator is a small pure
function; their outputs are concatenated, deduplicated, length-filtered
and capped.
"""

import datetime
import re
from typing import Iterable, List, Optional, Sequence

from pydantic import BaseModel

from .models import ExtractedPhrase

MAX_PROMPTS = 25
MIN_PROMPT_LENGTH = 8
MAX_PROMPT_LENGTH = 120

CONTEXT_TEMPLATES = {
    "ecommerce": [
        "Onde comprar {kw} com o melhor preço?",
        "Loja confiável para comprar {kw}",
        "{kw} com entrega rápida",
    ],
    "services": [
        "Empresa especializada em {kw}",
        "Como contratar serviço de {kw}?",
        "Quanto custa {kw}?",
    ],
    "technology": [
        "Melhor software de {kw}",
        "Como implementar {kw} na empresa?",
        "{kw}: quais ferramentas usar?",
    ],
    "education": [
        "Melhor curso de {kw}",
        "Como aprender {kw} do zero?",
        "{kw} para iniciantes",
    ],
}

LOCATIONS = [
    "São Paulo", "Rio de Janeiro", "Belo Horizonte", "Brasília", "Curitiba", "Porto Alegre",
    "Salvador", "Recife", "Fortaleza", "Campinas", "Goiânia", "Manaus", "Florianópolis",
    "Vitória", "Belém", "Santos", "Minas Gerais", "Paraná", "Santa Catarina", "Rio Grande do Sul",
    "Bahia", "Pernambuco", "Ceará", "Goiás", "Espírito Santo",
]


class StructuralCues(BaseModel):
    has_cta: bool = False
    has_lists: bool = False
    has_faq: bool = False


def _context_prompts(keywords: Sequence[str], context: str) -> Iterable[str]:
    for template in CONTEXT_TEMPLATES.get(context, []):
        for kw in keywords[:2]:
            yield template.format(kw=kw)


def _long_tail_prompts(keywords: Sequence[str]) -> Iterable[str]:
    for kw in keywords[:3]:
        yield f"{kw} vale a pena?"
        yield f"Como funciona {kw}?"


def _comparison_prompts(keywords: Sequence[str]) -> Iterable[str]:
    top = keywords[:3]
    for i, first in enumerate(top):
        for second in top[i + 1:]:
            yield f"Diferença entre {first} e {second}"
    if len(top) >= 2:
        yield f"{top[0]} ou {top[1]}: qual escolher?"


def detect_locations(text: str) -> List[str]:
    """Known Brazilian cities and states mentioned in the text, in table order."""
    lowered = (text or "").lower()
    return [
        place for place in LOCATIONS
        if re.search(rf"(?<!\w){re.escape(place.lower())}(?!\w)", lowered)
    ]


def _geo_prompts(keywords: Sequence[str], text: str) -> Iterable[str]:
    if not keywords:
        return
    places = detect_locations(text)[:2]
    if places:
        for place in places:
            yield f"{keywords[0]} em {place}"
            yield f"Melhor empresa de {keywords[0]} em {place}"
    else:
        yield f"{keywords[0]} no Brasil"
        yield f"Melhores empresas de {keywords[0]} no Brasil"


def _problem_prompts(keywords: Sequence[str], cues: StructuralCues) -> Iterable[str]:
    if not keywords:
        return
    kw = keywords[0]
    yield f"Como resolver problemas com {kw}?"
    yield f"Dicas para escolher {kw}"
    if cues.has_faq:
        yield f"Dúvidas frequentes sobre {kw}"
    if cues.has_cta:
        yield f"Como solicitar orçamento de {kw}?"
    if cues.has_lists:
        yield f"Passo a passo para {kw}"


def brand_from_hostname(hostname: str) -> str:
    """The registrable label of a hostname, e.g. ``acme`` for ``www.acme.com.br``."""
    labels = [label for label in (hostname or "").lower().split(".") if label]
    if labels and labels[0] == "www":
        labels = labels[1:]
    return labels[0] if labels else ""


def _brand_prompts(keywords: Sequence[str], hostname: str) -> Iterable[str]:
    brand = brand_from_hostname(hostname)
    if not brand:
        return
    yield f"{brand} é confiável?"
    yield f"O que é {brand}?"
    if keywords:
        yield f"{brand} {keywords[0]} avaliações"


def _trend_prompts(keywords: Sequence[str], year: int) -> Iterable[str]:
    for kw in keywords[:2]:
        yield f"Tendências de {kw} em {year}"
    if keywords:
        yield f"Melhores opções de {keywords[0]} {year}"


def finalize_prompts(candidates: Iterable[str], limit: int = MAX_PROMPTS) -> List[str]:
    """Deduplicate (case-insensitive), keep 8-120 characters, cap at ``limit``."""
    seen = set()
    prompts: List[str] = []
    for prompt in candidates:
        prompt = " ".join(prompt.split())
        key = prompt.lower()
        if key in seen or not MIN_PROMPT_LENGTH <= len(prompt) <= MAX_PROMPT_LENGTH:
            continue
        seen.add(key)
        prompts.append(prompt)
        if len(prompts) >= limit:
            break
    return prompts


def generate_prompts(
    phrases: Sequence[ExtractedPhrase],
    context: str,
    cues: StructuralCues,
    text: str = "",
    hostname: str = "",
    year: Optional[int] = None,
    limit: int = MAX_PROMPTS,
) -> List[str]:
    year = year or datetime.date.today().year
    keywords = [phrase.text for phrase in phrases[:5]]

    candidates: List[str] = []
    candidates.extend(_context_prompts(keywords, context))
    candidates.extend(_long_tail_prompts(keywords))
    candidates.extend(_comparison_prompts(keywords))
    candidates.extend(_geo_prompts(keywords, text))
    candidates.extend(_problem_prompts(keywords, cues))
    candidates.extend(_brand_prompts(keywords, hostname))
    candidates.extend(_trend_prompts(keywords, year))
    return finalize_prompts(candidates, limit)
