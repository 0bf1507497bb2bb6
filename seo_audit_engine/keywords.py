"""
Keyword/phrase extraction and business-context classification.

Candidate terms are single words and 2-4 word windows taken from the page
title, meta description and body. They are ranked by frequency plus
positional and contextual bonuses. The vocabularies are tuned for
Brazilian Portuguese.
"""

import re
from collections import Counter
from typing import Dict, Iterable, List, Tuple

from .models import ExtractedPhrase

MAX_KEYWORDS = 80
MIN_SINGLE_WORD_LENGTH = 4

NGRAM_WEIGHTS = {2: 3, 3: 5, 4: 7}
SINGLE_WORD_WEIGHT = 2
COMMERCIAL_BONUS = 15
LONG_WORD_BONUS = 5
LONG_WORD_LENGTH = 6
DOMAIN_PATTERN_BONUS = 20
TITLE_DESCRIPTION_BONUS = 10

GENERAL_CONTEXT = "general"

STOP_WORDS = frozenset({
    "a", "e", "o", "de", "da", "do", "para", "com", "em", "na", "no", "por", "que", "se", "um", "uma",
    "os", "as", "dos", "das", "nos", "nas", "pelo", "pela", "pelos", "pelas", "ao", "aos", "à", "às",
    "este", "esta", "estes", "estas", "esse", "essa", "esses", "essas", "aquele", "aquela", "aqueles", "aquelas",
    "isso", "isto", "aquilo", "seu", "sua", "seus", "suas", "nosso", "nossa", "nossos", "nossas",
    "meu", "minha", "meus", "minhas", "ele", "ela", "eles", "elas", "você", "vocês", "nós", "eu", "tu",
    "mas", "mais", "muito", "muita", "muitos", "muitas", "bem", "já", "ainda", "onde", "como", "quando",
    "porque", "então", "assim", "também", "só", "até", "depois", "antes", "sobre", "entre", "sem", "sob",
    "num", "numa", "foi", "ser", "são", "é", "está", "estão", "era", "tem", "têm", "ter", "há", "vai",
    "pode", "podem", "qual", "quais", "quem", "cada", "todo", "toda", "todos", "todas", "outro", "outra",
    "outros", "outras", "mesmo", "mesma", "lhe", "lhes", "me", "te", "nem", "ou", "não", "sim", "seja",
    "aqui", "ali", "lá", "agora", "sempre", "nunca", "the", "and", "of", "to", "in", "for", "is", "on",
})

COMMERCIAL_TERMS = frozenset({
    "comprar", "compra", "compre", "venda", "vendas", "vender", "preço", "preços", "orçamento",
    "loja", "oferta", "ofertas", "promoção", "desconto", "descontos", "serviço", "serviços",
    "contratar", "empresa", "empresas", "produto", "produtos", "atendimento", "entrega", "frete",
    "qualidade", "melhor", "melhores", "profissional", "profissionais", "consultoria", "manutenção",
    "instalação", "fornecedor", "fornecedores", "distribuidor", "barato", "garantia", "especializada",
    "especializado", "solução", "soluções",
})

DOMAIN_PATTERNS = [
    re.compile(r"^\w+ hidráulic[oa]s?$"),
    re.compile(r"^\w+ industriai?s?$"),
    re.compile(r"^serviços? de \w+$"),
    re.compile(r"^manutenção de \w+$"),
    re.compile(r"^instalação de \w+$"),
    re.compile(r"^equipamentos? (?:de|para) \w+$"),
    re.compile(r"^consultoria (?:em|de) \w+$"),
    re.compile(r"^loja de \w+$"),
    re.compile(r"^venda de \w+$"),
    re.compile(r"^curso de \w+$"),
    re.compile(r"^\w+ profissional$"),
    re.compile(r"^\w+ automotivos?$"),
]

# Ordered table; a tie at the top falls back to GENERAL_CONTEXT.
BUSINESS_CONTEXTS: Dict[str, List[str]] = {
    "ecommerce": [
        "loja", "comprar", "compre", "carrinho", "frete", "produto", "produtos", "oferta",
        "promoção", "desconto", "entrega", "pagamento", "parcelamento", "checkout",
    ],
    "services": [
        "serviço", "serviços", "atendimento", "orçamento", "consultoria", "manutenção",
        "instalação", "assistência", "reparo", "agendamento", "contratar", "especializada",
    ],
    "technology": [
        "software", "sistema", "sistemas", "aplicativo", "app", "tecnologia", "cloud", "nuvem",
        "dados", "plataforma", "integração", "api", "digital", "automação",
    ],
    "education": [
        "curso", "cursos", "aula", "aulas", "escola", "faculdade", "ensino", "aluno", "alunos",
        "professor", "certificado", "treinamento", "aprendizado", "matrícula",
    ],
    "health": [
        "saúde", "clínica", "médico", "médica", "consulta", "tratamento", "paciente", "pacientes",
        "exame", "exames", "hospital", "terapia", "odontologia", "bem-estar",
    ],
    "finance": [
        "financeiro", "finanças", "investimento", "investimentos", "crédito", "empréstimo", "banco",
        "contabilidade", "seguro", "seguros", "juros", "financiamento", "imposto", "impostos",
    ],
    "manufacturing": [
        "indústria", "industrial", "industriais", "fábrica", "fabricação", "produção", "máquinas",
        "equipamentos", "hidráulicos", "hidráulica", "usinagem", "metalúrgica", "peças", "componentes",
    ],
    "legal": [
        "advogado", "advogados", "advocacia", "jurídico", "jurídica", "direito", "processo",
        "processos", "tribunal", "contrato", "contratos", "trabalhista", "escritório", "lei",
    ],
    "real_estate": [
        "imóvel", "imóveis", "apartamento", "apartamentos", "casa", "casas", "aluguel", "locação",
        "imobiliária", "corretor", "terreno", "condomínio", "venda", "compra",
    ],
    "automotive": [
        "carro", "carros", "veículo", "veículos", "automóvel", "automotivo", "oficina", "moto",
        "motos", "pneu", "pneus", "mecânica", "concessionária", "revisão",
    ],
}

_TOKEN_RE = re.compile(r"[^\W_]+")
_SEGMENT_SPLIT_RE = re.compile(r"[.!?;:\n|•·()\[\]\"]+")


def tokenize(text: str) -> List[str]:
    """Lowercase Unicode word tokens; hyphens, underscores and punctuation split."""
    return _TOKEN_RE.findall((text or "").lower())


def _is_content_token(token: str) -> bool:
    return len(token) >= 2 and token not in STOP_WORDS and not token.isdigit()


def _ngram_windows(tokens: List[str], n: int) -> Iterable[Tuple[str, ...]]:
    for i in range(len(tokens) - n + 1):
        window = tuple(tokens[i:i + n])
        if not _is_content_token(window[0]) or not _is_content_token(window[-1]):
            continue
        if any(token.isdigit() for token in window):
            continue
        yield window


def _appears_in(term: str, text: str) -> bool:
    return re.search(rf"(?<!\w){re.escape(term)}(?!\w)", text) is not None


def extract_keywords(
    text: str,
    title: str = "",
    description: str = "",
    limit: int = MAX_KEYWORDS,
) -> List[ExtractedPhrase]:
    """
    Rank candidate words and 2-4 word phrases by a weighted score.

    Single words score ``frequency * 2``; n-grams score 3/5/7 per occurrence.
    Commercial-intent overlap, long words, domain patterns and verbatim
    presence in the title or description add fixed bonuses.
    """
    title_lower = (title or "").lower()
    description_lower = (description or "").lower()
    combined = f"{title_lower}\n{description_lower}\n{(text or '').lower()}"

    word_counts: Counter = Counter()
    ngram_counts: Dict[int, Counter] = {n: Counter() for n in NGRAM_WEIGHTS}

    for segment in _SEGMENT_SPLIT_RE.split(combined):
        tokens = tokenize(segment)
        word_counts.update(token for token in tokens if _is_content_token(token))
        for n in NGRAM_WEIGHTS:
            ngram_counts[n].update(" ".join(window) for window in _ngram_windows(tokens, n))

    scores: Dict[str, float] = {}
    for word, count in word_counts.items():
        score = count * SINGLE_WORD_WEIGHT
        if word in COMMERCIAL_TERMS:
            score += COMMERCIAL_BONUS
        if len(word) >= LONG_WORD_LENGTH:
            score += LONG_WORD_BONUS
        if _appears_in(word, title_lower) or _appears_in(word, description_lower):
            score += TITLE_DESCRIPTION_BONUS
        scores[word] = score

    for n, counts in ngram_counts.items():
        for phrase, count in counts.items():
            score = count * NGRAM_WEIGHTS[n]
            if any(token in COMMERCIAL_TERMS for token in phrase.split()):
                score += COMMERCIAL_BONUS
            if any(pattern.match(phrase) for pattern in DOMAIN_PATTERNS):
                score += DOMAIN_PATTERN_BONUS
            if _appears_in(phrase, title_lower) or _appears_in(phrase, description_lower):
                score += TITLE_DESCRIPTION_BONUS
            scores[phrase] = score

    ranked = sorted(
        (
            (term, score)
            for term, score in scores.items()
            if " " in term or len(term) >= MIN_SINGLE_WORD_LENGTH
        ),
        key=lambda item: (-item[1], item[0]),
    )
    return [ExtractedPhrase(text=term, score=float(score)) for term, score in ranked[:limit]]


def classify_business_context(text: str) -> str:
    """Return the context with the most indicator hits, or ``general``."""
    lowered = (text or "").lower()
    hits = {
        context: sum(len(re.findall(rf"\b{re.escape(term)}\b", lowered)) for term in terms)
        for context, terms in BUSINESS_CONTEXTS.items()
    }
    ranked = sorted(hits.values(), reverse=True)
    best = ranked[0]
    if best == 0 or (len(ranked) > 1 and ranked[1] == best):
        return GENERAL_CONTEXT
    return next(context for context, count in hits.items() if count == best)
