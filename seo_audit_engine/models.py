"""
SEO audit data models.

Pydantic models shared by the extractor, the category checks and the
report aggregator. The category/issue shape is the wire contract consumed
by persistence and the dashboard.
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import List, Dict, Optional, Any, Tuple
from enum import Enum


class IssueType(str, Enum):
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


class IssuePriority(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class CategoryStatus(str, Enum):
    EXCELLENT = "excellent"
    GOOD = "good"
    NEEDS_IMPROVEMENT = "needs_improvement"
    CRITICAL = "critical"


class ReportStatus(str, Enum):
    PENDING = "pending"
    ANALYZING = "analyzing"
    COMPLETED = "completed"
    FAILED = "failed"


class CategoryName(str, Enum):
    META_TAGS = "meta_tags"
    HTML_STRUCTURE = "html_structure"
    IMAGES = "images"
    KEYWORD_OPTIMIZATION = "keyword_optimization"
    CONTENT_STRUCTURE = "content_structure"
    LINKS = "links"
    TECHNICAL_SEO = "technical_seo"
    READABILITY = "readability"
    AI_SEARCH_OPTIMIZATION = "ai_search_optimization"
    PERFORMANCE = "performance"
    MOBILE_FRIENDLY = "mobile_friendly"


# (excellent, good, needs_improvement) lower bounds
DEFAULT_THRESHOLDS: Tuple[int, int, int] = (90, 70, 50)
METRICS_THRESHOLDS: Tuple[int, int, int] = (80, 60, 40)


def clamp_score(score: float) -> int:
    """Round half up and clamp to [0, 100]."""
    return max(0, min(100, int(score + 0.5)))


def status_for_score(
    score: int, thresholds: Tuple[int, int, int] = DEFAULT_THRESHOLDS
) -> CategoryStatus:
    excellent, good, fair = thresholds
    if score >= excellent:
        return CategoryStatus.EXCELLENT
    if score >= good:
        return CategoryStatus.GOOD
    if score >= fair:
        return CategoryStatus.NEEDS_IMPROVEMENT
    return CategoryStatus.CRITICAL


# ─── Findings ─────────────────────────────────────────────────────────


class Issue(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: IssueType
    message: str
    priority: IssuePriority = IssuePriority.LOW
    recommendation: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None


class CategoryResult(BaseModel):
    category: CategoryName
    score: int = Field(default=0, ge=0, le=100)
    status: CategoryStatus = CategoryStatus.CRITICAL
    issues: List[Issue] = Field(default_factory=list)

    @classmethod
    def build(
        cls,
        category: CategoryName,
        score: float,
        issues: List[Issue],
        thresholds: Tuple[int, int, int] = DEFAULT_THRESHOLDS,
    ) -> "CategoryResult":
        """Clamp the raw score and derive the status from it."""
        clamped = clamp_score(score)
        return cls(
            category=category,
            score=clamped,
            status=status_for_score(clamped, thresholds),
            issues=list(issues),
        )


# ─── Extraction ───────────────────────────────────────────────────────


class ImageInfo(BaseModel):
    src: str = ""
    alt: Optional[str] = None
    has_alt: bool = False


class LinkInfo(BaseModel):
    href: str = ""
    text: str = ""
    target: Optional[str] = None
    rel: str = ""
    is_internal: bool = False
    is_external: bool = False


class ExtractedPage(BaseModel):
    """Everything the analyzers need, extracted once per audit."""

    url: str
    hostname: str = ""
    title: str = ""
    meta_description: str = ""
    headings: Dict[int, List[str]] = Field(
        default_factory=lambda: {level: [] for level in range(1, 7)}
    )
    images: List[ImageInfo] = Field(default_factory=list)
    links: List[LinkInfo] = Field(default_factory=list)
    internal_link_count: int = 0
    external_link_count: int = 0
    has_doctype: bool = False
    lang: Optional[str] = None
    semantic_tags: List[str] = Field(default_factory=list)
    list_count: int = 0
    canonical: Optional[str] = None
    robots: Optional[str] = None
    viewport: Optional[str] = None
    open_graph: Dict[str, str] = Field(default_factory=dict)
    twitter_card: Dict[str, str] = Field(default_factory=dict)
    has_structured_data: bool = False
    text: str = ""
    paragraphs: List[str] = Field(default_factory=list)
    word_count: int = 0

    @property
    def words(self) -> List[str]:
        return self.text.split()


class ExtractedPhrase(BaseModel):
    text: str
    score: float = 0.0


class UrlValidation(BaseModel):
    valid: bool
    normalized: str = ""
    error: Optional[str] = None


class ExternalMetrics(BaseModel):
    """Raw PageSpeed responses; either side may be missing."""

    desktop: Optional[Dict[str, Any]] = None
    mobile: Optional[Dict[str, Any]] = None

    @property
    def available(self) -> bool:
        return self.desktop is not None or self.mobile is not None


# ─── Report ───────────────────────────────────────────────────────────


class AuditReport(BaseModel):
    url: str
    focus_keyword: Optional[str] = None
    overall_score: int = Field(default=0, ge=0, le=100)
    categories: List[CategoryResult] = Field(default_factory=list)
    status: ReportStatus = ReportStatus.PENDING
    error: Optional[str] = None
    technical_error: Optional[str] = None

    def category(self, name: CategoryName) -> Optional[CategoryResult]:
        for result in self.categories:
            if result.category == name:
                return result
        return None

    @property
    def errors(self) -> List[str]:
        return [
            f"{c.category.value}: {i.message}"
            for c in self.categories
            for i in c.issues
            if i.type == IssueType.ERROR
        ]

    @property
    def warnings(self) -> List[str]:
        return [
            f"{c.category.value}: {i.message}"
            for c in self.categories
            for i in c.issues
            if i.type == IssueType.WARNING
        ]
