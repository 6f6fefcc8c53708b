"""Data models for project matching."""

from enum import Enum
from typing import Any, List, Optional
from datetime import datetime, timezone
from pydantic import BaseModel, Field, field_validator, model_validator


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Theme(str, Enum):
    """Thematic category of a pitch video."""

    SPORT = "sport"
    CULTURE = "culture"
    EDUCATION = "education"
    FAMILY = "family"
    PROFESSIONAL = "professional"
    LEISURE = "leisure"
    TRAVEL = "travel"
    COOKING = "cooking"
    TECHNOLOGY = "technology"
    HEALTH = "health"
    OTHER = "other"


class AnalysisStatus(str, Enum):
    """Lifecycle of a media item's analysis."""

    PENDING = "pending"
    RUNNING = "running"
    COMPLETE = "complete"
    FAILED = "failed"


class Keyword(BaseModel):
    """A keyword extracted from a transcript with its relevance weight."""

    term: str = Field(..., min_length=1)
    weight: float = 1.0

    @model_validator(mode="before")
    @classmethod
    def normalize_shape(cls, value: Any) -> Any:
        """Accept bare strings and legacy {keyword, score} mappings."""
        if isinstance(value, str):
            return {"term": value, "weight": 1.0}
        if isinstance(value, dict) and "term" not in value and "keyword" in value:
            return {"term": value["keyword"], "weight": value.get("score", 1.0)}
        return value


class NamedEntity(BaseModel):
    """A named entity spotted in a transcript."""

    text: str
    type: str = "PERSON"
    confidence: float = Field(0.7, ge=0.0, le=1.0)


class AnalysisResult(BaseModel):
    """Complete output of the media analysis pipeline for one item."""

    transcript: str
    keywords: List[Keyword]
    summary: str
    embedding: List[float] = Field(..., min_length=1)
    quality_score: float = Field(..., ge=0.0, le=1.0)
    named_entities: List[NamedEntity] = Field(default_factory=list)


class MediaItem(BaseModel):
    """A pitch video and the fields derived from its analysis."""

    id: str
    owner_id: str
    title: str
    description: Optional[str] = None
    theme: Theme = Theme.OTHER
    media_ref: Optional[str] = Field(None, description="Local path or URL of the media file")
    status: AnalysisStatus = AnalysisStatus.PENDING

    transcript: Optional[str] = None
    keywords: Optional[List[Keyword]] = None
    summary: Optional[str] = None
    embedding: Optional[List[float]] = None
    quality_score: Optional[float] = Field(None, ge=0.0, le=1.0)
    named_entities: Optional[List[NamedEntity]] = None

    uploaded_at: datetime = Field(default_factory=_utcnow)
    analyzed_at: Optional[datetime] = None
    analysis_error: Optional[str] = None

    @field_validator("embedding")
    @classmethod
    def embedding_not_empty(cls, value: Optional[List[float]]) -> Optional[List[float]]:
        """An embedding, when present, has at least one dimension."""
        if value is not None and len(value) == 0:
            raise ValueError("embedding must not be empty")
        return value

    @model_validator(mode="after")
    def embedding_matches_status(self) -> "MediaItem":
        """Embedding is present if and only if the analysis is complete."""
        complete = self.status == AnalysisStatus.COMPLETE
        if complete and self.embedding is None:
            raise ValueError("complete items must carry an embedding")
        if not complete and self.embedding is not None:
            raise ValueError(f"{self.status.value} items must not carry an embedding")
        return self

    @property
    def is_analyzed(self) -> bool:
        """Whether the item can take part in matching."""
        return self.status == AnalysisStatus.COMPLETE

    @property
    def keyword_terms(self) -> List[str]:
        """Keyword terms in extraction order."""
        return [keyword.term for keyword in self.keywords or []]


class SimilarityResult(BaseModel):
    """A candidate item scored against a reference vector."""

    item_id: str
    score: float = Field(..., ge=-1.0, le=1.0)
    title: str
    theme: Theme
    owner_id: str
    keywords: List[Keyword] = Field(default_factory=list)
    quality_score: Optional[float] = None
    summary: Optional[str] = None


class Recommendation(SimilarityResult):
    """A similarity result re-ranked with the item's quality score."""

    final_score: float
    reason: str


class TasteProfileSummary(BaseModel):
    """What the recommender learned about the user."""

    analyzed_item_count: int = 0
    preferred_themes: List[Theme] = Field(default_factory=list)


class RecommendationResponse(BaseModel):
    """Recommendations for a user together with their taste profile."""

    recommendations: List[Recommendation] = Field(default_factory=list)
    profile: TasteProfileSummary = Field(default_factory=TasteProfileSummary)
    total_found: int = 0
    message: Optional[str] = None


class ProjectReference(BaseModel):
    """Short description of a project for display."""

    id: str
    title: str
    theme: Theme


class CollaboratorResult(BaseModel):
    """A potential collaborator surfaced through one of their projects."""

    owner_id: str
    shared_project: ProjectReference
    similarity_score: float
    complementarity_score: float
    shared_keywords: List[str]
    unique_keywords_offered: List[str]
    potential_collaboration: float


class CompatibilityResult(BaseModel):
    """Pairwise compatibility of two projects."""

    item_a: ProjectReference
    item_b: ProjectReference
    score: float
    level: str
    recommendation: str
    shared_domains: List[str] = Field(default_factory=list)


class AnalysisStatistics(BaseModel):
    """Count of a user's media items per analysis status."""

    total: int = 0
    pending: int = 0
    running: int = 0
    complete: int = 0
    failed: int = 0
