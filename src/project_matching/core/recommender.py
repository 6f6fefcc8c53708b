"""Personalised project recommendations from a user's taste profile."""

import logging
from collections import Counter
from typing import List, Optional, Sequence

from ..config import MatchingConfig
from ..models import (
    AnalysisStatus,
    MediaItem,
    Recommendation,
    RecommendationResponse,
    SimilarityResult,
    TasteProfileSummary,
    Theme
)
from ..services.media_repository import MediaRepository
from .similarity_index import (
    SimilarityIndex,
    ThemeFilter,
    normalize_theme_filter,
    validate_limit
)
from .vector_math import average

logger = logging.getLogger(__name__)

SIMILARITY_WEIGHT = 0.7
QUALITY_WEIGHT = 0.3
DEFAULT_QUALITY = 0.5

NO_ANALYZED_ITEMS_MESSAGE = "no analyzed items available"


def preferred_themes(items: Sequence[MediaItem], top_n: int = 3) -> List[Theme]:
    """
    Most frequent themes among items, ties broken by first appearance.

    Args:
        items: Items to count themes over
        top_n: Number of themes to return

    Returns:
        Up to top_n themes, most frequent first
    """
    counts = Counter(item.theme for item in items)
    # Counter keeps first-seen order and most_common() sorts stably
    return [theme for theme, _ in counts.most_common(top_n)]


class Recommender:
    """
    Recommends other users' projects close to a user's recent work.

    The user's taste vector is the centroid of the embeddings of their most
    recent analyzed items; candidates are every analyzed item owned by
    someone else.
    """

    def __init__(
        self,
        repository: MediaRepository,
        config: Optional[MatchingConfig] = None,
        index: Optional[SimilarityIndex] = None
    ):
        self.repository = repository
        self.config = config or MatchingConfig.from_settings()
        self.index = index or SimilarityIndex()

    def recommend(
        self,
        user_id: str,
        limit: int = 10,
        theme_filter: ThemeFilter = None,
        score_minimum: Optional[float] = None
    ) -> RecommendationResponse:
        """
        Recommend projects for a user.

        Args:
            user_id: User to recommend for
            limit: Maximum number of recommendations
            theme_filter: Theme or themes overriding the user's preferences
            score_minimum: Similarity floor (config default if not provided)

        Returns:
            Recommendations ranked by blended similarity and quality

        Raises:
            ValidationError: If limit or theme_filter is invalid
        """
        validate_limit(limit)
        requested_themes = normalize_theme_filter(theme_filter)

        if score_minimum is None:
            score_minimum = self.config.recommendation_score_minimum

        own_items = self.repository.list_by_owner(
            user_id,
            status=AnalysisStatus.COMPLETE,
            newest_first=True,
            limit=self.config.profile_window
        )

        if not own_items:
            logger.info(f"No analyzed items for user {user_id}, nothing to recommend")
            return RecommendationResponse(message=NO_ANALYZED_ITEMS_MESSAGE)

        taste_vector = average([item.embedding for item in own_items])
        themes = preferred_themes(own_items, self.config.preferred_theme_count)
        top_theme = themes[0] if themes else None

        themes_to_match = requested_themes or set(themes)

        pool = self.repository.list_analyzed(exclude_owner_id=user_id)
        profile = TasteProfileSummary(
            analyzed_item_count=len(own_items),
            preferred_themes=themes
        )

        if not pool:
            return RecommendationResponse(profile=profile)

        matches = self.index.find_similar(
            taste_vector,
            pool,
            limit=len(pool),
            score_minimum=score_minimum,
            theme_filter=themes_to_match
        )

        recommendations = [
            self._to_recommendation(match, top_theme)
            for match in matches
            if match.owner_id != user_id
        ]
        recommendations = sorted(recommendations, key=lambda r: r.final_score, reverse=True)

        cap = min(limit, self.config.max_recommendations)

        logger.info(
            f"Recommending {min(cap, len(recommendations))} of "
            f"{len(recommendations)} projects to user {user_id}"
        )

        return RecommendationResponse(
            recommendations=recommendations[:cap],
            profile=profile,
            total_found=len(recommendations)
        )

    @staticmethod
    def blended_score(similarity: float, quality: Optional[float]) -> float:
        """Weight similarity against the item's quality score."""
        quality = DEFAULT_QUALITY if quality is None else quality
        return SIMILARITY_WEIGHT * similarity + QUALITY_WEIGHT * quality

    @staticmethod
    def recommendation_reason(match: SimilarityResult, top_theme: Optional[Theme]) -> str:
        """Human-readable reason for recommending a match."""
        if top_theme is not None and match.theme == top_theme:
            return f"Similar project in your favourite theme: {top_theme.value}"
        if match.score > 0.8:
            return "Very similar to your interests"
        if match.score > 0.7:
            return "Shares close concepts with your projects"
        return "Potentially interesting for you"

    def _to_recommendation(
        self,
        match: SimilarityResult,
        top_theme: Optional[Theme]
    ) -> Recommendation:
        return Recommendation(
            **match.model_dump(),
            final_score=self.blended_score(match.score, match.quality_score),
            reason=self.recommendation_reason(match, top_theme)
        )
