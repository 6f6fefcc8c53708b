"""Entry point for the matching operations consumed by request handlers."""

import logging
from typing import List, Optional

from ..config import MatchingConfig
from ..models import (
    AnalysisStatistics,
    CollaboratorResult,
    CompatibilityResult,
    RecommendationResponse,
    SimilarityResult
)
from ..services.media_repository import MediaRepository
from .collaborator_finder import CollaboratorFinder
from .compatibility import CompatibilityScorer
from .recommender import Recommender
from .similar_projects import SimilarProjectFinder
from .similarity_index import SimilarityIndex, ThemeFilter

logger = logging.getLogger(__name__)


class MatchingEngine:
    """
    Main engine for project matching.

    Wires the similarity index, similar-project search, recommender,
    collaborator finder and compatibility scorer around one repository and
    one configuration. Every call reads fresh data and keeps no state
    between requests.
    """

    def __init__(
        self,
        repository: MediaRepository,
        config: Optional[MatchingConfig] = None
    ):
        """
        Initialize the matching engine.

        Args:
            repository: Source of media items
            config: Matching options (defaults from settings)
        """
        self.repository = repository
        self.config = config or MatchingConfig.from_settings()

        index = SimilarityIndex()
        self.similar_projects = SimilarProjectFinder(repository, self.config, index)
        self.recommender = Recommender(repository, self.config, index)
        self.collaborator_finder = CollaboratorFinder(self.similar_projects, self.config)
        self.compatibility_scorer = CompatibilityScorer(self.similar_projects)

        logger.info("Matching engine initialized")

    def find_similar(
        self,
        item_id: str,
        limit: int = 5,
        theme_filter: ThemeFilter = None,
        score_minimum: Optional[float] = None,
        include_own_items: bool = False
    ) -> List[SimilarityResult]:
        """Projects similar to a stored item."""
        return self.similar_projects.find_similar(
            item_id,
            limit=limit,
            theme_filter=theme_filter,
            score_minimum=score_minimum,
            include_own_items=include_own_items
        )

    def recommend(
        self,
        user_id: str,
        limit: int = 10,
        theme_filter: ThemeFilter = None,
        score_minimum: Optional[float] = None
    ) -> RecommendationResponse:
        """Personalised recommendations for a user."""
        return self.recommender.recommend(
            user_id,
            limit=limit,
            theme_filter=theme_filter,
            score_minimum=score_minimum
        )

    def find_collaborators(
        self,
        item_id: str,
        limit: int = 5,
        score_minimum: Optional[float] = None
    ) -> List[CollaboratorResult]:
        """Potential collaborators for a project."""
        return self.collaborator_finder.find_collaborators(
            item_id,
            limit=limit,
            score_minimum=score_minimum
        )

    def compatibility(self, item_id_a: str, item_id_b: str) -> CompatibilityResult:
        """Compatibility of two projects."""
        return self.compatibility_scorer.compatibility(item_id_a, item_id_b)

    def analysis_statistics(self, owner_id: str) -> AnalysisStatistics:
        """Count of an owner's items per analysis status."""
        return self.repository.status_counts(owner_id)
