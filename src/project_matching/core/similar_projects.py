"""Similar-project search for a stored reference item."""

import logging
from typing import List, Optional

from ..config import MatchingConfig
from ..models import MediaItem, SimilarityResult
from ..services.media_repository import MediaRepository
from ..utils.error_handling import ReferenceNotAnalyzedError
from .similarity_index import SimilarityIndex, ThemeFilter

logger = logging.getLogger(__name__)


class SimilarProjectFinder:
    """Finds projects whose embeddings are close to a stored item's embedding."""

    def __init__(
        self,
        repository: MediaRepository,
        config: Optional[MatchingConfig] = None,
        index: Optional[SimilarityIndex] = None
    ):
        """
        Initialize the finder.

        Args:
            repository: Source of media items
            config: Matching options (defaults from settings)
            index: Similarity index (a fresh one if not provided)
        """
        self.repository = repository
        self.config = config or MatchingConfig.from_settings()
        self.index = index or SimilarityIndex()

    def load_reference(self, item_id: str, side: Optional[str] = None) -> MediaItem:
        """
        Fetch an item that must have a complete analysis.

        Raises:
            ItemNotFoundError: If the item does not exist
            ReferenceNotAnalyzedError: If its analysis is not complete
        """
        item = self.repository.get_or_raise(item_id)
        if not item.is_analyzed:
            raise ReferenceNotAnalyzedError(item_id, item.status.value, side=side)
        return item

    def find_similar(
        self,
        item_id: str,
        limit: int = 5,
        theme_filter: ThemeFilter = None,
        score_minimum: Optional[float] = None,
        include_own_items: bool = False
    ) -> List[SimilarityResult]:
        """
        Find projects similar to a stored item.

        Args:
            item_id: Reference item ID
            limit: Maximum number of results
            theme_filter: Optional theme or themes to restrict results to
            score_minimum: Similarity floor (config default if not provided)
            include_own_items: Whether the reference owner's other items qualify

        Returns:
            Similar projects, most similar first; never the reference itself
        """
        reference = self.load_reference(item_id)
        if score_minimum is None:
            score_minimum = self.config.score_minimum

        pool = self.repository.list_analyzed(
            exclude_item_id=reference.id,
            exclude_owner_id=None if include_own_items else reference.owner_id
        )

        results = self.index.find_similar(
            reference.embedding,
            pool,
            limit=limit,
            score_minimum=score_minimum,
            theme_filter=theme_filter
        )

        logger.info(
            f"Found {len(results)} projects similar to {item_id} "
            f"from {len(pool)} candidates"
        )
        return results
