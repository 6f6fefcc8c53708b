"""Scoring and ranking of analyzed items against a reference embedding."""

import logging
from typing import Iterable, List, Optional, Sequence, Set, Union
import numpy as np

from ..models import MediaItem, SimilarityResult, Theme
from ..utils.error_handling import (
    DimensionMismatchError,
    ReferenceNotAnalyzedError,
    ValidationError,
    log_warning
)
from .vector_math import VectorLike, batch_cosine_similarity

logger = logging.getLogger(__name__)

ThemeFilter = Union[Theme, str, Iterable[Union[Theme, str]], None]


def validate_limit(limit: int) -> None:
    """
    Check a result limit.

    Raises:
        ValidationError: If limit is not a positive integer
    """
    if isinstance(limit, bool) or not isinstance(limit, int) or limit <= 0:
        raise ValidationError("limit must be a positive integer", field="limit")


def normalize_theme_filter(theme_filter: ThemeFilter) -> Optional[Set[Theme]]:
    """
    Turn a single theme or a collection of themes into a set.

    Args:
        theme_filter: Theme, theme value, collection of either, or None

    Returns:
        Set of themes, or None when no filtering applies

    Raises:
        ValidationError: If a value is not a known theme
    """
    if theme_filter is None:
        return None
    if isinstance(theme_filter, (Theme, str)):
        theme_filter = [theme_filter]

    try:
        themes = {Theme(theme) for theme in theme_filter}
    except ValueError as e:
        raise ValidationError(
            f"Unknown theme in filter: {e}",
            field="theme_filter",
            details={"allowed": [theme.value for theme in Theme]}
        ) from e

    return themes or None


class SimilarityIndex:
    """
    Ranks a candidate pool by cosine similarity to a reference vector.

    The index never fetches data: callers select the candidate pool
    (complete items only) and pass it in, so the same scoring serves
    similar-project search, recommendations and collaborator discovery.
    """

    def find_similar(
        self,
        reference_vector: Optional[VectorLike],
        candidate_pool: Sequence[MediaItem],
        limit: int,
        score_minimum: float,
        theme_filter: ThemeFilter = None
    ) -> List[SimilarityResult]:
        """
        Score, filter, sort and truncate the candidate pool.

        Args:
            reference_vector: Embedding to compare against
            candidate_pool: Analyzed items, in the caller's preferred order
            limit: Maximum number of results (positive)
            score_minimum: Minimum similarity to keep a candidate (-1 to 1)
            theme_filter: Optional theme or themes candidates must belong to

        Returns:
            Results sorted by score descending, ties in pool order

        Raises:
            ReferenceNotAnalyzedError: If the reference vector is missing
            ValidationError: If limit or score_minimum is out of range
            DimensionMismatchError: If a candidate's dimension differs
        """
        if reference_vector is None:
            raise ReferenceNotAnalyzedError("reference")

        self._validate_options(limit, score_minimum)
        themes = normalize_theme_filter(theme_filter)

        candidates = [item for item in candidate_pool if item.embedding is not None]
        skipped = len(candidate_pool) - len(candidates)
        if skipped:
            log_warning(
                f"Skipped {skipped} candidates without an embedding",
                context="similarity search",
                extra={"skipped": skipped}
            )

        if not candidates:
            return []

        reference = np.asarray(reference_vector, dtype=np.float64)
        self._check_dimensions(reference, candidates)

        matrix = np.array([item.embedding for item in candidates], dtype=np.float64)
        scores = batch_cosine_similarity(reference, matrix)

        results = []
        for item, score in zip(candidates, scores):
            score = float(score)
            if score < score_minimum:
                continue
            if themes is not None and item.theme not in themes:
                continue
            results.append(self._to_result(item, score))

        # sorted() is stable, so equal scores keep the pool order
        results = sorted(results, key=lambda r: r.score, reverse=True)

        logger.debug(
            f"Scored {len(candidates)} candidates, {len(results)} above "
            f"{score_minimum:.2f}, returning {min(limit, len(results))}"
        )

        return results[:limit]

    @staticmethod
    def _validate_options(limit: int, score_minimum: float) -> None:
        validate_limit(limit)
        if not -1.0 <= score_minimum <= 1.0:
            raise ValidationError("score_minimum must lie in [-1, 1]", field="score_minimum")

    @staticmethod
    def _check_dimensions(reference: np.ndarray, candidates: Sequence[MediaItem]) -> None:
        dimension = reference.shape[0]
        for item in candidates:
            if len(item.embedding) != dimension:
                raise DimensionMismatchError(
                    dimension,
                    len(item.embedding),
                    details={"item_id": item.id}
                )

    @staticmethod
    def _to_result(item: MediaItem, score: float) -> SimilarityResult:
        return SimilarityResult(
            item_id=item.id,
            score=score,
            title=item.title,
            theme=item.theme,
            owner_id=item.owner_id,
            keywords=list(item.keywords or []),
            quality_score=item.quality_score,
            summary=item.summary
        )
