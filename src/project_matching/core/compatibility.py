"""Pairwise compatibility of two projects."""

import logging
from typing import List, Optional

from ..models import CompatibilityResult, MediaItem, ProjectReference
from .similar_projects import SimilarProjectFinder
from .vector_math import cosine_similarity

logger = logging.getLogger(__name__)

# (lower bound, level, recommendation), highest band first
COMPATIBILITY_BANDS = (
    (0.8, "very high",
     "These projects are very similar and could benefit from close collaboration."),
    (0.7, "high",
     "These projects share important concepts and a collaboration would be beneficial."),
    (0.6, "moderate",
     "These projects have interesting common ground for a possible collaboration."),
    (0.4, "low",
     "These projects have a few similarities but a collaboration would need more analysis."),
)
LOWEST_LEVEL = "very low"
LOWEST_RECOMMENDATION = "These projects are very different, a collaboration seems unlikely."


def compatibility_level(score: float) -> str:
    """Map a similarity score to its compatibility level."""
    for lower_bound, level, _ in COMPATIBILITY_BANDS:
        if score >= lower_bound:
            return level
    return LOWEST_LEVEL


def compatibility_recommendation(score: float) -> str:
    """Canned advice for a similarity score."""
    for lower_bound, _, recommendation in COMPATIBILITY_BANDS:
        if score >= lower_bound:
            return recommendation
    return LOWEST_RECOMMENDATION


def shared_domains(item_a: MediaItem, item_b: MediaItem) -> List[str]:
    """Domains both projects belong to."""
    domains = []
    if item_a.theme == item_b.theme:
        domains.append(f"same theme: {item_a.theme.value}")
    # TODO: add keyword-level domain overlap once keyword taxonomies exist
    return domains


class CompatibilityScorer:
    """Explicit two-project comparison."""

    def __init__(self, similar_projects: SimilarProjectFinder):
        self.similar_projects = similar_projects

    def compatibility(self, item_id_a: str, item_id_b: str) -> CompatibilityResult:
        """
        Evaluate the compatibility of two analyzed projects.

        Args:
            item_id_a: First project ID
            item_id_b: Second project ID

        Returns:
            Score, level, recommendation and shared domains

        Raises:
            ItemNotFoundError: If either project does not exist
            ReferenceNotAnalyzedError: If either analysis is incomplete
        """
        item_a = self.similar_projects.load_reference(item_id_a, side="first")
        item_b = self.similar_projects.load_reference(item_id_b, side="second")

        score = cosine_similarity(item_a.embedding, item_b.embedding)

        logger.debug(f"Compatibility {item_id_a} <-> {item_id_b}: {score:.3f}")

        return CompatibilityResult(
            item_a=self._reference(item_a),
            item_b=self._reference(item_b),
            score=score,
            level=compatibility_level(score),
            recommendation=compatibility_recommendation(score),
            shared_domains=shared_domains(item_a, item_b)
        )

    @staticmethod
    def _reference(item: MediaItem) -> ProjectReference:
        return ProjectReference(id=item.id, title=item.title, theme=item.theme)
