"""Collaborator discovery through complementary keyword sets."""

import logging
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, List, Optional, Sequence

from ..config import MatchingConfig
from ..models import CollaboratorResult, MediaItem, ProjectReference, SimilarityResult, Theme
from .similar_projects import SimilarProjectFinder
from .similarity_index import validate_limit

logger = logging.getLogger(__name__)

COMMON_WEIGHT = 0.6
UNIQUE_WEIGHT = 0.4
MAX_OFFERED_KEYWORDS = 5

BASE_COLLABORATION_SCORE = 0.5
ADJACENT_THEME_BONUS = 0.2
QUALITY_BONUS_WEIGHT = 0.3
DEFAULT_QUALITY = 0.5

# Themes whose projects tend to need each other's skills (directional)
COMPLEMENTARY_THEMES: Dict[Theme, FrozenSet[Theme]] = {
    Theme.TECHNOLOGY: frozenset({Theme.EDUCATION, Theme.HEALTH, Theme.PROFESSIONAL}),
    Theme.EDUCATION: frozenset({Theme.TECHNOLOGY, Theme.CULTURE}),
    Theme.HEALTH: frozenset({Theme.TECHNOLOGY, Theme.SPORT}),
    Theme.PROFESSIONAL: frozenset({Theme.TECHNOLOGY, Theme.EDUCATION}),
}


@dataclass
class Complementarity:
    """Overlap analysis of two keyword sets."""

    score: float
    shared: List[str] = field(default_factory=list)
    offered: List[str] = field(default_factory=list)


def _unique_in_order(terms: Sequence[str]) -> List[str]:
    return list(dict.fromkeys(terms))


def complementarity(reference_terms: Sequence[str], candidate_terms: Sequence[str]) -> Complementarity:
    """
    Score how well a candidate's keywords complement the reference's.

    Rewards partial overlap: enough shared terms to communicate, enough
    unique terms on the candidate's side to add something.

    Args:
        reference_terms: Keyword terms of the reference project (A)
        candidate_terms: Keyword terms of the candidate project (B)

    Returns:
        Complementarity score with the shared terms (A's order) and the
        terms only B offers (B's order, at most five)
    """
    a_terms = _unique_in_order(reference_terms)
    b_terms = _unique_in_order(candidate_terms)
    a_set, b_set = set(a_terms), set(b_terms)

    shared = [term for term in a_terms if term in b_set]
    unique_to_b = [term for term in b_terms if term not in a_set]

    largest = max(len(a_set), len(b_set))
    score_common = len(shared) / largest if largest else 0.0
    score_unique = len(unique_to_b) / len(b_set) if b_set else 0.0

    return Complementarity(
        score=COMMON_WEIGHT * score_common + UNIQUE_WEIGHT * score_unique,
        shared=shared,
        offered=unique_to_b[:MAX_OFFERED_KEYWORDS]
    )


def collaboration_potential(
    reference_theme: Theme,
    reference_quality: Optional[float],
    candidate_theme: Theme,
    candidate_quality: Optional[float]
) -> float:
    """Heuristic collaboration bonus from theme adjacency and quality."""
    score = BASE_COLLABORATION_SCORE

    if candidate_theme in COMPLEMENTARY_THEMES.get(reference_theme, frozenset()):
        score += ADJACENT_THEME_BONUS

    quality_a = DEFAULT_QUALITY if reference_quality is None else reference_quality
    quality_b = DEFAULT_QUALITY if candidate_quality is None else candidate_quality
    score += (quality_a + quality_b) / 2 * QUALITY_BONUS_WEIGHT

    return min(score, 1.0)


class CollaboratorFinder:
    """Surfaces people working on adjacent, not identical, projects."""

    def __init__(
        self,
        similar_projects: SimilarProjectFinder,
        config: Optional[MatchingConfig] = None
    ):
        """
        Initialize collaborator finder.

        Args:
            similar_projects: Search used to shortlist candidate projects
            config: Matching options (defaults to the search's config)
        """
        self.similar_projects = similar_projects
        self.config = config or similar_projects.config

    def find_collaborators(
        self,
        item_id: str,
        limit: int = 5,
        score_minimum: Optional[float] = None
    ) -> List[CollaboratorResult]:
        """
        Find potential collaborators for a project.

        Args:
            item_id: Reference project ID (must be analyzed)
            limit: Maximum number of collaborators
            score_minimum: Similarity floor for the shortlist

        Returns:
            Collaborators sorted by complementarity descending

        Raises:
            ValidationError: If limit is not a positive integer
        """
        validate_limit(limit)
        reference = self.similar_projects.load_reference(item_id)
        if score_minimum is None:
            score_minimum = self.config.collaborator_score_minimum

        shortlist = self.similar_projects.find_similar(
            item_id,
            limit=self.config.collaborator_pool_size,
            score_minimum=score_minimum,
            include_own_items=False
        )

        collaborators = []
        for candidate in shortlist:
            overlap = complementarity(
                reference.keyword_terms,
                [keyword.term for keyword in candidate.keywords]
            )
            if overlap.score <= self.config.complementarity_threshold:
                continue
            collaborators.append(self._to_result(reference, candidate, overlap))

        collaborators = sorted(
            collaborators,
            key=lambda c: c.complementarity_score,
            reverse=True
        )

        logger.info(
            f"Found {len(collaborators)} potential collaborators for {item_id} "
            f"from {len(shortlist)} similar projects"
        )
        return collaborators[:limit]

    @staticmethod
    def _to_result(
        reference: MediaItem,
        candidate: SimilarityResult,
        overlap: Complementarity
    ) -> CollaboratorResult:
        return CollaboratorResult(
            owner_id=candidate.owner_id,
            shared_project=ProjectReference(
                id=candidate.item_id,
                title=candidate.title,
                theme=candidate.theme
            ),
            similarity_score=candidate.score,
            complementarity_score=overlap.score,
            shared_keywords=overlap.shared,
            unique_keywords_offered=overlap.offered,
            potential_collaboration=collaboration_potential(
                reference.theme,
                reference.quality_score,
                candidate.theme,
                candidate.quality_score
            )
        )
