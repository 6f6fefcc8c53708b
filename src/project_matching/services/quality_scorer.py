"""Heuristic quality score for pitch transcripts."""

from typing import Sequence, Tuple

from ..models import Keyword

# Pitches are recorded in French and English
BUSINESS_TERMS: Tuple[str, ...] = (
    # English
    "project", "solution", "innovation", "market",
    "customer", "team", "funding", "revenue",
    # French
    "projet", "marché", "client", "équipe", "financement", "revenus"
)


class PitchQualityScorer:
    """
    Rates how complete a pitch sounds, from 0 to 1.

    Longer pitches, richer keyword sets and business vocabulary score
    higher. The score is independent of similarity.
    """

    BASE_SCORE = 0.5

    def __init__(self, business_terms: Sequence[str] = BUSINESS_TERMS):
        self.business_terms = tuple(term.lower() for term in business_terms)

    def score(self, transcript: str, keywords: Sequence[Keyword]) -> float:
        score = self.BASE_SCORE

        if len(transcript) > 500:
            score += 0.1
        if len(transcript) > 1000:
            score += 0.1

        if len(keywords) > 5:
            score += 0.1
        # Unreachable with the default KeywordExtractor, which keeps 10 keywords
        if len(keywords) > 10:
            score += 0.1

        lowered = transcript.lower()
        found = [term for term in self.business_terms if term in lowered]
        score += len(found) * 0.05

        return min(score, 1.0)
