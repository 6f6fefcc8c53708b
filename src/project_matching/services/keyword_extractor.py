"""Keyword extraction service for identifying the key terms of a pitch."""

import re
from typing import List, Set
from collections import Counter
import logging

from ..models import Keyword, NamedEntity
from ..utils.text_utils import clean_transcript_text

logger = logging.getLogger(__name__)


class KeywordExtractor:
    """
    Extracts weighted keywords and named entities from pitch transcripts.

    Uses:
    - High-frequency meaningful terms, weighted by relative frequency
    - Capitalised words as named-entity candidates
    """

    # Pitches are recorded in French and English
    STOP_WORDS: Set[str] = {
        # English
        'a', 'about', 'above', 'after', 'again', 'against', 'all', 'am', 'an', 'and',
        'any', 'are', 'as', 'at', 'be', 'because', 'been', 'before', 'being', 'below',
        'between', 'both', 'but', 'by', 'can', 'cannot', 'could', 'did', 'do', 'does',
        'doing', 'down', 'during', 'each', 'few', 'for', 'from', 'further', 'had',
        'has', 'have', 'having', 'he', 'her', 'here', 'hers', 'herself', 'him',
        'himself', 'his', 'how', 'i', 'if', 'in', 'into', 'is', 'it', 'its', 'itself',
        'just', 'me', 'might', 'more', 'most', 'must', 'my', 'myself', 'no', 'nor',
        'not', 'now', 'of', 'off', 'on', 'once', 'only', 'or', 'other', 'our', 'ours',
        'ourselves', 'out', 'over', 'own', 'same', 'she', 'should', 'so', 'some',
        'such', 'than', 'that', 'the', 'their', 'theirs', 'them', 'themselves', 'then',
        'there', 'these', 'they', 'this', 'those', 'through', 'to', 'too', 'under',
        'until', 'up', 'very', 'was', 'we', 'were', 'what', 'when', 'where', 'which',
        'while', 'who', 'whom', 'why', 'will', 'with', 'would', 'you', 'your', 'yours',
        'yourself', 'yourselves',
        # French
        'le', 'la', 'les', 'un', 'une', 'des', 'de', 'du', 'et', 'ou', 'mais', 'donc',
        'car', 'ni', 'or', 'à', 'dans', 'par', 'pour', 'en', 'vers', 'avec', 'sans',
        'sous', 'sur', 'ce', 'cette', 'ces', 'mon', 'ma', 'mes', 'ton', 'ta', 'tes',
        'son', 'sa', 'ses', 'notre', 'nos', 'votre', 'vos', 'leur', 'leurs', 'je',
        'tu', 'il', 'elle', 'nous', 'vous', 'ils', 'elles', 'qui', 'que', 'quoi',
        'dont', 'où', 'est', 'sont', 'était', 'étaient', 'sera', 'seront', 'avoir',
        'être', 'faire', 'aller', 'venir', 'voir', 'savoir', 'pouvoir', 'vouloir',
        'devoir'
    }

    def __init__(self, max_keywords: int = 10, max_entities: int = 10):
        """
        Initialize keyword extractor.

        Args:
            max_keywords: Maximum number of keywords to extract
            max_entities: Maximum number of named entities to extract
        """
        self.max_keywords = max_keywords
        self.max_entities = max_entities

    def extract_keywords(self, text: str) -> List[Keyword]:
        """
        Extract weighted keywords from a transcript.

        Weight is the term's share of all words in the transcript.

        Args:
            text: Transcript text

        Returns:
            Keywords, most frequent first
        """
        if not text or len(text.strip()) < 10:
            return []

        words = self._tokenize(clean_transcript_text(text))
        if not words:
            return []

        meaningful_words = [
            word for word in words
            if len(word) > 3
            and word not in self.STOP_WORDS
            and not word.isdigit()
        ]

        word_counts = Counter(meaningful_words)
        total = len(words)

        keywords = [
            Keyword(term=term, weight=count / total)
            for term, count in word_counts.most_common(self.max_keywords)
        ]

        logger.info(f"Extracted {len(keywords)} keywords from transcript")
        return keywords

    def extract_named_entities(self, text: str) -> List[NamedEntity]:
        """
        Extract potential named entities (capitalized words).

        Args:
            text: Transcript text (original casing)

        Returns:
            Unique entities in order of first appearance
        """
        candidates = re.findall(r'\b[A-ZÀ-Ý][a-zà-ÿ]+\b', text or "")

        entities = [
            candidate for candidate in dict.fromkeys(candidates)
            if candidate.lower() not in self.STOP_WORDS
        ]

        return [NamedEntity(text=entity) for entity in entities[:self.max_entities]]

    def _tokenize(self, text: str) -> List[str]:
        """
        Tokenize text into words.

        Args:
            text: Input text

        Returns:
            List of words
        """
        # Split on anything that is not a word character or an inner hyphen
        text = re.sub(r"[^\w\s-]", ' ', text)
        return [word.strip('-') for word in text.split() if word.strip('-')]
