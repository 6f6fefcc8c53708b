"""Media analysis pipeline: transcript, keywords, summary, embedding, quality."""

import logging
from typing import Optional

from ..config import settings
from ..models import AnalysisResult
from ..utils.error_handling import AnalysisFailure, ExternalServiceError
from .cache_service import CacheService
from .embedding_service import EmbeddingService
from .keyword_extractor import KeywordExtractor
from .quality_scorer import PitchQualityScorer
from .summarizer import Summarizer
from .transcriber import MediaReference, TranscriberService

logger = logging.getLogger(__name__)


class MediaAnalysisPipeline:
    """
    Turns a pitch video into the fields used for matching.

    Steps run in order and any failure aborts the whole analysis, so
    callers either get a complete AnalysisResult or an AnalysisFailure.
    """

    def __init__(
        self,
        transcriber: TranscriberService,
        keyword_extractor: KeywordExtractor,
        summarizer: Summarizer,
        embedding_service: EmbeddingService,
        quality_scorer: Optional[PitchQualityScorer] = None,
        cache: Optional[CacheService] = None
    ):
        self.transcriber = transcriber
        self.keyword_extractor = keyword_extractor
        self.summarizer = summarizer
        self.embedding_service = embedding_service
        self.quality_scorer = quality_scorer or PitchQualityScorer()
        self.cache = cache

    @classmethod
    def from_settings(cls) -> "MediaAnalysisPipeline":
        """Build a pipeline backed by the configured providers."""
        return cls(
            transcriber=TranscriberService(),
            keyword_extractor=KeywordExtractor(),
            summarizer=Summarizer(),
            embedding_service=EmbeddingService(),
            cache=CacheService() if settings.cache_enabled else None
        )

    def analyze(self, media_ref: MediaReference) -> AnalysisResult:
        """
        Analyze one media file.

        Args:
            media_ref: Local path, URL or raw bytes

        Returns:
            Complete analysis result

        Raises:
            AnalysisFailure: If any step fails
        """
        cache_key = CacheService.media_key(media_ref) if self.cache else None
        if cache_key:
            cached = self.cache.get_analysis(cache_key)
            if cached is not None:
                logger.info("Using cached analysis")
                return cached

        transcript = self._transcribe(media_ref)

        try:
            keywords = self.keyword_extractor.extract_keywords(transcript)
            summary = self.summarizer.summarize(transcript)
            embedding = self._embed(transcript)
            quality_score = self.quality_scorer.score(transcript, keywords)
            named_entities = self.keyword_extractor.extract_named_entities(transcript)

            result = AnalysisResult(
                transcript=transcript,
                keywords=keywords,
                summary=summary,
                embedding=embedding.tolist(),
                quality_score=quality_score,
                named_entities=named_entities
            )
        except AnalysisFailure:
            raise
        except Exception as e:
            raise AnalysisFailure(f"Analysis failed: {e}", stage="analysis") from e

        logger.info(
            f"Analysis complete: {len(transcript)} chars, "
            f"{len(keywords)} keywords, quality {quality_score:.2f}"
        )

        if cache_key:
            self.cache.set_analysis(cache_key, result)

        return result

    def invalidate(self, media_ref: MediaReference) -> bool:
        """
        Drop the cached analysis of a media file so the next run is fresh.

        Returns:
            True if a cache entry was removed
        """
        if not self.cache:
            return False
        return self.cache.invalidate(CacheService.media_key(media_ref))

    def _transcribe(self, media_ref: MediaReference) -> str:
        try:
            transcript = self.transcriber.transcribe(media_ref)
        except (ExternalServiceError, OSError) as e:
            raise AnalysisFailure(
                f"Transcription failed: {e}",
                stage="transcription"
            ) from e

        if not transcript or not transcript.strip():
            raise AnalysisFailure("Transcript is empty", stage="transcription")

        return transcript

    def _embed(self, transcript: str):
        try:
            return self.embedding_service.generate_embedding(transcript)
        except (ExternalServiceError, ValueError) as e:
            raise AnalysisFailure(
                f"Embedding generation failed: {e}",
                stage="embedding"
            ) from e
