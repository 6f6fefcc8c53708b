"""Background analysis of uploaded media items."""

import logging
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Optional

from ..config import settings
from ..models import AnalysisStatus, MediaItem
from ..services.analysis_pipeline import MediaAnalysisPipeline
from ..services.media_repository import MediaRepository
from ..utils.error_handling import (
    AnalysisFailure,
    AnalysisInProgressError,
    ItemNotFoundError,
    log_error,
)

logger = logging.getLogger(__name__)

RESTARTABLE_STATUSES = (
    AnalysisStatus.PENDING,
    AnalysisStatus.COMPLETE,
    AnalysisStatus.FAILED,
)


class AnalysisQueue:
    """
    Runs the analysis pipeline for media items on a worker pool.

    The item moves to running before the job is queued and always ends
    complete or failed.
    """

    def __init__(
        self,
        repository: MediaRepository,
        pipeline: MediaAnalysisPipeline,
        max_workers: Optional[int] = None
    ):
        self.repository = repository
        self.pipeline = pipeline
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers or settings.analysis_max_workers,
            thread_name_prefix="analysis"
        )

    def submit(self, item_id: str, owner_id: Optional[str] = None) -> "Future[MediaItem]":
        """
        Queue an item for (re-)analysis.

        Args:
            item_id: Media item ID
            owner_id: When given, the item must belong to this user

        Returns:
            Future resolving to the item in its final state

        Raises:
            ItemNotFoundError: Unknown item, or not owned by owner_id
            AnalysisInProgressError: The item is already running
        """
        item = self.repository.get_or_raise(item_id)
        if owner_id is not None and item.owner_id != owner_id:
            raise ItemNotFoundError(item_id)

        if not self.repository.compare_and_set_status(
            item_id, RESTARTABLE_STATUSES, AnalysisStatus.RUNNING
        ):
            raise AnalysisInProgressError(item_id)

        logger.info(f"Queued analysis for media item {item_id}")

        try:
            return self._executor.submit(
                self._run,
                item_id,
                item.media_ref,
                item.status == AnalysisStatus.COMPLETE
            )
        except RuntimeError as e:
            # Executor already shut down
            return self._fail(item_id, f"Analysis queue is closed: {e}", e)

    def _run(self, item_id: str, media_ref: Optional[str], refresh: bool = False) -> MediaItem:
        if not media_ref:
            return self._record_failure(item_id, "Media item has no media reference")

        try:
            # Re-analysis of a complete item must not be served from the cache
            if refresh:
                self.pipeline.invalidate(media_ref)
            result = self.pipeline.analyze(media_ref)
        except AnalysisFailure as e:
            log_error(e, context="analysis", item_id=item_id, extra={"stage": e.stage})
            return self._record_failure(item_id, e.message)
        except Exception as e:
            log_error(e, context="analysis", item_id=item_id)
            return self._record_failure(item_id, f"Unexpected error: {e}")

        try:
            item = self.repository.record_analysis(item_id, result)
        except Exception as e:
            log_error(e, context="analysis", item_id=item_id)
            return self._record_failure(item_id, f"Could not record analysis: {e}")

        logger.info(f"Analysis complete for media item {item_id}")
        return item

    def _record_failure(self, item_id: str, error: str) -> MediaItem:
        logger.warning(f"Analysis failed for media item {item_id}: {error}")
        return self.repository.record_failure(item_id, error)

    def _fail(self, item_id: str, error: str, exception: Exception) -> "Future[MediaItem]":
        log_error(exception, context="analysis", item_id=item_id)
        future: "Future[MediaItem]" = Future()
        future.set_result(self._record_failure(item_id, error))
        return future

    def shutdown(self, wait: bool = True) -> None:
        """Stop accepting work; optionally wait for queued analyses."""
        self._executor.shutdown(wait=wait)

    def __enter__(self) -> "AnalysisQueue":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.shutdown(wait=True)
