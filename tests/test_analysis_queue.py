"""Tests for the background analysis queue."""
import threading
import pytest
from unittest.mock import MagicMock

from project_matching.models import AnalysisResult, AnalysisStatus, Keyword
from project_matching.services.analysis_pipeline import MediaAnalysisPipeline
from project_matching.tasks.analysis_queue import AnalysisQueue
from project_matching.utils.error_handling import (
    AnalysisFailure,
    AnalysisInProgressError,
    ItemNotFoundError
)

from conftest import make_item


@pytest.fixture
def analysis_result():
    return AnalysisResult(
        transcript="We build robots for farms.",
        keywords=[Keyword(term="robots", weight=0.2)],
        summary="Farm robots.",
        embedding=[0.6, 0.8],
        quality_score=0.65
    )


@pytest.fixture
def pipeline(analysis_result):
    mock = MagicMock(spec=MediaAnalysisPipeline)
    mock.analyze.return_value = analysis_result
    return mock


@pytest.fixture
def queue(repository, pipeline):
    analysis_queue = AnalysisQueue(repository, pipeline, max_workers=2)
    yield analysis_queue
    analysis_queue.shutdown(wait=True)


class TestAnalysisQueue:
    """Test cases for AnalysisQueue."""

    def test_successful_analysis(self, queue, repository, pipeline):
        repository.add(make_item("a"))

        item = queue.submit("a").result(timeout=5)

        assert item.status == AnalysisStatus.COMPLETE
        assert repository.get("a").embedding == [0.6, 0.8]
        pipeline.analyze.assert_called_once_with("/media/a.mp4")

    def test_failure_is_recorded(self, queue, repository, pipeline):
        repository.add(make_item("a"))
        pipeline.analyze.side_effect = AnalysisFailure("Transcript is empty", stage="transcription")

        item = queue.submit("a").result(timeout=5)

        assert item.status == AnalysisStatus.FAILED
        assert item.analysis_error == "Transcript is empty"
        assert repository.get("a").embedding is None

    def test_unexpected_error_never_leaves_item_running(self, queue, repository, pipeline):
        repository.add(make_item("a"))
        pipeline.analyze.side_effect = RuntimeError("worker crashed")

        item = queue.submit("a").result(timeout=5)

        assert item.status == AnalysisStatus.FAILED
        assert "worker crashed" in item.analysis_error

    def test_missing_media_reference(self, queue, repository, pipeline):
        repository.add(make_item("a").model_copy(update={"media_ref": None}))

        item = queue.submit("a").result(timeout=5)

        assert item.status == AnalysisStatus.FAILED
        pipeline.analyze.assert_not_called()

    def test_unknown_item(self, queue):
        with pytest.raises(ItemNotFoundError):
            queue.submit("missing")

    def test_wrong_owner(self, queue, repository):
        repository.add(make_item("a", owner_id="owner-1"))

        with pytest.raises(ItemNotFoundError):
            queue.submit("a", owner_id="intruder")

        assert repository.get("a").status == AnalysisStatus.PENDING

    def test_already_running(self, queue, repository, pipeline, analysis_result):
        started = threading.Event()
        release = threading.Event()

        def slow_analyze(media_ref):
            started.set()
            release.wait(timeout=5)
            return analysis_result

        pipeline.analyze.side_effect = slow_analyze
        repository.add(make_item("a"))

        future = queue.submit("a")
        assert started.wait(timeout=5)

        with pytest.raises(AnalysisInProgressError):
            queue.submit("a")

        release.set()
        assert future.result(timeout=5).status == AnalysisStatus.COMPLETE

    @pytest.mark.parametrize("status", [AnalysisStatus.COMPLETE, AnalysisStatus.FAILED])
    def test_reanalysis(self, queue, repository, status):
        embedding = [1.0, 0.0] if status == AnalysisStatus.COMPLETE else None
        repository.add(make_item("a", embedding=embedding, status=status))

        item = queue.submit("a").result(timeout=5)

        assert item.status == AnalysisStatus.COMPLETE
        assert item.embedding == [0.6, 0.8]

    def test_reanalysis_of_complete_item_bypasses_cache(self, queue, repository, pipeline):
        repository.add(make_item("a", embedding=[1.0, 0.0]))

        queue.submit("a").result(timeout=5)

        pipeline.invalidate.assert_called_once_with("/media/a.mp4")
        pipeline.analyze.assert_called_once_with("/media/a.mp4")

    def test_first_analysis_keeps_cache(self, queue, repository, pipeline):
        repository.add(make_item("a"))

        queue.submit("a").result(timeout=5)

        pipeline.invalidate.assert_not_called()

    def test_submit_after_shutdown(self, repository, pipeline):
        repository.add(make_item("a"))
        analysis_queue = AnalysisQueue(repository, pipeline, max_workers=1)
        analysis_queue.shutdown()

        item = analysis_queue.submit("a").result(timeout=5)

        assert item.status == AnalysisStatus.FAILED

    def test_context_manager(self, repository, pipeline):
        repository.add(make_item("a"))

        with AnalysisQueue(repository, pipeline, max_workers=1) as analysis_queue:
            future = analysis_queue.submit("a")

        assert future.done()
        assert repository.get("a").status == AnalysisStatus.COMPLETE
