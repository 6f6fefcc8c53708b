"""Tests for the similarity index."""
import logging
import pytest

from project_matching.core.similarity_index import SimilarityIndex, normalize_theme_filter
from project_matching.models import AnalysisStatus, Theme
from project_matching.utils.error_handling import (
    DimensionMismatchError,
    ReferenceNotAnalyzedError,
    ValidationError
)

from conftest import VECTOR_065, VECTOR_075, VECTOR_090, make_item


class TestNormalizeThemeFilter:
    """Test cases for normalize_theme_filter."""

    def test_none(self):
        assert normalize_theme_filter(None) is None

    def test_single_value(self):
        assert normalize_theme_filter("sport") == {Theme.SPORT}

    def test_collection(self):
        assert normalize_theme_filter([Theme.SPORT, "health"]) == {Theme.SPORT, Theme.HEALTH}

    def test_empty_collection_means_no_filter(self):
        assert normalize_theme_filter([]) is None

    def test_unknown_theme(self):
        with pytest.raises(ValidationError) as exc_info:
            normalize_theme_filter("astrology")

        assert exc_info.value.details["field"] == "theme_filter"
        assert "sport" in exc_info.value.details["allowed"]

    def test_unknown_theme_in_collection(self):
        with pytest.raises(ValidationError):
            normalize_theme_filter([Theme.SPORT, "astrology"])


class TestSimilarityIndex:
    """Test cases for SimilarityIndex.find_similar."""

    @pytest.fixture
    def index(self):
        return SimilarityIndex()

    @pytest.fixture
    def pool(self):
        return [
            make_item("low", owner_id="u2", embedding=VECTOR_065),
            make_item("high", owner_id="u3", embedding=VECTOR_090, theme=Theme.HEALTH),
            make_item("mid", owner_id="u4", embedding=VECTOR_075),
            make_item("orthogonal", owner_id="u5", embedding=[0.0, 1.0]),
        ]

    def test_sorted_by_score_descending(self, index, pool):
        """Results come back most similar first."""
        results = index.find_similar([1.0, 0.0], pool, limit=10, score_minimum=0.5)

        assert [r.item_id for r in results] == ["high", "mid", "low"]
        assert results[0].score == pytest.approx(0.9)

    def test_score_minimum_filters(self, index, pool):
        """Candidates below the minimum are dropped."""
        results = index.find_similar([1.0, 0.0], pool, limit=10, score_minimum=0.7)

        assert all(r.score >= 0.7 for r in results)
        assert {r.item_id for r in results} == {"high", "mid"}

    def test_limit_truncates(self, index, pool):
        results = index.find_similar([1.0, 0.0], pool, limit=1, score_minimum=0.0)

        assert [r.item_id for r in results] == ["high"]

    def test_theme_filter(self, index, pool):
        """Only candidates in the requested themes are kept."""
        results = index.find_similar(
            [1.0, 0.0], pool, limit=10, score_minimum=0.0, theme_filter=Theme.HEALTH
        )

        assert [r.item_id for r in results] == ["high"]

    def test_ties_keep_pool_order(self, index):
        """Equal scores keep the order of the candidate pool."""
        pool = [
            make_item("first", embedding=[1.0, 0.0]),
            make_item("second", embedding=[2.0, 0.0]),
            make_item("third", embedding=[3.0, 0.0]),
        ]

        results = index.find_similar([1.0, 0.0], pool, limit=10, score_minimum=0.5)

        assert [r.item_id for r in results] == ["first", "second", "third"]

    def test_result_carries_item_fields(self, index):
        item = make_item("a", owner_id="u9", embedding=[1.0, 0.0], keywords=["robot"], quality_score=0.8)

        result = index.find_similar([1.0, 0.0], [item], limit=1, score_minimum=0.0)[0]

        assert result.owner_id == "u9"
        assert result.title == "Project a"
        assert result.theme == Theme.TECHNOLOGY
        assert [k.term for k in result.keywords] == ["robot"]
        assert result.quality_score == 0.8
        assert result.summary == "A pitch summary"

    def test_candidates_without_embedding_are_skipped(self, index):
        pool = [
            make_item("pending", status=AnalysisStatus.PENDING),
            make_item("done", embedding=[1.0, 0.0]),
        ]

        results = index.find_similar([1.0, 0.0], pool, limit=10, score_minimum=0.0)

        assert [r.item_id for r in results] == ["done"]

    def test_skipped_candidates_are_reported(self, index, caplog):
        pool = [make_item("pending", status=AnalysisStatus.PENDING)]

        with caplog.at_level(logging.WARNING):
            index.find_similar([1.0, 0.0], pool, limit=5, score_minimum=0.0)

        record = caplog.records[-1]
        assert "Skipped 1 candidates" in record.getMessage()
        assert record.skipped == 1

    def test_invalid_theme_filter(self, index, pool):
        with pytest.raises(ValidationError) as exc_info:
            index.find_similar([1.0, 0.0], pool, limit=5, score_minimum=0.5, theme_filter="astrology")

        assert exc_info.value.details["field"] == "theme_filter"

    def test_empty_pool(self, index):
        assert index.find_similar([1.0, 0.0], [], limit=5, score_minimum=0.5) == []

    def test_missing_reference(self, index, pool):
        with pytest.raises(ReferenceNotAnalyzedError):
            index.find_similar(None, pool, limit=5, score_minimum=0.5)

    @pytest.mark.parametrize("limit", [0, -1, True, 2.5])
    def test_invalid_limit(self, index, pool, limit):
        with pytest.raises(ValidationError) as exc_info:
            index.find_similar([1.0, 0.0], pool, limit=limit, score_minimum=0.5)

        assert exc_info.value.details["field"] == "limit"

    @pytest.mark.parametrize("score_minimum", [-1.5, 1.01])
    def test_invalid_score_minimum(self, index, pool, score_minimum):
        with pytest.raises(ValidationError):
            index.find_similar([1.0, 0.0], pool, limit=5, score_minimum=score_minimum)

    def test_dimension_mismatch_names_item(self, index):
        pool = [make_item("wide", embedding=[1.0, 0.0, 0.0])]

        with pytest.raises(DimensionMismatchError) as exc_info:
            index.find_similar([1.0, 0.0], pool, limit=5, score_minimum=0.0)

        assert exc_info.value.details["item_id"] == "wide"
