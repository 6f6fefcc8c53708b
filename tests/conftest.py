"""Shared pytest fixtures for testing."""
import math
import pytest
from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

from project_matching.config import MatchingConfig
from project_matching.models import AnalysisStatus, MediaItem, Theme
from project_matching.services.media_repository import InMemoryMediaRepository


BASE_TIME = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)

# Unit vectors whose cosine with [1, 0] is exactly the angle's cosine
VECTOR_075 = [0.75, math.sqrt(1 - 0.75 ** 2)]
VECTOR_090 = [0.9, math.sqrt(1 - 0.9 ** 2)]
VECTOR_065 = [0.65, math.sqrt(1 - 0.65 ** 2)]


def make_item(
    item_id,
    owner_id="owner-1",
    embedding=None,
    theme=Theme.TECHNOLOGY,
    keywords=None,
    quality_score=0.5,
    status=None,
    minutes=0,
    title=None
):
    """Build a media item; items with an embedding are complete."""
    if status is None:
        status = AnalysisStatus.COMPLETE if embedding is not None else AnalysisStatus.PENDING

    analyzed = status == AnalysisStatus.COMPLETE
    return MediaItem(
        id=item_id,
        owner_id=owner_id,
        title=title or f"Project {item_id}",
        theme=theme,
        media_ref=f"/media/{item_id}.mp4",
        status=status,
        transcript="A pitch transcript" if analyzed else None,
        keywords=keywords if analyzed else None,
        summary="A pitch summary" if analyzed else None,
        embedding=embedding if analyzed else None,
        quality_score=quality_score if analyzed else None,
        uploaded_at=BASE_TIME + timedelta(minutes=minutes)
    )


@pytest.fixture
def config():
    """Matching config with the documented defaults."""
    return MatchingConfig()


@pytest.fixture
def repository():
    """Empty in-memory repository."""
    return InMemoryMediaRepository()


@pytest.fixture
def sample_transcript():
    """Sample pitch transcript for testing."""
    return (
        "Our project is a mobile application that helps students learn "
        "mathematics. The application uses adaptive exercises and tracks "
        "progress for every student. Teachers receive weekly reports about "
        "their students. We are looking for funding to reach more schools "
        "and grow our team. Our market is every school in France."
    )


@pytest.fixture
def mock_openai_client():
    """Mock OpenAI client with embeddings, chat and audio endpoints."""
    client = MagicMock()

    embedding_response = MagicMock()
    embedding_response.data = [MagicMock(embedding=[0.1, 0.2, 0.3, 0.4])]
    client.embeddings.create.return_value = embedding_response

    chat_response = MagicMock()
    chat_response.choices = [MagicMock(message=MagicMock(content=" A short summary. "))]
    client.chat.completions.create.return_value = chat_response

    client.audio.transcriptions.create.return_value = "  Hello, this is our pitch.  "

    return client
