"""Tests for the summarizer."""
import pytest
from unittest.mock import patch

from project_matching.services.summarizer import Summarizer


class TestSummarizer:
    """Test cases for Summarizer."""

    @pytest.fixture
    def summarizer(self, mock_openai_client):
        return Summarizer(client=mock_openai_client, model="test-model")

    def test_summarize_with_provider(self, summarizer, mock_openai_client, sample_transcript):
        summary = summarizer.summarize(sample_transcript)

        assert summary == "A short summary."
        kwargs = mock_openai_client.chat.completions.create.call_args.kwargs
        assert kwargs["model"] == "test-model"
        assert kwargs["max_tokens"] == 150
        assert kwargs["temperature"] == 0.3
        assert sample_transcript in kwargs["messages"][1]["content"]

    def test_short_text_gives_empty_summary(self, summarizer, mock_openai_client):
        assert summarizer.summarize("Too short to summarise.") == ""
        mock_openai_client.chat.completions.create.assert_not_called()

    def test_fallback_without_api_key(self, sample_transcript):
        with patch("project_matching.services.summarizer.settings") as mock_settings:
            mock_settings.openai_api_key = ""
            mock_settings.summary_model = "test-model"
            summarizer = Summarizer()

        summary = summarizer.summarize(sample_transcript)

        assert summarizer.client is None
        assert summary == (
            "Our project is a mobile application that helps students learn mathematics. "
            "The application uses adaptive exercises and tracks progress for every student."
        )

    def test_fallback_on_provider_error(self, summarizer, sample_transcript):
        with patch.object(Summarizer, "_complete", side_effect=RuntimeError("rate limited")):
            summary = summarizer.summarize(sample_transcript)

        assert summary.startswith("Our project is a mobile application")
