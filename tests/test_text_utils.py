"""Tests for text utilities."""

from project_matching.utils.text_utils import (
    clean_transcript_text,
    extract_sentences,
    normalize_text,
    split_sentences
)


class TestNormalizeText:
    """Test cases for normalize_text."""

    def test_lowercases_and_collapses_whitespace(self):
        assert normalize_text("Hello   World\n\tAgain") == "hello world again"

    def test_removes_special_characters(self):
        assert normalize_text("Cost: $100 #launch") == "cost 100 launch"

    def test_removes_fillers(self):
        assert normalize_text("So, um, we basically build robots") == "so, we build robots"

    def test_keeps_fillers_on_request(self):
        assert "um" in normalize_text("um robots", remove_fillers=False)


class TestCleanTranscriptText:
    """Test cases for clean_transcript_text."""

    def test_removes_artifacts(self):
        text = "[00:00:05] Speaker 1: [Applause] Welcome to our pitch"

        assert clean_transcript_text(text) == "welcome to our pitch"

    def test_french_fillers(self):
        assert clean_transcript_text("Euh, notre projet, ben, avance") == "notre projet, avance"


class TestSentences:
    """Test cases for sentence helpers."""

    def test_split_sentences_drops_fragments(self):
        sentences = split_sentences("We build robots for farms. Yes! Farmers save a lot of time?")

        assert sentences == ["We build robots for farms", "Farmers save a lot of time"]

    def test_extract_first_sentences(self):
        text = (
            "We build robots for farms. They pick vegetables at night. "
            "Farmers save a lot of time. We are raising money."
        )

        assert extract_sentences(text, max_sentences=2) == (
            "We build robots for farms. They pick vegetables at night."
        )

    def test_short_text_unchanged(self):
        text = "  We build robots for farms.  "

        assert extract_sentences(text, max_sentences=2) == "We build robots for farms."
