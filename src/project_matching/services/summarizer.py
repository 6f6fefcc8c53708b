"""Pitch summarisation service."""

import logging
from typing import Optional
from openai import OpenAI
from tenacity import retry, stop_after_attempt, wait_exponential

from ..config import settings
from ..utils.text_utils import extract_sentences

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You summarise project pitches. Write a concise summary in 2-3 sentences "
    "that captures the essence of the project, in the language of the pitch."
)


class Summarizer:
    """
    Summarises pitch transcripts with an OpenAI chat model.

    Falls back to the first two sentences of the transcript when no API key
    is configured or the provider keeps failing.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        client: Optional[OpenAI] = None,
        min_length: int = 50
    ):
        """
        Initialize summarizer.

        Args:
            api_key: OpenAI API key (uses settings if not provided)
            model: Chat model (uses settings if not provided)
            client: Preconfigured OpenAI client
            min_length: Texts shorter than this get an empty summary
        """
        api_key = api_key or settings.openai_api_key
        self.model = model or settings.summary_model
        self.min_length = min_length

        if client is not None:
            self.client = client
        elif api_key:
            self.client = OpenAI(api_key=api_key, timeout=settings.provider_timeout_seconds)
        else:
            logger.warning("No OpenAI API key configured, using extractive summaries")
            self.client = None

    def summarize(self, text: str) -> str:
        """
        Summarise a transcript.

        Args:
            text: Transcript text

        Returns:
            Summary, or an empty string for very short texts
        """
        if not text or len(text.strip()) < self.min_length:
            return ""

        if self.client is None:
            return extract_sentences(text, max_sentences=2)

        try:
            return self._complete(text)
        except Exception as e:
            logger.error(f"Error generating summary, using extractive fallback: {e}")
            return extract_sentences(text, max_sentences=2)

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        reraise=True
    )
    def _complete(self, text: str) -> str:
        response = self.client.chat.completions.create(
            model=self.model,
            messages=[
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": f"Summarise this project pitch: {text}"}
            ],
            max_tokens=150,
            temperature=0.3
        )
        return (response.choices[0].message.content or "").strip()
