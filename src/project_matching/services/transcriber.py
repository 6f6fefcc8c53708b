"""Speech-to-text service for pitch videos."""

import logging
import os
import tempfile
from pathlib import Path
from typing import Optional, Union
from urllib.parse import urlparse

import requests
from openai import OpenAI

from ..config import settings
from ..utils.error_handling import ExternalServiceError

logger = logging.getLogger(__name__)

MediaReference = Union[str, Path, bytes]


class TranscriberService:
    """
    Transcribes the audio track of a media file with OpenAI speech-to-text.

    Accepts:
    - A local file path
    - An http(s) URL (downloaded to a temporary file first)
    - Raw media bytes
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        language: Optional[str] = None,
        client: Optional[OpenAI] = None
    ):
        """
        Initialize transcriber.

        Args:
            api_key: OpenAI API key (uses settings if not provided)
            model: Transcription model (uses settings if not provided)
            language: ISO-639-1 spoken language (uses settings if not provided)
            client: Preconfigured OpenAI client
        """
        self.api_key = api_key or settings.openai_api_key
        if client is None and not self.api_key:
            raise ValueError("OpenAI API key is required")

        self.client = client or OpenAI(
            api_key=self.api_key,
            timeout=settings.transcription_timeout_seconds
        )
        self.model = model or settings.transcription_model
        self.language = language or settings.transcription_language

    def transcribe(self, media: MediaReference) -> str:
        """
        Transcribe a media file.

        Args:
            media: Local path, URL or raw bytes

        Returns:
            Transcript text (stripped)

        Raises:
            FileNotFoundError: If a local path does not exist
            ExternalServiceError: If the download or provider call fails
        """
        if isinstance(media, bytes):
            return self._transcribe_file(("media.mp4", media))

        reference = str(media)
        if self._is_url(reference):
            local_path = self.download(reference)
            try:
                return self._transcribe_path(local_path)
            finally:
                self._cleanup(local_path)

        return self._transcribe_path(Path(reference))

    def download(self, url: str) -> Path:
        """
        Download a remote media file to a temporary location.

        Args:
            url: http(s) URL of the media file

        Returns:
            Path of the downloaded file (caller removes it)
        """
        suffix = Path(urlparse(url).path).suffix
        handle, name = tempfile.mkstemp(suffix=suffix, prefix="pitch-")
        path = Path(name)

        logger.info(f"Downloading media from {url} to {path}")

        try:
            with os.fdopen(handle, "wb") as output:
                with requests.get(
                    url,
                    stream=True,
                    timeout=settings.provider_timeout_seconds
                ) as response:
                    response.raise_for_status()
                    for chunk in response.iter_content(chunk_size=settings.download_chunk_size):
                        if chunk:
                            output.write(chunk)
        except requests.RequestException as e:
            self._cleanup(path)
            raise ExternalServiceError(
                f"Failed to download media: {e}",
                service="download",
                details={"url": url}
            ) from e

        return path

    def _transcribe_path(self, path: Path) -> str:
        if not path.exists():
            raise FileNotFoundError(f"Media file not found: {path}")

        with path.open("rb") as media_file:
            return self._transcribe_file(media_file)

    def _transcribe_file(self, media_file) -> str:
        try:
            transcript = self.client.audio.transcriptions.create(
                model=self.model,
                file=media_file,
                language=self.language,
                response_format="text"
            )
        except Exception as e:
            logger.error(f"Error during transcription: {e}")
            raise ExternalServiceError(
                f"Transcription failed: {e}",
                service="transcription"
            ) from e

        # response_format="text" yields a plain string
        text = transcript if isinstance(transcript, str) else getattr(transcript, "text", "")
        return text.strip()

    @staticmethod
    def _is_url(reference: str) -> bool:
        return reference.startswith(("http://", "https://"))

    @staticmethod
    def _cleanup(path: Path) -> None:
        try:
            path.unlink(missing_ok=True)
            logger.debug(f"Removed temporary file {path}")
        except OSError as e:
            logger.error(f"Error removing temporary file {path}: {e}")
