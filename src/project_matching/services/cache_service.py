"""Cache service for storing analysis results using Redis."""

import hashlib
import json
import logging
from typing import Optional
import numpy as np
import redis
from redis.exceptions import RedisError

from ..config import settings
from ..models import AnalysisResult

logger = logging.getLogger(__name__)


class CacheService:
    """
    Manages caching of media analysis results.

    Uses Redis for:
    - Embeddings stored as raw float32 bytes (dimension recorded once)
    - Transcript, keywords, summary and scores stored as JSON
    - TTL-based expiration
    """

    def __init__(
        self,
        host: Optional[str] = None,
        port: Optional[int] = None,
        db: Optional[int] = None,
        password: Optional[str] = None,
        enabled: Optional[bool] = None
    ):
        """
        Initialize cache service.

        Args:
            host: Redis host (uses settings if not provided)
            port: Redis port (uses settings if not provided)
            db: Redis database number (uses settings if not provided)
            password: Redis password (uses settings if not provided)
            enabled: Override the cache_enabled setting
        """
        self.enabled = settings.cache_enabled if enabled is None else enabled
        self.ttl = settings.cache_ttl_seconds

        if not self.enabled:
            logger.info("Cache is disabled")
            self.client = None
            return

        host = host or settings.redis_host
        port = port or settings.redis_port
        db = db if db is not None else settings.redis_db
        password = password or settings.redis_password

        try:
            self.client = redis.Redis(
                host=host,
                port=port,
                db=db,
                password=password,
                decode_responses=False,  # Embeddings are binary
                socket_connect_timeout=5,
                socket_timeout=5
            )

            # Test connection
            self.client.ping()
            logger.info(f"Connected to Redis at {host}:{port}")

        except RedisError as e:
            logger.error(f"Failed to connect to Redis: {e}")
            logger.warning("Cache will be disabled")
            self.enabled = False
            self.client = None

    @staticmethod
    def media_key(media_ref) -> str:
        """
        Stable identifier for a media reference.

        Args:
            media_ref: Path, URL or raw bytes

        Returns:
            SHA-256 hex digest
        """
        data = media_ref if isinstance(media_ref, bytes) else str(media_ref).encode("utf-8")
        return hashlib.sha256(data).hexdigest()

    def _make_key(self, prefix: str, identifier: str) -> str:
        return f"project_matching:{prefix}:{identifier}"

    def get_analysis(self, media_key: str) -> Optional[AnalysisResult]:
        """
        Get a cached analysis result.

        Args:
            media_key: Identifier from media_key()

        Returns:
            Analysis result or None if not cached
        """
        if not self.enabled or not self.client:
            return None

        try:
            payload, vector = self.client.mget(
                self._make_key("analysis", media_key),
                self._make_key("embedding", media_key)
            )
            if not payload or not vector:
                return None

            fields = json.loads(payload)
            fields["embedding"] = np.frombuffer(vector, dtype=np.float32).tolist()
            logger.debug(f"Cache hit for media {media_key[:12]}")
            return AnalysisResult.model_validate(fields)

        except Exception as e:
            logger.error(f"Error retrieving cached analysis: {e}")

        return None

    def set_analysis(self, media_key: str, result: AnalysisResult) -> bool:
        """
        Cache an analysis result.

        Args:
            media_key: Identifier from media_key()
            result: Complete analysis result

        Returns:
            True if successfully cached
        """
        if not self.enabled or not self.client:
            return False

        try:
            payload = result.model_dump_json(exclude={"embedding"})
            vector = np.asarray(result.embedding, dtype=np.float32).tobytes()

            pipe = self.client.pipeline()
            pipe.setex(self._make_key("analysis", media_key), self.ttl, payload)
            pipe.setex(self._make_key("embedding", media_key), self.ttl, vector)
            pipe.execute()

            logger.debug(f"Cached analysis for media {media_key[:12]}")
            return True

        except Exception as e:
            logger.error(f"Error caching analysis: {e}")
            return False

    def invalidate(self, media_key: str) -> bool:
        """
        Invalidate cached data for a media file.

        Args:
            media_key: Identifier from media_key()

        Returns:
            True if successfully invalidated
        """
        if not self.enabled or not self.client:
            return False

        try:
            self.client.delete(
                self._make_key("analysis", media_key),
                self._make_key("embedding", media_key)
            )
            logger.info(f"Invalidated cache for media {media_key[:12]}")
            return True

        except Exception as e:
            logger.error(f"Error invalidating cache: {e}")
            return False

