"""Redis-backed cache for geocoding backend results."""

import hashlib
import logging

from pydantic import ValidationError
from redis import Redis
from redis.exceptions import RedisError

from mapsbridge.models.location import LocationResult

logger = logging.getLogger(__name__)


class GeocodingCache:
    """Caches successful backend lookups to cut repeat paid API calls."""

    def __init__(self, redis_client: Redis, ttl: int = 2592000):
        self.redis_client = redis_client
        self.ttl = ttl

    @classmethod
    def from_url(cls, redis_url: str | None, ttl: int) -> "GeocodingCache | None":
        """Connect to Redis, or return None if caching is unavailable.

        Args:
            redis_url: Redis connection URL, caching disabled when empty
            ttl: Seconds cached results live

        Returns:
            GeocodingCache or None
        """
        if not redis_url:
            return None

        try:
            client = Redis.from_url(redis_url, decode_responses=True)
            client.ping()
            logger.info("Redis caching enabled for geocoding")
            return cls(client, ttl)
        except RedisError as e:
            logger.warning(f"Redis connection failed, caching disabled: {e}")
            return None

    def _get_cache_key(self, service: str, operation: str, query: str) -> str:
        """Generate cache key for a geocoding lookup.

        Args:
            service: Backend name
            operation: Lookup type (reverse, forward, place)
            query: Lookup input; only free text is case-folded, place IDs are
                case sensitive

        Returns:
            Cache key string
        """
        normalized = query.strip()
        if operation == "forward":
            normalized = normalized.lower()
        query_hash = hashlib.sha256(normalized.encode()).hexdigest()
        return f"geocode:{service}:{operation}:{query_hash}"

    def get(self, service: str, operation: str, query: str) -> LocationResult | None:
        try:
            cached = self.redis_client.get(self._get_cache_key(service, operation, query))
            if cached:
                logger.debug(f"Cache hit for {service} {operation}: {query[:50]}")
                return LocationResult.model_validate_json(cached)
        except (RedisError, ValidationError) as e:
            logger.warning(f"Cache retrieval error: {e}")

        return None

    def set(
        self, service: str, operation: str, query: str, result: LocationResult
    ) -> None:
        try:
            self.redis_client.setex(
                self._get_cache_key(service, operation, query),
                self.ttl,
                result.model_dump_json(),
            )
        except RedisError as e:
            logger.warning(f"Cache storage error: {e}")
