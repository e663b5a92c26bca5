"""Failed login throttling."""
import time

from cachetools import TTLCache

from app.utils.logger import get_logger

logger = get_logger(__name__)


class LoginAttemptService:
    """Counts failed logins per username in a bounded cache whose entries expire.

    An entry lives ``ttl_seconds`` from its last write; when ``maxsize`` entries
    are held the least recently used one is evicted.
    """

    def __init__(self, max_attempts: int = 5, maxsize: int = 100, ttl_seconds: float = 900, timer=time.monotonic):
        self.max_attempts = max_attempts
        self._cache = TTLCache(maxsize=maxsize, ttl=ttl_seconds, timer=timer)

    def attempts(self, username: str) -> int:
        return self._cache.get(username, 0)

    def add_failed_attempt(self, username: str) -> int:
        attempts = self.attempts(username) + 1
        self._cache[username] = attempts
        logger.info("Failed login attempt %d for %s", attempts, username)
        return attempts

    def exceeded_max_attempts(self, username: str) -> bool:
        return self.attempts(username) > self.max_attempts

    def evict(self, username: str) -> None:
        self._cache.pop(username, None)
