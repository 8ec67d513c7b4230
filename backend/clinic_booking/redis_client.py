import logging

from redis import Redis

from .config import settings

logger = logging.getLogger(__name__)


def _build_client() -> Redis | None:
    if not settings.redis_url:
        logger.info("REDIS_URL not set, schedule cache disabled")
        return None
    return Redis.from_url(settings.redis_url, decode_responses=True, socket_timeout=2.0)


# None when the schedule cache is disabled
redis_client = _build_client()
