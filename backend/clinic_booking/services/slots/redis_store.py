# backend/clinic_booking/services/slots/redis_store.py
"""
Redis storage for resolved day schedules.

Key format: schedule:day:{date}
Value: JSON of ResolvedDay (open flag, periods, closure reason, blocked range).

Bookings are never cached; only holiday/exception/weekly-hours resolution.
Redis errors are logged and treated as cache misses.
"""

import json
import logging
from datetime import date

from redis import Redis
from redis.exceptions import RedisError

from ...config import settings
from .schedule import ResolvedDay

logger = logging.getLogger(__name__)


class ScheduleRedisStore:
    """Redis storage wrapper for ResolvedDay values."""

    KEY_PREFIX = "schedule:day"

    def __init__(self, redis: Redis, ttl_seconds: int | None = None):
        self.redis = redis
        self.ttl_seconds = ttl_seconds or settings.schedule_cache_ttl_seconds

    def _key(self, dt: date) -> str:
        return f"{self.KEY_PREFIX}:{dt.isoformat()}"

    # ── Write ────────────────────────────────────────────────────────────

    def store_day(self, day: ResolvedDay) -> None:
        try:
            self.redis.set(self._key(day.date), json.dumps(day.to_dict()), ex=self.ttl_seconds)
        except RedisError as e:
            logger.warning(f"Schedule cache write failed for {day.date}: {e}")

    def store_days(self, days: list[ResolvedDay]) -> None:
        """Batch store via pipeline."""
        if not days:
            return

        pipe = self.redis.pipeline()
        for day in days:
            pipe.set(self._key(day.date), json.dumps(day.to_dict()), ex=self.ttl_seconds)
        try:
            pipe.execute()
        except RedisError as e:
            logger.warning(f"Schedule cache batch write failed: {e}")

    # ── Read ─────────────────────────────────────────────────────────────

    def get_day(self, dt: date) -> ResolvedDay | None:
        """Cached day, or None on cache miss."""
        try:
            raw = self.redis.get(self._key(dt))
        except RedisError as e:
            logger.warning(f"Schedule cache read failed for {dt}: {e}")
            return None
        return self._decode(raw)

    def get_days(self, dates: list[date]) -> dict[date, ResolvedDay | None]:
        """Batch read; missing dates map to None."""
        if not dates:
            return {}
        try:
            values = self.redis.mget([self._key(dt) for dt in dates])
        except RedisError as e:
            logger.warning(f"Schedule cache batch read failed: {e}")
            return {dt: None for dt in dates}
        return {dt: self._decode(raw) for dt, raw in zip(dates, values)}

    def _decode(self, raw) -> ResolvedDay | None:
        if raw is None:
            return None
        if isinstance(raw, bytes):
            raw = raw.decode()
        try:
            return ResolvedDay.from_dict(json.loads(raw))
        except (ValueError, KeyError, TypeError):
            logger.warning("Discarding malformed schedule cache entry")
            return None

    # ── Delete ───────────────────────────────────────────────────────────

    def delete_days(self, dates: list[date] | None = None) -> int:
        """
        Delete cached days.

        Args:
            dates: Specific dates, or None to delete every cached day.

        Returns:
            Number of deleted keys.
        """
        try:
            if dates:
                keys = [self._key(dt) for dt in dates]
            else:
                keys = list(self.redis.scan_iter(match=f"{self.KEY_PREFIX}:*"))

            if not keys:
                return 0

            return self.redis.delete(*keys)
        except RedisError as e:
            logger.warning(f"Schedule cache invalidation failed: {e}")
            return 0
