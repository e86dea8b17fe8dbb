import logging
from datetime import datetime, timedelta, timezone

from geoinfo.core.config import settings
from geoinfo.core.errors import PersistenceError, ValidationError
from geoinfo.core.logger import logs
from geoinfo.models.currency_model import (
    CurrencyRateSnapshot,
    RateLookup,
    from_epoch_micros,
    to_epoch_micros,
)
from geoinfo.repos.base_repo import CurrencyRateRepository

class CurrencyRateService:
    """
    Currency Rate Cache. Pure cache: it never calls a rate provider,
    the load pipeline fetches and calls store() on a miss.
    """
    def __init__(self, repo: CurrencyRateRepository, freshness: timedelta | None = None):
        self.repo = repo
        if freshness is None:
            freshness = timedelta(seconds=settings.RATE_FRESHNESS_SECONDS)
        self.freshness = freshness

    async def get_rate(self, base: str, compare: str, now: datetime | None = None) -> RateLookup:
        base, compare = self._normalize(base, compare)
        now = now or datetime.now(timezone.utc)

        row = await self.repo.find_latest(base, compare)
        if not row:
            logs.log(logging.INFO, f"✗ Rate cache MISS for {base}/{compare} (no snapshot)")
            return RateLookup(snapshot=None, from_cache=False)

        snapshot = self._to_snapshot(row)
        age = snapshot.age(now)
        if age < self.freshness:
            logs.log(logging.INFO, f"✓ Rate cache HIT for {base}/{compare} (age {age})")
            return RateLookup(snapshot=snapshot, from_cache=True)

        logs.log(logging.INFO, f"✗ Rate cache STALE for {base}/{compare} (age {age})")
        return RateLookup(snapshot=snapshot, from_cache=False)

    async def store(self, base: str, compare: str, rate: float, now: datetime | None = None) -> CurrencyRateSnapshot:
        base, compare = self._normalize(base, compare)
        now = now or datetime.now(timezone.utc)
        fetched_at = to_epoch_micros(now)

        new_id = await self.repo.insert(base, compare, float(rate), fetched_at)
        if not new_id or new_id < 1:
            raise PersistenceError(f"Currency rate insert for {base}/{compare} returned no identity")

        return CurrencyRateSnapshot(
            id=new_id,
            base_currency=base,
            compare_currency=compare,
            rate=float(rate),
            fetched_at=from_epoch_micros(fetched_at)
        )

    def _normalize(self, base: str, compare: str) -> tuple[str, str]:
        if not base or not base.strip() or not compare or not compare.strip():
            raise ValidationError("Both base and compare currency codes are required")
        return base.strip().upper(), compare.strip().upper()

    def _to_snapshot(self, row: dict) -> CurrencyRateSnapshot:
        return CurrencyRateSnapshot(
            id=row["id"],
            base_currency=row["base_currency"],
            compare_currency=row["compare_currency"],
            rate=row["rate"],
            fetched_at=from_epoch_micros(row["fetched_at"])
        )
