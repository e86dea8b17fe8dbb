from pydantic import BaseModel
from typing import Optional
from datetime import datetime, timedelta, timezone

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

def as_utc(moment: datetime) -> datetime:
    """Naive datetimes are taken to be UTC already."""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)

def to_epoch_micros(moment: datetime) -> int:
    # Integer arithmetic keeps the stored value exact and sortable
    return (as_utc(moment) - EPOCH) // timedelta(microseconds=1)

def from_epoch_micros(value: int) -> datetime:
    return EPOCH + timedelta(microseconds=int(value))

class CurrencyRateSnapshot(BaseModel):
    id: Optional[int] = None
    base_currency: str
    compare_currency: str
    rate: float
    fetched_at: datetime

    def age(self, now: datetime) -> timedelta:
        return as_utc(now) - as_utc(self.fetched_at)

class RateLookup(BaseModel):
    snapshot: Optional[CurrencyRateSnapshot] = None
    from_cache: bool = False
