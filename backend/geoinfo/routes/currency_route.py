from fastapi import APIRouter, Depends

from geoinfo.models.currency_model import RateLookup
from geoinfo.routes.dependencies import Stores, get_stores

router = APIRouter()

@router.get("/rates/{base}/{compare}", response_model=RateLookup)
async def get_rate_endpoint(base: str, compare: str, stores: Stores = Depends(get_stores)):
    """
    Newest cached snapshot for the pair. `from_cache` is false when it is
    missing or stale; this endpoint never calls the rate provider.
    """
    return await stores.rates.get_rate(base, compare)
