import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from geoinfo.core.config import settings
from geoinfo.core.db_connection import ensure_indexes, get_db
from geoinfo.core.errors import (
    GeoInfoError,
    GeocodeError,
    NotFoundError,
    RateFetchError,
    ValidationError,
    WeatherError,
)
from geoinfo.core.logger import logs
from geoinfo.models.base_model import SessionContext
from geoinfo.routes.currency_route import router as currency_router
from geoinfo.routes.dependencies import close_sqlite_connection
from geoinfo.routes.load_route import router as load_router
from geoinfo.routes.places_route import router as places_router

@asynccontextmanager
async def lifespan(app: FastAPI):
    app.state.session = SessionContext()
    app.state.pipeline = None
    if settings.STORAGE_MODE == "mongodb":
        await ensure_indexes(await get_db())
    logs.log(logging.INFO, f"GeoInfo backend started (storage: {settings.STORAGE_MODE})")
    yield
    close_sqlite_connection()

app = FastAPI(title="GeoInfo Cache", lifespan=lifespan)
app.include_router(load_router)
app.include_router(places_router)
app.include_router(currency_router)

# --- Error mapping ---
@app.exception_handler(GeoInfoError)
async def geoinfo_exception_handler(request: Request, exc: GeoInfoError):
    if isinstance(exc, NotFoundError):
        status_code = 409 if exc.ambiguous else 404
    elif isinstance(exc, ValidationError):
        status_code = 422
    elif isinstance(exc, (GeocodeError, WeatherError, RateFetchError)):
        status_code = 502
    else:
        status_code = 500

    logs.log(logging.WARNING if status_code < 500 else logging.ERROR,
             f"{request.url.path} failed: {type(exc).__name__}: {str(exc)}")
    return JSONResponse(
        status_code=status_code,
        content={"detail": str(exc), "type": type(exc).__name__}
    )

# --- Root Endpoint ---
@app.get("/")
async def root():
    return {
        "message": "Welcome to GeoInfo Cache API",
        "status": "running",
        "endpoints": {
            "health": "/health",
            "load": "/load",
            "places": "/places",
            "rates": "/rates/{base}/{compare}",
            "docs": "/docs"
        },
        "version": "1.0.0"
    }

# --- Health Check ---
@app.get("/health")
async def health_check():
    return {"status": "ok", "service": "GeoInfo Cache", "storage": settings.STORAGE_MODE}

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("geoinfo.main:app", host="0.0.0.0", port=8000, reload=True)
