from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    # Storage mode: "local" (SQLite file) or "mongodb"
    STORAGE_MODE: str = "local"

    # SQLite Configuration (only used if STORAGE_MODE=local)
    SQLITE_PATH: str = "data/geoinfo.db"

    # MongoDB Configuration (only needed if STORAGE_MODE=mongodb)
    MONGO_URI: str = "mongodb://localhost:27017"
    MONGO_DB_NAME: str = "geoinfo_db"

    # Key/value session info (last known coordinate)
    INFO_DIR: str = "data/info"

    LOGGER: int = 20

    # Currency rate cache
    RATE_FRESHNESS_SECONDS: int = 3600
    REFERENCE_CURRENCY: str = "USD"

    # Geocoder (OpenCage)
    OPENCAGE_API_KEY: str = "your-key-here"
    OPENCAGE_URL: str = "https://api.opencagedata.com/geocode/v1/json"

    # Weather (Weatherbit)
    WEATHERBIT_API_KEY: str = "your-key-here"
    WEATHERBIT_URL: str = "https://api.weatherbit.io/v2.0"
    FORECAST_DAYS: int = 7
    FORECAST_HOURS: int = 24

    # Currency rates (Frankfurter, no key)
    CURRENCY_API_URL: str = "https://api.frankfurter.app/latest"

    HTTP_TIMEOUT: float = 10.0

    model_config = SettingsConfigDict(
        # Look for .env in the current folder OR the parent folder
        env_file=(".env", "../.env"),
        env_file_encoding="utf-8",
        extra="ignore"
    )

settings = Settings()
