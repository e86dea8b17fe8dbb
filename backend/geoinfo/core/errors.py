"""
Error kinds raised by the stores, providers and the load pipeline.
"""


class GeoInfoError(Exception):
    """Base class for every error this package raises on purpose"""


class PersistenceError(GeoInfoError):
    """A write affected no rows or returned no identity"""


class DuplicateRecordError(PersistenceError):
    """A write clashed with a unique constraint (place_record.coordinate_id)"""


class NotFoundError(GeoInfoError):
    """Zero rows, or an ambiguous number of rows, where exactly one was required"""

    def __init__(self, message: str, matches: int = 0):
        super().__init__(message)
        self.matches = matches

    @property
    def ambiguous(self) -> bool:
        # More than one row means a broken uniqueness invariant
        return self.matches > 1


class ValidationError(GeoInfoError):
    """Missing or invalid input caught before any I/O"""


class GeocodeError(GeoInfoError):
    """Reverse geocoding failed or returned no result"""


class WeatherError(GeoInfoError):
    """Current weather or forecast fetch failed"""


class RateFetchError(GeoInfoError):
    """Currency rate fetch failed"""
