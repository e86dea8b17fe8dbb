from pydantic import BaseModel, Field
from typing import List, Optional

class Coordinate(BaseModel):
    id: Optional[int] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None

    @property
    def has_identity(self) -> bool:
        return bool(self.id) and self.id > 0

    @property
    def has_position(self) -> bool:
        # 0.0 counts as missing, same as an absent value
        return bool(self.latitude) and bool(self.longitude)

class CurrencyInfo(BaseModel):
    name: str = ""
    code: str = ""
    symbol: str = ""

class GeocodeResult(BaseModel):
    """Reverse geocoder answer, already flattened from the provider payload"""
    road: str = ""
    district: str = ""
    locality: str = ""
    city: str = ""
    county: str = ""
    country: str = ""
    formatted: str = ""
    currency: CurrencyInfo = Field(default_factory=CurrencyInfo)
    flag: str = ""

# Columns persisted for a place record, in schema order
PLACE_FIELDS = (
    "coordinate_id",
    "road",
    "district",
    "locality",
    "city",
    "county",
    "country",
    "formatted_address",
    "currency_name",
    "currency_code",
    "currency_symbol",
    "flag_glyph",
    "photo_reference",
)

class PlaceRecord(BaseModel):
    id: Optional[int] = None
    coordinate_id: int
    road: str = ""
    district: str = ""
    locality: str = ""
    city: str = ""
    county: str = ""
    country: str = ""
    formatted_address: str = ""
    currency_name: str = ""
    currency_code: str = ""
    currency_symbol: str = ""
    flag_glyph: str = ""
    photo_reference: Optional[str] = None
    # Filled in by callers for the map view; never persisted
    coordinate: Optional[Coordinate] = None

    @property
    def has_identity(self) -> bool:
        return bool(self.id) and self.id > 0

    def to_row(self) -> dict:
        return {field: getattr(self, field) for field in PLACE_FIELDS}

    @classmethod
    def from_row(cls, row) -> "PlaceRecord":
        data = dict(row)
        return cls(id=data.get("id"), **{field: data.get(field) for field in PLACE_FIELDS if data.get(field) is not None})

    @classmethod
    def from_geocode(cls, coordinate_id: int, result: GeocodeResult) -> "PlaceRecord":
        return cls(
            coordinate_id=coordinate_id,
            road=result.road,
            district=result.district,
            locality=result.locality,
            city=result.city,
            county=result.county,
            country=result.country,
            formatted_address=result.formatted,
            currency_name=result.currency.name,
            currency_code=result.currency.code,
            currency_symbol=result.currency.symbol,
            flag_glyph=result.flag,
        )

class PlacesResponse(BaseModel):
    places: List[PlaceRecord]
    total: int

class PhotoUpdateRequest(BaseModel):
    photo_uri: str
