"""Property listing record and its derived values."""

from datetime import UTC, datetime
from enum import StrEnum
from typing import Final, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

SQFT_PER_SQM: Final = 10.764
LUXURY_PRICE_THRESHOLD: Final = 1_000_000
LUXURY_AREA_SQM: Final = 300
LUXURY_MIN_BATHROOMS: Final = 3

LUXURY_AMENITIES: Final = (
    "pool",
    "spa",
    "wine cellar",
    "home theater",
    "elevator",
    "smart home",
    "concierge",
    "valet",
    "gym",
    "sauna",
)
LUXURY_FEATURES: Final = (
    "marble",
    "granite",
    "hardwood",
    "crown molding",
    "high ceilings",
    "gourmet kitchen",
    "master suite",
)


class PropertyType(StrEnum):
    """Kind of property being listed."""

    HOUSE = "house"
    APARTMENT = "apartment"
    CONDO = "condo"
    TOWNHOUSE = "townhouse"
    VILLA = "villa"
    LAND = "land"
    COMMERCIAL = "commercial"
    OFFICE = "office"


class PropertyStatus(StrEnum):
    """Publication status of a listing."""

    DRAFT = "draft"
    PUBLISHED = "published"
    SOLD = "sold"
    RENTED = "rented"
    WITHDRAWN = "withdrawn"
    ARCHIVED = "archived"


class Coordinates(BaseModel):
    """A point on the earth's surface in decimal degrees."""

    model_config = ConfigDict(frozen=True)

    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)


class Address(BaseModel):
    """Postal address of a listing."""

    model_config = ConfigDict(frozen=True)

    street: str
    city: str
    state: str
    country: str
    postal_code: str | None = None
    coordinates: Coordinates | None = None

    def full_address(self) -> str:
        """Compose the address into a single display line."""
        region = f"{self.state} {self.postal_code}" if self.postal_code else self.state
        return ", ".join(part for part in (self.street, self.city, region, self.country) if part)


class Price(BaseModel):
    """Asking price."""

    model_config = ConfigDict(frozen=True)

    amount: float = Field(ge=0)
    currency: str = Field(default="USD", min_length=3, max_length=3)


class Parking(BaseModel):
    """Parking provision."""

    model_config = ConfigDict(frozen=True)

    spaces: int = Field(ge=0, le=50)
    type: Literal["garage", "carport", "street", "covered"]


class PropertyFeatures(BaseModel):
    """Physical characteristics of a listing. Area is in square meters."""

    model_config = ConfigDict(frozen=True)

    bedrooms: int = Field(ge=0, le=20)
    bathrooms: int = Field(ge=0, le=20)
    area: float = Field(ge=0)
    amenities: tuple[str, ...] = ()
    features: tuple[str, ...] = ()
    parking: Parking | None = None
    year_built: int | None = None
    lot_size: float | None = Field(default=None, ge=0)

    @field_validator("amenities", "features", mode="before")
    @classmethod
    def clean_labels(cls, v: object) -> object:
        """Trim labels and drop empty ones."""
        if isinstance(v, (list, tuple)):
            return tuple(s.strip() for s in v if isinstance(s, str) and s.strip())
        return v


class Property(BaseModel):
    """A listing as stored by the repository."""

    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    description: str = ""
    price: Price
    address: Address
    type: PropertyType
    status: PropertyStatus = PropertyStatus.PUBLISHED
    features: PropertyFeatures
    images: tuple[str, ...] = ()
    featured: bool = False
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @field_validator("created_at", "updated_at")
    @classmethod
    def ensure_utc(cls, v: datetime) -> datetime:
        """Naive timestamps are taken as UTC; aware ones are converted to UTC."""
        if v.tzinfo is None:
            return v.replace(tzinfo=UTC)
        return v.astimezone(UTC)


# ---------------------------------------------------------------------------
# Derived values
# ---------------------------------------------------------------------------


def has_amenity(prop: Property, amenity: str) -> bool:
    """Whether any amenity of the listing contains ``amenity`` (case-insensitive)."""
    needle = amenity.lower()
    return any(needle in a.lower() for a in prop.features.amenities)


def has_feature(prop: Property, feature: str) -> bool:
    """Whether any feature of the listing contains ``feature`` (case-insensitive)."""
    needle = feature.lower()
    return any(needle in f.lower() for f in prop.features.features)


def price_per_sqm(prop: Property) -> int:
    """Price per square meter, or 0 when the area is unknown."""
    if prop.features.area <= 0:
        return 0
    return round(prop.price.amount / prop.features.area)


def area_sqft(prop: Property) -> int:
    return round(prop.features.area * SQFT_PER_SQM)


def price_per_sqft(prop: Property) -> int:
    """Price per square foot, or 0 when the area is unknown."""
    sqft = area_sqft(prop)
    if sqft <= 0:
        return 0
    return round(prop.price.amount / sqft)


def is_family_friendly(prop: Property) -> bool:
    return prop.features.bedrooms >= 2 and prop.features.bathrooms >= 1


def is_luxury(prop: Property) -> bool:
    """Luxury listings are very expensive, or large/well-appointed with premium extras."""
    if prop.price.amount > LUXURY_PRICE_THRESHOLD:
        return True

    has_premium = any(has_amenity(prop, a) for a in LUXURY_AMENITIES) or any(
        has_feature(prop, f) for f in LUXURY_FEATURES
    )
    is_large = (
        prop.features.area > LUXURY_AREA_SQM or prop.features.bathrooms >= LUXURY_MIN_BATHROOMS
    )
    return has_premium and is_large


def age_years(prop: Property, *, today: datetime | None = None) -> int | None:
    """Age of the building in whole years, or None when the build year is unknown."""
    if prop.features.year_built is None:
        return None
    year = (today or datetime.now(UTC)).year
    return year - prop.features.year_built
