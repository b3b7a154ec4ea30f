"""Validated search criteria."""

from enum import StrEnum
from typing import Any, Final, Self

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    ValidationInfo,
    field_validator,
)

from property_search.models.property import PropertyStatus, PropertyType

DEFAULT_LIMIT: Final = 20
MAX_LIMIT: Final = 100
MAX_RADIUS_KM: Final = 1000

# (lower bound, upper bound, human label) for every paired range
RANGE_FIELDS: Final[tuple[tuple[str, str, str], ...]] = (
    ("min_price", "max_price", "price"),
    ("min_bedrooms", "max_bedrooms", "bedrooms"),
    ("min_bathrooms", "max_bathrooms", "bathrooms"),
    ("min_area", "max_area", "area"),
    ("year_built_min", "year_built_max", "year built"),
)
_RANGE_PARTNERS: Final = {high: low for low, high, _ in RANGE_FIELDS}


class SortField(StrEnum):
    """Fields a search can be ordered by."""

    PRICE = "price"
    AREA = "area"
    BEDROOMS = "bedrooms"
    BATHROOMS = "bathrooms"
    CREATED_AT = "createdAt"
    UPDATED_AT = "updatedAt"


class SortOrder(StrEnum):
    ASC = "asc"
    DESC = "desc"


class CriteriaValidationError(ValueError):
    """Search criteria violate a constraint.

    Attributes:
        message: Human-readable description of every violated constraint.
        fields: Names of the offending fields (dotted for nested ones).
    """

    def __init__(self, message: str, fields: tuple[str, ...] = ()) -> None:
        super().__init__(message)
        self.message = message
        self.fields = fields

    @classmethod
    def from_pydantic(cls, exc: ValidationError) -> "CriteriaValidationError":
        fields: list[str] = []
        messages: list[str] = []
        for err in exc.errors():
            field = ".".join(str(part) for part in err["loc"] if not isinstance(part, int))
            ctx = err.get("ctx") or {}
            if err["type"] == "value_error" and "error" in ctx:
                detail = str(ctx["error"])
            else:
                detail = err["msg"]
            partner = _RANGE_PARTNERS.get(field)
            if partner and err["type"] == "value_error" and partner not in fields:
                fields.append(partner)
            if field and field not in fields:
                fields.append(field)
            messages.append(f"{field}: {detail}" if field else detail)
        return cls("; ".join(messages), tuple(fields))


class GeoQuery(BaseModel):
    """Reference point and radius for a proximity search."""

    model_config = ConfigDict(frozen=True)

    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)
    radius_km: float = Field(gt=0, le=MAX_RADIUS_KM)


class SearchCriteria(BaseModel):
    """Every constraint of a single search request.

    Built once per request and immutable afterwards. All filters are optional;
    an unset filter matches everything. Paired ``min``/``max`` bounds are
    validated so that the lower bound never exceeds the upper one.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    # Numeric ranges (min fields must precede their max counterparts)
    min_price: float | None = Field(default=None, ge=0)
    max_price: float | None = Field(default=None, ge=0)
    min_bedrooms: int | None = Field(default=None, ge=0, le=20)
    max_bedrooms: int | None = Field(default=None, ge=0, le=20)
    min_bathrooms: int | None = Field(default=None, ge=0, le=20)
    max_bathrooms: int | None = Field(default=None, ge=0, le=20)
    min_area: float | None = Field(default=None, ge=0)
    max_area: float | None = Field(default=None, ge=0)
    year_built_min: int | None = None
    year_built_max: int | None = None

    # Categorical filters
    property_types: tuple[PropertyType, ...] = ()
    statuses: tuple[PropertyStatus, ...] = ()
    amenities: tuple[str, ...] = ()
    features: tuple[str, ...] = ()

    # Location
    location: str | None = Field(default=None, max_length=200)
    city: str | None = Field(default=None, max_length=100)
    state: str | None = Field(default=None, max_length=100)
    country: str | None = Field(default=None, max_length=100)
    coordinates: GeoQuery | None = None

    featured: bool | None = None
    query: str | None = Field(default=None, max_length=200)

    # Pagination and ordering
    limit: int = Field(default=DEFAULT_LIMIT, ge=0, le=MAX_LIMIT)
    offset: int = Field(default=0, ge=0)
    sort_by: SortField = SortField.CREATED_AT
    sort_order: SortOrder = SortOrder.DESC

    @classmethod
    def create(cls, **data: Any) -> Self:
        """Validate raw values, raising CriteriaValidationError on failure."""
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise CriteriaValidationError.from_pydantic(e) from e

    @field_validator("location", "city", "state", "country", "query", mode="before")
    @classmethod
    def blank_to_none(cls, v: object) -> object:
        if isinstance(v, str):
            v = v.strip()
            return v or None
        return v

    @field_validator("amenities", "features", mode="before")
    @classmethod
    def clean_labels(cls, v: object) -> object:
        if v is None:
            return ()
        if isinstance(v, (list, tuple, set, frozenset)):
            return tuple(s.strip() for s in v if isinstance(s, str) and s.strip())
        return v

    @field_validator("property_types", "statuses", mode="before")
    @classmethod
    def normalize_enum_values(cls, v: object) -> object:
        if v is None:
            return ()
        if isinstance(v, (list, tuple, set, frozenset)):
            return tuple(s.strip().lower() if isinstance(s, str) else s for s in v)
        return v

    @field_validator(
        "max_price", "max_bedrooms", "max_bathrooms", "max_area", "year_built_max"
    )
    @classmethod
    def check_range_order(cls, v: float | None, info: ValidationInfo) -> float | None:
        """Ensure the lower bound of each pair is <= the upper bound."""
        if v is None:
            return v
        for low_field, high_field, label in RANGE_FIELDS:
            if high_field != info.field_name:
                continue
            low = info.data.get(low_field)
            if low is not None and low > v:
                raise ValueError(f"minimum {label} cannot be greater than maximum {label}")
        return v

    @property
    def has_query(self) -> bool:
        return bool(self.query)

    def is_empty(self) -> bool:
        """Whether no filter is set (pagination and ordering are ignored)."""
        return not any(
            [
                self.min_price is not None,
                self.max_price is not None,
                self.min_bedrooms is not None,
                self.max_bedrooms is not None,
                self.min_bathrooms is not None,
                self.max_bathrooms is not None,
                self.min_area is not None,
                self.max_area is not None,
                self.year_built_min is not None,
                self.year_built_max is not None,
                self.property_types,
                self.statuses,
                self.amenities,
                self.features,
                self.location,
                self.city,
                self.state,
                self.country,
                self.coordinates is not None,
                self.featured is not None,
                self.query,
            ]
        )
