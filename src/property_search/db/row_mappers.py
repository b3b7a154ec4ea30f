"""Mapping between Property records and rows of the properties table."""

import json
from datetime import datetime
from typing import Any

import aiosqlite

from property_search.models import (
    Address,
    Coordinates,
    Parking,
    Price,
    Property,
    PropertyFeatures,
    PropertyStatus,
    PropertyType,
)


def _timestamp(value: datetime) -> str:
    # Fixed-width UTC text so ORDER BY on the column is chronological
    return value.isoformat(timespec="microseconds")


def build_insert(prop: Property) -> tuple[list[str], list[Any]]:
    """Build INSERT column names and values for a Property.

    Returns (columns, values) lists that are guaranteed to stay in sync.
    """
    address = prop.address
    features = prop.features
    coords = address.coordinates
    parking = features.parking

    row: dict[str, Any] = {
        "id": prop.id,
        "title": prop.title,
        "description": prop.description,
        "price_amount": prop.price.amount,
        "currency": prop.price.currency,
        "street": address.street,
        "city": address.city,
        "state": address.state,
        "country": address.country,
        "postal_code": address.postal_code,
        "full_address": address.full_address(),
        "latitude": coords.latitude if coords else None,
        "longitude": coords.longitude if coords else None,
        "property_type": prop.type.value,
        "status": prop.status.value,
        "bedrooms": features.bedrooms,
        "bathrooms": features.bathrooms,
        "area": features.area,
        "year_built": features.year_built,
        "lot_size": features.lot_size,
        "parking_json": parking.model_dump_json() if parking else None,
        "amenities": json.dumps(list(features.amenities)),
        "features": json.dumps(list(features.features)),
        "images": json.dumps(list(prop.images)),
        "featured": int(prop.featured),
        "created_at": _timestamp(prop.created_at),
        "updated_at": _timestamp(prop.updated_at),
    }
    return list(row), list(row.values())


def row_to_property(row: aiosqlite.Row) -> Property:
    """Convert a database row to a Property.

    Args:
        row: Database row from the properties table.

    Returns:
        Property instance.
    """
    coordinates = (
        Coordinates(latitude=row["latitude"], longitude=row["longitude"])
        if row["latitude"] is not None and row["longitude"] is not None
        else None
    )
    parking = (
        Parking.model_validate_json(row["parking_json"]) if row["parking_json"] else None
    )
    return Property(
        id=row["id"],
        title=row["title"],
        description=row["description"] or "",
        price=Price(amount=row["price_amount"], currency=row["currency"]),
        address=Address(
            street=row["street"],
            city=row["city"],
            state=row["state"],
            country=row["country"],
            postal_code=row["postal_code"],
            coordinates=coordinates,
        ),
        type=PropertyType(row["property_type"]),
        status=PropertyStatus(row["status"]),
        features=PropertyFeatures(
            bedrooms=row["bedrooms"],
            bathrooms=row["bathrooms"],
            area=row["area"],
            amenities=json.loads(row["amenities"]),
            features=json.loads(row["features"]),
            parking=parking,
            year_built=row["year_built"],
            lot_size=row["lot_size"],
        ),
        images=json.loads(row["images"]),
        featured=bool(row["featured"]),
        created_at=datetime.fromisoformat(row["created_at"]),
        updated_at=datetime.fromisoformat(row["updated_at"]),
    )
