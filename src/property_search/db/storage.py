"""SQLite storage for property listings."""

import math
from pathlib import Path
from typing import Any, Final

import aiosqlite

from property_search.db.row_mappers import build_insert, row_to_property
from property_search.filters.geo import EARTH_RADIUS_KM, haversine_km
from property_search.logging import get_logger
from property_search.models import Property, SortField, SortOrder
from property_search.repository import RepositoryPage, RepositoryQuery

logger = get_logger(__name__)

_ORDER_COLUMNS: Final = {
    SortField.PRICE: "p.price_amount",
    SortField.AREA: "p.area",
    SortField.BEDROOMS: "p.bedrooms",
    SortField.BATHROOMS: "p.bathrooms",
    SortField.CREATED_AT: "p.created_at",
    SortField.UPDATED_AT: "p.updated_at",
}

# Widens the bounding box so float error never drops a listing on the radius edge
_BOX_MARGIN_DEG: Final = 1e-6


def _lower(value: object) -> object:
    """Unicode-aware lower() for SQL, matching Python string comparison."""
    return value.lower() if isinstance(value, str) else value


def _contains_clause(column: str) -> str:
    """SQL testing that some element of a JSON array column contains ``?``."""
    return (
        f"EXISTS (SELECT 1 FROM json_each({column}) j WHERE instr(py_lower(j.value), ?) > 0)"
    )


def build_filter_clauses(query: RepositoryQuery) -> tuple[str, list[Any]]:
    """Build WHERE clause and params for listing filtering.

    Mirrors ``matches_criteria``: unset constraints are omitted, a NULL
    year_built never satisfies a year bound, text comparisons are
    case-insensitive.

    Args:
        query: Repository filter parameters.

    Returns:
        Tuple of (where_sql, params).
    """
    where_clauses: list[str] = []
    params: list[Any] = []

    ranges = (
        ("p.price_amount", query.min_price, query.max_price),
        ("p.bedrooms", query.min_bedrooms, query.max_bedrooms),
        ("p.bathrooms", query.min_bathrooms, query.max_bathrooms),
        ("p.area", query.min_area, query.max_area),
        ("p.year_built", query.year_built_min, query.year_built_max),
    )
    for column, low, high in ranges:
        if low is not None:
            where_clauses.append(f"{column} >= ?")
            params.append(low)
        if high is not None:
            where_clauses.append(f"{column} <= ?")
            params.append(high)

    if query.property_types:
        placeholders = ", ".join("?" for _ in query.property_types)
        where_clauses.append(f"p.property_type IN ({placeholders})")
        params.extend(t.value for t in query.property_types)
    if query.statuses:
        placeholders = ", ".join("?" for _ in query.statuses)
        where_clauses.append(f"p.status IN ({placeholders})")
        params.extend(s.value for s in query.statuses)

    for amenity in query.amenities:
        where_clauses.append(_contains_clause("p.amenities"))
        params.append(amenity.lower())
    for feature in query.features:
        where_clauses.append(_contains_clause("p.features"))
        params.append(feature.lower())

    if query.featured is not None:
        where_clauses.append("p.featured = ?")
        params.append(int(query.featured))

    if query.location:
        where_clauses.append("instr(py_lower(p.full_address), ?) > 0")
        params.append(query.location.lower())
    exact_text = (
        ("p.city", query.city),
        ("p.state", query.state),
        ("p.country", query.country),
    )
    for column, value in exact_text:
        if value:
            where_clauses.append(f"py_lower({column}) = ?")
            params.append(value.lower())

    where_sql = " AND ".join(where_clauses) if where_clauses else "1=1"
    return where_sql, params


def _bounding_box(
    latitude: float, longitude: float, radius_km: float
) -> tuple[str, list[float]]:
    """Coarse lat/lon box containing every point within ``radius_km``."""
    angular = radius_km / EARTH_RADIUS_KM
    delta_lat = math.degrees(angular) + _BOX_MARGIN_DEG
    clauses = ["p.latitude BETWEEN ? AND ?"]
    params = [latitude - delta_lat, latitude + delta_lat]

    cos_lat = math.cos(math.radians(latitude))
    if math.sin(angular) < cos_lat:
        delta_lon = math.degrees(math.asin(math.sin(angular) / cos_lat)) + _BOX_MARGIN_DEG
        west, east = longitude - delta_lon, longitude + delta_lon
        # Boxes crossing the antimeridian keep only the latitude band
        if west >= -180 and east <= 180:
            clauses.append("p.longitude BETWEEN ? AND ?")
            params.extend([west, east])

    return " AND ".join(clauses), params


class PropertyStorage:
    """SQLite-based listing store implementing PropertyRepository."""

    def __init__(self, db_path: str) -> None:
        """Initialize storage with database path.

        Args:
            db_path: Path to SQLite database file, or ":memory:" for in-memory.
        """
        self.db_path = db_path
        self._conn: aiosqlite.Connection | None = None
        self._ensure_directory()

    def _ensure_directory(self) -> None:
        """Ensure the directory for the database exists."""
        if self.db_path != ":memory:":
            path = Path(self.db_path)
            path.parent.mkdir(parents=True, exist_ok=True)

    async def _get_connection(self) -> aiosqlite.Connection:
        """Get or create the database connection."""
        if self._conn is None:
            self._conn = await aiosqlite.connect(self.db_path)
            self._conn.row_factory = aiosqlite.Row
            await self._conn.create_function("py_lower", 1, _lower, deterministic=True)
            await self._conn.execute("PRAGMA journal_mode=WAL")
            await self._conn.execute("PRAGMA busy_timeout=5000")
            await self._conn.execute("PRAGMA synchronous=NORMAL")
        return self._conn

    async def close(self) -> None:
        """Close the database connection."""
        if self._conn is not None:
            await self._conn.close()
            self._conn = None

    async def initialize(self) -> None:
        """Initialize the database schema."""
        conn = await self._get_connection()
        await conn.execute("""
            CREATE TABLE IF NOT EXISTS properties (
                id TEXT PRIMARY KEY,
                title TEXT NOT NULL,
                description TEXT NOT NULL DEFAULT '',
                price_amount REAL NOT NULL,
                currency TEXT NOT NULL DEFAULT 'USD',
                street TEXT NOT NULL,
                city TEXT NOT NULL,
                state TEXT NOT NULL,
                country TEXT NOT NULL,
                postal_code TEXT,
                full_address TEXT NOT NULL,
                latitude REAL,
                longitude REAL,
                property_type TEXT NOT NULL,
                status TEXT NOT NULL,
                bedrooms INTEGER NOT NULL,
                bathrooms INTEGER NOT NULL,
                area REAL NOT NULL,
                year_built INTEGER,
                lot_size REAL,
                parking_json TEXT,
                amenities TEXT NOT NULL DEFAULT '[]',
                features TEXT NOT NULL DEFAULT '[]',
                images TEXT NOT NULL DEFAULT '[]',
                featured INTEGER NOT NULL DEFAULT 0,
                created_at TEXT NOT NULL,
                updated_at TEXT NOT NULL
            )
        """)

        # Create indexes for common queries
        await conn.execute("""
            CREATE INDEX IF NOT EXISTS idx_price
            ON properties(price_amount)
        """)
        await conn.execute("""
            CREATE INDEX IF NOT EXISTS idx_type_status
            ON properties(property_type, status)
        """)
        await conn.execute("""
            CREATE INDEX IF NOT EXISTS idx_created_at
            ON properties(created_at)
        """)
        await conn.execute("""
            CREATE INDEX IF NOT EXISTS idx_location
            ON properties(latitude, longitude)
        """)
        await conn.commit()

    async def _upsert(self, conn: aiosqlite.Connection, prop: Property) -> None:
        columns, values = build_insert(prop)
        col_list = ", ".join(columns)
        placeholders = ", ".join("?" for _ in columns)
        updates = ", ".join(f"{c} = excluded.{c}" for c in columns if c != "id")
        await conn.execute(
            f"""
            INSERT INTO properties ({col_list})
            VALUES ({placeholders})
            ON CONFLICT(id) DO UPDATE SET {updates}
        """,
            values,
        )

    async def save_property(self, prop: Property) -> None:
        """Save or update a listing.

        Args:
            prop: Listing to save.
        """
        conn = await self._get_connection()
        await self._upsert(conn, prop)
        await conn.commit()

        logger.debug("property_saved", property_id=prop.id)

    async def save_properties(self, properties: list[Property]) -> int:
        """Save or update several listings in one transaction.

        Returns:
            Number of listings written.
        """
        conn = await self._get_connection()
        for prop in properties:
            await self._upsert(conn, prop)
        await conn.commit()

        logger.info("properties_saved", count=len(properties))
        return len(properties)

    async def get_property(self, property_id: str) -> Property | None:
        """Get a listing by ID.

        Args:
            property_id: Listing identifier.

        Returns:
            Property if found, None otherwise.
        """
        conn = await self._get_connection()
        cursor = await conn.execute(
            "SELECT * FROM properties WHERE id = ?",
            (property_id,),
        )
        row = await cursor.fetchone()
        if row is None:
            return None
        return row_to_property(row)

    async def count(self) -> int:
        """Number of stored listings."""
        conn = await self._get_connection()
        cursor = await conn.execute("SELECT COUNT(*) FROM properties")
        row = await cursor.fetchone()
        return row[0] if row else 0

    async def search(self, query: RepositoryQuery) -> RepositoryPage:
        """Get one sorted page of listings matching the query.

        Args:
            query: Filter, sort and pagination parameters. ``limit=None``
                returns every match from ``offset`` on.

        Returns:
            The page and the total match count.
        """
        conn = await self._get_connection()
        where_sql, params = build_filter_clauses(query)

        # Count total
        count_cursor = await conn.execute(
            f"SELECT COUNT(*) FROM properties p WHERE {where_sql}",
            params,
        )
        count_row = await count_cursor.fetchone()
        total = count_row[0] if count_row else 0

        direction = "DESC" if query.sort_order == SortOrder.DESC else "ASC"
        # rowid keeps ties in insertion order, as a stable sort would
        order_sql = f"{_ORDER_COLUMNS[query.sort_by]} {direction}, p.rowid ASC"

        page_params = list(params)
        if query.limit is None:
            limit_sql = "LIMIT -1 OFFSET ?"
            page_params.append(query.offset)
        else:
            limit_sql = "LIMIT ? OFFSET ?"
            page_params.extend([query.limit, query.offset])

        cursor = await conn.execute(
            f"""
            SELECT p.* FROM properties p
            WHERE {where_sql}
            ORDER BY {order_sql}
            {limit_sql}
            """,
            page_params,
        )
        rows = await cursor.fetchall()
        items = [row_to_property(row) for row in rows]

        logger.debug(
            "storage_search_complete",
            total=total,
            returned=len(items),
            sort_by=query.sort_by.value,
        )
        return RepositoryPage(items=items, total=total)

    async def find_near_location(
        self, latitude: float, longitude: float, radius_km: float
    ) -> list[Property]:
        """Listings within ``radius_km`` of a point, nearest first.

        A bounding box narrows the scan in SQL; exact great-circle distance
        is checked per row.
        """
        conn = await self._get_connection()
        box_sql, params = _bounding_box(latitude, longitude, radius_km)
        cursor = await conn.execute(
            f"""
            SELECT p.* FROM properties p
            WHERE p.latitude IS NOT NULL AND p.longitude IS NOT NULL
              AND {box_sql}
            ORDER BY p.rowid
            """,
            params,
        )
        rows = await cursor.fetchall()

        nearby: list[tuple[float, Property]] = []
        for row in rows:
            distance = haversine_km(latitude, longitude, row["latitude"], row["longitude"])
            if distance <= radius_km:
                nearby.append((distance, row_to_property(row)))

        nearby.sort(key=lambda pair: pair[0])

        logger.debug(
            "storage_near_location_complete",
            candidates=len(rows),
            within_radius=len(nearby),
            radius_km=radius_km,
        )
        return [prop for _, prop in nearby]
