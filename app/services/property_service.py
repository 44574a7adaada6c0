import math
from typing import Optional

from fastapi import HTTPException, status
from sqlalchemy import select, and_, func
from sqlalchemy.orm import Session

from app.models.property import Neighborhood, Property, PropertyType
from app.schemas.property import (
    Pagination,
    PropertyListResponse,
    PropertyResponse,
)

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
MAX_LIMIT = 100

walk_score = func.coalesce(Neighborhood.walk_score, 0).label("walk_score")
bike_score = func.coalesce(Neighborhood.bike_score, 0).label("bike_score")
transit_score = func.coalesce(Neighborhood.transit_score, 0).label("transit_score")

# Public sort keys -> column expressions. Nothing outside this map reaches ORDER BY.
SORT_COLUMNS = {
    "created_at": Property.created_at,
    "createdAt": Property.created_at,
    "price": Property.price,
    "walkScore": walk_score,
    "walk_score": walk_score,
    "bikeScore": bike_score,
    "bike_score": bike_score,
    "transitScore": transit_score,
    "transit_score": transit_score,
    "bedrooms": Property.bedrooms,
    "bathrooms": Property.bathrooms,
    "squareFeet": Property.square_feet,
    "square_feet": Property.square_feet,
    "yearBuilt": Property.year_built,
    "year_built": Property.year_built,
}
SORT_ORDERS = {"asc", "desc"}
DEFAULT_SORT_ORDER = "desc"

# Largest value a bound integer parameter can carry (SQLite INTEGER, Postgres BIGINT)
INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1
MAX_OFFSET = INT64_MAX


def parse_int(value: Optional[str], bounded: bool = True) -> Optional[int]:
    """Lenient integer parse: anything unparseable counts as absent.

    With ``bounded`` set, values outside the int64 range count as absent too,
    since the database cannot bind them.
    """
    if value is None or str(value).strip() == "":
        return None
    try:
        parsed = int(float(value))
    except (TypeError, ValueError, OverflowError):
        return None
    if bounded and not INT64_MIN <= parsed <= INT64_MAX:
        return None
    return parsed


def parse_float(value: Optional[str]) -> Optional[float]:
    if value is None or str(value).strip() == "":
        return None
    try:
        parsed = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(parsed) or math.isinf(parsed):
        return None
    return parsed


def parse_property_type(value: Optional[str]) -> Optional[PropertyType]:
    if not value:
        return None
    try:
        return PropertyType(value.strip().lower())
    except ValueError:
        return None


def resolve_sort(sort_by: Optional[str], sort_order: Optional[str]):
    """Return ORDER BY clauses; unknown field or direction falls back to newest first.

    A known field with no direction sorts descending.
    """
    column = SORT_COLUMNS.get(sort_by or "")
    direction = (sort_order or DEFAULT_SORT_ORDER).strip().lower()
    if column is None or direction not in SORT_ORDERS:
        return [Property.created_at.desc(), Property.id.asc()]
    ordered = column.asc() if direction == "asc" else column.desc()
    return [ordered, Property.id.asc()]


def property_with_scores():
    """Base SELECT: each property plus its neighborhood scores (0 when unlinked)."""
    return select(Property, walk_score, bike_score, transit_score).outerjoin(
        Neighborhood, Property.neighborhood_id == Neighborhood.id
    )


def to_property_response(row) -> PropertyResponse:
    prop, walk, bike, transit = row[0], row[1], row[2], row[3]
    return PropertyResponse.model_validate(prop).model_copy(
        update={
            "walk_score": int(walk or 0),
            "bike_score": int(bike or 0),
            "transit_score": int(transit or 0),
        }
    )


class PropertyService:
    def build_conditions(
        self,
        city: Optional[str] = None,
        min_price: Optional[float] = None,
        max_price: Optional[float] = None,
        property_type: Optional[PropertyType] = None,
        min_bedrooms: Optional[int] = None,
        min_bathrooms: Optional[float] = None,
    ) -> list:
        conditions = []

        if city and city.strip():
            conditions.append(
                func.lower(Property.city).contains(city.strip().lower(), autoescape=True)
            )
        if min_price is not None:
            conditions.append(Property.price >= min_price)
        if max_price is not None:
            conditions.append(Property.price <= max_price)
        if property_type is not None:
            conditions.append(Property.property_type == property_type)
        if min_bedrooms is not None:
            conditions.append(Property.bedrooms >= min_bedrooms)
        if min_bathrooms is not None:
            conditions.append(Property.bathrooms >= min_bathrooms)

        return conditions

    def list_properties(
        self,
        db: Session,
        page: Optional[str] = None,
        limit: Optional[str] = None,
        city: Optional[str] = None,
        min_price: Optional[str] = None,
        max_price: Optional[str] = None,
        property_type: Optional[str] = None,
        bedrooms: Optional[str] = None,
        bathrooms: Optional[str] = None,
        sort_by: Optional[str] = None,
        sort_order: Optional[str] = None,
    ) -> PropertyListResponse:
        """
        Paginated, filtered property listing.

        All filters arrive as raw query strings. Values that do not parse are
        ignored rather than rejected. The listing and the count share the same
        WHERE conditions so ``totalCount`` always matches the filtered set.
        """
        # Unbounded so a far-out page still reports itself as requested
        page_number = parse_int(page, bounded=False)
        if page_number is None or page_number < 1:
            page_number = DEFAULT_PAGE
        page_size = parse_int(limit)
        if page_size is None or page_size < 1:
            page_size = DEFAULT_LIMIT
        page_size = min(page_size, MAX_LIMIT)

        conditions = self.build_conditions(
            city=city,
            min_price=parse_float(min_price),
            max_price=parse_float(max_price),
            property_type=parse_property_type(property_type),
            min_bedrooms=parse_int(bedrooms),
            min_bathrooms=parse_float(bathrooms),
        )

        query = property_with_scores()
        count_query = select(func.count(Property.id))
        if conditions:
            query = query.where(and_(*conditions))
            count_query = count_query.where(and_(*conditions))

        offset = (page_number - 1) * page_size
        if offset > MAX_OFFSET:
            # No table holds that many rows; skip the query the database cannot bind.
            rows = []
        else:
            query = (
                query.order_by(*resolve_sort(sort_by, sort_order))
                .offset(offset)
                .limit(page_size)
            )
            rows = db.execute(query).all()
        total_count = db.execute(count_query).scalar_one()
        total_pages = math.ceil(total_count / page_size)

        return PropertyListResponse(
            properties=[to_property_response(row) for row in rows],
            pagination=Pagination(
                current_page=page_number,
                total_pages=total_pages,
                total_count=total_count,
                limit=page_size,
                has_next_page=page_number < total_pages,
                has_prev_page=page_number > 1,
            ),
        )

    def get_property(self, db: Session, property_id: str) -> PropertyResponse:
        row = db.execute(
            property_with_scores().where(Property.id == property_id)
        ).first()

        if not row:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Property not found",
            )
        return to_property_response(row)

    def count_properties(self, db: Session) -> int:
        return db.execute(select(func.count(Property.id))).scalar_one()

    def property_exists(self, db: Session, property_id: str) -> bool:
        return (
            db.execute(select(Property.id).where(Property.id == property_id)).first()
            is not None
        )
