from fastapi import APIRouter, Query
from typing import Optional

from starlette import status
from app.dependencies import db_dependency
from app.schemas.property import (
    PropertyCountResponse,
    PropertyDetailResponse,
    PropertyListResponse,
)
from app.services.image_service import ImageService
from app.services.property_service import PropertyService, parse_int

router = APIRouter(prefix="/properties", tags=["properties"])

MAX_IMAGE_COUNT = 10


@router.get("", response_model=PropertyListResponse, status_code=status.HTTP_200_OK)
def list_properties(
    db: db_dependency,
    # Numeric filters are taken as raw strings; unparseable values are ignored.
    page: Optional[str] = Query(None, description="1-based page number"),
    limit: Optional[str] = Query(None, description="Page size (max 100)"),
    city: Optional[str] = Query(None, description="Filter by city (partial match)"),
    min_price: Optional[str] = Query(None, alias="minPrice"),
    max_price: Optional[str] = Query(None, alias="maxPrice"),
    property_type: Optional[str] = Query(None, alias="propertyType"),
    bedrooms: Optional[str] = Query(None, description="Minimum bedrooms"),
    bathrooms: Optional[str] = Query(None, description="Minimum bathrooms"),
    sort_by: Optional[str] = Query(None, alias="sortBy"),
    sort_order: Optional[str] = Query(None, alias="sortOrder"),
):
    """
    Paginated property listing with optional filters.

    Every property carries the walk/bike/transit scores of its neighborhood.
    Unknown ``sortBy`` or ``sortOrder`` values fall back to newest first.
    """
    return PropertyService().list_properties(
        db,
        page=page,
        limit=limit,
        city=city,
        min_price=min_price,
        max_price=max_price,
        property_type=property_type,
        bedrooms=bedrooms,
        bathrooms=bathrooms,
        sort_by=sort_by,
        sort_order=sort_order,
    )


@router.get("/count", response_model=PropertyCountResponse)
def count_properties(db: db_dependency):
    count = PropertyService().count_properties(db)
    return {"count": count, "message": f"Total properties in database: {count}"}


@router.get("/{property_id}", response_model=PropertyDetailResponse)
def get_property(db: db_dependency, property_id: str):
    return {
        "property": PropertyService().get_property(db, property_id),
        "message": "Property retrieved successfully",
    }


@router.get("/{property_id}/images")
def get_property_images(
    property_id: str,
    type: Optional[str] = Query("exterior", description="exterior or interior"),
    count: Optional[str] = Query("1"),
):
    image_count = parse_int(count)
    if image_count is None or image_count < 1:
        image_count = 1
    image_count = min(image_count, MAX_IMAGE_COUNT)

    if image_count == 1:
        return {"imageUrl": ImageService().get_property_image(property_id, type)}
    return {"imageUrls": ImageService().get_property_images(property_id, image_count)}
