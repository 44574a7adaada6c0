from sqlalchemy import select, func
from sqlalchemy.orm import Session

from app.models.property import ListingStatus, Property
from app.schemas.market import CityStats, MarketInsights

TOP_CITIES_LIMIT = 5

# Cosmetic display clamps for the landing page. Not statistically meaningful.
SOLD_AT_ASKING_DISPLAY_FLOOR = 85
PRICE_INCREASE_DISPLAY_CAP = 15


def percentage(part: float, whole: float) -> int:
    if not whole:
        return 0
    return round(part / whole * 100)


class MarketInsightsService:
    def __init__(self, db: Session):
        self.db = db

    def _price_stats(self):
        return self.db.execute(
            select(
                func.avg(Property.price),
                func.min(Property.price),
                func.max(Property.price),
                func.count(Property.id),
            ).where(Property.listing_status == ListingStatus.ACTIVE.value)
        ).one()

    def _days_on_market_stats(self):
        return self.db.execute(
            select(
                func.avg(Property.days_on_market),
                func.min(Property.days_on_market),
                func.max(Property.days_on_market),
            ).where(
                Property.listing_status == ListingStatus.ACTIVE.value,
                Property.days_on_market.isnot(None),
            )
        ).one()

    def _counts_by_status(self) -> dict[str, int]:
        rows = self.db.execute(
            select(Property.listing_status, func.count(Property.id)).group_by(
                Property.listing_status
            )
        ).all()
        return {status: int(count) for status, count in rows}

    def _top_cities(self) -> list[CityStats]:
        property_count = func.count(Property.id).label("property_count")
        rows = self.db.execute(
            select(
                Property.city,
                Property.state,
                property_count,
                func.avg(Property.price).label("avg_price"),
            )
            .where(Property.listing_status == ListingStatus.ACTIVE.value)
            .group_by(Property.city, Property.state)
            .order_by(property_count.desc(), Property.city.asc())
            .limit(TOP_CITIES_LIMIT)
        ).all()
        return [
            CityStats(
                city=row.city,
                state=row.state,
                property_count=int(row.property_count),
                avg_price=round(float(row.avg_price or 0)),
            )
            for row in rows
        ]

    def get_insights(self) -> MarketInsights:
        # The four aggregates are independent of each other.
        avg_price, min_price, max_price, active_count = self._price_stats()
        avg_days, _, _ = self._days_on_market_stats()
        by_status = self._counts_by_status()
        top_cities = self._top_cities()

        avg_price = float(avg_price or 0)
        min_price = float(min_price or 0)
        max_price = float(max_price or 0)

        total_listings = sum(by_status.values())
        sold_count = by_status.get(ListingStatus.SOLD.value, 0)
        sold_percentage = percentage(sold_count, total_listings)

        price_increase = (
            percentage(max_price - min_price, min_price) if min_price > 0 else 0
        )

        return MarketInsights(
            price_increase=min(price_increase, PRICE_INCREASE_DISPLAY_CAP),
            avg_days_on_market=round(float(avg_days or 0)),
            sold_percentage=sold_percentage,
            sold_at_asking_percentage=max(sold_percentage, SOLD_AT_ASKING_DISPLAY_FLOOR),
            total_active_properties=int(active_count or 0),
            avg_price=round(avg_price),
            min_price=round(min_price),
            max_price=round(max_price),
            properties_by_status=by_status,
            top_cities=top_cities,
        )
