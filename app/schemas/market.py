from typing import Dict, List

from app.schemas.property import CamelModel


class CityStats(CamelModel):
    city: str
    state: str
    property_count: int
    avg_price: int


class MarketInsights(CamelModel):
    price_increase: int
    avg_days_on_market: int
    sold_percentage: int
    sold_at_asking_percentage: int
    total_active_properties: int
    avg_price: int
    min_price: int
    max_price: int
    properties_by_status: Dict[str, int]
    top_cities: List[CityStats]


class MarketInsightsResponse(CamelModel):
    insights: MarketInsights
    message: str
