from fastapi import APIRouter

from app.dependencies import db_dependency
from app.schemas.market import MarketInsightsResponse
from app.services.market_insights import MarketInsightsService

router = APIRouter(prefix="/market-insights", tags=["market-insights"])


@router.get("", response_model=MarketInsightsResponse)
def get_market_insights(db: db_dependency):
    return {
        "insights": MarketInsightsService(db).get_insights(),
        "message": "Market insights retrieved successfully",
    }
