from app.models.property import Property
from app.services.market_insights import MarketInsightsService, percentage


def _listing(id, city, price, status="active", days=None):
    return Property(
        id=id,
        address=f"{id} Market St",
        city=city,
        state="TX",
        zip_code="78701",
        price=price,
        listing_status=status,
        days_on_market=days,
    )


def _seed_market(db):
    db.add_all(
        [
            _listing("m-1", "Austin", 200000, days=10),
            _listing("m-2", "Austin", 400000, days=30),
            _listing("m-3", "Austin", 300000, days=20),
            _listing("m-4", "Dallas", 250000, days=40),
            _listing("m-5", "Houston", 500000),
            _listing("m-6", "Austin", 350000, status="sold"),
            _listing("m-7", "Dallas", 275000, status="pending"),
        ]
    )
    db.commit()


def test_percentage_handles_empty_whole():
    assert percentage(3, 0) == 0
    assert percentage(1, 3) == 33


def test_empty_market_is_zeroed_but_clamped(client, db_session):
    r = client.get("/market-insights")
    assert r.status_code == 200
    insights = r.json()["insights"]
    assert insights["totalActiveProperties"] == 0
    assert insights["avgPrice"] == 0
    assert insights["priceIncrease"] == 0
    assert insights["soldPercentage"] == 0
    assert insights["soldAtAskingPercentage"] == 85
    assert insights["topCities"] == []


def test_market_insights_aggregates(client, db_session):
    _seed_market(db_session)
    body = client.get("/market-insights").json()
    assert body["message"] == "Market insights retrieved successfully"
    insights = body["insights"]

    assert insights["totalActiveProperties"] == 5
    assert insights["avgPrice"] == 330000
    assert insights["minPrice"] == 200000
    assert insights["maxPrice"] == 500000
    assert insights["avgDaysOnMarket"] == 25
    assert insights["propertiesByStatus"] == {"active": 5, "sold": 1, "pending": 1}
    assert insights["soldPercentage"] == 14

    top = insights["topCities"]
    assert top[0] == {
        "city": "Austin",
        "state": "TX",
        "propertyCount": 3,
        "avgPrice": 300000,
    }
    assert [c["city"] for c in top] == ["Austin", "Dallas", "Houston"]


def test_display_clamps(db_session):
    _seed_market(db_session)
    insights = MarketInsightsService(db_session).get_insights()
    # (500k - 200k) / 200k is 150%, shown capped
    assert insights.price_increase == 15
    assert insights.sold_at_asking_percentage == 85
    assert 0 <= insights.sold_percentage <= 100


def test_sold_at_asking_reports_real_value_above_floor(db_session):
    db_session.add_all(
        [_listing(f"s-{i}", "Austin", 100000, status="sold") for i in range(9)]
        + [_listing("a-1", "Austin", 100000)]
    )
    db_session.commit()
    insights = MarketInsightsService(db_session).get_insights()
    assert insights.sold_percentage == 90
    assert insights.sold_at_asking_percentage == 90
    assert insights.price_increase == 0
