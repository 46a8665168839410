"""
HTTP tests for the ranked listing feed (GET /api/startup).
"""
import pytest

from app.models import Startup

VISITOR = "visitor@example.com"


def _names(response):
    return [item["name"] for item in response.json()]


def test_anonymous_feed_is_unscored_and_recent_first(client, make_startup):
    """Visitors without a profile get plain listings, newest first, without score fields."""
    make_startup(name="Old", age_days=4)
    make_startup(name="New", age_days=0.5)

    response = client.get("/api/startup")

    assert response.status_code == 200
    assert _names(response) == ["New", "Old"]
    for item in response.json():
        assert "score" not in item
        assert "match_count" not in item


def test_no_profile_feed_honors_sort(client, make_startup):
    make_startup(name="A", views=3)
    make_startup(name="B", views=30)
    make_startup(name="C", views=1)

    response = client.get("/api/startup", params={"email": "ghost@example.com", "sort": "views_asc"})

    assert response.status_code == 200
    assert _names(response) == ["C", "A", "B"]


def test_personalized_results_share_a_tag(client, make_preferences, make_startup):
    """Every personalized result overlaps the stored preference tags."""
    make_preferences(tags=["ai", "saas"])
    make_startup(name="AI", tags=["ai"])
    make_startup(name="SaaS", tags=["saas", "b2b"])
    make_startup(name="Fin", tags=["fintech"])

    response = client.get("/api/startup", params={"email": VISITOR})

    assert response.status_code == 200
    body = response.json()
    assert sorted(item["name"] for item in body) == ["AI", "SaaS"]
    for item in body:
        assert set(item["tags"]) & {"ai", "saas"}
        assert "score" in item


def test_stage_override_takes_precedence(client, make_preferences, make_startup):
    make_preferences(tags=["ai"], stage="Seed")
    make_startup(name="Seed AI", tags=["ai"], funding_stage="Seed")
    make_startup(name="Series AI", tags=["ai"], funding_stage="Series A")

    response = client.get("/api/startup", params={"email": VISITOR, "stage": "Series A"})

    assert _names(response) == ["Series AI"]


def test_location_override_takes_precedence(client, make_preferences, make_startup):
    make_preferences(tags=["ai"], location="Berlin")
    make_startup(name="Berlin AI", tags=["ai"], location="Berlin")
    make_startup(name="Lisbon AI", tags=["ai"], location="Lisbon")

    response = client.get("/api/startup", params={"email": VISITOR, "location": "Lisbon"})

    assert _names(response) == ["Lisbon AI"]


def test_tags_override_accepts_comma_list(client, make_preferences, make_startup):
    make_preferences(tags=["ai"])
    make_startup(name="AI", tags=["ai"])
    make_startup(name="Health", tags=["health"])
    make_startup(name="Climate", tags=["climate"])

    response = client.get("/api/startup", params={"email": VISITOR, "tags": " health, climate "})

    assert sorted(_names(response)) == ["Climate", "Health"]


def test_scenario_only_overlapping_listing_returned(client, make_preferences, make_startup):
    """Preferences ai/saas at Seed: the fintech listing is filtered out."""
    make_preferences(tags=["ai", "saas"], stage="Seed", location="")
    make_startup(name="L1", tags=["ai"], funding_stage="Seed", likes=10, views=100, age_days=1)
    make_startup(name="L2", tags=["fintech"], funding_stage="Seed", likes=50, views=500, age_days=1)

    response = client.get("/api/startup", params={"email": VISITOR})

    assert response.status_code == 200
    body = response.json()
    assert [item["name"] for item in body] == ["L1"]
    assert body[0]["match_count"] == 1
    # 0.5*1 + 0.2*1 + 0.1*1 + 0.2*(1/2)
    assert body[0]["score"] == pytest.approx(0.9, abs=1e-3)


def test_scenario_fallback_when_nothing_overlaps(client, make_preferences, make_startup):
    """No overlap at all: every listing comes back scored, best score first."""
    make_preferences(tags=["ai", "saas"], stage="Seed", location="")
    make_startup(name="L1", tags=["fintech"], funding_stage="Seed", likes=2, views=10)
    make_startup(name="L2", tags=["web3"], funding_stage="Seed", likes=20, views=100)

    response = client.get("/api/startup", params={"email": VISITOR})

    assert response.status_code == 200
    body = response.json()
    assert [item["name"] for item in body] == ["L2", "L1"]
    scores = [item["score"] for item in body]
    assert scores == sorted(scores, reverse=True)
    assert all(item["match_count"] == 0 for item in body)


def test_scenario_explicit_sort_overrides_score(client, make_preferences, make_startup):
    """likes_desc orders by likes while still reporting scores."""
    make_preferences(tags=["ai", "saas"])
    make_startup(name="Perfect", tags=["ai", "saas"], likes=1)
    make_startup(name="Popular", tags=["ai"], likes=40)
    make_startup(name="Middling", tags=["saas"], likes=20)

    response = client.get("/api/startup", params={"email": VISITOR, "sort": "likes_desc"})

    assert response.status_code == 200
    body = response.json()
    assert [item["name"] for item in body] == ["Popular", "Middling", "Perfect"]
    assert all("score" in item for item in body)
    assert body[2]["score"] > body[0]["score"]


def test_unknown_sort_is_ignored(client, make_preferences, make_startup):
    make_preferences(tags=["ai", "saas"])
    make_startup(name="Perfect", tags=["ai", "saas"], likes=1)
    make_startup(name="Popular", tags=["ai"], likes=40)

    response = client.get("/api/startup", params={"email": VISITOR, "sort": "hotness"})

    assert response.status_code == 200
    assert _names(response) == ["Perfect", "Popular"]


def test_text_query_matches_name_or_tag(client, make_startup):
    make_startup(name="Robotix", tags=["hardware"])
    make_startup(name="Quiet Co", tags=["robots"])
    make_startup(name="Unrelated", tags=["food"])

    response = client.get("/api/startup", params={"query": "robots"})

    assert sorted(_names(response)) == ["Quiet Co"]

    response = client.get("/api/startup", params={"query": "ROBO"})

    assert _names(response) == ["Robotix"]


def test_whitespace_query_excludes_nothing(client, make_startup):
    make_startup(name="One")
    make_startup(name="Two")

    empty = client.get("/api/startup", params={"query": ""})
    blank = client.get("/api/startup", params={"query": "   "})

    assert blank.status_code == 200
    assert sorted(_names(blank)) == sorted(_names(empty)) == ["One", "Two"]


def test_empty_directory_is_not_an_error(client, make_preferences):
    make_preferences(tags=["ai"])

    response = client.get("/api/startup", params={"email": VISITOR})

    assert response.status_code == 200
    assert response.json() == []


def test_list_item_includes_founder_summary(client, make_profile, make_startup):
    founder = make_profile(email="founder@example.com", full_name="Ada Founder", avatar_url="https://img/ada.png")
    make_startup(name="Founded", founder_id=founder.id)

    response = client.get("/api/startup")

    item = response.json()[0]
    assert item["founder_id"] == str(founder.id)
    assert item["profiles"] == {"full_name": "Ada Founder", "avatar_url": "https://img/ada.png"}


def test_backend_failure_returns_error_body(client, engine):
    """Storage errors surface as 500 with an {"error": ...} body."""
    Startup.__table__.drop(engine)

    response = client.get("/api/startup")

    assert response.status_code == 500
    assert "no such table" in response.json()["error"]
