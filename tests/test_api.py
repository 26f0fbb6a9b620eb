"""Tests for the HTTP routes."""

from bson import ObjectId
from fastapi.testclient import TestClient
import openai
import pytest

import rasika.api as api
from rasika.errors import PersistenceError
from rasika.main import app

USER = {"X-User-Id": "user-1", "X-User-Display-Name": "Mira"}


@pytest.fixture
def client() -> TestClient:
    # not entered as a context manager, so the startup index creation is skipped
    return TestClient(app)


@pytest.fixture
def recommend_body() -> dict:
    return {"mood": "happy", "contentTypes": ["movie"], "keywords": "road trip", "imdbRatingFilter": "7.5"}


class TestMisc:
    """Tests for health, catalog and poster routes."""

    def test_health(self, client) -> None:
        """The health route reports ok."""
        assert client.get("/health").json() == {"status": "ok", "service": "rasika"}

    def test_catalog_filters_genres(self, client) -> None:
        """Genres are limited to the selected content types."""
        body = client.get("/catalog", params={"contentTypes": "music"}).json()
        ids = [g["id"] for g in body["genres"]]
        assert "jazz" in ids
        assert "mecha" not in ids
        assert body["moods"]["melancholy"] == "Melancholy"
        assert body["ratingOptions"][0] == "any_rating"
        assert body["languages"][0] == "any_language"

    def test_catalog_unknown_type(self, client) -> None:
        """An unknown content type is a 400."""
        assert client.get("/catalog", params={"contentTypes": "comic"}).status_code == 400

    def test_poster(self, client, monkeypatch) -> None:
        """The poster route returns the looked-up URL."""
        monkeypatch.setattr(api, "get_movie_poster_url", lambda title: f"https://img/{title}.jpg")
        body = client.get("/posters", params={"title": "Arrival"}).json()
        assert body == {"title": "Arrival", "posterUrl": "https://img/Arrival.jpg"}


class TestRecommend:
    """Tests for POST /recommend."""

    def test_logged_for_user(self, client, fake_openai, history_collection, recommend_body, road_trip_movies) -> None:
        """Recommendations are returned and the request is logged with its id."""
        fake_openai.reply = {"recommendations": road_trip_movies}
        response = client.post("/recommend", json=recommend_body, headers=USER)
        assert response.status_code == 200
        body = response.json()
        assert len(body["recommendations"]) == 4
        assert body["recommendations"][0]["contentType"] == "movie"
        assert "keyCreatorForSimilar" in body["recommendations"][0]
        assert body["warning"] is None
        doc = history_collection.docs[ObjectId(body["historyId"])]
        assert doc["userId"] == "user-1"
        assert doc["keywords"] == "road trip"

    def test_no_user_not_logged(self, client, fake_openai, history_collection, recommend_body) -> None:
        """Without a user id nothing is written."""
        body = client.post("/recommend", json=recommend_body).json()
        assert body["historyId"] is None
        assert history_collection.docs == {}

    def test_guest_logged_without_personalization(self, client, fake_openai, history_collection, recommend_body) -> None:
        """Anonymous sessions are still logged."""
        headers = {"X-User-Id": "guest-1", "X-User-Anonymous": "true"}
        body = client.post("/recommend", json=recommend_body, headers=headers).json()
        assert body["historyId"] is not None

    def test_history_failure_is_warning(self, client, fake_openai, recommend_body, road_trip_movies, monkeypatch) -> None:
        """A failed history write keeps the recommendations and adds a warning."""
        fake_openai.reply = {"recommendations": road_trip_movies}

        def fail(user_id, request):
            raise PersistenceError("Failed to save history request. timeout")

        monkeypatch.setattr(api, "add_history_request", fail)
        monkeypatch.setattr(api.MoodRecommender, "load_personalization", lambda self, session: ([], []))
        body = client.post("/recommend", json=recommend_body, headers=USER).json()
        assert len(body["recommendations"]) == 4
        assert body["historyId"] is None
        assert body["warning"].startswith("History Log Failed")

    def test_invalid_selection(self, client, fake_openai) -> None:
        """Bad selections are a 400 and never reach the model."""
        response = client.post("/recommend", json={"mood": "grumpy", "contentTypes": ["movie"]})
        assert response.status_code == 400
        fake_openai.chat.completions.create.assert_not_called()

    def test_missing_field(self, client) -> None:
        """A structurally invalid body is a 422."""
        assert client.post("/recommend", json={"mood": "happy"}).status_code == 422

    def test_model_failure(self, client, fake_openai, recommend_body) -> None:
        """Model failures are a 502."""
        fake_openai.chat.completions.create.side_effect = openai.OpenAIError("boom")
        assert client.post("/recommend", json=recommend_body).status_code == 502


class TestKeywordRoute:
    """Tests for POST /keywords/suggest."""

    def test_suggest(self, client, fake_openai) -> None:
        """Suggestions are returned in camelCase."""
        fake_openai.reply = {"suggestedKeywords": ["thriller", "galactic war"]}
        body = client.post("/keywords/suggest", json={"currentKeywords": "space opera, thriller"}).json()
        assert body == {"suggestedKeywords": ["galactic war"]}


class TestHistoryRoutes:
    """Tests for history routes."""

    def test_requires_user(self, client, history_collection) -> None:
        """History routes need a user id."""
        assert client.get("/history").status_code == 401

    def test_viewed_flow(self, client, fake_openai, history_collection, recommend_body, road_trip_movies) -> None:
        """A viewed item is added once and then shows up in history."""
        fake_openai.reply = {"recommendations": road_trip_movies}
        body = client.post("/recommend", json=recommend_body, headers=USER).json()
        item = body["recommendations"][0]
        url = f"/history/{body['historyId']}/viewed"

        assert client.post(url, json=item, headers=USER).json() == {"added": True}
        assert client.post(url, json=item, headers=USER).json() == {"added": False}

        history = client.get("/history", headers=USER).json()
        assert history[0]["viewedRecommendations"][0]["title"] == item["title"]

    def test_viewed_unknown_history(self, client, history_collection) -> None:
        """An unknown history id is a 404 and a malformed one a 400."""
        item = {"title": "Arrival", "contentType": "movie"}
        assert client.post(f"/history/{ObjectId()}/viewed", json=item, headers=USER).status_code == 404
        assert client.post("/history/bogus/viewed", json=item, headers=USER).status_code == 400


class TestReviewRoutes:
    """Tests for review routes."""

    def test_create_and_list(self, client, reviews_collection) -> None:
        """A created review is listed by user and by title."""
        response = client.post("/reviews", json={"contentTitle": "Arrival", "rating": 8.5}, headers=USER)
        assert response.status_code == 201
        by_user = client.get("/reviews", params={"userId": "user-1"}).json()
        assert by_user[0]["userDisplayName"] == "Mira"
        assert by_user[0]["userPhotoURL"] is None
        by_title = client.get("/reviews", params={"contentTitle": "Arrival"}).json()
        assert by_title[0]["id"] == response.json()["reviewId"]

    def test_invalid_rating(self, client, reviews_collection) -> None:
        """Off-grid ratings are rejected."""
        response = client.post("/reviews", json={"contentTitle": "Arrival", "rating": 7.3}, headers=USER)
        assert response.status_code == 422
        assert reviews_collection.docs == {}

    def test_exactly_one_filter(self, client, reviews_collection) -> None:
        """Listing needs exactly one of userId or contentTitle."""
        assert client.get("/reviews").status_code == 400
        assert client.get("/reviews", params={"userId": "u", "contentTitle": "t"}).status_code == 400

    def test_delete_own_review_only(self, client, reviews_collection) -> None:
        """Only the author can delete a review."""
        review_id = client.post("/reviews", json={"contentTitle": "Dune", "rating": 9}, headers=USER).json()["reviewId"]
        other = {"X-User-Id": "user-2"}
        assert client.delete(f"/reviews/{review_id}", headers=other).status_code == 404
        assert client.delete(f"/reviews/{review_id}", headers=USER).json() == {"deleted": True}
