"""Shared test fixtures for the rasika test suite."""

import json
import os
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace
from unittest.mock import MagicMock

os.environ.setdefault("OPENAI_API_KEY", "test-key")

import pytest  # noqa: E402

import rasika.dao.history as history_dao  # noqa: E402
import rasika.dao.reviews as reviews_dao  # noqa: E402
import rasika.utils.openai_client as openai_client  # noqa: E402


class FakeCursor:
    def __init__(self, docs):
        self.docs = list(docs)

    def sort(self, field, direction):
        self.docs.sort(key=lambda d: d.get(field), reverse=direction < 0)
        return self

    def limit(self, n):
        self.docs = self.docs[:n]
        return self

    def __iter__(self):
        return iter(self.docs)


class FakeCollection:
    """Just enough of a pymongo collection for the history and review stores."""

    def __init__(self):
        self.docs = {}
        self._clock = datetime(2024, 1, 1, tzinfo=timezone.utc)

    def _now(self):
        self._clock += timedelta(seconds=1)
        return self._clock

    def _matches(self, doc, query):
        for key, cond in query.items():
            if isinstance(cond, dict) and "$not" in cond:
                match = cond["$not"]["$elemMatch"]
                if any(all(el.get(k) == v for k, v in match.items()) for el in doc.get(key) or []):
                    return False
            elif doc.get(key) != cond:
                return False
        return True

    def find(self, query):
        return FakeCursor(d for d in self.docs.values() if self._matches(d, query))

    def count_documents(self, query, limit=0):
        return len([d for d in self.docs.values() if self._matches(d, query)])

    def update_one(self, query, update, upsert=False):
        target = next((d for d in self.docs.values() if self._matches(d, query)), None)
        if target is None and upsert:
            target = {"_id": query["_id"]}
            self.docs[query["_id"]] = target
        elif target is None:
            return SimpleNamespace(modified_count=0, upserted_id=None)
        target.update(update.get("$set", {}))
        for field in update.get("$currentDate", {}):
            target[field] = self._now()
        for field, value in update.get("$push", {}).items():
            target.setdefault(field, []).append(value)
        return SimpleNamespace(modified_count=1, upserted_id=target["_id"])

    def delete_one(self, query):
        target = next((d for d in self.docs.values() if self._matches(d, query)), None)
        if target is None:
            return SimpleNamespace(deleted_count=0)
        del self.docs[target["_id"]]
        return SimpleNamespace(deleted_count=1)


@pytest.fixture
def history_collection(monkeypatch: pytest.MonkeyPatch) -> FakeCollection:
    collection = FakeCollection()
    monkeypatch.setattr(history_dao, "user_history_collection", collection)
    return collection


@pytest.fixture
def reviews_collection(monkeypatch: pytest.MonkeyPatch) -> FakeCollection:
    collection = FakeCollection()
    monkeypatch.setattr(reviews_dao, "content_reviews_collection", collection)
    return collection


def make_completion(content):
    if not isinstance(content, str):
        content = json.dumps(content)
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


@pytest.fixture
def fake_openai(monkeypatch: pytest.MonkeyPatch) -> MagicMock:
    """Replace the OpenAI client; set `fake_openai.reply` to the JSON the model should return."""
    client = MagicMock()
    client.reply = {"recommendations": []}
    client.chat.completions.create.side_effect = lambda **kwargs: make_completion(client.reply)
    monkeypatch.setattr(openai_client, "get_openai_client", lambda: client)
    return client


def movie(title, **overrides):
    item = {
        "title": title,
        "contentType": "movie",
        "summary": f"A film called {title}.",
        "releaseYear": 2010,
        "rating": "8.0/10",
        "ratingSource": "IMDb",
        "streamingInfo": "Stream on Netflix",
        "director": "Some Director",
        "cast": "Actor One, Actor Two",
        "author": None,
        "artist": None,
        "creatorOrHost": None,
        "keyCreatorForSimilar": "Some Director",
    }
    item.update(overrides)
    return item


@pytest.fixture
def road_trip_movies() -> list:
    """Four model-shaped movie items, one of them rated below 7.5."""
    return [
        movie("Little Miss Sunshine", rating="7.8/10", director="Jonathan Dayton"),
        movie("Y Tu Mamá También", rating="7.6/10", director="Alfonso Cuarón"),
        movie("The Straight Story", rating="8.0/10", director="David Lynch"),
        movie("Road Trip", rating="6.5/10", director="Todd Phillips"),
    ]


@pytest.fixture
def make_movie():
    return movie
