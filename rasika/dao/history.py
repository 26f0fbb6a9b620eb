"""userHistory store: recommendation requests and the items viewed from them."""

from typing import List, Optional

from bson import ObjectId
from pydantic import ValidationError
from pymongo import DESCENDING
from pymongo.errors import PyMongoError

from rasika.config.settings import settings
from rasika.db import user_history_collection
from rasika.errors import HistoryNotFoundError, PersistenceError
from rasika.schemas.api import HistoryEntry
from rasika.schemas.recommendations.recommendations import RecommendationItem, RecommendationRequest
from rasika.utils.helpers import to_object_id
from rasika.utils.logger import get_logger

logger = get_logger(__name__)


def add_history_request(user_id: str, request: RecommendationRequest) -> str:
    """Persist one recommendation request (with its personalization data) and return its id.

    createdAt is assigned by the database server.
    """
    if not user_id:
        raise ValueError("user_id is required to log a history request")

    doc = request.to_document()
    doc["userId"] = user_id
    doc["viewedRecommendations"] = []
    history_id = ObjectId()
    try:
        user_history_collection.update_one(
            {"_id": history_id},
            {"$set": doc, "$currentDate": {"createdAt": True}},
            upsert=True,
        )
    except PyMongoError as e:
        logger.error("Failed to save history request for user %s: %s", user_id, repr(e), exc_info=True)
        raise PersistenceError(f"Failed to save history request. {e}") from e

    logger.info("History request %s saved for user %s (mood=%s)", history_id, user_id, request.mood)
    return str(history_id)


def add_viewed_recommendation(history_id: str, item: RecommendationItem, user_id: Optional[str] = None) -> bool:
    """Append a viewed item to a history entry unless (title, contentType) is already there.

    The duplicate check and the push happen in one conditional update, so concurrent
    submissions of the same item still leave a single entry. Returns True when the
    item was added and False when it was already present.
    """
    oid = to_object_id(history_id)
    doc = item.to_document()
    owner_query = {"_id": oid}
    if user_id:
        owner_query["userId"] = user_id

    query = dict(owner_query)
    query["viewedRecommendations"] = {
        "$not": {"$elemMatch": {"title": doc["title"], "contentType": doc["contentType"]}}
    }
    try:
        result = user_history_collection.update_one(
            query, {"$push": {"viewedRecommendations": doc}}
        )
        if result.modified_count:
            logger.info("Recorded viewed item '%s' (%s) on history %s", doc["title"], doc["contentType"], history_id)
            return True
        exists = user_history_collection.count_documents(owner_query, limit=1)
    except PyMongoError as e:
        logger.error("Failed to record viewed item on history %s: %s", history_id, repr(e), exc_info=True)
        raise PersistenceError(f"Failed to record view. {e}") from e

    if not exists:
        raise HistoryNotFoundError(f"History document {history_id} not found.")
    logger.info("Viewed item '%s' (%s) already recorded on history %s", doc["title"], doc["contentType"], history_id)
    return False


def _doc_to_entry(doc: dict) -> HistoryEntry:
    data = dict(doc)
    data["id"] = str(data.pop("_id", "")) or None
    data["viewedRecommendations"] = data.get("viewedRecommendations") or []
    data["watchedContent"] = data.get("watchedContent") or []
    data["pastRequests"] = data.get("pastRequests") or []
    return HistoryEntry.model_validate(data)


def get_user_history(user_id: str, limit: int = settings.HISTORY_PERSONALIZATION_LIMIT) -> List[HistoryEntry]:
    """Return up to `limit` history entries for a user, most recent first."""
    if not user_id:
        logger.warning("get_user_history called without user_id; returning empty history")
        return []

    try:
        cursor = (
            user_history_collection.find({"userId": user_id})
            .sort("createdAt", DESCENDING)
            .limit(int(limit))
        )
        docs = list(cursor)
    except PyMongoError as e:
        logger.error("Failed to fetch history for user %s: %s", user_id, repr(e), exc_info=True)
        raise PersistenceError(f"Failed to fetch user history. {e}") from e

    entries = []
    for doc in docs:
        try:
            entries.append(_doc_to_entry(doc))
        except ValidationError as e:
            logger.warning("Skipping malformed history document %s: %s", doc.get("_id"), repr(e))
    logger.info("History retrieved for user %s: %d entries", user_id, len(entries))
    return entries
