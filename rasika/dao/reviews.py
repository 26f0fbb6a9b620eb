"""contentReviews store."""

from typing import List, Optional, Union

from bson import ObjectId
from pydantic import ValidationError
from pymongo import DESCENDING
from pymongo.errors import PyMongoError

from rasika.config.settings import settings
from rasika.db import content_reviews_collection
from rasika.errors import PersistenceError
from rasika.schemas.api import ReviewCreate, ReviewEntry
from rasika.utils.helpers import to_object_id
from rasika.utils.logger import get_logger

logger = get_logger(__name__)


def add_content_review(
    user_id: str,
    review: Union[ReviewCreate, dict],
    display_name: Optional[str] = None,
    photo_url: Optional[str] = None,
) -> str:
    """Validate and store a review, returning its id.

    Raises ValueError (pydantic ValidationError) for a missing title or a rating
    outside 0.5-10 or not in 0.5 steps; nothing is written in that case.
    """
    if not user_id:
        raise ValueError("user_id is required to submit a review")
    if isinstance(review, ReviewCreate):
        review = review.model_dump()
    review = ReviewCreate.model_validate(review)

    doc = {
        "userId": user_id,
        "userDisplayName": display_name or None,
        "userPhotoURL": photo_url or None,
        "contentTitle": review.content_title,
        "rating": review.rating,
        "reviewText": review.review_text or "",
    }
    review_id = ObjectId()
    try:
        content_reviews_collection.update_one(
            {"_id": review_id},
            {"$set": doc, "$currentDate": {"createdAt": True}},
            upsert=True,
        )
    except PyMongoError as e:
        logger.error("Failed to save review for '%s': %s", review.content_title, repr(e), exc_info=True)
        raise PersistenceError(f"Failed to save review. {e}") from e

    logger.info("Review %s saved for '%s' by user %s", review_id, review.content_title, user_id)
    return str(review_id)


def _find_reviews(query: dict, limit: int) -> List[ReviewEntry]:
    try:
        docs = list(
            content_reviews_collection.find(query)
            .sort("createdAt", DESCENDING)
            .limit(int(limit))
        )
    except PyMongoError as e:
        logger.error("Failed to fetch reviews for %s: %s", query, repr(e), exc_info=True)
        raise PersistenceError(f"Failed to fetch reviews. {e}") from e

    reviews = []
    for doc in docs:
        data = dict(doc)
        data["id"] = str(data.pop("_id"))
        try:
            reviews.append(ReviewEntry.model_validate(data))
        except ValidationError as e:
            logger.warning("Skipping malformed review document %s: %s", data["id"], repr(e))
    return reviews


def get_user_reviews(user_id: str, limit: int = settings.REVIEWS_DEFAULT_LIMIT) -> List[ReviewEntry]:
    """Reviews written by a user, most recent first."""
    if not user_id:
        logger.warning("get_user_reviews called without user_id")
        return []
    return _find_reviews({"userId": user_id}, limit)


def get_reviews_for_content(content_title: str, limit: int = settings.REVIEWS_DEFAULT_LIMIT) -> List[ReviewEntry]:
    """Reviews for an exact content title, most recent first."""
    if not content_title or not content_title.strip():
        logger.warning("get_reviews_for_content called with an empty title")
        return []
    return _find_reviews({"contentTitle": content_title}, limit)


def delete_review(review_id: str, user_id: str) -> bool:
    """Delete one of the user's own reviews. Returns False if nothing matched."""
    oid = to_object_id(review_id)
    try:
        result = content_reviews_collection.delete_one({"_id": oid, "userId": user_id})
    except PyMongoError as e:
        logger.error("Failed to delete review %s: %s", review_id, repr(e), exc_info=True)
        raise PersistenceError(f"Failed to delete review. {e}") from e
    deleted = bool(result.deleted_count)
    logger.info("Delete review %s by user %s: deleted=%s", review_id, user_id, deleted)
    return deleted
