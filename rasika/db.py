from pymongo import ASCENDING, DESCENDING, MongoClient

from rasika.config.settings import settings

client = MongoClient(settings.MONGODB_URI)
db = client.get_database(settings.MONGODB_DB_NAME)
user_history_collection = db["userHistory"]
content_reviews_collection = db["contentReviews"]


def ensure_indexes() -> dict:
    """Create the indexes backing the history and review queries (idempotent)."""
    return {
        "userHistory": user_history_collection.create_index(
            [("userId", ASCENDING), ("createdAt", DESCENDING)], background=True
        ),
        "contentReviews.userId": content_reviews_collection.create_index(
            [("userId", ASCENDING), ("createdAt", DESCENDING)], background=True
        ),
        "contentReviews.contentTitle": content_reviews_collection.create_index(
            [("contentTitle", ASCENDING), ("createdAt", DESCENDING)], background=True
        ),
    }
