"""Create the indexes for the userHistory and contentReviews collections.

The service also does this on startup; run it by hand when deploying against a
database the service user cannot create indexes on.

Usage:
    python -m tools.create_indexes
"""

import pprint

from rasika.db import content_reviews_collection, ensure_indexes, user_history_collection

print("Creating indexes (background)")
print("  -> userHistory {userId:1, createdAt:-1}: per-user history, most recent first")
print("  -> contentReviews {userId:1, createdAt:-1}: a user's own reviews")
print("  -> contentReviews {contentTitle:1, createdAt:-1}: public reviews for a title")
for key, name in ensure_indexes().items():
    print(f"✓ {key}: {name}")

print("\n" + "=" * 70)
print("CURRENT INDEXES:")
print("=" * 70)
pprint.pprint(user_history_collection.index_information())
pprint.pprint(content_reviews_collection.index_information())
