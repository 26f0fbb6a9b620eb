"""Recommendation processing module."""

from typing import List, Optional, Tuple

from rasika.config.settings import settings
from rasika.constants import RECOMMENDATION_COUNT
from rasika.dao.history import get_user_history
from rasika.errors import ModelInvocationError
from rasika.process.prompts import RecommendationPromptBuilder
from rasika.process.sanitize import (
    conform_content_type,
    enforce_rating_floor,
    sanitize_recommendations,
)
from rasika.schemas.api import HistoryEntry, SessionContext
from rasika.schemas.recommendations.recommendations import (
    GeneratedRecommendations,
    PastRequest,
    RecommendationItem,
    RecommendationRequest,
    RecommendationResult,
)
from rasika.utils.helpers import flatten, unique_by
from rasika.utils.logger import get_logger
from rasika.utils.openai_client import get_structured_completion

logger = get_logger(__name__)


class MoodRecommender:
    """Runs one recommendation request: Idle -> GatheringHistory -> Prompting -> Sanitizing -> Done | Failed.

    The recommender never writes anything; logging the request and viewed items
    is left to the caller.
    """

    def __init__(self, prompt_builder: Optional[RecommendationPromptBuilder] = None, history_reader=get_user_history):
        self.prompt_builder = prompt_builder or RecommendationPromptBuilder()
        self.history_reader = history_reader

    def summarize_history(self, entries: List[HistoryEntry]) -> Tuple[List[RecommendationItem], List[PastRequest]]:
        """Derive watched content and past requests from history entries (most recent first).

        Viewed items are appended over time, so each entry's list is walked newest-first.
        """
        viewed = flatten(list(reversed(entry.viewed_recommendations)) for entry in entries)
        watched = unique_by(
            (item for item in viewed if item.title),
            key=lambda item: item.title.lower(),
        )[: settings.WATCHED_CONTENT_LIMIT]
        past = [
            PastRequest(mood=entry.mood, keywords=entry.keywords or "")
            for entry in entries[: settings.PAST_REQUESTS_LIMIT]
        ]
        return watched, past

    def load_personalization(self, session: SessionContext) -> Tuple[List[RecommendationItem], List[PastRequest]]:
        """Read recent history for durable accounts. Failures only cost personalization."""
        if not session.is_durable:
            logger.info("Skipping personalization for guest or unidentified session")
            return [], []
        try:
            entries = self.history_reader(session.user_id, settings.HISTORY_PERSONALIZATION_LIMIT)
        except Exception as e:
            logger.warning(
                "Could not fetch history for user %s, continuing without personalization: %s",
                session.user_id, repr(e), exc_info=True,
            )
            return [], []
        watched, past = self.summarize_history(entries)
        logger.info(
            "Loaded personalization for user %s: %d watched items, %d past requests",
            session.user_id, len(watched), len(past),
        )
        return watched, past

    def finalize_items(self, request: RecommendationRequest, raw_items) -> List[RecommendationItem]:
        """Sanitize raw output, then apply the request's content-type and rating constraints."""
        items = []
        for item in sanitize_recommendations(raw_items):
            item = conform_content_type(item, request.content_types)
            if item is None:
                continue
            items.append(enforce_rating_floor(item, request.rating_threshold))
        return items

    def generate_recommendations(
        self,
        request: RecommendationRequest,
        session: Optional[SessionContext] = None,
        recommend_count: int = RECOMMENDATION_COUNT,
    ) -> RecommendationResult:
        """Generate recommendations for a request, personalized when the session allows it.

        Returns the personalized request (as it should be logged) together with the
        sanitized items. Model failures propagate as ModelInvocationError.
        """
        session = session or SessionContext()

        logger.info("State GatheringHistory: user=%s mood=%s types=%s", session.user_id, request.mood, request.content_types)
        watched, past = self.load_personalization(session)
        if watched or past:
            request = request.model_copy(update={"watched_content": watched, "past_requests": past})

        logger.info(
            "State Prompting: %d watched items, %d past requests",
            len(request.watched_content), len(request.past_requests),
        )
        prompt = self.prompt_builder.get_recommendation_prompt(request, recommend_count=recommend_count)
        logger.debug("Generated recommendation prompt: %s ...", prompt[:2000])
        messages = [{"role": "user", "content": prompt}]
        try:
            output = get_structured_completion(
                settings.OPENAI_MODEL,
                messages=messages,
                response_model=GeneratedRecommendations,
            )
        except ModelInvocationError as e:
            logger.error("State Failed: %s", repr(e))
            raise

        logger.info("State Sanitizing: model returned %s", type(output.recommendations).__name__)
        items = self.finalize_items(request, output.recommendations)
        if len(items) != recommend_count:
            logger.warning("Expected %s recommendations, returning %s", recommend_count, len(items))

        logger.info("State Done: %s", [item.title for item in items])
        return RecommendationResult(request=request, recommendations=items)
