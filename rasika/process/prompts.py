"""Render the instruction payloads sent to the generative model."""

from typing import Dict, List, Optional

from rasika.constants import CONTENT_TYPES, MOODS, RECOMMENDATION_COUNT
from rasika.schemas.recommendations.recommendations import RecommendationRequest
from rasika.utils.prompt_registry import PromptRegistry

MIN_KEYWORD_SUGGESTIONS = 3
MAX_KEYWORD_SUGGESTIONS = 5


def parse_keyword_list(keywords: str) -> List[str]:
    """Split a comma-separated keyword string into trimmed, non-empty parts."""
    return [k.strip() for k in (keywords or "").split(",") if k.strip()]


class RecommendationPromptBuilder:
    """Builds recommendation and keyword prompts from versioned jinja2 templates.

    Rendering is deterministic: the same request always produces the same text.
    """

    def __init__(self, registry: Optional[PromptRegistry] = None):
        self.prompt_registry = registry or PromptRegistry()

    def format_watched_content(self, request: RecommendationRequest) -> List[Dict]:
        return [
            {
                "index": i,
                "title": item.title,
                "content_type": item.content_type,
                "key_creator": item.key_creator_for_similar,
            }
            for i, item in enumerate(request.watched_content, start=1)
        ]

    def format_past_requests(self, request: RecommendationRequest) -> List[Dict]:
        return [
            {"index": i, "mood": MOODS.get(p.mood, p.mood), "keywords": p.keywords}
            for i, p in enumerate(request.past_requests, start=1)
        ]

    def get_recommendation_prompt(
        self,
        request: RecommendationRequest,
        recommend_count: int = RECOMMENDATION_COUNT,
        prompt_version: int = 1,
    ) -> str:
        template = self.prompt_registry.load_prompt_template(
            "recommend/mood_recommender", prompt_version
        )
        content_types = [ct for ct in request.content_types if ct in CONTENT_TYPES]
        return template.render(
            mood=MOODS.get(request.mood, request.mood),
            content_types=content_types,
            keywords=request.keywords,
            rating_filter=request.imdb_rating_filter,
            language=request.language,
            watched_content=self.format_watched_content(request),
            past_requests=self.format_past_requests(request),
            recommend_count=recommend_count,
        )

    def get_keyword_prompt(self, current_keywords: str, prompt_version: int = 1) -> str:
        template = self.prompt_registry.load_prompt_template(
            "keywords/suggest_keywords", prompt_version
        )
        return template.render(
            current_keywords=parse_keyword_list(current_keywords),
            min_count=MIN_KEYWORD_SUGGESTIONS,
            max_count=MAX_KEYWORD_SUGGESTIONS,
        )
