"""Keyword suggestion flow: a smaller sibling of the recommendation pipeline."""

from typing import List, Optional

from rasika.config.settings import settings
from rasika.process.prompts import MAX_KEYWORD_SUGGESTIONS, RecommendationPromptBuilder, parse_keyword_list
from rasika.schemas.recommendations.keywords import KeywordSuggestions
from rasika.utils.helpers import unique_by
from rasika.utils.logger import get_logger
from rasika.utils.openai_client import get_structured_completion

logger = get_logger(__name__)


def filter_suggestions(suggestions: List[str], current_keywords: str) -> List[str]:
    """Drop blanks, duplicates and anything the user already typed (case-insensitive); cap at five."""
    existing = {k.lower() for k in parse_keyword_list(current_keywords)}
    cleaned = (s.strip() for s in suggestions if isinstance(s, str))
    fresh = [s for s in cleaned if s and s.lower() not in existing]
    return unique_by(fresh, key=str.lower)[:MAX_KEYWORD_SUGGESTIONS]


class KeywordSuggester:
    def __init__(self, prompt_builder: Optional[RecommendationPromptBuilder] = None):
        self.prompt_builder = prompt_builder or RecommendationPromptBuilder()

    def suggest_keywords(self, current_keywords: str = "") -> KeywordSuggestions:
        current_keywords = current_keywords or ""
        prompt = self.prompt_builder.get_keyword_prompt(current_keywords)
        output = get_structured_completion(
            settings.OPENAI_MODEL,
            messages=[{"role": "user", "content": prompt}],
            response_model=KeywordSuggestions,
            temperature=0.7,
        )
        suggestions = filter_suggestions(output.suggested_keywords, current_keywords)
        logger.info("Suggested keywords for %r: %s", current_keywords, suggestions)
        return KeywordSuggestions(suggested_keywords=suggestions)
