"""Recommendation item and request schemas shared by the API, the prompts and the stores."""

from typing import Any, List, Optional, Union

from pydantic import Field, ValidationError, field_validator, model_validator

from rasika.config.settings import settings
from rasika.constants import (
    ANY_LANGUAGE,
    ANY_RATING,
    CONTENT_TYPES,
    MOODS,
    NO_SUMMARY,
    UNKNOWN_CONTENT_TYPE,
    UNTITLED_RECOMMENDATION,
    genre_label,
)
from rasika.errors import RequestValidationError
from rasika.schemas.base import CamelModel

_CONTENT_TYPES_LOWER = {ct.lower(): ct for ct in CONTENT_TYPES}


def normalize_content_type(value: Any) -> Optional[str]:
    """Map a loosely spelled content type ("TV Show", "tv_show") onto its canonical id."""
    if value is None:
        return None
    key = str(value).strip().lower().replace(" ", "").replace("_", "").replace("-", "")
    return _CONTENT_TYPES_LOWER.get(key)


def combine_keywords(keywords: Optional[str], genres: Optional[List[str]] = None) -> str:
    """Join user keywords and selected genre labels into a single keyword string."""
    parts = [keywords or ""] + [genre_label(g) for g in (genres or [])]
    return ", ".join(p.strip() for p in parts if p and p.strip())


class RecommendationItem(CamelModel):
    """One recommendation. Every field is present on every item; inapplicable ones are None."""

    title: str = UNTITLED_RECOMMENDATION
    content_type: str = UNKNOWN_CONTENT_TYPE
    summary: str = NO_SUMMARY
    release_year: Optional[Union[int, float]] = None
    rating: Optional[str] = None
    rating_source: Optional[str] = None
    streaming_info: Optional[str] = None
    director: Optional[str] = None
    cast: Optional[str] = None
    author: Optional[str] = None
    artist: Optional[str] = None
    creator_or_host: Optional[str] = None
    key_creator_for_similar: Optional[str] = None


class PastRequest(CamelModel):
    mood: str
    keywords: str = ""


class RecommendationRequest(CamelModel):
    """Input envelope for one recommendation run."""

    mood: str
    content_types: List[str]
    keywords: str = ""
    imdb_rating_filter: Optional[str] = None
    language: Optional[str] = None
    watched_content: List[RecommendationItem] = Field(default_factory=list)
    past_requests: List[PastRequest] = Field(default_factory=list)

    @field_validator("mood", mode="before")
    @classmethod
    def validate_mood(cls, v):
        mood = str(v or "").strip().lower()
        if mood not in MOODS:
            raise ValueError(f"mood must be one of: {', '.join(MOODS)}")
        return mood

    @field_validator("content_types", mode="before")
    @classmethod
    def validate_content_types(cls, v):
        if isinstance(v, str):
            v = [v]
        normalized = []
        for raw in v or []:
            ct = normalize_content_type(raw)
            if ct is None:
                raise ValueError(f"unknown content type {raw!r}; expected one of: {', '.join(CONTENT_TYPES)}")
            if ct not in normalized:
                normalized.append(ct)
        if not normalized:
            raise ValueError("at least one content type must be selected")
        return normalized

    @field_validator("keywords", mode="before")
    @classmethod
    def strip_keywords(cls, v):
        return str(v).strip() if v is not None else ""

    @field_validator("imdb_rating_filter", mode="before")
    @classmethod
    def validate_rating_filter(cls, v):
        if v is None:
            return None
        text = str(v).strip()
        if not text or text.lower() == ANY_RATING:
            return None
        try:
            threshold = float(text)
        except ValueError:
            raise ValueError("imdbRatingFilter must be a number such as '7.5'")
        if not 0 <= threshold <= 10:
            raise ValueError("imdbRatingFilter must be between 0 and 10")
        return text

    @field_validator("language", mode="before")
    @classmethod
    def normalize_language(cls, v):
        if v is None:
            return None
        text = str(v).strip()
        if not text or text.lower() == ANY_LANGUAGE:
            return None
        return text

    @field_validator("watched_content")
    @classmethod
    def clamp_watched_content(cls, v):
        return v[: settings.WATCHED_CONTENT_LIMIT]

    @field_validator("past_requests")
    @classmethod
    def clamp_past_requests(cls, v):
        return v[: settings.PAST_REQUESTS_LIMIT]

    @property
    def rating_threshold(self) -> Optional[float]:
        return float(self.imdb_rating_filter) if self.imdb_rating_filter else None


class RecommendForm(CamelModel):
    """Request body for POST /recommend: the user's raw selections."""

    mood: str
    content_types: List[str]
    keywords: str = ""
    genres: List[str] = Field(default_factory=list)
    imdb_rating_filter: Optional[str] = None
    language: Optional[str] = None

    def to_request(self) -> RecommendationRequest:
        """Validate the selections into a RecommendationRequest.

        Raises RequestValidationError with the validator messages, before any model call.
        """
        try:
            return RecommendationRequest(
                mood=self.mood,
                content_types=self.content_types,
                keywords=combine_keywords(self.keywords, self.genres),
                imdb_rating_filter=self.imdb_rating_filter,
                language=self.language,
            )
        except ValidationError as e:
            messages = "; ".join(err["msg"] for err in e.errors())
            raise RequestValidationError(messages) from e


class GeneratedRecommendations(CamelModel):
    """Structural contract for the model's recommendation output.

    Items stay loosely typed here; field-level normalization happens in the sanitizer,
    which also treats a non-array value as an empty result.
    """

    recommendations: Any = None

    @model_validator(mode="before")
    @classmethod
    def wrap_bare_array(cls, data):
        if isinstance(data, list):
            return {"recommendations": data}
        return data


class RecommendationResult(CamelModel):
    request: RecommendationRequest
    recommendations: List[RecommendationItem]
