from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field, field_validator

from rasika.schemas.base import CamelModel
from rasika.schemas.recommendations.recommendations import RecommendationItem, RecommendationRequest

REVIEW_RATING_MIN = 0.5
REVIEW_RATING_MAX = 10.0


class SessionContext(BaseModel):
    """Caller identity injected into the recommendation pipeline.

    Guests (anonymous sign-ins) carry a user_id but are never personalized.
    """

    user_id: Optional[str] = None
    is_anonymous: bool = False
    display_name: Optional[str] = None
    photo_url: Optional[str] = None
    auth_token: Optional[str] = None

    @property
    def is_durable(self) -> bool:
        return bool(self.user_id) and not self.is_anonymous


class HistoryEntry(RecommendationRequest):
    """Persisted recommendation request plus the items later marked as viewed."""

    id: Optional[str] = None
    user_id: str
    created_at: Optional[datetime] = None
    viewed_recommendations: List[RecommendationItem] = Field(default_factory=list)


def validate_review_rating(value) -> float:
    """Ratings run from 0.5 to 10 in steps of 0.5."""
    if isinstance(value, bool):
        raise ValueError("Rating must be a number.")
    try:
        rating = float(value)
    except (TypeError, ValueError):
        raise ValueError("Rating must be a number.")
    if rating < REVIEW_RATING_MIN:
        raise ValueError("Rating must be at least 0.5.")
    if rating > REVIEW_RATING_MAX:
        raise ValueError("Rating cannot exceed 10.")
    if not (rating * 2).is_integer():
        raise ValueError("Rating must be in 0.5 increments (e.g., 7.0, 7.5).")
    return rating


class ReviewCreate(CamelModel):
    content_title: str
    rating: float
    review_text: Optional[str] = None

    @field_validator("content_title", mode="before")
    @classmethod
    def validate_title(cls, v):
        title = str(v or "").strip()
        if not title:
            raise ValueError("Content title is required.")
        return title

    @field_validator("rating", mode="before")
    @classmethod
    def validate_rating(cls, v):
        return validate_review_rating(v)


class ReviewEntry(CamelModel):
    id: Optional[str] = None
    user_id: str
    user_display_name: Optional[str] = None
    user_photo_url: Optional[str] = Field(default=None, alias="userPhotoURL")
    content_title: str
    rating: float
    review_text: Optional[str] = None
    created_at: Optional[datetime] = None


class RecommendResponse(CamelModel):
    """Response from POST /recommend.

    history_id is None (and warning set) when the request could not be logged;
    the recommendations are still valid in that case.
    """
    recommendations: List[RecommendationItem]
    history_id: Optional[str] = None
    warning: Optional[str] = None


class ViewedItemResponse(CamelModel):
    added: bool


class ReviewCreatedResponse(CamelModel):
    review_id: str


class DeleteResponse(CamelModel):
    deleted: bool


class PosterResponse(CamelModel):
    title: str
    poster_url: Optional[str] = None


class GenreOption(CamelModel):
    id: str
    label: str


class CatalogResponse(CamelModel):
    """Selectable values for building a recommendation request."""

    moods: Dict[str, str]
    content_types: Dict[str, str]
    genres: List[GenreOption]
    rating_options: List[str]
    languages: List[str]
