from typing import List, Optional

from fastapi import APIRouter, Depends, Header, HTTPException, Query

from rasika.config.settings import settings
from rasika.constants import (
    CONTENT_TYPES,
    GENRES,
    IMDB_RATING_OPTIONS,
    MOODS,
    SUPPORTED_LANGUAGES,
    genres_for_content_types,
)
from rasika.dao.history import add_history_request, add_viewed_recommendation, get_user_history
from rasika.dao.reviews import (
    add_content_review,
    delete_review,
    get_reviews_for_content,
    get_user_reviews,
)
from rasika.errors import (
    HistoryNotFoundError,
    ModelInvocationError,
    PersistenceError,
    RequestValidationError,
)
from rasika.process.keywords import KeywordSuggester
from rasika.process.recommendation import MoodRecommender
from rasika.process.sanitize import sanitize_recommendation_item
from rasika.schemas.api import (
    CatalogResponse,
    DeleteResponse,
    GenreOption,
    HistoryEntry,
    PosterResponse,
    RecommendResponse,
    ReviewCreate,
    ReviewCreatedResponse,
    ReviewEntry,
    SessionContext,
    ViewedItemResponse,
)
from rasika.schemas.recommendations.keywords import KeywordSuggestionRequest, KeywordSuggestions
from rasika.schemas.recommendations.recommendations import (
    RecommendationItem,
    RecommendForm,
    normalize_content_type,
)
from rasika.tmdb_client import get_movie_poster_url
from rasika.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter()


def get_session(
    x_user_id: Optional[str] = Header(default=None),
    x_user_anonymous: bool = Header(default=False),
    x_user_display_name: Optional[str] = Header(default=None),
    x_user_photo_url: Optional[str] = Header(default=None),
    authorization: Optional[str] = Header(default=None),
) -> SessionContext:
    """Build the caller's session from headers set by the authenticating front end."""
    token = None
    if authorization and authorization.lower().startswith("bearer "):
        token = authorization[7:].strip() or None
    return SessionContext(
        user_id=(x_user_id or "").strip() or None,
        is_anonymous=x_user_anonymous,
        display_name=x_user_display_name,
        photo_url=x_user_photo_url,
        auth_token=token,
    )


def require_user(session: SessionContext = Depends(get_session)) -> SessionContext:
    if not session.user_id:
        raise HTTPException(status_code=401, detail="X-User-Id header is required")
    return session


@router.get("/health")
def health_check():
    """Health check endpoint for monitoring."""
    return {"status": "ok", "service": "rasika"}


@router.get("/catalog", response_model=CatalogResponse)
def get_catalog(content_types: List[str] = Query(default=[], alias="contentTypes")):
    """Moods, content types, rating and language options, and the genres that apply
    to the selected content types (all genres when none are selected)."""
    selected = []
    for raw in content_types:
        ct = normalize_content_type(raw)
        if ct is None:
            raise HTTPException(status_code=400, detail=f"unknown content type {raw!r}")
        selected.append(ct)
    genre_ids = genres_for_content_types(selected) if selected else list(GENRES)
    return CatalogResponse(
        moods=MOODS,
        content_types=CONTENT_TYPES,
        genres=[GenreOption(id=gid, label=GENRES[gid][0]) for gid in genre_ids],
        rating_options=IMDB_RATING_OPTIONS,
        languages=SUPPORTED_LANGUAGES,
    )


@router.post("/recommend", response_model=RecommendResponse)
def recommend(payload: RecommendForm, session: SessionContext = Depends(get_session)):
    """Generate four recommendations, then log the request to the caller's history.

    A failed history write does not fail the call: the recommendations are returned
    with historyId null and a warning.
    """
    try:
        request = payload.to_request()
    except RequestValidationError as e:
        logger.info("Rejected recommend request: %s", e)
        raise HTTPException(status_code=400, detail=str(e))

    try:
        result = MoodRecommender().generate_recommendations(request, session)
    except ModelInvocationError as e:
        logger.error("recommend model error: %s", repr(e))
        raise HTTPException(status_code=502, detail=str(e))
    except Exception as e:
        logger.error("recommend error: %s", repr(e), exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))

    history_id, warning = None, None
    if session.user_id:
        try:
            history_id = add_history_request(session.user_id, result.request)
        except PersistenceError as e:
            logger.warning("History log failed for user %s: %s", session.user_id, repr(e))
            warning = f"History Log Failed: {e}"
    return RecommendResponse(
        recommendations=result.recommendations, history_id=history_id, warning=warning
    )


@router.post("/keywords/suggest", response_model=KeywordSuggestions)
def suggest_keywords(payload: KeywordSuggestionRequest):
    """Suggest up to five keywords related to (and distinct from) the current ones."""
    try:
        return KeywordSuggester().suggest_keywords(payload.current_keywords)
    except ModelInvocationError as e:
        raise HTTPException(status_code=502, detail=str(e))
    except Exception as e:
        logger.error("suggest_keywords error: %s", repr(e), exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/history", response_model=List[HistoryEntry])
def get_history(
    limit: int = Query(default=settings.HISTORY_PERSONALIZATION_LIMIT, ge=1, le=100),
    session: SessionContext = Depends(require_user),
):
    """Get the caller's recommendation history, most recent first."""
    try:
        return get_user_history(session.user_id, limit)
    except Exception as e:
        logger.error("get_history error: %s", repr(e), exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/history/{history_id}/viewed", response_model=ViewedItemResponse)
def add_viewed(history_id: str, item: RecommendationItem, session: SessionContext = Depends(require_user)):
    """Record that the caller viewed one recommendation from a logged request."""
    try:
        added = add_viewed_recommendation(history_id, sanitize_recommendation_item(item), session.user_id)
        return ViewedItemResponse(added=added)
    except HistoryNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error("add_viewed error: %s", repr(e), exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/reviews", response_model=ReviewCreatedResponse, status_code=201)
def create_review(payload: ReviewCreate, session: SessionContext = Depends(require_user)):
    try:
        review_id = add_content_review(
            session.user_id,
            payload,
            display_name=session.display_name,
            photo_url=session.photo_url,
        )
        return ReviewCreatedResponse(review_id=review_id)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error("create_review error: %s", repr(e), exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/reviews", response_model=List[ReviewEntry])
def list_reviews(
    user_id: Optional[str] = Query(default=None, alias="userId"),
    content_title: Optional[str] = Query(default=None, alias="contentTitle"),
    limit: int = Query(default=settings.REVIEWS_DEFAULT_LIMIT, ge=1, le=100),
):
    """List reviews by exactly one of userId or contentTitle."""
    if bool(user_id) == bool(content_title):
        raise HTTPException(status_code=400, detail="provide exactly one of userId or contentTitle")
    try:
        if user_id:
            return get_user_reviews(user_id, limit)
        return get_reviews_for_content(content_title, limit)
    except Exception as e:
        logger.error("list_reviews error: %s", repr(e), exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))


@router.delete("/reviews/{review_id}", response_model=DeleteResponse)
def remove_review(review_id: str, session: SessionContext = Depends(require_user)):
    try:
        deleted = delete_review(review_id, session.user_id)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error("remove_review error: %s", repr(e), exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))
    if not deleted:
        raise HTTPException(status_code=404, detail="review not found")
    return DeleteResponse(deleted=True)


@router.get("/posters", response_model=PosterResponse)
def get_poster(title: str = Query(..., min_length=1)):
    """Look up a movie poster on TMDb; posterUrl is null when nothing is found."""
    return PosterResponse(title=title, poster_url=get_movie_poster_url(title))
