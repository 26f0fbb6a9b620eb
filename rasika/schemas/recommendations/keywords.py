"""Schemas for the keyword suggestion flow."""

from typing import List

from pydantic import Field

from rasika.schemas.base import CamelModel


class KeywordSuggestionRequest(CamelModel):
    current_keywords: str = ""


class KeywordSuggestions(CamelModel):
    suggested_keywords: List[str] = Field(default_factory=list)
