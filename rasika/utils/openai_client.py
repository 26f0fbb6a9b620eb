"""OpenAI API client for the recommendation and keyword flows."""

import json
from typing import Type, TypeVar

import openai
from pydantic import BaseModel, ValidationError

from rasika.config.settings import settings
from rasika.errors import ModelInvocationError
from rasika.utils.logger import get_logger

logger = get_logger(__name__)

ResponseModel = TypeVar("ResponseModel", bound=BaseModel)


def get_openai_client():
    """Configure and return the OpenAI Python client instance."""
    return openai.OpenAI(
        api_key=settings.OPENAI_API_KEY, base_url=settings.OPENAI_API_BASE_URL
    )


def get_openai_chat_completion(model, messages, **kwargs):
    """Get a chat completion from the OpenAI API. Accepts extra payload params via kwargs.

    A single attempt is made; failures are wrapped in ModelInvocationError and the
    caller decides whether to resubmit.
    """
    client = get_openai_client()
    try:
        return client.chat.completions.create(model=model, messages=messages, **kwargs)
    except openai.OpenAIError as e:
        logger.error("OpenAI API request failed: %s", repr(e), exc_info=True)
        raise ModelInvocationError(f"Generative model request failed: {e}") from e


def get_structured_completion(model: str, messages, response_model: Type[ResponseModel], **kwargs) -> ResponseModel:
    """Request a JSON object from the model and validate it against response_model.

    Raises ModelInvocationError when the call fails, the reply is empty or not JSON,
    or the payload does not match the declared structure.
    """
    response = get_openai_chat_completion(
        model,
        messages=messages,
        response_format={"type": "json_object"},
        **kwargs,
    )
    try:
        completion_text = response.choices[0].message.content
    except (AttributeError, IndexError) as e:
        raise ModelInvocationError("Generative model returned no choices") from e
    if not completion_text:
        raise ModelInvocationError("Generative model returned an empty response")

    try:
        payload = json.loads(completion_text)
    except json.JSONDecodeError as e:
        logger.error("Failed to parse structured OpenAI response: %s", repr(e), exc_info=True)
        raise ModelInvocationError("Generative model returned malformed JSON") from e

    try:
        return response_model.model_validate(payload)
    except ValidationError as e:
        logger.error(
            "%s validation failed: %s", response_model.__name__, repr(e), exc_info=True
        )
        raise ModelInvocationError(
            f"Generative model output did not match {response_model.__name__}"
        ) from e
