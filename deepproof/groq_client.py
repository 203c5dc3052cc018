"""OpenAI SDK client pointed at Groq's OpenAI-compatible endpoint."""

from typing import Optional
from openai import OpenAI
from openai import APIError, APIStatusError, RateLimitError, APIConnectionError

from deepproof.config import Config
from deepproof.errors import TransportError


def create_client(timeout: Optional[float] = None) -> OpenAI:
    """
    Build a client for the speech and chat APIs.

    The key is not validated here: a missing or wrong GROQ_API_KEY only
    shows up as an upstream failure when a request is made. Retries are
    disabled because retrying is left to the user (see the pipeline).
    """
    return OpenAI(
        api_key=Config.GROQ_API_KEY,
        base_url=Config.API_BASE_URL,
        timeout=timeout or Config.REQUEST_TIMEOUT,
        max_retries=0,
    )


def to_transport_error(error: APIError) -> TransportError:
    """Translate an SDK exception into a TransportError with a readable message."""
    error_msg = str(error)
    status_code = error.status_code if isinstance(error, APIStatusError) else None

    if isinstance(error, RateLimitError):
        message = "Groq API rate limit exceeded. Please try again later."
    elif isinstance(error, APIConnectionError):
        message = f"Connection error: {error_msg}"
    elif "<!DOCTYPE html>" in error_msg or "<html" in error_msg.lower():
        # Gateway errors come back as HTML pages
        message = f"Groq API server error ({status_code or 502}). Please try again in a few minutes."
    else:
        message = f"Groq API error: {error_msg}"

    return TransportError(message, status_code=status_code)
