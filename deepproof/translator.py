"""Batch translation of transcript segments into English."""

import json
from typing import Optional, Sequence
from openai import OpenAI
from openai import APIError

from deepproof.analyzer import strip_code_fences
from deepproof.config import Config
from deepproof.errors import MalformedResponseError, ValidationError
from deepproof.groq_client import create_client, to_transport_error
from deepproof.models import TranscriptSegment


SYSTEM_PROMPT = "You are a professional translator. Always respond with valid JSON only."

TRANSLATION_PROMPT = """Translate the following numbered text segments from {source_language} to English.
Keep each translation on its corresponding index. Return JSON in this exact format:
{{
  "translations": ["translated text for [0]", "translated text for [1]", ...]
}}

Segments to translate:
{numbered_texts}"""


def number_segments(segments: Sequence[TranscriptSegment]) -> str:
    """Render segments as '[i] text' lines so replies can be matched by index."""
    return "\n".join(f"[{index}] {segment.text}" for index, segment in enumerate(segments))


def build_translation_prompt(segments: Sequence[TranscriptSegment], source_language: str) -> str:
    return TRANSLATION_PROMPT.format(
        source_language=source_language or "the source language",
        numbered_texts=number_segments(segments),
    )


def apply_translations(
    segments: Sequence[TranscriptSegment],
    translations: list,
) -> list[TranscriptSegment]:
    """
    Swap in translated text by index, keeping timestamp and speaker.

    Indices the model skipped (or returned as non-text) keep their original
    text exactly as it was sent.
    """
    translated = []
    for index, segment in enumerate(segments):
        text = translations[index] if index < len(translations) else None
        if isinstance(text, str) and text.strip():
            text = text.strip()
        else:
            text = segment.text
        translated.append(TranscriptSegment(
            timestamp=segment.timestamp,
            speaker=segment.speaker,
            text=text,
        ))
    return translated


def translate_segments(
    segments: Sequence[TranscriptSegment],
    source_language: str,
    client: Optional[OpenAI] = None,
) -> list[TranscriptSegment]:
    """
    Translate an ordered list of segments to English in a single request.

    Returns exactly one output segment per input segment.

    Raises:
        ValidationError: if segments is empty (no API call is made)
        TransportError: if the API call fails
        MalformedResponseError: if the reply is not JSON or has no translations array
    """
    if not segments:
        raise ValidationError("No segments provided")

    client = client or create_client()

    print(f"Translating {len(segments)} segments from {source_language} to English...")
    try:
        completion = client.chat.completions.create(
            model=Config.ANALYSIS_MODEL,
            max_tokens=Config.TRANSLATION_MAX_TOKENS,
            response_format={"type": "json_object"},
            messages=[
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": build_translation_prompt(segments, source_language)},
            ],
        )
    except APIError as e:
        raise to_transport_error(e) from e

    response_text = completion.choices[0].message.content if completion.choices else ""
    try:
        parsed = json.loads(strip_code_fences(response_text or ""))
    except json.JSONDecodeError as e:
        raise MalformedResponseError("Failed to parse AI translation response") from e

    translations = parsed.get("translations") if isinstance(parsed, dict) else None
    if not isinstance(translations, list):
        raise MalformedResponseError("AI response missing translations array")

    print("✓ Translation complete")
    return apply_translations(segments, translations)
