"""HTTP adapters that call the DeepProof API server."""

from pathlib import Path
from typing import Callable, Optional, Sequence

import requests

from deepproof.analyzer import analysis_from_dict
from deepproof.config import Config
from deepproof.errors import MalformedResponseError, TransportError
from deepproof.models import AnalysisRequest, AnalysisResult, TranscriptSegment, TranscriptionResult

ProgressCallback = Callable[[str], None]


def _url(path: str, server_url: Optional[str] = None) -> str:
    return f"{(server_url or Config.SERVER_URL).rstrip('/')}{path}"


def _error_message(response: requests.Response, fallback: str) -> str:
    """Use the server's {error} field when present, else '<fallback> (<status>)'."""
    try:
        data = response.json()
    except ValueError:
        data = {}
    message = data.get("error") if isinstance(data, dict) else None
    return message or f"{fallback} ({response.status_code})"


def _post(url: str, fallback: str, **kwargs) -> dict:
    try:
        response = requests.post(url, timeout=Config.REQUEST_TIMEOUT, **kwargs)
    except requests.RequestException as e:
        raise TransportError(f"{fallback}: {e}") from e

    if not response.ok:
        raise TransportError(_error_message(response, fallback), status_code=response.status_code)

    try:
        data = response.json()
    except ValueError as e:
        raise MalformedResponseError("Server returned a non-JSON response") from e
    if not isinstance(data, dict):
        raise MalformedResponseError("Server returned an unexpected response format")
    return data


def transcribe_video(
    media_path: Path,
    on_progress: Optional[ProgressCallback] = None,
    file_name: Optional[str] = None,
    server_url: Optional[str] = None,
) -> TranscriptionResult:
    """
    Send a video to POST /transcribe.

    on_progress is told about each phase (preparing, uploading, transcribing)
    because the call can take a long time. Nothing is retried here.
    """
    on_progress = on_progress or (lambda message: None)
    media_path = Path(media_path)

    on_progress("Preparing video for transcription...")
    payload = media_path.read_bytes()

    on_progress("Uploading video to transcription service...")
    files = {"file": (file_name or media_path.name, payload)}

    on_progress("Transcribing audio with Whisper AI (server-side)...")
    data = _post(_url("/transcribe", server_url), "Transcription failed", files=files)
    return TranscriptionResult.from_dict(data)


def request_analysis(request: AnalysisRequest, server_url: Optional[str] = None) -> AnalysisResult:
    """Send a transcript and its metadata to POST /analyze."""
    data = _post(_url("/analyze", server_url), "Analysis failed", json=request.to_dict())

    score = data.get("overallScore")
    if isinstance(score, bool) or not isinstance(score, (int, float)) or not data.get("explanation"):
        raise MalformedResponseError("AI returned an unexpected response format")
    if not isinstance(data.get("claims"), list):
        data["claims"] = []

    return analysis_from_dict(data)


def request_translation(
    segments: Sequence[TranscriptSegment],
    source_language: str,
    server_url: Optional[str] = None,
) -> list[TranscriptSegment]:
    """Send segments to POST /translate and return the translated copies."""
    body = {
        "segments": [segment.to_dict() for segment in segments],
        "sourceLanguage": source_language,
    }
    data = _post(_url("/translate", server_url), "Translation failed", json=body)

    translated = data.get("segments")
    if not isinstance(translated, list):
        raise MalformedResponseError("AI response missing translations array")
    return [TranscriptSegment.from_dict(s) for s in translated if isinstance(s, dict)]
