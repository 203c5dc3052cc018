# File: tests/conftest.py

import json
import pytest
from types import SimpleNamespace

import httpx
import openai

from deepproof.models import (
    AnalysisResult,
    Claim,
    ClaimStatus,
    MediaMetadata,
    TranscriptSegment,
    TranscriptionResult,
)
from deepproof.upload_store import UploadStore


GROQ_URL = "https://api.groq.com/openai/v1/chat/completions"


class FakeEndpoint:
    """Stands in for client.audio.transcriptions / client.chat.completions."""

    def __init__(self, result=None, error=None):
        self.result = result
        self.error = error
        self.calls = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        return self.result


def chat_completion(content):
    """Shape of an SDK chat completion with a single choice."""
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


def make_client(transcription=None, chat_content=None, error=None):
    """
    Fake OpenAI client. chat_content may be a dict (JSON-encoded for you)
    or raw text to simulate a model that ignores the JSON instruction.
    """
    if isinstance(chat_content, (dict, list)):
        chat_content = json.dumps(chat_content)
    return SimpleNamespace(
        audio=SimpleNamespace(transcriptions=FakeEndpoint(transcription, error)),
        chat=SimpleNamespace(completions=FakeEndpoint(chat_completion(chat_content), error)),
    )


def connection_error():
    return openai.APIConnectionError(request=httpx.Request("POST", GROQ_URL))


def auth_error():
    request = httpx.Request("POST", GROQ_URL)
    return openai.AuthenticationError(
        "Invalid API Key",
        response=httpx.Response(401, request=request),
        body=None,
    )


VALID_ANALYSIS = {
    "overallScore": 18,
    "explanation": "The speaker describes a local weather event. Claims match public records.",
    "claims": [
        {
            "text": "It rained in Lisbon on Monday.",
            "status": "confirmed",
            "source": "Weather archives",
            "detail": "Rainfall was recorded that day.",
        },
        {
            "text": "The storm was the worst in a century.",
            "status": "unconfirmed",
            "detail": "No comparison data is cited.",
        },
    ],
}


@pytest.fixture
def sample_segments():
    return [
        TranscriptSegment(timestamp="00:00", speaker="Speaker A", text="Hola a todos."),
        TranscriptSegment(timestamp="00:04", speaker="Speaker B", text="Hoy llueve en Lisboa."),
        TranscriptSegment(timestamp="00:09", speaker="Speaker A", text="Fue una tormenta enorme."),
    ]


@pytest.fixture
def sample_transcription(sample_segments):
    return TranscriptionResult(
        language="es",
        segments=sample_segments,
        full_text=" ".join(seg.text for seg in sample_segments),
    )


@pytest.fixture
def sample_metadata():
    return MediaMetadata(
        duration="0:12",
        resolution="1280x720",
        fps=30.0,
        last_modified="Oct 17, 2026, 11:30 PM",
        duration_seconds=12.0,
    )


@pytest.fixture
def sample_analysis():
    return AnalysisResult(
        overall_score=18,
        explanation="Claims match public records.",
        claims=(
            Claim(text="It rained in Lisbon.", status=ClaimStatus.CONFIRMED, detail="Recorded."),
            Claim(text="Worst storm in a century.", status=ClaimStatus.UNCONFIRMED, detail="No data."),
        ),
    )


@pytest.fixture
def store(tmp_path):
    """Upload store writing its temp files inside the test's tmp dir."""
    return UploadStore(temp_dir=tmp_path)


@pytest.fixture
def video_bytes():
    # Not a decodable video; tests that need decoding patch cv2
    return b"\x00\x00\x00\x18ftypmp42" + b"\x00" * 64
