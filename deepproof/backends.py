"""Where the pipeline's remote calls go: in-process or through the API server."""

from typing import Callable, Optional, Sequence

from deepproof import api_client
from deepproof.analyzer import analyze_transcript
from deepproof.config import Config
from deepproof.metadata import extract_metadata
from deepproof.models import (
    AnalysisRequest,
    AnalysisResult,
    MediaMetadata,
    TranscriptSegment,
    TranscriptionResult,
    UploadedMedia,
)
from deepproof.transcriber import transcribe_file
from deepproof.translator import translate_segments

ProgressCallback = Callable[[str], None]


class DirectBackend:
    """Calls the Groq APIs from this process (CLI and single-user Streamlit)."""

    def extract_metadata(self, media: UploadedMedia) -> MediaMetadata:
        return extract_metadata(media)

    def transcribe(
        self,
        media: UploadedMedia,
        on_progress: Optional[ProgressCallback] = None,
    ) -> TranscriptionResult:
        if on_progress:
            on_progress("Preparing video for transcription...")
            on_progress("Uploading and transcribing audio with Whisper AI...")
        return transcribe_file(media.playable_path, file_name=media.name)

    def analyze(self, request: AnalysisRequest) -> AnalysisResult:
        return analyze_transcript(request)

    def translate(
        self,
        segments: Sequence[TranscriptSegment],
        source_language: str,
    ) -> list[TranscriptSegment]:
        return translate_segments(segments, source_language)


class HttpBackend(DirectBackend):
    """Calls /transcribe, /analyze and /translate on a DeepProof API server."""

    def __init__(self, server_url: Optional[str] = None):
        self.server_url = server_url or Config.SERVER_URL

    def transcribe(
        self,
        media: UploadedMedia,
        on_progress: Optional[ProgressCallback] = None,
    ) -> TranscriptionResult:
        return api_client.transcribe_video(
            media.playable_path,
            on_progress=on_progress,
            file_name=media.name,
            server_url=self.server_url,
        )

    def analyze(self, request: AnalysisRequest) -> AnalysisResult:
        return api_client.request_analysis(request, server_url=self.server_url)

    def translate(
        self,
        segments: Sequence[TranscriptSegment],
        source_language: str,
    ) -> list[TranscriptSegment]:
        return api_client.request_translation(segments, source_language, server_url=self.server_url)


def get_backend(name: Optional[str] = None) -> DirectBackend:
    """Pick a backend by name ('direct' or 'http'), defaulting to Config.BACKEND."""
    name = (name or Config.BACKEND).lower()
    if name == "http":
        return HttpBackend()
    if name == "direct":
        return DirectBackend()
    raise ValueError(f"Unknown backend: {name!r} (expected 'direct' or 'http')")
