"""Data models for uploads, transcripts and credibility analysis."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Optional


def format_size(num_bytes: int) -> str:
    """Format a byte count the way the upload page shows it (KB below 1 MB)."""
    if num_bytes < 1024 * 1024:
        return f"{num_bytes / 1024:.1f} KB"
    return f"{num_bytes / (1024 * 1024):.1f} MB"


@dataclass
class UploadedMedia:
    """A video held by the upload store, plus the temp file the decoder reads."""
    data: bytes
    name: str
    size: int
    mime_type: str
    playable_path: Path
    last_modified: Optional[datetime] = None

    @property
    def size_formatted(self) -> str:
        return format_size(self.size)

    @property
    def extension(self) -> str:
        """Container name shown in the UI, e.g. MP4."""
        subtype = self.mime_type.split("/")[-1] if "/" in self.mime_type else ""
        return subtype.upper() or "VIDEO"


@dataclass(frozen=True)
class MediaMetadata:
    """Properties read from the video container."""
    duration: str           # M:SS or H:MM:SS
    resolution: str         # WxH
    fps: float
    last_modified: str
    duration_seconds: float = 0.0


@dataclass(frozen=True)
class TranscriptSegment:
    """A timestamped, speaker-tagged span of transcribed text."""
    timestamp: str  # mm:ss
    speaker: str
    text: str

    def to_dict(self) -> dict:
        return {"timestamp": self.timestamp, "speaker": self.speaker, "text": self.text}

    @classmethod
    def from_dict(cls, data: dict) -> "TranscriptSegment":
        return cls(
            timestamp=str(data.get("timestamp", "00:00")),
            speaker=str(data.get("speaker", "")),
            text=str(data.get("text", "")),
        )


@dataclass
class TranscriptionResult:
    """Speech recognition output: detected language, segments and full text."""
    language: str
    segments: list[TranscriptSegment] = field(default_factory=list)
    full_text: str = ""

    def to_dict(self) -> dict:
        return {
            "language": self.language,
            "segments": [segment.to_dict() for segment in self.segments],
            "fullText": self.full_text,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "TranscriptionResult":
        return cls(
            language=data.get("language") or "unknown",
            segments=[TranscriptSegment.from_dict(s) for s in data.get("segments") or []],
            full_text=data.get("fullText") or "",
        )


class ClaimStatus(str, Enum):
    CONFIRMED = "confirmed"
    CONTRADICTED = "contradicted"
    UNCONFIRMED = "unconfirmed"


@dataclass(frozen=True)
class Claim:
    """A factual assertion extracted from the transcript and classified."""
    text: str
    status: ClaimStatus
    detail: str = ""
    source: Optional[str] = None

    def to_dict(self) -> dict:
        data = {"text": self.text, "status": self.status.value, "detail": self.detail}
        if self.source:
            data["source"] = self.source
        return data


@dataclass(frozen=True)
class AnalysisResult:
    """Credibility verdict. A retry produces a new instance, never a mutation."""
    overall_score: int
    explanation: str
    claims: tuple[Claim, ...] = ()

    def to_dict(self) -> dict:
        return {
            "overallScore": self.overall_score,
            "explanation": self.explanation,
            "claims": [claim.to_dict() for claim in self.claims],
        }


@dataclass
class AnalysisRequest:
    """Everything the credibility model is told about a video."""
    transcript: str
    file_name: str = ""
    duration: str = ""
    resolution: str = ""
    language: str = "unknown"

    def to_dict(self) -> dict:
        return {
            "transcript": self.transcript,
            "fileName": self.file_name,
            "duration": self.duration,
            "resolution": self.resolution,
            "language": self.language,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "AnalysisRequest":
        return cls(
            transcript=data.get("transcript") or "",
            file_name=data.get("fileName") or "",
            duration=data.get("duration") or "",
            resolution=data.get("resolution") or "",
            language=data.get("language") or "unknown",
        )
