"""Verdict labels, derived metrics and the exported report."""

from typing import Iterable, Optional

from deepproof.models import AnalysisResult, Claim, ClaimStatus, MediaMetadata

LANGUAGE_NAMES = {
    "en": "English",
    "es": "Spanish",
    "fr": "French",
    "de": "German",
    "it": "Italian",
    "pt": "Portuguese",
    "ru": "Russian",
    "zh": "Chinese",
    "ja": "Japanese",
    "ko": "Korean",
    "ar": "Arabic",
    "hi": "Hindi",
    "tr": "Turkish",
    "pl": "Polish",
    "nl": "Dutch",
    "sv": "Swedish",
    "da": "Danish",
    "fi": "Finnish",
    "no": "Norwegian",
    "uk": "Ukrainian",
    "cs": "Czech",
    "ro": "Romanian",
    "hu": "Hungarian",
    "el": "Greek",
    "he": "Hebrew",
    "th": "Thai",
    "vi": "Vietnamese",
    "id": "Indonesian",
    "ms": "Malay",
    "az": "Azerbaijani",
}

SCORE_BANDS = (
    (20, "Clearly authentic"),
    (40, "Mostly credible"),
    (60, "Mixed signals"),
    (80, "Suspicious"),
    (100, "Highly likely manipulated"),
)


def language_name(code: Optional[str]) -> str:
    """
    Human-readable language name.

    Whisper reports either an ISO code ('es') or a full name ('spanish');
    both are accepted. Unknown codes are shown upper-cased.
    """
    if not code:
        return "Unknown"
    key = code.strip().lower()
    if key in LANGUAGE_NAMES:
        return LANGUAGE_NAMES[key]
    if key.title() in LANGUAGE_NAMES.values():
        return key.title()
    return code.upper()


def needs_translation(language: Optional[str]) -> bool:
    return bool(language) and language.lower() != "unknown" and language_name(language) != "English"


def score_band(score: float) -> str:
    """One of the five credibility bands (0-20 ... 80-100)."""
    for upper, label in SCORE_BANDS:
        if score < upper:
            return label
    return SCORE_BANDS[-1][1]


def verdict(score: float) -> str:
    if score <= 30:
        return "Likely Authentic"
    if score <= 60:
        return "Uncertain"
    return "Likely AI Generated"


def risk_label(score: float) -> str:
    if score <= 30:
        return "Low Risk"
    if score <= 60:
        return "Medium Risk"
    return "High Risk"


def total_frames(metadata: MediaMetadata) -> int:
    return round(metadata.duration_seconds * metadata.fps)


def flagged_frames(frames: int, score: float) -> int:
    # Display estimate only: 5% of frames scaled by the credibility score
    return round(frames * score / 100 * 0.05)


def audio_confidence(score: float) -> int:
    return min(99, 60 + round(score * 0.35))


def claim_summary(claims: Iterable[Claim]) -> dict:
    """Count claims per status, e.g. {'confirmed': 2, 'contradicted': 0, 'unconfirmed': 1}."""
    counts = {status.value: 0 for status in ClaimStatus}
    for claim in claims:
        counts[claim.status.value] += 1
    return counts


def build_report(run) -> dict:
    """Collect everything known about a pipeline run into a JSON-ready dict."""
    media = run.media
    report = {
        "file": {
            "name": media.name,
            "size": media.size,
            "sizeFormatted": media.size_formatted,
            "type": media.mime_type,
        },
        "stage": run.stage.value,
        "error": run.error,
        "generatedAt": run.started_at.isoformat(timespec="seconds"),
    }

    if run.metadata is not None:
        metadata = run.metadata
        report["metadata"] = {
            "duration": metadata.duration,
            "resolution": metadata.resolution,
            "fps": metadata.fps,
            "lastModified": metadata.last_modified,
        }

    if run.transcription is not None:
        report["transcription"] = run.transcription.to_dict()
        report["transcription"]["languageName"] = language_name(run.transcription.language)

    if run.translation is not None:
        report["translation"] = [segment.to_dict() for segment in run.translation]

    analysis: Optional[AnalysisResult] = run.analysis
    if analysis is not None:
        report["analysis"] = analysis.to_dict()
        report["analysis"].update({
            "verdict": verdict(analysis.overall_score),
            "band": score_band(analysis.overall_score),
            "claimSummary": claim_summary(analysis.claims),
        })
        if run.metadata is not None:
            frames = total_frames(run.metadata)
            report["metrics"] = {
                "framesAnalyzed": frames,
                "flaggedFrames": flagged_frames(frames, analysis.overall_score),
                "audioConfidence": audio_confidence(analysis.overall_score),
                "risk": risk_label(analysis.overall_score),
            }

    return report
