"""Analysis pipeline: metadata -> transcription -> credibility analysis."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Callable, Optional

from deepproof.backends import DirectBackend, get_backend
from deepproof.models import (
    AnalysisRequest,
    AnalysisResult,
    MediaMetadata,
    TranscriptSegment,
    TranscriptionResult,
    UploadedMedia,
)
from deepproof.report import needs_translation
from deepproof.upload_store import UploadStore


class PipelineStage(str, Enum):
    LOADING = "loading"
    EXTRACTING_METADATA = "extracting-metadata"
    TRANSCRIBING = "transcribing"
    ANALYZING = "analyzing"
    DONE = "done"
    ERROR = "error"


WORK_STAGES = (
    PipelineStage.EXTRACTING_METADATA,
    PipelineStage.TRANSCRIBING,
    PipelineStage.ANALYZING,
)

STAGE_LABELS = {
    PipelineStage.LOADING: "Initializing...",
    PipelineStage.EXTRACTING_METADATA: "Extracting video metadata...",
    PipelineStage.TRANSCRIBING: "Transcribing audio with Whisper AI...",
    PipelineStage.ANALYZING: "Analyzing content with AI...",
    PipelineStage.DONE: "Analysis complete",
    PipelineStage.ERROR: "Analysis failed",
}

FAILURE_DESCRIPTIONS = {
    PipelineStage.EXTRACTING_METADATA: "The video's metadata could not be read. Upload a different file to start over.",
    PipelineStage.TRANSCRIBING: "The audio could not be transcribed. Upload the video again to start over.",
    PipelineStage.ANALYZING: "The AI credibility analysis failed. The transcript is kept, so the analysis can be retried.",
}


@dataclass
class PipelineRun:
    """State of one analysis of one uploaded video."""
    media: UploadedMedia
    stage: PipelineStage = PipelineStage.LOADING
    progress_message: str = STAGE_LABELS[PipelineStage.LOADING]
    error: Optional[str] = None
    failed_stage: Optional[PipelineStage] = None
    metadata: Optional[MediaMetadata] = None
    transcription: Optional[TranscriptionResult] = None
    analysis: Optional[AnalysisResult] = None
    translation: Optional[list[TranscriptSegment]] = None
    history: list[PipelineStage] = field(default_factory=list)
    started_at: datetime = field(default_factory=datetime.now)
    abandoned: bool = False

    @property
    def is_running(self) -> bool:
        return self.stage not in (PipelineStage.DONE, PipelineStage.ERROR)

    @property
    def can_retry(self) -> bool:
        """Only a failed analysis stage can be retried; earlier failures need a new upload."""
        return (
            not self.abandoned
            and self.stage == PipelineStage.ERROR
            and self.failed_stage == PipelineStage.ANALYZING
            and self.metadata is not None
            and self.transcription is not None
        )

    @property
    def failure_description(self) -> str:
        return FAILURE_DESCRIPTIONS.get(self.failed_stage, "The analysis pipeline failed.")

    def abandon(self) -> None:
        """
        Mark the run as superseded. Calls already in flight are not
        interrupted; their results are dropped at the next stage boundary.
        """
        self.abandoned = True

    def analysis_request(self) -> AnalysisRequest:
        return AnalysisRequest(
            transcript=self.transcription.full_text,
            file_name=self.media.name,
            duration=self.metadata.duration,
            resolution=self.metadata.resolution,
            language=self.transcription.language,
        )


class _Abandoned(Exception):
    """Raised internally to unwind a run that has been superseded."""


class AnalysisPipeline:
    """
    Runs the three work stages strictly in order.

    Every transition calls on_update(run) so a UI can redraw; the progress
    messages are cosmetic. Failures move the run to ERROR with the error's
    message. Nothing is retried automatically: retry_analysis() is the only
    way back into a stage, and only after the analysis stage failed.
    """

    def __init__(
        self,
        backend: Optional[DirectBackend] = None,
        on_update: Optional[Callable[[PipelineRun], None]] = None,
    ):
        self.backend = backend or get_backend()
        self.on_update = on_update or (lambda run: None)

    def create_run(self, store: UploadStore) -> Optional[PipelineRun]:
        """New run for the stored upload, or None when there is nothing to analyze."""
        media = store.get_uploaded_file()
        if media is None:
            return None
        return PipelineRun(media=media)

    def start(self, store: UploadStore) -> Optional[PipelineRun]:
        """
        Analyze the stored upload.

        Returns None when the store is empty; callers send the user back to
        the upload step instead of showing an error.
        """
        run = self.create_run(store)
        if run is None:
            return None
        return self.run(run)

    def run(self, run: PipelineRun) -> PipelineRun:
        try:
            self._enter(run, PipelineStage.EXTRACTING_METADATA, "Reading video properties...")
            metadata = self.backend.extract_metadata(run.media)
            self._check(run)
            run.metadata = metadata

            self._enter(run, PipelineStage.TRANSCRIBING, "Preparing video for transcription...")
            transcription = self.backend.transcribe(
                run.media,
                on_progress=lambda message: self._progress(run, message),
            )
            self._check(run)
            run.transcription = transcription

            self._analyze(run, "AI is evaluating claims and credibility...")
            self._enter(run, PipelineStage.DONE)
        except _Abandoned:
            print(f"⚠ Discarded results for {run.media.name} (a newer upload replaced it)")
        except Exception as e:
            self._fail(run, e)
        return run

    def retry_analysis(self, run: PipelineRun) -> PipelineRun:
        """
        Re-run only the analysis stage, reusing the run's metadata and transcript.

        Raises:
            ValueError: if the run did not fail in the analysis stage
        """
        if not run.can_retry:
            raise ValueError("Only a failed analysis can be retried")

        run.error = None
        run.failed_stage = None
        try:
            self._analyze(run, "Retrying AI analysis...")
            self._enter(run, PipelineStage.DONE)
        except _Abandoned:
            print(f"⚠ Discarded retried analysis for {run.media.name}")
        except Exception as e:
            self._fail(run, e)
        return run

    def translate(self, run: PipelineRun) -> list[TranscriptSegment]:
        """
        Translate the run's transcript to English and keep it on the run.

        Errors are raised to the caller; the run's stage does not change.
        """
        if run.transcription is None or not run.transcription.segments:
            raise ValueError("There is no transcript to translate")

        translated = self.backend.translate(run.transcription.segments, run.transcription.language)
        if not run.abandoned:
            run.translation = translated
        return translated

    def _analyze(self, run: PipelineRun, message: str) -> None:
        self._enter(run, PipelineStage.ANALYZING, message)
        analysis = self.backend.analyze(run.analysis_request())
        self._check(run)
        run.analysis = analysis

    def _check(self, run: PipelineRun) -> None:
        if run.abandoned:
            raise _Abandoned()

    def _enter(self, run: PipelineRun, stage: PipelineStage, message: Optional[str] = None) -> None:
        self._check(run)
        run.stage = stage
        run.history.append(stage)
        run.progress_message = message or STAGE_LABELS[stage]
        self.on_update(run)

    def _progress(self, run: PipelineRun, message: str) -> None:
        self._check(run)
        run.progress_message = message
        self.on_update(run)

    def _fail(self, run: PipelineRun, error: Exception) -> None:
        if run.abandoned:
            return
        run.failed_stage = run.stage
        run.stage = PipelineStage.ERROR
        run.history.append(PipelineStage.ERROR)
        run.error = str(error) or "Pipeline failed"
        run.progress_message = STAGE_LABELS[PipelineStage.ERROR]
        print(f"✗ {STAGE_LABELS[run.failed_stage]} failed: {run.error}")
        self.on_update(run)


class AnalysisSession:
    """
    One user's upload store plus the run analyzing it.

    Sessions own their state, so several can exist side by side (one per
    Streamlit browser session). Uploading a new video abandons the run in
    progress before replacing the stored media.
    """

    def __init__(
        self,
        backend: Optional[DirectBackend] = None,
        on_update: Optional[Callable[[PipelineRun], None]] = None,
        store: Optional[UploadStore] = None,
    ):
        self.store = store or UploadStore()
        self.pipeline = AnalysisPipeline(backend, on_update)
        self.run: Optional[PipelineRun] = None

    def upload(self, data: bytes, name: str, mime_type: str, last_modified: Optional[datetime] = None) -> None:
        self._abandon_current()
        self.store.set_uploaded_file(data, name, mime_type, last_modified)

    def analyze(self) -> Optional[PipelineRun]:
        self._abandon_current()
        run = self.pipeline.create_run(self.store)
        self.run = run
        if run is not None:
            self.pipeline.run(run)
        return run

    def retry(self) -> PipelineRun:
        if self.run is None:
            raise ValueError("Nothing has been analyzed yet")
        return self.pipeline.retry_analysis(self.run)

    def translate(self) -> list[TranscriptSegment]:
        if self.run is None:
            raise ValueError("Nothing has been analyzed yet")
        return self.pipeline.translate(self.run)

    @property
    def can_translate(self) -> bool:
        return (
            self.run is not None
            and self.run.transcription is not None
            and bool(self.run.transcription.segments)
            and needs_translation(self.run.transcription.language)
        )

    def reset(self) -> None:
        self._abandon_current()
        self.store.clear_uploaded_file()

    def _abandon_current(self) -> None:
        if self.run is not None:
            self.run.abandon()
        self.run = None
