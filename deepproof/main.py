"""Interactive main entry point for DeepProof video analysis."""

import mimetypes
import sys
from datetime import datetime
from pathlib import Path
from tqdm import tqdm

from deepproof.config import Config
from deepproof.backends import get_backend
from deepproof.pipeline import AnalysisSession, PipelineRun, PipelineStage, WORK_STAGES
from deepproof.report import build_report, language_name, verdict
from deepproof.upload_store import is_accepted_type
from deepproof.writers.analysis_writer import format_analysis, write_analysis
from deepproof.writers.json_writer import write_json
from deepproof.writers.txt_writer import write_txt


def _ask_yes_no(prompt: str) -> bool:
    return input(prompt).strip().lower() in ('y', 'yes')


def write_outputs(run: PipelineRun) -> Path:
    """Write transcript, analysis and JSON report under OUT_DIR/<video stem>/."""
    output_dir = Config.OUT_DIR / Path(run.media.name).stem
    output_dir.mkdir(parents=True, exist_ok=True)

    if run.transcription is not None:
        write_txt(run.transcription.segments, output_dir / "transcript.txt")
    if run.translation is not None:
        write_txt(run.translation, output_dir / "transcript_en.txt")
    if run.analysis is not None:
        write_analysis(run.analysis, output_dir / "analysis.txt", file_name=run.media.name)
    write_json(build_report(run), output_dir / "report.json")

    return output_dir


def process_video(video_path: Path) -> PipelineRun:
    """
    Run the full pipeline on a local video file with a stage progress bar.

    Args:
        video_path: Path to an MP4, WebM or QuickTime file

    Returns:
        The finished (or failed) PipelineRun
    """
    mime_type, _ = mimetypes.guess_type(video_path.name)
    if not is_accepted_type(mime_type):
        raise ValueError(
            f"Unsupported file type: {mime_type or 'unknown'}. "
            f"Accepted: {', '.join(Config.ACCEPTED_VIDEO_TYPES)}"
        )

    with tqdm(
        total=len(WORK_STAGES),
        desc="Analyzing",
        unit="stage",
        bar_format="{desc}: {n_fmt}/{total_fmt}|{bar}| {elapsed}",
        ncols=80,
        leave=False
    ) as pbar:
        def on_update(run: PipelineRun):
            if run.stage in WORK_STAGES:
                pbar.n = WORK_STAGES.index(run.stage)
            elif run.stage == PipelineStage.DONE:
                pbar.n = len(WORK_STAGES)
            pbar.set_description_str(run.progress_message[:40])
            pbar.refresh()

        session = AnalysisSession(backend=get_backend(), on_update=on_update)
        session.upload(
            video_path.read_bytes(),
            name=video_path.name,
            mime_type=mime_type,
            last_modified=datetime.fromtimestamp(video_path.stat().st_mtime),
        )
        run = session.analyze()

        if run.stage == PipelineStage.ERROR:
            pbar.close()
            print(f"✗ {run.error}")
            print(run.failure_description)
            while run.can_retry and _ask_yes_no("Retry the AI analysis? (y/n): "):
                run = session.retry()
                if run.stage == PipelineStage.ERROR:
                    print(f"✗ {run.error}")

    if run.stage == PipelineStage.DONE and session.can_translate:
        print()
        lang = language_name(run.transcription.language)
        if _ask_yes_no(f"Audio is in {lang}. Translate the transcript to English? (y/n): "):
            try:
                session.translate()
                print("✓ Translation complete")
            except Exception as e:
                print(f"⚠ Error translating transcript: {str(e)}")

    session.store.clear_uploaded_file()
    return run


def print_summary(run: PipelineRun) -> None:
    if run.metadata is not None:
        print(f"Duration: {run.metadata.duration}  Resolution: {run.metadata.resolution}  "
              f"Modified: {run.metadata.last_modified}")
    if run.transcription is not None:
        print(f"Detected language: {language_name(run.transcription.language)}")
        print(f"Transcript: {len(run.transcription.segments)} segments")
    if run.analysis is not None:
        print()
        print("=" * 60)
        print(f"VERDICT: {verdict(run.analysis.overall_score)}")
        print("=" * 60)
        print(format_analysis(run.analysis, run.media.name))


def main():
    """Interactive main function."""
    print("=" * 60)
    print("DeepProof Video Analyzer")
    print("=" * 60)
    print()

    # Validate configuration
    try:
        Config.validate()
    except ValueError as e:
        print(f"✗ Configuration Error: {str(e)}", file=sys.stderr)
        print("\nPlease create a .env file with your GROQ_API_KEY.")
        sys.exit(1)

    Config.OUT_DIR.mkdir(parents=True, exist_ok=True)

    while True:
        print()
        print("-" * 60)
        path_text = input("Path of the video to analyze (MP4, WebM or MOV): ").strip().strip('"')

        if not path_text:
            print("No path provided. Exiting...")
            break

        video_path = Path(path_text).expanduser()
        if not video_path.is_file():
            print(f"✗ File not found: {video_path}")
            continue

        print()
        print("Processing video...")
        try:
            run = process_video(video_path)
            print()
            print_summary(run)
            output_dir = write_outputs(run)
            print(f"✓ Files saved to: {output_dir}")
        except Exception as e:
            print()
            print("=" * 60)
            print(f"✗ Failed to analyze video: {str(e)}")
            print("=" * 60)

        print()
        if not _ask_yes_no("Would you like to analyze another video? (y/n): "):
            break

    print()
    print("Thank you for using DeepProof!")


if __name__ == "__main__":
    main()
