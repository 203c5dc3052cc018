"""Streamlit web application for DeepProof video credibility analysis."""

import streamlit as st
import sys
from datetime import datetime
from pathlib import Path

# Add the project root to the path so we can import deepproof modules
project_root = Path(__file__).parent.resolve()
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from deepproof.config import Config
from deepproof.backends import get_backend
from deepproof.pipeline import AnalysisSession, PipelineRun, PipelineStage, STAGE_LABELS, WORK_STAGES
from deepproof.report import (
    audio_confidence,
    build_report,
    claim_summary,
    flagged_frames,
    language_name,
    risk_label,
    score_band,
    total_frames,
    verdict,
)
from deepproof.models import ClaimStatus, format_size
from deepproof.upload_store import is_accepted_type
from deepproof.writers.analysis_writer import format_analysis
import json


# Page configuration
st.set_page_config(
    page_title="DeepProof",
    page_icon="🛡️",
    layout="wide",
    initial_sidebar_state="expanded"
)


def load_streamlit_secrets():
    """Load secrets from Streamlit Cloud into Config."""
    try:
        if not hasattr(st, 'secrets') or not st.secrets:
            return
        if 'GROQ_API_KEY' in st.secrets:
            Config.GROQ_API_KEY = st.secrets['GROQ_API_KEY']
        if 'ANALYSIS_MODEL' in st.secrets:
            Config.ANALYSIS_MODEL = st.secrets['ANALYSIS_MODEL']
        if 'TRANSCRIPTION_MODEL' in st.secrets:
            Config.TRANSCRIPTION_MODEL = st.secrets['TRANSCRIPTION_MODEL']
        if 'DEEPPROOF_BACKEND' in st.secrets:
            Config.BACKEND = st.secrets['DEEPPROOF_BACKEND']
        if 'DEEPPROOF_SERVER_URL' in st.secrets:
            Config.SERVER_URL = st.secrets['DEEPPROOF_SERVER_URL']
    except (AttributeError, TypeError, KeyError, ValueError, FileNotFoundError):
        # No secrets file: keep the .env / environment values
        pass

load_streamlit_secrets()

st.markdown("""
    <style>
    .main-header {
        font-size: 2.5rem;
        font-weight: bold;
        text-align: center;
        margin-bottom: 2rem;
    }
    .stButton>button {
        width: 100%;
    }
    .verdict {
        font-size: 1.4rem;
        font-weight: 700;
        text-align: center;
    }
    .verdict-low { color: #16a34a; }
    .verdict-medium { color: #d97706; }
    .verdict-high { color: #dc2626; }
    .transcript-line {
        font-family: monospace;
        line-height: 1.8;
    }
    </style>
""", unsafe_allow_html=True)

# Initialize session state
if 'session' not in st.session_state:
    st.session_state.session = AnalysisSession(backend=get_backend())
if 'show_translation' not in st.session_state:
    st.session_state.show_translation = False
if 'pending_analysis' not in st.session_state:
    st.session_state.pending_analysis = False


STATUS_ICONS = {
    ClaimStatus.CONFIRMED: "✅",
    ClaimStatus.CONTRADICTED: "❌",
    ClaimStatus.UNCONFIRMED: "❔",
}


def verdict_class(score: int) -> str:
    if score <= 30:
        return "verdict-low"
    if score <= 60:
        return "verdict-medium"
    return "verdict-high"


def run_pipeline_with_progress(session: AnalysisSession) -> PipelineRun:
    """
    Run the pipeline, redrawing a progress bar and status line on every stage change.
    The remote calls block, so the UI only updates between steps.
    """
    progress_bar = st.progress(0.0)
    status_container = st.empty()

    def on_update(run: PipelineRun):
        if run.stage in WORK_STAGES:
            progress_bar.progress((WORK_STAGES.index(run.stage) + 0.5) / len(WORK_STAGES))
        elif run.stage == PipelineStage.DONE:
            progress_bar.progress(1.0)
        status_container.markdown(f"**{STAGE_LABELS[run.stage]}**  \n{run.progress_message}")

    session.pipeline.on_update = on_update
    try:
        return session.analyze()
    finally:
        session.pipeline.on_update = lambda run: None
        progress_bar.empty()
        status_container.empty()


def render_stage_banner(run: PipelineRun):
    """Stage checklist: finished stages ticked, current stage highlighted."""
    if run.stage == PipelineStage.ERROR:
        st.error(f"**{STAGE_LABELS[PipelineStage.ERROR]}**: {run.error}")
        st.caption(run.failure_description)
        return

    labels = {
        PipelineStage.EXTRACTING_METADATA: "Metadata",
        PipelineStage.TRANSCRIBING: "Whisper STT",
        PipelineStage.ANALYZING: "AI Analysis",
    }
    current = WORK_STAGES.index(run.stage) if run.stage in WORK_STAGES else len(WORK_STAGES)
    cols = st.columns(len(WORK_STAGES))
    for i, stage in enumerate(WORK_STAGES):
        with cols[i]:
            if i < current:
                st.success(f"✓ {labels[stage]}")
            elif i == current:
                st.info(f"⏳ {labels[stage]}")
            else:
                st.caption(labels[stage])


def render_file_info(run: PipelineRun):
    st.subheader("🎞️ Uploaded Video Information")
    col1, col2 = st.columns([3, 2])
    with col1:
        st.video(run.media.data, format=run.media.mime_type)
    with col2:
        st.caption("File Name")
        st.markdown(f"`{run.media.name}`")
        st.caption("File Size")
        st.markdown(f"`{run.media.size_formatted}`")
        st.caption("Format")
        st.markdown(f"`{run.media.extension}`")
        if run.metadata:
            st.caption("Duration / Resolution")
            st.markdown(f"`{run.metadata.duration}` · `{run.metadata.resolution}`")
            st.caption("Last Modified")
            st.markdown(f"`{run.metadata.last_modified}`")


def render_scores(run: PipelineRun):
    analysis = run.analysis
    score = analysis.overall_score

    col1, col2 = st.columns([2, 3])
    with col1:
        st.metric("Manipulation score", f"{score}/100")
        st.progress(score / 100)
        st.markdown(
            f'<div class="verdict {verdict_class(score)}">{verdict(score)}</div>',
            unsafe_allow_html=True
        )
        st.caption(score_band(score))
    with col2:
        st.subheader("🧠 AI Analysis")
        st.write(analysis.explanation)
        st.caption(f"Model: {Config.ANALYSIS_MODEL} · {run.started_at.strftime('%b %d, %Y, %I:%M:%S %p')}")

    if run.metadata:
        frames = total_frames(run.metadata)
        col1, col2 = st.columns(2)
        with col1:
            st.subheader("🎬 Video Analysis")
            st.caption(risk_label(score))
            st.metric("Frames analyzed", f"{frames:,}")
            st.metric("Flagged frames", f"{flagged_frames(frames, score):,}")
            st.caption(f"{run.metadata.resolution} @ {run.metadata.fps:g} fps")
        with col2:
            st.subheader("🎙️ Audio Analysis")
            st.caption(risk_label(score))
            st.metric("Confidence", f"{audio_confidence(score)}%")
            st.metric("Duration", run.metadata.duration)


def render_transcript(run: PipelineRun, session: AnalysisSession):
    transcription = run.transcription
    st.subheader("📝 Transcript")
    st.caption(f"Detected language: **{language_name(transcription.language)}**")

    if session.can_translate:
        label = "Show original" if st.session_state.show_translation else "🌐 Translate to English"
        if st.button(label, key="toggle_translation"):
            if not st.session_state.show_translation and run.translation is None:
                with st.spinner("Translating transcript..."):
                    try:
                        session.translate()
                    except Exception as e:
                        st.error(f"Error translating transcript: {e}")
                        return
            st.session_state.show_translation = not st.session_state.show_translation
            st.rerun()

    segments = transcription.segments
    if st.session_state.show_translation and run.translation is not None:
        segments = run.translation

    with st.expander("Transcript segments", expanded=True):
        for seg in segments:
            # Escape dollar signs to prevent Streamlit from interpreting them as LaTeX
            text = seg.text.replace("$", "\\$")
            st.markdown(f"`[{seg.timestamp}]` **{seg.speaker}:** {text}")


def render_claims(run: PipelineRun):
    claims = run.analysis.claims
    counts = claim_summary(claims)
    st.subheader("⚖️ Fact Check")
    col1, col2, col3 = st.columns(3)
    col1.metric("Confirmed", counts[ClaimStatus.CONFIRMED.value])
    col2.metric("Contradicted", counts[ClaimStatus.CONTRADICTED.value])
    col3.metric("Unconfirmed", counts[ClaimStatus.UNCONFIRMED.value])

    for claim in claims:
        with st.container(border=True):
            st.markdown(f"{STATUS_ICONS[claim.status]} **{claim.status.value.title()}** · {claim.text}")
            if claim.detail:
                st.write(claim.detail)
            if claim.source:
                st.caption(f"Source: {claim.source}")


def render_downloads(run: PipelineRun):
    st.subheader("📥 Download Report")
    col1, col2, col3 = st.columns([1, 1, 3])
    stem = Path(run.media.name).stem
    with col1:
        st.download_button(
            "📄 JSON Report",
            json.dumps(build_report(run), indent=2, ensure_ascii=False),
            file_name=f"{stem}_report.json",
            mime="application/json",
            key="download_json"
        )
    if run.analysis:
        with col2:
            st.download_button(
                "📊 Analysis",
                format_analysis(run.analysis, run.media.name),
                file_name=f"{stem}_analysis.txt",
                mime="text/plain",
                key="download_analysis"
            )


def main():
    """Main Streamlit application."""
    session: AnalysisSession = st.session_state.session

    st.markdown('<div class="main-header">🛡️ DeepProof</div>', unsafe_allow_html=True)

    with st.sidebar:
        st.header("⚙️ Settings")
        st.caption(f"Backend: **{Config.BACKEND}**")
        if Config.BACKEND == "http":
            st.caption(f"API server: {Config.SERVER_URL}")
        st.caption(f"Speech model: {Config.TRANSCRIPTION_MODEL}")
        st.caption(f"Analysis model: {Config.ANALYSIS_MODEL}")

        st.subheader("📊 Current Status")
        media = session.store.get_uploaded_file()
        if media:
            st.caption(f"**Video:** {media.name} ({media.size_formatted})")
        if session.run:
            if session.run.stage == PipelineStage.DONE:
                st.success("✓ Analysis ready")
            elif session.run.stage == PipelineStage.ERROR:
                st.error("✗ Analysis failed")
        elif not media:
            st.info("No video uploaded yet")

        if media and st.button("🗑️ Clear upload"):
            session.reset()
            st.session_state.show_translation = False
            st.rerun()

    tab1, tab2 = st.tabs(["📤 Upload", "📊 Results"])

    with tab1:
        st.header("Upload a Video")
        uploaded = st.file_uploader(
            "Video file",
            type=["mp4", "webm", "mov"],
            help=f"MP4, WebM or QuickTime, up to {Config.MAX_UPLOAD_MB} MB"
        )

        if uploaded is not None:
            if not is_accepted_type(uploaded.type):
                st.error(f"Unsupported file type: {uploaded.type}")
            else:
                st.caption(f"**{uploaded.name}** · {format_size(uploaded.size)} · "
                           f"{uploaded.type.split('/')[-1].upper()}")
                if st.button("🚀 Analyze Video", type="primary"):
                    session.upload(
                        uploaded.getvalue(),
                        name=uploaded.name,
                        mime_type=uploaded.type,
                        last_modified=datetime.now(),
                    )
                    st.session_state.show_translation = False
                    st.session_state.pending_analysis = True
                    st.success("✅ Upload complete. Open the Results tab.")

    with tab2:
        st.header("📊 Analysis Report")

        if session.store.get_uploaded_file() is None:
            st.info("👆 First upload a video in the 'Upload' tab.")
            return

        if st.session_state.pending_analysis:
            st.session_state.pending_analysis = False
            run_pipeline_with_progress(session)

        run = session.run
        if run is None:
            if st.button("🚀 Start Analysis", type="primary"):
                st.session_state.pending_analysis = True
                st.rerun()
            return

        render_stage_banner(run)

        if run.can_retry:
            if st.button("🔄 Retry analysis"):
                with st.spinner("Retrying AI analysis..."):
                    session.retry()
                st.rerun()

        render_file_info(run)

        if run.analysis:
            st.divider()
            render_scores(run)

        if run.transcription and run.transcription.segments:
            st.divider()
            render_transcript(run, session)

        if run.analysis and run.analysis.claims:
            st.divider()
            render_claims(run)

        if run.stage in (PipelineStage.DONE, PipelineStage.ERROR):
            st.divider()
            render_downloads(run)


if __name__ == "__main__":
    main()
