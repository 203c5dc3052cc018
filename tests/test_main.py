import pytest

from deepproof import main
from deepproof.config import Config
from deepproof.pipeline import PipelineRun, PipelineStage


def test_write_outputs(monkeypatch, tmp_path, store, video_bytes, sample_metadata, sample_transcription,
                       sample_analysis, sample_segments):
    monkeypatch.setattr(Config, "OUT_DIR", tmp_path / "out")
    store.set_uploaded_file(video_bytes, "lisbon.mp4", "video/mp4")
    run = PipelineRun(
        media=store.get_uploaded_file(),
        stage=PipelineStage.DONE,
        metadata=sample_metadata,
        transcription=sample_transcription,
        analysis=sample_analysis,
        translation=sample_segments,
    )

    output_dir = main.write_outputs(run)

    assert output_dir == tmp_path / "out" / "lisbon"
    assert sorted(p.name for p in output_dir.iterdir()) == [
        "analysis.txt", "report.json", "transcript.txt", "transcript_en.txt",
    ]


def test_write_outputs_after_early_failure(monkeypatch, tmp_path, store, video_bytes):
    monkeypatch.setattr(Config, "OUT_DIR", tmp_path)
    store.set_uploaded_file(video_bytes, "broken.mp4", "video/mp4")
    run = PipelineRun(media=store.get_uploaded_file(), stage=PipelineStage.ERROR, error="unreadable")

    output_dir = main.write_outputs(run)

    assert [p.name for p in output_dir.iterdir()] == ["report.json"]


def test_process_video_rejects_unsupported_type(tmp_path):
    path = tmp_path / "clip.avi"
    path.write_bytes(b"RIFF")

    with pytest.raises(ValueError, match="Unsupported file type"):
        main.process_video(path)
