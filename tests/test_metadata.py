from datetime import datetime

import cv2
import pytest

from deepproof.config import Config
from deepproof.errors import MetadataError
from deepproof.metadata import extract_metadata, format_duration, format_modified


class FakeCapture:
    """Minimal cv2.VideoCapture double returning fixed properties."""

    properties = {}
    opened = True
    released = []

    def __init__(self, path):
        self.path = path

    def isOpened(self):
        return self.opened

    def get(self, prop):
        return self.properties.get(prop, 0.0)

    def release(self):
        FakeCapture.released.append(self.path)


@pytest.fixture
def fake_capture(monkeypatch):
    FakeCapture.properties = {
        cv2.CAP_PROP_FRAME_WIDTH: 1920.0,
        cv2.CAP_PROP_FRAME_HEIGHT: 1080.0,
        cv2.CAP_PROP_FRAME_COUNT: 2250.0,
        cv2.CAP_PROP_FPS: 25.0,
    }
    FakeCapture.opened = True
    FakeCapture.released = []
    monkeypatch.setattr(cv2, "VideoCapture", FakeCapture)
    return FakeCapture


@pytest.fixture
def media(store, video_bytes):
    store.set_uploaded_file(video_bytes, "clip.mp4", "video/mp4", last_modified=datetime(2026, 3, 5, 14, 7))
    return store.get_uploaded_file()


def test_extract_metadata(fake_capture, media):
    metadata = extract_metadata(media)

    assert metadata.resolution == "1920x1080"
    assert metadata.fps == 25.0
    assert metadata.duration_seconds == pytest.approx(90.0)
    assert metadata.duration == "1:30"
    assert metadata.last_modified == "Mar 05, 2026, 02:07 PM"
    assert fake_capture.released == [str(media.playable_path)]


@pytest.mark.parametrize("reported_fps", [0.0, -1.0, float("nan")])
def test_unusable_fps_falls_back(fake_capture, media, reported_fps):
    fake_capture.properties[cv2.CAP_PROP_FPS] = reported_fps

    metadata = extract_metadata(media)

    assert metadata.fps == Config.ASSUMED_FPS
    assert metadata.duration_seconds == pytest.approx(2250.0 / Config.ASSUMED_FPS)


def test_unknown_frame_count_gives_zero_duration(fake_capture, media):
    fake_capture.properties[cv2.CAP_PROP_FRAME_COUNT] = -1.0

    assert extract_metadata(media).duration == "0:00"


def test_unreadable_video_raises(fake_capture, media):
    fake_capture.opened = False

    with pytest.raises(MetadataError, match="clip.mp4"):
        extract_metadata(media)

    assert fake_capture.released == [str(media.playable_path)]


def test_missing_last_modified_uses_file_mtime(fake_capture, store, video_bytes):
    store.set_uploaded_file(video_bytes, "clip.mp4", "video/mp4")

    metadata = extract_metadata(store.get_uploaded_file())

    assert metadata.last_modified != "Unknown"


@pytest.mark.parametrize("seconds, expected", [
    (0, "0:00"),
    (9.9, "0:09"),
    (65, "1:05"),
    (599, "9:59"),
    (3600, "1:00:00"),
    (3725, "1:02:05"),
])
def test_format_duration(seconds, expected):
    assert format_duration(seconds) == expected


def test_format_modified():
    assert format_modified(None) == "Unknown"
    assert format_modified(datetime(2026, 10, 17, 9, 5)) == "Oct 17, 2026, 09:05 AM"
