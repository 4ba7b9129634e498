import logging

import pytest

from ghosthand import camera
from ghosthand.errors import CameraError
from ghosthand.log import setup_logging


class ClosedCapture:
    def __init__(self, *args):
        self.released = False

    def isOpened(self):
        return False

    def release(self):
        self.released = True


def test_unopened_source_reads_nothing():
    source = camera.VideoSource()
    assert not source.is_open
    assert source.read() is None


def test_open_failure_raises_camera_error(monkeypatch):
    monkeypatch.setattr(camera.cv2, "VideoCapture", ClosedCapture)

    with camera.VideoSource() as source:
        with pytest.raises(CameraError) as excinfo:
            source.open(3)

    assert excinfo.value.camera_index == 3
    assert isinstance(excinfo.value, RuntimeError)


def test_discover_skips_closed_devices(monkeypatch):
    monkeypatch.setattr(camera.cv2, "VideoCapture", ClosedCapture)
    assert camera.discover_camera_indexes(max_to_probe=3) == []


def test_setup_logging_does_not_stack_handlers():
    logger = setup_logging("debug")
    setup_logging("warning")

    assert logger is logging.getLogger("ghosthand")
    assert len(logger.handlers) == 1
    assert logger.level == logging.WARNING
