"""Tests for the camera module (mocked OpenCV)."""

import sys
from pathlib import Path
from unittest.mock import MagicMock, patch

import numpy as np
import pytest

from mercado.camera import CameraCapture, ProductCamera


@pytest.fixture
def mock_cv2():
    """Inject a mock cv2 module into sys.modules."""
    mock = MagicMock()
    with patch.dict(sys.modules, {"cv2": mock}):
        yield mock


def _opened_capture():
    cap = MagicMock()
    cap.isOpened.return_value = True
    cap.read.return_value = (True, np.zeros((480, 640, 3), dtype=np.uint8))
    return cap


class TestProductCamera:
    def test_init_creates_save_dir(self, tmp_path):
        save_dir = tmp_path / "sub" / "dir"
        ProductCamera(camera_index=0, save_dir=str(save_dir))
        assert save_dir.exists()

    def test_capture_returns_jpeg_bytes(self, mock_cv2, tmp_path):
        cap = _opened_capture()
        mock_cv2.VideoCapture.return_value = cap
        mock_cv2.imencode.return_value = (
            True,
            np.frombuffer(b"\xff\xd8fake-jpeg", dtype=np.uint8),
        )

        result = ProductCamera(camera_index=2, save_dir=str(tmp_path)).capture()

        assert isinstance(result, CameraCapture)
        assert result.camera_index == 2
        assert result.data == b"\xff\xd8fake-jpeg"
        assert Path(result.image_path).read_bytes() == result.data
        assert result.captured_at
        mock_cv2.VideoCapture.assert_called_once_with(2)
        cap.release.assert_called_once()

    def test_capture_camera_not_found(self, mock_cv2, tmp_path):
        cap = MagicMock()
        cap.isOpened.return_value = False
        mock_cv2.VideoCapture.return_value = cap

        with pytest.raises(RuntimeError, match="câmera 0"):
            ProductCamera(save_dir=str(tmp_path)).capture()

    def test_capture_read_failure(self, mock_cv2, tmp_path):
        cap = MagicMock()
        cap.isOpened.return_value = True
        cap.read.return_value = (False, None)
        mock_cv2.VideoCapture.return_value = cap

        with pytest.raises(RuntimeError, match="obter uma imagem"):
            ProductCamera(save_dir=str(tmp_path)).capture()
        cap.release.assert_called_once()

    def test_capture_encode_failure(self, mock_cv2, tmp_path):
        cap = _opened_capture()
        mock_cv2.VideoCapture.return_value = cap
        mock_cv2.imencode.return_value = (False, None)

        with pytest.raises(RuntimeError, match="JPEG"):
            ProductCamera(save_dir=str(tmp_path)).capture()
        cap.release.assert_called_once()

    def test_list_cameras(self, mock_cv2):
        caps = {}
        for i in range(10):
            m = MagicMock()
            m.isOpened.return_value = i in (0, 2)
            caps[i] = m
        mock_cv2.VideoCapture.side_effect = lambda i: caps[i]

        assert ProductCamera.list_cameras() == [0, 2]
