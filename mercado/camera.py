"""Camera capture of product photos using OpenCV."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path


@dataclass
class CameraCapture:
    camera_index: int
    data: bytes  # JPEG-encoded frame
    image_path: str
    captured_at: str  # ISO8601


class ProductCamera:
    """Grab single JPEG frames from a camera pointed at a product."""

    def __init__(self, camera_index: int = 0, save_dir: str = "/tmp/mercado") -> None:
        self._camera_index = camera_index
        self._save_dir = Path(save_dir)
        self._save_dir.mkdir(parents=True, exist_ok=True)

    def capture(self) -> CameraCapture:
        """Capture one frame, keep a copy on disk and return its bytes."""
        try:
            import cv2
        except ImportError:
            raise ImportError(
                "opencv-python is required: pip install opencv-python"
            ) from None

        cap = cv2.VideoCapture(self._camera_index)
        if not cap.isOpened():
            raise RuntimeError(
                f"Não foi possível abrir a câmera {self._camera_index}. "
                f"Verifique a conexão."
            )

        try:
            ret, frame = cap.read()
            if not ret or frame is None:
                raise RuntimeError(
                    f"Não foi possível obter uma imagem da câmera {self._camera_index}."
                )

            ok, buf = cv2.imencode(".jpg", frame)
            if not ok:
                raise RuntimeError("Falha ao codificar a imagem em JPEG.")
            data = buf.tobytes()

            now = datetime.now(timezone.utc)
            filename = f"produto_{now.strftime('%Y%m%d_%H%M%S_%f')}.jpg"
            filepath = self._save_dir / filename
            filepath.write_bytes(data)

            return CameraCapture(
                camera_index=self._camera_index,
                data=data,
                image_path=str(filepath),
                captured_at=now.isoformat(),
            )
        finally:
            cap.release()

    @staticmethod
    def list_cameras(max_check: int = 10) -> list[int]:
        """List available camera indices by probing."""
        try:
            import cv2
        except ImportError:
            raise ImportError(
                "opencv-python is required: pip install opencv-python"
            ) from None

        available: list[int] = []
        for i in range(max_check):
            cap = cv2.VideoCapture(i)
            if cap.isOpened():
                available.append(i)
                cap.release()
        return available
