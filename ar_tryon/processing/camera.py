"""카메라 캡처"""

from typing import Generator, Tuple

import cv2
import numpy as np

from ..config.settings import CameraConfig
from ..utils import get_logger
from ..utils.exceptions import InvalidImageError

logger = get_logger(__name__)


class CameraFeed:
    """OpenCV VideoCapture 래퍼"""

    def __init__(self, config: CameraConfig = None):
        self.config = config or CameraConfig.from_config()
        self.capture = None

    def open(self):
        """
        카메라 열기

        Raises:
            InvalidImageError: 카메라를 열 수 없는 경우
        """
        capture = cv2.VideoCapture(self.config.device_id)
        if not capture.isOpened():
            raise InvalidImageError(f"Failed to open camera {self.config.device_id}")

        capture.set(cv2.CAP_PROP_FRAME_WIDTH, self.config.width)
        capture.set(cv2.CAP_PROP_FRAME_HEIGHT, self.config.height)
        self.capture = capture
        logger.info(
            f"Camera {self.config.device_id} opened "
            f"({int(capture.get(cv2.CAP_PROP_FRAME_WIDTH))}x"
            f"{int(capture.get(cv2.CAP_PROP_FRAME_HEIGHT))})"
        )
        return self

    def frames(self) -> Generator[Tuple[int, np.ndarray], None, None]:
        """
        프레임 제너레이터

        Yields:
            (frame_number, BGR frame)
        """
        if self.capture is None:
            self.open()

        frame_count = 0
        while self.capture is not None and self.capture.isOpened():
            ret, frame = self.capture.read()
            if not ret:
                break

            if self.config.mirror:
                frame = cv2.flip(frame, 1)

            yield frame_count, frame
            frame_count += 1

    def release(self):
        if self.capture is not None:
            self.capture.release()
            self.capture = None
            logger.info("Camera released")

    def __enter__(self):
        return self.open()

    def __exit__(self, exc_type, exc, tb):
        self.release()
