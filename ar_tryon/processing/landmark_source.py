"""MediaPipe FaceMesh 기반 랜드마크 소스"""

import cv2
import mediapipe as mp
import numpy as np

from ..config.settings import DetectionConfig
from ..models import FrameEvent, Landmark
from ..utils import get_logger
from ..utils.exceptions import ConfigurationError
from ..utils.validators import validate_image

logger = get_logger(__name__)


def to_frame_event(results, image: np.ndarray = None, frame_number: int = 0) -> FrameEvent:
    """
    MediaPipe FaceMesh 결과 → FrameEvent

    Args:
        results: face_mesh.process() 결과 (multi_face_landmarks)
        image: 검출에 사용한 BGR 프레임
        frame_number: 프레임 번호

    Returns:
        얼굴 0개 이상을 담은 FrameEvent
    """
    faces = []
    if results is not None and results.multi_face_landmarks:
        for face_landmarks in results.multi_face_landmarks:
            faces.append([
                Landmark(
                    x=lm.x,
                    y=lm.y,
                    z=lm.z,
                    visibility=getattr(lm, 'visibility', 1.0)
                )
                for lm in face_landmarks.landmark
            ])

    return FrameEvent(faces=faces, frame_number=frame_number, image=image)


class FaceMeshLandmarkSource:
    """MediaPipe FaceMesh 래퍼: BGR 프레임 → FrameEvent"""

    def __init__(self, config: DetectionConfig = None):
        """
        초기화

        Args:
            config: 검출 설정 (None이면 config.yaml의 mediapipe.detection)

        Raises:
            ConfigurationError: FaceMesh 초기화 실패
        """
        self.config = config or DetectionConfig.from_config()

        try:
            self.face_mesh = mp.solutions.face_mesh.FaceMesh(
                static_image_mode=self.config.static_image_mode,
                max_num_faces=self.config.max_num_faces,
                refine_landmarks=self.config.refine_landmarks,
                min_detection_confidence=self.config.min_detection_confidence,
                min_tracking_confidence=self.config.min_tracking_confidence
            )
            logger.info("MediaPipe FaceMesh initialized successfully")
        except Exception as e:
            raise ConfigurationError(f"Failed to initialize MediaPipe FaceMesh: {e}")

    def detect(self, image: np.ndarray, frame_number: int = 0) -> FrameEvent:
        """
        프레임에서 얼굴 랜드마크 검출

        Args:
            image: BGR 형식 이미지 (H, W, 3)
            frame_number: 프레임 번호

        Returns:
            FrameEvent (얼굴이 없으면 faces가 빈 리스트)
        """
        validate_image(image)

        # BGR → RGB 변환 (MediaPipe 요구사항)
        image_rgb = cv2.cvtColor(image, cv2.COLOR_BGR2RGB)
        results = self.face_mesh.process(image_rgb)

        event = to_frame_event(results, image, frame_number)
        if not event.faces:
            logger.debug("No face detected")
        return event

    def release(self):
        """리소스 해제"""
        if getattr(self, 'face_mesh', None) is not None:
            self.face_mesh.close()
            self.face_mesh = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.release()
