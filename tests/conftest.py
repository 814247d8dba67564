import time
from typing import Dict, Tuple

import numpy as np
import pytest

from ar_tryon.config.constants import FEATURE_INDEX_GROUPS, LANDMARK_COUNT
from ar_tryon.models import FrameEvent, Landmark, ProductAsset


def make_landmarks(points: Dict[int, Tuple[float, float, float]] = None, count: int = LANDMARK_COUNT):
    """기본 (0.5, 0.5, 0.0) 얼굴에 지정 인덱스만 덮어쓴 LandmarkSet"""
    landmarks = [Landmark(0.5, 0.5, 0.0) for _ in range(count)]
    for index, (x, y, z) in (points or {}).items():
        landmarks[index] = Landmark(x, y, z)
    return landmarks


def make_face(left_eye=(0.3, 0.5), right_eye=(0.7, 0.5), forehead_x=(0.4, 0.6), forehead_y=0.3):
    """눈 그룹은 한 점에 모으고, 이마 그룹은 x 범위에 고르게 분포"""
    glasses = FEATURE_INDEX_GROUPS['glasses']
    hat = FEATURE_INDEX_GROUPS['hat']
    points = {}

    # 중복된 10번이 평균을 치우치지 않도록 가운데에 배치
    forehead = [i for i in dict.fromkeys(hat['FOREHEAD']) if i != 10]
    forehead.insert(len(forehead) // 2, 10)
    left, right = forehead_x
    for i, index in enumerate(forehead):
        x = left + (right - left) * i / (len(forehead) - 1)
        points[index] = (x, forehead_y, 0.0)

    for index in glasses['LEFT_EYE']:
        points[index] = (left_eye[0], left_eye[1], 0.0)
    for index in glasses['RIGHT_EYE']:
        points[index] = (right_eye[0], right_eye[1], 0.0)

    return make_landmarks(points)


def make_asset(product_id: str = "glasses1", width: int = 100, height: int = 50, bgra=(0, 0, 255, 255)):
    image = np.zeros((height, width, 4), dtype=np.uint8)
    image[:, :] = bgra
    return ProductAsset(product_id, image)


def wait_until(predicate, timeout: float = 2.0, interval: float = 0.01) -> bool:
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(interval)
    return predicate()


class RecordingSurface:
    """그리기 호출만 기록하는 surface"""

    def __init__(self, width: int = 640, height: int = 480):
        self.width = width
        self.height = height
        self.calls = []

    def clear_rect(self, x, y, w, h):
        self.calls.append(('clear_rect', x, y, w, h))

    def save(self):
        self.calls.append(('save',))

    def restore(self):
        self.calls.append(('restore',))

    def translate(self, tx, ty):
        self.calls.append(('translate', tx, ty))

    def rotate(self, angle):
        self.calls.append(('rotate', angle))

    def draw_image(self, image, x, y, w, h):
        self.calls.append(('draw_image', x, y, w, h))

    def names(self):
        return [call[0] for call in self.calls]


@pytest.fixture
def face():
    return make_face()


@pytest.fixture
def face_event(face):
    return FrameEvent(faces=[face], frame_number=1)


@pytest.fixture
def glasses_asset():
    return make_asset("glasses1", 100, 50)


@pytest.fixture
def surface():
    return RecordingSurface()
