"""데이터 모델 정의"""

import math
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, Tuple

import numpy as np

from ..utils.exceptions import UnknownProductFamily


class ProductFamily(Enum):
    """상품군 (Placement Calculator 분기 기준)"""
    GLASSES = "glasses"
    HAT = "hat"

    @classmethod
    def parse(cls, value, product_id: Optional[str] = None) -> 'ProductFamily':
        """
        문자열/Enum → ProductFamily

        Raises:
            UnknownProductFamily: 지원하지 않는 상품군
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise UnknownProductFamily(value, product_id) from None


class AdjustmentKind(Enum):
    """사용자 조정 항목"""
    SCALE = "scale"
    Y_OFFSET = "y_offset"
    ROTATION = "rotation"


@dataclass
class Landmark:
    """단일 랜드마크 포인트"""

    x: float  # 정규화 x 좌표 (0-1)
    y: float  # 정규화 y 좌표 (0-1)
    z: float  # 깊이 정보 (상대적)
    visibility: float = 1.0

    def to_dict(self) -> Dict[str, Any]:
        return {'x': self.x, 'y': self.y, 'z': self.z, 'visibility': self.visibility}


# 검출된 얼굴 하나의 랜드마크 (468개, 인덱스 순서 고정)
LandmarkSet = Sequence[Landmark]


@dataclass(frozen=True)
class Point3D:
    x: float
    y: float
    z: float = 0.0


@dataclass(frozen=True)
class FeatureSize:
    """축 정렬 bounding box 크기 (정규화 좌표)"""
    width: float
    height: float


@dataclass(frozen=True)
class FeatureSummary:
    """FeatureIndexGroup 요약 (평균 위치 + bounding box 크기)"""

    position: Point3D
    size: FeatureSize


@dataclass
class AdjustmentState:
    """
    사용자 조정값

    프레임 사이에 애플리케이션이 변경하고, 파이프라인은 프레임 시작 시 한 번 읽는다.
    """

    scale: float = 1.0      # > 0
    y_offset: float = 0.0   # 캔버스 높이 대비 %
    rotation: float = 0.0   # 도 단위

    def __post_init__(self):
        if self.scale <= 0:
            raise ValueError(f"scale must be > 0, got {self.scale}")

    def set(self, kind, value: float) -> None:
        """
        조정값 변경

        Args:
            kind: AdjustmentKind 또는 'scale' / 'y_offset' / 'rotation'
            value: 새 값
        """
        kind = AdjustmentKind(kind.value if isinstance(kind, AdjustmentKind) else kind)
        value = float(value)
        if kind is AdjustmentKind.SCALE and value <= 0:
            raise ValueError(f"scale must be > 0, got {value}")
        setattr(self, kind.value, value)

    def reset(self, defaults: Optional[Dict[str, float]] = None) -> None:
        """기본값으로 초기화"""
        defaults = defaults or {}
        self.scale = float(defaults.get('scale', 1.0))
        self.y_offset = float(defaults.get('y_offset', 0.0))
        self.rotation = float(defaults.get('rotation', 0.0))

    @property
    def rotation_radians(self) -> float:
        return self.rotation * math.pi / 180

    def to_dict(self) -> Dict[str, float]:
        return {'scale': self.scale, 'y_offset': self.y_offset, 'rotation': self.rotation}


@dataclass
class ProductSelection:
    """현재 선택된 상품 (None이면 오버레이 없음)"""
    product_id: Optional[str] = None


@dataclass(frozen=True)
class Placement:
    """
    프레임별 2D affine 배치

    center_x/center_y는 정규화 좌표, width/height는 캔버스 너비 단위,
    y_offset_percent는 렌더링 시 픽셀로 변환되는 세로 오프셋(캔버스 높이 %).
    """

    center_x: float
    center_y: float
    angle: float  # radians
    width: float
    height: float
    y_offset_percent: float = 0.0

    def to_pixels(self, surface_width: int, surface_height: int) -> Tuple[float, float, float, float]:
        """
        디바이스 픽셀 좌표로 변환

        Returns:
            (center_x, center_y, width, height) 픽셀 단위
        """
        center_x = self.center_x * surface_width
        center_y = self.center_y * surface_height + self.y_offset_percent * 0.01 * surface_height
        return center_x, center_y, self.width * surface_width, self.height * surface_width


@dataclass(frozen=True)
class ProductAsset:
    """디코딩된 상품 이미지 (BGRA, 읽기 전용)"""

    product_id: str
    image: np.ndarray = field(repr=False, compare=False)

    def __post_init__(self):
        self.image.setflags(write=False)

    @property
    def width(self) -> int:
        return int(self.image.shape[1])

    @property
    def height(self) -> int:
        return int(self.image.shape[0])

    @property
    def size(self) -> Tuple[int, int]:
        return self.width, self.height


@dataclass(frozen=True)
class CatalogEntry:
    """상품 ID → 상품군 매핑 (family는 설정 문자열 그대로 보관)"""
    product_id: str
    family: str


@dataclass
class FrameEvent:
    """검출기 프레임 이벤트 (얼굴 0개 이상)"""

    faces: List[LandmarkSet] = field(default_factory=list)
    frame_number: int = 0
    timestamp: float = field(default_factory=time.time)
    image: Optional[np.ndarray] = field(default=None, repr=False)  # 원본 BGR 프레임

    @property
    def first_face(self) -> Optional[LandmarkSet]:
        """첫 번째 얼굴만 사용 (없으면 None)"""
        return self.faces[0] if self.faces else None
