"""시스템 설정 클래스 정의"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Tuple

from ..utils.config_loader import Config, get_config


@dataclass
class DetectionConfig:
    """얼굴 검출 설정"""

    min_detection_confidence: float = 0.5
    min_tracking_confidence: float = 0.5
    max_num_faces: int = 1
    refine_landmarks: bool = True  # 눈/입 주변 정밀 검출

    # 처리 모드
    static_image_mode: bool = False  # True: 이미지, False: 비디오

    def __post_init__(self):
        """설정 값 검증"""
        if not 0.0 <= self.min_detection_confidence <= 1.0:
            raise ValueError("min_detection_confidence must be between 0 and 1")
        if not 0.0 <= self.min_tracking_confidence <= 1.0:
            raise ValueError("min_tracking_confidence must be between 0 and 1")
        if self.max_num_faces < 1:
            raise ValueError("max_num_faces must be >= 1")

    @classmethod
    def from_config(cls, config: Optional[Config] = None) -> 'DetectionConfig':
        config = config or get_config()
        section = config.get('mediapipe.detection', {}) or {}
        return cls(**section)


@dataclass
class CameraConfig:
    """카메라 캡처 설정"""

    device_id: int = 0
    width: int = 1280
    height: int = 720
    mirror: bool = True  # 셀피 화면처럼 좌우 반전

    def __post_init__(self):
        if self.width <= 0 or self.height <= 0:
            raise ValueError("camera width and height must be positive")

    @classmethod
    def from_config(cls, config: Optional[Config] = None) -> 'CameraConfig':
        config = config or get_config()
        section = config.get('camera', {}) or {}
        return cls(**section)


@dataclass
class AssetConfig:
    """상품 이미지 위치 및 로더 설정"""

    directory: Path = Path("assets/images")
    extension: str = ".png"
    max_workers: int = 4
    retry_interval: float = 1.0  # 로드 실패 후 재시도 최소 간격 (초)
    preload: List[str] = field(default_factory=list)

    def __post_init__(self):
        self.directory = Path(self.directory)
        if not self.extension.startswith('.'):
            self.extension = '.' + self.extension
        if self.max_workers < 1:
            raise ValueError("max_workers must be >= 1")

    def path_for(self, product_id: str) -> Path:
        """상품 ID → 이미지 경로 (예: assets/images/hat1.png)"""
        return self.directory / f"{product_id}{self.extension}"

    @classmethod
    def from_config(cls, config: Optional[Config] = None) -> 'AssetConfig':
        config = config or get_config()
        section = dict(config.get('assets', {}) or {})

        # 상대 경로는 설정 파일 위치 기준 (실행 디렉토리와 무관)
        directory = Path(section.get('directory', cls.directory))
        if not directory.is_absolute():
            section['directory'] = (config.config_path.parent / directory).resolve()
        return cls(**section)


@dataclass
class AdjustmentLimits:
    """조정 슬라이더 범위 및 키 입력 한 번당 변화량"""

    scale: Tuple[float, float] = (0.5, 2.0)
    y_offset: Tuple[float, float] = (-20.0, 20.0)
    rotation: Tuple[float, float] = (-30.0, 30.0)
    scale_step: float = 0.05
    y_offset_step: float = 1.0
    rotation_step: float = 1.0

    def clamp(self, kind: str, value: float) -> float:
        low, high = getattr(self, kind)
        return min(max(value, low), high)

    def step(self, kind: str) -> float:
        return getattr(self, f"{kind}_step")

    @classmethod
    def from_config(cls, config: Optional[Config] = None) -> 'AdjustmentLimits':
        config = config or get_config()
        limits = config.get('adjustments.limits', {}) or {}
        steps = config.get('adjustments.steps', {}) or {}
        kwargs = {kind: tuple(bounds) for kind, bounds in limits.items()}
        kwargs.update({f"{kind}_step": step for kind, step in steps.items()})
        return cls(**kwargs)
