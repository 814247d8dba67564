"""
상품군별 배치 계산

LandmarkSet + AdjustmentState + 상품 이미지 크기 → Placement
"""

import math
from typing import Callable, Dict, Mapping, Sequence, Tuple

from ..config.constants import (
    FEATURE_INDEX_GROUPS,
    GLASSES_WIDTH_FACTOR,
    HAT_VERTICAL_BIAS,
    HAT_WIDTH_FACTOR,
)
from ..models import AdjustmentState, FeatureSummary, LandmarkSet, Placement, ProductFamily
from ..utils.exceptions import FeatureNotDetected, UnknownProductFamily
from .feature_aggregator import summarize

FeatureTable = Mapping[str, Sequence[int]]


def _require(landmarks: LandmarkSet, table: FeatureTable, group: str) -> FeatureSummary:
    summary = summarize(landmarks, table.get(group))
    if summary is None:
        raise FeatureNotDetected(group)
    return summary


def _scaled_size(base_width: float, asset_size: Tuple[int, int], scale: float) -> Tuple[float, float]:
    """이미지 종횡비를 유지한 (width, height)에 scale 적용"""
    asset_width, asset_height = asset_size
    base_height = base_width * (asset_height / asset_width)
    return base_width * scale, base_height * scale


def place_glasses(
    landmarks: LandmarkSet,
    adjustments: AdjustmentState,
    asset_size: Tuple[int, int],
    table: FeatureTable
) -> Placement:
    """
    안경 배치: 두 눈 중심점 기준

    roll은 눈-눈 벡터로만 추정 (yaw/pitch 미반영)
    """
    left_eye = _require(landmarks, table, 'LEFT_EYE').position
    right_eye = _require(landmarks, table, 'RIGHT_EYE').position

    dx = right_eye.x - left_eye.x
    dy = right_eye.y - left_eye.y
    eye_distance = math.hypot(dx, dy)

    angle = math.atan2(dy, dx) + adjustments.rotation * math.pi / 180
    width, height = _scaled_size(eye_distance * GLASSES_WIDTH_FACTOR, asset_size, adjustments.scale)

    return Placement(
        center_x=(left_eye.x + right_eye.x) / 2,
        center_y=(left_eye.y + right_eye.y) / 2,
        angle=angle,
        width=width,
        height=height,
        y_offset_percent=adjustments.y_offset,
    )


def place_hat(
    landmarks: LandmarkSet,
    adjustments: AdjustmentState,
    asset_size: Tuple[int, int],
    table: FeatureTable
) -> Placement:
    """모자 배치: 이마 중심 위쪽, 머리 기울기 보정 없음"""
    forehead = _require(landmarks, table, 'FOREHEAD')
    _require(landmarks, table, 'TOP_HEAD')

    width, height = _scaled_size(forehead.size.width * HAT_WIDTH_FACTOR, asset_size, adjustments.scale)

    return Placement(
        center_x=forehead.position.x,
        center_y=forehead.position.y - HAT_VERTICAL_BIAS,
        angle=adjustments.rotation * math.pi / 180,
        width=width,
        height=height,
        y_offset_percent=adjustments.y_offset,
    )


PlacementCalculator = Callable[[LandmarkSet, AdjustmentState, Tuple[int, int], FeatureTable], Placement]

CALCULATORS: Dict[ProductFamily, PlacementCalculator] = {
    ProductFamily.GLASSES: place_glasses,
    ProductFamily.HAT: place_hat,
}


def compute_placement(
    family,
    landmarks: LandmarkSet,
    adjustments: AdjustmentState,
    asset_size: Tuple[int, int],
    feature_tables: Mapping[str, FeatureTable] = FEATURE_INDEX_GROUPS
) -> Placement:
    """
    상품군에 맞는 배치 계산

    Args:
        family: ProductFamily 또는 상품군 문자열 ('glasses', 'hat')
        landmarks: 첫 번째 얼굴의 랜드마크
        adjustments: 사용자 조정값 (scale, y_offset, rotation)
        asset_size: 상품 이미지 (width, height) 픽셀
        feature_tables: 상품군별 FeatureIndexGroup 테이블

    Returns:
        Placement

    Raises:
        UnknownProductFamily: 지원하지 않는 상품군
        FeatureNotDetected: 필수 feature 그룹 미검출
    """
    family = ProductFamily.parse(family)
    calculator = CALCULATORS.get(family)
    table = feature_tables.get(family.value)
    if calculator is None or table is None:
        raise UnknownProductFamily(family.value)

    if asset_size[0] <= 0 or asset_size[1] <= 0:
        raise ValueError(f"asset size must be positive, got {asset_size}")

    return calculator(landmarks, adjustments, asset_size, table)
